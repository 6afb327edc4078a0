"""
Configuration management for shape completion.

Settings live in a YAML file; anything the file leaves out keeps the
dataclass default.
"""

import os
from dataclasses import asdict, dataclass, field, fields

import yaml


@dataclass
class HoleFillConfig:
    """Parameters of the boundary walk and curve rasterization."""
    blank_boundary_pixels_threshold: int = 3
    clockwise: bool = True
    quantization_factor: int = 4  # samples per unit of estimated Bezier length


@dataclass
class MatchingConfig:
    """Parameters of the point-set assignment."""
    distance_unit: float = 1.0


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class DebugConfig:
    """Configuration for debug artifact generation."""
    enabled: bool = False
    out_dir: str = "debug"
    scale: int = 8


@dataclass
class ShapeCompletionConfig:
    """Complete configuration."""
    hole_fill: HoleFillConfig = field(default_factory=HoleFillConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)


SECTIONS = [f.name for f in fields(ShapeCompletionConfig)]


def load_config(config_path=None):
    """
    Load configuration from a YAML file.

    A missing path or file yields the defaults. Unknown sections and keys are
    ignored.
    """
    config = ShapeCompletionConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Copy known keys of each YAML section onto the matching dataclass."""
    for section_name in SECTIONS:
        section_data = yaml_data.get(section_name)
        if not isinstance(section_data, dict):
            continue
        section = getattr(config, section_name)
        for key, value in section_data.items():
            if hasattr(section, key):
                setattr(section, key, value)

    return config


def save_default_config(path):
    """Write the default configuration as YAML for reference."""
    yaml_data = asdict(ShapeCompletionConfig())

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
