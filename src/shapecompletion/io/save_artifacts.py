"""
Debug artifact saving for shape completion.

Writes classified grids as PNG images and per-hole metrics as JSON under
<out_dir>/debug/<hole_id>/<stage>/.
"""

import json
import os

import cv2
import numpy as np

from shapecompletion.filler.matrix import FilledHoleElement
from shapecompletion.tracer import get_tracer

# RGB colour per cell class
ELEMENT_COLORS = {
    FilledHoleElement.BLANK: (255, 255, 255),
    FilledHoleElement.STRUCTURE: (0, 0, 0),
    FilledHoleElement.TEXTURE: (160, 160, 160),
}


def ensure_dir(path):
    """Create directory if it does not exist."""
    os.makedirs(path, exist_ok=True)


def get_debug_dir(out_dir, hole_id, stage_name):
    """Debug directory for one stage of one hole, created on demand."""
    debug_dir = os.path.join(out_dir, "debug", hole_id, stage_name)
    ensure_dir(debug_dir)
    return debug_dir


def render_matrix(matrix, scale=1):
    """
    RGB image of a FilledHoleMatrix.

    Each cell becomes a scale x scale block so small holes stay visible.
    """
    rgb = np.zeros((matrix.height, matrix.width, 3), dtype=np.uint8)
    for element, color in ELEMENT_COLORS.items():
        rgb[matrix.elems == element] = color

    if scale > 1 and rgb.size > 0:
        rgb = cv2.resize(
            rgb,
            (matrix.width * scale, matrix.height * scale),
            interpolation=cv2.INTER_NEAREST,
        )
    return rgb


def save_image(img, path):
    """Save an RGB or single-channel image with OpenCV."""
    tracer = get_tracer()

    if len(img.shape) == 3 and img.shape[2] == 3:
        img = cv2.cvtColor(img, cv2.COLOR_RGB2BGR)

    ensure_dir(os.path.dirname(path))
    cv2.imwrite(path, img)
    tracer.event(f"Saved image: {path}")


def save_json(data, path, indent=2):
    """Save a dict or pydantic model as JSON."""
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))

    if hasattr(data, "model_dump"):
        data = data.model_dump()

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, default=str)

    tracer.event(f"Saved JSON: {path}")


class DebugArtifactWriter:
    """Writes debug artifacts for a single hole; a disabled writer does nothing."""

    def __init__(self, out_dir, hole_id, enabled=True, scale=8):
        self.out_dir = out_dir
        self.hole_id = hole_id
        self.enabled = enabled
        self.scale = scale

    @classmethod
    def from_config(cls, config, hole_id):
        return cls(
            config.debug.out_dir,
            hole_id,
            enabled=config.debug.enabled,
            scale=config.debug.scale,
        )

    def get_stage_dir(self, stage_name):
        return get_debug_dir(self.out_dir, self.hole_id, stage_name)

    def save_matrix(self, matrix, stage_name, filename):
        if not self.enabled:
            return
        path = os.path.join(self.get_stage_dir(stage_name), filename)
        save_image(render_matrix(matrix, self.scale), path)

    def save_json(self, data, stage_name, filename):
        if not self.enabled:
            return
        path = os.path.join(self.get_stage_dir(stage_name), filename)
        save_json(data, path)
