"""
Iterative 4-connected flood fill over BLANK cells.
"""

from shapecompletion.filler.matrix import FilledHoleElement

# 4-connectivity neighborhood offsets (dx, dy)
NEIGHBORS_4 = [(1, 0), (0, 1), (-1, 0), (0, -1)]


def fill_hole_iterative(matrix, seed):
    """
    Turn the BLANK region containing seed into TEXTURE.

    seed may lie outside the grid, in which case nothing happens. An explicit
    stack replaces recursion so region size is not limited by the interpreter.

    Returns the number of cells filled.
    """
    elems = matrix.elems
    blank = FilledHoleElement.BLANK
    filled = 0

    stack = [(seed.x, seed.y)]
    while stack:
        x, y = stack.pop()

        if x < 0 or x >= matrix.width or y < 0 or y >= matrix.height:
            continue

        if elems[y, x] != blank:
            continue

        elems[y, x] = FilledHoleElement.TEXTURE
        filled += 1

        for dx, dy in NEIGHBORS_4:
            stack.append((x + dx, y + dy))

    return filled
