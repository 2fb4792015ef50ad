import math
import random
from dataclasses import dataclass

from constants import SPAWN_RADIUS, ERASE_RADIUS, SPAWN_EDGE_JITTER
from particle import SandParticle

SAND = "sand"
SHOVEL = "shovel"


@dataclass
class Pointer:
    """Pointer state captured by the frontend, in viewport-relative pixels."""
    x: float = 0.0
    y: float = 0.0
    viewport_width: float = 1.0
    viewport_height: float = 1.0
    mode: str = SAND
    active: bool = False


def viewport_to_grid(px, py, viewport_width, viewport_height, columns, rows):
    """Map a viewport position to a (column, row) grid cell, or None for an empty viewport.

    The result may lie outside the grid; brushes clip per offset.
    """
    if viewport_width <= 0 or viewport_height <= 0:
        return None
    column = math.floor(px / viewport_width * columns)
    row = math.floor(py / viewport_height * rows)
    return column, row


def spawn_at_cell(grid, column, row, color_policy, rng=random, radius=SPAWN_RADIUS):
    """Drop a soft round blob of sand centred on a grid cell.

    Offsets near the rim are kept or skipped by a fresh random draw each, which
    roughens the edge of the brush. Occupied cells are left alone. The rainbow
    hue advances once per call. Returns the number of particles placed.
    """
    placed = 0
    r2 = radius * radius
    for oy in range(-radius, radius + 1):
        for ox in range(-radius, radius + 1):
            target_row = row + oy
            target_column = column + ox
            if not grid.is_position_valid(target_row, target_column):
                continue
            if grid.get_cell(target_row, target_column) is not None:
                continue
            if ox * ox + oy * oy > r2 + rng.random() * SPAWN_EDGE_JITTER:
                continue
            color = color_policy.color_for_cell(rng)
            grid.set_cell(target_row, target_column, SandParticle(color))
            placed += 1
    color_policy.advance()
    return placed


def erase_at_cell(grid, column, row, radius=ERASE_RADIUS):
    """Clear every cell within Euclidean distance radius. Returns how many were occupied."""
    cleared = 0
    r2 = radius * radius
    for oy in range(-radius, radius + 1):
        for ox in range(-radius, radius + 1):
            if ox * ox + oy * oy > r2:
                continue
            if grid.remove_particle(row + oy, column + ox) is not None:
                cleared += 1
    return cleared
