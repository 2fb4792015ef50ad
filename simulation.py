import logging
import random

from brush import SHOVEL, viewport_to_grid, spawn_at_cell, erase_at_cell
from color_policy import ColorPolicy
from constants import GRID_WIDTH, GRID_HEIGHT, SPAWN_RADIUS, ERASE_RADIUS
from grid import Grid

logger = logging.getLogger("flow_sand")

class Simulation:
    """Owns one sand grid, its color policy and its random source.

    Every update works in place on the live grid: rows are scanned from the
    bottom up and each row starts at a random column and wraps around. A grain
    that moves is immediately visible to the grains scanned after it in the
    same tick. Pass a seed or a random.Random to reproduce a run exactly.
    """
    def __init__(self, width=GRID_WIDTH, height=GRID_HEIGHT, seed=None, rng=None):
        """Initialize simulation with grid dimensions and random source."""
        self.grid = Grid(width, height)
        self.color_policy = ColorPolicy()
        self.rng = rng if rng is not None else random.Random(seed)
        logger.debug("Simulation created (%dx%d, seed=%s)", width, height, seed)

    def update(self):
        """Advance every sand particle by at most one step."""
        grid = self.grid
        rng = self.rng
        columns = grid.columns
        for row in range(grid.rows - 1, -1, -1):
            x_offset = rng.randrange(columns)
            for i in range(columns):
                column = (i + x_offset) % columns
                particle = grid.get_cell(row, column)
                if particle is None:
                    continue
                new_row, new_column = particle.update(grid, row, column, rng)
                if (new_row, new_column) != (row, column):
                    grid.move_particle(row, column, new_row, new_column)

    def tick(self, pointer=None):
        """One frame: apply the pointer's brush if it is pressed, then update."""
        if pointer is not None and pointer.active:
            if pointer.mode == SHOVEL:
                self.erase_sand(pointer.x, pointer.y, pointer.viewport_width, pointer.viewport_height)
            else:
                self.spawn_sand(pointer.x, pointer.y, pointer.viewport_width, pointer.viewport_height)
        self.update()

    def spawn_sand(self, px, py, viewport_width, viewport_height, radius=SPAWN_RADIUS):
        """Spawn sand around a viewport position. Returns the number of particles placed."""
        cell = viewport_to_grid(px, py, viewport_width, viewport_height, self.grid.columns, self.grid.rows)
        if cell is None:
            return 0
        return self.spawn_at_cell(cell[0], cell[1], radius=radius)

    def erase_sand(self, px, py, viewport_width, viewport_height, radius=ERASE_RADIUS):
        """Erase sand around a viewport position. Returns the number of particles removed."""
        cell = viewport_to_grid(px, py, viewport_width, viewport_height, self.grid.columns, self.grid.rows)
        if cell is None:
            return 0
        return self.erase_at_cell(cell[0], cell[1], radius=radius)

    def spawn_at_cell(self, column, row, radius=SPAWN_RADIUS):
        return spawn_at_cell(self.grid, column, row, self.color_policy, self.rng, radius=radius)

    def erase_at_cell(self, column, row, radius=ERASE_RADIUS):
        return erase_at_cell(self.grid, column, row, radius=radius)

    def set_color_mode(self, fixed_color=None):
        """Use one fixed (r, g, b) color for new sand, or None for rainbow."""
        self.color_policy.set_fixed_color(fixed_color)

    def snapshot(self):
        """Read-only view of the grid for drawing."""
        return self.grid.snapshot()

    def particle_count(self):
        return self.grid.count_particles()

    def restart(self):
        """Clear the simulation grid to restart."""
        self.grid.clear()
        logger.debug("Simulation reset")

    reset = restart
