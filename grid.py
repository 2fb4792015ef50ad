import logging
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger("flow_sand")


@dataclass(frozen=True)
class GridSnapshot:
    """Read-only view of the grid for renderers.

    occupied: bool array of shape (rows, columns)
    colors: uint8 array of shape (rows, columns, 3), zero where empty
    """
    occupied: np.ndarray
    colors: np.ndarray

    @property
    def rows(self):
        return self.occupied.shape[0]

    @property
    def columns(self):
        return self.occupied.shape[1]

    def particle_count(self):
        return int(self.occupied.sum())


class Grid:
    """Row-major grid of sand particles; the single store of simulation state."""
    def __init__(self, width, height):
        """Initialize an empty grid of width columns and height rows."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.rows = height
        self.columns = width
        self.cells = [[None for _ in range(self.columns)] for _ in range(self.rows)]
        self._snapshot_cache = None
        self._cache_dirty = True

    def _mark_cache_dirty(self):
        """Mark the cached snapshot as dirty."""
        self._cache_dirty = True

    def snapshot(self):
        """Return a read-only snapshot, rebuilding the cached arrays if needed."""
        if self._cache_dirty or self._snapshot_cache is None:
            occupied = np.zeros((self.rows, self.columns), dtype=bool)
            colors = np.zeros((self.rows, self.columns, 3), dtype=np.uint8)
            for r in range(self.rows):
                for c in range(self.columns):
                    p = self.cells[r][c]
                    if p is not None:
                        occupied[r, c] = True
                        colors[r, c] = p.color
            occupied.flags.writeable = False
            colors.flags.writeable = False
            # Fresh arrays each rebuild, so snapshots already handed out never change
            self._snapshot_cache = GridSnapshot(occupied, colors)
            self._cache_dirty = False
        return self._snapshot_cache

    def is_position_valid(self, row, col):
        """Check if the given row and column are within grid bounds."""
        return 0 <= row < self.rows and 0 <= col < self.columns

    def is_interior_column(self, col):
        """Edge columns are treated as walls for diagonal and sideways moves."""
        return 0 < col < self.columns - 1

    def is_cell_empty(self, row, col):
        """Check if the cell at the given position is empty. Outside the grid is never empty."""
        return self.is_position_valid(row, col) and self.cells[row][col] is None

    def get_cell(self, row, column):
        """Get the particle at the specified position, or None."""
        if self.is_position_valid(row, column):
            return self.cells[row][column]
        return None

    def set_cell(self, row, column, particle):
        """Set a particle (or None) at the specified position. Out of bounds is ignored."""
        if self.is_position_valid(row, column):
            self.cells[row][column] = particle
            self._mark_cache_dirty()

    def remove_particle(self, row, col):
        """Remove and return the particle at the specified position."""
        if self.is_position_valid(row, col):
            particle = self.cells[row][col]
            self.cells[row][col] = None
            self._mark_cache_dirty()
            return particle
        return None

    def move_particle(self, row, column, new_row, new_column):
        """Relocate the particle at (row, column); the destination must be empty."""
        if not self.is_cell_empty(new_row, new_column):
            return False
        particle = self.get_cell(row, column)
        if particle is None:
            return False
        self.cells[new_row][new_column] = particle
        self.cells[row][column] = None
        self._mark_cache_dirty()
        return True

    def count_particles(self):
        """Number of occupied cells."""
        return sum(p is not None for row in self.cells for p in row)

    def clear(self):
        """Clear all particles from the grid."""
        self.cells = [[None for _ in range(self.columns)] for _ in range(self.rows)]
        self._mark_cache_dirty()
        logger.debug("Grid cleared (%dx%d)", self.columns, self.rows)
