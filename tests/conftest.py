import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from grid import Grid
from particle import SandParticle
from simulation import Simulation


class ScriptedRandom:
    """Stand-in for random.Random that replays fixed draws."""
    def __init__(self, *values, default=0.0, offset=0):
        self.values = list(values)
        self.default = default
        self.offset = offset
        self.calls = 0
        self.randrange_calls = 0

    def random(self):
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return self.default

    def randrange(self, stop):
        self.randrange_calls += 1
        return self.offset % stop


SAND_COLOR = (194, 178, 128)


def fill(grid, cells, color=SAND_COLOR):
    """Place particles at (row, column) positions."""
    for row, column in cells:
        grid.set_cell(row, column, SandParticle(color))


def positions(grid):
    return {(r, c) for r in range(grid.rows) for c in range(grid.columns)
            if grid.get_cell(r, c) is not None}


@pytest.fixture
def grid():
    return Grid(10, 10)


@pytest.fixture
def simulation():
    return Simulation(10, 10, seed=1234)
