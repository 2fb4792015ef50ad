import random

from color_policy import validate_color
from constants import SLIDE_LEFT_PROBABILITY, AVALANCHE_PROBABILITY

class SandParticle:
	"""Sand grain with an immutable color and the granular falling rule."""
	__slots__ = ("_color",)

	def __init__(self, color):
		"""Initialize particle color."""
		self._color = validate_color(color)

	@property
	def color(self):
		return self._color

	def __repr__(self):
		return f"SandParticle(color={self._color})"

	def update(self, grid, row, column, rng=random):
		"""Attempt to move down, then down-left or down-right, then sideways, else stay.

		Returns the (row, column) the particle should occupy after this tick.
		"""
		below = row + 1
		if below >= grid.rows:
			return row, column

		if grid.is_cell_empty(below, column):
			return below, column

		# Edge columns count as solid for anything but a straight fall
		left, right = column - 1, column + 1
		slide_left = grid.is_interior_column(left) and grid.is_cell_empty(below, left)
		slide_right = grid.is_interior_column(right) and grid.is_cell_empty(below, right)
		if slide_left or slide_right:
			return below, choose_side(rng, column, slide_left, slide_right)

		return row, avalanche_column(grid, row, column, rng)

def choose_side(rng, column, can_left, can_right):
	"""Flip a coin for left or right, falling back to whichever side is open."""
	prefer_left = rng.random() < SLIDE_LEFT_PROBABILITY
	if prefer_left and can_left:
		return column - 1
	if not prefer_left and can_right:
		return column + 1
	return column - 1 if can_left else column + 1

def avalanche_column(grid, row, column, rng=random):
	"""Column a settled particle relaxes into, or its own column if it stays.

	A side qualifies only when both the neighbour and the cell below it are
	empty, so grains slide off peaks but never step across into a trench.
	"""
	below = row + 1
	left, right = column - 1, column + 1
	can_left = (grid.is_interior_column(left)
		and grid.is_cell_empty(row, left)
		and grid.is_cell_empty(below, left))
	can_right = (grid.is_interior_column(right)
		and grid.is_cell_empty(row, right)
		and grid.is_cell_empty(below, right))
	if (can_left or can_right) and rng.random() < AVALANCHE_PROBABILITY:
		return choose_side(rng, column, can_left, can_right)
	return column
