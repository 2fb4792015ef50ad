import argparse
import logging
import os
import time
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import pygame

from brush import SAND, SHOVEL, Pointer
from color_policy import hex_to_rgb, hsl_to_rgb
from constants import (
    GRID_WIDTH, GRID_HEIGHT, WINDOW_SCALE, FPS, TOOLBAR_HEIGHT, THEME_COLOR,
    PLAYFIELD_BG_COLOR, BUTTON_COLOR, BUTTON_ACTIVE_COLOR, TEXT_COLOR,
    EXPORT_FILENAME, SWATCH_COLORS, RAINBOW_SATURATION, RAINBOW_LIGHTNESS,
)
from logging_config import setup_logging
from simulation import Simulation

logger = logging.getLogger("flow_sand")

BUTTON_WIDTH = 64
BUTTON_HEIGHT = 22
SWATCH_SIZE = 22
TOOLBAR_GAP = 6
MIN_WINDOW_WIDTH = 4 * BUTTON_WIDTH + 5 * TOOLBAR_GAP


@dataclass
class ToolbarButton:
    kind: str  # "mode", "swatch" or "action"
    value: object
    rect: pygame.Rect
    label: str = ""


def build_toolbar(top):
    """Lay out the mode, action and swatch buttons below the playfield."""
    buttons = []
    x = TOOLBAR_GAP
    row_y = top + TOOLBAR_GAP
    for kind, value, label in (("mode", SAND, "Sand"), ("mode", SHOVEL, "Shovel"),
                               ("action", "clear", "Clear"), ("action", "save", "Save")):
        buttons.append(ToolbarButton(kind, value, pygame.Rect(x, row_y, BUTTON_WIDTH, BUTTON_HEIGHT), label))
        x += BUTTON_WIDTH + TOOLBAR_GAP

    x = TOOLBAR_GAP
    row_y += BUTTON_HEIGHT + TOOLBAR_GAP
    # None is the rainbow swatch
    for color in [None] + [hex_to_rgb(c) for c in SWATCH_COLORS]:
        buttons.append(ToolbarButton("swatch", color, pygame.Rect(x, row_y, SWATCH_SIZE, SWATCH_SIZE)))
        x += SWATCH_SIZE + TOOLBAR_GAP
    return buttons


def hit_test(buttons, pos):
    """Return the toolbar button under pos, if any."""
    for button in buttons:
        if button.rect.collidepoint(pos):
            return button
    return None


def draw_snapshot(surface, snapshot, background=PLAYFIELD_BG_COLOR):
    """Paint a grid snapshot onto surface, scaled to fill it."""
    rgb = np.where(snapshot.occupied[..., None], snapshot.colors,
                   np.array(background, dtype=np.uint8))
    # surfarray expects (width, height, 3)
    cells = pygame.surfarray.make_surface(np.ascontiguousarray(rgb.transpose(1, 0, 2)))
    if cells.get_size() != surface.get_size():
        cells = pygame.transform.scale(cells, surface.get_size())
    surface.blit(cells, (0, 0))


def next_export_path(directory=".", filename=EXPORT_FILENAME):
    """Export path that does not overwrite an earlier image."""
    path = os.path.join(directory, filename)
    if not os.path.exists(path):
        return path
    stem, ext = os.path.splitext(filename)
    return os.path.join(directory, f"{stem}-{time.strftime('%Y%m%d-%H%M%S')}{ext}")


def export_png(surface, path):
    """Save surface as a PNG. Failures are logged and reported as False."""
    try:
        pygame.image.save(surface, path)
    except (pygame.error, OSError):
        logger.exception("Saving image to %s failed", path)
        return False
    logger.info("Saved image to %s", path)
    return True


class SandToy:
    """Window, input and drawing around one Simulation."""
    def __init__(self, simulation: Simulation, scale: int = WINDOW_SCALE, fps: int = FPS,
                 export_dir: str = "."):
        self.simulation = simulation
        self.scale = scale
        self.fps = fps
        self.export_dir = export_dir
        grid = simulation.grid
        self.playfield_rect = pygame.Rect(0, 0, grid.columns * scale, grid.rows * scale)
        self.window_size = (max(self.playfield_rect.width, MIN_WINDOW_WIDTH),
                            self.playfield_rect.height + TOOLBAR_HEIGHT)
        self.toolbar = build_toolbar(self.playfield_rect.height)
        self.pointer = Pointer(viewport_width=self.playfield_rect.width,
                               viewport_height=self.playfield_rect.height)
        self.active_swatch: Optional[Tuple[int, int, int]] = None
        self.show_hint = True
        self.running = False
        self.window = None
        self.font = None

    # Input

    def press(self, pos):
        """Pointer went down at window position pos."""
        button = hit_test(self.toolbar, pos)
        if button is not None:
            self.handle_toolbar(button)
            return
        if self.playfield_rect.collidepoint(pos):
            self.pointer.active = True
            self.move(pos)
            self.show_hint = False

    def move(self, pos):
        if not self.pointer.active:
            return
        # Positions past the playfield edge are passed on; the brush clips them
        self.pointer.x = pos[0] - self.playfield_rect.x
        self.pointer.y = pos[1] - self.playfield_rect.y

    def release(self):
        self.pointer.active = False

    def handle_toolbar(self, button):
        if button.kind == "mode":
            self.pointer.mode = button.value
            logger.debug("Mode: %s", button.value)
        elif button.kind == "swatch":
            self.active_swatch = button.value
            self.simulation.set_color_mode(button.value)
        elif button.value == "clear":
            self.simulation.restart()
            logger.info("Cleared the sand")
        elif button.value == "save":
            self.save_image()

    def handle_key(self, key):
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_s:
            self.pointer.mode = SAND
        elif key == pygame.K_e:
            self.pointer.mode = SHOVEL
        elif key == pygame.K_c:
            self.simulation.restart()
            logger.info("Cleared the sand")
        elif key == pygame.K_p:
            self.save_image()
        elif key == pygame.K_0:
            self.active_swatch = None
            self.simulation.set_color_mode(None)
        elif pygame.K_1 <= key <= pygame.K_9:
            index = key - pygame.K_1
            if index < len(SWATCH_COLORS):
                self.active_swatch = hex_to_rgb(SWATCH_COLORS[index])
                self.simulation.set_color_mode(self.active_swatch)

    def handle_event(self, event):
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN:
            self.handle_key(event.key)
        elif getattr(event, "touch", False):
            # pygame mirrors touches as mouse events; the FINGER events below handle them
            return
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.press(event.pos)
        elif event.type == pygame.MOUSEMOTION:
            self.move(event.pos)
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.release()
        elif event.type in (pygame.FINGERDOWN, pygame.FINGERMOTION, pygame.FINGERUP):
            # Touch coordinates are normalized to the window
            pos = (int(event.x * self.window_size[0]), int(event.y * self.window_size[1]))
            if event.type == pygame.FINGERDOWN:
                self.press(pos)
            elif event.type == pygame.FINGERMOTION:
                self.move(pos)
            else:
                self.release()

    # Output

    def save_image(self):
        if self.window is None:
            return False
        playfield = self.window.subsurface(self.playfield_rect)
        return export_png(playfield, next_export_path(self.export_dir))

    def is_button_active(self, button):
        if button.kind == "mode":
            return button.value == self.pointer.mode
        if button.kind == "swatch":
            return button.value == self.active_swatch
        return False

    def draw_button(self, button):
        rect = button.rect
        if button.kind == "swatch":
            if button.value is None:
                for i in range(rect.width):
                    color = hsl_to_rgb(360 * i / rect.width, RAINBOW_SATURATION, RAINBOW_LIGHTNESS)
                    pygame.draw.line(self.window, color, (rect.x + i, rect.y), (rect.x + i, rect.bottom - 1))
            else:
                pygame.draw.rect(self.window, button.value, rect)
            if self.is_button_active(button):
                pygame.draw.rect(self.window, TEXT_COLOR, rect.inflate(4, 4), 2)
            return
        color = BUTTON_ACTIVE_COLOR if self.is_button_active(button) else BUTTON_COLOR
        pygame.draw.rect(self.window, color, rect, border_radius=4)
        text = self.font.render(button.label, True, TEXT_COLOR)
        self.window.blit(text, text.get_rect(center=rect.center))

    def draw(self):
        self.window.fill(THEME_COLOR)
        playfield = self.window.subsurface(self.playfield_rect)
        draw_snapshot(playfield, self.simulation.snapshot())
        for button in self.toolbar:
            self.draw_button(button)
        if self.show_hint:
            hint = self.font.render("Click and drag to pour sand", True, TEXT_COLOR)
            self.window.blit(hint, hint.get_rect(center=self.playfield_rect.center))

    def run(self):
        pygame.init()
        self.window = pygame.display.set_mode(self.window_size)
        pygame.display.set_caption("Flow Sand")
        self.font = pygame.font.SysFont(None, 22)
        clock = pygame.time.Clock()
        logger.info("Flow Sand started: %dx%d grid, scale %d",
                    self.simulation.grid.columns, self.simulation.grid.rows, self.scale)

        self.running = True
        while self.running:
            for event in pygame.event.get():
                self.handle_event(event)
            self.simulation.tick(self.pointer)
            self.draw()
            pygame.display.flip()
            clock.tick(self.fps)

        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Falling sand toy")
    p.add_argument("--width", type=int, default=GRID_WIDTH, help="Grid width in cells")
    p.add_argument("--height", type=int, default=GRID_HEIGHT, help="Grid height in cells")
    p.add_argument("--scale", type=int, default=WINDOW_SCALE, help="Screen pixels per cell")
    p.add_argument("--fps", type=int, default=FPS, help="Frame rate cap")
    p.add_argument("--seed", type=int, default=None, help="Random seed")
    p.add_argument("--export-dir", default=".", help="Where saved images go")
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    p.add_argument("--log-file", default=None, help="Also write logs to this file")
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)
    simulation = Simulation(args.width, args.height, seed=args.seed)
    SandToy(simulation, scale=args.scale, fps=args.fps, export_dir=args.export_dir).run()


if __name__ == "__main__":
    main()
