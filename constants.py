# Grid
GRID_WIDTH = 160
GRID_HEIGHT = 260

# Brushes
SPAWN_RADIUS = 2
ERASE_RADIUS = 3
SPAWN_EDGE_JITTER = 2.0  # extra squared distance tolerated at the brush rim

# Color policy
HUE_STEP = 1.5  # degrees per spawn pass
HUE_JITTER = 20.0  # degrees, added per spawned cell
RAINBOW_SATURATION = 0.9
RAINBOW_LIGHTNESS = 0.55

# Update rule
SLIDE_LEFT_PROBABILITY = 0.5
AVALANCHE_PROBABILITY = 0.35

# Frontend
WINDOW_SCALE = 3
FPS = 60
TOOLBAR_HEIGHT = 56
THEME_COLOR = (40, 40, 40)
PLAYFIELD_BG_COLOR = (0, 0, 0)
BUTTON_COLOR = (70, 70, 70)
BUTTON_ACTIVE_COLOR = (150, 150, 150)
TEXT_COLOR = (230, 230, 230)
EXPORT_FILENAME = "flow-sand.png"

SWATCH_COLORS = [
    "#f4d35e",
    "#ee964b",
    "#f95738",
    "#e63946",
    "#8338ec",
    "#3a86ff",
    "#06d6a0",
    "#ffffff",
    "#8d99ae",
]
