# --- Display ---
WIDTH = 960
HEIGHT = 540
FPS = 60
GROUND_BAND = 80            # ground line = viewport height - GROUND_BAND

# --- World / Physics (per tick, no dt scaling) ---
SCROLL_SPEED = 6.0          # world shift per tick (px)
GRAVITY = 0.7               # gravity magnitude, sign = direction
JUMP_POWER = -14.0          # negative = upward impulse
SHIP_CLIMB_FACTOR = 0.7     # ship climbs at -scroll_speed * factor while held
OOB_MARGIN = 80             # leaving the playfield by this much ends the run

# --- Player ---
PLAYER_X = 150              # player's fixed x (world scrolls left)
PLAYER_W = 40
PLAYER_H = 40
PLAYER_START_Y = 0.0

# --- Level ---
LEVEL_END_X = 3800
# (x, w, h)
OBSTACLE_LAYOUT = (
    (800, 50, 100),
    (1200, 50, 140),
    (1600, 50, 110),
    (2000, 50, 160),
    (2600, 60, 120),
    (3300, 50, 100),
)
# (x, mode name)
PORTAL_LAYOUT = (
    (1000, "ship"),
    (2200, "ball"),
    (3000, "ufo"),
    (3600, "cube"),  # back to cube
)

# --- Evenly spaced regeneration ---
EVEN_START_X = 800
EVEN_SPACING = 400
EVEN_OBSTACLE_W = 50
EVEN_HEIGHTS = (100, 140, 110, 160, 120)
# single-mode course: a cube jump peaks ~133 px
CLASSIC_HEIGHTS = (100, 80, 100, 60, 90)

# --- Portals ---
PORTAL_RADIUS = 20
PORTAL_LIFT = 20            # portal centre sits this far above the ground line

# --- Colors (RGB) ---
COLOR_BG = (12, 12, 20)
COLOR_GROUND = (34, 34, 34)
COLOR_OBSTACLE = (255, 51, 102)
COLOR_FG = (255, 255, 255)
COLOR_HUD = (160, 180, 210)
COLOR_BUTTON = (40, 60, 90)
COLOR_BUTTON_EDGE = (90, 130, 180)
MODE_COLORS = {
    "cube": (0, 204, 255),
    "ship": (255, 153, 0),
    "ball": (51, 255, 102),
    "ufo": (204, 51, 255),
}

# --- Debug ---
DEBUG_STATE_LOGS = False
