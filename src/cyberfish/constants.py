"""
constants.py: Centralized tuning for the simulation and the leaderboard.
"""

# -------- Playfield & Entity --------
ENTITY_X = 50                   # Fixed entity X position (left edge)
ENTITY_SIZE = (40, 30)          # (width, height)
SMALL_ENTITY_SIZE = (30, 22)    # Used on narrow playfields
SMALL_DEVICE_WIDTH = 768        # Playfields narrower than this are "small"

# -------- Physics Config (pixels / frame) --------
# One tick is one rendered frame, so these are frame-rate dependent.
GRAVITY = 0.2                   # Velocity added every playing tick
JUMP_IMPULSE = -6.0             # Velocity set by a jump
JUMP_COOLDOWN = 0.1             # Seconds before another jump is accepted
HOVER_AMPLITUDE = 2.0           # Idle hover (pixels)
HOVER_FREQUENCY = 0.05          # Idle hover (radians per frame)
ACTIVATION_DELAY = 0.3          # Seconds pinned to center after start

# -------- Obstacle Config --------
OBSTACLE_WIDTH = 80
GAP_MARGIN = 50                 # Min distance of the gap from top/bottom

# -------- Difficulty Config --------
INITIAL_SPEED = 2.0
SPEED_STEP = 0.5
SPEED_STEP_SCORE = 5            # +SPEED_STEP every 5 points
INITIAL_SPAWN_INTERVAL = 180    # ticks
SPAWN_INTERVAL_STEP = 10        # ticks removed per speed step
MIN_SPAWN_INTERVAL = 100
INITIAL_GAP = 220.0
GAP_STEP = 10.0
GAP_STEP_SCORE = 10             # +GAP_STEP every 10 points

# -------- Collision Config --------
HITBOX_REDUCTION = 0.2          # Fraction trimmed from the entity hitbox

# -------- Network Config --------
DEFAULT_API_URL = "http://localhost:3000"
NETWORK_TIMEOUT = 5.0           # seconds
DEFAULT_PORT = 3000
DB_FILE = "cyberfish.db"
