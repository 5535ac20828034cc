# config.py
# =========================
#  SESSION DEFAULTS
# =========================
GRID_SIZE = 25
PATH_DENSITY = 0.18          # tuning knob for scattered noise, not a coverage guarantee
INTERVAL_TIME = 5            # seconds between regenerations
MIN_INTERVAL = 2
MAX_INTERVAL = 10
TICK_HZ = 10

# =========================
#  CARVING PROBABILITIES
# =========================
WALK_CARVE_P = 0.6
WALK_GOAL_BIAS_P = 0.6
WALK_DIVISOR = 8             # walks = size // 8 + randint(0, 2)
WALK_EXTRA_MAX = 2

NOISE_FACTOR = 0.4           # per-cell probability = path_density * NOISE_FACTOR

STRATEGY_P = 0.5

UP_FIRST_CARVE_P = 0.6
UP_FIRST_RANGE = (0.5, 0.7)

DIAGONAL_MIX_P = 0.5
DIAGONAL_CARVE_P = 0.5

ZIGZAG_UP_P = 0.5
ZIGZAG_RUN_EXTRA_MAX = 2     # horizontal run = 1 + randint(0, 2)
ZIGZAG_SIDE_CARVE_P = 0.4
ZIGZAG_FINISH_CARVE_P = 0.5

DEAD_END_DIVISOR = 12        # dead ends = size // 12 + randint(0, 2)
DEAD_END_EXTRA_MAX = 2
DEAD_END_CARVE_P = 0.3
