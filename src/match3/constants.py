GRID_X_DIM = 8
GRID_Y_DIM = 8
MIN_GRID_DIM = 3

# Presentation pacing in seconds per settle step.
FILL_TIME = 0.1

# Number of ColorType values drawn for refills (ANY is never drawn).
NUM_COLORS = 6

# Match sizes that promote the match into a special tile.
LINE_CLEAR_MATCH_SIZE = 4
RAINBOW_MATCH_SIZE = 5
MIN_MATCH_SIZE = 3

# Loop guards for settling and cascading.
MAX_CASCADE_ROUNDS = 500
MAX_SETTLE_STEPS = 10_000
