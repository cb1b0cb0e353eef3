"""
Genetic Snake Configuration
All tunable parameters for the snake evolution.
"""

# ─── Grid ─────────────────────────────────────────────────────────────────────
GRID_WIDTH  = 40     # cells east-west
GRID_HEIGHT = 40     # cells north-south

# ─── Population ───────────────────────────────────────────────────────────────
POPULATION       = 1000   # snakes per generation
MAX_GENERATIONS  = 2000   # how many generations to run
MUTATION_RATE    = 0.05   # probability a single weight/bias is perturbed
MUTATION_DIVISOR = 5.0    # gaussian sample is divided by this before adding
MATING_PERCENT   = 1      # top % of the remaining population kept as mates
WORKERS          = 1      # >1 runs the survival pass on a thread pool

# ─── Snakes ───────────────────────────────────────────────────────────────────
# "forward_only"  – 6 inputs, can only go forward / turn left / turn right
# "full_movement" – 24 inputs, moves up / down / left / right
SPECIES    = "full_movement"
ACTIVATION = "relu"      # "relu", "elu" or "sigmoid"

HATCHLING_LENGTH       = 4    # segments, head included
HATCHLING_SPAWN_MARGIN = 4    # free cells kept ahead of a new hatchling
MIN_GRID_SIZE          = HATCHLING_LENGTH + HATCHLING_SPAWN_MARGIN

MOVE_TIMEOUT_INITIAL   = 200  # moves allowed without finding food
MOVE_TIMEOUT_INCREMENT = 50   # extra moves granted per food eaten
MOVE_TIMEOUT_LIMIT     = 500  # cap on the above

# ─── Fitness ──────────────────────────────────────────────────────────────────
FITNESS_AWAY_PENALTY = 1.5    # multiplier on moves that went away from food
FITNESS_FOOD_REWARD  = 10     # per food eaten

# ─── Brains (inputs, outputs, hidden layer sizes) ─────────────────────────────
TOPOLOGIES = {
    "forward_only":  (6,  3, (6, 8)),
    "full_movement": (24, 4, (16, 20)),
}

# ─── Output / Logging ─────────────────────────────────────────────────────────
SAVE_DIR          = "output"   # directory for replays, charts and the CSV log
SNAPSHOT_INTERVAL = 50         # save a replay of the best snake every N generations
SAVE_ANIMATION    = True       # also write an animated GIF with each replay
LOG_CSV           = True       # write per-generation CSV log
