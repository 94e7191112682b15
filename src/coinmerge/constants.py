GRID_ROWS = 8
GRID_COLS = 8
SQUARE_SIZE = 64
GAP = 4

# Denominations and their spawn probabilities. Weights are normalised at load time,
# so they only need to be proportional.
DEFAULT_VALUES = (1, 5, 10, 25, 50, 100)
DEFAULT_WEIGHTS = (0.35, 0.18, 0.12, 0.06, 0.03, 0.01)
# Jackpot variant appends a gold tile that is collected with a tap.
JACKPOT_VALUES = (1, 5, 10, 25, 50, 100, 500)
JACKPOT_WEIGHTS = (0.35, 0.18, 0.12, 0.06, 0.03, 0.01, 0.005)
JACKPOT_VALUE = 500

MIN_RUN_LENGTH = 2

# Values that may be interleaved within one selection, and the sum that such a mixed
# run resolves to even when the sum is not itself a denomination.
DEFAULT_MIX_GROUPS = (
    (frozenset({5, 10}), 25),
)

# Upper bound on auto-merge passes for one settle; refills are random, so a table
# such as (5,) would otherwise cascade forever.
MAX_CASCADE_PASSES = 64

# ============================================================================
# TIMING (seconds)
# ============================================================================
MERGE_CLEAR_DELAY = 0.22        # manual merge: fade start -> cells cleared
AUTO_MERGE_CLEAR_DELAY = 0.24   # auto merge: fade start -> cells cleared
FADE_DURATION = 0.18
POP_DURATION = 0.30             # 0.18 grow + 0.12 settle
SHAKE_DURATION = 0.28           # 7 half-swings of 0.04
JACKPOT_FADE_DURATION = 0.22
SPAWN_FALL_DURATION = 0.35      # generated tiles, plus up to SPAWN_FALL_JITTER
SPAWN_FALL_JITTER = 0.12
SHIFT_FALL_DURATION = 0.25      # surviving tiles, plus up to SHIFT_FALL_JITTER
SHIFT_FALL_JITTER = 0.20
# Extra time a fall op may overrun before the collapse commits it without animation.
SETTLE_WATCHDOG_GRACE = 0.5

# ============================================================================
# PRESENTATION
# ============================================================================
SHAKE_OFFSET = 8
SPAWN_OFFSET = 40
DEFAULT_FILL = (0x33, 0x33, 0x33)
VALUE_COLORS = {
    1: (0x55, 0x55, 0x55),
    5: (0x3B, 0x82, 0xF6),    # blue
    10: (0x10, 0xB9, 0x81),   # green
    25: (0xF5, 0x9E, 0x0B),   # amber
    50: (0xEF, 0x44, 0x44),   # red
    100: (0x8B, 0x5C, 0xF6),  # purple
    500: (0xFF, 0xD7, 0x00),  # gold
}
