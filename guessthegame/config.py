# guessthegame/config.py
import os

# Rounds
MAX_GUESSES = 5
SCORE_TABLE = (5, 3, 2, 1, 1)  # points for a win on guess 1..5
DIFFICULTY_STEP = 5            # +1 point per this many completed rounds
ZOOM_BONUS_STEP = 10           # extra zoom percent per DIFFICULTY_STEP levels

# Hot streak
HOT_STREAK_THRESHOLD = 3       # consecutive near-perfect wins to activate
HOT_STREAK_MAX_GUESSES = 2     # a win on this guess or earlier counts
HOT_STREAK_MULTIPLIER = 2

# Lifelines
LIFELINE_START = 1

# Shop
SHOP_EVERY = 5                 # streak cadence
SHOP_DISCOUNTED_ITEMS = 2
SHOP_DISCOUNT = 1
ALL_IN_BONUS = 10

# Bonus round
BONUS_MIN_STREAK = 2
BONUS_CHANCE = 0.10
BONUS_CHOICES = 5
BONUS_BASE_POINTS = 2

# Endless scheduler
RATING_THRESHOLD_RANGE = (88, 91)
YEAR_THRESHOLD_RANGE = (2010, 2015)
FRIENDLY_PROBABILITIES = (1.0, 0.9, 0.7, 0.4, 0.3)

# Seeded scheduler (standard mode)
SEEDED_ORDER_SEED = 20250101
SEEDED_FIXED_COUNT = 50

# Consultant
CONSULTANT_WRONG_OPTIONS = 3
CONSULTANT_REAL_OPTIONS = 2

# Redaction
REDACTION_MARKER = "[REDACTED]"

# Persistence keys
STATE_KEY = "guessthegame_endless_state"
HIGH_SCORE_KEY = "guessthegame_endless_highscore"
STATS_KEY = "guessthegame_endless_stats"

# Paths / runtime
_REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
DATA_DIR = os.environ.get("GUESSTHEGAME_DATA_DIR", os.path.join(_REPO_ROOT, "data"))
STATE_DIR = os.environ.get("GUESSTHEGAME_STATE_DIR", ".guessthegame")
LOG_LEVEL = os.environ.get("GUESSTHEGAME_LOG_LEVEL", "INFO")
