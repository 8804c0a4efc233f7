"""
Zibu - Shared Constants
Default tuning values for the needs simulation.
"""

# Needs Model
NEED_MIN = 0.0
NEED_MAX = 1.0
DECAY_PER_TICK = 0.01  # 1% of full scale
TICK_INTERVAL_MS = 300_000  # 5 minutes of foreground time

# First-run vector (partially depleted on purpose)
DEFAULT_MOOD = 0.5
DEFAULT_HUNGER = 0.04
DEFAULT_CLEAN = 0.5
DEFAULT_REST = 0.1

# Upset latch
UPSET_THRESHOLD = 0.1  # Any channel below this = upset

# Feeding (hold to feed)
FEED_AMOUNT = 0.01
FEED_INTERVAL_MS = 1000

# Cleaning (swipe to wash)
CLEAN_AMOUNT = 0.01
SWIPE_THRESHOLD = 20.0  # Net horizontal displacement

# Playing (shake to play)
SHAKE_AMOUNT = 0.01
SHAKE_THRESHOLD = 2.0  # Acceleration magnitude
SHAKE_REFRACTORY_MS = 500
SENSOR_INTERVAL_MS = 100

# Sleeping (blanket)
REST_AMOUNT = 0.01
REST_INTERVAL_MS = 1000

# Persistence
STORAGE_KEY = "zibu.needs"
DEFAULT_DB_FILENAME = "zibu.db"
