# timeline/constants.py
MINUTES_PER_DAY = 24 * 60

# Shortest block the day view draws; zero-length shifts are stretched to this.
MIN_BLOCK_MINUTES = 15

HOUR_HEIGHT_PX = 64
DAY_HEIGHT_PX = 24 * HOUR_HEIGHT_PX
MIN_BLOCK_HEIGHT_PX = 24

DEFAULT_SHIFT_LABEL = "근무"

SHIFT_RECORD_TYPE = "shift"
