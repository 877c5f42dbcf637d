"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "Asia/Kolkata"
DEFAULT_ATTENDANCE_WINDOW_MINUTES = 15
DEFAULT_STARTING_SOON_MINUTES = 5

EARTH_RADIUS_METERS = 6378137.0

