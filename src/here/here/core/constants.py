"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

CHECKIN_LEAD_MINUTES = 15
WAVE_LEAD_MINUTES = 5
DEFAULT_GEOFENCE_RADIUS_METERS = 100
DEFAULT_SCHOOL_TIMEZONE = "America/New_York"
DEFAULT_WAVE_CONTENT = "\N{WAVING HAND SIGN}"
DAY_OFF_NOTE = "Day off"
