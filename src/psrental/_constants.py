"""Internal constants shared across the library."""

# ------------------------------------------------------------------
# Persisted document keys
# ------------------------------------------------------------------

ROOMS_KEY = "psRooms"
HISTORY_KEY = "rentalHistory"

# ------------------------------------------------------------------
# Default layout
# ------------------------------------------------------------------

DEFAULT_ROOM_COUNT = 8
DEFAULT_UNITS_PER_ROOM = 3

# ------------------------------------------------------------------
# Display
# ------------------------------------------------------------------

EXPIRED = "Expired"
DEFAULT_CLOCK_FORMAT = "%H:%M:%S"
#: Seconds between re-renders of the active-rentals view.
DEFAULT_REFRESH_INTERVAL: float = 60.0
