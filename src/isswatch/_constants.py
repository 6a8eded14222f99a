"""Internal constants shared across the library."""

USER_AGENT = "isswatch/1 (+https://wheretheiss.at)"

# NORAD catalog number of the International Space Station.
ISS_NORAD_ID = 25544
POSITION_URL = f"https://api.wheretheiss.at/v1/satellites/{ISS_NORAD_ID}"

EARTH_RADIUS_KM = 6371.0

# ------------------------------------------------------------------
# Store keys
# ------------------------------------------------------------------

OBSERVER_CACHE_KEY = "user_geo_cache_minimal"
POSITION_CACHE_KEY = "iss_pos_cache_minimal"
LAST_ALERT_KEY = "last_notification_time"

# ------------------------------------------------------------------
# Notification
# ------------------------------------------------------------------

ALERT_TITLE = "ISS is Overhead!"
ALERT_PRIORITY = 2
