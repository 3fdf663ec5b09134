DOMAIN = "tide_conditions"
DEFAULT_NAME = "Tide Conditions"

# ============================================================================
# CONFIGURATION KEYS
# ============================================================================

CONF_NAME = "name"
CONF_STATION_ID = "station_id"
CONF_TIMEZONE = "timezone"
CONF_API_KEY = "api_key"
CONF_SPOTS = "spots"
CONF_REFRESH_MINUTES = "refresh_minutes"
CONF_INCLUDE_OUTLOOK = "include_outlook"

DEFAULT_STATION_ID = "9413745"  # Santa Cruz Wharf, Monterey Bay
DEFAULT_TIMEZONE = "America/Los_Angeles"
DEFAULT_REFRESH_MINUTES = 30
DEFAULT_REQUEST_TIMEOUT = 15  # seconds, per upstream call

# ============================================================================
# UPSTREAM ENDPOINTS
# ============================================================================

NOAA_API_BASE = "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter"
NOAA_APPLICATION = "tide_conditions"
NOAA_DATUM = "MLLW"
NOAA_INTERVAL_HILO = "hilo"
NOAA_INTERVAL_SIX_MINUTE = "6"
NOAA_TIME_ZONE = "gmt"

SURFLINE_API_BASE = "https://services.surfline.com/kbyg/spots/forecasts"

REQUEST_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "Mozilla/5.0",
}

# ============================================================================
# FETCH WINDOWS
# ============================================================================

HILO_WINDOW_DAYS = 2
CONTINUOUS_WINDOW_HOURS = 1  # on each side of "now"
CHART_WINDOW_HOURS = 24
WEEKLY_WINDOW_DAYS = 7
SURFLINE_TIDE_DAYS = 3

UPCOMING_EVENT_LIMIT = 4
FORECAST_HOURS = 24
CHART_POINTS_PER_HOUR = 2

# ============================================================================
# TIDE STATE POLICY (feet, MLLW)
# ============================================================================

TIDE_HIGH_THRESHOLD = 4.5
TIDE_LOW_THRESHOLD = 1.5

# Tide-pool rating bands: strictly-below upper edges
TIDE_POOL_EXCELLENT_BELOW = -1.0
TIDE_POOL_GOOD_BELOW = 0.5
TIDE_POOL_FAIR_BELOW = 1.5
TIDE_POOL_POOR_BELOW = 3.0
TIDE_POOL_SLIPPERY_BELOW = -1.0
TIDE_POOL_FAIR_WINDOW_BELOW = 1.0

TIDE_POOL_DAYLIGHT_START = 6
TIDE_POOL_DAYLIGHT_END = 20
TIDE_POOL_MORNING_END = 10
TIDE_POOL_EVENING_START = 16

WARNING_POOLS_SUBMERGED = "High tide - pools submerged"
WARNING_SLIPPERY_ROCKS = "Very low tide - watch for slippery rocks"

OUTLOOK_BEST_DAYS = 3

# ============================================================================
# SURF SPOTS
# ============================================================================

# Rule variants (closed set, see surf_rules.py)
RULE_STANDARD = "standard"
RULE_PLEASURE_POINT = "pleasure_point"
RULE_TWENTY_SIXTH_AVE = "twenty_sixth_ave"
RULE_STEAMER_LANE = "steamer_lane"
RULE_CAPITOLA = "capitola"

DEFAULT_CLOSEOUT_HEIGHT = 4.5

SURF_SPOTS = {
    "5842041f4e65fad6a7708807": {
        "name": "Pleasure Point",
        "display_name": "Pleasure Point",
        "optimal_range": (0.5, 3.5),
        "preferred_direction": "rising",
        "description": "Best on low to mid tide rising",
        "rule_variant": RULE_PLEASURE_POINT,
        "closeout_height": 4.5,
    },
    "5842041f4e65fad6a770898a": {
        "name": "26th Avenue",
        "display_name": "26th Ave",
        "optimal_range": (0.5, 3.5),
        "preferred_direction": "rising",
        "description": "Best on low to mid tide rising",
        "rule_variant": RULE_TWENTY_SIXTH_AVE,
        "closeout_height": 4.5,
    },
    "5842041f4e65fad6a7708805": {
        "name": "Steamer Lane",
        "display_name": "Steamer Lane",
        "optimal_range": (1.5, 4.5),
        "preferred_direction": "rising",
        "description": "Handles lower tides, classic on a rising mid tide",
        "rule_variant": RULE_STEAMER_LANE,
        "closeout_height": 5.0,
    },
    "5842041f4e65fad6a7708806": {
        "name": "Capitola",
        "display_name": "Capitola",
        "optimal_range": (2.0, 4.5),
        "preferred_direction": "falling",
        "description": "Needs a medium tide, best on the drop",
        "rule_variant": RULE_CAPITOLA,
        "closeout_height": 4.5,
    },
}

DEFAULT_SPOTS = ["5842041f4e65fad6a7708807", "5842041f4e65fad6a770898a"]

# ============================================================================
# SENSORS
# ============================================================================

SENSOR_TIDE_LEVEL = "tide_level"
SENSOR_TIDE_POOLS = "tide_pools"
SENSOR_SURF_SUFFIX = "surf"

TIDE_SOURCE_SURFLINE = "surfline"
TIDE_SOURCE_NOAA = "noaa"
TIDE_SOURCE_NOAA_HILO = "noaa_hilo"
TIDE_SOURCE_PLACEHOLDER = "placeholder"
