"""Default provider endpoints and display settings."""

OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"
GEOCODING_BASE_URL = "https://api.openweathermap.org/geo/1.0"
ICON_URL_TEMPLATE = "https://openweathermap.org/img/wn/{icon}@2x.png"

API_KEY_ENV_VAR = "OPENWEATHER_API_KEY"
DEFAULT_CONFIG_PATH = "weatherapp.yaml"

# Forecast view shape
HOURLY_COUNT = 5
DAILY_COUNT = 5
DAILY_HEADROOM = 6
FALLBACK_ICON = "01d"  # clear sky
