"""Constants for catalog providers."""

VEHICLES_ENDPOINT = "/vehicles"
ADDONS_ENDPOINT = "/addons"
VEHICLE_ID_PARAM = "vehicleId"

DEFAULT_API_URI = "api/v1"
DEFAULT_CACHE_TTL = 5 * 60
DEFAULT_TIMEOUT_SECONDS = 10

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
    "User-Agent": "pyrentalbooking",
}
