"""Application constants."""

EARTH_RADIUS_KM = 6371.0
# Legacy approximation; not the exact km -> mile conversion of EARTH_RADIUS_KM.
EARTH_RADIUS_MI = 3958.0

UNITS = ("km", "mi")
DEFAULT_EARTH_RADII = {"km": EARTH_RADIUS_KM, "mi": EARTH_RADIUS_MI}

# GeoNames postal code export layout (tab-delimited).
FIELD_COUNT = 12
FIELD_COUNTRY_CODE = 0
FIELD_POSTAL_CODE = 1
FIELD_PLACE_NAME = 2
FIELD_ADMIN_NAME1 = 3
FIELD_ADMIN_CODE1 = 4
FIELD_LATITUDE = 9
FIELD_LONGITUDE = 10
FIELD_DELIMITER = "\t"

COMMANDS = (
    "lookup",
    "distance",
    "distance-to-point",
    "radius",
)
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "dataset",
    "country",
    "event",
    "status",
    "duration_ms",
    "rows_out",
    "error_code",
    "message",
)
