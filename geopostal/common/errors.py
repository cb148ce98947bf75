"""Domain errors and failure typing."""


class GeoPostalError(Exception):
    """Base class for dataset and query failures."""

    error_code = "GEOPOSTAL_ERROR"


class ConfigurationError(GeoPostalError):
    """Raised for invalid arguments such as a malformed country filter."""

    error_code = "CONFIGURATION_ERROR"


class ConfigError(ConfigurationError):
    """Raised for invalid or missing YAML configuration."""

    error_code = "CONFIG_ERROR"


class DatasetIOError(GeoPostalError):
    """Raised when the dataset source cannot be opened or read."""

    error_code = "IO_ERROR"


class MalformedRecordError(GeoPostalError):
    """Raised when a dataset line does not have the expected field count."""

    error_code = "MALFORMED_RECORD"


class NumericFormatError(GeoPostalError):
    """Raised when a latitude or longitude field is not a number."""

    error_code = "NUMERIC_FORMAT"

    def __init__(self, value: str, field_name: str) -> None:
        self.value = value
        self.field_name = field_name
        super().__init__(f"error while converting {value} to {field_name}")


class NotFoundError(GeoPostalError):
    """Raised when a postal code is not present in the index."""

    error_code = "NOT_FOUND"

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"postal code not found: {code}")


class MultipleMatchesWarning(UserWarning):
    """Returned alongside lookup results when a code has several locations."""

    error_code = "MULTIPLE_MATCHES"

    def __init__(self, code: str, count: int) -> None:
        self.code = code
        self.count = count
        super().__init__(f"postal code {code} has {count} lat/lon coordinates")
