"""Shared constants and enums used across the application."""

from enum import StrEnum


SERVICE_NAME = "integration-service"
SERVICE_VERSION = "0.1.0"
API_PREFIX = "/api/integration"


class MappingStatus(StrEnum):
    """Outcome of a single mapping attempt."""

    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class MappingErrorType(StrEnum):
    """Failure category recorded on a failed mapping attempt."""

    ENCODING_ERROR = "ENCODING_ERROR"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    PARSE_ERROR = "PARSE_ERROR"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


class BatchErrorKind(StrEnum):
    """How a failed batch row is classified."""

    MAPPING_ERROR = "MAPPING_ERROR"
    JSON_PARSE_ERROR = "JSON_PARSE_ERROR"
    PROCESSING_ERROR = "PROCESSING_ERROR"


class ExportFormat(StrEnum):
    """Download formats for batch results."""

    JSON = "json"
    CSV = "csv"
