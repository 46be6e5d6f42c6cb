"""
Domain-specific exception hierarchy for the mapping service.

All mapping exceptions inherit from MappingServiceError so callers can
catch broadly or narrowly as needed.  Each exception carries structured
context (mapping ID, step name, details) for logging/debugging, plus the
failure category recorded on a FAILED MappingResult.
"""

from __future__ import annotations

from integration_service.core.constants import MappingErrorType


class MappingServiceError(Exception):
    """Base exception for all mapping errors."""

    error_type: MappingErrorType = MappingErrorType.UNEXPECTED_ERROR

    def __init__(
        self,
        message: str,
        *,
        mapping_id: str | None = None,
        step_name: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.mapping_id = mapping_id
        self.step_name = step_name
        self.details = details or {}
        super().__init__(message)


class PromptEncodingError(MappingServiceError):
    """Source data could not be serialised into the prompt."""

    error_type = MappingErrorType.ENCODING_ERROR


class GenerationUnavailableError(MappingServiceError):
    """The generation endpoint is unreachable, timed out or refused the call."""

    error_type = MappingErrorType.TRANSPORT_ERROR

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        model: str | None = None,
        status_code: int | None = None,
        **kwargs,
    ) -> None:
        self.url = url
        self.model = model
        self.status_code = status_code
        super().__init__(message, **kwargs)


class InvalidGenerationResponseError(MappingServiceError):
    """The endpoint answered, but not with a usable generation envelope."""

    error_type = MappingErrorType.INVALID_RESPONSE

    def __init__(
        self,
        message: str,
        *,
        response_body: str | None = None,
        **kwargs,
    ) -> None:
        self.response_body = response_body
        super().__init__(message, **kwargs)


class ResponseParseError(MappingServiceError):
    """No JSON object could be recovered from the model's text."""

    error_type = MappingErrorType.PARSE_ERROR


class BatchRowError(MappingServiceError):
    """A batch row failed while being prepared or classified."""

    def __init__(
        self,
        message: str,
        *,
        row_index: int,
        **kwargs,
    ) -> None:
        self.row_index = row_index
        super().__init__(message, **kwargs)
