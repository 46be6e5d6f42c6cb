"""
Data model for mapping attempts and batch runs.

A single attempt yields a MappingResult — either MappingSuccess (mapped
data + raw model output) or MappingFailure (error message + category).
Both variants are frozen: results are terminal and never mutated after
they are returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, TypeAlias, Union

from integration_service.core.constants import (
    API_PREFIX,
    BatchErrorKind,
    MappingErrorType,
    MappingStatus,
)

JSONValue: TypeAlias = Union[
    None, bool, int, float, str, list["JSONValue"], dict[str, "JSONValue"]
]
JSONObject: TypeAlias = dict[str, JSONValue]


# ═══════════════════════════════════════════════════════════
#  MappingRequest
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class MappingRequest:
    """
    Everything the model needs to map one record.

    Args:
        source_data: The record to map (field name → value).
        source_schema: Text description of the source fields/types.
        target_schema: Text description of the target fields/types,
                       usually a JSON object of field → type name.
        mapping_rules: Line-oriented directives ("Map X to Y").
        target_sample_data: Optional example instance of the target shape.
    """

    source_data: dict[str, Any]
    source_schema: str
    target_schema: str
    mapping_rules: str = ""
    target_sample_data: str | None = None


# ═══════════════════════════════════════════════════════════
#  MappingResult
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class MappingSuccess:
    """The model produced a JSON object that was recovered."""

    status: ClassVar[MappingStatus] = MappingStatus.SUCCESS

    mapping_id: str
    mapped_data: JSONObject
    transformation_details: str
    processed_at: datetime
    execution_time_ms: int

    @property
    def succeeded(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the API response shape."""
        return {
            "mapping_id": self.mapping_id,
            "status": self.status,
            "mapped_data": self.mapped_data,
            "transformation_details": self.transformation_details,
            "processed_at": self.processed_at.isoformat(),
            "execution_time_ms": self.execution_time_ms,
        }


@dataclass(frozen=True)
class MappingFailure:
    """Some step of the attempt failed; `error_message` says which and why."""

    status: ClassVar[MappingStatus] = MappingStatus.FAILED

    mapping_id: str
    error_message: str
    error_type: MappingErrorType
    processed_at: datetime
    execution_time_ms: int

    @property
    def succeeded(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the API response shape."""
        return {
            "mapping_id": self.mapping_id,
            "status": self.status,
            "error_message": self.error_message,
            "error_type": self.error_type,
            "processed_at": self.processed_at.isoformat(),
            "execution_time_ms": self.execution_time_ms,
        }


MappingResult: TypeAlias = Union[MappingSuccess, MappingFailure]


# ═══════════════════════════════════════════════════════════
#  Batch
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RowError:
    """A failed batch row, keyed by its position in the input."""

    row_index: int
    error: str
    error_type: BatchErrorKind

    def to_dict(self) -> dict[str, Any]:
        return {
            "row_index": self.row_index,
            "error": self.error,
            "error_type": self.error_type,
        }


def batch_download_url(batch_id: str) -> str:
    """Caller-visible download location for a batch's results."""
    return f"{API_PREFIX}/batch/{batch_id}/download"


@dataclass(frozen=True)
class BatchResult:
    """
    Aggregate outcome of mapping every row of a file.

    `errors` is None (not an empty list) when every row succeeded.
    """

    batch_id: str
    file_name: str
    total_rows_processed: int
    successful_mappings: int
    failed_mappings: int
    processing_time_ms: int
    processed_at: datetime
    mapped_data: list[JSONObject] = field(default_factory=list)
    errors: list[RowError] | None = None

    @property
    def download_url(self) -> str:
        return batch_download_url(self.batch_id)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the API response shape."""
        return {
            "batch_id": self.batch_id,
            "file_name": self.file_name,
            "total_rows_processed": self.total_rows_processed,
            "successful_mappings": self.successful_mappings,
            "failed_mappings": self.failed_mappings,
            "mapped_data": self.mapped_data,
            "errors": [e.to_dict() for e in self.errors] if self.errors else None,
            "processing_time_ms": self.processing_time_ms,
            "processed_at": self.processed_at.isoformat(),
            "download_url": self.download_url,
        }
