"""
AI record mapping — prompt → generation → repair, per record and per batch.

This package turns source records into target-schema records by asking a
generation endpoint for the transformation and repairing its free-text
answer into a JSON object.  Batches isolate failures per row.
"""

from integration_service.mapping.batch import BatchMapper
from integration_service.mapping.client import GenerationClient
from integration_service.mapping.mapper import RecordMapper
from integration_service.mapping.models import (
    BatchResult,
    MappingFailure,
    MappingRequest,
    MappingResult,
    MappingSuccess,
    RowError,
)
from integration_service.mapping.repair import repair_response

__all__ = [
    "BatchMapper",
    "BatchResult",
    "GenerationClient",
    "MappingFailure",
    "MappingRequest",
    "MappingResult",
    "MappingSuccess",
    "RecordMapper",
    "RowError",
    "repair_response",
]
