"""Mapping request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from integration_service.core.constants import BatchErrorKind, MappingErrorType, MappingStatus
from integration_service.mapping.models import MappingRequest


class MappingRequestSchema(BaseModel):
    """Request payload for a single AI mapping."""

    source_data: dict[str, Any]
    source_schema: str = Field(..., min_length=1)
    target_schema: str = Field(..., min_length=1)
    mapping_rules: str = ""
    target_sample_data: str | None = None

    def to_domain(self) -> MappingRequest:
        return MappingRequest(
            source_data=self.source_data,
            source_schema=self.source_schema,
            target_schema=self.target_schema,
            mapping_rules=self.mapping_rules,
            target_sample_data=self.target_sample_data,
        )


class MappingResponseSchema(BaseModel):
    """Outcome of one mapping attempt."""

    mapping_id: str
    status: MappingStatus
    mapped_data: dict[str, Any] | None = None
    transformation_details: str | None = None
    error_message: str | None = None
    error_type: MappingErrorType | None = None
    processed_at: datetime
    execution_time_ms: int


class RulesRequestSchema(BaseModel):
    """Request payload for mapping-rule suggestion."""

    source_schema: str = Field(..., min_length=1)
    target_schema: str = Field(..., min_length=1)


class RulesResponseSchema(BaseModel):
    mapping_rules: str


class BatchMappingRequestSchema(BaseModel):
    """Rows already parsed from an uploaded file, plus the mapping inputs."""

    file_name: str = Field(..., min_length=1)
    rows: list[dict[str, Any]]
    source_schema: str | dict[str, str]
    target_schema: str = Field(..., min_length=1)
    mapping_rules: str = ""
    target_sample_data: str | None = None


class RowErrorSchema(BaseModel):
    row_index: int
    error: str
    error_type: BatchErrorKind


class BatchMappingResponseSchema(BaseModel):
    """Aggregate outcome of a batch mapping run."""

    batch_id: str
    file_name: str
    total_rows_processed: int
    successful_mappings: int
    failed_mappings: int
    mapped_data: list[dict[str, Any]]
    errors: list[RowErrorSchema] | None = None
    processing_time_ms: int
    processed_at: datetime
    download_url: str
