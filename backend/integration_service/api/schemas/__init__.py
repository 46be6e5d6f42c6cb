"""API schema package."""

from integration_service.api.schemas.mapping import (
    BatchMappingRequestSchema,
    BatchMappingResponseSchema,
    MappingRequestSchema,
    MappingResponseSchema,
    RowErrorSchema,
    RulesRequestSchema,
    RulesResponseSchema,
)

__all__ = [
    "BatchMappingRequestSchema",
    "BatchMappingResponseSchema",
    "MappingRequestSchema",
    "MappingResponseSchema",
    "RowErrorSchema",
    "RulesRequestSchema",
    "RulesResponseSchema",
]
