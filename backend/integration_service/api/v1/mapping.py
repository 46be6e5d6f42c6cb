"""
AI mapping endpoints — map a single record, suggest mapping rules.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from integration_service.api.deps import get_record_mapper
from integration_service.api.schemas import (
    MappingRequestSchema,
    MappingResponseSchema,
    RulesRequestSchema,
    RulesResponseSchema,
)
from integration_service.core.logging import get_logger
from integration_service.mapping.errors import MappingServiceError
from integration_service.mapping.mapper import RecordMapper

logger = get_logger(__name__)

router = APIRouter(prefix="/ai", tags=["AI Mapping"])


@router.post(
    "/map",
    response_model=MappingResponseSchema,
    responses={500: {"model": MappingResponseSchema, "description": "Mapping failed"}},
)
async def map_record(
    payload: MappingRequestSchema,
    mapper: RecordMapper = Depends(get_record_mapper),
):
    """Map one source record to the target schema; FAILED results come back as 500."""
    result = await mapper.map(payload.to_domain())
    status_code = status.HTTP_200_OK if result.succeeded else status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(status_code=status_code, content=result.to_dict())


@router.post("/rules", response_model=RulesResponseSchema)
async def suggest_rules(
    payload: RulesRequestSchema,
    mapper: RecordMapper = Depends(get_record_mapper),
) -> RulesResponseSchema:
    """Ask the model for exact-name mapping rules between two schemas."""
    try:
        rules = await mapper.suggest_mapping_rules(payload.source_schema, payload.target_schema)
    except MappingServiceError as exc:
        logger.error("Mapping rules generation failed", error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to generate mapping rules: {exc}",
        ) from exc
    return RulesResponseSchema(mapping_rules=rules)
