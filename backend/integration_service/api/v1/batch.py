"""
Batch mapping endpoints — map every row of an already-parsed file.

File upload and CSV/JSON/XML parsing happen upstream; these routes take
the parsed rows as JSON.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from integration_service.api.deps import get_batch_mapper
from integration_service.api.schemas import BatchMappingRequestSchema, BatchMappingResponseSchema
from integration_service.core.constants import ExportFormat
from integration_service.mapping.batch import BatchMapper
from integration_service.mapping.exports import export_csv, export_json
from integration_service.mapping.models import BatchResult

router = APIRouter(prefix="/batch", tags=["Batch Mapping"])

MEDIA_TYPES = {
    ExportFormat.JSON: "application/json",
    ExportFormat.CSV: "text/csv",
}


async def _run_batch(payload: BatchMappingRequestSchema, batch_mapper: BatchMapper) -> BatchResult:
    return await batch_mapper.map_batch(
        file_name=payload.file_name,
        rows=payload.rows,
        source_schema=payload.source_schema,
        target_schema=payload.target_schema,
        mapping_rules=payload.mapping_rules,
        target_sample_data=payload.target_sample_data,
    )


@router.post("/map", response_model=BatchMappingResponseSchema)
async def map_batch(
    payload: BatchMappingRequestSchema,
    batch_mapper: BatchMapper = Depends(get_batch_mapper),
):
    """Map all rows; failed rows are reported in `errors`, never as an HTTP error."""
    result = await _run_batch(payload, batch_mapper)
    return result.to_dict()


@router.post("/map/export")
async def map_batch_export(
    payload: BatchMappingRequestSchema,
    export_format: ExportFormat = Query(ExportFormat.JSON, alias="format"),
    batch_mapper: BatchMapper = Depends(get_batch_mapper),
) -> Response:
    """Map all rows and return the successful ones as a JSON or CSV attachment."""
    result = await _run_batch(payload, batch_mapper)

    if export_format == ExportFormat.CSV:
        body = export_csv(result.mapped_data)
    else:
        body = export_json(result.mapped_data)

    return Response(
        content=body,
        media_type=MEDIA_TYPES[export_format],
        headers={
            "Content-Disposition": f'attachment; filename="batch-{result.batch_id}.{export_format}"',
            "X-Batch-Id": result.batch_id,
            "X-Failed-Mappings": str(result.failed_mappings),
        },
    )
