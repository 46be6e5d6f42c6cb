"""
BatchMapper — maps every row of a parsed file through the RecordMapper.

Rows are independent: each one gets its own MappingRequest, its own
attempt, and its own error boundary.  A failing row is recorded in
`errors` with its index and the batch carries on; the call always
returns a BatchResult.

Successful rows are cleaned before they are returned: null-valued
fields are dropped and, when the target schema is a JSON object, only
its fields are kept (in its order).
"""

from __future__ import annotations

import asyncio
import json
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

from integration_service.core.constants import BatchErrorKind
from integration_service.core.logging import get_logger
from integration_service.mapping.errors import BatchRowError
from integration_service.mapping.mapper import RecordMapper
from integration_service.mapping.models import (
    BatchResult,
    JSONObject,
    MappingFailure,
    MappingRequest,
    MappingResult,
    RowError,
)
from integration_service.mapping.schema import filter_to_schema, parse_target_schema, strip_nulls

logger = get_logger(__name__)

# Key a model uses when it answers with an error object instead of data
PLACEHOLDER_ERROR_KEY = "error"


@dataclass(frozen=True)
class _RowOutcome:
    """What happened to one row; exactly one of mapped/error is set."""

    row_index: int
    mapped: JSONObject | None = None
    error: RowError | None = None


def placeholder_diagnostic(mapped: JSONObject) -> str | None:
    """
    Explain why a successful mapping carries no usable data.

    Returns None for usable data.  `{}` and a lone {"error": ...} object
    are placeholders.
    """
    if not mapped:
        return "AI mapping returned an empty JSON object"
    if set(mapped) == {PLACEHOLDER_ERROR_KEY}:
        return f"AI mapping returned an error placeholder: {mapped[PLACEHOLDER_ERROR_KEY]}"
    return None


class BatchMapper:
    """
    Orchestrates a batch of rows.

    Usage::

        batch = BatchMapper(RecordMapper(client), max_workers=4)
        result = await batch.map_batch(
            file_name="products.csv",
            rows=rows,
            source_schema={"id": "UUID", "name": "String"},
            target_schema='{"product_id": "UUID", "product_name": "String"}',
            mapping_rules="- Map 'id' to 'product_id'",
        )
    """

    def __init__(self, record_mapper: RecordMapper, max_workers: int = 1) -> None:
        """
        Args:
            record_mapper: Single-record mapper used for every row.
            max_workers: Rows mapped concurrently.  1 maps rows one
                after another.
        """
        self.record_mapper = record_mapper
        self.max_workers = max(1, max_workers)

    async def map_batch(
        self,
        file_name: str,
        rows: Sequence[Mapping[str, Any]],
        source_schema: str | Mapping[str, str],
        target_schema: str,
        mapping_rules: str = "",
        target_sample_data: str | None = None,
    ) -> BatchResult:
        """Map every row and aggregate successes, row errors and counters."""
        started = time.perf_counter()
        batch_id = str(uuid.uuid4())

        log = logger.bind(batch_id=batch_id, file_name=file_name)
        log.info("Batch mapping started", total_rows=len(rows), max_workers=self.max_workers)

        allowed_fields = parse_target_schema(target_schema)

        async def run_row(index: int, row: Mapping[str, Any]) -> _RowOutcome:
            return await self._map_row(
                index, row, source_schema, target_schema,
                mapping_rules, target_sample_data, allowed_fields,
            )

        if self.max_workers == 1:
            outcomes = [await run_row(index, row) for index, row in enumerate(rows)]
        else:
            semaphore = asyncio.Semaphore(self.max_workers)

            async def bounded(index: int, row: Mapping[str, Any]) -> _RowOutcome:
                async with semaphore:
                    return await run_row(index, row)

            outcomes = await asyncio.gather(
                *(bounded(index, row) for index, row in enumerate(rows))
            )

        mapped_data: list[JSONObject] = []
        errors: list[RowError] = []
        for outcome in sorted(outcomes, key=lambda o: o.row_index):
            if outcome.error is not None:
                errors.append(outcome.error)
            else:
                mapped_data.append(outcome.mapped)

        processing_time_ms = int((time.perf_counter() - started) * 1000)

        log.info(
            "Batch mapping completed",
            successful=len(mapped_data),
            failed=len(errors),
            processing_time_ms=processing_time_ms,
        )

        return BatchResult(
            batch_id=batch_id,
            file_name=file_name,
            total_rows_processed=len(rows),
            successful_mappings=len(mapped_data),
            failed_mappings=len(errors),
            mapped_data=mapped_data,
            errors=errors or None,
            processing_time_ms=processing_time_ms,
            processed_at=datetime.now(timezone.utc),
        )

    async def _map_row(
        self,
        index: int,
        row: Mapping[str, Any],
        source_schema: str | Mapping[str, str],
        target_schema: str,
        mapping_rules: str,
        target_sample_data: str | None,
        allowed_fields: list[str] | None,
    ) -> _RowOutcome:
        """Map one row inside its own error boundary."""
        try:
            if not isinstance(row, Mapping):
                raise BatchRowError(
                    f"Row {index} is not a record (got {type(row).__name__})",
                    row_index=index,
                )

            request = MappingRequest(
                source_data=dict(row),
                source_schema=self._encode_source_schema(source_schema, index),
                target_schema=target_schema,
                mapping_rules=mapping_rules,
                target_sample_data=target_sample_data,
            )
            result = await self.record_mapper.map(request)
            return self._classify(index, result, allowed_fields)

        except Exception as exc:
            logger.exception("Error mapping row", row_index=index, error=str(exc))
            return _RowOutcome(
                row_index=index,
                error=RowError(
                    row_index=index,
                    error=str(exc) or type(exc).__name__,
                    error_type=BatchErrorKind.PROCESSING_ERROR,
                ),
            )

    def _classify(
        self,
        index: int,
        result: MappingResult,
        allowed_fields: list[str] | None,
    ) -> _RowOutcome:
        """Sort a mapper result into success / placeholder / mapping failure."""
        if isinstance(result, MappingFailure):
            logger.warning(
                "Row mapping failed",
                row_index=index,
                mapping_id=result.mapping_id,
                error_type=result.error_type,
                error=result.error_message,
            )
            return _RowOutcome(
                row_index=index,
                error=RowError(
                    row_index=index,
                    error=result.error_message or "Unknown error",
                    error_type=BatchErrorKind.MAPPING_ERROR,
                ),
            )

        diagnostic = placeholder_diagnostic(result.mapped_data)
        if diagnostic is not None:
            logger.warning(
                "Row mapped to placeholder data",
                row_index=index,
                mapping_id=result.mapping_id,
                diagnostic=diagnostic,
            )
            return _RowOutcome(
                row_index=index,
                error=RowError(
                    row_index=index,
                    error=diagnostic,
                    error_type=BatchErrorKind.JSON_PARSE_ERROR,
                ),
            )

        cleaned = filter_to_schema(strip_nulls(result.mapped_data), allowed_fields)
        return _RowOutcome(row_index=index, mapped=cleaned)

    @staticmethod
    def _encode_source_schema(source_schema: str | Mapping[str, str], index: int) -> str:
        """Source schemas arrive as text or as a detected field → type mapping."""
        if isinstance(source_schema, str):
            return source_schema
        try:
            return json.dumps(dict(source_schema), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise BatchRowError(
                f"Source schema could not be serialised: {exc}",
                row_index=index,
                step_name="prepare_request",
            ) from exc
