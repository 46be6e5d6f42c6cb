"""
RecordMapper — maps one source record to the target schema.

Chains prompt building → generation → response repair.  Whatever goes
wrong inside the chain comes back as a MappingFailure; map() never
raises.  Timing and the mapping ID are stamped on every outcome so
failed attempts stay traceable.
"""

from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone
from typing import Protocol

from integration_service.core.constants import MappingErrorType
from integration_service.core.logging import get_logger
from integration_service.mapping.errors import MappingServiceError
from integration_service.mapping.models import (
    MappingFailure,
    MappingRequest,
    MappingResult,
    MappingSuccess,
)
from integration_service.mapping.prompts import build_mapping_prompt, build_rules_prompt
from integration_service.mapping.repair import repair_response

logger = get_logger(__name__)


class TextGenerator(Protocol):
    """Anything that turns a prompt into raw model text (GenerationClient)."""

    async def generate(
        self,
        prompt: str,
        model: str | None = None,
        temperature: float | None = None,
    ) -> str:
        ...


class RecordMapper:
    """
    Maps single records with a generation backend.

    Usage::

        mapper = RecordMapper(GenerationClient(host, model))
        result = await mapper.map(request)
        if result.succeeded:
            print(result.mapped_data)
    """

    def __init__(self, generator: TextGenerator, unstringify_nested: bool = True) -> None:
        """
        Args:
            generator: Generation backend, normally a GenerationClient.
            unstringify_nested: Re-parse string values that hold quoted
                JSON objects/arrays.  Turn off for schemas whose fields
                legitimately contain JSON-looking text.
        """
        self.generator = generator
        self.unstringify_nested = unstringify_nested

    async def map(self, request: MappingRequest) -> MappingResult:
        """Map one record.  Always returns a result, never raises."""
        mapping_id = str(uuid.uuid4())
        started = time.perf_counter()
        log = logger.bind(mapping_id=mapping_id)

        log.debug("Starting AI mapping", source_fields=list(request.source_data))

        try:
            prompt = build_mapping_prompt(request)
            raw_response = await self.generator.generate(prompt)
            log.debug("AI mapping response received", response_chars=len(raw_response))
            mapped_data = repair_response(raw_response, unstringify=self.unstringify_nested)

        except MappingServiceError as exc:
            exc.mapping_id = mapping_id
            log.error(
                "AI mapping failed",
                step_name=exc.step_name,
                error_type=exc.error_type,
                error=str(exc),
            )
            return self._failure(mapping_id, started, str(exc), exc.error_type)

        except Exception as exc:
            log.exception("Unexpected error during AI mapping", error=str(exc))
            return self._failure(
                mapping_id, started, f"Unexpected: {exc}", MappingErrorType.UNEXPECTED_ERROR,
            )

        if not mapped_data:
            log.warning("AI mapping returned an empty object")

        execution_time_ms = self._elapsed_ms(started)
        log.info("AI mapping completed", fields=len(mapped_data), execution_time_ms=execution_time_ms)

        return MappingSuccess(
            mapping_id=mapping_id,
            mapped_data=mapped_data,
            transformation_details=raw_response,
            processed_at=datetime.now(timezone.utc),
            execution_time_ms=execution_time_ms,
        )

    async def suggest_mapping_rules(self, source_schema: str, target_schema: str) -> str:
        """
        Ask the model for "- Map X to Y" rules covering exact name matches.

        Unlike map(), failures propagate as MappingServiceError.
        """
        started = time.perf_counter()
        logger.info("Generating AI mapping rules")

        rules = await self.generator.generate(build_rules_prompt(source_schema, target_schema))

        logger.info(
            "Mapping rules generation completed",
            rule_lines=len([line for line in rules.splitlines() if line.strip()]),
            execution_time_ms=self._elapsed_ms(started),
        )
        return rules.strip()

    # ─── Helpers ───────────────────────────────────────

    def _failure(
        self,
        mapping_id: str,
        started: float,
        message: str,
        error_type: MappingErrorType,
    ) -> MappingFailure:
        return MappingFailure(
            mapping_id=mapping_id,
            error_message=message,
            error_type=error_type,
            processed_at=datetime.now(timezone.utc),
            execution_time_ms=self._elapsed_ms(started),
        )

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int((time.perf_counter() - started) * 1000)

