"""Shared dependencies for API routes."""

from __future__ import annotations

from fastapi import Depends

from integration_service.core.config import settings
from integration_service.mapping.batch import BatchMapper
from integration_service.mapping.client import GenerationClient
from integration_service.mapping.mapper import RecordMapper


def get_generation_client() -> GenerationClient:
    """Generation client configured from application settings."""
    return GenerationClient(
        host=settings.OLLAMA_HOST,
        model=settings.OLLAMA_MODEL,
        temperature=settings.LLM_TEMPERATURE,
        timeout=settings.LLM_TIMEOUT_SECONDS,
    )


def get_record_mapper(
    client: GenerationClient = Depends(get_generation_client),
) -> RecordMapper:
    return RecordMapper(client, unstringify_nested=settings.MAPPER_UNSTRINGIFY_NESTED)


def get_batch_mapper(
    record_mapper: RecordMapper = Depends(get_record_mapper),
) -> BatchMapper:
    return BatchMapper(record_mapper, max_workers=settings.BATCH_MAX_WORKERS)
