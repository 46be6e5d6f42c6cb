"""
LangSmith tracing utilities for the mapping service.

Provides a setup function and a decorator so that generation calls are
traced when LangSmith is configured, and run untraced when it isn't
(e.g. local dev without an API key).

Usage:
    from integration_service.core.tracing import setup_tracing, traceable_step

    setup_tracing()   # call once at startup

    @traceable_step(name="ollama_generate", run_type="llm")
    async def generate(prompt):
        ...
"""

from __future__ import annotations

import functools
import os
from typing import Any, Callable

from langsmith import traceable

from integration_service.core.config import Settings, settings
from integration_service.core.logging import get_logger

logger = get_logger(__name__)

_tracing_enabled = False


def setup_tracing(config: Settings = settings) -> bool:
    """
    Turn LangSmith tracing of generation calls on or off.

    Tracing needs both LANGSMITH_TRACING and an API key; the SDK picks
    its endpoint, key and project up from the exported environment.
    Returns whether tracing is now on.
    """
    global _tracing_enabled

    _tracing_enabled = bool(config.LANGSMITH_TRACING and config.LANGSMITH_API_KEY)
    if not _tracing_enabled:
        logger.info("Generation tracing off", langsmith_tracing=config.LANGSMITH_TRACING)
        return False

    os.environ.update({
        "LANGSMITH_API_KEY": config.LANGSMITH_API_KEY,
        "LANGSMITH_ENDPOINT": config.LANGSMITH_ENDPOINT,
        "LANGSMITH_PROJECT": config.LANGSMITH_PROJECT,
        "LANGSMITH_TRACING": "true",
    })
    logger.info("Generation tracing on", project=config.LANGSMITH_PROJECT)
    return True


def traceable_step(
    name: str,
    run_type: str = "chain",
    metadata: dict[str, Any] | None = None,
    tags: list[str] | None = None,
) -> Callable:
    """
    Wrap an async callable with LangSmith ``@traceable`` while tracing
    is enabled; call it directly otherwise.

    Args:
        name: Trace name shown in LangSmith UI.
        run_type: One of "chain", "llm", "tool", "retriever".
        metadata: Static metadata attached to every trace.
        tags: Tags for filtering in LangSmith.
    """
    def decorator(func: Callable) -> Callable:
        traced_fn = traceable(
            name=name,
            run_type=run_type,
            metadata=metadata or {},
            tags=tags or [],
        )(func)

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            if _tracing_enabled:
                return await traced_fn(*args, **kwargs)
            return await func(*args, **kwargs)
        return wrapper
    return decorator
