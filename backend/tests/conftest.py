"""
Shared fixtures for the mapping service tests.

FakeGenerator stands in for GenerationClient: it replays scripted
responses (or raises scripted exceptions) and records every prompt.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import pytest

from integration_service.mapping.batch import BatchMapper
from integration_service.mapping.mapper import RecordMapper
from integration_service.mapping.models import MappingRequest

PRODUCT_SOURCE_SCHEMA = json.dumps({
    "id": "UUID",
    "name": "String",
    "price": "BigDecimal",
    "stock": "Integer",
    "categories": "List",
})

PRODUCT_TARGET_SCHEMA = json.dumps({
    "product_id": "UUID",
    "product_name": "String",
    "unit_price": "BigDecimal",
    "available_stock": "Integer",
    "integration_status": "String",
})

PRODUCT_MAPPING_RULES = "\n".join([
    "- Map 'id' to 'product_id'",
    "- Map 'name' to 'product_name'",
    "- Map 'price' to 'unit_price'",
    "- Map 'stock' to 'available_stock'",
    "- Set 'integration_status' to 'SYNCED'",
])


class FakeGenerator:
    """
    Scripted text generator.

    `script` is either a list consumed in call order (str items are
    returned, exception items are raised) or a callable prompt → str.
    """

    def __init__(self, script: list[Any] | Callable[[str], str]) -> None:
        self._script = script
        self.prompts: list[str] = []

    async def generate(self, prompt: str, model: str | None = None, temperature: float | None = None) -> str:
        self.prompts.append(prompt)
        if callable(self._script):
            return self._script(prompt)
        item = self._script[len(self.prompts) - 1]
        if isinstance(item, BaseException):
            raise item
        return item

    @property
    def calls(self) -> int:
        return len(self.prompts)


@pytest.fixture
def product_request() -> MappingRequest:
    return MappingRequest(
        source_data={"id": "p-1", "name": "Oak Desk", "price": 349.99, "stock": 12},
        source_schema=PRODUCT_SOURCE_SCHEMA,
        target_schema=PRODUCT_TARGET_SCHEMA,
        mapping_rules=PRODUCT_MAPPING_RULES,
    )


@pytest.fixture
def make_mapper() -> Callable[..., tuple[RecordMapper, FakeGenerator]]:
    def _make(script, **kwargs) -> tuple[RecordMapper, FakeGenerator]:
        generator = FakeGenerator(script)
        return RecordMapper(generator, **kwargs), generator
    return _make


@pytest.fixture
def make_batch_mapper() -> Callable[..., tuple[BatchMapper, FakeGenerator]]:
    def _make(script, max_workers: int = 1) -> tuple[BatchMapper, FakeGenerator]:
        generator = FakeGenerator(script)
        return BatchMapper(RecordMapper(generator), max_workers=max_workers), generator
    return _make
