#!/usr/bin/env python3
"""
Demo script — map product records against a running Ollama instance.

Shows a single-record mapping, a small batch with per-row error
reporting, and mapping-rule suggestion.

Usage:
    cd backend
    OLLAMA_HOST=http://localhost:11434 python -m scripts.demo_mapping
"""

import asyncio
import json

PRODUCT_SOURCE_SCHEMA = {
    "id": "UUID",
    "name": "String",
    "description": "String",
    "price": "BigDecimal",
    "stock": "Integer",
    "categories": "List",
    "dimensions": "Map",
}

PRODUCT_TARGET_SCHEMA = json.dumps({
    "product_id": "UUID",
    "product_name": "String",
    "product_description": "String",
    "unit_price": "BigDecimal",
    "available_stock": "Integer",
    "category": "List",
    "dimensions": "Map",
    "integration_status": "String",
}, indent=2)

PRODUCT_MAPPING_RULES = """
- Map 'id' to 'product_id'
- Map 'name' to 'product_name'
- Map 'description' to 'product_description'
- Map 'price' to 'unit_price'
- Map 'stock' to 'available_stock'
- Map 'categories' to 'category'
- Map 'dimensions' to 'dimensions'
- Set 'integration_status' to 'SYNCED'
""".strip()

PRODUCT_ROWS = [
    {
        "id": "6f1c2a9e-8a47-4c0e-9a55-0f3b1f4f8c11",
        "name": "Oak Desk",
        "description": "Solid oak writing desk",
        "price": 349.99,
        "stock": 12,
        "categories": ["furniture", "office"],
        "dimensions": {"length": 120, "width": 60, "height": 75},
    },
    {
        "id": "0b9d7e34-2f5a-4f7b-8d0c-7b2f6e9a1d22",
        "name": "Desk Lamp",
        "description": "LED lamp with dimmer",
        "price": 39.5,
        "stock": 140,
        "categories": ["lighting"],
        "dimensions": {"length": 15, "width": 15, "height": 45},
    },
]


def _build():
    from integration_service.core.config import settings
    from integration_service.mapping import BatchMapper, GenerationClient, RecordMapper

    client = GenerationClient(
        host=settings.OLLAMA_HOST,
        model=settings.OLLAMA_MODEL,
        temperature=settings.LLM_TEMPERATURE,
        timeout=settings.LLM_TIMEOUT_SECONDS,
    )
    mapper = RecordMapper(client, unstringify_nested=settings.MAPPER_UNSTRINGIFY_NESTED)
    return mapper, BatchMapper(mapper, max_workers=settings.BATCH_MAX_WORKERS)


async def run_single_record(mapper):
    """DEMO 1: one record through prompt → generate → repair."""
    from integration_service.mapping import MappingRequest

    print("\n" + "=" * 70)
    print("  DEMO 1: Single Record")
    print("=" * 70)

    result = await mapper.map(MappingRequest(
        source_data=PRODUCT_ROWS[0],
        source_schema=json.dumps(PRODUCT_SOURCE_SCHEMA),
        target_schema=PRODUCT_TARGET_SCHEMA,
        mapping_rules=PRODUCT_MAPPING_RULES,
    ))
    print(json.dumps(result.to_dict(), indent=2, default=str))


async def run_batch(batch_mapper):
    """DEMO 2: a batch where one row is not a record."""
    print("\n" + "=" * 70)
    print("  DEMO 2: Batch (3 rows, one malformed)")
    print("=" * 70)

    result = await batch_mapper.map_batch(
        file_name="products.json",
        rows=[*PRODUCT_ROWS, "not-a-record"],
        source_schema=PRODUCT_SOURCE_SCHEMA,
        target_schema=PRODUCT_TARGET_SCHEMA,
        mapping_rules=PRODUCT_MAPPING_RULES,
    )
    _print_batch(result)


async def run_rule_suggestion(mapper):
    """DEMO 3: let the model propose exact-name mapping rules."""
    print("\n" + "=" * 70)
    print("  DEMO 3: Mapping Rule Suggestion")
    print("=" * 70)

    rules = await mapper.suggest_mapping_rules(
        json.dumps(PRODUCT_SOURCE_SCHEMA),
        PRODUCT_TARGET_SCHEMA,
    )
    print(rules)


def _print_batch(result):
    """Pretty-print a BatchResult."""
    print(f"\n{'─' * 50}")
    print(f"  Batch ID     : {result.batch_id[:12]}...")
    print(f"  File         : {result.file_name}")
    print(f"  Rows         : {result.total_rows_processed}")
    print(f"  Successful   : {result.successful_mappings}")
    print(f"  Failed       : {result.failed_mappings}")
    print(f"  Duration     : {result.processing_time_ms}ms")
    print(f"  Download     : {result.download_url}")

    print(f"\n  Mapped rows:")
    for row in result.mapped_data:
        print(f"    ✓ {json.dumps(row)}")

    for error in result.errors or []:
        print(f"    ✗ row {error.row_index} [{error.error_type}]: {error.error}")

    print(f"{'─' * 50}\n")


async def main():
    from integration_service.core.logging import setup_logging
    setup_logging("WARNING")     # quiet logs, show formatted output only

    mapper, batch_mapper = _build()

    await run_single_record(mapper)
    await run_batch(batch_mapper)
    await run_rule_suggestion(mapper)


if __name__ == "__main__":
    asyncio.run(main())
