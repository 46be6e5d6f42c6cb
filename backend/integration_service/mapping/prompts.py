"""
LLM prompts for record mapping and mapping-rule suggestion.

All prompt text lives here so it can be iterated on without touching the
mapper.  Rendering is deterministic: the same request always yields the
same prompt.
"""

from __future__ import annotations

import json

from integration_service.mapping.errors import PromptEncodingError
from integration_service.mapping.models import MappingRequest


# ═══════════════════════════════════════════════════════════
#  Record Mapping Prompt
# ═══════════════════════════════════════════════════════════

MAPPING_PROMPT_TEMPLATE = """
CRITICAL: Return ONLY a JSON object. Do NOT include any introduction, explanation, text, or commentary. Start directly with {{ and end with }}.

You are a data mapping expert. Map the following source data to the target schema.

SOURCE SCHEMA (note the data types):
{source_schema}

TARGET SCHEMA:
{target_schema}
{target_sample_section}
SOURCE DATA:
{source_data}

MAPPING RULES:
{mapping_rules}

{output_instructions}
""".strip()

TARGET_SAMPLE_SECTION = """
TARGET SAMPLE DATA (structure example):
{target_sample_data}
"""

OUTPUT_INSTRUCTIONS = """
INSTRUCTIONS FOR JSON GENERATION:
1. Return ONLY a valid JSON object that EXACTLY matches the target schema structure
2. Start with { and end with } - no text before or after
3. IMPORTANT: Preserve data types from SOURCE SCHEMA when mapping:
   - If a source field is "List" type, map it as a JSON array [] even if the target name is different
   - If the source is an array/list, the mapped target MUST also be an array
   - Example: if "categories" is List type, "category" must be ["value1","value2"], NOT "value1,value2"
4. CRITICAL FOR COMPLEX TYPES - Handle nested objects correctly:
   - NEVER stringify objects or arrays - return them as proper JSON structures
   - If the source has a nested object like {length: 30, width: 25, height: 2}, return it as: {"length": 30, "width": 25, "height": 2}
   - WRONG: "dimensions": "{ \\"length\\": 30, \\"width\\": 25 }"
   - CORRECT: "dimensions": {"length": 30, "width": 25}
   - NEVER wrap objects or arrays in quotes
5. If TARGET SAMPLE DATA is given, match the exact structure and types it shows:
   arrays stay arrays, objects stay objects, numbers stay numbers
6. Do NOT include any markdown code blocks (no ``` or ~~~)
7. Do NOT include any comments (no // or /* */)
8. Do NOT include ANY explanation, introduction, or description text
9. Use double quotes for all JSON strings, never single quotes
10. Ensure all JSON braces and brackets are properly closed
11. If a value is missing or cannot be determined, omit the field or use null - never invent a value

Transform the source data according to the target schema and mapping rules.
Return ONLY: {the JSON object}
""".strip()


def encode_source_data(source_data: dict) -> str:
    """
    Serialise a source record for the prompt.

    Field order is preserved.  Values JSON cannot represent (datetimes,
    sets, NaN, ...) raise PromptEncodingError instead of being dropped.
    """
    try:
        return json.dumps(source_data, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise PromptEncodingError(
            f"Source data is not JSON serialisable: {exc}",
            step_name="build_prompt",
        ) from exc


def build_mapping_prompt(request: MappingRequest) -> str:
    """Render the mapping prompt for one record."""
    target_sample_section = ""
    if request.target_sample_data and request.target_sample_data.strip():
        target_sample_section = TARGET_SAMPLE_SECTION.format(
            target_sample_data=request.target_sample_data,
        )

    return MAPPING_PROMPT_TEMPLATE.format(
        source_schema=request.source_schema,
        target_schema=request.target_schema,
        target_sample_section=target_sample_section,
        source_data=encode_source_data(request.source_data),
        mapping_rules=request.mapping_rules,
        output_instructions=OUTPUT_INSTRUCTIONS,
    )


# ═══════════════════════════════════════════════════════════
#  Mapping Rule Suggestion Prompt
# ═══════════════════════════════════════════════════════════

RULES_PROMPT_TEMPLATE = """
You are a data mapping expert. Analyze the source and target schemas, and generate mapping rules.

SOURCE SCHEMA:
{source_schema}

TARGET SCHEMA:
{target_schema}

Generate mapping rules in the following format (one rule per line):
- Map [source_field] to [target_field]

IMPORTANT RULES:
1. Only include fields that have EXACT NAME MATCHES between source and target
2. Do NOT map fields with similar but different names (e.g., 'source_amount' to 'amount' is NOT allowed)
3. For fields in TARGET that don't have exact source matches, DO NOT include them in the rules
4. These unmapped target fields will be identified separately for manual configuration
5. Only output the mapping rules, nothing else - no explanations or comments
""".strip()


def build_rules_prompt(source_schema: str, target_schema: str) -> str:
    """Render the prompt that asks the model to propose mapping rules."""
    return RULES_PROMPT_TEMPLATE.format(
        source_schema=source_schema,
        target_schema=target_schema,
    )
