"""Tests for mapping and rule-suggestion prompt rendering."""

import math
from dataclasses import replace
from datetime import datetime

import pytest

from integration_service.mapping.errors import PromptEncodingError
from integration_service.mapping.prompts import (
    OUTPUT_INSTRUCTIONS,
    build_mapping_prompt,
    build_rules_prompt,
    encode_source_data,
)

from conftest import PRODUCT_MAPPING_RULES, PRODUCT_SOURCE_SCHEMA, PRODUCT_TARGET_SCHEMA


def test_prompt_contains_every_input_verbatim(product_request):
    prompt = build_mapping_prompt(product_request)

    assert prompt.startswith("CRITICAL: Return ONLY a JSON object.")
    assert "Start directly with { and end with }." in prompt
    assert f"SOURCE SCHEMA (note the data types):\n{PRODUCT_SOURCE_SCHEMA}" in prompt
    assert f"TARGET SCHEMA:\n{PRODUCT_TARGET_SCHEMA}" in prompt
    assert f"MAPPING RULES:\n{PRODUCT_MAPPING_RULES}" in prompt
    assert OUTPUT_INSTRUCTIONS in prompt


def test_source_data_is_serialised_in_field_order(product_request):
    prompt = build_mapping_prompt(product_request)
    expected = '{"id": "p-1", "name": "Oak Desk", "price": 349.99, "stock": 12}'
    assert f"SOURCE DATA:\n{expected}" in prompt


def test_non_ascii_text_is_kept_readable(product_request):
    request = replace(product_request, source_data={"name": "Schreibtisch Eiche – groß"})
    assert "Schreibtisch Eiche – groß" in build_mapping_prompt(request)


def test_sample_section_omitted_without_sample(product_request):
    assert "TARGET SAMPLE DATA" not in build_mapping_prompt(product_request)


def test_sample_section_omitted_for_blank_sample(product_request):
    request = replace(product_request, target_sample_data="   \n")
    assert "TARGET SAMPLE DATA (structure example)" not in build_mapping_prompt(request)


def test_sample_section_present_before_source_data(product_request):
    sample = '{"product_id": "x", "unit_price": 1.5}'
    prompt = build_mapping_prompt(replace(product_request, target_sample_data=sample))

    section = f"TARGET SAMPLE DATA (structure example):\n{sample}"
    assert section in prompt
    assert prompt.index(section) < prompt.index("SOURCE DATA:")
    assert prompt.index("TARGET SCHEMA:") < prompt.index(section)


def test_prompt_is_deterministic(product_request):
    assert build_mapping_prompt(product_request) == build_mapping_prompt(product_request)


def test_braces_in_inputs_are_not_treated_as_placeholders(product_request):
    request = replace(product_request, mapping_rules="- Keep '{name}' literally")
    assert "- Keep '{name}' literally" in build_mapping_prompt(request)


@pytest.mark.parametrize(
    "source_data",
    [
        {"created_at": datetime(2024, 1, 1)},
        {"tags": {"a", "b"}},
        {"price": math.nan},
        {"price": math.inf},
    ],
)
def test_unencodable_source_data(source_data):
    with pytest.raises(PromptEncodingError, match="not JSON serialisable") as excinfo:
        encode_source_data(source_data)
    assert excinfo.value.step_name == "build_prompt"


def test_rules_prompt_contains_both_schemas():
    prompt = build_rules_prompt(PRODUCT_SOURCE_SCHEMA, PRODUCT_TARGET_SCHEMA)

    assert f"SOURCE SCHEMA:\n{PRODUCT_SOURCE_SCHEMA}" in prompt
    assert f"TARGET SCHEMA:\n{PRODUCT_TARGET_SCHEMA}" in prompt
    assert "- Map [source_field] to [target_field]" in prompt
    assert "EXACT NAME MATCHES" in prompt
