"""
Response repair — recover one JSON object from a model's free-text answer.

Models asked for "only JSON" still wrap it in markdown fences, put a
sentence in front of it, or quote nested objects as strings.  The repair
runs these steps in order, each a no-op when it does not apply:

    1. trim surrounding whitespace
    2. strip a leading ```json / ``` fence and a trailing ``` fence
    3. if the text does not start with "{", cut out the first balanced
       {...} block (survives prose before and after the object)
    4. parse the candidate as a JSON object
    5. re-parse string values that look like quoted JSON objects/arrays

Everything here is pure: no I/O, same input → same output.
"""

from __future__ import annotations

import json

from integration_service.core.logging import get_logger
from integration_service.mapping.errors import ResponseParseError
from integration_service.mapping.models import JSONObject, JSONValue

logger = get_logger(__name__)

NO_JSON_OBJECT_MESSAGE = "No JSON object found in AI response"


def _reject_constant(token: str) -> None:
    raise ValueError(f"{token} is not a valid JSON value")


def _loads_strict(text: str) -> JSONValue:
    """json.loads without the NaN / Infinity / -Infinity extensions."""
    return json.loads(text, parse_constant=_reject_constant)


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` fence and a trailing ``` fence."""
    text = text.strip()
    if text.startswith("```json"):
        text = text[len("```json"):]
    elif text.startswith("```"):
        text = text[len("```"):]
    if text.endswith("```"):
        text = text[:-len("```")]
    return text.strip()


def extract_json_object(text: str) -> str:
    """
    Return the JSON object candidate embedded in `text`.

    Text already starting with "{" is returned unchanged.  Otherwise the
    scan starts at the first "{" and stops where the brace depth returns
    to zero; braces inside string literals are not counted.  When the
    object never closes, everything from the first "{" is returned and
    left for the parser to reject.
    """
    if text.startswith("{"):
        return text

    start = text.find("{")
    if start == -1:
        raise ResponseParseError(NO_JSON_OBJECT_MESSAGE, step_name="repair_response")

    logger.debug("Found text before JSON, extracting object", offset=start)

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]

    return text[start:]


def parse_json_object(candidate: str) -> JSONObject:
    """Parse `candidate`, which must hold exactly one JSON object."""
    try:
        parsed = _loads_strict(candidate)
    except ValueError as exc:
        raise ResponseParseError(
            f"AI mapping returned invalid JSON: {exc}",
            step_name="repair_response",
            details={"candidate": candidate[:500]},
        ) from exc

    if not isinstance(parsed, dict):
        raise ResponseParseError(
            f"AI mapping returned invalid JSON: expected an object, got {type(parsed).__name__}",
            step_name="repair_response",
        )
    return parsed


def _looks_like_json_container(text: str) -> bool:
    stripped = text.strip()
    return (stripped.startswith("{") and stripped.endswith("}")) or (
        stripped.startswith("[") and stripped.endswith("]")
    )


def unstringify_nested(value: JSONValue, *, _path: str = "$") -> JSONValue:
    """
    Replace string values that hold quoted JSON objects/arrays with the
    parsed structure, at any depth.

    Strings that look like JSON but do not parse are kept as they are.
    Newly parsed values are walked too, so double-quoted nesting unwinds.
    """
    if isinstance(value, dict):
        return {
            key: unstringify_nested(item, _path=f"{_path}.{key}")
            for key, item in value.items()
        }

    if isinstance(value, list):
        return [
            unstringify_nested(item, _path=f"{_path}[{index}]")
            for index, item in enumerate(value)
        ]

    if isinstance(value, str) and _looks_like_json_container(value):
        try:
            parsed = _loads_strict(value)
        except ValueError:
            logger.debug("Could not parse stringified value", path=_path)
            return value
        logger.debug("Converted stringified nested structure", path=_path)
        return unstringify_nested(parsed, _path=_path)

    return value


def repair_response(raw_text: str, *, unstringify: bool = True) -> JSONObject:
    """
    Turn a raw model response into a JSON object.

    Args:
        raw_text: The model output, verbatim.
        unstringify: Re-parse quoted nested JSON (see unstringify_nested).

    Raises:
        ResponseParseError: no object could be found or it is malformed.
    """
    cleaned = strip_code_fences(raw_text or "")
    candidate = extract_json_object(cleaned).strip()
    parsed = parse_json_object(candidate)

    if unstringify:
        parsed = unstringify_nested(parsed)
    return parsed
