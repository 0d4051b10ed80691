"""Extraction of an embedded JSON object from free-text provider output."""

from __future__ import annotations

import json
from typing import Any


def find_brace_block(text: str) -> str | None:
    """Return the first balanced ``{...}`` span, honouring JSON string quoting."""
    start = text.find("{")
    if start == -1:
        return None

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
                return text[start : index + 1]
    return None


def extract_json_block(text: str) -> dict[str, Any]:
    """Decode the first balanced object embedded in surrounding prose.

    Raises:
        ValueError: if there is no balanced block or it is not a JSON object.
    """
    block = find_brace_block(text)
    if block is None:
        msg = "no balanced JSON object found in response"
        raise ValueError(msg)
    try:
        payload = json.loads(block)
    except json.JSONDecodeError as e:
        msg = f"embedded block is not valid JSON: {e.msg}"
        raise ValueError(msg) from e
    if not isinstance(payload, dict):
        msg = "embedded block is not a JSON object"
        raise ValueError(msg)
    return payload
