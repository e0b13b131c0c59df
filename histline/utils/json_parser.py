"""
JSON parsing utilities for extracting structured data from LLM responses.

Models are asked for a bare JSON array but often wrap it in prose or markdown
fences; the array is recovered by slicing from the first '[' to the last ']'.
"""

import json
from typing import Any


def extract_json_array_from_llm_response(text: str | None) -> list[Any] | None:
    """
    Extract the JSON array embedded in an LLM response.

    Returns None when the response has no '[' ... ']' span, when that span is
    not valid JSON, or when it decodes to something other than a list.
    """
    if not text or not text.strip():
        return None

    start_index = text.find("[")
    end_index = text.rfind("]")
    if start_index == -1 or end_index == -1 or end_index < start_index:
        return None

    try:
        parsed = json.loads(text[start_index : end_index + 1])
    except json.JSONDecodeError:
        return None

    if not isinstance(parsed, list):
        return None
    return parsed
