# backend/tour_planner/utils/json_extractor.py

import json
import re
from typing import Any, Iterable

from tour_planner.core.exceptions import MalformedDocument
from tour_planner.core.logger import logger


_LEADING_FENCE = re.compile(r"^\s*```[\w-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```\s*$")
_INNER_FENCE = re.compile(r"```[\w-]*\s*")


def find_json_segment(segments: Iterable[str]) -> str:
    """Return the first text segment that looks like it carries a JSON object."""
    for text in segments:
        if text and "{" in text and "}" in text:
            return text
    raise MalformedDocument("No JSON content found in response")


def strip_code_fence(text: str) -> str:
    cleaned = text.strip()

    # ```json ... ``` somewhere inside surrounding prose
    # fences inside the object belong to its string values and are kept
    if "```" in cleaned and not cleaned.startswith("```"):
        start = cleaned.find("{")
        end = cleaned.rfind("}")
        if start == -1 or end < start:
            return _INNER_FENCE.sub("", cleaned).strip()
        before = _INNER_FENCE.sub("", cleaned[:start])
        after = _INNER_FENCE.sub("", cleaned[end + 1:])
        return (before + cleaned[start:end + 1] + after).strip()

    cleaned = _LEADING_FENCE.sub("", cleaned)
    cleaned = _TRAILING_FENCE.sub("", cleaned)
    return cleaned.strip()


def extract_json(text: str) -> Any:
    """
    Salvage the JSON object embedded in a model response.

    Strips a fenced code wrapper (with or without a language tag), then keeps
    everything between the first "{" and the last "}" so that prose the model
    adds before or after the object is ignored. Raises MalformedDocument when
    no brace span exists or the span does not parse.
    """
    if not text or "{" not in text or "}" not in text:
        raise MalformedDocument("No JSON content found in response", raw_text=text or "")

    cleaned = strip_code_fence(text)

    json_start = cleaned.find("{")
    json_end = cleaned.rfind("}")
    if json_start == -1 or json_end == -1 or json_end < json_start:
        raise MalformedDocument("No balanced JSON object found in response", raw_text=text)

    json_content = cleaned[json_start:json_end + 1].strip()

    try:
        return json.loads(json_content)
    except json.JSONDecodeError as e:
        logger.error(f"JSON decode error: {e}")
        logger.debug(f"Offending content: {json_content[:500]}")
        raise MalformedDocument(f"Invalid JSON in response: {e}", raw_text=text) from e


def extract_from_segments(segments: Iterable[str]) -> Any:
    return extract_json(find_json_segment(segments))
