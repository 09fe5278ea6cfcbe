"""Pull a single JSON value out of freeform model output.

Models wrap JSON in prose and markdown fences often enough that a plain
``json.loads`` is not an option. The extractor strips fences, then tries every
opening bracket of the requested kind in order: from each one it scans to the
matching closing bracket (tracking depth, skipping brackets inside string
literals) and attempts to parse that span. The first span that parses to the
requested kind wins, so two JSON blobs in one reply are never spliced
together.
"""

from __future__ import annotations

import json
import re
from typing import Any, Literal

from services.ai.exceptions import ExtractionError
from services.ai.outcomes import Extracted, ExtractionFailed, ExtractionOutcome


BracketKind = Literal["object", "array"]

_BRACKETS: dict[str, tuple[str, str]] = {
    "object": ("{", "}"),
    "array": ("[", "]"),
}
_FENCE_PATTERN = re.compile(r"```(?:json|JSON)?")


def strip_code_fences(text: str) -> str:
    return _FENCE_PATTERN.sub("", text).strip()


def _balanced_end(text: str, start: int) -> int | None:
    """Index of the bracket closing the one at `start`, or None if unbalanced."""
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
        elif char in "{[":
            depth += 1
        elif char in "}]":
            depth -= 1
            if depth == 0:
                return index
    return None


def _matches_kind(value: Any, kind: BracketKind) -> bool:
    return isinstance(value, dict) if kind == "object" else isinstance(value, list)


def extract_json_outcome(text: str, kind: BracketKind) -> ExtractionOutcome:
    """Locate and parse the first well-formed JSON `kind` embedded in `text`."""
    if kind not in _BRACKETS:
        raise ValueError(f"Unknown bracket kind: {kind!r}")
    opener, _closer = _BRACKETS[kind]
    cleaned = strip_code_fences(text or "")

    start = cleaned.find(opener)
    while start != -1:
        end = _balanced_end(cleaned, start)
        if end is not None:
            try:
                value = json.loads(cleaned[start : end + 1])
            except json.JSONDecodeError:
                pass
            else:
                if _matches_kind(value, kind):
                    return Extracted(value)
        start = cleaned.find(opener, start + 1)

    return ExtractionFailed(
        ExtractionError(f"No parseable JSON {kind} found in model output")
    )


def extract_json(text: str, kind: BracketKind) -> dict[str, Any] | list[Any]:
    """Like `extract_json_outcome` but raises `ExtractionError` on failure."""
    match extract_json_outcome(text, kind):
        case Extracted(value):
            return value
        case ExtractionFailed(error):
            raise error
    raise AssertionError("unreachable")  # pragma: no cover
