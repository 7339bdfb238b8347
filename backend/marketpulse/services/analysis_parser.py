"""Parse and validate the LLM's competitor analysis reply."""

from __future__ import annotations

import json

from pydantic import ValidationError

from ..schemas.analysis_schema import MarketAnalysis
from .errors import AnalysisParseError

_CLOSERS = "}]"


def _strip_trailing_commas(text: str) -> str:
    """Drop commas that directly precede a closing brace or bracket.

    Commas inside string literals are left alone.
    """
    out = []
    in_string = False
    escaped = False
    i = 0
    while i < len(text):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == ",":
            j = i + 1
            while j < len(text) and text[j].isspace():
                j += 1
            if j < len(text) and text[j] in _CLOSERS:
                i += 1
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def sanitize_json(raw: str) -> str:
    """Extract a JSON object from raw LLM output.

    Handles:
      - Markdown fences (```json ... ```)
      - Leading/trailing whitespace and BOM
      - Prose before/after JSON
      - Trailing commas before } or ]

    Raises AnalysisParseError if no JSON object is found.
    """
    text = (raw or "").strip().lstrip("\ufeff")

    if text.startswith("```"):
        parts = text.split("```")
        text = parts[1] if len(parts) >= 3 else text[3:]

    text = text.strip()
    if text.lower().startswith("json"):
        text = text[4:].strip()

    brace_idx = text.find("{")
    if brace_idx == -1:
        raise AnalysisParseError("LLM did not return a JSON object — no '{' found")
    text = text[brace_idx:]

    rbrace_idx = text.rfind("}")
    if rbrace_idx == -1:
        raise AnalysisParseError("LLM did not return a JSON object — no '}' found")
    text = text[: rbrace_idx + 1]

    return _strip_trailing_commas(text)


def parse_market_analysis(raw: str) -> MarketAnalysis:
    """Decode *raw* and validate it against ``MarketAnalysis``.

    Raises
    ------
    AnalysisParseError
        Not JSON, not an object, or fails schema validation.
    """
    sanitized = sanitize_json(raw)
    try:
        parsed = json.loads(sanitized)
    except json.JSONDecodeError as exc:
        raise AnalysisParseError(f"Invalid JSON from LLM: {exc}") from exc

    if not isinstance(parsed, dict):
        raise AnalysisParseError("LLM JSON is not an object")

    try:
        return MarketAnalysis.model_validate(parsed)
    except ValidationError as exc:
        raise AnalysisParseError(f"LLM JSON failed schema validation: {exc}") from exc
