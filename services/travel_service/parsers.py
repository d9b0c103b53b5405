"""
Best-effort parsing of model output into structured results.

Every public parser runs an ordered chain of attempts. An attempt either
returns a value or raises ``ProcessingError`` to hand over to the next one;
the chain always ends in a fallback that cannot fail, so nothing here raises.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Sequence
from typing import Any

from pydantic import BaseModel

from companion.errors import ProcessingError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_JSON_LABEL_RE = re.compile(r"^json\s*", re.IGNORECASE)
_DAY_HEADING_RE = re.compile(r"(?:^|\n)## Day (\d+)")
_SUBSECTION_SEP = "\n### "


class TranslationResult(BaseModel):
    translation: str
    notes: str | None = None
    cultural_adaptations: str | None = None


def first_successful(
    text: str,
    attempts: Sequence[Callable[[str], Any]],
    fallback: Callable[[str], Any],
) -> Any:
    for attempt in attempts:
        try:
            return attempt(text)
        except ProcessingError as exc:
            logger.debug("%s did not apply: %s", attempt.__name__, exc)
    return fallback(text)


def _load_structured(text: str) -> Any:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        raise ProcessingError(f"not JSON: {exc}") from exc
    if not isinstance(data, (dict, list)):
        raise ProcessingError(f"JSON is a {type(data).__name__}, not an object or array")
    return data


def parse_fenced_json(text: str) -> Any:
    """Parse the first fenced code block, with or without a ``json`` tag."""
    match = _FENCE_RE.search(text)
    if match is None:
        raise ProcessingError("no fenced code block")
    return _load_structured(match.group(1))


def parse_labelled_json(text: str) -> Any:
    """Parse the whole text as JSON, ignoring a leading ``json`` label."""
    return _load_structured(_JSON_LABEL_RE.sub("", text.strip(), count=1))


def parse_markdown_days(text: str) -> list[dict[str, Any]]:
    """
    Split ``## Day N`` sections, then ``### `` subsections within each day.

    Text before the first day heading is dropped. Without any day heading the
    whole text is treated as a single day.
    """
    parts = _DAY_HEADING_RE.split(text)
    if len(parts) == 1:
        chunks: list[tuple[str | None, str]] = [(None, text)]
    else:
        chunks = list(zip(parts[1::2], parts[2::2]))

    days: list[dict[str, Any]] = []
    for number, body in chunks:
        if not body.strip() and number is None:
            continue
        sections = [s.strip() for s in body.split(_SUBSECTION_SEP)]
        day: dict[str, Any] = {"title": sections[0].lstrip(":").strip()}
        if number is not None:
            day["day"] = int(number)
        for section in sections[1:]:
            heading, _, content = section.partition("\n")
            day[heading.strip().lower()] = content.strip()
        days.append(day)

    if not days:
        raise ProcessingError("itinerary text is empty")
    return days


def _insights_fallback(text: str) -> dict[str, Any]:
    return {
        "raw_insights": text,
        "sections": [s for s in text.split("\n\n") if s.strip()],
    }


def _itinerary_fallback(text: str) -> dict[str, Any]:
    return {"error": "Failed to process itinerary", "raw_text": text}


def parse_insights(raw: Any) -> Any:
    if not isinstance(raw, str):
        return raw
    return first_successful(
        raw, (parse_fenced_json, parse_labelled_json), _insights_fallback
    )


def parse_itinerary(text: str) -> Any:
    stripped = text.strip()
    if stripped.startswith(("{", "[")):
        return first_successful(stripped, (_load_structured,), _itinerary_fallback)
    return first_successful(stripped, (parse_markdown_days,), _itinerary_fallback)


def _optional_text(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _as_translation(data: Any) -> TranslationResult:
    if not isinstance(data, dict) or "translation" not in data:
        raise ProcessingError("no 'translation' field")
    return TranslationResult(
        translation=str(data["translation"]),
        notes=_optional_text(data.get("translation_notes") or data.get("notes")),
        cultural_adaptations=_optional_text(data.get("cultural_adaptations")),
    )


def _translation_from_fence(text: str) -> TranslationResult:
    return _as_translation(parse_fenced_json(text))


def _translation_from_body(text: str) -> TranslationResult:
    return _as_translation(parse_labelled_json(text))


def parse_translation(text: str) -> str | TranslationResult:
    """Structured translation when the model followed the format, else the text."""
    return first_successful(
        text, (_translation_from_fence, _translation_from_body), lambda t: t
    )
