"""Text-offset based location finders.

Locations are recovered by scanning the raw document text rather than
by tracking source positions while parsing. When nothing can be found
the zero-width range at 0,0 is returned.
"""

import json
import posixpath
import re

from contentguard.core.types import Position, Range


def offset_to_position(text: str, offset: int) -> Position:
    """Map a character offset to a zero-based line/character position."""
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset)
    line_start = text.rfind("\n", 0, offset) + 1
    return Position(line, offset - line_start)


def span_to_range(text: str, start: int, end: int) -> Range:
    return Range(offset_to_position(text, start), offset_to_position(text, end))


def json_error_range(text: str, error: Exception) -> Range:
    """One-character range at the offset a JSON parse error points to."""
    offset = getattr(error, "pos", None)
    if not isinstance(offset, int):
        return Range.placeholder()
    start = offset_to_position(text, offset)
    return Range(start, Position(start.line, start.character + 1))


def field_range(text: str, field_name: str, for_missing: bool = False) -> Range:
    """Locate a '"field": value' pair in raw JSON text.

    Args:
        text: Raw JSON document
        field_name: Property name to look for
        for_missing: When the property is absent, point at the last
            closing brace as the place to insert it

    Returns:
        Range of the pair, of the closing brace, or the 0,0 placeholder
    """
    pattern = re.compile(rf'"{re.escape(field_name)}"\s*:\s*"?([^,"{{}}]*)"?')
    match = pattern.search(text)
    if match:
        return span_to_range(text, match.start(), match.end())

    if for_missing:
        closing_brace = text.rfind("}")
        if closing_brace >= 0:
            return span_to_range(text, closing_brace, closing_brace + 1)

    return Range.placeholder()


def reference_range(text: str, reference: str) -> Range:
    """Range of the first occurrence of a reference's file name."""
    file_name = posixpath.basename(reference.rstrip("/"))
    if not file_name:
        return Range.placeholder()

    index = text.find(file_name)
    if index < 0:
        return Range.placeholder()
    return span_to_range(text, index, index + len(file_name))


def parse_json(text: str):
    """Parse JSON, returning (document, None) or (None, error)."""
    try:
        return json.loads(text), None
    except (json.JSONDecodeError, RecursionError) as e:
        return None, e
