"""Parsed-view JSON formatter.

WHY: The parsed view shows lyrics as structured data next to the raw
provider response: ``{"lines": [...], "score": ...}``. Consumers index
into it by field name, so a malformed shape must fail loudly here rather
than downstream.

HOW: Build the pydantic ParsedView from the document, dump it by alias,
validate the dict against the bundled JSON schema, then serialize with
two-space indentation.

RULES:
- Output suffix: "-parsed.json"
- Media type: "application/json"
- Non-ASCII text is written as-is (ensure_ascii=False)
- Validate against schemas/parsed_lyrics.schema.json; raise on failure
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import jsonschema

from lyrics_timeline.core.ir import LyricsDocument
from lyrics_timeline.formatters.base import BaseFormatter, FormatterOutput
from lyrics_timeline.views import ParsedView

_SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "parsed_lyrics.schema.json"

_CACHED_SCHEMA: Optional[dict] = None


def _get_schema() -> dict[str, Any]:
    """Load and cache the parsed-view JSON schema."""
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(_SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


class ParsedJSONFormatter(BaseFormatter):
    """Formatter that produces the parsed-view JSON."""

    @property
    def name(self) -> str:
        return "Parsed JSON"

    def format(self, document: LyricsDocument) -> list[FormatterOutput]:
        """Render the document as parsed-view JSON.

        Raises:
            jsonschema.ValidationError: If the generated JSON does not
                conform to the parsed-view schema.
        """
        output = ParsedView.from_document(document).to_json_dict()
        jsonschema.validate(instance=output, schema=_get_schema())

        return [
            FormatterOutput(
                suffix="-parsed.json",
                content=json.dumps(output, indent=2, ensure_ascii=False),
                media_type="application/json",
            )
        ]
