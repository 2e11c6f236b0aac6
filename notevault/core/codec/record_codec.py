"""
Record codec - pure text encoding of persisted records.

Notes are written as a self-describing record::

    ---
    { ...JSON header: every note field except rawText... }
    ---

    <rawText>

Folders, the relationship graph and canvases are plain JSON documents.
Nothing in this module touches the filesystem.
"""

import json
import re
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from notevault.models.note import Note, default_content
from notevault.utils.exceptions import MalformedRecordError
from notevault.utils.logger import get_logger

logger = get_logger(__name__)

HEADER_DELIMITER = "---"

_RECORD_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(?P<header>.*?)\r?\n---[ \t]*(?:\r?\n|\Z)(?P<body>.*)\Z",
    re.DOTALL,
)

# The record key is authoritative for the id; the body is authoritative for rawText.
_HEADER_KEYS = frozenset(
    field.alias or name for name, field in Note.model_fields.items()
) - {"id", "rawText"}


def split_record(text: str) -> tuple[dict[str, Any], str]:
    """
    Split a note record into its header mapping and body.

    A record without a well-formed delimiter region is all body. A
    delimiter region whose header is not a JSON object yields an empty
    header and keeps the body that follows it.

    Args:
        text: Raw record text

    Returns:
        Tuple of (header dict, body text)
    """
    match = _RECORD_PATTERN.match(text)
    if match is None:
        return {}, text

    body = match.group("body")
    # Drop the blank separator line written by encode_note
    if body.startswith("\r\n"):
        body = body[2:]
    elif body.startswith("\n"):
        body = body[1:]

    try:
        header = json.loads(match.group("header"))
    except json.JSONDecodeError as e:
        logger.warning(f"Unparseable note header, using defaults: {e}")
        return {}, body

    if not isinstance(header, dict):
        logger.warning(f"Note header is {type(header).__name__}, not an object; using defaults")
        return {}, body

    return header, body


def encode_note(note: Note) -> str:
    """
    Encode a note as header + body record text.

    Args:
        note: Note to encode

    Returns:
        Record text
    """
    header = json.dumps(note.header(), indent=2, ensure_ascii=False)
    return f"{HEADER_DELIMITER}\n{header}\n{HEADER_DELIMITER}\n\n{note.raw_text}"


def decode_note(note_id: str, text: str) -> Note:
    """
    Decode a note record. Never fails on malformed input.

    Missing header fields take note defaults. A stored ``content`` is used
    verbatim; otherwise it is synthesised from the body. A header whose
    values do not validate is discarded as a whole.

    Args:
        note_id: Record key the text was read from
        text: Raw record text

    Returns:
        Decoded note
    """
    header, body = split_record(text)

    fields = {key: value for key, value in header.items() if key in _HEADER_KEYS}
    fields["id"] = note_id
    fields["rawText"] = body
    if fields.get("content") is None:
        fields["content"] = default_content(body)

    try:
        return Note.model_validate(fields)
    except PydanticValidationError as e:
        logger.warning(
            f"Malformed header in note {note_id} ({e.error_count()} errors), falling back to defaults"
        )
        return Note(id=note_id, raw_text=body, content=default_content(body))


def encode_document(data: Any) -> str:
    """Encode a structured document (folders, graph, canvas) as JSON text."""
    return json.dumps(data, indent=2, ensure_ascii=False)


def decode_document(text: str, key: str) -> Any:
    """
    Decode a structured document.

    Args:
        text: JSON text
        key: Record key, used in the error message

    Raises:
        MalformedRecordError: If the text is not valid JSON
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedRecordError(
            f"Failed to parse {key}: {e}", context={"key": key}
        ) from e
