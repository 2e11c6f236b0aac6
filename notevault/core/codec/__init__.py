"""Record codec for notes and structured documents."""

from notevault.core.codec.record_codec import (
    decode_document,
    decode_note,
    encode_document,
    encode_note,
    split_record,
)

__all__ = [
    "encode_note",
    "decode_note",
    "split_record",
    "encode_document",
    "decode_document",
]
