"""Statements service: upload checks and dispatch to the normalizer.

Keeps the router thin: validates the uploaded file, picks the bank from the
file name and returns the canonical CSV with its download name.
"""

from dataclasses import dataclass
from typing import Optional

from apps.api.core.errors import PayloadTooLargeError, UnsupportedFileError, ValidationError
from packages.statement_normalizer import BankKind, detect_bank, normalize, output_filename

ALLOWED_EXTENSIONS = (".csv", ".txt")


@dataclass
class NormalizedStatement:
    filename: str
    bank: BankKind
    content: bytes


def validate_upload(filename: str, size: int, max_bytes: int) -> None:
    """Reject unsupported extensions, empty files and oversized uploads."""
    if not any(filename.lower().endswith(ext) for ext in ALLOWED_EXTENSIONS):
        raise UnsupportedFileError(
            f"Unsupported file type. Accepted: {', '.join(ALLOWED_EXTENSIONS)}"
        )
    if size == 0:
        raise ValidationError("Uploaded file is empty")
    if size > max_bytes:
        raise PayloadTooLargeError(f"File too large (max {max_bytes // (1024 * 1024)}MB)")


def normalize_upload(
    filename: str,
    contents: bytes,
    *,
    max_bytes: int,
    quote_text_fields: bool,
    bank: Optional[BankKind] = None,
) -> NormalizedStatement:
    """Validate, detect the bank unless given, and normalize one upload."""
    validate_upload(filename, len(contents), max_bytes)
    selected = bank or detect_bank(filename)
    content = normalize(selected, contents, quote_text_fields=quote_text_fields)
    return NormalizedStatement(
        filename=output_filename(filename), bank=selected, content=content
    )
