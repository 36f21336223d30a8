"""
Normalization entry points used by the upload layer and the CLI.

``normalize`` is the collaborator contract: a bank kind and an input stream
in, UTF-8 CSV bytes out. ``normalize_file`` adds file-name based bank
detection and an atomic write of the result.
"""

import io
import os
import tempfile
from pathlib import Path
from typing import IO, Optional, Union

import structlog

from .detector import detect_bank
from .errors import StatementReadError, StatementWriteError
from .models import BankKind, ParseResult
from .parser import StatementParser
from .serializer import to_csv_bytes

logger = structlog.get_logger()

PathLike = Union[str, Path]


def parse_stream(bank: BankKind, input_stream, source: str = "<stream>") -> ParseResult:
    """
    Parse a statement from a string, text lines, a text stream or bytes.

    Binary input is decoded as UTF-8 (a leading BOM is tolerated). Read and
    decode failures surface as a single StatementReadError.
    """
    if isinstance(input_stream, str):
        input_stream = input_stream.splitlines()
    elif isinstance(input_stream, (bytes, bytearray)):
        input_stream = io.BytesIO(input_stream)

    wrapper = None
    lines = input_stream
    if isinstance(input_stream, (io.RawIOBase, io.BufferedIOBase)):
        wrapper = io.TextIOWrapper(input_stream, encoding="utf-8-sig", newline=None)
        lines = wrapper

    try:
        return StatementParser(bank).parse(lines)
    except UnicodeDecodeError as e:
        raise StatementReadError(source, f"not valid UTF-8 text ({e.reason})") from e
    except OSError as e:
        raise StatementReadError(source, str(e)) from e
    finally:
        if wrapper is not None:
            # Leave the caller's stream open
            wrapper.detach()


def normalize(
    bank: BankKind, input_stream: Union[IO, str, bytes], *, quote_text_fields: bool = False
) -> bytes:
    """
    Normalize one statement.

    Args:
        bank: Layout selected by the caller; Generic detects it from content.
        input_stream: Text or binary stream, str or bytes with the statement export.
        quote_text_fields: Quote Date and Transaction Description columns.

    Returns:
        The canonical CSV document as UTF-8 bytes.
    """
    result = parse_stream(BankKind(bank), input_stream)
    return to_csv_bytes(result.transactions, quote_text_fields=quote_text_fields)


def output_filename(input_name: str) -> str:
    """Name of the normalized file: ``Input`` becomes ``Output``."""
    return input_name.replace("Input", "Output")


def _atomic_write(target: Path, payload: bytes) -> None:
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
        os.replace(tmp_path, target)
    except OSError as e:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise StatementWriteError(str(target), str(e)) from e


def normalize_file(
    input_path: PathLike,
    output_path: Optional[PathLike] = None,
    *,
    bank: Optional[BankKind] = None,
    quote_text_fields: bool = False,
) -> bytes:
    """
    Normalize a statement file, detecting the bank from its name if needed.

    When ``output_path`` is given the CSV is written there atomically; a
    failure never leaves a partial file behind. The CSV bytes are returned
    either way.
    """
    path = Path(input_path)
    selected = BankKind(bank) if bank is not None else detect_bank(path.name)

    try:
        with open(path, "rb") as f:
            result = parse_stream(selected, f, source=str(path))
    except FileNotFoundError as e:
        raise StatementReadError(str(path), "file not found") from e
    except StatementReadError:
        raise
    except OSError as e:
        raise StatementReadError(str(path), str(e)) from e

    payload = to_csv_bytes(result.transactions, quote_text_fields=quote_text_fields)

    if output_path is not None:
        _atomic_write(Path(output_path), payload)
        logger.info(
            "statement_written",
            source=str(path),
            target=str(output_path),
            bank=selected.value,
            transactions=len(result.transactions),
        )

    return payload
