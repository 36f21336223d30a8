"""
Line classifier.

Decides, per raw line, whether it is a section header, a cardholder marker,
a transaction row or noise. Section headers and cardholder markers update the
parse context in place; the classifier never looks at more than one line.
"""

import re
from enum import Enum
from typing import Optional

from .models import BankKind, ParseContext, Section


class LineKind(str, Enum):
    SECTION_HEADER = "section_header"
    CARDHOLDER = "cardholder"
    DATA = "data"
    NOISE = "noise"


DATE_PREFIX_RE = re.compile(r"^\d{2}-\d{2}-\d{4}")
IDFC_ROW_RE = re.compile(
    r'"(?P<description>[^"]+)",\s*(?P<date>\d{2}-\d{2}-\d{4}),\s*'
    r"(?P<amount>\d+(?:\.\d+)?)\s*(?P<marker>cr)?",
    re.IGNORECASE,
)

SINGLE_TOKEN_MARKER_RE = re.compile(r"^,+[^,]+(,+)?$")
HDFC_MARKER_RE = re.compile(r"^,([^,]+),")


def _single_token_marker(line: str) -> Optional[str]:
    if not SINGLE_TOKEN_MARKER_RE.match(line):
        return None
    parts = [p.strip() for p in line.split(",") if p.strip()]
    return parts[0] if len(parts) == 1 else None


def _hdfc_marker(line: str) -> Optional[str]:
    match = HDFC_MARKER_RE.match(line)
    if not match:
        return None
    name = match.group(1).strip()
    return name or None


def _icici_marker(line: str) -> Optional[str]:
    parts = [p.strip() for p in line.split(",")]
    if len(parts) > 2 and parts[2] and "Transaction" not in parts[2]:
        return parts[2]
    return None


def detect_section(line: str) -> Optional[Section]:
    """Return the section a header line declares, or None."""
    if "Domestic Transactions" in line:
        return Section.DOMESTIC
    if "International Transaction" in line:
        return Section.INTERNATIONAL
    return None


def is_data_row(line: str, bank: BankKind) -> bool:
    """Check the bank's data-row shape."""
    if bank == BankKind.IDFC:
        return IDFC_ROW_RE.search(line) is not None
    if bank == BankKind.GENERIC:
        return DATE_PREFIX_RE.match(line) is not None or IDFC_ROW_RE.search(line) is not None
    return DATE_PREFIX_RE.match(line) is not None


def classify(line: str, context: ParseContext, bank: BankKind) -> LineKind:
    """
    Classify one trimmed line and apply its side effects to ``context``.

    Precedence is section header, cardholder marker, data row, noise. For the
    generic path ``bank`` is the latched bank when one is known; the generic
    rules apply to markers and rows either way.
    """
    if not line:
        return LineKind.NOISE

    section = detect_section(line)
    if section is not None:
        context.section = section
        if section == Section.DOMESTIC:
            context.currency = "INR"
        return LineKind.SECTION_HEADER

    if bank == BankKind.HDFC:
        name = _hdfc_marker(line)
        if name:
            context.card_name = name
            return LineKind.CARDHOLDER
    elif bank == BankKind.ICICI:
        if line.startswith(",,"):
            name = _icici_marker(line)
            if name:
                context.card_name = name
                return LineKind.CARDHOLDER
            return LineKind.NOISE
    else:
        name = _single_token_marker(line)
        if name:
            context.card_name = name
            return LineKind.CARDHOLDER

    if is_data_row(line, bank):
        return LineKind.DATA

    return LineKind.NOISE
