"""
Data model for the statement normalizer.

Everything the engine passes between its stages lives here: the bank and
section enums, the per-statement parse context, the raw tuple produced by a
field extractor, and the canonical record that ends up in the output CSV.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class BankKind(str, Enum):
    """Supported statement layouts."""

    IDFC = "IDFC"
    AXIS = "Axis"
    HDFC = "HDFC"
    ICICI = "ICICI"
    GENERIC = "Generic"


class Section(str, Enum):
    """Transaction grouping declared by the statement's own headers."""

    DOMESTIC = "Domestic"
    INTERNATIONAL = "International"


DEFAULT_CURRENCY = "INR"
DEFAULT_CARD_NAME = "Unknown"
UNKNOWN_LOCATION = "unknown"

# Output column order
CSV_COLUMNS = [
    "Date",
    "Transaction Description",
    "Debit",
    "Credit",
    "Currency",
    "CardName",
    "Transaction",
    "Location",
]


@dataclass
class RawLine:
    """A single input line and its zero-based position."""

    index: int
    text: str


@dataclass
class ParseContext:
    """
    Running state for one statement.

    Mutated in place by the line classifier when it sees a section header or
    a cardholder marker; read by the extractors and the normalizer. ``bank``
    is only used by the generic path and is set at most once.
    """

    section: Section = Section.DOMESTIC
    currency: str = DEFAULT_CURRENCY
    card_name: str = DEFAULT_CARD_NAME
    bank: Optional[BankKind] = None


@dataclass(frozen=True)
class RawTransaction:
    """Fields recovered from one data line, before normalization."""

    date: str
    description: str
    debit: Union[str, float]
    credit: Union[str, float]
    bank: BankKind = BankKind.GENERIC


@dataclass(frozen=True)
class CanonicalTransaction:
    """Standardized transaction structure."""

    date: str
    description: str
    debit: float
    credit: float
    currency: str
    card_name: str
    section: Section
    location: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dict keyed by the output column names."""
        return {
            "Date": self.date,
            "Transaction Description": self.description,
            "Debit": f"{self.debit:.2f}",
            "Credit": f"{self.credit:.2f}",
            "Currency": self.currency,
            "CardName": self.card_name,
            "Transaction": self.section.value,
            "Location": self.location,
        }


@dataclass
class ParseResult:
    """Ordered transactions of one statement plus line counters."""

    bank: BankKind
    transactions: List[CanonicalTransaction] = field(default_factory=list)
    lines_read: int = 0
    lines_dropped: int = 0
    detected_bank: Optional[BankKind] = None

    def __len__(self) -> int:
        return len(self.transactions)

    def __iter__(self):
        return iter(self.transactions)
