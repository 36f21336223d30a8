"""
Per-bank field extractors.

Each extractor turns one classified data line into a RawTransaction using
its bank's column order and quoting conventions, or returns None when the
line does not fit (summary rows, footers, short rows). Extractors are pure:
they read the parse context but never change it.
"""

import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .classifier import DATE_PREFIX_RE, IDFC_ROW_RE
from .models import BankKind, ParseContext, RawTransaction
from .normalizer import is_credit_marked

_QUOTE_AWARE_SPLIT_RE = re.compile(r',(?=(?:[^"]*"[^"]*")*[^"]*$)')
_NUMERIC_RE = re.compile(r"^\(?[-+]?[\d,]*\.?\d+\)?$")


def split_quoted(line: str) -> List[str]:
    """Split on commas outside double quotes, unquoting each field."""
    fields = _QUOTE_AWARE_SPLIT_RE.split(line)
    return [re.sub(r'^"(.*)"$', r"\1", f.strip()) for f in fields]


def is_numeric(value: str) -> bool:
    return bool(_NUMERIC_RE.match((value or "").strip()))


def _signed_amount(amount: str) -> Dict[str, str]:
    """Route a single amount column to debit or credit by its Cr marker."""
    if is_credit_marked(amount):
        return {"debit": "", "credit": amount}
    return {"debit": amount, "credit": ""}


class Extractor(ABC):
    """Turns one data line into a RawTransaction."""

    bank: BankKind

    @abstractmethod
    def extract(self, line: str, context: ParseContext) -> Optional[RawTransaction]:
        ...


class IDFCExtractor(Extractor):
    """``"<description>",<MM-DD-YYYY>,<amount>[Cr]``, bound by regex."""

    bank = BankKind.IDFC

    def extract(self, line: str, context: ParseContext) -> Optional[RawTransaction]:
        match = IDFC_ROW_RE.search(line)
        if not match:
            return None

        amount = match.group("amount")
        if match.group("marker"):
            debit, credit = "", amount
        else:
            debit, credit = amount, ""

        return RawTransaction(
            date=match.group("date"),
            description=match.group("description").strip(),
            debit=debit,
            credit=credit,
            bank=self.bank,
        )


class HDFCExtractor(Extractor):
    """Plain comma split: date, description, signed amount."""

    bank = BankKind.HDFC

    def extract(self, line: str, context: ParseContext) -> Optional[RawTransaction]:
        fields = [f.strip() for f in line.split(",")]
        if len(fields) < 3 or not DATE_PREFIX_RE.match(fields[0]):
            return None

        date, description, amount = fields[:3]
        return RawTransaction(
            date=date, description=description, bank=self.bank, **_signed_amount(amount)
        )


class ICICIExtractor(Extractor):
    """Quote-aware split: date, description, debit, credit."""

    bank = BankKind.ICICI

    def extract(self, line: str, context: ParseContext) -> Optional[RawTransaction]:
        fields = split_quoted(line)
        if len(fields) < 4 or not DATE_PREFIX_RE.match(fields[0]):
            return None

        date, description, debit, credit = fields[:4]
        return RawTransaction(
            date=date, description=description, debit=debit, credit=credit, bank=self.bank
        )


class AxisExtractor(Extractor):
    """Quote-aware split: date, debit, credit, description."""

    bank = BankKind.AXIS

    def extract(self, line: str, context: ParseContext) -> Optional[RawTransaction]:
        fields = split_quoted(line)
        if len(fields) < 4 or not DATE_PREFIX_RE.match(fields[0]):
            return None

        date, debit, credit, description = fields[:4]
        return RawTransaction(
            date=date, description=description, debit=debit, credit=credit, bank=self.bank
        )


class GenericExtractor(Extractor):
    """
    Fallback for statements whose bank is only known from a header line.

    Tries, in order: the IDFC quoted triple, the ``date, description, debit,
    credit`` layout and the Axis ``date, debit, credit, description`` layout.
    The second column decides between the last two: a word means the
    description comes first, an amount or a blank means the amounts do. Rows
    carry the latched bank so its date formats apply.
    """

    bank = BankKind.GENERIC

    def __init__(self):
        self._idfc = IDFCExtractor()

    def extract(self, line: str, context: ParseContext) -> Optional[RawTransaction]:
        if context.bank is None:
            return None

        raw = self._idfc.extract(line, context)
        if raw is not None:
            return raw

        fields = split_quoted(line)
        if not fields or not DATE_PREFIX_RE.match(fields[0]):
            return None

        for attempt in (self._description_first, self._amounts_first):
            raw = attempt(fields, context.bank)
            if raw is not None:
                return raw
        return None

    @staticmethod
    def _description_first(fields: List[str], bank: BankKind) -> Optional[RawTransaction]:
        if len(fields) < 3 or not fields[1] or is_numeric(fields[1]):
            return None

        padded = fields + [""] * (4 - len(fields))
        date, description, debit, credit = padded[:4]
        # HDFC puts a Cr-marked signed amount in the debit column
        if is_credit_marked(debit) and not credit:
            debit, credit = "", debit
        return RawTransaction(
            date=date, description=description, debit=debit, credit=credit, bank=bank
        )

    @staticmethod
    def _amounts_first(fields: List[str], bank: BankKind) -> Optional[RawTransaction]:
        if len(fields) < 4:
            return None

        date, debit, credit, description = fields[:4]
        amounts = [debit, credit]
        if not all(is_numeric(a) or not a for a in amounts) or not any(amounts):
            return None
        return RawTransaction(
            date=date, description=description, debit=debit, credit=credit, bank=bank
        )


EXTRACTORS: Dict[BankKind, type] = {
    BankKind.IDFC: IDFCExtractor,
    BankKind.HDFC: HDFCExtractor,
    BankKind.ICICI: ICICIExtractor,
    BankKind.AXIS: AxisExtractor,
    BankKind.GENERIC: GenericExtractor,
}


def get_extractor(bank: BankKind) -> Extractor:
    """Instantiate the extractor registered for ``bank``."""
    return EXTRACTORS[BankKind(bank)]()
