"""
Common normalizer.

Turns a RawTransaction plus the current ParseContext into a
CanonicalTransaction: dates are reformatted to DD-MM-YYYY, amounts are parsed
and settled into a debit or a credit, and the trailing tokens of the
description are split off into currency and location.

The currency/location heuristics differ per bank and are kept as separate
rules on purpose; real statements depend on each bank's exact behaviour.
"""

import re
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple, Union

from .models import (
    UNKNOWN_LOCATION,
    BankKind,
    CanonicalTransaction,
    ParseContext,
    RawTransaction,
    Section,
)

OUTPUT_DATE_FORMAT = "%d-%m-%Y"

# Each candidate carries the digit shape it must match exactly
_DATE_SHAPES = {
    "%d-%m-%Y": re.compile(r"^\d{2}-\d{2}-\d{4}$"),
    "%m-%d-%Y": re.compile(r"^\d{2}-\d{2}-\d{4}$"),
    "%d-%m-%y": re.compile(r"^\d{2}-\d{2}-\d{2}$"),
}

DATE_FORMATS: Dict[BankKind, List[str]] = {
    BankKind.IDFC: ["%m-%d-%Y"],
}
DEFAULT_DATE_FORMATS = ["%d-%m-%Y", "%m-%d-%Y", "%d-%m-%y"]

CURRENCY_VOCABULARY_RE = re.compile(r"(USD|EUR|GBP|POUND)\s*$", re.IGNORECASE)
CREDIT_MARKER_RE = re.compile(r"cr\s*$", re.IGNORECASE)
_AMOUNT_NOISE_RE = re.compile(r"[,\s₹$€£]|(?:cr|dr)\s*$", re.IGNORECASE)
_NUMERIC_PREFIX_RE = re.compile(r"^[-+]?(?:\d+(?:\.\d*)?|\.\d+)")

# (description, currency, location)
Split = Tuple[str, str, str]


def parse_date(value: str, bank: BankKind) -> str:
    """
    Reformat ``value`` to DD-MM-YYYY using the bank's candidate formats.

    Parsing is strict: the digit shape must match the format exactly and the
    date must exist on the calendar. Returns the input unchanged when no
    candidate fits.
    """
    date_str = (value or "").strip()
    for fmt in DATE_FORMATS.get(bank, DEFAULT_DATE_FORMATS):
        if not _DATE_SHAPES[fmt].match(date_str):
            continue
        try:
            return datetime.strptime(date_str, fmt).strftime(OUTPUT_DATE_FORMAT)
        except ValueError:
            continue
    return value


def parse_amount(amount_value: Union[str, float, int, None]) -> float:
    """Parse amount, handling currency symbols, separators, Cr/Dr markers and (negatives)."""
    if amount_value is None:
        return 0.0

    if isinstance(amount_value, (int, float)):
        return float(amount_value)

    amount_str = _AMOUNT_NOISE_RE.sub("", str(amount_value))

    # Handle parentheses for negative numbers
    if "(" in amount_str and ")" in amount_str:
        amount_str = "-" + amount_str.replace("(", "").replace(")", "")

    match = _NUMERIC_PREFIX_RE.match(amount_str)
    if not match:
        return 0.0

    try:
        return float(match.group(0))
    except ValueError:
        return 0.0


def is_credit_marked(amount_value: str) -> bool:
    """True when a signed-amount column carries the trailing Cr marker."""
    return bool(CREDIT_MARKER_RE.search((amount_value or "").strip()))


def settle_amounts(debit: float, credit: float) -> Tuple[float, float]:
    """
    Collapse a debit/credit pair so that at most one side is nonzero.

    A negative debit reads as a credit and vice versa; a row carrying both
    sides keeps only the net.
    """
    net = round(debit - credit, 2)
    if net >= 0:
        return abs(net), 0.0
    return 0.0, -net


def _letters_only(token: str) -> str:
    return re.sub(r"[^a-zA-Z]", "", token).lower()


def _tokens(description: str) -> List[str]:
    return description.split()


# --- Domestic rules --------------------------------------------------------


def split_trailing_location(description: str, base_currency: str) -> Split:
    """Last token is the location; the rest is the description."""
    parts = _tokens(description)
    if len(parts) < 2:
        return description.strip(), base_currency, UNKNOWN_LOCATION
    location = _letters_only(parts.pop()) or UNKNOWN_LOCATION
    return " ".join(parts), base_currency, location


def split_alphabetic_location(description: str, base_currency: str) -> Split:
    """Like split_trailing_location, but only when the last token is a word."""
    parts = _tokens(description)
    if len(parts) > 1 and re.fullmatch(r"[a-zA-Z]+", parts[-1]):
        location = parts.pop().lower()
        return " ".join(parts), base_currency, location
    return description.strip(), base_currency, UNKNOWN_LOCATION


# --- International rules ---------------------------------------------------


def pop_currency_then_location(description: str, base_currency: str) -> Split:
    """HDFC: last token is the currency, the one before it the location."""
    parts = _tokens(description)
    currency = parts.pop() if parts else "USD"
    location = parts.pop().lower() if parts else UNKNOWN_LOCATION
    return " ".join(parts), currency, location


def pop_currency_and_location_pair(description: str, base_currency: str) -> Split:
    """ICICI: only split when both a location and a currency are present."""
    parts = _tokens(description)
    if len(parts) < 2:
        return description.strip(), base_currency, UNKNOWN_LOCATION
    currency = parts.pop()
    location = parts.pop().lower()
    return " ".join(parts), currency, location


def pop_currency_only(description: str, base_currency: str) -> Split:
    """Axis: last token is the currency; no location is recovered."""
    parts = _tokens(description)
    currency = parts.pop() if parts else "USD"
    return " ".join(parts), currency, UNKNOWN_LOCATION


def match_currency_vocabulary(description: str, base_currency: str) -> Split:
    """
    Generic/IDFC: strip a trailing USD/EUR/GBP/POUND, then a location.

    POUND is reported as GBP. Without a vocabulary hit the base currency is
    kept and only the location is split off.
    """
    currency = base_currency
    match = CURRENCY_VOCABULARY_RE.search(description)
    if match:
        currency = match.group(1).upper().replace("POUND", "GBP")
        description = description[: match.start()].strip()
    return split_trailing_location(description, currency)


SplitRule = Callable[[str, str], Split]

LOCATION_RULES: Dict[Tuple[BankKind, Section], SplitRule] = {
    (BankKind.HDFC, Section.DOMESTIC): split_trailing_location,
    (BankKind.HDFC, Section.INTERNATIONAL): pop_currency_then_location,
    (BankKind.ICICI, Section.DOMESTIC): split_alphabetic_location,
    (BankKind.ICICI, Section.INTERNATIONAL): pop_currency_and_location_pair,
    (BankKind.AXIS, Section.DOMESTIC): split_trailing_location,
    (BankKind.AXIS, Section.INTERNATIONAL): pop_currency_only,
    (BankKind.IDFC, Section.DOMESTIC): split_trailing_location,
    (BankKind.IDFC, Section.INTERNATIONAL): match_currency_vocabulary,
    (BankKind.GENERIC, Section.DOMESTIC): split_trailing_location,
    (BankKind.GENERIC, Section.INTERNATIONAL): match_currency_vocabulary,
}


def split_description(
    description: str, section: Section, rule_bank: BankKind, base_currency: str
) -> Split:
    """Apply the bank's currency/location rule for ``section``."""
    rule = LOCATION_RULES[(rule_bank, section)]
    return rule((description or "").strip(), base_currency)


def normalize_transaction(
    raw: RawTransaction,
    context: ParseContext,
    rule_bank: Optional[BankKind] = None,
) -> CanonicalTransaction:
    """
    Build the canonical record for one extracted row.

    ``raw.bank`` selects the date formats; ``rule_bank`` selects the
    currency/location rule and defaults to ``raw.bank``. The generic path
    passes ``BankKind.GENERIC`` here so every latched bank shares one rule.
    """
    debit, credit = settle_amounts(parse_amount(raw.debit), parse_amount(raw.credit))
    description, currency, location = split_description(
        raw.description, context.section, rule_bank or raw.bank, context.currency
    )

    return CanonicalTransaction(
        date=parse_date(raw.date, raw.bank),
        description=description,
        debit=debit,
        credit=credit,
        currency=currency,
        card_name=context.card_name,
        section=context.section,
        location=location,
    )
