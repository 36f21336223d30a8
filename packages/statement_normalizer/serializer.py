"""CSV rendering of canonical transactions."""

from typing import Iterable, List

import pandas as pd

from .models import CSV_COLUMNS, CanonicalTransaction

HEADER = ",".join(CSV_COLUMNS)

# Columns wrapped in double quotes when quote_text_fields is on
TEXT_COLUMNS = ("Date", "Transaction Description")


def format_row(transaction: CanonicalTransaction, quote_text_fields: bool = False) -> str:
    """Render one record as a comma-joined line (no line terminator)."""
    values = transaction.to_dict()
    if quote_text_fields:
        for column in TEXT_COLUMNS:
            values[column] = f'"{values[column]}"'
    return ",".join(str(values[column]) for column in CSV_COLUMNS)


def to_csv(
    transactions: Iterable[CanonicalTransaction], quote_text_fields: bool = False
) -> str:
    """
    Render the header plus one line per transaction.

    Lines are joined with ``\\n`` and there is no trailing newline, so an
    empty statement renders as the header line alone. Fields are joined
    as-is; ``quote_text_fields`` quotes Date and Transaction Description,
    which the ICICI export consumer expects.
    """
    lines: List[str] = [HEADER]
    lines.extend(format_row(t, quote_text_fields) for t in transactions)
    return "\n".join(lines)


def to_csv_bytes(
    transactions: Iterable[CanonicalTransaction], quote_text_fields: bool = False
) -> bytes:
    return to_csv(transactions, quote_text_fields).encode("utf-8")


def to_dataframe(transactions: Iterable[CanonicalTransaction]) -> pd.DataFrame:
    """Build a DataFrame with the output columns, amounts kept numeric."""
    records = [
        {
            "Date": t.date,
            "Transaction Description": t.description,
            "Debit": t.debit,
            "Credit": t.credit,
            "Currency": t.currency,
            "CardName": t.card_name,
            "Transaction": t.section.value,
            "Location": t.location,
        }
        for t in transactions
    ]
    return pd.DataFrame(records, columns=CSV_COLUMNS)
