"""Bank detection from file names and statement header lines."""

from typing import Callable, Dict, Optional

from .models import BankKind


class BankFormatDetector:
    """Detects the statement layout from the file name or from content."""

    # Checked in this order; first substring hit wins
    FILENAME_TOKENS = [
        (BankKind.IDFC, "idfc"),
        (BankKind.AXIS, "axis"),
        (BankKind.HDFC, "hdfc"),
        (BankKind.ICICI, "icici"),
    ]

    # Header signatures, only consulted by the generic path
    SIGNATURES: Dict[BankKind, Callable[[str], bool]] = {
        BankKind.HDFC: lambda line: (
            "Domestic Transactions," in line or "International Transaction," in line
        ),
        BankKind.ICICI: lambda line: (
            "Transaction Description" in line
            and "Debit,Credit" in line
            and "Debit,Credit,Transaction Details" not in line
        ),
        BankKind.AXIS: lambda line: "Debit,Credit,Transaction Details" in line,
    }

    @classmethod
    def detect_from_filename(cls, filename: Optional[str]) -> BankKind:
        """Pick a bank by case-insensitive substring match on the file name."""
        if not filename:
            return BankKind.GENERIC

        name = filename.lower()
        for bank, token in cls.FILENAME_TOKENS:
            if token in name:
                return bank

        return BankKind.GENERIC

    @classmethod
    def detect_from_line(cls, line: str) -> Optional[BankKind]:
        """Return the bank whose header signature this line carries, if any."""
        for bank, matches in cls.SIGNATURES.items():
            if matches(line):
                return bank
        return None


def detect_bank(filename: Optional[str]) -> BankKind:
    """Convenience wrapper used by the upload layer and the CLI."""
    return BankFormatDetector.detect_from_filename(filename)
