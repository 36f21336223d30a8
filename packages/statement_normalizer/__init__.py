"""
SCALE Statement Normalizer

Credit-card statement parsing and normalization into one canonical CSV.
"""

__version__ = "0.1.0"

from .detector import BankFormatDetector, detect_bank
from .errors import StatementError, StatementReadError, StatementWriteError
from .models import BankKind, CanonicalTransaction, ParseContext, ParseResult, Section
from .parser import StatementParser, parse_statement
from .serializer import to_csv, to_dataframe
from .service import normalize, normalize_file, output_filename

__all__ = [
    "BankFormatDetector",
    "BankKind",
    "CanonicalTransaction",
    "ParseContext",
    "ParseResult",
    "Section",
    "StatementError",
    "StatementParser",
    "StatementReadError",
    "StatementWriteError",
    "detect_bank",
    "normalize",
    "normalize_file",
    "output_filename",
    "parse_statement",
    "to_csv",
    "to_dataframe",
]
