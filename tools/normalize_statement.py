"""Command line entry point: normalize one statement file to canonical CSV.

Usage:
    python -m tools.normalize_statement Input_HDFC.csv -o Output_HDFC.csv
"""

import argparse
import sys
from typing import List, Optional

from apps.api.core.logging import setup_logging
from packages.statement_normalizer.errors import StatementError
from packages.statement_normalizer.models import BankKind
from packages.statement_normalizer.service import normalize_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Normalize a credit-card statement export into canonical CSV"
    )
    parser.add_argument("file", help="Path to the statement CSV export")
    parser.add_argument("-o", "--output", help="Write the result here instead of stdout")
    parser.add_argument(
        "--bank",
        choices=[b.value for b in BankKind],
        help="Force a layout instead of detecting it from the file name",
    )
    parser.add_argument(
        "--quote-text-fields",
        action="store_true",
        help="Quote the Date and Transaction Description columns",
    )
    parser.add_argument("--log-level", default="WARNING", help="Python log level")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(log_level=args.log_level, json_output=False, stream=sys.stderr)

    try:
        payload = normalize_file(
            args.file,
            args.output,
            bank=BankKind(args.bank) if args.bank else None,
            quote_text_fields=args.quote_text_fields,
        )
    except StatementError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.output:
        sys.stdout.write(payload.decode("utf-8"))
        sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
