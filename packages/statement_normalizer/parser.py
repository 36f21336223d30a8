"""
Statement Parser - line-oriented driver for credit-card statement exports.

Supports: IDFC, Axis, HDFC, ICICI and a generic fallback that detects the
bank from the statement's own header line.
Features: section/cardholder context tracking, per-bank field extraction,
date/amount/currency/location normalization, document-order output.
"""

from typing import Iterable, Iterator, Optional

import structlog

from .classifier import LineKind, classify
from .detector import BankFormatDetector
from .extractors import Extractor, get_extractor
from .models import (
    BankKind,
    CanonicalTransaction,
    ParseContext,
    ParseResult,
    RawLine,
)
from .normalizer import normalize_transaction

logger = structlog.get_logger()


def iter_lines(lines: Iterable[str]) -> Iterator[RawLine]:
    """Number the input lines and strip their line endings (CRLF or LF)."""
    for index, text in enumerate(lines):
        yield RawLine(index=index, text=text.rstrip("\r\n"))


class StatementParser:
    """
    Single-pass parser for one statement at a time.

    The parser itself holds no per-statement state: every call to ``parse``
    or ``iter_transactions`` starts from a fresh ParseContext, so one
    instance can be reused across files.
    """

    def __init__(self, bank: BankKind = BankKind.GENERIC):
        self.bank = BankKind(bank)
        self.extractor: Extractor = get_extractor(self.bank)

    def iter_transactions(
        self, lines: Iterable[str], result: Optional[ParseResult] = None
    ) -> Iterator[CanonicalTransaction]:
        """
        Yield canonical transactions in document order as they are produced.

        When ``result`` is given, its line counters and detected bank are
        updated while iterating.
        """
        context = ParseContext()
        is_generic = self.bank == BankKind.GENERIC

        for raw_line in iter_lines(lines):
            if result is not None:
                result.lines_read += 1

            line = raw_line.text.strip()
            if not line:
                continue

            if is_generic and context.bank is None:
                # Lines before the signature are consumed, the signature line too
                detected = BankFormatDetector.detect_from_line(line)
                if detected is not None:
                    context.bank = detected
                    if result is not None:
                        result.detected_bank = detected
                    logger.info("bank_latched", bank=detected.value, line=raw_line.index)
                else:
                    logger.debug("line_dropped", line=raw_line.index, reason="before_signature")
                    if result is not None:
                        result.lines_dropped += 1
                continue

            kind = classify(line, context, self.bank)
            if kind != LineKind.DATA:
                if kind == LineKind.NOISE:
                    logger.debug("line_dropped", line=raw_line.index, reason="noise")
                    if result is not None:
                        result.lines_dropped += 1
                continue

            raw = self.extractor.extract(line, context)
            if raw is None:
                logger.debug("line_dropped", line=raw_line.index, reason="unparseable_row")
                if result is not None:
                    result.lines_dropped += 1
                continue

            rule_bank = BankKind.GENERIC if is_generic else None
            yield normalize_transaction(raw, context, rule_bank=rule_bank)

        if is_generic and context.bank is None:
            logger.warning("no_bank_signature", lines=result.lines_read if result else None)

    def parse(self, lines: Iterable[str]) -> ParseResult:
        """
        Parse a whole statement.

        Args:
            lines: Any iterable of text lines (open file, StringIO, list).

        Returns:
            ParseResult with transactions in document order.
        """
        result = ParseResult(bank=self.bank)
        for transaction in self.iter_transactions(lines, result):
            result.transactions.append(transaction)

        logger.info(
            "statement_parsed",
            bank=self.bank.value,
            detected_bank=result.detected_bank.value if result.detected_bank else None,
            lines=result.lines_read,
            transactions=len(result.transactions),
            dropped=result.lines_dropped,
        )
        return result

    def parse_text(self, text: str) -> ParseResult:
        """Parse a statement held in memory as one string."""
        return self.parse(text.splitlines())


def parse_statement(lines: Iterable[str], bank: BankKind = BankKind.GENERIC) -> ParseResult:
    """
    Convenience function to parse a statement.

    Args:
        lines: Text lines of the statement.
        bank: Layout to parse with; Generic detects it from the content.

    Returns:
        ParseResult with transactions in document order.
    """
    return StatementParser(bank).parse(lines)
