import pytest

from packages.statement_normalizer.classifier import (
    LineKind,
    classify,
    detect_section,
    is_data_row,
)
from packages.statement_normalizer.models import BankKind, ParseContext, Section


@pytest.fixture
def context():
    return ParseContext()


class TestSectionHeaders:
    def test_detect_section(self):
        assert detect_section("Domestic Transactions") == Section.DOMESTIC
        assert detect_section(",International Transactions,") == Section.INTERNATIONAL
        assert detect_section("05-03-2024,AMAZON BLR,1500.00") is None

    def test_international_header_switches_section(self, context):
        kind = classify("International Transactions", context, BankKind.AXIS)

        assert kind == LineKind.SECTION_HEADER
        assert context.section == Section.INTERNATIONAL

    def test_domestic_header_resets_currency(self, context):
        context.section = Section.INTERNATIONAL
        context.currency = "USD"

        classify("Domestic Transactions,,,", context, BankKind.HDFC)

        assert context.section == Section.DOMESTIC
        assert context.currency == "INR"

    def test_header_wins_over_cardholder_marker(self, context):
        kind = classify(",Domestic Transactions,", context, BankKind.HDFC)

        assert kind == LineKind.SECTION_HEADER
        assert context.card_name == "Unknown"


class TestCardholderMarkers:
    def test_hdfc_marker(self, context):
        kind = classify(",JOHN DOE,,", context, BankKind.HDFC)

        assert kind == LineKind.CARDHOLDER
        assert context.card_name == "JOHN DOE"

    def test_icici_marker(self, context):
        kind = classify(",,JOHN DOE,", context, BankKind.ICICI)

        assert kind == LineKind.CARDHOLDER
        assert context.card_name == "JOHN DOE"

    def test_icici_column_header_is_not_a_name(self, context):
        kind = classify(",,Transaction Details,", context, BankKind.ICICI)

        assert kind == LineKind.NOISE
        assert context.card_name == "Unknown"

    def test_icici_blank_marker_is_noise(self, context):
        assert classify(",,,", context, BankKind.ICICI) == LineKind.NOISE

    @pytest.mark.parametrize("bank", [BankKind.AXIS, BankKind.IDFC, BankKind.GENERIC])
    def test_single_token_marker(self, context, bank):
        kind = classify(",,JANE ROE,,", context, bank)

        assert kind == LineKind.CARDHOLDER
        assert context.card_name == "JANE ROE"

    def test_two_tokens_are_not_a_marker(self, context):
        kind = classify(",,JANE ROE,XX1234", context, BankKind.AXIS)

        assert kind == LineKind.NOISE
        assert context.card_name == "Unknown"

    def test_latest_marker_wins(self, context):
        classify(",JOHN DOE,", context, BankKind.HDFC)
        classify(",JANE ROE,", context, BankKind.HDFC)

        assert context.card_name == "JANE ROE"


class TestDataRows:
    def test_date_prefixed_row(self, context):
        assert classify("05-03-2024,AMAZON BLR,1500.00", context, BankKind.HDFC) == LineKind.DATA

    def test_idfc_row(self, context):
        line = '"UBER TRIP BLR",02-15-2024,250.00'
        assert classify(line, context, BankKind.IDFC) == LineKind.DATA

    def test_idfc_requires_quoted_description(self):
        assert not is_data_row("02-15-2024,UBER TRIP BLR,250.00", BankKind.IDFC)

    def test_generic_accepts_both_shapes(self):
        assert is_data_row("05-03-2024,AMAZON BLR,1500.00", BankKind.GENERIC)
        assert is_data_row('"UBER TRIP BLR",02-15-2024,250.00', BankKind.GENERIC)

    @pytest.mark.parametrize(
        "line",
        ["", "This is a computer generated statement.", "Total Amount Due,12000.00"],
    )
    def test_noise(self, context, line):
        assert classify(line, context, BankKind.HDFC) == LineKind.NOISE
