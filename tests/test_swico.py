"""Tests for the Swico S1 structured bill information codec."""

import locale
from datetime import date
from decimal import Decimal

import pytest

from zahlteil.codecs.swico import decode_swico, encode_swico, split_escaped
from zahlteil.domain.models import SwicoBillInformation

LOCALES = ["C", "POSIX", "C.UTF-8", "en_US.UTF-8", "de_DE.UTF-8", "de_CH.UTF-8", "fr_CH.UTF-8", "it_CH.UTF-8"]


class TestSplitEscaped:

    def test_plain(self):
        assert split_escaped("10/abc/11/190512") == ["10", "abc", "11", "190512"]

    def test_escaped_slash(self):
        assert split_escaped("10/a\\/b") == ["10", "a/b"]

    def test_escaped_backslash(self):
        assert split_escaped("10/a\\\\/20/b") == ["10", "a\\", "20", "b"]

    def test_literal_backslash(self):
        assert split_escaped("10/a\\b") == ["10", "a\\b"]

    def test_empty(self):
        assert split_escaped("") == [""]


class TestDecode:

    def test_full_example(self):
        info = decode_swico(
            "//S1/10/10201409/11/190512/20/1400.000-53/30/106017086/31/180508/32/7.7/40/2:10;0:30"
        )
        assert info == SwicoBillInformation(
            invoice_number="10201409",
            invoice_date=date(2019, 5, 12),
            customer_reference="1400.000-53",
            vat_number="106017086",
            vat_date=date(2018, 5, 8),
            vat_rate=Decimal("7.7"),
            payment_conditions=((Decimal("2"), 10), (Decimal("0"), 30)),
        )

    def test_vat_details_and_import_taxes(self):
        info = decode_swico("//S1/10/X.66711/31/190101191231/32/8:1000;2.5:51.8;7.7:250/33/7.7:48.12;2.5:8")
        assert info.vat_start_date == date(2019, 1, 1)
        assert info.vat_end_date == date(2019, 12, 31)
        assert info.vat_date is None
        assert info.vat_rate is None
        assert info.vat_rate_details == (
            (Decimal("8"), Decimal("1000")),
            (Decimal("2.5"), Decimal("51.8")),
            (Decimal("7.7"), Decimal("250")),
        )
        assert info.vat_import_taxes == ((Decimal("7.7"), Decimal("48.12")), (Decimal("2.5"), Decimal("8")))

    def test_escaped_values(self):
        info = decode_swico("//S1/10/X.66711\\/8824/11/200712/20/MW-2020-04")
        assert info.invoice_number == "X.66711/8824"
        assert info.invoice_date == date(2020, 7, 12)
        assert info.customer_reference == "MW-2020-04"

    @pytest.mark.parametrize("text", [None, "", "//S2/10/1", "S1/10/1", "10/1"])
    def test_not_bill_information(self, text):
        assert decode_swico(text) is None

    def test_prefix_only(self):
        assert decode_swico("//S1/") == SwicoBillInformation()

    def test_escaped_slash_in_customer_reference(self):
        info = decode_swico("//S1/10/X.66711/20/405\\/1/40/0:30")
        assert info == SwicoBillInformation(
            invoice_number="X.66711",
            customer_reference="405/1",
            payment_conditions=((Decimal("0"), 30),),
        )

    def test_all_values_empty(self):
        assert decode_swico("//S1/10//11//20//30/") == SwicoBillInformation()

    def test_unknown_tags_skipped(self):
        info = decode_swico("//S1/10/1/15/ab/xx/cd/20/ref")
        assert info.invoice_number == "1"
        assert info.customer_reference == "ref"

    def test_trailing_tag_without_value(self):
        info = decode_swico("//S1/10/1/20")
        assert info == SwicoBillInformation(invoice_number="1")

    def test_empty_value(self):
        info = decode_swico("//S1/10//11/190512")
        assert info == SwicoBillInformation(invoice_date=date(2019, 5, 12))

    def test_repeated_tag_overwrites(self):
        assert decode_swico("//S1/10/1/10/2").invoice_number == "2"

    @pytest.mark.parametrize(
        "text",
        ["//S1/11/191332", "//S1/11/19051", "//S1/11/2019-05-12", "//S1/31/1905121906"],
    )
    def test_invalid_dates_dropped(self, text):
        info = decode_swico(text)
        assert info.invoice_date is None
        assert info.vat_date is None
        assert info.vat_start_date is None

    @pytest.mark.parametrize("text", ["//S1/32/7,7", "//S1/32/-7.7", "//S1/32/7.7%", "//S1/32/1e3"])
    def test_invalid_rate_dropped(self, text):
        assert decode_swico(text).vat_rate is None

    def test_invalid_value_keeps_other_tags(self):
        info = decode_swico("//S1/10/1/11/abc/30/106017086")
        assert info == SwicoBillInformation(invoice_number="1", vat_number="106017086")


class TestDecodeTagOrder:

    def test_lower_tag_after_higher_tag_dropped(self):
        info = decode_swico("//S1/11/190520/10/X.66711/30/123456789")
        assert info == SwicoBillInformation(invoice_date=date(2019, 5, 20), vat_number="123456789")

    def test_lower_tag_at_end_dropped(self):
        info = decode_swico("//S1/10/X.66711/30/123456789/11/190520")
        assert info == SwicoBillInformation(invoice_number="X.66711", vat_number="123456789")

    def test_repeated_tag_after_lower_tag(self):
        info = decode_swico("//S1/11/201010/10/X.66711/11/190520/30/123456789")
        assert info == SwicoBillInformation(invoice_date=date(2019, 5, 20), vat_number="123456789")

    def test_empty_value_counts_for_order(self):
        info = decode_swico("//S1/20//10/1")
        assert info == SwicoBillInformation()


class TestDecodeLists:

    def test_empty_items_skipped(self):
        info = decode_swico("//S1/40/;0:60;")
        assert info.payment_conditions == ((Decimal("0"), 60),)

    def test_first_item_malformed(self):
        assert decode_swico("//S1/40/x:1;0:60").payment_conditions is None

    def test_malformed_item_drops_rest(self):
        info = decode_swico("//S1/40/0:60;x:1;2:30")
        assert info.payment_conditions == ((Decimal("0"), 60),)

    @pytest.mark.parametrize("conditions", ["2:10.5", "2:10:3", "2", ":10", "2:"])
    def test_malformed_conditions(self, conditions):
        assert decode_swico(f"//S1/40/{conditions}").payment_conditions is None

    def test_single_rate_detail(self):
        info = decode_swico("//S1/32/7.7:100")
        assert info.vat_rate is None
        assert info.vat_rate_details == ((Decimal("7.7"), Decimal("100")),)


class TestEncode:

    def test_example(self, bill_information):
        assert encode_swico(bill_information) == "//S1/10/10201409/11/190512/30/106017086/40/2:10;0:30"

    def test_empty(self):
        assert encode_swico(SwicoBillInformation()) == "//S1/"

    def test_escaping(self):
        info = SwicoBillInformation(invoice_number="X.66711/8824", customer_reference="a\\b")
        assert encode_swico(info) == "//S1/10/X.66711\\/8824/20/a\\\\b"

    def test_all_fields_in_tag_order(self):
        info = SwicoBillInformation(
            payment_conditions=((Decimal("3"), 5), (Decimal("1.5"), 20), (Decimal("1"), 40), (Decimal("0"), 60)),
            vat_import_taxes=((Decimal("7.7"), Decimal("48.12")),),
            vat_rate_details=((Decimal("8"), Decimal("1000")), (Decimal("2.5"), Decimal("51.8"))),
            vat_start_date=date(2019, 1, 1),
            vat_end_date=date(2019, 12, 31),
            vat_number="106017086",
            customer_reference="1400.000-53",
            invoice_date=date(2019, 5, 12),
            invoice_number="10201409",
        )
        assert encode_swico(info) == (
            "//S1/10/10201409/11/190512/20/1400.000-53/30/106017086"
            "/31/190101191231/32/8:1000;2.5:51.8/33/7.7:48.12/40/3:5;1.5:20;1:40;0:60"
        )

    def test_vat_date_wins_over_period(self):
        info = SwicoBillInformation(
            vat_date=date(2019, 5, 8),
            vat_start_date=date(2019, 1, 1),
            vat_end_date=date(2019, 12, 31),
        )
        assert encode_swico(info) == "//S1/31/190508"

    def test_incomplete_period_omitted(self):
        assert encode_swico(SwicoBillInformation(vat_start_date=date(2019, 1, 1))) == "//S1/"

    def test_vat_rate_wins_over_details(self):
        info = SwicoBillInformation(vat_rate=Decimal("7.7"), vat_rate_details=((Decimal("8"), Decimal("1000")),))
        assert encode_swico(info) == "//S1/32/7.7"

    @pytest.mark.parametrize(
        "rate, text",
        [
            (Decimal("7.70"), "7.7"),
            (Decimal("8"), "8"),
            (Decimal("1E+2"), "100"),
            (Decimal("0.00"), "0"),
            (Decimal("0.0001"), "0.0001"),
        ],
    )
    def test_decimal_formatting(self, rate, text):
        assert encode_swico(SwicoBillInformation(vat_rate=rate)) == f"//S1/32/{text}"

    def test_decoding_encoded_text(self):
        info = SwicoBillInformation(
            invoice_number="X.66711/8824",
            invoice_date=date(2020, 7, 12),
            customer_reference="MW-2020-04",
            vat_number="107978798",
            vat_start_date=date(2020, 4, 1),
            vat_end_date=date(2020, 6, 30),
            vat_rate_details=((Decimal("2.5"), Decimal("117.22")),),
            payment_conditions=((Decimal("3"), 10), (Decimal("0"), 30)),
        )
        assert decode_swico(encode_swico(info)) == info

    def test_century_outside_two_digit_years(self):
        with pytest.raises(ValueError):
            encode_swico(SwicoBillInformation(invoice_date=date(1999, 12, 31)))

    def test_independent_of_locale(self):
        text = "//S1/11/210102/32/1234.5/40/2.5:10;0:30"
        expected = SwicoBillInformation(
            invoice_date=date(2021, 1, 2),
            vat_rate=Decimal("1234.5"),
            payment_conditions=((Decimal("2.5"), 10), (Decimal("0"), 30)),
        )
        applied = []
        saved = locale.setlocale(locale.LC_ALL)
        try:
            for name in LOCALES:
                try:
                    locale.setlocale(locale.LC_ALL, name)
                except locale.Error:
                    continue
                applied.append(name)
                assert decode_swico(text) == expected, name
                assert encode_swico(expected) == text, name
        finally:
            locale.setlocale(locale.LC_ALL, saved)
        # C and POSIX exist on every platform
        assert len(applied) >= 2


class TestDueDate:

    def test_longest_term(self, bill_information):
        assert bill_information.due_date == date(2019, 6, 11)

    def test_unordered_conditions(self):
        info = SwicoBillInformation(
            invoice_date=date(2019, 12, 20),
            payment_conditions=((Decimal("0"), 30), (Decimal("2"), 10)),
        )
        assert info.due_date == date(2020, 1, 19)

    def test_without_invoice_date(self):
        info = SwicoBillInformation(payment_conditions=((Decimal("0"), 30),))
        assert info.due_date is None

    def test_without_conditions(self):
        assert SwicoBillInformation(invoice_date=date(2019, 5, 12)).due_date is None
