"""Tests for OCR text normalization."""

from receipt_ocr.normalization.text_normalizer import (
    NORMALIZATION_STEPS,
    normalize_text,
)


class TestNormalizationSteps:
    """Tests for the ordered step table."""

    def test_step_order(self) -> None:
        names = [step.name for step in NORMALIZATION_STEPS]
        assert names == ["currency_symbol", "decimal_spacing", "digit_confusion"]


class TestCleanInput:
    """Already clean text must come back unchanged."""

    def test_canonical_text_unchanged(self) -> None:
        text = "Total R$ 45,90\nData 05/03/2024"
        assert normalize_text(text) == text

    def test_empty_text(self) -> None:
        assert normalize_text("") == ""

    def test_none_treated_as_empty(self) -> None:
        assert normalize_text(None) == ""  # type: ignore[arg-type]

    def test_plain_words_unchanged(self) -> None:
        text = "Obrigado pela preferencia"
        assert normalize_text(text) == text


class TestCurrencyRepair:
    """Tests for misread currency symbol repair."""

    def test_rs_becomes_real_sign(self) -> None:
        assert "R$ 45,90" in normalize_text("RS 45,90")

    def test_r5_becomes_real_sign(self) -> None:
        assert "R$ 45,90" in normalize_text("R5 45,90")

    def test_lowercase_marker(self) -> None:
        assert normalize_text("total rs 12,00") == "total R$ 12,00"

    def test_marker_glued_to_digits(self) -> None:
        assert normalize_text("RS45,90") == "R$45,90"

    def test_marker_glued_to_preceding_word(self) -> None:
        assert normalize_text("TOTALRS45,90") == "TOTALR$45,90"

    def test_rs_followed_by_letters_untouched(self) -> None:
        assert normalize_text("RSTU") == "RSTU"


class TestDecimalSpacingRepair:
    """Tests for stray whitespace around decimal marks."""

    def test_spaces_around_comma(self) -> None:
        assert normalize_text("12 , 90") == "12,90"

    def test_spaces_around_period(self) -> None:
        assert normalize_text("12 .90") == "12.90"

    def test_thousands_and_decimals(self) -> None:
        assert normalize_text("1 . 234 , 56") == "1.234,56"

    def test_line_breaks_preserved(self) -> None:
        text = "Qtd 2\n,50 avulso"
        assert normalize_text(text) == text


class TestDigitConfusionRepair:
    """Tests for letters misread in place of digits."""

    def test_letter_o_before_decimal(self) -> None:
        assert normalize_text("1O,90") == "10,90"

    def test_letter_between_digits(self) -> None:
        assert normalize_text("2S4,00") == "254,00"

    def test_lowercase_l_and_b(self) -> None:
        assert normalize_text("3l,50 e 1b2") == "31,50 e 182"

    def test_multi_letter_word_untouched(self) -> None:
        assert normalize_text("HELLO,90") == "HELLO,90"

    def test_multi_letter_run_between_digits_untouched(self) -> None:
        assert normalize_text("1OO,90") == "1OO,90"

    def test_runs_after_currency_repair(self) -> None:
        assert normalize_text("R5 1O,90") == "R$ 10,90"
