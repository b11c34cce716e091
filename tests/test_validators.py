"""Tests for the CPF, contact and financial step validators.

Tests cover:
- CPF check digits (masked/raw, repeated digits, altered digits, length)
- Brazilian phone shape (area code range, mobile 9 prefix)
- Full name and e-mail shape
- Down payment rule (20% of the financed amount) and term enumeration
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from simulador.config import FinancingRules
from simulador.schemas.financing import FinancingRecord
from simulador.validators.contact import (
    is_valid_brazilian_phone,
    is_valid_email,
    is_valid_full_name,
    normalize_name,
    validate_personal_step,
)
from simulador.validators.cpf import compute_check_digits, is_valid_cpf
from simulador.validators.financial import (
    is_valid_down_payment,
    minimum_down_payment,
    validate_financial_step,
)

RULES = FinancingRules()


class TestCpf:
    """Test CPF check digit validation."""

    def test_valid_masked(self) -> None:
        assert is_valid_cpf("529.982.247-25") is True

    def test_valid_raw(self) -> None:
        assert is_valid_cpf("52998224725") is True

    def test_altered_last_digit(self) -> None:
        assert is_valid_cpf("529.982.247-26") is False

    def test_altered_first_check_digit(self) -> None:
        assert is_valid_cpf("529.982.247-35") is False

    @pytest.mark.parametrize("digit", "0123456789")
    def test_repeated_digits(self, digit: str) -> None:
        assert is_valid_cpf(digit * 11) is False

    @pytest.mark.parametrize("value", ["", "5299822472", "529982247250", "abc", None])
    def test_wrong_length(self, value) -> None:
        assert is_valid_cpf(value) is False

    def test_check_digit_ten_becomes_zero(self) -> None:
        """Sum 12 for 100000001: 11 - (12 % 11) = 10, stored as 0."""
        assert compute_check_digits("100000001") == "08"
        assert is_valid_cpf("100.000.001-08") is True

    def test_another_known_cpf(self) -> None:
        assert is_valid_cpf("111.444.777-35") is True

    def test_compute_check_digits(self) -> None:
        assert compute_check_digits("529982247") == "25"
        assert compute_check_digits("529.982.247") == "25"
        assert compute_check_digits("1234") == ""


class TestPhone:
    """Test Brazilian phone shape validation."""

    def test_mobile(self) -> None:
        assert is_valid_brazilian_phone("(11) 98888-7777") is True

    def test_landline(self) -> None:
        assert is_valid_brazilian_phone("(11) 8888-7777") is True
        assert is_valid_brazilian_phone("1133334444") is True

    def test_invalid_area_code(self) -> None:
        assert is_valid_brazilian_phone("(05) 98888-7777") is False
        assert is_valid_brazilian_phone("(10) 8888-7777") is False

    def test_mobile_without_nine(self) -> None:
        assert is_valid_brazilian_phone("11888877777") is False

    def test_highest_area_code(self) -> None:
        assert is_valid_brazilian_phone("(99) 91234-5678") is True

    @pytest.mark.parametrize("value", ["", "119888877", "119888877771", None])
    def test_wrong_length(self, value) -> None:
        assert is_valid_brazilian_phone(value) is False


class TestFullName:
    def test_single_word(self) -> None:
        assert is_valid_full_name("João") is False

    def test_first_and_last(self) -> None:
        assert is_valid_full_name("João Silva") is True

    def test_parts_too_short(self) -> None:
        assert is_valid_full_name("A B") is False

    def test_accented_letters(self) -> None:
        assert is_valid_full_name("Conceição Araújo Gonçalves") is True

    def test_extra_whitespace(self) -> None:
        assert is_valid_full_name("  Maria    da   Silva  ") is True
        assert normalize_name("  Maria    da   Silva  ") == "Maria da Silva"

    def test_digits_rejected(self) -> None:
        assert is_valid_full_name("Maria Silva2") is False

    def test_one_letter_connector_rejected(self) -> None:
        assert is_valid_full_name("Maria e Silva") is False

    def test_empty(self) -> None:
        assert is_valid_full_name("") is False
        assert is_valid_full_name(None) is False


class TestEmail:
    def test_valid(self) -> None:
        assert is_valid_email("joao.silva@example.com.br") is True

    @pytest.mark.parametrize(
        "value",
        [
            "", "joao", "joao@", "joao@example", "@example.com", "jo ao@example.com", "a@b@c.com",
            "joao@example.com\n", "\njoao@example.com", None,
        ],
    )
    def test_invalid(self, value) -> None:
        assert is_valid_email(value) is False


class TestPersonalStep:
    def test_all_valid(self) -> None:
        record = FinancingRecord(
            full_name="João Silva",
            cpf="529.982.247-25",
            email="joao@example.com",
            phone="(11) 98888-7777",
        )
        result = validate_personal_step(record)
        assert result.is_valid is True
        assert result.messages == {}

    def test_messages_only_for_filled_fields(self) -> None:
        record = FinancingRecord(full_name="João", cpf="529.982.247-26")
        result = validate_personal_step(record)
        assert result.is_valid is False
        assert set(result.messages) == {"full_name", "cpf"}
        assert result.messages["cpf"] == "CPF inválido"
        assert result.email is False


class TestDownPayment:
    """Down payment must be at least 20% of the financed amount."""

    def test_minimum(self) -> None:
        assert minimum_down_payment(Decimal("100000"), RULES) == Decimal("20000.00")

    def test_below_minimum(self) -> None:
        assert is_valid_down_payment(Decimal("100000"), Decimal("19999.99"), RULES) is False

    def test_at_minimum(self) -> None:
        assert is_valid_down_payment(Decimal("100000"), Decimal("20000.00"), RULES) is True

    def test_no_financed_amount(self) -> None:
        assert is_valid_down_payment(Decimal("0"), Decimal("0"), RULES) is True
        assert minimum_down_payment(Decimal("0"), RULES) == Decimal("0.00")

    def test_negative(self) -> None:
        assert is_valid_down_payment(Decimal("0"), Decimal("-1"), RULES) is False

    def test_custom_ratio(self) -> None:
        rules = FinancingRules(min_down_payment_ratio=Decimal("0.3"))
        assert minimum_down_payment(Decimal("100000"), rules) == Decimal("30000.00")


class TestFinancialStep:
    def test_valid(self) -> None:
        record = FinancingRecord(
            financed_amount=Decimal("300000"), down_payment=Decimal("60000"), term_months=360,
        )
        result = validate_financial_step(record, RULES)
        assert result.is_valid is True
        assert result.minimum_down_payment == Decimal("60000.00")

    def test_term_not_offered(self) -> None:
        record = FinancingRecord(
            financed_amount=Decimal("300000"), down_payment=Decimal("60000"), term_months=200,
        )
        result = validate_financial_step(record, RULES)
        assert result.term_months is False
        assert result.is_valid is False
        assert "term_months" in result.messages

    def test_low_down_payment_message(self) -> None:
        record = FinancingRecord(
            financed_amount=Decimal("100000"), down_payment=Decimal("19999.99"), term_months=120,
        )
        result = validate_financial_step(record, RULES)
        assert result.down_payment is False
        assert result.messages["down_payment"] == (
            "A entrada mínima é de R$ 20.000,00 (20% do valor financiado)"
        )

    def test_empty_record(self) -> None:
        result = validate_financial_step(FinancingRecord(), RULES)
        assert result.financed_amount is False
        assert result.is_valid is False
