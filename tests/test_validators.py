from datetime import date

import pytest

from sgci.utils.validators import (
    is_valid_cpf,
    is_valid_cnpj,
    validate_cpf_cnpj,
    validate_email,
    validate_phone,
    validate_cep,
    validate_amount,
    validate_text_field,
    validate_date,
)


class TestDocuments:
    def test_valid_cpf_with_and_without_mask(self):
        assert is_valid_cpf("529.982.247-25")
        assert is_valid_cpf("52998224725")

    def test_cpf_with_wrong_check_digit(self):
        assert not is_valid_cpf("529.982.247-26")

    def test_cpf_with_repeated_digits_is_invalid(self):
        assert not is_valid_cpf("111.111.111-11")

    def test_valid_cnpj(self):
        assert is_valid_cnpj("47.200.760/0001-06")

    def test_cnpj_with_wrong_check_digit(self):
        assert not is_valid_cnpj("47.200.760/0001-07")

    def test_validate_cpf_cnpj_reports_kind(self):
        result = validate_cpf_cnpj("529.982.247-25")
        assert result.valid
        assert result.kind == "CPF"

        result = validate_cpf_cnpj("47200760000106")
        assert result.valid
        assert result.kind == "CNPJ"

    @pytest.mark.parametrize("value,message", [
        ("", "Campo obrigatório"),
        ("529.982.247-26", "CPF inválido"),
        ("47.200.760/0001-07", "CNPJ inválido"),
        ("1234", "CPF deve ter 11 dígitos ou CNPJ 14 dígitos"),
    ])
    def test_validate_cpf_cnpj_messages(self, value, message):
        result = validate_cpf_cnpj(value)
        assert not result.valid
        assert result.message == message


VALID_CPF = "52998224725"
VALID_CNPJ = "47200760000106"


def _single_digit_changes(numeros):
    for posicao, original in enumerate(numeros):
        for digito in "0123456789":
            if digito != original:
                yield f"{numeros[:posicao]}{digito}{numeros[posicao + 1:]}"


class TestSingleDigitChanges:
    @pytest.mark.parametrize("value", list(_single_digit_changes(VALID_CPF)))
    def test_any_changed_cpf_digit_is_detected(self, value):
        assert not is_valid_cpf(value)

    @pytest.mark.parametrize("value", list(_single_digit_changes(VALID_CNPJ)))
    def test_any_changed_cnpj_digit_is_detected(self, value):
        assert not is_valid_cnpj(value)

    @pytest.mark.parametrize("digit", "0123456789")
    def test_repeated_digits_are_invalid(self, digit):
        assert not is_valid_cpf(digit * 11)
        assert not is_valid_cnpj(digit * 14)


class TestContactFields:
    def test_email(self):
        assert validate_email("financeiro@duarteurbanismo.com").valid
        assert validate_email("").message == "Email obrigatório"
        assert validate_email("sem-arroba.com").message == "Email inválido"

    def test_phone(self):
        assert validate_phone("(48) 4000-3010").valid
        assert validate_phone("(48) 99999-0000").valid
        assert validate_phone("").message == "Telefone obrigatório"
        assert validate_phone("4000-3010").message == "Telefone deve ter 10 ou 11 dígitos"

    def test_cep(self):
        assert validate_cep("88015-200").valid
        assert validate_cep("").message == "CEP obrigatório"
        assert validate_cep("8801-520").message == "CEP deve ter 8 dígitos"


class TestAmountAndText:
    @pytest.mark.parametrize("value", [0, -10, "abc", None])
    def test_amount_must_be_positive(self, value):
        assert validate_amount(value).message == "Valor deve ser maior que zero"

    def test_amount_upper_bound(self):
        assert validate_amount(999_999_999).valid
        assert validate_amount(1_000_000_000).message == "Valor muito alto"

    def test_text_field(self):
        assert validate_text_field("Maria", "Nome").valid
        assert validate_text_field("  ", "Nome").message == "Nome é obrigatório"
        assert validate_text_field("Lote 1", "Referente a", 10).message == "Referente a deve ter pelo menos 10 caracteres"


class TestDates:
    today = date(2025, 3, 5)

    def test_accepts_dates_in_window(self):
        assert validate_date("2025-03-05", today=self.today).valid
        assert validate_date("2026-03-05", today=self.today).valid
        assert validate_date("2015-03-05", today=self.today).valid

    def test_rejects_missing_and_malformed(self):
        assert validate_date("", today=self.today).message == "Data obrigatória"
        assert validate_date("05/03/2025", today=self.today).message == "Data inválida"

    def test_rejects_far_future(self):
        assert validate_date("2026-03-06", today=self.today).message == "Data não pode ser mais de 1 ano no futuro"

    def test_rejects_too_old(self):
        assert validate_date("2015-03-04", today=self.today).message == "Data muito antiga"
