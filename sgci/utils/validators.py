"""
Validação de documentos e campos de formulário (CPF, CNPJ, e-mail, telefone, CEP, datas)
"""
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from .formatting import only_digits, parse_date


@dataclass
class ValidationResult:
    valid: bool
    message: Optional[str] = None


@dataclass
class DocumentValidation(ValidationResult):
    kind: Optional[str] = None


EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MAX_AMOUNT = 999_999_999


def _all_equal(numeros: str) -> bool:
    return len(set(numeros)) == 1


def _cpf_digit(base: str) -> int:
    peso = len(base) + 1
    soma = sum(int(d) * (peso - i) for i, d in enumerate(base))
    resto = 11 - (soma % 11)
    return 0 if resto >= 10 else resto


def _cnpj_digit(base: str) -> int:
    soma = 0
    pos = len(base) - 7
    for d in base:
        soma += int(d) * pos
        pos -= 1
        if pos < 2:
            pos = 9
    return 0 if soma % 11 < 2 else 11 - (soma % 11)


def is_valid_cpf(value: str) -> bool:
    """Valida CPF pelos dígitos verificadores"""
    numeros = only_digits(value)
    if len(numeros) != 11 or _all_equal(numeros):
        return False

    if _cpf_digit(numeros[:9]) != int(numeros[9]):
        return False
    return _cpf_digit(numeros[:10]) == int(numeros[10])


def is_valid_cnpj(value: str) -> bool:
    """Valida CNPJ pelos dígitos verificadores"""
    numeros = only_digits(value)
    if len(numeros) != 14 or _all_equal(numeros):
        return False

    if _cnpj_digit(numeros[:12]) != int(numeros[12]):
        return False
    return _cnpj_digit(numeros[:13]) == int(numeros[13])


def validate_cpf_cnpj(value: str) -> DocumentValidation:
    """Decide entre CPF e CNPJ pelo número de dígitos e valida"""
    numeros = only_digits(value)

    if not numeros:
        return DocumentValidation(False, "Campo obrigatório")

    if len(numeros) == 11:
        valid = is_valid_cpf(numeros)
        return DocumentValidation(valid, None if valid else "CPF inválido", "CPF")

    if len(numeros) == 14:
        valid = is_valid_cnpj(numeros)
        return DocumentValidation(valid, None if valid else "CNPJ inválido", "CNPJ")

    return DocumentValidation(False, "CPF deve ter 11 dígitos ou CNPJ 14 dígitos")


def validate_email(value: Optional[str]) -> ValidationResult:
    if not value:
        return ValidationResult(False, "Email obrigatório")
    if not EMAIL_REGEX.match(value):
        return ValidationResult(False, "Email inválido")
    return ValidationResult(True)


def validate_phone(value: Optional[str]) -> ValidationResult:
    """Aceita telefones com 10 ou 11 dígitos (com ou sem o 9)"""
    numeros = only_digits(value)
    if not numeros:
        return ValidationResult(False, "Telefone obrigatório")
    if len(numeros) < 10 or len(numeros) > 11:
        return ValidationResult(False, "Telefone deve ter 10 ou 11 dígitos")
    return ValidationResult(True)


def validate_cep(value: Optional[str]) -> ValidationResult:
    numeros = only_digits(value)
    if not numeros:
        return ValidationResult(False, "CEP obrigatório")
    if len(numeros) != 8:
        return ValidationResult(False, "CEP deve ter 8 dígitos")
    return ValidationResult(True)


def validate_amount(value) -> ValidationResult:
    try:
        valor = float(value)
    except (TypeError, ValueError):
        return ValidationResult(False, "Valor deve ser maior que zero")

    if valor <= 0:
        return ValidationResult(False, "Valor deve ser maior que zero")
    if valor > MAX_AMOUNT:
        return ValidationResult(False, "Valor muito alto")
    return ValidationResult(True)


def validate_text_field(value: Optional[str], field_name: str, min_length: int = 3) -> ValidationResult:
    texto = (value or "").strip()
    if not texto:
        return ValidationResult(False, f"{field_name} é obrigatório")
    if len(texto) < min_length:
        return ValidationResult(False, f"{field_name} deve ter pelo menos {min_length} caracteres")
    return ValidationResult(True)


def _shift_years(d: date, years: int) -> date:
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        # 29/02 em ano não bissexto
        return d.replace(year=d.year + years, day=28)


def validate_date(value: Optional[str], today: Optional[date] = None) -> ValidationResult:
    """Aceita datas entre 10 anos atrás e 1 ano à frente"""
    if not value:
        return ValidationResult(False, "Data obrigatória")

    try:
        data = parse_date(value)
    except ValueError:
        return ValidationResult(False, "Data inválida")

    today = today or date.today()

    if data > _shift_years(today, 1):
        return ValidationResult(False, "Data não pode ser mais de 1 ano no futuro")
    if data < _shift_years(today, -10):
        return ValidationResult(False, "Data muito antiga")
    return ValidationResult(True)
