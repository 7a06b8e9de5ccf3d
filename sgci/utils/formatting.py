"""
Formatação de valores para exibição (moeda, documentos, datas e valores por extenso)
"""
import re
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

MESES = ['janeiro', 'fevereiro', 'março', 'abril', 'maio', 'junho',
         'julho', 'agosto', 'setembro', 'outubro', 'novembro', 'dezembro']

CENTAVO = Decimal("0.01")

# Maior valor (exclusivo) que numero_por_extenso sabe escrever
LIMITE_EXTENSO = 1_000_000_000_000


def only_digits(value) -> str:
    """Remove tudo que não for dígito"""
    if value is None:
        return ""
    return re.sub(r"\D", "", str(value))


def to_decimal(value) -> Decimal:
    """Converte para Decimal com duas casas"""
    if value is None or value == "":
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENTAVO, rounding=ROUND_HALF_UP)


def format_currency(value) -> str:
    """Formata valor para moeda brasileira"""
    if value is None:
        return "R$ 0,00"
    return f"R$ {float(value):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


def format_cpf_cnpj(value: str) -> str:
    """Aplica máscara de CPF (000.000.000-00) ou CNPJ (00.000.000/0000-00)"""
    numeros = only_digits(value)
    if len(numeros) == 11:
        return f"{numeros[:3]}.{numeros[3:6]}.{numeros[6:9]}-{numeros[9:]}"
    if len(numeros) == 14:
        return f"{numeros[:2]}.{numeros[2:5]}.{numeros[5:8]}/{numeros[8:12]}-{numeros[12:]}"
    return value or ""


def format_cep(value: str) -> str:
    """Aplica máscara de CEP (00000-000)"""
    numeros = only_digits(value)
    if len(numeros) == 8:
        return f"{numeros[:5]}-{numeros[5:]}"
    return value or ""


def parse_date(value: Union[str, date, datetime]) -> date:
    """Aceita date, datetime ou string ISO (YYYY-MM-DD...)"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def format_date_short(value) -> str:
    """15/03/2025"""
    return parse_date(value).strftime('%d/%m/%Y')


def format_date_long(value) -> str:
    """15 de março de 2025"""
    d = parse_date(value)
    return f"{d.day:02d} de {MESES[d.month - 1]} de {d.year}"


_UNIDADES = ["", "um", "dois", "três", "quatro", "cinco", "seis", "sete", "oito", "nove"]
_ESPECIAIS = ["dez", "onze", "doze", "treze", "quatorze", "quinze",
              "dezesseis", "dezessete", "dezoito", "dezenove"]
_DEZENAS = ["", "", "vinte", "trinta", "quarenta", "cinquenta",
            "sessenta", "setenta", "oitenta", "noventa"]
_CENTENAS = ["", "cento", "duzentos", "trezentos", "quatrocentos", "quinhentos",
             "seiscentos", "setecentos", "oitocentos", "novecentos"]


def _converte_ate_999(n: int) -> str:
    if n == 0:
        return ""
    if n == 100:
        return "cem"
    if n < 10:
        return _UNIDADES[n]
    if n < 20:
        return _ESPECIAIS[n - 10]
    if n < 100:
        d, u = divmod(n, 10)
        if u == 0:
            return _DEZENAS[d]
        return f"{_DEZENAS[d]} e {_UNIDADES[u]}"
    c, resto = divmod(n, 100)
    if resto == 0:
        return _CENTENAS[c]
    return f"{_CENTENAS[c]} e {_converte_ate_999(resto)}"


def numero_por_extenso(valor) -> str:
    """
    Converte um valor em reais para extenso.

    >>> numero_por_extenso(1500)
    'mil e quinhentos reais'
    """
    valor = to_decimal(valor)
    if valor < 0:
        valor = -valor

    valor_int = int(valor)
    centavos = int((valor - valor_int) * 100)

    if valor_int == 0 and centavos == 0:
        return "zero reais"

    if valor_int >= LIMITE_EXTENSO:
        raise ValueError(f"Valor acima do suportado por extenso: {valor}")

    grupos = []
    bilhoes, resto_bilhoes = divmod(valor_int, 1_000_000_000)
    milhoes, resto_milhoes = divmod(resto_bilhoes, 1_000_000)
    milhares, resto = divmod(resto_milhoes, 1000)

    if bilhoes:
        grupos.append((bilhoes * 1_000_000_000, "um bilhão" if bilhoes == 1 else f"{_converte_ate_999(bilhoes)} bilhões"))
    if milhoes:
        grupos.append((milhoes * 1_000_000, "um milhão" if milhoes == 1 else f"{_converte_ate_999(milhoes)} milhões"))
    if milhares:
        grupos.append((milhares * 1000, "mil" if milhares == 1 else f"{_converte_ate_999(milhares)} mil"))
    if resto:
        grupos.append((resto, _converte_ate_999(resto)))

    parte_inteira = ""
    for indice, (valor_grupo, texto) in enumerate(grupos):
        if indice == 0:
            parte_inteira = texto
        elif indice == len(grupos) - 1 and (valor_grupo < 100 or valor_grupo % 100 == 0):
            parte_inteira += f" e {texto}"
        else:
            parte_inteira += f" {texto}"

    if valor_int == 1:
        parte_inteira += " real"
    elif valor_int > 1:
        # "um milhão de reais", "dois bilhões de reais"
        if (bilhoes or milhoes) and not milhares and not resto:
            parte_inteira += " de reais"
        else:
            parte_inteira += " reais"

    if centavos == 0:
        return parte_inteira

    parte_centavos = "um centavo" if centavos == 1 else f"{_converte_ate_999(centavos)} centavos"
    if parte_inteira:
        return f"{parte_inteira} e {parte_centavos}"
    return parte_centavos
