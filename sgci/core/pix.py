"""
S.G.C.I. - PIX
Payload estático BR Code (EMV) para pagamento via PIX "copia e cola"
"""
import re
import unicodedata
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from .exceptions import PixPayloadError
from sgci.utils.formatting import only_digits

PIX_GUI = "BR.GOV.BCB.PIX"
POLYNOMIAL = 0x1021

DEFAULT_MERCHANT_NAME = "DUARTE URBANISMO"
DEFAULT_MERCHANT_CITY = "BRASIL"
DEFAULT_TX_ID = "SGCI"

# Subcampos da chave dentro do campo 26
KEY_TYPE_CNPJ = "01"
KEY_TYPE_CPF = "02"


def normalize(value: Optional[str], max_length: int) -> str:
    """Remove acentos, mantém só A-Z, 0-9 e espaço, em maiúsculas"""
    texto = unicodedata.normalize("NFD", value or "")
    texto = "".join(ch for ch in texto if not unicodedata.combining(ch))
    texto = re.sub(r"[^A-Za-z0-9 ]", "", texto).strip().upper()
    return texto[:max_length]


def emv_field(field_id: str, value: str) -> str:
    return f"{field_id}{len(value):02d}{value}"


def crc16(payload: str) -> str:
    """CRC-16/CCITT-FALSE (poly 0x1021, init 0xFFFF) em 4 dígitos hexadecimais"""
    crc = 0xFFFF
    for byte in payload.encode("utf-8"):
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ POLYNOMIAL) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return f"{crc:04X}"


def build_static_pix_payload(
    key: str,
    amount,
    merchant_name: Optional[str] = None,
    merchant_city: Optional[str] = None,
    tx_id: Optional[str] = None
) -> str:
    """
    Monta o BR Code estático.

    A chave é reduzida aos dígitos: 11 dígitos é CPF, 14 é CNPJ. Outros
    tamanhos são tratados como CNPJ e recusados.
    """
    chave = only_digits(key)
    if not chave:
        raise PixPayloadError("Chave PIX inválida")

    key_type = KEY_TYPE_CPF if len(chave) == 11 else KEY_TYPE_CNPJ
    if key_type == KEY_TYPE_CNPJ and len(chave) != 14:
        raise PixPayloadError(f"CNPJ deve ter 14 dígitos, encontrado: {len(chave)}")

    merchant_account_info = emv_field("00", PIX_GUI) + emv_field(key_type, chave)
    if len(merchant_account_info) > 99:
        raise PixPayloadError(
            f"Merchant Account Information muito grande: {len(merchant_account_info)} caracteres (máximo 99)"
        )

    nome = normalize(merchant_name, 25) or DEFAULT_MERCHANT_NAME
    cidade = normalize(merchant_city, 15) or DEFAULT_MERCHANT_CITY
    txid = normalize(tx_id or DEFAULT_TX_ID, 25) or DEFAULT_TX_ID

    valor = Decimal(str(amount or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    amount_string = f"{valor:.2f}" if valor > 0 else None

    payload = emv_field("00", "01")
    payload += emv_field("01", "12" if amount_string else "11")
    payload += emv_field("26", merchant_account_info)
    payload += emv_field("52", "0000")
    payload += emv_field("53", "986")
    if amount_string:
        payload += emv_field("54", amount_string)
    payload += emv_field("58", "BR")
    payload += emv_field("59", nome)
    payload += emv_field("60", cidade)
    payload += emv_field("62", emv_field("05", txid))

    payload += "6304"
    return payload + crc16(payload)


def build_installment_tx_id(
    numero_recibo: str,
    numero_lote: Optional[str] = None,
    corretor_nome: Optional[str] = None,
    corretor_creci: Optional[str] = None
) -> str:
    """
    Identificador da transação de uma parcela, sempre com 25 caracteres:
    <numero>-<L<lote>/<primeiro nome>-<creci>>, sufixo limitado a 10.
    """
    tx_id = numero_recibo
    if numero_lote or corretor_nome:
        partes = []
        if numero_lote:
            partes.append(f"L{numero_lote}")
        if corretor_nome:
            primeiro_nome = corretor_nome.split(" ")[0]
            partes.append(f"{primeiro_nome}-{corretor_creci}" if corretor_creci else primeiro_nome)
        tx_id = f"{numero_recibo}-{'/'.join(partes)[:10]}"[:25]

    if len(tx_id) > 25:
        return tx_id[-25:]
    return tx_id.rjust(25, "0")
