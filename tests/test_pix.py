import pytest

from sgci.core.exceptions import PixPayloadError
from sgci.core.pix import (
    crc16,
    emv_field,
    normalize,
    build_static_pix_payload,
    build_installment_tx_id,
)


def test_crc16_check_value():
    # Valor de referência do CRC-16/CCITT-FALSE
    assert crc16("123456789") == "29B1"


def test_emv_field():
    assert emv_field("00", "01") == "000201"
    assert emv_field("59", "DUARTE URBANISMO LTDA") == "5921DUARTE URBANISMO LTDA"


def test_normalize_strips_accents_and_symbols():
    assert normalize("Florianópolis", 15) == "FLORIANOPOLIS"
    assert normalize("São José - SC", 25) == "SAO JOSE  SC"
    assert normalize("Duarte Urbanismo Empreendimentos", 25) == "DUARTE URBANISMO EMPREEND"


def test_static_payload_with_cnpj_key():
    payload = build_static_pix_payload(
        key="47.200.760/0001-06",
        amount=1500,
        merchant_name="Duarte Urbanismo Ltda",
        merchant_city="Florianópolis",
        tx_id="REC-000123",
    )

    assert payload.startswith("000201010212")
    assert "26360014BR.GOV.BCB.PIX011447200760000106" in payload
    assert "52040000" in payload
    assert "5303986" in payload
    assert "54071500.00" in payload
    assert "5802BR" in payload
    assert "5921DUARTE URBANISMO LTDA" in payload
    assert "6013FLORIANOPOLIS" in payload
    assert "62130509REC000123" in payload
    assert payload[-8:-4] == "6304"
    assert payload[-4:] == crc16(payload[:-4])


def test_static_payload_with_cpf_key():
    payload = build_static_pix_payload(key="529.982.247-25", amount=10)
    assert "0211" + "52998224725" in payload
    assert "5916DUARTE URBANISMO" in payload
    assert "6006BRASIL" in payload
    assert "62080504SGCI" in payload


def test_payload_without_amount_is_reusable():
    payload = build_static_pix_payload(key="47200760000106", amount=0)
    assert payload.startswith("000201010211")
    assert "5407" not in payload


@pytest.mark.parametrize("key", ["", "123", "47.200.760/0001"])
def test_invalid_keys_are_rejected(key):
    with pytest.raises(PixPayloadError):
        build_static_pix_payload(key=key, amount=100)


def test_installment_tx_id_is_always_25_chars():
    tx_id = build_installment_tx_id("NEG-ABC-PAR-001", "12", "João Silva", "12345-F")
    assert len(tx_id) == 25
    assert tx_id.startswith("NEG-ABC-PAR-001-L12/")


def test_installment_tx_id_is_left_padded():
    assert build_installment_tx_id("NEG-ABC-PAR-001") == "0000000000NEG-ABC-PAR-001"


def test_installment_tx_id_keeps_tail_of_long_numbers():
    numero = "NEG-0123456789ABCDEF-PAR-001"
    assert build_installment_tx_id(numero) == numero[-25:]


def parse_emv(payload):
    """Campos de primeiro nível de um BR Code: {id: valor}"""
    fields = {}
    posicao = 0
    while posicao < len(payload):
        field_id = payload[posicao:posicao + 2]
        tamanho = int(payload[posicao + 2:posicao + 4])
        fields[field_id] = payload[posicao + 4:posicao + 4 + tamanho]
        posicao += 4 + tamanho
    return fields


def test_long_tx_id_is_truncated_inside_payload():
    payload = build_static_pix_payload(
        key="47.200.760/0001-06",
        amount=8000,
        tx_id="Recibo nº 2025/000123, Parcela Única do Lote 12-B",
    )

    fields = parse_emv(payload)
    tx_id = parse_emv(fields["62"])["05"]
    assert tx_id == "RECIBO N 2025000123 PARCE"
    assert len(tx_id) <= 25
    assert fields["63"] == crc16(payload[:-4])
