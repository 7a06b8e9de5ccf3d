import re
from datetime import date

import pytest

from sgci.core.config import settings
from sgci.core.exceptions import ReceiptValidationError
from sgci.services.receipts import sanitize_receipt_data, validate_receipt_data, prepare_receipt


def payload(**overrides):
    data = {
        "numero": "rec 2025/001",
        "valor": 1500,
        "recebidoDe": "  Maria Souza  ",
        "cpfCnpj": "529.982.247-25",
        "referente": "Sinal do lote 12 - Quadra B",
        "data": date.today().isoformat(),
        "formaPagamento": "PIX",
    }
    data.update(overrides)
    return data


def test_sanitize_trims_and_fills_company_defaults():
    data = sanitize_receipt_data(payload())

    assert data.numero == "REC2025001"
    assert data.recebido_de == "Maria Souza"
    assert data.valor == 1500.0
    assert data.valor_extenso == "mil e quinhentos reais"
    assert data.emitido_por == settings.EMISSOR_NOME
    assert data.cpf_emitente == settings.EMISSOR_CNPJ
    assert data.email_emitente == settings.EMPRESA_EMAIL.lower()
    assert data.cep_emitente == "88015-200"


def test_sanitize_generates_number_when_missing():
    data = sanitize_receipt_data(payload(numero="  "))
    assert re.fullmatch(r"REC-\d{6}", data.numero)


@pytest.mark.parametrize("valor", ["abc", None, True, float("nan"), float("inf")])
def test_sanitize_invalid_amount_becomes_zero(valor):
    assert sanitize_receipt_data(payload(valor=valor)).valor == 0.0


def test_sanitize_drops_unknown_status_and_bad_numbers():
    data = sanitize_receipt_data(payload(status="Cancelada", numeroParcela="x", contaParaCredito="sim"))
    assert data.status is None
    assert data.numero_parcela is None
    assert data.conta_para_credito is None


def test_sanitize_truncates_dates():
    data = sanitize_receipt_data(payload(data="2025-03-05T12:30:00Z", dataEmissao=""))
    assert data.data == "2025-03-05"
    assert data.data_emissao is None


def test_valid_receipt_has_no_errors():
    assert validate_receipt_data(sanitize_receipt_data(payload())) == []


def test_validation_collects_every_error():
    errors = validate_receipt_data(sanitize_receipt_data(payload(
        valor=0,
        recebidoDe="",
        cpfCnpj="111.111.111-11",
        referente="Lote",
    )))

    assert "Valor deve ser maior que zero" in errors
    assert "Nome/Razão Social é obrigatório" in errors
    assert "CPF inválido" in errors
    assert "Referente a deve ter pelo menos 10 caracteres" in errors


def test_prepare_raises_with_errors():
    with pytest.raises(ReceiptValidationError) as exc_info:
        prepare_receipt(payload(recebidoDe=""))
    assert exc_info.value.errors == ["Nome/Razão Social é obrigatório"]


def test_prepare_builds_pix_payload_from_key():
    data = prepare_receipt(payload(qrOptions={"pixKey": "47.200.760/0001-06"}))

    assert data.pix_key == "47.200.760/0001-06"
    assert data.pix_payload.startswith("000201010212")
    assert "54071500.00" in data.pix_payload


def test_prepare_keeps_given_pix_payload():
    data = prepare_receipt(payload(pixKey="chave", pixPayload="000201PAYLOAD"))
    assert data.pix_payload == "000201PAYLOAD"


def test_amount_above_limit_is_reported_not_spelled_out():
    data = sanitize_receipt_data(payload(valor=1_000_000_000))

    assert data.valor_extenso == ""
    assert validate_receipt_data(data) == ["Valor muito alto"]
