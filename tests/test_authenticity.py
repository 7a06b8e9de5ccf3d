import re

from sgci.core.authenticity import (
    canonicalize,
    generate_receipt_hash,
    verify_receipt_hash,
    build_verification_url,
    build_share_url,
    build_qr_payload,
)
from sgci.schemas.receipt import ReceiptData


def make_receipt(**overrides):
    data = {
        "numero": "REC-000123",
        "valor": 1500.0,
        "recebido_de": "Maria Souza",
        "cpf_cnpj": "529.982.247-25",
        "referente": "Sinal do lote 12",
        "data": "2025-03-05",
        "forma_pagamento": "PIX",
        "emitido_por": "Duarte Urbanismo Ltda",
        "cpf_emitente": "47.200.760/0001-06",
        "cep_emitente": "88015-200",
        "endereco_emitente": "Av. Beira-Mar Norte, 1800 - Centro",
        "telefone_emitente": "(48) 4000-3010",
        "email_emitente": "Financeiro@DuarteUrbanismo.com",
    }
    data.update(overrides)
    return ReceiptData(**data)


def test_canonical_form_normalizes_fields():
    canonical = canonicalize(make_receipt())
    campos = canonical.split("|")

    assert len(campos) == 13
    assert campos[0] == "REC-000123"
    assert campos[1] == "1500.00"
    assert campos[3] == "MARIA SOUZA"
    assert campos[4] == "52998224725"
    assert campos[-1] == "financeiro@duarteurbanismo.com"


def test_hash_is_deterministic_sha256_hex():
    first = generate_receipt_hash(make_receipt())
    second = generate_receipt_hash(make_receipt())

    assert first == second
    assert re.fullmatch(r"[0-9a-f]{64}", first)


def test_hash_ignores_case_and_document_mask():
    base = generate_receipt_hash(make_receipt())
    variant = generate_receipt_hash(make_receipt(recebido_de="  maria souza ", cpf_cnpj="52998224725"))
    assert base == variant


def test_hash_changes_with_amount_or_secret():
    base = generate_receipt_hash(make_receipt())
    assert generate_receipt_hash(make_receipt(valor=1500.01)) != base
    assert generate_receipt_hash(make_receipt(), secret="outro-segredo") != base


def test_verify_receipt_hash():
    data = make_receipt()
    hash_value = generate_receipt_hash(data)

    assert verify_receipt_hash(data, hash_value)
    assert verify_receipt_hash(data, f"  {hash_value.upper()} ")
    assert not verify_receipt_hash(data, "0" * 64)
    assert not verify_receipt_hash(data, None)


def test_links():
    assert build_verification_url("REC 1", "abc", "https://sgci.example/") == \
        "https://sgci.example/api/recibos/REC%201?hash=abc"
    assert build_share_url("share-1", "https://sgci.example") == "https://sgci.example/recibos/share/share-1"


def test_qr_payload_uses_share_url_when_available():
    data = make_receipt(pix_key="47.200.760/0001-06")
    payload = build_qr_payload(data, "hash123", "https://sgci.example", share_id="abc")

    assert payload.share_url == "https://sgci.example/recibos/share/abc"
    assert payload.verify_url.endswith("/api/recibos/REC-000123?hash=hash123")
    assert payload.pix_key == "47.200.760/0001-06"
    assert payload.emitente == "Duarte Urbanismo Ltda"


def test_qr_payload_without_share_id():
    payload = build_qr_payload(make_receipt(), "hash123")
    assert payload.share_url is None
