import uuid
from datetime import date

import pytest


def receipt_numero() -> str:
    return f"REC-{uuid.uuid4().hex[:8].upper()}"


def receipt_payload(**overrides):
    data = {
        "numero": receipt_numero(),
        "valor": 1500.00,
        "recebidoDe": "Maria Souza",
        "cpfCnpj": "529.982.247-25",
        "referente": "Sinal do lote 12 - Quadra B",
        "data": date.today().isoformat(),
        "formaPagamento": "PIX",
    }
    data.update(overrides)
    return data


@pytest.fixture
def issued(client, admin_headers):
    """Emite um recibo e devolve (payload, resposta)"""
    payload = receipt_payload()
    response = client.post("/api/recibos/gerar-pdf", json=payload, headers=admin_headers)
    assert response.status_code == 200, response.text
    return payload, response


def test_generate_pdf_returns_signed_pdf(issued):
    payload, response = issued

    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")
    assert f"recibo-{payload['numero']}.pdf" in response.headers["content-disposition"]

    share_id = response.headers["x-recibo-share-id"]
    assert share_id
    assert response.headers["x-recibo-share-url"].endswith(f"/recibos/share/{share_id}")


def test_lookup_by_number_validates_stored_hash(client, issued):
    payload, _ = issued

    response = client.get(f"/api/recibos/{payload['numero']}")
    assert response.status_code == 200
    body = response.json()

    assert body["valid"] is True
    assert body["hashMatches"] is True
    assert body["providedHashMatches"] is None
    assert body["recibo"]["numero"] == payload["numero"]
    assert body["recibo"]["recebidoDe"] == "Maria Souza"
    assert body["recibo"]["valorExtenso"] == "mil e quinhentos reais"
    assert len(body["recibo"]["hash"]) == 64


def test_lookup_with_provided_hash(client, issued):
    payload, _ = issued
    stored_hash = client.get(f"/api/recibos/{payload['numero']}").json()["recibo"]["hash"]

    body = client.get(f"/api/recibos/{payload['numero']}", params={"hash": stored_hash}).json()
    assert body["valid"] is True
    assert body["providedHashMatches"] is True

    body = client.get(f"/api/recibos/{payload['numero']}", params={"hash": "0" * 64}).json()
    assert body["valid"] is False
    assert body["hashMatches"] is True
    assert body["providedHashMatches"] is False


def test_lookup_by_share_id(client, issued):
    payload, response = issued
    share_id = response.headers["x-recibo-share-id"]

    body = client.get(f"/api/recibos/share/{share_id}").json()
    assert body["valid"] is True
    assert body["recibo"]["numero"] == payload["numero"]
    assert body["recibo"]["shareUrl"].endswith(f"/recibos/share/{share_id}")
    assert body["qrPayload"]["hash"] == body["recibo"]["hash"]


def test_unknown_receipt(client):
    response = client.get("/api/recibos/REC-NAOEXISTE")
    assert response.status_code == 404
    assert response.json() == {"valid": False, "reason": "NOT_FOUND"}

    response = client.get(f"/api/recibos/share/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json() == {"error": "Recibo não encontrado."}


def test_invalid_receipt_returns_every_error(client, admin_headers):
    payload = receipt_payload(recebidoDe="", cpfCnpj="123")
    response = client.post("/api/recibos/gerar-pdf", json=payload, headers=admin_headers)

    assert response.status_code == 400
    errors = response.json()["errors"]
    assert "Nome/Razão Social é obrigatório" in errors
    assert "CPF deve ter 11 dígitos ou CNPJ 14 dígitos" in errors

    # Nada é gravado quando a validação falha
    assert client.get(f"/api/recibos/{payload['numero']}").status_code == 404


def test_reissuing_same_number_keeps_share_id(client, admin_headers):
    payload = receipt_payload()
    first = client.post("/api/recibos/gerar-pdf", json=payload, headers=admin_headers)
    second = client.post("/api/recibos/gerar-pdf", json={**payload, "valor": 1600}, headers=admin_headers)

    assert second.status_code == 200
    assert first.headers["x-recibo-share-id"] == second.headers["x-recibo-share-id"]

    body = client.get(f"/api/recibos/{payload['numero']}").json()
    assert body["recibo"]["valor"] == 1600.0
    assert body["valid"] is True


def test_pdf_with_pix_options(client, admin_headers):
    payload = receipt_payload(status="Pendente", qrOptions={"pixKey": "47.200.760/0001-06"})
    response = client.post("/api/recibos/gerar-pdf", json=payload, headers=admin_headers)

    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")


def test_sign_without_pdf(client, admin_headers):
    payload = receipt_payload()
    response = client.post("/api/recibos/assinatura", json=payload, headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert len(body["hash"]) == 64
    assert body["shareId"]
    assert body["qrPayload"]["numero"] == payload["numero"]
    assert body["qrPayload"]["verifyUrl"].endswith(f"/api/recibos/{payload['numero']}?hash={body['hash']}")

    lookup = client.get(f"/api/recibos/{payload['numero']}", params={"hash": body["hash"]}).json()
    assert lookup["valid"] is True


def test_issuing_requires_authentication(client):
    response = client.post("/api/recibos/gerar-pdf", json=receipt_payload())
    assert response.status_code in (401, 403)


@pytest.mark.parametrize("endpoint", ["/api/recibos/gerar-pdf", "/api/recibos/assinatura"])
def test_amount_above_limit_is_a_validation_error(client, admin_headers, endpoint):
    payload = receipt_payload(valor=1_000_000_000)
    response = client.post(endpoint, json=payload, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["errors"] == ["Valor muito alto"]
    assert client.get(f"/api/recibos/{payload['numero']}").status_code == 404
