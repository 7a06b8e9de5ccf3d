import uuid
from datetime import date, timedelta

import pytest


@pytest.fixture
def new_negotiation(client, admin_headers, new_client_record, new_unit):
    """Negociação fechada: contrato de 100 mil, 20 mil em permuta, 10 parcelas previstas"""
    def _create(parcelas=None, **overrides):
        cliente = new_client_record()
        unidade = new_unit()
        if parcelas is None:
            parcelas = [{"valor": 8000, "vencimento": date.today().isoformat()}]

        payload = {
            "clienteId": cliente["id"],
            "unidadeId": unidade["id"],
            "valorContrato": 100000,
            "qtdParcelas": 10,
            "permutaLista": [{"tipo": "Veículo", "valor": 20000, "descricao": "Carro"}],
            "status": "Fechado",
            "numeroLote": "12",
            "fase": "Lançamento",
            "parcelas": parcelas,
        }
        payload.update(overrides)
        response = client.post("/api/negociacoes", json=payload, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _create


def sign_receipt(client, headers) -> dict:
    response = client.post("/api/recibos/assinatura", headers=headers, json={
        "numero": f"REC-{uuid.uuid4().hex[:8].upper()}",
        "valor": 8000,
        "recebidoDe": "Maria Souza",
        "cpfCnpj": "529.982.247-25",
        "referente": "Parcela 1 de 10 do lote 12",
        "data": date.today().isoformat(),
        "formaPagamento": "Transferência",
    })
    assert response.status_code == 200, response.text
    return response.json()


def test_create_and_get_with_names(client, admin_headers, new_negotiation):
    negotiation = new_negotiation()

    assert negotiation["id"].startswith("neg-")
    assert negotiation["version"] == 1
    assert negotiation["permutaLista"][0]["valor"] == 20000
    assert negotiation["permuta"]["tipo"] == "Veículo"
    assert len(negotiation["parcelas"]) == 1
    assert negotiation["parcelas"][0]["numero"] == 1
    assert negotiation["parcelas"][0]["status"] == "Pendente"

    body = client.get(f"/api/negociacoes/{negotiation['id']}", headers=admin_headers).json()
    assert body["nomes"]["cliente"] == "Cliente de Teste"
    assert body["nomes"]["unidade"] == "Residencial Teste · Torre A - 101"
    assert body["nomes"]["corretor"] is None


def test_create_with_unknown_client(client, admin_headers, new_unit):
    unidade = new_unit()
    response = client.post("/api/negociacoes", headers=admin_headers, json={
        "clienteId": "cli-inexistente",
        "unidadeId": unidade["id"],
    })
    assert response.status_code == 404
    assert response.json()["error"] == "Cliente não encontrado"


def test_list_filters_by_client(client, admin_headers, new_negotiation):
    negotiation = new_negotiation()
    response = client.get("/api/negociacoes", params={"clienteId": negotiation["clienteId"]}, headers=admin_headers)

    assert response.status_code == 200
    assert [n["id"] for n in response.json()] == [negotiation["id"]]


def test_summary(client, admin_headers, new_negotiation):
    negotiation = new_negotiation()
    body = client.get(f"/api/negociacoes/{negotiation['id']}/resumo", headers=admin_headers).json()

    assert body["negociacaoId"] == negotiation["id"]
    assert body["contratoBase"] == 100000.0
    assert body["totalPermuta"] == 20000.0
    assert body["saldoParcelado"] == 80000.0
    assert body["valorParcelaSimulada"] == 8000.0
    assert body["totalPendente"] == 8000.0
    assert body["saldoEmAberto"] == 100000.0
    assert len(body["proximasParcelas"]) == 1


def test_add_installment_and_version_conflict(client, admin_headers, new_negotiation):
    negotiation = new_negotiation()
    url = f"/api/negociacoes/{negotiation['id']}/parcelas"
    vencimento = (date.today() + timedelta(days=30)).isoformat()

    response = client.post(url, headers=admin_headers, json={
        "valor": 8000, "vencimento": vencimento, "version": negotiation["version"]
    })
    assert response.status_code == 201
    body = response.json()
    assert len(body["parcelas"]) == 2
    assert body["parcelas"][1]["numero"] == 2
    assert body["version"] > negotiation["version"]

    # Versão antiga: outra sessão já alterou a negociação
    response = client.post(url, headers=admin_headers, json={
        "valor": 8000, "vencimento": vencimento, "version": negotiation["version"]
    })
    assert response.status_code == 409
    assert response.json()["currentVersion"] == body["version"]


def test_installment_limit(client, admin_headers, new_negotiation):
    vencimento = date.today().isoformat()
    negotiation = new_negotiation(
        parcelas=[{"valor": 800, "vencimento": vencimento} for _ in range(100)],
        qtdParcelas=100,
    )
    assert len(negotiation["parcelas"]) == 100

    response = client.post(
        f"/api/negociacoes/{negotiation['id']}/parcelas",
        headers=admin_headers,
        json={"valor": 800, "vencimento": vencimento},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Limite de 100 parcelas atingido para esta negociação."

    body = client.get(f"/api/negociacoes/{negotiation['id']}", headers=admin_headers).json()
    assert len(body["parcelas"]) == 100


def test_toggle_installment_status(client, admin_headers, new_negotiation):
    negotiation = new_negotiation()
    parcela_id = negotiation["parcelas"][0]["id"]
    url = f"/api/negociacoes/{negotiation['id']}/parcelas/{parcela_id}/status"

    body = client.post(url, headers=admin_headers).json()
    assert body["parcelas"][0]["status"] == "Paga"

    body = client.post(url, headers=admin_headers).json()
    assert body["parcelas"][0]["status"] == "Pendente"

    body = client.post(url, headers=admin_headers, json={"status": "Paga"}).json()
    assert body["parcelas"][0]["status"] == "Paga"

    resumo = client.get(f"/api/negociacoes/{negotiation['id']}/resumo", headers=admin_headers).json()
    assert resumo["totalPago"] == 8000.0
    assert resumo["saldoEmAberto"] == 92000.0


def test_toggle_with_stale_installment_version(client, admin_headers, new_negotiation):
    negotiation = new_negotiation()
    parcela_id = negotiation["parcelas"][0]["id"]

    response = client.post(
        f"/api/negociacoes/{negotiation['id']}/parcelas/{parcela_id}/status",
        headers=admin_headers,
        json={"version": 99},
    )
    assert response.status_code == 409


def test_unknown_installment(client, admin_headers, new_negotiation):
    negotiation = new_negotiation()
    response = client.post(
        f"/api/negociacoes/{negotiation['id']}/parcelas/par-inexistente/status",
        headers=admin_headers,
    )
    assert response.status_code == 404
    assert response.json()["error"] == "Parcela não encontrada"


def test_link_receipt_is_idempotent_and_exclusive(client, admin_headers, new_negotiation):
    negotiation = new_negotiation()
    parcela_id = negotiation["parcelas"][0]["id"]
    url = f"/api/negociacoes/{negotiation['id']}/parcelas/{parcela_id}/recibo-link"
    signed = sign_receipt(client, admin_headers)

    body = client.post(url, headers=admin_headers, json={"shareId": signed["shareId"]}).json()
    parcela = body["parcelas"][0]
    assert parcela["reciboShareId"] == signed["shareId"]
    assert parcela["reciboNumero"] == signed["qrPayload"]["numero"]
    assert parcela["reciboEmitidoEm"] == date.today().isoformat()

    # Mesmo recibo: nada muda
    again = client.post(url, headers=admin_headers, json={"shareId": signed["shareId"]})
    assert again.status_code == 200
    assert again.json()["version"] == body["version"]

    # Outro recibo para a mesma parcela: conflito
    other = sign_receipt(client, admin_headers)
    response = client.post(url, headers=admin_headers, json={"shareId": other["shareId"]})
    assert response.status_code == 409
    assert response.json()["errorType"] == "ReceiptLinkConflictError"


def test_link_unknown_receipt(client, admin_headers, new_negotiation):
    negotiation = new_negotiation()
    parcela_id = negotiation["parcelas"][0]["id"]
    response = client.post(
        f"/api/negociacoes/{negotiation['id']}/parcelas/{parcela_id}/recibo-link",
        headers=admin_headers,
        json={"shareId": str(uuid.uuid4())},
    )
    assert response.status_code == 404


def test_installment_receipt_is_issued_and_linked(client, admin_headers, new_negotiation):
    negotiation = new_negotiation()
    parcela_id = negotiation["parcelas"][0]["id"]

    response = client.post(
        f"/api/negociacoes/{negotiation['id']}/parcelas/{parcela_id}/recibo",
        headers=admin_headers,
    )
    assert response.status_code == 200, response.text
    assert response.content.startswith(b"%PDF")
    share_id = response.headers["x-recibo-share-id"]

    body = client.get(f"/api/negociacoes/{negotiation['id']}", headers=admin_headers).json()
    parcela = body["parcelas"][0]
    assert parcela["reciboShareId"] == share_id
    assert parcela["reciboNumero"].startswith("NEG-")
    assert parcela["reciboNumero"].endswith("-PAR-001")

    lookup = client.get(f"/api/recibos/{parcela['reciboNumero']}").json()
    assert lookup["valid"] is True
    assert lookup["recibo"]["recebidoDe"] == "Cliente de Teste"
    assert "Parcela 1 de 10" in lookup["recibo"]["referente"]


def test_removed_references_show_placeholder(client, admin_headers, new_negotiation):
    negotiation = new_negotiation()
    response = client.delete(f"/api/clientes/{negotiation['clienteId']}", headers=admin_headers)
    assert response.status_code == 200

    body = client.get(f"/api/negociacoes/{negotiation['id']}", headers=admin_headers).json()
    assert body["nomes"]["cliente"] == "(removido)"

    # Sem cliente não há recibo
    parcela_id = negotiation["parcelas"][0]["id"]
    response = client.post(
        f"/api/negociacoes/{negotiation['id']}/parcelas/{parcela_id}/recibo",
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Cadastre o cliente para emitir recibos desta negociação."


def test_update_and_delete(client, admin_headers, new_negotiation):
    negotiation = new_negotiation()
    url = f"/api/negociacoes/{negotiation['id']}"

    response = client.put(url, headers=admin_headers, json={
        "permutaLista": [{"tipo": "Imóvel", "valor": 30000}],
        "version": negotiation["version"],
    })
    assert response.status_code == 200
    assert response.json()["permutaLista"][0]["descricao"] == "Bem em permuta"

    response = client.put(url, headers=admin_headers, json={"status": "Em andamento", "version": negotiation["version"]})
    assert response.status_code == 409

    resumo = client.get(f"{url}/resumo", headers=admin_headers).json()
    assert resumo["totalPermuta"] == 30000.0

    assert client.delete(url, headers=admin_headers).status_code == 200
    assert client.get(url, headers=admin_headers).status_code == 404
