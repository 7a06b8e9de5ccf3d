EMPTY_STATE = {"empreendimentos": [], "clientes": [], "negociacoes": [], "corretores": []}

STATE = {
    "empreendimentos": [
        {"id": "emp-estado-1", "nome": "Residencial Estado", "metragem": 60, "unidade": "Apto 101", "valorBase": 300000},
    ],
    "clientes": [
        {"id": "cli-estado-1", "nome": "Cliente Estado", "documento": "529.982.247-25", "email": "estado@example.com"},
    ],
    "negociacoes": [
        {
            "id": "neg-estado-1",
            "clienteId": "cli-estado-1",
            "unidadeId": "emp-estado-1",
            "valorContrato": 300000,
            "permuta": {"tipo": "Veículo", "valor": 10000},
            "parcelas": [{"valor": 1000, "vencimento": "2025-01-10"}],
        },
    ],
    "corretores": [
        {"nome": "Corretor Estado", "creci": "99999-F", "email": " CORRETOR@Example.com "},
    ],
}


def test_replace_and_read_state(client, admin_headers):
    response = client.put("/api/sgci/state", json=STATE, headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"ok": True}

    response = client.get("/api/sgci/state", headers=admin_headers)
    assert response.status_code == 200
    assert response.headers["cache-control"] == "no-store"
    state = response.json()

    assert [u["id"] for u in state["empreendimentos"]] == ["emp-estado-1"]
    assert [c["id"] for c in state["clientes"]] == ["cli-estado-1"]

    negotiation = state["negociacoes"][0]
    assert negotiation["permutaLista"] == [{"tipo": "Veículo", "valor": 10000.0, "descricao": "Bem em permuta"}]
    assert negotiation["status"] == "Em prospecção"
    assert negotiation["parcelas"][0]["numero"] == 1
    assert negotiation["parcelas"][0]["status"] == "Pendente"

    broker = state["corretores"][0]
    assert broker["email"] == "corretor@example.com"
    assert broker["status"] == "Aprovado"


def test_seed_only_when_empty(client, admin_headers):
    client.put("/api/sgci/state", json=STATE, headers=admin_headers)

    body = client.post("/api/sgci/seed", headers=admin_headers).json()
    assert body["ok"] is True
    assert body["seeded"] is False
    assert [n["id"] for n in body["state"]["negociacoes"]] == ["neg-estado-1"]


def test_seed_on_empty_state(client, admin_headers):
    client.put("/api/sgci/state", json=EMPTY_STATE, headers=admin_headers)

    body = client.post("/api/sgci/seed", headers=admin_headers).json()
    assert body["seeded"] is True

    state = body["state"]
    assert {n["id"] for n in state["negociacoes"]} == {"neg-aurora-village", "neg-bosque-lote-02"}
    assert len(state["corretores"]) == 2
    assert all(b["status"] == "Aprovado" for b in state["corretores"])

    # Recibos das parcelas pagas já assinados
    lookup = client.get("/api/recibos/NEG-AURORA-PAR-001").json()
    assert lookup["valid"] is True
    assert lookup["recibo"]["recebidoDe"] == "Lívia Martinez"

    shared = client.get("/api/recibos/share/f79862dd-4108-4dde-8a07-f3f27154796a").json()
    assert shared["valid"] is True
    assert shared["recibo"]["numero"] == "NEG-BOSQUE-PAR-001"

    stats = client.get("/api/stats/dashboard", headers=admin_headers).json()
    assert stats["negociacoes"]["total"] == 2
    assert stats["recibos"]["emitidos"] == 4
    assert stats["recibos"]["painel"] == {
        "totalPago": 60000.0,
        "totalPendente": 60000.0,
        "parcelasPagas": 3,
        "totalParcelas": 6,
    }


def test_state_requires_authentication(client):
    assert client.get("/api/sgci/state").status_code in (401, 403)
    assert client.put("/api/sgci/state", json=EMPTY_STATE).status_code in (401, 403)
