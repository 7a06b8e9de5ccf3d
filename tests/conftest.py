"""
Fixtures compartilhadas: banco SQLite temporário, cliente HTTP e token do admin
"""
import os
import random
import tempfile
import uuid

import pytest

_TMP_DIR = tempfile.mkdtemp(prefix="sgci-tests-")

# Precisa vir antes de qualquer import de sgci (settings é lido na importação)
os.environ.pop("DATABASE_URL", None)
os.environ["SGCI_DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/test.db"
os.environ["UPLOADS_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ADMIN_EMAIL"] = "admin@example.com"
os.environ["ADMIN_PASSWORD"] = "admin-test-123"
os.environ["HASH_SECRET"] = "segredo-de-teste"
os.environ["ENVIRONMENT"] = "test"
os.environ["APP_BASE_URL"] = "http://sgci.test"

from fastapi.testclient import TestClient  # noqa: E402

from sgci.main import app  # noqa: E402

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-test-123"


def _cpf_digit(base: str) -> str:
    peso = len(base) + 1
    soma = sum(int(d) * (peso - i) for i, d in enumerate(base))
    resto = (soma * 10) % 11
    return "0" if resto >= 10 else str(resto)


def make_cpf() -> str:
    """CPF válido e aleatório, com máscara"""
    base = "".join(str(random.randint(0, 9)) for _ in range(9))
    while len(set(base)) == 1:
        base = "".join(str(random.randint(0, 9)) for _ in range(9))
    base += _cpf_digit(base)
    base += _cpf_digit(base)
    return f"{base[:3]}.{base[3:6]}.{base[6:9]}-{base[9:]}"


def unique(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


@pytest.fixture(scope="session")
def client():
    # O context manager dispara o lifespan (criação das tabelas e do admin)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="session")
def admin_headers(client):
    response = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def new_client_record(client, admin_headers):
    """Cria um cliente PF com CPF válido e único"""
    def _create(nome="Cliente de Teste"):
        response = client.post("/api/clientes", headers=admin_headers, json={
            "tipo": "PF",
            "nome": nome,
            "documento": make_cpf(),
            "email": f"{unique('cliente')}@example.com",
            "telefone": "(48) 99999-0000",
            "cep": "88015200",
            "endereco": "Rua das Flores, 100 - Centro",
        })
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def new_unit(client, admin_headers):
    def _create(nome="Residencial Teste", unidade="Torre A - 101"):
        response = client.post("/api/empreendimentos", headers=admin_headers, json={
            "nome": nome,
            "metragem": 82.5,
            "unidade": unidade,
            "valorBase": 450000,
            "status": "Disponível",
        })
        assert response.status_code == 201, response.text
        return response.json()
    return _create
