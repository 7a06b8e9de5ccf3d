import os
import uuid

from sgci.core.config import settings

# PNG 1x1 transparente
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


def registration_form(**overrides):
    suffix = uuid.uuid4().hex[:6].upper()
    form = {
        "nome": "Joana Corretora",
        "creci": f"{suffix}-F",
        "email": f"joana.{suffix.lower()}@example.com",
        "telefone": "(48) 99888-7766",
        "cidade": "Florianópolis",
        "estado": "SC",
        "bancoNome": "Banco do Brasil",
        "bancoPix": "joana@example.com",
    }
    form.update(overrides)
    return form


def test_self_registration_is_pending(client, admin_headers):
    form = registration_form()
    response = client.post("/api/corretores/cadastro", data=form)

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Cadastro realizado com sucesso! Aguarde aprovação."

    broker = client.get(f"/api/corretores/{body['corretorId']}", headers=admin_headers).json()
    assert broker["status"] == "Pendente"
    assert broker["creci"] == form["creci"]
    assert broker["whatsapp"] == form["telefone"]

    public = client.get("/api/public/corretores").json()
    assert body["corretorId"] not in [b["id"] for b in public]


def test_registration_with_photo(client, admin_headers):
    response = client.post(
        "/api/corretores/cadastro",
        data=registration_form(),
        files={"foto": ("foto.png", PNG_BYTES, "image/png")},
    )
    assert response.status_code == 201, response.text
    broker_id = response.json()["corretorId"]

    broker = client.get(f"/api/corretores/{broker_id}", headers=admin_headers).json()
    assert broker["foto"] == f"/uploads/corretores/{broker_id}.png"
    assert os.path.exists(os.path.join(settings.UPLOADS_DIR, "corretores", f"{broker_id}.png"))

    photo = client.get(broker["foto"])
    assert photo.status_code == 200
    assert photo.content == PNG_BYTES


def test_registration_rejects_other_image_types(client):
    response = client.post(
        "/api/corretores/cadastro",
        data=registration_form(),
        files={"foto": ("foto.gif", b"GIF89a", "image/gif")},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Formato de imagem inválido. Use JPG, PNG ou WEBP"


def test_registration_validates_fields(client):
    response = client.post("/api/corretores/cadastro", data=registration_form(nome="Jo"))
    assert response.status_code == 400
    assert response.json()["error"] == "Nome completo é obrigatório (mínimo 3 caracteres)"

    response = client.post("/api/corretores/cadastro", data=registration_form(email="invalido"))
    assert response.status_code == 400
    assert response.json()["error"] == "E-mail válido é obrigatório"


def test_duplicate_creci(client):
    form = registration_form()
    assert client.post("/api/corretores/cadastro", data=form).status_code == 201

    response = client.post(
        "/api/corretores/cadastro",
        data=registration_form(creci=form["creci"].lower()),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "CRECI já cadastrado no sistema"


def test_approval_publishes_broker(client, admin_headers):
    broker_id = client.post("/api/corretores/cadastro", data=registration_form()).json()["corretorId"]

    response = client.post(
        f"/api/corretores/{broker_id}/aprovacao",
        headers=admin_headers,
        json={"status": "Aprovado"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Corretor aprovado com sucesso"
    assert body["corretor"]["status"] == "Aprovado"
    assert body["corretor"]["aprovadoPorNome"]
    assert body["corretor"]["aprovadoEm"]

    public = {b["id"]: b for b in client.get("/api/public/corretores").json()}
    assert broker_id in public
    assert "bancoPix" not in public[broker_id]
    assert "bancoNome" not in public[broker_id]


def test_rejection(client, admin_headers):
    broker_id = client.post("/api/corretores/cadastro", data=registration_form()).json()["corretorId"]

    body = client.post(
        f"/api/corretores/{broker_id}/aprovacao",
        headers=admin_headers,
        json={"status": "Rejeitado"},
    ).json()
    assert body["message"] == "Corretor rejeitado com sucesso"

    pending = client.get("/api/corretores", params={"status": "Rejeitado"}, headers=admin_headers).json()
    assert broker_id in [b["id"] for b in pending]


def test_staff_created_broker_is_approved(client, admin_headers):
    suffix = uuid.uuid4().hex[:6]
    response = client.post("/api/corretores", headers=admin_headers, json={
        "nome": "Carlos Lima",
        "creci": f"{suffix}-j",
        "email": f"Carlos.{suffix}@Example.com",
        "telefone": "(48) 3333-4444",
    })

    assert response.status_code == 201, response.text
    broker = response.json()
    assert broker["status"] == "Aprovado"
    assert broker["creci"] == f"{suffix}-J".upper()
    assert broker["email"] == f"carlos.{suffix}@example.com"

    response = client.put(f"/api/corretores/{broker['id']}", headers=admin_headers, json={
        "observacoes": "Atende aos sábados",
        "version": broker["version"],
    })
    assert response.status_code == 200
    assert response.json()["observacoes"] == "Atende aos sábados"


def test_broker_routes_require_authentication(client):
    assert client.get("/api/corretores").status_code in (401, 403)


def broker_login(client, admin_headers, broker_id):
    """Cria um usuário CORRETOR ligado ao corretor e devolve os headers dele"""
    email = f"{uuid.uuid4().hex[:8]}@example.com"
    response = client.post("/api/auth/users", headers=admin_headers, json={
        "email": email,
        "password": "senha-segura-1",
        "name": "Corretor Logado",
        "role": "CORRETOR",
        "corretorId": broker_id,
    })
    assert response.status_code == 201, response.text

    token = client.post("/api/auth/login", json={"email": email, "password": "senha-segura-1"}).json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


def test_broker_replaces_own_photo(client, admin_headers):
    response = client.post(
        "/api/corretores/cadastro",
        data=registration_form(),
        files={"foto": ("foto.webp", b"RIFF\x00\x00\x00\x00WEBP", "image/webp")},
    )
    broker_id = response.json()["corretorId"]
    headers = broker_login(client, admin_headers, broker_id)
    upload_dir = os.path.join(settings.UPLOADS_DIR, "corretores")

    response = client.post(
        "/api/corretores/me/foto",
        headers=headers,
        files={"foto": ("nova.png", PNG_BYTES, "image/png")},
    )
    assert response.status_code == 200, response.text
    assert response.json()["foto"] == f"/uploads/corretores/{broker_id}.png"

    assert client.get("/api/corretores/me", headers=headers).json()["foto"] == f"/uploads/corretores/{broker_id}.png"
    assert os.path.exists(os.path.join(upload_dir, f"{broker_id}.png"))
    assert not os.path.exists(os.path.join(upload_dir, f"{broker_id}.webp"))


def test_photo_update_requires_a_file(client, admin_headers):
    broker_id = client.post("/api/corretores/cadastro", data=registration_form()).json()["corretorId"]
    headers = broker_login(client, admin_headers, broker_id)

    response = client.post("/api/corretores/me/foto", headers=headers, data={"observacao": "sem foto"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Foto é obrigatória"


def test_photo_update_without_broker_record(client, admin_headers):
    response = client.post(
        "/api/corretores/me/foto",
        headers=admin_headers,
        files={"foto": ("nova.png", PNG_BYTES, "image/png")},
    )
    assert response.status_code == 404
