import pytest

FORBIDDEN = {"error": "Acesso negado. Apenas professores podem realizar esta ação"}


def test_list_users(client, professor, aluno, professor_headers):
    response = client.get("/users", headers=professor_headers)
    assert response.status_code == 200
    users = response.json()
    assert [u["login"] for u in users] == ["ana1", "bruno"]
    for user in users:
        assert set(user) == {"id", "name", "login", "role", "createdAt", "updatedAt"}


@pytest.mark.parametrize("method,path", [
    ("get", "/users"),
    ("get", "/users/1"),
    ("put", "/users/1"),
    ("delete", "/users/1"),
])
def test_users_admin_is_professor_only(client, aluno_headers, method, path):
    kwargs = {"headers": aluno_headers}
    if method == "put":
        kwargs["json"] = {"name": "x"}
    response = getattr(client, method)(path, **kwargs)
    assert response.status_code == 403
    assert response.json() == FORBIDDEN


def test_users_admin_requires_token(client):
    response = client.get("/users")
    assert response.status_code == 401


def test_get_user(client, aluno, professor_headers):
    response = client.get(f"/users/{aluno.id}", headers=professor_headers)
    assert response.status_code == 200
    assert response.json()["login"] == "bruno"
    assert response.json()["role"] == "ALUNO"


def test_get_user_not_found(client, professor_headers):
    response = client.get("/users/999", headers=professor_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Usuário não encontrado"}


def test_update_user_partial(client, aluno, professor_headers):
    response = client.put(f"/users/{aluno.id}", json={"name": "Bruno Silva"}, headers=professor_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Bruno Silva"
    assert data["login"] == "bruno"
    assert data["role"] == "ALUNO"


def test_update_user_role_and_password(client, aluno, professor_headers):
    response = client.put(
        f"/users/{aluno.id}",
        json={"role": "PROFESSOR", "password": "nova-senha"},
        headers=professor_headers,
    )
    assert response.status_code == 200
    assert response.json()["role"] == "PROFESSOR"
    assert "password" not in response.json()

    old = client.post("/auth/login", json={"login": "bruno", "password": "senha456"})
    assert old.status_code == 401
    new = client.post("/auth/login", json={"login": "bruno", "password": "nova-senha"})
    assert new.status_code == 200
    assert new.json()["user"]["role"] == "PROFESSOR"


def test_update_user_invalid_role(client, aluno, professor_headers):
    response = client.put(f"/users/{aluno.id}", json={"role": "DIRETOR"}, headers=professor_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Role deve ser PROFESSOR ou ALUNO"}


def test_update_user_login_conflict(client, aluno, professor_headers):
    response = client.put(f"/users/{aluno.id}", json={"login": "ana1"}, headers=professor_headers)
    assert response.status_code == 409
    assert response.json() == {"error": "Login já está em uso"}


def test_update_user_same_login_is_not_conflict(client, aluno, professor_headers):
    response = client.put(f"/users/{aluno.id}", json={"login": "bruno"}, headers=professor_headers)
    assert response.status_code == 200


def test_update_user_not_found(client, professor_headers):
    response = client.put("/users/999", json={"name": "x"}, headers=professor_headers)
    assert response.status_code == 404


def test_delete_user(client, aluno, professor_headers):
    response = client.delete(f"/users/{aluno.id}", headers=professor_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Usuário deletado com sucesso"}
    assert client.get(f"/users/{aluno.id}", headers=professor_headers).status_code == 404
    assert client.delete(f"/users/{aluno.id}", headers=professor_headers).status_code == 404


def test_deleting_author_keeps_posts(client, professor_headers):
    """Posts sobrevivem ao autor, com authorId nulo"""
    other = client.post(
        "/auth/register",
        json={"name": "Carla", "login": "carla", "password": "pw123456", "role": "PROFESSOR"},
    ).json()
    token = client.post("/auth/login", json={"login": "carla", "password": "pw123456"}).json()["token"]
    post = client.post(
        "/posts",
        json={"Title": "T", "Content": "C", "Author": "Carla"},
        headers={"Authorization": f"Bearer {token}"},
    ).json()
    assert post["authorId"] == other["id"]

    assert client.delete(f"/users/{other['id']}", headers=professor_headers).status_code == 200

    orphan = client.get(f"/posts/{post['id']}", headers=professor_headers).json()
    assert orphan["authorId"] is None
    assert orphan["author"] is None
    assert orphan["Author"] == "Carla"


def test_deleted_user_token_cannot_create_posts(client, professor_headers):
    """Token de usuário removido não publica nem herda o id de outro"""
    carla = client.post(
        "/auth/register",
        json={"name": "Carla", "login": "carla", "password": "pw123456", "role": "PROFESSOR"},
    ).json()
    token = client.post("/auth/login", json={"login": "carla", "password": "pw123456"}).json()["token"]
    assert client.delete(f"/users/{carla['id']}", headers=professor_headers).status_code == 200

    response = client.post(
        "/posts",
        json={"Title": "T", "Content": "C", "Author": "Carla"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 401
    assert response.json() == {"error": "Token ausente, inválido ou expirado"}
    assert client.get("/posts", headers=professor_headers).json() == []

    novo = client.post(
        "/auth/register",
        json={"name": "Novo", "login": "novo", "password": "pw123456", "role": "ALUNO"},
    ).json()
    assert novo["id"] != carla["id"]
