import os
import sys

import pytest

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Ambiente de teste: precisa estar definido antes de importar nexedu.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""  # cache desligado
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_PER_MINUTE"] = "10000"
os.environ["LOGIN_RATE_LIMIT_PER_MINUTE"] = "10000"
os.environ["ENVIRONMENT"] = "test"

from fastapi.testclient import TestClient

from nexedu.domain.entities import Role
from nexedu.infrastructure.db import SessionLocal, engine
from nexedu.infrastructure.models import Base
from nexedu.infrastructure.repositories import UserRepository
from nexedu.infrastructure.security import PasswordHasher, get_token_service
from nexedu.interfaces.http.ratelimit import limiter
from nexedu.main import app


@pytest.fixture
def client():
    # Tabelas recriadas a cada teste
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    limiter.reset()
    yield TestClient(app)
    Base.metadata.drop_all(bind=engine)


def create_user(name: str, login: str, password: str, role: Role):
    with SessionLocal() as db:
        return UserRepository(db).create(name, login, PasswordHasher().hash(password), role)


def auth_headers(user) -> dict:
    token = get_token_service().issue(user.identity())
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def professor(client):
    return create_user("Ana", "ana1", "secret123", Role.PROFESSOR)


@pytest.fixture
def aluno(client):
    return create_user("Bruno", "bruno", "senha456", Role.ALUNO)


@pytest.fixture
def professor_headers(professor):
    return auth_headers(professor)


@pytest.fixture
def aluno_headers(aluno):
    return auth_headers(aluno)
