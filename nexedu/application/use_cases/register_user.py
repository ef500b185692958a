from __future__ import annotations

from ...domain.entities import Role, User
from ...domain.errors import ConflictError, ValidationError
from ..dto import RegisterUserInput

class IUserRepository:
    def get(self, user_id: int) -> User | None: ...
    def get_by_login(self, login: str) -> User | None: ...
    def get_password_hash(self, login: str) -> tuple[User, str] | None: ...
    def list(self) -> list[User]: ...
    def create(self, name: str, login: str, password_hash: str, role: Role) -> User: ...
    def update(self, user_id: int, **fields) -> User | None: ...
    def delete(self, user_id: int) -> bool: ...

class IPasswordHasher:
    def hash(self, plain: str) -> str: ...
    def verify(self, plain: str, hashed: str) -> bool: ...
    def dummy_verify(self) -> bool: ...


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def parse_role(value: str) -> Role:
    role = Role.parse(value)
    if role is None:
        raise ValidationError("Role deve ser PROFESSOR ou ALUNO")
    return role


class RegisterUser:
    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher):
        self.repo = repo
        self.hasher = hasher

    def execute(self, data: RegisterUserInput) -> User:
        if any(is_blank(v) for v in (data.name, data.login, data.password, data.role)):
            raise ValidationError("Todos os campos são obrigatórios")
        role = parse_role(data.role)
        if self.repo.get_by_login(data.login):
            raise ConflictError("Login já está em uso")
        pwd_hash = self.hasher.hash(data.password)
        # uma corrida entre a checagem e o insert vira ConflictError no repositório
        return self.repo.create(data.name, data.login, pwd_hash, role)
