from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    PROFESSOR = "PROFESSOR"
    ALUNO = "ALUNO"

    @classmethod
    def parse(cls, value) -> "Role | None":
        try:
            return cls(value)
        except (ValueError, TypeError):
            return None


@dataclass(frozen=True)
class AuthenticatedIdentity:
    id: int
    login: str
    role: Role


@dataclass(frozen=True)
class User:
    id: int | None
    name: str
    login: str
    role: Role
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def identity(self) -> AuthenticatedIdentity:
        return AuthenticatedIdentity(id=self.id, login=self.login, role=self.role)


@dataclass(frozen=True)
class Post:
    id: int | None
    title: str
    content: str
    author_name: str
    author_id: int | None
    author: User | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
