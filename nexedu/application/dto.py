from dataclasses import dataclass

@dataclass
class RegisterUserInput:
    name: str | None
    login: str | None
    password: str | None
    role: str | None

@dataclass
class UpdateUserInput:
    name: str | None = None
    login: str | None = None
    password: str | None = None
    role: str | None = None

@dataclass
class LoginResult:
    token: str
    id: int
    name: str
    login: str
    role: str

@dataclass
class PostInput:
    title: str | None = None
    content: str | None = None
    author_name: str | None = None
