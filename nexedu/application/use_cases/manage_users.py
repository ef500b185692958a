from ...domain.entities import User
from ...domain.errors import ConflictError, NotFound
from ..dto import UpdateUserInput
from .register_user import IPasswordHasher, IUserRepository, is_blank, parse_role

USER_NOT_FOUND = "Usuário não encontrado"


class UpdateUser:
    """Atualização parcial: campos ausentes ou vazios ficam como estão."""

    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher):
        self.repo = repo
        self.hasher = hasher

    def execute(self, user_id: int, data: UpdateUserInput) -> User:
        fields = {}
        if not is_blank(data.role):
            fields["role"] = parse_role(data.role)

        existing = self.repo.get(user_id)
        if not existing:
            raise NotFound(USER_NOT_FOUND)

        if not is_blank(data.login) and data.login != existing.login:
            if self.repo.get_by_login(data.login):
                raise ConflictError("Login já está em uso")
            fields["login"] = data.login
        if not is_blank(data.name):
            fields["name"] = data.name
        if not is_blank(data.password):
            fields["password_hash"] = self.hasher.hash(data.password)

        user = self.repo.update(user_id, **fields)
        if not user:
            raise NotFound(USER_NOT_FOUND)
        return user


class DeleteUser:
    def __init__(self, repo: IUserRepository):
        self.repo = repo

    def execute(self, user_id: int) -> None:
        if not self.repo.delete(user_id):
            raise NotFound(USER_NOT_FOUND)
