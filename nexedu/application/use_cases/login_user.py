from ...domain.entities import AuthenticatedIdentity
from ...domain.errors import InvalidCredentials, ValidationError
from ..dto import LoginResult
from .register_user import IPasswordHasher, IUserRepository, is_blank

class ITokenIssuer:
    def issue(self, identity: AuthenticatedIdentity) -> str: ...


class LoginUser:
    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher, tokens: ITokenIssuer):
        self.repo = repo
        self.hasher = hasher
        self.tokens = tokens

    def execute(self, login: str | None, password: str | None) -> LoginResult:
        if is_blank(login) or is_blank(password):
            raise ValidationError("Login e senha são obrigatórios")

        found = self.repo.get_password_hash(login)
        # mesma resposta para login inexistente e senha errada
        if not found:
            # custo de bcrypt equivalente ao de uma senha errada
            self.hasher.dummy_verify()
            raise InvalidCredentials()
        user, pwd_hash = found
        if not self.hasher.verify(password, pwd_hash):
            raise InvalidCredentials()

        token = self.tokens.issue(user.identity())
        return LoginResult(
            token=token,
            id=user.id,
            name=user.name,
            login=user.login,
            role=user.role.value,
        )
