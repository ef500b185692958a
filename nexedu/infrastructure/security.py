from datetime import datetime, timedelta, timezone

import structlog
from jose import jwt, JWTError, ExpiredSignatureError
from jose.exceptions import JWTClaimsError
from passlib.context import CryptContext

from ..config import settings, uses_dev_secret
from ..domain.entities import AuthenticatedIdentity, Role
from ..domain.errors import VerificationError, VerificationFailure

logger = structlog.get_logger(__name__)

pwd = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

class PasswordHasher:
    def hash(self, plain: str) -> str: return pwd.hash(plain)
    def verify(self, plain: str, hashed: str) -> bool: return pwd.verify(plain, hashed)
    def dummy_verify(self) -> bool: return pwd.dummy_verify()


class TokenService:
    """Emite e verifica tokens JWT assinados com {id, login, role}.

    Não há lista de revogação nem refresh: o token vale até expirar.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires_in: timedelta = timedelta(hours=24),
    ):
        if not secret_key:
            raise ValueError("SECRET_KEY must not be empty")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_in = expires_in

    def issue(self, identity: AuthenticatedIdentity, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "id": identity.id,
            "login": identity.login,
            "role": Role(identity.role).value,
            "iat": issued_at,
            "exp": issued_at + self.expires_in,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> AuthenticatedIdentity:
        # estrutura primeiro, para separar Malformed de BadSignature
        try:
            jwt.get_unverified_claims(token)
        except JWTError as e:
            raise VerificationError(VerificationFailure.MALFORMED, str(e)) from e

        try:
            claims = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise VerificationError(VerificationFailure.EXPIRED, str(e)) from e
        except JWTClaimsError as e:
            # assinatura ok, mas exp/iat com tipo errado
            raise VerificationError(VerificationFailure.MALFORMED, str(e)) from e
        except JWTError as e:
            raise VerificationError(VerificationFailure.BAD_SIGNATURE, str(e)) from e

        return self._identity_from_claims(claims)

    @staticmethod
    def _identity_from_claims(claims: dict) -> AuthenticatedIdentity:
        user_id = claims.get("id")
        login = claims.get("login")
        role = Role.parse(claims.get("role"))
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise VerificationError(VerificationFailure.MALFORMED, "id claim")
        if not isinstance(login, str) or not login:
            raise VerificationError(VerificationFailure.MALFORMED, "login claim")
        if role is None:
            raise VerificationError(VerificationFailure.MALFORMED, "role claim")
        return AuthenticatedIdentity(id=user_id, login=login, role=role)


_token_service: TokenService | None = None

def get_token_service() -> TokenService:
    global _token_service
    if _token_service is None:
        _token_service = TokenService(
            settings.SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            expires_in=timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS),
        )
    return _token_service


def ensure_signing_key() -> TokenService:
    """Falha fechado: sem chave não sobe; chave padrão só fora de produção."""
    if uses_dev_secret():
        if settings.ENVIRONMENT.lower() == "production":
            raise RuntimeError("SECRET_KEY de desenvolvimento não pode ser usada em produção")
        logger.warning(
            "insecure_secret_key",
            detail="SECRET_KEY padrão em uso; defina SECRET_KEY fora do ambiente de desenvolvimento",
        )
    return get_token_service()
