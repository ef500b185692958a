"""Autenticação e autorização das rotas protegidas.

``get_current_identity`` valida o header ``Authorization: Bearer <token>`` e
guarda a identidade em ``request.state.identity``. ``require_role`` monta a
checagem de papel, que sempre roda depois da autenticação.

Toda falha de autenticação vira o mesmo 401 genérico; o motivo real só
aparece no log (evento ``auth_rejected``) e na métrica ``auth_failures_total``.
"""
import structlog
from fastapi import Depends, Header, Request

from ...domain.entities import AuthenticatedIdentity, Role
from ...domain.errors import AuthFailure, Forbidden, Unauthenticated, VerificationError
from ...infrastructure.metrics import auth_failures_total
from ...infrastructure.security import TokenService, get_token_service

logger = structlog.get_logger(__name__)


def authenticate_header(authorization: str | None, tokens: TokenService) -> AuthenticatedIdentity:
    if not authorization:
        raise Unauthenticated(AuthFailure.MISSING_TOKEN)

    parts = authorization.split()
    if len(parts) != 2:
        raise Unauthenticated(AuthFailure.MALFORMED_HEADER)

    scheme, credential = parts
    if scheme.lower() != "bearer":
        raise Unauthenticated(AuthFailure.UNSUPPORTED_SCHEME)

    try:
        return tokens.verify(credential)
    except VerificationError as e:
        logger.info("token_verification_failed", kind=e.kind.value)
        raise Unauthenticated(AuthFailure.INVALID_OR_EXPIRED_TOKEN) from e


def get_current_identity(
    request: Request,
    authorization: str | None = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> AuthenticatedIdentity:
    try:
        identity = authenticate_header(authorization, tokens)
    except Unauthenticated as e:
        auth_failures_total.labels(reason=e.reason.value).inc()
        logger.warning("auth_rejected", reason=e.reason.value, path=request.url.path)
        raise
    request.state.identity = identity
    return identity


def check_role(identity: AuthenticatedIdentity | None, required: Role) -> AuthenticatedIdentity:
    if identity is None:
        raise Unauthenticated(AuthFailure.MISSING_TOKEN)
    if identity.role != required:
        raise Forbidden()
    return identity


def require_role(role: Role):
    def _require_role(
        identity: AuthenticatedIdentity = Depends(get_current_identity),
    ) -> AuthenticatedIdentity:
        try:
            return check_role(identity, role)
        except Forbidden:
            logger.warning("role_rejected", user_id=identity.id, role=identity.role.value, required=role.value)
            raise
    return _require_role


require_professor = require_role(Role.PROFESSOR)
