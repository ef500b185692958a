"""Erros de domínio da API NexEdu.

Cada erro carrega o status HTTP e uma mensagem segura para o cliente.
Detalhes internos (motivo da rejeição de um token, exceções do banco)
ficam apenas nos logs.
"""
from enum import Enum


class NexEduError(Exception):
    status_code: int = 500
    default_message: str = "Erro interno do servidor"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(NexEduError):
    status_code = 400
    default_message = "Dados inválidos na requisição"


class ConflictError(NexEduError):
    status_code = 409
    default_message = "Login já está em uso"


class AuthFailure(str, Enum):
    MISSING_TOKEN = "MissingToken"
    MALFORMED_HEADER = "MalformedHeader"
    UNSUPPORTED_SCHEME = "UnsupportedScheme"
    INVALID_OR_EXPIRED_TOKEN = "InvalidOrExpiredToken"


class Unauthenticated(NexEduError):
    status_code = 401
    default_message = "Token ausente, inválido ou expirado"

    def __init__(self, reason: AuthFailure = AuthFailure.MISSING_TOKEN):
        # o motivo nunca muda a mensagem enviada ao cliente
        self.reason = reason
        super().__init__()


class InvalidCredentials(NexEduError):
    status_code = 401
    default_message = "Login ou senha inválidos"


class Forbidden(NexEduError):
    status_code = 403
    default_message = "Acesso negado. Apenas professores podem realizar esta ação"


class NotFound(NexEduError):
    status_code = 404
    default_message = "Recurso não encontrado"


class InternalError(NexEduError):
    status_code = 500


class VerificationFailure(str, Enum):
    MALFORMED = "Malformed"
    BAD_SIGNATURE = "BadSignature"
    EXPIRED = "Expired"


class VerificationError(Exception):
    """Falha na verificação de um token. Nunca é exposta ao cliente."""

    def __init__(self, kind: VerificationFailure, detail: str = ""):
        self.kind = kind
        super().__init__(f"{kind.value}: {detail}" if detail else kind.value)
