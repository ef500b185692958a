from slowapi import Limiter
from slowapi.util import get_remote_address

from ...config import settings

# Limites lidos a cada requisição, para refletir mudanças em settings
def register_rate_limit() -> str:
    return f"{settings.RATE_LIMIT_PER_MINUTE}/minute"

def login_rate_limit() -> str:
    # mais estrito no login (força bruta)
    return f"{settings.LOGIN_RATE_LIMIT_PER_MINUTE}/minute"


limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.RATE_LIMIT_ENABLED,
    storage_uri=settings.RATE_LIMIT_STORAGE,
)
