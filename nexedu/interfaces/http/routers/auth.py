import structlog
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from ....application.dto import RegisterUserInput
from ....application.use_cases.login_user import LoginUser
from ....application.use_cases.register_user import RegisterUser
from ....domain.errors import InvalidCredentials
from ....infrastructure.db import get_db
from ....infrastructure.repositories import UserRepository
from ....infrastructure.security import PasswordHasher, TokenService, get_token_service
from ..ratelimit import limiter, login_rate_limit, register_rate_limit
from ..schemas import AuthorResp, LoginReq, LoginResp, RegisterReq, UserResp

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResp, status_code=status.HTTP_201_CREATED)
@limiter.limit(register_rate_limit)
def register(
    request: Request,
    payload: RegisterReq,
    db: Session = Depends(get_db),
):
    uc = RegisterUser(repo=UserRepository(db), hasher=PasswordHasher())
    user = uc.execute(RegisterUserInput(**payload.model_dump()))
    logger.info("user_registered", user_id=user.id, role=user.role.value)
    return UserResp.from_domain(user)


@router.post("/login", response_model=LoginResp)
@limiter.limit(login_rate_limit)
def login(
    request: Request,
    payload: LoginReq,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    uc = LoginUser(repo=UserRepository(db), hasher=PasswordHasher(), tokens=tokens)
    try:
        result = uc.execute(payload.login, payload.password)
    except InvalidCredentials:
        logger.info("login_failed", client=request.client.host if request.client else None)
        raise
    logger.info("login_succeeded", user_id=result.id)
    return LoginResp(
        token=result.token,
        user=AuthorResp(id=result.id, name=result.name, login=result.login, role=result.role),
    )
