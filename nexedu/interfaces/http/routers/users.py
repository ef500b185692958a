from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ....application.dto import UpdateUserInput
from ....application.use_cases.manage_users import USER_NOT_FOUND, DeleteUser, UpdateUser
from ....domain.errors import NotFound
from ....infrastructure.cache import delete_cache_pattern
from ....infrastructure.db import get_db
from ....infrastructure.metrics import db_queries_total
from ....infrastructure.repositories import UserRepository
from ....infrastructure.security import PasswordHasher
from ..authz import require_professor
from ..schemas import MessageResp, UserResp, UserUpdateReq

# Administração de usuários: só professores
router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_professor)])


def _invalidate_posts():
    # posts embutem nome/login/role do autor
    delete_cache_pattern("posts:*")
    delete_cache_pattern("post:*")


@router.get("", response_model=list[UserResp])
def list_users(db: Session = Depends(get_db)):
    db_queries_total.inc()
    return [UserResp.from_domain(u) for u in UserRepository(db).list()]

@router.get("/{user_id}", response_model=UserResp)
def get_user(user_id: int, db: Session = Depends(get_db)):
    db_queries_total.inc()
    user = UserRepository(db).get(user_id)
    if not user: raise NotFound(USER_NOT_FOUND)
    return UserResp.from_domain(user)

@router.put("/{user_id}", response_model=UserResp)
def update_user(user_id: int, payload: UserUpdateReq, db: Session = Depends(get_db)):
    uc = UpdateUser(repo=UserRepository(db), hasher=PasswordHasher())
    user = uc.execute(user_id, UpdateUserInput(**payload.model_dump()))
    _invalidate_posts()
    return UserResp.from_domain(user)

@router.delete("/{user_id}", response_model=MessageResp)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    DeleteUser(repo=UserRepository(db)).execute(user_id)
    _invalidate_posts()
    return MessageResp(message="Usuário deletado com sucesso")
