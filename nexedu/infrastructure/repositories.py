from __future__ import annotations

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from .models import PostORM, UserORM
from ..domain.entities import Post, Role, User
from ..domain.errors import AuthFailure, ConflictError, Unauthenticated
from ..application.use_cases.register_user import IUserRepository
from ..application.use_cases.manage_posts import IPostRepository


def to_domain(u: UserORM) -> User:
    return User(
        id=u.id,
        name=u.name,
        login=u.login,
        role=Role(u.role),
        created_at=u.created_at,
        updated_at=u.updated_at,
    )


def post_to_domain(p: PostORM) -> Post:
    return Post(
        id=p.id,
        title=p.title,
        content=p.content,
        author_name=p.author_name,
        author_id=p.author_id,
        author=to_domain(p.author) if p.author else None,
        created_at=p.created_at,
        updated_at=p.updated_at,
    )


class UserRepository(IUserRepository):
    def __init__(self, db: Session): self.db = db

    def get(self, user_id: int) -> User | None:
        row = self.db.get(UserORM, user_id)
        return to_domain(row) if row else None

    def get_by_login(self, login: str) -> User | None:
        row = self._row_by_login(login)
        return to_domain(row) if row else None

    def get_password_hash(self, login: str) -> tuple[User, str] | None:
        row = self._row_by_login(login)
        return (to_domain(row), row.password_hash) if row else None

    def list(self) -> list[User]:
        rows = self.db.query(UserORM).order_by(UserORM.id).all()
        return [to_domain(r) for r in rows]

    def create(self, name: str, login: str, password_hash: str, role: Role) -> User:
        row = UserORM(name=name, login=login, password_hash=password_hash, role=role.value)
        self.db.add(row)
        self._commit_unique_login()
        self.db.refresh(row)
        return to_domain(row)

    def update(self, user_id: int, **fields) -> User | None:
        row = self.db.get(UserORM, user_id)
        if not row:
            return None
        for field, value in fields.items():
            if isinstance(value, Role):
                value = value.value
            setattr(row, field, value)
        self._commit_unique_login()
        self.db.refresh(row)
        return to_domain(row)

    def delete(self, user_id: int) -> bool:
        row = self.db.get(UserORM, user_id)
        if not row:
            return False
        self.db.delete(row); self.db.commit()
        return True

    def _row_by_login(self, login: str) -> UserORM | None:
        return self.db.query(UserORM).filter(UserORM.login == login).first()

    def _commit_unique_login(self) -> None:
        # o índice UNIQUE de users.login é a garantia final contra corrida
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError() from e


class PostRepository(IPostRepository):
    def __init__(self, db: Session): self.db = db

    def _query(self):
        return self.db.query(PostORM).options(joinedload(PostORM.author))

    def get(self, post_id: int) -> Post | None:
        row = self._query().filter(PostORM.id == post_id).first()
        return post_to_domain(row) if row else None

    def list(self) -> list[Post]:
        rows = self._query().order_by(PostORM.id).all()
        return [post_to_domain(r) for r in rows]

    def search(self, term: str) -> list[Post]:
        needle = term.lower()
        rows = (
            self._query()
            .filter(or_(
                func.lower(PostORM.title).contains(needle, autoescape=True),
                func.lower(PostORM.content).contains(needle, autoescape=True),
            ))
            .order_by(PostORM.id)
            .all()
        )
        return [post_to_domain(r) for r in rows]

    def create(self, title: str, content: str, author_name: str, author_id: int) -> Post:
        row = PostORM(title=title, content=content, author_name=author_name, author_id=author_id)
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError as e:
            # token ainda válido de um usuário que já foi removido
            self.db.rollback()
            raise Unauthenticated(AuthFailure.INVALID_OR_EXPIRED_TOKEN) from e
        return self.get(row.id)

    def update(self, post_id: int, **fields) -> Post | None:
        row = self.db.get(PostORM, post_id)
        if not row:
            return None
        for field, value in fields.items():
            setattr(row, field, value)
        self.db.commit()
        self.db.refresh(row)
        return self.get(post_id)

    def delete(self, post_id: int) -> bool:
        row = self.db.get(PostORM, post_id)
        if not row:
            return False
        self.db.delete(row); self.db.commit()
        return True
