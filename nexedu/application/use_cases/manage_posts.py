from __future__ import annotations

from ...domain.entities import AuthenticatedIdentity, Post
from ...domain.errors import NotFound, ValidationError
from ..dto import PostInput
from .register_user import is_blank

POST_NOT_FOUND = "Post não encontrado"

class IPostRepository:
    def get(self, post_id: int) -> Post | None: ...
    def list(self) -> list[Post]: ...
    def search(self, term: str) -> list[Post]: ...
    def create(self, title: str, content: str, author_name: str, author_id: int) -> Post: ...
    def update(self, post_id: int, **fields) -> Post | None: ...
    def delete(self, post_id: int) -> bool: ...


class CreatePost:
    def __init__(self, repo: IPostRepository):
        self.repo = repo

    def execute(self, data: PostInput, author: AuthenticatedIdentity) -> Post:
        if any(is_blank(v) for v in (data.title, data.content, data.author_name)):
            raise ValidationError("Título, conteúdo e autor são obrigatórios")
        # o autor vem sempre da identidade autenticada, nunca do corpo
        return self.repo.create(
            title=data.title,
            content=data.content,
            author_name=data.author_name,
            author_id=author.id,
        )


class UpdatePost:
    def __init__(self, repo: IPostRepository):
        self.repo = repo

    def execute(self, post_id: int, data: PostInput) -> Post:
        fields = {
            name: value
            for name, value in (
                ("title", data.title),
                ("content", data.content),
                ("author_name", data.author_name),
            )
            if not is_blank(value)
        }
        post = self.repo.update(post_id, **fields)
        if not post:
            raise NotFound(POST_NOT_FOUND)
        return post


class DeletePost:
    def __init__(self, repo: IPostRepository):
        self.repo = repo

    def execute(self, post_id: int) -> None:
        if not self.repo.delete(post_id):
            raise NotFound(POST_NOT_FOUND)
