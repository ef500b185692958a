from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ...domain.entities import Post, Role, User

# Campos opcionais: a obrigatoriedade é validada nos casos de uso,
# que devolvem as mensagens de erro da API.

class RegisterReq(BaseModel):
    name: str | None = None
    login: str | None = None
    password: str | None = None
    role: str | None = None

class LoginReq(BaseModel):
    login: str | None = None
    password: str | None = None

class UserUpdateReq(BaseModel):
    name: str | None = None
    login: str | None = None
    password: str | None = None
    role: str | None = None

class PostReq(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = Field(None, alias="Title")
    content: str | None = Field(None, alias="Content")
    author_name: str | None = Field(None, alias="Author")


class AuthorResp(BaseModel):
    id: int
    name: str
    login: str
    role: Role

class UserResp(AuthorResp):
    model_config = ConfigDict(populate_by_name=True)

    created_at: datetime | None = Field(None, alias="createdAt")
    updated_at: datetime | None = Field(None, alias="updatedAt")

    @classmethod
    def from_domain(cls, user: User) -> "UserResp":
        return cls(
            id=user.id,
            name=user.name,
            login=user.login,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

class LoginResp(BaseModel):
    token: str
    user: AuthorResp

class PostResp(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str = Field(alias="Title")
    content: str = Field(alias="Content")
    author_name: str = Field(alias="Author")
    author_id: int | None = Field(None, alias="authorId")
    created_at: datetime | None = Field(None, alias="createdAt")
    updated_at: datetime | None = Field(None, alias="updatedAt")
    author: AuthorResp | None = None

    @classmethod
    def from_domain(cls, post: Post) -> "PostResp":
        author = None
        if post.author:
            author = AuthorResp(
                id=post.author.id,
                name=post.author.name,
                login=post.author.login,
                role=post.author.role,
            )
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            author_name=post.author_name,
            author_id=post.author_id,
            created_at=post.created_at,
            updated_at=post.updated_at,
            author=author,
        )

    def to_cache(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")

class MessageResp(BaseModel):
    message: str
