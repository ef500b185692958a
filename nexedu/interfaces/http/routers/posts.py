from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ....application.dto import PostInput
from ....application.use_cases.manage_posts import POST_NOT_FOUND, CreatePost, DeletePost, UpdatePost
from ....domain.entities import AuthenticatedIdentity
from ....domain.errors import NotFound
from ....infrastructure.cache import get_cache, set_cache, delete_cache_pattern
from ....infrastructure.db import get_db
from ....infrastructure.metrics import cache_hits_total, cache_misses_total, db_queries_total
from ....infrastructure.repositories import PostRepository
from ..authz import get_current_identity, require_professor
from ..schemas import MessageResp, PostReq, PostResp

router = APIRouter(prefix="/posts", tags=["posts"])


def _cached(cache_key: str, load):
    cached = get_cache(cache_key)
    if cached is not None:
        cache_hits_total.inc()
        return cached

    cache_misses_total.inc()
    db_queries_total.inc()
    result = load()
    if result is not None:
        set_cache(cache_key, result)
    return result

def _invalidate(post_id: int | None = None):
    delete_cache_pattern("posts:*")
    if post_id is not None:
        delete_cache_pattern(f"post:{post_id}")

def _post_input(payload: PostReq) -> PostInput:
    return PostInput(title=payload.title, content=payload.content, author_name=payload.author_name)


# --- Leitura: qualquer usuário autenticado

# /search precisa vir antes de /{post_id}
@router.get("/search", response_model=list[PostResp], dependencies=[Depends(get_current_identity)])
def search_posts(q: str | None = Query(None), db: Session = Depends(get_db)):
    repo = PostRepository(db)
    if not q or not q.strip():
        return _cached("posts:list", lambda: [PostResp.from_domain(p).to_cache() for p in repo.list()])
    term = q.strip()
    return _cached(
        f"posts:search:{term.lower()}",
        lambda: [PostResp.from_domain(p).to_cache() for p in repo.search(term)],
    )

@router.get("", response_model=list[PostResp], dependencies=[Depends(get_current_identity)])
def list_posts(db: Session = Depends(get_db)):
    repo = PostRepository(db)
    return _cached("posts:list", lambda: [PostResp.from_domain(p).to_cache() for p in repo.list()])

@router.get("/{post_id}", response_model=PostResp, dependencies=[Depends(get_current_identity)])
def get_post(post_id: int, db: Session = Depends(get_db)):
    repo = PostRepository(db)

    def load():
        post = repo.get(post_id)
        return PostResp.from_domain(post).to_cache() if post else None

    result = _cached(f"post:{post_id}", load)
    if result is None:
        raise NotFound(POST_NOT_FOUND)
    return result

# --- Escrita: apenas professores

@router.post("", response_model=PostResp, status_code=status.HTTP_201_CREATED)
def create_post(
    payload: PostReq,
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(require_professor),
):
    post = CreatePost(repo=PostRepository(db)).execute(_post_input(payload), author=identity)
    _invalidate()
    return PostResp.from_domain(post)

@router.put("/{post_id}", response_model=PostResp, dependencies=[Depends(require_professor)])
def update_post(post_id: int, payload: PostReq, db: Session = Depends(get_db)):
    post = UpdatePost(repo=PostRepository(db)).execute(post_id, _post_input(payload))
    _invalidate(post_id)
    return PostResp.from_domain(post)

@router.delete("/{post_id}", response_model=MessageResp, dependencies=[Depends(require_professor)])
def delete_post(post_id: int, db: Session = Depends(get_db)):
    DeletePost(repo=PostRepository(db)).execute(post_id)
    _invalidate(post_id)
    return MessageResp(message="Post deletado com sucesso")
