from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from ..config import settings


def _enable_sqlite_foreign_keys(dbapi_conn, _record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str):
    engine_kwargs = {"pool_pre_ping": True, "echo": False}
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        # SQLite em memória precisa de uma única conexão compartilhada
        if make_url(url).database in (None, "", ":memory:"):
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs.update(pool_size=10, max_overflow=20, pool_recycle=3600)
        if url.startswith("postgresql"):
            engine_kwargs["connect_args"] = {"client_encoding": "utf8"}

    engine = create_engine(url, **engine_kwargs)
    if is_sqlite:
        # SQLite só aplica FOREIGN KEY com o pragma ligado em cada conexão
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

def get_db():
    db = SessionLocal()
    try: yield db
    finally: db.close()
