from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from gymdesk.config import DATABASE_URL


def _is_memory_url(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


def make_engine(url: str = DATABASE_URL) -> Engine:
    if _is_memory_url(url):
        # StaticPool keeps one connection so every caller sees the same in-memory DB
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)

    engine = create_engine(url, connect_args={"check_same_thread": False})
    if url.startswith("sqlite"):
        # Enable WAL mode for better read performance
        with engine.connect() as conn:
            conn.exec_driver_sql("PRAGMA journal_mode=WAL")
    return engine


def create_db_and_tables(engine: Engine) -> None:
    import gymdesk.models as _models  # noqa: F401 (registers tables with SQLModel metadata)

    SQLModel.metadata.create_all(engine)


def open_session(url: str = DATABASE_URL) -> Session:
    engine = make_engine(url)
    create_db_and_tables(engine)
    # Records stay loaded after commit so responses never lazy-load outside the store lock
    return Session(engine, expire_on_commit=False)
