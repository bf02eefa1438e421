import logging

from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import sessionmaker, declarative_base

from app.config import settings

logger = logging.getLogger(__name__)


def make_engine(url: str, **kwargs):
    """Engine for url. SQLite connections are shared across FastAPI's worker threads."""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)
    return create_engine(url, **kwargs)


engine = make_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _register_models() -> None:
    # Tables exist on Base.metadata only once their model modules are imported.
    import app.models  # noqa: F401


def init_db():
    _register_models()
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database initialized")
    except Exception as e:
        logger.exception("Database initialization failed: %s", e)
        raise


def ensure_tables_exist() -> list[str]:
    """Create any missing tables without touching existing data. Returns the names created."""
    _register_models()
    try:
        existing = set(inspect(engine).get_table_names())
        Base.metadata.create_all(bind=engine)
        created = sorted(set(Base.metadata.tables) - existing)
        if created:
            logger.info("Created missing DB tables: %s", ", ".join(created))
        else:
            logger.info("All DB tables already exist; no schema changes applied.")
        return created
    except Exception as e:
        logger.exception("Ensure tables failed: %s", e)
        raise
