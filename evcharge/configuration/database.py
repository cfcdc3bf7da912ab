from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from evcharge.configuration.config import Config, ConfigurationError
from evcharge.models.mod_tables import Base

_engine = None

SessionLocal = sessionmaker(autoflush=False, expire_on_commit=False)

def _engine_options(url: str) -> dict:
    """Bound every store call so a hung store fails instead of blocking forever"""
    if make_url(url).get_backend_name() == "sqlite":
        return {
            "connect_args": {
                "check_same_thread": False,
                "timeout": Config.DATABASE_TIMEOUT_SECONDS,
            }
        }
    return {
        "pool_pre_ping": True,
        "pool_timeout": Config.DATABASE_TIMEOUT_SECONDS,
    }

def create_store_engine(url: str) -> Engine:
    return create_engine(url, echo=Config.DATABASE_ECHO, **_engine_options(url))

def get_engine() -> Engine:
    """Return the process-wide engine, creating it on first use."""
    global _engine
    if _engine is None:
        if not Config.DATABASE_URL:
            raise ConfigurationError("DATABASE_URL is not configured")
        _engine = create_store_engine(Config.DATABASE_URL)
    return _engine

def init_db(engine: Engine = None):
    """Create missing tables and indexes."""
    Base.metadata.create_all(engine or get_engine())

def get_db():
    """Dependency injection function for FastAPI endpoints: one session per request."""
    session: Session = SessionLocal(bind=get_engine())
    try:
        yield session
    finally:
        session.close()
