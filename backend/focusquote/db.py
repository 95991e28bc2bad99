from databases import Database
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base

from focusquote.config import DATABASE_URL

database = Database(DATABASE_URL)
engine = create_engine(DATABASE_URL, pool_pre_ping=True)
Base = declarative_base()


def init_db() -> None:
    """Cria as tabelas que ainda não existem."""
    from focusquote import models  # noqa: F401  registra as tabelas

    Base.metadata.create_all(engine)
