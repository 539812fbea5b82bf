# -*- coding: utf-8 -*-
"""
Conexión SQLAlchemy de Kurso: engine, sesiones y la dependencia `get_db`.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from kurso.config import settings


def normalize_url(url: str) -> str:
    # Render/Heroku todavía entregan el esquema postgres://
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def engine_options(url: str) -> dict:
    """Opciones de `create_engine` según el motor de la URL."""
    if url.startswith("sqlite"):
        # Sin pool_recycle: SQLite no cierra conexiones inactivas
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_recycle": 3600}


DATABASE_URL = normalize_url(settings.DATABASE_URL)

engine = create_engine(DATABASE_URL, **engine_options(DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
