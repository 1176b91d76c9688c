# carbonsense/database.py
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.engine import make_url

from .config import settings

SQLALCHEMY_DATABASE_URL = settings.database.url

connect_args = {}
if settings.is_sqlite():
    connect_args = {"check_same_thread": False}
    db_path = make_url(SQLALCHEMY_DATABASE_URL).database
    if db_path and db_path != ":memory:":
        os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)

engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args=connect_args, echo=settings.database.echo
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()
