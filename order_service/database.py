import os
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

# 데이터베이스 설정
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./orders.db")
Base = declarative_base()

def build_engine(database_url: str = DATABASE_URL):
    """
    Creates the engine backing the order store.
    In-memory SQLite shares a single connection so every session sees the same tables.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url)

    connect_args = {"check_same_thread": False}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(database_url, connect_args=connect_args, poolclass=StaticPool)
    return create_engine(database_url, connect_args=connect_args)
