# habits_repo.py
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import (
    create_engine, MetaData, Table, Column, String, Text, DateTime,
    select, delete, insert, update
)

from local_storage import BaseStorage

# -------------------------
# Engine
# -------------------------
def make_engine(database_url: str = "sqlite:///challenge.db"):
    """Create and return a SQLAlchemy engine (SQLite by default)."""
    if "://" not in database_url:
        database_url = f"sqlite:///{database_url}"
    return create_engine(database_url, future=True)

# -------------------------
# Schema (module-level, shared)
# -------------------------
metadata = MetaData()

records = Table(
    "records", metadata,
    Column("key", String, primary_key=True),
    Column("value", Text, nullable=False),
    Column("updated_at", DateTime, nullable=False, default=datetime.utcnow),
)

# -------------------------
# DB init
# -------------------------
def init_db(engine):
    """Create tables if they do not exist."""
    metadata.create_all(engine)

# -------------------------
# Storage backend
# -------------------------
class SQLStorage(BaseStorage):
    """
    Key -> text records in a single SQL table. Multi-record writes
    (plan + tracking) share one transaction.
    """

    def __init__(self, engine):
        self.engine = engine
        init_db(engine)

    def get_item(self, key: str) -> Optional[str]:
        with self.engine.connect() as conn:
            return conn.execute(
                select(records.c.value).where(records.c.key == key)
            ).scalar_one_or_none()

    def set_item(self, key: str, value: str) -> None:
        self.set_items({key: value})

    def set_items(self, items: Dict[str, str]) -> None:
        now = datetime.utcnow()
        with self.engine.begin() as conn:  # ensures commit
            for key, value in items.items():
                exists = conn.execute(
                    select(records.c.key).where(records.c.key == key)
                ).first()
                if exists:
                    conn.execute(
                        update(records)
                        .where(records.c.key == key)
                        .values(value=value, updated_at=now)
                    )
                else:
                    conn.execute(
                        insert(records).values(key=key, value=value, updated_at=now)
                    )

    def remove_item(self, key: str) -> None:
        with self.engine.begin() as conn:
            conn.execute(delete(records).where(records.c.key == key))

    def keys(self) -> List[str]:
        with self.engine.connect() as conn:
            return list(conn.execute(select(records.c.key).order_by(records.c.key)).scalars())
