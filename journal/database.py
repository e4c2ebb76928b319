"""SQLModel database engine and session management."""

import logging

from sqlalchemy import inspect, text
from sqlmodel import SQLModel, create_engine, Session

from journal.config import settings

logger = logging.getLogger(__name__)

# SQLite needs check_same_thread=False; PostgreSQL does not
connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(
    settings.database_url,
    echo=False,
    connect_args=connect_args,
)


def _run_migrations(bind=None):
    """Bring tables created by older releases up to the current schema."""
    bind = bind or engine
    inspector = inspect(bind)

    if "trade" not in inspector.get_table_names():
        return

    # Trades logged before risk snapshots existed keep NULL here and fall
    # back to the profile-based approximation in the equity curve.
    columns = {col["name"] for col in inspector.get_columns("trade")}
    if "risk_usd" not in columns:
        logger.info("Migrating: adding trade.risk_usd")
        with bind.connect() as conn:
            conn.execute(text("ALTER TABLE trade ADD COLUMN risk_usd FLOAT"))
            conn.commit()


def create_db_and_tables(bind=None):
    """Create all tables. Called on startup."""
    import journal.models  # noqa: F401  (populate metadata)

    bind = bind or engine
    SQLModel.metadata.create_all(bind)
    _run_migrations(bind)


def get_session() -> Session:
    """Dependency that yields a database session."""
    with Session(engine) as session:
        yield session
