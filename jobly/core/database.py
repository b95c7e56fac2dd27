import logging
import re
from typing import Any, Dict, List, Sequence

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from jobly.core.config import settings

logger = logging.getLogger(__name__)

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using them
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()

# $1, $2, ... placeholders produced by jobly.core.sql
_POSITIONAL_PARAM = re.compile(r"\$(\d+)")


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def execute(db: Session, sql: str, values: Sequence[Any] = ()) -> List[Dict[str, Any]]:
    """
    Run one statement with positionally bound values and return its rows.

    `$n` placeholders are bound to `values[n - 1]`; values are never
    interpolated into the SQL text. The statement must produce rows
    (SELECT, or a mutation with RETURNING).

    Args:
        db: Database session
        sql: SQL text using `$1`-style placeholders
        values: Values for the placeholders, in order

    Returns:
        List of rows as plain dicts keyed by column name (or alias)
    """
    statement = text(_POSITIONAL_PARAM.sub(r":p\1", sql))
    params = {f"p{index}": value for index, value in enumerate(values, start=1)}

    logger.debug("SQL %s | params %s", " ".join(sql.split()), list(values))
    result = db.execute(statement, params)
    return [dict(row) for row in result.mappings()]


def init_db(bind=None):
    """
    Initialize database.

    Creates the companies and jobs tables from the declarative models when
    they do not exist yet. Existing tables are left untouched.
    """
    from jobly.models import company, job  # Import models to register them
    Base.metadata.create_all(bind=bind or engine)
