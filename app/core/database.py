import logging
from contextlib import contextmanager
from typing import Callable, Optional

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from app.core.config import settings
from app.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session, action: str, on_conflict: Optional[Callable[[], Exception]] = None, **context):
    """Commit everything done inside the block, or roll all of it back.

    Database failures are logged with ``context`` and re-raised as
    ``PersistenceError``; domain errors pass through untouched. When
    ``on_conflict`` is given, a unique-constraint violation raises the error
    it builds instead.
    """
    try:
        yield db
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if on_conflict is None:
            logger.error(f"Failed to {action}: {e}", exc_info=True, extra=context)
            raise PersistenceError(f"Could not {action}.") from e
        logger.warning(f"Conflict while trying to {action}: {e.orig}", extra=context)
        raise on_conflict() from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to {action}: {e}", exc_info=True, extra=context)
        raise PersistenceError(f"Could not {action}.") from e
    except Exception:
        db.rollback()
        raise
