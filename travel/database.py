import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from travel.config import settings
from travel.exceptions import Conflict

logger = logging.getLogger(__name__)

_UOW_DEPTH = "unit_of_work_depth"


def create_db_engine(url: str, echo: bool = False):
    """Create an engine; SQLite connections are shared across request threads"""
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(url, echo=echo, pool_pre_ping=True, connect_args=connect_args)


engine = create_db_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding a request-scoped session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """
    Run a block as one transaction on ``db``.

    Units nest: an inner unit joins the outermost one, and only the outermost
    commits. Any exception rolls the whole transaction back. A stale version
    detected at flush or commit surfaces as ``Conflict`` so the caller can retry.

    Usage:
        with unit_of_work(db):
            ledger.reserve(ResourceType.TOUR, tour_id, 2)
            db.add(booking)
    """
    depth = db.info.get(_UOW_DEPTH, 0)
    db.info[_UOW_DEPTH] = depth + 1
    try:
        yield db
        if depth == 0:
            db.commit()
    except StaleDataError as e:
        if depth > 0:
            raise
        db.rollback()
        logger.warning(f"Rolled back unit of work after concurrent modification: {e}")
        raise Conflict("The record was modified concurrently, retry the operation") from e
    except Exception as e:
        if depth == 0:
            db.rollback()
            logger.warning(f"Rolled back unit of work: {type(e).__name__}: {e}")
        raise
    finally:
        db.info[_UOW_DEPTH] = depth
