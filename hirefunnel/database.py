"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for candidate storage. One row per candidate;
the nested sub-records are JSON columns.
"""

from pathlib import Path
from sqlalchemy import create_engine, Column, Integer, String, JSON
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


class CandidateRecord(Base):
    """Candidate row."""

    __tablename__ = "candidates"

    id = Column(String, primary_key=True)
    first_name = Column(String, nullable=False, default="")
    last_name = Column(String, nullable=False, default="")
    email = Column(String, nullable=False, default="", index=True)  # stored normalized
    phone = Column(String, nullable=False, default="")
    city = Column(String, nullable=False, default="")
    timestamp = Column(String, nullable=False)  # ISO-8601, creation time
    status = Column(String, nullable=False, default="new")
    admin_data = Column(JSON, nullable=True)
    applicant_questionnaire = Column(JSON, nullable=True)
    post_interview = Column(JSON, nullable=True)
    assessment = Column(JSON, nullable=True)
    score = Column(Integer, nullable=True)
    fit_category = Column(String, nullable=True)
    revision = Column(Integer, nullable=False, default=0)


def get_engine(db_path: Path):
    return create_engine(f"sqlite:///{db_path}")


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = get_engine(db_path)
    Base.metadata.create_all(engine)


def get_session_factory(db_path: Path) -> sessionmaker:
    """
    Get a session factory bound to the database.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy sessionmaker; each call opens a new session
    """
    return sessionmaker(bind=get_engine(db_path))
