from datetime import datetime, timezone

from sqlalchemy import create_engine, Column, String, JSON, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker
from dayplanr.config.settings import get_settings

settings = get_settings()


def _utcnow():
    return datetime.now(timezone.utc)


connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
engine = create_engine(settings.database_url, pool_pre_ping=True, echo=False, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


class PlannerStateModel(Base):
    __tablename__ = "planner_state"

    key = Column(String, primary_key=True)
    payload = Column(JSON, nullable=False)  # {date, settings, tasks, events}
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)


def init_db():
    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
