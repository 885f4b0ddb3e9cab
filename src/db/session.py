from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session, create_engine
from src.domain.errors import PersistenceError
from src.utils.config import settings
from src.utils.logger import logger

# IMPORTANTE: Importe os modelos aqui para registrá-los no SQLModel
from src.models.study_session import StudySession
from src.models.flashcard import Flashcard
from src.models.usage_log import UsageLog


def enable_sqlite_foreign_keys(target: Engine) -> None:
    # SQLite ignora ON DELETE CASCADE sem esse pragma
    if target.dialect.name != "sqlite":
        return

    @event.listens_for(target, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(url: str, **kwargs) -> Engine:
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    new_engine = create_engine(url, connect_args=connect_args, echo=False, **kwargs)
    enable_sqlite_foreign_keys(new_engine)
    return new_engine


engine = build_engine(settings.DATABASE_URL)


def init_db(target: Engine = engine):
    SQLModel.metadata.create_all(target)


def get_session():
    with Session(engine) as session:
        yield session


def commit_or_raise(session: Session, action: str) -> None:
    # Falha do banco vira PersistenceError; a transação é desfeita antes
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("database commit failed", extra={"action": action, "error": str(e)})
        raise PersistenceError(f"{action} failed") from e
