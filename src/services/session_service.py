from typing import List, Tuple

from sqlalchemy import func
from sqlmodel import Session, select

from src.db.session import commit_or_raise
from src.models.flashcard import Flashcard
from src.models.study_session import StudySession, utc_now
from src.services.ownership_gate import get_owned_session
from src.services.text_validator import validate_session_name
from src.utils.logger import get_logger

logger = get_logger(__name__)


def list_sessions(db: Session, owner_id: str) -> List[Tuple[StudySession, int]]:
    """Sessões do usuário, mais recentes primeiro, com a contagem de cards."""
    statement = (
        select(StudySession, func.count(Flashcard.id))
        .join(Flashcard, Flashcard.session_id == StudySession.id, isouter=True)
        .where(StudySession.owner_id == owner_id)
        .group_by(StudySession.id)
        .order_by(StudySession.updated_at.desc(), StudySession.id.desc())
    )
    return [(row[0], row[1]) for row in db.exec(statement).all()]


def get_session_with_cards(db: Session, owner_id: str, session_id: int) -> Tuple[StudySession, List[Flashcard]]:
    study_session = get_owned_session(db, owner_id, session_id)
    cards = db.exec(
        select(Flashcard)
        .where(Flashcard.session_id == study_session.id)
        .where(Flashcard.owner_id == owner_id)
        .order_by(Flashcard.created_at, Flashcard.id)
    ).all()
    return study_session, list(cards)


def rename_session(db: Session, owner_id: str, session_id: int, name: str) -> StudySession:
    clean_name = validate_session_name(name)
    study_session = get_owned_session(db, owner_id, session_id)
    study_session.name = clean_name
    study_session.updated_at = utc_now()
    db.add(study_session)
    commit_or_raise(db, "rename session")
    db.refresh(study_session)
    return study_session


def delete_session(db: Session, owner_id: str, session_id: int) -> None:
    # Os cards vão junto: cascade no ORM e ON DELETE CASCADE no banco
    study_session = get_owned_session(db, owner_id, session_id)
    db.delete(study_session)
    commit_or_raise(db, "delete session")
    logger.info("session deleted", extra={"owner_id": owner_id, "session_id": session_id})
