from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from src.db.session import commit_or_raise
from src.domain.errors import FieldViolation, PersistenceError, ValidationError
from src.models.flashcard import Flashcard
from src.models.study_session import StudySession
from src.services.response_parser import CardDraft
from src.services.text_validator import (
    collect_card_violations,
    default_session_name,
    validate_session_name,
)
from src.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class CommitResult:
    session: Optional[StudySession]
    count: int


def _clean_drafts(drafts: Sequence[CardDraft]) -> List[CardDraft]:
    cleaned: List[CardDraft] = []
    fields: Dict[str, List[FieldViolation]] = {}
    for index, draft in enumerate(drafts):
        (front, back), problems = collect_card_violations(
            draft.front, draft.back, prefix=f"acceptedCards.{index}."
        )
        fields.update(problems)
        cleaned.append(CardDraft(front, back))
    if fields:
        raise ValidationError(fields)
    return cleaned


def _create_session_row(db: Session, owner_id: str, name: str) -> StudySession:
    study_session = StudySession(owner_id=owner_id, name=name)
    db.add(study_session)
    commit_or_raise(db, "create session")
    db.refresh(study_session)
    return study_session


def _insert_flashcards(db: Session, study_session: StudySession, drafts: Sequence[CardDraft]) -> int:
    cards = [
        Flashcard(
            owner_id=study_session.owner_id,
            session_id=study_session.id,
            front=draft.front,
            back=draft.back,
        )
        for draft in drafts
    ]
    db.add_all(cards)
    db.commit()
    return len(cards)


def _delete_session_row(db: Session, session_id: int) -> None:
    study_session = db.get(StudySession, session_id)
    if study_session is not None:
        db.delete(study_session)
        db.commit()


def commit_session(
    db: Session,
    owner_id: str,
    drafts: Sequence[CardDraft],
    name: Optional[str] = None,
) -> CommitResult:
    """
    Salva os cards aceitos como uma nova sessão nomeada de `owner_id`.

    O banco só garante atomicidade por tabela, então a escrita tem dois passos:
    primeiro a sessão, depois os cards em lote. Se os cards falharem, a sessão
    nova é apagada uma vez (ação compensatória) e PersistenceError é levantado.
    Falha na limpeza só é logada, sem nova tentativa.

    Lista `drafts` vazia não cria nada e retorna count 0.
    """
    name = validate_session_name(default_session_name() if name is None else name)

    if not drafts:
        return CommitResult(session=None, count=0)

    cleaned = _clean_drafts(drafts)

    study_session = _create_session_row(db, owner_id, name)
    session_id = study_session.id

    try:
        count = _insert_flashcards(db, study_session, cleaned)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            "flashcard insert failed, removing session",
            extra={"owner_id": owner_id, "session_id": session_id, "error": str(e)},
        )
        try:
            _delete_session_row(db, session_id)
        except SQLAlchemyError as cleanup_error:
            db.rollback()
            logger.critical(
                "compensating session delete failed, orphan session left behind",
                extra={"owner_id": owner_id, "session_id": session_id, "error": str(cleanup_error)},
            )
        raise PersistenceError("flashcard insert failed") from e

    db.refresh(study_session)
    logger.info(
        "session committed",
        extra={"owner_id": owner_id, "session_id": session_id, "count": count},
    )
    return CommitResult(session=study_session, count=count)
