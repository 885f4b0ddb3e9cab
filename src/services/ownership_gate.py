"""
Buscas restritas ao dono para os recursos persistidos.

Toda leitura, alteração ou remoção de StudySession ou Flashcard passa por
aqui, sempre filtrando pelo id de quem chama. Registro de outro usuário é
tratado exatamente como inexistente (NotFoundError).
"""
from typing import Optional

from sqlmodel import Session, select

from src.domain.errors import NotFoundError
from src.models.flashcard import Flashcard
from src.models.study_session import StudySession


def owned_sessions(owner_id: str):
    return select(StudySession).where(StudySession.owner_id == owner_id)


def owned_flashcards(owner_id: str):
    return select(Flashcard).where(Flashcard.owner_id == owner_id)


def get_owned_session(db: Session, owner_id: str, session_id: Optional[int]) -> StudySession:
    if session_id is None:
        raise NotFoundError("session")
    study_session = db.exec(owned_sessions(owner_id).where(StudySession.id == session_id)).first()
    if study_session is None:
        raise NotFoundError("session")
    return study_session


def get_owned_flashcard(db: Session, owner_id: str, card_id: Optional[int]) -> Flashcard:
    if card_id is None:
        raise NotFoundError("flashcard")
    card = db.exec(owned_flashcards(owner_id).where(Flashcard.id == card_id)).first()
    if card is None:
        raise NotFoundError("flashcard")
    return card
