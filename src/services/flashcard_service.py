from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlmodel import Session, select

from src.db.session import commit_or_raise
from src.domain.errors import ValidationError
from src.models.flashcard import Flashcard
from src.services.ownership_gate import get_owned_flashcard, get_owned_session
from src.services.text_validator import collect_card_violations, validate_card_text

# Marca "campo não enviado" no update parcial (None em session_id significa desvincular)
UNSET = object()


def list_flashcards(
    db: Session,
    owner_id: str,
    session_id: Optional[int] = None,
    limit: int = 50,
    offset: int = 0,
) -> Tuple[List[Flashcard], int]:
    conditions = [Flashcard.owner_id == owner_id]
    if session_id is not None:
        get_owned_session(db, owner_id, session_id)
        conditions.append(Flashcard.session_id == session_id)

    total = db.exec(select(func.count(Flashcard.id)).where(*conditions)).one()
    cards = db.exec(
        select(Flashcard)
        .where(*conditions)
        .order_by(Flashcard.created_at.desc(), Flashcard.id.desc())
        .offset(offset)
        .limit(limit)
    ).all()
    return list(cards), total


def create_flashcard(
    db: Session, owner_id: str, front, back, session_id: Optional[int] = None
) -> Flashcard:
    clean_front, clean_back = validate_card_text(front, back)
    if session_id is not None:
        get_owned_session(db, owner_id, session_id)

    card = Flashcard(owner_id=owner_id, session_id=session_id, front=clean_front, back=clean_back)
    db.add(card)
    commit_or_raise(db, "create flashcard")
    db.refresh(card)
    return card


def update_flashcard(
    db: Session, owner_id: str, card_id: int, front=UNSET, back=UNSET, session_id=UNSET
) -> Flashcard:
    card = get_owned_flashcard(db, owner_id, card_id)

    new_front = card.front if front is UNSET else front
    new_back = card.back if back is UNSET else back
    (clean_front, clean_back), fields = collect_card_violations(new_front, new_back)
    if fields:
        raise ValidationError(fields)

    if session_id is not UNSET and session_id is not None:
        # Só pode mover o card para uma sessão do mesmo dono
        get_owned_session(db, owner_id, session_id)

    card.front, card.back = clean_front, clean_back
    if session_id is not UNSET:
        card.session_id = session_id
    db.add(card)
    commit_or_raise(db, "update flashcard")
    db.refresh(card)
    return card


def delete_flashcard(db: Session, owner_id: str, card_id: int) -> None:
    card = get_owned_flashcard(db, owner_id, card_id)
    db.delete(card)
    commit_or_raise(db, "delete flashcard")
