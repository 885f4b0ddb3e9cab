import pytest
from sqlalchemy import text
from sqlmodel import select

from src.domain.errors import NotFoundError
from src.models.flashcard import Flashcard
from src.services import flashcard_service, session_service
from src.services.ownership_gate import get_owned_flashcard, get_owned_session
from src.services.response_parser import CardDraft
from src.services.session_committer import commit_session


@pytest.fixture
def alice_session(db):
    return commit_session(db, "alice", [CardDraft("Q1", "A1"), CardDraft("Q2", "A2")], name="Bio").session


def test_foreign_session_looks_missing(db, alice_session):
    with pytest.raises(NotFoundError) as foreign:
        get_owned_session(db, "bob", alice_session.id)
    with pytest.raises(NotFoundError) as missing:
        get_owned_session(db, "bob", 999_999)
    assert foreign.value.code == missing.value.code == "SESSION_NOT_FOUND"
    assert str(foreign.value) == str(missing.value)


def test_foreign_flashcard_looks_missing(db, alice_session):
    card = db.exec(select(Flashcard)).first()
    with pytest.raises(NotFoundError) as exc_info:
        get_owned_flashcard(db, "bob", card.id)
    assert exc_info.value.code == "FLASHCARD_NOT_FOUND"
    assert get_owned_flashcard(db, "alice", card.id).id == card.id


def test_foreign_writes_are_refused(db, alice_session):
    card = db.exec(select(Flashcard)).first()
    with pytest.raises(NotFoundError):
        session_service.rename_session(db, "bob", alice_session.id, "Mine now")
    with pytest.raises(NotFoundError):
        session_service.delete_session(db, "bob", alice_session.id)
    with pytest.raises(NotFoundError):
        flashcard_service.update_flashcard(db, "bob", card.id, front="x")
    with pytest.raises(NotFoundError):
        flashcard_service.delete_flashcard(db, "bob", card.id)
    with pytest.raises(NotFoundError):
        flashcard_service.create_flashcard(db, "bob", "Q", "A", session_id=alice_session.id)

    db.refresh(alice_session)
    assert alice_session.name == "Bio"
    assert len(db.exec(select(Flashcard)).all()) == 2


def test_cannot_move_card_into_foreign_session(db, alice_session):
    own = flashcard_service.create_flashcard(db, "bob", "Q", "A")
    with pytest.raises(NotFoundError):
        flashcard_service.update_flashcard(db, "bob", own.id, session_id=alice_session.id)


def test_delete_session_cascades(db, alice_session):
    card_ids = [c.id for c in db.exec(select(Flashcard)).all()]
    standalone = flashcard_service.create_flashcard(db, "alice", "Solo", "Card")

    session_service.delete_session(db, "alice", alice_session.id)

    for card_id in card_ids:
        with pytest.raises(NotFoundError):
            get_owned_flashcard(db, "alice", card_id)
    assert get_owned_flashcard(db, "alice", standalone.id).front == "Solo"


def test_store_level_cascade(db, alice_session):
    # Apagando direto no banco, sem passar pelo ORM
    db.connection().execute(text("DELETE FROM sessions WHERE id = :id"), {"id": alice_session.id})
    db.commit()
    db.expunge_all()

    assert db.exec(select(Flashcard)).all() == []


def test_list_is_owner_scoped(db, alice_session):
    flashcard_service.create_flashcard(db, "bob", "Bob Q", "Bob A")

    cards, total = flashcard_service.list_flashcards(db, "alice")
    assert total == 2
    assert {c.owner_id for c in cards} == {"alice"}

    sessions = session_service.list_sessions(db, "bob")
    assert sessions == []
    assert [(s.name, count) for s, count in session_service.list_sessions(db, "alice")] == [("Bio", 2)]
