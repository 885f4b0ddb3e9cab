import logging
from datetime import date

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from src.domain.errors import PersistenceError, ValidationError
from src.models.flashcard import Flashcard
from src.models.study_session import StudySession
from src.services import session_committer
from src.services.response_parser import CardDraft
from src.services.session_committer import commit_session
from src.services.staging_store import StagingStore


def test_commit_reflects_latest_edits(db):
    store = StagingStore("alice", [CardDraft("Q1", "A1"), CardDraft("Q2", "A2")])
    store.accept("c1", front="New Q")
    store.reject("c2")

    result = commit_session(db, "alice", store.snapshot_accepted(), name="Bio")

    assert result.count == 1
    assert result.session.name == "Bio"
    cards = db.exec(select(Flashcard)).all()
    assert [(c.front, c.back) for c in cards] == [("New Q", "A1")]
    assert cards[0].session_id == result.session.id
    assert cards[0].owner_id == "alice" == result.session.owner_id


def test_empty_commit_creates_nothing(db):
    result = commit_session(db, "alice", [], name="Empty")

    assert result.count == 0
    assert result.session is None
    assert db.exec(select(StudySession)).all() == []


def test_default_name_uses_current_date(db):
    result = commit_session(db, "alice", [CardDraft("Q", "A")])
    assert result.session.name == f"Session {date.today().isoformat()}"


def test_invalid_name_fails_before_writing(db):
    with pytest.raises(ValidationError):
        commit_session(db, "alice", [CardDraft("Q", "A")], name="   ")
    assert db.exec(select(StudySession)).all() == []


def test_invalid_card_fails_before_writing(db):
    with pytest.raises(ValidationError) as exc_info:
        commit_session(db, "alice", [CardDraft("Q", "A"), CardDraft("", "A2")], name="Bio")
    assert "acceptedCards.1.front" in exc_info.value.fields
    assert db.exec(select(StudySession)).all() == []


def test_failed_insert_removes_the_new_session(db, monkeypatch):
    def broken_insert(*args, **kwargs):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(session_committer, "_insert_flashcards", broken_insert)

    with pytest.raises(PersistenceError):
        commit_session(db, "alice", [CardDraft("Q", "A")], name="Bio")

    assert db.exec(select(StudySession)).all() == []
    assert db.exec(select(Flashcard)).all() == []


def test_failed_cleanup_is_logged_and_still_raises(db, monkeypatch, caplog):
    def broken(*args, **kwargs):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(session_committer, "_insert_flashcards", broken)
    monkeypatch.setattr(session_committer, "_delete_session_row", broken)

    with caplog.at_level(logging.CRITICAL):
        with pytest.raises(PersistenceError):
            commit_session(db, "alice", [CardDraft("Q", "A")], name="Bio")

    assert any("compensating session delete failed" in r.getMessage() for r in caplog.records)
