import pytest

from src.domain.errors import InvalidTransitionError, NotFoundError, ValidationError
from src.services.response_parser import CardDraft
from src.services.staging_store import CandidateStatus, StagingArena, StagingStore


@pytest.fixture
def store():
    return StagingStore("alice", [CardDraft("Q1", "A1"), CardDraft("Q2", "A2"), CardDraft("Q3", "A3")])


def test_candidates_start_pending_with_local_ids(store):
    assert [c.local_id for c in store.candidates()] == ["c1", "c2", "c3"]
    assert all(c.status == CandidateStatus.PENDING for c in store.candidates())


def test_accept_with_edits(store):
    candidate = store.accept("c1", front="New Q")
    assert candidate.status == CandidateStatus.ACCEPTED
    assert (candidate.front, candidate.back) == ("New Q", "A1")


def test_accepted_candidate_can_be_edited_again(store):
    store.accept("c1")
    store.accept("c1", front="Second", back="Edit")
    store.accept("c1", back="Final")
    assert store.snapshot_accepted() == [CardDraft("Second", "Final")]


def test_reject_is_terminal(store):
    store.reject("c2")
    with pytest.raises(InvalidTransitionError):
        store.accept("c2")
    with pytest.raises(InvalidTransitionError):
        store.reject("c2")


def test_accepted_cannot_be_rejected(store):
    store.accept("c1")
    with pytest.raises(InvalidTransitionError):
        store.reject("c1")


def test_snapshot_only_accepted_in_original_order(store):
    store.accept("c3")
    store.reject("c2")
    store.accept("c1")
    assert store.snapshot_accepted() == [CardDraft("Q1", "A1"), CardDraft("Q3", "A3")]


def test_blank_edit_is_rejected_and_state_kept(store):
    with pytest.raises(ValidationError):
        store.accept("c1", front="   ")
    candidate = store.candidates()[0]
    assert candidate.status == CandidateStatus.PENDING
    assert candidate.front == "Q1"


def test_unknown_candidate(store):
    with pytest.raises(NotFoundError) as exc_info:
        store.accept("c99")
    assert exc_info.value.code == "CANDIDATE_NOT_FOUND"


def test_arena_new_batch_supersedes_previous():
    arena = StagingArena()
    first = arena.open_batch("alice", [CardDraft("Q", "A")])
    second = arena.open_batch("alice", [CardDraft("Q2", "A2")])

    assert arena.get_batch("alice", second.batch_id) is second
    with pytest.raises(NotFoundError):
        arena.get_batch("alice", first.batch_id)


def test_arena_is_scoped_per_actor():
    arena = StagingArena()
    batch = arena.open_batch("alice", [CardDraft("Q", "A")])
    with pytest.raises(NotFoundError) as exc_info:
        arena.get_batch("bob", batch.batch_id)
    assert exc_info.value.code == "BATCH_NOT_FOUND"


def test_arena_discard():
    arena = StagingArena()
    batch = arena.open_batch("alice", [CardDraft("Q", "A")])
    arena.discard("alice", batch.batch_id)
    with pytest.raises(NotFoundError):
        arena.get_batch("alice", batch.batch_id)


def test_arena_take_removes_batch():
    arena = StagingArena()
    store = arena.open_batch("alice", [CardDraft("Q", "A")])
    assert arena.take("alice", store.batch_id) is store
    with pytest.raises(NotFoundError):
        arena.take("alice", store.batch_id)


def test_arena_restore_puts_batch_back():
    arena = StagingArena()
    store = arena.open_batch("alice", [CardDraft("Q", "A")])
    arena.take("alice", store.batch_id)
    arena.restore(store)
    assert arena.get_batch("alice", store.batch_id) is store


def test_arena_restore_keeps_newer_batch():
    arena = StagingArena()
    old = arena.open_batch("alice", [CardDraft("Q", "A")])
    arena.take("alice", old.batch_id)
    newer = arena.open_batch("alice", [CardDraft("Q2", "A2")])
    arena.restore(old)
    assert arena.get_batch("alice", newer.batch_id) is newer
    with pytest.raises(NotFoundError):
        arena.get_batch("alice", old.batch_id)
