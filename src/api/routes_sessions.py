from fastapi import APIRouter, Depends
from sqlmodel import Session

from src.api.deps import get_owner_id
from src.db.session import get_session
from src.schemas.flashcard_schemas import FlashcardResponse
from src.schemas.session_schemas import (
    CommitResponse,
    CreateSessionRequest,
    DeleteResponse,
    RenameSessionRequest,
    SessionDetail,
    SessionDetailEnvelope,
    SessionEnvelope,
    SessionListResponse,
    SessionResponse,
    SessionSummary,
)
from src.services import session_service
from src.services.response_parser import CardDraft
from src.services.session_committer import CommitResult, commit_session

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


def to_commit_response(result: CommitResult) -> CommitResponse:
    session = SessionResponse.model_validate(result.session) if result.session else None
    return CommitResponse(session=session, count=result.count)


@router.get("", response_model=SessionListResponse)
def list_sessions(owner_id: str = Depends(get_owner_id), db: Session = Depends(get_session)):
    rows = session_service.list_sessions(db, owner_id)
    return SessionListResponse(
        sessions=[
            SessionSummary(
                id=s.id, name=s.name, created_at=s.created_at, updated_at=s.updated_at, flashcard_count=count
            )
            for s, count in rows
        ]
    )


@router.post("", response_model=CommitResponse)
def create_session(
    payload: CreateSessionRequest,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_session),
):
    drafts = [CardDraft(card.front, card.back) for card in payload.accepted_cards]
    result = commit_session(db, owner_id, drafts, payload.name)
    return to_commit_response(result)


@router.get("/{session_id}", response_model=SessionDetailEnvelope)
def get_session_detail(session_id: int, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_session)):
    study_session, cards = session_service.get_session_with_cards(db, owner_id, session_id)
    return SessionDetailEnvelope(
        session=SessionDetail(
            id=study_session.id,
            name=study_session.name,
            created_at=study_session.created_at,
            updated_at=study_session.updated_at,
            flashcards=[FlashcardResponse.model_validate(c) for c in cards],
        )
    )


@router.put("/{session_id}", response_model=SessionEnvelope)
def rename_session(
    session_id: int,
    payload: RenameSessionRequest,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_session),
):
    study_session = session_service.rename_session(db, owner_id, session_id, payload.name)
    return SessionEnvelope(session=SessionResponse.model_validate(study_session))


@router.delete("/{session_id}", response_model=DeleteResponse)
def delete_session(session_id: int, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_session)):
    session_service.delete_session(db, owner_id, session_id)
    return DeleteResponse()
