from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from src.api.deps import get_owner_id
from src.db.session import get_session
from src.schemas.flashcard_schemas import (
    CardText,
    CreateFlashcardRequest,
    FlashcardEnvelope,
    FlashcardListResponse,
    FlashcardResponse,
    GenerateRequest,
    GenerateResponse,
    ListMeta,
    UpdateFlashcardRequest,
)
from src.schemas.session_schemas import DeleteResponse
from src.services import flashcard_service
from src.services.ownership_gate import get_owned_flashcard
from src.services.ai_orchestrator import generate_candidates_service
from src.services.generation_client import GenerationClient, get_generation_client

router = APIRouter(prefix="/api/flashcards", tags=["flashcards"])


@router.post("/generate", response_model=GenerateResponse)
async def generate_flashcards(
    payload: GenerateRequest,
    owner_id: str = Depends(get_owner_id),
    client: GenerationClient = Depends(get_generation_client),
    db: Session = Depends(get_session),
):
    drafts = await generate_candidates_service(payload.text, owner_id, client, db)
    return GenerateResponse(flashcards=[CardText(front=d.front, back=d.back) for d in drafts])


@router.get("", response_model=FlashcardListResponse)
def list_flashcards(
    session_id: Optional[int] = Query(default=None, alias="sessionId"),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_session),
):
    cards, total = flashcard_service.list_flashcards(db, owner_id, session_id, limit, offset)
    return FlashcardListResponse(
        flashcards=[FlashcardResponse.model_validate(c) for c in cards],
        meta=ListMeta(total=total, limit=limit, offset=offset),
    )


@router.post("", response_model=FlashcardEnvelope, status_code=201)
def create_flashcard(
    payload: CreateFlashcardRequest,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_session),
):
    card = flashcard_service.create_flashcard(db, owner_id, payload.front, payload.back, payload.session_id)
    return FlashcardEnvelope(flashcard=FlashcardResponse.model_validate(card))


@router.get("/{card_id}", response_model=FlashcardEnvelope)
def get_flashcard(card_id: int, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_session)):
    card = get_owned_flashcard(db, owner_id, card_id)
    return FlashcardEnvelope(flashcard=FlashcardResponse.model_validate(card))


@router.put("/{card_id}", response_model=FlashcardEnvelope)
def update_flashcard(
    card_id: int,
    payload: UpdateFlashcardRequest,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_session),
):
    # Só repassa o que veio no corpo
    changes = {name: getattr(payload, name) for name in payload.model_fields_set}
    card = flashcard_service.update_flashcard(db, owner_id, card_id, **changes)
    return FlashcardEnvelope(flashcard=FlashcardResponse.model_validate(card))


@router.delete("/{card_id}", response_model=DeleteResponse)
def delete_flashcard(card_id: int, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_session)):
    flashcard_service.delete_flashcard(db, owner_id, card_id)
    return DeleteResponse()
