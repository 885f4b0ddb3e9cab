from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlmodel import Session

from src.api.deps import get_owner_id, get_staging_arena
from src.api.routes_sessions import to_commit_response
from src.db.session import get_session
from src.domain.errors import AppError
from src.schemas.flashcard_schemas import GenerateRequest
from src.schemas.session_schemas import CommitResponse, DeleteResponse
from src.schemas.staging_schemas import (
    AcceptCandidateRequest,
    BatchResponse,
    CandidateResponse,
    CommitBatchRequest,
)
from src.services.ai_orchestrator import generate_candidates_service
from src.services.generation_client import GenerationClient, get_generation_client
from src.services.session_committer import commit_session
from src.services.staging_store import StagingArena, StagingStore

# Handlers async de propósito: o arena só é tocado no event loop,
# e o trabalho síncrono de banco vai para o threadpool
router = APIRouter(prefix="/api/staging", tags=["staging"])


def to_batch_response(store: StagingStore) -> BatchResponse:
    return BatchResponse(
        batch_id=store.batch_id,
        candidates=[CandidateResponse.model_validate(c) for c in store.candidates()],
    )


@router.post("", response_model=BatchResponse, status_code=201)
async def open_batch(
    payload: GenerateRequest,
    owner_id: str = Depends(get_owner_id),
    client: GenerationClient = Depends(get_generation_client),
    db: Session = Depends(get_session),
    arena: StagingArena = Depends(get_staging_arena),
):
    drafts = await generate_candidates_service(payload.text, owner_id, client, db)
    return to_batch_response(arena.open_batch(owner_id, drafts))


@router.get("/{batch_id}", response_model=BatchResponse)
async def get_batch(
    batch_id: str,
    owner_id: str = Depends(get_owner_id),
    arena: StagingArena = Depends(get_staging_arena),
):
    return to_batch_response(arena.get_batch(owner_id, batch_id))


@router.post("/{batch_id}/candidates/{local_id}/accept", response_model=CandidateResponse)
async def accept_candidate(
    batch_id: str,
    local_id: str,
    payload: Optional[AcceptCandidateRequest] = None,
    owner_id: str = Depends(get_owner_id),
    arena: StagingArena = Depends(get_staging_arena),
):
    edits = (payload.front, payload.back) if payload else (None, None)
    store = arena.get_batch(owner_id, batch_id)
    return CandidateResponse.model_validate(store.accept(local_id, *edits))


@router.post("/{batch_id}/candidates/{local_id}/reject", response_model=CandidateResponse)
async def reject_candidate(
    batch_id: str,
    local_id: str,
    owner_id: str = Depends(get_owner_id),
    arena: StagingArena = Depends(get_staging_arena),
):
    store = arena.get_batch(owner_id, batch_id)
    return CandidateResponse.model_validate(store.reject(local_id))


@router.post("/{batch_id}/commit", response_model=CommitResponse)
async def commit_batch(
    batch_id: str,
    payload: Optional[CommitBatchRequest] = None,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_session),
    arena: StagingArena = Depends(get_staging_arena),
):
    # Sai do arena antes da escrita: um segundo commit do mesmo lote dá 404
    store = arena.take(owner_id, batch_id)
    try:
        result = await run_in_threadpool(
            commit_session, db, owner_id, store.snapshot_accepted(), payload.name if payload else None
        )
    except AppError:
        # Commit falhou; o lote volta para nova tentativa
        arena.restore(store)
        raise
    # Pendentes e rejeitados são descartados junto com o lote
    return to_commit_response(result)


@router.delete("/{batch_id}", response_model=DeleteResponse)
async def discard_batch(
    batch_id: str,
    owner_id: str = Depends(get_owner_id),
    arena: StagingArena = Depends(get_staging_arena),
):
    arena.discard(owner_id, batch_id)
    return DeleteResponse()
