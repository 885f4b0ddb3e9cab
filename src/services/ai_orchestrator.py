from typing import List

from fastapi.concurrency import run_in_threadpool
from sqlmodel import Session

from src.domain.errors import (
    AppError,
    EmptyCandidateSetError,
    ResponseParseError,
    UpstreamServiceError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from src.services.generation_client import GenerationClient
from src.services.response_parser import CardDraft, parse_candidates
from src.services.text_validator import validate_source_text
from src.services.usage_service import log_usage
from src.utils.config import settings
from src.utils.logger import get_logger

logger = get_logger(__name__)

OUTCOME_BY_ERROR = {
    UpstreamTimeoutError: "timeout",
    UpstreamServiceError: "service_error",
    UpstreamUnavailableError: "unavailable",
    ResponseParseError: "parse_error",
    EmptyCandidateSetError: "empty",
}


async def generate_candidates_service(
    text: str,
    owner_id: str,
    client: GenerationClient,
    db: Session,
) -> List[CardDraft]:
    # 1. Validação antes de qualquer chamada externa
    validate_source_text(text)

    # 2. Uma única chamada ao provedor, com prazo
    try:
        result = await client.generate(text, owner_id)
    except AppError as e:
        await run_in_threadpool(log_usage, db, owner_id, client.model, None, 0.0, OUTCOME_BY_ERROR.get(type(e), "error"))
        raise

    # 3. Saída do modelo é entrada hostil: parse + validação de forma
    try:
        drafts = parse_candidates(result.content)
    except AppError as e:
        await run_in_threadpool(
            log_usage, db, owner_id, result.model_id, result.usage, result.elapsed, OUTCOME_BY_ERROR.get(type(e), "error")
        )
        raise

    # 4. Limite de candidatos para não inflar o que vai ser salvo
    if len(drafts) > settings.MAX_CANDIDATES:
        logger.info(
            "truncating candidate list",
            extra={"owner_id": owner_id, "received": len(drafts), "kept": settings.MAX_CANDIDATES},
        )
        drafts = drafts[: settings.MAX_CANDIDATES]

    # Escrita síncrona no banco fica fora do event loop
    await run_in_threadpool(log_usage, db, owner_id, result.model_id, result.usage, result.elapsed, "ok")
    return drafts
