from datetime import datetime
from typing import List, Optional

from src.schemas.base_schemas import ApiModel


# Par front/back sem id (gerado pela IA ou aceito na revisão)
class CardText(ApiModel):
    front: str
    back: str


class FlashcardResponse(ApiModel):
    id: int
    front: str
    back: str
    session_id: Optional[int] = None
    created_at: datetime


class CreateFlashcardRequest(ApiModel):
    front: str
    back: str
    session_id: Optional[int] = None


class UpdateFlashcardRequest(ApiModel):
    front: Optional[str] = None
    back: Optional[str] = None
    # null desvincula o card da sessão; ausente mantém
    session_id: Optional[int] = None


class FlashcardEnvelope(ApiModel):
    flashcard: FlashcardResponse


class ListMeta(ApiModel):
    total: int
    limit: int
    offset: int


class FlashcardListResponse(ApiModel):
    flashcards: List[FlashcardResponse]
    meta: ListMeta


class GenerateRequest(ApiModel):
    text: str


class GenerateResponse(ApiModel):
    flashcards: List[CardText]
