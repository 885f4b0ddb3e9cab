from datetime import datetime
from typing import List, Optional

from src.schemas.base_schemas import ApiModel
from src.schemas.flashcard_schemas import CardText, FlashcardResponse


class SessionResponse(ApiModel):
    id: int
    name: str
    created_at: datetime
    updated_at: datetime


class SessionSummary(SessionResponse):
    flashcard_count: int = 0


class SessionDetail(SessionResponse):
    flashcards: List[FlashcardResponse]


class SessionListResponse(ApiModel):
    sessions: List[SessionSummary]


class SessionEnvelope(ApiModel):
    session: SessionResponse


class SessionDetailEnvelope(ApiModel):
    session: SessionDetail


# Commit: sem nome, o servidor usa "Session <data>"
class CreateSessionRequest(ApiModel):
    name: Optional[str] = None
    accepted_cards: List[CardText] = []


class CommitResponse(ApiModel):
    session: Optional[SessionResponse] = None
    count: int


class RenameSessionRequest(ApiModel):
    name: str


class DeleteResponse(ApiModel):
    success: bool = True
