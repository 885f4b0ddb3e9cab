from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field, Relationship

from src.models.study_session import utc_now


class Flashcard(SQLModel, table=True):
    __tablename__ = "flash_cards"

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: str = Field(index=True)
    front: str
    back: str
    created_at: datetime = Field(default_factory=utc_now)

    # NULL = card avulso; apagar a sessão apaga os cards (cascade)
    session_id: Optional[int] = Field(
        default=None, foreign_key="sessions.id", ondelete="CASCADE", index=True
    )
    session: Optional["StudySession"] = Relationship(back_populates="cards")
