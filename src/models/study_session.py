from datetime import datetime, timezone
from typing import List, Optional
from sqlmodel import SQLModel, Field, Relationship


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# "Session" já é a sessão do banco no SQLModel, por isso StudySession
class StudySession(SQLModel, table=True):
    __tablename__ = "sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: str = Field(index=True)
    name: str = Field(max_length=255)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    # Sem delete-orphan: card avulso (session_id NULL) é válido
    cards: List["Flashcard"] = Relationship(
        back_populates="session",
        sa_relationship_kwargs={"cascade": "all, delete", "passive_deletes": True},
    )
