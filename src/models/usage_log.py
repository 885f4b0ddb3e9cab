from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field


class UsageLog(SQLModel, table=True):
    __tablename__ = "usage_logs"

    id: Optional[int] = Field(default=None, primary_key=True)
    timestamp: datetime = Field(default_factory=datetime.now)

    # Quem pediu a geração (auditoria apenas, não vai para o provedor)
    owner_id: str = Field(index=True)

    # Qual modelo foi usado (ex: llama-3.3-70b-versatile)
    model_id: str

    # Métricas da Groq (zeradas quando a chamada falha)
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    time_taken_seconds: float = 0.0

    # Resultado: "ok", "timeout", "service_error", "unavailable", "parse_error", "empty"
    outcome: str = "ok"
