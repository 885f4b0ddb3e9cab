from datetime import datetime, date
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select, func
from src.models.usage_log import UsageLog
from src.utils.logger import get_logger

logger = get_logger(__name__)


# Registro de auditoria: uma linha por tentativa de geração, com ou sem sucesso
def log_usage(
    db: Session,
    owner_id: str,
    model_id: str,
    usage_data: Optional[dict],
    time_taken: float,
    outcome: str = "ok",
):
    usage_data = usage_data or {}
    log = UsageLog(
        owner_id=owner_id,
        model_id=model_id,
        prompt_tokens=usage_data.get("prompt_tokens", 0),
        completion_tokens=usage_data.get("completion_tokens", 0),
        total_tokens=usage_data.get("total_tokens", 0),
        time_taken_seconds=time_taken,
        outcome=outcome,
    )
    try:
        db.add(log)
        db.commit()
    except SQLAlchemyError as e:
        # Auditoria não derruba a geração
        db.rollback()
        logger.error("failed to write usage log", extra={"owner_id": owner_id, "error": str(e)})


def get_daily_usage_stats(db: Session, owner_id: str):
    """
    Retorna o consumo de tokens e requisições do usuário no dia atual, por modelo.
    """
    today = date.today()
    start_of_day = datetime.combine(today, datetime.min.time())

    statement = (
        select(
            UsageLog.model_id,
            func.count(UsageLog.id).label("request_count"),
            func.sum(UsageLog.total_tokens).label("total_tokens_sum"),
            func.sum(UsageLog.time_taken_seconds).label("total_time"),
        )
        .where(UsageLog.owner_id == owner_id)
        .where(UsageLog.timestamp >= start_of_day)
        .group_by(UsageLog.model_id)
    )

    results = db.exec(statement).all()

    stats = []
    grand_total_tokens = 0
    grand_total_requests = 0

    for row in results:
        model, reqs, tokens, time = row
        tokens = tokens or 0
        grand_total_tokens += tokens
        grand_total_requests += reqs

        stats.append({
            "model": model,
            "requests_today": reqs,
            "tokens_today": tokens,
            "avg_latency": round(time / reqs, 2) if reqs > 0 else 0,
        })

    return {
        "date": str(today),
        "summary": {
            "total_requests": grand_total_requests,
            "total_tokens": grand_total_tokens,
        },
        "by_model": stats,
    }
