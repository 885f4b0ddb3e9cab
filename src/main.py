from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlmodel import Session

from src.api import routes_flashcards, routes_sessions, routes_staging
from src.api.deps import get_owner_id
from src.db.session import get_session, init_db
from src.domain.errors import AppError, ValidationError
from src.services.staging_store import StagingArena
from src.services.usage_service import get_daily_usage_stats
from src.utils.logger import logger


# Evento para criar tabelas ao iniciar
@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(lifespan=lifespan)

# Lotes de revisão em memória, um por usuário (nunca persistidos)
app.state.staging = StagingArena()

app.include_router(routes_flashcards.router)
app.include_router(routes_sessions.router)
app.include_router(routes_staging.router)


def error_body(error: AppError) -> dict:
    body = {"message": error.public_message, "code": error.code}
    if isinstance(error, ValidationError):
        body["fields"] = {
            field: [v._asdict() for v in violations] for field, violations in error.fields.items()
        }
    return {"error": body}


@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError):
    # Detalhes de upstream já foram logados onde o erro nasceu
    if exc.http_status >= 500:
        logger.warning(
            "request failed",
            extra={"path": request.url.path, "code": exc.code, "detail": str(exc)},
        )
    return JSONResponse(status_code=exc.http_status, content=error_body(exc))


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError):
    fields = {}
    for err in exc.errors():
        key = ".".join(str(part) for part in err["loc"] if part != "body") or "body"
        fields.setdefault(key, []).append({"code": "INVALID_FIELD", "message": err["msg"]})
    return JSONResponse(
        status_code=ValidationError.http_status,
        content={"error": {"message": ValidationError.public_message, "code": ValidationError.code, "fields": fields}},
    )


@app.get("/")
def read_root():
    return {"status": "AI Flashcards API is running 🚀"}


@app.get("/api/usage")
def read_usage(owner_id: str = Depends(get_owner_id), db: Session = Depends(get_session)):
    """
    Retorna o consumo de tokens e requisições do usuário no dia atual.
    """
    return get_daily_usage_stats(db, owner_id)
