"""
Exceções da aplicação.

Cada erro carrega um `code` estável (lido por máquina) e o status HTTP usado
pelo handler em `src.main`. `public_message` é o que o cliente vê; detalhes de
upstream ficam só no log.
"""
from typing import Dict, List, NamedTuple, Optional


class FieldViolation(NamedTuple):
    code: str
    message: str


class AppError(Exception):
    """Exceção base da aplicação."""
    code = "INTERNAL_ERROR"
    http_status = 500
    public_message = "Unexpected error"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.public_message)
        self.detail = detail


class ValidationError(AppError):
    """Entrada inválida que o cliente pode corrigir, agrupada por campo."""
    code = "VALIDATION_FAILED"
    http_status = 400
    public_message = "Validation failed"

    def __init__(self, fields: Dict[str, List[FieldViolation]]):
        super().__init__(self.public_message)
        self.fields = fields

    @classmethod
    def single(cls, field: str, code: str, message: str) -> "ValidationError":
        return cls({field: [FieldViolation(code, message)]})

    @property
    def codes(self) -> List[str]:
        return [v.code for violations in self.fields.values() for v in violations]


class AuthRequiredError(AppError):
    code = "AUTH_REQUIRED"
    http_status = 401
    public_message = "Authentication required"


class NotFoundError(AppError):
    """
    Levantada tanto para recurso inexistente quanto para recurso de outro
    usuário, para que ids alheios não possam ser descobertos.
    """
    http_status = 404

    def __init__(self, resource_kind: str):
        self.resource_kind = resource_kind
        self.code = f"{resource_kind.upper()}_NOT_FOUND"
        self.public_message = f"{resource_kind.capitalize()} not found"
        super().__init__(self.public_message)


class InvalidTransitionError(AppError):
    code = "INVALID_TRANSITION"
    http_status = 409
    public_message = "Candidate cannot change to the requested status"


class UpstreamTimeoutError(AppError):
    code = "AI_SERVICE_TIMEOUT"
    http_status = 504
    public_message = "AI generation timed out - please try again"


class UpstreamServiceError(AppError):
    code = "AI_SERVICE_ERROR"
    http_status = 502
    public_message = "Failed to generate flashcards - please try again later"

    def __init__(self, status: Optional[int], detail: Optional[str] = None):
        super().__init__(detail or f"upstream returned {status}")
        # Só para log; nunca vai para a resposta.
        self.status = status


class UpstreamUnavailableError(AppError):
    code = "AI_SERVICE_UNAVAILABLE"
    http_status = 503
    public_message = "AI service is unavailable - please try again later"


class ResponseParseError(AppError):
    code = "AI_PARSE_ERROR"
    http_status = 502
    public_message = "Failed to parse AI response - please try again"


class EmptyCandidateSetError(AppError):
    code = "AI_EMPTY_RESULT"
    http_status = 502
    public_message = "No valid flashcards were generated - please try again"


class PersistenceError(AppError):
    code = "DATABASE_ERROR"
    http_status = 500
    public_message = "Failed to save changes"
