from datetime import date
from typing import Dict, List, Optional, Tuple

from src.domain.errors import FieldViolation, ValidationError
from src.utils.config import settings


def validate_source_text(text: Optional[str]) -> str:
    """
    Valida o texto de estudo antes de qualquer chamada ao provedor.

    O tamanho bruto precisa ficar em [TEXT_MIN_LENGTH, TEXT_MAX_LENGTH] e o
    tamanho sem espaços nas pontas também precisa atingir o mínimo.
    Retorna o texto sem alterações.
    """
    min_len, max_len = settings.TEXT_MIN_LENGTH, settings.TEXT_MAX_LENGTH
    violations: List[FieldViolation] = []

    if text is None or not isinstance(text, str):
        violations.append(FieldViolation("TEXT_REQUIRED", "Text is required"))
    elif len(text) > max_len:
        violations.append(
            FieldViolation("TEXT_TOO_LONG", f"Text must not exceed {max_len} characters")
        )
    elif len(text) < min_len:
        violations.append(
            FieldViolation("TEXT_TOO_SHORT", f"Text must be at least {min_len} characters")
        )
    elif len(text.strip()) < min_len:
        violations.append(
            FieldViolation(
                "TEXT_TOO_SHORT",
                f"Text must contain at least {min_len} non-whitespace characters",
            )
        )

    if violations:
        raise ValidationError({"text": violations})
    return text


def _check_card_field(value, label: str, max_len: int) -> Tuple[Optional[str], Optional[FieldViolation]]:
    if not isinstance(value, str) or not value.strip():
        return None, FieldViolation("FIELD_REQUIRED", f"{label} text is required")
    cleaned = value.strip()
    if len(cleaned) > max_len:
        return None, FieldViolation(
            "FIELD_TOO_LONG", f"{label} text must not exceed {max_len} characters"
        )
    return cleaned, None


def collect_card_violations(
    front, back, prefix: str = ""
) -> Tuple[Tuple[Optional[str], Optional[str]], Dict[str, List[FieldViolation]]]:
    """(front, back) sem espaços nas pontas e as violações, com chave `prefix + campo`."""
    fields: Dict[str, List[FieldViolation]] = {}
    clean_front, problem = _check_card_field(front, "Front", settings.CARD_FRONT_MAX_LENGTH)
    if problem:
        fields[f"{prefix}front"] = [problem]
    clean_back, problem = _check_card_field(back, "Back", settings.CARD_BACK_MAX_LENGTH)
    if problem:
        fields[f"{prefix}back"] = [problem]
    return (clean_front, clean_back), fields


def validate_card_text(front, back) -> Tuple[str, str]:
    (clean_front, clean_back), fields = collect_card_violations(front, back)
    if fields:
        raise ValidationError(fields)
    return clean_front, clean_back


def default_session_name(today: Optional[date] = None) -> str:
    return f"Session {(today or date.today()).isoformat()}"


def validate_session_name(name: Optional[str]) -> str:
    max_len = settings.SESSION_NAME_MAX_LENGTH
    if not isinstance(name, str) or not name.strip():
        raise ValidationError.single("name", "FIELD_REQUIRED", "Session name is required")
    cleaned = name.strip()
    if len(cleaned) > max_len:
        raise ValidationError.single(
            "name", "FIELD_TOO_LONG", f"Session name must not exceed {max_len} characters"
        )
    return cleaned
