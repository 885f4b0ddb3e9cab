import json
import re
from typing import Any, List, NamedTuple

from src.domain.errors import EmptyCandidateSetError, ResponseParseError
from src.utils.logger import get_logger

logger = get_logger(__name__)

# Alguns modelos embrulham a resposta inteira em ```json ... ```
CODE_FENCE_RE = re.compile(r"```(?:json)?\s*\n?([\s\S]*?)\n?```")

CANDIDATE_KEYS = ("flashcards", "flashCards", "cards")


class CardDraft(NamedTuple):
    front: str
    back: str


def _loads(payload: str) -> Any:
    try:
        return json.loads(payload)
    except json.JSONDecodeError:
        # Só desembrulha quando a resposta inteira está dentro da cerca;
        # crases dentro dos textos dos cards não são cerca
        match = CODE_FENCE_RE.fullmatch(payload.strip())
        if not match:
            raise
        return json.loads(match.group(1).strip())


def _candidate_array(data: Any) -> List[Any]:
    if not isinstance(data, dict):
        raise ResponseParseError("payload is not a JSON object")
    for key in CANDIDATE_KEYS:
        value = data.get(key)
        if isinstance(value, list):
            return value
    raise ResponseParseError("payload has no flashcard array")


def _is_filled(value: Any) -> bool:
    # Sem coerção: número, null ou objeto no lugar de texto é descartado
    return isinstance(value, str) and bool(value.strip())


def parse_candidates(payload: str) -> List[CardDraft]:
    """
    Converte a resposta bruta do provedor em `CardDraft`s, na ordem recebida.

    Entradas sem `front` e `back` em texto não vazio são descartadas.
    Levanta ResponseParseError para JSON inválido ou sem lista de cards, e
    EmptyCandidateSetError quando nenhuma entrada sobra.
    """
    try:
        data = _loads(payload)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error("provider reply is not valid JSON", extra={"error": str(e), "payload": payload[:500]})
        raise ResponseParseError(str(e)) from e

    try:
        items = _candidate_array(data)
    except ResponseParseError as e:
        logger.error("provider reply has an unexpected shape", extra={"error": str(e), "payload": payload[:500]})
        raise

    drafts = [
        CardDraft(front=item["front"].strip(), back=item["back"].strip())
        for item in items
        if isinstance(item, dict) and _is_filled(item.get("front")) and _is_filled(item.get("back"))
    ]

    dropped = len(items) - len(drafts)
    if dropped:
        logger.warning("dropped malformed candidates", extra={"dropped": dropped, "kept": len(drafts)})

    if not drafts:
        raise EmptyCandidateSetError(f"{len(items)} entries, none usable")

    return drafts
