import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

from src.domain.errors import InvalidTransitionError, NotFoundError, ValidationError
from src.services.response_parser import CardDraft
from src.services.text_validator import collect_card_violations


class CandidateStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass
class Candidate:
    local_id: str
    front: str
    back: str
    status: CandidateStatus = CandidateStatus.PENDING


class StagingStore:
    """
    Candidatos de um lote de geração de um único usuário.

    pending -> accepted | rejected. Um candidato aceito pode ser editado de
    novo mas nunca volta a pending; rejected é final.
    """

    def __init__(self, owner_id: str, drafts: Iterable[CardDraft], batch_id: Optional[str] = None):
        self.owner_id = owner_id
        self.batch_id = batch_id or uuid.uuid4().hex
        self._candidates: Dict[str, Candidate] = {}
        for index, draft in enumerate(drafts, start=1):
            local_id = f"c{index}"
            self._candidates[local_id] = Candidate(local_id, draft.front, draft.back)

    def candidates(self) -> List[Candidate]:
        # dict mantém a ordem de inserção = ordem do provedor
        return list(self._candidates.values())

    def _get(self, local_id: str) -> Candidate:
        candidate = self._candidates.get(local_id)
        if candidate is None:
            raise NotFoundError("candidate")
        return candidate

    def accept(self, local_id: str, front: Optional[str] = None, back: Optional[str] = None) -> Candidate:
        candidate = self._get(local_id)
        if candidate.status == CandidateStatus.REJECTED:
            raise InvalidTransitionError(f"{local_id} is rejected")

        new_front = candidate.front if front is None else front
        new_back = candidate.back if back is None else back
        (clean_front, clean_back), fields = collect_card_violations(new_front, new_back)
        if fields:
            raise ValidationError(fields)

        candidate.front, candidate.back = clean_front, clean_back
        candidate.status = CandidateStatus.ACCEPTED
        return candidate

    def reject(self, local_id: str) -> Candidate:
        candidate = self._get(local_id)
        if candidate.status != CandidateStatus.PENDING:
            raise InvalidTransitionError(f"{local_id} is {candidate.status.value}")
        candidate.status = CandidateStatus.REJECTED
        return candidate

    def snapshot_accepted(self) -> List[CardDraft]:
        return [
            CardDraft(c.front, c.back)
            for c in self._candidates.values()
            if c.status == CandidateStatus.ACCEPTED
        ]


class StagingArena:
    """
    No máximo um lote aberto por usuário. Fica em `app.state` e chega aos
    handlers como dependência; esses handlers são `async def`, então todo
    acesso acontece no event loop. A escrita no banco roda numa thread, com o
    lote já fora do arena (ver `take` e `restore`).
    """

    def __init__(self):
        self._batches: Dict[str, StagingStore] = {}

    def open_batch(self, owner_id: str, drafts: Iterable[CardDraft]) -> StagingStore:
        # Um novo lote substitui o anterior do mesmo usuário
        store = StagingStore(owner_id, drafts)
        self._batches[owner_id] = store
        return store

    def get_batch(self, owner_id: str, batch_id: str) -> StagingStore:
        store = self._batches.get(owner_id)
        if store is None or store.batch_id != batch_id:
            raise NotFoundError("batch")
        return store

    def take(self, owner_id: str, batch_id: str) -> StagingStore:
        store = self.get_batch(owner_id, batch_id)
        del self._batches[owner_id]
        return store

    def restore(self, store: StagingStore) -> None:
        # Não sobrescreve um lote mais novo aberto nesse meio tempo
        self._batches.setdefault(store.owner_id, store)

    def discard(self, owner_id: str, batch_id: str) -> None:
        self.take(owner_id, batch_id)
