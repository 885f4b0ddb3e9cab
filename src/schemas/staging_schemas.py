from typing import List, Optional

from src.schemas.base_schemas import ApiModel
from src.services.staging_store import CandidateStatus


class CandidateResponse(ApiModel):
    local_id: str
    front: str
    back: str
    status: CandidateStatus


class BatchResponse(ApiModel):
    batch_id: str
    candidates: List[CandidateResponse]


class AcceptCandidateRequest(ApiModel):
    front: Optional[str] = None
    back: Optional[str] = None


class CommitBatchRequest(ApiModel):
    name: Optional[str] = None
