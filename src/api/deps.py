from typing import Optional

from fastapi import Header, Request

from src.domain.errors import AuthRequiredError
from src.services.staging_store import StagingArena


def get_owner_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """
    Identidade repassada pelo provedor de identidade / proxy na frente da API.

    O valor é opaco aqui: nenhuma credencial é lida, só a presença importa.
    """
    if x_user_id is None or not x_user_id.strip():
        raise AuthRequiredError()
    return x_user_id.strip()


def get_staging_arena(request: Request) -> StagingArena:
    return request.app.state.staging
