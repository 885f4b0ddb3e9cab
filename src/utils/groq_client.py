from functools import lru_cache

from groq import AsyncGroq

from src.utils.config import settings


@lru_cache(maxsize=1)
def get_groq_client() -> AsyncGroq:
    # Sem retry automático do SDK: o cliente pode reenviar se quiser.
    # O prazo é aplicado por fora (asyncio.wait_for), o timeout do SDK é só uma rede de segurança.
    return AsyncGroq(
        api_key=settings.GROQ_API_KEY,
        max_retries=0,
        timeout=settings.GENERATION_TIMEOUT_SECONDS + 5,
    )
