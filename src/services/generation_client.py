import asyncio
import time
from dataclasses import dataclass, field
from typing import Dict, Optional

import groq

from src.domain.errors import (
    ResponseParseError,
    UpstreamServiceError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from src.utils.config import settings
from src.utils.groq_client import get_groq_client
from src.utils.logger import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = """You are a helpful assistant that creates educational flashcards from provided text.

Your task:
1. Analyze the educational content provided
2. Extract key concepts, definitions, facts, and relationships
3. Create high-quality flashcards that help learning and retention
4. Generate 5-15 flashcards based on the complexity and length of the content

Format your response as JSON:
{
  "flashcards": [
    {"front": "Question or prompt", "back": "Answer or explanation"},
    {"front": "Another question", "back": "Another answer"}
  ]
}

Guidelines:
- Questions should be clear and specific
- Answers should be concise but complete
- Include various types: definitions, examples, comparisons, applications
- Avoid yes/no questions - prefer "what", "how", "why" questions
- Make connections between concepts when relevant"""


@dataclass
class GenerationResult:
    content: str
    model_id: str
    elapsed: float
    usage: Dict[str, int] = field(default_factory=dict)


class GenerationClient:
    """
    Uma chamada, com prazo, ao provedor de chat completions.

    O prazo é aplicado aqui com asyncio.wait_for: ao expirar, a requisição de
    saída é cancelada mesmo que o cliente já tenha desistido.
    """

    def __init__(self, client=None, model: Optional[str] = None, timeout: Optional[float] = None):
        self._client = client
        self.model = model or settings.GENERATION_MODEL
        self.timeout = timeout if timeout is not None else settings.GENERATION_TIMEOUT_SECONDS

    @property
    def client(self):
        if self._client is None:
            self._client = get_groq_client()
        return self._client

    def build_messages(self, text: str):
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": text},
        ]

    async def generate(self, text: str, owner_id: str) -> GenerationResult:
        # owner_id só aparece no log, nunca vai para o provedor
        logger.info("generation request", extra={"owner_id": owner_id, "model": self.model, "chars": len(text)})
        start_time = time.monotonic()

        try:
            completion = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=self.model,
                    messages=self.build_messages(text),
                    response_format={"type": "json_object"},
                    temperature=settings.GENERATION_TEMPERATURE,
                ),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, groq.APITimeoutError) as e:
            logger.warning(
                "generation timed out",
                extra={"owner_id": owner_id, "model": self.model, "timeout": self.timeout},
            )
            raise UpstreamTimeoutError(f"no reply within {self.timeout}s") from e
        except groq.APIStatusError as e:
            logger.error(
                "provider returned an error status",
                extra={"owner_id": owner_id, "model": self.model, "status": e.status_code, "body": str(e.body)[:500]},
            )
            raise UpstreamServiceError(e.status_code) from e
        except groq.APIConnectionError as e:
            logger.error(
                "provider unreachable",
                extra={"owner_id": owner_id, "model": self.model, "error": str(e)},
            )
            raise UpstreamUnavailableError(str(e)) from e
        except groq.APIError as e:
            # Ex.: APIResponseValidationError, corpo 200 que o SDK não consegue validar
            status = getattr(e, "status_code", None)
            logger.error(
                "provider reply rejected by the SDK",
                extra={"owner_id": owner_id, "model": self.model, "status": status, "error": str(e)[:500]},
            )
            raise UpstreamServiceError(status, str(e)) from e

        elapsed = time.monotonic() - start_time

        message = completion.choices[0].message if completion.choices else None
        content = getattr(message, "content", None)
        if not isinstance(content, str) or not content:
            logger.error("provider reply has no message content", extra={"owner_id": owner_id, "model": self.model})
            raise ResponseParseError("provider reply has no message content")

        usage_dict = {}
        if completion.usage:
            usage_dict = {
                "prompt_tokens": completion.usage.prompt_tokens,
                "completion_tokens": completion.usage.completion_tokens,
                "total_tokens": completion.usage.total_tokens,
            }

        logger.info(
            "generation finished",
            extra={"owner_id": owner_id, "model": self.model, "elapsed": round(elapsed, 2)},
        )
        return GenerationResult(
            content=content,
            model_id=self.model,
            elapsed=elapsed,
            usage=usage_dict,
        )


def get_generation_client() -> GenerationClient:
    return GenerationClient()
