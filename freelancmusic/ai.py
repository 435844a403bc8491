# freelancmusic/ai.py
"""
Bio Assist: writes a short musician biography from a few keywords.

``generate_bio()`` always resolves to a string the form can drop into
the bio field: the generated text, a message saying the API key is not
configured, or a message saying generation failed. Two backends are
available: Google's Gemini API (needs an API key) and a local
Hugging Face text2text model loaded on first use.
"""

import asyncio
import logging
import uuid
from collections import OrderedDict
from functools import lru_cache
from typing import List, Optional, Tuple

from .config import Settings, get_settings
from .models import BioResult


logger = logging.getLogger(__name__)

CONFIG_MISSING_MESSAGE = (
    "Chave de API não configurada. Adicione sua Chave de API para usar este recurso."
)
GENERATION_FAILED_MESSAGE = (
    "Ocorreu um erro ao gerar a biografia. "
    "Por favor, tente novamente ou escreva a sua própria."
)

MAX_TRACKED_REQUESTS = 100


def build_prompt(keywords: str) -> str:
    return (
        "Gere uma biografia de músico curta, profissional e envolvente com base "
        f'nestas palavras-chave: "{keywords}". A biografia deve ser em primeira '
        "pessoa, com cerca de 50-70 palavras. Destaque suas habilidades, "
        "experiência e paixão pela música."
    )


class BioGenerator:
    """Backend that turns a prompt into text."""

    async def generate(self, prompt: str) -> str:
        raise NotImplementedError


class GeminiBioGenerator(BioGenerator):
    def __init__(self, api_key: str, model_name: str = "gemini-2.5-flash") -> None:
        self.api_key = api_key
        self.model_name = model_name
        self._model = None

    def _get_model(self):
        if self._model is None:
            import google.generativeai as genai

            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(self.model_name)
        return self._model

    async def generate(self, prompt: str) -> str:
        response = await self._get_model().generate_content_async(prompt)
        return response.text


class LocalBioGenerator(BioGenerator):
    """Run a seq2seq model (FLAN-T5 by default) in a worker thread."""

    def __init__(self, model_name: str = "google/flan-t5-base", max_new_tokens: int = 160) -> None:
        self.model_name = model_name
        self.max_new_tokens = max_new_tokens
        self._pipeline = None

    def _get_pipeline(self):
        if self._pipeline is None:
            from transformers import AutoModelForSeq2SeqLM, AutoTokenizer, pipeline

            logger.info("Loading local bio model %s", self.model_name)
            tokenizer = AutoTokenizer.from_pretrained(self.model_name)
            model = AutoModelForSeq2SeqLM.from_pretrained(self.model_name)
            self._pipeline = pipeline("text2text-generation", model=model, tokenizer=tokenizer)
        return self._pipeline

    def _run(self, prompt: str) -> str:
        result = self._get_pipeline()(prompt, max_new_tokens=self.max_new_tokens)[0]
        return result["generated_text"]

    async def generate(self, prompt: str) -> str:
        return await asyncio.to_thread(self._run, prompt)


def get_generator(settings: Settings) -> Optional[BioGenerator]:
    """Return the configured backend, or ``None`` when it cannot run."""
    if settings.bio_backend == "local":
        return LocalBioGenerator(settings.local_model)
    if not settings.api_key:
        return None
    return GeminiBioGenerator(settings.api_key, settings.gemini_model)


@lru_cache(maxsize=1)
def default_generator() -> Optional[BioGenerator]:
    return get_generator(get_settings())


async def _generate(keywords: str, generator: Optional[BioGenerator]) -> Tuple[str, bool]:
    if generator is None:
        logger.warning("Bio Assist is not configured; set GEMINI_API_KEY to enable it.")
        return CONFIG_MISSING_MESSAGE, False
    try:
        text = await generator.generate(build_prompt(keywords))
    except Exception as exc:
        logger.error("Bio generation failed: %s", exc)
        return GENERATION_FAILED_MESSAGE, False
    return (text or "").strip(), True


_UNSET = object()


async def generate_bio(keywords: str, generator=_UNSET) -> str:
    """Write a biography from ``keywords``. Never raises.

    When ``generator`` is omitted the backend selected by the settings
    is used; pass ``None`` to force the "not configured" answer.
    """
    if generator is _UNSET:
        generator = default_generator()
    text, _ = await _generate(keywords, generator)
    return text


class BioAssist:
    """Track each bio request from pending to resolved or failed.

    Requests are independent and cannot be cancelled. If a client fires
    a second request before the first returns, both complete and the
    client keeps whichever answer it receives last.
    """

    def __init__(self, generator: Optional[BioGenerator]) -> None:
        self.generator = generator
        self._requests: "OrderedDict[str, BioResult]" = OrderedDict()

    def get(self, request_id: str) -> Optional[BioResult]:
        return self._requests.get(request_id)

    def pending(self) -> List[BioResult]:
        """Requests still waiting for the backend, oldest first."""
        return [r for r in self._requests.values() if r.status == "pending"]

    def _track(self, result: BioResult) -> None:
        self._requests[result.id] = result
        while len(self._requests) > MAX_TRACKED_REQUESTS:
            self._requests.popitem(last=False)

    async def request(self, keywords: str) -> BioResult:
        pending = BioResult(id=uuid.uuid4().hex, keywords=keywords)
        self._track(pending)
        text, ok = await _generate(keywords, self.generator)
        result = pending.model_copy(update={"status": "resolved" if ok else "failed", "text": text})
        self._track(result)
        return result
