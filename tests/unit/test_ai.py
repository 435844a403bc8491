"""Unit tests for Bio Assist."""

from __future__ import annotations

import asyncio

import pytest
from pydantic import ValidationError

from freelancmusic.ai import (
    CONFIG_MISSING_MESSAGE,
    GENERATION_FAILED_MESSAGE,
    BioAssist,
    BioGenerator,
    GeminiBioGenerator,
    LocalBioGenerator,
    build_prompt,
    generate_bio,
    get_generator,
)
from freelancmusic.config import Settings
from freelancmusic.models import BioResult


class FakeGenerator(BioGenerator):
    """Generator returning canned text and recording prompts."""

    def __init__(self, text: str = "  Sou saxofonista de jazz.  ") -> None:
        self.text = text
        self.prompts = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.text


class FailingGenerator(BioGenerator):
    async def generate(self, prompt: str) -> str:
        raise RuntimeError("quota exceeded")


@pytest.mark.unit
def test_build_prompt_interpolates_keywords() -> None:
    """Prompt should quote the keywords and ask for 50-70 words in first person."""
    prompt = build_prompt("jazz, sax, Chicago")

    assert '"jazz, sax, Chicago"' in prompt
    assert "primeira pessoa" in prompt
    assert "50-70 palavras" in prompt


@pytest.mark.unit
def test_generate_bio_without_credential_returns_message() -> None:
    """No configured backend should yield the configuration message, not raise."""
    assert asyncio.run(generate_bio("jazz", None)) == CONFIG_MISSING_MESSAGE


@pytest.mark.unit
def test_generate_bio_trims_generated_text() -> None:
    generator = FakeGenerator()

    text = asyncio.run(generate_bio("jazz, sax", generator))

    assert text == "Sou saxofonista de jazz."
    assert generator.prompts == [build_prompt("jazz, sax")]


@pytest.mark.unit
def test_generate_bio_failure_returns_message() -> None:
    """Backend errors should be replaced by the failure message."""
    assert asyncio.run(generate_bio("jazz", FailingGenerator())) == GENERATION_FAILED_MESSAGE


@pytest.mark.unit
def test_bio_assist_marks_results() -> None:
    """Requests should end resolved on success and failed otherwise."""
    # Arrange - one working and one unconfigured assistant
    ok = BioAssist(FakeGenerator("Bio pronta."))
    missing = BioAssist(None)

    # Act - request from both
    resolved = asyncio.run(ok.request("rock"))
    failed = asyncio.run(missing.request("rock"))

    # Assert - statuses and texts, results retrievable by id
    assert resolved.status == "resolved"
    assert resolved.text == "Bio pronta."
    assert failed.status == "failed"
    assert failed.text == CONFIG_MISSING_MESSAGE
    assert ok.get(resolved.id) == resolved
    assert ok.get("unknown") is None


@pytest.mark.unit
def test_bio_assist_request_is_pending_while_generating() -> None:
    """A tracked request should read as pending until the backend answers."""
    release = None
    observed = []

    class SlowGenerator(BioGenerator):
        async def generate(self, prompt: str) -> str:
            await release.wait()
            return "done"

    assist = BioAssist(SlowGenerator())

    async def scenario():
        nonlocal release
        release = asyncio.Event()
        task = asyncio.create_task(assist.request("folk"))
        await asyncio.sleep(0)
        for pending in assist.pending():
            observed.append(assist.get(pending.id).status)
        release.set()
        return await task

    result = asyncio.run(scenario())

    assert observed == ["pending"]
    assert result.status == "resolved"
    assert assist.pending() == []
    assert assist.get(result.id) == result


@pytest.mark.unit
def test_get_generator_selects_backend() -> None:
    """Backend choice should follow settings; Gemini needs an API key."""
    assert get_generator(Settings()) is None
    assert isinstance(get_generator(Settings(api_key="k" * 20)), GeminiBioGenerator)
    local = get_generator(Settings(bio_backend="local", local_model="tiny-model"))
    assert isinstance(local, LocalBioGenerator)
    assert local.model_name == "tiny-model"


@pytest.mark.unit
def test_bio_result_rejects_unknown_status() -> None:
    """Status is limited to pending, resolved and failed."""
    assert BioResult(id="r", keywords="jazz").status == "pending"

    with pytest.raises(ValidationError):
        BioResult(id="r", keywords="jazz", status="done")
