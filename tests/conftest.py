import json
from pathlib import Path
from types import SimpleNamespace

import pytest

from catalog_lib.llm import LLMClient, PromptLibrary

PROMPTS_DIR = Path(__file__).resolve().parents[1] / "prompts"


class FakeCompletions:
    """Stands in for ``openai.OpenAI().chat.completions``.

    ``replies`` are served in order; an Exception instance is raised instead
    of returned, a dict or list is JSON-encoded.
    """

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if not isinstance(reply, str):
            reply = json.dumps(reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=reply))])


class FakeOpenAI:
    def __init__(self, replies):
        self.chat = SimpleNamespace(completions=FakeCompletions(replies))

    @property
    def calls(self):
        return self.chat.completions.calls


@pytest.fixture
def fake_llm():
    """Factory: ``fake_llm(reply, ...)`` -> (LLMClient, FakeOpenAI)."""

    def make(*replies):
        fake = FakeOpenAI(replies)
        return LLMClient(model="test-model", client=fake), fake

    return make


@pytest.fixture
def prompts():
    return PromptLibrary(PROMPTS_DIR)
