"""Pytest configuration and fixtures."""
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add backend to path
backend_path = Path(__file__).parent.parent
sys.path.insert(0, str(backend_path))


class FakeCompletions:
    """Records chat completion calls and replies with a canned text."""

    def __init__(self):
        self.reply = ""
        self.error = None
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(role="assistant", content=self.reply)
        return SimpleNamespace(
            choices=[SimpleNamespace(index=0, message=message)],
            usage=SimpleNamespace(prompt_tokens=10, completion_tokens=20, total_tokens=30),
        )


class FakeOpenAIClient:
    """Minimal stand-in for ``openai.OpenAI`` used by the optimizer."""

    def __init__(self):
        self.chat = SimpleNamespace(completions=FakeCompletions())

    @property
    def completions(self):
        return self.chat.completions


class FakeMessages:
    def __init__(self):
        self.reply = ""
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        return SimpleNamespace(
            content=[SimpleNamespace(type="text", text=self.reply)],
            usage=SimpleNamespace(input_tokens=12, output_tokens=34),
        )


class FakeAnthropicClient:
    """Minimal stand-in for ``anthropic.Anthropic``."""

    def __init__(self):
        self.messages = FakeMessages()


@pytest.fixture
def fake_llm():
    """OpenAI compatible fake client; set ``fake_llm.completions.reply``."""
    return FakeOpenAIClient()


@pytest.fixture
def fake_claude():
    return FakeAnthropicClient()


@pytest.fixture
def client(fake_llm):
    """Test client whose optimizer talks to ``fake_llm``."""
    from fastapi.testclient import TestClient

    from app.analyzers.code_optimizer import CodeOptimizer
    from app.api.dependencies import get_optimizer
    from app.main import app

    optimizer = CodeOptimizer(provider="deepseek", client=fake_llm, model="deepseek-chat")
    app.dependency_overrides[get_optimizer] = lambda: optimizer
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def move_module():
    return "module M { fun f() {} }"


@pytest.fixture
def legacy_move_module():
    return (
        "module 0x1::vault {\n"
        "    public fun deposit(amount: u64): u64 {\n"
        "        amount\n"
        "    }\n"
        "}\n"
    )
