"""Shared fixtures: an isolated note store, a test client and a fake model."""
from typing import List

import pytest
from fastapi.testclient import TestClient

from nursenotes.config import settings
from nursenotes.deps import get_store
from nursenotes.services import generation
from nursenotes.services.store import NoteStore

CROUP_MARKDOWN = """# Pediatric Respiratory

## Overview
Croup is a viral infection of the upper airway.

## Concept Maps

### Concept Map: Croup
```json
{
  "central": "Croup",
  "pathophysiology": ["Edema narrows airway", "Inflammatory mediators released"],
  "medications": ["Dexamethasone 0.6mg/kg"]
}
```

## Check Yourself
- What is the classic cough of croup?
"""


class FakeLLM:
    def __init__(self, reply: str = CROUP_MARKDOWN):
        self.reply = reply
        self.error: Exception | None = None
        self.calls: List[tuple] = []

    def __call__(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def store(tmp_path) -> NoteStore:
    return NoteStore(tmp_path / "notes")


@pytest.fixture
def llm(monkeypatch) -> FakeLLM:
    fake = FakeLLM()
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(generation, "generate_markdown", fake)
    return fake


@pytest.fixture
def client(store):
    from main import app

    app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
