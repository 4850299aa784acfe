import logging
from types import SimpleNamespace

from nursenotes import client_factory
from nursenotes.config import settings
from nursenotes.utils.logger_setup import setup_logging


class _Completions:
    def __init__(self, content):
        self.content = content
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        choices = [] if self.content is None else [SimpleNamespace(message=SimpleNamespace(content=self.content))]
        return SimpleNamespace(choices=choices)


def _fake_client(monkeypatch, content):
    completions = _Completions(content)
    monkeypatch.setattr(client_factory, "get_client", lambda: SimpleNamespace(chat=SimpleNamespace(completions=completions)))
    return completions


def test_generate_markdown_uses_openai_settings(monkeypatch):
    monkeypatch.setattr(settings, "USE_LOCAL_LLM", False)
    completions = _fake_client(monkeypatch, "## Overview")

    assert client_factory.generate_markdown("sys", "user") == "## Overview"
    assert completions.kwargs["model"] == settings.OPENAI_MODEL
    assert completions.kwargs["messages"] == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "user"},
    ]
    assert "max_tokens" not in completions.kwargs


def test_local_llm_gets_a_token_cap(monkeypatch):
    monkeypatch.setattr(settings, "USE_LOCAL_LLM", True)
    completions = _fake_client(monkeypatch, "x")

    client_factory.generate_markdown("sys", "user")

    assert completions.kwargs["model"] == settings.LOCAL_LLM_MODEL
    assert completions.kwargs["max_tokens"] == settings.LOCAL_LLM_MAX_TOKENS


def test_no_choices_is_empty(monkeypatch):
    _fake_client(monkeypatch, None)

    assert client_factory.generate_markdown("sys", "user") == ""


def test_setup_logging_writes_file(tmp_path):
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        setup_logging(log_dir=str(tmp_path / "logs"), console_level="WARNING")
        logging.getLogger("nursenotes.test").info("hello file")
        for h in root.handlers:
            h.flush()
        assert "hello file" in (tmp_path / "logs" / "nursenotes.log").read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved[0]:
            root.addHandler(h)
        root.setLevel(saved[1])
