import pytest

from nursenotes import cli
from nursenotes.services.store import NoteStore


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda **kw: None)


def test_generates_into_the_store(tmp_path, llm):
    src = tmp_path / "croup.txt"
    src.write_text("Croup lecture transcript", encoding="utf-8")
    notes_dir = tmp_path / "notes"

    code = cli.main([
        "--source", str(src), "--course", "NURS310", "--title", "Croup Basics",
        "--module", "Module 2", "--notes-dir", str(notes_dir),
    ])

    assert code == 0
    store = NoteStore(notes_dir)
    [course] = store.manifest()["courses"]
    assert course["title"] == "Adult Health I"
    [entry] = course["modules"]
    note = store.get(entry["slug"])
    assert note["originalInput"]["instructors"] == "G. Hagerstrom; S. Dumas"
    assert note["originalInput"]["source"] == "Croup lecture transcript"
    assert 'class="concept-map-svg"' in store.get_html(entry["slug"])
    system_prompt, user_prompt = llm.calls[0]
    assert "Instructors: G. Hagerstrom; S. Dumas" in system_prompt
    assert "Croup lecture transcript" in user_prompt


def test_missing_source_fails(tmp_path, llm):
    code = cli.main(["--source", str(tmp_path / "nope.txt"), "--course", "NURS310", "--title", "X",
                     "--notes-dir", str(tmp_path / "notes")])

    assert code == 1
    assert llm.calls == []


def test_empty_reply_fails_without_saving(tmp_path, llm):
    llm.reply = ""
    src = tmp_path / "croup.md"
    src.write_text("# Croup", encoding="utf-8")

    code = cli.main(["--source", str(src), "--course", "NURS310", "--title", "X",
                     "--notes-dir", str(tmp_path / "notes")])

    assert code == 1
    assert NoteStore(tmp_path / "notes").manifest() == {"courses": []}


def test_required_arguments():
    with pytest.raises(SystemExit):
        cli.main(["--course", "NURS310"])
