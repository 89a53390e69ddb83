#!/usr/bin/env python3
"""
CLI tests for promptpanel

Run with: python -m pytest tests/test_cli.py
"""

import json
import pytest
import tempfile
import shutil
from pathlib import Path
import sys

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from panel.backends import FileBackend
from panel.git_manager import GitManager
from panel.preferences import Preferences
from panel.prompt_store import PromptStore
from promptpanel import main


@pytest.fixture
def temp_repo():
    """Create a temporary repository for testing."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)


def run(repo, *argv):
    return main(["--repo", repo, *argv])


def stored(repo):
    return PromptStore(FileBackend(repo)).load()


class TestCommands:
    """Test the command handlers end to end."""

    def test_add_and_list(self, temp_repo, capsys):
        assert run(temp_repo, "add", "-t", "Greeting", "-m", "Say hi", "--tags", "#casual", "work") == 0
        prompts = stored(temp_repo)
        assert [p.title for p in prompts] == ["Greeting"]
        assert prompts[0].tags == ["casual", "work"]

        capsys.readouterr()
        assert run(temp_repo, "list", "--search", "hi") == 0
        out = capsys.readouterr().out
        assert "Found 1 prompts" in out
        assert "Greeting" in out

    def test_add_commits(self, temp_repo):
        run(temp_repo, "add", "-t", "One", "-m", "body")
        messages = [e["message"] for e in GitManager(temp_repo).get_log()]
        assert messages[0] == "Add prompt: One"

    def test_no_commit(self, temp_repo):
        run(temp_repo, "--no-commit", "add", "-t", "One", "-m", "body")
        assert GitManager(temp_repo).has_changes()

    def test_add_requires_content(self, temp_repo, capsys):
        assert run(temp_repo, "add", "-t", "Empty", "-m", "   ") == 1
        assert "required" in capsys.readouterr().err
        assert stored(temp_repo) == []

    def test_content_file_not_utf8(self, temp_repo, capsys):
        latin1 = Path(temp_repo) / "latin1.txt"
        latin1.write_bytes("café".encode("latin-1"))

        assert run(temp_repo, "add", "-t", "Bad", "-f", str(latin1)) == 1
        assert "Error:" in capsys.readouterr().err
        assert stored(temp_repo) == []

        run(temp_repo, "add", "-t", "Good", "-m", "body")
        prompt_id = stored(temp_repo)[0].id
        capsys.readouterr()

        assert run(temp_repo, "edit", prompt_id, "-f", str(latin1)) == 1
        assert "Error:" in capsys.readouterr().err
        assert stored(temp_repo)[0].content == "body"

    def test_edit_keeps_position(self, temp_repo):
        run(temp_repo, "add", "-t", "A", "-m", "a")
        run(temp_repo, "add", "-t", "B", "-m", "b")
        target = stored(temp_repo)[0]

        assert run(temp_repo, "edit", target.id, "-t", "A2", "--tags", "x") == 0

        prompts = stored(temp_repo)
        assert [p.title for p in prompts] == ["A2", "B"]
        assert prompts[0].content == "a"
        assert prompts[0].tags == ["x"]

    def test_edit_unknown_id(self, temp_repo, capsys):
        assert run(temp_repo, "edit", "nope", "-t", "x") == 0
        assert "nothing changed" in capsys.readouterr().out

    def test_delete(self, temp_repo):
        run(temp_repo, "add", "-t", "A", "-m", "a")
        prompt_id = stored(temp_repo)[0].id
        run(temp_repo, "toggle-view", prompt_id)

        assert run(temp_repo, "delete", prompt_id) == 0
        assert stored(temp_repo) == []
        assert Preferences(FileBackend(temp_repo)).get_view_mode(prompt_id) == "plain"

    def test_reorder(self, temp_repo):
        for title in ("A", "B", "C"):
            run(temp_repo, "add", "-t", title, "-m", title.lower())
        a, b, c = [p.id for p in stored(temp_repo)]

        assert run(temp_repo, "reorder", c, a, "--keep-rest") == 0
        assert [p.id for p in stored(temp_repo)] == [c, a, b]

        assert run(temp_repo, "reorder", b, c) == 0
        assert [p.id for p in stored(temp_repo)] == [b, c]

    def test_export_import(self, temp_repo, capsys):
        out_dir = Path(temp_repo) / "out"
        assert run(temp_repo, "export", "-o", str(out_dir)) == 1
        assert "no prompts" in capsys.readouterr().err

        run(temp_repo, "add", "-t", "A", "-m", "a")
        assert run(temp_repo, "export", "-o", str(out_dir)) == 0
        export_file = out_dir / "prompts_export.json"
        data = json.loads(export_file.read_text())
        data[0]["title"] = "A (imported)"
        data.append({"id": "extra", "title": "E", "content": "e", "tags": "one, #two"})
        export_file.write_text(json.dumps(data))

        assert run(temp_repo, "import", str(export_file)) == 0
        prompts = stored(temp_repo)
        assert [p.title for p in prompts] == ["A (imported)", "E"]
        assert prompts[1].tags == ["one", "two"]

    def test_import_errors(self, temp_repo, capsys):
        bad = Path(temp_repo) / "bad.json"
        bad.write_text('{"id": "x"}')

        assert run(temp_repo, "import", str(bad)) == 1
        assert "Error importing data" in capsys.readouterr().err

        wrong = Path(temp_repo) / "prompts.csv"
        wrong.write_text("[]")
        assert run(temp_repo, "import", str(wrong)) == 1

    def test_show(self, temp_repo, capsys):
        run(temp_repo, "add", "-t", "Shown", "-m", "# Heading", "--tags", "md")
        prompt_id = stored(temp_repo)[0].id
        capsys.readouterr()

        assert run(temp_repo, "show", prompt_id) == 0
        out = capsys.readouterr().out
        assert "Prompt: Shown" in out
        assert "Tags: #md" in out
        assert "View: plain" in out
        assert "# Heading" in out

        assert run(temp_repo, "show", "missing") == 1

    def test_tags(self, temp_repo, capsys):
        run(temp_repo, "add", "-t", "A", "-m", "a", "--tags", "x")
        prompt_id = stored(temp_repo)[0].id

        assert run(temp_repo, "tags", "add", "--prompt-id", prompt_id, "--tags", "y") == 0
        assert stored(temp_repo)[0].tags == ["x", "y"]

        capsys.readouterr()
        assert run(temp_repo, "list", "--tags", "x", "y", "--match-all") == 0
        assert "Found 1 prompts" in capsys.readouterr().out

        assert run(temp_repo, "tags", "remove", "--prompt-id", prompt_id, "--tags", "x") == 0
        assert stored(temp_repo)[0].tags == ["y"]

    def test_theme(self, temp_repo, capsys):
        assert run(temp_repo, "theme", "dark") == 0
        capsys.readouterr()
        assert run(temp_repo, "theme") == 0
        assert "Theme: dark" in capsys.readouterr().out
        assert run(temp_repo, "theme", "neon") == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
