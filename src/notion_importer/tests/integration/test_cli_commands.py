"""Tests for the notion-importer command line."""

import json
import logging
import zipfile

import pytest
from typer.testing import CliRunner

from notion_importer import __version__
from notion_importer.cli import app

ALPHA_ID = "a1a1a1a1a1a1a1a1a1a1a1a1a1a1a1a1"
BETA_ID = "b2b2b2b2b2b2b2b2b2b2b2b2b2b2b2b2"
TASKS_ID = "e5e5e5e5e5e5e5e5e5e5e5e5e5e5e5e5"

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every command from an empty directory with no importer variables set."""
    for name in (
        "NOTION_IMPORTER_ATTACHMENT_DIR",
        "NOTION_IMPORTER_SINGLE_LINE_BREAKS",
        "NOTION_IMPORTER_PAGE_SIZE",
        "NOTION_IMPORTER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def restore_root_level():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


@pytest.fixture
def export_zip(tmp_path, page_html, database_page_html, table_html):
    tasks = database_page_html(
        TASKS_ID, "Tasks", table_html([("Name", "typesTitle")], [["Write docs"]])
    )
    files = {
        f"Export/Alpha {ALPHA_ID}.html": page_html(
            ALPHA_ID, "Alpha", body=f'<p>See <a href="Alpha%20{ALPHA_ID}/Beta%20{BETA_ID}.html">Beta</a></p>'
        ),
        f"Export/Alpha {ALPHA_ID}/Beta {BETA_ID}.html": page_html(
            BETA_ID, "Beta", body="<p>one</p><p>two</p>"
        ),
        f"Export/Alpha {ALPHA_ID}/notes.pdf": "pdf",
        f"Export/Tasks {TASKS_ID}.html": tasks,
    }
    path = tmp_path / "export.zip"
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return path


class TestCommands:
    """Test suite for CLI commands."""

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert f"Notion Importer v{__version__}" in result.output

    def test_verbose_sets_debug_level(self, restore_root_level):
        result = runner.invoke(app, ["--verbose", "version"])

        assert result.exit_code == 0, result.output
        assert logging.getLogger().level == logging.DEBUG

    def test_lowercase_log_level_from_environment(self, restore_root_level, monkeypatch):
        monkeypatch.setenv("NOTION_IMPORTER_LOG_LEVEL", "info")

        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0, result.output
        assert logging.getLogger().level == logging.INFO

    def test_inventory(self, export_zip):
        result = runner.invoke(app, ["inventory", str(export_zip)])

        assert result.exit_code == 0
        assert "3 pages, 1 attachments, 0 failures" in result.output

    def test_inventory_reports_failures(self, tmp_path):
        path = tmp_path / "broken.zip"
        with zipfile.ZipFile(path, "w") as zf:
            zf.writestr("Broken.html", "<html><body><p>no id</p></body></html>")

        result = runner.invoke(app, ["inventory", str(path)])

        assert result.exit_code == 1
        assert "0 pages, 0 attachments, 1 failures" in result.output

    def test_convert_writes_documents(self, export_zip, tmp_path):
        output = tmp_path / "out"

        result = runner.invoke(app, ["convert", str(export_zip), "--output", str(output)])

        assert result.exit_code == 0, result.output
        assert "3 documents, 1 attachments, 0 failures" in result.output

        alpha = (output / "Alpha.md").read_text(encoding="utf-8")
        assert '"Beta"))' in alpha
        assert (output / "Alpha" / "Beta.md").read_text(encoding="utf-8") == "one\n\ntwo\n"

        views = list(output.glob("Tasks.*.av.json"))
        assert len(views) == 1
        view = json.loads(views[0].read_text(encoding="utf-8"))
        assert view["name"] == "Tasks"
        assert view["views"][0]["table"]["pageSize"] == 50
        assert view["id"] in (output / "Tasks.md").read_text(encoding="utf-8")

    def test_single_line_breaks_flag(self, export_zip, tmp_path):
        output = tmp_path / "out"

        result = runner.invoke(
            app, ["convert", str(export_zip), "-o", str(output), "--single-line-breaks"]
        )

        assert result.exit_code == 0, result.output
        assert (output / "Alpha" / "Beta.md").read_text(encoding="utf-8") == "one\ntwo\n"

    def test_configuration_file(self, export_zip, tmp_path):
        config = tmp_path / "custom.json"
        config.write_text(json.dumps({
            "markdown": {"single_line_breaks": True},
            "databases": {"page_size": 10},
        }))
        output = tmp_path / "out"

        result = runner.invoke(app, ["-c", str(config), "convert", str(export_zip), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert (output / "Alpha" / "Beta.md").read_text(encoding="utf-8") == "one\ntwo\n"
        view = json.loads(next(output.glob("Tasks.*.av.json")).read_text(encoding="utf-8"))
        assert view["views"][0]["table"]["pageSize"] == 10

    def test_keep_line_breaks_overrides_configuration(self, export_zip, tmp_path):
        (tmp_path / "notion-importer.config.json").write_text(
            json.dumps({"markdown": {"single_line_breaks": True}})
        )
        output = tmp_path / "out"

        result = runner.invoke(
            app, ["convert", str(export_zip), "-o", str(output), "--keep-line-breaks"]
        )

        assert result.exit_code == 0, result.output
        assert (output / "Alpha" / "Beta.md").read_text(encoding="utf-8") == "one\n\ntwo\n"


class TestErrors:
    def test_missing_archive(self, tmp_path):
        result = runner.invoke(app, ["convert", str(tmp_path / "nope.zip"), "-o", str(tmp_path / "out")])

        assert result.exit_code == 1
        assert "Archive not found" in result.output

    def test_not_a_zip(self, tmp_path):
        path = tmp_path / "plain.zip"
        path.write_text("not a zip")

        result = runner.invoke(app, ["inventory", str(path)])

        assert result.exit_code == 1
        assert "Not a valid zip archive" in result.output

    def test_invalid_configuration(self, tmp_path, export_zip):
        config = tmp_path / "bad.json"
        config.write_text(json.dumps({"databases": {"page_size": 0}}))

        result = runner.invoke(app, ["-c", str(config), "inventory", str(export_zip)])

        assert result.exit_code == 1
        assert "Configuration Error" in result.output

    def test_missing_configuration_file(self, tmp_path, export_zip):
        result = runner.invoke(app, ["-c", str(tmp_path / "absent.json"), "inventory", str(export_zip)])

        assert result.exit_code == 1
