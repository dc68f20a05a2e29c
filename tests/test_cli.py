"""Tests for the command line entry point."""

import io
import json
from unittest import mock

from blockmark.__main__ import main
from blockmark.settings import EditorSettings


DOC = {"id": "d", "blocks": [
    {"id": "1", "type": "heading-1", "content": [{"id": "1-1", "modifiers": [], "text": "Foo"}]},
    {"id": "2", "type": "p", "content": [{"id": "2-1", "modifiers": [], "text": "a&nbsp;b"}]},
]}


def write_doc(tmp_path, data=DOC):
    path = tmp_path / "doc.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_version(capsys):
    with mock.patch("blockmark.__main__.get_version_string", return_value="abc1234 2025-01-01"):
        assert main(["--version"]) == 0
    assert capsys.readouterr().out.strip() == "abc1234 2025-01-01"


def test_new_prints_seeded_document(capsys):
    assert main(["new"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [b["type"] for b in data["blocks"]] == ["h1", "p"]
    assert data["blocks"][0]["content"][0]["text"] == "This is the title of your page"


def test_normalize_canonicalizes_types(tmp_path, capsys):
    assert main(["normalize", write_doc(tmp_path)]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["blocks"][0]["type"] == "h1"
    assert data["id"] == "d"


def test_text(tmp_path, capsys):
    assert main(["text", write_doc(tmp_path)]) == 0
    assert capsys.readouterr().out == "Fooa\xa0b\n"


def test_html(tmp_path, capsys):
    assert main(["html", write_doc(tmp_path)]) == 0
    assert capsys.readouterr().out == (
        "<h1><span>Foo</span></h1><p><span>a&nbsp;b</span></p>\n"
    )


def test_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(DOC)))
    assert main(["text", "-"]) == 0
    assert capsys.readouterr().out.startswith("Foo")


def test_malformed_document(tmp_path, capsys):
    assert main(["text", write_doc(tmp_path, {"blocks": [{"id": "x"}]})]) == 1
    assert "Malformed document" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    assert main(["text", str(tmp_path / "nope.json")]) == 1
    assert "Error reading" in capsys.readouterr().err


def test_usage(capsys):
    assert main([]) == 2
    assert main(["frobnicate", "x"]) == 2
    assert "usage" in capsys.readouterr().err


def test_new_uses_saved_settings(settings_store, capsys):
    settings_store.save(EditorSettings(id_strategy="sequential", seed_title="Mine"))
    assert main(["new"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["id"] == "1"
    assert [b["id"] for b in data["blocks"]] == ["2", "4"]
    assert data["blocks"][0]["content"][0]["text"] == "Mine"


def test_normalize_fills_missing_id_from_saved_strategy(settings_store, tmp_path, capsys):
    settings_store.save(EditorSettings(id_strategy="sequential"))
    data = {"blocks": DOC["blocks"]}
    assert main(["normalize", write_doc(tmp_path, data)]) == 0
    assert json.loads(capsys.readouterr().out)["id"] == "1"
