"""
Integration tests for the eml-reader command line interface.

Tests cover:
- Single file output (extracted result and part tree)
- Directory batch processing
- Output files in json and jsonl format
- Options passed through to the reader
- Error exit codes
"""

import json

import pytest

from eml_reader.charset import to_raw_bytes
from eml_reader.cli.read_eml import main
from tests.fixtures.emails import SAMPLE_EMAILS


def _write_eml(directory, name: str, filename: str = None):
    path = directory / (filename or f"{name}.eml")
    path.write_bytes(to_raw_bytes(SAMPLE_EMAILS[name]))
    return path


class TestSingleFile:
    """Tests for single file processing."""

    @pytest.mark.integration
    def test_reads_file_to_stdout(self, tmp_eml_file, capsys):
        exit_code = main([tmp_eml_file])

        assert exit_code == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 1
        result = json.loads(lines[0])
        assert result["subject"] == "Test Email"
        assert result["from"]["email"] == "sender@example.com"

    @pytest.mark.integration
    def test_tree_output(self, tmp_path, capsys):
        path = _write_eml(tmp_path, "multipart_alternative")

        assert main([str(path), "--tree"]) == 0
        tree = json.loads(capsys.readouterr().out)
        assert [node["delimiter"] for node in tree["body"]] == ["alt-boundary", "alt-boundary"]

    @pytest.mark.integration
    def test_tree_output_with_8bit_body(self, tmp_path, capsys):
        path = _write_eml(tmp_path, "latin2_8bit")

        assert main([str(path), "--tree"]) == 0
        tree = json.loads(capsys.readouterr().out)
        assert tree["headers"]["Content-Transfer-Encoding"] == ["8bit"]

    @pytest.mark.integration
    def test_8bit_body_is_decoded(self, tmp_path, capsys):
        path = _write_eml(tmp_path, "latin2_8bit")

        assert main([str(path)]) == 0
        assert json.loads(capsys.readouterr().out)["text"] == "Zürich Łódź"

    @pytest.mark.integration
    def test_unencoded_latin1_file(self, tmp_path, capsys):
        path = _write_eml(tmp_path, "latin1_unencoded")

        assert main([str(path)]) == 0
        result = json.loads(capsys.readouterr().out)
        assert result["subject"] == "café"
        assert result["from"] == {"name": "René", "email": "rene@example.com"}
        assert result["text"] == "café body\r\n"

    @pytest.mark.integration
    def test_headers_only(self, tmp_path, capsys):
        path = _write_eml(tmp_path, "multipart_alternative")

        assert main([str(path), "--headers-only"]) == 0
        result = json.loads(capsys.readouterr().out)
        assert result["subject"] == "Monthly Newsletter"
        assert result["text"] is None

    @pytest.mark.integration
    def test_unwrap_double_base64(self, tmp_path, capsys):
        path = _write_eml(tmp_path, "double_base64_html")

        assert main([str(path), "--unwrap-double-base64"]) == 0
        assert json.loads(capsys.readouterr().out)["html"] == "<p>Hello <b>World</b></p>"

    @pytest.mark.integration
    def test_attachment_content_is_base64(self, tmp_path, capsys):
        path = _write_eml(tmp_path, "multiple_attachments")

        assert main([str(path)]) == 0
        attachments = json.loads(capsys.readouterr().out)["attachments"]
        assert attachments[2]["content"] == "YSxiCjEsMgo="


class TestDirectory:
    """Tests for directory batch processing."""

    @pytest.mark.integration
    def test_directory_jsonl(self, tmp_path, capsys):
        _write_eml(tmp_path, "simple_plain_text", "a.eml")
        _write_eml(tmp_path, "encoded_headers", "b.eml")
        (tmp_path / "notes.txt").write_text("not an email")

        assert main([str(tmp_path)]) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        entries = [json.loads(line) for line in lines]
        assert len(entries) == 2
        assert entries[0]["file"].endswith("a.eml")
        assert entries[1]["file"].endswith("b.eml")
        assert entries[1]["result"]["subject"] == "Grüße aus Köln"

    @pytest.mark.integration
    def test_failing_file_is_skipped(self, tmp_path, capsys):
        _write_eml(tmp_path, "simple_plain_text", "good.eml")
        (tmp_path / "bad.eml").write_bytes(
            b'Content-Type: multipart/mixed; boundary=" x"\r\n\r\n-- x\r\nbody\r\n'
        )

        assert main([str(tmp_path)]) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["file"].endswith("good.eml")

    @pytest.mark.integration
    def test_empty_directory(self, tmp_path, capsys):
        assert main([str(tmp_path)]) == 0
        assert capsys.readouterr().out == ""


class TestOutputFile:
    """Tests for --output and --format."""

    @pytest.mark.integration
    def test_json_detected_from_extension(self, tmp_eml_file, tmp_path):
        output = tmp_path / "out" / "results.json"

        assert main([tmp_eml_file, "--output", str(output)]) == 0
        results = json.loads(output.read_text(encoding="utf-8"))
        assert isinstance(results, list)
        assert results[0]["subject"] == "Test Email"

    @pytest.mark.integration
    def test_jsonl_file(self, tmp_eml_file, tmp_path):
        output = tmp_path / "results.jsonl"

        assert main([tmp_eml_file, "-o", str(output)]) == 0
        lines = output.read_text(encoding="utf-8").strip().splitlines()
        assert json.loads(lines[0])["subject"] == "Test Email"


class TestErrors:
    """Tests for error exit codes."""

    @pytest.mark.integration
    def test_missing_path(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.eml")]) == 1
        assert "Path not found" in capsys.readouterr().err

    @pytest.mark.integration
    def test_malformed_single_file(self, tmp_path, capsys):
        path = tmp_path / "bad.eml"
        path.write_bytes(b'Content-Type: multipart/mixed; boundary=" x"\r\n\r\n-- x\r\n')

        assert main([str(path)]) == 1
        assert "Malformed boundary marker" in capsys.readouterr().err
