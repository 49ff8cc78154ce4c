#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_cli.py
"""Unit tests for the docbridge command-line interface."""

import json
import logging

import pytest

from docbridge.cli import create_parser, main
from docbridge.constants import EXIT_ERROR, EXIT_INPUT_ERROR, EXIT_SUCCESS


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo the handler changes ``configure_logging`` makes to the root logger."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.unit
@pytest.mark.cli
class TestArgumentParsing:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = create_parser().parse_args(["input.md"])
        assert args.input == "input.md"
        assert args.output is None
        assert args.output_format == "markdown"
        assert args.log_level == "WARNING"
        assert args.trace is False

    def test_all_options(self):
        args = create_parser().parse_args(
            ["in.md", "-o", "out.json", "--to", "json", "--image-dir", "imgs", "--output-image-dir", "out", "--trace"]
        )
        assert args.output == "out.json"
        assert args.output_format == "json"
        assert args.image_dir == "imgs"
        assert args.output_image_dir == "out"
        assert args.trace is True

    def test_invalid_format_rejected(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["in.md", "--to", "pdf"])


@pytest.mark.unit
@pytest.mark.cli
class TestMain:
    """Tests for the main entry point."""

    def test_markdown_to_file(self, image_dir):
        source = image_dir / "doc.md"
        source.write_text("# Title\n\n![Logo](logo.png)\n", encoding="utf-8")
        out_dir = image_dir / "out"
        out_dir.mkdir()

        exit_code = main([str(source), "-o", str(out_dir / "doc.md")])

        assert exit_code == EXIT_SUCCESS
        assert (out_dir / "doc.md").read_text(encoding="utf-8") == "# Title\n\n![Logo](image1.png)"
        assert (out_dir / "image1.png").exists()

    def test_json_output(self, tmp_path):
        source = tmp_path / "doc.md"
        source.write_text("## Heading\n\ntext\n", encoding="utf-8")
        target = tmp_path / "doc.json"

        assert main([str(source), "--to", "json", "-o", str(target)]) == EXIT_SUCCESS

        data = json.loads(target.read_text(encoding="utf-8"))
        assert data["schema_version"] == 1
        assert data["elements"][0] == {"element_type": "Header", "level": 2, "text": "Heading"}

    def test_stdout_output(self, tmp_path, capsys):
        source = tmp_path / "doc.md"
        source.write_text("plain *text*\n", encoding="utf-8")

        assert main([str(source)]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "plain text\n"

    def test_explicit_image_dirs(self, image_dir, tmp_path):
        source = tmp_path / "doc.md"
        source.write_text("![Logo](logo.png)\n", encoding="utf-8")
        images_out = tmp_path / "images"

        exit_code = main(
            [
                str(source),
                "-o",
                str(tmp_path / "out.md"),
                "--image-dir",
                str(image_dir),
                "--output-image-dir",
                str(images_out),
            ]
        )

        assert exit_code == EXIT_SUCCESS
        assert (images_out / "image1.png").exists()

    def test_missing_input(self, tmp_path, capsys):
        assert main([str(tmp_path / "absent.md")]) == EXIT_INPUT_ERROR
        assert "cannot read input" in capsys.readouterr().err

    def test_missing_image_is_error(self, tmp_path, capsys):
        source = tmp_path / "doc.md"
        source.write_text("![x](missing.png)\n", encoding="utf-8")

        assert main([str(source), "-o", str(tmp_path / "out.md")]) == EXIT_ERROR
        assert "Failed to load image 'missing.png'" in capsys.readouterr().err

    def test_invalid_utf8_is_error(self, tmp_path, capsys):
        source = tmp_path / "doc.md"
        source.write_bytes(b"\xff\xfe")

        assert main([str(source)]) == EXIT_ERROR
        assert "not valid UTF-8" in capsys.readouterr().err
