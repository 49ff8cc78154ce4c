#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_utils.py
"""Unit tests for dependency checks, timing and output helpers."""

import io
import logging

import pytest

from docbridge.exceptions import DependencyError
from docbridge.utils import debug_timer, requires_dependencies
from docbridge.utils.io_utils import write_content
from docbridge.utils.packages import check_version_requirement, get_package_version


@pytest.mark.unit
class TestPackages:
    """Tests for installed package introspection."""

    def test_installed_package(self):
        assert get_package_version("pytest") is not None

    def test_missing_package(self):
        assert get_package_version("docbridge-no-such-package") is None
        assert check_version_requirement("docbridge-no-such-package", ">=1.0") == (False, None)

    def test_version_requirement(self):
        ok, installed = check_version_requirement("pytest", ">=1.0")
        assert ok is True
        assert installed == get_package_version("pytest")
        assert check_version_requirement("pytest", ">=9999")[0] is False


@pytest.mark.unit
class TestRequiresDependencies:
    """Tests for the dependency decorator."""

    def test_satisfied(self):
        @requires_dependencies("markdown", [("mistune", "mistune", ">=3.0.0")])
        def run():
            return "ran"

        assert run() == "ran"

    def test_missing_module(self):
        @requires_dependencies("markdown", [("no-such-dist", "no_such_module_xyz", "")])
        def run():
            return "ran"

        with pytest.raises(DependencyError) as exc_info:
            run()
        assert "no-such-dist" in str(exc_info.value)
        assert "pip install" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, ImportError)

    def test_version_mismatch(self):
        @requires_dependencies("markdown", [("mistune", "mistune", ">=9999")])
        def run():
            return "ran"

        with pytest.raises(DependencyError, match="version mismatches"):
            run()


@pytest.mark.unit
class TestDebugTimer:
    """Tests for the timing context manager."""

    def test_logs_at_debug(self, caplog):
        logger = logging.getLogger("docbridge.test")
        with caplog.at_level(logging.DEBUG, logger="docbridge.test"):
            with debug_timer(logger, "Tree building"):
                pass
        assert "Tree building completed in" in caplog.text

    def test_silent_above_debug(self, caplog):
        logger = logging.getLogger("docbridge.test")
        with caplog.at_level(logging.INFO, logger="docbridge.test"):
            with debug_timer(logger, "Tree building"):
                pass
        assert caplog.text == ""


@pytest.mark.unit
class TestWriteContent:
    """Tests for writing output."""

    def test_path_text(self, tmp_path):
        target = tmp_path / "out.md"
        write_content("héllo", target)
        assert target.read_text(encoding="utf-8") == "héllo"

    def test_text_to_binary_stream(self):
        buffer = io.BytesIO()
        write_content("héllo", buffer)
        assert buffer.getvalue() == "héllo".encode("utf-8")

    def test_bytes_to_text_stream(self):
        buffer = io.StringIO()
        write_content(b"abc", buffer)
        assert buffer.getvalue() == "abc"

    def test_invalid_content(self, tmp_path):
        with pytest.raises(TypeError):
            write_content(42, tmp_path / "x")  # type: ignore[arg-type]
