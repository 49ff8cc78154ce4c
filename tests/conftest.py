"""Pytest configuration and shared fixtures for the docbridge test suite.

This module provides shared fixtures, test configuration, and sample
documents that are used across the entire test suite.
"""

import base64
import os
from pathlib import Path

import pytest

from docbridge.resources import MemoryImageStore

# Configure Hypothesis for property-based testing
try:
    from hypothesis import Phase, Verbosity, settings

    settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
    settings.register_profile("dev", max_examples=20)
    settings.register_profile(
        "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
    )

    profile = os.getenv("HYPOTHESIS_PROFILE", "dev")
    settings.load_profile(profile)
except ImportError:
    # Hypothesis not installed, skip configuration
    pass

# Base64 encoded 1x1 pixel PNG for testing
MINIMAL_PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/w8AAn8B9FpQHLwAAAAASUVORK5CYII="
MINIMAL_PNG_BYTES = base64.b64decode(MINIMAL_PNG_B64)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def png_bytes() -> bytes:
    """Provide the bytes of a minimal valid PNG image."""
    return MINIMAL_PNG_BYTES


@pytest.fixture
def image_store() -> MemoryImageStore:
    """Provide an in-memory image store holding ``logo.png`` and ``photo.jpg``.

    Returns
    -------
    MemoryImageStore
        Store whose ``load``/``save`` methods serve as image callbacks.

    """
    return MemoryImageStore({"logo.png": MINIMAL_PNG_BYTES, "photo.jpg": b"\xff\xd8\xff\xe0fake-jpeg"})


@pytest.fixture
def failing_loader():
    """Provide an image loader that always fails."""

    def load_image(reference: str) -> bytes:
        raise FileNotFoundError(reference)

    return load_image


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    """Provide a directory containing ``logo.png``."""
    (tmp_path / "logo.png").write_bytes(MINIMAL_PNG_BYTES)
    return tmp_path


@pytest.fixture
def sample_markdown() -> str:
    """Provide a Markdown document using every construct the document tree models.

    Returns
    -------
    str
        Sample Markdown text.

    """
    return """# Sample Document

A paragraph with a [link](https://example.com "Example") inside.

## Lists

- one
- two
- three
    - nested

1. first
2. second

| Syntax | Description |
|---|---|
| Header | Title |
| Paragraph | Text |
"""
