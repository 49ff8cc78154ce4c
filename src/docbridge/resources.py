#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docbridge/resources.py
"""Image resource bindings for the tree builder and tree lowering.

The builder resolves image references through a ``load_image(reference)``
callable and lowering persists image bytes through a
``save_image(data, filename)`` callable. This module provides the bindings
shipped with docbridge:

- ``disk_image_loader`` / ``disk_image_saver`` read and write relative to a
  local directory. References that are remote URLs or that resolve outside
  the directory raise ``SecurityError``.
- ``MemoryImageStore`` keeps images in a dictionary; its ``load`` and
  ``save`` methods are usable directly as callbacks.

"""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePosixPath
from typing import Callable
from urllib.parse import unquote

from docbridge.constants import DEFAULT_MAX_ASSET_SIZE_BYTES, REMOTE_URL_SCHEMES
from docbridge.exceptions import SecurityError

logger = logging.getLogger(__name__)


def resolve_within(base_dir: str | Path, reference: str) -> Path:
    """Resolve a relative reference under ``base_dir``.

    Parameters
    ----------
    base_dir : str or Path
        Directory the reference must stay within
    reference : str
        Relative, forward-slash separated reference (percent-encoding allowed)

    Returns
    -------
    Path
        The resolved absolute path

    Raises
    ------
    SecurityError
        If the reference is a remote URL, is absolute, or escapes ``base_dir``

    Examples
    --------
    >>> resolve_within("/tmp/images", "../etc/passwd")  # doctest: +SKIP
    SecurityError: Image reference escapes base directory: ../etc/passwd

    """
    if reference.lower().startswith(REMOTE_URL_SCHEMES):
        raise SecurityError(f"Remote image references are not loaded: {reference}", violation_type="remote_url")

    normalized = unquote(reference).replace("\\", "/")

    # Drive letters are not caught by PurePosixPath.is_absolute()
    if len(normalized) >= 2 and normalized[1] == ":":
        raise SecurityError(f"Absolute image reference rejected: {reference}", violation_type="absolute_path")

    rel_path = PurePosixPath(normalized)
    if rel_path.is_absolute():
        raise SecurityError(f"Absolute image reference rejected: {reference}", violation_type="absolute_path")

    base_path = Path(base_dir).resolve()
    target = base_path.joinpath(*rel_path.parts).resolve()

    base_str = str(base_path)
    target_str = str(target)
    if not (target_str.startswith(base_str + os.sep) or target_str == base_str):
        raise SecurityError(
            f"Image reference escapes base directory: {reference}",
            violation_type="path_traversal",
        )
    return target


def disk_image_loader(
    base_dir: str | Path = ".",
    max_size_bytes: int = DEFAULT_MAX_ASSET_SIZE_BYTES,
) -> Callable[[str], bytes]:
    """Create a ``load_image`` callback reading files under ``base_dir``.

    Parameters
    ----------
    base_dir : str or Path, default "."
        Directory image references are resolved against
    max_size_bytes : int
        Files larger than this are rejected

    Returns
    -------
    callable
        ``load_image(reference) -> bytes``

    """

    def load_image(reference: str) -> bytes:
        path = resolve_within(base_dir, reference)
        size = path.stat().st_size
        if size > max_size_bytes:
            raise SecurityError(
                f"Image '{reference}' is {size} bytes, exceeding the limit of {max_size_bytes} bytes",
                violation_type="asset_size",
            )
        logger.debug(f"Loading image {reference} from {path}")
        return path.read_bytes()

    return load_image


def disk_image_saver(base_dir: str | Path = ".") -> Callable[[bytes, str], None]:
    """Create a ``save_image`` callback writing files under ``base_dir``.

    The directory is created on the first save.
    """

    def save_image(data: bytes, filename: str) -> None:
        path = resolve_within(base_dir, filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.debug(f"Saved {len(data)} bytes to {path}")

    return save_image


class MemoryImageStore:
    """In-memory image storage usable as both image callbacks.

    Parameters
    ----------
    images : dict[str, bytes] or None
        Initial images keyed by reference

    Examples
    --------
        >>> store = MemoryImageStore({"logo.png": b"..."})
        >>> store.load("logo.png")
        b'...'
        >>> store.save(b"data", "image1.png")
        >>> store.images["image1.png"]
        b'data'

    """

    def __init__(self, images: dict[str, bytes] | None = None):
        self.images: dict[str, bytes] = dict(images or {})

    def load(self, reference: str) -> bytes:
        """Return the bytes stored for ``reference``.

        Raises
        ------
        FileNotFoundError
            If nothing is stored under ``reference``

        """
        try:
            return self.images[reference]
        except KeyError as e:
            raise FileNotFoundError(f"No image stored for reference: {reference}") from e

    def save(self, data: bytes, filename: str) -> None:
        """Store ``data`` under ``filename``, replacing any previous entry."""
        self.images[filename] = data

    def __len__(self) -> int:
        return len(self.images)

    def __contains__(self, reference: object) -> bool:
        return reference in self.images


__all__ = ["MemoryImageStore", "disk_image_loader", "disk_image_saver", "resolve_within"]
