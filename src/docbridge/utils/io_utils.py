#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docbridge/utils/io_utils.py
"""I/O utilities for writing rendered output to paths or streams."""

from __future__ import annotations

import io
from pathlib import Path
from typing import IO, Union, cast


def _is_binary_stream(output: object) -> bool:
    if isinstance(output, io.TextIOBase):
        return False
    if isinstance(output, (io.BufferedIOBase, io.RawIOBase)):
        return True
    mode = getattr(output, "mode", "")
    return isinstance(mode, str) and "b" in mode


def write_content(content: Union[str, bytes], output: Union[str, Path, IO[bytes], IO[str]]) -> None:
    """Write text or binary content to a file path or file-like object.

    Text is encoded as UTF-8 when the destination is binary, and bytes are
    decoded as UTF-8 when the destination is a text stream.

    Parameters
    ----------
    content : str or bytes
        Content to write
    output : str, Path, IO[bytes] or IO[str]
        Destination

    Raises
    ------
    TypeError
        If content or output are of an unsupported type

    """
    if not isinstance(content, (str, bytes)):
        raise TypeError(f"Content must be str or bytes, got {type(content)}")

    if isinstance(output, (str, Path)):
        output_path = Path(output)
        if isinstance(content, str):
            output_path.write_text(content, encoding="utf-8")
        else:
            output_path.write_bytes(content)
        return

    if not hasattr(output, "write"):
        raise TypeError(f"Unsupported output type: {type(output)}")

    if _is_binary_stream(output):
        data = content.encode("utf-8") if isinstance(content, str) else content
        cast(IO[bytes], output).write(data)
    else:
        text = content.decode("utf-8") if isinstance(content, bytes) else content
        cast(IO[str], output).write(text)
