"""
Source and sink adapters for table text.

**Conceptual**: The table reader/writer only ever sees text. This module turns
whatever the caller has into that text, and writes text back out:

  - open_source(): local path (str or Path), http(s) URL, raw bytes, or an
    open binary/text file object -> io.StringIO.
  - write_sink(): text -> local path, binary buffer or text buffer.

Tables are UTF-8; a leading byte-order mark is dropped. To read CSV text you
already hold as a str, wrap it in io.StringIO (a bare str is a path or URL).
"""

import io
from pathlib import Path
from typing import IO, Optional, Union

from camtrap_dp.config.settings import HttpSettings
from camtrap_dp.data.errors import SourceError
from camtrap_dp.utils.logging import get_logger
from camtrap_dp.venues.http_client import CamtrapHttpClient

logger = get_logger(__name__)

TableSource = Union[str, Path, bytes, bytearray, IO]
TableSink = Union[str, Path, IO]

URL_SCHEMES = ("http://", "https://")


def is_url(source) -> bool:
    return isinstance(source, str) and source.lower().startswith(URL_SCHEMES)


def describe_source(source: TableSource) -> str:
    """Short description of a source for log and error messages."""
    if isinstance(source, (str, Path)):
        return str(source)
    if isinstance(source, (bytes, bytearray)):
        return f"<{len(source)} bytes>"
    return getattr(source, "name", None) or f"<{type(source).__name__}>"


def open_source(
    source: TableSource,
    http_client: Optional[CamtrapHttpClient] = None,
) -> io.StringIO:
    """
    Open a table source as a character stream.

    Args:
        source: Path, http(s) URL, bytes, or an open file object.
        http_client: Client used for URLs. A client with default HttpSettings
                     is created when omitted.

    Returns:
        io.StringIO positioned at the start of the table text.

    Raises:
        FileNotFoundError: If a local path does not exist.
        SourceError: If a URL cannot be fetched or the bytes are not UTF-8.
        TypeError: If the source is of an unsupported type.
    """
    name = describe_source(source)

    if is_url(source):
        client = http_client or CamtrapHttpClient(HttpSettings())
        data = client.fetch_bytes(source)
    elif isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(
                f"Table not found: {path}. Ensure the file exists and the path is correct."
            )
        data = path.read_bytes()
    elif isinstance(source, (bytes, bytearray)):
        data = bytes(source)
    elif hasattr(source, "read"):
        data = source.read()
        if isinstance(data, str):
            return io.StringIO(data.lstrip("\ufeff"))
    else:
        raise TypeError(
            f"Unsupported table source {type(source).__name__}. "
            f"Expected a path, URL, bytes or file object."
        )

    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise SourceError(f"{name}: table is not UTF-8 encoded ({e})", source=name)

    logger.debug("Opened %s (%d characters)", name, len(text))
    return io.StringIO(text)


def write_sink(text: str, destination: TableSink) -> None:
    """
    Write table text to a path or buffer.

    Paths get UTF-8 with line endings kept as-is; parent directories are
    created. Binary buffers receive UTF-8 bytes; text buffers receive the str.

    Raises:
        OSError: If the file cannot be written.
        TypeError: If the destination is of an unsupported type.
    """
    if isinstance(destination, (str, Path)):
        path = Path(destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        logger.debug("Wrote %d characters to %s", len(text), path)
        return

    if isinstance(destination, (io.RawIOBase, io.BufferedIOBase)):
        destination.write(text.encode("utf-8"))
    elif isinstance(destination, io.TextIOBase) or hasattr(destination, "write"):
        destination.write(text)
    else:
        raise TypeError(
            f"Unsupported table destination {type(destination).__name__}. "
            f"Expected a path or a writable file object."
        )
