"""
Tests for source and sink adapters (camtrap_dp/venues/sources.py).
"""

import io
from pathlib import Path

import pytest

from camtrap_dp.data.errors import SourceError
from camtrap_dp.venues.sources import describe_source, is_url, open_source, write_sink

TABLE_TEXT = "deploymentID,locationName\ndep1,Kleine Vijver é\n"


def test_is_url():
    assert is_url("https://example.org/media.csv")
    assert is_url("HTTP://example.org/media.csv")
    assert not is_url("data/media.csv")
    assert not is_url(Path("https/media.csv"))


def test_open_source_path(tmp_path):
    path = tmp_path / "deployments.csv"
    path.write_text(TABLE_TEXT, encoding="utf-8")

    assert open_source(path).read() == TABLE_TEXT
    assert open_source(str(path)).read() == TABLE_TEXT


def test_open_source_missing_path(tmp_path):
    with pytest.raises(FileNotFoundError) as exc_info:
        open_source(tmp_path / "missing.csv")
    assert "Table not found" in str(exc_info.value)


def test_open_source_bytes_drops_byte_order_mark():
    data = "\ufeff".encode("utf-8") + TABLE_TEXT.encode("utf-8")
    assert open_source(data).read() == TABLE_TEXT


def test_open_source_binary_and_text_file_objects():
    assert open_source(io.BytesIO(TABLE_TEXT.encode("utf-8"))).read() == TABLE_TEXT
    assert open_source(io.StringIO("\ufeff" + TABLE_TEXT)).read() == TABLE_TEXT


def test_open_source_rejects_non_utf8():
    with pytest.raises(SourceError) as exc_info:
        open_source("Kleine Vijver é".encode("latin-1"))
    assert "UTF-8" in str(exc_info.value)


def test_open_source_rejects_unsupported_types():
    with pytest.raises(TypeError):
        open_source(42)


def test_describe_source():
    assert describe_source(Path("data/media.csv")) == str(Path("data/media.csv"))
    assert describe_source(b"abc") == "<3 bytes>"
    assert describe_source(io.BytesIO()) == "<BytesIO>"


def test_write_sink_creates_parent_directories(tmp_path):
    path = tmp_path / "nested" / "dir" / "media.csv"
    write_sink(TABLE_TEXT, path)

    assert path.read_bytes() == TABLE_TEXT.encode("utf-8")


def test_write_sink_buffers():
    binary = io.BytesIO()
    write_sink(TABLE_TEXT, binary)
    assert binary.getvalue().decode("utf-8") == TABLE_TEXT

    text = io.StringIO()
    write_sink(TABLE_TEXT, text)
    assert text.getvalue() == TABLE_TEXT


def test_write_sink_rejects_unsupported_types():
    with pytest.raises(TypeError):
        write_sink(TABLE_TEXT, 42)
