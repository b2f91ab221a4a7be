import io
import struct
import zlib
from pathlib import Path

import pytest

import bounty.utils.logging
from bounty.sandbox import Root
from bounty.utils.logging import LogLevel, LogState


def chunk(kind: bytes, data: bytes) -> bytes:
	return (
		struct.pack(">I", len(data))
		+ kind
		+ data
		+ struct.pack(">I", zlib.crc32(kind + data) & 0xFFFFFFFF)
	)


# A 1x1 greyscale PNG
PNG: bytes = (
	b"\x89PNG\r\n\x1a\n"
	+ chunk(b"IHDR", struct.pack(">IIBBBBB", 1, 1, 8, 0, 0, 0, 0))
	+ chunk(b"IDAT", zlib.compress(b"\x00\x00"))
	+ chunk(b"IEND", b"")
)


@pytest.fixture
def tree(tmp_path: Path) -> Path:
	"""Creates a served directory with a file, a subdirectory and a
	secret file next to it (outside of the root)."""
	base = tmp_path / "root"
	base.mkdir()
	(base / "a.txt").write_text("Hello, World!\n")
	(base / "b").mkdir()
	(base / "b" / "c.txt").write_text("nested")
	(base / "image.png").write_bytes(PNG)
	(tmp_path / "secret.txt").write_text("secret")
	return base


@pytest.fixture
def root(tree: Path) -> Root:
	return Root.Create(tree)


@pytest.fixture
def log(monkeypatch: pytest.MonkeyPatch) -> io.StringIO:
	"""Captures the log output, at the info level."""
	output = io.StringIO()
	monkeypatch.setattr(bounty.utils.logging, "ERR", output)
	monkeypatch.setattr(LogState, "Level", LogLevel.Info)
	return output


# EOF
