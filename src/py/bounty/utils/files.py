import os
from pathlib import Path
from typing import NamedTuple

import filetype

from ..http.model import CONTENT_TYPE_BINARY


def sniff(data: bytes) -> str:
	"""Guesses the content type from the magic bytes at the start of `data`,
	defaulting to a generic binary type."""
	return filetype.guess_mime(data) or CONTENT_TYPE_BINARY


class DirectoryEntry(NamedTuple):
	name: str
	isDirectory: bool

	@staticmethod
	def FromDirEntry(entry: os.DirEntry[str]) -> "DirectoryEntry":
		# NOTE: `is_dir` follows symlinks, so a link to a directory is
		# listed as a directory.
		return DirectoryEntry(entry.name, entry.is_dir())


def listdir(path: Path) -> list[DirectoryEntry]:
	"""Lists the immediate children of the given directory, sorted by name.
	Any error while enumerating is raised."""
	with os.scandir(path) as entries:
		return sorted((DirectoryEntry.FromDirEntry(_) for _ in entries))


# EOF
