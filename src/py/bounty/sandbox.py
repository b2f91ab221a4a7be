from pathlib import Path
from typing import NamedTuple

from .utils.logging import debug, logged
from .utils.uri import decode

__doc__ = """
Resolves request targets to local paths, making sure that nothing outside
of the root directory can be reached. The candidate path is always
canonicalized (`..`, `.` and symlinks resolved) *before* checking that it
is contained in the root.
"""

# -----------------------------------------------------------------------------
#
# ERRORS
#
# -----------------------------------------------------------------------------


class SandboxError(Exception):
	"""Base error for paths that can't be served."""

	def __init__(self, target: str, message: str):
		super().__init__(message)
		self.target: str = target


class PathNotFound(SandboxError):
	def __init__(self, target: str):
		super().__init__(target, f"Path not found: {target}")


class PathForbidden(SandboxError):
	def __init__(self, target: str):
		super().__init__(target, f"Path is outside of the root: {target}")


# -----------------------------------------------------------------------------
#
# ROOT
#
# -----------------------------------------------------------------------------


class Root(NamedTuple):
	"""The canonical directory the server is scoped to. It is created once
	at startup and then passed around as-is."""

	path: Path

	@staticmethod
	def Create(path: str | Path | None = None) -> "Root":
		local_path = Path(path or ".").resolve(strict=True)
		if not local_path.is_dir():
			raise NotADirectoryError(f"Root is not a directory: {local_path}")
		return Root(local_path)

	def contains(self, path: Path) -> bool:
		return path.parts[: len(parts := self.path.parts)] == parts

	def __str__(self) -> str:
		return str(self.path)


# -----------------------------------------------------------------------------
#
# RESOLUTION
#
# -----------------------------------------------------------------------------


def relative(target: str) -> str:
	"""Returns the decoded target relative to the root, stripping one leading
	separator."""
	path: str = decode(target)
	if path == "/":
		return ""
	else:
		return path[1:] if path.startswith("/") else path


def resolve(root: Root, target: str) -> Path:
	"""Resolves the request target against the root, raising `PathNotFound`
	when it does not exist and `PathForbidden` when it lands outside
	of the root."""
	candidate: Path = root.path.joinpath(relative(target))
	try:
		local_path: Path = candidate.resolve(strict=True)
	# NOTE: ValueError is raised on embedded null bytes, RuntimeError on
	# symlink loops with older Pythons.
	except (OSError, RuntimeError, ValueError) as e:
		logged(debug) and debug(
			"Path not resolved", Target=target, Candidate=str(candidate), Error=str(e)
		)
		raise PathNotFound(target) from e
	if not root.contains(local_path):
		raise PathForbidden(target)
	return local_path


# EOF
