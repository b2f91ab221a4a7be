from pathlib import Path

from .config import DEFAULT_ENCODING
from .utils.files import DirectoryEntry, listdir
from .utils.htmpl import H, Node, html
from .utils.uri import encode


def displayName(name: str) -> str:
	"""Returns a printable version of a file name that may carry undecodable
	bytes as surrogate escapes."""
	return name.encode(DEFAULT_ENCODING, "surrogateescape").decode(
		DEFAULT_ENCODING, "replace"
	)


def link(entry: DirectoryEntry) -> list[Node]:
	suffix: str = "/" if entry.isDirectory else ""
	return [
		H.a(f"{displayName(entry.name)}{suffix}", href=f"{encode(entry.name)}{suffix}"),
		H.br(),
	]


def render(directory: Path, label: str) -> str:
	"""Renders the listing of the immediate children of `directory` as an
	HTML page. Links are relative to the listed directory, and directories
	have a trailing slash. Enumeration errors are raised as-is."""
	links: list[Node] = []
	for entry in listdir(directory):
		links += link(entry)
	return "".join(
		html(
			H.html(
				H.head(H.meta(charset="utf-8"), H.title(label)),
				H.body(H.h1(f"Directory listing for {label}"), links),
			),
			doctype="html",
		)
	)


# EOF
