from typing import NamedTuple

from ..config import DEFAULT_ENCODING
from .status import HTTP_STATUS, statusLine

PROTOCOL: str = "HTTP/1.1"
CONTENT_TYPE_HTML: str = "text/html"
CONTENT_TYPE_BINARY: str = "application/octet-stream"


class HTTPRequestLine(NamedTuple):
	"""Represents a request line, only the method and target are kept."""

	method: str
	target: str


class HTTPResponse(NamedTuple):
	"""A fully assembled response, written at once to the connection."""

	status: str
	# `None` when the type is to be sniffed from the body when written
	contentType: str | None
	body: bytes

	@staticmethod
	def Create(
		status: int,
		content: str | bytes | None = None,
		contentType: str | None = CONTENT_TYPE_HTML,
	) -> "HTTPResponse":
		"""Creates a response for the given status code. When no content is
		given, the body is the status reason."""
		body: bytes = (
			HTTP_STATUS[status].encode(DEFAULT_ENCODING)
			if content is None
			else content.encode(DEFAULT_ENCODING)
			if isinstance(content, str)
			else content
		)
		return HTTPResponse(statusLine(status), contentType, body)

	@property
	def code(self) -> int:
		return int(self.status.split(" ", 1)[0])

	def head(self) -> bytes:
		"""Serializes the head as a payload."""
		return (
			f"{PROTOCOL} {self.status}\r\n"
			f"Content-Type: {self.contentType or CONTENT_TYPE_BINARY}\r\n"
			f"Content-Length: {len(self.body)}\r\n"
			"\r\n"
		).encode("ascii")

	def payload(self) -> bytes:
		return self.head() + self.body

	def __str__(self) -> str:
		return f"Response({PROTOCOL} {self.status} {self.contentType} {len(self.body)})"


# EOF
