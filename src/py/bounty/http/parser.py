from ..config import DEFAULT_ENCODING
from .model import HTTPRequestLine


def parseRequestLine(line: str) -> HTTPRequestLine:
	"""Extracts the method and the target from a request line, absent fields
	are returned as empty strings. The target is not validated."""
	parts: list[str] = line.split(None, 2)
	return HTTPRequestLine(
		parts[0] if len(parts) > 0 else "",
		parts[1] if len(parts) > 1 else "",
	)


def parseRequest(data: bytes) -> HTTPRequestLine:
	"""Parses the request line out of the raw bytes read from the
	connection. Headers and body are ignored."""
	# NOTE: Invalid UTF-8 is replaced, we don't reject the request here.
	text: str = data.decode(DEFAULT_ENCODING, "replace")
	line: str = text.split("\n", 1)[0]
	return parseRequestLine(line[:-1] if line.endswith("\r") else line)


# EOF
