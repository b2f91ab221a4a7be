import socket

from ..config import DEFAULT_ENCODING
from ..utils.files import sniff
from ..utils.logging import debug, logged
from .model import CONTENT_TYPE_HTML, HTTPResponse


def write(connection: socket.socket, response: HTTPResponse) -> HTTPResponse:
	"""Writes the response to the connection, returning only once every byte
	has been sent. Write errors are raised to the caller."""
	logged(debug) and debug(
		"Writing Response",
		Client=f"{id(connection):x}",
		Status=response.status,
		ContentType=response.contentType,
		Size=len(response.body),
	)
	connection.sendall(response.payload())
	return response


def writeStatus(
	connection: socket.socket,
	status: str,
	contentType: str = CONTENT_TYPE_HTML,
	body: str = "",
) -> HTTPResponse:
	"""Writes a textual response, the content length is the length of
	the encoded body."""
	return write(
		connection, HTTPResponse(status, contentType, body.encode(DEFAULT_ENCODING))
	)


def writeBinary(
	connection: socket.socket,
	status: str,
	contentType: str | None,
	body: bytes,
) -> HTTPResponse:
	"""Writes a binary response, sniffing the content type from the body
	when none is given."""
	return write(
		connection,
		HTTPResponse(status, contentType or sniff(body), body),
	)


# EOF
