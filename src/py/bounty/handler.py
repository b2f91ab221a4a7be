import socket
from enum import Enum
from pathlib import Path

from .config import DEFAULT_ENCODING, LOG_REQUESTS, READ_SIZE
from .http.model import CONTENT_TYPE_HTML, HTTPRequestLine, HTTPResponse
from .http.parser import parseRequest
from .http.writer import writeBinary, writeStatus
from .listing import render
from .sandbox import PathForbidden, PathNotFound, Root, resolve
from .utils.logging import debug, error, info, logged
from .utils.uri import decode

# Browsers request this on every page, we always answer with a 404
FAVICON: str = "/favicon.ico"


class HandlerState(Enum):
	"""The states a connection goes through, one request per connection."""

	ReadingRequest = 0
	Dispatching = 1
	ServingFile = 2
	ListingDirectory = 3
	Rejecting = 4
	Responded = 5


def state(value: HandlerState, **context: str) -> HandlerState:
	logged(debug) and debug("Handler", State=value.name, **context)
	return value


def reject(status: int, request: HTTPRequestLine) -> HTTPResponse:
	state(HandlerState.Rejecting, Method=request.method, Target=request.target)
	return HTTPResponse.Create(status)


def serveFile(path: Path) -> HTTPResponse:
	try:
		with open(path, "rb") as f:
			data: bytes = f.read()
	except OSError as e:
		error("Could not read file", "FILEREAD", Path=str(path), Error=str(e))
		return HTTPResponse.Create(500)
	# The content type is sniffed by `writeBinary`
	return HTTPResponse.Create(200, data, None)


def respond(
	root: Root, data: bytes, logRequests: bool = LOG_REQUESTS
) -> HTTPResponse:
	"""Produces the response for the raw request `data`. File responses
	have no content type, as it is sniffed when writing. Errors while
	listing a directory are not caught, as we don't want to send a
	partial listing."""
	request: HTTPRequestLine = parseRequest(data)
	logRequests and info(
		"Requested path", Method=request.method, Target=request.target
	)
	state(HandlerState.Dispatching, Method=request.method, Target=request.target)
	if request.target == FAVICON:
		return reject(404, request)
	elif not (request.method and request.target):
		return reject(404, request)
	elif request.method != "GET":
		return reject(405, request)
	try:
		local_path: Path = resolve(root, request.target)
	except PathForbidden:
		return reject(403, request)
	except PathNotFound:
		return reject(404, request)
	logRequests and info(
		"Resolved path", Target=request.target, Path=str(local_path)
	)
	if local_path.is_dir():
		state(HandlerState.ListingDirectory, Path=str(local_path))
		return HTTPResponse.Create(
			200, render(local_path, decode(request.target)), CONTENT_TYPE_HTML
		)
	elif local_path.is_file():
		state(HandlerState.ServingFile, Path=str(local_path))
		return serveFile(local_path)
	else:
		return reject(404, request)


def send(connection: socket.socket, response: HTTPResponse) -> HTTPResponse:
	"""Writes the response, file bodies go through `writeBinary` so that
	their content type is sniffed, other bodies are text."""
	if response.contentType is None:
		return writeBinary(connection, response.status, None, response.body)
	else:
		return writeStatus(
			connection,
			response.status,
			response.contentType,
			response.body.decode(DEFAULT_ENCODING),
		)


def handle(
	root: Root,
	connection: socket.socket,
	readsize: int = READ_SIZE,
	logRequests: bool = LOG_REQUESTS,
) -> HTTPResponse | None:
	"""Reads one request from the connection and writes its response. The
	request is read in a single bounded read, so a request line longer
	than `readsize` is truncated. Returns the response as written, or
	`None` when the client sent nothing."""
	state(HandlerState.ReadingRequest, Client=f"{id(connection):x}")
	data: bytes = connection.recv(readsize)
	if not data:
		return None
	response = send(connection, respond(root, data, logRequests))
	state(HandlerState.Responded, Status=response.status)
	return response


# EOF
