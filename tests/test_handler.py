import io
import os
import socket
from pathlib import Path

import pytest

import bounty.handler
import bounty.listing
from bounty.handler import handle, respond
from bounty.sandbox import Root
from bounty.utils.uri import encode

from conftest import PNG


def get(root: Root, target: str, method: str = "GET"):
	request = f"{method} {target} HTTP/1.1\r\nHost: localhost\r\n\r\n"
	return respond(root, request.encode("utf8"))


def test_root_listing(root: Root):
	res = get(root, "/")
	assert res.status == "200 OK"
	assert res.contentType == "text/html"
	page = res.body.decode("utf8")
	assert '<a href="a%2Etxt">a.txt</a>' in page
	assert '<a href="b/">b/</a>' in page
	assert "<h1>Directory listing for /</h1>" in page


def test_subdirectory_listing(root: Root):
	res = get(root, "/b/")
	assert res.status == "200 OK"
	page = res.body.decode("utf8")
	assert "<h1>Directory listing for /b/</h1>" in page
	assert '<a href="c%2Etxt">c.txt</a>' in page


def test_favicon(root: Root):
	assert get(root, "/favicon.ico").status == "404 Not Found"
	(root.path / "favicon.ico").write_bytes(PNG)
	res = get(root, "/favicon.ico")
	assert res.status == "404 Not Found"
	assert res.body == b"Not Found"


def test_non_get(root: Root, monkeypatch: pytest.MonkeyPatch):
	def fail(*args):
		raise AssertionError("The filesystem should not be accessed")

	monkeypatch.setattr(bounty.handler, "resolve", fail)
	for method in ("POST", "PUT", "DELETE", "HEAD", "get"):
		res = get(root, "/", method)
		assert res.status == "405 Method Not Allowed"
		assert res.body == b"Method Not Allowed"


def exchange(root: Root, payload: bytes, **options) -> tuple:
	client, server = socket.socketpair()
	try:
		client.sendall(payload)
		res = handle(root, server, **options)
		server.close()
		data = bytearray()
		while chunk := client.recv(4096):
			data += chunk
		return res, bytes(data)
	finally:
		client.close()
		server.close()


def test_binary_file(root: Root):
	res = get(root, "/image.png")
	assert res.status == "200 OK"
	# Sniffed when written
	assert res.contentType is None
	assert res.body == PNG
	assert res.body == (root.path / "image.png").read_bytes()


def test_binary_file_is_sniffed_when_written(root: Root):
	res, data = exchange(root, b"GET /image.png HTTP/1.1\r\n\r\n")
	assert res.contentType == "image/png"
	assert data == (
		b"HTTP/1.1 200 OK\r\n"
		b"Content-Type: image/png\r\n"
		+ f"Content-Length: {len(PNG)}\r\n\r\n".encode("ascii")
		+ PNG
	)


def test_unknown_content_type(root: Root):
	res, data = exchange(root, b"GET /a.txt HTTP/1.1\r\n\r\n")
	assert res.status == "200 OK"
	assert res.contentType == "application/octet-stream"
	assert data.endswith(b"\r\n\r\nHello, World!\n")
	assert b"Content-Type: application/octet-stream\r\n" in data


def test_handle_writers(root: Root, monkeypatch: pytest.MonkeyPatch):
	calls: list[str] = []
	writeBinary = bounty.handler.writeBinary
	writeStatus = bounty.handler.writeStatus

	def binary(*args):
		calls.append("binary")
		return writeBinary(*args)

	def status(*args):
		calls.append("status")
		return writeStatus(*args)

	monkeypatch.setattr(bounty.handler, "writeBinary", binary)
	monkeypatch.setattr(bounty.handler, "writeStatus", status)
	exchange(root, b"GET /image.png HTTP/1.1\r\n\r\n")
	exchange(root, b"GET / HTTP/1.1\r\n\r\n")
	exchange(root, b"GET /missing HTTP/1.1\r\n\r\n")
	assert calls == ["binary", "status", "status"]


def test_listing_written_as_text(root: Root):
	res, data = exchange(root, b"GET / HTTP/1.1\r\n\r\n")
	head, body = data.split(b"\r\n\r\n", 1)
	assert head.split(b"\r\n")[:2] == [b"HTTP/1.1 200 OK", b"Content-Type: text/html"]
	assert f"Content-Length: {len(body)}".encode("ascii") in head
	assert body == res.body


def test_request_logging(root: Root, log: io.StringIO):
	respond(root, b"GET /a.txt HTTP/1.1\r\n\r\n", logRequests=True)
	assert "Requested path" in log.getvalue()
	assert "Resolved path" in log.getvalue()


def test_request_logging_disabled(root: Root, log: io.StringIO):
	request = b"GET /a.txt HTTP/1.1\r\n\r\n"
	assert respond(root, request, logRequests=False).status == "200 OK"
	exchange(root, request, logRequests=False)
	assert "Requested path" not in log.getvalue()
	assert "Resolved path" not in log.getvalue()



def test_encoded_file_name(root: Root):
	name = "日本 語.png"
	(root.path / name).write_bytes(PNG)
	res = get(root, "/" + encode(name))
	assert res.status == "200 OK"
	assert res.body == PNG


def test_missing(root: Root):
	assert get(root, "/missing.txt").status == "404 Not Found"
	assert get(root, "/b/missing/").status == "404 Not Found"


def test_forbidden(root: Root):
	res = get(root, "/../secret.txt")
	assert res.status == "403 Forbidden"
	assert res.body == b"Forbidden"
	assert get(root, "/%2E%2E/secret.txt").status == "403 Forbidden"


def test_traversal_never_leaks(root: Root):
	for target in ("/../../etc/passwd", "/..%2F..%2Fetc%2Fpasswd", "//etc/passwd"):
		assert get(root, target).status in ("403 Forbidden", "404 Not Found")


def test_malformed_requests(root: Root):
	assert respond(root, b"\r\n\r\n").status == "404 Not Found"
	assert respond(root, b"GET\r\n\r\n").status == "404 Not Found"
	assert respond(root, b"\x00\xff\xfe").status == "404 Not Found"


def test_unreadable_file(root: Root, monkeypatch: pytest.MonkeyPatch):
	def unreadable(*args, **kwargs):
		raise PermissionError("Permission denied")

	monkeypatch.setattr(bounty.handler, "open", unreadable, raising=False)
	res = get(root, "/a.txt")
	assert res.status == "500 Internal Server Error"
	assert res.body == b"Internal Server Error"


def test_special_file(root: Root):
	os.mkfifo(root.path / "fifo")
	assert get(root, "/fifo").status == "404 Not Found"


def test_listing_error_propagates(root: Root, monkeypatch: pytest.MonkeyPatch):
	def denied(path: Path):
		raise PermissionError(f"Permission denied: {path}")

	monkeypatch.setattr(bounty.listing, "listdir", denied)
	with pytest.raises(OSError):
		get(root, "/")


def test_idempotence(root: Root):
	for target in ("/", "/b/", "/image.png", "/missing", "/../secret.txt"):
		assert get(root, target).payload() == get(root, target).payload()


def test_handle(root: Root):
	client, server = socket.socketpair()
	try:
		client.sendall(b"GET /image.png HTTP/1.1\r\nHost: localhost\r\n\r\n")
		res = handle(root, server)
		assert res is not None and res.status == "200 OK"
		assert res.contentType == "image/png"
		server.close()
		data = bytearray()
		while chunk := client.recv(4096):
			data += chunk
		assert bytes(data) == res.payload()
		assert data.startswith(b"HTTP/1.1 200 OK\r\nContent-Type: image/png\r\n")
		assert data.endswith(PNG)
	finally:
		client.close()
		server.close()


def test_handle_no_data(root: Root):
	client, server = socket.socketpair()
	try:
		client.shutdown(socket.SHUT_WR)
		assert handle(root, server) is None
	finally:
		client.close()
		server.close()


def test_handle_truncated_request(root: Root):
	client, server = socket.socketpair()
	try:
		# Only the first 8 bytes are read, the target is cut short
		client.sendall(b"GET /image.png HTTP/1.1\r\n\r\n")
		res = handle(root, server, readsize=8)
		assert res is not None and res.status == "404 Not Found"
	finally:
		client.close()
		server.close()


# EOF
