from urllib.parse import unquote_to_bytes

from ..config import DEFAULT_ENCODING

# Only ASCII letters and digits are left as-is, every other byte is escaped.
URI_SAFE: frozenset[int] = frozenset(
	b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
)


def encode(segment: str) -> str:
	"""Percent-encodes the given path segment so that it can be embedded
	both in a URL path and in an HTML attribute. Encoding is done on the
	UTF-8 bytes, and file names carrying undecodable bytes (as surrogate
	escapes) are encoded with their original bytes."""
	return "".join(
		chr(b) if b in URI_SAFE else f"%{b:02X}"
		for b in segment.encode(DEFAULT_ENCODING, "surrogateescape")
	)


def decode(encoded: str) -> str:
	"""Percent-decodes the given text. Malformed escapes are passed through
	as-is and invalid UTF-8 is replaced, so this never fails."""
	return unquote_to_bytes(encoded).decode(DEFAULT_ENCODING, "replace")


# EOF
