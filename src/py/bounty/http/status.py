# The subset of HTTP statuses the server can respond with
HTTP_STATUS: dict[int, str] = {
	200: "OK",
	403: "Forbidden",
	404: "Not Found",
	405: "Method Not Allowed",
	500: "Internal Server Error",
}


def statusLine(status: int) -> str:
	"""Returns the status and reason, ie. `404 Not Found`."""
	return f"{status} {HTTP_STATUS[status]}"


# EOF
