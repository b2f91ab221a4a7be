from .http.model import HTTPRequestLine, HTTPResponse  # NOQA: F401
from .sandbox import Root, resolve, PathForbidden, PathNotFound  # NOQA: F401
from .handler import handle, respond  # NOQA: F401
from .server import run, Server, ServerOptions  # NOQA: F401


# EOF
