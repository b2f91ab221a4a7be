import signal
import socket
import threading
from dataclasses import dataclass
from pathlib import Path
from types import FrameType
from typing import Callable, NamedTuple

from .config import HOST, LOG_LEVEL, LOG_REQUESTS, PORT, READ_SIZE
from .handler import handle
from .sandbox import Root
from .utils.logging import LogState, error, event, exception, info, warning


@dataclass(slots=True)
class ServerState:
	isRunning: bool = True

	def stop(self) -> None:
		info("Server stopping…")
		self.isRunning = False

	def onSignal(self, signum: int, frame: FrameType | None) -> None:
		self.stop()


class ServerOptions(NamedTuple):
	host: str = HOST
	port: int = PORT
	backlog: int = 128
	# Requests are read in one bounded read of this size
	readsize: int = READ_SIZE
	# This is the polling timeout for accepting new connections, so that
	# we can check for stop signals.
	polling: float = 1.0
	# Timeout for client reads and writes, `None` blocks indefinitely
	timeout: float | None = None
	logRequests: bool = LOG_REQUESTS
	condition: Callable[[], bool] | None = None
	stopSignals: bool = True


OPTIONS: ServerOptions = ServerOptions()


class Server:
	"""Sequential blocking server: a connection is fully handled (read,
	resolved, responded, closed) before the next one is accepted."""

	@staticmethod
	def Bind(options: ServerOptions) -> tuple[socket.socket, int]:
		"""Binds the server socket, trying the next few ports when the
		requested one is taken."""
		server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
		server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
		port: int = options.port
		try:
			server.bind((options.host, port))
		except OSError as e:
			warning(f"Could not bind to {options.host}:{port}, trying other ports.")
			bound: bool = False
			for p in range(options.port + 1, options.port + 5):
				try:
					server.bind((options.host, p))
					bound = True
					port = p
					info(f"Found alternate available port: {port}")
					break
				except OSError:
					pass
			if not bound:
				server.close()
				error(
					f"Unable to bind to {options.host}:{options.port}, aborting.",
					"HOSTPORTERR",
				)
				raise e from e
		# The argument is the backlog of connections that will be accepted before
		# they are refused.
		server.listen(options.backlog)
		# When binding to port 0 the OS picks one for us
		return server, server.getsockname()[1]

	@staticmethod
	def OnConnection(
		root: Root,
		client: socket.socket,
		options: ServerOptions,
	) -> None:
		"""Handles a single connection, no error is allowed to escape as
		it would stop the server."""
		try:
			client.settimeout(options.timeout)
			res = handle(root, client, options.readsize, options.logRequests)
			if res is None:
				warning("Client did not send any data", Client=f"{id(client):x}")
			elif options.logRequests:
				event("Response", res.code, Size=len(res.body))
		except (BrokenPipeError, ConnectionResetError) as e:
			# Client did an early close
			warning("Connection closed by client", Error=str(e))
		except TimeoutError:
			warning("Client timed out", Client=f"{id(client):x}")
		except Exception as e:
			# This includes directory listing errors, the connection is
			# dropped without a response.
			exception(e, "Connection dropped")
		finally:
			client.close()

	@classmethod
	def Serve(
		cls,
		root: Root,
		options: ServerOptions = OPTIONS,
		*,
		onBound: Callable[[int], None] | None = None,
	) -> None:
		"""Main server loop."""
		server, port = cls.Bind(options)
		server.settimeout(options.polling or 1.0)
		# Manage server state
		state = ServerState()
		# Signal handlers can only be registered from the main thread
		if (
			options.stopSignals
			and threading.current_thread() is threading.main_thread()
		):
			signal.signal(signal.SIGINT, state.onSignal)
			signal.signal(signal.SIGTERM, state.onSignal)
		info(
			"Bounty server listening",
			icon="🚀",
			Host=options.host,
			Port=port,
			Root=str(root),
		)
		if onBound:
			onBound(port)
		try:
			while state.isRunning:
				if options.condition and not options.condition():
					break
				try:
					client, address = server.accept()
				except TimeoutError:
					continue
				except OSError as e:
					exception(e)
					continue
				if options.logRequests:
					event("Connection", f"{address[0]}:{address[1]}")
				cls.OnConnection(root, client, options)
		finally:
			server.close()


def run(
	root: str | Path | None = None,
	*,
	host: str = OPTIONS.host,
	port: int = OPTIONS.port,
	backlog: int = OPTIONS.backlog,
	readsize: int = OPTIONS.readsize,
	timeout: float | None = OPTIONS.timeout,
	polling: float = OPTIONS.polling,
	logRequests: bool = OPTIONS.logRequests,
	condition: Callable[[], bool] | None = None,
) -> None:
	"""High level function to run the server on the given directory,
	defaulting to the current working directory."""
	LogState.SetLevel(LOG_LEVEL)
	root_dir = Root.Create(root)
	info("Serving directory", Path=str(root_dir))
	options = ServerOptions(
		host=host,
		port=port,
		backlog=backlog,
		readsize=readsize,
		timeout=timeout,
		polling=polling,
		logRequests=logRequests,
		condition=condition,
	)
	try:
		Server.Serve(root_dir, options)
	except KeyboardInterrupt:
		event("ManualShutdown")
	event("EOK")


# EOF
