import argparse
import sys

from . import config
from .server import run
from .utils.logging import info


def main(args: list[str] | None = None) -> int:
	parser = argparse.ArgumentParser(
		prog="bounty",
		description="Serves the files and directory listings of a local directory.",
	)
	parser.add_argument(
		"-b",
		"--bind",
		default=config.HOST,
		help=f"IP address for listening (default: {config.HOST})",
	)
	parser.add_argument(
		"-p",
		"--port",
		type=int,
		default=config.PORT,
		help=f"Listening port (default: {config.PORT})",
	)
	parser.add_argument(
		"-d",
		"--directory",
		default=None,
		help="Directory to serve (default: current directory)",
	)
	parser.add_argument(
		"-r",
		"--readsize",
		type=int,
		default=config.READ_SIZE,
		help=f"Size of the request read buffer (default: {config.READ_SIZE})",
	)
	parser.add_argument(
		"-t",
		"--timeout",
		type=float,
		default=None,
		help="Client read/write timeout in seconds (default: none)",
	)
	parser.add_argument(
		"-q",
		"--quiet",
		action="store_true",
		help="Don't log requests",
	)
	options = parser.parse_args(args)
	info("Starting Bounty local file server")
	run(
		options.directory,
		host=options.bind,
		port=options.port,
		readsize=options.readsize,
		timeout=options.timeout,
		logRequests=not options.quiet and config.LOG_REQUESTS,
	)
	return 0


if __name__ == "__main__":
	sys.exit(main())

# EOF
