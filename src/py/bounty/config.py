from os import getenv

DEFAULT_ENCODING: str = "utf8"

PORT: int = int(getenv("PORT", 8080))

# Only the local interface by default, as we expose the working directory
HOST: str = getenv("HOST", "127.0.0.1")

# Requests are read with a single bounded read of this many bytes
READ_SIZE: int = int(getenv("BOUNTY_READ_SIZE", 1024))

LOG_REQUESTS: bool = getenv("BOUNTY_LOG_REQUESTS", "1") == "1"

LOG_LEVEL: str = getenv("BOUNTY_LOG_LEVEL", "Info")

# EOF
