import os
from os import getenv
from pathlib import Path
from typing import NamedTuple

from .utils.logging import warning


def defaultWorkers() -> int:
	"""The default number of workers is the available parallelism."""
	return os.cpu_count() or 1


def getint(name: str, default: int) -> int:
	"""Reads an integer from the environment, falling back to the default
	when the variable is unset or not a number."""
	value: str | None = getenv(name)
	if value is None or not value.strip():
		return default
	try:
		return int(value)
	except ValueError:
		warning(
			"Ignoring non-numeric environment variable",
			Name=name,
			Value=value,
			Default=default,
		)
		return default


PORT: int = getint("PORT", 8080)

# The share is meant to be reached from the local network
HOST: str = getenv("HOST", "0.0.0.0")  # nosec: B104

FILE_DIR: str = getenv("FILESHARE_DIR", "files")

URL_PATH: str = getenv("FILESHARE_PREFIX", "/download/files")

LOG_LEVEL: str = getenv("FILESHARE_LOG_LEVEL", "info")

LOG_REQUESTS: bool = getenv("FILESHARE_LOG_REQUESTS", "1") == "1"

WORKERS: int = getint("FILESHARE_WORKERS", 0) or defaultWorkers()


def normalizePrefix(prefix: str) -> str:
	"""Normalizes the URL prefix so that it starts with a `/` and does not
	end with one. The root prefix `/` is the empty string."""
	return "/" + "/".join(_ for _ in prefix.split("/") if _) if prefix.strip("/") else ""


class ShareConfig(NamedTuple):
	"""The immutable configuration of a share: the canonical root directory
	and the URL prefix under which it is served. It is created once and
	read by every worker."""

	root: Path
	prefix: str

	@staticmethod
	def Make(root: str | Path, prefix: str = URL_PATH) -> "ShareConfig":
		return ShareConfig(
			root=Path(os.path.realpath(root)),
			prefix=normalizePrefix(prefix),
		)


# EOF
