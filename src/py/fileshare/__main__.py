import argparse
import errno
import os
import sys
from pathlib import Path

from . import config
from .config import ShareConfig
from .server import run
from .services.files import FileService
from .utils.logging import LogLevel, error, info, setLevel, warning
from .utils.net import LOCALHOST, localAddress


def parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(
		prog="fileshare",
		description="A static file server that lists directories and serves files as downloads.\nExample: fileshare --port 8080",
		formatter_class=argparse.RawDescriptionHelpFormatter,
	)
	p.add_argument(
		"-f",
		"--file-dir",
		default=config.FILE_DIR,
		help=f"Directory to share, created if missing (default: {config.FILE_DIR})",
	)
	p.add_argument(
		"-u",
		"--url-path",
		default=config.URL_PATH,
		help=f"URL path under which files are served (default: {config.URL_PATH})",
	)
	p.add_argument(
		"-l",
		"--log-level",
		default=config.LOG_LEVEL,
		choices=["trace", "debug", "info", "warn", "error"],
		help=f"Log level (default: {config.LOG_LEVEL})",
	)
	p.add_argument(
		"-p",
		"--port",
		type=int,
		default=config.PORT,
		help=f"Port to listen on (default: {config.PORT})",
	)
	p.add_argument(
		"-w",
		"--worker",
		type=int,
		default=config.WORKERS,
		help=f"Number of worker threads (default: the number of cores, {config.defaultWorkers()})",
	)
	p.add_argument(
		"--host",
		default=config.HOST,
		help=f"Address to bind to (default: {config.HOST})",
	)
	return p


def ensureDirectory(path: Path) -> Path:
	"""Creates the shared directory when it does not exist yet. Raises
	`NotADirectoryError` when the path exists but is not a directory."""
	if not path.exists():
		warning("Shared directory does not exist, creating it", Path=str(path))
		path.mkdir(parents=True, exist_ok=True)
		info("Shared directory created", Path=str(path))
	elif not path.is_dir():
		raise NotADirectoryError(errno.ENOTDIR, "Not a directory", str(path))
	return path


def main(args: list[str] | None = None) -> int:
	options = parser().parse_args(args)
	if options.worker < 1:
		error("The number of workers must be at least 1", "BADWORKERS")
		return 2
	setLevel(LogLevel.Parse(options.log_level))
	info(
		"Run parameters",
		FileDir=options.file_dir,
		URLPath=options.url_path,
		LogLevel=options.log_level,
		Port=options.port,
		Workers=options.worker,
	)
	try:
		ensureDirectory(Path(options.file_dir))
	except OSError as e:
		error(
			f"Could not use directory {options.file_dir}: {e}",
			"MKDIRERR",
			CurrentDir=os.getcwd(),
		)
		return 1
	share = ShareConfig.Make(options.file_dir, options.url_path)
	info("Shared directory", Path=str(Path(options.file_dir).absolute()))
	info("Local access", URL=f"http://{LOCALHOST}:{options.port}{share.prefix}/")
	info("Network access", URL=f"http://{localAddress()}:{options.port}{share.prefix}/")
	try:
		run(
			FileService(share),
			host=options.host,
			port=options.port,
			workers=options.worker,
		)
	except OSError as e:
		error(f"Could not listen on {options.host}:{options.port}: {e}", "HOSTPORTERR")
		return 1
	return 0


if __name__ == "__main__":
	sys.exit(main())

# EOF
