import socket
from pathlib import Path

import pytest

from fileshare import config
from fileshare.__main__ import ensureDirectory, main, parser


def test_defaults():
	options = parser().parse_args([])
	assert options.file_dir == config.FILE_DIR
	assert options.url_path == config.URL_PATH
	assert options.log_level == config.LOG_LEVEL
	assert options.port == config.PORT
	assert options.worker == config.WORKERS
	assert options.worker >= 1


def test_flags():
	options = parser().parse_args(
		["-f", "shared", "-u", "/s", "-l", "trace", "-p", "9000", "-w", "2"]
	)
	assert options.file_dir == "shared"
	assert options.url_path == "/s"
	assert options.log_level == "trace"
	assert options.port == 9000
	assert options.worker == 2


def test_invalid_worker_count(tmp_path: Path):
	assert main(["-f", str(tmp_path / "files"), "-w", "0"]) == 2
	assert not (tmp_path / "files").exists()


def test_directory_is_created(tmp_path: Path):
	path = tmp_path / "a" / "b"
	assert ensureDirectory(path) == path
	assert path.is_dir()
	# Existing directories are left as they are
	(path / "keep.txt").write_bytes(b"x")
	ensureDirectory(path)
	assert (path / "keep.txt").read_bytes() == b"x"


def test_port_in_use(tmp_path: Path):
	with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
		sock.bind(("127.0.0.1", 0))
		sock.listen()
		port = sock.getsockname()[1]
		code = main(
			[
				"-f",
				str(tmp_path / "files"),
				"--host",
				"127.0.0.1",
				"-p",
				str(port),
				"-w",
				"1",
				"-l",
				"error",
			]
		)
	assert code == 1
	assert (tmp_path / "files").is_dir()



def test_file_dir_must_be_a_directory(tmp_path: Path):
	path = tmp_path / "file.txt"
	path.write_bytes(b"x")
	with pytest.raises(NotADirectoryError):
		ensureDirectory(path)
	assert main(["-f", str(path), "-l", "error"]) == 1
	assert path.read_bytes() == b"x"


# EOF
