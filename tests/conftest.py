from pathlib import Path
from typing import Callable
from urllib.parse import parse_qsl, urlsplit

import pytest

from fileshare import FileService, HTTPRequest, HTTPResponse, ShareConfig, mount
from fileshare.model import Application
from fileshare.utils.logging import LogLevel, setLevel

PREFIX: str = "/download/files"


@pytest.fixture(autouse=True)
def quiet():
	# Keeps the test output readable, tests that check logs lower it
	setLevel(LogLevel.Error)
	yield
	setLevel(LogLevel.Info)


@pytest.fixture
def share(tmp_path: Path) -> Path:
	"""A root with `a.txt` (containing `hello`) and an empty `sub/`."""
	root = tmp_path / "files"
	root.mkdir()
	(root / "a.txt").write_bytes(b"hello")
	(root / "sub").mkdir()
	return root


@pytest.fixture
def config(share: Path) -> ShareConfig:
	return ShareConfig.Make(share, PREFIX)


@pytest.fixture
def app(config: ShareConfig) -> Application:
	return mount(FileService(config))


@pytest.fixture
def fetch(app: Application) -> Callable[..., HTTPResponse]:
	"""Processes a request in-process, the way the server does."""

	def f(uri: str, method: str = "GET") -> HTTPResponse:
		url = urlsplit(uri)
		return app.process(HTTPRequest(method, url.path, dict(parse_qsl(url.query))))

	return f


# EOF
