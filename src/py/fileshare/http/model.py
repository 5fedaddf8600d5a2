import io
from functools import lru_cache
from typing import (
	Any,
	BinaryIO,
	Iterator,
	NamedTuple,
	TypeAlias,
	TypeVar,
)

from ..utils.logging import warning
from .api import ResponseFactory
from .status import HTTP_STATUS

DEFAULT_ENCODING: str = "utf8"
# Size of the chunks read from files when writing a body
CHUNK_SIZE: int = 64_000
# Number of normalized header names kept in memory
HEADER_CACHE_SIZE: int = 256

T = TypeVar("T")

# -----------------------------------------------------------------------------
#
# HELPERS
#
# -----------------------------------------------------------------------------


@lru_cache(maxsize=HEADER_CACHE_SIZE)
def headername(name: str) -> str:
	"""Normalizes the header name as `Kebab-Case`. Names come from clients,
	so only the most recent ones are remembered."""
	return "-".join(_.capitalize() for _ in name.split("-"))


# -----------------------------------------------------------------------------
#
# DATA MODEL
#
# -----------------------------------------------------------------------------


class HTTPHeaders(NamedTuple):
	"""Wraps HTTP headers, keeping key information for response/request processing."""

	headers: dict[str, str]
	contentType: str | None = None
	contentLength: int | None = None

	@staticmethod
	def FromItems(items: Iterator[tuple[str, str]] | list[tuple[str, str]]) -> "HTTPHeaders":
		headers: dict[str, str] = {headername(k): v for k, v in items}
		length: str | None = headers.get("Content-Length")
		return HTTPHeaders(
			headers,
			contentType=headers.get("Content-Type"),
			contentLength=int(length) if length and length.isdigit() else None,
		)


# -----------------------------------------------------------------------------
#
# ERRORS
#
# -----------------------------------------------------------------------------


class HTTPRequestError(Exception):
	"""To be raised by handlers to generate an error response, a 500 unless
	a status is given."""

	def __init__(
		self,
		message: str,
		status: int | None = None,
	):
		super().__init__(message)
		self.message: str = message
		self.status: int | None = status


# -----------------------------------------------------------------------------
#
# BODY
#
# -----------------------------------------------------------------------------


class HTTPBodyBlob(NamedTuple):
	"""Represents a whole body as bytes."""

	payload: bytes = b""
	length: int = 0

	@staticmethod
	def FromBytes(data: bytes) -> "HTTPBodyBlob":
		return HTTPBodyBlob(payload=data, length=len(data))

	def iterChunks(self, size: int = CHUNK_SIZE) -> Iterator[bytes]:
		if self.payload:
			yield self.payload

	def close(self) -> None:
		pass


class HTTPBodyFile(NamedTuple):
	"""Represents an HTTP body read from an open file. The body owns the
	file and closes it once iterated, or when closed explicitly.

	At most `length` bytes are read, so that a file that grows while it is
	sent does not overflow the advertised `Content-Length`. A file that
	shrinks yields fewer bytes, which the writer has to detect."""

	file: BinaryIO
	length: int

	def iterChunks(self, size: int = CHUNK_SIZE) -> Iterator[bytes]:
		remaining: int = self.length
		try:
			while remaining > 0 and (chunk := self.file.read(min(size, remaining))):
				remaining -= len(chunk)
				yield chunk
		finally:
			self.file.close()

	def close(self) -> None:
		self.file.close()


# The different types of bodies that are managed
THTTPBody: TypeAlias = HTTPBodyBlob | HTTPBodyFile


# -----------------------------------------------------------------------------
#
# REQUESTS
#
# -----------------------------------------------------------------------------


class HTTPRequest(ResponseFactory["HTTPResponse"]):
	"""Represents an HTTP requests, which also acts as a factory for
	responses."""

	__slots__ = [
		"protocol",
		"method",
		"path",
		"query",
		"_headers",
	]

	def __init__(
		self,
		method: str,
		path: str,
		query: dict[str, str] | None = None,
		headers: HTTPHeaders | None = None,
		protocol: str = "HTTP/1.1",
	):
		super().__init__()
		self.method: str = method
		self.path: str = path
		self.query: dict[str, str] | None = query
		self.protocol: str = protocol
		self._headers: HTTPHeaders = headers or HTTPHeaders({})

	@property
	def headers(self) -> dict[str, str]:
		return self._headers.headers

	def param(
		self,
		name: str,
		default: T | None = None,
	) -> str | T | None:
		return self.query.get(name, default) if self.query else default

	def respond(
		self,
		content: Any = None,
		contentType: str | None = None,
		contentLength: int | None = None,
		status: int = 200,
		headers: dict[str, str] | None = None,
		message: str | None = None,
	) -> "HTTPResponse":
		return HTTPResponse.Create(
			status=status,
			message=message,
			content=content,
			contentType=contentType,
			contentLength=contentLength,
			protocol=self.protocol,
			headers=headers,
		)

	def __str__(self) -> str:
		return f"Request({self.method} {self.path}{f'?{self.query}' if self.query else ''} {self.headers})"


# -----------------------------------------------------------------------------
#
# RESPONSE
#
# -----------------------------------------------------------------------------


class HTTPResponse:
	"""An HTTP response."""

	@staticmethod
	def Create(
		content: Any = None,
		contentType: str | None = None,
		contentLength: int | None = None,
		headers: dict[str, str] | None = None,
		status: int = 200,
		message: str | None = None,
		protocol: str = "HTTP/1.1",
	) -> "HTTPResponse":
		"""Factory method to create HTTP response objects."""
		body: THTTPBody | None = None
		if content is None:
			pass
		elif isinstance(content, str):
			body = HTTPBodyBlob.FromBytes(content.encode(DEFAULT_ENCODING))
		elif isinstance(content, bytes):
			body = HTTPBodyBlob.FromBytes(content)
		elif isinstance(content, io.IOBase):
			if contentLength is None:
				raise ValueError(f"File content requires a content length: {content}")
			body = HTTPBodyFile(content, contentLength)  # type: ignore[arg-type]
		else:
			raise ValueError(f"Unsupported content {type(content)}:{content}")
		if isinstance(body, HTTPBodyBlob):
			contentLength = body.length
		res_headers: dict[str, str] = (
			{headername(k): v for k, v in headers.items()} if headers else {}
		)
		if contentType is not None:
			res_headers["Content-Type"] = contentType
		res_headers["Content-Length"] = str(contentLength or 0)
		return HTTPResponse(
			status=status,
			message=message or HTTP_STATUS.get(status, "Unknown status"),
			headers=HTTPHeaders(
				res_headers,
				contentType=res_headers.get("Content-Type"),
				contentLength=contentLength or 0,
			),
			body=body,
			protocol=protocol,
		)

	__slots__ = [
		"protocol",
		"status",
		"message",
		"headers",
		"body",
	]

	def __init__(
		self,
		protocol: str,
		status: int,
		message: str | None,
		headers: HTTPHeaders,
		body: THTTPBody | None = None,
	):
		self.protocol: str = protocol
		self.status: int = status
		self.message: str | None = message
		self.headers: HTTPHeaders = headers
		self.body: THTTPBody | None = body

	@property
	def contentLength(self) -> int:
		return self.headers.contentLength or 0

	def getHeader(self, name: str) -> str | None:
		return self.headers.headers.get(headername(name))

	def setHeader(self, name: str, value: str | int | None) -> "HTTPResponse":
		if value is None:
			self.headers.headers.pop(headername(name), None)
		else:
			self.headers.headers[headername(name)] = str(value)
		return self

	def iterBody(self, size: int = CHUNK_SIZE) -> Iterator[bytes]:
		"""Iterates on the chunks of the body, releasing it when done."""
		if self.body is not None:
			yield from self.body.iterChunks(size)

	def read(self) -> bytes:
		"""Reads the whole body, which is then released."""
		return b"".join(self.iterBody())

	def close(self) -> None:
		"""Releases the body without sending it."""
		if self.body is not None:
			try:
				self.body.close()
			except OSError as e:
				warning("Could not release response body", Error=str(e))

	def head(self) -> bytes:
		"""Serializes the head as a payload."""
		lines: list[str] = [
			f"{headername(k)}: {v}" for k, v in self.headers.headers.items()
		]
		lines.insert(
			0,
			f"{self.protocol} {self.status} {self.message or HTTP_STATUS[self.status]}",
		)
		lines.append("")
		lines.append("")
		return "\r\n".join(lines).encode("latin-1")

	def __str__(self) -> str:
		return f"Response({self.protocol} {self.status} {self.message} {self.headers} {self.body})"


# EOF
