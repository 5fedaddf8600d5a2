from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Generic, TypeVar

from ..utils.json import json
from .status import HTTP_STATUS

T = TypeVar("T")

# -----------------------------------------------------------------------------
#
# API
#
# -----------------------------------------------------------------------------

# --
# == HTTP Request Response API
#
# Defines the high level API functions (orthogonal to the underlying model)
# to create responses from a request.


class ResponseFactory(ABC, Generic[T]):
	@abstractmethod
	def respond(
		self,
		content: Any = None,
		contentType: str | None = None,
		contentLength: int | None = None,
		status: int = 200,
		headers: dict[str, str] | None = None,
		message: str | None = None,
	) -> T: ...

	def error(
		self,
		status: int,
		content: str | None = None,
		contentType: str = "text/plain; charset=utf-8",
		headers: dict[str, str] | None = None,
	) -> T:
		message = HTTP_STATUS.get(status, "Server Error")
		return self.respond(
			content=message if content is None else content,
			contentType=contentType,
			status=status,
			message=message,
			headers=headers,
		)

	def notAuthorized(
		self,
		content: str = "Forbidden",
		*,
		status: int = 403,
	) -> T:
		return self.error(status, content=content)

	def notFound(
		self,
		content: str = "Not Found",
		*,
		status: int = 404,
	) -> T:
		return self.error(status, content=content)

	def notAllowed(self, allowed: list[str]) -> T:
		return self.error(405, headers={"Allow": ", ".join(allowed)})

	def fail(
		self,
		content: str | None = None,
		*,
		status: int = 500,
	) -> T:
		return self.error(status, content=content)

	def returns(
		self,
		value: Any,
		headers: dict[str, str] | None = None,
		*,
		status: int = 200,
		contentType: str = "application/json",
	) -> T:
		payload: bytes = json(value)
		return self.respond(
			payload,
			contentType=contentType,
			contentLength=len(payload),
			headers=headers,
			status=status,
		)

	def respondHTML(self, html: str | bytes, status: int = 200) -> T:
		return self.respond(
			content=html, contentType="text/html; charset=utf-8", status=status
		)

	def respondFile(
		self,
		file: BinaryIO,
		size: int,
		contentType: str,
		headers: dict[str, str] | None = None,
		status: int = 200,
	) -> T:
		"""Responds with the contents of an already opened file, which the
		response takes ownership of."""
		return self.respond(
			content=file,
			contentType=contentType,
			contentLength=size,
			status=status,
			headers=headers,
		)


# EOF
