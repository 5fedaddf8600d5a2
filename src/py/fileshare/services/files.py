from pathlib import Path

from ..config import ShareConfig
from ..decorators import on
from ..http.model import HTTPRequest, HTTPResponse
from ..listing import listing, render
from ..model import Service
from ..resolver import Directory, File, Forbidden, NotFound, Resolver
from ..streaming import stream
from ..utils.logging import debug, warning


class FileService(Service):
	"""A service that serves the files of a local directory: directories
	are listed, and files are offered as downloads. Nothing outside of the
	root directory is ever served."""

	def __init__(self, config: ShareConfig | str | Path | None = None):
		self.config: ShareConfig = (
			config
			if isinstance(config, ShareConfig)
			else ShareConfig.Make(config or ".")
		)
		self.resolver: Resolver = Resolver(self.config.root)
		super().__init__(prefix=self.config.prefix)

	@property
	def root(self) -> Path:
		return self.config.root

	def failed(self, request: HTTPRequest, path: str, error: OSError) -> HTTPResponse:
		"""Maps an error raised after the path was resolved, typically because
		the tree changed in the meantime."""
		warning(
			"Resolved path could not be read",
			Path=path,
			Error=error.__class__.__name__,
		)
		if isinstance(error, (FileNotFoundError, NotADirectoryError)):
			return request.notFound()
		elif isinstance(error, PermissionError):
			return request.notAuthorized()
		else:
			return request.fail()

	def renderDirectory(self, request: HTTPRequest, target: Directory) -> HTTPResponse:
		entries = listing(target.path, self.root)
		match request.param("format", "html"):
			# We support the JSON format to list the contents of a directory
			case "json":
				return request.returns(entries)
			case _:
				return request.respondHTML(
					render(entries, self.config.prefix, target.parts)
				)

	def renderFile(self, request: HTTPRequest, target: File) -> HTTPResponse:
		s = stream(target.path)
		return request.respondFile(
			s.file, size=s.size, contentType=s.contentType, headers=s.headers
		)

	@on(GET_HEAD=("", "/", "/{path:any}"))
	def read(self, request: HTTPRequest, path: str = "") -> HTTPResponse:
		target = self.resolver.resolve(path)
		try:
			match target:
				case Directory():
					return self.renderDirectory(request, target)
				case File():
					return self.renderFile(request, target)
				case NotFound():
					return request.notFound()
				case Forbidden(reason):
					debug("Forbidden path", Path=path, Reason=reason)
					return request.notAuthorized()
		except OSError as e:
			return self.failed(request, path, e)
		raise RuntimeError(f"Unsupported target: {target}")


# EOF
