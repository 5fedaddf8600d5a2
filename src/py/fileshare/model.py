from typing import Optional, Iterable, ClassVar

from .routing import Handler, Dispatcher
from .http.model import HTTPRequest, HTTPResponse
from .utils.logging import exception

# -----------------------------------------------------------------------------
#
# SERVICE
#
# -----------------------------------------------------------------------------


class Service:
	PREFIX: ClassVar[str] = ""
	NO_HANDLER: ClassVar[list[str]] = [
		"name",
		"app",
		"prefix",
		"_handlers",
		"isMounted",
		"handlers",
	]

	def __init__(
		self, name: Optional[str] = None, *, prefix: str | None = None
	) -> None:
		self.name: str = name or self.__class__.__name__
		self.app: Optional[Application] = None
		self.prefix: str = self.PREFIX if prefix is None else prefix
		self._handlers: Optional[list[Handler]] = None

	@property
	def isMounted(self) -> bool:
		return self.app is not None

	@property
	def handlers(self) -> list[Handler]:
		if self._handlers is None:
			self._handlers = list(self.iterHandlers())
		return self._handlers

	def iterHandlers(self) -> Iterable[Handler]:
		for value in (getattr(self, _) for _ in dir(self) if _ not in self.NO_HANDLER):
			handler = Handler.Get(value)
			if handler:
				yield handler

	def __repr__(self) -> str:
		return f"(Service {self.name}{' :mounted' if self.isMounted else ''})"


# -----------------------------------------------------------------------------
#
# APPLICATION
#
# -----------------------------------------------------------------------------


class Application:
	"""Groups the mounted services and dispatches requests to their
	handlers. Services are mounted before serving starts, after which the
	routing table is only read."""

	def __init__(self, services: list[Service] | None = None) -> None:
		self.dispatcher: Dispatcher = Dispatcher()
		self.services: list[Service] = []
		for service in services or ():
			self.mount(service)

	def process(self, request: HTTPRequest) -> HTTPResponse:
		"""Processes the request, always returning a response: 404 when no
		route matches the path, 405 when routes match it for other methods,
		and 500 when the handler fails."""
		path: str = request.path or "/"
		route, params = self.dispatcher.match(request.method or "GET", path)
		if route and route.handler:
			try:
				return route.handler(request, params or {})
			except Exception as e:
				exception(e, f"Handler failed for {request.method} {path}")
				return request.fail()
		elif allowed := self.dispatcher.allowed(path):
			return request.notAllowed(allowed)
		else:
			return request.notFound()

	def mount(self, service: Service, prefix: Optional[str] = None) -> Service:
		if service.isMounted:
			raise RuntimeError(
				f"Cannot mount service, it is already mounted: {service}"
			)
		for handler in service.handlers:
			self.dispatcher.register(handler, service.prefix if prefix is None else prefix)
		service.app = self
		self.services.append(service)
		return service


def mount(*components: Application | Service) -> Application:
	"""Mounts the given services into an application, creating one unless
	an application is given."""
	apps: list[Application] = [_ for _ in components if isinstance(_, Application)]
	app: Application = apps[0] if apps else Application()
	for item in components:
		if isinstance(item, Service):
			app.mount(item)
		elif not isinstance(item, Application):
			raise RuntimeError(f"Unsupported component type {type(item)}: {item}")
	return app


# EOF
