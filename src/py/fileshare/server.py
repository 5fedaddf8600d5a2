import socket
from concurrent.futures import ThreadPoolExecutor
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any, NamedTuple
from urllib.parse import parse_qsl, urlsplit

from .config import HOST, LOG_REQUESTS, PORT, WORKERS
from .http.model import HTTPHeaders, HTTPRequest, HTTPResponse
from .model import Application, Service, mount
from .utils.logging import debug, event, exception, info, warning


class ServerOptions(NamedTuple):
	host: str = HOST
	port: int = PORT
	workers: int = WORKERS
	# Seconds a connection may stay silent while its request is being read
	timeout: float = 30.0
	logRequests: bool = LOG_REQUESTS


OPTIONS: ServerOptions = ServerOptions()


# -----------------------------------------------------------------------------
#
# REQUEST HANDLER
#
# -----------------------------------------------------------------------------


class RequestHandler(BaseHTTPRequestHandler):
	"""Bridges the standard library request parsing with the application:
	each parsed request is converted to an `HTTPRequest`, processed, and the
	resulting `HTTPResponse` is written back."""

	server: "WorkerPoolServer"
	protocol_version = "HTTP/1.1"
	server_version = "FileShare"

	def setup(self) -> None:
		self.timeout = self.server.options.timeout
		super().setup()

	def asRequest(self) -> HTTPRequest:
		url = urlsplit(self.path)
		return HTTPRequest(
			method=self.command,
			path=url.path or "/",
			query=dict(parse_qsl(url.query)),
			headers=HTTPHeaders.FromItems(list(self.headers.items())),
			protocol=self.request_version,
		)

	def dispatch(self) -> None:
		req: HTTPRequest = self.asRequest()
		res: HTTPResponse = self.server.app.process(req)
		# A worker serves one request per connection, as an idle keep-alive
		# connection would hold it until the timeout. Request bodies are
		# not read either, so the connection can't be reused.
		self.close_connection = True
		res.setHeader("Connection", "close")
		sent: int = 0
		try:
			self.wfile.write(res.head())
			if req.method == "HEAD":
				res.close()
			else:
				for chunk in res.iterBody():
					self.wfile.write(chunk)
					sent += len(chunk)
				if sent != res.contentLength:
					# The file shrank, closing the connection ends the body
					warning(
						"Response body is shorter than advertised",
						Path=req.path,
						Expected=res.contentLength,
						Sent=sent,
					)
			self.wfile.flush()
		except (BrokenPipeError, ConnectionResetError):
			# The client went away, the body has been released
			debug("Client disconnected", Path=req.path, Sent=sent)
			self.close_connection = True
			res.close()
		except OSError as e:
			# The head is sent, so we can only drop the connection
			warning("Could not send response body", Path=req.path, Error=str(e))
			self.close_connection = True
			res.close()
		if self.server.options.logRequests:
			event(req.method, req.path, Status=res.status, Size=sent)

	def do_GET(self) -> None:
		self.dispatch()

	def do_HEAD(self) -> None:
		self.dispatch()

	def do_POST(self) -> None:
		self.dispatch()

	def do_PUT(self) -> None:
		self.dispatch()

	def do_PATCH(self) -> None:
		self.dispatch()

	def do_DELETE(self) -> None:
		self.dispatch()

	def do_OPTIONS(self) -> None:
		self.dispatch()

	def log_message(self, format: str, *args: Any) -> None:
		# Only the errors reported by the standard library end up here, as
		# responses are written by `dispatch`.
		warning(format % args, Client=self.address_string())


# -----------------------------------------------------------------------------
#
# SERVER
#
# -----------------------------------------------------------------------------


class WorkerPoolServer(HTTPServer):
	"""An HTTP server where accepted connections are processed by a fixed
	pool of worker threads. A worker serves a single request per connection,
	so that idle clients never hold it."""

	allow_reuse_address = True
	request_queue_size = 1_024

	def __init__(self, app: Application, options: ServerOptions = OPTIONS) -> None:
		self.app: Application = app
		self.options: ServerOptions = options
		self.pool: ThreadPoolExecutor = ThreadPoolExecutor(
			max_workers=max(1, options.workers),
			thread_name_prefix="fileshare-worker",
		)
		try:
			super().__init__((options.host, options.port), RequestHandler)
		except OSError:
			self.pool.shutdown(wait=False)
			raise

	@property
	def port(self) -> int:
		return int(self.server_address[1])

	def server_bind(self) -> None:
		super().server_bind()
		self.socket.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

	def process_request(self, request: Any, client_address: Any) -> None:
		self.pool.submit(self.processRequestWorker, request, client_address)

	def processRequestWorker(self, request: Any, client_address: Any) -> None:
		try:
			self.finish_request(request, client_address)
		except Exception as e:
			exception(e, "Connection failed")
		finally:
			self.shutdown_request(request)

	def server_close(self) -> None:
		super().server_close()
		self.pool.shutdown(wait=True)


def serve(
	*components: Application | Service,
	options: ServerOptions = OPTIONS,
) -> WorkerPoolServer:
	"""Creates a server for the given components, bound but not yet
	serving. Call `serve_forever()` to serve, and `shutdown()` then
	`server_close()` to stop."""
	return WorkerPoolServer(mount(*components), options)


def run(
	*components: Application | Service,
	host: str = OPTIONS.host,
	port: int = OPTIONS.port,
	workers: int = OPTIONS.workers,
	timeout: float = OPTIONS.timeout,
	logRequests: bool = OPTIONS.logRequests,
) -> None:
	"""High level function to run the server until interrupted."""
	server = serve(
		*components,
		options=ServerOptions(
			host=host,
			port=port,
			workers=workers,
			timeout=timeout,
			logRequests=logRequests,
		),
	)
	info(
		"FileShare server listening",
		icon="🚀",
		Host=host,
		Port=server.port,
		Workers=workers,
	)
	try:
		server.serve_forever()
	except KeyboardInterrupt:
		event("ManualShutdown")
	finally:
		server.server_close()
	event("EOK")


# EOF
