from .http.model import (  # NOQA: F401
	HTTPRequest,
	HTTPResponse,
	HTTPRequestError,
)
from .decorators import on  # NOQA: F401
from .config import ShareConfig  # NOQA: F401
from .model import Service, Application, mount  # NOQA: F401
from .resolver import Resolver, Directory, File, NotFound, Forbidden  # NOQA: F401
from .listing import listing, render  # NOQA: F401
from .streaming import stream, FileStream  # NOQA: F401
from .services.files import FileService  # NOQA: F401
from .server import run, serve  # NOQA: F401

# EOF
