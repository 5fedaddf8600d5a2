from .model import (  # NOQA: F401
	HTTPRequest,
	HTTPResponse,
	HTTPHeaders,
	HTTPBodyBlob,
	HTTPBodyFile,
	HTTPRequestError,
	headername,
)

# EOF
