import socket

LOCALHOST: str = "127.0.0.1"


def localAddress(probe: tuple[str, int] = ("8.8.8.8", 80)) -> str:
	"""Returns the address of the interface used to reach the outside
	network, falling back to the loopback address. Connecting a UDP socket
	sends no packet, it only selects a route."""
	s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
	try:
		s.connect(probe)
		return s.getsockname()[0] or LOCALHOST
	except OSError:
		return LOCALHOST
	finally:
		s.close()


# EOF
