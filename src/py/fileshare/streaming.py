import os
from pathlib import Path
from typing import BinaryIO, NamedTuple
from urllib.parse import quote

from .utils.files import contentType


def disposition(filename: str) -> str:
	"""Returns an `attachment` content disposition for the file name, with
	an ASCII fallback and the UTF-8 name (RFC 6266)."""
	fallback = "".join(_ if 0x20 <= ord(_) < 0x7F else "_" for _ in filename)
	fallback = fallback.replace("\\", "\\\\").replace('"', '\\"')
	return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


class FileStream(NamedTuple):
	"""An opened file ready to be sent as a download. Files are always
	offered as attachments, whatever their type."""

	file: BinaryIO
	name: str
	size: int
	contentType: str

	@property
	def disposition(self) -> str:
		return disposition(self.name)

	@property
	def headers(self) -> dict[str, str]:
		return {"Content-Disposition": self.disposition}

	def close(self) -> None:
		self.file.close()


def stream(path: Path | str) -> FileStream:
	"""Opens the file at the given path for streaming. The size is taken from
	the open file, so that it matches the bytes that will be read. Raises an
	`OSError` when the file can't be opened."""
	p = Path(path)
	f: BinaryIO = open(p, "rb")
	try:
		size: int = os.fstat(f.fileno()).st_size
	except OSError:
		f.close()
		raise
	return FileStream(file=f, name=p.name, size=size, contentType=contentType(p))


# EOF
