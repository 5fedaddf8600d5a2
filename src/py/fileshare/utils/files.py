import mimetypes
from enum import Enum
from pathlib import Path
from typing import NamedTuple

mimetypes.init()

DEFAULT_CONTENT_TYPE: str = "application/octet-stream"

# Extensions that `mimetypes` reports as an encoding rather than a type,
# which we want to download as their own archive type.
MIME_TYPES: dict[str, str] = dict(
	bz2="application/x-bzip2",
	gz="application/gzip",
	xz="application/x-xz",
)


class FileKind(Enum):
	File = "file"
	Directory = "directory"


class ListingEntry(NamedTuple):
	"""One immediate child of a listed directory."""

	name: str
	kind: FileKind
	size: int | None = None

	@property
	def isDirectory(self) -> bool:
		return self.kind is FileKind.Directory


def contentType(path: Path | str) -> str:
	"""Guesses the content type from the extension of the given path,
	defaulting to a generic binary type."""
	name = Path(path).name
	ext = name.rsplit(".", 1)[-1].lower() if "." in name else ""
	return (
		res
		if (res := MIME_TYPES.get(ext))
		else mimetypes.guess_type(name, strict=False)[0] or DEFAULT_CONTENT_TYPE
	)


# EOF
