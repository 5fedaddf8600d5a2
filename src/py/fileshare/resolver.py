import os
import re
import stat
from pathlib import Path
from typing import ClassVar, NamedTuple, Pattern, TypeAlias
from urllib.parse import unquote

# -----------------------------------------------------------------------------
#
# TARGETS
#
# -----------------------------------------------------------------------------
# --
# Resolving a request path gives one of the following targets. `parts` are
# the decoded, normalized segments of the request path, relative to the
# root, which are used to build links.


class Directory(NamedTuple):
	path: Path
	parts: tuple[str, ...] = ()


class File(NamedTuple):
	path: Path
	parts: tuple[str, ...] = ()


class NotFound(NamedTuple):
	pass


class Forbidden(NamedTuple):
	"""The path escapes the root, is malformed, or can't be accessed. The
	reason is only meant for logs and is never sent to the client."""

	reason: str = ""


TTarget: TypeAlias = Directory | File | NotFound | Forbidden


# -----------------------------------------------------------------------------
#
# RESOLVER
#
# -----------------------------------------------------------------------------


class Resolver:
	"""Maps request paths to filesystem objects that are descendants of the
	root, once every `.`, `..` and symlink has been resolved.

	Symlinks found in the tree are followed, as long as their canonical
	target stays inside the root."""

	# A `%` that is not followed by two hexadecimal digits
	RE_BAD_ESCAPE: ClassVar[Pattern[str]] = re.compile(r"%(?![0-9A-Fa-f]{2})")

	SEPARATORS: ClassVar[Pattern[str]] = re.compile(
		"|".join(re.escape(_) for _ in {"/", os.sep, os.altsep or "/"})
	)

	def __init__(self, root: Path | str):
		self.root: Path = Path(os.path.realpath(root))

	def segments(self, path: str) -> tuple[str, ...] | None:
		"""Decodes and splits the request path, returning `None` when it is
		malformed or steps up with `..`."""
		if self.RE_BAD_ESCAPE.search(path):
			return None
		try:
			decoded: str = unquote(path, errors="strict")
		except UnicodeDecodeError:
			return None
		if "\x00" in decoded:
			return None
		parts: list[str] = []
		for segment in self.SEPARATORS.split(decoded):
			if segment in ("", "."):
				continue
			elif segment == "..":
				return None
			else:
				parts.append(segment)
		return tuple(parts)

	def contains(self, path: Path) -> bool:
		"""Tells if the canonical `path` is the root or one of its descendants."""
		return path == self.root or self.root in path.parents

	def resolve(self, path: str) -> TTarget:
		parts = self.segments(path)
		if parts is None:
			return Forbidden("Malformed or traversing path")
		try:
			local_path = Path(os.path.realpath(self.root.joinpath(*parts)))
		except (OSError, ValueError):
			return Forbidden("Path can't be canonicalized")
		if not self.contains(local_path):
			return Forbidden("Path escapes the root")
		try:
			mode: int = os.stat(local_path).st_mode
		except (FileNotFoundError, NotADirectoryError):
			return NotFound()
		except OSError:
			return Forbidden("Path can't be accessed")
		if stat.S_ISDIR(mode):
			return (
				Directory(local_path, parts)
				if os.access(local_path, os.R_OK | os.X_OK)
				else Forbidden("Directory can't be read")
			)
		elif stat.S_ISREG(mode):
			return (
				File(local_path, parts)
				if os.access(local_path, os.R_OK)
				else Forbidden("File can't be read")
			)
		else:
			return Forbidden("Not a regular file or directory")


# EOF
