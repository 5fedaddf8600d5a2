import os
import stat
from pathlib import Path
from urllib.parse import quote

from .utils.files import FileKind, ListingEntry
from .utils.htmpl import H, Node, html, raw

LISTING_CSS: str = """
:root {
	font-family: sans-serif;
	font-size: 14px;
	line-height: 1.35em;
	padding: 20px;
	background: #F0F0F0;
}
h1 {
	margin-bottom: 1.25em;
	line-height: 1.25em;
}
table {
	border-collapse: collapse;
}
td, th {
	padding: 0.25em 1.25em 0.25em 0em;
	text-align: left;
}
td.size {
	text-align: right;
	font-family: monospace;
}
"""


def entry(child: os.DirEntry[str], root: Path | None = None) -> ListingEntry | None:
	"""Classifies a directory child, following symlinks. Returns `None` for
	children that can't be served: dangling links, links escaping the
	root, special files, or children removed since the enumeration."""
	try:
		if root is not None and child.is_symlink():
			target = Path(os.path.realpath(child.path))
			if not (target == root or root in target.parents):
				return None
		info = child.stat()
	except OSError:
		return None
	if stat.S_ISDIR(info.st_mode):
		return ListingEntry(child.name, FileKind.Directory)
	elif stat.S_ISREG(info.st_mode):
		return ListingEntry(child.name, FileKind.File, info.st_size)
	else:
		return None


def listing(directory: Path | str, root: Path | None = None) -> list[ListingEntry]:
	"""Lists the immediate children of the given directory, sorted by name.
	Raises an `OSError` when the directory itself can't be read."""
	entries: list[ListingEntry] = []
	with os.scandir(directory) as children:
		for child in children:
			if (item := entry(child, root)) is not None:
				entries.append(item)
	return sorted(entries, key=lambda _: _.name)


def href(prefix: str, parts: tuple[str, ...] | list[str], isDirectory: bool = False) -> str:
	"""Returns the absolute URL of the given path segments under the prefix,
	each segment being percent-encoded."""
	path = "/".join(quote(_, safe="") for _ in parts)
	return f"{prefix}/{path}{'/' if isDirectory and path else ''}"


def humanSize(value: int) -> str:
	"""Formats a size in bytes in a human readable way."""
	if value < 1024:
		return f"{value} B"
	n: float = float(value)
	for unit in ("KiB", "MiB", "GiB", "TiB"):
		n /= 1024.0
		if n < 1024 or unit == "TiB":
			break
	return f"{n:.1f} {unit}"


def render(entries: list[ListingEntry], prefix: str, parts: tuple[str, ...]) -> str:
	"""Renders the listing as an HTML page, with a row per entry linking
	to it, and the size of files."""
	current: str = "/" + "/".join(parts)
	rows: list[Node] = []
	if parts:
		rows.append(
			H.tr(
				H.td(H.a("../", href=href(prefix, parts[:-1], True))),
				H.td(""),
			)
		)
	for _ in entries:
		rows.append(
			H.tr(
				H.td(
					H.a(
						f"{_.name}/" if _.isDirectory else _.name,
						href=href(prefix, parts + (_.name,), _.isDirectory),
					)
				),
				H.td(
					"" if _.size is None else humanSize(_.size),
					_="size",
					title=None if _.size is None else str(_.size),
				),
			)
		)
	return "".join(
		html(
			H.html(
				H.head(
					H.meta(charset="utf-8"),
					H.meta(
						name="viewport",
						content="width=device-width, initial-scale=1.0",
					),
					H.title(f"Index of {current}"),
					H.style(raw(LISTING_CSS)),
				),
				H.body(
					H.h1(f"Index of {current}"),
					H.table(
						H.thead(H.tr(H.th("Name"), H.th("Size"))),
						H.tbody(*rows),
					),
				),
			),
			doctype="html",
		)
	)


# EOF
