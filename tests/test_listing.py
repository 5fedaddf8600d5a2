import contextlib
import os
import shutil
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from fileshare.listing import entry, href, humanSize, listing, render
from fileshare.utils.files import FileKind, ListingEntry


def test_scenario(share: Path):
	assert listing(share) == [
		ListingEntry("a.txt", FileKind.File, 5),
		ListingEntry("sub", FileKind.Directory, None),
	]


def test_sorted_case_sensitive_with_hidden(share: Path):
	for name in ("b.txt", "B.txt", ".hidden", "C"):
		(share / name).write_bytes(b"")
	(share / "Z").mkdir()
	assert [_.name for _ in listing(share)] == [
		".hidden",
		"B.txt",
		"C",
		"Z",
		"a.txt",
		"b.txt",
		"sub",
	]


def test_immediate_children_only(share: Path):
	(share / "sub" / "inner.txt").write_bytes(b"inner")
	(share / "sub" / "deeper").mkdir()
	names = [_.name for _ in listing(share)]
	assert names == ["a.txt", "sub"]
	assert listing(share / "sub") == [
		ListingEntry("deeper", FileKind.Directory),
		ListingEntry("inner.txt", FileKind.File, 5),
	]


def test_symlinks_show_link_name(share: Path, tmp_path: Path):
	root = Path(os.path.realpath(share))
	outside = tmp_path / "outside"
	outside.mkdir()
	(outside / "secret.txt").write_bytes(b"secret")
	(share / "alias").symlink_to(share / "sub", target_is_directory=True)
	(share / "copy.txt").symlink_to(share / "a.txt")
	(share / "escape").symlink_to(outside, target_is_directory=True)
	(share / "dangling").symlink_to(share / "nothing")
	entries = listing(share, root)
	assert entries == [
		ListingEntry("a.txt", FileKind.File, 5),
		ListingEntry("alias", FileKind.Directory),
		ListingEntry("copy.txt", FileKind.File, 5),
		ListingEntry("sub", FileKind.Directory),
	]


def test_removed_directory_raises(share: Path):
	shutil.rmtree(share / "sub")
	with pytest.raises(FileNotFoundError):
		listing(share / "sub")


def test_entries_removed_during_listing_are_omitted(share: Path):
	(share / "gone.txt").write_bytes(b"gone")
	with os.scandir(share) as it:
		children = {_.name: _ for _ in it}
	# The entry was enumerated, but is removed before it is classified
	(share / "gone.txt").unlink()
	assert entry(children["gone.txt"]) is None
	assert entry(children["a.txt"]) == ListingEntry("a.txt", FileKind.File, 5)
	assert entry(children["sub"]) == ListingEntry("sub", FileKind.Directory)


def test_listing_skips_entries_removed_after_enumeration(
	share: Path, monkeypatch: pytest.MonkeyPatch
):
	scandir = os.scandir

	def removing(path):
		with scandir(path) as it:
			children = list(it)
		(share / "a.txt").unlink()
		return contextlib.nullcontext(children)

	monkeypatch.setattr(os, "scandir", removing)
	entries = listing(share)
	monkeypatch.undo()
	assert entries == [ListingEntry("sub", FileKind.Directory)]


def test_concurrent_listings_are_identical(share: Path):
	for i in range(50):
		(share / f"file-{i:02d}.bin").write_bytes(b"x" * i)
	expected = listing(share)
	with ThreadPoolExecutor(max_workers=8) as pool:
		results = list(pool.map(lambda _: listing(share), range(32)))
	assert all(_ == expected for _ in results)


def test_href():
	assert href("/download/files", ()) == "/download/files/"
	assert href("/download/files", (), True) == "/download/files/"
	assert href("/download/files", ("a.txt",)) == "/download/files/a.txt"
	assert href("/download/files", ("sub",), True) == "/download/files/sub/"
	assert href("", ("a b", "c#d?")) == "/a%20b/c%23d%3F"


def test_human_size():
	assert humanSize(0) == "0 B"
	assert humanSize(5) == "5 B"
	assert humanSize(2048) == "2.0 KiB"
	assert humanSize(5 * 1024 * 1024) == "5.0 MiB"


def test_render_root(share: Path):
	page = render(listing(share), "/download/files", ())
	assert page.startswith("<!DOCTYPE html>\n")
	assert "<title>Index of /</title>" in page
	assert '<a href="/download/files/a.txt">a.txt</a>' in page
	assert '<a href="/download/files/sub/">sub/</a>' in page
	assert "5 B" in page
	# No parent link at the root
	assert "../" not in page


def test_render_nested():
	entries = [
		ListingEntry("<b>.txt", FileKind.File, 3),
		ListingEntry("inner", FileKind.Directory),
	]
	page = render(entries, "/p", ("sub",))
	assert "<title>Index of /sub</title>" in page
	assert '<a href="/p/">../</a>' in page
	assert '<a href="/p/sub/%3Cb%3E.txt">&lt;b&gt;.txt</a>' in page
	assert '<a href="/p/sub/inner/">inner/</a>' in page
	assert "<b>" not in page


# EOF
