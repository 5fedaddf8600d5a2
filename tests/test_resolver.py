import os
from pathlib import Path

import pytest

from fileshare.resolver import Directory, File, Forbidden, NotFound, Resolver


@pytest.fixture
def resolver(share: Path) -> Resolver:
	return Resolver(share)


def test_root_is_a_directory(resolver: Resolver, share: Path):
	for path in ("", "/", ".", "./"):
		target = resolver.resolve(path)
		assert isinstance(target, Directory)
		assert target.path == Path(os.path.realpath(share))
		assert target.parts == ()


def test_existing_entries(resolver: Resolver):
	assert isinstance(resolver.resolve("a.txt"), File)
	assert isinstance(resolver.resolve("/a.txt"), File)
	sub = resolver.resolve("sub/")
	assert isinstance(sub, Directory)
	assert sub.parts == ("sub",)
	# Empty and `.` segments are dropped
	assert resolver.resolve("sub//./").parts == ("sub",)


def test_missing_entries(resolver: Resolver):
	assert resolver.resolve("missing.txt") == NotFound()
	assert resolver.resolve("sub/missing") == NotFound()
	# A file used as a directory
	assert resolver.resolve("a.txt/anything") == NotFound()


def test_percent_decoding(resolver: Resolver, share: Path):
	(share / "with space é.txt").write_bytes(b"x")
	target = resolver.resolve("with%20space%20%C3%A9.txt")
	assert isinstance(target, File)
	assert target.parts == ("with space é.txt",)


@pytest.mark.parametrize(
	"path",
	[
		"..",
		"../",
		"../etc/passwd",
		"../../../../etc/passwd",
		"sub/../../etc/passwd",
		"sub/../a.txt",
		"%2e%2e/etc/passwd",
		"%2E%2E%2Fetc%2Fpasswd",
		"sub%2F..%2F..%2Fetc",
		".%2e/files",
	],
)
def test_traversal_is_forbidden(resolver: Resolver, path: str):
	assert isinstance(resolver.resolve(path), Forbidden)


@pytest.mark.parametrize("path", ["bad%zzescape", "trailing%", "%4", "%ff%fe", "a%00b"])
def test_malformed_paths_are_forbidden(resolver: Resolver, path: str):
	assert isinstance(resolver.resolve(path), Forbidden)


def test_symlink_escape_is_forbidden(resolver: Resolver, share: Path, tmp_path: Path):
	outside = tmp_path / "outside"
	outside.mkdir()
	(outside / "secret.txt").write_bytes(b"secret")
	(share / "link").symlink_to(outside, target_is_directory=True)
	(share / "secret-link").symlink_to(outside / "secret.txt")
	(share / "dangling").symlink_to(outside / "nothing-here")
	assert isinstance(resolver.resolve("link"), Forbidden)
	assert isinstance(resolver.resolve("link/secret.txt"), Forbidden)
	assert isinstance(resolver.resolve("secret-link"), Forbidden)
	# The escape target does not exist, but that is not revealed
	assert isinstance(resolver.resolve("dangling"), Forbidden)


def test_symlink_inside_root_is_followed(resolver: Resolver, share: Path):
	(share / "alias").symlink_to(share / "sub", target_is_directory=True)
	(share / "b.txt").symlink_to(share / "a.txt")
	alias = resolver.resolve("alias")
	assert isinstance(alias, Directory)
	assert alias.path == Path(os.path.realpath(share / "sub"))
	assert alias.parts == ("alias",)
	assert isinstance(resolver.resolve("b.txt"), File)


def test_root_given_through_a_symlink(share: Path, tmp_path: Path):
	(tmp_path / "root-link").symlink_to(share, target_is_directory=True)
	resolver = Resolver(tmp_path / "root-link")
	assert isinstance(resolver.resolve("a.txt"), File)
	assert isinstance(resolver.resolve("../files/a.txt"), Forbidden)


def test_sibling_with_common_prefix_is_forbidden(tmp_path: Path):
	(tmp_path / "files").mkdir()
	(tmp_path / "files-private").mkdir()
	(tmp_path / "files" / "leak").symlink_to(tmp_path / "files-private")
	assert isinstance(Resolver(tmp_path / "files").resolve("leak"), Forbidden)


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="Requires FIFO support")
def test_special_files_are_forbidden(resolver: Resolver, share: Path):
	os.mkfifo(share / "pipe")
	assert isinstance(resolver.resolve("pipe"), Forbidden)


@pytest.mark.skipif(
	not hasattr(os, "geteuid") or os.geteuid() == 0,
	reason="Permissions are not enforced for root",
)
def test_unreadable_entries_are_forbidden(resolver: Resolver, share: Path):
	(share / "locked.txt").write_bytes(b"x")
	(share / "locked.txt").chmod(0o000)
	(share / "closed").mkdir()
	(share / "closed").chmod(0o000)
	try:
		assert isinstance(resolver.resolve("locked.txt"), Forbidden)
		assert isinstance(resolver.resolve("closed"), Forbidden)
		assert isinstance(resolver.resolve("closed/anything"), Forbidden)
	finally:
		(share / "locked.txt").chmod(0o644)
		(share / "closed").chmod(0o755)


# EOF
