"""Unit tests for sandboxfs.fs.paths module."""

import os
from pathlib import Path

import pytest

from sandboxfs.exceptions import OutOfSandboxError
from sandboxfs.fs.paths import SandboxPathResolver


@pytest.mark.unit
@pytest.mark.fs
class TestResolve:
    """Tests for resolving caller paths inside the sandbox."""

    def test_relative_path_joined_onto_root(self, resolver, sandbox_root):
        """Test a plain relative path lands under the root."""
        assert resolver.resolve("api/main.py") == sandbox_root / "api" / "main.py"

    @pytest.mark.parametrize("path", ["", ".", "./", None])
    def test_empty_and_dot_resolve_to_root(self, resolver, sandbox_root, path):
        """Test empty, '.' and None all mean the root itself."""
        assert resolver.resolve(path) == sandbox_root

    def test_dot_segments_normalized_lexically(self, resolver, sandbox_root):
        """Test '..' that stays inside the root is normalized away."""
        assert resolver.resolve("api/../web/./a.txt") == sandbox_root / "web" / "a.txt"

    def test_no_existence_check(self, resolver, sandbox_root):
        """Test resolving a path that does not exist still succeeds."""
        resolved = resolver.resolve("missing/deeper/file.txt")

        assert resolved == sandbox_root / "missing" / "deeper" / "file.txt"
        assert not resolved.exists()

    @pytest.mark.parametrize(
        "path",
        [
            "..",
            "../outside.txt",
            "api/../../outside",
            "./././../outside",
            "valid/../../../../etc/passwd",
        ],
    )
    def test_dotdot_escape_rejected(self, resolver, path):
        """Test every '..' escape fails with OutOfSandboxError."""
        with pytest.raises(OutOfSandboxError) as exc_info:
            resolver.resolve(path)

        assert exc_info.value.error_code == "out_of_sandbox"
        assert exc_info.value.path == path

    def test_sibling_with_common_prefix_rejected(self, resolver, sandbox_root):
        """Test '/x/projects2' is not mistaken for a child of '/x/projects'."""
        sibling = sandbox_root.parent / (sandbox_root.name + "2")
        sibling.mkdir()

        with pytest.raises(OutOfSandboxError):
            resolver.resolve(f"../{sibling.name}/file.txt")
        with pytest.raises(OutOfSandboxError):
            resolver.resolve(str(sibling / "file.txt"))

    def test_absolute_path_inside_root_allowed(self, resolver, sandbox_root):
        """Test absolute paths are accepted when they point inside the root."""
        inside = sandbox_root / "web" / "a.txt"

        assert resolver.resolve(str(inside)) == inside

    def test_absolute_path_outside_root_rejected(self, resolver, tmp_path):
        """Test absolute paths outside the root are rejected."""
        with pytest.raises(OutOfSandboxError):
            resolver.resolve(str(tmp_path / "elsewhere.txt"))

    @pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
    def test_symlink_escaping_root_rejected(self, resolver, sandbox_root, tmp_path):
        """Test a symlink inside the root that points outside is rejected."""
        outside = tmp_path / "secret.txt"
        outside.write_text("secret")
        (sandbox_root / "escape").symlink_to(outside)

        with pytest.raises(OutOfSandboxError):
            resolver.resolve("escape")

    @pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
    def test_symlink_within_root_allowed(self, resolver, sandbox_root):
        """Test a symlink whose target stays inside the root is allowed."""
        target = sandbox_root / "target.txt"
        target.write_text("content")
        (sandbox_root / "link.txt").symlink_to(target)

        assert resolver.resolve("link.txt") == sandbox_root / "link.txt"

    def test_root_given_relative_is_made_absolute(self, tmp_path, monkeypatch):
        """Test the resolver works from an absolute root even if given a relative one."""
        monkeypatch.chdir(tmp_path)
        Path("box").mkdir()

        resolver = SandboxPathResolver(Path("box"))

        assert resolver.root.is_absolute()
        assert resolver.resolve("a.txt") == resolver.root / "a.txt"


@pytest.mark.unit
@pytest.mark.fs
class TestToRelative:
    """Tests for reporting paths relative to the root."""

    def test_root_is_dot(self, resolver, sandbox_root):
        """Test the root itself is reported as '.'."""
        assert resolver.to_relative(sandbox_root) == "."

    def test_nested_path_uses_forward_slashes(self, resolver, sandbox_root):
        """Test nested paths are reported with '/' separators."""
        assert resolver.to_relative(sandbox_root / "api" / "tests" / "x.py") == "api/tests/x.py"
