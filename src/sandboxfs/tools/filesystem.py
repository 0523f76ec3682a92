"""Filesystem tools exposed to remote callers.

This module is the dispatch surface of the server: every public coroutine on
:class:`FileSystemTools` is one remotely callable tool. Each tool makes one
call into the sandboxed filesystem layer and wraps the outcome in the
standard response envelope.

Key Features:
- Sandbox confinement for every path argument (no ``..`` escapes)
- Directory exploration with depth limit and glob-style file search
- Read, write, copy, move, rename and delete with explicit overwrite rules
- Single-file gzip compression and extraction
- Permission changes where the platform supports POSIX mode bits

Blocking filesystem work runs in a worker thread so independent calls do
not stall the event loop.
"""

import asyncio
import logging
from typing import Annotated

from pydantic import Field

from sandboxfs.config import ServerConfig
from sandboxfs.exceptions import SandboxFSError
from sandboxfs.fs.archive import ArchivePipeline
from sandboxfs.fs.operations import FileOperations, supports_permissions
from sandboxfs.fs.paths import SandboxPathResolver
from sandboxfs.fs.walker import DEFAULT_EXPLORE_DEPTH, IGNORED_NAMES, TreeWalker, tree_to_json
from sandboxfs.tools.toolset import Toolset

logger = logging.getLogger(__name__)


class FileSystemTools(Toolset):
    """File management tools scoped to the configured sandbox root.

    All paths are relative to ``config.root``. Domain failures never raise;
    they come back as error envelopes whose message reads
    ``Failed to <action>: <cause>``.

    Example:
        >>> config = ServerConfig.from_env()
        >>> tools = FileSystemTools(config)
        >>> result = await tools.read_file("api/README.md")
        >>> result["success"]
        True
    """

    def __init__(self, config: ServerConfig):
        """Initialize FileSystemTools with configuration.

        Args:
            config: Server configuration with the sandbox root
        """
        super().__init__(config)
        self.resolver = SandboxPathResolver(config.root)
        self.operations = FileOperations(self.resolver)
        self.walker = TreeWalker(self.resolver)
        self.archive = ArchivePipeline(self.resolver, chunk_size=config.chunk_size)

    def get_tools(self) -> list:
        """Get list of filesystem tools.

        Returns:
            List of filesystem tool functions
        """
        return [
            self.explore_projects,
            self.find_files,
            self.read_file,
            self.list_directory,
            self.write_file,
            self.create_directory,
            self.copy_file,
            self.move_file,
            self.delete_file,
            self.delete_directory,
            self.file_exists,
            self.get_file_info,
            self.rename_file,
            self.zip_directory,
            self.unzip_file,
            self.change_permissions,
            self.get_capabilities,
        ]

    async def explore_projects(
        self,
        depth: Annotated[
            int, Field(description="Maximum depth to explore (default: 2)")
        ] = DEFAULT_EXPLORE_DEPTH,
    ) -> dict:
        """Explore all projects under the root directory with their structure.

        Hidden entries and node_modules are skipped. Directories deeper than
        ``depth`` are shown as "..." and unreadable ones as "Error: ...".

        Args:
            depth: Maximum depth to explore

        Returns:
            Success response whose result is the nested structure, e.g.
            ``{"api/": {"main.py": "file", "tests/": "..."}, "README.md": "file"}``
        """
        try:
            tree = await asyncio.to_thread(self.walker.explore, ".", depth)
        except SandboxFSError as e:
            return self._failure("explore projects", e)

        return self._create_success_response(
            result=tree_to_json(tree),
            message=f"Project structure under {self.resolver.root}:",
        )

    async def find_files(
        self,
        pattern: Annotated[
            str,
            Field(description='File name pattern or extension (e.g., "*.js", "package.json")'),
        ],
        path: Annotated[
            str, Field(description="Directory to search, relative to the root")
        ] = ".",
    ) -> dict:
        """Find files by name or extension across all projects.

        ``*`` matches any run of characters and ``?`` a single one. Matching
        is case-insensitive and covers the whole file name.
        """
        try:
            files = await asyncio.to_thread(self.walker.search, pattern, path)
        except SandboxFSError as e:
            return self._failure("find files", e)

        return self._create_success_response(
            result=files, message=f'Files found for "{pattern}":'
        )

    async def read_file(
        self,
        path: Annotated[str, Field(description="Path to the file relative to the root")],
    ) -> dict:
        """Read the contents of a file.

        Args:
            path: Path to the file relative to the root

        Returns:
            Success response whose result is the full UTF-8 text of the file
        """
        try:
            content = await asyncio.to_thread(self.operations.read_text, path)
        except SandboxFSError as e:
            return self._failure("read file", e)

        return self._create_success_response(
            result=content, message=f"Read {len(content)} characters from {path}"
        )

    async def list_directory(
        self,
        path: Annotated[
            str, Field(description="Path to the directory to list (default: root)")
        ] = ".",
    ) -> dict:
        """List the contents of a directory.

        Returns:
            Success response with one ``{"name", "type", "path"}`` record per
            entry, where type is "file" or "directory"
        """
        try:
            entries = await asyncio.to_thread(self.operations.list_directory, path)
        except SandboxFSError as e:
            return self._failure("list directory", e)

        return self._create_success_response(
            result=[entry.to_dict() for entry in entries],
            message=f"Listed {len(entries)} entries in {path}",
        )

    async def write_file(
        self,
        path: Annotated[str, Field(description="Path to the file to write")],
        content: Annotated[str, Field(description="Content to write to the file")],
    ) -> dict:
        """Write content to a file, replacing it if it exists."""
        try:
            written = await asyncio.to_thread(self.operations.write_text, path, content)
        except SandboxFSError as e:
            return self._failure("write file", e)

        return self._create_success_response(
            result={"path": path, "bytes_written": written},
            message=f"File written successfully to {path}",
        )

    async def create_directory(
        self,
        path: Annotated[str, Field(description="Path of the directory to create")],
        recursive: Annotated[
            bool, Field(description="Create missing parent directories (default: true)")
        ] = True,
    ) -> dict:
        """Create a directory."""
        try:
            await asyncio.to_thread(self.operations.create_directory, path, recursive)
        except SandboxFSError as e:
            return self._failure("create directory", e)

        return self._create_success_response(
            result={"path": path}, message=f"Directory created successfully: {path}"
        )

    async def copy_file(
        self,
        source: Annotated[str, Field(description="Path of the file to copy")],
        destination: Annotated[str, Field(description="Path of the copy")],
        overwrite: Annotated[
            bool, Field(description="Replace the destination if it exists (default: false)")
        ] = False,
    ) -> dict:
        """Copy a file.

        Fails with destination_exists when the destination is present and
        overwrite is false.
        """
        try:
            await asyncio.to_thread(self.operations.copy_file, source, destination, overwrite)
        except SandboxFSError as e:
            return self._failure("copy file", e)

        return self._create_success_response(
            result={"source": source, "destination": destination},
            message=f"File copied successfully from {source} to {destination}",
        )

    async def move_file(
        self,
        source: Annotated[str, Field(description="Path of the file or directory to move")],
        destination: Annotated[str, Field(description="New path")],
        overwrite: Annotated[
            bool, Field(description="Replace the destination if it exists (default: false)")
        ] = False,
    ) -> dict:
        """Move or rename a file or directory to a new path."""
        try:
            await asyncio.to_thread(self.operations.move, source, destination, overwrite)
        except SandboxFSError as e:
            return self._failure("move file", e)

        return self._create_success_response(
            result={"source": source, "destination": destination},
            message=f"Moved successfully from {source} to {destination}",
        )

    async def delete_file(
        self,
        path: Annotated[str, Field(description="Path of the file to delete")],
    ) -> dict:
        """Delete a file. Directories are refused; use delete_directory."""
        try:
            await asyncio.to_thread(self.operations.delete_file, path)
        except SandboxFSError as e:
            return self._failure("delete file", e)

        return self._create_success_response(
            result={"path": path}, message=f"File deleted successfully: {path}"
        )

    async def delete_directory(
        self,
        path: Annotated[str, Field(description="Path of the directory to delete")],
        recursive: Annotated[
            bool, Field(description="Delete contents as well (default: false)")
        ] = False,
    ) -> dict:
        """Delete a directory.

        Without recursive, a non-empty directory fails with
        directory_not_empty.
        """
        try:
            await asyncio.to_thread(self.operations.delete_directory, path, recursive)
        except SandboxFSError as e:
            return self._failure("delete directory", e)

        return self._create_success_response(
            result={"path": path}, message=f"Directory deleted successfully: {path}"
        )

    async def file_exists(
        self,
        path: Annotated[str, Field(description="Path to check")],
    ) -> dict:
        """Check whether a file or directory exists.

        A missing path is a successful answer, not an error.

        Returns:
            Success response with ``{"path", "exists", "type"}``; type is
            "file", "directory", "other" or null
        """
        try:
            info = await asyncio.to_thread(self.operations.exists, path)
        except SandboxFSError as e:
            return self._failure("check file existence", e)

        if info.exists:
            message = f"Path exists: {path} ({info.kind})"
        else:
            message = f"Path does not exist: {path}"
        return self._create_success_response(
            result={"path": path, **info.to_dict()}, message=message
        )

    async def get_file_info(
        self,
        path: Annotated[str, Field(description="Path of the file or directory")],
    ) -> dict:
        """Get size, timestamps, type and permission bits of a path."""
        try:
            info = await asyncio.to_thread(self.operations.get_info, path)
        except SandboxFSError as e:
            return self._failure("get file info", e)

        return self._create_success_response(
            result=info.to_dict(), message=f"File info for {path}:"
        )

    async def rename_file(
        self,
        source: Annotated[str, Field(description="Path of the file or directory to rename")],
        new_name: Annotated[
            str, Field(description="New name (a plain name, kept in the same directory)")
        ],
    ) -> dict:
        """Rename a file or directory in place."""
        try:
            destination = await asyncio.to_thread(self.operations.rename, source, new_name)
        except SandboxFSError as e:
            return self._failure("rename file", e)

        return self._create_success_response(
            result={"source": source, "destination": destination},
            message=f"Renamed {source} to {new_name}",
        )

    async def zip_directory(
        self,
        source: Annotated[str, Field(description="Directory holding the file to compress")],
        destination: Annotated[str, Field(description="Path of the .gz file to create")],
    ) -> dict:
        """Compress the first file of a directory into a gzip file.

        Only a single file is compressed: the first non-hidden file in name
        order. This is not a multi-file archive.
        """
        try:
            outcome = await asyncio.to_thread(self.archive.compress_one, source, destination)
        except SandboxFSError as e:
            return self._failure("compress directory", e)

        return self._create_success_response(
            result=outcome.to_dict(),
            message=f"Compressed {outcome.source} to {outcome.destination}",
        )

    async def unzip_file(
        self,
        source: Annotated[str, Field(description="Path of the gzip file")],
        destination: Annotated[str, Field(description="Directory to extract into")],
    ) -> dict:
        """Extract a gzip file into a directory.

        The directory is created if needed. The output is named
        ``<name>_extracted<ext>``, with ``.gz`` replaced by ``.txt``.
        """
        try:
            outcome = await asyncio.to_thread(self.archive.decompress_one, source, destination)
        except SandboxFSError as e:
            return self._failure("extract file", e)

        return self._create_success_response(
            result=outcome.to_dict(),
            message=f"Extracted {outcome.source} to {outcome.destination}",
        )

    async def change_permissions(
        self,
        path: Annotated[str, Field(description="Path of the file or directory")],
        mode: Annotated[str, Field(description='Octal permission mode (e.g., "0755")')],
    ) -> dict:
        """Change the permission bits of a file or directory.

        Returns an "unsupported" error on platforms without POSIX permissions;
        get_capabilities reports whether this tool is available.
        """
        try:
            applied = await asyncio.to_thread(self.operations.change_permissions, path, mode)
        except SandboxFSError as e:
            return self._failure("change permissions", e)

        return self._create_success_response(
            result={"path": path, "mode": oct(applied)[2:].zfill(4)},
            message=f"Permissions of {path} changed to {mode}",
        )

    async def get_capabilities(self) -> dict:
        """Describe the sandbox root and which optional operations are available."""
        capabilities = {
            "root": str(self.resolver.root),
            "change_permissions": supports_permissions(),
            "archive_format": "gzip",
            "ignored_names": sorted(IGNORED_NAMES),
        }
        return self._create_success_response(
            result=capabilities, message="Server capabilities:"
        )
