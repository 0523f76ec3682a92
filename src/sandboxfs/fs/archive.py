"""Single-file gzip compression and decompression.

This is deliberately not an archiver: ``compress_one`` picks exactly one file
from a directory and gzips it, and ``decompress_one`` gunzips one file into a
directory. Data is streamed in fixed-size chunks, so memory use does not grow
with file size.

Each run connects a source stage to a sink stage inside one ``ExitStack``.
Whatever happens mid-stream, both handles are closed, and a failed run
removes its partial output.
"""

import gzip
import logging
import os
import zlib
from collections.abc import Callable
from contextlib import AbstractContextManager, ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from sandboxfs.config import DEFAULT_CHUNK_SIZE
from sandboxfs.exceptions import (
    IOFailureError,
    InvalidArgumentError,
    NotADirectoryPathError,
    NotAFilePathError,
    PathNotFoundError,
)
from sandboxfs.fs.oserrors import os_errors
from sandboxfs.fs.paths import SandboxPathResolver

logger = logging.getLogger(__name__)

Stage = Callable[[Path], AbstractContextManager[BinaryIO]]

EXTRACTED_SUFFIX = "_extracted"


@dataclass(frozen=True)
class ArchiveResult:
    """Outcome of a compress or decompress run (sandbox-relative paths)."""

    source: str
    destination: str
    bytes_read: int
    bytes_written: int

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "destination": self.destination,
            "bytes_read": self.bytes_read,
            "bytes_written": self.bytes_written,
        }


def _open_plain_reader(path: Path) -> BinaryIO:
    return open(path, "rb")


def _open_plain_writer(path: Path) -> BinaryIO:
    return open(path, "wb")


def _open_gzip_reader(path: Path) -> BinaryIO:
    return gzip.open(path, "rb")


def _open_gzip_writer(path: Path) -> BinaryIO:
    return gzip.open(path, "wb")


def stream_transform(
    source: Path,
    sink: Path,
    open_source: Stage,
    open_sink: Stage,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """Pump ``source`` into ``sink`` chunk by chunk through the given stages.

    The transform lives in the stages themselves (e.g. a gzip writer as the
    sink). The input is drained completely before the sink is closed. If any
    stage fails after the sink was opened, the sink file is removed; the
    error always propagates.

    Returns:
        Number of bytes read from the source stage
    """
    copied = 0
    sink_opened = False
    try:
        with ExitStack() as stack:
            reader = stack.enter_context(open_source(source))
            writer = stack.enter_context(open_sink(sink))
            sink_opened = True
            while chunk := reader.read(chunk_size):
                writer.write(chunk)
                copied += len(chunk)
    except BaseException:
        # Only output this run opened is removed
        if sink_opened:
            sink.unlink(missing_ok=True)
        raise
    return copied


def extracted_name(source_name: str) -> str:
    """Derive the output name for a decompressed file.

    The extension is kept, except ``.gz`` which becomes ``.txt``.

    Example:
        >>> extracted_name("report.csv.gz")
        'report.csv_extracted.txt'
        >>> extracted_name("notes.md")
        'notes_extracted.md'
    """
    stem, suffix = os.path.splitext(source_name)
    if suffix.lower() == ".gz":
        suffix = ".txt"
    return f"{stem}{EXTRACTED_SUFFIX}{suffix}"


class ArchivePipeline:
    """Compress one file out of a directory, or extract one gzip file."""

    def __init__(self, resolver: SandboxPathResolver, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self._resolver = resolver
        self._chunk_size = chunk_size

    def select_source_file(self, source_dir: str) -> Path:
        """Pick the file ``compress_one`` would compress.

        The first non-hidden regular file in name order wins.

        Raises:
            PathNotFoundError: If the directory does not exist
            NotADirectoryPathError: If ``source_dir`` is not a directory
            InvalidArgumentError: If there is no eligible file
        """
        directory = self._resolver.resolve(source_dir)
        if not directory.exists():
            raise PathNotFoundError(f"Directory not found: {source_dir}")
        if not directory.is_dir():
            raise NotADirectoryPathError(f"Source is not a directory: {source_dir}")

        with os_errors(source_dir), os.scandir(directory) as it:
            names = sorted(
                entry.name
                for entry in it
                if not entry.name.startswith(".") and entry.is_file(follow_symlinks=False)
            )
        if not names:
            raise InvalidArgumentError(f"Directory contains no files to compress: {source_dir}")
        return directory / names[0]

    def compress_one(self, source_dir: str, destination: str) -> ArchiveResult:
        """Gzip the selected file of ``source_dir`` into ``destination``.

        Only one file is ever compressed, whatever else the directory holds.
        An existing destination file is replaced.
        """
        selected = self.select_source_file(source_dir)
        target = self._resolver.resolve(destination)
        if target == selected:
            raise InvalidArgumentError(f"Destination would overwrite its own source: {destination}")
        if target.is_dir():
            raise NotAFilePathError(f"Destination is a directory: {destination}")

        source_rel = self._resolver.to_relative(selected)
        logger.info(f"Compressing {source_rel} -> {destination}")
        with os_errors(destination):
            read = stream_transform(
                selected, target, _open_plain_reader, _open_gzip_writer, self._chunk_size
            )
            written = target.stat().st_size

        return ArchiveResult(
            source=source_rel,
            destination=self._resolver.to_relative(target),
            bytes_read=read,
            bytes_written=written,
        )

    def decompress_one(self, source: str, destination_dir: str) -> ArchiveResult:
        """Gunzip ``source`` into ``destination_dir``.

        The directory is created if missing. The output name comes from
        :func:`extracted_name`.
        """
        archive = self._resolver.resolve(source)
        if not archive.exists():
            raise PathNotFoundError(f"File not found: {source}")
        if not archive.is_file():
            raise NotAFilePathError(f"Source is not a file: {source}")

        directory = self._resolver.resolve(destination_dir)
        with os_errors(destination_dir):
            directory.mkdir(parents=True, exist_ok=True)

        output_rel = self._resolver.to_relative(directory / extracted_name(archive.name))
        output = self._resolver.resolve(output_rel)
        logger.info(f"Extracting {source} -> {output_rel}")

        try:
            with os_errors(output_rel):
                read = archive.stat().st_size
                written = stream_transform(
                    archive, output, _open_gzip_reader, _open_plain_writer, self._chunk_size
                )
        except IOFailureError as e:
            if isinstance(e.original_error, gzip.BadGzipFile):
                raise InvalidArgumentError(f"Not a gzip file: {source}") from e
            raise
        except (EOFError, zlib.error) as e:
            raise IOFailureError(f"Compressed stream is truncated or corrupt: {source}") from e

        return ArchiveResult(
            source=self._resolver.to_relative(archive),
            destination=output_rel,
            bytes_read=read,
            bytes_written=written,
        )
