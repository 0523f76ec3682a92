"""Configuration management for the sandboxed file server."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from sandboxfs.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_SERVER_NAME = "sandboxfs"

ROOT_ENV_VAR = "SANDBOXFS_ROOT"
# Older deployments configured the projects folder under this name
LEGACY_ROOT_ENV_VAR = "VW_PROJECTS_PATH"


@dataclass
class ServerConfig:
    """Configuration for the file server.

    The sandbox root is the only piece of state shared between calls. Every
    path supplied by a caller is interpreted relative to it.
    """

    root: Path
    log_level: str = DEFAULT_LOG_LEVEL
    chunk_size: int = DEFAULT_CHUNK_SIZE
    server_name: str = DEFAULT_SERVER_NAME

    def __post_init__(self) -> None:
        self.root = Path(self.root).expanduser().resolve()

    @classmethod
    def from_env(cls, root: str | Path | None = None) -> "ServerConfig":
        """Load configuration from environment variables.

        Args:
            root: Explicit sandbox root, overriding the environment

        Returns:
            ServerConfig instance with values from environment

        Example:
            >>> config = ServerConfig.from_env()
            >>> config.root
            PosixPath('/home/user/projects')
        """
        load_dotenv()

        if root is None:
            root = os.getenv(ROOT_ENV_VAR) or os.getenv(LEGACY_ROOT_ENV_VAR)
        if not root:
            # Default to the parent of the working directory
            root = Path.cwd().parent

        chunk_size_raw = os.getenv("SANDBOXFS_CHUNK_SIZE", str(DEFAULT_CHUNK_SIZE))
        try:
            chunk_size = int(chunk_size_raw)
        except ValueError as e:
            raise ConfigurationError(
                f"SANDBOXFS_CHUNK_SIZE must be an integer, got: {chunk_size_raw}"
            ) from e

        config = cls(
            root=Path(root),
            log_level=os.getenv("SANDBOXFS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            chunk_size=chunk_size,
            server_name=os.getenv("SANDBOXFS_SERVER_NAME", DEFAULT_SERVER_NAME),
        )

        if config.root == Path.home() or config.root == Path(config.root.anchor):
            logger.warning(
                f"Sandbox root is set to {config.root}. Consider pointing {ROOT_ENV_VAR} "
                "at a projects directory to limit what callers can reach."
            )

        return config

    def validate(self) -> None:
        """Validate configuration.

        Raises:
            ConfigurationError: If the root is unusable or a limit is invalid
        """
        if not self.root.exists():
            raise ConfigurationError(f"Sandbox root does not exist: {self.root}")
        if not self.root.is_dir():
            raise ConfigurationError(f"Sandbox root is not a directory: {self.root}")
        if self.chunk_size <= 0:
            raise ConfigurationError(f"Chunk size must be positive, got: {self.chunk_size}")
