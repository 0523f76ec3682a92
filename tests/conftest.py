"""Shared test fixtures for all tests.

This file imports and re-exports fixtures from the fixtures/ module so that
every test module can use them without importing anything.
"""

# Import all fixtures from organized modules
from tests.fixtures.config import sandbox_root, server_config  # noqa: F401
from tests.fixtures.workspace import (  # noqa: F401
    archive,
    file_ops,
    fs_tools,
    registry,
    resolver,
    sample_tree,
    walker,
)
