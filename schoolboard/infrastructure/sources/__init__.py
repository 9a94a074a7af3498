"""Collection source adapters."""

from .fixture_source import FixtureCollectionSource, load_fixture_file
from .remote_source import RemoteCollectionSource

__all__ = ["FixtureCollectionSource", "RemoteCollectionSource", "load_fixture_file"]
