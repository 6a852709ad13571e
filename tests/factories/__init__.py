"""Test doubles and factories."""

from tests.factories.components import build_test_components, open_idle_session
from tests.factories.drive import FakeDriveClient, make_files

__all__ = ["FakeDriveClient", "build_test_components", "make_files", "open_idle_session"]
