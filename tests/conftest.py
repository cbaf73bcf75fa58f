"""Test bootstrap: ensure package root is on sys.path.

This allows absolute imports like `modules.dungeon.layout` and `core.event_bus`
which assume the working directory is the repository root.
"""
import sys, os
PACKAGE_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if PACKAGE_ROOT not in sys.path:
    sys.path.insert(0, PACKAGE_ROOT)

import pytest

from modules.dungeon.gen.params import GenerationParameters
from modules.dungeon.layout import LayoutBuilder


@pytest.fixture
def builder_factory():
    """Return a callable creating an empty :class:`LayoutBuilder`."""

    def _make(**overrides) -> LayoutBuilder:
        overrides.setdefault("map_bounds", (30, 20))
        return LayoutBuilder(GenerationParameters(**overrides))

    return _make
