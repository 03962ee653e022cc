import os
import random
import sys

import pytest

# Ensure src is on path for test imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from falling_blocks.game import Engine, PieceCatalog  # noqa: E402


@pytest.fixture
def catalog():
    return PieceCatalog()


@pytest.fixture
def engine():
    return Engine(rng=random.Random(7))
