from pathlib import Path
import random
import sys

import pytest

# Ensure the project root is on the Python path
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class FailingRandom(random.Random):
    """Every probability check fails, every range draw takes its lower bound."""

    def random(self):
        return 0.999999

    def randint(self, a, b):
        return a

    def uniform(self, a, b):
        return a

    def choice(self, seq):
        return seq[0]


@pytest.fixture
def failing_rng():
    return FailingRandom()
