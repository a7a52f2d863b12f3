# shared fixtures, tests never hit the network (http goes through requests-mock)

import json
from pathlib import Path
import pytest

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def load_payload():
    def _load(name):
        return json.loads((DATA_DIR / name).read_text())
    return _load
