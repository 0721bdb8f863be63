import os

import pytest

# Qt sin display (solo afecta a los tests de widgets).
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

SCENARIO_PATH = (
    "M 20 0 L 180 0 Q 200 0 200 20 L 200 20 Q 200 40 180 60 "
    "L 160 80 Q 140 100 120 100 L 20 100 Q 0 100 0 80 L 0 20 Q 0 0 20 0 Z"
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for k in list(os.environ):
        if k.startswith("CUTSHAPE_"):
            monkeypatch.delenv(k)


@pytest.fixture
def scenario_path():
    return SCENARIO_PATH
