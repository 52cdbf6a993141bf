import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import numpy as np
import pytest
from PySide6.QtWidgets import QApplication


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """One QApplication for the whole run; QObjects, timers and painters need it."""
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
