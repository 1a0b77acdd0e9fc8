"""
Shared fixtures for the desk test suite
"""

import pytest

from bond_desk.engine.config_loader import DeskConfig
from bond_desk.packages.soa.service import Connector
from bond_desk.packages.utils.clock import ManualClock
from bond_desk.services.instrument_master import InstrumentMaster

DESK_ENV_VARS = (
    'DESK_BOOKS', 'DESK_PV01_PER_UNIT', 'DESK_GUI_THROTTLE_MS',
    'DESK_STREAM_VISIBLE_SIZE', 'DESK_STREAM_HIDDEN_SIZE',
    'DESK_LEVEL_SIZE_MULTIPLIER', 'DESK_SPREAD_TOLERANCE', 'DESK_HIDDEN_RATIO',
    'DESK_SIDE_POLICY', 'DESK_FIXED_SIDE', 'DESK_EXECUTION_MARKET', 'DESK_EXECUTION_BOOK',
    'DESK_QUOTE_PRICE', 'DESK_INQUIRY_QUANTITY', 'DESK_INPUT_DIR', 'DESK_OUTPUT_DIR',
    'DESK_CONCURRENT', 'DESK_LOG_LEVEL', 'DESK_PROGRESS_INTERVAL',
)

EPOCH_MS = 1_700_000_000_000


class RecordingConnector(Connector):
    """Connector that keeps everything published to it"""

    def __init__(self):
        self.published = []

    def publish(self, data) -> None:
        self.published.append(data)


@pytest.fixture
def instruments():
    return InstrumentMaster()


@pytest.fixture
def b02y(instruments):
    return instruments.get_instrument('B02y')


@pytest.fixture
def clock():
    return ManualClock(start_ms=0.0, epoch_start_ms=EPOCH_MS)


@pytest.fixture
def connector():
    return RecordingConnector()


@pytest.fixture
def clean_env(monkeypatch):
    """Blank every DESK_* variable; monkeypatch restores them after the test"""
    for name in DESK_ENV_VARS:
        monkeypatch.setenv(name, '')
    return monkeypatch


@pytest.fixture
def desk_dirs(tmp_path):
    data_dir = tmp_path / 'data'
    out_dir = tmp_path / 'output'
    data_dir.mkdir()
    return data_dir, out_dir


@pytest.fixture
def desk_config(desk_dirs):
    data_dir, out_dir = desk_dirs
    return DeskConfig(input_dir=str(data_dir), output_dir=str(out_dir))


@pytest.fixture
def connector_factory():
    return RecordingConnector
