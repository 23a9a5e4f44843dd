import pytest
from typer.testing import CliRunner

from tagcache.core.cache_service import CacheService
from tagcache.infrastructure.config.settings import clear_test_config, set_config_for_testing
from tagcache.infrastructure.storage.memory_storage import MemoryStorage

START_MS = 1_700_000_000_000


class FakeClock:
    """Controllable epoch-millisecond clock."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def cache_service(memory_storage: MemoryStorage, clock: FakeClock):
    """CacheService over memory storage with a controllable clock."""
    return CacheService(storage=memory_storage, clock=clock)


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture
def cli_storage_dir(tmp_path):
    """Points the command line at a durable storage in a temporary directory."""
    storage_dir = tmp_path / "storage"
    set_config_for_testing({
        'cache.storage': 'local_storage',
        'cache.dir': str(storage_dir),
        'cache.default_max_age': None,
    })
    yield storage_dir
    clear_test_config()


@pytest.fixture
def mock_console_display(mocker):
    """Mocks the ConsoleDisplay to capture output easily."""
    mock = mocker.MagicMock()
    mocker.patch('tagcache.main.ConsoleDisplay', return_value=mock)
    return mock


@pytest.fixture(autouse=True)
def isolate_logging_setup(mocker):
    """Keeps the CLI from reconfiguring the root logger during tests."""
    mocker.patch('tagcache.main.setup_logging')
