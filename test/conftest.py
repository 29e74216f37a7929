import click.testing
import pytest

from gpcli.util import TEST_LOGLEVEL, start_client_log


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "slow: marks test as slow running test")


@pytest.fixture(scope="session", autouse=True)
def client_log():
    start_client_log(log_to_stdout=True, log_level=TEST_LOGLEVEL)
    yield


@pytest.fixture
def session_dir(tmp_path):
    """A per-test session directory in place of the shell's temp dir."""
    return tmp_path / "globalping_test"


@pytest.fixture
def cli_runner():
    return click.testing.CliRunner()
