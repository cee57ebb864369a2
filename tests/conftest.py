import boto3
import pytest
from botocore.stub import Stubber
from typer.testing import CliRunner

from svccat.infrastructure.cli.display import ConsoleDisplay
from svccat.infrastructure.config import settings


class RecordingSleep:
    """Stand-in for asyncio.sleep that records the requested delays."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keeps tests away from the user's config file, .env and AWS credentials."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    settings.load_configuration(
        config_file=tmp_path / "missing-config.yaml",
        env_file=tmp_path / "missing.env",
        force=True,
    )
    yield
    settings.clear_test_config()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def sc_client():
    """A real boto3 servicecatalog client; pair it with the stubber fixture."""
    return boto3.client(
        "servicecatalog",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def stubber(sc_client):
    with Stubber(sc_client) as stub:
        yield stub
        stub.assert_no_pending_responses()


@pytest.fixture
def mock_console_display(mocker):
    """Mocks the ConsoleDisplay to capture output easily."""
    mock = mocker.MagicMock(spec=ConsoleDisplay)
    mocker.patch('svccat.main.ConsoleDisplay', return_value=mock)
    return mock


@pytest.fixture
def quiet_logging(mocker):
    """Stops the CLI from reconfiguring the root logger during tests."""
    return mocker.patch('svccat.main.setup_logging')
