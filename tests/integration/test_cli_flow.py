import pytest

from svccat.infrastructure.aws.service_catalog import ServiceCatalogClient
from svccat.infrastructure.resilience.api_retry import RetryingRemoteCaller
from svccat.main import app

# These fixtures are defined in tests/conftest.py:
# runner: CliRunner
# mock_console_display: MagicMock (patches ConsoleDisplay)
# quiet_logging: patches setup_logging
# sc_client / stubber: boto3 servicecatalog client with a Stubber attached

PORTFOLIO = {
    "Id": "port-aaaaaaaaaaaaa",
    "ARN": "arn:aws:catalog:us-east-1:123456789012:portfolio/port-aaaaaaaaaaaaa",
    "DisplayName": "Account Vending Machine",
    "ProviderName": "PBMM",
}


@pytest.fixture
def mock_catalog_client(mocker):
    """Replaces the AWS client with a mock exposing async methods."""
    mock = mocker.MagicMock(spec=ServiceCatalogClient)
    constructor = mocker.patch('svccat.main.ServiceCatalogClient', return_value=mock)
    mock.constructor = constructor
    return mock


@pytest.fixture
def stubbed_catalog(mocker, sc_client, recording_sleep):
    """Builds the real ServiceCatalogClient around the stubbed boto3 client."""

    def build(**kwargs):
        caller = RetryingRemoteCaller(policy=kwargs["caller"].policy, sleep=recording_sleep)
        return ServiceCatalogClient(client=sc_client, caller=caller, provision_tags=kwargs["provision_tags"])

    return mocker.patch('svccat.main.ServiceCatalogClient', side_effect=build)


def test_list_portfolios_flow(runner, mock_catalog_client, mock_console_display, quiet_logging):
    mock_catalog_client.list_all_portfolios.return_value = [PORTFOLIO]

    result = runner.invoke(app, ["list-portfolios"])

    assert result.exit_code == 0, result.output
    mock_catalog_client.list_all_portfolios.assert_awaited_once()
    mock_console_display.display_table.assert_called_once()
    mock_console_display.display_error.assert_not_called()


def test_global_options_reach_the_client(runner, mock_catalog_client, mock_console_display, quiet_logging):
    mock_catalog_client.search_provisioned_products.return_value = {"ProvisionedProducts": []}

    result = runner.invoke(
        app,
        ["--profile", "ops", "--region", "ca-central-1", "--max-attempts", "2", "--json",
         "search-provisioned", "sandbox-1"],
    )

    assert result.exit_code == 0, result.output
    kwargs = mock_catalog_client.constructor.call_args.kwargs
    assert kwargs["profile_name"] == "ops"
    assert kwargs["region_name"] == "ca-central-1"
    assert kwargs["caller"].policy.max_attempts == 2
    mock_catalog_client.search_provisioned_products.assert_awaited_once_with("sandbox-1")
    mock_console_display.display_json.assert_called_once_with({"ProvisionedProducts": []})


def test_find_portfolio_not_found_exits_non_zero(runner, mock_catalog_client, mock_console_display, quiet_logging):
    mock_catalog_client.find_portfolio_by_name.return_value = None

    result = runner.invoke(app, ["find-portfolio", "Nope"])

    assert result.exit_code == 1
    mock_console_display.display_warning.assert_called_once_with("Portfolio 'Nope' not found.")


def test_provision_parses_parameters_and_tags(runner, mock_catalog_client, mock_console_display, quiet_logging):
    mock_catalog_client.provision_product.return_value = {"RecordDetail": {"RecordId": "rec-1", "Status": "CREATED"}}

    result = runner.invoke(app, [
        "provision",
        "--product-id", "prod-1",
        "--artifact-id", "pa-1",
        "--name", "vpc-1",
        "--parameter", "CidrBlock=10.0.0.0/16",
        "--tag", "Owner=network-team",
        "--token", "tok-1",
    ])

    assert result.exit_code == 0, result.output
    mock_catalog_client.provision_product.assert_awaited_once_with({
        "ProductId": "prod-1",
        "ProvisioningArtifactId": "pa-1",
        "ProvisionedProductName": "vpc-1",
        "ProvisioningParameters": [{"Key": "CidrBlock", "Value": "10.0.0.0/16"}],
        "Tags": [{"Key": "Owner", "Value": "network-team"}],
        "ProvisionToken": "tok-1",
    })


def test_provision_rejects_malformed_parameter(runner, mock_catalog_client, mock_console_display, quiet_logging):
    result = runner.invoke(app, [
        "provision", "--product-id", "prod-1", "--artifact-id", "pa-1", "--name", "vpc-1",
        "--parameter", "no-equals-sign",
    ])

    assert result.exit_code == 2
    mock_catalog_client.provision_product.assert_not_called()


def test_invalid_retry_configuration_exits(runner, mock_catalog_client, mock_console_display, quiet_logging):
    from svccat.infrastructure.config import settings
    settings.set_config_for_testing({"retry.max_attempts": 0})

    result = runner.invoke(app, ["list-portfolios"])

    assert result.exit_code == 1
    mock_console_display.display_error.assert_called_once()
    mock_catalog_client.constructor.assert_not_called()


def test_throttled_listing_recovers_end_to_end(
    runner, stubbed_catalog, stubber, recording_sleep, mock_console_display, quiet_logging
):
    stubber.add_client_error("list_portfolios", service_error_code="ThrottlingException", http_status_code=400)
    stubber.add_response("list_portfolios", {"PortfolioDetails": [PORTFOLIO]}, {})

    result = runner.invoke(app, ["list-portfolios"])

    assert result.exit_code == 0, result.output
    assert len(recording_sleep.delays) == 1
    rows = mock_console_display.display_table.call_args.args[0]
    assert rows == [PORTFOLIO]


def test_throttling_that_never_stops_exits_non_zero(
    runner, stubbed_catalog, stubber, recording_sleep, mock_console_display, quiet_logging
):
    for _ in range(2):
        stubber.add_client_error("search_products", service_error_code="ThrottlingException", http_status_code=400)

    result = runner.invoke(app, ["--max-attempts", "2", "find-product", "Account"])

    assert result.exit_code == 1
    mock_console_display.display_error.assert_called_once_with(
        "find-product failed: service kept throttling after 2 attempt(s) (ThrottlingException)."
    )
