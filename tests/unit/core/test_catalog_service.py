import asyncio
from unittest.mock import MagicMock

import pytest

from svccat.core.services.catalog_service import PORTFOLIO_COLUMNS, PRODUCT_COLUMNS, CatalogService
from svccat.domain.interfaces.catalog import CatalogGateway
from svccat.domain.interfaces.user_interface import UserInterface
from svccat.domain.models.catalog import ProductAVMParam

PORTFOLIO = {"Id": "port-aaaaaaaaaaaaa", "DisplayName": "Networking", "ProviderName": "Platform"}


@pytest.fixture
def mock_gateway():
    # Async methods of the gateway become AsyncMocks
    return MagicMock(spec=CatalogGateway)


@pytest.fixture
def mock_ui():
    return MagicMock(spec=UserInterface)


@pytest.fixture
def catalog_service(mock_gateway, mock_ui):
    return CatalogService(gateway=mock_gateway, ui=mock_ui)


def test_show_portfolios_renders_table(catalog_service, mock_gateway, mock_ui):
    mock_gateway.list_all_portfolios.return_value = [PORTFOLIO]

    result = asyncio.run(catalog_service.show_portfolios())

    assert result == [PORTFOLIO]
    mock_ui.display_table.assert_called_once_with([PORTFOLIO], PORTFOLIO_COLUMNS, title="Portfolios")


def test_show_portfolios_in_json_mode(mock_gateway, mock_ui):
    service = CatalogService(gateway=mock_gateway, ui=mock_ui, output_json=True)
    mock_gateway.list_all_portfolios.return_value = [PORTFOLIO]

    asyncio.run(service.show_portfolios())

    mock_ui.display_json.assert_called_once_with([PORTFOLIO])
    mock_ui.display_table.assert_not_called()


def test_empty_results_are_reported(catalog_service, mock_gateway, mock_ui):
    mock_gateway.list_all_principals_for_portfolio.return_value = []

    asyncio.run(catalog_service.show_principals("port-aaaaaaaaaaaaa"))

    mock_gateway.list_all_principals_for_portfolio.assert_awaited_once_with("port-aaaaaaaaaaaaa")
    mock_ui.display_info.assert_called_once_with("No principals found.")


def test_missing_portfolio_shows_warning(catalog_service, mock_gateway, mock_ui):
    mock_gateway.find_portfolio_by_name.return_value = None

    assert asyncio.run(catalog_service.show_portfolio_by_name("Nope")) is None
    mock_ui.display_warning.assert_called_once_with("Portfolio 'Nope' not found.")


def test_show_products_flattens_view_summaries(catalog_service, mock_gateway, mock_ui):
    summary = {"ProductId": "prod-aaaaaaaaaaaaa", "Name": "Account Vending Machine"}
    mock_gateway.find_product.return_value = {"ProductViewSummaries": [{"ProductViewSummary": summary}]}

    asyncio.run(catalog_service.show_products("Account"))

    mock_ui.display_table.assert_called_once_with([summary], PRODUCT_COLUMNS, title="Products")


def test_associate_role_reports_success(catalog_service, mock_gateway, mock_ui):
    mock_gateway.associate_role_with_portfolio.return_value = {}

    asyncio.run(catalog_service.associate_role("port-aaaaaaaaaaaaa", "arn:aws:iam::123456789012:role/Admin"))

    mock_gateway.associate_role_with_portfolio.assert_awaited_once_with(
        "port-aaaaaaaaaaaaa", "arn:aws:iam::123456789012:role/Admin"
    )
    mock_ui.display_output.assert_called_once_with(
        "Associated arn:aws:iam::123456789012:role/Admin with portfolio port-aaaaaaaaaaaaa."
    )


def test_provision_account_builds_avm_request(catalog_service, mock_gateway, mock_ui):
    mock_gateway.provision_product.return_value = {"RecordDetail": {"RecordId": "rec-1", "Status": "CREATED"}}
    param = ProductAVMParam(account_name="sandbox-1", account_email="ops@example.com", org_unit_name="Sandbox")

    asyncio.run(catalog_service.provision_account("prod-1", "pa-1", param, provision_token="tok"))

    mock_gateway.provision_product.assert_awaited_once_with({
        "ProductId": "prod-1",
        "ProvisioningArtifactId": "pa-1",
        "ProvisionedProductName": "sandbox-1",
        "ProvisioningParameters": [
            {"Key": "AccountName", "Value": "sandbox-1"},
            {"Key": "AccountEmail", "Value": "ops@example.com"},
            {"Key": "OrgUnitName", "Value": "Sandbox"},
        ],
        "ProvisionToken": "tok",
    })
    mock_ui.display_output.assert_called_once_with("Provisioning record rec-1 status: CREATED")


def test_show_provisioned_lists_products(catalog_service, mock_gateway, mock_ui):
    provisioned = {"Id": "pp-1", "Name": "sandbox-1", "Status": "AVAILABLE"}
    mock_gateway.search_provisioned_products.return_value = {"ProvisionedProducts": [provisioned]}

    asyncio.run(catalog_service.show_provisioned("sandbox-1"))

    mock_gateway.search_provisioned_products.assert_awaited_once_with("sandbox-1")
    args, kwargs = mock_ui.display_table.call_args
    assert args[0] == [provisioned]
