"""Catalog application service.

Runs catalog use cases against the CatalogGateway and presents the results
through the UserInterface, either as tables or as the raw JSON responses.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from svccat.domain.interfaces.catalog import CatalogGateway
from svccat.domain.interfaces.user_interface import UserInterface
from svccat.domain.models.catalog import ProductAVMParam, build_avm_provisioning_parameters
from svccat.domain.models.common import (
    CatalogResponse, PortfolioId, PrincipalArn, ProductId, ProvisioningArtifactId
)

logger = logging.getLogger(__name__)

PORTFOLIO_COLUMNS = ("Id", "DisplayName", "ProviderName", "Description")
PRINCIPAL_COLUMNS = ("PrincipalARN", "PrincipalType")
PRODUCT_COLUMNS = ("ProductId", "Name", "Owner", "Type")
ARTIFACT_COLUMNS = ("Id", "Name", "Description", "Guidance")
PROVISIONED_COLUMNS = ("Id", "Name", "Type", "Status", "StatusMessage")


class CatalogService:
    """Application service for catalog use cases."""

    def __init__(self, gateway: CatalogGateway, ui: UserInterface, output_json: bool = False):
        """Initializes the CatalogService.

        Args:
            gateway: Catalog service adapter.
            ui: User interface used to present results.
            output_json: Print raw JSON instead of tables.
        """
        self.gateway = gateway
        self.ui = ui
        self.output_json = output_json

    def _present(self, data: Any, rows: List[Dict[str, Any]], columns, title: str) -> None:
        if self.output_json:
            self.ui.display_json(data)
        elif rows:
            self.ui.display_table(rows, columns, title=title)
        else:
            self.ui.display_info(f"No {title.lower()} found.")

    async def show_portfolios(self) -> List[Dict[str, Any]]:
        portfolios = await self.gateway.list_all_portfolios()
        self._present(portfolios, portfolios, PORTFOLIO_COLUMNS, "Portfolios")
        return portfolios

    async def show_principals(self, portfolio_id: PortfolioId) -> List[Dict[str, Any]]:
        principals = await self.gateway.list_all_principals_for_portfolio(portfolio_id)
        self._present(principals, principals, PRINCIPAL_COLUMNS, "Principals")
        return principals

    async def show_portfolio_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        portfolio = await self.gateway.find_portfolio_by_name(name)
        if portfolio is None:
            self.ui.display_warning(f"Portfolio '{name}' not found.")
            return None
        self._present(portfolio, [portfolio], PORTFOLIO_COLUMNS, "Portfolios")
        return portfolio

    async def associate_role(self, portfolio_id: PortfolioId, principal_arn: PrincipalArn) -> CatalogResponse:
        response = await self.gateway.associate_role_with_portfolio(portfolio_id, principal_arn)
        if self.output_json:
            self.ui.display_json(response)
        else:
            self.ui.display_output(f"Associated {principal_arn} with portfolio {portfolio_id}.")
        return response

    async def show_products(self, product_name: str) -> CatalogResponse:
        response = await self.gateway.find_product(product_name)
        rows = [view.get("ProductViewSummary", {}) for view in response.get("ProductViewSummaries", [])]
        self._present(response, rows, PRODUCT_COLUMNS, "Products")
        return response

    async def show_artifacts(self, product_id: ProductId) -> CatalogResponse:
        response = await self.gateway.find_provisioning_artifact(product_id)
        self._present(response, response.get("ProvisioningArtifactDetails", []), ARTIFACT_COLUMNS, "Artifacts")
        return response

    async def provision(self, request: Mapping[str, Any]) -> CatalogResponse:
        response = await self.gateway.provision_product(request)
        record = response.get("RecordDetail", {})
        if self.output_json:
            self.ui.display_json(response)
        else:
            self.ui.display_output(
                f"Provisioning record {record.get('RecordId', '?')} status: {record.get('Status', 'UNKNOWN')}"
            )
        return response

    async def provision_account(
        self,
        product_id: ProductId,
        artifact_id: ProvisioningArtifactId,
        param: ProductAVMParam,
        provision_token: Optional[str] = None,
    ) -> CatalogResponse:
        """Provisions the Account Vending Machine product for a new account.

        The provisioned product is named after the account, which is what
        show_provisioned later searches for.
        """
        request: Dict[str, Any] = {
            "ProductId": product_id,
            "ProvisioningArtifactId": artifact_id,
            "ProvisionedProductName": param["account_name"],
            "ProvisioningParameters": build_avm_provisioning_parameters(param),
        }
        if provision_token:
            request["ProvisionToken"] = provision_token
        logger.info(f"Requesting account '{param['account_name']}' in OU '{param['org_unit_name']}'")
        return await self.provision(request)

    async def show_provisioned(self, account_name: str) -> CatalogResponse:
        response = await self.gateway.search_provisioned_products(account_name)
        self._present(response, response.get("ProvisionedProducts", []), PROVISIONED_COLUMNS, "Provisioned products")
        return response
