"""Interface for the managed catalog service.

Defines the contract the application layer uses to talk to the catalog,
independent of the SDK used underneath.
"""

import abc
from typing import Any, Dict, List, Optional

from svccat.domain.models.common import (
    CatalogResponse, PortfolioId, PrincipalArn, ProductId
)


class CatalogGateway(abc.ABC):
    """Abstract Base Class for catalog service interactions.

    Every method returns the service response unchanged unless documented
    otherwise. Throttling is handled by the implementation.
    """

    @abc.abstractmethod
    async def list_portfolios(self, page_token: Optional[str] = None) -> CatalogResponse:
        """Lists one page of portfolios."""
        pass

    @abc.abstractmethod
    async def list_all_portfolios(self) -> List[Dict[str, Any]]:
        """Lists the portfolio details of every page."""
        pass

    @abc.abstractmethod
    async def list_principals_for_portfolio(
        self, portfolio_id: PortfolioId, page_token: Optional[str] = None
    ) -> CatalogResponse:
        """Lists one page of principals associated with a portfolio."""
        pass

    @abc.abstractmethod
    async def list_all_principals_for_portfolio(self, portfolio_id: PortfolioId) -> List[Dict[str, Any]]:
        """Lists the principals of every page for a portfolio."""
        pass

    @abc.abstractmethod
    async def find_portfolio_by_name(self, portfolio_name: str) -> Optional[Dict[str, Any]]:
        """Returns the portfolio detail whose display name matches, or None."""
        pass

    @abc.abstractmethod
    async def associate_role_with_portfolio(
        self, portfolio_id: PortfolioId, principal_arn: PrincipalArn
    ) -> CatalogResponse:
        """Associates an IAM principal with a portfolio."""
        pass

    @abc.abstractmethod
    async def find_product(self, product_name: str) -> CatalogResponse:
        """Searches products by full text."""
        pass

    @abc.abstractmethod
    async def find_provisioning_artifact(self, product_id: ProductId) -> CatalogResponse:
        """Lists the provisioning artifacts (versions) of a product."""
        pass

    @abc.abstractmethod
    async def provision_product(self, request: Dict[str, Any]) -> CatalogResponse:
        """Provisions a product from a ProvisionProduct request payload."""
        pass

    @abc.abstractmethod
    async def search_provisioned_products(self, account_name: str) -> CatalogResponse:
        """Searches provisioned products by name."""
        pass
