"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), delegates the work to
the CatalogService and turns failures into user-facing messages and exit codes.
"""

import logging
from typing import Any, Awaitable, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

from svccat.core.services.catalog_service import CatalogService
from svccat.domain.exceptions import RetriesExhaustedError, SvccatError
from svccat.domain.interfaces.user_interface import UserInterface
from svccat.domain.models.catalog import ProductAVMParam
from svccat.domain.models.common import (
    PortfolioId, PrincipalArn, ProductId, ProvisioningArtifactId
)
from svccat.infrastructure.resilience.throttling import error_code

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


class CommandHandler:
    """Handles incoming commands and delegates to the catalog service."""

    def __init__(self, catalog_service: CatalogService, ui: UserInterface):
        self.catalog_service = catalog_service
        self.ui = ui

    async def _run(self, command: str, work: Awaitable[Any]) -> int:
        """Awaits a use case and maps its outcome to an exit code."""
        try:
            await work
        except RetriesExhaustedError as e:
            logger.error(f"'{command}' gave up after {e.attempts} throttled attempt(s)", exc_info=True)
            self.ui.display_error(
                f"{command} failed: service kept throttling after {e.attempts} attempt(s) ({error_code(e.last_error)})."
            )
            return EXIT_FAILURE
        except ClientError as e:
            logger.error(f"'{command}' rejected by the service: {e}", exc_info=True)
            self.ui.display_error(f"{command} failed: {error_code(e)}: {e.response.get('Error', {}).get('Message', e)}")
            return EXIT_FAILURE
        except (BotoCoreError, SvccatError) as e:
            logger.error(f"'{command}' failed: {e}", exc_info=True)
            self.ui.display_error(f"{command} failed: {e}")
            return EXIT_FAILURE
        return EXIT_OK

    async def handle_list_portfolios(self) -> int:
        logger.info("Handling 'list-portfolios' command")
        return await self._run("list-portfolios", self.catalog_service.show_portfolios())

    async def handle_list_principals(self, portfolio_id: str) -> int:
        logger.info(f"Handling 'list-principals' command for portfolio: {portfolio_id}")
        return await self._run("list-principals", self.catalog_service.show_principals(PortfolioId(portfolio_id)))

    async def handle_find_portfolio(self, name: str) -> int:
        """Handles 'find-portfolio'; a missing portfolio is a failure."""
        logger.info(f"Handling 'find-portfolio' command for name: {name}")
        found: Dict[str, Any] = {}

        async def find() -> None:
            found["portfolio"] = await self.catalog_service.show_portfolio_by_name(name)

        code = await self._run("find-portfolio", find())
        if code == EXIT_OK and found.get("portfolio") is None:
            return EXIT_FAILURE
        return code

    async def handle_associate_role(self, portfolio_id: str, principal_arn: str) -> int:
        logger.info(f"Handling 'associate-role' command: {principal_arn} -> {portfolio_id}")
        return await self._run(
            "associate-role",
            self.catalog_service.associate_role(PortfolioId(portfolio_id), PrincipalArn(principal_arn)),
        )

    async def handle_find_product(self, product_name: str) -> int:
        logger.info(f"Handling 'find-product' command for: {product_name}")
        return await self._run("find-product", self.catalog_service.show_products(product_name))

    async def handle_list_artifacts(self, product_id: str) -> int:
        logger.info(f"Handling 'list-artifacts' command for product: {product_id}")
        return await self._run("list-artifacts", self.catalog_service.show_artifacts(ProductId(product_id)))

    async def handle_provision(self, request: Dict[str, Any]) -> int:
        logger.info(f"Handling 'provision' command for product: {request.get('ProductId')}")
        return await self._run("provision", self.catalog_service.provision(request))

    async def handle_provision_account(
        self,
        product_id: str,
        artifact_id: str,
        account_name: str,
        account_email: str,
        org_unit_name: str,
        provision_token: Optional[str] = None,
    ) -> int:
        logger.info(f"Handling 'provision-account' command for account: {account_name}")
        param = ProductAVMParam(
            account_name=account_name, account_email=account_email, org_unit_name=org_unit_name
        )
        return await self._run(
            "provision-account",
            self.catalog_service.provision_account(
                ProductId(product_id), ProvisioningArtifactId(artifact_id), param, provision_token
            ),
        )

    async def handle_search_provisioned(self, account_name: str) -> int:
        logger.info(f"Handling 'search-provisioned' command for: {account_name}")
        return await self._run("search-provisioned", self.catalog_service.show_provisioned(account_name))
