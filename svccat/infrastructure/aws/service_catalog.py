"""Concrete implementation of the CatalogGateway interface using boto3.

Every public method only shapes a request payload; the single `_call`
method runs it against the AWS Service Catalog API through the shared
RetryingRemoteCaller, so throttling is handled in one place.
"""

import asyncio
import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional, Sequence

import boto3
from botocore.config import Config

from svccat.domain.interfaces.catalog import CatalogGateway
from svccat.domain.models.catalog import DEFAULT_PROVISION_TAGS, Tag, tags_from_mapping
from svccat.domain.models.common import (
    CatalogResponse, OperationName, PortfolioId, PrincipalArn, ProductId
)
from svccat.domain.models.retry import RetryPolicy
from svccat.infrastructure.resilience.api_retry import RetryingRemoteCaller

logger = logging.getLogger(__name__)

SERVICE_NAME = "servicecatalog"
PRINCIPAL_TYPE_IAM = "IAM"

# botocore must not retry on its own, the RetryingRemoteCaller owns throttling
SDK_CONFIG = Config(retries={"total_max_attempts": 1, "mode": "standard"})


class ServiceCatalogClient(CatalogGateway):
    """AWS Service Catalog implementation of the CatalogGateway interface."""

    def __init__(
        self,
        client: Any = None,
        session: Optional[boto3.Session] = None,
        profile_name: Optional[str] = None,
        region_name: Optional[str] = None,
        caller: Optional[RetryingRemoteCaller] = None,
        policy: Optional[RetryPolicy] = None,
        provision_tags: Optional[Sequence[Tag]] = None,
    ):
        """Initializes the Service Catalog client.

        Args:
            client: Ready-made boto3 servicecatalog client. Built from the
                session when None.
            session: boto3 session to create the client from.
            profile_name: Named profile for a new session when none is given.
            region_name: AWS region; boto3's default resolution applies if None.
            caller: Retrying caller shared by all operations.
            policy: Retry policy overriding the caller's default.
            provision_tags: Tags appended to every ProvisionProduct request.
        """
        if client is None:
            session = session or boto3.Session(profile_name=profile_name, region_name=region_name)
            client = session.client(SERVICE_NAME, region_name=region_name, config=SDK_CONFIG)
        self.client = client
        self.caller = caller or RetryingRemoteCaller(policy=policy)
        self.policy = policy
        if provision_tags is None:
            provision_tags = tags_from_mapping(DEFAULT_PROVISION_TAGS)
        self.provision_tags: List[Tag] = list(provision_tags)
        logger.debug(f"ServiceCatalogClient initialized (region={getattr(self.client.meta, 'region_name', None)})")

    async def _call(self, operation_name: str, **params: Any) -> CatalogResponse:
        """Runs one Service Catalog API operation with throttling retries.

        The synchronous boto3 method is run in a worker thread; a new
        coroutine is created for every attempt.
        """
        method = getattr(self.client, operation_name)

        def operation():
            return asyncio.to_thread(method, **params)

        return await self.caller.execute(
            operation, policy=self.policy, operation_name=OperationName(operation_name)
        )

    async def _paginate(self, operation_name: str, result_key: str, **params: Any) -> List[Dict[str, Any]]:
        """Follows NextPageToken until the last page, collecting result_key items.

        Stops early if the service hands back the token it was just given.
        """
        items: List[Dict[str, Any]] = []
        page_token: Optional[str] = None
        page_count = 0
        while True:
            request = dict(params)
            if page_token:
                request["PageToken"] = page_token
            page = await self._call(operation_name, **request)
            page_count += 1
            items.extend(page.get(result_key, []))
            next_token = page.get("NextPageToken")
            if next_token and next_token == page_token:
                logger.warning(f"{operation_name} returned the same page token twice, stopping pagination")
                next_token = None
            page_token = next_token
            if not page_token:
                logger.debug(f"{operation_name}: collected {len(items)} item(s) from {page_count} page(s)")
                return items

    async def list_portfolios(self, page_token: Optional[str] = None) -> CatalogResponse:
        """List service catalog portfolios (a single page)."""
        params: Dict[str, Any] = {}
        if page_token:
            params["PageToken"] = page_token
        return await self._call("list_portfolios", **params)

    async def list_all_portfolios(self) -> List[Dict[str, Any]]:
        return await self._paginate("list_portfolios", "PortfolioDetails")

    async def list_principals_for_portfolio(
        self, portfolio_id: PortfolioId, page_token: Optional[str] = None
    ) -> CatalogResponse:
        params: Dict[str, Any] = {"PortfolioId": portfolio_id}
        if page_token:
            params["PageToken"] = page_token
        return await self._call("list_principals_for_portfolio", **params)

    async def list_all_principals_for_portfolio(self, portfolio_id: PortfolioId) -> List[Dict[str, Any]]:
        return await self._paginate("list_principals_for_portfolio", "Principals", PortfolioId=portfolio_id)

    async def find_portfolio_by_name(self, portfolio_name: str) -> Optional[Dict[str, Any]]:
        """Find the first portfolio whose display name equals portfolio_name."""
        for portfolio in await self.list_all_portfolios():
            if portfolio.get("DisplayName") == portfolio_name:
                return portfolio
        logger.debug(f"No portfolio named '{portfolio_name}'")
        return None

    async def associate_role_with_portfolio(
        self, portfolio_id: PortfolioId, principal_arn: PrincipalArn
    ) -> CatalogResponse:
        """Associate an IAM role with a service catalog portfolio.

        Args:
            portfolio_id: Portfolio identifier.
            principal_arn: ARN of the IAM role to associate.
        """
        return await self._call(
            "associate_principal_with_portfolio",
            PortfolioId=portfolio_id,
            PrincipalARN=principal_arn,
            PrincipalType=PRINCIPAL_TYPE_IAM,
        )

    async def find_product(self, product_name: str) -> CatalogResponse:
        """Find service catalog products by full text search on the name."""
        return await self._call("search_products", Filters={"FullTextSearch": [product_name]})

    async def find_provisioning_artifact(self, product_id: ProductId) -> CatalogResponse:
        """Find the provisioning artifacts of a product."""
        return await self._call("list_provisioning_artifacts", ProductId=product_id)

    async def provision_product(self, request: Mapping[str, Any]) -> CatalogResponse:
        """Provision a product, appending the configured tags to the request tags.

        The request is a ProvisionProduct payload; it is not modified. A
        ProvisionToken is generated when missing so every retry of this call
        carries the same idempotency token.
        """
        payload = dict(request)
        if not payload.get("ProvisionToken"):
            payload["ProvisionToken"] = str(uuid.uuid4())
        payload["Tags"] = [dict(tag) for tag in request.get("Tags") or []] + [dict(tag) for tag in self.provision_tags]
        logger.info(
            f"Provisioning product {payload.get('ProductId')} as '{payload.get('ProvisionedProductName')}'"
        )
        return await self._call("provision_product", **payload)

    async def search_provisioned_products(self, account_name: str) -> CatalogResponse:
        """Search provisioned products by name, e.g. to check a new account's status."""
        return await self._call(
            "search_provisioned_products", Filters={"SearchQuery": [f"name:{account_name}"]}
        )
