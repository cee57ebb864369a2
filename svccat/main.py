"""Main entry point for the svccat application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import asyncio
import dataclasses
import logging
from typing import Any, Coroutine, Dict, List, Optional

import typer
from botocore.exceptions import BotoCoreError
from typing_extensions import Annotated

# --- Core Layer ---
from svccat.core.command_handler import CommandHandler
from svccat.core.services.catalog_service import CatalogService
from svccat.domain.exceptions import ConfigurationError
# --- Infrastructure Layer ---
from svccat.infrastructure.aws.service_catalog import ServiceCatalogClient
from svccat.infrastructure.cli.display import ConsoleDisplay
from svccat.infrastructure.config.settings import (
    get_aws_profile, get_aws_region, get_config, get_provision_tags, get_retry_policy, load_configuration
)
from svccat.infrastructure.monitoring.logger_setup import level_from_name, setup_logging
from svccat.infrastructure.resilience.api_retry import RetryingRemoteCaller

logger = logging.getLogger(__name__)


# --- Dependency Injection Container (Manual) ---

def create_dependencies(
    profile: Optional[str] = None,
    region: Optional[str] = None,
    max_attempts: Optional[int] = None,
    output_json: bool = False,
    verbose: bool = False,
) -> Dict[str, Any]:
    """Creates and wires up all dependencies for one CLI invocation.

    This acts as the Composition Root. Command-line options win over config.
    """
    dependencies: Dict[str, Any] = {}

    # 1. Configuration and logging
    load_configuration()
    log_level = logging.DEBUG if verbose else level_from_name(get_config('logging.level', 'WARNING'))
    setup_logging(
        log_level=log_level,
        log_file=get_config('logging.file'),
        log_format=get_config('logging.format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
    )

    # 2. Infrastructure adapters
    dependencies['ui'] = ConsoleDisplay()
    try:
        policy = get_retry_policy()
        if max_attempts is not None:
            policy = dataclasses.replace(policy, max_attempts=max_attempts)
        provision_tags = get_provision_tags()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        dependencies['ui'].display_error(str(e))
        raise typer.Exit(code=1)

    dependencies['caller'] = RetryingRemoteCaller(policy=policy)
    try:
        dependencies['catalog_client'] = ServiceCatalogClient(
            profile_name=profile or get_aws_profile(),
            region_name=region or get_aws_region(),
            caller=dependencies['caller'],
            provision_tags=provision_tags,
        )
    except BotoCoreError as e:
        logger.error(f"Failed to initialize the Service Catalog client: {e}", exc_info=True)
        dependencies['ui'].display_error(f"Could not create AWS client: {e}")
        raise typer.Exit(code=1)

    # 3. Core services
    dependencies['catalog_service'] = CatalogService(
        gateway=dependencies['catalog_client'],
        ui=dependencies['ui'],
        output_json=output_json,
    )
    dependencies['command_handler'] = CommandHandler(
        catalog_service=dependencies['catalog_service'],
        ui=dependencies['ui'],
    )
    logger.debug("All dependencies initialized successfully.")
    return dependencies


# --- Typer App Definition ---
app = typer.Typer(
    name="svccat",
    help="svccat: AWS Service Catalog helper with throttling-aware retries.",
    add_completion=False,
)


def run_async(coro: Coroutine[Any, Any, int]) -> None:
    """Runs a handler coroutine from a sync Typer command and exits with its code."""
    exit_code = asyncio.run(coro)
    if exit_code:
        raise typer.Exit(code=exit_code)


def _handler(ctx: typer.Context) -> CommandHandler:
    return create_dependencies(**(ctx.obj or {}))['command_handler']


def _parse_pairs(values: Optional[List[str]], option: str) -> List[Dict[str, str]]:
    """Turns repeated KEY=VALUE options into the SDK's Key/Value list."""
    pairs = []
    for raw in values or []:
        key, sep, value = raw.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected KEY=VALUE, got '{raw}'", param_hint=option)
        pairs.append({"Key": key, "Value": value})
    return pairs


@app.callback()
def main_callback(
    ctx: typer.Context,
    profile: Annotated[Optional[str], typer.Option("--profile", help="AWS profile to use.")] = None,
    region: Annotated[Optional[str], typer.Option("--region", help="AWS region to use.")] = None,
    max_attempts: Annotated[
        Optional[int],
        typer.Option("--max-attempts", min=1, help="Total attempts per call while throttled.")
    ] = None,
    output_json: Annotated[bool, typer.Option("--json", help="Print raw service responses as JSON.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """Global options shared by every command."""
    ctx.obj = {
        'profile': profile,
        'region': region,
        'max_attempts': max_attempts,
        'output_json': output_json,
        'verbose': verbose,
    }


# --- CLI Commands ---

@app.command(name="list-portfolios")
def list_portfolios_command(ctx: typer.Context):
    """Lists all portfolios."""
    run_async(_handler(ctx).handle_list_portfolios())


@app.command(name="list-principals")
def list_principals_command(
    ctx: typer.Context,
    portfolio_id: Annotated[str, typer.Argument(help="Portfolio identifier.")],
):
    """Lists the principals associated with a portfolio."""
    run_async(_handler(ctx).handle_list_principals(portfolio_id))


@app.command(name="find-portfolio")
def find_portfolio_command(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Portfolio display name.")],
):
    """Finds a portfolio by its display name."""
    run_async(_handler(ctx).handle_find_portfolio(name))


@app.command(name="associate-role")
def associate_role_command(
    ctx: typer.Context,
    portfolio_id: Annotated[str, typer.Argument(help="Portfolio identifier.")],
    role_arn: Annotated[str, typer.Argument(help="ARN of the IAM role.")],
):
    """Associates an IAM role with a portfolio."""
    run_async(_handler(ctx).handle_associate_role(portfolio_id, role_arn))


@app.command(name="find-product")
def find_product_command(
    ctx: typer.Context,
    product_name: Annotated[str, typer.Argument(help="Text to search product names for.")],
):
    """Searches products by name."""
    run_async(_handler(ctx).handle_find_product(product_name))


@app.command(name="list-artifacts")
def list_artifacts_command(
    ctx: typer.Context,
    product_id: Annotated[str, typer.Argument(help="Product identifier.")],
):
    """Lists the provisioning artifacts of a product."""
    run_async(_handler(ctx).handle_list_artifacts(product_id))


@app.command(name="provision")
def provision_command(
    ctx: typer.Context,
    product_id: Annotated[str, typer.Option("--product-id", help="Product identifier.")],
    artifact_id: Annotated[str, typer.Option("--artifact-id", help="Provisioning artifact identifier.")],
    name: Annotated[str, typer.Option("--name", help="Name of the provisioned product.")],
    parameter: Annotated[
        Optional[List[str]], typer.Option("--parameter", "-p", help="Launch parameter as KEY=VALUE (repeatable).")
    ] = None,
    tag: Annotated[Optional[List[str]], typer.Option("--tag", "-t", help="Tag as KEY=VALUE (repeatable).")] = None,
    token: Annotated[Optional[str], typer.Option("--token", help="Idempotency token.")] = None,
):
    """Provisions a product."""
    request: Dict[str, Any] = {
        "ProductId": product_id,
        "ProvisioningArtifactId": artifact_id,
        "ProvisionedProductName": name,
        "ProvisioningParameters": _parse_pairs(parameter, "--parameter"),
        "Tags": _parse_pairs(tag, "--tag"),
    }
    if token:
        request["ProvisionToken"] = token
    run_async(_handler(ctx).handle_provision(request))


@app.command(name="provision-account")
def provision_account_command(
    ctx: typer.Context,
    product_id: Annotated[str, typer.Option("--product-id", help="Account vending product identifier.")],
    artifact_id: Annotated[str, typer.Option("--artifact-id", help="Provisioning artifact identifier.")],
    account_name: Annotated[str, typer.Option("--account-name", help="Name of the new account.")],
    account_email: Annotated[str, typer.Option("--account-email", help="Root email of the new account.")],
    org_unit: Annotated[str, typer.Option("--org-unit", help="Organizational unit to place the account in.")],
    token: Annotated[Optional[str], typer.Option("--token", help="Idempotency token.")] = None,
):
    """Provisions a new account through the account vending product."""
    run_async(_handler(ctx).handle_provision_account(
        product_id, artifact_id, account_name, account_email, org_unit, token
    ))


@app.command(name="search-provisioned")
def search_provisioned_command(
    ctx: typer.Context,
    account_name: Annotated[str, typer.Argument(help="Provisioned product (account) name.")],
):
    """Searches provisioned products by name to check their status."""
    run_async(_handler(ctx).handle_search_provisioned(account_name))


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
