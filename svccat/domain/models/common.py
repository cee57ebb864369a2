"""Defines common Value Objects used across different domain contexts.

These objects represent simple identifiers and payloads exchanged with the
catalog service, giving call sites some semantic clarity.
"""

from typing import Any, Dict, NewType

# === Catalog identifiers ===

# Using NewType for semantic clarity, although they are strings at runtime.
PortfolioId = NewType("PortfolioId", str)                       # e.g. 'port-abc123'
ProductId = NewType("ProductId", str)                           # e.g. 'prod-abc123'
ProvisioningArtifactId = NewType("ProvisioningArtifactId", str)  # e.g. 'pa-abc123'
PrincipalArn = NewType("PrincipalArn", str)                     # IAM role/user ARN

# === Remote call context ===
OperationName = NewType("OperationName", str)  # SDK method name, e.g. 'list_portfolios'

# Raw response returned by the SDK, passed through unchanged
CatalogResponse = Dict[str, Any]
