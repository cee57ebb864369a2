"""Domain models for catalog requests.

Only the shapes svccat itself builds are modelled here; everything the
service returns stays a plain dict.
"""

from typing import Dict, List, Mapping, TypedDict

# Tag the account vending flow stamps on every provisioned product
DEFAULT_PROVISION_TAGS: Dict[str, str] = {"Accelerator": "PBMM"}


class Tag(TypedDict):
    """Key/value tag as accepted by ProvisionProduct."""
    Key: str
    Value: str


class ProvisioningParameter(TypedDict):
    """Key/value launch parameter as accepted by ProvisionProduct."""
    Key: str
    Value: str


class ProductAVMParam(TypedDict):
    """Inputs of the Account Vending Machine product."""
    account_name: str
    account_email: str
    org_unit_name: str


def build_avm_provisioning_parameters(param: ProductAVMParam) -> List[ProvisioningParameter]:
    """Converts AVM inputs into the ProvisioningParameters list of ProvisionProduct."""
    return [
        ProvisioningParameter(Key="AccountName", Value=param["account_name"]),
        ProvisioningParameter(Key="AccountEmail", Value=param["account_email"]),
        ProvisioningParameter(Key="OrgUnitName", Value=param["org_unit_name"]),
    ]


def tags_from_mapping(mapping: Mapping[str, str]) -> List[Tag]:
    """Converts a {key: value} mapping into the SDK's Key/Value tag list."""
    return [Tag(Key=str(key), Value=str(value)) for key, value in mapping.items()]
