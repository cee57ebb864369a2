import dataclasses

import pytest

from svccat.domain.models.catalog import (
    ProductAVMParam, build_avm_provisioning_parameters, tags_from_mapping
)
from svccat.domain.models.retry import RetryPolicy


def test_defaults():
    policy = RetryPolicy()
    assert policy.max_attempts == 10
    assert policy.base_delay == 0.5
    assert policy.max_delay == 20.0
    assert policy.jitter_factor == 0.1
    assert policy.max_elapsed is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_attempts": 0},
        {"base_delay": -0.1},
        {"base_delay": 2.0, "max_delay": 1.0},
        {"jitter_factor": -0.5},
        {"max_elapsed": 0},
    ],
)
def test_invalid_policies_are_rejected(kwargs):
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)


def test_policy_is_immutable():
    policy = RetryPolicy()
    with pytest.raises(dataclasses.FrozenInstanceError):
        policy.max_attempts = 3


def test_build_avm_provisioning_parameters():
    param = ProductAVMParam(account_name="sandbox-1", account_email="ops@example.com", org_unit_name="Sandbox")

    assert build_avm_provisioning_parameters(param) == [
        {"Key": "AccountName", "Value": "sandbox-1"},
        {"Key": "AccountEmail", "Value": "ops@example.com"},
        {"Key": "OrgUnitName", "Value": "Sandbox"},
    ]


def test_tags_from_mapping():
    assert tags_from_mapping({"Accelerator": "PBMM", "Cost": 12}) == [
        {"Key": "Accelerator", "Value": "PBMM"},
        {"Key": "Cost", "Value": "12"},
    ]
