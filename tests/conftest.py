"""Shared fixtures for CLCred tests."""

import pytest

from clcred.config import CredentialConfig
from clcred.holder import generate_master_secret
from clcred.issuer import generate_issuer_keys
from clcred.schema import CredentialSchema


@pytest.fixture(scope="session")
def small_config() -> CredentialConfig:
    """Production parameters except for 128-bit p', q' so key generation is quick."""
    return CredentialConfig(prime_bits=128)


@pytest.fixture(scope="session")
def person_schema() -> CredentialSchema:
    return CredentialSchema.from_flags({"name": True, "age": False}, name="person")


@pytest.fixture(scope="session")
def key_pair(small_config, person_schema):
    return generate_issuer_keys(person_schema.attribute_names, config=small_config)


@pytest.fixture
def master_secret(small_config):
    return generate_master_secret(small_config)
