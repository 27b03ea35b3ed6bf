"""Test configuration and fixtures."""

import pytest


@pytest.fixture
def sample_identifier() -> dict:
    """Identifier record as a key manager would store it."""
    return {
        "did": "did:example:1",
        "provider": "did:ethr",
        "alias": "alice",
        "controllerKeyId": "k1",
        "keys": [{"kid": "k1", "type": "Secp256k1", "kms": "snap"}],
        "services": [],
    }


@pytest.fixture
def sample_credential() -> dict:
    """Credential table entry keyed by its hash."""
    return {
        "hash": "0xabc",
        "issuer": "did:example:1",
        "subject": "did:example:2",
        "issuanceDate": "2024-01-01T00:00:00Z",
        "parsedCredential": {"type": ["VerifiableCredential"], "credentialSubject": {"name": "Bob"}},
    }
