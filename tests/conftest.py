"""
Shared test fixtures for federation resolution tests.

Provides well-formed account ids, sample documents, and a substitutable
transport whose responses are scripted per test.
"""

import json
from typing import Any, Callable, Union
from unittest.mock import AsyncMock

import pytest

from stellar.federation.transport import TransportResponse

ACCOUNT_ID = "GBUFHFEIMKTBQQFDSCAZFOC6MAUE3EHBVE4S4RYKMX62PMWDIDSD44CP"
ZERO_ACCOUNT_ID = "GAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAWHF"
TX_ID = "39be7a5a001bc542c297bf7594f75bd2a8093f024ba598f19f2e71b2745b51f6"


@pytest.fixture
def account_id() -> str:
    return ACCOUNT_ID


@pytest.fixture
def zero_account_id() -> str:
    return ZERO_ACCOUNT_ID


@pytest.fixture
def tx_id() -> str:
    return TX_ID


@pytest.fixture
def make_transport() -> Callable[..., AsyncMock]:
    """Factory for a transport mock returning (or raising) responses in order."""

    def factory(*responses: Union[TransportResponse, Exception]) -> AsyncMock:
        transport = AsyncMock()
        transport.get.side_effect = list(responses)
        return transport

    return factory


@pytest.fixture
def json_response() -> Callable[..., TransportResponse]:
    def factory(payload: Any, status: int = 200) -> TransportResponse:
        return TransportResponse(status=status, body=json.dumps(payload).encode("utf-8"))

    return factory


@pytest.fixture
def text_response() -> Callable[..., TransportResponse]:
    def factory(text: str, status: int = 200) -> TransportResponse:
        return TransportResponse(status=status, body=text.encode("utf-8"))

    return factory


@pytest.fixture
def federation_payload() -> dict:
    """Federation server answer for bob*example.com with a text memo."""
    return {
        "stellar_address": "bob*example.com",
        "account_id": ACCOUNT_ID,
        "memo_type": "text",
        "memo": "42",
    }


@pytest.fixture
def stellar_toml() -> str:
    return "\n".join(
        [
            'VERSION="2.0.0"',
            'NETWORK_PASSPHRASE="Public Global Stellar Network ; September 2015"',
            'FEDERATION_SERVER="https://fed.example.com"',
            "",
            "[DOCUMENTATION]",
            'ORG_NAME="Example"',
        ]
    )
