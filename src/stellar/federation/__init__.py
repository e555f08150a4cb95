"""
Stellar Federation

This package resolves Stellar addresses (``name*domain``) and account or
transaction identifiers through the federation protocol (SEP-0002).

Key Components:
- address.py: Stellar address parsing
- discovery.py: Federation server discovery through stellar.toml
- client.py: Typed federation server queries (name, id, txid, forward)
- resolver.py: Address resolution combining discovery and query
- transport.py: HTTP transport contract and aiohttp implementation
- __main__.py: CLI interface for resolution

The resolution flow for an address follows these steps:
1. Parse the address into its name and domain parts
2. Fetch https://{domain}/.well-known/stellar.toml and read FEDERATION_SERVER
3. Query the federation server with type=name&q={address}
4. Return the decoded federation record (account id, optional memo)

Reverse lookups (type=id, type=txid) and forward lookups skip discovery and
query a federation server the caller already knows. Nothing is cached or
retried; every call performs its own requests.
"""

from stellar.federation.address import StellarAddress, parse_address
from stellar.federation.client import FederationClient
from stellar.federation.discovery import DiscoveryResolver
from stellar.federation.errors import (
    DiscoveryError,
    DiscoveryUnavailable,
    FederationError,
    FederationServerError,
    FederationServerNotFound,
    InvalidAccountId,
    InvalidConfigurationDocument,
    InvalidResponse,
    MalformedAddress,
    QueryError,
    QueryUnavailable,
    RecordNotFound,
)
from stellar.federation.model import (
    FederationRecord,
    ForwardRecord,
    MemoType,
    NameRecord,
    QueryType,
    ReverseRecord,
)
from stellar.federation.resolver import (
    FederationResolver,
    resolve_federation_server,
    resolve_stellar_address,
)
from stellar.federation.transport import AiohttpTransport, TransportError

__all__ = [
    "AiohttpTransport",
    "DiscoveryError",
    "DiscoveryResolver",
    "DiscoveryUnavailable",
    "FederationClient",
    "FederationError",
    "FederationRecord",
    "FederationResolver",
    "FederationServerError",
    "FederationServerNotFound",
    "ForwardRecord",
    "InvalidAccountId",
    "InvalidConfigurationDocument",
    "InvalidResponse",
    "MalformedAddress",
    "MemoType",
    "NameRecord",
    "QueryError",
    "QueryType",
    "QueryUnavailable",
    "RecordNotFound",
    "ReverseRecord",
    "StellarAddress",
    "TransportError",
    "parse_address",
    "resolve_federation_server",
    "resolve_stellar_address",
]
