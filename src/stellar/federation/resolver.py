"""Stellar address resolution.

Composes discovery and the ``type=name`` query: ``bob*example.com`` is looked
up on the federation server advertised by ``example.com``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Union

from aiohttp import ClientSession

from stellar.federation.address import StellarAddress, parse_address
from stellar.federation.client import FederationClient
from stellar.federation.config import Settings
from stellar.federation.discovery import DiscoveryResolver
from stellar.federation.model import FederationRecord, QueryType
from stellar.federation.transport import AiohttpTransport, Transport

logger = logging.getLogger(__name__)


class FederationResolver:
    """Resolves Stellar addresses end to end.

    Errors from either stage propagate unchanged: ``DiscoveryError``
    subclasses for the domain's stellar.toml, ``QueryError`` subclasses for
    the federation server.
    """

    def __init__(
        self,
        transport: Transport,
        discovery: Optional[DiscoveryResolver] = None,
        client: Optional[FederationClient] = None,
    ) -> None:
        self.discovery = discovery or DiscoveryResolver(transport)
        self.client = client or FederationClient(transport)

    async def discover(self, domain: str) -> str:
        return await self.discovery.discover(domain)

    async def query(
        self, server_url: str, query_type: Union[QueryType, str], value: str
    ) -> FederationRecord:
        return await self.client.query(server_url, query_type, value)

    async def resolve_address(
        self, address: Union[StellarAddress, str]
    ) -> FederationRecord:
        """Resolve a Stellar address using its domain's federation server.

        Args:
            address: StellarAddress or ``name*domain`` string

        Returns:
            NameRecord from the federation server

        Raises:
            MalformedAddress: address is a string that does not parse
            DiscoveryError: the domain's federation server could not be found
            QueryError: the federation server lookup failed
        """
        if not isinstance(address, StellarAddress):
            address = parse_address(address)

        server_url = await self.discovery.discover(address.domain)
        logger.debug("resolve %s via %s", address, server_url)
        return await self.client.query(server_url, QueryType.NAME, str(address))


@asynccontextmanager
async def open_resolver(
    session: Optional[ClientSession] = None, settings: Optional[Settings] = None
) -> AsyncIterator[FederationResolver]:
    """Yield a resolver, creating a short-lived session if none is given."""
    settings = settings or Settings()
    if session is not None:
        yield FederationResolver(
            AiohttpTransport(session, settings.http_timeout, settings.user_agent)
        )
        return

    async with ClientSession() as owned_session:
        yield FederationResolver(
            AiohttpTransport(owned_session, settings.http_timeout, settings.user_agent)
        )


async def resolve_stellar_address(
    address: Union[StellarAddress, str],
    session: Optional[ClientSession] = None,
    settings: Optional[Settings] = None,
) -> FederationRecord:
    """Resolve a Stellar address, discovering the federation server to use."""
    async with open_resolver(session, settings) as resolver:
        return await resolver.resolve_address(address)


async def resolve_federation_server(
    domain: str,
    session: Optional[ClientSession] = None,
    settings: Optional[Settings] = None,
) -> str:
    """Return the federation server advertised by domain."""
    async with open_resolver(session, settings) as resolver:
        return await resolver.discover(domain)
