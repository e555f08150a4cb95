"""Federation server discovery.

Fetches ``https://{domain}/.well-known/stellar.toml`` and reads the
``FEDERATION_SERVER`` entry. Nothing is cached: every call fetches the
document again.
"""

import logging
import tomllib
from typing import Any, Dict, Optional

from yarl import URL

from stellar.federation.errors import (
    DiscoveryUnavailable,
    FederationServerNotFound,
    InvalidConfigurationDocument,
)
from stellar.federation.model import Decoded, DecodeFailure, DecodeResult
from stellar.federation.transport import Transport, TransportError

logger = logging.getLogger(__name__)

WELL_KNOWN_PATH = "/.well-known/stellar.toml"
FEDERATION_SERVER_KEY = "FEDERATION_SERVER"


def stellar_toml_url(domain: str) -> str:
    return f"https://{domain}{WELL_KNOWN_PATH}"


def decode_stellar_toml(body: bytes) -> DecodeResult[Dict[str, Any]]:
    """Decode a stellar.toml document.

    Args:
        body: Raw document bytes

    Returns:
        Decoded table of top level keys, or DecodeFailure with the reason
    """
    try:
        text = body.decode("utf-8-sig")
    except UnicodeDecodeError:
        return DecodeFailure("document is not valid UTF-8")
    try:
        document = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        return DecodeFailure(f"malformed TOML: {e}")
    except RecursionError:
        return DecodeFailure("malformed TOML: nested too deeply")
    return Decoded(document)


def extract_federation_server(
    document: Dict[str, Any],
) -> DecodeResult[Optional[str]]:
    """Read the federation server URL from a decoded stellar.toml.

    Args:
        document: Decoded stellar.toml table

    Returns:
        Decoded(None) if the key is absent, Decoded(url) if it holds an
        absolute https URL, DecodeFailure otherwise
    """
    value = document.get(FEDERATION_SERVER_KEY)
    if value is None:
        return Decoded(None)
    if not isinstance(value, str):
        return DecodeFailure(f"{FEDERATION_SERVER_KEY} is not a string")

    value = value.strip()
    try:
        url = URL(value)
    except ValueError:
        return DecodeFailure(f"{FEDERATION_SERVER_KEY} is not a valid URL")
    if not url.is_absolute() or url.scheme != "https" or not url.host:
        return DecodeFailure(f"{FEDERATION_SERVER_KEY} is not an absolute https URL")
    return Decoded(value)


class DiscoveryResolver:
    """Locates the federation server advertised by a domain."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def discover(self, domain: str) -> str:
        """Resolve a domain to its federation server URL.

        Args:
            domain: Domain hosting the stellar.toml document

        Returns:
            The FEDERATION_SERVER URL

        Raises:
            DiscoveryUnavailable: Transport failure or non-2xx status
            InvalidConfigurationDocument: Malformed document or value
            FederationServerNotFound: Document has no FEDERATION_SERVER
        """
        url = stellar_toml_url(domain)
        try:
            response = await self._transport.get(url)
        except TransportError as e:
            logger.debug("discover %s: %s", domain, e.reason)
            raise DiscoveryUnavailable(domain, url) from e

        if not response.ok:
            logger.debug("discover %s: HTTP %d", domain, response.status)
            raise DiscoveryUnavailable(domain, url, response.status)

        document = decode_stellar_toml(response.body)
        if isinstance(document, DecodeFailure):
            raise InvalidConfigurationDocument(domain, document.reason)

        server = extract_federation_server(document.value)
        if isinstance(server, DecodeFailure):
            raise InvalidConfigurationDocument(domain, server.reason)
        if server.value is None:
            raise FederationServerNotFound(domain)

        logger.debug("discover %s: federation server %s", domain, server.value)
        return server.value
