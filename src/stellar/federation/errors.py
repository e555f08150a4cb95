"""Federation error taxonomy.

Every failure raised by this package is a ``FederationError``. Failures are
grouped by the stage that produced them so callers can tell a misconfigured
domain (``DiscoveryError``) apart from a misbehaving federation server
(``QueryError``).
"""

from typing import Optional


class FederationError(Exception):
    """Base exception for all federation resolution errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MalformedAddress(FederationError):
    """The input is not a ``name*domain`` Stellar address."""

    def __init__(self, address: str, reason: str) -> None:
        self.address = address
        self.reason = reason
        super().__init__(f"Malformed stellar address {address!r}: {reason}")


class InvalidAccountId(FederationError):
    """The value is not a valid Stellar account id."""

    def __init__(self, account_id: str, reason: str) -> None:
        self.account_id = account_id
        self.reason = reason
        super().__init__(f"Invalid account id {account_id!r}: {reason}")


class DiscoveryError(FederationError):
    """Base for failures locating a domain's federation server."""

    def __init__(self, domain: str, message: str) -> None:
        self.domain = domain
        super().__init__(message)


class DiscoveryUnavailable(DiscoveryError):
    """The stellar.toml document could not be fetched."""

    def __init__(self, domain: str, url: str, status: Optional[int] = None) -> None:
        self.url = url
        self.status = status
        message = f"Unable to fetch {url}"
        if status is not None:
            message += f": HTTP {status}"
        super().__init__(domain, message)


class InvalidConfigurationDocument(DiscoveryError):
    """The stellar.toml document is not well formed."""

    def __init__(self, domain: str, reason: str) -> None:
        self.reason = reason
        super().__init__(domain, f"Invalid stellar.toml for {domain}: {reason}")


class FederationServerNotFound(DiscoveryError):
    """The stellar.toml document does not advertise a federation server."""

    def __init__(self, domain: str) -> None:
        super().__init__(domain, f"No FEDERATION_SERVER in stellar.toml for {domain}")


class QueryError(FederationError):
    """Base for failures querying a federation server."""

    def __init__(self, server_url: str, message: str) -> None:
        self.server_url = server_url
        super().__init__(message)


class QueryUnavailable(QueryError):
    """The federation server could not be reached."""

    def __init__(self, server_url: str) -> None:
        super().__init__(server_url, f"Unable to reach federation server {server_url}")


class RecordNotFound(QueryError):
    """The federation server has no record for the query."""

    def __init__(self, server_url: str, query_type: str, value: Optional[str]) -> None:
        self.query_type = query_type
        self.value = value
        super().__init__(
            server_url, f"No federation record for {query_type} {value!r} at {server_url}"
        )


class FederationServerError(QueryError):
    """The federation server answered with an unexpected error status."""

    def __init__(self, server_url: str, status: int, body: str) -> None:
        self.status = status
        self.body = body
        message = f"Federation server {server_url} returned HTTP {status}"
        if body:
            message += f": {body}"
        super().__init__(server_url, message)


class InvalidResponse(QueryError):
    """The federation server answered 2xx with an unusable body."""

    def __init__(self, server_url: str, reason: str) -> None:
        self.reason = reason
        super().__init__(
            server_url, f"Invalid response from federation server {server_url}: {reason}"
        )
