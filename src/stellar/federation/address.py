"""Stellar address parsing.

A Stellar address has the form ``name*domain`` (e.g. ``bob*example.com``).
Parsing is purely syntactic: the domain is only checked for resolvability when
its stellar.toml is fetched.
"""

from pydantic import BaseModel, ConfigDict

from stellar.federation.errors import MalformedAddress

ADDRESS_SEPARATOR = "*"


class StellarAddress(BaseModel):
    """Parsed ``name*domain`` Stellar address."""

    model_config = ConfigDict(frozen=True)

    name: str
    domain: str

    def __str__(self) -> str:
        return f"{self.name}{ADDRESS_SEPARATOR}{self.domain}"


def parse_address(value: str) -> StellarAddress:
    """Parse a ``name*domain`` string.

    Args:
        value: Stellar address to parse

    Returns:
        StellarAddress with the name and domain parts

    Raises:
        MalformedAddress: If the separator does not occur exactly once or
            either part is empty
    """
    parts = value.split(ADDRESS_SEPARATOR)
    if len(parts) == 1:
        raise MalformedAddress(value, f"missing '{ADDRESS_SEPARATOR}' separator")
    if len(parts) > 2:
        raise MalformedAddress(value, f"more than one '{ADDRESS_SEPARATOR}' separator")

    name, domain = parts
    if len(name) == 0:
        raise MalformedAddress(value, "empty name")
    if len(domain) == 0:
        raise MalformedAddress(value, "empty domain")

    return StellarAddress(name=name, domain=domain)


def address_predicate(value: str) -> bool:
    """Check if value looks like a Stellar address rather than an identifier.

    Args:
        value: String to check

    Returns:
        True if value contains the address separator
    """
    return ADDRESS_SEPARATOR in value
