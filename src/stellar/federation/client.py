"""Federation server queries.

Issues ``GET {server}?type=...&q=...`` lookups and decodes the JSON answer
into the record variant for the lookup kind.
"""

import json
import logging
from typing import Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from stellar.federation.address import StellarAddress
from stellar.federation.errors import (
    FederationServerError,
    InvalidResponse,
    QueryUnavailable,
    RecordNotFound,
)
from stellar.federation.model import (
    RECORD_TYPES,
    Decoded,
    DecodeFailure,
    DecodeResult,
    FederationRecord,
    QueryType,
)
from stellar.federation.strkey import decode_account_id
from stellar.federation.transport import Transport, TransportError

logger = logging.getLogger(__name__)

BODY_SNIPPET_LENGTH = 200

ForwardParameters = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def federation_query_params(
    query_type: QueryType, value: str
) -> List[Tuple[str, str]]:
    return [("type", query_type.value), ("q", value)]


def forward_query_params(forward_parameters: ForwardParameters) -> List[Tuple[str, str]]:
    """Build the parameters of a ``type=forward`` lookup.

    Forward lookups carry no ``q``; the destination institution's
    stellar.toml names the parameters it expects (``forward_type``,
    ``swift``, ``acct``, ...).
    """
    if isinstance(forward_parameters, Mapping):
        forward_parameters = forward_parameters.items()
    params = [("type", QueryType.FORWARD.value)]
    params.extend((str(k), str(v)) for k, v in forward_parameters)
    return params


def _describe_validation_error(error: ValidationError) -> str:
    messages = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"])
        if location:
            messages.append(f"{location}: {detail['msg']}")
        else:
            messages.append(detail["msg"])
    return "; ".join(messages)


def decode_federation_response(
    query_type: QueryType, body: bytes
) -> DecodeResult[FederationRecord]:
    """Decode a federation server JSON answer.

    Args:
        query_type: Lookup kind that produced the answer
        body: Raw response body

    Returns:
        Decoded record of the variant matching query_type, or DecodeFailure
    """
    try:
        document = json.loads(body)
    except (ValueError, RecursionError):
        return DecodeFailure("body is not valid JSON")
    if not isinstance(document, dict):
        return DecodeFailure("body is not a JSON object")
    if document.get("account_id") is None:
        return DecodeFailure("missing account_id")

    record_type = RECORD_TYPES[query_type]
    try:
        return Decoded(record_type.model_validate(document))
    except ValidationError as e:
        return DecodeFailure(_describe_validation_error(e))


class FederationClient:
    """Queries a known federation server."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def query(
        self,
        server_url: str,
        query_type: Union[QueryType, str],
        value: str,
        extra_params: Optional[Mapping[str, str]] = None,
    ) -> FederationRecord:
        """Run a typed federation lookup.

        Args:
            server_url: Federation server endpoint
            query_type: Lookup kind (name, id, txid or forward)
            value: Value sent as the ``q`` parameter
            extra_params: Additional query parameters, appended after ``q``

        Returns:
            NameRecord, ReverseRecord or ForwardRecord depending on query_type

        Raises:
            QueryUnavailable: Transport failure
            RecordNotFound: Server answered 404
            FederationServerError: Server answered any other non-2xx status
            InvalidResponse: Server answered 2xx with an unusable body
        """
        query_type = QueryType(query_type)
        params = federation_query_params(query_type, value)
        if extra_params:
            params.extend(extra_params.items())
        return await self._request(server_url, query_type, params, value)

    async def resolve_stellar_address(
        self, server_url: str, address: Union[StellarAddress, str]
    ) -> FederationRecord:
        return await self.query(server_url, QueryType.NAME, str(address))

    async def resolve_account_id(
        self, server_url: str, account_id: str
    ) -> FederationRecord:
        """Reverse lookup of an account id.

        Raises:
            InvalidAccountId: account_id is not a valid ``G...`` key; no
                request is sent
        """
        decode_account_id(account_id)
        return await self.query(server_url, QueryType.ID, account_id)

    async def resolve_transaction_id(
        self, server_url: str, tx_id: str
    ) -> FederationRecord:
        return await self.query(server_url, QueryType.TXID, tx_id)

    async def resolve_forward(
        self, server_url: str, forward_parameters: ForwardParameters
    ) -> FederationRecord:
        params = forward_query_params(forward_parameters)
        return await self._request(server_url, QueryType.FORWARD, params, None)

    async def _request(
        self,
        server_url: str,
        query_type: QueryType,
        params: List[Tuple[str, str]],
        value: Optional[str],
    ) -> FederationRecord:
        try:
            response = await self._transport.get(server_url, params)
        except TransportError as e:
            logger.debug("query %s %s: %s", query_type.value, server_url, e.reason)
            raise QueryUnavailable(server_url) from e

        if response.status == 404:
            raise RecordNotFound(server_url, query_type.value, value)
        if not response.ok:
            logger.debug(
                "query %s %s: HTTP %d", query_type.value, server_url, response.status
            )
            raise FederationServerError(
                server_url, response.status, response.text(BODY_SNIPPET_LENGTH)
            )

        record = decode_federation_response(query_type, response.body)
        if isinstance(record, DecodeFailure):
            raise InvalidResponse(server_url, record.reason)
        return record.value
