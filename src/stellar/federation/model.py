"""Federation query and record models.

Records are validated pydantic models, one variant per lookup kind, so a
reverse lookup without a ``stellar_address`` or a memo value without a memo
type can never be constructed.
"""

import base64
import binascii
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from stellar.federation.errors import InvalidAccountId
from stellar.federation.strkey import decode_account_id

MAX_TEXT_MEMO_BYTES = 28
HASH_MEMO_BYTES = 32
MAX_ID_MEMO = 2**64 - 1


class QueryType(str, Enum):
    """Federation lookup kind; values are the protocol ``type`` strings."""

    NAME = "name"
    ID = "id"
    TXID = "txid"
    FORWARD = "forward"


class MemoType(str, Enum):
    """Kind of memo a sender must attach to a payment."""

    TEXT = "text"
    ID = "id"
    HASH = "hash"


class FederationRecord(BaseModel):
    """Federation server answer for a single lookup.

    ``memo_type`` and ``memo`` are either both absent or both present and
    consistent with each other.
    """

    model_config = ConfigDict(frozen=True)

    stellar_address: Optional[str] = None
    account_id: str
    memo_type: Optional[MemoType] = None
    memo: Optional[str] = None

    @field_validator("account_id", mode="before")
    @classmethod
    def strip_account_id(cls, v: Any) -> Any:
        """Trim whitespace around the account id."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("account_id")
    @classmethod
    def validate_account_id(cls, v: str) -> str:
        """Require a well formed G... public key."""
        try:
            decode_account_id(v)
        except InvalidAccountId as e:
            raise ValueError(f"malformed account_id: {e.reason}") from None
        return v

    @model_validator(mode="before")
    @classmethod
    def normalize_memo(cls, data: Any) -> Any:
        """Accept id memos sent as JSON numbers."""
        if not isinstance(data, dict) or data.get("memo_type") != MemoType.ID.value:
            return data
        memo = data.get("memo")
        if isinstance(memo, int) and not isinstance(memo, bool):
            return {**data, "memo": str(memo)}
        return data

    @model_validator(mode="after")
    def validate_memo(self) -> "FederationRecord":
        """Check that memo_type and memo agree."""
        if self.memo_type is None and self.memo is None:
            return self
        if self.memo_type is None or self.memo is None:
            raise ValueError("memo_type and memo must be provided together")

        if self.memo_type == MemoType.TEXT:
            if len(self.memo.encode("utf-8")) > MAX_TEXT_MEMO_BYTES:
                raise ValueError("malformed text memo")
        elif self.memo_type == MemoType.ID:
            if not (self.memo.isascii() and self.memo.isdigit()):
                raise ValueError("malformed id memo")
            if int(self.memo) > MAX_ID_MEMO:
                raise ValueError("malformed id memo")
        elif self.memo_type == MemoType.HASH:
            try:
                digest = base64.b64decode(self.memo, validate=True)
            except (binascii.Error, ValueError):
                raise ValueError("malformed base64 hash memo") from None
            if len(digest) != HASH_MEMO_BYTES:
                raise ValueError("malformed hash memo")
        return self

    @property
    def memo_value(self) -> Union[str, int, bytes, None]:
        """Memo converted to its native type: str, int or bytes."""
        if self.memo is None:
            return None
        if self.memo_type == MemoType.ID:
            return int(self.memo)
        if self.memo_type == MemoType.HASH:
            return base64.b64decode(self.memo)
        return self.memo


class NameRecord(FederationRecord):
    """Result of a ``type=name`` lookup."""


class ReverseRecord(FederationRecord):
    """Result of a ``type=id`` or ``type=txid`` lookup."""

    stellar_address: str


class ForwardRecord(FederationRecord):
    """Result of a ``type=forward`` lookup."""


RECORD_TYPES: Dict[QueryType, Type[FederationRecord]] = {
    QueryType.NAME: NameRecord,
    QueryType.ID: ReverseRecord,
    QueryType.TXID: ReverseRecord,
    QueryType.FORWARD: ForwardRecord,
}


T = TypeVar("T")


@dataclass(frozen=True)
class Decoded(Generic[T]):
    value: T


@dataclass(frozen=True)
class DecodeFailure:
    reason: str


DecodeResult = Union[Decoded[T], DecodeFailure]
