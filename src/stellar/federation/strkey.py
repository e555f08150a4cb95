"""StrKey decoding for Stellar account ids.

An account id is the base32 encoding of a version byte, a 32 byte ed25519
public key and a CRC16-XModem checksum of the first two parts (little endian).
"""

import base64
import binascii

from stellar.federation.errors import InvalidAccountId

ACCOUNT_ID_VERSION_BYTE = 6 << 3
ACCOUNT_ID_LENGTH = 56
_PAYLOAD_LENGTH = 32


def crc16_xmodem(data: bytes) -> int:
    crc = 0
    for byte in data:
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ 0x1021) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return crc


def decode_account_id(account_id: str) -> bytes:
    """Decode a ``G...`` account id into its raw public key.

    Args:
        account_id: StrKey encoded account id

    Returns:
        The 32 byte ed25519 public key

    Raises:
        InvalidAccountId: If the value is not a well formed account id
    """
    if len(account_id) != ACCOUNT_ID_LENGTH:
        raise InvalidAccountId(account_id, "unexpected length")
    try:
        raw = base64.b32decode(account_id)
    except (binascii.Error, ValueError):
        raise InvalidAccountId(account_id, "not base32 encoded") from None

    version, payload, checksum = raw[0], raw[1:-2], raw[-2:]
    if version != ACCOUNT_ID_VERSION_BYTE:
        raise InvalidAccountId(account_id, "not an account id")
    if len(payload) != _PAYLOAD_LENGTH:
        raise InvalidAccountId(account_id, "unexpected payload length")
    if crc16_xmodem(raw[:-2]) != int.from_bytes(checksum, "little"):
        raise InvalidAccountId(account_id, "checksum mismatch")
    return payload


def encode_account_id(public_key: bytes) -> str:
    if len(public_key) != _PAYLOAD_LENGTH:
        raise ValueError("public key must be 32 bytes")
    unchecked = bytes([ACCOUNT_ID_VERSION_BYTE]) + public_key
    checksum = crc16_xmodem(unchecked).to_bytes(2, "little")
    return base64.b32encode(unchecked + checksum).decode("ascii")


def is_valid_account_id(account_id: str) -> bool:
    try:
        decode_account_id(account_id)
    except InvalidAccountId:
        return False
    return True
