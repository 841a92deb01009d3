"""
Cryptographic keys and key resolution.

Supports the two key algorithms used on the ledger:
- ED25519: 32-byte public keys
- ECDSA_SECP256K1: 33-byte compressed public keys

Keys travel through staged operations in their wire form:
- PublicKey  <-> DER-encoded hex string
- KeyList    <-> {"keyList": {"threshold": n, "keys": [...]}}

KeyResolver turns caller input (structured keys, the "current_signer"
sentinel, public key strings, private key strings) into a usable key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from ledgerkit.errors import InvalidKeyFormat, SignerUnavailable

if TYPE_CHECKING:
    from ledgerkit.ledger.interfaces import Signer

logger = logging.getLogger(__name__)

CURRENT_SIGNER = "current_signer"

_ED25519_PUBLIC_DER_PREFIX = bytes.fromhex("302a300506032b6570032100")
_ECDSA_PUBLIC_DER_PREFIX = bytes.fromhex("302d300706052b8104000a032200")
_ED25519_PRIVATE_DER_PREFIX = bytes.fromhex("302e020100300506032b657004220420")
_ECDSA_PRIVATE_DER_PREFIX = bytes.fromhex("3030020100300706052b8104000a04220420")


class KeyAlgorithm(str, Enum):
    """Supported key algorithms."""

    ED25519 = "ED25519"
    ECDSA_SECP256K1 = "ECDSA_SECP256K1"


def _decode_hex(value: str) -> tuple[bytes, bool]:
    """Decode a hex string, returning (bytes, had_0x_prefix)."""
    text = value.strip()
    prefixed = text.lower().startswith("0x")
    if prefixed:
        text = text[2:]
    try:
        return bytes.fromhex(text), prefixed
    except ValueError as e:
        raise InvalidKeyFormat(value) from e


def _compress_secp256k1(raw: bytes) -> bytes:
    point = ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), raw)
    return point.public_bytes(
        serialization.Encoding.X962,
        serialization.PublicFormat.CompressedPoint,
    )


# =============================================================================
# Key Types
# =============================================================================


@dataclass(frozen=True, slots=True)
class PublicKey:
    """
    A public key.

    Example:
        key = PublicKey.from_string("302a300506032b6570032100...")
        key.algorithm       # KeyAlgorithm.ED25519
        key.to_string_der() # DER hex, the wire form
    """

    algorithm: KeyAlgorithm
    raw: bytes

    @classmethod
    def from_string(cls, value: str) -> PublicKey:
        """
        Parse a public key string.

        Accepts DER hex, raw 32-byte hex (ED25519) or compressed/uncompressed
        hex (ECDSA_SECP256K1). A "0x" prefix is only valid for ECDSA keys.

        Raises:
            InvalidKeyFormat: If the string is not a valid public key
        """
        data, prefixed = _decode_hex(value)

        try:
            if data.startswith(_ED25519_PUBLIC_DER_PREFIX) and not prefixed:
                raw = data[len(_ED25519_PUBLIC_DER_PREFIX) :]
                Ed25519PublicKey.from_public_bytes(raw)
                return cls(KeyAlgorithm.ED25519, raw)

            if data.startswith(_ECDSA_PUBLIC_DER_PREFIX):
                raw = data[len(_ECDSA_PUBLIC_DER_PREFIX) :]
                return cls(KeyAlgorithm.ECDSA_SECP256K1, _compress_secp256k1(raw))

            if len(data) == 32 and not prefixed:
                Ed25519PublicKey.from_public_bytes(data)
                return cls(KeyAlgorithm.ED25519, data)

            if (len(data) == 33 and data[0] in (2, 3)) or (len(data) == 65 and data[0] == 4):
                return cls(KeyAlgorithm.ECDSA_SECP256K1, _compress_secp256k1(data))
        except ValueError as e:
            raise InvalidKeyFormat(value) from e

        raise InvalidKeyFormat(value)

    def to_string_der(self) -> str:
        """Return the DER-encoded hex form."""
        prefix = (
            _ED25519_PUBLIC_DER_PREFIX
            if self.algorithm == KeyAlgorithm.ED25519
            else _ECDSA_PUBLIC_DER_PREFIX
        )
        return (prefix + self.raw).hex()

    def to_string_raw(self) -> str:
        """Return the raw hex form."""
        return self.raw.hex()

    def __str__(self) -> str:
        return self.to_string_der()


@dataclass(frozen=True, slots=True)
class KeyList:
    """A threshold set of keys; `threshold` of them must sign."""

    keys: tuple[PublicKey, ...] = ()
    threshold: int | None = None

    def with_key(self, key: PublicKey) -> KeyList:
        """Return a new KeyList with the key appended."""
        return KeyList(keys=(*self.keys, key), threshold=self.threshold)

    def __len__(self) -> int:
        return len(self.keys)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire form."""
        data: dict[str, Any] = {"keys": [key.to_string_der() for key in self.keys]}
        if self.threshold is not None:
            data["threshold"] = self.threshold
        return {"keyList": data}


Key = Union[PublicKey, KeyList]


def key_to_wire(key: Key) -> str | dict[str, Any]:
    """Convert a key to its wire form for a staged operation body."""
    if isinstance(key, KeyList):
        return key.to_dict()
    return key.to_string_der()


def key_from_wire(value: str | dict[str, Any]) -> Key:
    """
    Parse a key from its wire form.

    Raises:
        InvalidKeyFormat: If the value is not a wire-form key
    """
    if isinstance(value, str):
        return PublicKey.from_string(value)
    if isinstance(value, dict) and isinstance(value.get("keyList"), dict):
        body = value["keyList"]
        return KeyList(
            keys=tuple(PublicKey.from_string(k) for k in body.get("keys", [])),
            threshold=body.get("threshold"),
        )
    raise InvalidKeyFormat(str(value))


# =============================================================================
# Private Key Derivation
# =============================================================================


def _ed25519_public(raw_private: bytes) -> PublicKey:
    private = Ed25519PrivateKey.from_private_bytes(raw_private)
    raw = private.public_key().public_bytes(
        serialization.Encoding.Raw,
        serialization.PublicFormat.Raw,
    )
    return PublicKey(KeyAlgorithm.ED25519, raw)


def _ecdsa_public(raw_private: bytes) -> PublicKey:
    private = ec.derive_private_key(int.from_bytes(raw_private, "big"), ec.SECP256K1())
    raw = private.public_key().public_bytes(
        serialization.Encoding.X962,
        serialization.PublicFormat.CompressedPoint,
    )
    return PublicKey(KeyAlgorithm.ECDSA_SECP256K1, raw)


def detect_private_key_algorithm(value: str) -> KeyAlgorithm:
    """
    Guess the algorithm of a private key string from its shape.

    "0x" prefix and the secp256k1 DER prefix mean ECDSA; everything else is
    tried as ED25519 first.
    """
    text = value.strip().lower()
    if text.startswith("0x"):
        return KeyAlgorithm.ECDSA_SECP256K1
    if text.startswith(_ECDSA_PRIVATE_DER_PREFIX.hex()):
        return KeyAlgorithm.ECDSA_SECP256K1
    return KeyAlgorithm.ED25519


def derive_public_key(private_key: str) -> PublicKey:
    """
    Derive the public key of a private key string.

    Raises:
        InvalidKeyFormat: If the string is not a valid private key of either algorithm
    """
    data, _ = _decode_hex(private_key)

    if data.startswith(_ED25519_PRIVATE_DER_PREFIX):
        candidates = [(KeyAlgorithm.ED25519, data[len(_ED25519_PRIVATE_DER_PREFIX) :])]
    elif data.startswith(_ECDSA_PRIVATE_DER_PREFIX):
        candidates = [(KeyAlgorithm.ECDSA_SECP256K1, data[len(_ECDSA_PRIVATE_DER_PREFIX) :])]
    else:
        first = detect_private_key_algorithm(private_key)
        second = (
            KeyAlgorithm.ED25519
            if first == KeyAlgorithm.ECDSA_SECP256K1
            else KeyAlgorithm.ECDSA_SECP256K1
        )
        candidates = [(first, data), (second, data)]

    for algorithm, raw in candidates:
        if len(raw) != 32:
            continue
        try:
            if algorithm == KeyAlgorithm.ED25519:
                return _ed25519_public(raw)
            return _ecdsa_public(raw)
        except ValueError:
            continue

    raise InvalidKeyFormat(private_key)


# =============================================================================
# Resolver
# =============================================================================


class KeyResolver:
    """
    Resolves key-like input into a Key.

    Rules, in order:
    1. PublicKey / KeyList / wire-form dict -> returned as a key
    2. "current_signer" (any case) -> the operator's public key
    3. Public key string -> parsed
    4. Private key string -> derived public key (logged as a caution)
    5. Anything else -> InvalidKeyFormat

    Example:
        resolver = KeyResolver(signer)
        resolver.resolve("current_signer")   # operator key
        resolver.resolve(None)               # None
    """

    def __init__(self, signer: Signer | None = None):
        self._signer = signer

    @staticmethod
    def is_current_signer(value: Any) -> bool:
        """Whether the value is the operator-key sentinel."""
        return isinstance(value, str) and value.strip().lower() == CURRENT_SIGNER

    def operator_public_key(self) -> PublicKey:
        """
        Return the operator's public key.

        Raises:
            SignerUnavailable: If there is no signer or it cannot produce a key
        """
        if self._signer is None:
            raise SignerUnavailable()
        try:
            key = self._signer.public_key()
        except Exception as e:
            raise SignerUnavailable(f"Signer could not provide its public key: {e}") from e
        if key is None:
            raise SignerUnavailable("Signer has no public key.")
        return key

    def resolve(self, value: Any) -> Key | None:
        """
        Resolve key input.

        Returns:
            The resolved key, or None when value is None

        Raises:
            SignerUnavailable: For "current_signer" without a usable signer
            InvalidKeyFormat: For anything that is not a key
        """
        if value is None:
            return None
        if isinstance(value, (PublicKey, KeyList)):
            return value
        if isinstance(value, dict):
            return key_from_wire(value)
        if not isinstance(value, str):
            raise InvalidKeyFormat(repr(value))

        if self.is_current_signer(value):
            logger.info("[keys] Substituting 'current_signer' with the signer's public key")
            return self.operator_public_key()

        try:
            return PublicKey.from_string(value)
        except InvalidKeyFormat:
            pass

        logger.warning(
            "[keys] Deriving a public key from a private key string. "
            "Passing private keys for public-facing fields is not recommended."
        )
        return derive_public_key(value)
