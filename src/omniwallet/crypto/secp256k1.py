"""
secp256k1 primitives for Ethereum-style recoverable signatures.

Ethereum signs with ECDSA over secp256k1 and ships one extra bit with every
signature: the parity of the y-coordinate of the nonce point R. Given the
digest, (r, s) and that parity, the signer's public key can be recomputed:

    R = lift_x(r, parity)
    Q = r^-1 * (s*R - e*G)

where e is the digest interpreted as a big-endian integer. Comparing the
address of Q with an expected address authenticates the signature without
ever shipping the public key.

Signing goes through the `cryptography` package. It has no recovery API, so
recovery is done here with affine point arithmetic.

Wire format notes:
- Public keys are 65-byte uncompressed points: 0x04 || x || y.
- Signatures are 64-byte r || s, each 32 bytes big-endian.
- Only low-s signatures (s <= n/2) are recoverable, as on the host platform.
"""

from __future__ import annotations

from typing import Final

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed, decode_dss_signature

from omniwallet.types import Bytes32, Bytes64, Bytes65, OmniwalletError

UNCOMPRESSED_PUBKEY_SIZE = 65
"""Uncompressed secp256k1 public key: 0x04 + 32-byte x + 32-byte y."""

UNCOMPRESSED_PUBKEY_PREFIX: Final = 0x04
"""SEC1 marker byte of an uncompressed point."""

_P: Final = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
"""secp256k1 field prime."""

_N: Final = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
"""secp256k1 curve order."""

_HALF_N: Final = _N // 2
"""Upper bound of a normalized (low) s value."""

_Gx: Final = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
"""secp256k1 generator x-coordinate."""

_Gy: Final = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8
"""secp256k1 generator y-coordinate."""

_G: Final = (_Gx, _Gy)


class RecoveryError(OmniwalletError, ValueError):
    """No public key can be recovered from the given digest and signature."""


def _modinv(a: int, m: int) -> int:
    """Compute modular inverse using Fermat's little theorem (m must be prime)."""
    return pow(a, m - 2, m)


def _point_add(p1: tuple[int, int] | None, p2: tuple[int, int] | None) -> tuple[int, int] | None:
    """Add two secp256k1 curve points."""
    if p1 is None:
        return p2
    if p2 is None:
        return p1

    x1, y1 = p1
    x2, y2 = p2

    if x1 == x2 and y1 != y2:
        return None

    if x1 == x2:
        # Point doubling.
        lam = (3 * x1 * x1 * _modinv(2 * y1, _P)) % _P
    else:
        lam = ((y2 - y1) * _modinv(x2 - x1, _P)) % _P

    x3 = (lam * lam - x1 - x2) % _P
    y3 = (lam * (x1 - x3) - y1) % _P
    return (x3, y3)


def _point_mul(k: int, point: tuple[int, int] | None) -> tuple[int, int] | None:
    """Scalar multiplication using double-and-add."""
    result = None
    addend = point
    while k:
        if k & 1:
            result = _point_add(result, addend)
        addend = _point_add(addend, addend)
        k >>= 1
    return result


def _lift_x(x: int, parity: int) -> tuple[int, int]:
    """
    Find the curve point with the given x-coordinate and y parity.

    Raises:
        RecoveryError: If no point on the curve has this x-coordinate.
    """
    # Solve y^2 = x^3 + 7 (mod p).
    #
    # p = 3 (mod 4), so a square root is alpha^((p+1)/4) when one exists.
    alpha = (pow(x, 3, _P) + 7) % _P
    beta = pow(alpha, (_P + 1) // 4, _P)
    if (beta * beta) % _P != alpha:
        raise RecoveryError(f"r is not the x-coordinate of a curve point: {x:#x}")

    return (x, beta) if beta & 1 == parity else (x, _P - beta)


def _encode_point(point: tuple[int, int]) -> Bytes65:
    """Encode a curve point as a 65-byte uncompressed public key."""
    x, y = point
    return Bytes65(bytes([UNCOMPRESSED_PUBKEY_PREFIX]) + x.to_bytes(32, "big") + y.to_bytes(32, "big"))


def recover_public_key(digest: Bytes32, signature: Bytes64, recovery_id: int) -> Bytes65:
    """
    Recover the signer's public key from a recoverable ECDSA signature.

    Args:
        digest: 32-byte message digest that was signed.
        signature: 64-byte signature (r || s).
        recovery_id: Parity of R's y-coordinate, 0 or 1.

    Returns:
        65-byte uncompressed public key (0x04 || x || y).

    Raises:
        RecoveryError: If the signature is malformed or recovers no key.
    """
    if recovery_id not in (0, 1):
        raise RecoveryError(f"Recovery id must be 0 or 1, got {recovery_id}")

    digest = Bytes32(digest)
    signature = Bytes64(signature)

    r = int.from_bytes(signature[:32], "big")
    s = int.from_bytes(signature[32:], "big")

    if not 0 < r < _N:
        raise RecoveryError("Signature r is out of range")
    if not 0 < s < _N:
        raise RecoveryError("Signature s is out of range")
    if s > _HALF_N:
        raise RecoveryError("Signature s is not normalized to the lower half of the curve order")

    nonce_point = _lift_x(r, recovery_id)

    # Q = r^-1 * (s*R - e*G), computed as u1*G + u2*R.
    e = int.from_bytes(digest, "big") % _N
    r_inv = _modinv(r, _N)
    u1 = (-e * r_inv) % _N
    u2 = (s * r_inv) % _N

    public_point = _point_add(_point_mul(u1, _G), _point_mul(u2, nonce_point))
    if public_point is None:
        raise RecoveryError("Recovered public key is the point at infinity")

    return _encode_point(public_point)


def generate_private_key() -> Bytes32:
    """
    Generate a new secp256k1 private key.

    Returns:
        32-byte private key scalar.
    """
    private_key = ec.generate_private_key(ec.SECP256K1())
    return Bytes32(private_key.private_numbers().private_value.to_bytes(32, "big"))


def _load_private_key(private_key_bytes: Bytes32) -> ec.EllipticCurvePrivateKey:
    if len(private_key_bytes) != 32:
        raise ValueError(f"Private key must be 32 bytes, got {len(private_key_bytes)}")
    return ec.derive_private_key(int.from_bytes(private_key_bytes, "big"), ec.SECP256K1())


def public_key_from_private(private_key_bytes: Bytes32) -> Bytes65:
    """
    Derive the uncompressed public key of a private key.

    Args:
        private_key_bytes: 32-byte secp256k1 private key scalar.

    Returns:
        65-byte uncompressed public key (0x04 || x || y).
    """
    private_key = _load_private_key(private_key_bytes)
    return Bytes65(
        private_key.public_key().public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.UncompressedPoint,
        )
    )


def sign_recoverable(private_key_bytes: Bytes32, digest: Bytes32) -> tuple[Bytes64, int]:
    """
    Sign a 32-byte digest and compute the recovery id.

    Args:
        private_key_bytes: 32-byte secp256k1 private key scalar.
        digest: 32-byte digest to sign (not hashed again).

    Returns:
        Tuple of (signature, recovery_id).
        - signature: 64-byte low-s signature (r || s)
        - recovery_id: 0 or 1
    """
    digest = Bytes32(digest)
    private_key = _load_private_key(private_key_bytes)

    # The digest is already a keccak hash.
    #
    # Prehashed only checks the length, and SHA256 has the same 32-byte size.
    der_signature = private_key.sign(
        bytes(digest), ec.ECDSA(Prehashed(hashes.SHA256()), deterministic_signing=True)
    )
    r, s = decode_dss_signature(der_signature)

    # Flip s into the lower half; this also flips the parity of R.
    if s > _HALF_N:
        s = _N - s

    signature = Bytes64(r.to_bytes(32, "big") + s.to_bytes(32, "big"))
    public_key = public_key_from_private(private_key_bytes)

    # OpenSSL does not expose R, so try both parities.
    for recovery_id in (0, 1):
        try:
            candidate = recover_public_key(digest, signature, recovery_id)
        except RecoveryError:
            continue
        if candidate == public_key:
            return signature, recovery_id

    raise RecoveryError("Neither recovery id reproduces the signing key")
