"""
Account controlled by a single Ethereum address.

The account stores one 20-byte address and authorizes a host payload when it
carries a `personal_sign` signature from that address over the payload's
keccak hash.
"""

from .containers import ContractContext, SignedClaim
from .contract import AccountContract
from .credentials import STORAGE_KEY_PK, CredentialStore
from .digest import (
    ETHEREUM_MESSAGE_PREFIX,
    auth_hash,
    build_digest,
    personal_message_hash,
)
from .errors import AuthorizationError, VerificationError
from .identity import derive_identity, format_identity
from .signature import encode_signature, normalize_recovery_id, split_signature
from .signer import identity_from_private_key, sign_digest, sign_payload
from .verifier import verify_claim

__all__ = [
    "AccountContract",
    "AuthorizationError",
    "ContractContext",
    "CredentialStore",
    "ETHEREUM_MESSAGE_PREFIX",
    "STORAGE_KEY_PK",
    "SignedClaim",
    "VerificationError",
    "auth_hash",
    "build_digest",
    "derive_identity",
    "encode_signature",
    "format_identity",
    "identity_from_private_key",
    "normalize_recovery_id",
    "personal_message_hash",
    "sign_digest",
    "sign_payload",
    "split_signature",
    "verify_claim",
]
