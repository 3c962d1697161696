"""
Authorization decision for a single signed claim.

Each step runs only if the previous one succeeded:

1. Load the stored credential            -> UNKNOWN_SIGNER
2. Split the signature, check selector    -> SIGNER_MISMATCH
3. Build the digest chain
4. Recover the signer's public key        -> SIGNER_MISMATCH
5. Derive the signer's address
6. Compare with the claimed address       -> SIGNER_MISMATCH
7. Compare with the stored credential     -> UNAUTHORIZED_SIGNER

Nothing in here requests authorization from anyone. The check runs inside
the host's own authorization machinery, and asking for the account's own
authorization from this point would recurse forever.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from omniwallet.crypto import RecoveryError
from omniwallet.host import Env
from omniwallet.types import Bytes32

from .containers import ContractContext, SignedClaim
from .credentials import CredentialStore
from .digest import build_digest
from .errors import AuthorizationError, VerificationError
from .identity import derive_identity, format_identity
from .signature import normalize_recovery_id, split_signature

logger = logging.getLogger(__name__)


def verify_claim(
    env: Env,
    payload_hash: Bytes32,
    claim: SignedClaim,
    contexts: Sequence[ContractContext] = (),
) -> None:
    """
    Decide whether `claim` authorizes `payload_hash` for this account.

    Args:
        env: Host environment of the account.
        payload_hash: 32-byte payload the host is authorizing.
        claim: Signature and the address claimed to have produced it.
        contexts: Invocations being authorized. Not inspected by this policy.

    Raises:
        AuthorizationError: With the code of the first failed check.
    """
    stored = CredentialStore(env).read()

    selector, core_signature = split_signature(claim.signature)
    recovery_id = normalize_recovery_id(selector)

    digest = build_digest(payload_hash, env.crypto.keccak256)

    try:
        public_key = env.crypto.secp256k1_recover(digest, core_signature, recovery_id)
    except RecoveryError as e:
        raise AuthorizationError(VerificationError.SIGNER_MISMATCH, str(e)) from e

    signer = derive_identity(public_key, env.crypto.keccak256)

    if signer != claim.address:
        raise AuthorizationError(
            VerificationError.SIGNER_MISMATCH,
            f"signature recovers to {format_identity(signer)}, "
            f"claimed {format_identity(claim.address)}",
        )

    if signer != stored:
        raise AuthorizationError(
            VerificationError.UNAUTHORIZED_SIGNER,
            f"{format_identity(signer)} does not control {env.contract_address}",
        )

    logger.debug(
        "Authorized %d invocation(s) on %s signed by %s",
        len(contexts),
        env.contract_address,
        format_identity(signer),
    )
