"""
Account contract CLI entry point.

Inspect the digest chain and operate an account stored in a local SQLite ledger.

Usage::

    python -m omniwallet digest 0xeb5afeca2ffd697329dc3454f38df97b2ce104819a1e523e388a96fb9d41a10d
    python -m omniwallet identity 0x04...
    python -m omniwallet init --db account.db 0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266
    python -m omniwallet extend-ttl --db account.db --sequence 1000
    python -m omniwallet check --db account.db PAYLOAD ADDRESS SIGNATURE

Global options:
    -v            Enable debug logging
    --no-color    Disable colored logging output

Ledger options (init, extend-ttl, check):
    --db          Path to the SQLite ledger
    --address     Contract address inside the ledger (default: CACCOUNT)
    --sequence    Current ledger sequence number (default: 0)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from omniwallet.account import (
    AccountContract,
    AuthorizationError,
    SignedClaim,
    auth_hash,
    build_digest,
    derive_identity,
    format_identity,
)
from omniwallet.host import Env, HostError, Ledger, SQLiteDeployer, SQLiteStorage
from omniwallet.types import Bytes32, Bytes65, DecodeError

logger = logging.getLogger(__name__)

DEFAULT_CONTRACT_ADDRESS = "CACCOUNT"
"""Contract address used when none is given."""


class LevelColorFormatter(logging.Formatter):
    """Prefix each record with its level name, colored by severity."""

    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: "\x1b[38;5;244m",
        logging.INFO: "\x1b[38;5;40m",
        logging.WARNING: "\x1b[38;5;220m",
        logging.ERROR: "\x1b[38;5;196m",
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        return f"{color}{record.levelname.lower()}{self.RESET} {record.getMessage()}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Send log records to stderr, one short line each."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter("%(levelname)s %(message)s") if no_color else LevelColorFormatter()
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)

def open_account(db_path: Path, address: str, sequence: int) -> tuple[AccountContract, SQLiteStorage]:
    """
    Open the account stored in an SQLite ledger, deploying it on first use.

    Args:
        db_path: Path to the SQLite file.
        address: Contract address inside the ledger.
        sequence: Current ledger sequence number.

    Returns:
        Tuple of (contract, storage). The caller closes the storage.
    """
    ledger = Ledger(sequence=sequence)
    storage = SQLiteStorage(db_path, ledger)
    deployer = SQLiteDeployer(storage.connection, ledger)
    if not deployer.is_deployed(address):
        deployer.deploy(address)

    env = Env(storage=storage, deployer=deployer, contract_address=address)
    return AccountContract(env), storage


def cmd_digest(args: argparse.Namespace) -> int:
    """Print every stage of the digest chain for a payload."""
    payload = Bytes32(args.payload)
    print(f"payload:   0x{payload.hex()}")
    print(f"auth hash: 0x{auth_hash(payload).hex()}")
    print(f"digest:    0x{build_digest(payload).hex()}")
    return 0


def cmd_identity(args: argparse.Namespace) -> int:
    """Print the address of an uncompressed public key."""
    print(format_identity(derive_identity(Bytes65(args.public_key))))
    return 0


def cmd_init(args: argparse.Namespace, contract: AccountContract) -> int:
    """Store the controlling address."""
    contract.initialize(args.identity)
    return 0


def cmd_extend_ttl(args: argparse.Namespace, contract: AccountContract) -> int:
    """Refresh every lease of the account."""
    contract.extend_lifetime()
    return 0


def cmd_check(args: argparse.Namespace, contract: AccountContract) -> int:
    """Run the authorization check on a signed payload."""
    claim = SignedClaim.decode({"address": args.claimed_address, "signature": args.signature})
    try:
        contract.check_authorization(args.payload, claim)
    except AuthorizationError as e:
        print(f"rejected: {e.error.name} ({int(e.error)})")
        return 1

    print("authorized")
    return 0


_LEDGER_COMMANDS = {
    "init": cmd_init,
    "extend-ttl": cmd_extend_ttl,
    "check": cmd_check,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="omniwallet",
        description="Ethereum-address controlled account",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--no-color", action="store_true", help="Disable colored logging output"
    )

    # Options shared by every command that opens the ledger.
    ledger_options = argparse.ArgumentParser(add_help=False)
    ledger_options.add_argument("--db", type=Path, required=True, help="Path to the SQLite ledger")
    ledger_options.add_argument(
        "--address",
        dest="contract_address",
        default=DEFAULT_CONTRACT_ADDRESS,
        help=f"Contract address inside the ledger (default: {DEFAULT_CONTRACT_ADDRESS})",
    )
    ledger_options.add_argument(
        "--sequence",
        type=int,
        default=0,
        help="Current ledger sequence number (default: 0)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    digest = commands.add_parser("digest", help="Show the digest chain of a payload")
    digest.add_argument("payload", help="32-byte payload hash (hex)")

    identity = commands.add_parser("identity", help="Derive the address of a public key")
    identity.add_argument("public_key", help="65-byte uncompressed public key (hex)")

    init = commands.add_parser(
        "init", parents=[ledger_options], help="Store the controlling address"
    )
    init.add_argument("identity", help="20-byte Ethereum address (hex)")

    commands.add_parser(
        "extend-ttl", parents=[ledger_options], help="Extend every lease to the maximum"
    )

    check = commands.add_parser("check", parents=[ledger_options], help="Check a signed payload")
    check.add_argument("payload", help="32-byte payload hash (hex)")
    check.add_argument(
        "claimed_address", metavar="ADDRESS", help="Claimed 20-byte signer address (hex)"
    )
    check.add_argument("signature", help="65-byte recoverable signature (hex)")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose, args.no_color)

    try:
        if args.command == "digest":
            return cmd_digest(args)
        if args.command == "identity":
            return cmd_identity(args)

        contract, storage = open_account(args.db, args.contract_address, args.sequence)
        try:
            return _LEDGER_COMMANDS[args.command](args, contract)
        finally:
            storage.close()
    except (DecodeError, ValueError) as e:
        logger.error("Invalid input: %s", e)
        return 1
    except HostError as e:
        logger.error("Ledger operation failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
