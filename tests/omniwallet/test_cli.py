"""Tests for the command line interface."""

import logging
from pathlib import Path

import pytest

from omniwallet.__main__ import LevelColorFormatter, build_parser, main, setup_logging
from omniwallet.account import build_digest, sign_payload
from omniwallet.crypto import public_key_from_private
from tests.omniwallet.helpers import ALICE_ADDRESS, ALICE_KEY, BOB_KEY, SCENARIO_PAYLOAD


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Drop the handlers main() installs on the root logger."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def db(tmp_path: Path) -> str:
    """Path of a fresh ledger database."""
    return str(tmp_path / "account.db")


class TestOfflineCommands:
    """Tests for commands that need no ledger."""

    def test_digest(self, capsys):
        """Test that the digest command prints the full chain."""
        assert main(["--no-color", "digest", "0x" + SCENARIO_PAYLOAD.hex()]) == 0

        out = capsys.readouterr().out
        assert SCENARIO_PAYLOAD.hex() in out
        assert build_digest(SCENARIO_PAYLOAD).hex() in out

    def test_identity(self, capsys):
        """Test that the identity command prints a checksummed address."""
        public_key = public_key_from_private(ALICE_KEY)
        assert main(["identity", public_key.hex()]) == 0
        assert capsys.readouterr().out.strip() == "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

    def test_bad_payload(self):
        """Test that malformed input exits with an error status."""
        assert main(["digest", "abcd"]) == 1


def _check_args(db: str, claim, *extra: str) -> list[str]:
    return [
        "check",
        "--db",
        db,
        *extra,
        SCENARIO_PAYLOAD.hex(),
        claim.address.hex(),
        claim.signature.hex(),
    ]


class TestLedgerCommands:
    """Tests for commands that operate on a stored account."""

    def test_requires_db(self):
        """Test that ledger commands refuse to run without a database."""
        with pytest.raises(SystemExit):
            main(["extend-ttl"])

    def test_db_before_command_rejected(self, db: str):
        """Test that ledger options belong to the subcommand."""
        with pytest.raises(SystemExit):
            main(["--db", db, "extend-ttl"])

    def test_init_and_check(self, db: str, capsys):
        """Test that a stored controller's signature is authorized."""
        claim = sign_payload(ALICE_KEY, SCENARIO_PAYLOAD)

        assert main(["init", "--db", db, ALICE_ADDRESS.hex()]) == 0
        assert main(_check_args(db, claim)) == 0
        assert "authorized" in capsys.readouterr().out

    def test_check_rejected(self, db: str, capsys):
        """Test that a foreign signer is reported with its rejection code."""
        claim = sign_payload(BOB_KEY, SCENARIO_PAYLOAD)

        main(["init", "--db", db, ALICE_ADDRESS.hex()])

        assert main(_check_args(db, claim)) == 1
        assert "rejected: UNAUTHORIZED_SIGNER (8)" in capsys.readouterr().out

    def test_check_uninitialized(self, db: str, capsys):
        """Test that an empty ledger knows no signer."""
        claim = sign_payload(ALICE_KEY, SCENARIO_PAYLOAD)

        assert main(_check_args(db, claim)) == 1
        assert "rejected: UNKNOWN_SIGNER (4)" in capsys.readouterr().out

    def test_contract_address_is_separate_from_claim(self, db: str, capsys):
        """Test that each contract in the ledger keeps its own credential."""
        claim = sign_payload(ALICE_KEY, SCENARIO_PAYLOAD)

        assert main(["init", "--db", db, "--address", "CWALLET", ALICE_ADDRESS.hex()]) == 0
        assert main(_check_args(db, claim, "--address", "CWALLET")) == 0
        assert "authorized" in capsys.readouterr().out

    def test_extend_ttl_before_init(self, db: str):
        """Test that extending an empty account fails cleanly."""
        assert main(["extend-ttl", "--db", db]) == 1

    def test_extend_ttl_later_sequence(self, db: str):
        """Test that the account can be refreshed at a later ledger."""
        assert main(["init", "--db", db, ALICE_ADDRESS.hex()]) == 0
        assert main(["extend-ttl", "--db", db, "--sequence", "1000"]) == 0

    def test_parser_defaults(self, db: str):
        """Test the default contract address and sequence."""
        args = build_parser().parse_args(["extend-ttl", "--db", db])
        assert args.contract_address == "CACCOUNT"
        assert args.sequence == 0


class TestLogging:
    """Tests for the CLI log format."""

    def test_level_color_format(self):
        """Test that a record renders as a colored level and its message."""
        record = logging.LogRecord(
            "omniwallet", logging.WARNING, __file__, 1, "lease %d", (7,), None
        )
        line = LevelColorFormatter().format(record)
        assert line == f"{LevelColorFormatter.LEVEL_COLORS[logging.WARNING]}warning\x1b[0m lease 7"

    def test_setup_logging_level(self):
        """Test that verbose mode enables debug records."""
        setup_logging(verbose=True, no_color=True)
        assert logging.getLogger().level == logging.DEBUG
