"""
Tests for main.py - Command-Line Entry Point

Tests for:
- Logging configuration (JSON dictConfig with basicConfig fallback)
- Argument parsing
- End-to-end command flow against a file database
- Domain and validation errors mapped to a JSON error and exit code 2
"""

import json
import logging
from unittest.mock import MagicMock, mock_open, patch

import pytest

from jukebox_queue.config.settings import clear_settings_cache
from jukebox_queue.main import EXIT_DOMAIN_ERROR, EXIT_OK, build_parser, main, setup_logging


class TestLoggingSetup:
    """Tests for logging configuration."""

    def _make_valid_config(self) -> dict:
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "handlers": {},
            "loggers": {
                "aiosqlite": {"level": "WARNING"},
                "asyncio": {"level": "WARNING"},
            },
            "root": {"level": "INFO", "handlers": []},
        }

    def test_dictconfig_called_when_json_exists(self):
        """Should call dictConfig when logging_config.json exists."""
        config = self._make_valid_config()
        m = mock_open(read_data=json.dumps(config))
        with (
            patch("builtins.open", m),
            patch("logging.config.dictConfig") as mock_dc,
        ):
            setup_logging()

            mock_dc.assert_called_once_with(config)

    def test_fallback_to_basicconfig_when_json_missing(self):
        """Should fallback to basicConfig when logging_config.json is missing."""
        with (
            patch("builtins.open", side_effect=FileNotFoundError),
            patch("logging.basicConfig") as mock_bc,
        ):
            setup_logging()

            mock_bc.assert_called_once()
            assert mock_bc.call_args[1]["level"] == logging.INFO

    def test_fallback_uses_colored_formatter(self):
        """Should install a ColoredFormatter on the fallback handler."""
        from jukebox_queue.utils.logging import ColoredFormatter

        with (
            patch("builtins.open", side_effect=FileNotFoundError),
            patch("logging.basicConfig") as mock_bc,
        ):
            setup_logging("WARNING")

            (handler,) = mock_bc.call_args[1]["handlers"]
            assert isinstance(handler.formatter, ColoredFormatter)
            assert mock_bc.call_args[1]["level"] == logging.WARNING

    def test_fallback_to_basicconfig_when_json_malformed(self):
        """Should fallback to basicConfig when JSON is malformed."""
        m = mock_open(read_data="{invalid json")
        with (
            patch("builtins.open", m),
            patch("logging.basicConfig") as mock_bc,
        ):
            setup_logging()

            mock_bc.assert_called_once()

    def test_root_logger_level_overridden_by_settings(self):
        """Should override root logger level with the provided log_level."""
        config = self._make_valid_config()
        m = mock_open(read_data=json.dumps(config))
        with (
            patch("builtins.open", m),
            patch("logging.config.dictConfig"),
            patch("logging.getLogger") as mock_get_logger,
        ):
            mock_root = MagicMock()
            mock_get_logger.return_value = mock_root

            setup_logging("DEBUG")

            mock_root.setLevel.assert_called_once_with(logging.DEBUG)

    def test_shipped_config_is_valid(self):
        """Should ship a logging_config.json that quiets aiosqlite."""
        from jukebox_queue.main import _LOGGING_CONFIG_PATH

        config = json.loads(_LOGGING_CONFIG_PATH.read_text())

        assert config["version"] == 1
        assert config["loggers"]["aiosqlite"]["level"] == "WARNING"
        assert config["formatters"]["console"]["()"] == (
            "jukebox_queue.utils.logging.ColoredFormatter"
        )


class TestArgumentParsing:
    def test_submit_arguments(self):
        """Should map item submit flags onto command fields."""
        args = build_parser().parse_args(
            ["item", "submit", "3", "Song", "--user", "7", "--position", "next", "--paid", "25"]
        )

        assert (args.group, args.action) == ("item", "submit")
        assert args.session_id == 3
        assert args.user_id == 7
        assert args.desired_position == "next"
        assert args.paid_amount_cents == 25

    def test_vote_down(self):
        """Should turn --down into a -1 delta."""
        assert build_parser().parse_args(["item", "vote", "4", "--down"]).delta == -1
        assert build_parser().parse_args(["item", "vote", "4"]).delta == 1

    def test_group_required(self):
        """Should exit with a usage error when no command group is given."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


# =============================================================================
# Command Flow
# =============================================================================


@pytest.fixture
def cli(tmp_path, capsys, monkeypatch):
    """Run main() against a temporary database and decode its JSON output."""
    monkeypatch.delenv("DATABASE__URL", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    clear_settings_cache()
    db_url = f"sqlite:///{tmp_path / 'cli.db'}"

    def _run(*argv: str) -> tuple[int, dict]:
        with patch("jukebox_queue.main.setup_logging"):
            code = main(["--database-url", db_url, *argv])
        out = capsys.readouterr().out.strip().splitlines()[-1]
        return code, json.loads(out)

    yield _run
    clear_settings_cache()


class TestCommandFlow:
    def test_full_night(self, cli):
        """Should run a venue night from signup to playback."""
        code, host = cli("user", "add", "Host")
        assert code == EXIT_OK
        assert host["balanceCents"] == 10_000

        _, guest = cli("user", "add", "Guest")
        _, venue = cli("venue", "add", "The Basement", "--host", str(host["userId"]))
        _, session = cli("session", "create", str(venue["id"]), "--actor", str(host["userId"]))
        session_id = str(session["sessionId"])
        assert session["status"] == "active"
        assert len(session["joinCode"]) == 6

        _, organic = cli("item", "submit", session_id, "Organic", "--user", str(guest["userId"]))
        assert organic["chargedCents"] == 0

        _, prices = cli("prices", session_id)
        assert len(prices["positions"]) == 10

        code, bought = cli(
            "item", "submit", session_id, "Bought", "--user", str(guest["userId"]),
            "--position", "1",
        )
        assert code == EXIT_OK
        assert bought["displayPosition"] == 1
        assert bought["balanceAfterCents"] == 10_000 - bought["chargedCents"]

        _, queue = cli("queue", session_id)
        assert [item["title"] for item in queue["items"]] == ["Bought", "Organic"]

        _, played = cli("session", "play-next", session_id)
        assert played["item"]["title"] == "Bought"

        _, balance = cli("user", "balance", str(guest["userId"]))
        assert balance["balanceCents"] == bought["balanceAfterCents"]

    def test_no_pricing_venue(self, cli):
        """Should quote the flat base price when pricing is disabled."""
        _, host = cli("user", "add", "Host")
        _, venue = cli(
            "venue", "add", "Flat", "--host", str(host["userId"]),
            "--no-pricing", "--base-price", "300",
        )
        _, session = cli("session", "create", str(venue["id"]), "--actor", str(host["userId"]))

        _, quote = cli("prices", str(session["sessionId"]), "--position", "4")

        assert quote["priceCents"] == 300
        assert venue["pricing_enabled"] is False


class TestErrorMapping:
    def test_domain_error_exit_code(self, cli):
        """Should print a JSON error and exit 2 for a missing session."""
        code, payload = cli("queue", "42")

        assert code == EXIT_DOMAIN_ERROR
        assert payload["error"] == "SESSION_NOT_FOUND"
        assert "42" in payload["message"]

    def test_not_authorized(self, cli):
        """Should refuse a host action from another user."""
        _, host = cli("user", "add", "Host")
        _, guest = cli("user", "add", "Guest")
        _, venue = cli("venue", "add", "Club", "--host", str(host["userId"]))
        _, session = cli("session", "create", str(venue["id"]), "--actor", str(host["userId"]))

        code, payload = cli(
            "session", "end", str(session["sessionId"]), "--actor", str(guest["userId"])
        )

        assert code == EXIT_DOMAIN_ERROR
        assert payload["error"] == "NOT_AUTHORIZED"

    def test_invalid_position(self, cli):
        """Should report a malformed position as a domain error."""
        _, host = cli("user", "add", "Host")
        _, venue = cli("venue", "add", "Club", "--host", str(host["userId"]))
        _, session = cli("session", "create", str(venue["id"]), "--actor", str(host["userId"]))

        code, payload = cli("prices", str(session["sessionId"]), "--position", "0")

        assert code == EXIT_DOMAIN_ERROR
        assert payload["error"] == "INVALID_POSITION"

    def test_pydantic_validation_error(self, cli):
        """Should map model validation failures to VALIDATION_ERROR."""
        _, host = cli("user", "add", "Host")

        code, payload = cli(
            "venue", "add", "Bad", "--host", str(host["userId"]), "--peak-start", "25"
        )

        assert code == EXIT_DOMAIN_ERROR
        assert payload["error"] == "VALIDATION_ERROR"
