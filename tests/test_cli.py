# Area: Shared Tests
"""Tests for the command line entry point and the demo battle."""

import json
import os
import tempfile

import pytest

from quiz_battle.cli import main, parse_args
from quiz_battle.demo import run_demo_battle
from quiz_battle.config import BattleConfig


@pytest.fixture
def workdir():
    """Temporary directory holding a config file, log file and database."""
    with tempfile.TemporaryDirectory() as tmp:
        config_path = os.path.join(tmp, "config.json")
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump({
                "log_file": os.path.join(tmp, "battle.log"),
                "db_path": os.path.join(tmp, "battles.db"),
            }, f)
        yield tmp, config_path


class TestParseArgs:
    """Argument parsing."""

    def test_demo_defaults(self):
        """demo defaults to three players in normal mode."""
        args = parse_args(["demo"])
        assert (args.command, args.players, args.mode, args.seed) == ("demo", 3, "normal", None)

    def test_command_required(self):
        """A subcommand must be given."""
        with pytest.raises(SystemExit):
            parse_args([])

    def test_unknown_mode_rejected(self):
        """Only the known selection modes are accepted."""
        with pytest.raises(SystemExit):
            parse_args(["demo", "--mode", "chaos"])


class TestDemoBattle:
    """The in-memory demo runs a whole battle."""

    def test_results_read_from_store(self):
        """The host reads the synced leaderboard back from the store."""
        view = run_demo_battle(players=3, seed=11, config=BattleConfig())
        assert view["source"] == "store"
        assert len(view["rows"]) == 3
        assert view["quiz_title"] == "Science Basics"
        assert any(row["is_winner"] for row in view["rows"])

    def test_same_seed_same_outcome(self):
        """Seeded runs are reproducible."""
        first = run_demo_battle(players=4, mode="casual", seed=5)
        second = run_demo_battle(players=4, mode="casual", seed=5)
        assert [r["score"] for r in first["rows"]] == [r["score"] for r in second["rows"]]


class TestMain:
    """main() wiring and exit codes."""

    def test_demo_prints_leaderboard(self, workdir, capsys):
        """demo prints a ranked table and exits 0."""
        _, config_path = workdir
        assert main(["--config", config_path, "demo", "--seed", "1"]) == 0
        out = capsys.readouterr().out
        assert "Science Basics: battle" in out
        assert "Host" in out

    def test_demo_json(self, workdir, capsys):
        """--json prints the results view."""
        _, config_path = workdir
        assert main(["--config", config_path, "demo", "--seed", "2", "--json"]) == 0
        view = json.loads(capsys.readouterr().out)
        assert view["source"] == "store"
        assert {row["user_id"] for row in view["rows"]} == {"host", "bot1", "bot2"}

    def test_lobby(self, workdir, capsys):
        """lobby prints one position per player."""
        _, config_path = workdir
        assert main(["--config", config_path, "lobby", "--players", "3", "--ticks", "5", "--seed", "4"]) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert [line.split()[0] for line in lines] == ["player1", "player2", "player3"]

    def test_init_db(self, workdir):
        """init-db creates the database file."""
        tmp, config_path = workdir
        db_path = os.path.join(tmp, "other.db")
        assert main(["--config", config_path, "init-db", "--db", db_path]) == 0
        assert os.path.exists(db_path)

    def test_invalid_config(self, workdir, capsys):
        """A config that fails validation exits 1 with a message."""
        tmp, _ = workdir
        bad = os.path.join(tmp, "bad.json")
        with open(bad, "w", encoding="utf-8") as f:
            json.dump({"min_players": 6, "max_players": 2}, f)
        assert main(["--config", bad, "demo"]) == 1
        assert "Invalid battle config" in capsys.readouterr().err

    def test_malformed_config(self, workdir, capsys):
        """A config file that is not JSON exits 1."""
        tmp, _ = workdir
        bad = os.path.join(tmp, "bad.json")
        with open(bad, "w", encoding="utf-8") as f:
            f.write("{not json")
        assert main(["--config", bad, "demo"]) == 1
        assert "not valid JSON" in capsys.readouterr().err
