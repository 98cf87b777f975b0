"""Tests for the command-line interface."""
import json

import pytest
import yaml

from cubepack.cli import create_parser, main


class TestParser:
    """Argument parsing."""

    def test_generate_defaults(self):
        args = create_parser().parse_args(["generate"])
        assert args.command == "generate"
        assert args.difficulty is None
        assert not args.json

    def test_survey_defaults_to_all_difficulties(self):
        args = create_parser().parse_args(["survey"])
        assert args.difficulties == ["easy", "medium", "hard", "expert"]
        assert args.count == 10

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()


class TestCommands:
    """End-to-end command runs."""

    def test_list_pieces_json(self, capsys):
        assert main(["list-pieces", "--format", "json"]) == 0
        pieces = json.loads(capsys.readouterr().out)
        assert len(pieces) == 8
        assert pieces[0]["name"] == "Small-L"

    def test_list_pieces_by_block_count(self, capsys):
        assert main(["list-pieces", "--block-count", "3"]) == 0
        out = capsys.readouterr().out
        assert "Line-3" in out
        assert "Tower" not in out

    def test_generate_json(self, capsys):
        assert main(["generate", "--difficulty", "easy", "--seed", "3", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["status"] == "solved"
        assert data["difficulty"] == "easy"
        assert data["level"]["verified"]

    def test_generate_shows_solution(self, capsys):
        assert main(["generate", "--round", "1", "--seed", "3", "--show-solution"]) == 0
        out = capsys.readouterr().out
        assert "layer 0:" in out
        assert "layer 1:" in out

    def test_generate_with_missing_config(self, tmp_path, capsys):
        assert main(["generate", "--config", str(tmp_path / "nope.yaml")]) == 1

    def test_create_and_validate_config(self, tmp_path, capsys):
        path = str(tmp_path / "config.yaml")
        assert main(["create-config", "--output", path]) == 0
        assert main(["create-config", "--output", path]) == 1
        assert main(["create-config", "--output", path, "--force"]) == 0
        assert main(["validate-config", path, "--strict"]) == 0

    def test_validate_missing_config(self, tmp_path, capsys):
        assert main(["validate-config", str(tmp_path / "nope.yaml")]) == 1

    def test_survey_writes_csv(self, tmp_path, capsys):
        output = tmp_path / "survey.csv"
        code = main(["survey", "--difficulties", "easy", "--count", "2", "--seed", "1",
                     "--output", str(output), "--log-dir", str(tmp_path / "logs")])
        assert code == 0
        assert output.exists()
        assert "easy" in output.read_text()


class TestLoggingConfig:
    """Commands honour the logging section of the configuration."""

    @pytest.fixture
    def logging_config(self, tmp_path):
        def make(**logging_fields):
            path = tmp_path / "config.yaml"
            path.write_text(yaml.safe_dump({"logging": logging_fields}))
            return str(path)
        return make

    @pytest.fixture
    def levels(self, monkeypatch):
        seen = []
        monkeypatch.setattr("cubepack.cli.setup_logging", seen.append)
        return seen

    def test_generate_uses_configured_level(self, logging_config, levels, capsys):
        path = logging_config(level="error")
        assert main(["generate", "--difficulty", "easy", "--seed", "3", "--json", "--config", path]) == 0
        assert main(["generate", "--difficulty", "easy", "--seed", "3", "--json", "--config", path,
                     "--verbose"]) == 0
        assert levels == ["ERROR", "DEBUG"]

    def test_survey_uses_configured_level(self, logging_config, levels, tmp_path, capsys):
        path = logging_config(level="warning", results_csv_path=str(tmp_path / "results.csv"))
        assert main(["survey", "--difficulties", "easy", "--count", "1", "--seed", "1",
                     "--config", path]) == 0
        assert levels == ["WARNING"]

    def test_survey_defaults_to_configured_csv(self, logging_config, tmp_path, capsys):
        """Without --output the summary goes to logging.results_csv_path."""
        csv_path = tmp_path / "results.csv"
        log_dir = tmp_path / "logs"
        path = logging_config(log_dir=str(log_dir), results_csv_path=str(csv_path))
        assert main(["survey", "--difficulties", "easy", "--count", "1", "--seed", "1",
                     "--config", path]) == 0
        assert "easy" in csv_path.read_text()
        assert not log_dir.exists()

    def test_survey_output_without_log_dir_creates_no_run_dir(self, monkeypatch, tmp_path, capsys):
        monkeypatch.chdir(tmp_path)
        output = tmp_path / "survey.csv"
        assert main(["survey", "--difficulties", "easy", "--count", "1", "--seed", "1",
                     "--output", str(output)]) == 0
        assert output.exists()
        assert not (tmp_path / "logs").exists()
        assert not (tmp_path / "generation_results.csv").exists()

    def test_survey_save_logs_uses_configured_dir(self, logging_config, tmp_path, capsys):
        log_dir = tmp_path / "logs"
        path = logging_config(log_dir=str(log_dir), results_csv_path="")
        assert main(["survey", "--difficulties", "easy", "--count", "1", "--seed", "1",
                     "--config", path, "--save-logs"]) == 0
        run_dirs = list(log_dir.iterdir())
        assert len(run_dirs) == 1
        assert (run_dirs[0] / "generation_log.json").exists()
