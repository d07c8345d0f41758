from __future__ import annotations

import pytest

import magic_cli
from magic_cli import main, parse_args


def test_parse_args_defaults():
    cfg = parse_args([])
    assert cfg.order == 3
    assert cfg.max_attempts is None
    assert cfg.bench == []
    assert not cfg.menu


def test_parse_args_bench_list():
    cfg = parse_args(["--bench", "3, 4", "--runs", "2", "--seed", "5"])
    assert cfg.bench == [3, 4]
    assert cfg.runs == 2
    assert cfg.seed == 5


@pytest.mark.parametrize("raw", ["2", "x"])
def test_parse_args_rejects_bad_order(raw, capsys):
    with pytest.raises(SystemExit) as info:
        parse_args(["--n", raw])
    assert info.value.code == 2
    assert "--n" in capsys.readouterr().err


def test_main_prints_square(capsys):
    assert main(["--n", "3", "--seed", "7"]) == 0
    out = capsys.readouterr().out
    assert "MAGIC SQUARE FOUND" in out
    assert "Magic constant: 15 | Attempts:" in out


def test_main_cap_exits_with_one(capsys):
    assert main(["--n", "4", "--max-attempts", "0"]) == 1
    assert "0 attempts" in capsys.readouterr().out


def test_main_benchmark_writes_csv(tmp_path, capsys):
    path = tmp_path / "runs.csv"
    assert main(["--bench", "5", "--runs", "2", "--max-attempts", "3",
                 "--csv", str(path)]) == 0
    out = capsys.readouterr().out
    assert "SuccessRate" in out
    assert path.exists()


def _feed(monkeypatch, answers):
    it = iter(answers)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(it))


def test_menu_search_reports_result(monkeypatch, capsys):
    _feed(monkeypatch, ["1", "3", "3"])
    magic_cli.interactive_menu(parse_args(["--seed", "2"]))
    out = capsys.readouterr().out
    assert "Searching..." in out
    assert "Magic constant: 15" in out
    assert "Goodbye" in out


def test_menu_rejects_small_order(monkeypatch, capsys):
    _feed(monkeypatch, ["1", "2", "1", "abc", "3"])
    magic_cli.interactive_menu(parse_args([]))
    out = capsys.readouterr().out
    assert "Order N must be at least 3" in out
    assert "Please enter a valid integer" in out
    assert "MAGIC SQUARE FOUND" not in out


def test_menu_reports_capped_search(monkeypatch, capsys):
    _feed(monkeypatch, ["1", "5", "3"])
    magic_cli.interactive_menu(parse_args(["--max-attempts", "4", "--seed", "1"]))
    out = capsys.readouterr().out
    assert "No magic square of order 5 found in 4 attempts" in out


def test_setup_logging_does_not_stack_handlers(tmp_path):
    import logging

    from logging_config import setup_logging

    log_file = tmp_path / "search.log"
    setup_logging(logging.INFO, str(log_file))
    setup_logging(logging.INFO, str(log_file))
    logger = logging.getLogger("magic_search")
    assert len(logger.handlers) == 2
    logger.info("hello from the test")
    for handler in logger.handlers:
        handler.flush()
    assert "magic_search - INFO - hello from the test" in log_file.read_text()
    for handler in logger.handlers:
        handler.close()


@pytest.mark.parametrize("argv", [["--runs", "0"], ["--runs", "-2"],
                                  ["--max-attempts", "-5"], ["--runs", "many"]])
def test_parse_args_rejects_bad_counts(argv, capsys):
    with pytest.raises(SystemExit) as info:
        parse_args(argv)
    assert info.value.code == 2
    assert argv[0] in capsys.readouterr().err


def test_parse_args_accepts_zero_cap():
    assert parse_args(["--max-attempts", "0"]).max_attempts == 0


def test_main_zero_runs_with_plot_is_a_usage_error():
    with pytest.raises(SystemExit) as info:
        main(["--bench", "3", "--runs", "0", "--plot"])
    assert info.value.code == 2


def test_hopeless_warning_only_for_uncapped_large_orders():
    assert magic_cli.hopeless_warning(4, None) is None
    assert magic_cli.hopeless_warning(5, 100) is None
    assert "N=5" in magic_cli.hopeless_warning(5, None)


def test_menu_warns_before_uncapped_large_search(monkeypatch, capsys):
    _feed(monkeypatch, ["1", "5", "n", "2", "3"])
    magic_cli.interactive_menu(parse_args([]))
    out = capsys.readouterr().out
    assert "N=5 has no practical chance" in out
    assert "Ready to search." in out
    assert "Searching... (this may take a while)" not in out
