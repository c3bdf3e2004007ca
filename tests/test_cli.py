import json
import logging
from pathlib import Path

import pytest

from monkey import monkey_cli
from monkey.monkey_parser import ParserError


def test_run_monkey_string_input_prints(capsys: pytest.CaptureFixture[str]) -> None:
    status = monkey_cli.run_monkey("let x = 1 + 2 * 3;", is_string=True)
    assert status == 0
    assert capsys.readouterr().out.strip() == "let x = (1 + (2 * 3));"


def test_run_monkey_file_input(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    file_path = tmp_path / "input.monkey"
    file_path.write_text("a + b * c", encoding="utf-8")
    assert monkey_cli.run_monkey(str(file_path)) == 0
    assert capsys.readouterr().out.strip() == "(a + (b * c))"


def test_run_monkey_rejects_other_extensions(tmp_path: Path) -> None:
    file_path = tmp_path / "input.txt"
    file_path.write_text("x", encoding="utf-8")
    with pytest.raises(ValueError, match="Only .monkey files are supported."):
        monkey_cli.run_monkey(str(file_path))


def test_run_monkey_tokens(capsys: pytest.CaptureFixture[str]) -> None:
    monkey_cli.run_monkey("let x = 5;", is_string=True, tokens=True)
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["LET\tlet", "IDENT\tx", "=\t=", "INT\t5", ";\t;", "EOF\t"]


def test_run_monkey_json(capsys: pytest.CaptureFixture[str]) -> None:
    monkey_cli.run_monkey("-5", is_string=True, as_json=True)
    data = json.loads(capsys.readouterr().out)
    expr = data["statements"][0]["expression"]
    assert expr["kind"] == "PrefixExpression"
    assert expr["right"]["value"] == 5


def test_run_monkey_output_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out = tmp_path / "out.txt"
    monkey_cli.run_monkey("a * b", is_string=True, out=str(out))
    assert out.read_text(encoding="utf-8").strip() == "(a * b)"
    assert capsys.readouterr().out == ""


def test_run_monkey_reports_errors(capsys: pytest.CaptureFixture[str]) -> None:
    status = monkey_cli.run_monkey("let = 5;", is_string=True)
    captured = capsys.readouterr()
    assert status == 1
    assert captured.out == ""
    assert (
        "parser error: expected next token to be IDENT, got = instead" in captured.err
    )


def test_run_monkey_strict_raises() -> None:
    with pytest.raises(ParserError):
        monkey_cli.run_monkey("let x 5;", is_string=True, strict=True)


def test_main_with_string(capsys: pytest.CaptureFixture[str]) -> None:
    assert monkey_cli.main(["-s", "5 > 4 == 3 < 4"]) == 0
    assert capsys.readouterr().out.strip() == "((5 > 4) == (3 < 4))"


def test_main_error_status(capsys: pytest.CaptureFixture[str]) -> None:
    assert monkey_cli.main(["-s", "12abc"]) == 1
    assert "bad number syntax" in capsys.readouterr().err


def test_main_tokens_and_json_are_exclusive() -> None:
    with pytest.raises(SystemExit):
        monkey_cli.main(["-s", "x", "--tokens", "--json"])


def test_main_launches_repl(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[bool] = []
    monkeypatch.setattr(
        "monkey.monkey_repl.start_repl",
        lambda show_tokens=False: calls.append(show_tokens),
    )
    assert monkey_cli.main(["--repl", "--tokens"]) == 0
    assert monkey_cli.main([]) == 0
    assert calls == [True, False]


def test_configure_logging_verbose(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, object] = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: seen.update(kw))
    monkey_cli.configure_logging(verbose=True)
    assert seen["level"] == logging.DEBUG


@pytest.mark.parametrize(  # type: ignore[misc]
    "env,expected", [("info", "INFO"), ("bogus", logging.WARNING), (None, "WARNING")]
)
def test_configure_logging_from_env(
    monkeypatch: pytest.MonkeyPatch, env: str | None, expected: object
) -> None:
    seen: dict[str, object] = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: seen.update(kw))
    if env is None:
        monkeypatch.delenv(monkey_cli.LOG_LEVEL_ENV, raising=False)
    else:
        monkeypatch.setenv(monkey_cli.LOG_LEVEL_ENV, env)
    monkey_cli.configure_logging()
    assert seen["level"] == expected
