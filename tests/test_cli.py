import json
import logging
from pathlib import Path

import pytest

from clue import clue_cli
from clue.clue_errors import ParseError

SOURCE = "local x = {1 2}"


def test_run_clue_string_prints_tree(capsys: pytest.CaptureFixture[str]) -> None:
    output = clue_cli.run_clue(SOURCE, is_string=True)
    out = capsys.readouterr().out
    assert output in out
    assert output.splitlines() == [
        "block @1:1",
        "  local_decl 'x' @1:1",
        "    block @1:11",
        "      number '1' @1:12",
        "      number '2' @1:14",
    ]


def test_run_clue_json_mode(capsys: pytest.CaptureFixture[str]) -> None:
    clue_cli.run_clue(SOURCE, is_string=True, mode="json")
    data = json.loads(capsys.readouterr().out)
    assert data["kind"] == "block"
    assert data["children"][0]["value"] == "x"


def test_run_clue_tokens_mode() -> None:
    output = clue_cli.run_clue("if 1 {}", is_string=True, mode="tokens")
    assert output.splitlines() == [
        "1:1\tIF\tif",
        "1:4\tNUMBER\t1",
        "1:6\tLBRACE\t{",
        "1:7\tRBRACE\t}",
        "1:8\tEOF\t",
    ]


def test_run_clue_format_mode() -> None:
    output = clue_cli.run_clue("try 1{2}catch e{}", is_string=True, mode="format")
    assert output == "try 1 {\n    2\n} catch e {}"


def test_run_clue_file_input(tmp_path: Path) -> None:
    file_path = tmp_path / "input.clue"
    file_path.write_text("match 1 { default => {} }", encoding="utf-8")
    output = clue_cli.run_clue(str(file_path), mode="format")
    assert output == "match 1 {\n    default => {}\n}"


def test_run_clue_writes_out_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    out_path = tmp_path / "out.txt"
    clue_cli.run_clue("{}", is_string=True, mode="format", out=str(out_path))
    assert out_path.read_text(encoding="utf-8") == "{}\n"
    assert capsys.readouterr().out == ""


def test_run_clue_rejects_other_extensions(tmp_path: Path) -> None:
    path = tmp_path / "prog.txt"
    path.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError, match="Only .clue files are supported"):
        clue_cli.run_clue(str(path))


def test_run_clue_unknown_mode() -> None:
    with pytest.raises(ValueError, match="Unknown output mode"):
        clue_cli.run_clue("{}", is_string=True, mode="yaml")


def test_run_clue_propagates_parse_errors() -> None:
    with pytest.raises(ParseError, match="unterminated block"):
        clue_cli.run_clue("{1", is_string=True)


def test_run_clue_logs_debug(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="clue")
    clue_cli.run_clue("1", is_string=True, mode="format")
    assert "parsing <string>" in caplog.text
    assert "1 top-level expressions" in caplog.text


def test_main_success(capsys: pytest.CaptureFixture[str]) -> None:
    assert clue_cli.main(["-s", "local x = 5", "-m", "format"]) == 0
    assert capsys.readouterr().out.strip() == "local x = 5"


def test_main_reports_parse_error_with_caret(
    capsys: pytest.CaptureFixture[str],
) -> None:
    assert clue_cli.main(["-s", "match 1 { }"]) == 1
    err = capsys.readouterr().err
    assert err.splitlines() == [
        "error: empty match block at line 1, col 11",
        "1 | match 1 { }",
        "              ^",
    ]


def test_main_reports_lex_error_in_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "bad.clue"
    path.write_text("{\n  1 #\n}", encoding="utf-8")
    assert clue_cli.main([str(path)]) == 1
    err = capsys.readouterr().err
    assert f"unrecognized character '#' at {path}, line 2, col 5" in err
    assert err.splitlines()[-2:] == ["2 |   1 #", "        ^"]


def test_main_missing_file(capsys: pytest.CaptureFixture[str]) -> None:
    assert clue_cli.main(["does-not-exist.clue"]) == 1
    assert capsys.readouterr().err.startswith("error: ")


def test_main_bad_extension(capsys: pytest.CaptureFixture[str]) -> None:
    assert clue_cli.main(["prog.lua"]) == 1
    assert "Only .clue files are supported." in capsys.readouterr().err


def test_main_usage_error() -> None:
    with pytest.raises(SystemExit) as exc:
        clue_cli.main(["-m", "yaml", "-s", "{}"])
    assert exc.value.code == 2


def test_main_writes_file(tmp_path: Path) -> None:
    out_path = tmp_path / "tree.json"
    assert clue_cli.main(["-s", "{}", "-m", "json", "-o", str(out_path)]) == 0
    assert json.loads(out_path.read_text(encoding="utf-8"))["children"][0]["kind"] == "block"


def test_main_rejects_deep_nesting(capsys: pytest.CaptureFixture[str]) -> None:
    assert clue_cli.main(["-s", "{" * 400 + "}" * 400]) == 1
    err = capsys.readouterr().err
    assert err.startswith("error: nesting too deep at line 1, col 101")
