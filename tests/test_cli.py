"""Tests for the srttool command line."""

import pytest
from click.testing import CliRunner

from srttool.cli import describe, main
from srttool.errors import ParseErrorKind

FIRST = (
    "1\n"
    "00:00:01,000 --> 00:00:02,000\n"
    "Hello\n"
    "\n"
    "2\n"
    "00:00:03,000 --> 00:00:04,000\n"
    "World\n"
)

SECOND = (
    "17\n"
    "00:01:00,000 --> 00:01:01,500\n"
    "Part two\n"
    "\n"
)

BROKEN = (
    "1\n"
    "00:00:05,000 --> 00:00:06,000\n"
    "Fine\n"
    "\n"
    "2\n"
    "00:00:07,000 => 00:00:08,000\n"
    "Broken\n"
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("SRTTOOL_OFFSET", "SRTTOOL_ENCODING", "SRTTOOL_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def srt_files(tmp_path):
    paths = {}
    for name, text in (("first", FIRST), ("second", SECOND), ("broken", BROKEN)):
        path = tmp_path / f"{name}.srt"
        path.write_text(text, encoding="utf-8")
        paths[name] = path
    return paths


def test_shift_to_stdout(srt_files):
    result = CliRunner().invoke(main, [str(srt_files["first"]), "-o", "00:00:01,500"])
    assert result.exit_code == 0, result.output
    assert "1\n00:00:02,500 --> 00:00:03,500\nHello\n\n" in result.output
    assert "2\n00:00:04,500 --> 00:00:05,500\nWorld\n\n" in result.output
    assert f'from "{srt_files["first"]}" 7 lines parsed' in result.output


def test_negative_offset_clamps(srt_files, tmp_path):
    out = tmp_path / "out.srt"
    result = CliRunner().invoke(
        main, [str(srt_files["first"]), "--offset", "-00:00:02,500", "-f", str(out)]
    )
    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8") == (
        "1\n00:00:00,000 --> 00:00:00,000\nHello\n\n"
        "2\n00:00:00,500 --> 00:00:01,500\nWorld\n\n"
    )


def test_legacy_negative_prefix(srt_files, tmp_path):
    out = tmp_path / "out.srt"
    result = CliRunner().invoke(
        main, [str(srt_files["second"]), "-o", "n00:00:30,000", "-f", str(out)]
    )
    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8") == "1\n00:00:30,000 --> 00:00:31,500\nPart two\n\n"


def test_concatenates_and_renumbers(srt_files, tmp_path):
    out = tmp_path / "out.srt"
    result = CliRunner().invoke(
        main, [str(srt_files["first"]), str(srt_files["second"]), "-f", str(out)]
    )
    assert result.exit_code == 0, result.output
    text = out.read_text(encoding="utf-8")
    assert text.startswith("1\n00:00:01,000 --> 00:00:02,000\nHello\n\n")
    assert text.endswith("3\n00:01:00,000 --> 00:01:01,500\nPart two\n\n")
    assert f'from "{srt_files["second"]}" 4 lines parsed' in result.output


def test_offset_from_environment(srt_files, tmp_path, monkeypatch):
    monkeypatch.setenv("SRTTOOL_OFFSET", "00:00:10,000")
    out = tmp_path / "out.srt"
    result = CliRunner().invoke(main, [str(srt_files["second"]), "-f", str(out)])
    assert result.exit_code == 0, result.output
    assert "00:01:10,000 --> 00:01:11,500" in out.read_text(encoding="utf-8")


def test_invalid_offset_from_environment_names_variable(srt_files, monkeypatch):
    monkeypatch.setenv("SRTTOOL_OFFSET", "soon")
    result = CliRunner().invoke(main, [str(srt_files["second"])])
    assert result.exit_code == 2
    assert "SRTTOOL_OFFSET" in result.output
    assert "--offset" not in result.output.split("Error:", 1)[1]


def test_offset_option_overrides_environment(srt_files, tmp_path, monkeypatch):
    monkeypatch.setenv("SRTTOOL_OFFSET", "soon")
    out = tmp_path / "out.srt"
    result = CliRunner().invoke(
        main, [str(srt_files["second"]), "-o", "00:00:01,000", "-f", str(out)]
    )
    assert result.exit_code == 0, result.output
    assert "00:01:01,000 --> 00:01:02,500" in out.read_text(encoding="utf-8")


def test_invalid_offset_is_usage_error(srt_files):
    result = CliRunner().invoke(main, [str(srt_files["first"]), "-o", "1.5s"])
    assert result.exit_code == 2
    assert "--offset" in result.output
    assert "n00:11:22,333" in result.output


def test_parse_error_reports_line_and_continues(srt_files, tmp_path):
    out = tmp_path / "out.srt"
    result = CliRunner().invoke(
        main,
        [str(srt_files["broken"]), str(srt_files["second"]), "-f", str(out)],
    )
    assert result.exit_code == 1
    assert f"ERROR: {srt_files['broken']}:6: Invalid time line" in result.output
    assert f'from "{srt_files["broken"]}" 6 lines parsed' in result.output
    assert "1 of 2 inputs failed" in result.output
    assert out.read_text(encoding="utf-8") == (
        "1\n00:00:05,000 --> 00:00:06,000\nFine\n\n"
        "2\n00:01:00,000 --> 00:01:01,500\nPart two\n\n"
    )


def test_undecodable_line_keeps_earlier_blocks(tmp_path):
    path = tmp_path / "latin1.srt"
    path.write_bytes(FIRST.encode("utf-8") + b"\n3\n00:00:05,000 --> 00:00:06,000\ncaf\xe9\n")
    out = tmp_path / "out.srt"
    result = CliRunner().invoke(main, [str(path), "--encoding", "utf-8", "-f", str(out)])
    assert result.exit_code == 1
    assert f"ERROR: {path}:11: Invalid content" in result.output
    assert out.read_text(encoding="utf-8").count(" --> ") == 2


def test_missing_file_is_reported(srt_files, tmp_path):
    missing = tmp_path / "missing.srt"
    result = CliRunner().invoke(main, [str(missing), str(srt_files["second"])])
    assert result.exit_code == 1
    assert f"ERROR: {missing}: No such file or directory" in result.output
    assert "1\n00:01:00,000 --> 00:01:01,500\nPart two\n\n" in result.output


def test_requires_input():
    result = CliRunner().invoke(main, [])
    assert result.exit_code == 2


@pytest.mark.parametrize("kind", list(ParseErrorKind))
def test_every_error_kind_is_described(kind):
    assert describe(kind).startswith(kind.description)
