"""Tests for the command-line entry point (main.py)."""

import json

import pytest

from main import main

RFC_HEX = "3132333435363738393031323334353637383930"


def test_generate_prints_pipeline(capsys: pytest.CaptureFixture) -> None:
    code = main(["generate", "--hex", "--secret", RFC_HEX, "--time", "59", "--digits", "8"])
    out = capsys.readouterr().out
    assert code == 0
    assert "0000000000000001" in out
    assert "[frozen]" in out
    assert "OTP  942 870 82" in out


def test_generate_json(capsys: pytest.CaptureFixture) -> None:
    code = main([
        "generate", "--secret", "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ",
        "--time", "59", "--digits", "8", "--json",
    ])
    data = json.loads(capsys.readouterr().out)
    assert code == 0
    assert data["otp"] == "94287082"
    assert data["counter"] == 1


def test_verify_valid(capsys: pytest.CaptureFixture) -> None:
    code = main(["verify", "287082", "--hex", "--secret", RFC_HEX, "--time", "59"])
    out = capsys.readouterr().out
    assert code == 0
    assert "MATCH" in out
    assert "valid (counter 1)" in out


def test_verify_invalid(capsys: pytest.CaptureFixture) -> None:
    code = main(["verify", "969429", "--hex", "--secret", RFC_HEX, "--time", "59"])
    assert code == 1
    assert "invalid" in capsys.readouterr().out


def test_verify_wrong_length(capsys: pytest.CaptureFixture) -> None:
    code = main(["verify", "1234", "--time", "59"])
    assert code == 2
    assert "6-digit" in capsys.readouterr().err


def test_bad_secret_reports_error(capsys: pytest.CaptureFixture) -> None:
    code = main(["generate", "--secret", "NOT-BASE32!"])
    assert code == 2
    assert "error: Invalid Base32 character" in capsys.readouterr().err


def test_bad_algorithm_reports_error(capsys: pytest.CaptureFixture) -> None:
    code = main(["generate", "--algorithm", "MD5", "--time", "0"])
    assert code == 2
    assert "Unsupported algorithm" in capsys.readouterr().err


def test_secret_command(capsys: pytest.CaptureFixture) -> None:
    code = main(["secret", "--length", "10"])
    lines = capsys.readouterr().out.splitlines()
    assert code == 0
    assert lines[0].startswith("base32  ")
    assert len(lines[0].split()[1]) == 16
    assert len(lines[1].split()[1]) == 20


def test_no_command_prints_help(capsys: pytest.CaptureFixture) -> None:
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out
