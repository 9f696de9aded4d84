"""Tests for the command-line front end."""

import pytest

from optrisk.cli import main


def test_price_european(capsys):
    main(["price", "--spot", "50", "--strike", "50", "--vol", "0.2",
          "--expiry", "0.5", "--rate", "0.1"])
    out = capsys.readouterr().out
    assert "EuropeanCall" in out
    assert "4.13" in out


def test_price_american_put(capsys):
    main(["price", "--spot", "100", "--strike", "100", "--vol", "0.2",
          "--expiry", "1", "--rate", "0.05", "--side", "p",
          "--exercise", "american", "--depth", "100"])
    out = capsys.readouterr().out
    assert "AmericanPut" in out
    assert "delta" in out


def test_demo_small(capsys):
    main(["demo", "--tree-depth", "50", "--depth", "20", "--scenarios", "200"])
    out = capsys.readouterr().out
    assert "AMERICAN PUT value (CRR)" in out
    assert "Portfolio Value" in out
    assert "Portfolio VaR" in out
    assert "Portfolio ES" in out


def test_invalid_contract_exits(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["price", "--spot", "100", "--strike", "-1", "--vol", "0.2",
              "--expiry", "1", "--rate", "0.05"])
    assert exc.value.code == 2
    assert "strike must be positive" in capsys.readouterr().err


def test_too_few_scenarios_exits():
    with pytest.raises(SystemExit) as exc:
        main(["demo", "--tree-depth", "10", "--depth", "10", "--scenarios", "5"])
    assert exc.value.code == 2
