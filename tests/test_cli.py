"""
Tests for the command-line interface (sample-data mode only, no network)
"""
import json

import pytest
from typer.testing import CliRunner

from listings import cli

runner = CliRunner()


@pytest.fixture(autouse=True)
def offline_config(monkeypatch, mock_config):
    monkeypatch.setattr(cli.ApiConfig, "from_env", classmethod(lambda cls, environ=None: mock_config))


def test_search_table():
    result = runner.invoke(cli.app, ["search", "--city", "جدة", "--type", "فيلا"])

    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert lines[0] == "5 listings"
    assert lines[1].startswith("[24] ")


def test_search_json():
    result = runner.invoke(cli.app, ["search", "--bedrooms", "5+", "--purpose", "sale", "--json"])

    assert result.exit_code == 0
    records = json.loads(result.output)
    assert records
    assert all(r["bedrooms"] >= 5 and r["purpose"] == "sale" for r in records)


def test_show():
    result = runner.invoke(cli.app, ["show", "1"])

    assert result.exit_code == 0
    assert json.loads(result.output)["title"] == "شقة فاخرة في حي النرجس"


def test_show_not_found():
    result = runner.invoke(cli.app, ["show", "missing"])

    assert result.exit_code == 1
    assert "Property not found: missing" in result.output


def test_status():
    result = runner.invoke(cli.app, ["status"])

    assert result.exit_code == 0
    body = json.loads(result.output)
    assert body["configured"] is False
    assert body["available"] is False

