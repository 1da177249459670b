import argparse

import pytest

import hitcount.__main__ as cli
import hitcount.main as main_module


def test_parse_address_variants() -> None:
    assert cli.parse_address("0.0.0.0:8080") == ("0.0.0.0", 8080)
    assert cli.parse_address("[::1]:9000") == ("::1", 9000)


@pytest.mark.parametrize("value", ["8080", "localhost:8080", "0.0.0.0:http", "0.0.0.0:70000"])
def test_parse_address_rejects_invalid(value: str) -> None:
    with pytest.raises(argparse.ArgumentTypeError):
        cli.parse_address(value)


def test_main_runs_uvicorn_with_address(monkeypatch) -> None:
    captured: dict[str, object] = {}

    def fake_run(app, *, host, port, log_level):
        captured.update(app=app, host=host, port=port, log_level=log_level)

    monkeypatch.setattr(cli.uvicorn, "run", fake_run)
    assert cli.main(["--address", "127.0.0.1:9999"]) == 0
    assert captured["host"] == "127.0.0.1"
    assert captured["port"] == 9999
    assert captured["app"] is main_module.app
    assert captured["log_level"] in {"critical", "error", "warning", "info", "debug"}
