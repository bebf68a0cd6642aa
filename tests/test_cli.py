"""Tests for the CLI and LAN address discovery."""

import socket
from types import SimpleNamespace
from unittest.mock import patch

from click.testing import CliRunner
from fastapi import FastAPI

from claude_code_share.cli import main
from claude_code_share.network import LanAddress, is_physical_interface, lan_addresses


class TestServe:
    def test_runs_uvicorn_with_options(self, tmp_path):
        runner = CliRunner()
        with (
            patch("claude_code_share.cli.uvicorn.run") as run,
            patch("claude_code_share.cli.lan_addresses", return_value=[LanAddress("192.168.1.5", "en0")]),
        ):
            result = runner.invoke(
                main, ["serve", "--port", "9000", "--host", "127.0.0.1", "--log-dir", str(tmp_path)]
            )

        assert result.exit_code == 0, result.output
        run.assert_called_once()
        args, kwargs = run.call_args
        assert isinstance(args[0], FastAPI)
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9000

        assert f"Log directory: {tmp_path}" in result.output
        assert "Local:         http://localhost:9000" in result.output
        assert "Network:       http://192.168.1.5:9000 (en0)" in result.output

    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CLAUDE_CODE_SHARE_LOG_DIR", str(tmp_path))
        runner = CliRunner()
        with (
            patch("claude_code_share.cli.uvicorn.run") as run,
            patch("claude_code_share.cli.lan_addresses", return_value=[]),
        ):
            result = runner.invoke(main, ["serve"])

        assert result.exit_code == 0, result.output
        assert run.call_args.kwargs["host"] == "0.0.0.0"
        assert run.call_args.kwargs["port"] == 3333
        assert f"Log directory: {tmp_path}" in result.output
        assert "Network:" not in result.output


def _addr(family, address):
    return SimpleNamespace(family=family, address=address)


class TestLanAddresses:
    def test_physical_interface_names(self):
        for name in ("en0", "eth0", "wlan0", "enp3s0", "wlp2s0"):
            assert is_physical_interface(name)
        for name in ("lo", "lo0", "docker0", "utun3", "tailscale0", "br-1a2b"):
            assert not is_physical_interface(name)

    def test_filters_interfaces_and_families(self):
        addrs = {
            "en0": [_addr(socket.AF_INET, "192.168.1.5"), _addr(socket.AF_INET6, "fe80::1")],
            "eth1": [_addr(socket.AF_INET, "10.0.0.2")],
            "lo": [_addr(socket.AF_INET, "127.0.0.1")],
            "docker0": [_addr(socket.AF_INET, "172.17.0.1")],
        }
        stats = {
            "en0": SimpleNamespace(isup=True),
            "eth1": SimpleNamespace(isup=False),
            "lo": SimpleNamespace(isup=True),
            "docker0": SimpleNamespace(isup=True),
        }
        with (
            patch("claude_code_share.network.psutil.net_if_addrs", return_value=addrs),
            patch("claude_code_share.network.psutil.net_if_stats", return_value=stats),
        ):
            assert lan_addresses() == [LanAddress("192.168.1.5", "en0")]

    def test_enumeration_failure(self):
        with patch("claude_code_share.network.psutil.net_if_stats", side_effect=OSError("denied")):
            assert lan_addresses() == []
