"""Tests for the command-line UI."""

from datetime import datetime, timedelta, timezone

import pytest

from vpn_crl_sync import cli
from vpn_crl_sync.gateway import MockGateway
from vpn_crl_sync.pki import MockPKIService

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)

CONFIG = """\
vault:
  address: https://vault.example.com:8200
  token: s.test
  pki_path: pki-vpn
gateway:
  client_vpn_endpoint_id: cvpn-endpoint-0123456789abcdef0
deprovisioned_users: [carol]
"""


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "vpn-crl-sync.yaml"
    path.write_text(CONFIG)
    return str(path)


@pytest.fixture
def clients(monkeypatch):
    pki = MockPKIService()
    pki.issue("alice", T0, serial_number="a1")
    pki.issue("alice", T0 + timedelta(days=1), serial_number="a2")
    pki.issue("carol", T0, serial_number="c1")
    gateway = MockGateway()
    monkeypatch.setattr(cli, "build_clients", lambda config: (pki, gateway))
    return pki, gateway


def test_update_command(config_path, clients, capsys):
    """update converges, honours deprovisioned users and pushes the CRL."""
    pki, gateway = clients

    assert cli.run_cli(["-c", config_path, "update"]) == 0

    out = capsys.readouterr().out
    assert "first_upload: revoked 2 certificates" in out
    assert pki.live_serials("alice") == ["a2"]
    assert pki.live_serials("carol") == []
    assert len(gateway.pushes) == 1


def test_rotate_command(config_path, clients, capsys):
    """rotate rotates first, then propagates."""
    pki, gateway = clients

    assert cli.run_cli(["-c", config_path, "-q", "rotate"]) == 0

    assert pki.calls[0] == "rotate"
    assert pki.crl_number == 2
    assert gateway.installed == pki.fetch_crl().decode("ascii")


def test_show_crl_command(config_path, clients, capsys):
    """show-crl prints the PEM."""
    pki, _ = clients

    assert cli.run_cli(["-c", config_path, "show-crl"]) == 0

    assert capsys.readouterr().out == pki.fetch_crl().decode("ascii")


def test_show_users_command(config_path, clients, capsys):
    """show-users lists users and certificate states."""
    assert cli.run_cli(["-c", config_path, "show-users"]) == 0

    out = capsys.readouterr().out
    assert "alice\n" in out
    assert "carol (deprovisioned)" in out
    assert "a1" in out and "live" in out


def test_error_exit_code(config_path, clients, capsys):
    """Failures print one error naming the step and exit 1."""
    pki, gateway = clients
    pki.fail_list = True

    assert cli.run_cli(["-c", config_path, "update"]) == 1

    err = capsys.readouterr().err
    assert "[enumerate]" in err
    assert gateway.pushes == []


def test_missing_config(tmp_path, capsys):
    """Missing config file is reported, not raised."""
    assert cli.run_cli(["-c", str(tmp_path / "nope.yaml"), "update"]) == 1
    assert "Config file not found" in capsys.readouterr().err


def test_missing_aws_region(config_path, monkeypatch, tmp_path, capsys):
    """No AWS region anywhere is a configuration error, not a traceback."""
    for name in ("AWS_DEFAULT_REGION", "AWS_REGION", "AWS_PROFILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "no-aws-config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "no-aws-credentials"))

    assert cli.run_cli(["-c", config_path, "update"]) == 1
    assert "Cannot create EC2 client" in capsys.readouterr().err


def test_no_command(capsys):
    """Running without a command prints usage."""
    assert cli.run_cli([]) == 2
    assert "need command" in capsys.readouterr().err


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
