from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from zstake import env
from zstake.config import (
    ClientConfig,
    default_client_config,
    load_client_config,
    read_client_config_file,
    validate_client_config,
)

PROGRAM_ID = "A7PR2hfpVDsBqd83mD6WSEr9Z9CvDNJ9FehcvvLdvuC2"
MINT = "Q2P36HbwEBwxTSj8QhiMscbA21vBi7edJKbsb9KjBRM"

_ENV_KEYS = (
    "ZSTAKE_CONFIG_PATH",
    "ZSTAKE_PROGRAM_ID",
    "ZSTAKE_TOKEN_MINT",
    "ZSTAKE_CLUSTER",
    "ZSTAKE_LOG_LEVEL",
    "ZSTAKE_DOTENV_PATH",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for k in _ENV_KEYS:
        monkeypatch.delenv(k, raising=False)
    # Point dotenv at a file that does not exist so a developer's .env is ignored.
    monkeypatch.setenv("ZSTAKE_DOTENV_PATH", str(tmp_path / "missing.env"))
    env.reset_dotenv_state()


def test_defaults_are_valid() -> None:
    cfg = default_client_config()
    validate_client_config(cfg)
    assert cfg.cluster == "devnet"
    assert cfg.token_mint_pubkey is None
    assert load_client_config() == cfg


def test_json_file(tmp_path: Path) -> None:
    p = tmp_path / "zstake.json"
    p.write_text(json.dumps({"program_id": PROGRAM_ID, "token_mint": MINT, "cluster": "Testnet"}), encoding="utf-8")

    cfg = read_client_config_file(str(p))
    assert cfg.program_id == PROGRAM_ID
    assert str(cfg.program_pubkey) == PROGRAM_ID
    assert str(cfg.token_mint_pubkey) == MINT
    assert cfg.cluster == "testnet"
    assert cfg.log_level == "INFO"


def test_yaml_file(tmp_path: Path) -> None:
    p = tmp_path / "zstake.yaml"
    p.write_text(f"program_id: {PROGRAM_ID}\ncluster: localnet\nlog_level: debug\n", encoding="utf-8")

    cfg = read_client_config_file(str(p))
    assert cfg.program_id == PROGRAM_ID
    assert cfg.cluster == "localnet"
    assert cfg.log_level == "DEBUG"


def test_empty_yaml_falls_back_to_defaults(tmp_path: Path) -> None:
    p = tmp_path / "empty.yml"
    p.write_text("", encoding="utf-8")
    assert read_client_config_file(str(p)) == default_client_config()


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    p = tmp_path / "zstake.json"
    p.write_text(json.dumps({"program_id": PROGRAM_ID, "rpc": "http://x"}), encoding="utf-8")
    with pytest.raises(ValueError):
        read_client_config_file(str(p))


def test_non_mapping_is_rejected(tmp_path: Path) -> None:
    p = tmp_path / "zstake.json"
    p.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        read_client_config_file(str(p))


@pytest.mark.parametrize(
    "field,value",
    [
        ("program_id", "not-base58-0OIl"),
        ("token_mint", "short"),
        ("cluster", "moon"),
        ("log_level", "LOUD"),
    ],
)
def test_validation_failures(field: str, value: str) -> None:
    cfg = default_client_config()
    bad = ClientConfig(**{**cfg.__dict__, field: value})
    with pytest.raises(ValueError):
        validate_client_config(bad)


def test_env_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    p = tmp_path / "zstake.json"
    p.write_text(json.dumps({"cluster": "testnet"}), encoding="utf-8")
    monkeypatch.setenv("ZSTAKE_CONFIG_PATH", str(p))
    monkeypatch.setenv("ZSTAKE_PROGRAM_ID", PROGRAM_ID)
    monkeypatch.setenv("ZSTAKE_LOG_LEVEL", "warning")

    cfg = load_client_config()
    assert cfg.program_id == PROGRAM_ID
    assert cfg.cluster == "testnet"
    assert cfg.log_level == "WARNING"


def test_invalid_env_override_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZSTAKE_CLUSTER", "nowhere")
    with pytest.raises(ValueError):
        load_client_config()


def test_dotenv_file_is_loaded_once(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    dotenv = tmp_path / ".env"
    dotenv.write_text(f"ZSTAKE_PROGRAM_ID={PROGRAM_ID}\nZSTAKE_CLUSTER=mainnet-beta\n", encoding="utf-8")
    monkeypatch.setenv("ZSTAKE_DOTENV_PATH", str(dotenv))
    # Existing variables win over the file.
    monkeypatch.setenv("ZSTAKE_CLUSTER", "localnet")
    env.reset_dotenv_state()

    try:
        cfg = load_client_config()
        assert cfg.program_id == PROGRAM_ID
        assert cfg.cluster == "localnet"
        assert env.load_dotenv_if_present() is False
    finally:
        os.environ.pop("ZSTAKE_PROGRAM_ID", None)
