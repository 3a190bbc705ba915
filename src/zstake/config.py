# src/zstake/config.py
from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError
from solders.pubkey import Pubkey

from zstake.env import load_dotenv_if_present

Json = Dict[str, Any]

_ALLOWED_CLUSTERS = {"localnet", "devnet", "testnet", "mainnet-beta"}
_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class ClientConfig:
    program_id: str
    token_mint: Optional[str]
    cluster: str
    log_level: str

    @property
    def program_pubkey(self) -> Pubkey:
        return Pubkey.from_string(self.program_id)

    @property
    def token_mint_pubkey(self) -> Optional[Pubkey]:
        if self.token_mint is None:
            return None
        return Pubkey.from_string(self.token_mint)


class _ConfigFile(BaseModel):
    """Strict model: reject unknown keys."""

    model_config = ConfigDict(extra="forbid")

    program_id: Optional[str] = None
    token_mint: Optional[str] = None
    cluster: Optional[str] = None
    log_level: Optional[str] = None


def _is_pubkey(s: str) -> bool:
    try:
        Pubkey.from_string(s)
    except ValueError:
        return False
    return True


def validate_client_config(cfg: ClientConfig) -> None:
    """Fail-fast validation; a wrong program id silently targets another program."""

    if not isinstance(cfg.program_id, str) or not _is_pubkey(cfg.program_id):
        raise ValueError(f"program_id must be a base58 address; got: {cfg.program_id!r}")

    if cfg.token_mint is not None and not _is_pubkey(cfg.token_mint):
        raise ValueError(f"token_mint must be a base58 address; got: {cfg.token_mint!r}")

    if cfg.cluster not in _ALLOWED_CLUSTERS:
        raise ValueError(f"cluster must be one of {sorted(_ALLOWED_CLUSTERS)}; got: {cfg.cluster!r}")

    if cfg.log_level not in _ALLOWED_LOG_LEVELS:
        raise ValueError(f"log_level must be one of {sorted(_ALLOWED_LOG_LEVELS)}; got: {cfg.log_level!r}")


def default_client_config() -> ClientConfig:
    return ClientConfig(
        # Devnet deployment of the staking program.
        program_id="7vo1tfi7A7DfLi5viwb1eNwv9WUuphV2QS3TNv1nPUo5",
        token_mint=None,
        cluster="devnet",
        log_level="INFO",
    )


def _load_raw(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yaml", ".yml"}:
        return yaml.safe_load(text)
    return json.loads(text)


def read_client_config_file(path: str) -> ClientConfig:
    p = Path(path)
    raw = _load_raw(p)
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError("client config must be a mapping")

    try:
        parsed = _ConfigFile.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"invalid client config {path!r}: {e}") from e

    d = default_client_config()
    cfg = ClientConfig(
        program_id=(parsed.program_id or d.program_id).strip(),
        token_mint=parsed.token_mint.strip() if parsed.token_mint else d.token_mint,
        cluster=(parsed.cluster or d.cluster).strip().lower(),
        log_level=(parsed.log_level or d.log_level).strip().upper(),
    )
    validate_client_config(cfg)
    return cfg


def _apply_env_overrides(cfg: ClientConfig) -> ClientConfig:
    updates: Json = {}
    v = os.environ.get("ZSTAKE_PROGRAM_ID")
    if v and v.strip():
        updates["program_id"] = v.strip()
    v = os.environ.get("ZSTAKE_TOKEN_MINT")
    if v and v.strip():
        updates["token_mint"] = v.strip()
    v = os.environ.get("ZSTAKE_CLUSTER")
    if v and v.strip():
        updates["cluster"] = v.strip().lower()
    v = os.environ.get("ZSTAKE_LOG_LEVEL")
    if v and v.strip():
        updates["log_level"] = v.strip().upper()
    return replace(cfg, **updates) if updates else cfg


def load_client_config(*, config_path: Optional[str] = None) -> ClientConfig:
    """File (explicit path or ZSTAKE_CONFIG_PATH) or defaults, then env overrides."""
    load_dotenv_if_present()

    p = config_path or os.environ.get("ZSTAKE_CONFIG_PATH")
    cfg = read_client_config_file(p) if p else default_client_config()

    cfg = _apply_env_overrides(cfg)
    validate_client_config(cfg)
    return cfg
