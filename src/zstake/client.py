# src/zstake/client.py
from __future__ import annotations

"""Read-through view of the staking program's accounts.

Transport is supplied by the caller as an AccountFetcher; this module only
derives addresses, decodes bytes and projects rewards. It never submits.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol, TypeVar

from solders.pubkey import Pubkey

from zstake.config import ClientConfig
from zstake.ledger.accounts import Beneficiary, Community, Endpoint, Settings, Stake
from zstake.ledger.addresses import beneficiary_address, settings_address, stake_address
from zstake.ledger.rewards import claimable, project_reward_per_share
from zstake.util.structured_logging import configure_structured_logging, log_event
from zstake.wire.accounts import (
    decode_beneficiary,
    decode_community,
    decode_endpoint,
    decode_settings,
    decode_stake,
)
from zstake.wire.primitives import Timestamp

T = TypeVar("T")


class AccountFetcher(Protocol):
    def fetch(self, address: Pubkey) -> Optional[bytes]:
        """Return raw account data, or None if the account does not exist."""
        ...


class AccountNotFoundError(LookupError):
    def __init__(self, kind: str, address: Pubkey) -> None:
        super().__init__(f"unable to find {kind} account {address}")
        self.kind = kind
        self.address = address


class Staking:
    def __init__(self, program_id: Pubkey, fetcher: AccountFetcher) -> None:
        self.program_id = program_id
        self._fetcher = fetcher
        self._fee_recipient: Optional[Pubkey] = None
        self._log = logging.getLogger("zstake.client")
        self.cluster: Optional[str] = None

    @classmethod
    def from_config(cls, cfg: ClientConfig, fetcher: AccountFetcher) -> "Staking":
        """Build a client for `cfg.program_id` and apply `cfg.log_level` to the zstake loggers."""
        configure_structured_logging(cfg.log_level)
        client = cls(cfg.program_pubkey, fetcher)
        client.cluster = cfg.cluster
        log_event(client._log, "client_configured", cluster=cfg.cluster, program_id=cfg.program_id)
        return client

    def _load(self, kind: str, address: Pubkey, decode: Callable[[bytes], T]) -> T:
        data = self._fetcher.fetch(address)
        if data is None:
            log_event(self._log, "account_not_found", kind=kind, address=str(address))
            raise AccountNotFoundError(kind, address)
        log_event(self._log, "account_loaded", level=logging.DEBUG, kind=kind, address=str(address), size=len(data))
        return decode(data)

    def get_settings(self) -> Settings:
        return self._load("settings", settings_address(self.program_id)[0], decode_settings)

    def get_fee_recipient(self) -> Pubkey:
        if self._fee_recipient is None:
            self._fee_recipient = self.get_settings().fee_recipient
        return self._fee_recipient

    def get_community(self, community: Pubkey) -> Community:
        return self._load("community", community, decode_community)

    def get_endpoint(self, endpoint: Pubkey) -> Endpoint:
        return self._load("endpoint", endpoint, decode_endpoint)

    def get_stake(self, stake: Pubkey) -> Stake:
        return self._load("stake", stake, decode_stake)

    def get_stake_for(self, community: Pubkey, owner: Pubkey) -> Stake:
        return self.get_stake(stake_address(self.program_id, community, owner)[0])

    def get_beneficiary(self, authority: Pubkey) -> Beneficiary:
        return self._load("beneficiary", beneficiary_address(self.program_id, authority)[0], decode_beneficiary)

    def preview_reward_per_share(self, now: Optional[Timestamp] = None) -> int:
        settings = self.get_settings()
        return project_reward_per_share(settings, now if now is not None else datetime.now(timezone.utc))

    def preview_harvest(self, beneficiary: Beneficiary, now: Optional[Timestamp] = None) -> int:
        """Holding plus reward accrued up to `now` (advisory; settlement is on chain)."""
        rps = self.preview_reward_per_share(now)
        amount = claimable(beneficiary, rps)
        if amount < int(beneficiary.holding):
            log_event(
                self._log,
                "negative_harvestable",
                level=logging.WARNING,
                authority=str(beneficiary.authority),
                reward_debt=int(beneficiary.reward_debt),
                reward_per_share=rps,
            )
        return amount
