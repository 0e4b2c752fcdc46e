"""Shared test fixtures and in-memory collaborators."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from lending_adapter.config import AppConfig, ChainConfig, MarketConfig
from lending_adapter.fixed_point import ONE
from lending_adapter.models import MarketSnapshot, RateCurve
from lending_adapter.protocols.compound import CompoundAdapter

ADMIN = "0x00000000000000000000000000000000000000ad"
AGGREGATOR = "0x00000000000000000000000000000000000000a9"
ADAPTER = "0x00000000000000000000000000000000000000aa"
STRANGER = "0x0000000000000000000000000000000000000bad"
RECIPIENT = "0x00000000000000000000000000000000000000fe"
DAI = "0x6b175474e89094c44da98b954eedeac495271d0f"
CDAI = "0x5d3a536e4d6dbd6114cc1ead35777bab948e3643"
COMPTROLLER = "0x3d9819210a31b4961b30ef54be2aed79b9c9cd3b"


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------


class FakeToken:
    """ERC20-style ledger keyed by address strings."""

    def __init__(self, address: str) -> None:
        self.address = address
        self.balances: dict[str, int] = {}
        self.allowances: dict[tuple[str, str], int] = {}
        self.fail_transfers = False
        self.blocked_recipients: set[str] = set()

    def balance_of(self, account: str) -> int:
        return self.balances.get(account, 0)

    def credit(self, account: str, amount: int) -> None:
        self.balances[account] = self.balance_of(account) + amount

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        if self.fail_transfers or recipient in self.blocked_recipients:
            return False
        if self.balance_of(sender) < amount:
            return False
        self.balances[sender] = self.balance_of(sender) - amount
        self.credit(recipient, amount)
        return True

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        self.allowances[(owner, spender)] = amount
        return True

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> bool:
        if self.allowances.get((owner, spender), 0) < amount:
            return False
        return self.transfer(owner, recipient, amount)


class FakeCompoundMarket(FakeToken):
    """Compound-style market that is also the ledger of its share token."""

    def __init__(self, address: str, underlying: FakeToken) -> None:
        super().__init__(address)
        self.underlying = underlying
        self.exchange_rate = 2 * 10**16  # 0.02 underlying per share, scaled by 1e18
        self.supply_rate = 10**10
        self.borrows = 1000 * ONE
        self.reserves = 50 * ONE
        self.reserve_factor = 10**17
        self.curve = RateCurve(
            base_rate_per_period=2 * 10**13,
            multiplier_per_period=10**14,
        )
        self.comptroller = COMPTROLLER
        self.mint_status = 0
        self.redeem_status = 0
        self.calls: list[tuple[str, str, int]] = []

    def deposit_and_mint_shares(self, minter: str, amount: int) -> int:
        self.calls.append(("mint", minter, amount))
        if self.mint_status != 0:
            return self.mint_status
        if not self.underlying.transfer_from(self.address, minter, self.address, amount):
            return 13
        self.credit(minter, amount * ONE // self.exchange_rate)
        return 0

    def redeem_shares_for_underlying(self, redeemer: str, share_amount: int) -> int:
        self.calls.append(("redeem", redeemer, share_amount))
        if self.redeem_status != 0:
            return self.redeem_status
        if self.balance_of(redeemer) < share_amount:
            return 9
        self.balances[redeemer] -= share_amount
        self.underlying.transfer(
            self.address, redeemer, share_amount * self.exchange_rate // ONE
        )
        return 0

    def share_to_underlying_exchange_rate(self) -> int:
        return self.exchange_rate

    def per_period_supply_rate(self) -> int:
        return self.supply_rate

    def available_cash(self) -> int:
        return self.underlying.balance_of(self.address)

    def total_borrows(self) -> int:
        return self.borrows

    def total_reserves(self) -> int:
        return self.reserves

    def reserve_factor_fraction(self) -> int:
        return self.reserve_factor

    def rate_curve_parameters(self) -> RateCurve:
        return self.curve

    def reward_controller_address(self) -> str:
        return self.comptroller


class FakeRewardController:
    def __init__(self) -> None:
        self.claims: list[tuple[list[str], list[str], bool, bool]] = []

    def claim_rewards_for(self, accounts, markets, claim_borrow_side, claim_supply_side) -> None:
        self.claims.append((list(accounts), list(markets), claim_borrow_side, claim_supply_side))


class FakeResolver:
    def __init__(self, controllers: dict[str, FakeRewardController]) -> None:
        self.controllers = controllers

    def reward_controller(self, address: str) -> FakeRewardController:
        return self.controllers[address]


# ---------------------------------------------------------------------------
# Collaborator fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def dai() -> FakeToken:
    return FakeToken(DAI)


@pytest.fixture()
def cdai(dai: FakeToken) -> FakeCompoundMarket:
    market = FakeCompoundMarket(CDAI, dai)
    dai.credit(CDAI, 500 * ONE)
    return market


@pytest.fixture()
def controller() -> FakeRewardController:
    return FakeRewardController()


@pytest.fixture()
def resolver(controller: FakeRewardController) -> FakeResolver:
    return FakeResolver({COMPTROLLER: controller})


@pytest.fixture()
def adapter(
    cdai: FakeCompoundMarket, dai: FakeToken, resolver: FakeResolver
) -> CompoundAdapter:
    """Adapter with the aggregator already authorized."""
    a = CompoundAdapter(ADAPTER, cdai, dai, ADMIN, resolver)
    a.set_authorized_caller(ADMIN, AGGREGATOR)
    return a


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_snapshot() -> MarketSnapshot:
    return MarketSnapshot(
        total_borrows=1000 * ONE,
        available_cash=500 * ONE,
        total_reserves=50 * ONE,
        reserve_factor=10**17,
        base_rate_per_period=2 * 10**13,
        multiplier_per_period=10**14,
    )


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_app_config() -> AppConfig:
    return AppConfig(
        chains={
            "ethereum": ChainConfig(
                rpc_endpoints=("https://rpc1.example.com", "https://rpc2.example.com"),
                rpc_timeout=10,
            )
        },
        markets={
            "cdai": MarketConfig(
                family="compound",
                chain="ethereum",
                market_address=CDAI,
                underlying_address=DAI,
                underlying_decimals=18,
                annualization_constant=2_371_428,
            )
        },
    )


SAMPLE_YAML = textwrap.dedent("""\
    chains:
      ethereum:
        rpc_endpoints: ["https://rpc.example.com"]
        rpc_timeout: 10
    markets:
      cdai:
        family: compound
        chain: ethereum
        market_address: "0x5d3a536E4D6DbD6114cc1Ead35777bAB948E3643"
        underlying_address: "0x6B175474E89094C44Da98b954EedeAC495271d0F"
        underlying_decimals: 18
        annualization_constant: 2371428
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file
