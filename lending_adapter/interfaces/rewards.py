"""Reward controller protocol — governance-token claim mechanism."""
from typing import Protocol, Sequence


class RewardController(Protocol):
    """Abstract interface for claiming accrued market rewards."""

    def claim_rewards_for(
        self,
        accounts: Sequence[str],
        markets: Sequence[str],
        claim_borrow_side: bool,
        claim_supply_side: bool,
    ) -> None: ...


class ContractResolver(Protocol):
    """Looks up collaborator contracts by address."""

    def reward_controller(self, address: str) -> RewardController: ...
