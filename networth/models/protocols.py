"""
Protocol interfaces for projection collaborators.

The projection engine depends on these capabilities rather than on concrete
registries or calculators, so any implementation can be injected (a custom
asset class table, a test double, a different amortization model).
"""

from typing import Protocol


class LoanTerms(Protocol):
    """Anything that carries the terms of an amortizing loan."""

    principal: float
    rate: float
    term_years: int


class AssetTypeRegistry(Protocol):
    """
    Provides per asset type metadata used by the engine.

    Implementations must fail soft: unknown asset types get a zero return
    adjustment and a medium risk weight instead of raising.
    """

    def inflation_adjustment(self, asset_type: str, scenario: str) -> float:
        """
        Get the return premium over inflation for an asset type.

        Args:
            asset_type: Asset type tag
            scenario: Scenario label (pessimistic, base, optimistic)

        Returns:
            Adjustment in percentage points
        """
        ...

    def risk_weight(self, asset_type: str) -> float:
        """Get the risk weight (1-10 scale) of an asset type."""
        ...


class BalanceCalculator(Protocol):
    """Computes outstanding loan balances over time."""

    def calculate_remaining_balance(
        self, liability: LoanTerms, elapsed_years: float
    ) -> float:
        """Outstanding balance after a number of elapsed years."""
        ...
