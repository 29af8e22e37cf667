"""
Hypothetical portfolio changes for comparing strategies.

Modifications are applied to a copy of the portfolio so the caller's
portfolio is never touched. Project the returned portfolio with the
projection engine to compare it against the original.
"""

import uuid
from typing import Annotated, Dict, List, Literal, Sequence, Union

from pydantic import BaseModel, Field

from .portfolio import Asset, Portfolio


class SellModification(BaseModel):
    """Sell a percentage of one asset."""

    action: Literal["sell"] = "sell"
    asset_id: str = Field(..., min_length=1, description="Asset to sell")
    percentage: float = Field(..., gt=0, le=100, description="Share to sell (%)")


class BuyModification(BaseModel):
    """Add money to an asset type."""

    action: Literal["buy"] = "buy"
    asset_type: str = Field(..., min_length=1, description="Asset type to buy")
    amount: float = Field(..., gt=0, description="Amount to invest")


class RebalanceModification(BaseModel):
    """Replace all assets with a target allocation of the current value."""

    action: Literal["rebalance"] = "rebalance"
    allocation: Dict[str, float] = Field(
        ..., description="Target allocation by asset type (%)"
    )


PortfolioModification = Annotated[
    Union[SellModification, BuyModification, RebalanceModification],
    Field(discriminator="action"),
]


def apply_modifications(
    portfolio: Portfolio, modifications: Sequence[PortfolioModification]
) -> Portfolio:
    """
    Apply modifications in order to a deep copy of a portfolio.

    Args:
        portfolio: Original portfolio (left unchanged)
        modifications: Changes to apply

    Returns:
        Modified copy of the portfolio
    """
    modified = portfolio.model_copy(deep=True)

    for modification in modifications:
        if isinstance(modification, SellModification):
            _sell_asset(modified, modification)
        elif isinstance(modification, BuyModification):
            _buy_asset(modified, modification)
        elif isinstance(modification, RebalanceModification):
            _rebalance(modified, modification)
        else:
            raise ValueError(f"Unsupported modification: {modification!r}")

    return modified


def _sell_asset(portfolio: Portfolio, modification: SellModification) -> None:
    asset = portfolio.get_asset(modification.asset_id)
    if asset is None:
        return

    remaining = asset.value - asset.value * modification.percentage / 100
    if remaining <= 0:
        portfolio.assets = [a for a in portfolio.assets if a.id != asset.id]
    else:
        asset.value = remaining


def _buy_asset(portfolio: Portfolio, modification: BuyModification) -> None:
    for asset in portfolio.assets:
        if asset.type == modification.asset_type:
            asset.value += modification.amount
            return

    portfolio.assets = portfolio.assets + [
        Asset(
            id=_new_asset_id(modification.asset_type),
            type=modification.asset_type,
            name=f"{modification.asset_type} asset",
            value=modification.amount,
        )
    ]


def _rebalance(portfolio: Portfolio, modification: RebalanceModification) -> None:
    total_value = portfolio.total_value

    assets: List[Asset] = []
    for asset_type, percentage in modification.allocation.items():
        value = total_value * percentage / 100
        if value > 0:
            assets.append(
                Asset(
                    id=_new_asset_id(asset_type),
                    type=asset_type,
                    name=f"{asset_type} ({percentage:g}%)",
                    value=value,
                )
            )

    portfolio.assets = assets


def _new_asset_id(asset_type: str) -> str:
    return f"{asset_type}_{uuid.uuid4().hex[:12]}"
