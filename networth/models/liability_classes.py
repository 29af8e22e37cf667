"""Liability class registry."""

import uuid
from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field

from .portfolio import Liability

LiabilityCategory = Literal["secured", "unsecured", "business"]


class LiabilityClassInfo(BaseModel):
    """Metadata and loan defaults for one liability type."""

    name: str = Field(..., min_length=1, description="Display name")
    description: str = Field(default="", description="Short description")
    category: LiabilityCategory = Field(..., description="Risk category")
    default_rate: float = Field(..., gt=0, description="Default annual rate (%)")
    default_term: int = Field(..., ge=1, le=50, description="Default term in years")


class RiskCategory(BaseModel):
    """Risk grouping of liability types."""

    name: str
    description: str = ""
    risk_level: Literal["low", "medium", "high"]


def default_liability_classes() -> Dict[str, LiabilityClassInfo]:
    """Build the standard liability class table."""
    return {
        "mortgage": LiabilityClassInfo(
            name="Mortgage",
            description="Loan secured by real estate",
            category="secured",
            default_rate=8.5,
            default_term=20,
        ),
        "consumer": LiabilityClassInfo(
            name="Consumer loan",
            description="Unsecured personal loan",
            category="unsecured",
            default_rate=15.0,
            default_term=5,
        ),
        "auto": LiabilityClassInfo(
            name="Auto loan",
            description="Loan for a vehicle purchase",
            category="secured",
            default_rate=12.0,
            default_term=7,
        ),
        "business": LiabilityClassInfo(
            name="Business loan",
            description="Loan for business development",
            category="business",
            default_rate=18.0,
            default_term=3,
        ),
    }


RISK_CATEGORIES: Dict[str, RiskCategory] = {
    "secured": RiskCategory(
        name="Secured", description="Backed by collateral", risk_level="low"
    ),
    "unsecured": RiskCategory(
        name="Unsecured", description="No collateral", risk_level="medium"
    ),
    "business": RiskCategory(
        name="Business", description="Commercial borrowing", risk_level="high"
    ),
}


class LiabilityClassRegistry:
    """Lookup table of liability class metadata."""

    def __init__(self, liability_types: Optional[Dict[str, LiabilityClassInfo]] = None):
        self.liability_types = (
            liability_types
            if liability_types is not None
            else default_liability_classes()
        )

    def get_liability_info(self, liability_type: str) -> Optional[LiabilityClassInfo]:
        """Get metadata for a liability type, or None if unknown."""
        return self.liability_types.get(liability_type)

    def all_liability_types(self) -> Dict[str, LiabilityClassInfo]:
        """Get all registered liability types."""
        return dict(self.liability_types)

    def get_risk_category(self, liability_type: str) -> Optional[RiskCategory]:
        """Get the risk category of a liability type."""
        info = self.get_liability_info(liability_type)
        if info is None:
            return None
        return RISK_CATEGORIES.get(info.category)

    def create_default_liability(
        self,
        liability_type: str,
        principal: float = 0.0,
        rate: Optional[float] = None,
        term_years: Optional[int] = None,
    ) -> Liability:
        """
        Create a new liability, filling rate and term from the type defaults.

        Args:
            liability_type: Registered liability type
            principal: Loan amount
            rate: Annual rate in percent (defaults to the type's rate)
            term_years: Term in years (defaults to the type's term)

        Returns:
            New Liability with current balance equal to principal

        Raises:
            ValueError: If the liability type is unknown
        """
        info = self.get_liability_info(liability_type)
        if info is None:
            raise ValueError(f"Unknown liability type: {liability_type}")

        return Liability(
            id=f"{liability_type}_{uuid.uuid4().hex[:12]}",
            type=liability_type,
            name=info.name,
            principal=principal,
            rate=rate if rate is not None else info.default_rate,
            term_years=term_years if term_years is not None else info.default_term,
            current_balance=principal,
        )
