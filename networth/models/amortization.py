"""
Loan amortization calculations for net worth projections.

This module provides fixed-rate annuity calculations for liabilities:
monthly payments, outstanding balances after a number of years, lifetime
totals and short payment schedules. Rates are annual percentages
(8.5 means 8.5%).
"""

from typing import List

from pydantic import BaseModel, Field

from .protocols import LoanTerms


class LoanTotals(BaseModel):
    """Lifetime totals of a loan."""

    total_payments: float = Field(..., description="Sum of all monthly payments")
    total_interest: float = Field(..., description="Interest paid over the term")
    interest_rate: float = Field(
        ..., description="Total interest as a percentage of principal"
    )


class PaymentScheduleEntry(BaseModel):
    """Breakdown of a single monthly payment."""

    month: int = Field(..., ge=1, description="Payment number (1-based)")
    payment: float = Field(..., ge=0, description="Total payment amount")
    principal: float = Field(..., description="Principal portion of payment")
    interest: float = Field(..., ge=0, description="Interest portion of payment")
    remaining_balance: float = Field(..., ge=0, description="Balance after payment")


class LoanValidationResult(BaseModel):
    """Result of validating loan parameters."""

    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    message: str = ""


class AmortizationCalculator:
    """Calculator for fixed-rate loan amortization."""

    @staticmethod
    def calculate_monthly_payment(
        principal: float, annual_rate_percent: float, term_years: float
    ) -> float:
        """
        Calculate the monthly payment using the standard annuity formula.

        Args:
            principal: Loan principal amount
            annual_rate_percent: Annual interest rate in percent (e.g., 8.5)
            term_years: Loan term in years

        Returns:
            Monthly payment amount, 0.0 for non-positive inputs
        """
        if principal <= 0 or annual_rate_percent <= 0 or term_years <= 0:
            return 0.0

        monthly_rate = annual_rate_percent / 100 / 12
        num_payments = term_years * 12
        growth = (1 + monthly_rate) ** num_payments

        payment = principal * (monthly_rate * growth) / (growth - 1)

        # Round to nearest cent
        return round(payment, 2)

    @staticmethod
    def calculate_remaining_balance(liability: LoanTerms, elapsed_years: float) -> float:
        """
        Calculate the outstanding balance after a number of years.

        Fractional years are converted to months linearly.

        Args:
            liability: Loan with principal, rate and term_years
            elapsed_years: Years since the loan started

        Returns:
            Outstanding balance, never negative
        """
        if elapsed_years <= 0:
            return liability.principal
        if elapsed_years >= liability.term_years:
            return 0.0

        monthly_rate = liability.rate / 100 / 12
        total_payments = liability.term_years * 12
        payments_made = elapsed_years * 12

        if monthly_rate <= 0:
            # Interest-free loans amortize in a straight line
            balance = liability.principal * (1 - payments_made / total_payments)
        else:
            growth_total = (1 + monthly_rate) ** total_payments
            growth_made = (1 + monthly_rate) ** payments_made
            balance = (
                liability.principal
                * (growth_total - growth_made)
                / (growth_total - 1)
            )

        return max(0.0, round(balance, 2))

    @staticmethod
    def calculate_total_payments(liability: LoanTerms) -> LoanTotals:
        """
        Calculate lifetime payment totals for a loan.

        Args:
            liability: Loan with principal, rate and term_years

        Returns:
            LoanTotals with total payments, interest and interest share
        """
        monthly_payment = AmortizationCalculator.calculate_monthly_payment(
            liability.principal, liability.rate, liability.term_years
        )
        total_payments = monthly_payment * liability.term_years * 12
        total_interest = total_payments - liability.principal
        interest_rate = (
            total_interest / liability.principal * 100 if liability.principal > 0 else 0.0
        )

        return LoanTotals(
            total_payments=round(total_payments, 2),
            total_interest=round(total_interest, 2),
            interest_rate=round(interest_rate, 2),
        )

    @staticmethod
    def get_payment_schedule(
        liability: LoanTerms, months: int = 12
    ) -> List[PaymentScheduleEntry]:
        """
        Generate the first months of the payment schedule.

        Args:
            liability: Loan with principal, rate and term_years
            months: Number of months to generate

        Returns:
            List of payment breakdowns
        """
        monthly_rate = liability.rate / 100 / 12
        if monthly_rate <= 0:
            # Same straight-line pay-down as calculate_remaining_balance
            monthly_payment = liability.principal / (liability.term_years * 12)
        else:
            monthly_payment = AmortizationCalculator.calculate_monthly_payment(
                liability.principal, liability.rate, liability.term_years
            )
        balance = liability.principal

        schedule = []
        for month in range(1, min(months, liability.term_years * 12) + 1):
            interest_payment = balance * monthly_rate
            principal_payment = monthly_payment - interest_payment
            balance -= principal_payment

            schedule.append(
                PaymentScheduleEntry(
                    month=month,
                    payment=round(monthly_payment, 2),
                    principal=round(principal_payment, 2),
                    interest=round(interest_payment, 2),
                    remaining_balance=round(max(0.0, balance), 2),
                )
            )

        return schedule


def validate_loan_parameters(
    principal: float, rate: float, term_years: float
) -> LoanValidationResult:
    """
    Validate loan parameters before a liability is created.

    Args:
        principal: Loan amount
        rate: Annual interest rate in percent
        term_years: Loan term in years

    Returns:
        LoanValidationResult with any errors found
    """
    errors = []

    if not principal or principal <= 0:
        errors.append("Loan amount must be greater than zero")
    if not rate or rate <= 0 or rate > 100:
        errors.append("Interest rate must be between 0 and 100%")
    if not term_years or term_years <= 0 or term_years > 50:
        errors.append("Loan term must be between 1 and 50 years")

    return LoanValidationResult(
        is_valid=not errors,
        errors=errors,
        message="; ".join(errors) if errors else "Parameters are valid",
    )
