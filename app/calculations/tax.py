"""
Tax Calculations

Flat-rate tax estimation and a progressive bracket calculator for
user-supplied bracket tables. Estimates only; no tax-law rules are applied.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Sequence

from app.calculations.money import ZERO, HUNDRED, percentage, total
from app.errors import ValidationError


@dataclass(frozen=True)
class TaxBracket:
    """Income range taxed at a marginal rate (rate given as a percentage)."""

    lower_bound: Decimal
    upper_bound: Decimal
    rate: Decimal


@dataclass
class BracketBreakdown:
    """Tax owed within one bracket."""

    lower_bound: Decimal
    upper_bound: Decimal
    rate: Decimal
    income_in_bracket: Decimal
    tax_for_bracket: Decimal


@dataclass
class BracketCalculation:
    """Result of applying a bracket table to a taxable income."""

    taxable_income: Decimal
    estimated_tax_liability: Decimal
    effective_tax_rate: Decimal
    bracket_breakdown: List[BracketBreakdown] = field(default_factory=list)


@dataclass
class FlatTaxEstimate:
    """Flat-rate tax estimate with adjustments."""

    current_taxable_income: Decimal
    estimated_taxable_income: Decimal
    tax_rate: Decimal
    current_tax_liability: Decimal
    estimated_tax_liability: Decimal
    additional_income: Decimal
    additional_deductions: Decimal
    projected_savings: Decimal


def adjust_taxable_income(
    taxable_income: Decimal,
    additional_income: Decimal = ZERO,
    additional_deductions: Decimal = ZERO,
) -> Decimal:
    """Apply what-if adjustments. The result is not clamped at zero."""
    return taxable_income + additional_income - additional_deductions


def validate_brackets(brackets: Sequence[TaxBracket]) -> None:
    """
    Check that a bracket table is usable.

    Rules: at least one bracket; the first starts at 0; every bracket has
    upper > lower and a rate within 0-100; each bracket starts exactly where
    the previous one ends (which also makes the table ascending).

    Raises:
        ValidationError: naming the rule and the 1-based bracket number
    """
    if not brackets:
        raise ValidationError("At least one tax bracket is required")

    if brackets[0].lower_bound != 0:
        raise ValidationError(
            f"Bracket 1 lower bound must be 0, got {brackets[0].lower_bound}"
        )

    for index, bracket in enumerate(brackets):
        number = index + 1
        if bracket.upper_bound <= bracket.lower_bound:
            raise ValidationError(
                f"Bracket {number} upper bound {bracket.upper_bound} must be "
                f"greater than lower bound {bracket.lower_bound}"
            )
        if not (0 <= bracket.rate <= 100):
            raise ValidationError(
                f"Bracket {number} rate {bracket.rate} must be between 0 and 100"
            )
        if index > 0:
            previous = brackets[index - 1]
            if bracket.lower_bound < previous.lower_bound:
                raise ValidationError(
                    f"Bracket {number} is out of order: lower bound "
                    f"{bracket.lower_bound} is below bracket {index} lower bound "
                    f"{previous.lower_bound}"
                )
            if bracket.lower_bound != previous.upper_bound:
                raise ValidationError(
                    f"Bracket {number} lower bound {bracket.lower_bound} must equal "
                    f"bracket {index} upper bound {previous.upper_bound}"
                )


def calculate_bracket_tax(
    brackets: Sequence[TaxBracket], taxable_income: Decimal
) -> BracketCalculation:
    """
    Calculate progressive tax over a validated bracket table.

    Income above the last bracket's upper bound is not taxed.

    Args:
        brackets: Ascending, contiguous bracket table
        taxable_income: Income to tax; may be negative

    Returns:
        BracketCalculation with one breakdown row per bracket

    Raises:
        ValidationError: If the bracket table is malformed
    """
    validate_brackets(brackets)

    breakdown = []
    for bracket in brackets:
        income_in_bracket = max(
            ZERO, min(taxable_income, bracket.upper_bound) - bracket.lower_bound
        )
        breakdown.append(
            BracketBreakdown(
                lower_bound=bracket.lower_bound,
                upper_bound=bracket.upper_bound,
                rate=bracket.rate,
                income_in_bracket=income_in_bracket,
                tax_for_bracket=income_in_bracket * bracket.rate / HUNDRED,
            )
        )

    liability = total(row.tax_for_bracket for row in breakdown)
    effective_rate = percentage(liability, taxable_income) if taxable_income > 0 else ZERO

    return BracketCalculation(
        taxable_income=taxable_income,
        estimated_tax_liability=liability,
        effective_tax_rate=effective_rate,
        bracket_breakdown=breakdown,
    )


def estimate_flat_tax(
    current_taxable_income: Decimal,
    tax_rate: Decimal,
    additional_income: Decimal = ZERO,
    additional_deductions: Decimal = ZERO,
) -> FlatTaxEstimate:
    """
    Estimate tax at a single flat rate before and after adjustments.

    Projected savings is the current liability minus the adjusted liability,
    so extra deductions produce positive savings.
    """
    estimated_taxable_income = adjust_taxable_income(
        current_taxable_income, additional_income, additional_deductions
    )
    current_liability = current_taxable_income * tax_rate / HUNDRED
    estimated_liability = estimated_taxable_income * tax_rate / HUNDRED

    return FlatTaxEstimate(
        current_taxable_income=current_taxable_income,
        estimated_taxable_income=estimated_taxable_income,
        tax_rate=tax_rate,
        current_tax_liability=current_liability,
        estimated_tax_liability=estimated_liability,
        additional_income=additional_income,
        additional_deductions=additional_deductions,
        projected_savings=current_liability - estimated_liability,
    )
