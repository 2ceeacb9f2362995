from __future__ import annotations

from typing import NamedTuple

from ..data_model import IncomeTarget


class TaxGrossUp(NamedTuple):
    annual_net_income: float
    gross_from_net: float
    tax_amount: float


def gross_up_for_tax(income_target: IncomeTarget) -> TaxGrossUp:
    """Gross income that leaves ``net_income * 12`` after a flat tax.

    Tax rates of 1 or more cannot be grossed up; the net amount is used as is.
    """
    annual_net = income_target.annual_net_income
    keep_share = 1.0 - income_target.tax_rate
    gross = annual_net / keep_share if keep_share > 0 else annual_net
    return TaxGrossUp(annual_net, gross, gross - annual_net)
