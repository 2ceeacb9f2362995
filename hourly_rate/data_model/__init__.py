from .base import ColumnDefinition, TableModel
from .costs import COST_CATEGORIES, FixedCost, FixedCostTableModel, dataframe_to_fixed_costs
from .equipment import EquipmentItem, EquipmentTableModel, dataframe_to_equipment
from .income import TAX_REGIMES, IncomeTarget, SocialNet, TaxRegime, TimeBudget
from .market import MarketRate
from .ordered import OrderedCollection
from .plan import RateInputs
from .results import EMPTY_RESULT, BreakdownItem, CalculationResult, HistoryEntry, ScenarioRecord

__all__ = [
    "COST_CATEGORIES",
    "EMPTY_RESULT",
    "TAX_REGIMES",
    "BreakdownItem",
    "CalculationResult",
    "ColumnDefinition",
    "EquipmentItem",
    "EquipmentTableModel",
    "FixedCost",
    "FixedCostTableModel",
    "HistoryEntry",
    "IncomeTarget",
    "MarketRate",
    "OrderedCollection",
    "RateInputs",
    "ScenarioRecord",
    "SocialNet",
    "TableModel",
    "TaxRegime",
    "TimeBudget",
    "dataframe_to_equipment",
    "dataframe_to_fixed_costs",
]
