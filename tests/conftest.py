import datetime as dt

import pytest

from hourly_rate.api import create_app
from hourly_rate.config import Settings
from hourly_rate.data_model import EquipmentItem, FixedCost, IncomeTarget, RateInputs, SocialNet, TimeBudget
from hourly_rate.engine import RateRepository


@pytest.fixture
def baseline_inputs():
    return RateInputs(
        income_target=IncomeTarget(net_income=3000.0, tax_rate=0.06),
        time_budget=TimeBudget(),
    )


@pytest.fixture
def full_inputs():
    return RateInputs(
        income_target=IncomeTarget(net_income=4000.0, tax_rate=0.15, tax_regime="IP"),
        time_budget=TimeBudget(),
        equipment=(
            EquipmentItem(name="Laptop", cost=3600.0, lifespan_years=3, purchase_date=dt.date(2024, 1, 15)),
            EquipmentItem(name="Chair", cost=500.0, lifespan_years=0),
        ),
        fixed_costs=(
            FixedCost(name="Coworking", amount=250.0, category="rent"),
            FixedCost(name="IDE", amount=50.0, category="software"),
        ),
        social_net=SocialNet(),
    )


@pytest.fixture
def repository(full_inputs):
    repo = RateRepository()
    repo.load_inputs(full_inputs)
    return repo


@pytest.fixture
def client(repository):
    app = create_app(repository=repository, settings=Settings(cors_allow_origin="http://localhost:5173"))
    app.config["TESTING"] = True
    return app.test_client()
