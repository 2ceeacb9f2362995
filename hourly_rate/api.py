"""REST backend for the hourly rate calculator."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request
from loguru import logger

from .config import Settings, settings as default_settings
from .data_model import (
    COST_CATEGORIES,
    TAX_REGIMES,
    EquipmentItem,
    EquipmentTableModel,
    FixedCost,
    FixedCostTableModel,
    IncomeTarget,
    MarketRate,
    RateInputs,
    SocialNet,
    TimeBudget,
    dataframe_to_equipment,
    dataframe_to_fixed_costs,
)
from .data_model.equipment import DEFAULT_LIFESPAN_YEARS
from .engine import (
    RateRepository,
    aggregate_period,
    build_scenario_record,
    calculate,
    compare_scenario,
    default_name_index,
    filter_period,
    frame_to_records,
    history_frame,
    market_position,
    nominal_hours_per_week,
    sanitize_json_compat,
    summarize_history,
)
from .utils import new_id, parse_date, parse_datetime

EQUIPMENT_MODEL = EquipmentTableModel()
FIXED_COST_MODEL = FixedCostTableModel()


def _extract_payload_value(payload: dict, *keys: str, default=None):
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return default


def _number(payload: dict, *keys: str, default: float = 0.0, minimum: Optional[float] = None) -> float:
    raw = _extract_payload_value(payload, *keys, default=default)
    if isinstance(raw, str):
        raw = raw.strip() or default
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"'{keys[0]}' must be a number.")
    if minimum is not None and value < minimum:
        raise ValueError(f"'{keys[0]}' must be at least {minimum}.")
    return value


def _text(payload: dict, *keys: str, default: str = "") -> str:
    return str(_extract_payload_value(payload, *keys, default=default)).strip()


def _require_mapping(value: Any, name: str) -> dict:
    if not isinstance(value, dict):
        raise ValueError(f"'{name}' must be an object.")
    return value


def _require_list(value: Any, name: str) -> list:
    if not isinstance(value, list):
        raise ValueError(f"'{name}' must be a list.")
    return value


def parse_income_target(payload: dict, default_currency: str = "USD") -> IncomeTarget:
    net_income = _number(payload, "netIncome", "net_income", minimum=0.0)
    currency = _text(payload, "currency", default=default_currency).upper() or default_currency
    regime_id = _text(payload, "taxRegime", "tax_regime").upper()
    raw_rate = _extract_payload_value(payload, "taxRate", "tax_rate")
    if raw_rate is None:
        return IncomeTarget.for_regime(regime_id or "NPD", net_income, currency=currency)
    tax_rate = float(raw_rate)
    if not 0.0 <= tax_rate < 1.0:
        raise ValueError("'taxRate' must be a fraction in [0, 1).")
    if regime_id not in TAX_REGIMES:
        regime_id = "CUSTOM"
    return IncomeTarget(net_income=net_income, tax_rate=tax_rate, currency=currency, tax_regime=regime_id)


def parse_time_budget(payload: dict) -> TimeBudget:
    days = _number(payload, "workingDaysPerWeek", "working_days_per_week", default=5)
    if days != int(days) or not 1 <= days <= 7:
        raise ValueError("'workingDaysPerWeek' must be a whole number between 1 and 7.")
    hours_per_day = _number(payload, "hoursPerDay", "hours_per_day", default=8.0)
    if hours_per_day <= 0 or hours_per_day > 24:
        raise ValueError("'hoursPerDay' must be greater than 0 and at most 24.")
    non_billable = _number(payload, "nonBillablePercent", "non_billable_percent", default=0.2)
    if not 0.0 <= non_billable < 1.0:
        raise ValueError("'nonBillablePercent' must be a fraction in [0, 1).")
    return TimeBudget(
        working_days_per_week=int(days),
        hours_per_day=hours_per_day,
        holidays=int(_number(payload, "holidays", default=10, minimum=0)),
        vacation_days=int(_number(payload, "vacationDays", "vacation_days", default=20, minimum=0)),
        sick_days=int(_number(payload, "sickDays", "sick_days", default=5, minimum=0)),
        non_billable_percent=non_billable,
    )


def parse_social_net(payload: dict) -> SocialNet:
    return SocialNet(
        sick_fund_months=_number(payload, "sickFundMonths", "sick_fund_months", default=1.0, minimum=0.0),
        safety_net_months=_number(payload, "safetyNetMonths", "safety_net_months", default=3.0, minimum=0.0),
        target_saving_months=int(
            _number(payload, "targetSavingMonths", "target_saving_months", default=12, minimum=0)
        ),
    )


def parse_equipment_item(payload: dict) -> EquipmentItem:
    name = _text(payload, "name", "Name")
    if not name:
        raise ValueError("Equipment name is required.")
    return EquipmentItem(
        name=name,
        cost=_number(payload, "cost", "Cost", minimum=0.0),
        lifespan_years=int(
            _number(payload, "lifespanYears", "lifespan_years", default=DEFAULT_LIFESPAN_YEARS, minimum=0)
        ),
        purchase_date=parse_date(_extract_payload_value(payload, "purchaseDate", "purchase_date")),
        id=_text(payload, "id", "Id") or new_id(),
    )


def parse_fixed_cost(payload: dict) -> FixedCost:
    name = _text(payload, "name", "Name")
    if not name:
        raise ValueError("Fixed cost name is required.")
    category = _text(payload, "category", "Category", default="other").lower()
    return FixedCost(
        name=name,
        amount=_number(payload, "amount", "monthlyAmount", "monthly_amount", minimum=0.0),
        category=category if category in COST_CATEGORIES else "other",
        id=_text(payload, "id", "Id") or new_id(),
    )


def parse_market_rate(payload: dict, default_currency: str = "USD") -> MarketRate:
    name = _text(payload, "name")
    if not name:
        raise ValueError("Market rate name is required.")
    min_rate = _number(payload, "minRate", "min_rate", minimum=0.0)
    max_rate = _number(payload, "maxRate", "max_rate", minimum=0.0)
    if max_rate < min_rate:
        raise ValueError("'maxRate' must not be below 'minRate'.")
    average = _number(payload, "averageRate", "average_rate", default=(min_rate + max_rate) / 2.0, minimum=0.0)
    return MarketRate.from_dict(
        {
            "id": _text(payload, "id"),
            "name": name,
            "min_rate": min_rate,
            "max_rate": max_rate,
            "average_rate": average,
            "currency": _text(payload, "currency", default=default_currency).upper() or default_currency,
            "region": _text(payload, "region"),
            "source": _text(payload, "source"),
            "notes": _text(payload, "notes"),
            "updated_at": parse_datetime(_extract_payload_value(payload, "updatedAt", "updated_at")),
        }
    )


def parse_equipment_list(payload: dict) -> List[EquipmentItem]:
    """Equipment from either editor ``rows`` or plain ``items``."""
    rows = _extract_payload_value(payload, "rows")
    if rows is not None:
        return dataframe_to_equipment(EQUIPMENT_MODEL.rows_to_df(_require_list(rows, "rows")))
    items = _require_list(_extract_payload_value(payload, "items", "equipment", default=[]), "items")
    return [parse_equipment_item(_require_mapping(item, "items")) for item in items]


def parse_fixed_cost_list(payload: dict) -> List[FixedCost]:
    rows = _extract_payload_value(payload, "rows")
    if rows is not None:
        return dataframe_to_fixed_costs(FIXED_COST_MODEL.rows_to_df(_require_list(rows, "rows")))
    items = _require_list(_extract_payload_value(payload, "items", "fixedCosts", "fixed_costs", default=[]), "items")
    return [parse_fixed_cost(_require_mapping(item, "items")) for item in items]


def parse_market_rate_list(payload: dict, default_currency: str = "USD") -> List[MarketRate]:
    items = _require_list(_extract_payload_value(payload, "items", "marketRates", "market_rates", default=[]), "items")
    return [parse_market_rate(_require_mapping(item, "items"), default_currency) for item in items]


def parse_rate_inputs(payload: dict, default_currency: str = "USD") -> RateInputs:
    income = _extract_payload_value(payload, "incomeTarget", "income_target")
    time_budget = _extract_payload_value(payload, "timeBudget", "time_budget")
    social_net = _extract_payload_value(payload, "socialNet", "social_net")
    equipment = _require_list(_extract_payload_value(payload, "equipment", default=[]), "equipment")
    fixed_costs = _require_list(_extract_payload_value(payload, "fixedCosts", "fixed_costs", default=[]), "fixedCosts")
    return RateInputs(
        income_target=parse_income_target(_require_mapping(income, "incomeTarget"), default_currency)
        if income is not None
        else None,
        time_budget=parse_time_budget(_require_mapping(time_budget, "timeBudget")) if time_budget is not None else None,
        equipment=tuple(parse_equipment_item(_require_mapping(item, "equipment")) for item in equipment),
        fixed_costs=tuple(parse_fixed_cost(_require_mapping(item, "fixedCosts")) for item in fixed_costs),
        social_net=parse_social_net(_require_mapping(social_net, "socialNet")) if social_net is not None else None,
    )


def parse_scenario_request(payload: dict, fallback_hours: float) -> Dict[str, Any]:
    hours = _number(payload, "hoursPerWeek", "hours_per_week", default=fallback_hours)
    if hours <= 0:
        raise ValueError("'hoursPerWeek' must be greater than 0.")
    return {
        "name": _text(payload, "name"),
        "hours_per_week": hours,
        "extra_equipment_cost": _number(payload, "extraEquipmentCost", "extra_equipment_cost", minimum=0.0),
    }


def _model_payload(model) -> Dict[str, Any]:
    return sanitize_json_compat(model.to_dict())


def _bad_request(exc: Exception):
    logger.warning(f"Rejected payload on {request.method} {request.path}: {exc}")
    return jsonify({"error": str(exc)}), 400


def _not_found(what: str):
    return jsonify({"error": f"{what} not found."}), 404


def _json_payload() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    return _require_mapping(payload, "body")


def create_app(repository: Optional[RateRepository] = None, settings: Optional[Settings] = None) -> Flask:
    config = settings or default_settings
    repo = repository if repository is not None else RateRepository()
    currency = config.default_currency

    app = Flask(__name__)
    app.config["APP_NAME"] = config.app_name
    app.extensions["rate_repository"] = repo

    @app.after_request
    def apply_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = config.cors_allow_origin
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.get("/api/health")
    def healthcheck():
        return jsonify({"status": "ok", "app": config.app_name, "environment": config.environment})

    @app.get("/api/schema")
    def get_schema():
        return jsonify(
            {
                "taxRegimes": [
                    {"id": r.id, "name": r.name, "rate": r.rate, "description": r.description}
                    for r in TAX_REGIMES.values()
                ],
                "costCategories": [{"id": key, "name": name} for key, name in COST_CATEGORIES.items()],
                "equipment": _model_payload(EQUIPMENT_MODEL),
                "fixedCosts": _model_payload(FIXED_COST_MODEL),
                "defaultCurrency": currency,
                "freqOptions": [
                    {"label": "Monthly", "value": "M"},
                    {"label": "Quarterly", "value": "Q"},
                    {"label": "Yearly", "value": "Y"},
                ],
            }
        )

    # Single-value inputs

    def _singleton_routes(path: str, key: str, store, parser):
        def get_value():
            value = store.get()
            return jsonify({key: value.to_dict() if value is not None else None})

        def put_value():
            try:
                value = parser(_json_payload())
            except (TypeError, ValueError) as exc:
                return _bad_request(exc)
            store.replace(value)
            return jsonify({key: value.to_dict()})

        app.add_url_rule(f"/api/{path}", f"get_{key}", get_value, methods=["GET"])
        app.add_url_rule(f"/api/{path}", f"put_{key}", put_value, methods=["PUT"])

    _singleton_routes("income-target", "income_target", repo.income_target, lambda p: parse_income_target(p, currency))
    _singleton_routes("time-budget", "time_budget", repo.time_budget, parse_time_budget)
    _singleton_routes("social-net", "social_net", repo.social_net, parse_social_net)

    # Ordered collections

    def _collection_routes(path: str, key: str, label: str, store, list_parser, item_parser):
        def list_items():
            return jsonify({key: [item.to_dict() for item in store.items()]})

        def replace_items():
            try:
                items = list_parser(_json_payload())
                collection = store.replace_all(items)
            except (TypeError, ValueError) as exc:
                return _bad_request(exc)
            return jsonify({key: [item.to_dict() for item in collection]})

        def add_item():
            try:
                item = store.add(item_parser(_json_payload()))
            except (TypeError, ValueError) as exc:
                return _bad_request(exc)
            return jsonify({"item": item.to_dict(), key: [i.to_dict() for i in store.items()]}), 201

        def delete_item(item_id: str):
            if not store.delete(item_id):
                return _not_found(label)
            return jsonify({"message": f"{label} deleted.", key: [i.to_dict() for i in store.items()]})

        app.add_url_rule(f"/api/{path}", f"list_{key}", list_items, methods=["GET"])
        app.add_url_rule(f"/api/{path}", f"replace_{key}", replace_items, methods=["PUT"])
        app.add_url_rule(f"/api/{path}", f"add_{key}", add_item, methods=["POST"])
        app.add_url_rule(f"/api/{path}/<item_id>", f"delete_{key}", delete_item, methods=["DELETE"])

    _collection_routes(
        "equipment", "equipment", "Equipment", repo.equipment, parse_equipment_list, parse_equipment_item
    )
    _collection_routes(
        "fixed-costs", "fixed_costs", "Fixed cost", repo.fixed_costs, parse_fixed_cost_list, parse_fixed_cost
    )
    _collection_routes(
        "market-rates",
        "market_rates",
        "Market rate",
        repo.market_rates,
        lambda p: parse_market_rate_list(p, currency),
        lambda p: parse_market_rate(p, currency),
    )

    # Calculation

    @app.get("/api/calculation")
    def get_calculation():
        inputs = repo.inputs()
        result = calculate(inputs)
        return jsonify(
            {"inputs_complete": inputs.is_complete, "currency": inputs.currency, "result": result.to_dict()}
        )

    @app.post("/api/calculation")
    def post_calculation():
        try:
            payload = _json_payload()
            inputs = parse_rate_inputs(payload, currency)
            extra = _number(payload, "extraEquipmentCost", "extra_equipment_cost", minimum=0.0)
            custom_hours = None
            if _extract_payload_value(payload, "customHoursPerWeek", "custom_hours_per_week") is not None:
                custom_hours = _number(payload, "customHoursPerWeek", "custom_hours_per_week")
                if custom_hours <= 0:
                    raise ValueError("'customHoursPerWeek' must be greater than 0.")
        except (TypeError, ValueError) as exc:
            return _bad_request(exc)
        result = calculate(inputs, extra_equipment_cost=extra, custom_hours_per_week=custom_hours)
        return jsonify(
            sanitize_json_compat(
                {"inputs_complete": inputs.is_complete, "currency": inputs.currency, "result": result.to_dict()}
            )
        )

    # Scenarios

    def _parse_scenario():
        inputs = repo.inputs()
        params = parse_scenario_request(_json_payload(), nominal_hours_per_week(inputs.time_budget))
        comparison = compare_scenario(inputs, params["hours_per_week"], params["extra_equipment_cost"])
        return params, comparison

    @app.post("/api/scenarios/preview")
    def preview_scenario():
        try:
            params, comparison = _parse_scenario()
        except (TypeError, ValueError) as exc:
            return _bad_request(exc)
        return jsonify({"parameters": params, "comparison": comparison.to_dict()})

    @app.get("/api/scenarios")
    def list_scenarios():
        return jsonify({"scenarios": [record.to_dict() for record in repo.scenarios.all()]})

    @app.post("/api/scenarios")
    def save_scenario():
        try:
            params, comparison = _parse_scenario()
        except (TypeError, ValueError) as exc:
            return _bad_request(exc)
        record = build_scenario_record(
            params["name"],
            params["hours_per_week"],
            params["extra_equipment_cost"],
            comparison.scenario,
            existing_count=default_name_index(repo.scenarios.all()),
        )
        record = repo.scenarios.add(record)
        logger.info(f"Saved scenario '{record.name}' at {record.calculated_hourly_rate:.2f}/h")
        return jsonify({"scenario": record.to_dict(), "comparison": comparison.to_dict()}), 201

    @app.delete("/api/scenarios/<scenario_id>")
    def delete_scenario(scenario_id: str):
        if not repo.scenarios.delete(scenario_id):
            return _not_found("Scenario")
        return jsonify({"message": "Scenario deleted.", "scenarios": [r.to_dict() for r in repo.scenarios.all()]})

    # History

    def _history_selection():
        start = parse_date(request.args.get("from"))
        end = parse_date(request.args.get("to"))
        entries = repo.history.entries(start=start, end=end)
        return filter_period(entries, request.args.get("period", "ALL"))

    @app.get("/api/history")
    def list_history():
        try:
            entries = _history_selection()
        except (TypeError, ValueError) as exc:
            return _bad_request(exc)
        return jsonify(
            {"history": [entry.to_dict() for entry in entries], "summary": summarize_history(entries)}
        )

    @app.post("/api/history")
    def record_history():
        try:
            payload = _json_payload()
            date = parse_datetime(_extract_payload_value(payload, "date"))
        except (TypeError, ValueError) as exc:
            return _bad_request(exc)
        inputs = repo.inputs()
        result = calculate(inputs)
        if result.is_empty:
            return _bad_request(ValueError("Income target and time budget with billable hours are required."))
        entry = repo.history.record(
            result,
            date=date,
            notes=_text(payload, "notes"),
            currency=inputs.income_target.currency or currency,
        )
        logger.info(f"Recorded history entry {entry.id} at {entry.hourly_rate:.2f}/h")
        return jsonify({"entry": entry.to_dict()}), 201

    @app.delete("/api/history/<entry_id>")
    def delete_history(entry_id: str):
        if not repo.history.delete(entry_id):
            return _not_found("History entry")
        return jsonify({"message": "History entry deleted."})

    @app.get("/api/history/summary")
    def history_summary():
        freq = (request.args.get("freq") or "M").upper()
        try:
            entries = _history_selection()
            aggregated = aggregate_period(history_frame(entries), freq=freq)
        except (TypeError, ValueError) as exc:
            return _bad_request(exc)
        return jsonify({"freq": freq, "summary": summarize_history(entries), "data": frame_to_records(aggregated)})

    # Market

    @app.get("/api/market-position")
    def get_market_position():
        raw_rate = request.args.get("rate")
        try:
            rate = float(raw_rate) if raw_rate not in (None, "") else calculate(repo.inputs()).hourly_rate
        except (TypeError, ValueError) as exc:
            return _bad_request(exc)
        markets = list(repo.market_rates.items())
        return jsonify(
            {
                "rate": rate,
                "position": market_position(rate, markets),
                "markets": [
                    dict(market.to_dict(), position_in_range=market.position_in_range(rate)) for market in markets
                ],
            }
        )

    return app
