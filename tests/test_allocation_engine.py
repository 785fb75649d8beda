"""Tests for the allocation engine."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime

import pytest

from models.county import CountyRecord
from models.resource import ResourceRecord
from data.validator import InvalidRecordError
from data.loader import parse_counties, parse_resources
from data.sample_data import generate_counties_df, generate_resources_df
from engine.allocation_engine import (
    compute_priority,
    rank_counties,
    classify_need,
    compute_base_need,
    compute_adjusted_need,
    county_share_cap,
    compute_need_met_pct,
    run_allocation,
    compute_resource_utilization,
    summarize_by_county,
)
from engine.explainer import risk_level, explain_priority, explain_need


def make_county(county_id="1", name="Test", risk=80.0, aqi="Moderate", ta_max=90.0,
                rolling=88.0, population=1_000_000, area=500.0,
                age65=15.0, minority=50.0, unemployment=8.0, no_hs=12.0):
    return CountyRecord(
        county_id=county_id,
        county_name=name,
        ta_min=60.0,
        ta_avg=75.0,
        ta_max=ta_max,
        aqi_category=aqi,
        risk_score=risk,
        unemployment_pct=unemployment,
        no_hs_diploma_pct=no_hs,
        minority_pct=minority,
        age65_pct=age65,
        total_population=population,
        area_sqmi=area,
        rolling_avg_ta_max=rolling,
    )


def make_resource(resource_id="r1", name="Kits", qty=100, tags=("general_emergency",)):
    return ResourceRecord(resource_id, name, "Medical", "kits", qty, tuple(tags))


def sample_data():
    return parse_counties(generate_counties_df()), parse_resources(generate_resources_df())


class TestComputePriority:
    def test_weighted_sum(self):
        county = make_county(risk=80.0, population=1_000_000, area=500.0)
        p = compute_priority(county)

        assert p.risk_factor == pytest.approx(0.8)
        expected_vuln = 0.3 * 0.15 + 0.2 * 0.50 + 0.2 * 0.08 + 0.3 * 0.12
        assert p.vulnerability_factor == pytest.approx(expected_vuln)
        assert p.density_factor == 1.0  # 2000/sq mi saturates
        assert p.priority_score == pytest.approx(0.5 * 0.8 + 0.3 * expected_vuln + 0.2 * 1.0)

    def test_density_below_saturation(self):
        county = make_county(population=250_000, area=1000.0)
        assert compute_priority(county).density_factor == pytest.approx(0.25)

    def test_score_in_unit_range(self):
        for county in parse_counties(generate_counties_df()):
            p = compute_priority(county)
            assert 0.0 <= p.priority_score <= 1.0

    def test_rule_config_overrides_weights(self):
        county = make_county(risk=60.0)
        p = compute_priority(county, {"risk_weight": 1.0, "vulnerability_weight": 0.0, "density_weight": 0.0})
        assert p.priority_score == pytest.approx(0.6)

    def test_oversized_weights_are_rescaled(self):
        county = make_county(risk=80.0)
        p = compute_priority(county, {"risk_weight": 1.0, "vulnerability_weight": 1.0, "density_weight": 1.0})
        expected_vuln = 0.3 * 0.15 + 0.2 * 0.50 + 0.2 * 0.08 + 0.3 * 0.12
        assert p.priority_score == pytest.approx((0.8 + expected_vuln + 1.0) / 3)
        assert 0.0 <= p.priority_score <= 1.0

        _, intensity = classify_need(p, make_resource(tags=("general_emergency",)))
        assert 0.0 <= intensity <= 1.0

    def test_zero_weights_fall_back_to_defaults(self):
        county = make_county()
        p = compute_priority(county, {"risk_weight": 0.0, "vulnerability_weight": 0.0, "density_weight": 0.0})
        assert p.priority_score == pytest.approx(compute_priority(county).priority_score)


class TestRankCounties:
    def test_sorted_descending(self):
        counties = [make_county("a", risk=20.0), make_county("b", risk=90.0), make_county("c", risk=55.0)]
        ranked = rank_counties(counties)
        assert [p.county.county_id for p in ranked] == ["b", "c", "a"]

    def test_ties_keep_input_order(self):
        counties = [make_county("x"), make_county("y"), make_county("z")]
        ranked = rank_counties(counties)
        assert [p.county.county_id for p in ranked] == ["x", "y", "z"]

    def test_sample_order(self):
        counties, _ = sample_data()
        ranked = rank_counties(counties)
        assert [p.county.county_name for p in ranked] == [
            "Harris", "Los Angeles", "Miami-Dade", "Maricopa", "Cook",
        ]


class TestClassifyNeed:
    def test_heat_by_risk(self):
        p = compute_priority(make_county(risk=75.0, rolling=70.0))
        needed, intensity = classify_need(p, make_resource(tags=("extreme_heat",)))
        assert needed
        assert intensity == pytest.approx(0.75)

    def test_heat_by_rolling_temp(self):
        p = compute_priority(make_county(risk=40.0, rolling=90.0))
        needed, intensity = classify_need(p, make_resource(tags=("extreme_heat",)))
        assert needed
        assert intensity == pytest.approx(0.40)

    def test_no_heat_need(self):
        p = compute_priority(make_county(risk=40.0, rolling=80.0))
        assert classify_need(p, make_resource(tags=("extreme_heat",))) == (False, 0.0)

    def test_air_quality_intensity_by_category(self):
        for aqi, expected in [("Unhealthy for Sensitive Groups", 0.6), ("Unhealthy", 0.8), ("Very Unhealthy", 1.0)]:
            p = compute_priority(make_county(aqi=aqi))
            needed, intensity = classify_need(p, make_resource(tags=("air_quality",)))
            assert needed
            assert intensity == pytest.approx(expected)

    def test_good_or_moderate_air_has_no_need(self):
        for aqi in ["Good", "Moderate"]:
            p = compute_priority(make_county(aqi=aqi))
            assert classify_need(p, make_resource(tags=("air_quality",))) == (False, 0.0)

    def test_general_emergency_uses_priority(self):
        p = compute_priority(make_county())
        needed, intensity = classify_need(p, make_resource(tags=("general_emergency",)))
        assert needed
        assert intensity == pytest.approx(p.priority_score)

    def test_power_outage_intensity(self):
        p = compute_priority(make_county(ta_max=85.0))
        needed, intensity = classify_need(p, make_resource(tags=("power_outage",)))
        assert needed
        assert intensity == pytest.approx(0.5)

    def test_power_outage_intensity_capped(self):
        p = compute_priority(make_county(ta_max=110.0))
        assert classify_need(p, make_resource(tags=("power_outage",)))[1] == 1.0

    def test_last_matching_rule_wins(self):
        p = compute_priority(make_county(risk=92.1, ta_max=104.8))
        needed, intensity = classify_need(p, make_resource(tags=("extreme_heat", "power_outage")))
        assert needed
        assert intensity == 1.0

    def test_unmatched_later_rule_keeps_earlier_intensity(self):
        p = compute_priority(make_county(risk=90.0, ta_max=75.0))
        needed, intensity = classify_need(p, make_resource(tags=("extreme_heat", "power_outage")))
        assert needed
        assert intensity == pytest.approx(0.9)

    def test_unknown_tag_ignored(self):
        p = compute_priority(make_county())
        assert classify_need(p, make_resource(tags=("wildfire",))) == (False, 0.0)


class TestNeedSizing:
    def test_base_need_rounds_up(self):
        assert compute_base_need(make_county(population=4_485_414)) == 90
        assert compute_base_need(make_county(population=50_000)) == 1
        assert compute_base_need(make_county(population=50_001)) == 2

    def test_adjusted_need_rounds_up(self):
        assert compute_adjusted_need(90, 1.0, 0.620828) == 56
        assert compute_adjusted_need(10, 0.0, 0.9) == 0

    def test_share_cap_floors(self):
        assert county_share_cap(make_resource(qty=5000)) == 2000
        assert county_share_cap(make_resource(qty=75)) == 30
        assert county_share_cap(make_resource(qty=1)) == 0

    def test_need_met_capped_at_100(self):
        assert compute_need_met_pct(56, 90) == pytest.approx(62.222, abs=1e-3)
        assert compute_need_met_pct(200, 90) == 100.0
        assert compute_need_met_pct(3, 0) == 100.0


class TestRunAllocation:
    def test_maricopa_cooling_centers(self):
        counties, resources = sample_data()
        scenario = run_allocation(counties, resources)

        alloc = next(a for a in scenario.allocations if a.county_id == "2" and a.resource_id == "1")
        assert alloc.allocated_quantity == 56
        assert alloc.need_met_pct == pytest.approx(62.222, abs=1e-3)

    def test_good_aqi_county_gets_no_air_quality_resources(self):
        counties, resources = sample_data()
        scenario = run_allocation(counties, resources)
        cook_resources = {a.resource_id for a in scenario.allocations_for_county("5")}
        assert "3" not in cook_resources  # Air Quality Monitors
        assert "6" not in cook_resources  # N95 masks
        assert "4" in cook_resources      # Medical kits via general_emergency

    def test_stock_and_share_invariants(self):
        counties, resources = sample_data()
        scenario = run_allocation(counties, resources)
        for r in resources:
            allocs = [a for a in scenario.allocations if a.resource_id == r.resource_id]
            assert sum(a.allocated_quantity for a in allocs) <= r.available_qty
            for a in allocs:
                assert a.allocated_quantity <= int(r.available_qty * 0.4)

    def test_scarce_resource_is_exhausted(self):
        counties, resources = sample_data()
        scenario = run_allocation(counties, resources)
        assert scenario.allocated_for_resource("2") == 150  # Portable ACs

    def test_allocations_are_positive_and_need_met_bounded(self):
        counties, resources = sample_data()
        scenario = run_allocation(counties, resources)
        assert scenario.allocations
        for a in scenario.allocations:
            assert a.allocated_quantity > 0
            assert 0.0 <= a.need_met_pct <= 100.0

    def test_allocations_in_priority_then_resource_order(self):
        counties, resources = sample_data()
        scenario = run_allocation(counties, resources)
        county_rank = {p.county.county_id: i for i, p in enumerate(rank_counties(counties))}
        resource_rank = {r.resource_id: i for i, r in enumerate(resources)}
        keys = [(county_rank[a.county_id], resource_rank[a.resource_id]) for a in scenario.allocations]
        assert keys == sorted(keys)

    def test_totals_match_allocations(self):
        counties, resources = sample_data()
        scenario = run_allocation(counties, resources)
        assert scenario.total_resources == sum(a.allocated_quantity for a in scenario.allocations)
        assert scenario.counties_served == len({a.county_id for a in scenario.allocations})
        assert scenario.optimization_objective == "minimize_risk_exposure"

    def test_deterministic(self):
        counties, resources = sample_data()
        now = datetime(2024, 9, 15, 12, 0, 0)
        first = run_allocation(counties, resources, now=now)
        second = run_allocation(counties, resources, now=now)
        assert first.allocations == second.allocations
        assert first.name == second.name == "Optimization Run 12:00:00"
        assert first.scenario_id != second.scenario_id

    def test_zero_stock_resource_never_allocated(self):
        counties, _ = sample_data()
        resources = [make_resource("empty", qty=0), make_resource("full", qty=100)]
        scenario = run_allocation(counties, resources)
        assert scenario.allocated_for_resource("empty") == 0
        assert all(a.resource_id != "empty" for a in scenario.allocations)

    def test_empty_inputs(self):
        counties, resources = sample_data()
        for c, r in [([], resources), (counties, []), ([], [])]:
            scenario = run_allocation(c, r)
            assert scenario.allocations == ()
            assert scenario.total_resources == 0
            assert scenario.counties_served == 0
            assert scenario.avg_need_met_pct == 0.0

    def test_invalid_county_rejected(self):
        with pytest.raises(InvalidRecordError) as exc:
            run_allocation([make_county(risk=120.0)], [make_resource()])
        assert "risk_score" in str(exc.value)

    def test_invalid_resource_rejected(self):
        with pytest.raises(InvalidRecordError):
            run_allocation([make_county()], [make_resource(qty=-5)])

    def test_max_share_config(self):
        county = make_county(population=10_000_000)
        scenario = run_allocation([county], [make_resource(qty=100)], {"max_county_share": 0.1})
        assert scenario.allocations[0].allocated_quantity == 10

    def test_max_share_config_cannot_exceed_forty_percent(self):
        county = make_county(population=10_000_000)
        scenario = run_allocation([county], [make_resource(qty=100)], {"max_county_share": 1.0})
        assert scenario.allocations[0].allocated_quantity == 40
        assert county_share_cap(make_resource(qty=100), {"max_county_share": 1.0}) == 40

    def test_tight_stock_across_equal_counties(self):
        counties = [make_county(str(i), population=10_000_000) for i in range(10)]
        scenario = run_allocation(counties, [make_resource(qty=5)])

        quantities = [(a.county_id, a.allocated_quantity) for a in scenario.allocations]
        assert quantities == [("0", 2), ("1", 2), ("2", 1)]
        assert scenario.total_resources == 5
        assert scenario.counties_served == 3

    def test_duplicate_resource_ids_rejected(self):
        counties = [make_county(str(i), population=10_000_000) for i in range(5)]
        resources = [make_resource("x", qty=10), make_resource("x", qty=100)]
        with pytest.raises(InvalidRecordError) as exc:
            run_allocation(counties, resources)
        assert "Duplicate resource ID 'x'" in str(exc.value)


class TestReporting:
    def test_resource_utilization(self):
        counties, resources = sample_data()
        scenario = run_allocation(counties, resources)
        rows = {u["resource_id"]: u for u in compute_resource_utilization(scenario, resources)}
        assert rows["2"]["utilization_pct"] == pytest.approx(100.0)
        for u in rows.values():
            assert 0.0 <= u["utilization_pct"] <= 100.0

    def test_summarize_by_county_sorted(self):
        counties, resources = sample_data()
        scenario = run_allocation(counties, resources)
        summaries = summarize_by_county(scenario, counties)
        totals = [s["total_allocated"] for s in summaries]
        assert totals == sorted(totals, reverse=True)
        assert sum(totals) == scenario.total_resources


class TestExplainer:
    def test_risk_levels(self):
        assert risk_level(92.1) == "Critical"
        assert risk_level(90.0) == "Critical"
        assert risk_level(78.5) == "High"
        assert risk_level(65.4) == "Medium"
        assert risk_level(10.0) == "Low"

    def test_explain_priority_steps(self):
        steps = explain_priority(compute_priority(make_county()))
        assert len(steps) == 4
        assert steps[-1].startswith("Step 4 - Priority")

    def test_explain_need(self):
        p = compute_priority(make_county(name="Harris"))
        resource = make_resource(name="Kits", tags=("air_quality",))
        needed, intensity = classify_need(p, resource)
        assert "no matching need" in explain_need(p, resource, needed, intensity, 20, 0)

        resource = make_resource(name="Kits")
        needed, intensity = classify_need(p, resource)
        text = explain_need(p, resource, needed, intensity, 20, 9)
        assert text.startswith("Harris needs Kits")
        assert text.endswith("= 9 kits")
