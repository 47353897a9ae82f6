"""Tests for latent-space pattern recognition."""

from datetime import datetime, timezone

import pytest

from boiler_analytics.models.insight import (
    InsightCategory,
    InsightSeverity,
    LatentSpaceAnalysis,
    LatentSpaceInsight,
)
from boiler_analytics.services.latent_insights import (
    LATENT_RULES,
    RULES_BY_ID,
    WindowSignals,
    analyze_latent_spaces,
    overall_risk_score,
    prioritize,
)
from factories import make_window

FIXED_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def _insight(category, severity, title="x", confidence=100.0) -> LatentSpaceInsight:
    return LatentSpaceInsight(
        category=category,
        severity=severity,
        title=title,
        description="",
        evidence=[],
        action_required="",
        potential_impact="",
        confidence=confidence,
    )


def _build(rule_id: str, window) -> LatentSpaceInsight:
    return RULES_BY_ID[rule_id].build(WindowSignals.from_window(window))


def _triggers(rule_id: str, window) -> bool:
    return RULES_BY_ID[rule_id].trigger(WindowSignals.from_window(window))


class TestShortWindows:
    @pytest.mark.parametrize("length", [0, 1, 2, 4])
    def test_empty_analysis(self, length: int) -> None:
        result = analyze_latent_spaces(make_window(length), analyzed_at=FIXED_TIME)

        assert result.insights == []
        assert result.overall_risk_score == 0.0
        assert result.opportunity_score == 0.0
        assert result.timestamp == FIXED_TIME

    @pytest.mark.parametrize("min_samples", [0, -3])
    def test_empty_window_with_no_minimum(self, min_samples: int) -> None:
        """A non-positive minimum never lets an empty window reach the rules."""
        result = analyze_latent_spaces([], analyzed_at=FIXED_TIME, min_samples=min_samples)

        assert result.insights == []
        assert result.timestamp == FIXED_TIME

    def test_two_samples_with_lowered_minimum(self) -> None:
        result = analyze_latent_spaces(make_window(2, o2_level=4.5), analyzed_at=FIXED_TIME, min_samples=2)
        assert [i.title for i in result.insights] == [
            "Excess Air Reduction Opportunity",
            "Blowdown Heat Recovery System",
        ]

    def test_timestamp_defaults_to_now(self) -> None:
        result = analyze_latent_spaces(make_window(2))
        assert result.timestamp is not None
        assert result.timestamp.tzinfo is not None


class TestScenarios:
    def test_excess_air(self) -> None:
        """Steady O₂ at 4.5% is a tuning opportunity, not a risk."""
        result = analyze_latent_spaces(make_window(10, o2_level=4.5), analyzed_at=FIXED_TIME)
        titles = [i.title for i in result.insights]

        assert titles == ["Excess Air Reduction Opportunity", "Blowdown Heat Recovery System"]
        excess_air = result.insights[0]
        assert excess_air.category == InsightCategory.OPPORTUNITY
        assert excess_air.severity == InsightSeverity.LOW
        assert excess_air.confidence == 85.0
        assert excess_air.evidence[0] == "Average O₂: 4.5% (optimal: 3.5-4%)"
        assert excess_air.potential_impact == "Fuel savings: ₹1.5 lakhs/month"
        assert result.overall_risk_score == 0.0
        assert result.opportunity_score == pytest.approx(58.0)

    def test_flame_instability(self) -> None:
        o2 = [1.5, 4.0, 1.2, 4.2, 1.5, 4.0, 1.2, 4.2, 1.5, 4.0]
        result = analyze_latent_spaces(make_window(10, o2_level=o2), analyzed_at=FIXED_TIME)

        lead = result.insights[0]
        assert lead.title == "Combustion Instability - Flame-out Risk"
        assert lead.category == InsightCategory.HAZARD
        assert lead.severity == InsightSeverity.CRITICAL
        assert lead.confidence == 88.0
        assert result.overall_risk_score == pytest.approx(66.0)

    def test_tube_wall_thinning(self) -> None:
        """Pressure falling 0.4 bar per reading at constant flow."""
        window = make_window(10, steam_pressure=[65.0 - 0.4 * i for i in range(10)])
        result = analyze_latent_spaces(window, analyzed_at=FIXED_TIME)

        thinning = result.insights[0]
        assert thinning.title == "Tube Wall Thinning Detected"
        assert thinning.category == InsightCategory.DAMAGE
        assert thinning.severity == InsightSeverity.HIGH
        assert thinning.confidence == pytest.approx(80.0)
        assert thinning.evidence[0] == "Pressure declining at 0.40 bar/reading"

    def test_opportunities_keep_rule_order(self) -> None:
        """Equal category and severity keep table order."""
        window = make_window(10, o2_level=4.3, stack_temp=175.0)
        result = analyze_latent_spaces(window, analyzed_at=FIXED_TIME)

        assert [i.title for i in result.insights] == [
            "Excess Air Reduction Opportunity",
            "Flue Gas Heat Recovery Potential",
            "Blowdown Heat Recovery System",
        ]
        assert result.opportunity_score == pytest.approx(88.0)

    def test_only_last_ten_samples_count(self) -> None:
        """An old O₂ disturbance outside the signal window is forgotten."""
        o2 = [1.0, 6.0, 1.0, 6.0, 1.0] + [3.5] * 10
        result = analyze_latent_spaces(make_window(15, o2_level=o2), analyzed_at=FIXED_TIME)
        assert all(i.category == InsightCategory.OPPORTUNITY for i in result.insights)

    def test_deterministic(self) -> None:
        window = make_window(10, o2_level=4.5, stack_temp=[170.0 + i for i in range(10)])
        first = analyze_latent_spaces(window, analyzed_at=FIXED_TIME)
        second = analyze_latent_spaces(window, analyzed_at=FIXED_TIME)
        assert first == second


class TestRuleTriggers:
    def test_rule_table_is_complete(self) -> None:
        assert len(LATENT_RULES) == 13
        assert len(RULES_BY_ID) == 13

    def test_drum_low_water(self) -> None:
        window = make_window(
            10,
            steam_pressure=[65.0 + 0.3 * i for i in range(10)],
            steam_flow=[50.0 - 0.5 * i for i in range(10)],
        )
        assert _triggers("drum_low_water", window)

    def test_over_firing(self) -> None:
        window = make_window(10, fuel_flow=6500.0, steam_pressure=67.0, stack_temp=172.0)
        assert _triggers("over_firing", window)
        assert not _triggers("over_firing", make_window(10, fuel_flow=6500.0))

    def test_id_fan_degradation(self) -> None:
        window = make_window(10, stack_temp=[160.0, 170.0] * 5)
        assert _triggers("id_fan_degradation", window)

    def test_suboptimal_load(self) -> None:
        window = make_window(10, efficiency=82.0, steam_flow=40.0)
        assert _triggers("suboptimal_load", window)

    def test_refractory_degradation(self) -> None:
        """Hot stack, falling efficiency, steady O₂."""
        window = make_window(10, stack_temp=180.0, efficiency=[85.0 - 0.2 * i for i in range(10)])
        assert _triggers("refractory_degradation", window)

        insight = _build("refractory_degradation", window)
        assert insight.category == InsightCategory.DAMAGE
        assert insight.severity == InsightSeverity.MEDIUM
        assert insight.confidence == 72.0

    def test_refractory_severity_edge(self) -> None:
        efficiency = [85.0 - 0.2 * i for i in range(10)]
        at_edge = make_window(10, stack_temp=185.0, efficiency=efficiency)
        above = make_window(10, stack_temp=186.0, efficiency=efficiency)

        assert _build("refractory_degradation", at_edge).severity == InsightSeverity.MEDIUM
        assert _build("refractory_degradation", above).severity == InsightSeverity.HIGH

    def test_refractory_needs_hot_stack(self) -> None:
        window = make_window(10, stack_temp=175.0, efficiency=[85.0 - 0.2 * i for i in range(10)])
        assert not _triggers("refractory_degradation", window)

    def test_soot_blower_fouling(self) -> None:
        window = make_window(
            10,
            stack_temp=[165.0 + 0.5 * i for i in range(10)],
            efficiency=[85.0 - 0.1 * i for i in range(10)],
        )
        assert _triggers("soot_blower_fouling", window)

        insight = _build("soot_blower_fouling", window)
        assert insight.category == InsightCategory.DAMAGE
        assert insight.severity == InsightSeverity.MEDIUM
        assert insight.evidence[0] == "Stack temp rising at 0.50°C/reading"

    def test_soot_blower_severity_edge(self) -> None:
        """Stack temperature climbing faster than 0.6°C per reading is high."""
        window = make_window(
            10,
            stack_temp=[165.0 + 0.7 * i for i in range(10)],
            efficiency=[85.0 - 0.1 * i for i in range(10)],
        )
        assert _build("soot_blower_fouling", window).severity == InsightSeverity.HIGH

    def test_soot_blower_needs_efficiency_loss(self) -> None:
        window = make_window(10, stack_temp=[165.0 + 0.5 * i for i in range(10)])
        assert not _triggers("soot_blower_fouling", window)

    def test_economizer_failure(self) -> None:
        window = make_window(10, stack_temp=180.0, efficiency=[85.0] * 9 + [80.0])
        assert _triggers("economizer_failure", window)

        insight = _build("economizer_failure", window)
        assert insight.category == InsightCategory.FAILURE
        assert insight.severity == InsightSeverity.HIGH
        assert insight.confidence == 80.0
        assert insight.evidence == [
            "Average stack temp: 180°C (critically high)",
            "Efficiency below baseline by 4.5%",
            "Estimated fouling factor: 4.0x normal",
        ]

    def test_economizer_failure_edges(self) -> None:
        """Mean stack temperature must exceed 178°C and efficiency must dip over 2 points."""
        efficiency = [85.0] * 9 + [80.0]
        assert not _triggers("economizer_failure", make_window(10, stack_temp=178.0, efficiency=efficiency))
        assert not _triggers("economizer_failure", make_window(10, stack_temp=180.0, efficiency=[85.0] * 9 + [84.0]))

    def test_control_valve_hunting(self) -> None:
        window = make_window(
            10,
            o2_level=[3.0, 4.6] * 5,
            steam_pressure=[63.0, 67.0] * 5,
        )
        assert _triggers("control_valve_hunting", window)

        insight = _build("control_valve_hunting", window)
        assert insight.category == InsightCategory.FAILURE
        assert insight.severity == InsightSeverity.MEDIUM
        assert insight.confidence == 70.0
        assert insight.evidence[:2] == ["O₂ oscillation: ±0.80%", "Pressure oscillation: ±2.00 bar"]

    def test_control_valve_hunting_needs_both_loops(self) -> None:
        assert not _triggers("control_valve_hunting", make_window(10, o2_level=[3.0, 4.6] * 5))
        assert not _triggers("control_valve_hunting", make_window(10, steam_pressure=[63.0, 67.0] * 5))

    def test_flame_instability_high_below_critical_spread(self) -> None:
        """O₂ spread of 1.0 sits between the 0.8 trigger and the 1.2 critical edge."""
        window = make_window(10, o2_level=[2.0, 4.0] * 5)
        assert _triggers("combustion_instability", window)
        assert _build("combustion_instability", window).severity == InsightSeverity.HIGH

    def test_nominal_window_only_blowdown(self, nominal_window) -> None:
        fired = [r.rule_id for r in LATENT_RULES if r.trigger(WindowSignals.from_window(nominal_window))]
        assert fired == ["blowdown_heat_recovery"]


class TestAggregation:
    def test_prioritize(self) -> None:
        insights = [
            _insight(InsightCategory.OPPORTUNITY, InsightSeverity.LOW, "opportunity"),
            _insight(InsightCategory.FAILURE, InsightSeverity.CRITICAL, "failure"),
            _insight(InsightCategory.DAMAGE, InsightSeverity.MEDIUM, "damage medium"),
            _insight(InsightCategory.HAZARD, InsightSeverity.HIGH, "hazard"),
            _insight(InsightCategory.DAMAGE, InsightSeverity.HIGH, "damage high"),
        ]
        assert [i.title for i in prioritize(insights)] == [
            "hazard",
            "damage high",
            "damage medium",
            "failure",
            "opportunity",
        ]

    def test_risk_score_capped(self) -> None:
        insights = [_insight(InsightCategory.HAZARD, InsightSeverity.CRITICAL) for _ in range(3)]
        assert overall_risk_score(insights) == 100.0

    def test_opportunities_carry_no_risk(self) -> None:
        insights = [_insight(InsightCategory.OPPORTUNITY, InsightSeverity.CRITICAL)]
        assert overall_risk_score(insights) == 0.0

    def test_default_analysis_is_empty(self) -> None:
        analysis = LatentSpaceAnalysis()
        assert analysis.insights == []
        assert analysis.timestamp is None
