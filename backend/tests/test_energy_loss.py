"""Tests for energy loss analysis."""

import pytest

from boiler_analytics.core.config import OperatingEnvelope
from boiler_analytics.models.analysis import LossSeverity
from boiler_analytics.services.energy_loss import analyze_energy_loss, recovery_potential
from factories import make_window


class TestLossDrivers:
    def test_nominal_operation(self, nominal_window) -> None:
        result = analyze_energy_loss(nominal_window)

        assert result.loss_driver == "Unknown"
        assert result.severity == LossSeverity.NORMAL
        assert result.normal_energy_loss == pytest.approx(15.0)
        assert result.catastrophic_energy_loss == pytest.approx(15.0)
        assert result.recovery_potential == 0.0

    def test_flue_gas_loss_warning(self) -> None:
        result = analyze_energy_loss(make_window(5, stack_temp=185.0, o2_level=4.5))
        assert result.loss_driver.startswith("Flue gas heat loss")
        assert result.severity == LossSeverity.WARNING

    def test_flue_gas_loss_critical(self) -> None:
        result = analyze_energy_loss(make_window(5, stack_temp=195.0, o2_level=4.5))
        assert result.severity == LossSeverity.CRITICAL

    def test_incomplete_combustion(self) -> None:
        result = analyze_energy_loss(make_window(5, o2_level=2.0))
        assert result.loss_driver.startswith("Incomplete combustion")
        assert result.severity == LossSeverity.CRITICAL

    def test_tube_fouling(self) -> None:
        """Latest efficiency more than 5 points under the recent average."""
        result = analyze_energy_loss(make_window(10, efficiency=[90.0] * 9 + [80.0]))
        assert result.loss_driver == "Tube fouling reducing heat transfer"
        assert result.severity == LossSeverity.WARNING

    def test_first_match_wins(self) -> None:
        """Flue gas loss outranks a simultaneous fouling signature."""
        window = make_window(
            10,
            stack_temp=185.0,
            o2_level=4.5,
            efficiency=[90.0] * 9 + [80.0],
        )
        result = analyze_energy_loss(window)
        assert result.loss_driver.startswith("Flue gas heat loss")


class TestRecoveryPotential:
    def test_excess_loss_is_priced(self) -> None:
        """5% extra loss * 50 MW * 720 h * 3000 per MWh."""
        result = analyze_energy_loss(make_window(5, efficiency=80.0))
        assert result.catastrophic_energy_loss == pytest.approx(20.0)
        assert result.recovery_potential == pytest.approx(5_400_000.0)

    def test_never_negative(self) -> None:
        result = analyze_energy_loss(make_window(5, efficiency=92.0))
        assert result.recovery_potential == 0.0
        assert recovery_potential(-3.0, OperatingEnvelope()) == 0.0

    def test_custom_baseline(self) -> None:
        result = analyze_energy_loss(make_window(5, efficiency=80.0), baseline_efficiency=90.0)
        assert result.normal_energy_loss == pytest.approx(10.0)
        assert result.recovery_potential == pytest.approx(10_800_000.0)

    def test_envelope_capacity(self) -> None:
        envelope = OperatingEnvelope(capacity_mw=100.0)
        result = analyze_energy_loss(make_window(5, efficiency=80.0), envelope=envelope)
        assert result.recovery_potential == pytest.approx(10_800_000.0)


class TestShortWindows:
    def test_empty_window(self) -> None:
        result = analyze_energy_loss([])
        assert result.loss_driver == "Unknown"
        assert result.severity == LossSeverity.NORMAL
        assert result.catastrophic_energy_loss == result.normal_energy_loss
        assert result.recovery_potential == 0.0

    def test_single_sample(self) -> None:
        result = analyze_energy_loss(make_window(1, efficiency=83.0))
        assert result.severity == LossSeverity.NORMAL
        assert result.recovery_potential > 0

    def test_two_samples(self) -> None:
        """Latest 78% against a two-sample average of 81.5% is not yet fouling."""
        result = analyze_energy_loss(make_window(2, efficiency=[85.0, 78.0]))
        assert result.loss_driver == "Unknown"
        assert result.catastrophic_energy_loss == pytest.approx(22.0)
