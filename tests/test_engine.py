"""Tests del motor de transición.

Cubre:
1. Generador aleatorio y fluctuación acotada
2. Necesidad de curación y controlador de curación
3. Clasificador de estado (prioridad)
4. Inyección de problemas
5. Paso completo: límites, determinismo, contrato de entrada

Ejecutar:
    pytest tests/test_engine.py -v
"""

from dataclasses import replace

import pytest

from device_sim.domain.models import (
    CapacitorStatus,
    DefibrillatorMetrics,
    DeviceKind,
    DeviceState,
    FirmwareStatus,
    Status,
    VentilatorMetrics,
)
from device_sim.domain.profiles import (
    binary_profile,
    continuous_metric_names,
    continuous_profiles,
    get_profile,
)
from device_sim.engine.fluctuation import fluctuate
from device_sim.engine.healing import (
    apply_healing,
    heal_value,
    metric_needs_healing,
    needs_healing,
)
from device_sim.engine.problem_injector import maybe_inject
from device_sim.engine.random_source import RandomValueGenerator
from device_sim.engine.simulation_step import DeviceSimulator, create_initial, step
from device_sim.engine.status_classifier import classify
from device_sim.errors import InvalidDeviceState

from tests.helpers import FIXED_NOW, ScriptedRandom, fixed_clock


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def healthy_ventilator() -> VentilatorMetrics:
    return VentilatorMetrics(temperature=30.0, pressure=20.0, oxygen_level=95.0)


@pytest.fixture
def healthy_defibrillator() -> DefibrillatorMetrics:
    return DefibrillatorMetrics(temperature=33.0, battery_voltage=12.5, ecg_signal=0.1)


def _state(kind, metrics, healing=frozenset(), status=Status.NORMAL) -> DeviceState:
    return DeviceState(
        id=f"{kind.value}-test",
        kind=kind,
        metrics=metrics,
        status=status,
        last_updated=FIXED_NOW,
        healing=frozenset(healing),
    )


# =============================================================================
# TEST 1: GENERADOR Y FLUCTUACIÓN
# =============================================================================

class TestRandomValueGenerator:

    def test_uniform_within_range_and_precision(self, seeded_rng):
        for _ in range(200):
            v = seeded_rng.uniform(38.0, 39.5)
            assert 38.0 <= v <= 39.5
            assert v == round(v, 1)

    def test_same_seed_same_sequence(self):
        a = RandomValueGenerator(seed=7)
        b = RandomValueGenerator(seed=7)
        assert [a.uniform(0, 10) for _ in range(20)] == [b.uniform(0, 10) for _ in range(20)]

    def test_chance_extremes(self, seeded_rng):
        assert not any(seeded_rng.chance(0.0) for _ in range(100))
        assert all(seeded_rng.chance(1.0) for _ in range(100))


class TestFluctuation:

    def test_step_is_bounded(self, seeded_rng):
        current = 30.0
        for _ in range(500):
            nxt = fluctuate(current, 20.0, 45.0, 0.3, seeded_rng)
            # Redondeo a 1 decimal puede sumar hasta 0.05
            assert abs(nxt - current) <= 0.3 + 0.05 + 1e-9
            current = nxt

    def test_clamped_to_range(self, seeded_rng):
        for _ in range(200):
            assert fluctuate(45.0, 20.0, 45.0, 5.0, seeded_rng) <= 45.0
            assert fluctuate(20.0, 20.0, 45.0, 5.0, seeded_rng) >= 20.0

    def test_one_decimal(self, seeded_rng):
        v = fluctuate(30.0, 20.0, 45.0, 0.3, seeded_rng)
        assert v == round(v, 1)

    def test_zero_delta_keeps_value(self):
        assert fluctuate(30.0, 20.0, 45.0, 0.3, ScriptedRandom()) == 30.0


# =============================================================================
# TEST 2: CURACIÓN
# =============================================================================

class TestNeedsHealing:

    @pytest.mark.parametrize(
        "value, expected",
        [
            (36.9, False),  # por debajo de warning - 1
            (37.0, True),  # borde inferior de la banda
            (38.0, True),
            (39.9, True),
            (40.0, False),  # crítico: nunca se cura
            (44.0, False),
        ],
    )
    def test_higher_is_worse(self, value, expected):
        assert needs_healing(value, 38.0, 40.0) is expected

    @pytest.mark.parametrize(
        "value, expected",
        [
            (89.1, False),
            (89.0, True),  # warning + 1
            (86.0, True),
            (85.0, False),  # crítico
            (84.0, False),
        ],
    )
    def test_lower_is_worse(self, value, expected):
        assert needs_healing(value, 88.0, 85.0, reversed=True) is expected

    def test_magnitude_metric_uses_absolute_value(self):
        ecg = get_profile(DeviceKind.DEFIBRILLATOR, "ecg_signal")
        assert metric_needs_healing(ecg, -0.95) is True
        assert metric_needs_healing(ecg, 0.95) is True
        assert metric_needs_healing(ecg, -1.0) is False

    def test_ecg_uses_narrow_healing_margin(self):
        """ECG es la excepción al margen 1: su banda empieza en |ecg| >= warning - 0.1.

        Con margen 1 la banda sería |ecg| >= -0.1 y el desfibrilador
        nunca saldría de curación.
        """
        ecg = get_profile(DeviceKind.DEFIBRILLATOR, "ecg_signal")
        assert ecg.healing_margin == 0.1
        assert needs_healing(abs(0.5), ecg.warning, ecg.critical, margin=1.0) is True
        assert metric_needs_healing(ecg, 0.5) is False
        assert metric_needs_healing(ecg, -0.3) is False
        assert metric_needs_healing(ecg, 0.85) is True
        assert metric_needs_healing(ecg, -0.85) is True

    def test_other_metrics_use_unit_margin(self):
        for kind in DeviceKind:
            for profile in continuous_profiles(kind):
                if profile.name != "ecg_signal":
                    assert profile.healing_margin == 1.0

    def test_value_at_target_does_not_need_healing(self):
        battery = get_profile(DeviceKind.DEFIBRILLATOR, "battery_voltage")
        assert battery.healing_target == 11.5
        assert metric_needs_healing(battery, 11.5) is False
        assert metric_needs_healing(battery, 11.4) is True


class TestHealValue:

    def test_moves_toward_target_by_rate(self):
        assert heal_value(39.0, 36.0, 0.5) == 38.5
        assert heal_value(86.0, 92.0, 0.8) == 86.8

    def test_never_overshoots(self):
        assert heal_value(36.3, 36.0, 0.5) == 36.0
        assert heal_value(91.5, 92.0, 0.8) == 92.0
        assert heal_value(-0.1, 0.0, 0.2) == 0.0

    def test_at_target_unchanged(self):
        assert heal_value(36.0, 36.0, 0.5) == 36.0


class TestHealingController:

    def test_scenario_a_temperature_recovery(self, healthy_ventilator):
        """Temperatura forzada a 39.0: cura 0.5/tick hacia 36 y sale de la banda."""
        metrics = replace(healthy_ventilator, temperature=39.0)
        healing = frozenset()

        metrics, healing = apply_healing(DeviceKind.VENTILATOR, metrics, healing)
        assert metrics.temperature == 38.5
        assert "temperature" in healing

        previous_distance = abs(metrics.temperature - 36.0)
        for _ in range(5):
            metrics, healing = apply_healing(DeviceKind.VENTILATOR, metrics, healing)
            distance = abs(metrics.temperature - 36.0)
            assert distance <= previous_distance
            previous_distance = distance

        # 39.0 -> 38.5 -> 38.0 -> 37.5 -> 37.0 -> 36.5, y en el tick 6 sale
        assert metrics.temperature == 36.5
        assert metrics.temperature < 37.0
        assert "temperature" not in healing

    def test_reversed_metric_heals_upward(self, healthy_ventilator):
        metrics = replace(healthy_ventilator, oxygen_level=86.0)
        metrics, healing = apply_healing(DeviceKind.VENTILATOR, metrics, frozenset())
        assert metrics.oxygen_level == 86.8
        assert healing == frozenset({"oxygen_level"})

    def test_critical_value_leaves_healing_set(self, healthy_ventilator):
        metrics = replace(healthy_ventilator, temperature=40.5)
        healed, healing = apply_healing(
            DeviceKind.VENTILATOR, metrics, frozenset({"temperature"})
        )
        assert healed.temperature == 40.5
        assert "temperature" not in healing

    def test_healthy_metrics_untouched(self, healthy_defibrillator):
        healed, healing = apply_healing(DeviceKind.DEFIBRILLATOR, healthy_defibrillator, frozenset())
        assert healed == healthy_defibrillator
        assert healing == frozenset()

    def test_ecg_heals_signed_value_toward_zero(self, healthy_defibrillator):
        metrics = replace(healthy_defibrillator, ecg_signal=-0.9)
        healed, healing = apply_healing(DeviceKind.DEFIBRILLATOR, metrics, frozenset())
        assert healed.ecg_signal == pytest.approx(-0.7)
        assert "ecg_signal" in healing

    def test_healing_set_subset_of_kind_metrics(self, healthy_ventilator):
        _, healing = apply_healing(
            DeviceKind.VENTILATOR, healthy_ventilator, frozenset({"battery_voltage"})
        )
        assert healing <= continuous_metric_names(DeviceKind.VENTILATOR)

    def test_input_not_mutated(self, healthy_ventilator):
        metrics = replace(healthy_ventilator, temperature=39.0)
        apply_healing(DeviceKind.VENTILATOR, metrics, frozenset())
        assert metrics.temperature == 39.0


# =============================================================================
# TEST 3: CLASIFICADOR DE ESTADO
# =============================================================================

class TestStatusClassifier:

    def test_scenario_b_emergency_overrides_healing(self, healthy_ventilator):
        metrics = replace(healthy_ventilator, oxygen_level=84.0, temperature=38.5)
        assert classify(DeviceKind.VENTILATOR, metrics, frozenset({"temperature"})) == Status.EMERGENCY

    def test_scenario_c_capacitor_not_ready_is_alert(self, healthy_defibrillator):
        metrics = replace(healthy_defibrillator, capacitor_status=CapacitorStatus.NOT_READY)
        assert classify(DeviceKind.DEFIBRILLATOR, metrics, frozenset()) == Status.ALERT

    def test_scenario_d_all_normal(self, healthy_ventilator, healthy_defibrillator):
        assert classify(DeviceKind.VENTILATOR, healthy_ventilator, frozenset()) == Status.NORMAL
        assert classify(DeviceKind.DEFIBRILLATOR, healthy_defibrillator, frozenset()) == Status.NORMAL

    @pytest.mark.parametrize(
        "kind, field, value",
        [
            (DeviceKind.VENTILATOR, "temperature", 40.0),
            (DeviceKind.VENTILATOR, "pressure", 41.0),
            (DeviceKind.VENTILATOR, "oxygen_level", 85.0),
            (DeviceKind.DEFIBRILLATOR, "temperature", 45.0),
            (DeviceKind.DEFIBRILLATOR, "battery_voltage", 10.0),
            (DeviceKind.DEFIBRILLATOR, "ecg_signal", -1.0),
        ],
    )
    def test_emergency_regardless_of_healing_set(
        self, kind, field, value, healthy_ventilator, healthy_defibrillator
    ):
        base = healthy_ventilator if kind == DeviceKind.VENTILATOR else healthy_defibrillator
        metrics = replace(base, **{field: value})
        all_names = continuous_metric_names(kind)
        assert classify(kind, metrics, frozenset()) == Status.EMERGENCY
        assert classify(kind, metrics, all_names) == Status.EMERGENCY

    def test_warning_not_healing_is_alert(self, healthy_ventilator):
        metrics = replace(healthy_ventilator, temperature=38.5)
        assert classify(DeviceKind.VENTILATOR, metrics, frozenset()) == Status.ALERT

    def test_warning_while_healing_is_healing(self, healthy_ventilator):
        metrics = replace(healthy_ventilator, temperature=38.5)
        assert classify(DeviceKind.VENTILATOR, metrics, frozenset({"temperature"})) == Status.HEALING

    def test_reversed_warning_is_alert(self, healthy_defibrillator):
        metrics = replace(healthy_defibrillator, battery_voltage=10.4)
        assert classify(DeviceKind.DEFIBRILLATOR, metrics, frozenset()) == Status.ALERT

    def test_binary_bad_state_alert_not_emergency(self, healthy_ventilator):
        metrics = replace(healthy_ventilator, firmware_status=FirmwareStatus.UNRESPONSIVE)
        assert classify(DeviceKind.VENTILATOR, metrics, frozenset({"temperature"})) == Status.ALERT

    def test_binary_alert_beats_healing(self, healthy_defibrillator):
        metrics = replace(healthy_defibrillator, capacitor_status=CapacitorStatus.NOT_READY)
        assert classify(DeviceKind.DEFIBRILLATOR, metrics, frozenset({"temperature"})) == Status.ALERT

    def test_pure_function(self, healthy_ventilator):
        metrics = replace(healthy_ventilator, oxygen_level=88.5)
        healing = frozenset({"oxygen_level"})
        results = {classify(DeviceKind.VENTILATOR, metrics, healing) for _ in range(10)}
        assert results == {Status.HEALING}


# =============================================================================
# TEST 4: INYECCIÓN DE PROBLEMAS
# =============================================================================

class TestProblemInjector:

    def test_no_injection_returns_same_metrics(self, healthy_ventilator, seeded_rng):
        assert maybe_inject(DeviceKind.VENTILATOR, healthy_ventilator, seeded_rng, probability=0.0) is healthy_ventilator

    @pytest.mark.parametrize("kind", list(DeviceKind))
    def test_forced_injection_degrades_exactly_one_metric(
        self, kind, healthy_ventilator, healthy_defibrillator
    ):
        base = healthy_ventilator if kind == DeviceKind.VENTILATOR else healthy_defibrillator
        rng = RandomValueGenerator(seed=3)
        for _ in range(50):
            injected = maybe_inject(kind, base, rng, probability=1.0)
            changed = [
                p for p in continuous_profiles(kind)
                if getattr(injected, p.name) != getattr(base, p.name)
            ]
            assert len(changed) == 1
            low, high = changed[0].degraded_range
            assert low <= getattr(injected, changed[0].name) <= high

    def test_binary_fields_never_injected(self, healthy_ventilator):
        rng = RandomValueGenerator(seed=11)
        for _ in range(50):
            injected = maybe_inject(DeviceKind.VENTILATOR, healthy_ventilator, rng, probability=1.0)
            assert injected.firmware_status == FirmwareStatus.RESPONSIVE


# =============================================================================
# TEST 5: PASO COMPLETO
# =============================================================================

class TestCreateInitial:

    @pytest.mark.parametrize("kind", list(DeviceKind))
    def test_initial_state_is_healthy(self, kind, seeded_rng, clock):
        state = create_initial(kind, rng=seeded_rng, clock=clock)
        assert state.kind == kind
        assert state.status == Status.NORMAL
        assert state.healing == frozenset()
        assert state.last_updated == FIXED_NOW
        assert state.id.startswith(f"{kind.value}-")
        for p in continuous_profiles(kind):
            low, high = p.initial_range
            assert low <= getattr(state.metrics, p.name) <= high
        binary = binary_profile(kind)
        assert getattr(state.metrics, binary.name) == binary.good


class TestStep:

    @pytest.mark.parametrize("kind", list(DeviceKind))
    def test_bounds_hold_over_many_ticks(self, kind):
        sim = DeviceSimulator(rng=RandomValueGenerator(seed=99), clock=fixed_clock)
        state = sim.create_initial(kind)
        for _ in range(1000):
            state = sim.step(kind, state)
            for p in continuous_profiles(kind):
                assert p.min_value <= getattr(state.metrics, p.name) <= p.max_value
            assert state.healing <= continuous_metric_names(kind)
            assert state.status == classify(kind, state.metrics, state.healing)

    @pytest.mark.parametrize("kind", list(DeviceKind))
    def test_deterministic_with_same_seed(self, kind):
        a = DeviceSimulator(rng=RandomValueGenerator(seed=5), clock=fixed_clock)
        b = DeviceSimulator(rng=RandomValueGenerator(seed=5), clock=fixed_clock)
        sa, sb = a.create_initial(kind), b.create_initial(kind)
        for _ in range(100):
            sa, sb = a.step(kind, sa), b.step(kind, sb)
            assert sa == sb

    def test_returns_new_state_without_mutating_previous(self, seeded_rng, clock):
        previous = create_initial(DeviceKind.VENTILATOR, rng=seeded_rng, clock=clock)
        snapshot = replace(previous)
        nxt = step(DeviceKind.VENTILATOR, previous, rng=seeded_rng, clock=clock)
        assert nxt is not previous
        assert previous == snapshot
        assert nxt.id == previous.id

    def test_injected_problem_healed_same_tick(self, healthy_ventilator):
        # chances: [toggle firmware?, inject?] -> inyecta temperatura (choice 0) a 38.0
        sim = DeviceSimulator(rng=ScriptedRandom(chances=[False, True]), clock=fixed_clock)
        previous = _state(DeviceKind.VENTILATOR, healthy_ventilator)
        nxt = sim.step(DeviceKind.VENTILATOR, previous)
        assert nxt.metrics.temperature == 37.5
        assert nxt.healing == frozenset({"temperature"})
        assert nxt.status == Status.HEALING

    def test_binary_toggle(self, healthy_defibrillator):
        sim = DeviceSimulator(rng=ScriptedRandom(chances=[True, False]), clock=fixed_clock)
        previous = _state(DeviceKind.DEFIBRILLATOR, healthy_defibrillator)
        nxt = sim.step(DeviceKind.DEFIBRILLATOR, previous)
        assert nxt.metrics.capacitor_status == CapacitorStatus.NOT_READY
        assert nxt.status == Status.ALERT

    def test_healing_completes_across_ticks(self, healthy_ventilator):
        sim = DeviceSimulator(rng=ScriptedRandom(), clock=fixed_clock)
        state = _state(DeviceKind.VENTILATOR, replace(healthy_ventilator, temperature=39.0))
        statuses = []
        for _ in range(6):
            state = sim.step(DeviceKind.VENTILATOR, state)
            statuses.append(state.status)
        assert statuses[:5] == [Status.HEALING] * 5
        assert statuses[5] == Status.NORMAL
        assert state.healing == frozenset()


class TestStepContract:

    def test_kind_mismatch_rejected(self, healthy_ventilator):
        previous = _state(DeviceKind.VENTILATOR, healthy_ventilator)
        with pytest.raises(InvalidDeviceState):
            step(DeviceKind.DEFIBRILLATOR, previous)

    def test_wrong_metric_variant_rejected(self, healthy_defibrillator):
        previous = _state(DeviceKind.VENTILATOR, healthy_defibrillator)
        with pytest.raises(InvalidDeviceState) as exc:
            step(DeviceKind.VENTILATOR, previous)
        assert "DefibrillatorMetrics" in str(exc.value)

    def test_non_finite_metric_rejected(self, healthy_ventilator):
        previous = _state(DeviceKind.VENTILATOR, replace(healthy_ventilator, pressure=float("nan")))
        with pytest.raises(InvalidDeviceState) as exc:
            step(DeviceKind.VENTILATOR, previous)
        assert "pressure" in str(exc.value)

    def test_missing_metric_rejected(self, healthy_ventilator):
        previous = _state(DeviceKind.VENTILATOR, replace(healthy_ventilator, oxygen_level=None))
        with pytest.raises(InvalidDeviceState):
            step(DeviceKind.VENTILATOR, previous)

    def test_foreign_healing_name_rejected(self, healthy_ventilator):
        previous = _state(DeviceKind.VENTILATOR, healthy_ventilator, healing={"battery_voltage"})
        with pytest.raises(InvalidDeviceState) as exc:
            step(DeviceKind.VENTILATOR, previous)
        assert "battery_voltage" in str(exc.value)
