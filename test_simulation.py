# Integration tests for parameter updates, sweeps and sensitivity - ASCII only
import math
import os
import sys

import pandas as pd
import pytest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from constants import PARAMETER_RANGES, STATUS_FOUND, STATUS_NO_INTERSECTION
from hydraulics import ParameterSet, DomainError, ValidationError
from simulation import update_parameters, run_parameter_sweep, run_sensitivity, sweep_range

SCENARIO_A = ParameterSet(
    A1=0.55, A2=0.25, z1=0.0, z2=0.0, P1=30.0, P2=30.0,
    nu=0.017, ksys=4.0, g=32.0, gc=32.0,
)


# == update_parameters ==

def test_update_builds_new_parameter_set():
    base = ParameterSet.default()
    moved = update_parameters(base, P1=100.0, ksys=8.0)
    assert moved is not base
    assert (moved.P1, moved.ksys) == (100.0, 8.0)
    assert (base.P1, base.ksys) == (75.0, 4.0)
    assert moved.A2 == base.A2


def test_update_rejects_unknown_parameter():
    with pytest.raises(ValidationError):
        update_parameters(ParameterSet.default(), viscosity=1.0)


def test_update_enforces_slider_ranges():
    base = ParameterSet.default()
    with pytest.raises(DomainError):
        update_parameters(base, enforce_ranges=True, A1=2.0)
    with pytest.raises(DomainError):
        update_parameters(base, enforce_ranges=True, ksys=0.0)
    # A2 has no slider range
    assert update_parameters(base, enforce_ranges=True, A2=3.0).A2 == 3.0
    # range check is opt-in
    assert update_parameters(base, A1=2.0).A1 == 2.0


# == run_parameter_sweep ==

def test_ksys_sweep_reduces_flow():
    df = run_parameter_sweep(SCENARIO_A, "ksys", [2.0, 4.0, 8.0, 16.0])
    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == ["value", "status", "Vdot", "Hp", "power_hp"]
    assert (df["status"] == STATUS_FOUND).all()
    assert df["Vdot"].is_monotonic_decreasing
    assert df["Hp"].is_monotonic_increasing
    assert (df["power_hp"] > 0).all()


def test_sweep_reports_missing_operating_point_as_nan():
    df = run_parameter_sweep(SCENARIO_A, "P2", [30.0, 250.0])
    assert list(df["status"]) == [STATUS_FOUND, STATUS_NO_INTERSECTION]
    assert math.isnan(df["Vdot"].iloc[1])
    assert math.isnan(df["Hp"].iloc[1])
    assert math.isnan(df["power_hp"].iloc[1])


def test_sweep_rejects_unknown_parameter():
    with pytest.raises(ValidationError):
        run_parameter_sweep(SCENARIO_A, "rho", [1.0])


def test_sweep_propagates_domain_errors():
    with pytest.raises(DomainError):
        run_parameter_sweep(SCENARIO_A, "A1", [0.5, 0.0])


def test_sweep_range_spans_slider():
    values = sweep_range("P1", 7)
    assert len(values) == 7
    assert (values[0], values[-1]) == PARAMETER_RANGES["P1"]
    with pytest.raises(ValidationError):
        sweep_range("A2")


# == run_sensitivity ==

def test_sensitivity_structure():
    res = run_sensitivity()
    assert set(res["deltas"]) == set(PARAMETER_RANGES)
    assert sorted(res["ranking"]) == sorted(PARAMETER_RANGES)
    assert not math.isnan(res["baseline_flow"])
    assert res["critical_parameter"] is not None
    assert res["ranking"][0] == res["critical_parameter"]
    for name in PARAMETER_RANGES:
        low, high = res["low_flows"][name], res["high_flows"][name]
        if not (math.isnan(low) or math.isnan(high)):
            assert res["deltas"][name] == pytest.approx(high - low)


def test_sensitivity_ranking_orders_by_magnitude():
    res = run_sensitivity(SCENARIO_A)
    finite = [p for p in res["ranking"] if not math.isnan(res["deltas"][p])]
    mags = [abs(res["deltas"][p]) for p in finite]
    assert mags == sorted(mags, reverse=True)
    # NaN entries trail the finite ones
    assert res["ranking"][:len(finite)] == finite
    # raising the inlet lowers the static head -> more flow
    assert res["deltas"]["z1"] > 0


if __name__ == "__main__":
    PASS = 0
    FAIL = 0
    for name, fn in list(globals().items()):
        if name.startswith("test_") and callable(fn):
            try:
                fn()
                PASS += 1
                print(f"  [OK] {name}")
            except AssertionError as exc:
                FAIL += 1
                print(f"  [FAIL] {name}: {exc}")
    print(f"\n{'='*50}")
    print(f"RESULT: {PASS} passed, {FAIL} failed, {PASS+FAIL} total")
    print(f"{'='*50}")
    sys.exit(0 if FAIL == 0 else 1)
