# Unit tests for piecewise-linear interpolation - ASCII only
import math
import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from hydraulics import ValidationError
from interpolation import InvalidInputError, LinearInterpolator, make_interpolator
from curves import generate_samples


def test_knots_are_returned_exactly():
    xs = [0.0, 0.1, 0.35, 1.7, 2.0]
    ys = [3.0, -1.25, 7.5, 0.3, 11.0]
    f = make_interpolator(xs, ys)
    for x, y in zip(xs, ys):
        assert f(x) == y


def test_knots_exact_on_uniform_grid():
    xs = generate_samples(100, 0.0, 12.0)
    ys = np.sin(xs) * 300.0 + 0.1 * xs ** 3
    f = make_interpolator(xs, ys)
    for i in range(len(xs)):
        assert f(xs[i]) == ys[i]


def test_knot_next_to_nan_is_exact():
    f = make_interpolator([0.0, 1.0, 2.0], [5.0, 4.0, math.nan])
    assert f(1.0) == 4.0
    assert f(0.5) == 4.5
    assert math.isnan(f(1.5))


def test_linear_blend_inside_segments():
    f = make_interpolator([0.0, 1.0, 2.0], [0.0, 10.0, 30.0])
    assert f(0.25) == pytest.approx(2.5)
    assert f(1.5) == pytest.approx(20.0)


def test_extrapolates_with_edge_slopes():
    f = make_interpolator([0.0, 1.0, 2.0], [0.0, 10.0, 30.0])
    assert f(-1.0) == pytest.approx(-10.0)
    assert f(3.0) == pytest.approx(50.0)


def test_matches_normalized_blend_on_uniform_grid():
    # uniform grid: segment index = floor(t * (n - 1)) with t = (x - x0) / (xn - x0)
    xs = generate_samples(7, 2.0, 8.0)
    ys = np.array([1.0, 4.0, 2.0, 8.0, 8.5, 3.0, -1.0])
    f = make_interpolator(xs, ys)
    for x in (2.3, 4.75, 7.9, 9.0, 1.0):
        t = (x - xs[0]) / (xs[-1] - xs[0]) * (len(xs) - 1)
        i = min(max(int(math.floor(t)), 0), len(xs) - 2)
        expected = ys[i] * (1 - (t - i)) + ys[i + 1] * (t - i)
        assert f(x) == pytest.approx(expected, rel=1e-12, abs=1e-12)


def test_agrees_with_numpy_interp_inside_range():
    xs = generate_samples(100, 0.0, 12.0)
    ys = 400.0 * np.sqrt(1.0 - (xs / 12.0) ** 2)
    f = make_interpolator(xs, ys)
    qs = np.linspace(0.0, 12.0, 257)
    np.testing.assert_array_equal(f(qs), np.interp(qs, xs, ys))
    # mixed inside / outside input
    out = f(np.array([-0.5, 6.0, 12.5]))
    assert out[1] == np.interp(6.0, xs, ys)
    assert out[0] > ys[0]
    assert out[2] < ys[-1]


def test_array_input_returns_array():
    f = make_interpolator([0.0, 1.0], [0.0, 2.0])
    out = f(np.array([0.0, 0.5, 1.0]))
    assert isinstance(out, np.ndarray)
    np.testing.assert_allclose(out, [0.0, 1.0, 2.0])
    assert isinstance(f(0.5), float)


def test_interpolator_copies_inputs():
    xs = np.array([0.0, 1.0])
    ys = np.array([0.0, 1.0])
    f = make_interpolator(xs, ys)
    ys[1] = 100.0
    assert f(1.0) == 1.0
    assert isinstance(f, LinearInterpolator)
    assert (f.x_min, f.x_max) == (0.0, 1.0)


@pytest.mark.parametrize("xs, ys", [
    ([0.0, 1.0, 2.0], [0.0, 1.0]),
    ([0.0], [1.0]),
    ([], []),
    ([0.0, 2.0, 1.0], [0.0, 1.0, 2.0]),
    ([0.0, 1.0, 1.0], [0.0, 1.0, 2.0]),
    ([0.0, math.nan], [0.0, 1.0]),
    ([[0.0, 1.0]], [[0.0, 1.0]]),
])
def test_malformed_inputs_raise(xs, ys):
    with pytest.raises(InvalidInputError):
        make_interpolator(xs, ys)


def test_invalid_input_error_is_validation_error():
    assert issubclass(InvalidInputError, ValidationError)


if __name__ == "__main__":
    PASS = 0
    FAIL = 0
    for name, fn in list(globals().items()):
        if name.startswith("test_") and callable(fn) and not hasattr(fn, "pytestmark"):
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
