import math

import pytest

from living_mandelbrot.compute import MAX_ITERATIONS, evaluate


@pytest.mark.parametrize("c", [(3.0, 0.0), (-2.5, 0.1), (0.0, 2.01), (1.6, -1.6), (-10.0, 7.0)])
@pytest.mark.parametrize("flow", [False, True])
def test_points_outside_radius_two_escape_on_first_iteration(c, flow):
    result = evaluate(c[0], c[1], 3.7, flow)
    assert result.escaped
    assert result.iteration_count == 1
    # First iterate is c itself, even with flow (z starts at 0)
    assert result.final_real == c[0]
    assert result.final_imag == c[1]


def test_origin_never_escapes():
    result = evaluate(0.0, 0.0, 0.0, False)
    assert not result.escaped
    assert result.iteration_count == MAX_ITERATIONS
    assert result.smooth_value == MAX_ITERATIONS


def test_main_cardioid_point_does_not_escape_with_flow():
    result = evaluate(-0.1, 0.1, 12.0, True)
    assert not result.escaped
    assert result.iteration_count == MAX_ITERATIONS


def test_smooth_value_formula():
    result = evaluate(3.0, 0.0, 0.0, False)
    expected = 1 + 1 - math.log(math.log(3.0)) / math.log(2.0)
    assert result.smooth_value == pytest.approx(expected)


def test_final_magnitude_and_angle():
    result = evaluate(3.0, 4.0, 0.0, False)
    assert result.final_magnitude == pytest.approx(5.0)
    assert result.final_angle == pytest.approx(math.atan2(4.0, 3.0))

    result = evaluate(-3.0, 0.0, 0.0, False)
    assert result.final_angle == pytest.approx(math.pi)


@pytest.mark.parametrize("c", [(0.3, 0.5), (-0.75, 0.1), (-1.0, 0.3), (0.26, 0.0), (-0.5, 0.6)])
def test_flow_disabled_ignores_time_offset(c):
    results = {evaluate(c[0], c[1], t, False) for t in (0.0, 1.5, 42.0, -7.25)}
    assert len(results) == 1


def test_flow_enabled_depends_on_time_offset():
    still = evaluate(0.3, 0.5, 0.0, True)
    moving = evaluate(0.3, 0.5, 5.0, True)
    assert still != moving


def test_flow_at_time_zero_matches_plain_iteration():
    # sin(0) == 0, so the perturbation vanishes
    assert evaluate(-0.75, 0.1, 0.0, True) == evaluate(-0.75, 0.1, 0.0, False)


def test_smooth_value_is_always_finite():
    for i in range(-20, 21):
        for j in range(-12, 13):
            result = evaluate(i * 0.12 - 0.5, j * 0.1, i * 0.3, True)
            assert math.isfinite(result.smooth_value)
            assert -math.pi <= result.final_angle <= math.pi
            assert 0 <= result.iteration_count <= MAX_ITERATIONS
            assert result.escaped == (result.iteration_count < MAX_ITERATIONS)
