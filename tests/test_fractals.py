import cmath
import math

import pytest

from fracit import (
    ConfigurationError,
    Mandelbrot,
    Polynomiograph,
    QuadraticJulia,
    RationalJulia,
    quadratic_orbit,
)
from fracit.config import IterationConfig
from fracit.fractals import is_cardioid_or_p2_bulb


def configured(fractal, n):
    fractal.set_max_iterations(n)
    return fractal


class TestQuadraticOrbit:
    def test_counts_steps_until_escape(self):
        config = IterationConfig(radius=2.0, max_iterations=50)
        result = quadratic_orbit(0j, 2 + 0j, config)
        assert result.iterations == 2
        assert result.z == 6
        assert result.c == 2

    def test_uses_true_squared_modulus(self):
        """|1.5 - 1.5i|^2 = 4.5 exceeds 2^2 before any step is taken."""
        config = IterationConfig(radius=2.0, max_iterations=50)
        result = quadratic_orbit(1.5 - 1.5j, 0j, config)
        assert result.iterations == 0
        assert result.z == 1.5 - 1.5j

    def test_boundary_is_inclusive(self):
        config = IterationConfig(radius=2.0, max_iterations=50)
        assert quadratic_orbit(2 + 0j, 0j, config).iterations == 1

    @pytest.mark.parametrize("n", [1, 2, 5, 64])
    def test_bounded_orbit_stops_at_cap(self, n):
        config = IterationConfig(radius=2.0, max_iterations=n)
        assert quadratic_orbit(0j, 0j, config).iterations == n - 1


class TestMandelbrot:
    @pytest.mark.parametrize("n", [1, 2, 10, 1000])
    def test_origin_is_interior(self, n):
        result = configured(Mandelbrot(2.0), n).evaluate(0j)
        assert result.iterations == n - 1

    @pytest.mark.parametrize("n", [5, 6, 100])
    def test_exterior_point_escapes(self, n):
        result = configured(Mandelbrot(2.0), n).evaluate(2 + 0j)
        assert result.iterations < n - 1
        assert result.iterations == 2

    def test_interior_shortcut_record(self):
        result = configured(Mandelbrot(2.0), 30).evaluate(-1 + 0j)
        assert result.z == -1
        assert result.c == 0
        assert result.iterations == 29

    @pytest.mark.parametrize("c", [0j, 0.2 + 0.1j, -0.5 + 0.5j, -1 + 0.1j, -1.2 + 0j])
    def test_cardioid_and_bulb_points(self, c):
        assert is_cardioid_or_p2_bulb(c)

    @pytest.mark.parametrize("c", [0.5 + 0j, -2 + 0j, 1j, -0.75 + 0.2j])
    def test_points_outside_known_regions(self, c):
        assert not is_cardioid_or_p2_bulb(c)

    def test_degree_is_two(self):
        assert Mandelbrot(2.0).config.degree == 2.0

    def test_max_iterations_one_forces_zero(self):
        mandelbrot = configured(Mandelbrot(2.0), 1)
        assert mandelbrot.evaluate(0.4 + 0.4j).iterations == 0
        assert mandelbrot.evaluate(3 + 3j).iterations == 0

    def test_deterministic(self):
        mandelbrot = configured(Mandelbrot(4.0), 200)
        assert mandelbrot.evaluate(-0.7453 + 0.1127j) == mandelbrot.evaluate(-0.7453 + 0.1127j)

    def test_configs_are_not_shared(self):
        a = configured(Mandelbrot(2.0), 10)
        b = configured(Mandelbrot(2.0), 20)
        assert a.config is not b.config
        assert a.config.max_iterations == 10

    @pytest.mark.parametrize("n", [0, -3])
    def test_rejects_bad_max_iterations(self, n):
        with pytest.raises(ConfigurationError):
            Mandelbrot(2.0).set_max_iterations(n)


class TestQuadraticJulia:
    @pytest.mark.parametrize("n", [1, 3, 50])
    def test_origin_is_fixed_point_of_square(self, n):
        result = configured(QuadraticJulia(2.0, 0j), n).evaluate(0j)
        assert result.iterations == n - 1
        assert result.z == 0

    def test_sample_is_starting_value(self):
        julia = configured(QuadraticJulia(2.0, 0j), 50)
        result = julia.evaluate(1.5 + 0j)
        # 1.5 -> 2.25 escapes after one step
        assert result.iterations == 1
        assert result.z == 2.25
        assert result.c == 0

    def test_parameter_is_reported(self):
        c = -0.8 + 0.156j
        assert configured(QuadraticJulia(2.0, c), 10).evaluate(0.1j).c == c


class TestRationalJulia:
    def test_matches_escape_count_of_quadratic(self):
        julia = configured(RationalJulia(2.0, lambda z: z * z, lambda z: z * 0 + 1, 2 + 0j), 50)
        result = julia.evaluate(0j)
        assert result.iterations == 2
        assert result.z == 6

    def test_pole_escapes_without_error(self):
        julia = configured(RationalJulia(10.0, lambda z: z * 0 + 1, lambda z: z, 0j), 10)
        result = julia.evaluate(0j)
        assert result.iterations == 1
        assert not cmath.isfinite(result.z)

    def test_pole_of_builtin_complex_maps_escapes(self):
        """Maps returning plain complex values must not raise at a pole."""
        julia = configured(RationalJulia(10.0, cmath.cos, cmath.sin, 0j), 10)
        result = julia.evaluate(0j)
        assert result.iterations == 1
        assert not cmath.isfinite(result.z)

    def test_constant_maps_with_zero_denominator(self):
        julia = configured(RationalJulia(10.0, lambda z: 1, lambda z: 0, 0j), 10)
        result = julia.evaluate(0.5j)
        assert result.iterations == 1
        assert not cmath.isfinite(result.z)

    def test_nan_counts_as_escaped(self):
        julia = configured(RationalJulia(10.0, lambda z: z * 0, lambda z: z * 0, 0j), 10)
        result = julia.evaluate(1 + 0j)
        assert result.iterations == 1
        assert cmath.isnan(result.z)

    def test_bounded_orbit_stops_at_cap(self):
        julia = configured(RationalJulia(2.0, lambda z: z * z, lambda z: z * 0 + 1, 0j), 12)
        assert julia.evaluate(0.5 + 0j).iterations == 11

    def test_default_degree(self):
        julia = RationalJulia(2.0, lambda z: z, lambda z: z, 0j)
        assert julia.config.inv_log_degree == pytest.approx(1 / math.log(2))


class TestPolynomiograph:
    def test_convergence_step_is_reported_exactly(self):
        pg = configured(Polynomiograph(0.2, lambda z: z / 2, lambda loc: 0j, lambda c: c), 10)
        result = pg.evaluate(1 + 0j)
        assert result.iterations == 2
        assert result.z == 0.25
        assert result.smooth_factor == 0

    def test_shift_sequence(self):
        pg = configured(Polynomiograph(0.3, lambda z: z, lambda loc: loc, lambda c: c / 2), 10)
        result = pg.evaluate(1 + 0j)
        assert result.iterations == 2
        assert result.z == -0.5
        assert result.c == 0.25

    @pytest.mark.parametrize("n", [1, 2, 7])
    def test_non_convergent_stops_at_cap(self, n):
        pg = configured(Polynomiograph(1e-9, lambda z: z + 1, lambda loc: 0j, lambda c: c), n)
        assert pg.evaluate(0j).iterations == n - 1

    def test_immediate_convergence(self):
        pg = configured(Polynomiograph(1e-6, lambda z: z, lambda loc: 0j, lambda c: c), 10)
        assert pg.evaluate(3 + 4j).iterations == 0

    def test_builtin_complex_maps(self):
        """cos has an attracting fixed point at the Dottie number."""
        pg = configured(Polynomiograph(1e-9, cmath.cos, lambda loc: 0, lambda c: c), 200)
        result = pg.evaluate(1 + 0j)
        assert 0 < result.iterations < 199
        assert result.z == pytest.approx(0.7390851332, abs=1e-8)

    def test_infinite_map_value_does_not_raise(self):
        pg = configured(Polynomiograph(1e-6, lambda z: complex(cmath.inf, 0), lambda loc: 0, lambda c: c), 5)
        assert pg.evaluate(0j).iterations == 4

    def test_has_no_radius(self):
        assert Polynomiograph(1e-6, abs, abs, abs).config.radius == math.inf
