"""
Unit tests for vector.py
"""
import math

import numpy as np
import pytest

from bs_solctra.vector import ZERO, Vector3, points_to_array


class TestVector3:
    """Tests for the Vector3 value type."""

    def test_norm(self):
        assert Vector3(3.0, 4.0, 0.0).norm() == 5.0
        assert ZERO.norm() == 0.0

    def test_distance_is_symmetric(self):
        a = Vector3(1.0, 2.0, 3.0)
        b = Vector3(4.0, 6.0, 3.0)
        assert a.distance(b) == 5.0
        assert b.distance(a) == 5.0

    def test_displacement_is_self_minus_other(self):
        a = Vector3(1.0, 2.0, 3.0)
        b = Vector3(0.5, -1.0, 4.0)
        assert a.displacement(b) == Vector3(0.5, 3.0, -1.0)
        assert a - b == a.displacement(b)

    def test_unit_vector(self):
        u = Vector3(0.0, 3.0, 4.0).unit_vector()
        assert u == Vector3(0.0, 0.6, 0.8)
        assert math.isclose(u.norm(), 1.0)

    def test_unit_vector_of_zero_raises(self):
        with pytest.raises(ZeroDivisionError):
            ZERO.unit_vector()

    def test_operations_return_new_instances(self):
        a = Vector3(1.0, 1.0, 1.0)
        b = a + Vector3(1.0, 0.0, 0.0)
        assert a == Vector3(1.0, 1.0, 1.0)
        assert b == Vector3(2.0, 1.0, 1.0)
        with pytest.raises(AttributeError):
            a.x = 5.0

    def test_scalar_multiplication_and_division(self):
        a = Vector3(1.0, -2.0, 0.5)
        assert a * 2.0 == Vector3(2.0, -4.0, 1.0)
        assert 2.0 * a == a * 2.0
        assert a / 2.0 == Vector3(0.5, -1.0, 0.25)

    def test_cross_product(self):
        x = Vector3(1.0, 0.0, 0.0)
        y = Vector3(0.0, 1.0, 0.0)
        assert x.cross(y) == Vector3(0.0, 0.0, 1.0)
        assert y.cross(x) == Vector3(0.0, 0.0, -1.0)

    def test_str_uses_full_precision(self):
        assert str(Vector3(0.1455416056924451, 0.0, -1.5)) == "0.1455416056924451,0.0,-1.5"

    def test_array_round_trip(self):
        a = Vector3(1.5, -2.25, 3.0)
        arr = a.as_array()
        assert arr.dtype == float
        assert Vector3.from_array(arr) == a
        assert tuple(a) == (1.5, -2.25, 3.0)

    def test_points_to_array_shape(self):
        arr = points_to_array([Vector3(0.0, 0.0, 0.0), Vector3(1.0, 2.0, 3.0)])
        assert arr.shape == (2, 3)
        np.testing.assert_array_equal(arr[1], [1.0, 2.0, 3.0])
        assert points_to_array([]).shape == (0, 3)
