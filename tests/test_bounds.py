import numpy as np

from common.bounds import Bounds


class TestClass:
    def test_bounds1(self):
        bounds = Bounds(0, 0, 10, 10)
        assert bounds.left == 0 and bounds.top == 0 and bounds.width == 10 and bounds.height == 10

    def test_bounds2(self):
        bounds = Bounds(0, 0, 10, 10)
        assert bounds.area() == 100

    def test_bounds3(self):
        bounds1 = Bounds(0, 0, 10, 10)
        bounds2 = Bounds(2, 2, 4, 4)
        assert bounds2.isInside(bounds1)

    def test_bounds4(self):
        bounds1 = Bounds(0, 0, 10, 10)
        bounds2 = Bounds(2, 2, 10, 10)
        assert bounds2.isInside(bounds1, True)

    def test_bounds5(self):
        bounds1 = Bounds(0, 0, 10, 10)
        bounds2 = Bounds(6, 6, 10, 10)
        assert not bounds2.isInside(bounds1, True)

    def test_bounds6(self):
        bounds1 = Bounds(0, 0, 10, 10)
        bounds2 = Bounds(2, 2, 4, 4)
        assert not bounds1.isInside(bounds2)


class TestInset:
    def test_inset_shrinks_every_side(self):
        inset = Bounds(0, 0, 400, 300).inset(30)
        assert inset == Bounds(30, 30, 340, 240)

    def test_inset_is_inside_original(self):
        original = Bounds(10, 20, 100, 50)
        assert original.inset(5).isInside(original)

    def test_inset_never_negative(self):
        inset = Bounds(0, 0, 10, 40).inset(100)
        assert inset.width == 0
        assert inset.height == 30

    def test_inset_keeps_center(self):
        bounds = Bounds(0, 0, 200, 100)
        assert bounds.inset(20).center() == bounds.center()


class TestCorners:
    def test_corners_order(self):
        corners = Bounds(10, 20, 100, 50).corners()
        expected = np.array([[10, 20], [110, 20], [110, 70], [10, 70]], dtype=np.float32)
        assert corners.dtype == np.float32
        assert np.array_equal(corners, expected)

    def test_of_image(self):
        image = np.zeros((300, 400, 3), dtype=np.uint8)
        assert Bounds.of_image(image.shape) == Bounds(0, 0, 400, 300)

    def test_of_points(self):
        points = np.array([[50, 10], [5, 40], [30, 80]], dtype=np.float32)
        bounds = Bounds.of_points(points)
        assert bounds == Bounds(5.0, 10.0, 45.0, 70.0)
