import pytest

from trophysim.geometry import (
    Coord,
    Rect,
    RelativeRect,
    Size,
    describe_rect,
    describe_vec4,
    outside_rect,
    same_pixel,
)


def test_size_truthiness():
    sizes = [Size(3, 4), Size(0, 4), Size(3, -1), Size()]
    assert [s for s in sizes if s] == [Size(3, 4)]
    assert [s.__bool__() for s in sizes] == [True, False, False, False]


def test_size_area():
    assert Size(3, 4).area() == 12
    assert Size(0, 99).area() == 0


def test_coord_move_to_smaller():
    c = Coord(5, 5)
    c.move_to_smaller(Coord(2, 9))
    assert c == Coord(2, 5)
    c.move_to_smaller(Coord(-3, -4))
    assert c == Coord(-3, -4)


def test_coord_move_to_larger():
    c = Coord(5, 5)
    c.move_to_larger(Coord(2, 9))
    assert c == Coord(5, 9)
    c.move_to_larger(Coord(1, 1))
    assert c == Coord(5, 9)


def test_rect_extent_and_maxima():
    r = Rect(x=10, y=20, width=100, height=50)
    assert r.max_x() == r.x + r.width
    assert r.max_y() == r.y + r.height
    assert r.extent() == Size(r.max_x(), r.max_y())
    assert r.area() == r.width * r.height


def test_rect_truthiness_follows_size():
    empty = Rect(x=5, y=5, width=0, height=10)
    filled = Rect(x=0, y=0, width=1, height=1)
    assert [r for r in (empty, filled) if r] == [filled]
    assert empty.__bool__() is False
    assert filled.__bool__() is True


def test_relative_rect_fields():
    rr = RelativeRect(width=0.5, height=0.9, x=0.05, y=0.05)
    assert (rr.width, rr.height, rr.x, rr.y) == (0.5, 0.9, 0.05, 0.05)


@pytest.mark.parametrize(
    "x1,y1,x2,y2,expected",
    [
        (3, 4, 3.2, 4.4, True),
        (3, 4, 3.5, 4, False),
        (3, 4, 3, 3.4, False),
        (0, 0, -0.49, 0.49, True),
    ],
)
def test_same_pixel(x1, y1, x2, y2, expected):
    assert same_pixel(x1, y1, x2, y2) is expected


@pytest.mark.parametrize(
    "x,y,expected",
    [
        (10, 20, False),
        (109.9, 69.9, False),
        (110, 30, True),
        (50, 70, True),
        (9.9, 30, True),
        (50, 19.9, True),
    ],
)
def test_outside_rect(x, y, expected):
    assert outside_rect(x, y, (10, 20, 100, 50)) is expected


def test_describe_rect():
    r = Rect(x=1, y=2, width=3, height=4)
    assert describe_rect("view", r) == "view: 1, 2, size: 3, 4"


def test_describe_vec4():
    assert describe_vec4("v", (0.5, 1.0, -2.0, 0.25)) == "v: (0.5, 1, -2, 0.25)"