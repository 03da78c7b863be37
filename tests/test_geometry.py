import fitz

from pagetiles.geometry import Rect, Vector


def test_vector_arithmetic_is_component_wise():
    a = Vector(1, 2)
    b = Vector(3, 5)
    assert a + b == Vector(4, 7)
    assert b - a == Vector(2, 3)
    assert -a == Vector(-1, -2)
    assert a.scaled(3) == Vector(3, 6)
    assert a.non_uniform_scaled(b) == Vector(3, 10)
    assert Vector(2, 4).div_inverted() == Vector(0.5, 0.25)
    assert Vector(1.4, 1.6).rounded() == Vector(1, 2)


def test_rect_accessors():
    rect = Rect.from_pos_size(Vector(10, 20), Vector(30, 40))
    assert rect.x1 == Vector(40, 60)
    assert rect.width == 30
    assert rect.height == 40
    assert rect.size == Vector(30, 40)
    assert rect.center == Vector(25, 40)


def test_rect_translate_and_scale_about_center():
    rect = Rect.from_coords(0, 0, 10, 20)
    assert rect.translated(Vector(5, -5)).to_tuple() == (5, -5, 15, 15)

    doubled = rect.scaled(2)
    assert doubled.center == rect.center
    assert doubled.to_tuple() == (-5, -10, 15, 30)

    squashed = rect.scaled_xy(Vector(1, 0.5))
    assert squashed.to_tuple() == (0, 5, 10, 15)


def test_inverted_rect_is_empty():
    assert Rect.from_coords(10, 10, 0, 0).is_empty
    assert Rect.from_coords(0, 0, 0, 10).is_empty
    assert not Rect.from_coords(0, 0, 1, 1).is_empty


def test_intersection_is_strict():
    a = Rect.from_coords(0, 0, 10, 10)
    assert a.intersects(Rect.from_coords(5, 5, 15, 15))
    # Sharing only an edge is not an intersection.
    assert not a.intersects(Rect.from_coords(10, 0, 20, 10))
    assert not a.intersects(Rect.from_coords(0, 10, 10, 20))
    assert not a.intersects(Rect.from_coords(20, 20, 30, 30))


def test_contains_is_strict():
    rect = Rect.from_coords(0, 0, 10, 10)
    assert rect.contains(Vector(5, 5))
    assert not rect.contains(Vector(0, 5))


def test_union_and_fitz_conversion():
    a = Rect.from_coords(0, 0, 10, 10)
    b = Rect.from_coords(5, -5, 20, 5)
    assert a.union(b).to_tuple() == (0, -5, 20, 10)

    assert Rect.from_fitz(fitz.Rect(1, 2, 3, 4)).to_tuple() == (1, 2, 3, 4)
    irect = Rect.from_coords(0.4, 0.6, 10.5, 9.4).to_irect()
    assert tuple(irect) == (0, 1, 10, 9)
