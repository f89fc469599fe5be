import pytest

from trophysim.trophy import (
    BACK_LED_INDEX,
    FLOOR_LED_INDEX,
    LOGO_ORDER,
    LOGO_START_INDEX,
    N_LEDS,
    N_LEDS_IN_BASE,
    N_LEDS_IN_LOGO,
    N_LOGO_HEIGHT,
    N_LOGO_WIDTH,
    Trophy,
    calc_base_order,
    parse_logo_order,
)


def test_logo_order_grid_holds_every_logo_led_once():
    assert len(LOGO_ORDER) == N_LOGO_WIDTH * N_LOGO_HEIGHT
    present = sorted(v for v in LOGO_ORDER if v >= 0)
    assert present == list(range(N_LEDS_IN_LOGO))
    missing = parse_logo_order(N_LEDS_IN_LOGO)
    found = [i for i in range(N_LEDS_IN_LOGO) if parse_logo_order(i) != missing]
    assert found == list(range(N_LEDS_IN_LOGO))


def test_logo_positions_distinct():
    points = {parse_logo_order(i) for i in range(N_LEDS_IN_LOGO)}
    assert len(points) == N_LEDS_IN_LOGO


def test_missing_logo_index_maps_like_any_other_missing():
    assert parse_logo_order(999) == parse_logo_order(N_LEDS_IN_LOGO)
    assert parse_logo_order(999) not in {parse_logo_order(i) for i in range(N_LEDS_IN_LOGO)}


def test_base_positions_distinct_and_on_square():
    points = [calc_base_order(i) for i in range(N_LEDS_IN_BASE)]
    assert len(set(points)) == N_LEDS_IN_BASE
    for x, y in points:
        assert -0.5 <= x <= 0.5
        assert -0.5 <= y <= 0.5
        assert abs(x) == pytest.approx(0.5) or abs(y) == pytest.approx(0.5)


def test_base_edges():
    for i in range(16):
        assert calc_base_order(i)[1] == -0.5
    for i in range(48, 64):
        assert calc_base_order(i)[1] == 0.5
    for i in range(16, 48):
        assert calc_base_order(i)[0] in (-0.5, 0.5)


def test_kinds_of_leds():
    t = Trophy()
    assert len(t.positions) == N_LEDS
    singles = [i for i, flag in enumerate(t.is_single_color) if flag]
    assert singles == [BACK_LED_INDEX, FLOOR_LED_INDEX]
    assert sum(t.is_base) == N_LEDS_IN_BASE
    assert sum(t.is_logo) == N_LEDS_IN_LOGO
    assert not any(a and b for a, b in zip(t.is_base, t.is_logo))


def test_single_led_positions():
    t = Trophy()
    back, floor = t.back_led_pos, t.floor_led_pos
    assert t.positions[BACK_LED_INDEX] == (back.x, back.y, back.z, 0.0)
    assert t.positions[FLOOR_LED_INDEX] == (floor.x, floor.y, floor.z, 0.0)


def test_base_leds_lie_in_base_plane():
    t = Trophy()
    for i in range(N_LEDS_IN_BASE):
        assert t.positions[i][1] == t.base_center.y


def test_rebuild_moves_logo_only():
    t = Trophy()
    before = list(t.positions)
    t.logo_center.x += 0.1
    t.rebuild()
    for i in range(N_LEDS):
        if t.is_logo[i]:
            assert t.positions[i][0] == pytest.approx(before[i][0] + 0.1)
            assert t.positions[i][1:] == pytest.approx(before[i][1:])
        else:
            assert t.positions[i] == before[i]


def test_rebuild_scales_base():
    t = Trophy()
    t.base_size = 2.0
    t.rebuild()
    for i in range(N_LEDS_IN_BASE):
        rx, rz = calc_base_order(i)
        assert t.positions[i][0] == pytest.approx(t.base_center.x + 2.0 * rx)
        assert t.positions[i][2] == pytest.approx(t.base_center.z + 2.0 * rz)


def test_ranges_bound_all_positions_and_origin():
    t = Trophy()
    for x, y, z, _ in t.positions:
        assert t.pos_min.x <= x <= t.pos_max.x
        assert t.pos_min.y <= y <= t.pos_max.y
        assert t.pos_min.z <= z <= t.pos_max.z
    assert t.pos_min.z <= 0.0 <= t.pos_max.z


def test_aligned_sizes():
    t = Trophy()
    assert t.aligned_size_of_number() == 16
    assert t.aligned_size_of_positions() == N_LEDS * t.aligned_size_of_number()
    assert t.aligned_total_size() == t.aligned_size_of_number() + t.aligned_size_of_positions()


def test_debug_report():
    t = Trophy()
    report = t.debug_report()
    lines = report.splitlines()
    assert lines[0] == f"=== DEBUG TROPHY LED POSITIONS === N = {N_LEDS}"
    assert lines[-1] == "=================================="
    assert lines.index("  LOGO:") < lines.index("  WHITE-ONLY:")
    assert any(line.startswith(f"    {LOGO_START_INDEX:03d}: ") for line in lines)
    assert any(line.startswith("    000: ") for line in lines)
    assert sum(1 for line in lines if line.startswith("    ")) == N_LEDS