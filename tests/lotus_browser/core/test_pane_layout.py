import pytest

from lotus_browser.core.pane_layout import PaneLayoutEngine, PointerEventBus


def _engine(sizes=(20, 35, 45), width=1000.0, bus=None):
    return PaneLayoutEngine(sizes, min_pixels=240, container_width=width, pointer_source=bus)


def test_drag_clamps_left_pane_and_keeps_non_adjacent_pane():
    engine = _engine()

    assert engine.begin_drag(0, 500.0)
    engine.on_drag_move(250.0)

    px = engine.pixel_widths()
    assert px[0] == pytest.approx(240.0)
    assert px[1] == pytest.approx(310.0)
    assert px[2] == pytest.approx(450.0)
    assert sum(engine.sizes) == pytest.approx(100.0)


def test_drag_on_second_divider_derives_first_pane():
    engine = _engine()

    engine.begin_drag(1, 550.0)
    sizes = engine.on_drag_move(650.0)

    assert sizes == pytest.approx([20.0, 45.0, 35.0])


def test_sizes_sum_to_100_and_respect_minimum_over_many_moves():
    # 1400px: every pane starts above the 240px floor
    engine = _engine(width=1400.0)
    positions = [0, 100, 380, 700, 1200, 1399, 5000, -5000, 640]

    for divider in (0, 1, 0, 1):
        engine.begin_drag(divider, 700.0)
        for x in positions:
            engine.on_drag_move(float(x))
            assert sum(engine.raw_sizes) == pytest.approx(100.0)
            for width in engine.pixel_widths():
                assert width >= 240.0 - 1e-6
        engine.end_drag()


def test_moves_are_computed_from_the_drag_anchor():
    direct = _engine()
    direct.begin_drag(0, 500.0)
    direct.on_drag_move(560.0)

    wandering = _engine()
    wandering.begin_drag(0, 500.0)
    for x in (900.0, 100.0, 700.0, 420.0):
        wandering.on_drag_move(x)
    wandering.on_drag_move(560.0)

    assert wandering.sizes == pytest.approx(direct.sizes)


def test_narrow_container_reports_zero_instead_of_negative():
    engine = PaneLayoutEngine((25, 25, 50), min_pixels=240, container_width=400.0)

    engine.begin_drag(0, 100.0)
    sizes = engine.on_drag_move(100.0)

    assert engine.raw_sizes == pytest.approx([-10.0, 60.0, 50.0])
    assert sizes == pytest.approx([0.0, 60.0, 50.0])
    assert all(s >= 0 for s in sizes)
    assert sum(engine.raw_sizes) == pytest.approx(100.0)


def test_move_without_drag_is_a_no_op():
    engine = _engine()

    before = engine.sizes
    assert engine.on_drag_move(10.0) == before
    assert not engine.is_dragging


def test_unknown_divider_is_ignored():
    engine = _engine()

    assert engine.begin_drag(2, 100.0) is False
    assert engine.begin_drag(-1, 100.0) is False
    assert not engine.is_dragging


def test_end_drag_is_idempotent():
    bus = PointerEventBus()
    engine = _engine(bus=bus)

    engine.end_drag()
    engine.begin_drag(0, 500.0)
    engine.end_drag()
    engine.end_drag()

    assert not engine.is_dragging
    assert bus.listener_count == 0


def test_pointer_bus_drives_drag_and_releases_on_up():
    bus = PointerEventBus()
    engine = _engine(bus=bus)

    engine.begin_drag(0, 500.0)
    assert bus.listener_count == 1

    bus.move(550.0)
    assert engine.pixel_widths()[0] == pytest.approx(250.0)

    bus.up()
    assert not engine.is_dragging
    assert bus.listener_count == 0

    # Events after release do nothing
    bus.move(900.0)
    assert engine.pixel_widths()[0] == pytest.approx(250.0)


def test_repeated_drag_cycles_do_not_leak_listeners():
    bus = PointerEventBus()
    engine = _engine(bus=bus)

    for _ in range(5):
        engine.begin_drag(1, 550.0)
        bus.move(600.0)
        bus.up()
        assert bus.listener_count == 0


def test_new_drag_replaces_session_in_progress():
    bus = PointerEventBus()
    engine = _engine(bus=bus)

    engine.begin_drag(0, 500.0)
    engine.begin_drag(1, 550.0)

    assert engine.session.divider_index == 1
    assert bus.listener_count == 1


def test_close_mid_drag_releases_listener():
    bus = PointerEventBus()
    engine = _engine(bus=bus)

    engine.begin_drag(0, 500.0)
    engine.close()

    assert not engine.is_dragging
    assert bus.listener_count == 0


def test_handle_pointer_event_sequence():
    engine = PaneLayoutEngine((20, 35, 45), min_pixels=240)

    engine.handle_pointer_event({"type": "down", "divider": 1, "x": 550, "width": 1000})
    assert engine.is_dragging
    engine.handle_pointer_event({"type": "move", "x": 650})
    sizes = engine.handle_pointer_event({"type": "up"})

    assert sizes == pytest.approx([20.0, 45.0, 35.0])
    assert not engine.is_dragging


def test_handle_pointer_event_ignores_malformed_input():
    engine = _engine()

    assert engine.handle_pointer_event(None) == engine.sizes
    engine.handle_pointer_event({"type": "down", "divider": "left", "x": 1})
    engine.handle_pointer_event({"type": "wiggle"})

    assert not engine.is_dragging
    assert engine.sizes == pytest.approx([20.0, 35.0, 45.0])


def test_round_trip_through_dict_mid_drag():
    engine = _engine()
    engine.begin_drag(0, 500.0)
    engine.on_drag_move(450.0)

    restored = PaneLayoutEngine.from_dict(engine.to_dict(), min_pixels=240)
    assert restored.is_dragging
    assert restored.raw_sizes == pytest.approx(engine.raw_sizes)

    engine.on_drag_move(620.0)
    restored.on_drag_move(620.0)
    assert restored.sizes == pytest.approx(engine.sizes)


def test_from_dict_keeps_negative_raw_split():
    engine = PaneLayoutEngine((25, 25, 50), min_pixels=240, container_width=400.0)
    engine.begin_drag(0, 100.0)
    engine.on_drag_move(100.0)
    engine.end_drag()

    restored = PaneLayoutEngine.from_dict(engine.to_dict(), min_pixels=240)

    assert restored.raw_sizes == pytest.approx([-10.0, 60.0, 50.0])
    assert restored.sizes == pytest.approx([0.0, 60.0, 50.0])


def test_from_dict_with_garbage_falls_back_to_defaults():
    restored = PaneLayoutEngine.from_dict(
        {"sizes": ["a", 1], "session": {"divider_index": 9}},
        default_sizes=(30, 30, 40),
    )

    assert restored.sizes == pytest.approx([30.0, 30.0, 40.0])
    assert not restored.is_dragging
    assert PaneLayoutEngine.from_dict(None).sizes == pytest.approx([20.0, 35.0, 45.0])


def test_pointer_up_applies_final_position_from_same_stored_state():
    engine = _engine()
    engine.begin_drag(0, 500.0)
    stored = engine.to_dict()

    # The last move and the up are both computed from the same stored state
    after_move = PaneLayoutEngine.from_dict(stored, min_pixels=240)
    after_move.handle_pointer_event({"type": "move", "x": 600})
    after_up = PaneLayoutEngine.from_dict(stored, min_pixels=240)
    after_up.handle_pointer_event({"type": "up", "x": 600})

    assert after_move.sizes == pytest.approx([30.0, 25.0, 45.0])
    assert after_up.sizes == pytest.approx(after_move.sizes)
    assert not after_up.is_dragging


def test_pointer_up_without_position_keeps_last_sizes():
    engine = _engine()
    engine.handle_pointer_event({"type": "down", "divider": 0, "x": 500})
    engine.handle_pointer_event({"type": "move", "x": 550})

    sizes = engine.handle_pointer_event({"type": "up"})

    assert sizes == pytest.approx([25.0, 30.0, 45.0])
    assert not engine.is_dragging


def test_malformed_pointer_up_still_ends_drag():
    bus = PointerEventBus()
    engine = _engine(bus=bus)
    engine.begin_drag(0, 500.0)

    engine.handle_pointer_event({"type": "up", "x": "left"})

    assert not engine.is_dragging
    assert bus.listener_count == 0
