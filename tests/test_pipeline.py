"""Tests for the reactive update pipeline (ShapeController)."""

import logging

import pytest

from cutshape.core.pipeline import ManualDebouncer, ShapeController
from cutshape.core.settings import ShapeSettings
from cutshape.svg.path import is_valid_path_data


@pytest.fixture
def deb():
    return ManualDebouncer()


@pytest.fixture
def results():
    return []


def make(attrs=None, deb=None, results=None, **kw):
    ctl = ShapeController(attrs, debouncer=deb, **kw)
    if results is not None:
        ctl.add_listener(results.append)
    return ctl


class TestInitialLayout:
    def test_never_laid_out_writes_nothing(self, results):
        ctl = make({"corner-size": "60"}, results=results)
        assert ctl.recompute_and_apply() is None
        assert ctl.path_data is None
        assert results == []

    def test_zero_box_is_ignored(self, results):
        ctl = make(results=results)
        assert ctl.set_box_size(0, 100) is None
        assert ctl.set_box_size(100, -1) is None
        assert results == []

    def test_first_measure_is_immediate(self, scenario_path, results):
        ctl = make({"corner-size": "60"}, results=results)
        res = ctl.set_box_size(201, 101)
        assert res.path_data == scenario_path
        assert res.view_box == "0 0 200 100"
        assert res.stroke_width == 1
        assert results == [res]

    def test_size_from_attributes(self, scenario_path):
        ctl = make({"width": "201", "height": "101", "corner-size": "60"})
        assert ctl.recompute_and_apply().path_data == scenario_path


class TestDebounce:
    def test_burst_collapses_to_one_recompute(self, deb, results, scenario_path):
        ctl = make({"corner-size": "60"}, deb=deb, results=results)
        assert ctl.on_box_resize(150, 80)
        assert ctl.on_box_resize(180, 90)
        assert ctl.on_box_resize(201, 101)
        assert deb.armed == 3
        assert deb.cancelled == 2
        assert deb.last_delay_ms == 100
        assert results == []

        assert deb.flush()
        assert [r.path_data for r in results] == [scenario_path]

    def test_settle_recheck_does_not_renotify(self, deb, results):
        ctl = make(deb=deb, results=results)
        ctl.on_box_resize(300, 200)
        deb.flush()
        assert deb.pending
        assert deb.last_delay_ms == 50

        assert deb.flush()
        assert len(results) == 1
        assert not deb.pending

    def test_unchanged_size_is_not_scheduled(self, deb):
        ctl = make(deb=deb)
        ctl.set_box_size(300, 200)
        assert not ctl.on_box_resize(300, 200)
        assert not deb.pending

    def test_non_positive_size_is_not_scheduled(self, deb):
        ctl = make(deb=deb)
        assert not ctl.on_box_resize(0, 0)
        assert deb.armed == 0

    def test_custom_delays(self, deb):
        settings = ShapeSettings(resize_debounce_ms=250, settle_recheck_ms=0)
        ctl = make(deb=deb, settings=settings)
        ctl.on_box_resize(300, 200)
        assert deb.last_delay_ms == 250
        deb.flush()
        assert not deb.pending


class TestCompactJitter:
    def test_small_viewport_jump_is_discarded(self, deb):
        ctl = make(deb=deb, viewport=(400, 800))
        assert ctl.compact
        assert not ctl.on_box_resize(300, 200, viewport_height=760)
        assert not deb.pending

    def test_large_viewport_jump_is_accepted(self, deb):
        ctl = make(deb=deb, viewport=(400, 800))
        assert not ctl.on_box_resize(300, 200, viewport_height=760)
        assert ctl.on_box_resize(300, 200, viewport_height=500)
        assert deb.pending

    def test_jitter_ignored_outside_compact(self, deb):
        ctl = make(deb=deb, viewport=(1400, 800))
        assert not ctl.compact
        assert ctl.on_box_resize(300, 200, viewport_height=760)


class TestAttributes:
    def test_change_recomputes_immediately(self, deb, scenario_path):
        ctl = make({"corner-size": "60"}, deb=deb)
        ctl.set_box_size(201, 101)
        assert ctl.path_data == scenario_path

        res = ctl.set_attribute("corner", "tl")
        assert res.path_data.startswith("M 80 0 ")
        assert not deb.pending

    def test_same_value_is_a_noop(self, results):
        ctl = make({"corner": "br"}, results=results)
        ctl.set_box_size(300, 200)
        assert ctl.set_attribute("corner", "bottom-right") is None
        assert len(results) == 1

    def test_stroke_width_changes_viewbox(self):
        ctl = make()
        ctl.set_box_size(300, 200)
        res = ctl.set_attribute("stroke-width", "4")
        assert res.view_box == "0 0 296 196"
        assert res.stroke_width == 4

    def test_variant_switch(self):
        ctl = make({"stroke-width": "2"})
        ctl.set_box_size(202, 102)
        res = ctl.set_attribute("variant", "button")
        assert res.path_data.startswith("M 20 1 ")


class TestCompactMode:
    def test_flip_uses_compact_lengths(self):
        ctl = make({"rounded": "20", "rounded-compact": "8"})
        ctl.set_box_size(401, 201)
        assert ctl.result.params.corner_radius == 20

        res = ctl.set_compact(True)
        assert res.params.corner_radius == 8
        assert res.params.cut_corner_radius == 8
        assert res.config.compact

    def test_breakpoint_crossing(self):
        ctl = make({"rounded": "20", "rounded-compact": "8"}, viewport=(1280, 800))
        ctl.set_box_size(401, 201)
        assert not ctl.compact

        assert ctl.on_viewport_change(800, 600)
        assert ctl.compact
        assert ctl.result.params.corner_radius == 8

        assert ctl.on_viewport_change(1280, 800)
        assert not ctl.compact
        assert ctl.result.params.corner_radius == 20

    def test_viewport_change_in_compact_is_not_scheduled(self, deb):
        ctl = make(deb=deb, viewport=(600, 800))
        assert not ctl.on_viewport_change(640, 800)
        assert not deb.pending

    def test_viewport_change_schedules_recompute(self, deb):
        ctl = make(deb=deb, viewport=(1280, 800))
        assert ctl.on_viewport_change(1400, 900)
        assert deb.pending


class TestLengthContext:
    def test_viewport_units(self):
        ctl = make({"corner-size": "10vw"}, viewport=(1200, 800))
        res = ctl.set_box_size(400, 300)
        assert res.params.cut_size == 120

    def test_custom_properties(self):
        ctl = make({"corner-size": "var(--cut)"}, custom_properties={"--cut": "72px"})
        assert ctl.set_box_size(400, 300).params.cut_size == 72
        assert ctl.set_custom_properties({"--cut": "80px"}).params.cut_size == 80


class TestProbeLifecycle:
    def test_resolver_is_lazy(self):
        ctl = make()
        assert not ctl.has_resolver
        ctl.set_box_size(300, 200)
        assert ctl.has_resolver

    def test_dispose_releases_everything(self, deb, results):
        ctl = make(deb=deb, results=results)
        ctl.set_box_size(300, 200)
        ctl.on_box_resize(310, 210)
        ctl.dispose()

        assert ctl.disposed
        assert not ctl.has_resolver
        assert not deb.pending
        assert ctl.set_box_size(320, 220) is None
        assert not ctl.on_box_resize(330, 230)
        assert ctl.set_attribute("corner", "tl") is None
        assert len(results) == 1


class TestInvalidPath:
    def test_corrupt_path_keeps_previous_outline(self, monkeypatch, caplog, results):
        ctl = make(results=results)
        first = ctl.set_box_size(300, 200)

        monkeypatch.setattr("cutshape.core.pipeline.build_outline", lambda config, params: "M NaN 0 Z")
        with caplog.at_level(logging.ERROR, logger="cutshape.core.pipeline"):
            assert ctl.set_box_size(310, 210) is None

        assert ctl.result is first
        assert results == [first]
        assert any("NaN" in r.getMessage() for r in caplog.records)


class TestFillModes:
    def test_blur_adds_clip(self):
        ctl = make({"id": "hero", "filter": "blur"})
        res = ctl.set_box_size(300, 200)
        assert res.clip_path_data == res.path_data
        assert res.pattern_id is None
        assert ctl.attributes.clip_id == "hero-clip"

    def test_image_pattern_after_load(self, results):
        ctl = make({"id": "hero", "image": "bg.png"}, results=results)
        res = ctl.set_box_size(300, 200)
        assert res.pattern_id == "hero-pattern"
        assert res.fill_ref is None

        loaded = ctl.mark_image_loaded()
        assert loaded.fill_ref == "url(#hero-pattern)"
        assert loaded.path_data == res.path_data
        assert len(results) == 2

    def test_pattern_id_without_element_id(self):
        ctl = make({"image": "bg.png"})
        assert ctl.set_box_size(300, 200).pattern_id == "cutshape-pattern"

    def test_new_image_resets_fill(self):
        ctl = make({"image": "a.png"})
        ctl.set_box_size(300, 200)
        ctl.mark_image_loaded()
        res = ctl.set_attribute("image", "b.png")
        assert res.fill_ref is None


class TestHugeLengths:
    @pytest.mark.parametrize(
        "attrs",
        [
            {"rounded": "1e308px"},
            {"rounded": 10**400},
            {"corner-rounded": "1e308px"},
            {"corner-size": 10**400},
            {"stroke-width": 10**400},
        ],
    )
    def test_recompute_never_raises(self, attrs, results):
        ctl = make(attrs, results=results)
        res = ctl.set_box_size(300, 200)
        assert res is not None
        assert is_valid_path_data(res.path_data)
        assert results == [res]

    def test_out_of_range_int_falls_back(self):
        ctl = make({"rounded": 10**400})
        assert ctl.set_box_size(301, 201).path_data.startswith("M 20 0 ")
