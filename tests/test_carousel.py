"""Tests for the per-card carousel and the card arena."""

import pytest

from core.entities import LoadStatus, Orientation
from core.exceptions import CardNotFoundError
from application.image_resolver import resolve


def drive_url(file_id):
    return f"https://drive.google.com/file/d/{file_id}/view"


def _active(controller):
    return [i.index for i in controller.indicators if i.active]


class TestCardCarouselController:
    def test_no_sources_goes_to_placeholder_without_resolver(self, arena, surface):
        controller = arena.create(0, [])
        controller.resolver = None  # would fail if used
        controller.start()
        assert controller.state.status == LoadStatus.EXHAUSTED
        assert surface.attempts == []
        assert controller.show_navigation is False
        assert controller.indicators == ()

    def test_single_source_has_no_navigation(self, arena):
        controller = arena.create(0, [drive_url("one")])
        controller.start()
        assert controller.show_navigation is False
        assert controller.indicators == ()
        assert controller.state.status == LoadStatus.ATTEMPTING

    def test_next_and_previous_wrap(self, arena):
        controller = arena.create(0, [drive_url("a"), drive_url("b"), drive_url("c")])
        controller.start()
        controller.previous()
        assert controller.state.image_index == 2
        controller.next()
        assert controller.state.image_index == 0
        controller.next()
        assert controller.state.image_index == 1
        assert _active(controller) == [1]

    @pytest.mark.parametrize("index, expected", [(3, 0), (-1, 2), (7, 1), (-5, 1)])
    def test_set_image_index_normalizes(self, arena, index, expected):
        controller = arena.create(0, [drive_url("a"), drive_url("b"), drive_url("c")])
        controller.start()
        controller.set_image_index(index)
        assert controller.state.image_index == expected
        assert _active(controller) == [expected]

    def test_navigation_resets_variant_and_chain(self, arena, surface):
        controller = arena.create(0, [drive_url("a"), drive_url("b")])
        controller.start()
        surface.last.on_error()
        assert controller.state.variant_index == 1

        controller.next()
        assert controller.state.variant_index == 0
        assert controller.state.chain == resolve(drive_url("b"))
        assert surface.last.url == controller.state.chain[0]

    def test_stale_callback_after_navigation(self, arena, surface):
        controller = arena.create(0, [drive_url("a"), drive_url("b")])
        controller.start()
        stale = surface.last
        controller.next()
        fresh_generation = controller.state.generation

        assert stale.on_load(100, 50) is False
        assert stale.on_error() is False
        assert controller.state.generation == fresh_generation
        assert controller.state.status == LoadStatus.ATTEMPTING
        assert controller.state.image_index == 1

    def test_report_with_old_generation_is_rejected(self, arena):
        controller = arena.create(0, [drive_url("a"), drive_url("b")])
        controller.start()
        old = controller.state.generation
        controller.next()
        assert controller.report_load(old, 0, 10, 10) is False
        assert controller.report_load(controller.state.generation, 0, 10, 10) is True

    def test_third_source_succeeds_on_second_variant(self, arena, surface):
        controller = arena.create(0, [drive_url("uno"), drive_url("dos"), drive_url("tres")])
        controller.start()

        for _ in range(2):
            for _ in range(len(controller.state.chain)):
                surface.last.on_error()
            assert controller.state.status == LoadStatus.EXHAUSTED
            controller.next()

        assert controller.state.image_index == 2
        surface.last.on_error()
        surface.last.on_load(1200, 900)

        assert controller.state.status == LoadStatus.SUCCESS
        assert controller.state.orientation == Orientation.LANDSCAPE
        assert controller.state.current_url == controller.state.chain[1]
        assert "tres" in controller.state.current_url
        assert _active(controller) == [2]


class TestCarouselArena:
    def test_reset_discards_previous_cards(self, arena):
        old = arena.create(0, [])
        arena.reset()
        new = arena.create(0, [])
        assert old.state.card_id != new.state.card_id
        assert arena.get(new.state.card_id) is new
        with pytest.raises(CardNotFoundError):
            arena.get(old.state.card_id)

    def test_each_card_owns_its_state(self, arena):
        a = arena.create(0, [drive_url("a"), drive_url("b")])
        b = arena.create(1, [drive_url("c"), drive_url("d")])
        a.start()
        b.start()
        a.next()
        assert a.state.image_index == 1
        assert b.state.image_index == 0
        assert len(arena) == 2
