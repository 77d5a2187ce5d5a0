"""Tests for the application state reducers."""

from dataclasses import replace

import pytest

from hyetaek import state as st
from hyetaek.models import Category, Location, ReceiptAnalysisResult, ReceiptData, Store
from hyetaek.state import AppState


@pytest.fixture
def stores():
    return (
        Store(id="a", name="스터디카페 A", category=Category.STUDY, address="서울", latitude=0.0, longitude=1.0),
        Store(id="b", name="분식 B", category=Category.FOOD, address="서울", latitude=0.0, longitude=0.0),
    )


@pytest.fixture
def analysis():
    return ReceiptAnalysisResult(
        analyzed_receipt=ReceiptData(
            id="", store_name="A", items=("커피",), total_amount="1000원", date="2024-01-01"
        )
    )


def test_visible_stores_default_is_full_catalog(stores):
    state = st.set_stores(AppState(), stores)
    assert st.visible_stores(state) == list(stores)


def test_visible_stores_follow_filters(stores):
    state = st.set_stores(AppState(), stores)
    state = st.select_category(state, Category.FOOD)
    assert [s.id for s in st.visible_stores(state)] == ["b"]
    state = st.select_category(state, "all")
    state = st.set_search_term(state, "스터디")
    assert [s.id for s in st.visible_stores(state)] == ["a"]


def test_reducers_return_new_state(stores):
    state = AppState()
    new = st.set_stores(state, stores)
    assert state.stores == ()
    assert new is not state


def test_toggle_favorite_adds_then_removes():
    state = st.toggle_favorite(AppState(), "a")
    assert state.favorites == ("a",)
    assert state.notification.type == "success"
    state = st.toggle_favorite(state, "b")
    assert state.favorites == ("a", "b")
    state = st.toggle_favorite(state, "a")
    assert state.favorites == ("b",)
    assert state.notification.type == "info"


def test_add_receipt_prepends():
    first = ReceiptData(id="1", store_name="A")
    second = ReceiptData(id="2", store_name="B")
    state = st.add_receipt(st.add_receipt(AppState(), first), second)
    assert [r.id for r in state.receipt_history] == ["2", "1"]


def test_save_analyzed_receipt_appends_with_new_id(analysis):
    state = st.set_analysis(AppState(), analysis)
    state = st.save_analyzed_receipt(state)
    assert state.analysis_saved is True
    assert len(state.receipt_history) == 1
    assert state.receipt_history[0].id
    assert state.receipt_history[0].store_name == "A"
    assert state.notification.type == "success"


def test_save_duplicate_receipt_is_noop_but_marks_saved(analysis):
    existing = ReceiptData(id="old", store_name="A", total_amount="1000원", date="2024-01-01")
    state = replace(AppState(receipt_history=(existing,)), analysis=analysis)
    saved = st.save_analyzed_receipt(state)
    assert saved.receipt_history == (existing,)
    assert saved.analysis_saved is True
    assert saved.notification.message == "이미 내역에 저장된 영수증입니다."


def test_save_without_analysis_does_nothing():
    state = AppState()
    assert st.save_analyzed_receipt(state) is state


def test_nearby_enable_and_disable(stores):
    state = st.set_stores(AppState(), stores)
    state = st.enable_nearby(state, Location(0.0, 0.0))
    assert [s.id for s in st.visible_stores(state)] == ["b", "a"]
    state = st.disable_nearby(state)
    assert state.user_location is None
    assert [s.id for s in st.visible_stores(state)] == ["a", "b"]
    assert all(s.distance is None for s in st.visible_stores(state))


def test_location_failed_keeps_mode_off():
    state = st.location_failed(AppState(), "위치 정보를 가져올 수 없습니다. 현재 위치를 확인할 수 없습니다.")
    assert state.nearby_active is False
    assert state.location_error.startswith("위치 정보를")


def test_closing_receipt_analysis_discards_session(analysis):
    state = st.navigate(AppState(), "receipt-ai")
    assert state.modal.type == st.RECEIPT_AI_ANALYSIS
    state = st.set_analysis(state, analysis)
    state = st.close_modal(state)
    assert state.modal.is_open is False
    assert state.analysis is None
    assert state.analysis_saved is False


def test_closing_other_modal_keeps_analysis(analysis):
    state = st.set_analysis(st.open_modal(AppState(), st.RECEIPT_HISTORY), analysis)
    state = st.close_modal(state)
    assert state.analysis == analysis


def test_navigate_explore_resets_filters():
    state = st.set_search_term(st.select_category(AppState(), Category.FOOD), "카페")
    state = st.navigate(state, "explore")
    assert state.selected_category == "all"
    assert state.search_term == ""


def test_navigate_favorites_opens_favorite_stores(stores):
    state = st.toggle_favorite(st.set_stores(AppState(), stores), "b")
    state = st.navigate(state, "favorites")
    assert state.modal.type == st.FAVORITES
    assert [s.id for s in state.modal.data] == ["b"]


def test_request_tokens_discard_stale_responses():
    state, first = st.begin_request(AppState(), st.RECOMMENDATION)
    assert st.is_busy(state, st.RECOMMENDATION)
    state, second = st.begin_request(state, st.RECOMMENDATION)
    assert second != first
    assert not st.is_current(state, st.RECOMMENDATION, first)
    assert st.is_current(state, st.RECOMMENDATION, second)

    # Finishing the stale request leaves the newer one in flight.
    state = st.finish_request(state, st.RECOMMENDATION, first)
    assert st.is_busy(state, st.RECOMMENDATION)
    state = st.finish_request(state, st.RECOMMENDATION, second)
    assert not st.is_busy(state, st.RECOMMENDATION)


def test_request_tokens_are_per_feature():
    state, rec = st.begin_request(AppState(), st.RECOMMENDATION)
    state, img = st.begin_request(state, st.RECEIPT_IMAGE)
    assert st.is_current(state, st.RECOMMENDATION, rec)
    assert st.is_current(state, st.RECEIPT_IMAGE, img)


def test_unknown_feature_rejected():
    with pytest.raises(ValueError):
        st.begin_request(AppState(), "teleport")
