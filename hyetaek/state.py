"""Application state and the pure reducers that update it.

Every reducer takes an AppState and returns a new one; nothing here
touches the network, the database or the clock (apart from generated
notification ids).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from .catalog import ALL_CATEGORIES, favorite_stores, filter_stores
from .models import (
    Category,
    Location,
    ModalState,
    Notification,
    ReceiptAnalysisResult,
    ReceiptData,
    Store,
)
from .normalize import new_id

RECOMMENDATION = "recommendation"
RECEIPT_TEXT = "receipt_text"
RECEIPT_IMAGE = "receipt_image"

FEATURES = (RECOMMENDATION, RECEIPT_TEXT, RECEIPT_IMAGE)

# Modal types
STORE_DETAILS = "storeDetails"
AI_RECOMMENDER = "aiRecommender"
OCR_INPUT = "ocrInput"
RECEIPT_HISTORY = "receiptHistory"
FAVORITES = "favorites"
RECEIPT_AI_ANALYSIS = "receiptAiAnalysis"


@dataclass(frozen=True)
class AppState:
    stores: tuple[Store, ...] = ()
    selected_category: Category | str = ALL_CATEGORIES
    search_term: str = ""
    favorites: tuple[str, ...] = ()
    receipt_history: tuple[ReceiptData, ...] = ()
    nearby_active: bool = False
    user_location: Location | None = None
    location_error: str | None = None
    modal: ModalState = field(default_factory=ModalState)
    active_view: str = "explore"
    recommendations: tuple[Store, ...] = ()
    analysis: ReceiptAnalysisResult | None = None
    analysis_saved: bool = False
    # feature name -> token of the request currently awaited
    in_flight: dict[str, int] = field(default_factory=dict)
    last_token: int = 0
    notification: Notification | None = None


def visible_stores(state: AppState) -> list[Store]:
    """The filtered, sorted store list for the current state."""
    return filter_stores(
        state.stores,
        category=state.selected_category,
        search_term=state.search_term,
        nearby=state.nearby_active,
        location=state.user_location,
    )


def favorite_store_list(state: AppState) -> list[Store]:
    return favorite_stores(state.stores, state.favorites)


def notify(state: AppState, message: str, type: str = "info") -> AppState:
    return replace(state, notification=Notification(id=new_id(), message=message, type=type))


def set_stores(state: AppState, stores: Sequence[Store]) -> AppState:
    return replace(state, stores=tuple(stores))


def load_persisted(
    state: AppState,
    favorites: Sequence[str],
    receipt_history: Sequence[ReceiptData],
) -> AppState:
    return replace(
        state, favorites=tuple(favorites), receipt_history=tuple(receipt_history)
    )


def select_category(state: AppState, category: Category | str) -> AppState:
    return replace(state, selected_category=category)


def set_search_term(state: AppState, term: str) -> AppState:
    return replace(state, search_term=term)


def toggle_favorite(state: AppState, store_id: str) -> AppState:
    if store_id in state.favorites:
        state = replace(state, favorites=tuple(i for i in state.favorites if i != store_id))
        return notify(state, "찜 목록에서 삭제되었습니다.", "info")
    state = replace(state, favorites=state.favorites + (store_id,))
    return notify(state, "찜 목록에 추가되었습니다!", "success")


def add_receipt(state: AppState, receipt: ReceiptData) -> AppState:
    """Prepend a receipt to the history (most recent first)."""
    return replace(state, receipt_history=(receipt,) + state.receipt_history)


def set_analysis(state: AppState, result: ReceiptAnalysisResult | None) -> AppState:
    return replace(state, analysis=result, analysis_saved=False)


def save_analyzed_receipt(state: AppState, receipt_id: str | None = None) -> AppState:
    """Save the current analysis to history unless it is already there.

    A duplicate (same store name, date and total) leaves the history
    untouched but still marks the session as saved.
    """
    if state.analysis is None:
        return state

    analyzed = state.analysis.analyzed_receipt
    if any(analyzed.is_duplicate_of(r) for r in state.receipt_history):
        state = replace(state, analysis_saved=True)
        return notify(state, "이미 내역에 저장된 영수증입니다.", "info")

    receipt = replace(analyzed, id=receipt_id or new_id())
    state = replace(add_receipt(state, receipt), analysis_saved=True)
    return notify(state, "분석된 영수증이 내역에 저장되었습니다.", "success")


def set_recommendations(state: AppState, stores: Sequence[Store]) -> AppState:
    return replace(state, recommendations=tuple(stores))


def enable_nearby(state: AppState, location: Location) -> AppState:
    return replace(state, nearby_active=True, user_location=location, location_error=None)


def disable_nearby(state: AppState) -> AppState:
    """Leave proximity mode, discarding the coordinate."""
    return replace(state, nearby_active=False, user_location=None, location_error=None)


def location_failed(state: AppState, message: str) -> AppState:
    return replace(state, nearby_active=False, user_location=None, location_error=message)


def open_modal(state: AppState, modal_type: str, data=None) -> AppState:
    return replace(state, modal=ModalState(is_open=True, type=modal_type, data=data))


def close_modal(state: AppState) -> AppState:
    """Close the open view; leaving receipt analysis discards its session."""
    previous = state.modal.type
    state = replace(state, modal=ModalState(), active_view="explore")
    if previous == RECEIPT_AI_ANALYSIS:
        state = replace(state, analysis=None, analysis_saved=False)
    return state


def navigate(state: AppState, view: str) -> AppState:
    """Menu navigation: explore / ai / receipt-ai / favorites."""
    state = replace(state, active_view=view)
    match view:
        case "explore":
            state = close_modal(state)
            return replace(state, selected_category=ALL_CATEGORIES, search_term="")
        case "ai":
            state = replace(state, recommendations=())
            return open_modal(state, AI_RECOMMENDER)
        case "receipt-ai":
            state = set_analysis(state, None)
            return open_modal(state, RECEIPT_AI_ANALYSIS)
        case "favorites":
            return open_modal(state, FAVORITES, favorite_store_list(state))
        case _:
            return state


def begin_request(state: AppState, feature: str) -> tuple[AppState, int]:
    """Issue a fresh token for *feature*; older tokens become stale."""
    if feature not in FEATURES:
        raise ValueError(f"unknown feature: {feature!r}")
    token = state.last_token + 1
    in_flight = {**state.in_flight, feature: token}
    return replace(state, in_flight=in_flight, last_token=token), token


def is_current(state: AppState, feature: str, token: int) -> bool:
    return state.in_flight.get(feature) == token


def is_busy(state: AppState, feature: str) -> bool:
    return feature in state.in_flight


def finish_request(state: AppState, feature: str, token: int) -> AppState:
    """Clear the busy marker, but only if *token* is still the current one."""
    if not is_current(state, feature, token):
        return state
    in_flight = {k: v for k, v in state.in_flight.items() if k != feature}
    return replace(state, in_flight=in_flight)
