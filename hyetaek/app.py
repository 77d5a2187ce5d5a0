"""Top-level controller wiring state, AI gateway, storage and location."""

from __future__ import annotations

import logging
import mimetypes
from collections.abc import Sequence
from pathlib import Path

from . import state as st
from .db import CorruptEntryError, FavoritesStore, ReceiptHistoryStore
from .gateway import AIGateway
from .geolocation import GeoLocator
from .models import Category, ReceiptAnalysisResult, ReceiptData, Store
from .state import AppState

logger = logging.getLogger(__name__)


class DiscountApp:
    """Owns the AppState and applies reducers in response to user actions.

    Favorites and receipt history are written back to storage after every
    change to either collection.
    """

    def __init__(
        self,
        gateway: AIGateway,
        locator: GeoLocator,
        favorites_store: FavoritesStore | None = None,
        history_store: ReceiptHistoryStore | None = None,
        state: AppState | None = None,
    ) -> None:
        self._gateway = gateway
        self._locator = locator
        self._favorites_store = favorites_store
        self._history_store = history_store
        self._state = state or AppState()

    @property
    def state(self) -> AppState:
        return self._state

    def visible_stores(self) -> list[Store]:
        return st.visible_stores(self._state)

    def _commit(self, new_state: AppState) -> AppState:
        old = self._state
        self._state = new_state
        if self._favorites_store is not None and new_state.favorites != old.favorites:
            self._favorites_store.save(new_state.favorites)
        if self._history_store is not None and new_state.receipt_history != old.receipt_history:
            self._history_store.save(new_state.receipt_history)
        return new_state

    def _notify(self, message: str, type: str = "info") -> None:
        self._commit(st.notify(self._state, message, type))

    # ── startup ──

    def _load_collection(self, store, label: str) -> tuple:
        if store is None:
            return ()
        try:
            return store.load()
        except CorruptEntryError:
            logger.exception("Failed to load %s", label)
            return ()

    async def load(self, catalog: Sequence[Store] | None = None) -> AppState:
        """Read persisted collections, then seed the store catalog.

        When *catalog* is given it is used instead of asking the model.
        """
        favorites = self._load_collection(self._favorites_store, "favorites")
        history = self._load_collection(self._history_store, "receipt history")
        # Assign directly: a fresh read must not trigger a write-back.
        self._state = st.load_persisted(self._state, favorites, history)

        if catalog is None:
            stores = await self._gateway.seed_catalog()
            if stores:
                self._notify("할인 정보를 성공적으로 불러왔습니다!", "success")
            else:
                self._notify("초기 할인 정보를 불러오지 못했습니다.", "error")
        else:
            stores = list(catalog)
        return self._commit(st.set_stores(self._state, stores))

    # ── filters ──

    def select_category(self, category: Category | str) -> list[Store]:
        self._commit(st.select_category(self._state, category))
        return self.visible_stores()

    def search(self, term: str) -> list[Store]:
        self._commit(st.set_search_term(self._state, term))
        return self.visible_stores()

    def navigate(self, view: str) -> AppState:
        return self._commit(st.navigate(self._state, view))

    def close_modal(self) -> AppState:
        return self._commit(st.close_modal(self._state))

    def toggle_favorite(self, store_id: str) -> AppState:
        return self._commit(st.toggle_favorite(self._state, store_id))

    # ── AI features ──

    async def recommend(self, preferences: str) -> list[Store]:
        if not preferences.strip():
            self._notify("추천을 받으려면 원하는 내용을 입력해주세요.", "info")
            return []

        new_state, token = st.begin_request(self._state, st.RECOMMENDATION)
        self._commit(st.set_recommendations(new_state, []))
        try:
            # Always recommend from the full catalog, not the filtered view.
            result = await self._gateway.recommend(preferences, self._state.stores)
        finally:
            current = st.is_current(self._state, st.RECOMMENDATION, token)
            self._commit(st.finish_request(self._state, st.RECOMMENDATION, token))

        if not current:
            logger.debug("Discarding stale recommendation response (token %d)", token)
            return []
        self._commit(st.set_recommendations(self._state, result))
        if result:
            self._notify("AI 추천을 생성했습니다!", "success")
        else:
            self._notify("AI가 현재 조건에 맞는 추천을 찾지 못했습니다.", "info")
        return result

    async def submit_receipt_text(self, receipt_text: str) -> ReceiptData | None:
        """Parse a typed receipt and add it to the history."""
        if not receipt_text.strip():
            self._notify("영수증 내용을 입력해주세요.", "info")
            return None

        new_state, token = st.begin_request(self._state, st.RECEIPT_TEXT)
        self._commit(new_state)
        try:
            receipt = await self._gateway.parse_receipt_text(receipt_text)
        finally:
            current = st.is_current(self._state, st.RECEIPT_TEXT, token)
            self._commit(st.finish_request(self._state, st.RECEIPT_TEXT, token))

        if not current:
            logger.debug("Discarding stale receipt text response (token %d)", token)
            return None
        if receipt is None:
            self._notify("영수증 분석에 실패했습니다. 입력 내용을 확인해주세요.", "error")
            return None
        self._commit(st.add_receipt(self._state, receipt))
        self._notify("영수증이 성공적으로 분석되어 등록되었습니다.", "success")
        self._commit(st.close_modal(self._state))
        return receipt

    def _read_image(self, path: str | Path) -> tuple[bytes, str] | None:
        p = Path(path)
        if not p.is_file():
            self._notify("분석할 영수증 이미지 파일을 선택해주세요.", "info")
            return None
        mime_type = mimetypes.guess_type(p.name)[0] or ""
        if not mime_type.startswith("image/"):
            self._notify("이미지 파일만 업로드 가능합니다 (JPG, PNG 등).", "error")
            return None
        try:
            return p.read_bytes(), mime_type
        except OSError:
            logger.exception("Failed to read receipt image %s", p)
            self._notify("영수증 이미지를 읽을 수 없습니다.", "error")
            return None

    async def analyze_receipt_image(self, path: str | Path) -> ReceiptAnalysisResult | None:
        """Analyze a receipt photo; the result stays in state until saved or closed."""
        image = self._read_image(path)
        if image is None:
            return None
        data, mime_type = image

        new_state, token = st.begin_request(self._state, st.RECEIPT_IMAGE)
        self._commit(st.set_analysis(new_state, None))
        try:
            result = await self._gateway.analyze_receipt_image(data, mime_type)
        finally:
            current = st.is_current(self._state, st.RECEIPT_IMAGE, token)
            self._commit(st.finish_request(self._state, st.RECEIPT_IMAGE, token))

        if not current:
            logger.debug("Discarding stale receipt image response (token %d)", token)
            return None
        if result is None:
            self._notify(
                "영수증 분석에 실패했습니다. 이미지 품질을 확인하거나 다시 시도해주세요.",
                "error",
            )
            return None
        self._commit(st.set_analysis(self._state, result))
        self._notify("영수증 분석 및 할인 추천이 완료되었습니다.", "success")
        return result

    def save_analyzed_receipt(self) -> AppState:
        return self._commit(st.save_analyzed_receipt(self._state))

    # ── proximity mode ──

    async def toggle_nearby(self) -> AppState:
        """Turn proximity mode off, or request a coordinate and turn it on."""
        if self._state.nearby_active:
            self._commit(st.disable_nearby(self._state))
            self._notify("주변 검색 모드가 해제되었습니다.", "info")
            return self._state

        result = await self._locator.locate()
        if result.ok:
            self._commit(st.enable_nearby(self._state, result.location))
            self._notify("사용자 위치를 확인했습니다. 주변 혜택을 정렬합니다.", "success")
        else:
            self._commit(st.location_failed(self._state, result.message))
            self._notify(result.message, "error")
        return self._state
