"""Data models for stores, discounts and receipts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Category(str, Enum):
    """Store categories. Values are the labels used in prompts and storage."""

    CULTURE = "문화"
    BEAUTY_HEALTH = "뷰티/건강"
    STUDY = "스터디"
    SHOPPING = "쇼핑"
    FOOD = "음식"
    OTHER = "기타"

    @classmethod
    def coerce(cls, value: Any) -> Category:
        """Return the matching category, or OTHER for anything unknown."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value == value:
                return member
        return cls.OTHER


@dataclass(frozen=True)
class CategoryInfo:
    key: Category
    label: str
    prompt_hint: str


CATEGORIES_WITH_INFO: list[CategoryInfo] = [
    CategoryInfo(Category.FOOD, "음식", "레스토랑, 카페, 분식점 학생 할인"),
    CategoryInfo(Category.CULTURE, "문화", "영화관, 공연장, 전시회 학생 할인"),
    CategoryInfo(Category.BEAUTY_HEALTH, "뷰티/건강", "미용실, 헬스장, 화장품 가게 학생 할인"),
    CategoryInfo(Category.STUDY, "스터디", "스터디 카페, 독서실, 온라인 강의 학생 할인"),
    CategoryInfo(Category.SHOPPING, "쇼핑", "의류, 전자기기, 문구류 매장 학생 할인"),
    CategoryInfo(Category.OTHER, "기타", "기타 학생 할인"),
]


def get_category_info(category: Category | str) -> CategoryInfo:
    """Look up display info for a category, falling back to OTHER."""
    key = Category.coerce(category)
    for info in CATEGORIES_WITH_INFO:
        if info.key is key:
            return info
    return CATEGORIES_WITH_INFO[-1]


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class DiscountInfo:
    """A single offer owned by a store."""

    id: str
    description: str
    conditions: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "description": self.description,
            "conditions": self.conditions,
        }


@dataclass(frozen=True)
class Store:
    """A partner store and its discounts.

    ``distance`` is only set on copies produced by the proximity sort.
    """

    id: str
    name: str
    category: Category
    address: str
    contact: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    discounts: tuple[DiscountInfo, ...] = ()
    image_url: str | None = None
    rating: float | None = None  # 0〜5
    operating_hours: str | None = None
    distance: float | None = None  # km

    @property
    def location(self) -> Location | None:
        if self.latitude is None or self.longitude is None:
            return None
        return Location(self.latitude, self.longitude)

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "address": self.address,
            "discounts": [d.to_dict() for d in self.discounts],
        }
        optional = {
            "contact": self.contact,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "imageUrl": self.image_url,
            "rating": self.rating,
            "operatingHours": self.operating_hours,
            "distance": self.distance,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


@dataclass(frozen=True)
class ReceiptData:
    """A parsed receipt. Immutable once created."""

    id: str
    store_name: str
    items: tuple[str, ...] = ()
    discount_applied: str = ""
    total_amount: str = ""
    date: str = ""  # YYYY-MM-DD
    store_category: Category | None = None

    def is_duplicate_of(self, other: ReceiptData) -> bool:
        return (
            self.store_name == other.store_name
            and self.date == other.date
            and self.total_amount == other.total_amount
        )

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "id": self.id,
            "storeName": self.store_name,
            "items": list(self.items),
            "discountApplied": self.discount_applied,
            "totalAmount": self.total_amount,
            "date": self.date,
        }
        if self.store_category is not None:
            data["storeCategory"] = self.store_category.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> ReceiptData:
        """Rebuild a stored receipt. Raises KeyError/TypeError on bad shape."""
        category = data.get("storeCategory")
        return cls(
            id=data["id"],
            store_name=data["storeName"],
            items=tuple(data.get("items") or ()),
            discount_applied=data.get("discountApplied", ""),
            total_amount=data.get("totalAmount", ""),
            date=data.get("date", ""),
            store_category=Category.coerce(category) if category else None,
        )


@dataclass(frozen=True)
class SuggestedDiscount:
    title: str
    description: str

    def to_dict(self) -> dict:
        return {"title": self.title, "description": self.description}


@dataclass(frozen=True)
class ReceiptAnalysisResult:
    """One analyzed receipt image plus suggested benefits.

    ``analyzed_receipt`` carries an empty id; a real id is assigned only
    when the receipt is saved to history.
    """

    analyzed_receipt: ReceiptData
    immediate_benefits: tuple[SuggestedDiscount, ...] = ()
    future_benefits: tuple[SuggestedDiscount, ...] = ()

    def to_dict(self) -> dict:
        receipt = self.analyzed_receipt.to_dict()
        receipt.pop("id", None)
        return {
            "analyzedReceipt": receipt,
            "immediateBenefits": [b.to_dict() for b in self.immediate_benefits],
            "futureBenefits": [b.to_dict() for b in self.future_benefits],
        }


@dataclass(frozen=True)
class Notification:
    id: str
    message: str
    type: str = "info"  # success / error / info


@dataclass(frozen=True)
class ModalState:
    is_open: bool = False
    type: str | None = None  # storeDetails / aiRecommender / ocrInput / ...
    data: Any = None
