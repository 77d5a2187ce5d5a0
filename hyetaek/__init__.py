"""혜택:ON: student discount discovery with AI-assisted receipt analysis."""

from .app import DiscountApp
from .catalog import filter_stores, haversine_km
from .config import AppConfig, load_config
from .gateway import AIGateway, create_gateway
from .geolocation import GeoLocator, create_locator
from .models import (
    Category,
    DiscountInfo,
    Location,
    ReceiptAnalysisResult,
    ReceiptData,
    Store,
    SuggestedDiscount,
)
from .normalize import extract_json
from .state import AppState

__all__ = [
    "DiscountApp",
    "AppState",
    "AIGateway",
    "create_gateway",
    "GeoLocator",
    "create_locator",
    "filter_stores",
    "haversine_km",
    "extract_json",
    "Category",
    "DiscountInfo",
    "Location",
    "Store",
    "ReceiptData",
    "SuggestedDiscount",
    "ReceiptAnalysisResult",
    "AppConfig",
    "load_config",
]
