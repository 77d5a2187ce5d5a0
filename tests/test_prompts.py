"""Tests for prompt construction."""

from hyetaek import prompts
from hyetaek.models import Category, DiscountInfo, Store


def test_catalog_prompt_fields_and_categories():
    prompt = prompts.catalog_prompt()
    for field in ("id", "name", "category", "address", "latitude", "longitude", "discounts", "imageUrl", "rating"):
        assert f"- {field}:" in prompt
    for category in Category:
        assert category.value in prompt
    assert "JSON" in prompt
    assert "교보문고" in prompt


def test_recommendation_prompt_lists_stores():
    stores = [
        Store(
            id="s-1", name="스터디카페 A", category=Category.STUDY, address="강남",
            discounts=(DiscountInfo(id="d", description="학생 20% 할인"),),
        ),
    ]
    prompt = prompts.recommendation_prompt("조용한 공부 공간", stores)
    assert '"조용한 공부 공간"' in prompt
    assert "- 스터디카페 A (id: s-1, 스터디, 주소: 강남): 학생 20% 할인" in prompt
    assert "JSON 배열" in prompt


def test_receipt_text_prompt_embeds_text():
    prompt = prompts.receipt_text_prompt("스타벅스 아메리카노 4500원")
    assert "스타벅스 아메리카노 4500원" in prompt
    for field in ("storeName", "items", "discountApplied", "totalAmount", "date", "storeCategory"):
        assert field in prompt
    assert "음식 | 기타" in prompt


def test_receipt_image_prompt_is_valid_template():
    prompt = prompts.receipt_image_prompt()
    assert '"analyzedReceipt": {' in prompt
    assert "immediateBenefits" in prompt
    assert "futureBenefits" in prompt
    assert "{{" not in prompt
