"""CLI entry point."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import math
import sys
from pathlib import Path

from dotenv import load_dotenv

from .app import DiscountApp
from .catalog import ALL_CATEGORIES, category_counts
from .config import load_config
from .db import FavoritesStore, KeyValueStore, ReceiptHistoryStore
from .gateway import create_gateway
from .geolocation import create_locator
from .models import Category, Store, get_category_info
from .normalize import normalize_stores


def main(argv: list[str] | None = None) -> None:
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="hyetaek",
        description="혜택:ON: 학생 할인 매장을 찾고, 영수증을 분석해 혜택을 추천합니다",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="설정 파일 경로 (TOML)",
    )
    parser.add_argument(
        "--catalog",
        type=str,
        default=None,
        metavar="FILE",
        help="AI 생성 대신 저장된 매장 목록(JSON)을 사용",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="디버그 로그 출력")

    sub = parser.add_subparsers(dest="command")

    # seed
    seed_parser = sub.add_parser("seed", help="AI로 매장 목록을 생성")
    seed_parser.add_argument(
        "--output", "-o", type=str, default=None, metavar="FILE",
        help="생성된 매장 목록을 JSON 파일로 저장",
    )

    # stores
    stores_parser = sub.add_parser("stores", help="매장 목록 검색/필터")
    stores_parser.add_argument(
        "--category", type=str, default=ALL_CATEGORIES,
        choices=[ALL_CATEGORIES] + [c.value for c in Category],
        help="카테고리 필터",
    )
    stores_parser.add_argument("--search", type=str, default="", help="검색어")
    stores_parser.add_argument("--nearby", action="store_true", help="가까운 순으로 정렬")
    stores_parser.add_argument("--json", action="store_true", help="JSON 형식으로 출력")

    # recommend
    rec_parser = sub.add_parser("recommend", help="선호도 기반 AI 추천")
    rec_parser.add_argument("preferences", type=str, help="원하는 혜택이나 생활 패턴")
    rec_parser.add_argument("--json", action="store_true", help="JSON 형식으로 출력")

    # receipt-text
    text_parser = sub.add_parser("receipt-text", help="영수증 텍스트를 분석해 내역에 등록")
    text_parser.add_argument("text", type=str, help="영수증 내용")

    # receipt-image
    img_parser = sub.add_parser("receipt-image", help="영수증 사진을 분석해 혜택 추천")
    img_parser.add_argument("image", type=str, help="영수증 이미지 파일")
    img_parser.add_argument("--save", action="store_true", help="분석 결과를 내역에 저장")
    img_parser.add_argument("--json", action="store_true", help="JSON 형식으로 출력")

    # history
    hist_parser = sub.add_parser("history", help="영수증 내역 보기")
    hist_parser.add_argument("--json", action="store_true", help="JSON 형식으로 출력")

    # favorites
    sub.add_parser("favorites", help="찜한 매장 보기")

    # favorite
    fav_parser = sub.add_parser("favorite", help="찜 추가/삭제")
    fav_parser.add_argument("store_id", type=str, help="매장 ID")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    try:
        asyncio.run(_run(config, args))
    except (ValueError, ImportError) as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)


def _load_catalog_file(path: str) -> list[Store]:
    p = Path(path)
    if not p.exists():
        raise ValueError(f"매장 목록 파일을 찾을 수 없습니다: {path}")
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"매장 목록 파일을 읽을 수 없습니다: {e}") from e
    return normalize_stores(data)


async def _run(config, args) -> None:
    kv = KeyValueStore(config.database.path)
    app = DiscountApp(
        gateway=create_gateway(config),
        locator=create_locator(config.location),
        favorites_store=FavoritesStore(kv),
        history_store=ReceiptHistoryStore(kv),
    )

    try:
        needs_stores = args.command in ("seed", "stores", "recommend", "favorites")
        if args.catalog and args.command != "seed":
            catalog = _load_catalog_file(args.catalog)
        elif needs_stores:
            catalog = None
        else:
            catalog = []

        if catalog is None:
            print("📚 할인 정보를 불러오는 중...")
        await app.load(catalog=catalog)
        if catalog is None:
            _print_notification(app)

        match args.command:
            case "seed":
                _cmd_seed(app, args)
            case "stores":
                await _cmd_stores(app, args)
            case "recommend":
                await _cmd_recommend(app, args)
            case "receipt-text":
                await _cmd_receipt_text(app, args)
            case "receipt-image":
                await _cmd_receipt_image(app, args)
            case "history":
                _cmd_history(app, args)
            case "favorites":
                _cmd_favorites(app)
            case "favorite":
                app.toggle_favorite(args.store_id)
                _print_notification(app)
    finally:
        kv.close()


def _print_notification(app: DiscountApp) -> None:
    note = app.state.notification
    if note is None:
        return
    stream = sys.stderr if note.type == "error" else sys.stdout
    print(note.message, file=stream)


def _format_store(store: Store) -> str:
    info = get_category_info(store.category)
    lines = [f"  {store.name}  [{info.label}]  (ID: {store.id})"]
    lines.append(f"     주소: {store.address}")
    if store.distance is not None and not math.isinf(store.distance):
        lines.append(f"     거리: 약 {store.distance:.1f}km")
    if store.rating is not None:
        stars = "★" * round(store.rating) + "☆" * (5 - round(store.rating))
        lines.append(f"     평점: {stars} {store.rating:.1f} / 5.0")
    if store.contact:
        lines.append(f"     연락처: {store.contact}")
    if store.operating_hours:
        lines.append(f"     운영시간: {store.operating_hours}")
    for d in store.discounts:
        cond = f" ({d.conditions})" if d.conditions else ""
        lines.append(f"     🎁 {d.description}{cond}")
    return "\n".join(lines)


def _print_stores(stores: list[Store], as_json: bool) -> None:
    if as_json:
        print(json.dumps([s.to_dict() for s in stores], ensure_ascii=False, indent=2))
        return
    if not stores:
        print("조건에 맞는 매장이 없습니다.")
        return
    for store in stores:
        print(_format_store(store))


def _cmd_seed(app: DiscountApp, args) -> None:
    stores = list(app.state.stores)
    if args.output:
        Path(args.output).write_text(
            json.dumps([s.to_dict() for s in stores], ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        print(f"   매장 {len(stores)}곳 저장: {args.output}")
        return
    counts = category_counts(stores)
    print(f"매장 {len(stores)}곳:")
    for category, count in counts.items():
        if count:
            print(f"  {category.value}: {count}")


async def _cmd_stores(app: DiscountApp, args) -> None:
    app.select_category(args.category)
    app.search(args.search)
    if args.nearby:
        print("📍 위치 확인 중...")
        await app.toggle_nearby()
        _print_notification(app)
    _print_stores(app.visible_stores(), args.json)


async def _cmd_recommend(app: DiscountApp, args) -> None:
    print("🤖 AI 추천 생성 중...")
    stores = await app.recommend(args.preferences)
    _print_notification(app)
    if stores:
        _print_stores(stores, args.json)


async def _cmd_receipt_text(app: DiscountApp, args) -> None:
    print("🧾 영수증 분석 중...")
    receipt = await app.submit_receipt_text(args.text)
    _print_notification(app)
    if receipt is not None:
        _print_receipt(receipt.to_dict())


async def _cmd_receipt_image(app: DiscountApp, args) -> None:
    print("🧾 영수증 이미지 분석 중...")
    result = await app.analyze_receipt_image(args.image)
    _print_notification(app)
    if result is None:
        return

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        _print_receipt(result.to_dict()["analyzedReceipt"])
        if result.immediate_benefits:
            print("\n⚡ 지금 바로 받을 수 있는 혜택:")
            for b in result.immediate_benefits:
                print(f"  - {b.title}: {b.description}")
        if result.future_benefits:
            print("\n💡 이런 혜택은 어떠세요?")
            for b in result.future_benefits:
                print(f"  - {b.title}: {b.description}")

    if args.save:
        app.save_analyzed_receipt()
        _print_notification(app)


def _print_receipt(data: dict) -> None:
    print(f"  상점: {data['storeName']}")
    print(f"  날짜: {data['date']}")
    if data.get("storeCategory"):
        print(f"  카테고리: {data['storeCategory']}")
    if data["items"]:
        print(f"  품목: {', '.join(data['items'])}")
    print(f"  적용 할인: {data['discountApplied'] or '없음'}")
    print(f"  결제 금액: {data['totalAmount']}")


def _cmd_history(app: DiscountApp, args) -> None:
    history = app.state.receipt_history
    if args.json:
        print(json.dumps([r.to_dict() for r in history], ensure_ascii=False, indent=2))
        return
    if not history:
        print("저장된 영수증이 없습니다.")
        return
    print(f"영수증 내역 ({len(history)}건):")
    for receipt in history:
        print(f"\n{'─' * 40}")
        _print_receipt(receipt.to_dict())


def _cmd_favorites(app: DiscountApp) -> None:
    app.navigate("favorites")
    stores = app.state.modal.data or []
    if stores:
        _print_stores(stores, as_json=False)
        return
    if app.state.favorites:
        print("현재 매장 목록에 없는 찜 ID:")
        for store_id in app.state.favorites:
            print(f"  {store_id}")
    else:
        print("찜한 매장이 없습니다.")
