"""Tests for the CLI using a stored catalog (no model calls)."""

import json

import pytest

from hyetaek.cli import main


@pytest.fixture
def env(tmp_path, monkeypatch):
    for var in ("GEMINI_API_KEY", "API_KEY", "ANTHROPIC_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)

    config = tmp_path / "config.toml"
    config.write_text(
        f'[database]\npath = "{(tmp_path / "cli.db").as_posix()}"\n\n'
        "[location]\nlatitude = 0.0\nlongitude = 0.0\n",
        encoding="utf-8",
    )
    catalog = tmp_path / "catalog.json"
    catalog.write_text(
        json.dumps(
            [
                {"id": "a", "name": "스터디카페 A", "category": "스터디", "address": "서울",
                 "latitude": 0.0, "longitude": 1.0,
                 "discounts": [{"id": "d1", "description": "학생 20% 할인"}]},
                {"id": "b", "name": "분식 B", "category": "음식", "address": "서울",
                 "latitude": 0.0, "longitude": 0.0, "discounts": []},
            ],
            ensure_ascii=False,
        ),
        encoding="utf-8",
    )
    return ["--config", str(config), "--catalog", str(catalog)]


def test_no_command_prints_help(capsys):
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 1


def test_stores_json(env, capsys):
    main(env + ["stores", "--category", "스터디", "--json"])
    out = json.loads(capsys.readouterr().out)
    assert [s["id"] for s in out] == ["a"]
    assert out[0]["discounts"][0]["description"] == "학생 20% 할인"


def test_stores_nearby_sorts_by_distance(env, capsys):
    main(env + ["stores", "--nearby", "--json"])
    out = capsys.readouterr().out
    data = json.loads(out[out.index("["):])
    assert [s["id"] for s in data] == ["b", "a"]
    assert data[0]["distance"] == 0.0


def test_favorite_persists_between_runs(env, capsys):
    main(env + ["favorite", "a"])
    assert "찜" in capsys.readouterr().out

    main(env + ["favorites"])
    assert "스터디카페 A" in capsys.readouterr().out


def test_history_empty(env, capsys):
    main(env + ["history"])
    assert "저장된 영수증이 없습니다." in capsys.readouterr().out


def test_missing_catalog_file(env, capsys):
    args = env[:2] + ["--catalog", "nowhere.json", "stores"]
    with pytest.raises(SystemExit) as exc:
        main(args)
    assert exc.value.code == 1
    assert "매장 목록 파일을 찾을 수 없습니다" in capsys.readouterr().err


def test_recommend_without_api_key(env, capsys):
    with pytest.raises(SystemExit):
        main(env + ["recommend", "공부"])
    assert "API 키" in capsys.readouterr().err
