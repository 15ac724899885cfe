from __future__ import annotations

from datetime import datetime, timezone

from app import models


def _create(client, **body) -> dict:
    if "description" not in body and "desc" not in body:
        body["description"] = "항목"
    resp = client.post("/api/entries", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_health_and_root_redirect(client):
    assert client.get("/health").json() == {"status": "ok"}
    resp = client.get("/", follow_redirects=False)
    assert resp.status_code in (302, 307)
    assert resp.headers["location"].endswith("/api/entries")


class TestCreate:
    def test_create_normalizes_date_and_trims(self, client):
        data = _create(client, date="2024-03-01T10:00:00.000Z", desc="  회비 입금  ", income="1000")
        assert data["date"] == "2024-03-01"
        assert data["description"] == "회비 입금"
        assert data["income"] == 1000.0
        assert data["expense"] == 0.0
        assert data["id"] > 0

    def test_create_with_optional_fields(self, client):
        data = _create(client, date="2024/3/2", description="문구", expense=120, tag=" 사무 ", note="영수증 있음")
        assert data["date"] == "2024-03-02"
        assert data["tag"] == "사무"
        assert data["note"] == "영수증 있음"

    def test_blank_description_rejected(self, client):
        resp = client.post("/api/entries", json={"date": "2024-03-01", "description": "   "})
        assert resp.status_code == 400
        assert resp.json()["ok"] is False
        assert resp.json()["error"] == "invalid payload"

    def test_unresolvable_date_rejected(self, client, db_session):
        resp = client.post("/api/entries", json={"date": "someday", "description": "x"})
        assert resp.status_code == 400
        resp = client.post("/api/entries", json={"description": "x"})
        assert resp.status_code == 400
        assert db_session.query(models.Entry).count() == 0

    def test_negative_amount_rejected(self, client):
        resp = client.post("/api/entries", json={"date": "2024-03-01", "description": "x", "expense": -5})
        assert resp.status_code == 400

    def test_non_numeric_amount_counts_as_zero(self, client):
        data = _create(client, date="2024-03-01", income="abc")
        assert data["income"] == 0.0


class TestUpdate:
    def test_partial_update(self, client):
        created = _create(client, date="2024-03-01", description="원래", income=100)
        resp = client.patch(f"/api/entries/{created['id']}", json={"expense": 40})
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["expense"] == 40.0
        assert data["income"] == 100.0
        assert data["description"] == "원래"
        assert data["updated_at"] >= created["updated_at"]

    def test_put_is_accepted(self, client):
        created = _create(client, date="2024-03-01")
        resp = client.put(f"/api/entries/{created['id']}", json={"desc": "변경", "date": "2024-04-05"})
        assert resp.status_code == 200
        assert resp.json()["description"] == "변경"
        assert resp.json()["date"] == "2024-04-05"

    def test_empty_update_rejected(self, client):
        created = _create(client, date="2024-03-01")
        resp = client.patch(f"/api/entries/{created['id']}", json={"unknown": 1})
        assert resp.status_code == 400
        assert resp.json() == {"ok": False, "error": "empty update"}

    def test_unparseable_date_only_is_empty_update(self, client):
        created = _create(client, date="2024-03-01")
        resp = client.patch(f"/api/entries/{created['id']}", json={"date": "nope"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "empty update"

    def test_blank_description_rejected(self, client):
        created = _create(client, date="2024-03-01", description="원래")
        resp = client.patch(f"/api/entries/{created['id']}", json={"description": "   "})
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid payload"
        assert client.get(f"/api/entries/{created['id']}").json()["description"] == "원래"

    def test_unknown_id_is_not_found(self, client):
        resp = client.patch("/api/entries/9999", json={"income": 1})
        assert resp.status_code == 404
        assert resp.json() == {"ok": False, "error": "not found"}


class TestDelete:
    def test_delete(self, client):
        created = _create(client, date="2024-03-01")
        assert client.delete(f"/api/entries/{created['id']}").status_code == 204
        assert client.get(f"/api/entries/{created['id']}").status_code == 404

    def test_delete_unknown(self, client):
        assert client.delete("/api/entries/424242").status_code == 404


class TestCarrySetting:
    def test_default_when_absent(self, client):
        data = client.get("/api/settings/carry").json()
        assert data["prev_year"] == models.now_local_naive().year - 1
        assert data["prev_carry"] == 0
        assert data["target_year"] == data["prev_year"] + 1

    def test_upsert_with_legacy_keys(self, client):
        resp = client.put("/api/settings/carry", json={"prevYear": "2023", "prevCarry": 500})
        assert resp.status_code == 200, resp.text
        resp = client.put("/api/settings/carry", json={"prev_year": 2023, "prev_carry": -75.5})
        assert resp.status_code == 200
        data = client.get("/api/settings/carry").json()
        assert data["prev_year"] == 2023
        assert data["prev_carry"] == -75.5

    def test_rejects_missing_or_non_finite(self, client):
        assert client.put("/api/settings/carry", json={"prevYear": 2023}).status_code == 400
        assert client.put("/api/settings/carry", json={"prevYear": "x", "prevCarry": 1}).status_code == 400
        assert client.put("/api/settings/carry", json={"prevYear": 2023, "prevCarry": "inf"}).status_code == 400
        assert client.put("/api/settings/carry", json={"prevYear": "inf", "prevCarry": 1}).status_code == 400

    def test_fractional_year_accepted(self, client):
        resp = client.put("/api/settings/carry", json={"prevYear": 2023.5, "prevCarry": 10})
        assert resp.status_code == 200, resp.text
        assert resp.json()["prev_year"] == 2023
        assert resp.json()["target_year"] == 2024


class TestListing:
    def test_three_march_entries(self, client):
        client.put("/api/settings/carry", json={"prevYear": 2023, "prevCarry": 500})
        _create(client, date="2024-03-02", description="문구", expense=100)
        _create(client, date="2024-03-01", description="회비", income=1000)
        _create(client, date="2024-03-01", description="다과", expense=200)

        data = client.get("/api/entries").json()
        assert [r["description"] for r in data["rows"]] == ["회비", "다과", "문구"]
        assert [r["balance"] for r in data["rows"]] == [1500, 1300, 1200]
        summary = data["summary"]
        assert (summary["income"], summary["expense"], summary["balance"]) == (1000, 300, 1200)
        assert summary["detail"]["target_year"] == 2024
        assert summary["detail"]["target_year_balance"] == 1200
        assert data["filters"]["order"] == "asc"

    def test_desc_order(self, client):
        _create(client, date="2024-01-01", description="a")
        _create(client, date="2024-01-03", description="c")
        _create(client, date="2024-01-02", description="b")
        rows = client.get("/api/entries", params={"order": "DESC"}).json()["rows"]
        assert [r["description"] for r in rows] == ["c", "b", "a"]

    def test_invalid_params_ignored(self, client):
        _create(client, date="2024-01-01")
        resp = client.get("/api/entries", params={"start": "yesterday", "end": "2024-13", "order": "sideways"})
        assert resp.status_code == 200
        data = resp.json()
        assert len(data["rows"]) == 1
        assert data["filters"] == {"start": None, "end": None, "q": None, "order": "asc"}

    def test_range_matches_text_and_native_dates(self, client, add_entry):
        add_entry(date="2024-01-15", description="text-in")
        add_entry(date="2024-01-31T23:59:00.000Z", description="text-boundary")
        add_entry(date="2024-02-01", description="text-out")
        add_entry(date=None, legacy_date=datetime(2024, 1, 31, 15, 0), description="native-in")
        add_entry(date="", legacy_date=datetime(2024, 1, 1, 0, 0), description="native-start")
        add_entry(date=None, legacy_date=datetime(2023, 12, 31, 23, 0), description="native-out")
        add_entry(date=None, legacy_date=datetime(2024, 2, 1, 0, 0), description="native-after")

        rows = client.get("/api/entries", params={"start": "2024-01-01", "end": "2024-01-31"}).json()["rows"]
        names = sorted(r["description"] for r in rows)
        assert names == ["native-in", "native-start", "text-boundary", "text-in"]
        for r in rows:
            assert "2024-01-01" <= r["date"] <= "2024-01-31"

    def test_open_ended_range(self, client, add_entry):
        add_entry(date="2024-01-15", description="a")
        add_entry(date=None, legacy_date=datetime(2024, 3, 1, tzinfo=timezone.utc).replace(tzinfo=None), description="b")
        rows = client.get("/api/entries", params={"start": "2024-02-01"}).json()["rows"]
        assert [r["description"] for r in rows] == ["b"]
        rows = client.get("/api/entries", params={"end": "2024-02-01"}).json()["rows"]
        assert [r["description"] for r in rows] == ["a"]

    def test_mixed_storage_sorted_by_canonical_key(self, client, add_entry):
        add_entry(date="2024-01-20", description="text")
        add_entry(date=None, legacy_date=datetime(2024, 1, 10, 9, 0), description="native")
        rows = client.get("/api/entries").json()["rows"]
        assert [r["description"] for r in rows] == ["native", "text"]
        assert rows[0]["date"] == "2024-01-10"

    def test_unknown_date_counted_in_totals_only(self, client, add_entry):
        client.put("/api/settings/carry", json={"prevYear": 2023, "prevCarry": 0})
        add_entry(date="garbage", description="x", income=50)
        add_entry(date="2024-05-01", description="y", income=10)
        data = client.get("/api/entries").json()
        assert data["summary"]["income"] == 60
        assert data["summary"]["detail"]["target_year_income"] == 10
        assert data["rows"][0]["date"] is None

    def test_loose_text_dates_filtered_by_normalized_key(self, client, add_entry):
        """정규화되지 않은 텍스트 날짜도 목록에 보이는 날짜 기준으로 범위 필터"""
        add_entry(date="2024-1-15", description="dash")
        add_entry(date="2024/01/20", description="slash")
        add_entry(date="2024.02.03", description="feb")
        add_entry(date="2024-01-10", description="canonical")

        rows = client.get("/api/entries", params={"start": "2024-01-01", "end": "2024-01-31"}).json()["rows"]
        assert [(r["description"], r["date"]) for r in rows] == [
            ("canonical", "2024-01-10"),
            ("dash", "2024-01-15"),
            ("slash", "2024-01-20"),
        ]

    def test_unknown_text_date_excluded_from_bounded_range(self, client, add_entry):
        add_entry(date="garbage", description="nodate")
        add_entry(date="2024-03-01", description="dated")

        rows = client.get("/api/entries", params={"start": "2024-01-01"}).json()["rows"]
        assert [r["description"] for r in rows] == ["dated"]
        rows = client.get("/api/entries", params={"end": "2099-12-31"}).json()["rows"]
        assert [r["description"] for r in rows] == ["dated"]
        # 범위 조건이 없으면 그대로 포함
        assert len(client.get("/api/entries").json()["rows"]) == 2

    def test_search_is_case_insensitive_and_literal(self, client):
        _create(client, date="2024-01-01", description="Coffee beans")
        _create(client, date="2024-01-02", description="100% 환불")
        _create(client, date="2024-01-03", description="1000 환불")
        _create(client, date="2024-01-04", description="a_b 정산")
        _create(client, date="2024-01-05", description="axb 정산")

        def search(q):
            rows = client.get("/api/entries", params={"q": q}).json()["rows"]
            return [r["description"] for r in rows]

        assert search("COFFEE") == ["Coffee beans"]
        assert search("100%") == ["100% 환불"]
        assert search("a_b") == ["a_b 정산"]
        assert search("  ") == [
            "Coffee beans",
            "100% 환불",
            "1000 환불",
            "a_b 정산",
            "axb 정산",
        ]
