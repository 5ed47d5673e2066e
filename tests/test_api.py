import itertools

from sqlalchemy.exc import OperationalError

from conftest import ts


async def test_records_roundtrip_with_category(client):
    response = await client.post("/api/v1/records", json={"kind": "Salary", "amount": 1200, "description": "March"})
    assert response.status_code == 201
    created = response.json()
    assert created["category"] == "income"
    assert created["timestamp"] > 0

    response = await client.patch(f"/api/v1/records/{created['id']}", json={"amount": 1300, "kind": "Expense"})
    assert response.json()["amount"] == 1300
    assert response.json()["kind"] == "Salary"
    assert response.json()["timestamp"] == created["timestamp"]

    listing = (await client.get("/api/v1/records", params={"period": "day"})).json()
    assert [r["id"] for r in listing] == [created["id"]]

    assert (await client.delete(f"/api/v1/records/{created['id']}")).status_code == 204
    assert (await client.get(f"/api/v1/records/{created['id']}")).status_code == 404


async def test_patch_with_null_amount_keeps_stored_value(client):
    record = (await client.post("/api/v1/records", json={"kind": "Expense", "amount": 75})).json()

    response = await client.patch(f"/api/v1/records/{record['id']}", json={"amount": None, "description": "groceries"})
    assert response.status_code == 200
    assert response.json()["amount"] == 75
    assert response.json()["description"] == "groceries"


async def test_negative_amounts_are_rejected(client):
    response = await client.post("/api/v1/records", json={"kind": "Expense", "amount": -5})
    assert response.status_code == 422


async def test_write_without_user_is_refused_and_nothing_is_stored(client, user, login_as):
    login_as(None)
    response = await client.post("/api/v1/records", json={"kind": "Income", "amount": 10})
    assert response.status_code == 401
    assert (await client.put("/api/v1/settings/fixed", json={"fixed_salary": 1})).status_code == 401
    assert (await client.post("/api/v1/goals", json={"title": "x"})).status_code == 401
    assert (await client.get("/api/v1/records")).status_code == 401

    login_as(user)
    assert (await client.get("/api/v1/records")).json() == []


async def test_records_are_scoped_to_owner(client, other_user, login_as):
    record = (await client.post("/api/v1/records", json={"kind": "Expense", "amount": 40})).json()

    login_as(other_user)
    assert (await client.get("/api/v1/records")).json() == []
    assert (await client.get(f"/api/v1/records/{record['id']}")).status_code == 404
    assert (await client.delete(f"/api/v1/records/{record['id']}")).status_code == 404


async def test_fixed_settings_are_upserted(client):
    before = (await client.get("/api/v1/settings/fixed")).json()
    assert before["configured"] is False
    assert before["fixed_salary"] == 0

    await client.put("/api/v1/settings/fixed", json={"fixed_salary": 2000, "fixed_debt": 300})
    await client.put("/api/v1/settings/fixed", json={"fixed_salary": 2500, "fixed_debt": 300, "fixed_savings": 200})
    after = (await client.get("/api/v1/settings/fixed")).json()
    assert after["configured"] is True
    assert (after["fixed_salary"], after["fixed_debt"], after["fixed_savings"]) == (2500, 300, 200)


async def test_dashboard_summary_end_to_end(client):
    for kind, amount in [("Income", 1000), ("Expense", 400), ("Savings", 100), ("Lottery", 5)]:
        await client.post("/api/v1/records", json={"kind": kind, "amount": amount})

    summary = (await client.get("/api/v1/dashboard/summary", params={"period": "day"})).json()
    metrics = summary["metrics"]
    assert metrics["total_income"] == 1000
    assert metrics["total_expense"] == 400
    assert metrics["net_flow"] == 600
    assert metrics["savings"] == 100
    assert summary["settings_configured"] is False
    assert [c["key"] for c in summary["cards"]][0] == "total_income"

    await client.put("/api/v1/settings/fixed", json={"fixed_salary": 500, "fixed_debt": 100, "fixed_savings": 50})
    metrics = (await client.get("/api/v1/dashboard/summary")).json()["metrics"]
    assert metrics["total_income"] == 1500
    assert metrics["total_expense"] == 550

    charts = (await client.get("/api/v1/dashboard/charts")).json()["charts"]
    assert [c["chart_id"] for c in charts] == ["income_expense", "net_worth", "time_flow"]


async def test_empty_dashboard_is_all_zero(client):
    summary = (await client.get("/api/v1/dashboard/summary")).json()
    assert set(summary["metrics"].values()) == {0}


async def test_debt_tracker_lifecycle(client, monkeypatch):
    clock = itertools.count(ts("2024-05-01T09:00"), 60_000)
    monkeypatch.setattr("fintrack.crud.debt.now_ms", lambda: next(clock))

    status = (await client.get("/api/v1/debt")).json()
    assert status["status"]["configured"] is False
    assert (await client.post("/api/v1/debt/repay", json={"amount": 10})).status_code == 400

    await client.post("/api/v1/debt/init", json={"initial_debt": 1000})
    first = (await client.post("/api/v1/debt/repay", json={"amount": 300})).json()
    second = (await client.post("/api/v1/debt/repay", json={"amount": 800})).json()
    assert (first["current_debt"], second["current_debt"]) == (700, 0)
    assert second["repayment_percentage"] == 100

    history = (await client.get("/api/v1/debt")).json()
    assert [e["remaining_debt"] for e in history["entries"]] == [1000, 700, 0]
    assert [e["event"] for e in history["entries"]] == ["init", "repayment", "repayment"]

    chart = (await client.get("/api/v1/debt/chart")).json()
    assert chart["chart_id"] == "debt_progress"
    assert chart["datasets"][0]["values"][-1] == 0


async def test_repayment_must_be_positive(client):
    await client.post("/api/v1/debt/init", json={"initial_debt": 100})
    assert (await client.post("/api/v1/debt/repay", json={"amount": 0})).status_code == 422


async def test_goal_subgoals_are_rewritten_as_a_list(client):
    goal = (await client.post("/api/v1/goals", json={"title": "  Learn Spanish ", "subgoals": [{"text": "Buy a book"}]})).json()
    assert goal["title"] == "Learn Spanish"
    assert goal["status"] == "in_progress"
    assert len(goal["subgoals"]) == 1

    new_list = [{"text": "Finish unit 1", "status": "done"}, {"text": "Finish unit 2"}]
    updated = (await client.put(f"/api/v1/goals/{goal['id']}/subgoals", json={"subgoals": new_list})).json()
    assert [s["text"] for s in updated["subgoals"]] == ["Finish unit 1", "Finish unit 2"]
    assert updated["subgoals"][0]["status"] == "done"

    done = (await client.patch(f"/api/v1/goals/{goal['id']}/status", json={"status": "done"})).json()
    assert done["status"] == "done"
    assert (await client.get("/api/v1/goals", params={"status": "failed"})).json() == []
    assert len((await client.get("/api/v1/goals", params={"status": "done"})).json()) == 1


async def test_deleting_goal_keeps_its_motivation_logs(client):
    goal = (await client.post("/api/v1/goals", json={"title": "Gym"})).json()
    await client.post("/api/v1/motivation/logs", json={"goal_id": goal["id"], "score": 3, "notes": "leg day"})
    await client.post("/api/v1/motivation/logs", json={"goal_id": goal["id"], "score": -1})

    assert (await client.delete(f"/api/v1/goals/{goal['id']}")).status_code == 204

    activity = (await client.get("/api/v1/motivation/logs")).json()
    assert len(activity) == 2
    assert {item["goal_title"] for item in activity} == {"(deleted goal)"}
    score = (await client.get("/api/v1/motivation/score")).json()
    assert score == {"score": 2, "sign": "positive"}
    assert isinstance(score["score"], int)


async def test_log_for_unknown_goal_is_404(client):
    response = await client.post(
        "/api/v1/motivation/logs",
        json={"goal_id": "00000000-0000-0000-0000-000000000000", "score": 1},
    )
    assert response.status_code == 404


async def test_motivation_chart_window_keeps_cumulative_baseline(client, monkeypatch):
    clock = iter([ts("2024-01-01T09:00"), ts("2024-01-01T10:00"), ts("2024-01-03T09:00"), ts("2024-01-06T09:00")])
    monkeypatch.setattr("fintrack.crud.goal.now_ms", lambda: ts("2023-12-31T09:00"))
    monkeypatch.setattr("fintrack.crud.motivation.now_ms", lambda: next(clock))

    goal = (await client.post("/api/v1/goals", json={"title": "Write"})).json()
    for score in (2, 3, 4):
        await client.post("/api/v1/motivation/logs", json={"goal_id": goal["id"], "score": score})

    chart = (await client.get("/api/v1/motivation/chart", params={"start": "2024-01-02", "end": "2024-01-04"})).json()
    assert chart["labels"] == ["2024-01-02", "2024-01-03", "2024-01-04"]
    total, per_goal = chart["datasets"]
    assert total["values"] == [5, 9, 9]
    assert per_goal["label"] == "Write"

    bad = await client.get("/api/v1/motivation/chart", params={"start": "Jan 2"})
    assert bad.status_code == 422


async def test_store_failure_is_reported(client, monkeypatch):
    async def broken(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr("fintrack.api.v1.routes.records.get_records_for_owner", broken)
    response = await client.get("/api/v1/records")
    assert response.status_code == 503


async def test_health(client):
    body = (await client.get("/health")).json()
    assert body["status"] == "healthy"
    assert body["kind_scheme"] == "unified"


async def test_impossible_chart_dates_are_rejected(client):
    for path in ("/api/v1/motivation/chart", "/api/v1/debt/chart"):
        response = await client.get(path, params={"start": "2024-13-45", "end": "2024-13-46"})
        assert response.status_code == 422


async def test_oversized_chart_window_is_rejected(client):
    await client.post("/api/v1/debt/init", json={"initial_debt": 100})
    response = await client.get("/api/v1/debt/chart", params={"start": "0001-01-01", "end": "9999-12-31"})
    assert response.status_code == 422

    response = await client.get("/api/v1/debt/chart", params={"start": "2024-01-01", "end": "2024-12-31"})
    assert response.status_code == 200
    assert len(response.json()["labels"]) == 366
