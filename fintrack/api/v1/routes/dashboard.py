# fintrack/api/v1/routes/dashboard.py
import asyncio
import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.websockets import WebSocketState

from fintrack.core.config import settings
from fintrack.core.database import AsyncSessionLocal, get_async_session
from fintrack.core.auth import User
from fintrack.core.live import record_feed
from fintrack.api.deps import get_current_user, owner_id_of, user_from_token
from fintrack.crud.debt import get_debt_status, get_repayment_log
from fintrack.crud.fixed_settings import get_fixed_settings
from fintrack.crud.goal import get_goals_for_owner
from fintrack.crud.motivation import get_logs_for_owner
from fintrack.crud.record import get_records_for_owner
from fintrack.schemas.dashboard import DashboardCharts, DashboardSummary
from fintrack.utils.bucketing import Granularity, start_of_relative_period
from fintrack.utils.charts import build_dashboard, debt_progress_chart, motivation_chart, motivation_total
from fintrack.utils.classifier import KindClassifier, get_classifier
from fintrack.utils.live_session import LiveDashboardSession
from fintrack.utils.metrics import MetricsFormula, get_formula, repayment_percentage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def resolve_period(period: Optional[Granularity]) -> Granularity:
    return period or Granularity(settings.DEFAULT_PERIOD)


async def load_finance_dashboard(
    owner_id: uuid.UUID,
    db: AsyncSession,
    period: Granularity,
    classifier: KindClassifier,
    formula: MetricsFormula,
) -> Dict[str, Any]:
    since = start_of_relative_period(None, period)
    records = await get_records_for_owner(owner_id, db, since=since)
    settings_doc = await get_fixed_settings(owner_id, db)
    return build_dashboard(records, settings_doc, period, classifier=classifier, formula=formula)


async def load_full_snapshot(
    owner_id: uuid.UUID,
    db: AsyncSession,
    period: Granularity,
    classifier: KindClassifier,
    formula: MetricsFormula,
) -> Dict[str, Any]:
    """Everything the live dashboard shows, recomputed from the store."""
    snapshot = await load_finance_dashboard(owner_id, db, period, classifier, formula)

    debt = await get_debt_status(owner_id, db)
    debt_log = await get_repayment_log(owner_id, db) if debt is not None else []
    logs = await get_logs_for_owner(owner_id, db)
    goals = await get_goals_for_owner(owner_id, db)

    snapshot["debt"] = {
        "configured": debt is not None,
        "current_debt": debt.current_debt if debt is not None else None,
        "repayment_percentage": round(repayment_percentage(debt.initial_debt, debt.current_debt), 2) if debt else 0.0,
    }
    snapshot["motivation"] = motivation_total(logs)
    snapshot["charts"].append(debt_progress_chart(debt_log, max_days=settings.MAX_CHART_DAYS))
    snapshot["charts"].append(motivation_chart(logs, goals, max_days=settings.MAX_CHART_DAYS))
    return snapshot


@router.get("/summary", response_model=DashboardSummary)
async def get_dashboard_summary(
    period: Optional[Granularity] = Query(None, description="Rolling period: day, week, month or year"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
    classifier: KindClassifier = Depends(get_classifier),
    formula: MetricsFormula = Depends(get_formula),
):
    """
    Metric cards for the selected period:
    - total income / expenses, net flow, savings
    - current balance (clamped at zero for display; `metrics.remaining_balance` is the raw value)
    """
    return await load_finance_dashboard(owner_id_of(user), db, resolve_period(period), classifier, formula)


@router.get("/charts", response_model=DashboardCharts)
async def get_dashboard_charts(
    period: Optional[Granularity] = Query(None),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
    classifier: KindClassifier = Depends(get_classifier),
    formula: MetricsFormula = Depends(get_formula),
):
    """Income/expense bar, net-worth doughnut and time-flow line payloads."""
    return await load_finance_dashboard(owner_id_of(user), db, resolve_period(period), classifier, formula)


async def receive_refreshes(websocket: WebSocket, live: LiveDashboardSession) -> None:
    """Any text message from the client forces a refresh; returns on disconnect."""
    try:
        while True:
            await websocket.receive_text()
            live.request_refresh()
    except WebSocketDisconnect:
        logger.info("Live dashboard client disconnected for %s", live.owner_id)


@router.websocket("/live")
async def live_dashboard(websocket: WebSocket, period: Optional[Granularity] = None):
    """
    Pushes a full snapshot on connect and after every change to the user's
    data. Any text message from the client forces a refresh.
    """
    async with AsyncSessionLocal() as db:
        try:
            user = await user_from_token(websocket.query_params.get("token"), db)
        except HTTPException as exc:
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=str(exc.detail))
            return
    owner_id = owner_id_of(user)
    classifier = get_classifier()
    period = resolve_period(period)
    formula = get_formula()

    async def load() -> Dict[str, Any]:
        async with AsyncSessionLocal() as session:
            return await load_full_snapshot(owner_id, session, period, classifier, formula)

    await websocket.accept()
    live = LiveDashboardSession(owner_id, record_feed, load, websocket.send_json)
    receive_task = asyncio.create_task(receive_refreshes(websocket, live))
    render_task = asyncio.create_task(live.run())
    logger.info("Live dashboard opened for %s", owner_id)
    try:
        done, _ = await asyncio.wait({receive_task, render_task}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        live.close()
        for task in (receive_task, render_task):
            task.cancel()
        await asyncio.gather(receive_task, render_task, return_exceptions=True)

    if render_task in done and live.error is not None and websocket.client_state == WebSocketState.CONNECTED:
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
