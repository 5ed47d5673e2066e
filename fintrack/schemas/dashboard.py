# fintrack/schemas/dashboard.py
from typing import List, Optional
from pydantic import BaseModel

class Dataset(BaseModel):
    label: str
    values: List[float]
    color_hint: Optional[str] = None

class ChartPayload(BaseModel):
    chart_id: str
    kind: str
    labels: List[str]
    datasets: List[Dataset]

class MetricCard(BaseModel):
    key: str
    title: str
    value: float
    tone: str

class SummaryMetricsRead(BaseModel):
    total_income: float
    total_expense: float
    net_flow: float
    savings: float
    debt: float
    bonus: float
    remaining_balance: float

class DashboardSummary(BaseModel):
    period: str
    since: int
    settings_configured: bool
    metrics: SummaryMetricsRead
    cards: List[MetricCard]

class DashboardCharts(BaseModel):
    period: str
    since: int
    charts: List[ChartPayload]
