"""Typed, normalized views over the raw section payloads.

The provider keeps payloads opaque. KPI cards and charts consume these views
instead: each one is tagged by ``section`` and always has a complete shape,
falling back to zeros and empty series when the upstream payload is missing
a field or the section has never loaded.

Upstream payloads are inconsistent about naming (camelCase English keys,
snake_case Portuguese keys, nested ``resumo`` blocks); the builders below
accept every variant the webhooks have been seen to send.
"""

from __future__ import annotations

import math
import re
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field

from dashboard.sections import DashboardState, Section, parse_section

_LEADING_FLOAT = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

ALL_PRODUCTS = "todos"
_MONTHLY_SALES_RESERVED = frozenset({"name", "total", "liquido"})


def parse_value(value: Any) -> float:
    """Coerce an upstream number-ish value to float; anything unusable is 0.

    Numeric strings parse by their leading number ("12.5%" -> 12.5).
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        if value == "" or value == "null":
            return 0.0
        match = _LEADING_FLOAT.match(value)
        return float(match.group()) if match else 0.0
    if isinstance(value, (int, float)):
        return 0.0 if math.isnan(value) else float(value)
    return 0.0


def change_type(change: str) -> Literal["positive", "negative", "neutral"]:
    if change.startswith("+"):
        return "positive"
    if change.startswith("-"):
        return "negative"
    return "neutral"


def _first(*values: Any) -> Any:
    """First truthy value, else ``None``."""
    for value in values:
        if value:
            return value
    return None


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_rows(value: Any) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [row for row in value if isinstance(row, dict)]


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


# ── Community ─────────────────────────────────────────────────────────────────

_COMMUNITY_KPIS = {
    "active_members": "activeMembers",
    "renewed_members": "renewedMembers",
    "expired_members": "expiredMembers",
    "renewal_rate": "renewalRate",
    "people_to_renew": "peopleToRenew",
    "new_subscriptions": "newSubscriptions",
}


class CommunityView(BaseModel):
    section: Literal["community"] = "community"
    active_members: float = 0
    renewed_members: float = 0
    expired_members: float = 0
    renewal_rate: float = 0
    people_to_renew: float = 0
    new_subscriptions: float = 0
    percentages: dict[str, str] = Field(default_factory=dict)
    new_subscriptions_by_month: list[dict] = Field(default_factory=list)
    active_members_by_month: list[dict] = Field(default_factory=list)
    expired_members_by_month: list[dict] = Field(default_factory=list)
    renewed_members_by_month: list[dict] = Field(default_factory=list)


def build_community_view(payload: Any) -> CommunityView:
    raw = _as_dict(payload)
    pct = _as_dict(raw.get("percentages"))
    fields: dict[str, Any] = {
        name: parse_value(raw.get(key)) for name, key in _COMMUNITY_KPIS.items()
    }
    fields["percentages"] = {name: _text(pct.get(key)) for name, key in _COMMUNITY_KPIS.items()}
    fields["new_subscriptions_by_month"] = _as_rows(raw.get("newSubscriptionsByMonth"))
    fields["active_members_by_month"] = _as_rows(raw.get("activeMembersByMonth"))
    fields["expired_members_by_month"] = _as_rows(raw.get("expiredMembersByMonth"))
    fields["renewed_members_by_month"] = _as_rows(raw.get("renewedMembersByMonth"))
    return CommunityView(**fields)


# ── Products ──────────────────────────────────────────────────────────────────

_PRODUCT_KPIS = {
    "total_sales": "totalSales",
    "total_net_revenue": "totalNetRevenue",
    "average_ticket": "averageTicket",
}


class ProductsView(BaseModel):
    section: Literal["products"] = "products"
    total_sales: float = 0
    total_net_revenue: float = 0
    average_ticket: float = 0
    percentages: dict[str, str] = Field(default_factory=dict)
    renewal_estimate: float = 0
    renewal_percentage: str = ""
    sales_per_product: list[dict] = Field(default_factory=list)
    monthly_sales: list[dict] = Field(default_factory=list)
    sales_count: list[dict] = Field(default_factory=list)
    monthly_average_ticket: list[dict] = Field(default_factory=list)
    available_products: list[str] = Field(default_factory=list)
    selected_product: str = ALL_PRODUCTS
    filtered_monthly_sales: list[dict] = Field(default_factory=list)

    def filter_monthly_sales(self, product: str = ALL_PRODUCTS) -> list[dict]:
        """Monthly sales restricted to one product plus the totals."""
        if product == ALL_PRODUCTS:
            return self.monthly_sales
        return [
            {
                "name": row.get("name"),
                "total": row.get("total"),
                "liquido": row.get("liquido"),
                product: row.get(product) or 0,
            }
            for row in self.monthly_sales
        ]


def build_products_view(payload: Any, community: Any = None,
                        product: str = ALL_PRODUCTS) -> ProductsView:
    """Normalize a products payload, with monthly sales filtered to *product*.

    The renewal estimate is published by the community webhook; older
    products payloads carry it too, so community data wins when present.
    """
    raw = _as_dict(payload)
    pct = _as_dict(raw.get("percentages"))
    fields: dict[str, Any] = {
        name: parse_value(raw.get(key)) for name, key in _PRODUCT_KPIS.items()
    }
    fields["percentages"] = {name: _text(pct.get(key)) for name, key in _PRODUCT_KPIS.items()}

    renewal = _as_dict(community) or raw
    renewal_pct = _as_dict(renewal.get("percentages"))
    fields["renewal_estimate"] = parse_value(
        _first(renewal.get("renewalEstimate"), renewal.get("estimativa_renovacao"))
    )
    fields["renewal_percentage"] = _text(
        _first(renewal_pct.get("renewalEstimate"), renewal_pct.get("estimativa_renovacao"))
    )

    monthly = _as_rows(raw.get("monthlySales"))
    fields["sales_per_product"] = _as_rows(raw.get("salesPerProduct"))
    fields["monthly_sales"] = monthly
    fields["sales_count"] = _as_rows(raw.get("salesCount"))
    fields["monthly_average_ticket"] = _as_rows(raw.get("monthlyAverageTicket"))
    fields["available_products"] = (
        [key for key in monthly[0] if key not in _MONTHLY_SALES_RESERVED] if monthly else []
    )
    view = ProductsView(**fields)
    view.selected_product = product
    view.filtered_monthly_sales = view.filter_monthly_sales(product)
    return view


# ── Finance ───────────────────────────────────────────────────────────────────

# view field -> (resumo key, flat English key)
_FINANCE_SUMMARY = {
    "total_revenue": ("receita_total", "totalRevenue"),
    "net_revenue": ("receita_liquida", "totalNetRevenue"),
    "total_expenses": ("gastos_totais", "totalExpenses"),
    "final_balance": ("balanco_final", "netBalance"),
}

TIMELINE_FILTERS = {
    "profit": "profit",
    "revenue": "revenue",
    "expenses": "expense",
    # upstream names
    "lucro": "profit",
    "faturamento": "revenue",
    "despesas": "expense",
}
DEFAULT_TIMELINE_FILTER = "profit"


class FinanceSummary(BaseModel):
    total_revenue: float = 0
    net_revenue: float = 0
    total_expenses: float = 0
    final_balance: float = 0
    month_comparison: dict[str, str] = Field(default_factory=dict)


class ExpenseCategory(BaseModel):
    category: str
    value: float


class WeeklyBalance(BaseModel):
    week: str
    revenue: float
    expense: float


class TimelinePoint(BaseModel):
    month: str
    revenue: float
    expense: float
    profit: float


class FinanceView(BaseModel):
    section: Literal["finance"] = "finance"
    summary: FinanceSummary = Field(default_factory=FinanceSummary)
    expenses_by_category: list[ExpenseCategory] = Field(default_factory=list)
    weekly_balance: list[WeeklyBalance] = Field(default_factory=list)
    timeline: list[TimelinePoint] = Field(default_factory=list)
    timeline_filter: str = DEFAULT_TIMELINE_FILTER
    filtered_timeline: list[dict] = Field(default_factory=list)

    def filter_timeline(self, kind: str = DEFAULT_TIMELINE_FILTER) -> list[dict]:
        """Timeline reduced to the month and one measure.

        Raises:
            ValueError: If *kind* is not a known filter.
        """
        try:
            measure = TIMELINE_FILTERS[kind]
        except KeyError:
            raise ValueError(f"Unknown timeline filter: {kind!r}") from None
        return [{"month": p.month, measure: getattr(p, measure)} for p in self.timeline]


def build_finance_view(payload: Any, timeline_filter: str = DEFAULT_TIMELINE_FILTER) -> FinanceView:
    """Normalize a finance payload, with the timeline reduced by *timeline_filter*.

    Raises:
        ValueError: If *timeline_filter* is not a known filter.
    """
    raw = _as_dict(payload)
    resumo = _as_dict(raw.get("resumo"))

    summary: dict[str, Any] = {
        name: parse_value(_first(resumo.get(pt_key), raw.get(en_key), raw.get(pt_key)))
        for name, (pt_key, en_key) in _FINANCE_SUMMARY.items()
    }
    comparison = _as_dict(_first(resumo.get("comparativo_mes"), raw.get("comparativo_mes")))
    summary["month_comparison"] = {
        name: _text(comparison.get(pt_key)) for name, (pt_key, _) in _FINANCE_SUMMARY.items()
    }

    if "despesas_por_categoria" in raw and isinstance(raw["despesas_por_categoria"], list):
        categories = [
            ExpenseCategory(
                category=_first(row.get("categoria"), row.get("name")) or "Categoria",
                value=parse_value(_first(row.get("valor"), row.get("value"))),
            )
            for row in _as_rows(raw["despesas_por_categoria"])
        ]
    else:
        categories = [
            ExpenseCategory(
                category=_first(row.get("name"), row.get("categoria")) or "Categoria",
                value=parse_value(_first(row.get("value"), row.get("valor"))),
            )
            for row in _as_rows(raw.get("expensesCategory"))
        ]

    weekly_rows = raw.get("balanco_semanal")
    if not isinstance(weekly_rows, list):
        weekly_rows = raw.get("weeklyRevenueExpenses")
    weekly = [
        WeeklyBalance(
            week=_first(row.get("semana"), row.get("name")) or "Semana",
            revenue=parse_value(row.get("receita")),
            expense=parse_value(_first(row.get("despesa"), row.get("despesas"))),
        )
        for row in _as_rows(weekly_rows)
    ]

    timeline = [
        TimelinePoint(
            month=_first(row.get("mes"), row.get("name")) or "Mês",
            revenue=parse_value(row.get("receita")),
            expense=parse_value(_first(row.get("despesa"), row.get("despesas"))),
            profit=parse_value(row.get("lucro")),
        )
        for row in _as_rows(raw.get("linha_do_tempo"))
    ]

    view = FinanceView(
        summary=FinanceSummary(**summary),
        expenses_by_category=categories,
        weekly_balance=weekly,
        timeline=timeline,
        timeline_filter=timeline_filter,
    )
    view.filtered_timeline = view.filter_timeline(timeline_filter)
    return view


SectionView = Annotated[
    Union[CommunityView, ProductsView, FinanceView],
    Field(discriminator="section"),
]


def build_view(section: Section | str, state: DashboardState,
               product: str = ALL_PRODUCTS,
               timeline_filter: str = DEFAULT_TIMELINE_FILTER) -> SectionView:
    """Normalized view of *section* from a provider state snapshot.

    *product* applies to the products view and *timeline_filter* to the
    finance view; each is ignored by the other sections.
    """
    section = parse_section(section)
    payload: Optional[Any] = state.get(section)
    if section is Section.COMMUNITY:
        return build_community_view(payload)
    if section is Section.PRODUCTS:
        return build_products_view(payload, community=state.get(Section.COMMUNITY),
                                   product=product)
    return build_finance_view(payload, timeline_filter=timeline_filter)
