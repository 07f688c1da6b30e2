"""Output helpers for the amortization engine.

This module renders schedule rows produced by the engine: as JSON objects, as
a tab separated table with a summary, and as a stacked bar chart. None of the
engine modules import it; rows are plain data and everything here only reads
them. Functions that produce a document write it to an explicit ``sink``.
"""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, TextIO

import plotly.graph_objects as go

from .data_models import ScheduleRow


def _isoformat(dt: datetime) -> str:
    """ISO-8601 with an offset; naive timestamps are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


def rows_to_dicts(rows: Iterable[ScheduleRow]) -> List[Dict[str, Any]]:
    """Convert rows into JSON-serialisable dictionaries.

    Amounts are rendered as strings so no precision is lost.
    """
    return [
        {
            "Period": row.period,
            "StartDate": _isoformat(row.start_date),
            "EndDate": _isoformat(row.end_date),
            "Payment": str(row.payment),
            "Interest": str(row.interest),
            "Principal": str(row.principal),
        }
        for row in rows
    ]


def summary_to_dict(summary: Dict[str, object]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in summary.items():
        if isinstance(value, datetime):
            out[key] = _isoformat(value)
        elif value is None or isinstance(value, int):
            out[key] = value
        else:
            out[key] = str(value)
    return out


def print_rows(rows: Iterable[ScheduleRow], sink: Optional[TextIO] = None) -> None:
    """Write the rows to ``sink`` as an indented JSON array."""
    sink = sink or sys.stdout
    json.dump(rows_to_dicts(rows), sink, indent="\t")
    sink.write("\n")


def print_summary(summary: Dict[str, object]) -> None:
    """Print schedule totals in a human-readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Periods            : {summary['periods']}")
    if summary.get("start_date") is not None:
        print(f"First period start : {_isoformat(summary['start_date'])}")
        print(f"Last period end    : {_isoformat(summary['end_date'])}")
    print(f"Total payment      : {summary['total_payment']}")
    print(f"Total interest     : {summary['total_interest']}")
    print(f"Total principal    : {summary['total_principal']}")
    print("-" * 72)


def print_schedule(rows: Iterable[ScheduleRow]) -> None:
    """Print the amortization table as tab separated columns."""
    headers = ["Period", "StartDate", "EndDate", "Payment", "Interest", "Principal"]
    print("\t".join(headers))
    for row in rows:
        print(
            "\t".join(
                [
                    str(row.period),
                    row.start_date.strftime("%Y-%m-%d"),
                    row.end_date.strftime("%Y-%m-%d"),
                    str(row.payment),
                    str(row.interest),
                    str(row.principal),
                ]
            )
        )


def build_chart(rows: Iterable[ScheduleRow], title: str = "Loan repayment schedule") -> go.Figure:
    """Build a stacked bar chart with one bar group per period.

    Bars show magnitudes, so outflows are drawn upwards.
    """
    rows = list(rows)
    x_axis = [row.end_date.strftime("%Y-%m-%d") for row in rows]
    fig = go.Figure()
    for name, attr in (("Principal", "principal"), ("Interest", "interest"), ("Payment", "payment")):
        fig.add_trace(
            go.Bar(
                name=name,
                x=x_axis,
                y=[float(-getattr(row, attr)) for row in rows],
            )
        )
    fig.update_layout(
        title=title,
        barmode="stack",
        width=1200,
        height=600,
        showlegend=True,
        xaxis_title="End date",
        xaxis=dict(rangeslider=dict(visible=True)),
    )
    return fig


def plot_rows(rows: Iterable[ScheduleRow], sink: TextIO, title: str = "Loan repayment schedule") -> None:
    """Render the chart as a standalone HTML document into ``sink``."""
    fig = build_chart(rows, title=title)
    sink.write(fig.to_html(full_html=True, include_plotlyjs="cdn"))
