"""Visualization components using Plotly for interactive charts."""

from dataclasses import replace
from decimal import Decimal
from typing import List, Optional, Sequence

import pandas as pd
import plotly.graph_objects as go

from modules.tax.engine import compute
from modules.tax.models import BracketSlice, BreakdownEntry, SimulationInput
from utils.formatting import format_amount, format_currency, format_percent
from utils.logging_config import setup_logger

logger = setup_logger(__name__)

# Turquoise for the net amount, red for the duties
NET_COLOR = '#00FFD2'
TAX_COLOR = '#ef4444'
BREAKDOWN_COLORS = [NET_COLOR, TAX_COLOR]


def create_breakdown_donut(
    entries: Sequence[BreakdownEntry],
    title: Optional[str] = None,
    compact_mode: bool = False
) -> go.Figure:
    """
    Donut chart of the net amount received vs the duties to pay.

    Args:
        entries: Output of `engine.breakdown()` (one entry when exempt)
        compact_mode: Smaller height and margins for narrow columns
    """
    if not entries or sum(e.value for e in entries) <= 0:
        return go.Figure()

    labels = [e.label for e in entries]
    values = [float(e.value) for e in entries]
    hover_text = [format_currency(e.value) for e in entries]

    fig = go.Figure(data=[go.Pie(
        labels=labels,
        values=values,
        hole=0.6,
        customdata=hover_text,
        hovertemplate='<b>%{label}</b><br>%{customdata}<br>%{percent}<extra></extra>',
        textinfo='percent',
        sort=False,
        marker=dict(
            colors=BREAKDOWN_COLORS[:len(entries)],
            line=dict(color='#1e293b', width=3)
        )
    )])

    title_dict = dict(text="") if not title else dict(text=title, x=0, font=dict(size=16, color="#e6e6e6"))

    fig.update_layout(
        title=title_dict,
        showlegend=True,
        legend=dict(
            orientation="h",
            yanchor="top",
            y=-0.05,
            xanchor="center",
            x=0.5,
            font=dict(color='#cbd5e1', size=11),
            bgcolor='rgba(0,0,0,0)',
        ),
        height=240 if compact_mode else 320,
        margin=dict(t=30 if title else 10, b=40, l=10, r=10),
        paper_bgcolor='rgba(0,0,0,0)',
        plot_bgcolor='rgba(0,0,0,0)',
    )

    return fig


def bracket_table(slices: Sequence[BracketSlice]) -> pd.DataFrame:
    """Calculation detail as a display table, one row per bracket reached."""
    columns = ["Tranche", "Taux", "Montant taxé", "Droits"]
    if not slices:
        return pd.DataFrame(columns=columns)

    rows = []
    for s in slices:
        if s.is_unbounded:
            tranche = f"au-delà de {format_amount(s.lower_bound)}"
        else:
            tranche = f"{format_amount(s.lower_bound)} – {format_amount(s.upper_bound)}"
        rows.append({
            "Tranche": tranche,
            "Taux": format_percent(s.rate),
            "Montant taxé": format_currency(s.taxed_amount),
            "Droits": format_currency(s.tax),
        })

    return pd.DataFrame(rows, columns=columns)


def build_tax_curve_frame(
    simulation_input: SimulationInput,
    max_amount: Decimal,
    step: Decimal
) -> pd.DataFrame:
    """
    Duties as a function of the transferred amount, other parameters fixed.

    Returns:
        DataFrame with 'amount', 'tax_due' and 'net' columns (floats, for plotting)
    """
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")

    amounts: List[Decimal] = []
    amount = Decimal(0)
    while amount <= max_amount:
        amounts.append(amount)
        amount += step

    results = [compute(replace(simulation_input, transfer_amount=a)) for a in amounts]
    logger.debug(f"Tax curve: {len(amounts)} points up to {max_amount}")

    return pd.DataFrame({
        'amount': [float(a) for a in amounts],
        'tax_due': [float(r.tax_due) for r in results],
        'net': [float(r.net_amount_received) for r in results],
    })


def create_tax_curve_chart(
    curve: pd.DataFrame,
    current_amount: Optional[Decimal] = None,
    title: Optional[str] = "Droits selon le montant transmis"
) -> go.Figure:
    """Line chart of duties vs transferred amount, with the current simulation marked."""
    if curve.empty:
        return go.Figure()

    fig = go.Figure()

    fig.add_trace(go.Scatter(
        x=curve['amount'],
        y=curve['tax_due'],
        name='Droits à payer',
        mode='lines',
        line=dict(color=TAX_COLOR, width=3),
        fill='tozeroy',
        fillcolor='rgba(239, 68, 68, 0.12)',
        hovertemplate='%{x:,.0f} € → <b>%{y:,.0f} €</b><extra></extra>'
    ))

    if current_amount is not None:
        fig.add_vline(
            x=float(current_amount),
            line=dict(color=NET_COLOR, width=2, dash='dot'),
        )

    fig.update_layout(
        title=dict(text=title or "", x=0, font=dict(size=16, color="#e6e6e6")),
        showlegend=False,
        height=300,
        margin=dict(t=40 if title else 10, b=30, l=10, r=10),
        paper_bgcolor='rgba(0,0,0,0)',
        plot_bgcolor='rgba(0,0,0,0)',
        xaxis=dict(gridcolor='rgba(148,163,184,0.15)', color='#94a3b8', ticksuffix=' €'),
        yaxis=dict(gridcolor='rgba(148,163,184,0.15)', color='#94a3b8', ticksuffix=' €'),
        separators=', ',
    )

    return fig
