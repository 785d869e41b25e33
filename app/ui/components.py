# -----------------------------------------------------------------------------
# (c) 2026 Andreas Wagner. All Rights Reserved.
#
# This code is part of the Succession Simulator project.
# Unauthorized usage or distribution is not permitted.
# -----------------------------------------------------------------------------

"""
Reusable UI Components
"""

import html

from modules.tax.models import SimulationResult
from utils.formatting import format_amount, format_currency, format_percent

DISCLAIMER_TEXT = (
    "Ce simulateur fournit une estimation basée sur les barèmes fiscaux en vigueur et ne prend pas "
    "en compte toutes les spécificités individuelles (abattements spéciaux, passif successoral, etc.). "
    "Les résultats sont donnés à titre indicatif et non contractuel. Pour une analyse personnalisée, "
    "consultez un de nos conseillers."
)


def render_header(title, subtitle):
    return (
        '<div class="sim-header">'
        f'<h1>{html.escape(title)}</h1>'
        f'<p>{html.escape(subtitle)}</p>'
        '</div>'
    )


def render_result_cards(result: SimulationResult, marginal_rate=None):
    """
    Net amount and duties as stacked cards, plus a line with the allowance,
    taxable base and rates.
    """
    cards = [
        ("Montant net reçu", format_currency(result.net_amount_received), ""),
        ("Droits à payer", format_currency(result.tax_due), " danger"),
    ]

    items_html = ""
    for label, value, extra_class in cards:
        items_html += f'<div class="result-card{extra_class}">'
        items_html += f'<div class="result-label">{label}</div>'
        items_html += f'<div class="result-value">{value}</div>'
        items_html += '</div>'

    meta = [
        f"Abattement appliqué : {format_amount(result.allowance_applied)}",
        f"Base taxable : {format_amount(result.taxable_base)}",
        f"Taux moyen : {format_percent(result.effective_rate)}",
    ]
    if marginal_rate is not None:
        meta.append(f"Taux marginal : {format_percent(marginal_rate)}")

    # Flatten to one line so Markdown does not treat indentation as a code block
    return (
        '<div class="result-grid">' + items_html + '</div>'
        + '<div class="result-meta">' + " · ".join(meta) + '</div>'
    )


def render_exemption_notice():
    return (
        '<div class="exemption-box">'
        '<div class="title">Exonération Totale</div>'
        '<p>En tant que conjoint ou partenaire de PACS, vous êtes totalement exonéré(e) '
        'de droits de succession.</p>'
        '</div>'
    )


def render_disclaimer():
    return (
        '<div class="disclaimer">'
        '<h3>Avertissement</h3>'
        f'<p>{DISCLAIMER_TEXT}</p>'
        '</div>'
    )
