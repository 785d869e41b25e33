"""
Succession & Donation Simulator - Streamlit Application

Estimates French transfer duties (droits de succession et de donation):
- Transmission type and relationship selection
- Allowance reduction by prior gifts (15-year lookback)
- Net/duties breakdown chart and per-bracket detail
- E-mail summary of the simulation
"""

from decimal import Decimal

import streamlit as st

from app.ui.components import (
    render_disclaimer,
    render_exemption_notice,
    render_header,
    render_result_cards,
)
from app.ui.styles import APP_STYLE
from charts.visualizations import (
    bracket_table,
    build_tax_curve_frame,
    create_breakdown_donut,
    create_tax_curve_chart,
)
from modules.tax.engine import breakdown, calculation_details, compute, marginal_rate
from modules.tax.inputs import parse_simulation_request
from modules.tax.models import RelationshipCategory, SimulationError, TransmissionType
from modules.tax.schedules import describe_schedule, get_profile, list_categories
from services.simulation_mailer import SimulationMailer
from utils.formatting import format_amount
from utils.logging_config import setup_logger

logger = setup_logger(__name__)

# Slider ranges (€)
TRANSFER_MIN, TRANSFER_MAX, TRANSFER_STEP = 10_000, 2_000_000, 10_000
PRIOR_GIFTS_MIN, PRIOR_GIFTS_MAX, PRIOR_GIFTS_STEP = 0, 200_000, 1_000

DEFAULTS = {
    "transmission_type": TransmissionType.INHERITANCE,
    "relationship_category": RelationshipCategory.CHILD,
    "transfer_amount": Decimal(300_000),
    "prior_gifts_amount": Decimal(0),
}

SOLUTIONS_URL = "https://www.aeterniapatrimoine.fr/solutions/"
CONTACT_URL = "https://www.aeterniapatrimoine.fr/contact/"


@st.cache_resource
def get_mailer() -> SimulationMailer:
    return SimulationMailer()


def initial_parameters() -> dict:
    """
    Starting values: shared links carry the parameters in the query string,
    anything missing or invalid falls back to the defaults.
    """
    params = dict(DEFAULTS)
    query = {k: st.query_params[k] for k in DEFAULTS if k in st.query_params}
    if not query:
        return params

    try:
        parsed = parse_simulation_request({**DEFAULTS, **query})
    except SimulationError as e:
        logger.warning(f"Ignoring invalid query parameters {query}: {e}")
        return params

    params.update(
        transmission_type=parsed.transmission_type,
        relationship_category=parsed.relationship_category,
        transfer_amount=parsed.transfer_amount,
        prior_gifts_amount=parsed.prior_gifts_amount,
    )
    return params


def _clamp_to_slider(value: Decimal, low: int, high: int) -> int:
    return int(min(max(value, low), high))


def seed_widget_state():
    """
    Give every input widget its starting value once per session. Widgets are
    keyed and never get a `value=`/`index=`, so later reruns keep whatever the
    user picked.
    """
    missing = [key for key in DEFAULTS if key not in st.session_state]
    if not missing:
        return

    start = initial_parameters()
    start["transfer_amount"] = _clamp_to_slider(start["transfer_amount"], TRANSFER_MIN, TRANSFER_MAX)
    start["prior_gifts_amount"] = _clamp_to_slider(start["prior_gifts_amount"], PRIOR_GIFTS_MIN, PRIOR_GIFTS_MAX)

    for key in missing:
        st.session_state[key] = start[key]


st.set_page_config(
    page_title="Simulateur de Droits de Succession et Donation",
    page_icon="⚖️",
    layout="wide",
    initial_sidebar_state="collapsed"
)

st.markdown(APP_STYLE, unsafe_allow_html=True)
st.markdown(
    render_header(
        "Simulateur de Droits de Succession et Donation",
        "Estimez les frais de transmission de votre patrimoine.",
    ),
    unsafe_allow_html=True,
)

seed_widget_state()
col_inputs, col_results = st.columns([2, 3], gap="large")

# ==================== INPUTS ====================
with col_inputs:
    st.markdown('<div class="section-title">Votre Situation</div>', unsafe_allow_html=True)

    transmission_types = list(TransmissionType)
    transmission_type = st.radio(
        "Type de transmission",
        options=transmission_types,
        format_func=lambda t: t.label,
        horizontal=True,
        key="transmission_type",
    )

    categories = list_categories()
    relationship_category = st.selectbox(
        "Lien de parenté avec le bénéficiaire",
        options=categories,
        format_func=lambda c: c.label,
        key="relationship_category",
    )

    transfer_amount = st.slider(
        "Montant à transmettre (€)",
        min_value=TRANSFER_MIN,
        max_value=TRANSFER_MAX,
        step=TRANSFER_STEP,
        key="transfer_amount",
    )
    st.caption(format_amount(transfer_amount))

    prior_gifts_amount = st.slider(
        "Donations antérieures (- de 15 ans) (€)",
        min_value=PRIOR_GIFTS_MIN,
        max_value=PRIOR_GIFTS_MAX,
        step=PRIOR_GIFTS_STEP,
        key="prior_gifts_amount",
    )
    st.caption(format_amount(prior_gifts_amount))

    profile = get_profile(relationship_category)
    with st.expander("Barème applicable", expanded=False):
        st.markdown(f"**Abattement :** {format_amount(profile.allowance)}")
        for line in describe_schedule(profile.brackets):
            st.markdown(f"- {line}")
        if profile.note:
            st.caption(profile.note)

# Keep the URL shareable
st.query_params.update({
    "transmission_type": transmission_type.value,
    "relationship_category": relationship_category.value,
    "transfer_amount": str(transfer_amount),
    "prior_gifts_amount": str(prior_gifts_amount),
})

# ==================== RESULTS ====================
with col_results:
    st.markdown('<div class="section-title">Estimation des droits à payer</div>', unsafe_allow_html=True)

    try:
        simulation_input = parse_simulation_request({
            "transmission_type": transmission_type,
            "relationship_category": relationship_category,
            "transfer_amount": transfer_amount,
            "prior_gifts_amount": prior_gifts_amount,
        })
        result = compute(simulation_input)
    except SimulationError as e:
        logger.error(f"Simulation failed: {e}", exc_info=True)
        st.error(f"Simulation impossible : {e}")
        st.stop()

    if result.exempt:
        st.markdown(render_exemption_notice(), unsafe_allow_html=True)
    else:
        card_col, chart_col = st.columns(2)
        with card_col:
            st.markdown(
                render_result_cards(result, marginal_rate(result.taxable_base, profile.brackets)),
                unsafe_allow_html=True,
            )
        with chart_col:
            st.plotly_chart(
                create_breakdown_donut(breakdown(result), compact_mode=True),
                width="stretch",
                config={'displayModeBar': False},
            )

        with st.expander("Détail du calcul", expanded=False):
            st.dataframe(bracket_table(calculation_details(result)), hide_index=True, width="stretch")
            curve = build_tax_curve_frame(simulation_input, Decimal(TRANSFER_MAX), Decimal(TRANSFER_STEP * 5))
            st.plotly_chart(
                create_tax_curve_chart(curve, current_amount=simulation_input.transfer_amount),
                width="stretch",
                config={'displayModeBar': False},
            )

    # ==================== E-MAIL & CTA ====================
    st.divider()
    st.markdown("#### Optimisez votre transmission")

    with st.form("email_form", clear_on_submit=True):
        email_col, button_col = st.columns([3, 1])
        with email_col:
            email = st.text_input(
                "Votre adresse e-mail",
                placeholder="Votre adresse e-mail",
                label_visibility="collapsed",
                key="email",
            )
        with button_col:
            submitted = st.form_submit_button("Recevoir la simulation", key="send_simulation", width="stretch")

    if submitted:
        with st.spinner("Envoi..."):
            status = get_mailer().send(email, result)
        # Transient message: the simulation above stays valid whatever happens here
        st.toast(status.message, icon="✅" if status.ok else "⚠️")

    cta_left, cta_right = st.columns(2)
    with cta_left:
        st.link_button("Découvrir nos solutions", SOLUTIONS_URL, type="primary", width="stretch")
    with cta_right:
        st.link_button("Prendre rendez-vous", CONTACT_URL, width="stretch")

st.markdown(render_disclaimer(), unsafe_allow_html=True)
