"""
Simulation E-mail Service

Sends a summary of a succession/donation simulation to the user through the
Resend HTTP API.

Features:
- Localized (fr-FR) summary payload built from a SimulationResult
- Recipient validation before any network call
- Failures reported as a transient DeliveryStatus, never raised

API Documentation: https://resend.com/docs/api-reference/emails/send-email
"""

import html
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

import requests

from modules.tax.models import SimulationResult
from utils.formatting import format_amount, format_currency
from utils.logging_config import get_perf_logger, setup_logger, simulation_context
from utils.settings import MailerSettings

logger = setup_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

SUBJECT = "Votre simulation de droits de succession"

MESSAGE_INVALID_ADDRESS = "Veuillez saisir une adresse e-mail valide."
MESSAGE_SENT = "Votre simulation a bien été envoyée à {email}."
MESSAGE_FAILED = "Une erreur est survenue. Veuillez réessayer."

DISCLAIMER = (
    "Les informations et résultats fournis par ce simulateur sont donnés à titre indicatif "
    "et non contractuel. Ils sont basés sur les hypothèses de calcul et les paramètres que "
    "vous avez renseignés et ne constituent pas un conseil en investissement."
)


class DeliveryError(RuntimeError):
    """Raised internally when the mail API cannot accept a message."""
    pass


class DeliveryOutcome(str, Enum):
    SENT = "sent"
    INVALID_ADDRESS = "invalid_address"
    FAILED = "failed"


@dataclass(frozen=True)
class DeliveryStatus:
    """User-facing result of a send attempt. Never invalidates the simulation."""

    outcome: DeliveryOutcome
    message: str
    message_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is DeliveryOutcome.SENT


def is_valid_email(address: Optional[str]) -> bool:
    """True for 'local@domain.tld'-shaped addresses without whitespace."""
    if not address:
        return False
    return EMAIL_PATTERN.match(address.strip()) is not None


def build_summary_payload(result: SimulationResult) -> Dict[str, object]:
    """
    Summary sent to the mail template: parameters and results as fr-FR strings.

    Whole-euro inputs render as '300 000 €'; duties and net amount always carry
    two decimals ('38 194,35 €').
    """
    simulation_input = result.simulation_input
    return {
        "objectifs": {
            "typeTransmission": simulation_input.transmission_type.label,
            "lienParente": simulation_input.relationship_category.label,
            "montantTransmis": format_amount(simulation_input.transfer_amount),
            "donationsAnterieures": format_amount(simulation_input.prior_gifts_amount),
        },
        "resultats": {
            "droitsAPayer": format_currency(result.tax_due),
            "montantNet": format_currency(result.net_amount_received),
            "abattementApplique": format_amount(result.allowance_applied),
            "baseTaxable": format_amount(result.taxable_base),
        },
        "exoneration": result.exempt,
    }


def render_email_html(payload: Dict[str, object]) -> str:
    """Render the HTML body for a summary payload."""
    objectifs = {k: html.escape(str(v)) for k, v in payload["objectifs"].items()}
    resultats = {k: html.escape(str(v)) for k, v in payload["resultats"].items()}

    if payload.get("exoneration"):
        results_html = (
            '<div style="background-color: #f0fdf4; border-radius: 8px; padding: 20px; text-align: center;">'
            '<p style="font-size: 16px; font-weight: bold; color: #16a34a;">'
            "Exonération totale des droits de succession pour le conjoint ou partenaire de PACS."
            "</p></div>"
        )
    else:
        results_html = (
            '<div style="background-color: #f7f7f7; border-radius: 8px; padding: 20px; text-align: center;">'
            '<p style="margin: 0; font-size: 16px;">Le montant des droits à payer est estimé à :</p>'
            f'<p style="font-size: 24px; font-weight: bold; color: #b91c1c; margin: 10px 0;">{resultats["droitsAPayer"]}</p>'
            '<p style="font-size: 14px; color: #555; margin: 0;">'
            f'Le montant net reçu serait de <strong>{resultats["montantNet"]}</strong> '
            f'(après un abattement de {resultats["abattementApplique"]}).</p>'
            "</div>"
        )

    body = f"""
        <p>Merci d'avoir utilisé notre simulateur. Voici le résumé de votre simulation de droits de transmission :</p>
        <h3 style="color: #333;">Vos paramètres :</h3>
        <ul style="list-style-type: none; border-left: 3px solid #00FFD2; padding-left: 15px;">
            <li><strong>Type de transmission :</strong> {objectifs["typeTransmission"]}</li>
            <li><strong>Lien de parenté :</strong> {objectifs["lienParente"]}</li>
            <li><strong>Montant transmis :</strong> {objectifs["montantTransmis"]}</li>
            <li><strong>Donations antérieures (- de 15 ans) :</strong> {objectifs["donationsAnterieures"]}</li>
        </ul>
        <h3 style="color: #333;">Résultats de votre projet :</h3>
        {results_html}
        <p style="margin-top: 25px;">Pour une analyse complète et des conseils adaptés à votre situation, n'hésitez pas à nous contacter.</p>
        <br>
        <p>Cordialement,</p>
        <p><strong>L'équipe Aeternia Patrimoine</strong></p>
    """

    return f"""
        <div style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: auto; border: 1px solid #eee; padding: 20px;">
          <h2 style="color: #333;">Bonjour,</h2>
          {body}
          <hr style="border: none; border-top: 1px solid #eee; margin-top: 20px;">
          <p style="font-size: 10px; color: #777; text-align: center; margin-top: 20px;">{DISCLAIMER}</p>
        </div>
    """


class SimulationMailer:
    """
    Delivers simulation summaries through the Resend API.

    `send()` is the only public entry point: it validates the address, posts
    the message and turns every outcome into a DeliveryStatus.
    """

    def __init__(self, settings: Optional[MailerSettings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or MailerSettings.load()
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": "SuccessionSimulator/1.0",
            "Accept": "application/json",
        })

    def send(self, email: str, result: SimulationResult) -> DeliveryStatus:
        """
        E-mail the summary of `result` to `email`.

        Returns:
            DeliveryStatus with a message suitable for display
        """
        if not is_valid_email(email):
            logger.info("Rejected malformed recipient address")
            return DeliveryStatus(DeliveryOutcome.INVALID_ADDRESS, MESSAGE_INVALID_ADDRESS)

        recipient = email.strip()
        payload = build_summary_payload(result)
        message = {
            "from": self.settings.sender,
            "to": [recipient],
            "bcc": list(self.settings.bcc),
            "subject": SUBJECT,
            "html": render_email_html(payload),
        }

        try:
            message_id = self._post(message)
        except DeliveryError as e:
            logger.warning(f"Simulation e-mail not delivered: {e}")
            return DeliveryStatus(DeliveryOutcome.FAILED, MESSAGE_FAILED)

        logger.info(
            "Simulation e-mail sent",
            extra=simulation_context(id=message_id, type=payload["objectifs"]["typeTransmission"]),
        )
        return DeliveryStatus(DeliveryOutcome.SENT, MESSAGE_SENT.format(email=recipient), message_id)

    def _post(self, message: Dict[str, object]) -> Optional[str]:
        """POST one message; returns the provider's message id."""
        if not self.settings.is_configured:
            raise DeliveryError("RESEND_API_KEY is not configured")

        headers = {"Authorization": f"Bearer {self.settings.api_key}"}

        try:
            with get_perf_logger(logger, "send_simulation_email", threshold_ms=3000):
                response = self.session.post(
                    self.settings.api_url,
                    json=message,
                    headers=headers,
                    timeout=self.settings.timeout_seconds,
                )
                response.raise_for_status()
        except requests.Timeout as e:
            raise DeliveryError(f"Mail API timed out after {self.settings.timeout_seconds}s") from e
        except requests.RequestException as e:
            raise DeliveryError(f"Mail API request failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            logger.debug("Mail API returned a non-JSON body")
            return None

        if not isinstance(body, dict):
            logger.debug(f"Mail API returned an unexpected body: {type(body).__name__}")
            return None
        return body.get("id")
