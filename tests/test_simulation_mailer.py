"""
Tests for the simulation e-mail service.

The Resend API is never called: a mocked requests session records the posts.
"""

import pytest
import requests
from decimal import Decimal
from unittest.mock import MagicMock

from modules.tax.engine import simulate
from services.simulation_mailer import (
    MESSAGE_FAILED,
    MESSAGE_INVALID_ADDRESS,
    SUBJECT,
    DeliveryOutcome,
    SimulationMailer,
    build_summary_payload,
    is_valid_email,
    render_email_html,
)
from utils.settings import MailerSettings


@pytest.fixture
def settings():
    return MailerSettings(
        api_key="re_test_key",
        sender="Aeternia Patrimoine <contact@aeterniapatrimoine.fr>",
        bcc=("contact@aeterniapatrimoine.fr",),
        api_url="https://api.resend.test/emails",
        timeout_seconds=5.0,
    )


@pytest.fixture
def session():
    session = MagicMock()
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.json.return_value = {"id": "msg_123"}
    session.post.return_value = response
    return session


@pytest.fixture
def taxed_result():
    return simulate("gift", "child", 300000, 0)


@pytest.fixture
def exempt_result():
    return simulate("inheritance", "spouse", 500000, 0)


class TestEmailValidation:

    @pytest.mark.parametrize("address", [
        "client@example.com",
        "prenom.nom@domaine.fr",
        "  padded@example.org  ",
    ])
    def test_valid(self, address):
        assert is_valid_email(address)

    @pytest.mark.parametrize("address", [
        "",
        None,
        "no-at-sign.com",
        "user@domain",
        "user@@domain.com",
        "two words@example.com",
        "user@exa mple.com",
    ])
    def test_invalid(self, address):
        assert not is_valid_email(address)


class TestSummaryPayload:

    def test_taxed_payload(self, taxed_result):
        payload = build_summary_payload(taxed_result)

        assert payload["objectifs"] == {
            "typeTransmission": "Donation",
            "lienParente": "Enfant (ligne directe)",
            "montantTransmis": "300\u202f000\u00a0€",
            "donationsAnterieures": "0\u00a0€",
        }
        assert payload["resultats"]["droitsAPayer"] == "38\u202f194,35\u00a0€"
        assert payload["resultats"]["montantNet"] == "261\u202f805,65\u00a0€"
        assert payload["resultats"]["abattementApplique"] == "100\u202f000\u00a0€"
        assert payload["resultats"]["baseTaxable"] == "200\u202f000\u00a0€"
        assert payload["exoneration"] is False

    def test_exempt_payload(self, exempt_result):
        payload = build_summary_payload(exempt_result)

        assert payload["exoneration"] is True
        assert payload["objectifs"]["typeTransmission"] == "Succession"
        assert payload["resultats"]["droitsAPayer"] == "0,00\u00a0€"

    def test_taxed_html_shows_duties(self, taxed_result):
        body = render_email_html(build_summary_payload(taxed_result))

        assert "38\u202f194,35\u00a0€" in body
        assert "Exonération totale" not in body

    def test_exempt_html_shows_exemption(self, exempt_result):
        body = render_email_html(build_summary_payload(exempt_result))

        assert "Exonération totale" in body
        assert "droits à payer est estimé" not in body

    def test_html_escapes_values(self, taxed_result):
        payload = build_summary_payload(taxed_result)
        payload["objectifs"]["lienParente"] = "<script>alert(1)</script>"

        body = render_email_html(payload)

        assert "<script>" not in body
        assert "&lt;script&gt;" in body


class TestSimulationMailer:

    def test_sends_through_api(self, settings, session, taxed_result):
        mailer = SimulationMailer(settings=settings, session=session)

        status = mailer.send("client@example.com", taxed_result)

        assert status.ok
        assert status.outcome is DeliveryOutcome.SENT
        assert status.message == "Votre simulation a bien été envoyée à client@example.com."
        assert status.message_id == "msg_123"

        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        assert args[0] == "https://api.resend.test/emails"
        assert kwargs["headers"]["Authorization"] == "Bearer re_test_key"
        assert kwargs["timeout"] == 5.0
        message = kwargs["json"]
        assert message["to"] == ["client@example.com"]
        assert message["bcc"] == ["contact@aeterniapatrimoine.fr"]
        assert message["subject"] == SUBJECT
        assert "38\u202f194,35\u00a0€" in message["html"]

    def test_recipient_is_trimmed(self, settings, session, taxed_result):
        SimulationMailer(settings=settings, session=session).send("  client@example.com ", taxed_result)

        assert session.post.call_args.kwargs["json"]["to"] == ["client@example.com"]

    def test_invalid_address_skips_network(self, settings, session, taxed_result):
        status = SimulationMailer(settings=settings, session=session).send("not-an-address", taxed_result)

        assert not status.ok
        assert status.outcome is DeliveryOutcome.INVALID_ADDRESS
        assert status.message == MESSAGE_INVALID_ADDRESS
        session.post.assert_not_called()

    def test_http_error_reports_failure(self, settings, session, taxed_result):
        session.post.return_value.raise_for_status.side_effect = requests.HTTPError("500 Server Error")

        status = SimulationMailer(settings=settings, session=session).send("client@example.com", taxed_result)

        assert status.outcome is DeliveryOutcome.FAILED
        assert status.message == MESSAGE_FAILED

    def test_timeout_reports_failure(self, settings, session, taxed_result):
        session.post.side_effect = requests.Timeout()

        status = SimulationMailer(settings=settings, session=session).send("client@example.com", taxed_result)

        assert status.outcome is DeliveryOutcome.FAILED

    def test_unconfigured_key_reports_failure(self, session, taxed_result):
        mailer = SimulationMailer(settings=MailerSettings(api_key=None), session=session)

        status = mailer.send("client@example.com", taxed_result)

        assert status.outcome is DeliveryOutcome.FAILED
        session.post.assert_not_called()

    def test_non_json_response_still_counts_as_sent(self, settings, session, taxed_result):
        session.post.return_value.json.side_effect = ValueError("no json")

        status = SimulationMailer(settings=settings, session=session).send("client@example.com", taxed_result)

        assert status.ok
        assert status.message_id is None

    @pytest.mark.parametrize("body", [["msg_123"], "msg_123", None])
    def test_unexpected_json_body_still_counts_as_sent(self, settings, session, taxed_result, body):
        session.post.return_value.json.return_value = body

        status = SimulationMailer(settings=settings, session=session).send("client@example.com", taxed_result)

        assert status.ok
        assert status.message_id is None

    def test_failure_leaves_result_untouched(self, settings, session, taxed_result):
        session.post.side_effect = requests.ConnectionError()

        SimulationMailer(settings=settings, session=session).send("client@example.com", taxed_result)

        assert taxed_result.tax_due == Decimal("38194.35")
