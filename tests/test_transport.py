"""Tests for the email and WhatsApp delivery transport."""

import unittest
from unittest import mock
from urllib.parse import parse_qs

import httpx

from backoffice.email_service import send_email
from backoffice.services.notification_service import NotificationTransport
from backoffice.services.whatsapp_service import send_whatsapp
from backoffice.shared.validators import format_phone_number, has_phone_digits, whatsapp_address

TWILIO_BASE = "https://api.twilio.test/2010-04-01"


def twilio_transport(handler, **overrides):
    values = dict(
        resend_api_key="re_key",
        email_from="Travel <travel@example.com>",
        twilio_account_sid="AC123",
        twilio_auth_token="secret",
        whatsapp_from="+14155238886",
        twilio_base_url=TWILIO_BASE,
        http_transport=httpx.MockTransport(handler),
    )
    values.update(overrides)
    return NotificationTransport(**values)


class PhoneFormattingTests(unittest.TestCase):
    def test_national_number_gets_country_code(self):
        self.assertEqual(format_phone_number("(555) 123-4567", "+1"), "+15551234567")

    def test_international_number_is_only_cleaned(self):
        self.assertEqual(format_phone_number("+44 7700-900 123", "+1"), "+447700900123")

    def test_empty_is_returned_unchanged(self):
        self.assertIsNone(format_phone_number(None))
        self.assertEqual(format_phone_number(""), "")

    def test_placeholder_numbers_have_no_digits(self):
        self.assertTrue(has_phone_digits("(555) 123-4567"))
        for placeholder in (None, "", "-", "N/A"):
            self.assertFalse(has_phone_digits(placeholder))

    def test_whatsapp_prefix_is_added_once(self):
        self.assertEqual(whatsapp_address("+15551234567"), "whatsapp:+15551234567")
        self.assertEqual(whatsapp_address("whatsapp:+15551234567"), "whatsapp:+15551234567")

    def test_transport_uses_its_country_code(self):
        transport = NotificationTransport(default_country_code="+44")
        self.assertEqual(transport.format_phone_number("7700 900123"), "+447700900123")


class WhatsAppTests(unittest.IsolatedAsyncioTestCase):
    async def test_message_is_posted_to_twilio(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(201, json={"sid": "SM42", "status": "queued"})

        result = await twilio_transport(handler).send_chat("+15551234567", "*Travel Details*")

        self.assertTrue(result.success)
        self.assertEqual(result.message_id, "SM42")
        [request] = seen
        self.assertEqual(request.method, "POST")
        self.assertEqual(str(request.url), f"{TWILIO_BASE}/Accounts/AC123/Messages.json")
        self.assertTrue(request.headers["authorization"].startswith("Basic "))
        form = parse_qs(request.content.decode())
        self.assertEqual(form["From"], ["whatsapp:+14155238886"])
        self.assertEqual(form["To"], ["whatsapp:+15551234567"])
        self.assertEqual(form["Body"], ["*Travel Details*"])

    async def test_twilio_error_code_is_reported(self):
        def handler(request):
            return httpx.Response(400, json={"code": 63016, "message": "Outside the allowed window"})

        result = await twilio_transport(handler).send_chat("+15551234567", "hi")

        self.assertFalse(result.success)
        self.assertEqual(result.error, "Twilio error 63016: Outside the allowed window")

    async def test_error_without_json_body(self):
        def handler(request):
            return httpx.Response(503, text="Service Unavailable")

        result = await twilio_transport(handler).send_chat("+15551234567", "hi")

        self.assertFalse(result.success)
        self.assertEqual(result.error, "HTTP 503")

    async def test_network_error_is_a_failed_result(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = await send_whatsapp(
            to="+15551234567",
            message="hi",
            account_sid="AC123",
            auth_token="secret",
            from_number="whatsapp:+14155238886",
            base_url=TWILIO_BASE,
            http_transport=httpx.MockTransport(handler),
        )

        self.assertFalse(result.success)
        self.assertEqual(result.error, "connection refused")

    async def test_unconfigured_whatsapp(self):
        def handler(request):
            raise AssertionError("Twilio must not be called")

        result = await twilio_transport(handler, twilio_auth_token=None).send_chat("+15551234567", "hi")

        self.assertFalse(result.success)
        self.assertEqual(result.error, "WhatsApp service not configured")


class EmailTests(unittest.IsolatedAsyncioTestCase):
    async def test_email_is_sent_through_resend(self):
        with mock.patch("backoffice.email_service.resend.Emails.send", return_value={"id": "re_987"}) as send:
            result = await twilio_transport(lambda r: httpx.Response(500)).send_email(
                to="alice@example.com", subject="Travel Details - TR-1", html="<p>Hi</p>", text="Hi"
            )

        self.assertTrue(result.success)
        self.assertEqual(result.message_id, "re_987")
        payload = send.call_args.args[0]
        self.assertEqual(payload["from"], "Travel <travel@example.com>")
        self.assertEqual(payload["to"], ["alice@example.com"])
        self.assertEqual(payload["subject"], "Travel Details - TR-1")
        self.assertEqual(payload["text"], "Hi")

    async def test_text_part_is_optional(self):
        with mock.patch("backoffice.email_service.resend.Emails.send", return_value={"id": "re_1"}) as send:
            await send_email("alice@example.com", "Subject", "<p>Hi</p>", api_key="re_key")

        self.assertNotIn("text", send.call_args.args[0])

    async def test_resend_exception_is_a_failed_result(self):
        with mock.patch(
            "backoffice.email_service.resend.Emails.send", side_effect=RuntimeError("invalid api key")
        ):
            result = await send_email("alice@example.com", "Subject", "<p>Hi</p>", api_key="re_key")

        self.assertFalse(result.success)
        self.assertEqual(result.error, "invalid api key")

    async def test_unconfigured_email(self):
        transport = NotificationTransport(resend_api_key=None, email_from="travel@example.com")

        with mock.patch("backoffice.email_service.resend.Emails.send") as send:
            result = await transport.send_email("alice@example.com", "Subject", "<p>Hi</p>")

        send.assert_not_called()
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Email service not configured")


if __name__ == "__main__":
    unittest.main()
