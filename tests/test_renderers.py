"""Tests for the itinerary section renderers and message composition."""

import unittest
from datetime import date, datetime
from types import SimpleNamespace

from backoffice.domain.travel.renderers import (
    EMPTY,
    compose_message,
    format_datetime,
    render_content_type,
    render_flight_section,
    render_full_itinerary,
    render_hotel_section,
)

ALICE = ("EMPLOYEE", 1)
BOB = ("STAKEHOLDER", 2)


def person(key):
    return SimpleNamespace(person_type=key[0], person_id=key[1])


def flight(**overrides):
    values = dict(
        airline="BA",
        flight_number="117",
        departure_airport="LHR",
        arrival_airport="JFK",
        departure_date=datetime(2025, 3, 1, 9, 30),
        booking_reference="ABC123",
        passengers=[person(ALICE)],
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def hotel(assigned=(ALICE,), **overrides):
    values = dict(
        hotel_name="The Plaza",
        city="New York",
        country="USA",
        check_in_date=date(2025, 3, 1),
        check_out_date=None,
        rooms=[SimpleNamespace(assignments=[person(k) for k in assigned])],
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def event(**overrides):
    values = dict(
        event_name="Board Dinner",
        event_type="DINNER",
        event_date=date(2025, 3, 2),
        location="The Grill",
        start_time="19:00",
        end_time="22:00",
        participants=[person(ALICE)],
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def trip(flights=(), hotels=(), events=(), private_jets=()):
    return SimpleNamespace(
        request_number="TR-2025-001",
        trip_start_date=date(2025, 3, 1),
        trip_end_date=None,
        flights=list(flights),
        hotels=list(hotels),
        events=list(events),
        private_jets=list(private_jets),
    )


class FormatDatetimeTests(unittest.TestCase):
    def test_missing_value_is_tbd(self):
        self.assertEqual(format_datetime(None), "TBD")

    def test_dates_and_datetimes(self):
        self.assertEqual(format_datetime(date(2025, 3, 1)), "2025-03-01")
        self.assertEqual(format_datetime(datetime(2025, 3, 1, 9, 5)), "2025-03-01 09:05")


class SectionTests(unittest.TestCase):
    def test_flight_section_text(self):
        content = render_flight_section([flight()], ALICE)

        self.assertEqual(
            content.text,
            "--- FLIGHT DETAILS ---\nBA 117 - LHR to JFK\nDeparture: 2025-03-01 09:30\nBooking Ref: ABC123\n\n",
        )
        self.assertTrue(content.chat.startswith("*FLIGHT DETAILS*\nBA 117 - LHR to JFK\n"))
        self.assertIn("<h3>Flight Details</h3>", content.html)
        self.assertIn("<strong>BA 117</strong> - LHR to JFK", content.html)

    def test_missing_booking_reference_and_date(self):
        content = render_flight_section([flight(booking_reference=None, departure_date=None)], ALICE)

        self.assertIn("Departure: TBD\n", content.text)
        self.assertIn("Booking Ref: N/A\n", content.text)

    def test_only_linked_items_are_listed(self):
        content = render_flight_section([flight(), flight(flight_number="999", passengers=[person(BOB)])], ALICE)

        self.assertIn("BA 117", content.text)
        self.assertNotIn("BA 999", content.text)

    def test_section_without_linked_items_keeps_header(self):
        content = render_hotel_section([hotel(assigned=(BOB,))], ALICE)

        self.assertEqual(content.text, "--- HOTEL DETAILS ---\n")
        self.assertEqual(content.html, "<h3>Hotel Details</h3><ul></ul>")
        self.assertEqual(content.chat, "*HOTEL DETAILS*\n")

    def test_hotel_check_out_is_tbd(self):
        content = render_hotel_section([hotel()], ALICE)

        self.assertIn("The Plaza - New York, USA\n", content.text)
        self.assertIn("Check-in: 2025-03-01\nCheck-out: TBD\n", content.text)

    def test_html_escapes_user_values(self):
        content = render_content_type("EVENT_DETAILS", trip(events=[event(event_name="<b>Gala</b>")]), ALICE)

        self.assertIn("&lt;b&gt;Gala&lt;/b&gt;", content.html)
        self.assertNotIn("<b>Gala</b>", content.html)
        self.assertIn("<b>Gala</b> (DINNER)", content.text)


class ContentTypeTests(unittest.TestCase):
    def test_section_is_omitted_when_trip_has_none(self):
        self.assertEqual(render_content_type("HOTEL_DETAILS", trip(flights=[flight()]), ALICE), EMPTY)

    def test_types_without_a_body_render_nothing(self):
        full_trip = trip(flights=[flight()], hotels=[hotel()], events=[event()])
        for content_type in ("TRIP_BRIEF", "PASSENGER_LIST", "CUSTOM", "SOMETHING_ELSE"):
            self.assertEqual(render_content_type(content_type, full_trip, ALICE), EMPTY)

    def test_full_itinerary_skips_missing_sections(self):
        content = render_full_itinerary(trip(flights=[flight()], events=[event()]), ALICE)

        self.assertTrue(
            content.text.startswith("--- COMPLETE ITINERARY ---\nTrip: TR-2025-001\nDates: 2025-03-01 - TBD\n\n")
        )
        self.assertIn("--- FLIGHT DETAILS ---", content.text)
        self.assertIn("--- EVENTS & ACTIVITIES ---", content.text)
        self.assertNotIn("HOTEL DETAILS", content.text)
        self.assertLess(content.text.index("FLIGHT DETAILS"), content.text.index("EVENTS & ACTIVITIES"))

    def test_full_itinerary_leaves_out_private_jets(self):
        jet = SimpleNamespace(
            aircraft_type="G650", operator=None, departure_airport="TEB",
            arrival_airport="PBI", departure_date=None, passengers=[person(ALICE)],
        )
        content = render_full_itinerary(trip(private_jets=[jet]), ALICE)

        self.assertNotIn("PRIVATE JET", content.text)
        self.assertIn("PRIVATE JET DETAILS", render_content_type("PRIVATE_JET_DETAILS", trip(private_jets=[jet]), ALICE).text)


class ComposeMessageTests(unittest.TestCase):
    def test_subject_and_envelope(self):
        message = compose_message(trip(flights=[flight()]), ALICE, "Alice Smith", ["FLIGHT_DETAILS"])

        self.assertEqual(message.subject, "Travel Details - TR-2025-001")
        self.assertTrue(
            message.text.startswith(
                "Dear Alice Smith,\n\nHere are your travel details for request TR-2025-001:\n\n--- FLIGHT DETAILS ---"
            )
        )
        self.assertTrue(message.text.endswith("Best regards,\nTravel Management Team"))
        self.assertTrue(message.chat.startswith("*Travel Details - TR-2025-001*\n\nDear Alice Smith,\n\n*FLIGHT DETAILS*"))
        self.assertTrue(message.html.startswith("<html><body"))
        self.assertTrue(message.html.endswith("</body></html>"))

    def test_custom_message_appears_in_every_format(self):
        message = compose_message(
            trip(flights=[flight()]), ALICE, "Alice", ["FLIGHT_DETAILS"],
            custom_message="See you soon\n<Bring ID>", signature="Ops Desk",
        )

        self.assertIn("Dear Alice,\n\nSee you soon\n<Bring ID>\n\n", message.text)
        self.assertIn("See you soon\n<Bring ID>\n\n", message.chat)
        self.assertIn("<p>See you soon<br>&lt;Bring ID&gt;</p>", message.html)
        self.assertTrue(message.chat.endswith("Best regards,\nOps Desk"))

    def test_sections_follow_requested_order(self):
        message = compose_message(
            trip(flights=[flight()], events=[event()]), ALICE, "Alice", ["EVENT_DETAILS", "FLIGHT_DETAILS"]
        )

        self.assertLess(message.text.index("EVENTS & ACTIVITIES"), message.text.index("FLIGHT DETAILS"))

    def test_formats_carry_the_same_facts(self):
        message = compose_message(
            trip(flights=[flight()], hotels=[hotel()], events=[event()]), ALICE, "Alice", ["FULL_ITINERARY"]
        )

        for fact in ("BA 117", "The Plaza", "Board Dinner", "19:00 - 22:00", "2025-03-01 09:30"):
            self.assertIn(fact, message.text)
            self.assertIn(fact, message.html)
            self.assertIn(fact, message.chat)


if __name__ == "__main__":
    unittest.main()
