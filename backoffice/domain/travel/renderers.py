"""
Itinerary content renderers

Every section renders into a RenderedContent triple (plain text, HTML and
WhatsApp markup) from the same list of items, so the three formats always
carry the same facts. Sections only list the items linked to the passenger
being messaged.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from functools import reduce
from operator import add
from typing import Callable, Optional

from ...utils.sanitization import sanitize_multiline, sanitize_string
from .schemas import (
    EVENT_DETAILS,
    FLIGHT_DETAILS,
    FULL_ITINERARY,
    HOTEL_DETAILS,
    PRIVATE_JET_DETAILS,
)

TBD = "TBD"

PassengerKey = tuple[str, int]  # (person_type, person_id)


@dataclass(frozen=True)
class RenderedContent:
    text: str = ""
    html: str = ""
    chat: str = ""

    def __add__(self, other: "RenderedContent") -> "RenderedContent":
        return RenderedContent(self.text + other.text, self.html + other.html, self.chat + other.chat)


EMPTY = RenderedContent()


@dataclass(frozen=True)
class ComposedMessage:
    subject: str
    text: str
    html: str
    chat: str


@dataclass(frozen=True)
class SectionItem:
    """One booking line: a bold title, a plain suffix and labelled details"""

    title: str
    suffix: str = ""
    details: list[tuple[str, str]] = field(default_factory=list)


def format_datetime(value) -> str:
    if value is None:
        return TBD
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    return str(value)


def _is_linked(linked_people, key: PassengerKey) -> bool:
    return any((p.person_type, p.person_id) == key for p in linked_people)


def render_section(heading: str, items: list[SectionItem]) -> RenderedContent:
    """Render a section header followed by its items; an empty list keeps the header"""
    text = f"--- {heading.upper()} ---\n"
    html = f"<h3>{sanitize_string(heading)}</h3><ul>"
    chat = f"*{heading.upper()}*\n"

    for item in items:
        lines = "".join(f"{label}: {value}\n" for label, value in item.details)
        text += f"{item.title}{item.suffix}\n{lines}\n"
        chat += f"{item.title}{item.suffix}\n{lines}\n"

        html_lines = "".join(
            f"<br>{sanitize_string(label)}: {sanitize_string(value)}" for label, value in item.details
        )
        html += (
            f"<li><strong>{sanitize_string(item.title)}</strong>{sanitize_string(item.suffix)}"
            f"{html_lines}</li>"
        )

    html += "</ul>"
    return RenderedContent(text, html, chat)


def render_flight_section(flights, key: PassengerKey) -> RenderedContent:
    items = [
        SectionItem(
            title=f"{flight.airline} {flight.flight_number}",
            suffix=f" - {flight.departure_airport} to {flight.arrival_airport}",
            details=[
                ("Departure", format_datetime(flight.departure_date)),
                ("Booking Ref", flight.booking_reference or "N/A"),
            ],
        )
        for flight in flights
        if _is_linked(flight.passengers, key)
    ]
    return render_section("Flight Details", items)


def render_private_jet_section(jets, key: PassengerKey) -> RenderedContent:
    items = []
    for jet in jets:
        if not _is_linked(jet.passengers, key):
            continue
        details = [("Departure", format_datetime(jet.departure_date))]
        if jet.operator:
            details.append(("Operator", jet.operator))
        items.append(
            SectionItem(
                title=jet.aircraft_type or "Private Jet",
                suffix=f" - {jet.departure_airport} to {jet.arrival_airport}",
                details=details,
            )
        )
    return render_section("Private Jet Details", items)


def render_hotel_section(hotels, key: PassengerKey) -> RenderedContent:
    items = []
    for hotel in hotels:
        assignments = [a for room in hotel.rooms for a in room.assignments]
        if not _is_linked(assignments, key):
            continue
        place = ", ".join(p for p in (hotel.city, hotel.country) if p)
        items.append(
            SectionItem(
                title=hotel.hotel_name,
                suffix=f" - {place}" if place else "",
                details=[
                    ("Check-in", format_datetime(hotel.check_in_date)),
                    ("Check-out", format_datetime(hotel.check_out_date)),
                ],
            )
        )
    return render_section("Hotel Details", items)


def render_event_section(events, key: PassengerKey) -> RenderedContent:
    items = []
    for event in events:
        if not _is_linked(event.participants, key):
            continue
        details = [("Date", format_datetime(event.event_date))]
        if event.location:
            details.append(("Location", event.location))
        if event.start_time:
            time_range = event.start_time
            if event.end_time:
                time_range += f" - {event.end_time}"
            details.append(("Time", time_range))
        items.append(
            SectionItem(
                title=event.event_name,
                suffix=f" ({event.event_type})" if event.event_type else "",
                details=details,
            )
        )
    return render_section("Events & Activities", items)


# content type -> (trip collection, section renderer)
SECTION_RENDERERS: dict[str, tuple[Callable, Callable]] = {
    FLIGHT_DETAILS: (lambda trip: trip.flights, render_flight_section),
    PRIVATE_JET_DETAILS: (lambda trip: trip.private_jets, render_private_jet_section),
    HOTEL_DETAILS: (lambda trip: trip.hotels, render_hotel_section),
    EVENT_DETAILS: (lambda trip: trip.events, render_event_section),
}

# Sections included in a full itinerary, in order
ITINERARY_SECTIONS = (FLIGHT_DETAILS, HOTEL_DETAILS, EVENT_DETAILS)


def _render_if_present(content_type: str, trip, key: PassengerKey) -> RenderedContent:
    collection, renderer = SECTION_RENDERERS[content_type]
    items = collection(trip)
    if not items:
        return EMPTY
    return renderer(items, key)


def render_full_itinerary(trip, key: PassengerKey) -> RenderedContent:
    dates = f"{format_datetime(trip.trip_start_date)} - {format_datetime(trip.trip_end_date)}"
    summary = RenderedContent(
        text=f"--- COMPLETE ITINERARY ---\nTrip: {trip.request_number}\nDates: {dates}\n\n",
        html=(
            "<h3>Complete Itinerary</h3>"
            f"<p><strong>Trip:</strong> {sanitize_string(trip.request_number)}<br>"
            f"<strong>Dates:</strong> {dates}</p>"
        ),
        chat=f"*COMPLETE ITINERARY*\nTrip: {trip.request_number}\nDates: {dates}\n\n",
    )
    return reduce(add, (_render_if_present(ct, trip, key) for ct in ITINERARY_SECTIONS), summary)


def render_content_type(content_type: str, trip, key: PassengerKey) -> RenderedContent:
    """Render one requested content type; unknown or body-less types render nothing"""
    if content_type == FULL_ITINERARY:
        return render_full_itinerary(trip, key)
    if content_type in SECTION_RENDERERS:
        return _render_if_present(content_type, trip, key)
    return EMPTY


def compose_message(
    trip,
    key: PassengerKey,
    recipient_name: str,
    content_types: list[str],
    custom_message: Optional[str] = None,
    signature: str = "Travel Management Team",
) -> ComposedMessage:
    """Build the subject and the three message bodies for one passenger"""
    number = trip.request_number
    name = recipient_name

    intro = RenderedContent(
        text=(
            f"Dear {name},\n\n"
            + (f"{custom_message}\n\n" if custom_message else "")
            + f"Here are your travel details for request {number}:\n\n"
        ),
        html=(
            '<html><body style="font-family: Arial, sans-serif; max-width: 600px; '
            'margin: 0 auto; padding: 20px;">'
            "<h2>Travel Details</h2>"
            f"<p>Dear {sanitize_string(name)},</p>"
            + (f"<p>{sanitize_multiline(custom_message)}</p>" if custom_message else "")
            + f"<p>Here are your travel details for request <strong>{sanitize_string(number)}</strong>:</p>"
        ),
        chat=(
            f"*Travel Details - {number}*\n\nDear {name},\n\n"
            + (f"{custom_message}\n\n" if custom_message else "")
        ),
    )

    sign_off = RenderedContent(
        text=f"\n\nIf you have any questions, please don't hesitate to contact us.\n\nBest regards,\n{signature}",
        html=(
            "<p>If you have any questions, please don't hesitate to contact us.</p>"
            f"<p><strong>Best regards,</strong><br>{sanitize_string(signature)}</p>"
            "</body></html>"
        ),
        chat=f"\n\nIf you have any questions, please contact us.\n\nBest regards,\n{signature}",
    )

    body = reduce(add, (render_content_type(ct, trip, key) for ct in content_types), intro)
    full = body + sign_off
    return ComposedMessage(
        subject=f"Travel Details - {number}", text=full.text, html=full.html, chat=full.chat
    )
