"""Travel service - Itinerary notifications, communication history and calendar"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import TRAVEL_SIGNATURE, TRAVEL_STRICT_CONTENT_PREFERENCES
from ...models_travel import TravelRequest, TripCommunication, TripPassenger
from ...services.notification_service import DeliveryResult, NotificationTransport
from ...shared.validators import has_phone_digits
from . import calendar
from .exceptions import InvalidTravelRequest, TravelResourceNotFound
from .identities import Contact, IdentityDirectory
from .renderers import ComposedMessage, compose_message
from .repository import TravelRepository
from .schemas import (
    BOTH,
    COMMUNICATION_TYPES,
    EMAIL,
    FULL_ITINERARY,
    STATUS_FAILED,
    STATUS_SENT,
    TRIP_BRIEF,
    WHATSAPP,
    CalendarDayResponse,
    CalendarResponse,
    CalendarTripResponse,
    CommunicationResponse,
    ContactResponse,
    DeliveryErrorEntry,
    PassengerResponse,
    SendTravelDetailsRequest,
)

logger = logging.getLogger(__name__)

ESSENTIAL_CONTENT_TYPES = {FULL_ITINERARY, TRIP_BRIEF}

# (substring of the content type, passenger flag, reason when the flag is off)
CONTENT_PREFERENCE_FLAGS = (
    ("FLIGHT", "receive_flight_details", "Passenger has disabled flight details"),
    ("HOTEL", "receive_hotel_details", "Passenger has disabled hotel details"),
    ("EVENT", "receive_event_details", "Passenger has disabled event details"),
    ("ITINERARY", "receive_itinerary", "Passenger has disabled itinerary"),
)


@dataclass(frozen=True)
class PreferenceDecision:
    allowed: bool
    content_types: list[str] = field(default_factory=list)
    reason: Optional[str] = None


def _disallowed_reason(passenger: TripPassenger, content_type: str) -> Optional[str]:
    for marker, flag, reason in CONTENT_PREFERENCE_FLAGS:
        if marker in content_type and not getattr(passenger, flag):
            return reason
    return None


def check_passenger_preferences(
    passenger: TripPassenger, content_types: list[str], strict: bool = True
) -> PreferenceDecision:
    """
    Decide whether a passenger may receive the requested content.

    In strict mode one disallowed content type blocks the whole send. Otherwise
    disallowed types are dropped and the passenger is only skipped when none
    of the requested types remain.
    """
    if passenger.notification_preference == "NONE":
        return PreferenceDecision(False, reason="Passenger has disabled all notifications")

    if strict:
        if passenger.notification_preference == "MINIMAL" and not ESSENTIAL_CONTENT_TYPES.intersection(
            content_types
        ):
            return PreferenceDecision(False, reason="Passenger prefers minimal notifications")
        for content_type in content_types:
            reason = _disallowed_reason(passenger, content_type)
            if reason:
                return PreferenceDecision(False, reason=reason)
        return PreferenceDecision(True, content_types=list(content_types))

    allowed = [ct for ct in content_types if _disallowed_reason(passenger, ct) is None]
    if not allowed:
        return PreferenceDecision(False, reason="Passenger has disabled all requested content")
    if passenger.notification_preference == "MINIMAL" and not ESSENTIAL_CONTENT_TYPES.intersection(allowed):
        return PreferenceDecision(False, reason="Passenger prefers minimal notifications")
    return PreferenceDecision(True, content_types=allowed)


def communication_to_response(
    communication: TripCommunication,
    recipient_name: Optional[str] = None,
    recipient_contact: Optional[str] = None,
) -> CommunicationResponse:
    return CommunicationResponse(
        id=communication.id,
        travelRequestId=communication.travel_request_id,
        recipientPersonType=communication.recipient_person_type,
        recipientPersonId=communication.recipient_person_id,
        communicationType=communication.communication_type,
        contentType=communication.content_type,
        subject=communication.subject,
        message=communication.message,
        htmlContent=communication.html_content,
        status=communication.status,
        externalMessageId=communication.external_message_id,
        errorMessage=communication.error_message,
        sentAt=communication.sent_at,
        recipientName=recipient_name,
        recipientContact=recipient_contact,
    )


def contact_to_response(contact: Contact) -> ContactResponse:
    return ContactResponse(
        id=contact.person_id,
        personType=contact.person_type,
        fullName=contact.display_name,
        email=contact.email,
        phone=contact.phone,
    )


@dataclass
class SendTravelDetailsResult:
    communications: list[TripCommunication] = field(default_factory=list)
    errors: list[DeliveryErrorEntry] = field(default_factory=list)

    @property
    def communications_sent(self) -> int:
        return sum(1 for c in self.communications if c.status == STATUS_SENT)

    def to_response(self) -> dict:
        return {
            "success": True,
            "message": f"Sent details to {self.communications_sent} recipient(s)",
            "data": {
                "communicationsSent": self.communications_sent,
                "errors": len(self.errors),
                "details": {
                    "communications": [
                        communication_to_response(c).model_dump(mode="json") for c in self.communications
                    ],
                    "errors": [e.model_dump(exclude_none=True) for e in self.errors],
                },
            },
        }


class ItineraryNotifier:
    """Sends trip details to selected passengers over email and/or WhatsApp"""

    def __init__(
        self,
        db: Session,
        transport: NotificationTransport,
        repo: Optional[TravelRepository] = None,
        identities: Optional[IdentityDirectory] = None,
        strict_content_preferences: bool = TRAVEL_STRICT_CONTENT_PREFERENCES,
        signature: str = TRAVEL_SIGNATURE,
    ):
        self.db = db
        self.transport = transport
        self.repo = repo or TravelRepository()
        self.identities = identities or IdentityDirectory(db)
        self.strict_content_preferences = strict_content_preferences
        self.signature = signature

    @staticmethod
    def validate_request(request: SendTravelDetailsRequest) -> None:
        if not request.travelRequestId or not request.passengerIds:
            raise InvalidTravelRequest("Travel request ID and passenger IDs are required")
        if not request.contentTypes:
            raise InvalidTravelRequest("At least one content type must be selected")
        if request.communicationType not in COMMUNICATION_TYPES:
            raise InvalidTravelRequest("Invalid communication type")

    async def send_travel_details(self, request: SendTravelDetailsRequest) -> SendTravelDetailsResult:
        self.validate_request(request)

        trip = self.repo.get_trip_with_sections(self.db, request.travelRequestId)
        if not trip:
            raise TravelResourceNotFound("Travel request not found")

        passengers = self.repo.get_passengers(self.db, request.passengerIds, trip.id)
        if not passengers:
            raise TravelResourceNotFound("No valid passengers found")

        logger.info(
            f"📨 Sending {', '.join(request.contentTypes)} for {trip.request_number} "
            f"to {len(passengers)} passenger(s) via {request.communicationType}"
        )

        result = SendTravelDetailsResult()
        for passenger in passengers:
            await self._notify_passenger(trip, passenger, request, result)

        logger.info(
            f"✅ Travel details for {trip.request_number}: "
            f"{result.communications_sent} sent, {len(result.errors)} error(s)"
        )
        return result

    async def _notify_passenger(
        self,
        trip: TravelRequest,
        passenger: TripPassenger,
        request: SendTravelDetailsRequest,
        result: SendTravelDetailsResult,
    ) -> None:
        decision = check_passenger_preferences(
            passenger, request.contentTypes, strict=self.strict_content_preferences
        )
        if not decision.allowed:
            logger.info(f"ℹ️ Skipping passenger {passenger.id}: {decision.reason}")
            result.errors.append(DeliveryErrorEntry(passengerId=passenger.id, reason=decision.reason))
            return

        try:
            contact = self.identities.find_contact(passenger.person_type, passenger.person_id)
        except Exception as e:
            logger.error(
                f"❌ Identity lookup failed for {passenger.person_type} {passenger.person_id}: {e}"
            )
            contact = None
        if not contact:
            logger.warning(
                f"⚠️ No {passenger.person_type} record {passenger.person_id} for passenger {passenger.id}"
            )
            result.errors.append(
                DeliveryErrorEntry(passengerId=passenger.id, reason="Person details not found")
            )
            return

        message = compose_message(
            trip,
            (passenger.person_type, passenger.person_id),
            contact.display_name,
            decision.content_types,
            request.customMessage,
            signature=self.signature,
        )
        content_label = ", ".join(decision.content_types)

        if request.communicationType in (EMAIL, BOTH):
            await self._send_email(trip, passenger, contact, message, content_label, result)

        if request.communicationType in (WHATSAPP, BOTH):
            await self._send_whatsapp(trip, passenger, contact, message, content_label, result)

    async def _send_email(
        self,
        trip: TravelRequest,
        passenger: TripPassenger,
        contact: Contact,
        message: ComposedMessage,
        content_label: str,
        result: SendTravelDetailsResult,
    ) -> None:
        if not contact.email:
            result.errors.append(
                DeliveryErrorEntry(passengerId=passenger.id, type=EMAIL, reason="No email address available")
            )
            return

        try:
            delivery = await self.transport.send_email(
                to=contact.email, subject=message.subject, html=message.html, text=message.text
            )
        except Exception as e:
            logger.error(f"❌ Email transport failed for passenger {passenger.id}: {e}")
            delivery = DeliveryResult(success=False, error=str(e) or "Failed to send email")

        self._record(
            trip,
            passenger,
            EMAIL,
            content_label,
            delivery,
            result,
            subject=message.subject,
            body=message.text,
            html=message.html,
            failure_text="Failed to send email",
        )

    async def _send_whatsapp(
        self,
        trip: TravelRequest,
        passenger: TripPassenger,
        contact: Contact,
        message: ComposedMessage,
        content_label: str,
        result: SendTravelDetailsResult,
    ) -> None:
        if not has_phone_digits(contact.phone):
            result.errors.append(
                DeliveryErrorEntry(passengerId=passenger.id, type=WHATSAPP, reason="No phone number available")
            )
            return

        try:
            formatted_phone = self.transport.format_phone_number(contact.phone)
            delivery = await self.transport.send_chat(to=formatted_phone, message=message.chat)
        except Exception as e:
            logger.error(f"❌ WhatsApp transport failed for passenger {passenger.id}: {e}")
            delivery = DeliveryResult(success=False, error=str(e) or "Failed to send WhatsApp message")

        self._record(
            trip,
            passenger,
            WHATSAPP,
            content_label,
            delivery,
            result,
            subject=None,
            body=message.chat,
            html=None,
            failure_text="Failed to send WhatsApp message",
        )

    def _record(
        self,
        trip: TravelRequest,
        passenger: TripPassenger,
        channel: str,
        content_label: str,
        delivery: DeliveryResult,
        result: SendTravelDetailsResult,
        subject: Optional[str],
        body: str,
        html: Optional[str],
        failure_text: str,
    ) -> None:
        """Write the receipt for one attempt and note a failure in the error list"""
        try:
            communication = self.repo.create_communication(
                self.db,
                travel_request_id=trip.id,
                recipient_person_type=passenger.person_type,
                recipient_person_id=passenger.person_id,
                communication_type=channel,
                content_type=content_label,
                subject=subject,
                message=body,
                html_content=html,
                status=STATUS_SENT if delivery.success else STATUS_FAILED,
                external_message_id=delivery.message_id,
                error_message=None if delivery.success else (delivery.error or failure_text),
            )
            result.communications.append(communication)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to record {channel} receipt for passenger {passenger.id}: {e}")
            result.errors.append(
                DeliveryErrorEntry(
                    passengerId=passenger.id, type=channel, error="Failed to record communication"
                )
            )
            return

        if not delivery.success:
            result.errors.append(
                DeliveryErrorEntry(passengerId=passenger.id, type=channel, error=delivery.error or failure_text)
            )


class CommunicationService:
    """History of delivery receipts and re-delivery of past messages"""

    def __init__(
        self,
        db: Session,
        transport: NotificationTransport,
        repo: Optional[TravelRepository] = None,
        identities: Optional[IdentityDirectory] = None,
    ):
        self.db = db
        self.transport = transport
        self.repo = repo or TravelRepository()
        self.identities = identities or IdentityDirectory(db)

    def list_communications(
        self,
        travel_request_id: Optional[int] = None,
        communication_type: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[CommunicationResponse]:
        """Receipts newest first, each with the recipient's current name and contact"""
        communications = self.repo.list_communications(
            self.db, travel_request_id, communication_type, status
        )

        responses = []
        for communication in communications:
            recipient_name, recipient_contact = "Unknown", ""
            if communication.recipient_person_type and communication.recipient_person_id:
                contact = self.identities.find_contact(
                    communication.recipient_person_type, communication.recipient_person_id
                )
                if contact:
                    recipient_name = contact.display_name or "Unknown"
                    recipient_contact = contact.email or contact.phone or ""
            responses.append(communication_to_response(communication, recipient_name, recipient_contact))
        return responses

    async def resend_communication(self, communication_id: int) -> dict:
        """Deliver a stored message again and record the attempt as a new receipt"""
        original = self.repo.get_communication(self.db, communication_id)
        if not original:
            raise TravelResourceNotFound("Communication not found")

        if not original.recipient_person_type or not original.recipient_person_id:
            raise InvalidTravelRequest("Recipient information missing")

        contact = self.identities.find_contact(original.recipient_person_type, original.recipient_person_id)
        if not contact:
            raise TravelResourceNotFound("Recipient not found")

        if original.communication_type == EMAIL:
            if not contact.email:
                raise InvalidTravelRequest("Recipient has no email address")

            def send():
                return self.transport.send_email(
                    to=contact.email,
                    subject=original.subject or "Travel Details",
                    html=original.html_content or original.message or "",
                    text=original.message or None,
                )

        elif original.communication_type == WHATSAPP:
            if not has_phone_digits(contact.phone):
                raise InvalidTravelRequest("Recipient has no phone number")

            def send():
                return self.transport.send_chat(
                    to=self.transport.format_phone_number(contact.phone), message=original.message or ""
                )

        else:
            raise InvalidTravelRequest("Unsupported communication type")

        try:
            delivery = await send()
        except Exception as e:
            logger.error(f"❌ Resend of communication {communication_id} failed: {e}")
            delivery = DeliveryResult(success=False, error=str(e) or "Failed to resend communication")

        resent = self.repo.create_communication(
            self.db,
            travel_request_id=original.travel_request_id,
            recipient_person_type=original.recipient_person_type,
            recipient_person_id=original.recipient_person_id,
            communication_type=original.communication_type,
            content_type=original.content_type,
            subject=original.subject,
            message=original.message,
            html_content=original.html_content,
            status=STATUS_SENT if delivery.success else STATUS_FAILED,
            external_message_id=delivery.message_id,
            error_message=delivery.error,
        )
        logger.info(f"🔁 Communication {communication_id} resent as {resent.id} ({resent.status})")

        return {
            "success": delivery.success,
            "data": communication_to_response(resent).model_dump(mode="json"),
            "message": (
                "Communication resent successfully"
                if delivery.success
                else f"Failed to resend: {delivery.error}"
            ),
        }


class TravelService:
    """Read-side views over trips: passenger lists and the calendar"""

    def __init__(
        self,
        db: Session,
        repo: Optional[TravelRepository] = None,
        identities: Optional[IdentityDirectory] = None,
    ):
        self.db = db
        self.repo = repo or TravelRepository()
        self.identities = identities or IdentityDirectory(db)

    def list_passengers(self, travel_request_id: Optional[int]) -> list[PassengerResponse]:
        if not travel_request_id:
            raise InvalidTravelRequest("travelRequestId is required")

        passengers = self.repo.list_passengers(self.db, travel_request_id)
        responses = []
        for passenger in passengers:
            contact = self.identities.find_contact(passenger.person_type, passenger.person_id)
            responses.append(
                PassengerResponse(
                    id=passenger.id,
                    travelRequestId=passenger.travel_request_id,
                    personType=passenger.person_type,
                    personId=passenger.person_id,
                    isMainPassenger=passenger.is_main_passenger,
                    receiveFlightDetails=passenger.receive_flight_details,
                    receiveHotelDetails=passenger.receive_hotel_details,
                    receiveEventDetails=passenger.receive_event_details,
                    receiveItinerary=passenger.receive_itinerary,
                    notificationPreference=passenger.notification_preference,
                    personDetails=contact_to_response(contact) if contact else None,
                )
            )
        return responses

    def build_calendar(
        self, view: str, anchor: date, today: Optional[date] = None
    ) -> CalendarResponse:
        """Grid for a month or week view with trips placed into their days"""
        if view not in calendar.CALENDAR_VIEWS:
            raise InvalidTravelRequest("Invalid calendar view")

        trips = [calendar.CalendarTrip.from_travel_request(t) for t in self.repo.list_trips(self.db)]
        conflicts = calendar.detect_conflicts(trips)

        if view == calendar.MONTH:
            days = calendar.month_days(anchor, today)
            title = calendar.format_month_year(anchor)
        else:
            days = calendar.week_days(anchor, today)
            title = calendar.format_week_range(anchor)

        day_cells = [
            CalendarDayResponse(
                date=day.date,
                dayNumber=day.day_number,
                isCurrentMonth=day.is_current_month,
                isToday=day.is_today,
                isWeekend=day.is_weekend,
                tripIds=[trip.id for trip in calendar.trips_for_date(trips, day.date)],
            )
            for day in days
        ]
        visible_ids = {trip_id for cell in day_cells for trip_id in cell.tripIds}

        return CalendarResponse(
            view=view,
            date=anchor,
            title=title,
            dayNames=calendar.short_day_names(),
            days=day_cells,
            trips=[
                CalendarTripResponse(
                    id=trip.id,
                    requestNumber=trip.request_number,
                    status=trip.status,
                    tripStartDate=trip.start_date,
                    tripEndDate=trip.end_date,
                    durationDays=calendar.trip_duration(trip),
                    hasConflict=trip.id in conflicts,
                )
                for trip in trips
                if trip.id in visible_ids
            ],
            conflicts=conflicts,
        )
