"""Travel domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

# Content types a notification can be assembled from
FLIGHT_DETAILS = "FLIGHT_DETAILS"
PRIVATE_JET_DETAILS = "PRIVATE_JET_DETAILS"
HOTEL_DETAILS = "HOTEL_DETAILS"
EVENT_DETAILS = "EVENT_DETAILS"
FULL_ITINERARY = "FULL_ITINERARY"
TRIP_BRIEF = "TRIP_BRIEF"
PASSENGER_LIST = "PASSENGER_LIST"
CUSTOM = "CUSTOM"

# Delivery channels
EMAIL = "EMAIL"
WHATSAPP = "WHATSAPP"
BOTH = "BOTH"
COMMUNICATION_TYPES = (EMAIL, WHATSAPP, BOTH)

STATUS_SENT = "SENT"
STATUS_FAILED = "FAILED"


class SendTravelDetailsRequest(BaseModel):
    """Body of POST /travel/passengers/send-details"""

    travelRequestId: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("travelRequestId", "tripId")
    )
    passengerIds: Optional[list[int]] = None
    contentTypes: Optional[list[str]] = None
    communicationType: Optional[str] = None
    customMessage: Optional[str] = None


class CommunicationResponse(BaseModel):
    """A stored delivery receipt"""

    id: int
    travelRequestId: int
    recipientPersonType: Optional[str] = None
    recipientPersonId: Optional[int] = None
    communicationType: str
    contentType: str
    subject: Optional[str] = None
    message: str
    htmlContent: Optional[str] = None
    status: str
    externalMessageId: Optional[str] = None
    errorMessage: Optional[str] = None
    sentAt: Optional[datetime] = None
    recipientName: Optional[str] = None
    recipientContact: Optional[str] = None


class DeliveryErrorEntry(BaseModel):
    """A per-passenger or per-channel problem recorded during a send"""

    passengerId: int
    type: Optional[str] = None
    reason: Optional[str] = None
    error: Optional[str] = None


class ContactResponse(BaseModel):
    id: int
    personType: str
    fullName: str
    email: Optional[str] = None
    phone: Optional[str] = None


class PassengerResponse(BaseModel):
    id: int
    travelRequestId: int
    personType: str
    personId: int
    isMainPassenger: bool
    receiveFlightDetails: bool
    receiveHotelDetails: bool
    receiveEventDetails: bool
    receiveItinerary: bool
    notificationPreference: str
    personDetails: Optional[ContactResponse] = None


class CalendarDayResponse(BaseModel):
    date: date
    dayNumber: int
    isCurrentMonth: bool
    isToday: bool
    isWeekend: bool
    tripIds: list[int]


class CalendarTripResponse(BaseModel):
    id: int
    requestNumber: str
    status: str
    tripStartDate: Optional[date] = None
    tripEndDate: Optional[date] = None
    durationDays: int
    hasConflict: bool


class CalendarResponse(BaseModel):
    view: str
    date: date
    title: str
    dayNames: list[str]
    days: list[CalendarDayResponse]
    trips: list[CalendarTripResponse]
    conflicts: dict[int, list[int]]
