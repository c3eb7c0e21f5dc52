"""
Travel Models
Trips (travel requests), their bookings, passengers and communication receipts
"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class TravelRequest(Base):
    """A trip: the planning unit that bookings and passengers hang off"""

    __tablename__ = "travel_requests"

    id = Column(Integer, primary_key=True, index=True)
    request_number = Column(String(50), unique=True, index=True, nullable=False)
    status = Column(String(20), default="REQUEST", nullable=False)  # REQUEST, PLANNING, CONFIRMING, EXECUTING, COMPLETED, CANCELLED
    trip_start_date = Column(Date, nullable=True)  # null = TBD
    trip_end_date = Column(Date, nullable=True)  # null = TBD
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    destinations = relationship(
        "TripDestination", back_populates="travel_request", cascade="all, delete-orphan",
        order_by="TripDestination.sequence",
    )
    flights = relationship(
        "TripFlight", back_populates="travel_request", cascade="all, delete-orphan",
        order_by="TripFlight.id",
    )
    private_jets = relationship(
        "TripPrivateJet", back_populates="travel_request", cascade="all, delete-orphan",
        order_by="TripPrivateJet.id",
    )
    hotels = relationship(
        "TripHotel", back_populates="travel_request", cascade="all, delete-orphan",
        order_by="TripHotel.id",
    )
    events = relationship(
        "TripEvent", back_populates="travel_request", cascade="all, delete-orphan",
        order_by="TripEvent.id",
    )
    passengers = relationship(
        "TripPassenger", back_populates="travel_request", cascade="all, delete-orphan",
        order_by="TripPassenger.id",
    )
    communications = relationship("TripCommunication", back_populates="travel_request")


class TripDestination(Base):
    __tablename__ = "trip_destinations"

    id = Column(Integer, primary_key=True, index=True)
    travel_request_id = Column(
        Integer, ForeignKey("travel_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sequence = Column(Integer, default=0, nullable=False)
    country = Column(String(100), nullable=False)
    city = Column(String(100), nullable=False)

    travel_request = relationship("TravelRequest", back_populates="destinations")


class TripFlight(Base):
    __tablename__ = "trip_flights"

    id = Column(Integer, primary_key=True, index=True)
    travel_request_id = Column(
        Integer, ForeignKey("travel_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    airline = Column(String(100), nullable=False)
    flight_number = Column(String(20), nullable=False)
    departure_airport = Column(String(10), nullable=False)
    arrival_airport = Column(String(10), nullable=False)
    departure_date = Column(DateTime, nullable=True)
    booking_reference = Column(String(50), nullable=True)

    travel_request = relationship("TravelRequest", back_populates="flights")
    passengers = relationship(
        "TripFlightPassenger", back_populates="flight", cascade="all, delete-orphan"
    )


class TripFlightPassenger(Base):
    __tablename__ = "trip_flight_passengers"

    id = Column(Integer, primary_key=True, index=True)
    flight_id = Column(
        Integer, ForeignKey("trip_flights.id", ondelete="CASCADE"), nullable=False, index=True
    )
    person_type = Column(String(20), nullable=False)
    person_id = Column(Integer, nullable=False)
    seat_number = Column(String(10), nullable=True)

    flight = relationship("TripFlight", back_populates="passengers")


class TripPrivateJet(Base):
    __tablename__ = "trip_private_jets"

    id = Column(Integer, primary_key=True, index=True)
    travel_request_id = Column(
        Integer, ForeignKey("travel_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    aircraft_type = Column(String(100), nullable=True)
    operator = Column(String(255), nullable=True)
    departure_airport = Column(String(10), nullable=False)
    arrival_airport = Column(String(10), nullable=False)
    departure_date = Column(DateTime, nullable=True)

    travel_request = relationship("TravelRequest", back_populates="private_jets")
    passengers = relationship(
        "TripPrivateJetPassenger", back_populates="private_jet", cascade="all, delete-orphan"
    )


class TripPrivateJetPassenger(Base):
    __tablename__ = "trip_private_jet_passengers"

    id = Column(Integer, primary_key=True, index=True)
    private_jet_id = Column(
        Integer, ForeignKey("trip_private_jets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    person_type = Column(String(20), nullable=False)
    person_id = Column(Integer, nullable=False)

    private_jet = relationship("TripPrivateJet", back_populates="passengers")


class TripHotel(Base):
    __tablename__ = "trip_hotels"

    id = Column(Integer, primary_key=True, index=True)
    travel_request_id = Column(
        Integer, ForeignKey("travel_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    hotel_name = Column(String(255), nullable=False)
    city = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    check_in_date = Column(Date, nullable=True)
    check_out_date = Column(Date, nullable=True)
    confirmation_number = Column(String(50), nullable=True)

    travel_request = relationship("TravelRequest", back_populates="hotels")
    rooms = relationship(
        "TripHotelRoom", back_populates="hotel", cascade="all, delete-orphan",
        order_by="TripHotelRoom.id",
    )


class TripHotelRoom(Base):
    __tablename__ = "trip_hotel_rooms"

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(
        Integer, ForeignKey("trip_hotels.id", ondelete="CASCADE"), nullable=False, index=True
    )
    room_type = Column(String(100), nullable=True)
    room_number = Column(String(20), nullable=True)

    hotel = relationship("TripHotel", back_populates="rooms")
    assignments = relationship(
        "TripRoomAssignment", back_populates="room", cascade="all, delete-orphan"
    )


class TripRoomAssignment(Base):
    __tablename__ = "trip_room_assignments"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(
        Integer, ForeignKey("trip_hotel_rooms.id", ondelete="CASCADE"), nullable=False, index=True
    )
    person_type = Column(String(20), nullable=False)
    person_id = Column(Integer, nullable=False)

    room = relationship("TripHotelRoom", back_populates="assignments")


class TripEvent(Base):
    __tablename__ = "trip_events"

    id = Column(Integer, primary_key=True, index=True)
    travel_request_id = Column(
        Integer, ForeignKey("travel_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    event_name = Column(String(255), nullable=False)
    event_type = Column(String(50), nullable=True)
    event_date = Column(Date, nullable=True)
    location = Column(String(255), nullable=True)
    start_time = Column(String(10), nullable=True)  # "HH:MM"
    end_time = Column(String(10), nullable=True)

    travel_request = relationship("TravelRequest", back_populates="events")
    participants = relationship(
        "TripEventParticipant", back_populates="event", cascade="all, delete-orphan"
    )


class TripEventParticipant(Base):
    __tablename__ = "trip_event_participants"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(
        Integer, ForeignKey("trip_events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    person_type = Column(String(20), nullable=False)
    person_id = Column(Integer, nullable=False)

    event = relationship("TripEvent", back_populates="participants")


class TripPassenger(Base):
    """A person's membership on one trip, with their notification preferences"""

    __tablename__ = "trip_passengers"
    __table_args__ = (
        UniqueConstraint("travel_request_id", "person_type", "person_id", name="uq_trip_passenger"),
    )

    id = Column(Integer, primary_key=True, index=True)
    travel_request_id = Column(
        Integer, ForeignKey("travel_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    person_type = Column(String(20), nullable=False)  # EMPLOYEE, STAKEHOLDER, EMPLOYER, TASK_HELPER
    person_id = Column(Integer, nullable=False)
    is_main_passenger = Column(Boolean, default=False, nullable=False)

    # Notification preferences
    receive_flight_details = Column(Boolean, default=True, nullable=False)
    receive_hotel_details = Column(Boolean, default=True, nullable=False)
    receive_event_details = Column(Boolean, default=True, nullable=False)
    receive_itinerary = Column(Boolean, default=True, nullable=False)
    notification_preference = Column(String(20), default="ALL", nullable=False)  # ALL, MINIMAL, NONE

    created_at = Column(DateTime, server_default=func.now())

    travel_request = relationship("TravelRequest", back_populates="passengers")


class TripCommunication(Base):
    """Receipt of one delivery attempt. Written once, never updated"""

    __tablename__ = "trip_communications"

    id = Column(Integer, primary_key=True, index=True)
    travel_request_id = Column(
        Integer, ForeignKey("travel_requests.id"), nullable=False, index=True
    )
    recipient_person_type = Column(String(20), nullable=True)
    recipient_person_id = Column(Integer, nullable=True)

    communication_type = Column(String(20), nullable=False)  # EMAIL, WHATSAPP
    content_type = Column(String(255), nullable=False)  # comma-joined content types
    subject = Column(String(255), nullable=True)
    message = Column(Text, nullable=False)
    html_content = Column(Text, nullable=True)

    status = Column(String(20), nullable=False)  # SENT, FAILED
    external_message_id = Column(String(255), nullable=True)
    error_message = Column(Text, nullable=True)

    sent_at = Column(DateTime, server_default=func.now())

    travel_request = relationship("TravelRequest", back_populates="communications")
