"""Travel repository - Database operations for trips, passengers and receipts"""

from typing import Optional

from sqlalchemy.orm import Session, selectinload

from ...models_travel import (
    TravelRequest,
    TripCommunication,
    TripEvent,
    TripFlight,
    TripHotel,
    TripHotelRoom,
    TripPassenger,
    TripPrivateJet,
)


class TravelRepository:
    """Repository for travel database operations"""

    @staticmethod
    def get_trip_with_sections(db: Session, travel_request_id: int) -> Optional[TravelRequest]:
        """Load a trip with every section the notification composer reads"""
        return (
            db.query(TravelRequest)
            .options(
                selectinload(TravelRequest.destinations),
                selectinload(TravelRequest.flights).selectinload(TripFlight.passengers),
                selectinload(TravelRequest.private_jets).selectinload(TripPrivateJet.passengers),
                selectinload(TravelRequest.hotels)
                .selectinload(TripHotel.rooms)
                .selectinload(TripHotelRoom.assignments),
                selectinload(TravelRequest.events).selectinload(TripEvent.participants),
                selectinload(TravelRequest.passengers),
            )
            .filter(TravelRequest.id == travel_request_id)
            .first()
        )

    @staticmethod
    def get_passengers(
        db: Session, passenger_ids: list[int], travel_request_id: int
    ) -> list[TripPassenger]:
        """Get the passenger records among passenger_ids that belong to the trip"""
        if not passenger_ids:
            return []
        return (
            db.query(TripPassenger)
            .filter(
                TripPassenger.id.in_(passenger_ids),
                TripPassenger.travel_request_id == travel_request_id,
            )
            .order_by(TripPassenger.id)
            .all()
        )

    @staticmethod
    def list_passengers(db: Session, travel_request_id: int) -> list[TripPassenger]:
        """All passengers of a trip, main passenger first"""
        return (
            db.query(TripPassenger)
            .filter(TripPassenger.travel_request_id == travel_request_id)
            .order_by(
                TripPassenger.is_main_passenger.desc(),
                TripPassenger.created_at.asc(),
                TripPassenger.id.asc(),
            )
            .all()
        )

    @staticmethod
    def list_trips(db: Session) -> list[TravelRequest]:
        """All trips ordered by start date, undated trips last"""
        return (
            db.query(TravelRequest)
            .order_by(TravelRequest.trip_start_date.is_(None), TravelRequest.trip_start_date, TravelRequest.id)
            .all()
        )

    # Communication receipts
    @staticmethod
    def create_communication(db: Session, **communication_data) -> TripCommunication:
        """Persist one delivery receipt"""
        communication = TripCommunication(**communication_data)
        db.add(communication)
        db.commit()
        db.refresh(communication)
        return communication

    @staticmethod
    def get_communication(db: Session, communication_id: int) -> Optional[TripCommunication]:
        return db.query(TripCommunication).filter(TripCommunication.id == communication_id).first()

    @staticmethod
    def list_communications(
        db: Session,
        travel_request_id: Optional[int] = None,
        communication_type: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[TripCommunication]:
        """Search receipts, newest first"""
        query = db.query(TripCommunication)

        if travel_request_id:
            query = query.filter(TripCommunication.travel_request_id == travel_request_id)

        if communication_type:
            query = query.filter(TripCommunication.communication_type == communication_type)

        if status:
            query = query.filter(TripCommunication.status == status)

        return query.order_by(TripCommunication.sent_at.desc(), TripCommunication.id.desc()).all()
