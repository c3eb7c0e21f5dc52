"""Travel router - FastAPI endpoints for passengers, notifications and the calendar"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ...database import get_db
from ...services.notification_service import NotificationTransport
from .exceptions import TravelNotificationError
from .schemas import SendTravelDetailsRequest
from .service import CommunicationService, ItineraryNotifier, TravelService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/travel", tags=["Travel"])


def get_notification_transport(request: Request) -> NotificationTransport:
    """The process-wide transport created at startup"""
    transport = getattr(request.app.state, "notification_transport", None)
    if transport is None:
        transport = NotificationTransport.from_config()
        request.app.state.notification_transport = transport
    return transport


def get_itinerary_notifier(
    db: Session = Depends(get_db),
    transport: NotificationTransport = Depends(get_notification_transport),
) -> ItineraryNotifier:
    """Dependency injection for ItineraryNotifier"""
    return ItineraryNotifier(db, transport)


def get_communication_service(
    db: Session = Depends(get_db),
    transport: NotificationTransport = Depends(get_notification_transport),
) -> CommunicationService:
    """Dependency injection for CommunicationService"""
    return CommunicationService(db, transport)


def get_travel_service(db: Session = Depends(get_db)) -> TravelService:
    """Dependency injection for TravelService"""
    return TravelService(db)


def error_response(error: TravelNotificationError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content={"success": False, "error": error.message})


# ============================================================================
# PASSENGERS & NOTIFICATIONS
# ============================================================================


@router.get("/passengers")
async def list_passengers(
    travel_request_id: Optional[int] = Query(None, alias="travelRequestId"),
    service: TravelService = Depends(get_travel_service),
):
    """Get all passengers of a trip with their contact details"""
    try:
        passengers = service.list_passengers(travel_request_id)
    except TravelNotificationError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"❌ Error fetching passengers: {e}")
        return JSONResponse(status_code=500, content={"success": False, "error": "Failed to fetch passengers"})

    return {
        "success": True,
        "data": [p.model_dump(mode="json") for p in passengers],
        "count": len(passengers),
    }


@router.post("/passengers/send-details")
async def send_travel_details(
    data: SendTravelDetailsRequest,
    notifier: ItineraryNotifier = Depends(get_itinerary_notifier),
):
    """Send travel details to selected passengers by email, WhatsApp or both"""
    try:
        result = await notifier.send_travel_details(data)
    except TravelNotificationError as e:
        logger.warning(f"⚠️ Send travel details rejected: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.exception(f"❌ Error sending travel details: {e}")
        return JSONResponse(
            status_code=500, content={"success": False, "error": "Failed to send travel details"}
        )

    return result.to_response()


# ============================================================================
# COMMUNICATIONS
# ============================================================================


@router.get("/communications")
async def list_communications(
    travel_request_id: Optional[int] = Query(None, alias="travelRequestId"),
    communication_type: Optional[str] = Query(None, alias="communicationType"),
    status: Optional[str] = Query(None),
    service: CommunicationService = Depends(get_communication_service),
):
    """Get communication receipts with optional filters"""
    try:
        communications = service.list_communications(travel_request_id, communication_type, status)
    except Exception as e:
        logger.error(f"❌ Error fetching communications: {e}")
        return JSONResponse(
            status_code=500, content={"success": False, "error": "Failed to fetch communications"}
        )

    return {
        "success": True,
        "data": [c.model_dump(mode="json") for c in communications],
        "count": len(communications),
    }


@router.post("/communications/{communication_id}/resend")
async def resend_communication(
    communication_id: int,
    service: CommunicationService = Depends(get_communication_service),
):
    """Resend a previously sent communication"""
    try:
        return await service.resend_communication(communication_id)
    except TravelNotificationError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"❌ Error resending communication {communication_id}: {e}")
        return JSONResponse(
            status_code=500, content={"success": False, "error": "Failed to resend communication"}
        )


# ============================================================================
# CALENDAR
# ============================================================================


@router.get("/calendar")
async def get_calendar(
    view: str = Query("month"),
    anchor: Optional[date] = Query(None, alias="date"),
    service: TravelService = Depends(get_travel_service),
):
    """Month or week grid of trips with overlapping trips flagged"""
    try:
        calendar_view = service.build_calendar(view, anchor or date.today())
    except TravelNotificationError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"❌ Error building {view} calendar: {e}")
        return JSONResponse(status_code=500, content={"success": False, "error": "Failed to fetch calendar"})

    return {"success": True, "data": calendar_view.model_dump(mode="json")}
