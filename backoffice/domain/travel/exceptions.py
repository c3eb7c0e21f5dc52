"""Errors that abort a whole travel notification request"""


class TravelNotificationError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidTravelRequest(TravelNotificationError):
    """Malformed or missing input (HTTP 400)"""

    status_code = 400


class TravelResourceNotFound(TravelNotificationError):
    """Trip, passengers, receipt or recipient missing (HTTP 404)"""

    status_code = 404
