"""Error taxonomy shared by the engines and the HTTP layer."""

from fastapi import status


class BookingError(Exception):
    """Base class for errors a caller is allowed to see."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = 'Request could not be processed.'

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(BookingError):
    message = 'Missing required fields.'


class DateNotFound(BookingError):
    message = 'Date not available.'


class SlotNotFound(BookingError):
    message = 'Slot not found.'


class SlotAlreadyBooked(BookingError):
    message = 'Slot already booked.'


class AvailabilityNotFound(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    message = 'Availability day not found.'


class AppointmentNotFound(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    message = 'Appointment not found.'


class StoreIOError(BookingError):
    """Read, parse or write failure on a store collection.

    The collection name is kept for logging; the public message never
    carries internals.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = 'Storage error.'

    def __init__(self, collection: str, reason: str = '') -> None:
        super().__init__()
        self.collection = collection
        self.reason = reason

    def __str__(self) -> str:
        return f'{self.collection}: {self.reason}' if self.reason else self.collection
