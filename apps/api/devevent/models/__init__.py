from devevent.models.booking import Booking, BookingFields
from devevent.models.event import Event, EventFields, EventMode

__all__ = ["Event", "EventFields", "EventMode", "Booking", "BookingFields"]
