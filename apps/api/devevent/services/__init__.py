from devevent.services.bookings_service import (
    create_booking,
    list_bookings_for_email,
    list_event_bookings,
)
from devevent.services.events_service import (
    create_event,
    delete_event,
    get_event,
    list_events,
    update_event,
)

__all__ = [
    "create_event",
    "get_event",
    "list_events",
    "update_event",
    "delete_event",
    "create_booking",
    "list_event_bookings",
    "list_bookings_for_email",
]
