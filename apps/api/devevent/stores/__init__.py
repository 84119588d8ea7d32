from devevent.stores.bookings import BookingStore
from devevent.stores.events import EventStore

__all__ = ["EventStore", "BookingStore"]
