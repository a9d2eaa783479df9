"""
Python client for the groups & events API.

`MeetupApi` talks HTTP, `store` keeps local mirrors of what the server
returned, and `actions` ties the two together: one function per API call.
"""
from .api import ApiError, MeetupApi
from .store import EventsStore, GroupsStore

__all__ = ["ApiError", "MeetupApi", "EventsStore", "GroupsStore"]
