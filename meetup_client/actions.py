"""
Action dispatchers: one function per API call.

Each dispatcher performs its request(s) through a `MeetupApi`, applies the
server's response to exactly one store and returns that response.  Failures
raise `ApiError` and leave the store untouched.
"""
from typing import Any, Dict, Optional

from .api import MeetupApi
from .store import EventsStore, GroupsStore


# ---------- events ----------

def fetch_events(api: MeetupApi, store: EventsStore, **filters) -> Dict[str, Any]:
    """filters: name, type, startDate, page, size."""
    params = {key: value for key, value in filters.items() if value is not None}
    data = api.get("/api/events", params=params or None)
    store.load_all(data)
    return data


def fetch_event_detail(api: MeetupApi, store: EventsStore, event_id: int) -> Dict[str, Any]:
    data = api.get(f"/api/events/{event_id}")
    store.load_detail(data)
    return data


def create_event(
    api: MeetupApi,
    store: EventsStore,
    group_id: int,
    fields: Dict[str, Any],
    image_url: Optional[str] = None,
) -> Dict[str, Any]:
    """Create the event, then its preview image when `image_url` is given."""
    event = api.post(f"/api/groups/{group_id}/events", fields)
    images = []
    if image_url:
        images.append(api.post(f"/api/events/{event['id']}/images", {"url": image_url, "preview": True}))
    store.add_created(event, images)
    return event


def update_event(api: MeetupApi, store: EventsStore, event_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
    event = api.put(f"/api/events/{event_id}", fields)
    store.update(event)
    return event


def delete_event(api: MeetupApi, store: EventsStore, event_id: int) -> Dict[str, Any]:
    data = api.delete(f"/api/events/{event_id}")
    store.remove(event_id)
    return data


def add_event_image(api: MeetupApi, store: EventsStore, event_id: int, url: str, preview: bool = False) -> Dict[str, Any]:
    image = api.post(f"/api/events/{event_id}/images", {"url": url, "preview": preview})
    store.add_image(event_id, image)
    return image


def fetch_attendees(api: MeetupApi, store: EventsStore, event_id: int) -> Dict[str, Any]:
    data = api.get(f"/api/events/{event_id}/attendees")
    store.set_attendees(event_id, data)
    return data


def request_attendance(api: MeetupApi, store: EventsStore, event_id: int) -> Dict[str, Any]:
    data = api.post(f"/api/events/{event_id}/attendance")
    store.set_attendance(event_id, data)
    return data


def update_attendance(api: MeetupApi, store: EventsStore, event_id: int, user_id: int, status: str) -> Dict[str, Any]:
    data = api.put(f"/api/events/{event_id}/attendance", {"userId": user_id, "status": status})
    store.set_attendance(event_id, data)
    return data


def delete_attendance(api: MeetupApi, store: EventsStore, event_id: int, user_id: int) -> Dict[str, Any]:
    data = api.delete(f"/api/events/{event_id}/attendance", {"userId": user_id})
    store.drop_attendance(event_id, user_id)
    return data


# ---------- groups ----------

def fetch_groups(api: MeetupApi, store: GroupsStore) -> Dict[str, Any]:
    data = api.get("/api/groups")
    store.load_all(data)
    return data


def fetch_group(api: MeetupApi, store: GroupsStore, group_id: int) -> Dict[str, Any]:
    data = api.get(f"/api/groups/{group_id}")
    store.load_one(data)
    return data


def create_group(
    api: MeetupApi,
    store: GroupsStore,
    fields: Dict[str, Any],
    image_url: Optional[str] = None,
) -> Dict[str, Any]:
    group = api.post("/api/groups", fields)
    images = []
    if image_url:
        images.append(api.post(f"/api/groups/{group['id']}/images", {"url": image_url, "preview": True}))
    store.add_created(group, images)
    return group


def update_group(api: MeetupApi, store: GroupsStore, group_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
    group = api.put(f"/api/groups/{group_id}", fields)
    store.update(group)
    return group


def delete_group(api: MeetupApi, store: GroupsStore, group_id: int) -> Dict[str, Any]:
    data = api.delete(f"/api/groups/{group_id}")
    store.remove(group_id)
    return data


def add_group_image(api: MeetupApi, store: GroupsStore, group_id: int, url: str, preview: bool = False) -> Dict[str, Any]:
    image = api.post(f"/api/groups/{group_id}/images", {"url": url, "preview": preview})
    store.add_image(group_id, image)
    return image


def fetch_group_events(api: MeetupApi, store: GroupsStore, group_id: int) -> Dict[str, Any]:
    data = api.get(f"/api/groups/{group_id}/events")
    store.load_group_events(group_id, data)
    return data
