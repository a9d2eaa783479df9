"""
Client-side mirrors of server state.

The stores are plain containers keyed by entity id.  They never talk to the
server and never invent data: every update function takes a payload exactly
as the API returned it.  The last write wins.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

Payload = Dict[str, Any]


@dataclass
class EventsStore:
    # event id -> list projection from GET /api/events
    all_events: Dict[int, Payload] = field(default_factory=dict)
    # event id -> {"event": {...}, "numAttending": n} from GET /api/events/:id
    event_detail: Dict[int, Payload] = field(default_factory=dict)
    # event id -> {user id -> attendee}
    attendees: Dict[int, Dict[int, Payload]] = field(default_factory=dict)

    def load_all(self, payload: Payload) -> None:
        for event in payload["Events"]:
            self.all_events[event["id"]] = event

    def load_detail(self, payload: Payload) -> None:
        self.event_detail[payload["event"]["id"]] = payload

    def add_created(self, event: Payload, images: Optional[List[Payload]] = None) -> None:
        self.all_events[event["id"]] = event
        self.event_detail[event["id"]] = {
            "event": {**event, "EventImages": list(images or [])},
            "numAttending": 0,
        }

    def update(self, event: Payload) -> None:
        self.all_events[event["id"]] = {**self.all_events.get(event["id"], {}), **event}
        detail = self.event_detail.get(event["id"])
        if detail is not None:
            detail["event"] = {**detail["event"], **event}

    def remove(self, event_id: int) -> None:
        self.all_events.pop(event_id, None)
        self.event_detail.pop(event_id, None)
        self.attendees.pop(event_id, None)

    def add_image(self, event_id: int, image: Payload) -> None:
        detail = self.event_detail.get(event_id)
        if detail is not None:
            detail["event"].setdefault("EventImages", []).append(image)
        if image.get("preview") and event_id in self.all_events:
            self.all_events[event_id]["previewImage"] = image["url"]

    def set_attendees(self, event_id: int, payload: Payload) -> None:
        self.attendees[event_id] = {a["id"]: a for a in payload["Attendees"]}

    def set_attendance(self, event_id: int, attendance: Payload) -> None:
        """Apply `{userId, status}` from an attendance request or update."""
        users = self.attendees.setdefault(event_id, {})
        entry = users.get(attendance["userId"])
        if entry is None:
            users[attendance["userId"]] = {"id": attendance["userId"], "Attendance": {"status": attendance["status"]}}
        else:
            entry["Attendance"] = {"status": attendance["status"]}

    def drop_attendance(self, event_id: int, user_id: int) -> None:
        self.attendees.get(event_id, {}).pop(user_id, None)


@dataclass
class GroupsStore:
    # group id -> list projection from GET /api/groups
    all_groups: Dict[int, Payload] = field(default_factory=dict)
    # the group last opened, created or updated
    individual_group: Payload = field(default_factory=dict)
    # group id -> {event id -> event} from GET /api/groups/:id/events
    event_detail: Dict[int, Dict[int, Payload]] = field(default_factory=dict)

    def load_all(self, payload: Payload) -> None:
        self.all_groups = {group["id"]: group for group in payload["Groups"]}

    def load_one(self, group: Payload) -> None:
        self.individual_group = group

    def add_created(self, group: Payload, images: Optional[List[Payload]] = None) -> None:
        self.all_groups[group["id"]] = group
        self.individual_group = {**group, "GroupImages": list(images or [])}

    def update(self, group: Payload) -> None:
        self.all_groups[group["id"]] = {**self.all_groups.get(group["id"], {}), **group}
        if self.individual_group.get("id") == group["id"]:
            self.individual_group = {**self.individual_group, **group}

    def remove(self, group_id: int) -> None:
        self.all_groups.pop(group_id, None)
        self.event_detail.pop(group_id, None)
        if self.individual_group.get("id") == group_id:
            self.individual_group = {}

    def add_image(self, group_id: int, image: Payload) -> None:
        if self.individual_group.get("id") == group_id:
            images = list(self.individual_group.get("GroupImages", []))
            images.append(image)
            self.individual_group = {**self.individual_group, "GroupImages": images}
        if image.get("preview") and group_id in self.all_groups:
            self.all_groups[group_id]["previewImage"] = image["url"]

    def load_group_events(self, group_id: int, payload: Payload) -> None:
        self.event_detail[group_id] = {event["id"]: event for event in payload["Events"]}
