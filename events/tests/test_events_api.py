"""
API tests for the events app.

Covers listing with filters and paging, the event detail shape, image
upload, validation of updates and the cascade performed on delete.
"""
import datetime as dt

import pytest
from django.test import Client
from django.utils import timezone

from events.models import Attendance, Event, EventImage


def _future(days=3):
    return (timezone.now() + dt.timedelta(days=days)).isoformat()


@pytest.mark.django_db
def test_list_events_shape_and_paging(client, event):
    EventImage.objects.create(event=event, url="https://img.example.com/a.png", preview=False)
    EventImage.objects.create(event=event, url="https://img.example.com/b.png", preview=True)

    resp = client.get("/api/events")
    assert resp.status_code == 200
    body = resp.json()
    assert body["page"] == 1
    assert body["size"] == 20
    assert len(body["Events"]) == 1

    row = body["Events"][0]
    assert row["id"] == event.id
    assert row["groupId"] == event.group_id
    assert row["venueId"] == event.venue_id
    assert row["numAttending"] == 0
    assert row["previewImage"] == "https://img.example.com/b.png"
    assert row["Group"] == {"id": event.group.id, "name": "Evening Tennis", "city": "Shanghai", "state": "SH"}
    assert row["Venue"] == {"id": event.venue_id, "city": "New York", "state": "NY"}
    assert "description" not in row
    assert "price" not in row

    assert client.get("/api/events?page=2&size=1").json()["Events"] == []


@pytest.mark.django_db
def test_list_events_counts_attending_and_waitlist(client, event, make_user):
    for status in (Attendance.STATUS_ATTENDING, Attendance.STATUS_WAITLIST, Attendance.STATUS_PENDING):
        Attendance.objects.create(event=event, user=make_user(), status=status)

    row = client.get("/api/events").json()["Events"][0]
    assert row["numAttending"] == 2


@pytest.mark.django_db
def test_list_events_filters(client, event, group):
    other = Event.objects.create(
        group=group,
        name="Online trivia night",
        description="Trivia over video.",
        type=Event.TYPE_ONLINE,
        start_date=event.start_date + dt.timedelta(days=2),
        end_date=event.start_date + dt.timedelta(days=2, hours=1),
    )

    by_type = client.get("/api/events", {"type": "Online"}).json()["Events"]
    assert [e["id"] for e in by_type] == [other.id]
    assert by_type[0]["Venue"] is None

    by_name = client.get("/api/events", {"name": event.name}).json()["Events"]
    assert [e["id"] for e in by_name] == [event.id]

    day = event.start_date.date().isoformat()
    by_date = client.get("/api/events", {"startDate": day}).json()["Events"]
    assert [e["id"] for e in by_date] == [event.id]


@pytest.mark.django_db
def test_list_events_rejects_bad_query_with_all_errors(client):
    resp = client.get("/api/events", {"page": 0, "size": 0, "type": "Party"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Bad Request"
    assert body["errors"] == {
        "page": "Page must be greater than or equal to 1",
        "size": "Size must be greater than or equal to 1",
        "type": "Type must be 'Online' or 'In person'",
    }


@pytest.mark.django_db
def test_event_detail(client, event, group):
    group.images.create(url="https://img.example.com/g.png", preview=True)
    EventImage.objects.create(event=event, url="https://img.example.com/e.png", preview=True)

    resp = client.get(f"/api/events/{event.id}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["numAttending"] == 0

    detail = body["event"]
    assert detail["description"] == event.description
    assert detail["capacity"] == 10
    assert detail["price"] == 18.5
    assert detail["Group"]["private"] is False
    assert detail["Group"]["GroupImages"] == [{"url": "https://img.example.com/g.png"}]
    assert detail["Group"]["Organizer"] == {"id": group.organizer_id, "firstName": "Una", "lastName": "One"}
    assert detail["Venue"]["address"] == "123 Disney Lane"
    assert detail["EventImages"][0]["url"] == "https://img.example.com/e.png"


@pytest.mark.django_db
def test_event_detail_not_found(client):
    resp = client.get("/api/events/9999")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Event couldn't be found"}


@pytest.mark.django_db
def test_add_event_image(auth_client, event):
    payload = {"url": "https://img.example.com/new.png", "preview": True}

    anonymous = Client()
    assert anonymous.post(f"/api/events/{event.id}/images", payload, content_type="application/json").status_code == 401

    resp = auth_client.post(f"/api/events/{event.id}/images", payload, content_type="application/json")
    assert resp.status_code == 201
    assert resp.json()["url"] == payload["url"]
    assert resp.json()["preview"] is True
    assert EventImage.objects.filter(event=event).count() == 1

    missing = auth_client.post("/api/events/9999/images", payload, content_type="application/json")
    assert missing.status_code == 404


@pytest.mark.django_db
def test_add_event_image_requires_absolute_url(auth_client, event):
    resp = auth_client.post(f"/api/events/{event.id}/images", {"url": "/media/new.png"}, content_type="application/json")
    assert resp.status_code == 400
    assert resp.json()["errors"] == {"url": "Url is invalid"}
    assert not EventImage.objects.filter(event=event).exists()


@pytest.mark.django_db
def test_update_event_reports_every_invalid_field(auth_client, event):
    payload = {
        "venueId": 9999,
        "name": "abc",
        "type": "Party",
        "capacity": "many",
        "price": "free",
        "description": "",
        "startDate": (timezone.now() - dt.timedelta(days=1)).isoformat(),
    }
    resp = auth_client.put(f"/api/events/{event.id}", payload, content_type="application/json")
    assert resp.status_code == 400
    errors = resp.json()["errors"]
    assert errors == {
        "venueId": "Venue does not exist",
        "name": "Name must be at least 5 characters",
        "type": "Type must be Online or In person",
        "capacity": "Capacity must be an integer",
        "price": "Price is invalid",
        "description": "Description is required",
        "startDate": "Start date must be in the future",
    }


@pytest.mark.django_db
def test_update_event_end_date_checked_against_stored_start(auth_client, event):
    before = (event.start_date - dt.timedelta(hours=1)).isoformat()
    resp = auth_client.put(f"/api/events/{event.id}", {"endDate": before}, content_type="application/json")
    assert resp.status_code == 400
    assert resp.json()["errors"] == {"endDate": "End date is less than start date"}


@pytest.mark.django_db
def test_update_event_start_date_checked_against_stored_end(auth_client, event):
    stored = (event.start_date, event.end_date)
    after_end = (event.end_date + dt.timedelta(days=2)).isoformat()
    resp = auth_client.put(f"/api/events/{event.id}", {"startDate": after_end}, content_type="application/json")
    assert resp.status_code == 400
    assert resp.json()["errors"] == {"endDate": "End date is less than start date"}

    event.refresh_from_db()
    assert (event.start_date, event.end_date) == stored

    resp = auth_client.put(
        f"/api/events/{event.id}",
        {"startDate": after_end, "name": ""},
        content_type="application/json",
    )
    assert resp.status_code == 400
    assert set(resp.json()["errors"]) == {"name", "endDate"}


@pytest.mark.django_db
def test_update_event_merges_provided_fields(auth_client, event):
    resp = auth_client.put(
        f"/api/events/{event.id}",
        {"capacity": 0, "price": 0, "name": "Renamed meetup"},
        content_type="application/json",
    )
    assert resp.status_code == 200
    event.refresh_from_db()
    assert event.capacity == 0
    assert event.price == 0
    assert event.name == "Renamed meetup"
    assert event.description.startswith("First meet and greet")


@pytest.mark.django_db
def test_update_event_requires_organizer_or_co_host(client_for, make_user, event, client):
    stranger = make_user()
    resp = client_for(stranger).put(f"/api/events/{event.id}", {"name": "Hijacked"}, content_type="application/json")
    assert resp.status_code == 403
    assert resp.json() == {"message": "Forbidden"}

    assert client.put(f"/api/events/{event.id}", {"name": "Hijacked"}, content_type="application/json").status_code == 401


@pytest.mark.django_db
def test_co_host_can_update_event(client_for, make_user, event):
    co_host = make_user()
    event.group.memberships.create(user=co_host, status="co-host")
    resp = client_for(co_host).put(
        f"/api/events/{event.id}", {"startDate": _future(10), "endDate": _future(11)},
        content_type="application/json",
    )
    assert resp.status_code == 200


@pytest.mark.django_db
def test_delete_event_removes_images_and_attendances(auth_client, event, make_user):
    EventImage.objects.create(event=event, url="https://img.example.com/a.png")
    Attendance.objects.create(event=event, user=make_user(), status=Attendance.STATUS_ATTENDING)

    resp = auth_client.delete(f"/api/events/{event.id}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Successfully deleted"}
    assert not Event.objects.filter(pk=event.id).exists()
    assert not EventImage.objects.filter(event_id=event.id).exists()
    assert not Attendance.objects.filter(event_id=event.id).exists()

    assert auth_client.delete(f"/api/events/{event.id}").status_code == 404


@pytest.mark.django_db
def test_delete_event_image(auth_client, client_for, make_user, event):
    image = EventImage.objects.create(event=event, url="https://img.example.com/a.png")

    stranger = client_for(make_user())
    assert stranger.delete(f"/api/event-images/{image.id}").status_code == 403

    resp = auth_client.delete(f"/api/event-images/{image.id}")
    assert resp.status_code == 200
    assert not EventImage.objects.filter(pk=image.id).exists()

    missing = auth_client.delete(f"/api/event-images/{image.id}")
    assert missing.status_code == 404
    assert missing.json() == {"message": "Event Image couldn't be found"}
