"""
Tests for the attendance workflow: requesting, reviewing and removing
attendance, and which attendees are visible to whom.
"""
import pytest

from events.models import Attendance
from groups.models import Membership


@pytest.fixture
def member(make_user, group):
    u = make_user(first_name="Mia", last_name="Member")
    Membership.objects.create(group=group, user=u, status=Membership.STATUS_MEMBER)
    return u


def _url(event):
    return f"/api/events/{event.id}/attendance"


@pytest.mark.django_db
def test_hosts_see_pending_attendees(auth_client, event, make_user):
    pending = make_user()
    attending = make_user(first_name="Ada", last_name="Lovelace")
    Attendance.objects.create(event=event, user=pending, status=Attendance.STATUS_PENDING)
    Attendance.objects.create(event=event, user=attending, status=Attendance.STATUS_ATTENDING)

    as_host = auth_client.get(f"/api/events/{event.id}/attendees").json()["Attendees"]
    assert {a["id"] for a in as_host} == {pending.id, attending.id}


@pytest.mark.django_db
def test_attendees_anonymous_view(client, event, make_user):
    pending = make_user()
    attending = make_user(first_name="Ada", last_name="Lovelace")
    Attendance.objects.create(event=event, user=pending, status=Attendance.STATUS_PENDING)
    Attendance.objects.create(event=event, user=attending, status=Attendance.STATUS_ATTENDING)

    resp = client.get(f"/api/events/{event.id}/attendees")
    assert resp.status_code == 200
    assert resp.json() == {
        "Attendees": [
            {"id": attending.id, "firstName": "Ada", "lastName": "Lovelace", "Attendance": {"status": "attending"}},
        ]
    }
    assert client.get("/api/events/9999/attendees").status_code == 404


@pytest.mark.django_db
def test_request_attendance(client_for, member, event):
    c = client_for(member)
    resp = c.post(_url(event))
    assert resp.status_code == 200
    assert resp.json() == {"userId": member.id, "status": "pending"}

    again = c.post(_url(event))
    assert again.status_code == 400
    assert again.json() == {"message": "Attendance has already been requested"}

    Attendance.objects.filter(event=event, user=member).update(status=Attendance.STATUS_ATTENDING)
    attending = c.post(_url(event))
    assert attending.status_code == 400
    assert attending.json() == {"message": "User is already an attendee of the event"}


@pytest.mark.django_db
def test_request_attendance_requires_membership(client_for, make_user, event):
    resp = client_for(make_user()).post(_url(event))
    assert resp.status_code == 403
    assert not Attendance.objects.filter(event=event).exists()


@pytest.mark.django_db
def test_pending_member_may_request_attendance(client_for, make_user, group, event):
    u = make_user()
    Membership.objects.create(group=group, user=u, status=Membership.STATUS_PENDING)
    assert client_for(u).post(_url(event)).status_code == 200


@pytest.mark.django_db
def test_update_attendance(auth_client, member, event):
    Attendance.objects.create(event=event, user=member)

    resp = auth_client.put(_url(event), {"userId": member.id, "status": "attending"}, content_type="application/json")
    assert resp.status_code == 200
    body = resp.json()
    assert body["eventId"] == event.id
    assert body["userId"] == member.id
    assert body["status"] == "attending"

    resp = auth_client.put(_url(event), {"userId": member.id, "status": "waitlist"}, content_type="application/json")
    assert resp.json()["status"] == "waitlist"


@pytest.mark.django_db
def test_update_attendance_to_pending_is_rejected_for_anyone(auth_client, client_for, member, event):
    Attendance.objects.create(event=event, user=member, status=Attendance.STATUS_ATTENDING)
    payload = {"userId": member.id, "status": "pending"}

    for c in (auth_client, client_for(member)):
        resp = c.put(_url(event), payload, content_type="application/json")
        assert resp.status_code == 400
        assert resp.json()["errors"] == {"status": "Cannot change an attendance status to pending"}

    assert Attendance.objects.get(event=event, user=member).status == "attending"


@pytest.mark.django_db
def test_update_attendance_errors(auth_client, client_for, member, event, make_user):
    Attendance.objects.create(event=event, user=member)

    forbidden = client_for(member).put(_url(event), {"userId": member.id, "status": "attending"}, content_type="application/json")
    assert forbidden.status_code == 403

    missing = auth_client.put(_url(event), {"userId": make_user().id, "status": "attending"}, content_type="application/json")
    assert missing.status_code == 404
    assert missing.json() == {"message": "Attendance between the user and the event does not exist"}

    bad = auth_client.put(_url(event), {"userId": member.id, "status": "maybe"}, content_type="application/json")
    assert bad.status_code == 400
    assert bad.json()["errors"] == {"status": "Status must be attending or waitlist"}


@pytest.mark.django_db
def test_co_host_can_review_attendance(client_for, make_user, group, member, event):
    co_host = make_user()
    Membership.objects.create(group=group, user=co_host, status=Membership.STATUS_CO_HOST)
    Attendance.objects.create(event=event, user=member)

    resp = client_for(co_host).put(_url(event), {"userId": member.id, "status": "attending"}, content_type="application/json")
    assert resp.status_code == 200


@pytest.mark.django_db
def test_delete_own_attendance(client_for, member, event):
    Attendance.objects.create(event=event, user=member, status=Attendance.STATUS_ATTENDING)

    resp = client_for(member).delete(_url(event), {"userId": member.id}, content_type="application/json")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Successfully deleted attendance from event"}
    assert not Attendance.objects.filter(event=event, user=member).exists()


@pytest.mark.django_db
def test_delete_attendance_rules(auth_client, client_for, member, make_user, group, event):
    other = make_user()
    Attendance.objects.create(event=event, user=other, status=Attendance.STATUS_ATTENDING)

    forbidden = client_for(member).delete(_url(event), {"userId": other.id}, content_type="application/json")
    assert forbidden.status_code == 403
    assert forbidden.json() == {"message": "Only the User or organizer may delete an Attendance"}

    # co-hosts may review attendance but not remove someone else's
    co_host = make_user()
    Membership.objects.create(group=group, user=co_host, status=Membership.STATUS_CO_HOST)
    assert client_for(co_host).delete(_url(event), {"userId": other.id}, content_type="application/json").status_code == 403

    missing = auth_client.delete(_url(event), {"userId": member.id}, content_type="application/json")
    assert missing.status_code == 404
    assert missing.json() == {"message": "Attendance does not exist for this User"}

    ok = auth_client.delete(_url(event), {"userId": other.id}, content_type="application/json")
    assert ok.status_code == 200


@pytest.mark.django_db
def test_attendance_on_missing_event(auth_client):
    resp = auth_client.post("/api/events/9999/attendance")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Event couldn't be found"}
