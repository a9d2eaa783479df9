"""
Common test fixtures for the API tests.

Provides users, a JWT-authenticated Django test client, a factory for
clients authenticated as any user, and a group with a venue and an
upcoming event owned by the default user.
"""
import datetime as dt
from decimal import Decimal

import pytest
from django.contrib.auth.models import User
from django.test import Client
from django.utils import timezone
from rest_framework_simplejwt.tokens import RefreshToken

from events.models import Event
from groups.models import Group, Membership, Venue


@pytest.fixture
def user(db):
    """Create a test user (the organizer of the `group` fixture)."""
    return User.objects.create_user(
        username="u1", password="pass12345", email="u1@example.com",
        first_name="Una", last_name="One",
    )


@pytest.fixture
def make_user(db):
    counter = {"n": 1}

    def _make(**extra):
        counter["n"] += 1
        n = counter["n"]
        fields = {"email": f"u{n}@example.com", "first_name": f"User{n}", "last_name": "Test"}
        fields.update(extra)
        return User.objects.create_user(username=f"u{n}", password="pass12345", **fields)

    return _make


@pytest.fixture
def auth_client(client, db, user):
    """Authenticate the Django test client using JWT tokens."""
    resp = client.post(
        "/api/auth/token/",
        {"credential": "u1", "password": "pass12345"},
        content_type="application/json",
    )
    assert resp.status_code == 200
    token = resp.json()["access"]
    client.defaults["HTTP_AUTHORIZATION"] = f"Bearer {token}"
    return client


@pytest.fixture
def client_for(db):
    """Return a test client carrying a bearer token for the given user."""
    def _client(u):
        token = RefreshToken.for_user(u).access_token
        return Client(HTTP_AUTHORIZATION=f"Bearer {token}")

    return _client


@pytest.fixture
def group(db, user):
    g = Group.objects.create(
        organizer=user,
        name="Evening Tennis",
        about="Tennis on the weekends and weeknights for players of every level.",
        private=False,
        city="Shanghai",
        state="SH",
    )
    Membership.objects.create(group=g, user=user, status=Membership.STATUS_CO_HOST)
    return g


@pytest.fixture
def venue(db, group):
    return Venue.objects.create(group=group, address="123 Disney Lane", city="New York", state="NY")


@pytest.fixture
def event(db, group, venue):
    start = timezone.now() + dt.timedelta(days=7)
    return Event.objects.create(
        group=group,
        venue=venue,
        name="Tennis Group First Meet and Greet",
        description="First meet and greet event for the evening tennis group!",
        type=Event.TYPE_IN_PERSON,
        capacity=10,
        price=Decimal("18.50"),
        start_date=start,
        end_date=start + dt.timedelta(hours=3),
    )
