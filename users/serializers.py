"""
Serializers for the users app.

Defines the compact user shape embedded in group/event payloads, the
registration serializer, and a login serializer that accepts either a
username or an email as the credential and returns JWT refresh/access
tokens.
"""
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.contrib.auth.validators import UnicodeUsernameValidator
from django.db.models import Q
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.validators import UniqueValidator
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

User = get_user_model()


class UserMiniSerializer(serializers.ModelSerializer):
    """`{id, firstName, lastName}` as embedded in organizer/attendee payloads."""
    firstName = serializers.CharField(source="first_name", read_only=True)
    lastName = serializers.CharField(source="last_name", read_only=True)

    class Meta:
        model = User
        fields = ("id", "firstName", "lastName")


class UserSerializer(UserMiniSerializer):
    class Meta:
        model = User
        fields = ("id", "firstName", "lastName", "email", "username")


class RegisterSerializer(serializers.ModelSerializer):
    username = serializers.CharField(
        min_length=3,
        max_length=150,
        validators=[
            UnicodeUsernameValidator(),
            UniqueValidator(queryset=User.objects.all(), message="User with that username already exists"),
        ],
    )
    email = serializers.EmailField(
        validators=[UniqueValidator(queryset=User.objects.all(), message="User with that email already exists")],
        error_messages={"invalid": "Invalid email"},
    )
    password = serializers.CharField(write_only=True, style={"input_type": "password"})
    firstName = serializers.CharField(
        source="first_name",
        max_length=150,
        error_messages={"required": "First Name is required", "blank": "First Name is required"},
    )
    lastName = serializers.CharField(
        source="last_name",
        max_length=150,
        error_messages={"required": "Last Name is required", "blank": "Last Name is required"},
    )

    class Meta:
        model = User
        fields = ["id", "username", "email", "password", "firstName", "lastName"]
        read_only_fields = ["id"]

    def validate_username(self, value: str) -> str:
        if "@" in value:
            raise serializers.ValidationError("Username cannot be an email.")
        return value

    def validate(self, attrs):
        pseudo_user = User(username=attrs.get("username"), email=attrs.get("email"))
        validate_password(attrs["password"], user=pseudo_user)
        return attrs

    def create(self, validated_data):
        password = validated_data.pop("password")
        user = User(**validated_data)
        user.set_password(password)
        user.save()
        return user


class CredentialTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Login using username-or-email + password and return SimpleJWT tokens.
    POST body: {"credential": "...", "password": "..."}
    """
    credential = serializers.CharField(write_only=True)
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields.pop(self.username_field, None)

    def validate(self, attrs):
        credential = attrs.get("credential", "").strip()
        user = User.objects.filter(Q(username=credential) | Q(email__iexact=credential)).first()
        if user is None or not user.is_active or not user.check_password(attrs.get("password")):
            raise AuthenticationFailed("Invalid credentials")

        refresh = self.get_token(user)
        return {
            "refresh": str(refresh),
            "access": str(refresh.access_token),
            "user": UserSerializer(user).data,
        }
