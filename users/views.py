"""
Views for the users app: registration, JWT login and the current user.
"""
import logging

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView

from .serializers import CredentialTokenObtainPairSerializer, RegisterSerializer, UserSerializer

logger = logging.getLogger(__name__)


class RegisterView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Registered user=%s", user.id)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class CredentialTokenObtainPairView(TokenObtainPairView):
    serializer_class = CredentialTokenObtainPairSerializer


class MeView(APIView):
    """GET the authenticated user, or `{"user": null}` for anonymous callers."""
    permission_classes = [permissions.AllowAny]

    def get(self, request, *args, **kwargs):
        if not request.user or not request.user.is_authenticated:
            return Response({"user": None})
        return Response({"user": UserSerializer(request.user).data})
