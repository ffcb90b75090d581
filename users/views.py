from django.contrib.auth import get_user_model
from rest_framework import viewsets, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.authtoken.views import ObtainAuthToken
from rest_framework.authtoken.models import Token
from rest_framework.permissions import AllowAny, IsAuthenticated
from django.contrib.auth.signals import user_logged_in, user_logged_out
from admin_panel.permissions import IsAdminRole
from admin_panel.utils import log_admin_activity
from .serializers import (
    UserRegistrationSerializer, UserProfileSerializer, EmailAuthTokenSerializer
)
import logging

logger = logging.getLogger(__name__)

User = get_user_model()


class UserViewSet(viewsets.ModelViewSet):
    """
    Admin management of interns and members.

    Users are never hard-deleted: DELETE deactivates the account.
    """
    queryset = User.objects.select_related("latest_certificate").order_by("-id")
    serializer_class = UserProfileSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get_queryset(self):
        queryset = super().get_queryset()
        role = self.request.query_params.get("role")
        if role:
            queryset = queryset.filter(role=role)
        is_active = self.request.query_params.get("is_active")
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active.lower() in ["true", "1"])
        return queryset

    def perform_create(self, serializer):
        user = serializer.save()
        log_admin_activity(
            self.request.user, "CREATE", "User", user.id,
            f"Created {user.role} account {user.email}", request=self.request,
        )

    def perform_update(self, serializer):
        user = serializer.save()
        log_admin_activity(
            self.request.user, "UPDATE", "User", user.id,
            f"Updated account {user.email}", request=self.request,
        )

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        if user.pk == request.user.pk:
            return Response(
                {"error": "You cannot deactivate your own account."},
                status=status.HTTP_400_BAD_REQUEST
            )
        user.deactivate()
        log_admin_activity(
            request.user, "DEACTIVATE", "User", user.id,
            f"Deactivated account {user.email}", request=request,
        )
        logger.info(f"User {user.email} deactivated by {request.user.email}")
        return Response(self.get_serializer(user).data, status=status.HTTP_200_OK)


class RegisterView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = UserRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(UserRegistrationSerializer(user).data, status=status.HTTP_201_CREATED)


class CustomAuthToken(ObtainAuthToken):
    serializer_class = EmailAuthTokenSerializer
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = self.serializer_class(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data['user']
        token, _ = Token.objects.get_or_create(user=user)
        user_logged_in.send(sender=user.__class__, request=request, user=user)
        return Response({
            'token': token.key,
            'user': {
                'id': user.id,
                'name': user.display_name,
                'email': user.email,
                'role': user.role,
            }
        })


class UserProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        serializer = UserProfileSerializer(request.user)
        return Response(serializer.data)


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        Token.objects.filter(user=request.user).delete()
        user_logged_out.send(sender=request.user.__class__, request=request, user=request.user)
        return Response({"message": "Logged out successfully"})
