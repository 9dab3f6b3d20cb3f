# user/views.py
import logging

from django.contrib.auth import authenticate
from drf_yasg.utils import swagger_auto_schema
from rest_framework import viewsets, permissions, status, generics
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ParseError
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from .models import User, PIN_LOGIN_ROLES
from .permissions import IsManager
from .serializers import (
    UserSerializer,
    RegisterSerializer,
    PinLoginSerializer,
    EmailPasswordLoginSerializer,
    ChangePasswordSerializer,
)

logger = logging.getLogger(__name__)


def _session_payload(user):
    """A login session is the refresh/access pair plus who it belongs to."""
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
        'user_id': user.id,
        'user_name': user.name,
        'email': user.email,
        'role': user.role,
    }


class UserViewSet(viewsets.ModelViewSet):
    """
    API endpoint for full CRUD on users.
    Restricted to managers.
    """
    queryset = User.objects.all().order_by('name')
    serializer_class = UserSerializer
    permission_classes = [IsManager]
    filterset_fields = ['role', 'is_active']


class RegisterAPIView(generics.CreateAPIView):
    """Customer self sign-up."""
    serializer_class = RegisterSerializer
    authentication_classes = []
    permission_classes = [permissions.AllowAny]


class PinLoginAPIView(APIView):
    """
    API endpoint to handle PIN-based login and return a JWT token.
    """
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    @swagger_auto_schema(tags=['Auth'], request_body=PinLoginSerializer)
    def post(self, request):
        serializer = PinLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        pin = serializer.validated_data['pin']

        user = authenticate(request, pin=pin)
        if user is None:
            logger.info("PIN login failed.")
            return Response({'error': 'Invalid PIN'}, status=status.HTTP_401_UNAUTHORIZED)
        if user.role not in PIN_LOGIN_ROLES:
            return Response({'error': 'PIN login is not allowed for this user.'}, status=status.HTTP_401_UNAUTHORIZED)
        return Response(_session_payload(user), status=status.HTTP_200_OK)


class EmailPasswordJWTLoginAPIView(APIView):
    """
    API endpoint for email/password login that returns JWT tokens.
    """
    authentication_classes = []
    permission_classes = [permissions.AllowAny]
    serializer_class = EmailPasswordLoginSerializer

    @swagger_auto_schema(tags=['Auth'], request_body=EmailPasswordLoginSerializer)
    def post(self, request):
        serializer = self.serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)

        email = serializer.validated_data['email']
        password = serializer.validated_data['password']

        user = authenticate(request, username=email, password=password)
        if user is None:
            logger.info("Password login failed for %s.", email)
            return Response({'error': 'Invalid credentials.'}, status=status.HTTP_401_UNAUTHORIZED)
        return Response(_session_payload(user), status=status.HTTP_200_OK)


class LogoutAPIView(APIView):
    """Blacklist a refresh token on logout, ending that session.

    Accepts POST with JSON: { "refresh": "<refresh_token>" }
    """
    permission_classes = [permissions.AllowAny]

    @swagger_auto_schema(tags=['Auth'])
    def post(self, request):
        refresh_token = request.data.get('refresh')
        if not refresh_token:
            raise ParseError('`refresh` token is required in request body.')

        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError:
            return Response({'error': 'Invalid or expired token.'}, status=status.HTTP_400_BAD_REQUEST)

        return Response({'detail': 'Successfully logged out.'}, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def getmeview(request):
    """
    Simple view to return current authenticated user's info.
    """
    serializer = UserSerializer(request.user)
    return Response(serializer.data)


class ChangePasswordView(generics.UpdateAPIView):
    """
    An endpoint for changing password for authenticated users.
    """
    serializer_class = ChangePasswordSerializer
    permission_classes = (permissions.IsAuthenticated,)

    def get_object(self, queryset=None):
        return self.request.user

    def update(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({"detail": "Password updated successfully"}, status=status.HTTP_200_OK)
