"""
Authentication views.

Registration and login exchange a login/password pair for a bearer
token pair (access + refresh). Refresh and logout operate on the refresh
token; logout blacklists it so it can no longer mint access tokens.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate, get_user_model
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken

from clinic.serializers.auth import LoginSerializer, LogoutSerializer, RegisterSerializer
from clinic.services.audit import log_action

logger = logging.getLogger(__name__)

User = get_user_model()


def _token_payload(user) -> dict:
    refresh = RefreshToken.for_user(user)
    return {
        'ok': True,
        'token': str(refresh.access_token),
        'refresh': str(refresh),
        'tokenType': 'Bearer',
        'user': {'id': user.id, 'login': user.username},
    }


# ---------------------------------------------------------------------
# Register / login
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def register_view(request):
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = User.objects.create_user(username=s.validated_data['login'], password=s.validated_data['password'])
    log_action(user=user, action='register', object_type='user', object_id=user.id)
    logger.info("User %s registered", user.username)
    return Response(_token_payload(user), status=201)


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([ScopedRateThrottle])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    login = s.validated_data['login']

    user = authenticate(request, username=login, password=s.validated_data['password'])
    if not user:
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'fail', 'login': login, 'ip': request.META.get('REMOTE_ADDR')})
        logger.warning("Failed login for %s", login)
        return Response({'ok': False, 'error': {'code': 'invalid_credentials', 'message': 'Invalid login or password'}},
                        status=400)

    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': request.META.get('REMOTE_ADDR')})
    return Response(_token_payload(user))

# ScopedRateThrottle reads throttle_scope from the wrapped APIView class
login_view.cls.throttle_scope = 'login'


# ---------------------------------------------------------------------
# JWT: refresh & logout
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def refresh_view(request):
    """Return a new access token from a refresh token."""
    s = TokenRefreshSerializer(data=request.data)
    try:
        s.is_valid(raise_exception=True)
    except TokenError as e:
        raise InvalidToken(e.args[0])
    return Response({'ok': True, 'token': s.validated_data['access'], 'tokenType': 'Bearer'})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    """Blacklist the given refresh token, or every outstanding one of the user."""
    s = LogoutSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    refresh = s.validated_data.get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
        except TokenError as e:
            raise InvalidToken(e.args[0])
        count = 1
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    log_action(user=request.user, action='logout', object_type='user', object_id=request.user.id,
               detail={'blacklisted': count})
    return Response({'ok': True, 'blacklisted': count})
