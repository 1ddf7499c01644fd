"""
Bearer token authentication for the API.

Requests carry ``Authorization: Bearer <access token>``. The token is
verified by simplejwt and its subject resolved to a :class:`User`. This
class is kept apart from any view definitions so that DRF can import it
from settings without circular imports.
"""
from __future__ import annotations

from rest_framework_simplejwt.authentication import JWTAuthentication


class BearerTokenAuthentication(JWTAuthentication):
    """simplejwt authentication with a stable import path for settings.

    A missing header leaves the request anonymous so that the permission
    layer answers with 401 and a ``WWW-Authenticate: Bearer`` challenge;
    a malformed or expired token is rejected outright.
    """

    www_authenticate_realm = 'hospital-api'
