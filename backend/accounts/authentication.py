"""
DRF authentication backed by FocusFlow access tokens.
"""

from rest_framework.authentication import BaseAuthentication, get_authorization_header

from accounts.models import User
from accounts.tokens import verify_access_token
from common.errors import AuthenticationError

KEYWORD = 'Bearer'


class JWTAuthentication(BaseAuthentication):
    """
    Authenticate `Authorization: Bearer <token>` requests.

    Requests without the header are left anonymous; the permission check then
    reports "Access token required". A present but bad token fails outright.
    """

    def authenticate(self, request):
        header = get_authorization_header(request).split()
        if not header or header[0].lower() != KEYWORD.lower().encode():
            return None

        if len(header) != 2:
            raise AuthenticationError('Invalid or expired access token')

        try:
            token = header[1].decode()
        except UnicodeError:
            raise AuthenticationError('Invalid or expired access token')

        claims = verify_access_token(token)
        user = User.objects.filter(pk=claims['userId']).first()
        if user is None or not user.is_active:
            raise AuthenticationError('User not found')
        return user, claims

    def authenticate_header(self, request):
        return KEYWORD
