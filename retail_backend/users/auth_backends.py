"""
PATH: users/auth_backends.py

AUTH BACKEND: Email OR Username login

Rules:
- The identifier is treated as an email when it contains "@",
  otherwise as a username (both case-insensitive).
- Passing email=... and username=... together is rejected (returns None).
- Inactive users never authenticate.

Used by Django admin login, JWT token obtain and users.views.LoginView.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend


class EmailOrUsernameBackend(ModelBackend):
    def authenticate(self, request, username=None, password=None, **kwargs):
        User = get_user_model()

        email_kw = (kwargs.get("email") or "").strip()
        username = (username or "").strip()

        if email_kw and username:
            return None

        identifier = username or email_kw
        if not identifier or password is None:
            return None

        lookup = {"email__iexact": identifier} if "@" in identifier else {"username__iexact": identifier}
        user = User.objects.filter(**lookup).first()

        if user is None:
            # Run the hasher anyway so unknown identifiers cost the same time.
            User().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user

        return None
