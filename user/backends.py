# user/backends.py
from django.contrib.auth.backends import ModelBackend
from django.contrib.auth import get_user_model

from .models import PIN_LOGIN_ROLES

User = get_user_model()


class EmailPasswordAuthBackend(ModelBackend):
    """
    Authenticates users based on email and password.
    This handles standard logins, including the admin interface.
    """
    def authenticate(self, request, username=None, password=None, **kwargs):
        # 'username' carries the USERNAME_FIELD value ('email')
        email = username or kwargs.get('email')
        if not email or password is None:
            return None
        try:
            user = User.objects.get(email__iexact=email)
        except User.DoesNotExist:
            # Run the default password hasher once to reduce timing attacks
            User().set_password(password)
            return None
        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None


class PinOnlyAuthBackend(ModelBackend):
    """
    Authenticates users based solely on a unique PIN.
    PIN login is restricted to the waiter, kitchen and bar roles.
    """
    def authenticate(self, request, pin=None, **kwargs):
        if not pin:
            return None

        # Hashes cannot be filtered on, so check each candidate with a PIN set
        possible_users = User.objects.filter(
            role__in=PIN_LOGIN_ROLES,
            is_active=True,
        ).exclude(pin__isnull=True).exclude(pin__exact='')

        for user in possible_users:
            if user.check_pin(pin):
                return user
        return None
