# user/models.py
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone
# Import password hashing functions
from django.contrib.auth.hashers import make_password, check_password


class Role(models.TextChoices):
    MANAGER = 'manager', 'Manager'
    WAITER = 'waiter', 'Waiter'
    KITCHEN = 'kitchen', 'Kitchen'
    BAR = 'bar', 'Bar'
    CUSTOMER = 'customer', 'Customer'


# Roles allowed to sign in with a PIN on the shared staff terminals
PIN_LOGIN_ROLES = (Role.WAITER, Role.KITCHEN, Role.BAR)
STAFF_ROLES = (Role.MANAGER, Role.WAITER, Role.KITCHEN, Role.BAR)


class UserManager(BaseUserManager):
    def create_user(self, email, name, password=None, **extra_fields):
        """Creates and saves a User with the given email, name and password."""
        if not email:
            raise ValueError('The Email field must be set')
        if not name:
            raise ValueError('The Name field must be set')

        extra_fields.setdefault('role', Role.CUSTOMER)

        user = self.model(email=self.normalize_email(email), name=name, **extra_fields)
        if password:
            user.set_password(password)
        else:
            # PIN-only staff accounts have no usable password
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, name, password=None, **extra_fields):
        """Creates and saves a manager account with full admin rights."""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', Role.MANAGER)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')
        if extra_fields.get('role') != Role.MANAGER:
            raise ValueError('Superuser must have role="manager".')
        if not password:
            raise ValueError('Superuser must have a password.')

        return self.create_user(email, name, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=255)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.CUSTOMER)

    # Hashed PIN for quick staff login; empty for customers and managers
    pin = models.CharField(max_length=128, blank=True, null=True, verbose_name="PIN Hash")

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    date_joined = models.DateTimeField(default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    def __str__(self):
        return f"{self.name} ({self.email})"

    def has_role(self, *roles):
        return self.role in roles

    def set_pin(self, raw_pin):
        """
        Hashes the raw PIN and sets it on the user.
        Never store raw PINs!
        """
        if not raw_pin:
            self.pin = None
        else:
            self.pin = make_password(str(raw_pin))

    def check_pin(self, raw_pin):
        """
        Checks if the raw PIN matches the stored hash.
        Returns True if it matches, False otherwise.
        """
        if not self.pin or not raw_pin:
            return False
        return check_password(str(raw_pin), self.pin)
