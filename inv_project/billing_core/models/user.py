from django.contrib.auth.models import AbstractUser
from django.db import models

from ..managers import UserManager


# ---------- Custom User ----------
class User(AbstractUser):  # Every owned record points back at one of these
    # Inherits from Django’s AbstractUser, so it keeps all the usual fields
    """
    Before you run your very first migrate,
    settings.py must contain 'AUTH_USER_MODEL = "billing_core.User"'
    to avoid migration conflicts
    """
    # Email is the login identity, one per user
    email = models.EmailField(unique=True)

    # Optional contact number field, can be left empty in forms
    phone = models.CharField(max_length=32, blank=True)

    objects = UserManager()

    REQUIRED_FIELDS = ["email"]

    # Controls how user is displayed
    def __str__(self):
        # Fall back to username if no name is set
        return self.get_full_name() or self.username
