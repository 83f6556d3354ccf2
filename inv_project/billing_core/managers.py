from django.contrib.auth.base_user import BaseUserManager
from django.db import models

from .exceptions import NotFound


# -----------------------------------------
# Enforce owner scoping across all models
# that belong to a user
# -----------------------------------------
# Define subclass of Django’s QuerySet
class OwnedQuerySet(models.QuerySet):
    def for_owner(self, owner):         # Add queryset helper
        return self.filter(owner=owner)  # Apply filter

    def get_owned(self, owner, pk, lock=False):
        """
        Fetch one record by primary key *and* owner.
        Missing rows and rows owned by someone else raise the same NotFound,
        so callers can't probe for other owners' ids.
        """
        qs = self.for_owner(owner)
        if lock:
            # Row stays locked until the surrounding atomic block ends
            qs = qs.select_for_update()
        try:
            return qs.get(pk=pk)
        except (self.model.DoesNotExist, ValueError, TypeError):
            # ValueError/TypeError cover malformed ids ("abc", None)
            raise NotFound(f"{self.model.__name__} not found")

    # Enables query:
    # Invoice.objects.get_owned(request.user, invoice_id)


# Attach OwnedQuerySet to .objects
class OwnedManager(models.Manager.from_queryset(OwnedQuerySet)):
    pass


class UserManager(BaseUserManager):
    """ Enforce rules around how users are created """

    use_in_migrations = True  # Allow Django to serialize this manager in migrations

    # Shared logic for both create_user() & create_superuser()
    def _create_user(self, username, email, password, **extra_fields):
        if not username:  # Username is required
            raise ValueError("The given username must be set")
        if not email:  # Email identifies the owner, so it's required too
            raise ValueError("The given email must be set")
        email = self.normalize_email(email).lower()
        user = self.model(username=username, email=email, **extra_fields)
        user.set_password(password)  # Password is hashed
        user.save(using=self._db)
        return user

    def create_user(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(username, email, password, **extra_fields)

    # Used by Django when running `createsuperuser`
    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        # You cannot pass conflicting values
        if extra_fields.get("is_staff") is not True or extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_staff=True and is_superuser=True")
        return self._create_user(username, email, password, **extra_fields)
