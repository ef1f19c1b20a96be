from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    # id, username, password, is_active, is_staff, is_superuser, groups, user_permissions are inherited
    ROLE_CUSTOMER = "customer"
    ROLE_ADMIN = "admin"
    ROLE_CHOICES = [(ROLE_CUSTOMER, "Customer"), (ROLE_ADMIN, "Admin")]

    email = models.EmailField(unique=True)
    name = models.CharField(max_length=100, blank=True, default="")
    phone = models.CharField(max_length=20, blank=True, null=True)
    address = models.CharField(max_length=500, blank=True, null=True)
    # Relative path under PUBLIC_ROOT or an absolute URL from a social login
    avatar = models.CharField(max_length=500, blank=True, null=True)
    google_id = models.CharField(max_length=255, blank=True, null=True, unique=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_CUSTOMER)
    activated = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "users"

    def __str__(self):
        return self.username

    @property
    def can_change_password(self) -> bool:
        return not self.google_id
