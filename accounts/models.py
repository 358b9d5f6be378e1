from django.contrib.auth.models import AbstractUser
from django.db import models


class CustomUser(AbstractUser):
    USER_TYPE_CHOICES = (
        ('donor', 'Donor'),
        ('requester', 'Requester'),
        ('admin', 'Admin'),
    )

    user_type = models.CharField(
        max_length=15,
        choices=USER_TYPE_CHOICES,
        default='donor'
    )
    email = models.EmailField(unique=True)

    def __str__(self):
        return f"{self.username} ({self.user_type})"

    @property
    def is_admin_account(self) -> bool:
        """Admins are never offered as donors"""
        return self.user_type == 'admin' or self.is_staff or self.is_superuser
