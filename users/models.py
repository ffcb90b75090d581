# users/models.py
from django.conf import settings
from django.db import models
from django.db.models.signals import post_save
from django.dispatch import receiver
from django.utils import timezone
from rest_framework.authtoken.models import Token
from django.contrib.auth.models import (
    AbstractBaseUser, PermissionsMixin, BaseUserManager
)


class Role(models.TextChoices):
    ADMIN = "admin", "Admin"
    INTERN = "intern", "Intern"
    MEMBER = "member", "Member"


class InternshipStatus(models.TextChoices):
    NOT_STARTED = "not_started", "Not started"
    IN_PROGRESS = "in_progress", "In progress"
    COMPLETED = "completed", "Completed"


class CustomUserManager(BaseUserManager):
    """Custom manager where email is the unique identifier for authentication"""
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("The Email field is required")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("role", Role.ADMIN)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("is_active", True)
        return self.create_user(email, password, **extra_fields)

    def interns(self):
        return self.filter(role=Role.INTERN)


class CustomUser(AbstractBaseUser, PermissionsMixin):
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=255, blank=True, null=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.MEMBER, db_index=True)

    # Internship window and current state
    internship_start_date = models.DateField(blank=True, null=True)
    internship_end_date = models.DateField(blank=True, null=True)
    internship_status = models.CharField(
        max_length=20, choices=InternshipStatus.choices, default=InternshipStatus.NOT_STARTED
    )
    current_internship = models.ForeignKey(
        "internships.Internship", on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    latest_certificate = models.ForeignKey(
        "certificates.Certificate", on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    date_joined = models.DateTimeField(default=timezone.now)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = CustomUserManager()

    class Meta:
        ordering = ["-date_joined"]

    @property
    def is_admin(self):
        return self.role == Role.ADMIN

    @property
    def is_intern(self):
        return self.role == Role.INTERN

    @property
    def display_name(self):
        return self.name or self.email.split("@")[0]

    def save(self, *args, **kwargs):
        # admins always get into the Django admin site
        if self.role == Role.ADMIN:
            self.is_staff = True
        super().save(*args, **kwargs)

    def deactivate(self):
        """Soft delete: accounts are never removed, only switched off."""
        self.is_active = False
        self.save(update_fields=["is_active"])
        Token.objects.filter(user=self).delete()

    def __str__(self):
        return self.email or str(self.id)


# -------------------------------
# DRF TOKEN SIGNAL
# -------------------------------
@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_auth_token(sender, instance=None, created=False, **kwargs):
    if created:
        Token.objects.create(user=instance)
