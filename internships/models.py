from django.conf import settings
from django.core.validators import MaxValueValidator
from django.db import models
from django.db.models import Q


class InternshipQuerySet(models.QuerySet):
    def active(self):
        return self.exclude(status=Internship.Status.COMPLETED)

    def completed(self):
        return self.filter(status=Internship.Status.COMPLETED)


class Internship(models.Model):
    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        IN_PROGRESS = "in_progress", "In progress"
        COMPLETED = "completed", "Completed"

    # forward-only lifecycle
    TRANSITIONS = {
        Status.PENDING: {Status.IN_PROGRESS, Status.COMPLETED},
        Status.IN_PROGRESS: {Status.COMPLETED},
        Status.COMPLETED: set(),
    }

    intern = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="internships"
    )
    title = models.CharField(max_length=255)
    start_date = models.DateField()
    end_date = models.DateField(null=True, blank=True)
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True
    )
    progress = models.PositiveSmallIntegerField(default=0, validators=[MaxValueValidator(100)])
    notes = models.TextField(blank=True, default="")
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = InternshipQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["intern"],
                condition=~Q(status="completed"),
                name="one_active_internship_per_intern",
            ),
        ]

    def __str__(self):
        return f"{self.title} - {self.intern.email} ({self.status})"

    @property
    def is_completed(self):
        return self.status == self.Status.COMPLETED

    def can_transition_to(self, status):
        return status in self.TRANSITIONS[self.Status(self.status)]
