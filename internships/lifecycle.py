"""
Internship lifecycle: forward-only status transitions and certificate issuance.

Completion is a compare-and-set on ``status`` so that concurrent or retried
requests complete an internship exactly once; every caller, winner or not,
gets the same certificate back.
"""
from collections import namedtuple
from datetime import timedelta
import logging

from django.contrib.auth import get_user_model
from django.db import models
from django.db.models import F, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from admin_panel.utils import log_admin_activity
from certificates.models import Certificate
from certificates.storage import upload_artifact
from users.models import InternshipStatus
from .models import Internship

logger = logging.getLogger(__name__)

User = get_user_model()

CompletionResult = namedtuple("CompletionResult", ["internship", "certificate", "created"])


class InvalidTransition(Exception):
    """Requested status change would move an internship backwards or sideways."""


def link_new_internship(internship):
    """Point the intern's record at a freshly created internship."""
    User.objects.filter(pk=internship.intern_id).update(
        current_internship=internship,
        internship_start_date=internship.start_date,
        internship_end_date=internship.end_date,
    )


def start_internship(internship, actor=None, request=None):
    """pending -> in_progress."""
    if not internship.can_transition_to(Internship.Status.IN_PROGRESS):
        raise InvalidTransition(f"Cannot start an internship that is {internship.status}")

    rows = Internship.objects.filter(pk=internship.pk, status=Internship.Status.PENDING).update(
        status=Internship.Status.IN_PROGRESS, updated_at=timezone.now()
    )
    if not rows:
        raise InvalidTransition("Internship was already started or completed")

    internship.refresh_from_db()
    User.objects.filter(pk=internship.intern_id).update(
        internship_status=InternshipStatus.IN_PROGRESS,
        current_internship=internship,
    )
    log_admin_activity(
        actor, "UPDATE", "Internship", internship.pk,
        f"Started internship '{internship.title}'", request=request,
    )
    return internship


def complete_internship(internship_id, actor=None, request=None):
    """
    Mark an internship completed and return its certificate.

    Raises ``Internship.DoesNotExist`` for an unknown id. Calling it again
    for a completed internship is a no-op that returns the existing
    certificate. The status change is committed before the certificate is
    minted, and the external artifact upload never affects either.
    """
    internship = Internship.objects.select_related("intern").get(pk=internship_id)
    now = timezone.now()

    transitioned = Internship.objects.filter(pk=internship.pk).active().update(
        status=Internship.Status.COMPLETED,
        completed_at=now,
        end_date=Coalesce(F("end_date"), Value(timezone.localdate()), output_field=models.DateField()),
        progress=100,
        updated_at=now,
    )
    internship.refresh_from_db()

    if transitioned:
        logger.info(f"Internship {internship.pk} marked completed")
        log_admin_activity(
            actor, "COMPLETE", "Internship", internship.pk,
            f"Completed internship '{internship.title}' for {internship.intern.email}", request=request,
        )
    else:
        logger.info(f"Internship {internship.pk} already completed, returning existing certificate")

    certificate, created = Certificate.issue(internship)
    if transitioned or created:
        _link_owner(internship, certificate)

    if certificate.artifact_status != Certificate.ArtifactStatus.UPLOADED:
        upload_artifact(certificate)

    return CompletionResult(internship, certificate, created)


def complete_active_internship_for(intern_id, actor=None, request=None):
    """Complete whatever internship the intern currently holds."""
    intern = User.objects.get(pk=intern_id)
    internships = Internship.objects.filter(intern=intern)
    internship = internships.active().first() or internships.completed().first()
    if internship is None:
        raise Internship.DoesNotExist(f"No internship found for intern {intern.email}")
    return complete_internship(internship.pk, actor=actor, request=request)


def update_progress(internship, progress=None, notes=None, actor=None, request=None):
    """
    Record progress; reaching 100 completes the internship.

    Returns ``(internship, certificate)`` where certificate is None unless
    this update completed it.
    """
    if internship.is_completed:
        return internship, getattr(internship, "certificate", None)

    if progress is not None:
        internship.progress = progress
    if notes is not None:
        internship.notes = notes
    internship.save(update_fields=["progress", "notes", "updated_at"])

    if internship.progress >= 100:
        result = complete_internship(internship.pk, actor=actor, request=request)
        return result.internship, result.certificate
    return internship, None


def complete_due_internships(actor=None):
    """
    Complete every in-progress internship whose end date has passed, and mint missing
    certificates for completed internships that have none.
    """
    today = timezone.localdate()
    results = []

    due = (
        Internship.objects
        .filter(status=Internship.Status.IN_PROGRESS, end_date__lte=today)
        .values_list("pk", flat=True)
    )
    for internship_id in list(due):
        results.append(complete_internship(internship_id, actor=actor))

    orphans = Internship.objects.completed().filter(certificate__isnull=True).values_list("pk", flat=True)
    for internship_id in list(orphans):
        results.append(complete_internship(internship_id, actor=actor))

    logger.info(f"Completion check finished: {len(results)} internships processed")
    return results


def internships_nearing_completion(days=7):
    """In-progress internships ending within ``days``, as ``(internship, days_left)`` pairs."""
    today = timezone.localdate()
    upcoming = (
        Internship.objects
        .filter(status=Internship.Status.IN_PROGRESS)
        .filter(end_date__gte=today, end_date__lte=today + timedelta(days=days))
        .select_related("intern")
        .order_by("end_date")
    )
    return [(internship, (internship.end_date - today).days) for internship in upcoming]


def _link_owner(internship, certificate):
    """
    Point the owner at a newly completed internship's certificate without
    rolling back anything that happened to them since.
    """
    users = User.objects.filter(pk=internship.intern_id)
    users.filter(current_internship=internship).update(current_internship=None)

    newer = Certificate.objects.filter(
        intern_id=internship.intern_id, issued_at__gt=certificate.issued_at
    ).exists()
    if not newer:
        users.update(latest_certificate=certificate)

    still_active = Internship.objects.active().filter(intern_id=internship.intern_id).exists()
    if not still_active:
        users.update(internship_status=InternshipStatus.COMPLETED)
