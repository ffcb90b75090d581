from django.conf import settings
from django.core import signing
from django.db import IntegrityError, models, transaction
from django.utils import timezone
import logging

from .utils import generate_certificate_id, certificate_page_url, sign_payload, unsign_payload

logger = logging.getLogger(__name__)

MAX_ID_ATTEMPTS = 5


class Certificate(models.Model):
    class ArtifactStatus(models.TextChoices):
        PENDING = "pending", "Pending"
        UPLOADED = "uploaded", "Uploaded"
        DISABLED = "disabled", "Disabled"

    certificate_id = models.CharField(max_length=40, unique=True, editable=False)
    intern = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="certificates"
    )
    internship = models.OneToOneField(
        "internships.Internship", on_delete=models.PROTECT, related_name="certificate"
    )
    issued_at = models.DateTimeField(default=timezone.now)
    certificate_url = models.URLField(max_length=500)
    signed_payload = models.TextField(editable=False)

    # display snapshot taken at issuance
    intern_name = models.CharField(max_length=255)
    internship_title = models.CharField(max_length=255)
    start_date = models.DateField()
    end_date = models.DateField()
    company = models.CharField(max_length=120)

    artifact_url = models.URLField(max_length=500, null=True, blank=True)
    artifact_status = models.CharField(
        max_length=20, choices=ArtifactStatus.choices, default=ArtifactStatus.PENDING, db_index=True
    )
    artifact_attempts = models.PositiveIntegerField(default=0)
    artifact_error = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["-issued_at"]

    def __str__(self):
        return f"{self.certificate_id} - {self.intern_name}"

    def snapshot(self):
        return {
            "certificate_id": self.certificate_id,
            "intern_name": self.intern_name,
            "internship_title": self.internship_title,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "issued_at": self.issued_at.isoformat(),
            "company": self.company,
        }

    def has_valid_signature(self):
        try:
            payload = unsign_payload(self.signed_payload)
        except signing.BadSignature:
            logger.warning(f"Certificate {self.certificate_id} failed signature check")
            return False
        return payload == self.snapshot()

    @classmethod
    def issue(cls, internship):
        """
        Return ``(certificate, created)`` for a completed internship.

        Metadata is persisted before any artifact work. A certificate that
        already exists for the internship is returned untouched, including
        when a concurrent request inserted it first. Identifier collisions
        are retried with a fresh random component.
        """
        existing = cls.objects.filter(internship=internship).first()
        if existing:
            return existing, False

        internship = type(internship).objects.select_related("intern").get(pk=internship.pk)
        intern = internship.intern
        issued_at = timezone.now()

        for attempt in range(1, MAX_ID_ATTEMPTS + 1):
            certificate = cls(
                certificate_id=generate_certificate_id(internship.pk, issued_at),
                intern=intern,
                internship=internship,
                issued_at=issued_at,
                intern_name=intern.display_name,
                internship_title=internship.title,
                start_date=internship.start_date,
                end_date=internship.end_date or issued_at.date(),
                company=settings.CERTIFICATE_COMPANY,
            )
            certificate.certificate_url = certificate_page_url(certificate.certificate_id)
            certificate.signed_payload = sign_payload(certificate.snapshot())
            try:
                with transaction.atomic():
                    certificate.save()
            except IntegrityError:
                existing = cls.objects.filter(internship=internship).first()
                if existing:
                    logger.info(f"Certificate for internship {internship.pk} was issued concurrently")
                    return existing, False
                logger.warning(
                    f"Certificate id collision on attempt {attempt} for internship {internship.pk}"
                )
                continue

            logger.info(f"Certificate {certificate.certificate_id} issued for internship {internship.pk}")
            return certificate, True

        raise IntegrityError(
            f"Could not mint a unique certificate id for internship {internship.pk}"
        )
