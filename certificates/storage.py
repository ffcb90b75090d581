"""
Certificate artifact hosting.

Rendered certificates are mirrored to Cloudinary through its signed upload
API. Hosting is supplementary: issuance and verification never depend on it,
and every failure here is logged and recorded on the certificate instead of
being raised to the caller.
"""
import hashlib
import logging
import time

import requests
from django.conf import settings
from django.utils import timezone

from admin_panel.utils import create_notification
from .exceptions import ArtifactUploadError, StorageNotConfigured
from .models import Certificate
from .utils import render_certificate_image

logger = logging.getLogger(__name__)

CLOUDINARY_UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"


def storage_configured():
    return all([
        settings.CLOUDINARY_CLOUD_NAME,
        settings.CLOUDINARY_API_KEY,
        settings.CLOUDINARY_API_SECRET,
    ])


def sign_upload_params(params, api_secret):
    """Cloudinary signature: sha1 of the sorted `key=value` pairs followed by the secret."""
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


def upload_image(image_bytes, public_id):
    """Upload PNG bytes and return the hosted https URL."""
    if not storage_configured():
        raise StorageNotConfigured("Cloudinary credentials are not configured")

    params = {
        "folder": settings.CLOUDINARY_FOLDER,
        "overwrite": "true",
        "public_id": public_id,
        "timestamp": str(int(time.time())),
    }
    params = {key: value for key, value in params.items() if value}
    data = dict(params)
    data["api_key"] = settings.CLOUDINARY_API_KEY
    data["signature"] = sign_upload_params(params, settings.CLOUDINARY_API_SECRET)

    url = CLOUDINARY_UPLOAD_URL.format(cloud_name=settings.CLOUDINARY_CLOUD_NAME)
    try:
        response = requests.post(
            url,
            data=data,
            files={"file": (f"{public_id}.png", image_bytes, "image/png")},
            timeout=settings.CLOUDINARY_TIMEOUT,
        )
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as e:
        raise ArtifactUploadError(f"Cloudinary upload failed: {e}") from e

    secure_url = payload.get("secure_url") if isinstance(payload, dict) else None
    if not secure_url:
        raise ArtifactUploadError("Cloudinary response did not include a secure_url")
    return secure_url


def upload_artifact(certificate):
    """
    Render and host the certificate image, best effort.

    Returns the certificate with ``artifact_url`` set on success. On failure
    the certificate stays ``pending`` (or ``disabled`` without credentials)
    and can be retried later; its id never changes.
    """
    if certificate.artifact_status == Certificate.ArtifactStatus.UPLOADED and certificate.artifact_url:
        return certificate

    if not storage_configured():
        logger.info(f"Artifact upload skipped for {certificate.certificate_id}: storage not configured")
        certificate.artifact_status = Certificate.ArtifactStatus.DISABLED
        certificate.save(update_fields=["artifact_status"])
        return certificate

    certificate.artifact_attempts += 1
    try:
        image_bytes = render_certificate_image(certificate)
        certificate.artifact_url = upload_image(image_bytes, public_id=certificate.certificate_id)
    except (ArtifactUploadError, OSError, ValueError) as e:
        logger.error(f"Artifact upload failed for {certificate.certificate_id}: {e}")
        certificate.artifact_status = Certificate.ArtifactStatus.PENDING
        certificate.artifact_error = f"{timezone.now().isoformat()} {e}"
        certificate.save(update_fields=["artifact_status", "artifact_error", "artifact_attempts"])
        _notify_upload_failure(certificate)
        return certificate

    certificate.artifact_status = Certificate.ArtifactStatus.UPLOADED
    certificate.artifact_error = ""
    certificate.save(update_fields=["artifact_url", "artifact_status", "artifact_error", "artifact_attempts"])
    logger.info(f"Artifact uploaded for {certificate.certificate_id}: {certificate.artifact_url}")
    return certificate


def retry_pending_artifacts():
    """Re-attempt every certificate still waiting for its hosted image."""
    pending = Certificate.objects.exclude(artifact_status=Certificate.ArtifactStatus.UPLOADED)
    uploaded = 0
    for certificate in pending:
        upload_artifact(certificate)
        if certificate.artifact_status == Certificate.ArtifactStatus.UPLOADED:
            uploaded += 1
    return uploaded


def _notify_upload_failure(certificate):
    create_notification(
        title="Certificate Artifact Pending",
        message=f"Image upload for certificate {certificate.certificate_id} failed and can be retried",
        priority="LOW",
        certificate=certificate,
    )
