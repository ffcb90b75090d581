from django.core.management.base import BaseCommand

from certificates.storage import retry_pending_artifacts, storage_configured


class Command(BaseCommand):
    help = "Re-attempt hosting images for certificates whose artifact upload is still pending."

    def handle(self, *args, **options):
        if not storage_configured():
            self.stdout.write(self.style.WARNING("Cloudinary is not configured; nothing to do."))
            return
        uploaded = retry_pending_artifacts()
        self.stdout.write(self.style.SUCCESS(f"Uploaded {uploaded} certificate artifact(s)."))
