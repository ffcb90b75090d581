from django.core.management.base import BaseCommand

from internships.lifecycle import complete_due_internships, internships_nearing_completion


class Command(BaseCommand):
    help = "Complete internships whose end date has passed and issue their certificates."

    def add_arguments(self, parser):
        parser.add_argument(
            "--days", type=int, default=7,
            help="Also list internships ending within this many days.",
        )

    def handle(self, *args, **options):
        results = complete_due_internships()
        for result in results:
            verb = "Issued" if result.created else "Kept"
            self.stdout.write(
                f"{verb} {result.certificate.certificate_id} for internship {result.internship.pk}"
            )
        self.stdout.write(self.style.SUCCESS(f"Processed {len(results)} internship(s)."))

        for internship, days_left in internships_nearing_completion(options["days"]):
            self.stdout.write(
                self.style.WARNING(f"{internship.intern.email}: '{internship.title}' ends in {days_left} day(s)")
            )
