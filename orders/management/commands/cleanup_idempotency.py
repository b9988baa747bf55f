from django.core.management.base import BaseCommand
from django.utils import timezone
from orders.models import IdempotencyKey


class Command(BaseCommand):
    help = "Purge stored checkout/status idempotency records past their expiry"

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="Only report how many records would be removed")

    def handle(self, *args, **options):
        expired = IdempotencyKey.objects.filter(expires_at__lt=timezone.now())
        if options["dry_run"]:
            self.stdout.write(f"{expired.count()} expired idempotency records would be removed.")
            return
        deleted, _ = expired.delete()
        self.stdout.write(self.style.SUCCESS(f"Removed {deleted} expired idempotency records."))
