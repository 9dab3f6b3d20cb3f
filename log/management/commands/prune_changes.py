import datetime

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from log.feed import prune_changes


class Command(BaseCommand):
    help = (
        "Delete change feed events older than --days (default CHANGE_FEED_RETENTION_DAYS). "
        "Clients holding an older cursor reload once and continue from changes/latest/."
    )

    def add_arguments(self, parser):
        parser.add_argument('--days', type=int, default=settings.CHANGE_FEED_RETENTION_DAYS)

    def handle(self, *args, **options):
        days = options['days']
        if days < 1:
            raise CommandError("--days must be at least 1.")
        before = timezone.now() - datetime.timedelta(days=days)
        deleted = prune_changes(before)
        self.stdout.write(self.style.SUCCESS(f"Removed {deleted} change event(s) older than {days} day(s)."))
