"""
Replay the offline queue against the primary store.

Usage:
  python manage.py sync_offline_queue
  python manage.py sync_offline_queue --probe
  python manage.py sync_offline_queue --retry-stalled
"""
from django.core.management.base import BaseCommand

from offline.services import get_sync_service


class Command(BaseCommand):
    help = 'Replay unsynced offline operations against the primary database.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--probe',
            action='store_true',
            help='Check the primary database first; a reconnect triggers the pass.',
        )
        parser.add_argument(
            '--retry-stalled',
            action='store_true',
            help='Reset the attempt counter of stalled operations before syncing.',
        )

    def handle(self, *args, **options):
        service = get_sync_service()

        if options['retry_stalled']:
            stalled = service.queue.stalled()
            for op in stalled:
                service.queue.retry(op.pk)
            self.stdout.write(f"Released {len(stalled)} stalled operation(s).")

        report = None
        if options['probe']:
            before = service.last_report
            if not service.monitor.probe():
                self.stdout.write(self.style.WARNING('Primary database unreachable, nothing replayed.'))
                return
            if service.last_report is not before:
                report = service.last_report

        if report is None:
            report = service.sync_all()

        if not report.ran:
            self.stdout.write(self.style.WARNING(f"Sync skipped: {report.reason}"))
            return

        line = (
            f"Synced {report.success_count}, failed {report.fail_count}, "
            f"skipped {report.skipped_count}. Pending: {service.queue.count_unsynced()}"
        )
        if report.fail_count:
            self.stdout.write(self.style.WARNING(line))
        else:
            self.stdout.write(self.style.SUCCESS(line))
