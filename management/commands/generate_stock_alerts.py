"""
Management command to raise low-stock alerts.

Usage:
    python manage.py generate_stock_alerts
    python manage.py generate_stock_alerts --dry-run
"""

from django.core.management.base import BaseCommand

from stockledger import stock
from stockledger.services.alerts import pending_alerts


class Command(BaseCommand):
    """Generate low-stock alerts command."""

    help = 'Creates alerts for products at or below their minimum stock level'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be alerted without creating alerts'
        )

    def handle(self, *args, **options):
        if options['dry_run']:
            pending = list(pending_alerts())
            for product, alert_type in pending:
                self.stdout.write(f'{product}: {alert_type} ({product.available_qty} available)')
            self.stdout.write(f'{len(pending)} alert(s) would be created')
        else:
            created = stock.generate_alerts()
            self.stdout.write(
                self.style.SUCCESS(f'{len(created)} alert(s) created')
            )
