"""
Management command to reconcile stock aggregates with the ledger.

Usage:
    python manage.py reconcile_stock
    python manage.py reconcile_stock --product 42
    python manage.py reconcile_stock --fix
"""

from django.core.management.base import BaseCommand

from stockledger import stock
from stockledger.services.reconciliation import FIXABLE


class Command(BaseCommand):
    """Reconcile stock command."""

    help = 'Replays the stock ledger and reports products whose aggregates drifted'

    def add_arguments(self, parser):
        parser.add_argument(
            '--product',
            type=int,
            help='Only check this product id'
        )
        parser.add_argument(
            '--fix',
            action='store_true',
            help='Rewrite drifting aggregates from the ledger'
        )

    def handle(self, *args, **options):
        discrepancies = stock.reconcile(product=options['product'], fix=options['fix'])

        for item in discrepancies:
            self.stdout.write(
                f'product {item.product_id}: {item.kind} '
                f'(expected {item.expected}, found {item.actual})'
            )

        if not discrepancies:
            self.stdout.write(self.style.SUCCESS('Stock is consistent with the ledger'))
            return

        total = len(discrepancies)
        if not options['fix']:
            self.stdout.write(self.style.WARNING(f'{total} discrepancy(ies) found'))
            return

        fixed = sum(1 for item in discrepancies if item.kind in FIXABLE)
        remaining = total - fixed
        summary = f'{total} discrepancy(ies) found, {fixed} fixed, {remaining} need review'
        if remaining:
            self.stdout.write(self.style.WARNING(summary))
        else:
            self.stdout.write(self.style.SUCCESS(summary))
