from django.core.management.base import BaseCommand

from inventory.services.reorder import sync_order_sheet


class Command(BaseCommand):
    help = 'Rebuild the order sheet from current stock and alert quantities.'

    def handle(self, *args, **options):
        counts = sync_order_sheet()
        self.stdout.write(
            self.style.SUCCESS(
                'Order sheet synced: {created} created, {updated} updated, {removed} removed'.format(**counts)
            )
        )
