"""
Write default system settings that are missing.
"""
from django.core.management.base import BaseCommand

from apps.core.services import seed_defaults


class Command(BaseCommand):
    help = 'Create default ShelfUp system settings without overwriting existing values'

    def handle(self, *args, **options):
        created = seed_defaults()
        if created:
            self.stdout.write(self.style.SUCCESS(f'{created} setting(s) created'))
        else:
            self.stdout.write(self.style.WARNING('All default settings already exist'))
