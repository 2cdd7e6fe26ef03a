"""
Create the platform administrator on container start if it is missing.
"""
import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = 'Ensure a ShelfUp administrator account exists (idempotent)'

    def add_arguments(self, parser):
        parser.add_argument('--email', default=os.environ.get('DJANGO_SUPERUSER_EMAIL'))
        parser.add_argument('--password', default=os.environ.get('DJANGO_SUPERUSER_PASSWORD'))

    def handle(self, *args, **options):
        email, password = options['email'], options['password']
        if not email or not password:
            raise CommandError('Set DJANGO_SUPERUSER_EMAIL and DJANGO_SUPERUSER_PASSWORD (or pass --email/--password).')

        User = get_user_model()
        if User.objects.filter(email__iexact=email).exists():
            self.stdout.write(self.style.WARNING(f'{email}: already present, left unchanged'))
            return

        User.objects.create_superuser(email=email, password=password)
        self.stdout.write(self.style.SUCCESS(f'{email}: administrator created'))
