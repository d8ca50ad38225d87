import os

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from stockroom.models import UserProfile


class Command(BaseCommand):
    help = 'Create or update an administrator account (defaults from ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_NAME)'

    def add_arguments(self, parser):
        parser.add_argument('--email', default=os.getenv('ADMIN_EMAIL'), help='Admin email (login)')
        parser.add_argument('--password', default=os.getenv('ADMIN_PASSWORD'), help='Admin password')
        parser.add_argument('--name', default=os.getenv('ADMIN_NAME', 'Admin'), help='Display name')

    def handle(self, *args, **options):
        email = options['email']
        password = options['password']
        if not email or not password:
            raise CommandError('Missing ADMIN_EMAIL or ADMIN_PASSWORD.')

        email = email.strip().lower()
        with transaction.atomic():
            user, created = User.objects.get_or_create(
                username=email,
                defaults={'email': email, 'is_staff': True, 'is_superuser': True},
            )
            user.email = email
            user.first_name = options['name'] or ''
            user.is_staff = True
            user.is_superuser = True
            user.is_active = True
            user.set_password(password)
            user.save()

            profile = user.profile
            profile.role = UserProfile.ROLE_ADMIN
            profile.shop_status = UserProfile.STATUS_ACTIVE
            profile.save()

        action = 'Created' if created else 'Updated'
        self.stdout.write(self.style.SUCCESS(f'{action} admin user {email} (id={user.id})'))
