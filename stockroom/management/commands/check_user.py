import json

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand

from stockroom.role_utils import account_block_reason, get_profile


class Command(BaseCommand):
    help = 'Print the stored account state for an email and optionally test a password'

    def add_arguments(self, parser):
        parser.add_argument('email', help='Account email')
        parser.add_argument('--password', help='Password to check against the stored hash')

    def handle(self, *args, **options):
        email = options['email'].strip().lower()
        user = User.objects.filter(username=email).select_related('profile').first()
        if user is None:
            self.stdout.write('null')
            return

        profile = get_profile(user)
        output = {
            'id': user.id,
            'email': user.email,
            'name': user.first_name or None,
            'role': profile.role if profile else None,
            'user_code': profile.user_code if profile else None,
            'shop_name': profile.shop_name if profile else None,
            'shop_status': profile.shop_status if profile else None,
            'shop_expiry': profile.shop_expiry.isoformat() if profile and profile.shop_expiry else None,
            'blocked': account_block_reason(user),
            'is_active': user.is_active,
            'created_at': user.date_joined.isoformat(),
            'password': '***set***' if user.has_usable_password() else None,
        }
        if options.get('password') and user.has_usable_password():
            output['password_match'] = user.check_password(options['password'])

        self.stdout.write(json.dumps(output, indent=2))
