import os
import random
from datetime import timedelta

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from stockroom.models import UserProfile

DEMO_SHOPS = [
    {'shop_name': 'Korvex Computers', 'name': 'Raj Shamani', 'email': 'raj.shamani@korvex-computers.example',
     'user_code': 'KC', 'address': '4th Floor, Orion Plaza, Pune, MH', 'phone': '+1-555-0101'},
    {'shop_name': 'Nimbus Digital Hub', 'name': 'Aarav Mehta', 'email': 'aarav.mehta@nimbus-digital.example',
     'user_code': 'ND', 'address': '12 Galaxy Road, Ahmedabad, GJ', 'phone': '+1-555-0102'},
    {'shop_name': 'Vertex Mobile Zone', 'name': 'Kiran Rao', 'email': 'kiran.rao@vertex-mobile.example',
     'user_code': 'VM', 'address': '88 Sunrise Arcade, Hyderabad, TS', 'phone': '+1-555-0103'},
    {'shop_name': 'NovaTech Solutions', 'name': 'Ananya Iyer', 'email': 'ananya.iyer@novatech.example',
     'user_code': 'NS', 'address': '21 Lake View Rd, Kochi, KL', 'phone': '+1-555-0104'},
    {'shop_name': 'Orbit IT Mart', 'name': 'Rohit Verma', 'email': 'rohit.verma@orbit-it.example',
     'user_code': 'OI', 'address': '55 Central Avenue, Jaipur, RJ', 'phone': '+1-555-0105'},
    {'shop_name': 'Bytewave Electronics', 'name': 'Priya Menon', 'email': 'priya.menon@bytewave.example',
     'user_code': 'BE', 'address': '9 Metro Tower, Chennai, TN', 'phone': '+1-555-0106'},
    {'shop_name': 'Axiom Computer House', 'name': 'Vikram Singh', 'email': 'vikram.singh@axiom-computer.example',
     'user_code': 'AH', 'address': '31 Business Park, Lucknow, UP', 'phone': '+1-555-0107'},
    {'shop_name': 'Zenith Gadget World', 'name': 'Neha Kapoor', 'email': 'neha.kapoor@zenith-gadget.example',
     'user_code': 'ZG', 'address': '102 Park Street, Kolkata, WB', 'phone': '+1-555-0108'},
    {'shop_name': 'Fusion Laptop Studio', 'name': 'Arjun Das', 'email': 'arjun.das@fusion-laptop.example',
     'user_code': 'FL', 'address': '7 City Center, Indore, MP', 'phone': '+1-555-0109'},
    {'shop_name': 'Pioneer Systems', 'name': 'Meera Joshi', 'email': 'meera.joshi@pioneer-systems.example',
     'user_code': 'PS', 'address': '66 Lake Road, Surat, GJ', 'phone': '+1-555-0110'},
]


class Command(BaseCommand):
    help = 'Create or update the demo shopkeeper accounts (password from SHOP_PASSWORD)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--password',
            default=os.getenv('SHOP_PASSWORD', 'Password@123'),
            help='Password for every demo shop account',
        )

    def handle(self, *args, **options):
        password = options['password']
        today = timezone.localdate()

        self.stdout.write(self.style.SUCCESS('Creating demo shop accounts...'))
        for shop in DEMO_SHOPS:
            email = shop['email'].lower()
            with transaction.atomic():
                user, created = User.objects.get_or_create(username=email, defaults={'email': email})
                user.email = email
                user.first_name = shop['name']
                user.set_password(password)
                user.save()

                profile = user.profile
                profile.role = UserProfile.ROLE_SHOPKEEPER
                profile.user_code = shop['user_code']
                profile.shop_name = shop['shop_name']
                profile.shop_status = UserProfile.STATUS_ACTIVE
                profile.shop_expiry = today + timedelta(days=random.randint(30, 119))
                profile.address = shop['address']
                profile.phone = shop['phone']
                profile.save()

            action = 'Created' if created else 'Updated'
            self.stdout.write(f'  - {action} {profile.user_code} {profile.shop_name} <{email}> (expires {profile.shop_expiry})')

        self.stdout.write(self.style.SUCCESS(f'Done: {len(DEMO_SHOPS)} shop accounts ready'))
