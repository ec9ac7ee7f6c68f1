# users/management/commands/seed_users.py

from __future__ import annotations

from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from permissions.roles import ROLE_ADMIN, ROLE_CASHIER, ROLE_MANAGER, ROLE_STOCK_CLERK


@dataclass(frozen=True)
class SeedUser:
    label: str
    role: str
    username: str
    first_name: str = ""
    last_name: str = ""
    needs_pin: bool = False


SEED_USERS = [
    SeedUser("Admin", ROLE_ADMIN, "admin", "System", "Admin", needs_pin=True),
    SeedUser("Manager", ROLE_MANAGER, "manager", "Store", "Manager", needs_pin=True),
    SeedUser("Cashier", ROLE_CASHIER, "cashier", "Front", "Desk"),
    SeedUser("Stock clerk", ROLE_STOCK_CLERK, "stock", "Back", "Office"),
]


class Command(BaseCommand):
    help = "Seed till staff users (admin, manager, cashier, stock clerk)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            type=str,
            default="Pass1234!",
            help="Password for seeded users (default: Pass1234!)",
        )
        parser.add_argument(
            "--pin",
            type=str,
            default="1234",
            help="Manager PIN for admin/manager users (default: 1234)",
        )
        parser.add_argument(
            "--force-password",
            action="store_true",
            help="Reset password and PIN for existing seeded users too.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        password = options.get("password") or ""
        pin = (options.get("pin") or "").strip()
        force_password = bool(options.get("force_password"))

        if len(password) < 6:
            raise CommandError("--password must be at least 6 characters.")

        if not pin.isdigit() or not 4 <= len(pin) <= 8:
            raise CommandError("--pin must be 4 to 8 digits.")

        User = get_user_model()

        created_count = 0
        updated_count = 0

        for seed in SEED_USERS:
            is_admin = seed.role == ROLE_ADMIN

            user, created = User.objects.get_or_create(
                username=seed.username,
                defaults={
                    "email": f"{seed.username}@example.com",
                    "role": seed.role,
                    "first_name": seed.first_name,
                    "last_name": seed.last_name,
                    "is_staff": True,
                    "is_superuser": is_admin,
                    "is_active": True,
                },
            )

            if created or force_password:
                user.set_password(password)
                if seed.needs_pin:
                    user.set_pin(pin)
                user.save()

            if created:
                created_count += 1
                self.stdout.write(f"created: {seed.label} ({seed.role}) -> {seed.username}")
            else:
                if force_password:
                    updated_count += 1
                self.stdout.write(f"exists:  {seed.label} ({seed.role}) -> {seed.username}")

        self.stdout.write("\n--- Summary ---")
        self.stdout.write(f"Created: {created_count}")
        self.stdout.write(f"Updated: {updated_count}")
