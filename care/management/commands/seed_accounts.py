from django.core.management.base import BaseCommand

from care.models import User

DEFAULT_ACCOUNTS = [
    ("Dr. John Smith", "doctor", "doctor123", User.ROLE_DOCTOR),
    ("Sarah (Receptionist)", "receptionist", "reception123", User.ROLE_RECEPTIONIST),
]


class Command(BaseCommand):
    help = "Create the default doctor and receptionist accounts (existing usernames are skipped)."

    def add_arguments(self, parser):
        parser.add_argument("--admin-password", help="also create an 'admin' account with this password")

    def handle(self, *args, **opts):
        accounts = list(DEFAULT_ACCOUNTS)
        if opts.get("admin_password"):
            accounts.append(("Administrator", "admin", opts["admin_password"], User.ROLE_ADMIN))

        for name, username, password, role in accounts:
            if User.objects.filter(username=username).exists():
                self.stdout.write(f"{username} already exists, skipping")
                continue
            user = User(name=name, username=username, role=role, is_staff=(role == User.ROLE_ADMIN))
            user.set_password(password)
            user.save()
            self.stdout.write(self.style.SUCCESS(f"created: {username} ({role})"))
        self.stdout.write(self.style.SUCCESS("Seed complete."))
