"""
Django management command to mint a key without going through HTTP.

Uses the same engine, store and event bus as the admin API.
"""

import logging

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError

from core.domain.exceptions import DomainException
from keys.application.commands.create_key import CreateKeyCommand
from keys.application.handlers.create_key_handler import CreateKeyHandler
from keys.infrastructure.factory import build_engine

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to create a key."""

    help = "Create a key and print it (the full key is shown only once)"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("name", type=str, help="Label for the key holder")
        parser.add_argument(
            "--expires-in-days",
            type=int,
            default=None,
            help="Lifetime in days (fixed_date mode; omit for no expiry)",
        )
        parser.add_argument(
            "--duration",
            type=str,
            default=None,
            help="Duration class: day, week, month or lifetime (duration mode)",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        command = CreateKeyCommand(
            name=options["name"],
            expires_in_days=options["expires_in_days"],
            duration=options["duration"],
        )
        handler = CreateKeyHandler(engine=build_engine())

        try:
            result = async_to_sync(handler.handle)(command)
        except DomainException as e:
            raise CommandError(f"{e.code}: {e.message}") from e

        self.stdout.write(self.style.SUCCESS("Key created successfully"))
        self.stdout.write(f"  Key:        {result.key}")
        self.stdout.write(f"  Name:       {result.name}")
        self.stdout.write(f"  Policy:     {result.policy}")
        if result.expires_at:
            expires = result.expires_at.isoformat()
        elif options["duration"]:
            expires = "set on first verification"
        else:
            expires = "never"
        self.stdout.write(f"  Expires at: {expires}")
