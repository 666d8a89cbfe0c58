"""Management command to rebuild quota usage from file records."""

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from server.apps.files.logic.quota_operations import (
    calculate_usage,
    get_usage,
    recalculate_usage,
)

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Reset every user's used bytes to the sum of their file sizes."""

    help = 'Recalculate storage usage from the files on record'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report drift without changing anything',
        )
        parser.add_argument(
            '--email',
            help='Only recalculate usage of this user',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the recalculation.

        Args:
            args: Positional arguments (unused).
            options: Command options.

        Raises:
            CommandError: If ``--email`` matches no user.
        """
        dry_run = options['dry_run']
        users = get_user_model().objects.order_by('id')

        if options['email']:
            users = users.filter(email__iexact=options['email'].strip())
            if not users.exists():
                raise CommandError(f'No user with email {options["email"]}')

        checked = 0
        drifted = 0

        for user in users:
            checked += 1
            recorded = get_usage(user).used_bytes
            actual = calculate_usage(user)
            if recorded == actual:
                continue

            drifted += 1
            if dry_run:
                self.stdout.write(
                    f'Would fix {user.email}: {recorded} -> {actual} bytes',
                )
                continue

            recalculate_usage(user)
            self.stdout.write(f'Fixed {user.email}: {recorded} -> {actual} bytes')

        logger.info(
            'Usage recalculation checked %d users, %d drifted (dry_run=%s)',
            checked,
            drifted,
            dry_run,
        )

        if dry_run:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Checked {checked} users, {drifted} would be fixed',
                ),
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Checked {checked} users, fixed {drifted}',
                ),
            )
