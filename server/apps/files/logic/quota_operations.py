"""Business logic for storage quota operations."""

import logging
from typing import Any, NamedTuple

from django.conf import settings
from django.db import transaction
from django.db.models import (  # noqa: WPS347
    BigIntegerField,
    F,
    QuerySet,
    Sum,
    Value,
)
from django.db.models.functions import Greatest

from server.apps.files.exceptions import QuotaExceededError
from server.apps.files.models import File, UserQuota

# User type for Django's dynamic user model
_User = Any

# Field name constant to avoid string literal over-use
_USED_BYTES_FIELD = 'used_bytes'  # noqa: WPS226

logger = logging.getLogger(__name__)


class UsageSnapshot(NamedTuple):
    """Current storage usage of a user."""

    used_bytes: int
    limit_bytes: int

    def to_dict(self) -> dict[str, int]:
        """JSON representation used by the API."""
        return {
            'usedStorageBytes': self.used_bytes,
            'storageLimitBytes': self.limit_bytes,
        }


def default_limit() -> int:
    """System-wide minimum storage limit in bytes."""
    return settings.DEFAULT_STORAGE_LIMIT_BYTES


def effective_limit(quota_bytes: int | None) -> int:
    """Resolve the limit actually enforced for a stored quota.

    The stored value can never lower the limit below the default,
    so 0 or an unset value reads as the default.

    Args:
        quota_bytes: Stored per-user limit.

    Returns:
        ``max(quota_bytes, default limit)``.
    """
    return max(quota_bytes or 0, default_limit())


def get_or_create_quota(user: _User) -> UserQuota:
    """Get or create quota for user (on-demand creation).

    Args:
        user: User to get quota for.

    Returns:
        UserQuota instance for the user.
    """
    quota, created = UserQuota.objects.get_or_create(
        user=user,
        defaults={'quota_bytes': default_limit()},
    )
    if created:
        logger.info(
            'Created quota for user %d: %d bytes',
            user.pk,
            quota.quota_bytes,
        )
    return quota


def get_usage(user: _User) -> UsageSnapshot:
    """Read the user's usage with the effective limit.

    Does not create a quota row: a user without one has used nothing.

    Args:
        user: User to read usage for.

    Returns:
        UsageSnapshot with used bytes and effective limit.
    """
    quota = UserQuota.objects.filter(user=user).first()
    if quota is None:
        return UsageSnapshot(used_bytes=0, limit_bytes=default_limit())
    return UsageSnapshot(
        used_bytes=quota.used_bytes,
        limit_bytes=effective_limit(quota.quota_bytes),
    )


def _quota_exceeded(
    user: _User,
    quota: UserQuota,
    size_bytes: int,
) -> QuotaExceededError:
    limit = effective_limit(quota.quota_bytes)
    logger.warning(
        'Quota exceeded for user %d: need %d, have %d available',
        user.pk,
        size_bytes,
        max(0, limit - quota.used_bytes),
    )
    return QuotaExceededError(
        quota_bytes=limit,
        used_bytes=quota.used_bytes,
        required_bytes=size_bytes,
    )


def check_quota(user: _User, size_bytes: int) -> None:
    """Check if user has enough quota for an upload.

    Creates quota on-demand if it doesn't exist. This check alone
    does not reserve anything; use ``reserve_usage`` to admit an upload.

    Args:
        user: User to check quota for.
        size_bytes: Size of the upload in bytes.

    Raises:
        QuotaExceededError: If upload would exceed quota.
    """
    quota = get_or_create_quota(user)
    if quota.used_bytes + size_bytes > effective_limit(quota.quota_bytes):
        raise _quota_exceeded(user, quota, size_bytes)


def reserve_usage(user: _User, size_bytes: int) -> None:
    """Atomically admit an upload and add it to the user's usage.

    Check and increment happen in one conditional UPDATE, so two
    concurrent uploads can never jointly push usage over the limit.

    Args:
        user: User to reserve storage for.
        size_bytes: Bytes to add to usage.

    Raises:
        QuotaExceededError: If the upload would exceed quota.
    """
    get_or_create_quota(user)

    limit_expression = Greatest(
        F('quota_bytes'),
        Value(default_limit(), output_field=BigIntegerField()),
    )
    updated = UserQuota.objects.filter(
        user=user,
        used_bytes__lte=limit_expression - Value(
            size_bytes,
            output_field=BigIntegerField(),
        ),
    ).update(
        used_bytes=F(_USED_BYTES_FIELD) + size_bytes,
    )

    if updated == 0:
        raise _quota_exceeded(
            user,
            UserQuota.objects.get(user=user),
            size_bytes,
        )

    logger.debug('Reserved %d bytes for user %d', size_bytes, user.pk)


def increment_usage(user: _User, size_bytes: int) -> None:
    """Add bytes to usage without an admission check.

    Args:
        user: User whose usage grows.
        size_bytes: Bytes to add.
    """
    get_or_create_quota(user)
    UserQuota.objects.filter(user=user).update(
        used_bytes=F(_USED_BYTES_FIELD) + size_bytes,
    )
    logger.debug('Added %d bytes to usage of user %d', size_bytes, user.pk)


def _release(quotas: QuerySet[UserQuota], size_bytes: int) -> int:
    return quotas.filter(used_bytes__gte=size_bytes).update(
        used_bytes=F(_USED_BYTES_FIELD) - size_bytes,
    )


def decrement_usage(user: _User, size_bytes: int) -> None:
    """Release bytes from usage, never going below zero.

    The common case is a single conditional UPDATE. When usage is
    smaller than the released size, usage had drifted from the files
    on record: it is set to 0 and a warning is logged. The clamp only
    applies while usage is still below the released size, so bytes
    reserved concurrently are kept.

    Args:
        user: User whose usage shrinks.
        size_bytes: Bytes to release.
    """
    quotas = UserQuota.objects.filter(user=user)
    if _release(quotas, size_bytes):
        logger.debug('Released %d bytes of user %d', size_bytes, user.pk)
        return

    underflow = quotas.values_list(_USED_BYTES_FIELD, flat=True).first()
    if underflow is None:
        logger.debug('User %d has no quota, nothing to release', user.pk)
        return

    logger.warning(
        'Usage underflow for user %d: releasing %d of %d used bytes, '
        'clamping to 0',
        user.pk,
        size_bytes,
        underflow,
    )
    clamped = quotas.filter(used_bytes__lt=size_bytes).update(used_bytes=0)
    if not clamped:
        # A concurrent reservation grew usage past size_bytes meanwhile
        _release(quotas, size_bytes)


def calculate_usage(user: _User) -> int:
    """Sum the sizes of the user's files.

    Args:
        user: User to calculate usage for.

    Returns:
        Total size of the user's files in bytes.
    """
    totals = File.objects.filter(user=user).aggregate(total=Sum('size_bytes'))
    return totals['total'] or 0


def recalculate_usage(user: _User) -> int:
    """Reset usage to the sum of the user's file sizes.

    Repairs drift left behind e.g. by a crash between storing bytes
    and recording usage.

    Args:
        user: User to repair.

    Returns:
        Usage in bytes after the repair.
    """
    with transaction.atomic():
        quota = UserQuota.objects.select_for_update().filter(user=user).first()
        previous = quota.used_bytes if quota else 0
        total = calculate_usage(user)
        UserQuota.objects.update_or_create(
            user=user,
            defaults={_USED_BYTES_FIELD: total},
            create_defaults={
                _USED_BYTES_FIELD: total,
                'quota_bytes': default_limit(),
            },
        )

    logger.info(
        'Recalculated usage for user %d: %d -> %d bytes',
        user.pk,
        previous,
        total,
    )
    return total
