"""Celery tasks for the identity store."""

from __future__ import annotations

import logging

from celery import shared_task

from .services import purge_expired_codes

logger = logging.getLogger(__name__)


@shared_task(name="users.purge_expired_verification_codes")
def purge_expired_verification_codes() -> int:
    deleted = purge_expired_codes()
    if deleted:
        logger.info("Purged %s expired verification codes", deleted)
    return deleted
