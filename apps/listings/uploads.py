"""Validation and storage of host media uploads.

Limits per media kind come from ``settings.UPLOAD_LIMITS``: allowed
extensions, maximum file size and maximum count. Images and videos are
capped per host, documents per request.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import HostMedia

# kinds whose max_count applies to everything the host has uploaded
CUMULATIVE_KINDS = {HostMedia.Kind.IMAGE, HostMedia.Kind.VIDEO}


def _human_size(size: int) -> str:
    return f"{size // (1024 * 1024)}MB"


def validate_upload(host, kind: str, files: list) -> None:
    limits = settings.UPLOAD_LIMITS[kind]
    label = f"{kind}s"

    if not files:
        raise serializers.ValidationError({label: f"Please upload at least one {kind}."})

    existing = host.media.filter(kind=kind).count() if kind in CUMULATIVE_KINDS else 0
    if existing + len(files) > limits["max_count"]:
        raise serializers.ValidationError(
            {label: f"You can upload a maximum of {limits['max_count']} {label}."}
        )

    for upload in files:
        extension = PurePosixPath(upload.name).suffix.lower().lstrip(".")
        if extension not in limits["extensions"]:
            raise serializers.ValidationError(
                {label: f"{upload.name}: only {', '.join(limits['extensions'])} files are allowed."}
            )
        if upload.size > limits["max_size"]:
            raise serializers.ValidationError(
                {label: f"{upload.name}: file size cannot exceed {_human_size(limits['max_size'])}."}
            )


@transaction.atomic
def store_uploads(host, kind: str, files: list) -> list[HostMedia]:
    validate_upload(host, kind, files)
    return [
        HostMedia.objects.create(
            host=host,
            kind=kind,
            file=upload,
            original_name=upload.name[:255],
            size=upload.size,
        )
        for upload in files
    ]
