"""Abstract storage models for the inventory modules.

Audit columns (``id``, ``created_at``, ``updated_at``, ``deleted_at``) are
owned here; services never set them.  Repositories write through
``SoftDeleteQuerySet`` so bulk ``UPDATE`` statements keep ``updated_at``
current, which ``auto_now`` alone does not do for ``QuerySet.update()``.
"""

from __future__ import annotations

import uuid6
from django.db import models
from django.utils import timezone

AUDIT_COLUMNS = frozenset({"id", "created_at", "updated_at", "deleted_at"})


class AuditedModel(models.Model):
    """UUIDv7 primary key plus creation/modification timestamps."""

    id = models.UUIDField(primary_key=True, default=uuid6.uuid7, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs) -> None:
        # auto_now is skipped for columns missing from update_fields.
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_at" not in update_fields:
            kwargs["update_fields"] = [*update_fields, "updated_at"]
        super().save(*args, **kwargs)

    @classmethod
    def data_columns(cls) -> tuple[str, ...]:
        """Names of the concrete columns that are not audit metadata."""
        return tuple(
            field.name
            for field in cls._meta.concrete_fields
            if field.name not in AUDIT_COLUMNS
        )


class SoftDeleteQuerySet(models.QuerySet):
    def alive(self) -> SoftDeleteQuerySet:
        return self.filter(deleted_at__isnull=True)

    def stamp(self, **values) -> int:
        """``UPDATE`` the given columns and ``updated_at``; return rows hit."""
        return self.update(**values, updated_at=timezone.now())

    def soft_delete(self) -> int:
        """Mark every live row of the queryset deleted in one statement."""
        now = timezone.now()
        return self.alive().update(deleted_at=now, updated_at=now)


class SoftDeleteModel(AuditedModel):
    """Rows are marked with ``deleted_at`` instead of being removed.

    ``objects`` is unfiltered; callers that must not see deleted rows go
    through ``objects.alive()``.
    """

    deleted_at = models.DateTimeField(null=True, blank=True, default=None, db_index=True)

    objects = SoftDeleteQuerySet.as_manager()

    class Meta:
        abstract = True

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def delete(self, using=None, keep_parents=False) -> tuple[int, dict[str, int]]:
        if self.is_deleted:
            return 0, {}
        self.deleted_at = timezone.now()
        self.save(update_fields=["deleted_at"])
        return 1, {self._meta.label: 1}

    def hard_delete(self, using=None, keep_parents=False) -> tuple[int, dict[str, int]]:
        return super().delete(using=using, keep_parents=keep_parents)
