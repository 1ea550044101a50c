import uuid

from django.db import models
from django.utils import timezone


class BaseModel(models.Model):
    """UUID key, timestamps and an ``is_active`` flag shared by the catalog and order tables."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True, editable=False)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def soft_delete(self, *also_update):
        """
        Hide the row instead of deleting it.

        Placed orders reference menu items and restaurants, so rows are never
        removed once they may have been ordered from.
        """
        if not self.is_active:
            return False
        self.is_active = False
        self.deleted_at = timezone.now()
        self.save(update_fields=["is_active", "deleted_at", "updated_at", *also_update])
        return True
