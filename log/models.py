from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


class ChangeEvent(models.Model):
    """
    One write to a tracked collection. The id is the polling cursor and the
    payload is the full row after the write (the last known row for deletes).
    """
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
    ]
    collection = models.CharField(max_length=50, db_index=True)
    object_id = models.CharField(max_length=100)
    action = models.CharField(max_length=10, choices=ACTION_CHOICES)
    payload = models.JSONField(encoder=DjangoJSONEncoder, default=dict)
    # Order the row belongs to (orders and order items only); used to scope the feed
    order_ref = models.BigIntegerField(null=True, blank=True, db_index=True)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL)
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.collection} {self.object_id} {self.action} at {self.timestamp}"
