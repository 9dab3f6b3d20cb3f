from rest_framework import serializers
from .models import ChangeEvent


class ChangeEventSerializer(serializers.ModelSerializer):
    class Meta:
        model = ChangeEvent
        fields = ['id', 'collection', 'object_id', 'action', 'payload', 'user', 'timestamp']
