from rest_framework import serializers


class UnlockContentSerializer(serializers.Serializer):
    content_id = serializers.CharField(max_length=128)
