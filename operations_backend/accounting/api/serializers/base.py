# accounting/api/serializers/base.py

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers


def as_drf_error(exc: DjangoValidationError) -> serializers.ValidationError:
    if hasattr(exc, "message_dict"):
        return serializers.ValidationError(exc.message_dict)
    return serializers.ValidationError({"detail": exc.messages})


class CleanModelSerializer(serializers.ModelSerializer):
    """
    ModelSerializer for models that run full_clean() inside save().

    Model-level ValidationError (cycles, overlaps, immutable fields) comes
    back as a 400 instead of escaping as a 500.
    """

    def create(self, validated_data):
        try:
            return super().create(validated_data)
        except DjangoValidationError as exc:
            raise as_drf_error(exc) from exc

    def update(self, instance, validated_data):
        try:
            return super().update(instance, validated_data)
        except DjangoValidationError as exc:
            raise as_drf_error(exc) from exc
