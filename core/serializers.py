"""
Serializer base classes shared across apps.
"""

import copy

from django.core.exceptions import FieldDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers


class CleanModelSerializer(serializers.ModelSerializer):
    """
    ModelSerializer that runs ``Model.clean()`` during validation.

    The incoming attributes are applied to a copy of the instance (or a new
    unsaved one) so domain messages raised by the model are reported as
    regular ``{field: [message]}`` serializer errors.
    """

    def build_validation_instance(self, attrs):
        model = self.Meta.model
        instance = copy.copy(self.instance) if self.instance is not None else model()
        for field, value in attrs.items():
            try:
                model._meta.get_field(field)
            except FieldDoesNotExist:
                continue
            setattr(instance, field, value)
        return instance

    def validate(self, attrs):
        attrs = super().validate(attrs)
        instance = self.build_validation_instance(attrs)
        try:
            instance.clean()
        except DjangoValidationError as e:
            if hasattr(e, 'error_dict'):
                raise serializers.ValidationError(e.message_dict)
            raise serializers.ValidationError({'non_field_errors': e.messages})
        return attrs
