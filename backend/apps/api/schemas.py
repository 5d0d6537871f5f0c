from typing import Optional

from drf_spectacular.utils import inline_serializer
from rest_framework import serializers

from apps.api.utils import ENVELOPE_STATUSES


class ErrorEnvelopeSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ENVELOPE_STATUSES)
    message = serializers.CharField()
    data = serializers.JSONField(allow_null=True)


def enveloped(
    data_serializer_class: Optional[type[serializers.Serializer]],
    name: Optional[str] = None,
    many: bool = False,
) -> type[serializers.Serializer]:
    """Create an inline serializer describing ``{status, message, data}`` around a payload.

    Passing ``None`` documents an envelope whose ``data`` is always null.
    """
    if data_serializer_class is None:
        data_field = serializers.JSONField(allow_null=True)
        label = name or "Empty"
    else:
        data_field = data_serializer_class(many=many, allow_null=True)
        label = name or getattr(data_serializer_class, "__name__", "Data")
        if many and name is None:
            label += "List"
    return inline_serializer(
        name=f"Enveloped{label}",
        fields={
            "status": serializers.ChoiceField(choices=ENVELOPE_STATUSES),
            "message": serializers.CharField(),
            "data": data_field,
        },
    )
