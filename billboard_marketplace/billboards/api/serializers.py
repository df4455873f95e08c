from rest_framework import serializers

from billboard_marketplace.billboards.models import Billboard


class BillboardSerializer(serializers.ModelSerializer[Billboard]):
    owner_name = serializers.CharField(source="owner.name", read_only=True)

    class Meta:
        model = Billboard
        fields = [
            "id",
            "owner",
            "owner_name",
            "title",
            "description",
            "address",
            "city",
            "province",
            "postal_code",
            "latitude",
            "longitude",
            "width",
            "height",
            "resolution",
            "traffic_level",
            "base_price",
            "status",
            "approved_at",
            "approved_by",
            "rejected_at",
            "rejected_by",
            "rejection_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class RejectBillboardSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class BillboardWriteSerializer(serializers.ModelSerializer[Billboard]):
    """Fields an owner fills in; moderation state is never writable here."""

    base_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)

    class Meta:
        model = Billboard
        fields = [
            "title",
            "description",
            "address",
            "city",
            "province",
            "postal_code",
            "latitude",
            "longitude",
            "width",
            "height",
            "resolution",
            "traffic_level",
            "base_price",
        ]


OWNER_STATUSES = (
    Billboard.Status.ACTIVE,
    Billboard.Status.INACTIVE,
    Billboard.Status.PENDING,
)


class BillboardStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[(s.value, s.label) for s in OWNER_STATUSES])

    def validate_status(self, value):
        if value == Billboard.Status.ACTIVE and self.instance.approved_at is None:
            msg = "A listing can only go live after it has been approved."
            raise serializers.ValidationError(msg)
        return value

    def update(self, instance, validated_data):
        instance.status = validated_data["status"]
        instance.save(update_fields=["status", "updated_at"])
        return instance
