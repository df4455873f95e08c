from rest_framework import serializers

from billboard_marketplace.audit.models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    actor = serializers.SerializerMethodField()
    target = serializers.SerializerMethodField()

    class Meta:
        model = AuditLog
        fields = [
            "id",
            "action",
            "actor",
            "target",
            "reason",
            "before",
            "after",
            "ip_address",
            "created_at",
        ]

    def get_actor(self, obj: AuditLog) -> dict | None:
        if obj.actor is None:
            return None
        return {
            "id": obj.actor.id,
            "username": obj.actor.username,
            "role": obj.actor.role,
        }

    def get_target(self, obj: AuditLog) -> dict | None:
        if not obj.target_type:
            return None
        return {"type": obj.target_type, "id": obj.target_id}
