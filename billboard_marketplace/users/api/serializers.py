from rest_framework import serializers

from billboard_marketplace.users.models import User


class UserSerializer(serializers.ModelSerializer[User]):
    id = serializers.IntegerField(read_only=True)

    # Identity and moderation fields are system-managed
    username = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)
    role = serializers.CharField(read_only=True)
    suspended = serializers.BooleanField(read_only=True)
    suspended_at = serializers.DateTimeField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "name",
            "first_name",
            "last_name",
            "role",
            "suspended",
            "suspended_at",
            "created_at",
        ]
        read_only_fields = ["created_at"]

    def update(self, instance, validated_data):
        forbidden = {
            k
            for k in ("username", "email", "role", "suspended")
            if k in self.initial_data
        }
        if forbidden:
            errors = {f: "This field is read-only." for f in sorted(forbidden)}
            raise serializers.ValidationError(errors)
        instance.first_name = validated_data.get("first_name", instance.first_name)
        instance.last_name = validated_data.get("last_name", instance.last_name)
        if "name" in validated_data:
            instance.name = validated_data["name"]
        elif {"first_name", "last_name"} & validated_data.keys():
            # Renamed parts without an explicit display name: rebuild it on save
            instance.name = ""
        instance.save()
        return instance
