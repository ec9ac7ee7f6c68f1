# users/serializers.py

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from permissions.roles import capabilities_for

User = get_user_model()


# ---------------- REGISTER ----------------
class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={"input_type": "password"},
    )
    username = serializers.CharField(required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)

    class Meta:
        model = User
        fields = [
            "username",
            "email",
            "password",
            "first_name",
            "last_name",
        ]

    def validate(self, attrs):
        if not (attrs.get("username") or "").strip() and not (attrs.get("email") or "").strip():
            raise serializers.ValidationError("Provide at least email or username")
        return attrs

    def create(self, validated_data):
        # Self-registration always lands as a cashier; role changes go through admin.
        return User.objects.create_user(
            email=validated_data.get("email") or None,
            password=validated_data["password"],
            username=validated_data.get("username", ""),
            first_name=validated_data.get("first_name", ""),
            last_name=validated_data.get("last_name", ""),
            role="cashier",
        )


# ---------------- LOGIN (INPUT ONLY) ----------------
class LoginSerializer(serializers.Serializer):
    """
    Input validation only.
    Authentication is handled in the view.

    identifier = email OR username.
    """

    identifier = serializers.CharField()
    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
    )


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    """
    Safe user representation for frontend consumption.
    """

    capabilities = serializers.SerializerMethodField()
    has_pin = serializers.BooleanField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "role",
            "has_pin",
            "capabilities",
        ]

    def get_capabilities(self, obj) -> list[str]:
        return sorted(capabilities_for(obj))


# ---------------- MANAGER PIN ----------------
class VerifyPinSerializer(serializers.Serializer):
    pin = serializers.CharField(write_only=True, max_length=8, style={"input_type": "password"})
