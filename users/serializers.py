from rest_framework import serializers
from django.contrib.auth import authenticate, get_user_model
from .models import CustomUser, Role

User = get_user_model()


# -------------------------------
# USER REGISTRATION SERIALIZER
# -------------------------------
class UserRegistrationSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=8)

    class Meta:
        model = CustomUser
        fields = ["id", "email", "name", "password", "role", "date_joined"]
        read_only_fields = ["id", "role", "date_joined"]

    def validate_email(self, value):
        if CustomUser.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("A user with that email already exists.")
        return value

    def create(self, validated_data):
        # self-registration never grants elevated roles
        return CustomUser.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            name=validated_data.get("name"),
            role=Role.MEMBER,
        )


# -------------------------------
# USER PROFILE SERIALIZER
# -------------------------------
class UserProfileSerializer(serializers.ModelSerializer):
    """Serializer used by admins to manage interns and members"""
    password = serializers.CharField(write_only=True, required=False, min_length=8)
    certificate = serializers.SerializerMethodField()

    class Meta:
        model = CustomUser
        fields = [
            "id",
            "email",
            "name",
            "role",
            "password",
            "internship_start_date",
            "internship_end_date",
            "internship_status",
            "current_internship",
            "certificate",
            "is_active",
            "date_joined",
        ]
        read_only_fields = [
            "id",
            "internship_status",
            "current_internship",
            "is_active",
            "date_joined",
        ]

    def validate_email(self, value):
        qs = CustomUser.objects.filter(email__iexact=value)
        if self.instance:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A user with that email already exists.")
        return value

    def validate(self, attrs):
        start = attrs.get("internship_start_date", getattr(self.instance, "internship_start_date", None))
        end = attrs.get("internship_end_date", getattr(self.instance, "internship_end_date", None))
        if start and end and end < start:
            raise serializers.ValidationError(
                {"internship_end_date": "End date cannot be before the start date."}
            )
        if self.instance is None and not attrs.get("password"):
            raise serializers.ValidationError({"password": "This field is required."})
        return attrs

    def create(self, validated_data):
        password = validated_data.pop("password")
        email = validated_data.pop("email")
        return CustomUser.objects.create_user(email=email, password=password, **validated_data)

    def update(self, instance, validated_data):
        password = validated_data.pop("password", None)
        instance = super().update(instance, validated_data)
        if password:
            instance.set_password(password)
            instance.save(update_fields=["password"])
        return instance

    def get_certificate(self, obj):
        certificate = obj.latest_certificate
        if certificate is None:
            return None
        return {
            "certificate_id": certificate.certificate_id,
            "issued_at": certificate.issued_at,
            "certificate_url": certificate.certificate_url,
            "artifact_url": certificate.artifact_url,
        }


class EmailAuthTokenSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        user = authenticate(
            request=self.context.get("request"),
            email=attrs.get("email"),
            password=attrs.get("password"),
        )
        if user is None:
            raise serializers.ValidationError("Invalid email or password")
        attrs["user"] = user
        return attrs
