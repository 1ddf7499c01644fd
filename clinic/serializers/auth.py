from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

User = get_user_model()


class LoginSerializer(serializers.Serializer):
    login = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_login(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Login must not be blank')
        return v


class RegisterSerializer(LoginSerializer):
    login = serializers.RegexField(r'^[\w.@+-]+$', max_length=150)

    def validate_login(self, v):
        v = super().validate_login(v)
        if User.objects.filter(username=v).exists():
            raise serializers.ValidationError('This login is already taken')
        return v

    def validate(self, attrs):
        try:
            validate_password(attrs['password'], user=User(username=attrs['login']))
        except DjangoValidationError as e:
            raise serializers.ValidationError({'password': list(e.messages)})
        return attrs


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)
