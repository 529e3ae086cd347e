from rest_framework import serializers

from .models import ChatMessage, ChatSession


class ChatMessageSerializer(serializers.ModelSerializer):
    sessionId = serializers.UUIDField(source="session_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = ChatMessage
        fields = ["id", "sessionId", "role", "content", "createdAt"]
        read_only_fields = fields


class ChatSessionListSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)
    messageCount = serializers.IntegerField(source="message_count", read_only=True)

    class Meta:
        model = ChatSession
        fields = ["id", "title", "createdAt", "updatedAt", "messageCount"]
        read_only_fields = fields


class ChatSessionDetailSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)
    messages = ChatMessageSerializer(many=True, read_only=True)

    class Meta:
        model = ChatSession
        fields = ["id", "title", "createdAt", "updatedAt", "messages"]
        read_only_fields = fields


class StrictCharField(serializers.CharField):
    """CharField that refuses numbers and booleans instead of coercing them."""

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail("invalid")
        return super().to_internal_value(data)


class SendChatSerializer(serializers.Serializer):
    """Body of POST /chat/send."""
    message = StrictCharField(allow_blank=True, trim_whitespace=False)
    sessionId = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    documentIds = serializers.ListField(
        child=StrictCharField(),
        required=False,
        allow_null=True,
        allow_empty=True,
    )

    def validate_documentIds(self, value):
        if value and len(set(value)) != len(value):
            raise serializers.ValidationError("documentIds must not contain duplicates.")
        return value
