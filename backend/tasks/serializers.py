"""
Serializers for Task Tide.

Wire names are camelCase (dueDate, createdAt, aiScore, ...); every field
maps onto the snake_case attribute of the Task entity through ``source``.
"""

from collections.abc import Mapping
from datetime import timezone as dt_timezone

from rest_framework import serializers
from rest_framework.exceptions import ErrorDetail

from .entities import (
    CATEGORY_CHOICES,
    PRIORITY_CHOICES,
    TITLE_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    ESTIMATE_MIN_HOURS,
    ESTIMATE_MAX_HOURS,
    DEFAULT_ESTIMATE_HOURS,
)
from .scoring import parse_due_date


class DueDateField(serializers.DateTimeField):
    """
    ISO 8601 date or datetime. A bare date means midnight UTC.
    """

    def to_internal_value(self, value):
        if isinstance(value, str) and value.strip():
            parsed = parse_due_date(value)
            if parsed is None:
                self.fail('invalid', format='YYYY-MM-DD or YYYY-MM-DDThh:mm[:ss][+HH:MM|Z]')
            try:
                parsed.astimezone(dt_timezone.utc)
            except OverflowError:
                self.fail('overflow')
            return self.enforce_timezone(parsed)
        return super().to_internal_value(value)


class TaskSerializer(serializers.Serializer):
    """
    Output representation of a task.
    """

    id = serializers.CharField()
    title = serializers.CharField()
    description = serializers.CharField()
    category = serializers.CharField()
    priority = serializers.CharField()
    dueDate = serializers.DateTimeField(source='due_date', allow_null=True)
    estimate = serializers.FloatField()
    completed = serializers.BooleanField()
    completedAt = serializers.DateTimeField(source='completed_at', allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at')
    updatedAt = serializers.DateTimeField(source='updated_at')
    aiScore = serializers.IntegerField(source='ai_score')


class TaskInputSerializer(serializers.Serializer):
    """
    Validates create payloads, and update payloads when used with
    ``partial=True`` (nothing required, no defaults applied).

    Keys that are not writable fields (id, aiScore, createdAt, ...) are
    rejected alongside the regular field errors so the caller sees every
    violation at once.
    """

    title = serializers.CharField(max_length=TITLE_MAX_LENGTH, required=True, trim_whitespace=False)
    description = serializers.CharField(
        max_length=DESCRIPTION_MAX_LENGTH,
        required=False,
        allow_blank=True,
        trim_whitespace=False,
        default=''
    )
    category = serializers.ChoiceField(choices=CATEGORY_CHOICES, required=True)
    priority = serializers.ChoiceField(choices=PRIORITY_CHOICES, required=True)
    dueDate = DueDateField(source='due_date', required=False, allow_null=True, default=None)
    estimate = serializers.FloatField(
        min_value=ESTIMATE_MIN_HOURS,
        max_value=ESTIMATE_MAX_HOURS,
        required=False,
        default=DEFAULT_ESTIMATE_HOURS
    )
    completed = serializers.BooleanField(required=False, default=False)

    def validate_title(self, value):
        """Reject numbers and other non-strings that CharField would coerce."""
        raw = self.initial_data.get('title') if isinstance(self.initial_data, Mapping) else value
        if not isinstance(raw, str):
            raise serializers.ValidationError('Title must be a string.')
        return value

    def to_internal_value(self, data):
        errors = {}
        value = None
        try:
            value = super().to_internal_value(data)
        except serializers.ValidationError as exc:
            errors.update(exc.detail)

        if isinstance(data, Mapping):
            for key in data:
                if key not in self.fields:
                    errors[key] = [ErrorDetail('This field is not allowed.', code='not_allowed')]

        if errors:
            raise serializers.ValidationError(errors)
        return value


class PrioritizeRequestSerializer(serializers.Serializer):
    """
    Bulk prioritization request. Task payloads are re-scored as-is.
    """

    tasks = serializers.ListField(
        child=serializers.DictField(),
        allow_empty=True,
        error_messages={
            'not_a_list': 'Tasks must be an array',
            'required': 'Tasks must be an array',
            'null': 'Tasks must be an array',
        }
    )


class SuggestionSerializer(serializers.Serializer):
    type = serializers.CharField()
    message = serializers.CharField()
    action = serializers.CharField()
    priority = serializers.CharField()
