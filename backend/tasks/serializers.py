# tasks/serializers.py

import logging

from django.db import transaction
from django.utils import timezone
from rest_framework import serializers

from .models import Task
from .priority_engine import InvalidTaskInput, present_urgency
from .services import apply_priority

logger = logging.getLogger(__name__)


class TaskSerializer(serializers.ModelSerializer):
    urgency = serializers.SerializerMethodField()

    class Meta:
        model = Task
        # explicit whitelist: user-truth fields + engine output required by the UI
        fields = [
            'id', 'title', 'description', 'status', 'due_date', 'manual_priority',
            'priority_score', 'eisenhower_category', 'priority_reasoning', 'scored_at',
            'urgency', 'position', 'completed_at', 'created_at', 'updated_at'
        ]
        read_only_fields = [
            'id', 'priority_score', 'eisenhower_category', 'priority_reasoning',
            'scored_at', 'completed_at', 'created_at', 'updated_at'
        ]

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Title is required.")
        return value.strip()

    def get_urgency(self, obj):
        # Same-day grace follows the active timezone's calendar day.
        return present_urgency(obj.due_date, timezone.localtime()).as_dict()

    def _score(self, task):
        try:
            apply_priority(task, timezone.now())
        except InvalidTaskInput as e:
            raise serializers.ValidationError({e.field: [str(e)]})

    def create(self, validated_data):
        """
        Persist the task for the authenticated user with its initial score.
        Scoring is synchronous: the engine is pure and cheap.
        """
        user = self.context['request'].user
        if not user or not user.is_authenticated:
            raise serializers.ValidationError("Authentication required to create a task.")

        task = Task(owner=user, **validated_data)
        if task.is_done:
            task.completed_at = timezone.now()
        self._score(task)

        with transaction.atomic():
            task.save()

        logger.info(f"Created Task {task.id} with score {task.priority_score}")
        return task

    def update(self, instance, validated_data):
        """
        Apply edits; re-score only when a field the engine reads has changed.
        """
        scoring_changed = any(
            field in validated_data and validated_data[field] != getattr(instance, field)
            for field in Task.SCORING_FIELDS
        )
        was_done = instance.is_done

        for attr, value in validated_data.items():
            setattr(instance, attr, value)

        if instance.is_done and not was_done:
            instance.completed_at = timezone.now()
        elif not instance.is_done:
            instance.completed_at = None

        if scoring_changed:
            self._score(instance)
            logger.info(f"Re-scored Task {instance.id} after edit: {instance.priority_score}")

        instance.save()
        return instance
