from apps.core.models import TimeStampedUUIDModel
from django.db import models


class DeadLetterQueue(TimeStampedUUIDModel):
    STATUS_CHOICES = [
        ("pending", "Pending"),
        ("retrying", "Retrying"),
        ("processed", "Processed"),
        ("failed", "Failed"),
    ]

    topic = models.CharField(max_length=255, help_text="Kafka topic name")
    event_data = models.JSONField(help_text="Original event data")
    error_message = models.TextField(null=True, blank=True, help_text="Error that caused the failure")
    retry_count = models.IntegerField(default=0, help_text="Number of retry attempts")
    max_retries = models.IntegerField(default=5, help_text="Maximum number of retries")
    status = models.CharField(max_length=50, choices=STATUS_CHOICES, default="pending")
    next_retry_at = models.DateTimeField(null=True, blank=True, help_text="When to retry next")
    processed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "dead_letter_queue"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="dead_letter_status_idx"),
            models.Index(fields=["next_retry_at"], name="dead_letter_next_retry_idx"),
            models.Index(fields=["topic"], name="dead_letter_topic_idx"),
        ]

    def __str__(self):
        return f"{self.topic} ({self.status}, retries={self.retry_count})"
