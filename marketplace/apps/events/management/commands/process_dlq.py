"""
Retry lifecycle events whose Kafka publication failed.
Run periodically (cron or a scheduler sidecar).
"""
from django.core.management.base import BaseCommand
from django.utils import timezone
from infrastructure.kafka_client import dlq_backoff, kafka_client

from apps.events.models import DeadLetterQueue


class Command(BaseCommand):
    help = "Process Dead Letter Queue entries and retry failed Kafka events"

    def add_arguments(self, parser):
        parser.add_argument(
            "--max-retries",
            type=int,
            default=5,
            help="Maximum number of retry attempts per event (default: 5)",
        )
        parser.add_argument(
            "--batch-size",
            type=int,
            default=100,
            help="Number of DLQ entries to process in one run (default: 100)",
        )

    def handle(self, *args, **options):
        max_retries = options["max_retries"]

        self.stdout.write("Processing Dead Letter Queue entries...")
        entries = DeadLetterQueue.objects.filter(
            status="pending",
            next_retry_at__lte=timezone.now(),
            retry_count__lt=max_retries,
        ).order_by("next_retry_at")[: options["batch_size"]]

        processed = succeeded = failed = 0
        for entry in entries:
            entry.status = "retrying"
            entry.save(update_fields=["status", "updated_at"])

            if kafka_client.publish(topic=entry.topic, event_data=entry.event_data, dead_letter=False):
                entry.status = "processed"
                entry.processed_at = timezone.now()
                succeeded += 1
            else:
                entry.retry_count += 1
                entry.next_retry_at = timezone.now() + dlq_backoff(entry.retry_count)
                entry.status = "failed" if entry.retry_count >= max_retries else "pending"
                failed += 1
            entry.save()
            processed += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"DLQ processing completed. Processed: {processed}, Succeeded: {succeeded}, Failed: {failed}"
            )
        )
