# Generated manually for MealSlot model

import uuid

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('vendors', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='MealSlot',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=50)),
                ('start_time', models.CharField(max_length=5)),
                ('end_time', models.CharField(max_length=5)),
                ('cutoff_time', models.CharField(max_length=5)),
                ('time_window_duration', models.PositiveIntegerField(default=60, validators=[django.core.validators.MinValueValidator(1)])),
                ('is_active', models.BooleanField(default=True)),
                ('vendor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='meal_slots', to='vendors.vendor')),
            ],
            options={
                'db_table': 'meal_slots',
                'ordering': ['start_time'],
                'indexes': [models.Index(fields=['vendor', 'is_active'], name='meal_slots_vendor__4c8a27_idx')],
            },
        ),
    ]
