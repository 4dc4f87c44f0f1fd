# Generated manually for ServiceArea model

import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ServiceArea',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=100, unique=True)),
                ('city', models.CharField(max_length=100)),
                ('state', models.CharField(max_length=100)),
                ('boundary', models.JSONField()),
                ('pincodes', models.JSONField(blank=True, default=list)),
                ('status', models.CharField(choices=[('ACTIVE', 'Active'), ('INACTIVE', 'Inactive')], default='ACTIVE', max_length=20)),
                ('center_latitude', models.DecimalField(blank=True, decimal_places=8, max_digits=10, null=True)),
                ('center_longitude', models.DecimalField(blank=True, decimal_places=8, max_digits=11, null=True)),
            ],
            options={
                'db_table': 'service_areas',
                'indexes': [
                    models.Index(fields=['status'], name='service_are_status_3f0c2a_idx'),
                    models.Index(fields=['city'], name='service_are_city_8d41e7_idx'),
                ],
            },
        ),
    ]
