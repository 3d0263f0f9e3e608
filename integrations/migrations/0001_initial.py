# Generated migration for the Integration model

import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Integration',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('environment_id', models.UUIDField(db_index=True, editable=False, help_text='Environment this integration belongs to')),
                ('organization_id', models.UUIDField(db_index=True, editable=False, help_text='Organization owning the environment')),
                ('channel', models.CharField(choices=[('in_app', 'In-App'), ('email', 'Email'), ('sms', 'SMS'), ('chat', 'Chat'), ('push', 'Push')], help_text='Delivery channel served by the provider', max_length=20)),
                ('provider_id', models.CharField(help_text='Provider implementation, e.g. sendgrid or twilio', max_length=50)),
                ('name', models.CharField(blank=True, max_length=255)),
                ('identifier', models.CharField(blank=True, max_length=100)),
                ('active', models.BooleanField(default=False)),
                ('credentials', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Integration',
                'verbose_name_plural': 'Integrations',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['environment_id', 'channel', 'active'], name='integ_env_channel_active_idx')],
            },
        ),
    ]
