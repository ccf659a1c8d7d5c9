from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


PARTY_TYPE_CHOICES = [('artist', 'Artist'), ('venue', 'Venue')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='BookingInquiry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('direction', models.CharField(choices=[('artist-to-venue', 'Artist to venue'), ('venue-to-artist', 'Venue to artist')], max_length=20)),
                ('inquirer_type', models.CharField(choices=PARTY_TYPE_CHOICES, max_length=10)),
                ('inquirer_id', models.PositiveIntegerField()),
                ('inquirer_name', models.CharField(max_length=100)),
                ('inquirer_email', models.EmailField(max_length=254)),
                ('inquirer_phone', models.CharField(blank=True, max_length=30)),
                ('recipient_type', models.CharField(choices=PARTY_TYPE_CHOICES, max_length=10)),
                ('recipient_id', models.PositiveIntegerField()),
                ('recipient_name', models.CharField(max_length=100)),
                ('proposed_date', models.DateField()),
                ('alternative_dates', models.JSONField(blank=True, default=list)),
                ('event_type', models.CharField(default='concert', max_length=50)),
                ('expected_attendance', models.PositiveIntegerField(blank=True, null=True)),
                ('guarantee', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('door_split', models.CharField(blank=True, max_length=50)),
                ('ticket_price', models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ('message', models.TextField()),
                ('riders', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('viewed', 'Viewed'), ('responded', 'Responded'), ('accepted', 'Accepted'), ('declined', 'Declined'), ('expired', 'Expired')], default='pending', max_length=10)),
                ('viewed_at', models.DateTimeField(blank=True, null=True)),
                ('responded_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='booking_inquiries', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'verbose_name_plural': 'booking inquiries',
            },
        ),
        migrations.CreateModel(
            name='BookingResponse',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('responder_name', models.CharField(max_length=100)),
                ('responder_email', models.EmailField(blank=True, max_length=254)),
                ('message', models.TextField()),
                ('status', models.CharField(choices=[('counter-offer', 'Counter offer'), ('accepted', 'Accepted'), ('declined', 'Declined'), ('more-info-needed', 'More info needed')], max_length=20)),
                ('counter_date', models.DateField(blank=True, null=True)),
                ('counter_guarantee', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('counter_door_split', models.CharField(blank=True, max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('inquiry', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='responses', to='inquiries.bookinginquiry')),
                ('responder', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='booking_responses', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['created_at', 'id'],
            },
        ),
    ]
