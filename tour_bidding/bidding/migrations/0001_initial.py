from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


AGE_RESTRICTION_CHOICES = [
    ('all-ages', 'All ages'),
    ('18+', '18+'),
    ('21+', '21+'),
    ('flexible', 'Flexible'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Artist',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True)),
                ('genre', models.CharField(blank=True, max_length=100)),
                ('city', models.CharField(blank=True, max_length=100)),
                ('state', models.CharField(blank=True, max_length=100)),
                ('owner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='artists', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='Venue',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('city', models.CharField(max_length=100)),
                ('state', models.CharField(blank=True, max_length=100)),
                ('capacity', models.PositiveIntegerField()),
                ('age_restriction', models.CharField(choices=AGE_RESTRICTION_CHOICES, default='all-ages', max_length=10)),
                ('unavailable_dates', models.JSONField(blank=True, default=list)),
                ('blackout_dates', models.JSONField(blank=True, default=list)),
                ('owner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='venues', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'unique_together': {('name', 'city')},
            },
        ),
        migrations.CreateModel(
            name='TourRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('location', models.CharField(blank=True, max_length=200)),
                ('genres', models.JSONField(blank=True, default=list)),
                ('request_date', models.DateField(blank=True, null=True)),
                ('start_date', models.DateField(blank=True, null=True)),
                ('end_date', models.DateField(blank=True, null=True)),
                ('flexibility', models.CharField(choices=[('exact-cities', 'Exact cities'), ('region-flexible', 'Region flexible'), ('route-flexible', 'Route flexible')], default='exact-cities', max_length=20)),
                ('expected_draw_min', models.PositiveIntegerField(blank=True, null=True)),
                ('expected_draw_max', models.PositiveIntegerField(blank=True, null=True)),
                ('expected_draw_description', models.CharField(blank=True, max_length=255)),
                ('equipment', models.JSONField(blank=True, default=dict)),
                ('guarantee_min', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('guarantee_max', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('accepts_door_deals', models.BooleanField(default=True)),
                ('merchandising', models.BooleanField(default=True)),
                ('travel_method', models.CharField(blank=True, max_length=50)),
                ('lodging', models.CharField(blank=True, max_length=50)),
                ('age_restriction', models.CharField(choices=AGE_RESTRICTION_CHOICES, default='flexible', max_length=10)),
                ('priority', models.CharField(choices=[('high', 'High'), ('medium', 'Medium'), ('low', 'Low')], default='medium', max_length=10)),
                ('status', models.CharField(choices=[('active', 'Active'), ('completed', 'Completed'), ('cancelled', 'Cancelled'), ('paused', 'Paused')], default='active', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('artist', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tour_requests', to='bidding.artist')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_tour_requests', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'constraints': [
                    models.CheckConstraint(
                        condition=(
                            models.Q(('end_date__isnull', True), ('request_date__isnull', False), ('start_date__isnull', True))
                            | models.Q(('end_date__isnull', False), ('request_date__isnull', True), ('start_date__isnull', False))
                        ),
                        name='tour_request_single_date_or_range',
                    ),
                    models.CheckConstraint(
                        condition=models.Q(('start_date__isnull', True), ('start_date__lte', models.F('end_date')), _connector='OR'),
                        name='tour_request_start_before_end',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='VenueBid',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('proposed_date', models.DateField()),
                ('alternative_dates', models.JSONField(blank=True, default=list)),
                ('guarantee', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('door_split', models.CharField(blank=True, max_length=50)),
                ('door_minimum_guarantee', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('ticket_price_advance', models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ('ticket_price_door', models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ('capacity', models.IntegerField()),
                ('age_restriction', models.CharField(choices=AGE_RESTRICTION_CHOICES, default='all-ages', max_length=10)),
                ('equipment_provided', models.JSONField(blank=True, default=dict)),
                ('load_in', models.TimeField(blank=True, null=True)),
                ('soundcheck', models.TimeField(blank=True, null=True)),
                ('doors_open', models.TimeField(blank=True, null=True)),
                ('show_time', models.TimeField(blank=True, null=True)),
                ('curfew', models.TimeField(blank=True, null=True)),
                ('promotion', models.JSONField(blank=True, default=dict)),
                ('lodging', models.JSONField(blank=True, null=True)),
                ('billing_position', models.CharField(blank=True, choices=[('headliner', 'Headliner'), ('co-headliner', 'Co-headliner'), ('direct-support', 'Direct support'), ('opener', 'Opener'), ('local-opener', 'Local opener')], max_length=20)),
                ('lineup_position', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('set_length', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('other_acts', models.TextField(blank=True)),
                ('billing_notes', models.TextField(blank=True)),
                ('message', models.TextField(blank=True)),
                ('additional_terms', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('hold', 'Hold'), ('accepted', 'Accepted'), ('declined', 'Declined'), ('cancelled', 'Cancelled'), ('expired', 'Expired')], default='pending', max_length=10)),
                ('hold_position', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('held_at', models.DateTimeField(blank=True, null=True)),
                ('held_until', models.DateTimeField(blank=True, null=True)),
                ('accepted_at', models.DateTimeField(blank=True, null=True)),
                ('declined_at', models.DateTimeField(blank=True, null=True)),
                ('declined_reason', models.TextField(blank=True)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('cancelled_reason', models.TextField(blank=True)),
                ('expired_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('tour_request', models.ForeignKey(db_constraint=False, on_delete=django.db.models.deletion.DO_NOTHING, related_name='bids', to='bidding.tourrequest')),
                ('venue', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bids', to='bidding.venue')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='submitted_bids', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': [models.F('hold_position').asc(nulls_last=True), '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Show',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('city', models.CharField(blank=True, max_length=100)),
                ('state', models.CharField(blank=True, max_length=100)),
                ('capacity', models.PositiveIntegerField()),
                ('age_restriction', models.CharField(choices=AGE_RESTRICTION_CHOICES, default='all-ages', max_length=10)),
                ('guarantee', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('door_split', models.CharField(blank=True, max_length=50)),
                ('door_minimum_guarantee', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('ticket_price', models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ('load_in', models.TimeField(blank=True, null=True)),
                ('soundcheck', models.TimeField(blank=True, null=True)),
                ('doors_open', models.TimeField(blank=True, null=True)),
                ('show_time', models.TimeField(blank=True, null=True)),
                ('curfew', models.TimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('confirmed', 'Confirmed'), ('accepted', 'Accepted'), ('hold', 'Hold'), ('cancelled', 'Cancelled')], default='confirmed', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('artist', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='shows', to='bidding.artist')),
                ('venue', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='shows', to='bidding.venue')),
                ('bid', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='show', to='bidding.venuebid')),
                ('tour_request', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='shows', to='bidding.tourrequest')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_shows', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['date'],
            },
        ),
    ]
