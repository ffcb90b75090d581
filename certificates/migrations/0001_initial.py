import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('internships', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Certificate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('certificate_id', models.CharField(editable=False, max_length=40, unique=True)),
                ('issued_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('certificate_url', models.URLField(max_length=500)),
                ('signed_payload', models.TextField(editable=False)),
                ('intern_name', models.CharField(max_length=255)),
                ('internship_title', models.CharField(max_length=255)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField()),
                ('company', models.CharField(max_length=120)),
                ('artifact_url', models.URLField(blank=True, max_length=500, null=True)),
                ('artifact_status', models.CharField(choices=[('pending', 'Pending'), ('uploaded', 'Uploaded'), ('disabled', 'Disabled')], db_index=True, default='pending', max_length=20)),
                ('artifact_attempts', models.PositiveIntegerField(default=0)),
                ('artifact_error', models.TextField(blank=True, default='')),
                ('intern', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='certificates', to=settings.AUTH_USER_MODEL)),
                ('internship', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='certificate', to='internships.internship')),
            ],
            options={
                'ordering': ['-issued_at'],
            },
        ),
    ]
