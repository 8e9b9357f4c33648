import apps.inspections.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Store',
            fields=[
                ('id', models.CharField(default=apps.inspections.models.generate_document_id, editable=False, max_length=64, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('location', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'stores',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Inspection',
            fields=[
                ('id', models.CharField(default=apps.inspections.models.generate_document_id, editable=False, max_length=64, primary_key=True, serialize=False)),
                ('store_id', models.CharField(db_index=True, max_length=64)),
                ('date', models.DateField()),
                ('time', models.TimeField()),
                ('items', models.JSONField(default=list)),
                ('checklist_version', models.PositiveSmallIntegerField(default=1)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('completed', 'Completed'), ('reviewed', 'Reviewed')], default='draft', max_length=20)),
                ('inspected_by', models.JSONField(default=dict)),
                ('corrected_by', models.JSONField(blank=True, null=True)),
                ('version', models.PositiveIntegerField(default=1)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'inspections',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['store_id', 'created_at'], name='inspections_store_created_idx'),
                    models.Index(fields=['created_at'], name='inspections_created_idx'),
                ],
            },
        ),
    ]
