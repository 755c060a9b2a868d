import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.db import migrations, models

import shared.models.fields


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Student',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='name')),
                ('whatsapp', models.CharField(help_text='Contact handle, digits only', max_length=30, verbose_name='WhatsApp')),
                ('due_date', models.DateField(verbose_name='due date')),
                ('monthly_fee', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0'))], verbose_name='monthly fee')),
                ('modalities', shared.models.fields.ModalityListField(blank=True, default=list, verbose_name='modalities')),
                ('classes_per_week', models.CharField(blank=True, default='', max_length=50, verbose_name='classes per week')),
                ('gender', models.CharField(blank=True, choices=[('masculine', 'Masculine'), ('feminine', 'Feminine')], default='', max_length=20, verbose_name='gender')),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive')], default='active', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='students', to='core.tenant')),
            ],
            options={
                'verbose_name': 'Student',
                'verbose_name_plural': 'Students',
                'db_table': 'students',
                'ordering': ['due_date', 'name'],
                'indexes': [
                    models.Index(fields=['tenant', 'status'], name='students_tenant_status_idx'),
                    models.Index(fields=['tenant', 'due_date'], name='students_tenant_due_idx'),
                    models.Index(fields=['tenant', 'name'], name='students_tenant_name_idx'),
                ],
            },
        ),
    ]
