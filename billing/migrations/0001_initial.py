import django.db.models.deletion
import django.utils.timezone
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
        ('students', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10, verbose_name='amount')),
                ('payment_date', models.DateField(default=django.utils.timezone.localdate, verbose_name='payment date')),
                ('status', models.CharField(choices=[('pending', 'Pending review'), ('approved', 'Approved'), ('rejected', 'Rejected')], default='pending', max_length=20)),
                ('validated_at', models.DateTimeField(blank=True, null=True, verbose_name='approved at')),
                ('modality', models.CharField(blank=True, default='', help_text='Modality covered by this payment when the student trains several', max_length=100, verbose_name='modality')),
                ('proof_url', models.URLField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='payments', to='students.student')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='core.tenant')),
            ],
            options={
                'db_table': 'payments',
                'ordering': ['-payment_date', '-id'],
                'indexes': [
                    models.Index(fields=['tenant', 'status'], name='payments_tenant_status_idx'),
                    models.Index(fields=['tenant', 'status', 'validated_at'], name='payments_tenant_valid_idx'),
                    models.Index(fields=['tenant', 'student'], name='payments_tenant_student_idx'),
                ],
            },
        ),
    ]
