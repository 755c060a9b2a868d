# billing/signals.py
"""
Keep cached dashboards in step with writes made outside the services
(Django admin, shell, data fixes).
"""
import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from core.cache import DashboardCache
from students.models import Student

from .models import Payment

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Payment)
@receiver(post_delete, sender=Payment)
@receiver(post_save, sender=Student)
@receiver(post_delete, sender=Student)
def invalidate_dashboard_cache(sender, instance, **kwargs):
    if instance.tenant_id:
        DashboardCache.invalidate(instance.tenant_id)
