# core/management/commands/provision_tenant.py
from django.core.management.base import BaseCommand, CommandError

from shared.constants import ModuleChoices

from core.exceptions import TenantProvisioningError
from core.services import TenantProvisioningService


class Command(BaseCommand):
    help = 'Create an academy together with its owner account'

    def add_arguments(self, parser):
        parser.add_argument('name', help='Academy name')
        parser.add_argument('--slug', help='URL slug (derived from the name when omitted)')
        parser.add_argument(
            '--module',
            default=ModuleChoices.ACADEMIA,
            choices=[value for value, _label in ModuleChoices.CHOICES],
            help='Module to enable',
        )
        parser.add_argument('--email', required=True, help='Owner e-mail (login)')
        parser.add_argument('--password', required=True, help='Owner password')
        parser.add_argument('--full-name', help='Owner full name')
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Validate the input without creating anything',
        )

    def handle(self, *args, **options):
        name = options['name']
        slug = options.get('slug') or TenantProvisioningService.suggest_slug(name)

        if options.get('dry_run'):
            errors = TenantProvisioningService.validate_tenant_data(name, slug, options['module'])
            errors.update(TenantProvisioningService.validate_owner_data(options['email'], options['password']))
            if errors:
                raise CommandError("; ".join(errors.values()))
            self.stdout.write(self.style.SUCCESS(f"Would create academy '{name}' at /{options['module']}/{slug}/"))
            return

        try:
            tenant = TenantProvisioningService.create_tenant(
                name=name,
                slug=slug,
                module_id=options['module'],
                email=options['email'],
                password=options['password'],
                full_name=options.get('full_name'),
            )
        except TenantProvisioningError as e:
            raise CommandError(e.message)

        self.stdout.write(
            self.style.SUCCESS(f"Created academy {tenant.name}: {tenant.dashboard_path()}")
        )
