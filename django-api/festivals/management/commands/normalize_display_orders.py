from django.core.management.base import BaseCommand, CommandError

from festivals.domain.errors import DomainError
from festivals.models import Festival
from festivals.services.dependencies import get_schedule_service


class Command(BaseCommand):
    help = "Renumber session display orders 0, 1, 2, ... within each start slot"

    def add_arguments(self, parser):
        parser.add_argument(
            "--festival",
            action="append",
            dest="festivals",
            help="Festival ID to normalize (repeatable). Defaults to every festival.",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would change without making changes",
        )

    def handle(self, *args, **options):
        dry_run = options["dry_run"]
        festival_ids = options["festivals"] or [str(pk) for pk in Festival.objects.values_list("pk", flat=True)]
        service = get_schedule_service()

        total_changed = 0
        for festival_id in festival_ids:
            try:
                festival = service.get_festival(festival_id)
                changes = service.normalize_display_orders(festival_id, dry_run=dry_run)
            except DomainError as e:
                raise CommandError(f"{festival_id}: {e.message}") from e

            changed = [c for c in changes if c.changed]
            total_changed += len(changed)
            self.stdout.write(f"{festival.name} ({len(changes)} sessions, {len(changed)} to update)")

            last_slot = None
            for change in changes:
                if change.slot != last_slot:
                    self.stdout.write(f"  {change.slot or '(no date)'}:")
                    last_slot = change.slot
                marker = "*" if change.changed else " "
                old = "null" if change.old is None else format(change.old.normalize(), "f")
                self.stdout.write(f"    {marker} {change.session.title[:50]:<50} {old} -> {change.new}")

        if dry_run:
            self.stdout.write(f"Dry run: {total_changed} sessions would be updated")
            return

        self.stdout.write(self.style.SUCCESS(f"Updated {total_changed} sessions"))
