from django.core.management.base import BaseCommand
from django.db import DEFAULT_DB_ALIAS, DatabaseError, connections

from apps.common import get_logger

logger = get_logger(__name__).bind(component="users", layer="command")


class Command(BaseCommand):
    help = (
        "Move the users id sequence past the highest existing id, e.g. after "
        "rows were imported with explicit ids. PostgreSQL only."
    )

    def add_arguments(self, parser):
        parser.add_argument("--database", default=DEFAULT_DB_ALIAS)

    def handle(self, *args, **options):
        connection = connections[options["database"]]
        if connection.vendor != "postgresql":
            self.stdout.write(
                f"Sequences are only managed on PostgreSQL; nothing to do for {connection.vendor}."
            )
            return
        self.stdout.write("Fixing users id sequence...")
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT COALESCE(MAX(id), 0) FROM users")
                next_id = int(cursor.fetchone()[0] or 0) + 1
                cursor.execute("SELECT pg_get_serial_sequence('users', 'id')")
                sequence = cursor.fetchone()[0]
                if not sequence:
                    logger.warning("Users id sequence not found")
                    self.stderr.write(
                        self.style.WARNING("Could not determine users id sequence name.")
                    )
                    return
                cursor.execute("SELECT setval(%s, %s, false)", [sequence, next_id])
        except DatabaseError as exc:
            logger.error("Fixing users sequence failed", error=str(exc))
            self.stderr.write(self.style.ERROR(f"Error fixing sequence: {exc}"))
            return
        logger.info("Users sequence reset", sequence=sequence, next_id=next_id)
        self.stdout.write(
            self.style.SUCCESS(f"Sequence {sequence} set so next id will be {next_id}")
        )
