from django.core.management.base import BaseCommand
from django.db import DEFAULT_DB_ALIAS, DatabaseError, connections

from apps.common import get_logger

logger = get_logger(__name__).bind(component="users", layer="command")

TABLE = "users"
COLUMN = "activated"


class Command(BaseCommand):
    help = "Add the users.activated column (default true) to databases created before it existed."

    def add_arguments(self, parser):
        parser.add_argument("--database", default=DEFAULT_DB_ALIAS)

    def _has_column(self, connection) -> bool:
        with connection.cursor() as cursor:
            description = connection.introspection.get_table_description(cursor, TABLE)
        return any(col.name == COLUMN for col in description)

    def handle(self, *args, **options):
        connection = connections[options["database"]]
        self.stdout.write(f"Checking {TABLE}.{COLUMN} column...")
        try:
            if connection.vendor == "postgresql":
                with connection.cursor() as cursor:
                    cursor.execute(
                        f"ALTER TABLE {TABLE} ADD COLUMN IF NOT EXISTS {COLUMN} BOOLEAN DEFAULT true"
                    )
            elif self._has_column(connection):
                self.stdout.write(f"Column {COLUMN} already present on {TABLE}.")
                return
            else:
                with connection.cursor() as cursor:
                    cursor.execute(f"ALTER TABLE {TABLE} ADD COLUMN {COLUMN} BOOLEAN DEFAULT TRUE")
        except DatabaseError as exc:
            logger.error("Adding activated column failed", error=str(exc))
            self.stderr.write(self.style.ERROR(f"Error adding {COLUMN} column: {exc}"))
            return
        logger.info("Activated column ensured", vendor=connection.vendor)
        self.stdout.write(
            self.style.SUCCESS(f"Column {COLUMN} ensured on {TABLE} (default true).")
        )
