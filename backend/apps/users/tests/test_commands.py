from io import StringIO
from unittest.mock import MagicMock, patch

from django.core.management import call_command
from django.test import TestCase


class AddActivatedColumnTests(TestCase):
    def test_existing_column_is_reported(self):
        out = StringIO()
        call_command("add_activated_column", stdout=out)
        self.assertIn("already present", out.getvalue())


class FixUsersSequenceTests(TestCase):
    def test_non_postgres_is_a_noop(self):
        out = StringIO()
        call_command("fix_users_sequence", stdout=out)
        self.assertIn("only managed on PostgreSQL", out.getvalue())

    def _postgres_connection(self, sequence):
        cursor = MagicMock()
        cursor.fetchone.side_effect = [(41,), (sequence,)]
        connection = MagicMock(vendor="postgresql")
        connection.cursor.return_value.__enter__.return_value = cursor
        return connection, cursor

    def test_sequence_moved_past_max_id(self):
        connection, cursor = self._postgres_connection("public.users_id_seq")
        out = StringIO()
        with patch(
            "apps.users.management.commands.fix_users_sequence.connections",
            {"default": connection},
        ):
            call_command("fix_users_sequence", stdout=out)
        cursor.execute.assert_called_with(
            "SELECT setval(%s, %s, false)", ["public.users_id_seq", 42]
        )
        self.assertIn("next id will be 42", out.getvalue())

    def test_missing_sequence_is_a_warning(self):
        connection, cursor = self._postgres_connection(None)
        err = StringIO()
        with patch(
            "apps.users.management.commands.fix_users_sequence.connections",
            {"default": connection},
        ):
            call_command("fix_users_sequence", stdout=StringIO(), stderr=err)
        self.assertIn("Could not determine", err.getvalue())
        self.assertEqual(cursor.execute.call_count, 2)
