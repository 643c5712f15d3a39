import unittest

from atmfjstc.lib.celeste_map.ByteCursor import ByteCursor
from atmfjstc.lib.celeste_map.string_table import StringTable, read_string_table
from atmfjstc.lib.celeste_map.errors import NegativeTableSizeError, BadTableIndexError, InvalidUtf8Error, \
    UnexpectedEndError

from map_bytes import i16, inline_string


class ReadStringTableTest(unittest.TestCase):
    def test_entries_in_order(self):
        cursor = ByteCursor(i16(3) + inline_string('Map') + inline_string('levels') + inline_string('Map'))

        table = read_string_table(cursor)

        self.assertEqual(list(table), ['Map', 'levels', 'Map'])
        self.assertEqual(len(table), 3)
        self.assertEqual(table[1], 'levels')
        self.assertTrue(cursor.at_end())

    def test_empty(self):
        self.assertEqual(len(read_string_table(ByteCursor(i16(0)))), 0)

    def test_negative_size(self):
        with self.assertRaises(NegativeTableSizeError) as ctx:
            read_string_table(ByteCursor(b'\xff\xff'))

        self.assertEqual(ctx.exception.size, -1)

    def test_invalid_utf8_entry(self):
        with self.assertRaises(InvalidUtf8Error):
            read_string_table(ByteCursor(i16(1) + b'\x01\xff'))

    def test_missing_entries(self):
        with self.assertRaises(UnexpectedEndError):
            read_string_table(ByteCursor(i16(2) + inline_string('Map')))


class ReadReferenceTest(unittest.TestCase):
    def setUp(self):
        self.table = StringTable(['Map', 'levels'])

    def test_valid(self):
        cursor = ByteCursor(i16(1))

        self.assertEqual(self.table.read_reference(cursor), 'levels')
        self.assertTrue(cursor.at_end())

    def test_past_end_of_table(self):
        cursor = ByteCursor(i16(2))

        with self.assertRaises(BadTableIndexError) as ctx:
            self.table.read_reference(cursor)

        self.assertEqual(ctx.exception.index, 2)
        self.assertEqual(ctx.exception.table_size, 2)
        self.assertEqual(cursor.tell(), 0)

    def test_negative(self):
        with self.assertRaises(BadTableIndexError):
            self.table.read_reference(ByteCursor(i16(-3)))


if __name__ == '__main__':
    unittest.main()
