import io
import json
import unittest
import tempfile

from pathlib import Path
from contextlib import redirect_stdout, redirect_stderr
from unittest.mock import patch

from atmfjstc.lib.celeste_map.cli import main, render_tree, format_attribute
from atmfjstc.lib.celeste_map import decode_map, Attribute

from map_bytes import SAMPLE_MAP


class CliTestBase(unittest.TestCase):
    def setUp(self):
        self._temp_dir = tempfile.TemporaryDirectory()
        self.dir = Path(self._temp_dir.name)

        self.good_path = self.dir / 'good.bin'
        self.good_path.write_bytes(SAMPLE_MAP)

        self.bad_path = self.dir / 'bad.bin'
        self.bad_path.write_bytes(SAMPLE_MAP[:-1])

    def tearDown(self):
        self._temp_dir.cleanup()

    def run_main(self, *args):
        stdout, stderr = io.StringIO(), io.StringIO()

        with redirect_stdout(stdout), redirect_stderr(stderr):
            exit_code = main(list(args))

        return exit_code, stdout.getvalue(), stderr.getvalue()


class CliTest(CliTestBase):
    def test_summary(self):
        exit_code, out, _ = self.run_main(str(self.good_path))

        self.assertEqual(exit_code, 0)
        self.assertIn("package 'Celeste/1-ForsakenCity'", out)
        self.assertIn("2 rooms", out)
        self.assertIn("bounds 360x216 at (-40, 0)", out)

    def test_bad_file_is_reported_and_skipped(self):
        exit_code, out, err = self.run_main(str(self.bad_path), str(self.good_path))

        self.assertEqual(exit_code, 1)
        self.assertIn('bad.bin', err)
        self.assertIn("package 'Celeste/1-ForsakenCity'", out)

    def test_json(self):
        exit_code, out, _ = self.run_main('--json', str(self.good_path), str(self.bad_path))

        self.assertEqual(exit_code, 1)

        good, bad = json.loads(out)

        self.assertEqual(good['package_name'], 'Celeste/1-ForsakenCity')
        self.assertEqual(good['bounding_box'], dict(x=-40, y=0, width=360, height=216))
        self.assertEqual([room['name'] for room in good['rooms']], ['lvl_a-00', 'lvl_b-01'])
        self.assertIn('error', bad)

    def test_tree(self):
        exit_code, out, _ = self.run_main('--tree', str(self.good_path))

        self.assertEqual(exit_code, 0)
        self.assertIn("\n  levels\n", out)

    def test_missing_file(self):
        with self.assertRaises(SystemExit):
            self.run_main(str(self.dir / 'missing.bin'))

    def test_unexpected_error_exits_with_failure_code(self):
        with patch('atmfjstc.lib.celeste_map.cli.decode_map', side_effect=RuntimeError('boom')):
            with self.assertRaises(SystemExit) as ctx:
                self.run_main(str(self.good_path))

        self.assertEqual(ctx.exception.code, -1)


class RenderTest(unittest.TestCase):
    def test_render_tree(self):
        lines = render_tree(decode_map(SAMPLE_MAP)).split('\n')

        self.assertEqual(lines[0], 'Map')
        self.assertEqual(lines[1], '  levels')
        self.assertTrue(lines[2].startswith("    level name='lvl_a-00' x=0 y=0 width=320 height=184"))
        self.assertEqual(lines[-1], '  Filler')

    def test_format_attribute(self):
        self.assertEqual(format_attribute(Attribute.from_bool(True)), 'true')
        self.assertEqual(format_attribute(Attribute.from_string('a' * 50)), repr('a' * 40) + '...')
        self.assertEqual(format_attribute(Attribute.from_double(0.5)), '0.5')


if __name__ == '__main__':
    unittest.main()
