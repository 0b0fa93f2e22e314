"""
Tests for the scheme command line interface.
"""
import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

from scheme_engine.cli.scheme_cli import main, parse_tier
from scheme_engine.core.tiers import SchemeTier
from scheme_engine.db import db
from scheme_engine.models import SchemeSlab


def run_cli(*argv):
    output = io.StringIO()
    with redirect_stdout(output):
        exit_code = main(list(argv))
    return exit_code, output.getvalue()


class TestSchemeCli(unittest.TestCase):
    def test_parse_tier(self):
        self.assertEqual(parse_tier('100:20'), SchemeTier(100, 20, 0.0))
        self.assertEqual(parse_tier('100:20:20.5'), SchemeTier(100, 20, 20.5))

    def test_parse_tier_invalid(self):
        with self.assertRaises(SystemExit):
            run_cli('evaluate', '--tier', '100', '--qty', '5')
        with self.assertRaises(SystemExit):
            run_cli('evaluate', '--tier', 'a:b', '--qty', '5')

    def test_evaluate(self):
        exit_code, output = run_cli('evaluate', '--tier', '100:20:20', '--qty', '250')

        self.assertEqual(exit_code, 0)
        self.assertIn('Order 250+40: 40 free at tier 200', output)
        self.assertIn('Add 50 -> 60 Free (tier 300)', output)

    def test_evaluate_below_minimum(self):
        _, output = run_cli('evaluate', '--tier', '100:20', '--qty', '60')

        self.assertIn('below scheme minimum', output)
        self.assertIn('Add 40 -> 20 Free', output)

    def test_evaluate_without_tiers(self):
        _, output = run_cli('evaluate', '--qty', '60')
        self.assertIn('No scheme available', output)

    def test_ladder(self):
        _, output = run_cli('ladder', '--tier', '100:20', '--tier', '250:60', '--qty', '250')

        self.assertIn('APPLIED', output)
        self.assertIn('NEXT', output)
        self.assertIn('Auto-Pattern (x3)', output)
        self.assertIn('explicit', output)

    def test_rescale(self):
        _, output = run_cli('rescale', '--qty', '350', '--base-qty', '100', '--base-free', '20')
        self.assertIn('17.14', output)

    def test_rescale_uses_configured_decimals(self):
        with patch('scheme_engine.cli.scheme_cli.config') as mock_config:
            mock_config.scheme_rules = {'percent_decimals': 1}
            _, output = run_cli('rescale', '--qty', '350', '--base-qty', '100', '--base-free', '20')

        self.assertIn('17.1', output)
        self.assertNotIn('17.14', output)

    def test_rescale_skipped(self):
        _, output = run_cli('rescale', '--qty', '350', '--base-qty', '0', '--base-free', '20')
        self.assertIn('values left unchanged', output)


class TestSchemeCliLookup(unittest.TestCase):
    def setUp(self):
        """Set up a file-backed database with scheme master data."""
        handle, self.db_path = tempfile.mkstemp(suffix='.db')
        os.close(handle)
        self.db_url = f"sqlite:///{self.db_path}"

        db.initialize(self.db_url)
        db.create_all_tables()
        with db.session_scope() as session:
            session.add(SchemeSlab(product_code='P1', min_qty=100, free_qty=20, scheme_percent=20.0))

    def tearDown(self):
        db.session.remove()
        db.drop_all_tables()
        db.engine.dispose()
        os.remove(self.db_path)

    def test_check_connection(self):
        self.assertTrue(db.check_connection())

    def test_lookup(self):
        exit_code, output = run_cli('lookup', '--product', 'P1', '--qty', '250', '--db', self.db_url)

        self.assertEqual(exit_code, 0)
        self.assertIn('Order 250+40', output)

    def test_lookup_unknown_product(self):
        with self.assertLogs('scheme_cli', level='ERROR') as logs:
            exit_code, output = run_cli('lookup', '--product', 'NOPE', '--qty', '250', '--db', self.db_url)

        self.assertEqual(exit_code, 1)
        self.assertNotIn('Order 250', output)
        self.assertIn('[NO_SCHEME] No active scheme for product NOPE', logs.output[0])

    def test_lookup_other_customer_falls_back_to_product_wide(self):
        exit_code, output = run_cli(
            'lookup', '--product', 'P1', '--customer', 'C9', '--qty', '100', '--db', self.db_url
        )

        self.assertEqual(exit_code, 0)
        self.assertIn('Order 100+20', output)


if __name__ == '__main__':
    unittest.main()
