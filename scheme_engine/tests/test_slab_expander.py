"""
Unit tests for virtual slab expansion.
"""
import unittest

from scheme_engine.core.slab_expander import (
    calculate_ladder_ceiling,
    generate_virtual_slabs,
    sanitize_tiers
)
from scheme_engine.core.tiers import SchemeTier


def tier(min_qty, free_qty, percent=0.0, scheme_id=None):
    return SchemeTier(min_qty=min_qty, free_qty=free_qty, percent=percent, scheme_id=scheme_id)


class TestGenerateVirtualSlabs(unittest.TestCase):
    """Test cases for generate_virtual_slabs."""

    def assert_strictly_ascending(self, ladder):
        quantities = [t.min_qty for t in ladder]
        self.assertEqual(quantities, sorted(set(quantities)))

    def test_empty_tiers_give_empty_ladder(self):
        """No declared tiers means no ladder, whatever the quantity."""
        for qty in (-5, 0, 1, 250, 10000):
            self.assertEqual(generate_virtual_slabs([], qty), [])

    def test_base_tier_repeated_to_ceiling(self):
        """Base (100, 20) at qty 250 covers 10 base rungs."""
        ladder = generate_virtual_slabs([tier(100, 20, 20.0, 'S1')], 250)

        self.assertEqual([t.min_qty for t in ladder], list(range(100, 1001, 100)))
        self.assertEqual([t.free_qty for t in ladder], list(range(20, 201, 20)))
        self.assertFalse(ladder[0].is_virtual)
        self.assertTrue(all(t.is_virtual for t in ladder[1:]))

    def test_virtual_tiers_copy_base_percent_and_scheme(self):
        ladder = generate_virtual_slabs([tier(100, 20, 20.0, 'S1')], 250)

        third = ladder[2]
        self.assertEqual(third.percent, 20.0)
        self.assertEqual(third.scheme_id, 'S1')
        self.assertEqual(third.scheme_name, 'Auto-Pattern (x3)')

    def test_virtual_scheme_id_fallback(self):
        ladder = generate_virtual_slabs([tier(100, 20)], 100)
        self.assertEqual(ladder[1].scheme_id, 'virtual')

        ladder = generate_virtual_slabs([tier(100, 20)], 100, virtual_scheme_id='auto')
        self.assertEqual(ladder[1].scheme_id, 'auto')

    def test_ladder_reaches_ceiling(self):
        """Last rung is at or above max(2q, 10 * base)."""
        for base_qty in (1, 7, 12, 100):
            for qty in (0, 1, 99, 255, 755, 3001):
                ladder = generate_virtual_slabs([tier(base_qty, 1)], qty)
                ceiling = max(2 * qty, 10 * base_qty)
                self.assertGreaterEqual(ladder[-1].min_qty, ceiling)
                self.assert_strictly_ascending(ladder)

    def test_ceiling_not_a_multiple_of_base(self):
        """qty 755 gives ceiling 1510, so the ladder runs to 1600."""
        ladder = generate_virtual_slabs([tier(100, 20)], 755)

        self.assertEqual(ladder[-1].min_qty, 1600)
        self.assertEqual(ladder[-1].free_qty, 320)

    def test_explicit_off_multiple_tier_is_inserted(self):
        """Explicit (250, 60) sits between the 200 and 300 rungs."""
        ladder = generate_virtual_slabs([tier(100, 20), tier(250, 60)], 250)

        quantities = [t.min_qty for t in ladder]
        self.assertIn(250, quantities)
        self.assertEqual(quantities[:4], [100, 200, 250, 300])

        at_250 = ladder[2]
        self.assertEqual(at_250.free_qty, 60)
        self.assertFalse(at_250.is_virtual)
        self.assert_strictly_ascending(ladder)

    def test_explicit_tier_wins_over_virtual_rung(self):
        """An explicit tier at a multiple replaces the virtual rung."""
        ladder = generate_virtual_slabs([tier(100, 20), tier(300, 75)], 250)
        by_qty = {t.min_qty: t for t in ladder}

        self.assertEqual(by_qty[300].free_qty, 75)
        self.assertFalse(by_qty[300].is_virtual)
        # Later rungs still scale from the base tier
        self.assertEqual(by_qty[400].free_qty, 80)
        self.assertEqual(len(ladder), 10)

    def test_explicit_tier_beyond_ceiling_is_kept(self):
        ladder = generate_virtual_slabs([tier(100, 20), tier(5000, 1500)], 10)

        self.assertEqual(len(ladder), 11)
        self.assertEqual(ladder[-1].min_qty, 5000)
        self.assertEqual(ladder[-1].free_qty, 1500)
        self.assertEqual(ladder[-2].min_qty, 1000)

    def test_unsorted_input(self):
        ladder = generate_virtual_slabs([tier(250, 60), tier(100, 20)], 250)

        self.assertEqual(ladder[0].min_qty, 100)
        self.assertEqual(ladder[0].free_qty, 20)
        self.assert_strictly_ascending(ladder)

    def test_malformed_tiers_are_dropped(self):
        """Tiers with min_qty <= 0 never become the base."""
        with self.assertLogs('scheme_engine.core.slab_expander', level='WARNING'):
            ladder = generate_virtual_slabs([tier(0, 5), tier(-10, 2), tier(50, 5)], 100)

        self.assertEqual(ladder[0].min_qty, 50)
        self.assertEqual(ladder[1].min_qty, 100)
        self.assertEqual(ladder[1].free_qty, 10)

    def test_only_malformed_tiers(self):
        with self.assertLogs('scheme_engine.core.slab_expander', level='WARNING'):
            self.assertEqual(generate_virtual_slabs([tier(0, 5)], 100), [])

    def test_duplicate_min_qty_keeps_first_declared(self):
        """Two tiers at the same min_qty: the first declared is used.

        Precedence between duplicates is not defined by the business;
        this pins the current behaviour.
        """
        with self.assertLogs('scheme_engine.core.slab_expander', level='WARNING') as logs:
            ladder = generate_virtual_slabs([tier(100, 20), tier(100, 25)], 250)

        self.assertEqual(ladder[0].free_qty, 20)
        self.assertEqual(ladder[1].free_qty, 40)
        self.assertEqual(len([t for t in ladder if t.min_qty == 100]), 1)
        self.assertIn('Duplicate scheme tier', logs.output[0])

    def test_duplicate_above_base_keeps_first_declared(self):
        with self.assertLogs('scheme_engine.core.slab_expander', level='WARNING'):
            ladder = generate_virtual_slabs([tier(100, 20), tier(250, 60), tier(250, 55)], 250)

        self.assertEqual([t.free_qty for t in ladder if t.min_qty == 250], [60])

    def test_idempotent(self):
        tiers = [tier(100, 20, 20.0, 'S1'), tier(250, 60, 24.0, 'S2')]

        first = generate_virtual_slabs(tiers, 420)
        second = generate_virtual_slabs(tiers, 420)

        self.assertEqual(first, second)

    def test_does_not_mutate_input(self):
        tiers = [tier(250, 60), tier(100, 20)]
        generate_virtual_slabs(tiers, 250)
        self.assertEqual([t.min_qty for t in tiers], [250, 100])

    def test_custom_ceiling_factors(self):
        ladder = generate_virtual_slabs([tier(100, 20)], 250, order_factor=4, base_multiple=2)
        self.assertEqual(ladder[-1].min_qty, 1000)

        ladder = generate_virtual_slabs([tier(100, 20)], 10, order_factor=2, base_multiple=3)
        self.assertEqual([t.min_qty for t in ladder], [100, 200, 300])


class TestLadderHelpers(unittest.TestCase):
    """Test cases for ladder helper functions."""

    def test_calculate_ladder_ceiling(self):
        self.assertEqual(calculate_ladder_ceiling(250, 100), 1000)
        self.assertEqual(calculate_ladder_ceiling(800, 100), 1600)
        self.assertEqual(calculate_ladder_ceiling(0, 12), 120)

    def test_sanitize_tiers_is_stable(self):
        first = tier(100, 20, scheme_id='first')
        second = tier(100, 25, scheme_id='second')

        result = sanitize_tiers([tier(300, 1), first, second])

        self.assertEqual([t.scheme_id for t in result[:2]], ['first', 'second'])

    def test_sanitize_tiers_handles_none(self):
        self.assertEqual(sanitize_tiers(None), [])


if __name__ == '__main__':
    unittest.main()
