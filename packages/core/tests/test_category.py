"""Tests for category determination."""

from decimal import Decimal

import pytest

from recablix_core.category import (
    category_for_value,
    max_category,
    resolve_category,
    sort_scales,
)
from recablix_core.models import Category, Scale


class TestCategoryForValue:
    """Tests for the per-parameter scan."""

    @pytest.mark.parametrize("value", [None, Decimal("0"), Decimal("-100")])
    def test_missing_zero_or_negative_is_lowest(self, scales, value):
        """Absent, zero and negative values map to A."""
        assert category_for_value(scales, value, "income") == Category.A

    def test_value_within_first_ceiling(self, scales):
        assert category_for_value(scales, Decimal("5000000"), "income") == Category.A

    def test_value_at_ceiling_stays_in_category(self, scales):
        """A value exactly at a ceiling is not promoted."""
        assert category_for_value(scales, Decimal("10206600"), "income") == Category.A
        assert category_for_value(scales, Decimal("14953850"), "income") == Category.B

    def test_value_just_above_ceiling_moves_up(self, scales):
        assert category_for_value(scales, Decimal("10206600.01"), "income") == Category.B

    def test_income_between_b_and_c(self, scales):
        assert category_for_value(scales, Decimal("18000000"), "income") == Category.C

    def test_value_above_every_ceiling_clamps_to_top(self, scales):
        assert category_for_value(scales, Decimal("999999999"), "income") == Category.K

    def test_clamps_to_highest_defined_category(self, scales):
        """With a truncated table the top defined row is the ceiling."""
        partial = [s for s in scales if s.category in (Category.A, Category.B, Category.C)]
        assert category_for_value(partial, Decimal("999999999"), "income") == Category.C

    def test_empty_table_clamps_to_k(self):
        assert category_for_value([], Decimal("1"), "income") == Category.K

    def test_scan_ignores_input_order(self, scales):
        shuffled = list(reversed(scales))
        assert category_for_value(shuffled, Decimal("18000000"), "income") == Category.C

    @pytest.mark.parametrize(
        "parameter,value,expected",
        [
            ("m2", Decimal("65"), Category.D),
            ("m2", Decimal("30"), Category.A),
            ("mw", Decimal("2500"), Category.A),
            ("mw", Decimal("6701"), Category.D),
            ("rent", Decimal("7000000"), Category.H),
            ("rent", Decimal("2373628"), Category.A),
        ],
    )
    def test_each_parameter_uses_its_own_ceiling(self, scales, parameter, value, expected):
        assert category_for_value(scales, value, parameter) == expected

    def test_shared_ceiling_picks_first_category(self, scales):
        """Categories G to K share the m2 ceiling; the scan stops at G."""
        assert category_for_value(scales, Decimal("200"), "m2") == Category.G


class TestMaxCategory:
    """Tests for max_category."""

    def test_returns_furthest_from_a(self):
        assert max_category([Category.A, Category.C, Category.D, Category.B]) == Category.D

    def test_empty_is_a(self):
        assert max_category([]) == Category.A

    def test_ignores_none(self):
        assert max_category([None, Category.B]) == Category.B


class TestSortScales:
    def test_sorts_by_letter_position(self, scales):
        ordered = sort_scales(reversed(scales))
        assert [s.category.value for s in ordered] == list("ABCDEFGHIJK")


class TestResolveCategory:
    """Tests for resolve_category."""

    def test_zero_income_without_parameters_is_a(self, scales):
        result = resolve_category(scales, income=Decimal("0"))

        assert result.final_category == Category.A
        assert result.category_by_income == Category.A
        assert result.category_by_m2 == Category.A
        assert result.category_by_mw == Category.A
        assert result.category_by_rent == Category.A

    def test_final_is_maximum_of_parameters(self, scales):
        result = resolve_category(scales, income=Decimal("5000000"), m2=Decimal("70"))

        assert result.category_by_income == Category.A
        assert result.category_by_m2 == Category.D
        assert result.final_category == Category.D

    def test_rent_drives_final_category(self, scales):
        """18M sales, 65 m², 2500 energy and 7M rent resolve to H."""
        result = resolve_category(
            scales,
            income=Decimal("18080000"),
            m2=Decimal("65"),
            mw=Decimal("2500"),
            rent=Decimal("7000000"),
        )

        assert result.category_by_income == Category.C
        assert result.category_by_m2 == Category.D
        assert result.category_by_mw == Category.A
        assert result.category_by_rent == Category.H
        assert result.final_category == Category.H

    def test_details_use_final_category_ceilings(self, scales):
        result = resolve_category(
            scales,
            income=Decimal("18080000"),
            m2=Decimal("65"),
            mw=Decimal("2500"),
            rent=Decimal("7000000"),
        )
        details = result.details

        assert details.income.value == Decimal("18080000")
        assert details.m2.value == Decimal("65")
        assert details.mw.value == Decimal("2500")
        assert details.rent.value == Decimal("7000000")
        assert details.income.limit == Decimal("69626410")
        assert details.m2.limit == Decimal("200")
        assert details.rent.limit == Decimal("7120883")
        assert details.income.headroom == Decimal("51546410")

    def test_absent_parameters_reported_as_zero(self, scales):
        result = resolve_category(scales, income=Decimal("8000000"))

        assert result.details.m2.value == Decimal("0")
        assert result.details.mw.value == Decimal("0")
        assert result.details.rent.value == Decimal("0")
        assert result.details.m2.limit == Decimal("30")

    def test_missing_final_row_gives_zero_limits(self):
        """An empty table clamps to K, which has no row to read limits from."""
        scales = [
            Scale(
                category="A",
                max_annual_income=Decimal("100"),
                max_local_m2=Decimal("10"),
                max_annual_mw=Decimal("10"),
                max_annual_rent=Decimal("10"),
            ),
        ]
        result = resolve_category([], income=Decimal("50"))

        assert result.final_category == Category.K
        assert result.details.income.limit == Decimal("0")
        assert resolve_category(scales, income=Decimal("50")).details.income.limit == Decimal("100")

    def test_result_is_frozen(self, scales):
        result = resolve_category(scales, income=Decimal("1"))
        with pytest.raises(Exception):
            result.final_category = Category.K
