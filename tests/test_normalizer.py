"""Tests for raw score normalization."""

import pytest

from normform.errors import InvalidInput, NoInput
from normform.registry import ConversionTable, ScoreDomain
from normform.scoring import normalize, parse_raw_score


class TestParseRawScore:
    """Tests for parsing raw scores as entered on a form."""

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_is_no_input(self, value) -> None:
        """Test that absent or blank values mean not yet assessed."""
        with pytest.raises(NoInput):
            parse_raw_score(value)

    @pytest.mark.parametrize(
        "value,expected",
        [(22, 22), ("22", 22), (" 22 ", 22), (22.0, 22), ("22.0", 22), (0, 0), ("-3", -3)],
    )
    def test_whole_numbers(self, value, expected: int) -> None:
        """Test that whole numbers in any form are accepted."""
        assert parse_raw_score(value) == expected

    @pytest.mark.parametrize("value", ["abc", "22.5", 22.5, True, float("nan"), [22], "inf"])
    def test_invalid_values(self, value) -> None:
        """Test that non-numeric and fractional values are rejected."""
        with pytest.raises(InvalidInput):
            parse_raw_score(value)

    def test_field_is_carried(self) -> None:
        """Test that the error names the field it came from."""
        with pytest.raises(InvalidInput) as exc_info:
            parse_raw_score("x", field="cfit")
        assert exc_info.value.field == "cfit"


class TestNormalize:
    """Tests for normalize() against the CFIT table."""

    def test_in_domain_returns_entry(self, cfit_table: ConversionTable) -> None:
        """Test that raw 22 maps to percentile 50 and IQ 100."""
        result = normalize(22, cfit_table)

        assert result.raw_score == 22
        assert result.percentile == 50
        assert result.standard_score == 100
        assert result.clamped is None

    def test_domain_edges(self, cfit_table: ConversionTable) -> None:
        """Test the first and last stored entries."""
        low = normalize(7, cfit_table)
        high = normalize(48, cfit_table)

        assert (low.percentile, low.standard_score) == (1, 55)
        assert (high.percentile, high.standard_score) == (99, 179)

    @pytest.mark.parametrize("raw", [6, 1, 0, -5])
    def test_below_domain_uses_floor(self, cfit_table: ConversionTable, raw: int) -> None:
        """Test that scores under the domain take the floor policy."""
        result = normalize(raw, cfit_table)

        assert (result.percentile, result.standard_score) == (1, 50)
        assert result.clamped == "floor"

    @pytest.mark.parametrize("raw", [49, 60, 1000])
    def test_above_domain_uses_ceiling(self, cfit_table: ConversionTable, raw: int) -> None:
        """Test that scores over the domain take the ceiling policy."""
        result = normalize(raw, cfit_table)

        assert (result.percentile, result.standard_score) == (99, 180)
        assert result.clamped == "ceiling"

    def test_non_monotonic_entry_preserved(self, cfit_table: ConversionTable) -> None:
        """Test that raw 32 keeps its stored percentile of 67."""
        result = normalize(32, cfit_table)

        assert result.percentile == 67
        assert result.standard_score == 131

    def test_every_domain_score_matches_table(self, cfit_table: ConversionTable) -> None:
        """Test that normalize returns stored entries verbatim."""
        for raw in range(cfit_table.domain.min, cfit_table.domain.max + 1):
            result = normalize(raw, cfit_table)
            entry = cfit_table.entries[raw]
            assert (result.percentile, result.standard_score) == (
                entry.percentile,
                entry.standard_score,
            )

    def test_string_input(self, cfit_table: ConversionTable) -> None:
        """Test that form strings are parsed before lookup."""
        assert normalize("22", cfit_table).standard_score == 100

    def test_empty_string_is_no_input(self, cfit_table: ConversionTable) -> None:
        """Test that an empty field is never scored as zero."""
        with pytest.raises(NoInput):
            normalize("", cfit_table)

    def test_non_numeric_is_invalid(self, cfit_table: ConversionTable) -> None:
        """Test that non-numeric input raises InvalidInput."""
        with pytest.raises(InvalidInput):
            normalize("twenty", cfit_table)

    def test_domain_override(self, cfit_table: ConversionTable) -> None:
        """Test that a narrower domain clamps to its own boundary entries."""
        domain = ScoreDomain(min=10, max=30)

        assert normalize(8, cfit_table, domain).standard_score == 63
        assert normalize(40, cfit_table, domain).standard_score == 124
        assert normalize(8, cfit_table, domain).clamped == "floor"


class TestConversionTableModel:
    """Tests for conversion table validation."""

    def test_missing_entries_rejected(self) -> None:
        """Test that a table must cover its whole domain."""
        with pytest.raises(ValueError, match="missing raw scores"):
            ConversionTable(
                table_id="t",
                version="1.0.0",
                name="t",
                domain={"min": 1, "max": 3},
                entries={
                    1: {"percentile": 1, "standard_score": 70},
                    3: {"percentile": 50, "standard_score": 100},
                },
            )

    def test_boundary_entries_without_policies(self) -> None:
        """Test that missing floor/ceiling fall back to the boundary entries."""
        table = ConversionTable(
            table_id="t",
            version="1.0.0",
            name="t",
            domain={"min": 1, "max": 2},
            entries={
                1: {"percentile": 5, "standard_score": 75},
                2: {"percentile": 95, "standard_score": 125},
            },
        )

        assert normalize(0, table).standard_score == 75
        assert normalize(3, table).standard_score == 125
