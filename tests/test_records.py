"""Tests for record helpers: state updates, editable text and session variants."""

import pytest

from normform.records import (
    EditableText,
    LegacyObservations,
    LegacyProgress,
    StructuredObservations,
    StructuredProgress,
    apply_change,
    apply_changes,
    get_path,
    summarize_progress,
    upgrade_observations,
    upgrade_progress,
)


class TestApplyChange:
    """Tests for immutable nested updates."""

    def test_does_not_mutate_input(self) -> None:
        """Test the original state is left untouched."""
        state = {"cfit": {"raw_score": 20}, "notes": "x"}
        updated = apply_change(state, "cfit.raw_score", 22)

        assert updated == {"cfit": {"raw_score": 22}, "notes": "x"}
        assert state == {"cfit": {"raw_score": 20}, "notes": "x"}

    def test_shares_untouched_branches(self) -> None:
        """Test only the changed path is copied."""
        state = {"cfit": {"raw_score": 20}, "bpi": {"depression": "low"}}
        updated = apply_change(state, "cfit.raw_score", 22)

        assert updated["bpi"] is state["bpi"]
        assert updated["cfit"] is not state["cfit"]

    def test_creates_missing_keys(self) -> None:
        """Test missing intermediate mappings are created."""
        assert apply_change({}, "wss.teamwork", "Average") == {"wss": {"teamwork": "Average"}}

    @pytest.mark.parametrize("path", ["", ".a", "a..b"])
    def test_invalid_path(self, path: str) -> None:
        """Test empty path segments are rejected."""
        with pytest.raises(ValueError):
            apply_change({"a": {}}, path, 1)

    def test_crossing_non_mapping(self) -> None:
        """Test a path through a scalar is rejected."""
        with pytest.raises(ValueError, match="holds a int"):
            apply_change({"a": 1}, "a.b", 2)

    def test_apply_changes(self) -> None:
        """Test applying several changes in order."""
        updated = apply_changes({}, {"a.b": 1, "a.c": 2, "d": 3})
        assert updated == {"a": {"b": 1, "c": 2}, "d": 3}

    def test_get_path(self) -> None:
        """Test reading dotted paths."""
        state = {"a": {"b": {"c": 1}}}
        assert get_path(state, "a.b.c") == 1
        assert get_path(state, "a.x", default="none") == "none"
        assert get_path(state, "a.b.c.d") is None


class TestEditableText:
    """Tests for reviewer-editable interpretation text."""

    def test_proposal_replaces_unedited_text(self) -> None:
        """Test new engine text replaces text nobody edited."""
        text = EditableText().propose("first").propose("second")

        assert text.text == "second"
        assert not text.has_pending_proposal

    def test_proposal_kept_aside_after_edit(self) -> None:
        """Test an edit is never overwritten by a new proposal."""
        text = EditableText().propose("first").edit("reviewed").propose("second")

        assert text.text == "reviewed"
        assert text.proposed == "second"
        assert text.has_pending_proposal

    def test_revert(self) -> None:
        """Test reverting takes the latest proposal."""
        text = EditableText().propose("first").edit("reviewed").propose("second").revert()

        assert text.text == "second"
        assert not text.edited


class TestUpgradeProgress:
    """Tests for progress variants."""

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty(self, raw) -> None:
        """Test nothing recorded gives None."""
        assert upgrade_progress(raw) is None

    def test_legacy_string(self) -> None:
        """Test free text becomes legacy progress."""
        assert upgrade_progress("Completed 3 trials") == LegacyProgress(text="Completed 3 trials")

    def test_cell_object(self) -> None:
        """Test cellN objects become structured progress."""
        progress = upgrade_progress({"cell1": True, "cell3": "x", "cell10": True, "notes": "ok"})

        assert isinstance(progress, StructuredProgress)
        assert progress.filled == 3
        assert progress.cells[0] is True
        assert progress.cells[1] is False
        assert progress.notes == "ok"

    def test_tagged_object(self) -> None:
        """Test already-tagged objects round through the union."""
        progress = upgrade_progress({"kind": "legacy", "text": "old"})
        assert isinstance(progress, LegacyProgress)

    def test_unsupported(self) -> None:
        """Test other types are rejected."""
        with pytest.raises(ValueError):
            upgrade_progress(42)

    def test_cell_count(self) -> None:
        """Test structured progress needs ten cells."""
        with pytest.raises(ValueError):
            StructuredProgress(cells=(True, False))


class TestSummarizeProgress:
    """Tests for one-line progress summaries."""

    def test_none(self) -> None:
        assert summarize_progress(None) == "No progress recorded"

    def test_legacy_truncated(self) -> None:
        """Test long legacy text is cut at 50 characters."""
        summary = summarize_progress(LegacyProgress(text="a" * 60))
        assert summary == "a" * 50 + "..."

    def test_structured_notes(self) -> None:
        assert summarize_progress(StructuredProgress(notes="good focus")) == "good focus"

    def test_structured_cells(self) -> None:
        progress = StructuredProgress(cells=(True,) * 4 + (False,) * 6)
        assert summarize_progress(progress) == "4/10 cells filled"


class TestUpgradeObservations:
    """Tests for observation variants."""

    def test_legacy(self) -> None:
        assert upgrade_observations("calm") == LegacyObservations(text="calm")

    def test_structured_rows(self) -> None:
        """Test blank structured fields display as not recorded."""
        observations = upgrade_observations({"appearance": "neat", "speech": None})

        assert isinstance(observations, StructuredObservations)
        rows = dict(observations.rows())
        assert rows["APPEARANCE"] == "neat"
        assert rows["SPEECH"] == "Not recorded"
        assert len(rows) == 5

    def test_empty(self) -> None:
        assert upgrade_observations("") is None
