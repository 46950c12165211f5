"""Tests for the pipeline orchestrator."""

from pathlib import Path

import pytest

from normform.diagnostics import ProcessingStatus
from normform.pipeline import AssessmentResult, Pipeline, PipelineConfig
from normform.registry import NormRegistry


def make_pipeline(registry: NormRegistry, instrument_id: str) -> Pipeline:
    config = PipelineConfig(norm_registry_path=registry.registry_path, instrument_id=instrument_id)
    return Pipeline(config, registry=registry)


@pytest.fixture
def cfit_pipeline(registry: NormRegistry) -> Pipeline:
    """Create a CFIT pipeline."""
    return make_pipeline(registry, "cfit")


@pytest.fixture
def bpi_pipeline(registry: NormRegistry) -> Pipeline:
    """Create a BPI pipeline."""
    return make_pipeline(registry, "bpi")


@pytest.fixture
def wss_pipeline(registry: NormRegistry) -> Pipeline:
    """Create a WSS pipeline."""
    return make_pipeline(registry, "wss")


@pytest.fixture
def mmse_pipeline(registry: NormRegistry) -> Pipeline:
    """Create an MMSE pipeline."""
    return make_pipeline(registry, "mmse")


class TestConversionPipeline:
    """Tests for conversion instruments through the pipeline."""

    def test_success(self, cfit_pipeline: Pipeline) -> None:
        """Test a scored CFIT record."""
        result = cfit_pipeline.process(
            {
                "record_id": "cfit-001",
                "subject": {"name": "Dela Cruz, Juan", "sex": "male"},
                "raw_score": "22",
            }
        )

        assert isinstance(result, AssessmentResult)
        assert result.success
        assert result.record_id == "cfit-001"
        assert result.instrument_id == "cfit"
        assert result.instrument_version == "1.0.0"
        assert result.result["percentile"] == 50
        assert result.result["normalized_score"] == 100
        assert result.result["classification"] == "Average"
        assert result.result["interpretation_text"].startswith("Dela Cruz obtained")
        assert not result.diagnostics.has_errors

    @pytest.mark.parametrize("record", [{}, {"raw_score": None}, {"raw_score": ""}])
    def test_not_assessed(self, cfit_pipeline: Pipeline, record: dict) -> None:
        """Test that missing raw scores are not assessed, not failed."""
        result = cfit_pipeline.process(record)

        assert result.status == ProcessingStatus.NOT_ASSESSED
        assert result.result is None
        assert result.diagnostics.errors[0].code == "NO_INPUT"
        assert result.diagnostics.errors[0].stage == "input"

    def test_invalid(self, cfit_pipeline: Pipeline) -> None:
        """Test that a non-numeric raw score fails with a diagnostic."""
        result = cfit_pipeline.process({"record_id": "bad", "raw_score": "abc"})

        assert result.status == ProcessingStatus.FAILED
        assert result.diagnostics.record_id == "bad"
        assert result.diagnostics.errors[0].code == "INVALID_INPUT"

    def test_batch(self, cfit_pipeline: Pipeline) -> None:
        """Test batch processing keeps order."""
        results = cfit_pipeline.process_batch(
            [{"record_id": "a", "raw_score": 6}, {"record_id": "b", "raw_score": 49}]
        )

        assert [r.record_id for r in results] == ["a", "b"]
        assert results[0].result["clamped"] == "floor"
        assert results[1].result["clamped"] == "ceiling"


class TestCategoricalPipeline:
    """Tests for categorical instruments through the pipeline."""

    def test_bpi(self, bpi_pipeline: Pipeline) -> None:
        """Test a fully rated BPI record."""
        values = {scale.scale_key: "low" for scale in bpi_pipeline.instrument.scales}
        values["depression"] = "high"
        result = bpi_pipeline.process({"subject": {"name": "Reyes, Ana"}, "values": values})

        assert result.success
        scales = {s["scale_key"]: s for s in result.result["scales"]}
        assert len(scales) == 12
        assert scales["depression"]["text"].startswith("Reyes is inclined")
        assert result.result["composite_rating"] is None
        assert result.result["summary"] is None

    def test_wss_composite(self, wss_pipeline: Pipeline) -> None:
        """Test WSS records carry the composite rating and summary."""
        values = {scale.scale_key: "Excellent" for scale in wss_pipeline.instrument.scales}
        result = wss_pipeline.process({"values": values})

        assert result.success
        assert result.result["composite_rating"] == "above_average"
        assert result.result["summary"].startswith("The client obtained a composite rating")

    def test_no_values(self, bpi_pipeline: Pipeline) -> None:
        """Test a record without ratings is not assessed."""
        assert bpi_pipeline.process({"values": {}}).status == ProcessingStatus.NOT_ASSESSED

    def test_invalid_value(self, bpi_pipeline: Pipeline) -> None:
        """Test a record with an out-of-set value fails."""
        values = {scale.scale_key: "low" for scale in bpi_pipeline.instrument.scales}
        values["anxiety"] = "severe"
        result = bpi_pipeline.process({"values": values})

        assert result.status == ProcessingStatus.FAILED
        assert result.diagnostics.errors[0].field == "anxiety"

    def test_unknown_scale(self, bpi_pipeline: Pipeline) -> None:
        """Test an unknown scale is reported at the interpretation stage."""
        result = bpi_pipeline.process({"values": {"narcissism": "high"}})

        assert result.status == ProcessingStatus.FAILED
        error = result.diagnostics.errors[0]
        assert error.code == "MISSING_INTERPRETATION"
        assert error.stage == "interpretation"
        assert error.details == {"scale_key": "narcissism", "value": None}


class TestCompositePipeline:
    """Tests for composite instruments through the pipeline."""

    def test_mmse(self, mmse_pipeline: Pipeline) -> None:
        """Test an MMSE record."""
        subscores = {
            "orientation": 10,
            "registration": 3,
            "attention_calculation": 4,
            "recall": 2,
            "language": 7,
            "copying": 1,
        }
        result = mmse_pipeline.process({"subscores": subscores})

        assert result.success
        assert result.result["total_score"] == 27
        assert result.result["band_key"] == "normal"

    def test_no_subscores(self, mmse_pipeline: Pipeline) -> None:
        """Test a record without subscores is not assessed."""
        assert mmse_pipeline.process({}).status == ProcessingStatus.NOT_ASSESSED


class TestPipelineConfig:
    """Tests for building pipelines from config alone."""

    def test_builds_registry(self, registry_path: Path, schema_dir: Path) -> None:
        """Test that a pipeline builds its own registry."""
        pipeline = Pipeline(
            PipelineConfig(
                norm_registry_path=registry_path,
                instrument_id="cfit",
                instrument_version="1.0.0",
                schema_dir=schema_dir,
            )
        )

        assert pipeline.instrument.kind == "conversion"
        assert pipeline.registry.registry_path == registry_path


class TestSubjectValidation:
    """Tests for malformed subject blocks."""

    @pytest.mark.parametrize(
        "subject",
        [
            "Santos",
            ["Santos", "female"],
            {"name": 123},
            {"name": "Santos", "sex": 1},
        ],
    )
    def test_bad_subject_is_invalid_input(self, cfit_pipeline: Pipeline, subject) -> None:
        """Test a malformed subject fails the record instead of raising."""
        result = cfit_pipeline.process({"record_id": "s", "raw_score": 22, "subject": subject})

        assert result.status == ProcessingStatus.FAILED
        error = result.diagnostics.errors[0]
        assert error.code == "INVALID_INPUT"
        assert error.field == "subject"
        assert error.stage == "input"

    def test_batch_continues_after_bad_subject(self, cfit_pipeline: Pipeline) -> None:
        """Test later records are still scored after a malformed one."""
        results = cfit_pipeline.process_batch(
            [
                {"record_id": "bad", "raw_score": 22, "subject": "Santos"},
                {"record_id": "ok", "raw_score": 22, "subject": {"name": "Santos, Maria"}},
            ]
        )

        assert [r.status for r in results] == [ProcessingStatus.FAILED, ProcessingStatus.SUCCESS]

    def test_null_subject_uses_placeholder(self, cfit_pipeline: Pipeline) -> None:
        """Test an explicit null subject reads as the client."""
        result = cfit_pipeline.process({"raw_score": 22, "subject": None})

        assert result.success
        assert result.result["interpretation_text"].startswith("The client obtained")


class TestScoreRatedPipeline:
    """Tests for 16PF records through the pipeline."""

    def test_sixteen_pf(self, registry: NormRegistry) -> None:
        """Test 16PF scores are mapped to low/high sentences."""
        pipeline = make_pipeline(registry, "16pf")
        values = {scale.scale_key: 6 for scale in pipeline.instrument.scales}
        values["warmth"] = 5
        result = pipeline.process({"subject": {"name": "Reyes, Ana", "sex": "female"}, "values": values})

        assert result.success
        scales = {s["scale_key"]: s for s in result.result["scales"]}
        assert len(scales) == 16
        assert scales["warmth"]["value"] == "low"
        assert scales["warmth"]["score"] == 5
        assert scales["tension"]["value"] == "high"
        assert result.result["composite_rating"] is None

    def test_sixteen_pf_out_of_range(self, registry: NormRegistry) -> None:
        """Test a score outside 1-10 fails with the factor as field."""
        pipeline = make_pipeline(registry, "16pf")
        values = {scale.scale_key: 6 for scale in pipeline.instrument.scales}
        values["reasoning"] = 11
        result = pipeline.process({"values": values})

        assert result.status == ProcessingStatus.FAILED
        assert result.diagnostics.errors[0].field == "reasoning"
