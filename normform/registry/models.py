"""Pydantic models for norm tables, band tables and instrument specifications."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ScoreDomain(BaseModel):
    """Inclusive raw-score range covered by a conversion table."""

    model_config = ConfigDict(frozen=True)

    min: int
    max: int

    @model_validator(mode="after")
    def check_order(self) -> "ScoreDomain":
        if self.min > self.max:
            raise ValueError(f"domain min {self.min} is greater than max {self.max}")
        return self


class ScoreRow(BaseModel):
    """Percentile and standard score stored for one raw score."""

    model_config = ConfigDict(frozen=True)

    percentile: int = Field(ge=1, le=99)
    standard_score: int


class ConversionTable(BaseModel):
    """Raw score to (percentile, standard score) lookup.

    Entries cover every integer of the domain. Values outside the domain
    use the floor and ceiling policies; when a policy is not given the
    boundary entry of the domain is used instead.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["conversion_table"] = "conversion_table"
    table_id: str
    version: str
    name: str
    description: str | None = None
    domain: ScoreDomain
    floor: ScoreRow | None = None
    ceiling: ScoreRow | None = None
    entries: dict[int, ScoreRow]

    @model_validator(mode="after")
    def check_coverage(self) -> "ConversionTable":
        expected = set(range(self.domain.min, self.domain.max + 1))
        actual = set(self.entries)
        missing = sorted(expected - actual)
        extra = sorted(actual - expected)
        if missing:
            raise ValueError(f"conversion table {self.table_id} is missing raw scores {missing}")
        if extra:
            raise ValueError(f"conversion table {self.table_id} has raw scores outside the domain {extra}")
        return self

    @property
    def floor_row(self) -> ScoreRow:
        """Row used for raw scores below the domain."""
        return self.floor if self.floor is not None else self.entries[self.domain.min]

    @property
    def ceiling_row(self) -> ScoreRow:
        """Row used for raw scores above the domain."""
        return self.ceiling if self.ceiling is not None else self.entries[self.domain.max]


class Band(BaseModel):
    """Classification band over the standard-score space.

    `lower` is inclusive; None marks the band that is unbounded below.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    lower: int | None
    template: str | None = None


def order_bands(bands: list[Band]) -> list[Band]:
    """Sort bands from highest lower bound down, unbounded-below band last."""
    bounded = sorted(
        (band for band in bands if band.lower is not None),
        key=lambda band: band.lower,
        reverse=True,
    )
    return bounded + [band for band in bands if band.lower is None]


class BandTable(BaseModel):
    """Ordered set of bands partitioning the standard-score line."""

    model_config = ConfigDict(frozen=True)

    type: Literal["band_table"] = "band_table"
    table_id: str
    version: str
    name: str
    description: str | None = None
    bands: list[Band]

    @model_validator(mode="after")
    def check_partition(self) -> "BandTable":
        if not self.bands:
            raise ValueError(f"band table {self.table_id} has no bands")

        unbounded = [band.key for band in self.bands if band.lower is None]
        if len(unbounded) != 1:
            raise ValueError(
                f"band table {self.table_id} needs exactly one band unbounded below, "
                f"found {len(unbounded)}"
            )

        lowers = [band.lower for band in self.bands if band.lower is not None]
        if len(lowers) != len(set(lowers)):
            raise ValueError(f"band table {self.table_id} has duplicate lower bounds")

        keys = [band.key for band in self.bands]
        if len(keys) != len(set(keys)):
            raise ValueError(f"band table {self.table_id} has duplicate band keys")

        return self

    def ordered(self) -> list[Band]:
        """Bands from highest lower bound to the unbounded-below band."""
        return order_bands(self.bands)

    def ranges(self) -> list[tuple[Band, int | None, int | None]]:
        """Half-open (band, lower, upper) triples; None means unbounded."""
        result: list[tuple[Band, int | None, int | None]] = []
        upper: int | None = None
        for band in self.ordered():
            result.append((band, band.lower, upper))
            upper = band.lower
        return result

    def get_band(self, key: str) -> Band | None:
        """Get a band by its key."""
        for band in self.bands:
            if band.key == key:
                return band
        return None


class SpecRef(BaseModel):
    """Reference to another versioned registry document."""

    id: str
    version: str


class ConversionInstrument(BaseModel):
    """Instrument scored through a conversion table and a band table."""

    type: Literal["instrument_spec"] = "instrument_spec"
    kind: Literal["conversion"]
    instrument_id: str
    version: str
    name: str
    description: str | None = None
    conversion_table: SpecRef
    band_table: SpecRef
    templates: dict[str, str]


class CategoricalScale(BaseModel):
    """One sub-scale of a categorical instrument."""

    scale_key: str
    name: str
    interpretations: dict[str, str]


class ScoreLevel(BaseModel):
    """Cut-off mapping a numeric scale score to an enumerated value."""

    value: str
    lower: int


class CategoricalInstrument(BaseModel):
    """Instrument whose sub-scales take one enumerated value each.

    Instruments rated on a numeric score (e.g. 16PF stens) declare a
    `score_domain` and `score_levels`; the score is mapped to the level with
    the highest lower bound it reaches before lookup.
    """

    type: Literal["instrument_spec"] = "instrument_spec"
    kind: Literal["categorical"]
    instrument_id: str
    version: str
    name: str
    description: str | None = None
    values: list[str]
    scales: list[CategoricalScale]
    rating_groups: dict[str, str] = Field(default_factory=dict)
    summaries: dict[str, str] = Field(default_factory=dict)
    score_domain: ScoreDomain | None = None
    score_levels: list[ScoreLevel] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_score_levels(self) -> "CategoricalInstrument":
        if not self.score_levels:
            if self.score_domain is not None:
                raise ValueError(f"{self.instrument_id} has a score_domain but no score_levels")
            return self
        if self.score_domain is None:
            raise ValueError(f"{self.instrument_id} has score_levels but no score_domain")

        unknown = [level.value for level in self.score_levels if level.value not in self.values]
        if unknown:
            raise ValueError(f"{self.instrument_id} score levels use unknown values {unknown}")

        lowers = [level.lower for level in self.score_levels]
        if len(lowers) != len(set(lowers)):
            raise ValueError(f"{self.instrument_id} has duplicate score level bounds")
        if min(lowers) > self.score_domain.min:
            raise ValueError(
                f"{self.instrument_id} score levels leave {self.score_domain.min} unmapped"
            )
        return self

    def level_for(self, score: int) -> str:
        """Value of the highest level whose lower bound the score reaches."""
        levels = sorted(self.score_levels, key=lambda level: level.lower, reverse=True)
        for level in levels:
            if level.lower <= score:
                return level.value
        return levels[-1].value

    def get_scale(self, scale_key: str) -> CategoricalScale | None:
        """Get a scale by its key."""
        for scale in self.scales:
            if scale.scale_key == scale_key:
                return scale
        return None


class Subscale(BaseModel):
    """Bounded sub-score of a composite instrument."""

    key: str
    name: str
    min: int = 0
    max: int
    threshold: int
    adequate: str
    impaired: str


class CompositeInstrument(BaseModel):
    """Instrument whose sub-scores sum to a banded total."""

    type: Literal["instrument_spec"] = "instrument_spec"
    kind: Literal["composite"]
    instrument_id: str
    version: str
    name: str
    description: str | None = None
    subscales: list[Subscale]
    band_table: SpecRef
    templates: dict[str, str]

    @property
    def total_max(self) -> int:
        return sum(subscale.max for subscale in self.subscales)

    def get_subscale(self, key: str) -> Subscale | None:
        """Get a subscale by its key."""
        for subscale in self.subscales:
            if subscale.key == key:
                return subscale
        return None


InstrumentSpec = Annotated[
    ConversionInstrument | CategoricalInstrument | CompositeInstrument,
    Field(discriminator="kind"),
]
