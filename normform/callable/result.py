"""CallableResult model for the normform callable protocol."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class CallableResult(BaseModel):
    """Result returned by the normform execute() interface.

    Exactly one of `items` or `items_ref` must be set.

    Attributes:
        schema_version: Version of the CallableResult schema.
        items: Scored assessment results (inline payload).
        items_ref: Reference to an external result store.
        stats: Processing statistics.
        diagnostics: Diagnostics for records that were not scored.
    """

    schema_version: str = "1.0"
    items: list[dict] | None = None
    items_ref: str | None = None
    stats: dict[str, int] = Field(default_factory=dict)
    diagnostics: list[dict] = Field(default_factory=list)

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def validate_items_xor_items_ref(self) -> CallableResult:
        """Ensure exactly one of items or items_ref is set."""
        has_items = self.items is not None
        has_items_ref = self.items_ref is not None

        if has_items and has_items_ref:
            raise ValueError("Cannot set both 'items' and 'items_ref'; use exactly one")
        if not has_items and not has_items_ref:
            raise ValueError("Must set exactly one of 'items' or 'items_ref'")

        return self

    def to_dict(self) -> dict:
        """Convert to dictionary, leaving out unset fields."""
        result: dict = {"schema_version": self.schema_version}
        if self.items is not None:
            result["items"] = self.items
        if self.items_ref is not None:
            result["items_ref"] = self.items_ref
        if self.stats:
            result["stats"] = self.stats
        if self.diagnostics:
            result["diagnostics"] = self.diagnostics
        return result
