"""Norm registry for loading and caching versioned norm documents."""

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema
from pydantic import TypeAdapter, ValidationError

from normform.registry.models import (
    BandTable,
    ConversionTable,
    InstrumentSpec,
    SpecRef,
)

logger = logging.getLogger(__name__)

KINDS = ("tables", "bands", "instruments")

_SCHEMA_FILES = {
    "tables": "conversion_table.schema.json",
    "bands": "band_table.schema.json",
    "instruments": "instrument_spec.schema.json",
}

_instrument_adapter: TypeAdapter = TypeAdapter(InstrumentSpec)


class NormNotFoundError(Exception):
    """Raised when a norm document is not found."""

    pass


class NormValidationError(Exception):
    """Raised when a norm document fails schema or model validation."""

    pass


class NormRegistry:
    """Registry for loading and caching norm documents.

    Loads documents from a directory structure:
        <registry_path>/<kind>/<spec_id>/<version>.json

    Where kind is one of tables, bands, instruments and version uses
    dashes instead of dots (e.g., 1-0-0.json for 1.0.0).
    """

    def __init__(
        self,
        registry_path: Path | str,
        schema_dir: Path | str | None = None,
    ) -> None:
        """Initialize the norm registry.

        Args:
            registry_path: Path to the norm registry directory.
            schema_dir: Optional directory holding the JSON schemas used to
                validate documents before they are parsed.
        """
        self.registry_path = Path(registry_path)
        self._cache: dict[tuple[str, str, str], Any] = {}
        self._schemas: dict[str, dict] = {}

        if schema_dir:
            schema_dir = Path(schema_dir)
            for kind, filename in _SCHEMA_FILES.items():
                schema_path = schema_dir / filename
                if schema_path.exists():
                    with open(schema_path) as f:
                        self._schemas[kind] = json.load(f)

    def _version_to_filename(self, version: str) -> str:
        """Convert version string to filename (1.0.0 -> 1-0-0.json)."""
        return version.replace(".", "-") + ".json"

    def _get_spec_path(self, kind: str, spec_id: str, version: str) -> Path:
        return self.registry_path / kind / spec_id / self._version_to_filename(version)

    def _load(self, kind: str, spec_id: str, version: str, parse) -> Any:
        cache_key = (kind, spec_id, version)
        if cache_key in self._cache:
            return self._cache[cache_key]

        spec_path = self._get_spec_path(kind, spec_id, version)
        if not spec_path.exists():
            raise NormNotFoundError(
                f"Norm document not found: {kind}/{spec_id}@{version} "
                f"(expected at {spec_path})"
            )

        with open(spec_path) as f:
            data = json.load(f)

        schema = self._schemas.get(kind)
        if schema:
            try:
                jsonschema.validate(data, schema)
            except jsonschema.ValidationError as e:
                raise NormValidationError(
                    f"Schema validation failed for {kind}/{spec_id}@{version}: {e.message}"
                ) from e

        try:
            spec = parse(data)
        except ValidationError as e:
            raise NormValidationError(
                f"Invalid norm document {kind}/{spec_id}@{version}: {e}"
            ) from e

        logger.debug("Loaded %s/%s@%s from %s", kind, spec_id, version, spec_path)
        self._cache[cache_key] = spec
        return spec

    def get_table(self, table_id: str, version: str) -> ConversionTable:
        """Get a conversion table by ID and version.

        Raises:
            NormNotFoundError: If the document doesn't exist.
            NormValidationError: If the document fails validation.
        """
        return self._load("tables", table_id, version, ConversionTable.model_validate)

    def get_bands(self, table_id: str, version: str) -> BandTable:
        """Get a band table by ID and version."""
        return self._load("bands", table_id, version, BandTable.model_validate)

    def get_instrument(self, instrument_id: str, version: str | None = None):
        """Get an instrument spec, defaulting to its latest version."""
        if version is None:
            version = self._latest_version("instruments", instrument_id)
        return self._load(
            "instruments", instrument_id, version, _instrument_adapter.validate_python
        )

    def resolve_table(self, ref: SpecRef) -> ConversionTable:
        return self.get_table(ref.id, ref.version)

    def resolve_bands(self, ref: SpecRef) -> BandTable:
        return self.get_bands(ref.id, ref.version)

    def list_specs(self, kind: str) -> list[str]:
        """List all document IDs of a kind."""
        if kind not in KINDS:
            raise ValueError(f"Unknown norm kind: {kind} (expected one of {', '.join(KINDS)})")
        kind_path = self.registry_path / kind
        if not kind_path.exists():
            return []
        return sorted(d.name for d in kind_path.iterdir() if d.is_dir())

    def list_instruments(self) -> list[str]:
        """List all available instrument IDs."""
        return self.list_specs("instruments")

    def list_versions(self, kind: str, spec_id: str) -> list[str]:
        """List all available versions for a document."""
        spec_path = self.registry_path / kind / spec_id
        if not spec_path.exists():
            return []
        versions = [f.stem.replace("-", ".") for f in spec_path.glob("*.json")]
        return sorted(versions, key=_version_key)

    def _latest_version(self, kind: str, spec_id: str) -> str:
        versions = self.list_versions(kind, spec_id)
        if not versions:
            raise NormNotFoundError(f"No versions found for {kind}/{spec_id}")
        return versions[-1]


def _version_key(version: str) -> tuple:
    parts = []
    for part in version.split("."):
        parts.append((0, int(part), "") if part.isdigit() else (1, 0, part))
    return tuple(parts)
