"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from normform.registry import NormRegistry


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def registry_path(project_root: Path) -> Path:
    """Return the bundled norm registry path."""
    return project_root / "normform" / "data" / "norm-registry"


@pytest.fixture
def schema_dir(project_root: Path) -> Path:
    """Return the bundled schemas directory."""
    return project_root / "normform" / "data" / "schemas"


@pytest.fixture
def registry(registry_path: Path, schema_dir: Path) -> NormRegistry:
    """Create a schema-validating norm registry."""
    return NormRegistry(registry_path, schema_dir=schema_dir)


@pytest.fixture
def cfit_table(registry: NormRegistry):
    """Load the CFIT conversion table."""
    return registry.get_table("cfit", "1.0.0")


@pytest.fixture
def iq_bands(registry: NormRegistry):
    """Load the canonical IQ classification bands."""
    return registry.get_bands("iq_classification", "1.0.0")


@pytest.fixture
def cfit_instrument(registry: NormRegistry):
    """Load the CFIT instrument spec."""
    return registry.get_instrument("cfit", "1.0.0")


@pytest.fixture
def bpi_spec(registry: NormRegistry):
    """Load the BPI instrument spec."""
    return registry.get_instrument("bpi", "1.0.0")


@pytest.fixture
def wss_spec(registry: NormRegistry):
    """Load the WSS instrument spec."""
    return registry.get_instrument("wss", "1.0.0")


@pytest.fixture
def mmse_spec(registry: NormRegistry):
    """Load the MMSE instrument spec."""
    return registry.get_instrument("mmse", "1.0.0")


@pytest.fixture
def sixteen_pf_spec(registry: NormRegistry):
    """Load the 16PF instrument spec."""
    return registry.get_instrument("16pf", "1.0.0")
