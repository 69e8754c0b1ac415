"""Shared fixtures for the generator tests."""

from pathlib import Path

import pytest

from csharp_oas_generator.config import GeneratorConfig
from csharp_oas_generator.parser.models import ParsedSpec
from csharp_oas_generator.parser.oas_parser import OASParser

SPECS_DIR = Path(__file__).parent / "specs"


@pytest.fixture
def petstore_spec_path() -> Path:
    """Get the path to the petstore OAS spec."""
    spec_path = SPECS_DIR / "petstore.oas3.json"
    if not spec_path.exists():
        pytest.skip("petstore.oas3.json not found")
    return spec_path


@pytest.fixture
def petstore_spec(petstore_spec_path: Path) -> ParsedSpec:
    """Parse the petstore spec with the default configuration."""
    return OASParser(GeneratorConfig()).parse_file(petstore_spec_path)
