from pathlib import Path

import pytest

from geotype.classify.pipeline import FeatureClassifier
from geotype.taxonomy.classificator import Taxonomy, load_taxonomy

FIXTURES = Path(__file__).parent / "fixtures"
CONFIG = Path(__file__).parent.parent / "config"


@pytest.fixture(scope="session")
def taxonomy() -> Taxonomy:
    return load_taxonomy(FIXTURES / "taxonomy.yaml")


@pytest.fixture()
def classifier(taxonomy) -> FeatureClassifier:
    return FeatureClassifier(taxonomy)


@pytest.fixture()
def code(taxonomy):
    def _code(name: str) -> int:
        return taxonomy.lookup_path(name.split("-"))

    return _code
