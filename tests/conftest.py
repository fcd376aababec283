import pytest

from furniture_taxonomy.loader import RdfsTaxonomyLoader

PREFIXES = """
@prefix rdf:  <http://www.w3.org/1999/02/22-rdf-syntax-ns#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .
@prefix owl:  <http://www.w3.org/2002/07/owl#> .
@prefix xsd:  <http://www.w3.org/2001/XMLSchema#> .
@prefix :     <http://taxonomy.sirktek.no/furniture#> .
@prefix ext:  <http://example.org/other#> .
"""


@pytest.fixture
def loader():
    return RdfsTaxonomyLoader()


@pytest.fixture
def load_ttl(loader):
    """Build a tree from a Turtle snippet (the common prefixes are prepended)."""
    def _load(body):
        return loader.load_taxonomy_from_data(PREFIXES + body)
    return _load


@pytest.fixture
def write_ttl(tmp_path):
    def _write(body, name="schema.ttl"):
        path = tmp_path / name
        path.write_text(PREFIXES + body, encoding="utf-8")
        return path
    return _write
