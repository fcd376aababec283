import logging
import os
from collections import defaultdict
from dataclasses import replace
from typing import Optional

import rdflib
from rdflib.namespace import OWL, RDF, RDFS

from .model import CategoryInfo, PropertyDefinition, TaxonomyTree

logger = logging.getLogger(__name__)

FURNITURE_NAMESPACE = "http://taxonomy.sirktek.no/furniture#"
BASE_TAXONOMY_RESOURCE = "/taxonomy/furniture-base.ttl"

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))

CLASS_TYPES = [RDFS.Class, OWL.Class]
PROPERTY_TYPES = [RDF.Property, OWL.DatatypeProperty, OWL.ObjectProperty]


class TaxonomyLoadError(RuntimeError):
    """Raised when a taxonomy schema cannot be read, parsed or assembled."""

    def __init__(self, message: str, resource: Optional[str] = None):
        super().__init__(message)
        self.resource = resource


class TaxonomyCycleError(TaxonomyLoadError):
    """Raised when rdfs:subClassOf statements form a loop."""

    def __init__(self, cycle: list[str], resource: Optional[str] = None):
        self.cycle = list(cycle)
        super().__init__("Cyclic subClassOf chain: " + " -> ".join(self.cycle), resource)


def local_name(uri: Optional[str]) -> Optional[str]:
    if uri is None:
        return None
    if "#" in uri:
        return uri.rsplit("#", 1)[1]
    if "/" in uri:
        return uri.rsplit("/", 1)[1]
    return uri


def resolve_resource(resource_path: str) -> str:
    """Resolve a '/'-separated resource path against the package directory."""
    parts = [p for p in resource_path.split("/") if p]
    return os.path.join(PACKAGE_DIR, *parts)


def _sort_key(category: CategoryInfo) -> tuple[str, str]:
    return (category.english_name, category.class_name)


class RdfsTaxonomyLoader:
    """Builds a TaxonomyTree from an RDF-S schema.

    Only classes and properties whose URI starts with ``namespace`` are
    considered; everything else in the graph is ignored.
    """

    def __init__(self, namespace: str = FURNITURE_NAMESPACE):
        self.namespace = namespace

    def load_base_taxonomy(self) -> TaxonomyTree:
        return self.load_taxonomy_from_resource(BASE_TAXONOMY_RESOURCE)

    def load_taxonomy_from_resource(self, resource_path: str) -> TaxonomyTree:
        logger.debug("Loading taxonomy from resource: %s", resource_path)
        return self._load_file(resolve_resource(resource_path), resource_path, "turtle")

    def load_taxonomy_from_file(self, path: str, format: str = "turtle") -> TaxonomyTree:
        logger.debug("Loading taxonomy from file: %s", path)
        return self._load_file(os.fspath(path), os.fspath(path), format)

    def load_taxonomy_from_data(self, data: str, format: str = "turtle") -> TaxonomyTree:
        graph = rdflib.Graph()
        try:
            graph.parse(data=data, format=format)
        except Exception as e:
            raise TaxonomyLoadError("Failed to parse taxonomy data", "<data>") from e
        return self._build(graph, "<data>")

    def _load_file(self, path: str, resource: str, format: str) -> TaxonomyTree:
        graph = rdflib.Graph()
        try:
            with open(path, "rb") as f:
                graph.parse(file=f, format=format)
        except FileNotFoundError as e:
            raise TaxonomyLoadError(f"Could not find resource: {resource}", resource) from e
        except Exception as e:
            raise TaxonomyLoadError(f"Failed to load taxonomy from {resource}", resource) from e
        return self._build(graph, resource)

    def _build(self, graph: rdflib.Graph, resource: str) -> TaxonomyTree:
        try:
            return self.build_taxonomy_tree(graph)
        except TaxonomyLoadError as e:
            if e.resource is None:
                e.resource = resource
            raise

    def build_taxonomy_tree(self, graph: rdflib.Graph) -> TaxonomyTree:
        logger.debug("Building taxonomy tree from %d statements", len(graph))

        properties_by_domain = self._collect_properties(graph)

        categories: dict[str, CategoryInfo] = {}
        for class_ref in self._subjects_of_type(graph, CLASS_TYPES):
            category = self._build_category_info(graph, class_ref, properties_by_domain)
            if category.class_name in categories:
                logger.warning(
                    "Duplicate class name %s: %s replaces %s",
                    category.class_name, category.uri, categories[category.class_name].uri,
                )
            categories[category.class_name] = category

        for name, category in list(categories.items()):
            if category.parent_class_name is not None and category.parent_class_name not in categories:
                logger.warning(
                    "Parent %s of %s is not a known class, treating %s as a root",
                    category.parent_class_name, name, name,
                )
                categories[name] = replace(category, parent_class_name=None)

        children_by_parent: dict[str, list[str]] = defaultdict(list)
        for category in categories.values():
            if category.parent_class_name is not None:
                children_by_parent[category.parent_class_name].append(category.class_name)

        assembled = self._build_hierarchy(categories, children_by_parent)
        roots = sorted((c for c in assembled.values() if c.is_root()), key=_sort_key)

        logger.info(
            "Loaded taxonomy with %d total categories, %d root categories",
            len(categories), len(roots),
        )
        return TaxonomyTree(root_categories=tuple(roots))

    def _build_hierarchy(self, categories: dict[str, CategoryInfo],
                         children_by_parent: dict[str, list[str]]) -> dict[str, CategoryInfo]:
        # Post-order walk with an explicit stack; `path` holds the ancestors
        # of the node being expanded.
        built: dict[str, CategoryInfo] = {}

        for start in sorted(categories):
            if start in built:
                continue
            path: list[str] = []
            on_path: set[str] = set()
            stack = [(start, False)]
            while stack:
                name, expanded = stack.pop()
                if expanded:
                    children = sorted((built[c] for c in children_by_parent.get(name, [])), key=_sort_key)
                    built[name] = replace(categories[name], children=tuple(children))
                    path.pop()
                    on_path.discard(name)
                    continue
                if name in built:
                    continue
                if name in on_path:
                    raise TaxonomyCycleError(path[path.index(name):] + [name])
                path.append(name)
                on_path.add(name)
                stack.append((name, True))
                for child in children_by_parent.get(name, []):
                    stack.append((child, False))
        return built

    def _in_namespace(self, node) -> bool:
        return isinstance(node, rdflib.URIRef) and str(node).startswith(self.namespace)

    def _subjects_of_type(self, graph: rdflib.Graph, types) -> list[rdflib.URIRef]:
        subjects = set()
        for rdf_type in types:
            for s in graph.subjects(RDF.type, rdf_type):
                if self._in_namespace(s):
                    subjects.add(s)
        return sorted(subjects, key=str)

    def _get_label(self, graph: rdflib.Graph, subject, language: str) -> Optional[str]:
        labels = sorted(
            str(o) for o in graph.objects(subject, RDFS.label)
            if isinstance(o, rdflib.Literal) and o.language == language
        )
        return labels[0] if labels else None

    def _get_first_literal(self, graph: rdflib.Graph, subject, predicate) -> Optional[str]:
        values = sorted(str(o) for o in graph.objects(subject, predicate) if isinstance(o, rdflib.Literal))
        return values[0] if values else None

    def _get_first_uri(self, graph: rdflib.Graph, subject, predicate, namespace_only=False) -> Optional[str]:
        values = sorted(
            str(o) for o in graph.objects(subject, predicate)
            if isinstance(o, rdflib.URIRef) and (not namespace_only or self._in_namespace(o))
        )
        return values[0] if values else None

    def _build_category_info(self, graph: rdflib.Graph, node,
                             properties_by_domain: dict[str, list[PropertyDefinition]]) -> CategoryInfo:
        uri = str(node)
        class_name = local_name(uri)
        parent_uri = self._get_first_uri(graph, node, RDFS.subClassOf, namespace_only=True)
        properties = sorted(properties_by_domain.get(uri, []), key=lambda p: (p.name, p.uri))
        english_name = self._get_label(graph, node, "en")

        return CategoryInfo(
            class_name=class_name,
            english_name=english_name if english_name is not None else class_name,
            norwegian_name=self._get_label(graph, node, "no"),
            description=self._get_first_literal(graph, node, RDFS.comment),
            parent_class_name=local_name(parent_uri),
            uri=uri,
            properties=tuple(properties),
        )

    def _collect_properties(self, graph: rdflib.Graph) -> dict[str, list[PropertyDefinition]]:
        # Indexed by domain class URI; a property with several domains is listed under each
        by_domain: dict[str, list[PropertyDefinition]] = defaultdict(list)
        for prop_ref in self._subjects_of_type(graph, PROPERTY_TYPES):
            domains = sorted({str(d) for d in graph.objects(prop_ref, RDFS.domain) if isinstance(d, rdflib.URIRef)})
            for domain in domains:
                by_domain[domain].append(self._build_property_definition(graph, prop_ref, domain))
        return by_domain

    def _build_property_definition(self, graph: rdflib.Graph, node, domain: str) -> PropertyDefinition:
        uri = str(node)
        return PropertyDefinition(
            name=local_name(uri),
            uri=uri,
            english_label=self._get_label(graph, node, "en"),
            norwegian_label=self._get_label(graph, node, "no"),
            range_type=self._get_first_uri(graph, node, RDFS.range),
            domain_class=local_name(domain),
            description=None,
        )
