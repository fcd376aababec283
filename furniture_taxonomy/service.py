import logging
import threading
from typing import Optional

from .loader import RdfsTaxonomyLoader
from .model import CategoryInfo, TaxonomyStats, TaxonomyTree

logger = logging.getLogger(__name__)


class TaxonomyService:
    """Cached access to the furniture taxonomy.

    The tree is built on first use and shared by every caller until
    ``reload_base_taxonomy`` replaces it. A failed build leaves the cache
    empty so the next call tries again.
    """

    def __init__(self, loader: Optional[RdfsTaxonomyLoader] = None,
                 resource_path: Optional[str] = None, schema_path: Optional[str] = None):
        self.loader = loader or RdfsTaxonomyLoader()
        self.resource_path = resource_path
        self.schema_path = schema_path  # file on disk, takes precedence over resource_path
        self._lock = threading.Lock()
        self._cached_taxonomy: Optional[TaxonomyTree] = None

    def _build(self) -> TaxonomyTree:
        if self.schema_path is not None:
            return self.loader.load_taxonomy_from_file(self.schema_path)
        if self.resource_path is None:
            return self.loader.load_base_taxonomy()
        return self.loader.load_taxonomy_from_resource(self.resource_path)

    def load_base_taxonomy(self) -> TaxonomyTree:
        taxonomy = self._cached_taxonomy
        if taxonomy is not None:
            return taxonomy
        with self._lock:
            if self._cached_taxonomy is None:
                logger.info("Loading base taxonomy from RDF-S for the first time")
                self._cached_taxonomy = self._build()
            return self._cached_taxonomy

    def reload_base_taxonomy(self) -> TaxonomyTree:
        with self._lock:
            logger.info("Forcing reload of base taxonomy")
            self._cached_taxonomy = None
            self._cached_taxonomy = self._build()
            return self._cached_taxonomy

    def get_category_by_class_name(self, class_name: Optional[str]) -> Optional[CategoryInfo]:
        if class_name is None:
            return None
        return self.load_base_taxonomy().find_by_class_name(class_name)

    def is_base_taxonomy_class(self, class_name: Optional[str]) -> bool:
        return self.get_category_by_class_name(class_name) is not None

    def get_stats(self) -> TaxonomyStats:
        taxonomy = self.load_base_taxonomy()
        return TaxonomyStats(
            total_categories=taxonomy.count_categories(),
            root_categories=len(taxonomy.root_categories),
        )
