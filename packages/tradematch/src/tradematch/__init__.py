"""tradematch - Service catalogue matching for trade intakes."""

from tradematch.catalogue import catalogue_from_dict, flatten_catalogue
from tradematch.config import BoostRule, MatchConfig
from tradematch.errors import MalformedCatalogue, MatchError, NoSimilarityIndexAvailable
from tradematch.matcher import MatcherStats, ServiceMatcher, match_services
from tradematch.normalize import Tokenizer, extract_tokens, normalize_text
from tradematch.types import Catalogue, CatalogueItem, MatchResult

__all__ = [
    "BoostRule",
    "Catalogue",
    "CatalogueItem",
    "MalformedCatalogue",
    "MatchConfig",
    "MatchError",
    "MatchResult",
    "MatcherStats",
    "NoSimilarityIndexAvailable",
    "ServiceMatcher",
    "Tokenizer",
    "catalogue_from_dict",
    "extract_tokens",
    "flatten_catalogue",
    "match_services",
    "normalize_text",
]
