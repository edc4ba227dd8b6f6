"""Shared fixtures: the four-trade sample catalogue."""

import copy
import json
from pathlib import Path

import pytest

from tradematch.catalogue import catalogue_from_dict, flatten_catalogue
from tradematch.types import Catalogue, CatalogueItem

SAMPLE_CATALOGUE = {
    "trades": [
        {
            "code": "0300",
            "name_de": "Gerüstbau",
            "name_en": "Scaffolding",
            "positions": [
                {
                    "position_number": "0301",
                    "short_name_de": "Gerüst aufstellen",
                    "short_name_en": "Erect scaffolding",
                    "unit": "m²",
                    "description_de": "Aufstellen eines Arbeitsgerüsts",
                    "description_en": "Erect a work scaffolding for difficult access areas",
                    "hero": True,
                },
            ],
        },
        {
            "code": "4000",
            "name_de": "Sanitär",
            "name_en": "Plumbing",
            "positions": [
                {
                    "position_number": "4001",
                    "short_name_de": "Wasserleitung reparieren",
                    "short_name_en": "Repair water pipe",
                    "unit": "pauschal",
                    "description_de": "Reparatur einer defekten Wasserleitung",
                    "description_en": "Repair of a defective water pipe",
                    "hero": True,
                },
            ],
        },
        {
            "code": "8500",
            "name_de": "Malerarbeiten",
            "name_en": "Painting",
            "positions": [
                {
                    "position_number": "8501",
                    "short_name_de": "Innenanstrich",
                    "short_name_en": "Interior painting",
                    "unit": "m²",
                    "description_de": "Streichen von Innenwänden",
                    "description_en": "Painting interior walls with emulsion paint",
                    "hero": True,
                },
            ],
        },
        {
            "code": "9000",
            "name_de": "Dacharbeiten",
            "name_en": "Roofing",
            "positions": [
                {
                    "position_number": "9001",
                    "short_name_de": "Dach reparieren",
                    "short_name_en": "Repair roof",
                    "unit": "m²",
                    "description_de": "Reparatur von beschädigten Dachflächen",
                    "description_en": "Repair of damaged roof surfaces",
                    "hero": True,
                },
            ],
        },
    ],
}


@pytest.fixture
def catalogue_data() -> dict:
    return copy.deepcopy(SAMPLE_CATALOGUE)


@pytest.fixture
def sample_catalogue() -> Catalogue:
    return catalogue_from_dict(SAMPLE_CATALOGUE)


@pytest.fixture
def sample_items(sample_catalogue: Catalogue) -> list[CatalogueItem]:
    return flatten_catalogue(sample_catalogue)


@pytest.fixture
def catalogue_file(tmp_path: Path) -> Path:
    path = tmp_path / "catalogue.json"
    path.write_text(json.dumps(SAMPLE_CATALOGUE, ensure_ascii=False), encoding="utf-8")
    return path
