"""
Shared fixtures: a small reference data bundle and store doubles.
"""

from pathlib import Path
from typing import List

import pytest

from phenoguard.services.interpretation.errors import StoreError
from phenoguard.services.interpretation.store import InMemoryReferenceStore, ReferenceData

SEED_DATA_PATH = Path(__file__).resolve().parent.parent / "data" / "reference_data.json"


def build_reference_data() -> ReferenceData:
    """CYP2C19 with CPIC-style ranges, two inhibitors and clopidogrel guidance."""
    return ReferenceData(**{
        "genes": [
            {"id": 1, "symbol": "CYP2C19"},
            {"id": 2, "symbol": "CYP2D6"},
        ],
        "alleles": [
            {"gene_id": 1, "name": "*1", "activity_score": 1.0},
            {"gene_id": 1, "name": "*2", "activity_score": 0.0},
            {"gene_id": 1, "name": "*17", "activity_score": 1.5},
            {"gene_id": 2, "name": "*1", "activity_score": 1.0},
            {"gene_id": 2, "name": "*4", "activity_score": 0.0},
        ],
        "phenotype_rules": [
            {"gene_id": 1, "phenotype": "PM", "min_score": 0.0, "max_score": 0.25},
            {"gene_id": 1, "phenotype": "IM", "min_score": 0.5, "max_score": 1.0},
            {"gene_id": 1, "phenotype": "NM", "min_score": 1.5, "max_score": 2.0},
            {"gene_id": 2, "phenotype": "PM", "min_score": 0.0, "max_score": 0.0},
            {"gene_id": 2, "phenotype": "IM", "min_score": 0.25, "max_score": 1.0},
            {"gene_id": 2, "phenotype": "NM", "min_score": 1.25, "max_score": 2.25},
        ],
        "drug_gene_effects": [
            {"drug": "Omeprazole", "gene_id": 1, "effect": "inhibitor", "strength": "moderate"},
            {"drug": "Fluvoxamine", "gene_id": 1, "effect": "inhibitor", "strength": "strong"},
            {"drug": "Rifampin", "gene_id": 1, "effect": "inducer", "strength": "strong"},
            {"drug": "Pantoprazole", "gene_id": 1, "effect": "none"},
            {"drug": "Fluoxetine", "gene_id": 2, "effect": "inhibitor", "strength": "strong"},
        ],
        "guidelines": [
            {
                "gene_id": 1, "phenotype": "PM", "drug": "Clopidogrel",
                "recommendation_summary": "Avoid clopidogrel; use prasugrel or ticagrelor.",
                "alternatives": "Prasugrel, Ticagrelor", "evidence_level": "A", "source": "CPIC",
            },
            {
                "gene_id": 1, "phenotype": "IM", "drug": "Clopidogrel",
                "recommendation_summary": "Avoid standard-dose clopidogrel if possible.",
                "alternatives": "Prasugrel, Ticagrelor", "evidence_level": "A", "source": "CPIC",
            },
            {
                "gene_id": 1, "phenotype": "NM", "drug": "Clopidogrel",
                "recommendation_summary": "Use clopidogrel at standard dose.",
                "evidence_level": "A", "source": "CPIC",
            },
        ],
    })


class RecordingStore:
    """Wraps a store and records every lookup made through it."""

    def __init__(self, inner):
        self.inner = inner
        self.calls: List[tuple] = []

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        return getattr(self.inner, name)(*args)

    def find_gene_by_symbol(self, symbol):
        return self._record("find_gene_by_symbol", symbol)

    def find_allele_score(self, gene_id, allele_name):
        return self._record("find_allele_score", gene_id, allele_name)

    def find_phenotype_rules(self, gene_id, score):
        return self._record("find_phenotype_rules", gene_id, score)

    def find_drug_gene_effects(self, drug_name, gene_symbol):
        return self._record("find_drug_gene_effects", drug_name, gene_symbol)

    def find_guidelines(self, gene_symbol, phenotype, drug_name):
        return self._record("find_guidelines", gene_symbol, phenotype, drug_name)

    def called(self, name) -> List[tuple]:
        return [call for call in self.calls if call[0] == name]


class FailingStore(RecordingStore):
    """Raises StoreError from the named lookups, delegates the rest."""

    def __init__(self, inner, failing=()):
        super().__init__(inner)
        self.failing = set(failing)

    def _record(self, name, *args):
        if name in self.failing:
            self.calls.append((name,) + args)
            raise StoreError()
        return super()._record(name, *args)


@pytest.fixture
def reference_data() -> ReferenceData:
    return build_reference_data()


@pytest.fixture
def store(reference_data) -> InMemoryReferenceStore:
    return InMemoryReferenceStore(reference_data)


@pytest.fixture
def recording_store(store) -> RecordingStore:
    return RecordingStore(store)


@pytest.fixture
def seed_store() -> InMemoryReferenceStore:
    """Store over the reference data shipped with the service."""
    return InMemoryReferenceStore.from_file(SEED_DATA_PATH)


@pytest.fixture
def failing_store(store):
    """Factory: failing_store("find_guidelines", ...) -> store that fails those lookups."""
    def _make(*failing):
        return FailingStore(store, failing)
    return _make
