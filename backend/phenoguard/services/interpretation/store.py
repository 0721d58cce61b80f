"""
Reference data access for the interpretation pipeline.

The pipeline only talks to a ReferenceDataStore, passed in explicitly by the
caller. Two implementations ship with the service:

- InMemoryReferenceStore: immutable indexes built from a ReferenceData bundle,
  usually loaded from data/reference_data.json.
- PostgresReferenceStore (postgres_store.py): the relational store.

Every lookup may raise StoreError; an empty result is never an error here.
"""

import json
import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple, Union

from pydantic import BaseModel, Field

from .models import Allele, DrugGeneEffect, Gene, GuidelineEntry, PhenotypeRule

logger = logging.getLogger(__name__)


class ReferenceDataStore(Protocol):
    """Read-only lookups consumed by the pipeline stages."""

    def find_gene_by_symbol(self, symbol: str) -> Optional[Gene]:
        ...

    def find_allele_score(self, gene_id: int, allele_name: str) -> Optional[Allele]:
        ...

    def find_phenotype_rules(self, gene_id: int, score: float) -> List[PhenotypeRule]:
        """Rules for the gene whose inclusive [min, max] range contains score."""
        ...

    def find_drug_gene_effects(self, drug_name: str, gene_symbol: str) -> List[DrugGeneEffect]:
        ...

    def find_guidelines(self, gene_symbol: str, phenotype: str, drug_name: str) -> List[GuidelineEntry]:
        ...


class ReferenceData(BaseModel):
    """Complete reference data bundle, as authored in reference_data.json."""
    genes: List[Gene] = Field(default_factory=list)
    alleles: List[Allele] = Field(default_factory=list)
    phenotype_rules: List[PhenotypeRule] = Field(default_factory=list)
    drug_gene_effects: List[DrugGeneEffect] = Field(default_factory=list)
    guidelines: List[GuidelineEntry] = Field(default_factory=list)


def _drug_key(name: str) -> str:
    return name.strip().lower()


class InMemoryReferenceStore:
    """
    ReferenceDataStore over an in-process ReferenceData bundle.

    Indexes are built once in __init__ and never mutated, so one instance can
    serve any number of concurrent interpretations. Row order within each
    index follows the authoring order of the bundle. Drug names are matched
    case-insensitively; gene symbols and allele names are exact.
    """

    def __init__(self, data: ReferenceData):
        self._genes_by_symbol: Dict[str, Gene] = {}
        self._symbol_by_id: Dict[int, str] = {}
        for gene in data.genes:
            self._genes_by_symbol[gene.symbol] = gene
            self._symbol_by_id[gene.id] = gene.symbol

        self._alleles: Dict[Tuple[int, str], Allele] = {}
        for allele in data.alleles:
            self._alleles.setdefault((allele.gene_id, allele.name), allele)

        rules: Dict[int, List[PhenotypeRule]] = defaultdict(list)
        for rule in data.phenotype_rules:
            rules[rule.gene_id].append(rule)
        self._rules = dict(rules)

        effects: Dict[Tuple[str, int], List[DrugGeneEffect]] = defaultdict(list)
        for effect in data.drug_gene_effects:
            effects[(_drug_key(effect.drug), effect.gene_id)].append(effect)
        self._effects = dict(effects)

        guidelines: Dict[Tuple[int, str, str], List[GuidelineEntry]] = defaultdict(list)
        for entry in data.guidelines:
            guidelines[(entry.gene_id, entry.phenotype, _drug_key(entry.drug))].append(entry)
        self._guidelines = dict(guidelines)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "InMemoryReferenceStore":
        return cls(load_reference_data(path))

    def find_gene_by_symbol(self, symbol: str) -> Optional[Gene]:
        return self._genes_by_symbol.get(symbol)

    def find_allele_score(self, gene_id: int, allele_name: str) -> Optional[Allele]:
        return self._alleles.get((gene_id, allele_name))

    def find_phenotype_rules(self, gene_id: int, score: float) -> List[PhenotypeRule]:
        return [rule for rule in self._rules.get(gene_id, []) if rule.contains(score)]

    def find_drug_gene_effects(self, drug_name: str, gene_symbol: str) -> List[DrugGeneEffect]:
        gene = self._genes_by_symbol.get(gene_symbol)
        if gene is None:
            return []
        return list(self._effects.get((_drug_key(drug_name), gene.id), []))

    def find_guidelines(self, gene_symbol: str, phenotype: str, drug_name: str) -> List[GuidelineEntry]:
        gene = self._genes_by_symbol.get(gene_symbol)
        if gene is None:
            return []
        return list(self._guidelines.get((gene.id, phenotype, _drug_key(drug_name)), []))

    @property
    def gene_symbols(self) -> List[str]:
        return sorted(self._genes_by_symbol)


def load_reference_data(path: Union[str, Path]) -> ReferenceData:
    """Load and validate a reference data bundle from a JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(
            f"Reference data file not found at {path}. "
            "Set PHENOGUARD_REFERENCE_DATA or use the postgres store."
        )

    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    data = ReferenceData(**raw)
    logger.info(
        f"Reference data loaded from {path}: {len(data.genes)} genes, "
        f"{len(data.alleles)} alleles, {len(data.guidelines)} guidelines"
    )
    return data
