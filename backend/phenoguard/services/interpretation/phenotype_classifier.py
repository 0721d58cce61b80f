"""
Phenotype Classifier - maps a summed activity score to a phenotype code.

Rules are inclusive [min_score, max_score] ranges per gene. Within a gene the
ranges are meant to be disjoint. When several rules match anyway:

- lenient mode (default) keeps the first rule in the store's return order;
- strict mode raises AmbiguousRuleError naming every matching phenotype.
"""

import logging
from typing import List

from .errors import AmbiguousRuleError, NoMatchError
from .models import PhenotypeRule
from .store import ReferenceDataStore

logger = logging.getLogger(__name__)


class PhenotypeClassifier:
    """Selects the phenotype rule whose range contains an activity score."""

    def __init__(self, store: ReferenceDataStore, strict: bool = False):
        self.store = store
        self.strict = strict

    def classify(self, gene_id: int, score: float) -> str:
        rules = self._matching_rules(gene_id, score)

        if not rules:
            raise NoMatchError(
                f"No phenotype rule matched for gene_id={gene_id} and score={score}"
            )

        if len(rules) > 1:
            phenotypes = ", ".join(rule.phenotype for rule in rules)
            if self.strict:
                raise AmbiguousRuleError(
                    f"Overlapping phenotype rules for gene_id={gene_id} and score={score}: {phenotypes}"
                )
            logger.warning(
                f"Overlapping phenotype rules for gene_id={gene_id} score={score} "
                f"({phenotypes}); using {rules[0].phenotype}"
            )

        return rules[0].phenotype

    def _matching_rules(self, gene_id: int, score: float) -> List[PhenotypeRule]:
        # Re-check bounds so a store that over-returns cannot widen a range
        return [
            rule for rule in self.store.find_phenotype_rules(gene_id, score)
            if rule.contains(score)
        ]
