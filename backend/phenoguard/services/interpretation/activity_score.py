"""
Activity Score Calculator - diploid additive activity score.

The diplotype score is the sum of the two per-allele activity values, each
looked up for the gene the diplotype belongs to.
"""

import logging
from typing import List, Sequence

from .errors import NotFoundError, ValidationError
from .store import ReferenceDataStore

logger = logging.getLogger(__name__)


def validate_diplotype(diplotype: Sequence[str]) -> List[str]:
    """Return the diplotype as a list, or raise ValidationError if it is not a pair of names."""
    if isinstance(diplotype, (str, bytes)) or not isinstance(diplotype, (list, tuple)):
        raise ValidationError("diplotype must be an array of exactly 2 alleles")
    if len(diplotype) != 2:
        raise ValidationError(
            f"diplotype must be an array of exactly 2 alleles (got {len(diplotype)})"
        )
    for allele in diplotype:
        if not isinstance(allele, str) or not allele.strip():
            raise ValidationError("diplotype alleles must be non-empty strings")
    return list(diplotype)


class ActivityScoreCalculator:
    """Sums allele activity scores for a diplotype."""

    def __init__(self, store: ReferenceDataStore):
        self.store = store

    def compute_score(self, gene_id: int, diplotype: Sequence[str]) -> float:
        alleles = validate_diplotype(diplotype)

        total_score = 0.0
        for allele_name in alleles:
            allele = self.store.find_allele_score(gene_id, allele_name)
            if allele is None:
                raise NotFoundError(f"Allele {allele_name} not found for gene_id={gene_id}")
            total_score += allele.activity_score

        logger.debug(f"Activity score for gene_id={gene_id} {'/'.join(alleles)}: {total_score}")
        return total_score
