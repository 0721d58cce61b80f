"""
Recommendation Resolver - clinical guidance for (gene, phenotype, drug).

A missing guideline is a normal outcome and yields GuidanceAbsent. Duplicate
rows for one key follow the same policy as overlapping phenotype rules: first
row in lenient mode, AmbiguousRuleError in strict mode.
"""

import logging

from .errors import AmbiguousRuleError
from .gene_registry import require_text
from .models import Guidance, GuidanceAbsent, GuidanceFound
from .store import ReferenceDataStore

logger = logging.getLogger(__name__)

NO_GUIDANCE_MESSAGE = "No specific pharmacogenetic recommendation for this combination"


class RecommendationResolver:
    """Looks up guideline entries for a planned drug."""

    def __init__(self, store: ReferenceDataStore, strict: bool = False):
        self.store = store
        self.strict = strict

    def resolve(self, gene_symbol: str, phenotype: str, drug_name: str) -> Guidance:
        require_text(drug_name, "drug")

        entries = self.store.find_guidelines(gene_symbol, phenotype, drug_name)
        if not entries:
            logger.info(f"No guideline for {gene_symbol} {phenotype} {drug_name}")
            return GuidanceAbsent(message=NO_GUIDANCE_MESSAGE)

        if len(entries) > 1:
            if self.strict:
                raise AmbiguousRuleError(
                    f"{len(entries)} guideline entries for {gene_symbol} {phenotype} {drug_name}"
                )
            logger.warning(
                f"{len(entries)} guideline entries for {gene_symbol} {phenotype} {drug_name}; using the first"
            )

        entry = entries[0]
        return GuidanceFound(
            recommendation=entry.recommendation_summary,
            alternatives=entry.alternatives,
            evidence_level=entry.evidence_level,
            source=entry.source,
        )
