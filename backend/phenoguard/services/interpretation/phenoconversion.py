"""
Phenoconversion Engine (rule-based).

Adjusts a genotype-predicted phenotype when a concurrently administered drug
inhibits the gene product. Only inhibition is modeled and the adjustment is a
single step no matter how many inhibitors are present:

    NM -> IM
    IM -> PM

Every other phenotype (PM, RM, UM, Indeterminate, ...) is left as is.
The drug list is scanned left to right and the first recorded inhibitor is
the one cited in the reason.
"""

import logging
from typing import Callable, Iterable, Optional, Sequence

from .errors import ValidationError
from .models import EffectKind, PhenoconversionResult
from .store import ReferenceDataStore

logger = logging.getLogger(__name__)


PHENOTYPE_DOWNGRADE = {
    "NM": "IM",
    "IM": "PM",
}


def degrade(phenotype: str) -> str:
    """One step of inhibitor-driven degradation."""
    return PHENOTYPE_DOWNGRADE.get(phenotype, phenotype)


def first_inhibitor(drugs: Iterable[str], inhibits: Callable[[str], bool]) -> Optional[str]:
    """
    Return the first drug for which inhibits(drug) is true, or None.

    Evaluation is lazy: drugs after the first match are never checked.
    """
    return next((drug for drug in drugs if inhibits(drug)), None)


def validate_drug_list(current_drugs: Sequence[str]) -> list:
    if isinstance(current_drugs, (str, bytes)) or not isinstance(current_drugs, (list, tuple)):
        raise ValidationError("currentDrugs must be an array of drug names")
    for drug in current_drugs:
        if not isinstance(drug, str):
            raise ValidationError("currentDrugs entries must be strings")
    return [drug for drug in current_drugs if drug.strip()]


class PhenoconversionEngine:
    """Applies drug-gene inhibition to a baseline phenotype."""

    def __init__(self, store: ReferenceDataStore):
        self.store = store

    def adjust(
        self,
        gene_symbol: str,
        baseline_phenotype: str,
        current_drugs: Sequence[str],
    ) -> PhenoconversionResult:
        drugs = validate_drug_list(current_drugs)

        unchanged = PhenoconversionResult(
            baseline_phenotype=baseline_phenotype,
            adjusted_phenotype=baseline_phenotype,
            reason=None,
        )

        # PM and anything outside NM/IM cannot move, no lookups needed
        if baseline_phenotype not in PHENOTYPE_DOWNGRADE:
            return unchanged

        inhibitor = first_inhibitor(drugs, lambda drug: self._inhibits(drug, gene_symbol))
        if inhibitor is None:
            return unchanged

        adjusted = degrade(baseline_phenotype)
        logger.info(
            f"Phenoconversion {gene_symbol}: {baseline_phenotype} -> {adjusted} ({inhibitor})"
        )
        return PhenoconversionResult(
            baseline_phenotype=baseline_phenotype,
            adjusted_phenotype=adjusted,
            reason=f"{inhibitor} inhibits {gene_symbol}",
        )

    def _inhibits(self, drug: str, gene_symbol: str) -> bool:
        effects = self.store.find_drug_gene_effects(drug, gene_symbol)
        return any(effect.effect == EffectKind.INHIBITOR for effect in effects)
