"""
Interpreter - runs the pharmacogenomic interpretation pipeline.

    gene symbol -> gene id -> activity score -> baseline phenotype
                -> adjusted phenotype -> recommendation

Stages run strictly in order and each consumes the previous stage's output.
The first stage to raise stops the pipeline; the InterpretationError it raised
is the single failure the caller sees, and no partial result is built.
"""

import logging
from typing import Sequence

from .activity_score import ActivityScoreCalculator, validate_diplotype
from .gene_registry import GeneRegistry, require_text
from .models import FullInterpretation, GenotypeInterpretation, Guidance, PhenoconversionResult
from .phenoconversion import PhenoconversionEngine, validate_drug_list
from .phenotype_classifier import PhenotypeClassifier
from .recommendation import RecommendationResolver
from .store import ReferenceDataStore

logger = logging.getLogger(__name__)


class Interpreter:
    """
    High-level interface for interpretation.

    Holds only the injected store and the ambiguity policy, so a single
    instance can be shared by concurrent requests.
    """

    def __init__(self, store: ReferenceDataStore, strict: bool = False):
        self.store = store
        self.strict = strict
        self.genes = GeneRegistry(store)
        self.scores = ActivityScoreCalculator(store)
        self.classifier = PhenotypeClassifier(store, strict=strict)
        self.phenoconversion = PhenoconversionEngine(store)
        self.recommendations = RecommendationResolver(store, strict=strict)

    def interpret_genotype(self, gene: str, diplotype: Sequence[str]) -> GenotypeInterpretation:
        """Gene lookup, activity score and baseline phenotype."""
        require_text(gene, "gene")
        alleles = validate_diplotype(diplotype)

        gene_id = self.genes.resolve(gene)
        activity_score = self.scores.compute_score(gene_id, alleles)
        phenotype = self.classifier.classify(gene_id, activity_score)

        logger.info(f"Genotype {gene} {'/'.join(alleles)}: score={activity_score} phenotype={phenotype}")
        return GenotypeInterpretation(
            gene=gene,
            diplotype=alleles,
            activity_score=activity_score,
            phenotype=phenotype,
        )

    def apply_phenoconversion(
        self, gene: str, baseline_phenotype: str, current_drugs: Sequence[str]
    ) -> PhenoconversionResult:
        require_text(gene, "gene")
        require_text(baseline_phenotype, "phenotype")
        return self.phenoconversion.adjust(gene, baseline_phenotype, current_drugs)

    def get_recommendation(self, gene: str, phenotype: str, drug: str) -> Guidance:
        require_text(gene, "gene")
        require_text(phenotype, "phenotype")
        return self.recommendations.resolve(gene, phenotype, drug)

    def interpret_full(
        self,
        gene: str,
        diplotype: Sequence[str],
        current_drugs: Sequence[str],
        planned_drug: str,
    ) -> FullInterpretation:
        """
        Full interpretation: genotype, phenoconversion, then guidance for the
        planned drug under the adjusted phenotype.
        """
        # Request shape is checked up front so a bad request costs no lookups
        require_text(gene, "gene")
        validate_diplotype(diplotype)
        validate_drug_list(current_drugs)
        require_text(planned_drug, "plannedDrug")

        genetics = self.interpret_genotype(gene, diplotype)
        phenoconversion = self.apply_phenoconversion(gene, genetics.phenotype, current_drugs)
        recommendation = self.get_recommendation(
            gene, phenoconversion.adjusted_phenotype, planned_drug
        )

        return FullInterpretation(
            genetics=genetics,
            phenoconversion=phenoconversion,
            recommendation=recommendation,
        )
