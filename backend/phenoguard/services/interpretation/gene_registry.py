"""
Gene Registry - resolves gene symbols to internal gene identities.
"""

import logging

from .errors import NotFoundError, ValidationError
from .store import ReferenceDataStore

logger = logging.getLogger(__name__)


def require_text(value, field: str) -> str:
    """Reject anything that is not a non-empty string."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    return value


class GeneRegistry:
    """Looks up genes by symbol in the reference data store."""

    def __init__(self, store: ReferenceDataStore):
        self.store = store

    def resolve(self, symbol: str) -> int:
        """
        Return the internal identity of the gene with this symbol.

        Raises ValidationError for a missing/blank symbol, NotFoundError when
        no gene has the symbol. StoreError from the lookup propagates as-is.
        """
        require_text(symbol, "gene")

        gene = self.store.find_gene_by_symbol(symbol)
        if gene is None:
            raise NotFoundError(f"Unknown gene symbol: {symbol}")

        logger.debug(f"Resolved gene {symbol} -> id {gene.id}")
        return gene.id
