"""
PostgreSQL-backed reference data store.

Runs the reference lookups against the tables defined in data/schema.sql using
a psycopg2 ThreadedConnectionPool. Each lookup borrows a connection for a single
read and hands it back. The pool raises instead of waiting when it is empty, so
lookups queue on a semaphore sized to the pool. Connections open lazily, so an
unreachable database fails the lookup rather than the startup. Driver errors
and malformed rows are logged with their cause and re-raised as a generic
StoreError.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Optional, TypeVar

import psycopg2
from psycopg2.extras import RealDictCursor
from psycopg2.pool import ThreadedConnectionPool
from pydantic import ValidationError as PydanticValidationError

from .errors import StoreError
from .models import Allele, DrugGeneEffect, Gene, GuidelineEntry, PhenotypeRule

logger = logging.getLogger(__name__)

T = TypeVar("T")

GENE_BY_SYMBOL_SQL = "SELECT id, symbol FROM genes WHERE symbol = %s"

ALLELE_SQL = (
    "SELECT gene_id, name, activity_score FROM alleles "
    "WHERE gene_id = %s AND name = %s"
)

PHENOTYPE_RULES_SQL = (
    "SELECT gene_id, phenotype, min_score, max_score FROM phenotype_rules "
    "WHERE gene_id = %s AND %s BETWEEN min_score AND max_score "
    "ORDER BY id"
)

DRUG_GENE_EFFECTS_SQL = (
    "SELECT d.name AS drug, dge.gene_id, dge.effect, dge.strength "
    "FROM drug_gene_effects dge "
    "JOIN drugs d ON d.id = dge.drug_id "
    "JOIN genes g ON g.id = dge.gene_id "
    "WHERE lower(d.name) = lower(%s) AND g.symbol = %s "
    "ORDER BY dge.id"
)

GUIDELINES_SQL = (
    "SELECT gdg.gene_id, gdg.phenotype, d.name AS drug, gdg.recommendation_summary, "
    "gdg.alternatives, gdg.evidence_level, gdg.source "
    "FROM gene_drug_guidelines gdg "
    "JOIN genes g ON g.id = gdg.gene_id "
    "JOIN drugs d ON d.id = gdg.drug_id "
    "WHERE g.symbol = %s AND gdg.phenotype = %s AND lower(d.name) = lower(%s) "
    "ORDER BY gdg.id"
)


def _guideline_from_row(row: Dict[str, Any]) -> GuidelineEntry:
    row = dict(row)
    # alternatives may be stored as text[] in some deployments
    if isinstance(row.get("alternatives"), list):
        row["alternatives"] = ", ".join(row["alternatives"])
    return GuidelineEntry(**row)


class PostgresReferenceStore:
    """ReferenceDataStore backed by PostgreSQL."""

    def __init__(self, pool: ThreadedConnectionPool, max_connections: int = 10):
        self._pool = pool
        self._available = threading.BoundedSemaphore(max_connections)

    @classmethod
    def connect(
        cls,
        host: str,
        port: int,
        dbname: str,
        user: str,
        password: Optional[str],
        min_connections: int = 0,
        max_connections: int = 10,
        connect_timeout: int = 10,
    ) -> "PostgresReferenceStore":
        """Create the connection pool. Only min_connections are opened here."""
        pool = ThreadedConnectionPool(
            min_connections,
            max_connections,
            host=host,
            port=port,
            dbname=dbname,
            user=user,
            password=password,
            connect_timeout=connect_timeout,
        )
        logger.info(f"PostgreSQL pool opened: {user}@{host}:{port}/{dbname} (max {max_connections})")
        return cls(pool, max_connections=max_connections)

    def close(self) -> None:
        self._pool.closeall()

    @contextmanager
    def _cursor(self):
        with self._available:
            conn = self._pool.getconn()
            try:
                with conn.cursor(cursor_factory=RealDictCursor) as cur:
                    yield cur
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                self._pool.putconn(conn)

    def _fetch(self, lookup: str, sql: str, params: tuple, build: Callable[[Dict[str, Any]], T]) -> List[T]:
        try:
            with self._cursor() as cur:
                cur.execute(sql, params)
                rows = cur.fetchall()
            return [build(row) for row in rows]
        except (psycopg2.Error, PydanticValidationError) as exc:
            logger.exception(f"Reference lookup failed: {lookup}")
            raise StoreError() from exc

    def find_gene_by_symbol(self, symbol: str) -> Optional[Gene]:
        rows = self._fetch("gene", GENE_BY_SYMBOL_SQL, (symbol,), lambda r: Gene(**r))
        return rows[0] if rows else None

    def find_allele_score(self, gene_id: int, allele_name: str) -> Optional[Allele]:
        rows = self._fetch("allele", ALLELE_SQL, (gene_id, allele_name), lambda r: Allele(**r))
        return rows[0] if rows else None

    def find_phenotype_rules(self, gene_id: int, score: float) -> List[PhenotypeRule]:
        return self._fetch("phenotype_rules", PHENOTYPE_RULES_SQL, (gene_id, score), lambda r: PhenotypeRule(**r))

    def find_drug_gene_effects(self, drug_name: str, gene_symbol: str) -> List[DrugGeneEffect]:
        return self._fetch("drug_gene_effects", DRUG_GENE_EFFECTS_SQL, (drug_name, gene_symbol), lambda r: DrugGeneEffect(**r))

    def find_guidelines(self, gene_symbol: str, phenotype: str, drug_name: str) -> List[GuidelineEntry]:
        return self._fetch("guidelines", GUIDELINES_SQL, (gene_symbol, phenotype, drug_name), _guideline_from_row)
