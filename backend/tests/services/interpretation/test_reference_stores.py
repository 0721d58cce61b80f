"""
Tests for the reference data stores: in-memory indexes, the JSON loader, and
the PostgreSQL store against a mocked connection pool.
"""

import json
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import psycopg2
import pytest
from psycopg2 import extensions
from pydantic import ValidationError as PydanticValidationError

from phenoguard.services.interpretation.errors import StoreError
from phenoguard.services.interpretation.models import EffectKind
from phenoguard.services.interpretation.postgres_store import PostgresReferenceStore
from phenoguard.services.interpretation.store import InMemoryReferenceStore, load_reference_data


class TestInMemoryReferenceStore:

    def test_gene_lookup_is_exact(self, store):
        assert store.find_gene_by_symbol("CYP2C19").id == 1
        assert store.find_gene_by_symbol("cyp2c19") is None

    def test_allele_lookup(self, store):
        assert store.find_allele_score(1, "*17").activity_score == 1.5
        assert store.find_allele_score(2, "*17") is None

    def test_rules_containing_score(self, store):
        rules = store.find_phenotype_rules(1, 1.0)
        assert [rule.phenotype for rule in rules] == ["IM"]
        assert store.find_phenotype_rules(1, 1.25) == []

    def test_effects_for_drug_and_gene(self, store):
        effects = store.find_drug_gene_effects("OMEPRAZOLE", "CYP2C19")
        assert len(effects) == 1
        assert effects[0].effect == EffectKind.INHIBITOR
        assert store.find_drug_gene_effects("Omeprazole", "CYP2D6") == []
        assert store.find_drug_gene_effects("Omeprazole", "ZZZ9") == []

    def test_returned_lists_are_copies(self, store):
        store.find_guidelines("CYP2C19", "PM", "Clopidogrel").clear()
        assert len(store.find_guidelines("CYP2C19", "PM", "Clopidogrel")) == 1

    def test_gene_symbols(self, store):
        assert store.gene_symbols == ["CYP2C19", "CYP2D6"]


class TestLoadReferenceData:

    def test_loads_json_bundle(self, tmp_path, reference_data):
        path = tmp_path / "reference.json"
        path.write_text(json.dumps(reference_data.model_dump(mode="json")))

        loaded = load_reference_data(path)
        assert loaded == reference_data

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_reference_data(tmp_path / "missing.json")

    def test_rejects_unknown_effect_kind(self, tmp_path):
        path = tmp_path / "reference.json"
        path.write_text(json.dumps({
            "drug_gene_effects": [{"drug": "X", "gene_id": 1, "effect": "substrate"}]
        }))
        with pytest.raises(PydanticValidationError):
            load_reference_data(path)

    def test_from_file(self, seed_store):
        assert "CYP2C19" in seed_store.gene_symbols


class TestPostgresReferenceStore:
    """Row mapping and error wrapping, with psycopg2 mocked out."""

    @pytest.fixture
    def cursor(self):
        return MagicMock()

    @pytest.fixture
    def pool(self, cursor):
        conn = MagicMock()
        conn.cursor.return_value.__enter__.return_value = cursor
        conn.cursor.return_value.__exit__.return_value = False
        pool = MagicMock()
        pool.getconn.return_value = conn
        return pool

    @pytest.fixture
    def pg_store(self, pool):
        return PostgresReferenceStore(pool)

    def test_gene_row(self, pg_store, cursor, pool):
        cursor.fetchall.return_value = [{"id": 7, "symbol": "CYP2C19"}]

        gene = pg_store.find_gene_by_symbol("CYP2C19")

        assert gene.id == 7
        sql, params = cursor.execute.call_args[0]
        assert "FROM genes" in sql
        assert params == ("CYP2C19",)
        pool.putconn.assert_called_once()

    def test_no_rows(self, pg_store, cursor):
        cursor.fetchall.return_value = []
        assert pg_store.find_gene_by_symbol("ZZZ9") is None
        assert pg_store.find_allele_score(1, "*2") is None

    def test_numeric_scores_become_floats(self, pg_store, cursor):
        from decimal import Decimal

        cursor.fetchall.return_value = [{"gene_id": 1, "name": "*17", "activity_score": Decimal("1.5")}]
        assert pg_store.find_allele_score(1, "*17").activity_score == 1.5

    def test_all_matching_rules_returned(self, pg_store, cursor):
        cursor.fetchall.return_value = [
            {"gene_id": 1, "phenotype": "IM", "min_score": 0.5, "max_score": 1.0},
            {"gene_id": 1, "phenotype": "NM", "min_score": 1.0, "max_score": 2.0},
        ]
        rules = pg_store.find_phenotype_rules(1, 1.0)
        assert [rule.phenotype for rule in rules] == ["IM", "NM"]

    def test_array_alternatives_are_joined(self, pg_store, cursor):
        cursor.fetchall.return_value = [{
            "gene_id": 1, "phenotype": "PM", "drug": "Clopidogrel",
            "recommendation_summary": "Avoid clopidogrel.",
            "alternatives": ["Prasugrel", "Ticagrelor"],
            "evidence_level": "A", "source": "CPIC",
        }]
        entry = pg_store.find_guidelines("CYP2C19", "PM", "Clopidogrel")[0]
        assert entry.alternatives == "Prasugrel, Ticagrelor"

    def test_driver_error_becomes_generic_store_error(self, pg_store, cursor, pool):
        cursor.execute.side_effect = psycopg2.OperationalError("password authentication failed for user x")

        with pytest.raises(StoreError) as exc_info:
            pg_store.find_drug_gene_effects("Omeprazole", "CYP2C19")

        assert "password" not in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, psycopg2.OperationalError)
        pool.getconn.return_value.rollback.assert_called_once()
        pool.putconn.assert_called_once()

    def test_malformed_row_becomes_store_error(self, pg_store, cursor):
        cursor.fetchall.return_value = [{"id": None, "symbol": "CYP2C19"}]
        with pytest.raises(StoreError):
            pg_store.find_gene_by_symbol("CYP2C19")


class TestPostgresConnectionPool:
    """A real ThreadedConnectionPool, with psycopg2.connect handing out fake connections."""

    @pytest.fixture
    def fake_connect(self, monkeypatch):
        lock = threading.Lock()
        state = {"opened": 0, "active": 0, "peak": 0}

        def slow_execute(sql, params):
            with lock:
                state["active"] += 1
                state["peak"] = max(state["peak"], state["active"])
            time.sleep(0.05)
            with lock:
                state["active"] -= 1

        def connect(*args, **kwargs):
            cursor = MagicMock()
            cursor.execute.side_effect = slow_execute
            cursor.fetchall.return_value = [{"id": 1, "symbol": "CYP2C19"}]
            conn = MagicMock()
            conn.closed = 0
            conn.info.transaction_status = extensions.TRANSACTION_STATUS_IDLE
            conn.cursor.return_value.__enter__.return_value = cursor
            conn.cursor.return_value.__exit__.return_value = False
            with lock:
                state["opened"] += 1
            return conn

        monkeypatch.setattr(psycopg2, "connect", connect)
        return state

    def test_no_connections_opened_at_startup(self, fake_connect):
        PostgresReferenceStore.connect("db", 5432, "phenoguard", "postgres", None)
        assert fake_connect["opened"] == 0

    def test_lookups_beyond_pool_size_wait_for_a_connection(self, fake_connect):
        pg_store = PostgresReferenceStore.connect(
            "db", 5432, "phenoguard", "postgres", None, max_connections=2
        )

        with ThreadPoolExecutor(max_workers=8) as executor:
            genes = list(executor.map(lambda _: pg_store.find_gene_by_symbol("CYP2C19"), range(8)))

        assert [gene.symbol for gene in genes] == ["CYP2C19"] * 8
        assert fake_connect["peak"] <= 2
        assert fake_connect["opened"] <= 2

    def test_unreachable_database_fails_each_lookup(self, monkeypatch):
        def refuse(*args, **kwargs):
            raise psycopg2.OperationalError("could not connect to server")

        monkeypatch.setattr(psycopg2, "connect", refuse)
        pg_store = PostgresReferenceStore.connect(
            "db", 5432, "phenoguard", "postgres", None, max_connections=1
        )

        # the second lookup must not block on a slot leaked by the first
        for _ in range(2):
            with pytest.raises(StoreError):
                pg_store.find_gene_by_symbol("CYP2C19")
