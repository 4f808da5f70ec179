"""
Testes do InMemoryDocumentStore e da normalização de timestamps.

Coverage:
- create/get/query/update do store em memória
- Ordenação com timestamps mistos (datetime nativo e ISO-8601)
- to_datetime / hours_between
- Serialização de exceções
"""

import logging
from datetime import date, datetime, timedelta, timezone

import pytest

from src.core.shared.documents import InMemoryDocumentStore, order_documents
from src.core.shared.exceptions import (
    EntityNotFoundError,
    ReportValidationError,
    StoreUnavailableError,
    ValidationError,
)
from src.core.shared.interfaces import DocumentStore
from src.core.shared.timestamps import hours_between, to_datetime


class TestInMemoryDocumentStore:
    """Testes para o store em memória."""

    def test_implementa_protocolo(self, store):
        assert isinstance(store, DocumentStore)

    def test_create_e_get(self, store):
        doc_id = store.create("reports", {"status": "pending"})

        assert doc_id
        assert store.get("reports", doc_id) == {"status": "pending"}
        assert store.count("reports") == 1

    def test_get_inexistente_retorna_none(self, store):
        assert store.get("reports", "nao-existe") is None

    def test_colecoes_sao_isoladas(self, store):
        doc_id = store.create("reports", {"a": 1})

        assert store.get("support_tickets", doc_id) is None

    def test_get_devolve_copia(self, store):
        """Alterar o dicionário devolvido não altera o store."""
        doc_id = store.create("reports", {"tags": ["a"]})

        data = store.get("reports", doc_id)
        data["tags"].append("b")

        assert store.get("reports", doc_id) == {"tags": ["a"]}

    def test_update_sobrescreve_campos(self, store):
        doc_id = store.create("reports", {"status": "pending", "userId": "u1"})

        store.update("reports", doc_id, {"status": "approved"})

        assert store.get("reports", doc_id) == {"status": "approved", "userId": "u1"}

    def test_update_inexistente_lanca_erro(self, store):
        with pytest.raises(EntityNotFoundError):
            store.update("reports", "nao-existe", {"status": "approved"})

    def test_query_filtra_por_igualdade(self, store):
        store.create("support_tickets", {"status": "pending"})
        escalated_id = store.create("support_tickets", {"status": "escalated"})

        rows = store.query("support_tickets", where={"status": "escalated"})

        assert [doc_id for doc_id, _ in rows] == [escalated_id]

    def test_query_ordena_decrescente_com_timestamps_mistos(self, store):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        old_id = store.create("reports", {"createdAt": base})
        new_id = store.create("reports", {"createdAt": "2024-01-03T00:00:00Z"})
        mid_id = store.create("reports", {"createdAt": base + timedelta(days=1)})

        rows = store.query("reports", order_by="-createdAt")

        assert [doc_id for doc_id, _ in rows] == [new_id, mid_id, old_id]

    def test_clear(self, store):
        store.create("reports", {})
        store.clear()

        assert store.count("reports") == 0


class TestOrderDocuments:
    """Testes para a ordenação de documentos."""

    def test_sem_campo_mantem_ordem(self):
        rows = [("b", {}), ("a", {})]

        assert order_documents(rows) == rows

    def test_documento_sem_campo_vai_para_o_fim_na_ordem_decrescente(self):
        rows = [("sem", {}), ("com", {"escalatedAt": "2024-01-01T00:00:00Z"})]

        ordered = order_documents(rows, "-escalatedAt")

        assert [doc_id for doc_id, _ in ordered] == ["com", "sem"]


class TestToDatetime:
    """Testes para normalização de timestamps."""

    def test_iso_com_z(self):
        assert to_datetime("2024-03-01T10:00:00Z") == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)

    def test_datetime_naive_e_tratado_como_utc(self):
        assert to_datetime(datetime(2024, 3, 1, 10)).tzinfo == timezone.utc

    def test_datetime_com_outro_fuso_e_convertido(self):
        brt = timezone(timedelta(hours=-3))

        assert to_datetime(datetime(2024, 3, 1, 7, tzinfo=brt)) == datetime(
            2024, 3, 1, 10, tzinfo=timezone.utc
        )

    def test_date(self):
        assert to_datetime(date(2024, 3, 1)) == datetime(2024, 3, 1, tzinfo=timezone.utc)

    def test_epoch(self):
        assert to_datetime(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("raw,microsecond", [
        ("2024-03-01T10:00:00.5Z", 500000),
        ("2024-03-01T10:00:00.12Z", 120000),
        ("2024-03-01T10:00:00.123456789Z", 123456),
    ])
    def test_fracao_de_segundos_com_qualquer_precisao(self, raw, microsecond):
        assert to_datetime(raw) == datetime(2024, 3, 1, 10, 0, 0, microsecond, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "ontem", True])
    def test_valores_ilegiveis(self, value):
        assert to_datetime(value) is None

    def test_string_ilegivel_gera_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="src.core.shared.timestamps"):
            assert to_datetime("ontem") is None

        assert "ontem" in caplog.text

    def test_string_vazia_nao_gera_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="src.core.shared.timestamps"):
            assert to_datetime("   ") is None

        assert "Timestamp" not in caplog.text

    def test_hours_between(self):
        start = datetime(2024, 3, 1, tzinfo=timezone.utc)

        assert hours_between(start, start + timedelta(hours=5, minutes=30)) == 5.5
        assert hours_between(start, None) is None


class TestExceptions:
    """Testes para serialização das exceções de domínio."""

    def test_validation_error_inclui_campo(self):
        error = ValidationError("Status inválido: foo", field="status")

        assert error.code == "VALIDATION_ERROR_STATUS"
        assert error.to_dict() == {
            "error": "VALIDATION_ERROR_STATUS",
            "message": "Status inválido: foo",
            "field": "status",
        }

    def test_report_validation_error_lista_mensagens(self):
        error = ReportValidationError(["Reason is required", "Image evidence is required"])

        assert error.to_dict()["errors"] == ["Reason is required", "Image evidence is required"]
        assert "Reason is required" in str(error)

    def test_store_unavailable(self):
        error = StoreUnavailableError("offline", operation="query", collection="reports")

        assert error.to_dict()["operation"] == "query"
        assert error.code == "STORE_UNAVAILABLE"
