"""
Document store em memória e utilitários de ordenação.

O InMemoryDocumentStore implementa o port DocumentStore sem nenhuma
infraestrutura. Útil para:
- Testes unitários
- Prototipagem
- Desenvolvimento local (STORE_BACKEND=memory)

Não usar em produção!
"""

from copy import deepcopy
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging
import uuid

from .exceptions import EntityNotFoundError
from .interfaces import Document
from .timestamps import to_datetime

logger = logging.getLogger(__name__)


def _sort_key(value: Any) -> Tuple[int, Any]:
    """
    Chave de ordenação tolerante a tipos mistos.

    Timestamps (nativos ou ISO) são comparados como datetime;
    documentos sem o campo vão para o fim da ordem crescente.
    """
    if value is None:
        return (0, 0)
    if isinstance(value, (datetime, str)):
        moment = to_datetime(value)
        if moment is not None:
            return (1, moment.timestamp())
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (1, float(value))
    return (2, str(value))


def order_documents(
    documents: Iterable[Tuple[str, Document]],
    order_by: Optional[str] = None,
) -> List[Tuple[str, Document]]:
    """
    Ordena pares (id, campos) por um campo.

    Args:
        documents: Pares (id, campos)
        order_by: Nome do campo; prefixo "-" inverte a ordem

    Returns:
        Nova lista ordenada (estável)
    """
    items = list(documents)
    if not order_by:
        return items

    descending = order_by.startswith("-")
    field_name = order_by.lstrip("-")
    return sorted(
        items,
        key=lambda item: _sort_key(item[1].get(field_name)),
        reverse=descending,
    )


def matches(fields: Document, where: Optional[Document]) -> bool:
    """Verifica igualdade de todos os filtros."""
    if not where:
        return True
    return all(fields.get(key) == value for key, value in where.items())


class InMemoryDocumentStore:
    """
    Implementação em memória do DocumentStore.

    Guarda cópias profundas dos documentos, de forma que nenhum
    chamador compartilhe estado mutável com o store.

    Example:
        store = InMemoryDocumentStore()
        doc_id = store.create("reports", {"status": "pending"})
        store.update("reports", doc_id, {"status": "approved"})
        store.get("reports", doc_id)["status"]  # "approved"
    """

    def __init__(self):
        self._collections: Dict[str, Dict[str, Document]] = {}

    def create(self, collection: str, fields: Document) -> str:
        doc_id = uuid.uuid4().hex
        self._collections.setdefault(collection, {})[doc_id] = deepcopy(fields)
        logger.debug(f"Documento criado: {collection}/{doc_id}")
        return doc_id

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        fields = self._collections.get(collection, {}).get(doc_id)
        return deepcopy(fields) if fields is not None else None

    def query(
        self,
        collection: str,
        where: Optional[Document] = None,
        order_by: Optional[str] = None,
    ) -> List[Tuple[str, Document]]:
        found = [
            (doc_id, deepcopy(fields))
            for doc_id, fields in self._collections.get(collection, {}).items()
            if matches(fields, where)
        ]
        return order_documents(found, order_by)

    def update(self, collection: str, doc_id: str, fields: Document) -> None:
        documents = self._collections.get(collection, {})
        if doc_id not in documents:
            raise EntityNotFoundError(
                f"Documento {collection}/{doc_id} não encontrado",
                entity_type=collection,
                entity_id=doc_id,
            )
        documents[doc_id].update(deepcopy(fields))
        logger.debug(f"Documento atualizado: {collection}/{doc_id}")

    def count(self, collection: str) -> int:
        """Total de documentos na coleção."""
        return len(self._collections.get(collection, {}))

    def clear(self) -> None:
        """Limpa todos os dados (útil para testes)."""
        self._collections.clear()
