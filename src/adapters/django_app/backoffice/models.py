"""
Django Models do back office.

Estes models são ADAPTERS: não conhecem Report nem Ticket.
O motor enxerga apenas coleções de documentos (DocumentStore),
e cada documento é persistido como JSON em StoredDocument.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- A forma do documento é definida pelos Mappers do Core

Tabelas:
- backoffice_documents: documentos de todas as coleções
- domain_events: Event Store (trilha de auditoria)
"""

import uuid

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone


def new_document_id() -> str:
    return uuid.uuid4().hex


class StoredDocument(models.Model):
    """
    Documento genérico de uma coleção.

    Fields:
        id: ID opaco gerado pelo store
        collection: Nome da coleção (ex: "reports")
        data: Campos do documento (timestamps viram ISO-8601)
        created_at: Quando o documento foi gravado pela primeira vez
        updated_at: Última escrita
    """

    id = models.CharField(
        max_length=36,
        primary_key=True,
        default=new_document_id,
        editable=False,
        help_text="ID opaco do documento"
    )

    collection = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Coleção a que o documento pertence"
    )

    data = models.JSONField(
        default=dict,
        encoder=DjangoJSONEncoder,
        help_text="Campos do documento"
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'backoffice_documents'
        verbose_name = 'Documento'
        verbose_name_plural = 'Documentos'
        indexes = [
            models.Index(fields=['collection', 'created_at'], name='backoffice__collect_6f1a2b_idx'),
        ]

    def __str__(self):
        return f"{self.collection}/{self.id[:8]}"


class DomainEventModel(models.Model):
    """
    Event Store para Domain Events.

    Registro append-only de tudo que os use cases publicaram,
    gravado na mesma transação da alteração do documento.
    """

    event_id = models.CharField(
        max_length=36,
        primary_key=True,
        help_text="UUID único do evento"
    )

    event_type = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Tipo do evento (ex: TicketEscalatedEvent)"
    )

    aggregate_type = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Tipo do agregado (Report ou SupportTicket)"
    )

    aggregate_id = models.CharField(
        max_length=36,
        db_index=True,
        help_text="ID do documento que gerou o evento"
    )

    event_data = models.JSONField(
        default=dict,
        encoder=DjangoJSONEncoder,
        help_text="Dados serializados do evento"
    )

    version = models.IntegerField(default=1)

    sequence = models.BigIntegerField(
        default=0,
        help_text="Posição do evento dentro da operação"
    )

    occurred_at = models.DateTimeField(help_text="Quando o evento ocorreu")

    recorded_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Quando o evento foi persistido"
    )

    class Meta:
        db_table = 'domain_events'
        verbose_name = 'Evento de Domínio'
        verbose_name_plural = 'Eventos de Domínio'
        ordering = ['recorded_at', 'sequence']
        indexes = [
            models.Index(fields=['aggregate_id', 'sequence'], name='domain_even_aggrega_3c9d1e_idx'),
            models.Index(fields=['event_type', 'recorded_at'], name='domain_even_event_t_8b2f4a_idx'),
        ]

    def __str__(self):
        return f"{self.event_type} - {self.aggregate_id[:8]} @ {self.occurred_at}"
