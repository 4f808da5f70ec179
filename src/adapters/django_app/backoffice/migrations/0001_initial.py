"""
Migration inicial do back office.

Cria as tabelas:
- backoffice_documents: Document store
- domain_events: Event Store
"""

import django.core.serializers.json
import django.utils.timezone
from django.db import migrations, models

import src.adapters.django_app.backoffice.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='StoredDocument',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    default=src.adapters.django_app.backoffice.models.new_document_id,
                    editable=False,
                    help_text='ID opaco do documento',
                )),
                ('collection', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='Coleção a que o documento pertence',
                )),
                ('data', models.JSONField(
                    default=dict,
                    encoder=django.core.serializers.json.DjangoJSONEncoder,
                    help_text='Campos do documento',
                )),
                ('created_at', models.DateTimeField(
                    default=django.utils.timezone.now,
                    db_index=True,
                )),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'backoffice_documents',
                'verbose_name': 'Documento',
                'verbose_name_plural': 'Documentos',
                'indexes': [
                    models.Index(
                        fields=['collection', 'created_at'],
                        name='backoffice__collect_6f1a2b_idx',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='DomainEventModel',
            fields=[
                ('event_id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    help_text='UUID único do evento',
                )),
                ('event_type', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='Tipo do evento (ex: TicketEscalatedEvent)',
                )),
                ('aggregate_type', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='Tipo do agregado (Report ou SupportTicket)',
                )),
                ('aggregate_id', models.CharField(
                    max_length=36,
                    db_index=True,
                    help_text='ID do documento que gerou o evento',
                )),
                ('event_data', models.JSONField(
                    default=dict,
                    encoder=django.core.serializers.json.DjangoJSONEncoder,
                    help_text='Dados serializados do evento',
                )),
                ('version', models.IntegerField(default=1)),
                ('sequence', models.BigIntegerField(
                    default=0,
                    help_text='Posição do evento dentro da operação',
                )),
                ('occurred_at', models.DateTimeField(help_text='Quando o evento ocorreu')),
                ('recorded_at', models.DateTimeField(
                    auto_now_add=True,
                    help_text='Quando o evento foi persistido',
                )),
            ],
            options={
                'db_table': 'domain_events',
                'verbose_name': 'Evento de Domínio',
                'verbose_name_plural': 'Eventos de Domínio',
                'ordering': ['recorded_at', 'sequence'],
                'indexes': [
                    models.Index(
                        fields=['aggregate_id', 'sequence'],
                        name='domain_even_aggrega_3c9d1e_idx',
                    ),
                    models.Index(
                        fields=['event_type', 'recorded_at'],
                        name='domain_even_event_t_8b2f4a_idx',
                    ),
                ],
            },
        ),
    ]
