"""
Core Domain Layer - O Hexágono.

Motor de workflow do back office: denúncias (reports), tickets de
suporte e métricas de SLA.

Características:
- Zero dependências externas (Django, Celery, etc.)
- 100% testável sem banco de dados
- Consome um DocumentStore genérico; não conhece a tecnologia de storage
"""
