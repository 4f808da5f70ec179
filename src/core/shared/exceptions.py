"""
Exceções de Domínio do Back Office.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.

Hierarquia:
    DomainException (base)
    ├── ValidationError (entrada inválida do chamador)
    ├── ReportValidationError (denúncia não passa nas regras de validação)
    ├── EntityNotFoundError (entidade não existe)
    └── StoreUnavailableError (falha do document store)

Autorização não é verificada aqui: é responsabilidade do chamador.
"""

from typing import List, Optional


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Todas as exceções específicas do domínio devem herdar desta classe.
    Isso permite capturar qualquer erro de domínio de forma genérica.

    Example:
        try:
            service.execute(ticket_id)
        except DomainException as e:
            logger.error(f"Erro de domínio: {e}")
    """

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.

    Lançada quando o chamador fornece um valor que o domínio não
    reconhece (ex: status desconhecido) ou omite um campo obrigatório.

    Example:
        if status is None:
            raise ValidationError(f"Status inválido: {raw}", field="status")
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class ReportValidationError(DomainException):
    """
    Denúncia reprovada na validação.

    Carrega a lista completa de mensagens legíveis produzida por
    ``ReportEntity.validate()``. A denúncia nunca é corrigida
    silenciosamente: o chamador recebe todas as mensagens de uma vez.

    Attributes:
        errors: Mensagens de validação, na ordem em que foram detectadas
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        message = "; ".join(self.errors) or "Denúncia inválida"
        super().__init__(message, "VALIDATION_FAILED")

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["errors"] = list(self.errors)
        return result


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Lançada quando uma busca por ID não retorna resultado.
    Nunca é re-tentada pelo domínio.

    Example:
        ticket = repo.get_by_id(ticket_id)
        if not ticket:
            raise EntityNotFoundError(f"Ticket {ticket_id} não encontrado")
    """

    def __init__(self, message: str, entity_type: str = None, entity_id: str = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class StoreUnavailableError(DomainException):
    """
    Falha do document store subjacente.

    Propagada sem alteração até o chamador. O domínio não faz retry
    nem circuit breaking; quem decide repetir a ação é a camada externa.

    Attributes:
        operation: Operação do store que falhou (create, get, query, update)
        collection: Coleção envolvida
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        collection: Optional[str] = None,
    ):
        self.operation = operation
        self.collection = collection
        super().__init__(message, "STORE_UNAVAILABLE")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.operation:
            result["operation"] = self.operation
        if self.collection:
            result["collection"] = self.collection
        return result
