"""
Exceções de Domínio do Helpdesk.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.

Hierarquia:
    DomainException (base)
    ├── ValidationError (entrada inválida)
    ├── NotFoundError (entidade não existe)
    ├── ForbiddenError (papel/dono não autorizado)
    ├── ConflictError (estado incompatível com a operação)
    └── StorageError (falha do armazenamento)
        └── PartialMergeError (merge aplicado só no ticket de origem)
"""

from typing import Optional


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Todas as exceções específicas do domínio herdam desta classe,
    permitindo capturar qualquer erro de domínio de forma genérica.

    Example:
        try:
            service.execute(dto, actor)
        except DomainException as e:
            logger.error("Domain error: %s", e)
    """

    def __init__(self, message: str, code: Optional[str] = None):
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

    Example:
        if not subject.strip():
            raise ValidationError("Subject is required", field="subject")
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class NotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Example:
        ticket = repo.get_by_id(ticket_id)
        if ticket is None:
            raise NotFoundError.for_entity("Ticket", ticket_id)
    """

    def __init__(
        self,
        message: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "NOT_FOUND")

    @classmethod
    def for_entity(cls, entity_type: str, entity_id: str) -> "NotFoundError":
        return cls(
            f"{entity_type} {entity_id} not found",
            entity_type=entity_type,
            entity_id=entity_id,
        )

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class ForbiddenError(DomainException):
    """
    O ator não tem permissão para a operação.

    `action` identifica a ação recusada (ex: "delete_ticket"),
    para que a camada externa traduza em 403 sem inspecionar a mensagem.
    """

    def __init__(self, message: str, action: Optional[str] = None):
        self.action = action
        super().__init__(message, "FORBIDDEN")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.action:
            result["action"] = self.action
        return result


class ConflictError(DomainException):
    """
    Estado atual da entidade é incompatível com a operação.

    Example:
        if source.merged_into:
            raise ConflictError("Ticket already merged", rule="source_not_merged")
    """

    def __init__(self, message: str, rule: Optional[str] = None):
        self.rule = rule
        super().__init__(message, "CONFLICT")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class StorageError(DomainException):
    """
    Falha do backend de armazenamento.

    Adapters traduzem exceções de driver/ORM para esta classe,
    encadeando a original via ``raise ... from``.
    """

    def __init__(self, message: str, operation: Optional[str] = None):
        self.operation = operation
        super().__init__(message, "STORAGE_ERROR")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.operation:
            result["operation"] = self.operation
        return result


class PartialMergeError(StorageError):
    """
    Merge não atômico falhou depois de gravar o ticket de origem.

    O ticket de origem já está fechado e apontando para o destino, mas
    a entrada `merged{from}` do destino não foi registrada. Carrega os
    dois ids para uma rotina de reconciliação.
    """

    def __init__(self, message: str, source_id: str, target_id: str):
        self.source_id = source_id
        self.target_id = target_id
        super().__init__(message, operation="merge")
        self.code = "PARTIAL_MERGE"

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["source_id"] = self.source_id
        result["target_id"] = self.target_id
        return result
