"""
Data Transfer Objects (DTOs) do Domínio de Tickets.

DTOs são estruturas simples para transportar dados entre camadas,
evitando vazamento das entidades para camadas externas.

Tipos de DTOs:
- Input DTOs: Dados de entrada (criação, atualização parcial, merge)
- Output DTOs: Dados de resposta (ticket, estatísticas)
- Query DTOs: Filtros de listagem
"""

from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Any, Dict, Optional

from .entities import (
    TicketCategory,
    TicketEntity,
    TicketPriority,
    TicketStatus,
)


class _Unset:
    """Marcador de campo ausente em atualizações parciais."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CreateTicketInputDTO:
    """
    DTO de entrada para criar ticket.

    Enums chegam como string (grafia de apresentação, nome ou
    grafia de armazenamento) e são convertidos pelo caso de uso.

    Attributes:
        subject: Assunto (obrigatório)
        category: Categoria (obrigatória)
        priority: Prioridade (default: medium)
        status: Status inicial (default: open; ignorado para USER)
        internal_notes: Notas internas (ignoradas para USER)
    """

    subject: str
    category: Optional[str]
    description: str = ""
    priority: Optional[str] = None
    status: Optional[str] = None
    sentiment: Optional[str] = None
    employee_name: Optional[str] = None
    department: Optional[str] = None
    ticket_date: Optional[date] = None
    resolution_notes: Optional[str] = None
    internal_notes: Optional[str] = None
    attachment_url: Optional[str] = None
    assigned_to: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            f.name: (
                getattr(self, f.name).isoformat()
                if isinstance(getattr(self, f.name), date)
                else getattr(self, f.name)
            )
            for f in fields(self)
        }


@dataclass(frozen=True)
class UpdateTicketInputDTO:
    """
    DTO de atualização parcial.

    Cada campo começa como UNSET; apenas campos informados são
    aplicados. `assigned_to=None` remove a atribuição, enquanto
    `assigned_to` omitido não mexe nela.

    Example:
        UpdateTicketInputDTO(priority="high", assigned_to=None)
    """

    subject: Any = UNSET
    description: Any = UNSET
    category: Any = UNSET
    priority: Any = UNSET
    status: Any = UNSET
    sentiment: Any = UNSET
    assigned_to: Any = UNSET
    resolution_notes: Any = UNSET
    internal_notes: Any = UNSET
    employee_name: Any = UNSET
    department: Any = UNSET
    ticket_date: Any = UNSET
    attachment_url: Any = UNSET

    def provided_fields(self) -> Dict[str, Any]:
        """Campos informados, na ordem de declaração."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }


@dataclass(frozen=True)
class MergeTicketsInputDTO:
    """
    DTO de entrada para mesclar tickets.

    Attributes:
        source_id: Ticket duplicado (será fechado)
        target_id: Ticket canônico
    """

    source_id: str
    target_id: str

    def to_dict(self) -> dict:
        return {"source_id": self.source_id, "target_id": self.target_id}


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class TicketOutputDTO:
    """
    DTO de saída com dados do ticket e contadores derivados.

    `internal_notes` é None quando o chamador é USER.
    """

    id: str
    number: Optional[int]
    subject: str
    description: str
    category: str
    priority: str
    status: str
    sentiment: str
    employee_name: str
    department: str
    ticket_date: Optional[date]
    resolution_notes: Optional[str]
    internal_notes: Optional[str]
    attachment_url: Optional[str]
    created_by: str
    assigned_to: Optional[str]
    merged_into: Optional[str]
    created_at: datetime
    updated_at: datetime
    due_by: Optional[datetime]
    is_overdue: bool
    comment_count: int = 0
    public_comment_count: int = 0

    @classmethod
    def from_entity(
        cls,
        entity: TicketEntity,
        now: datetime,
        comment_count: int = 0,
        public_comment_count: int = 0,
        include_internal: bool = True,
    ) -> "TicketOutputDTO":
        """
        Factory method para converter entidade em DTO.

        Args:
            entity: Ticket
            now: Instante de referência para `is_overdue`
            comment_count: Total de comentários
            public_comment_count: Comentários públicos
            include_internal: False para chamadores USER
        """
        return cls(
            id=entity.id,
            number=entity.number,
            subject=entity.subject,
            description=entity.description,
            category=entity.category.value,
            priority=entity.priority.value,
            status=entity.status.value,
            sentiment=entity.sentiment.value,
            employee_name=entity.employee_name,
            department=entity.department,
            ticket_date=entity.ticket_date,
            resolution_notes=entity.resolution_notes,
            internal_notes=entity.internal_notes if include_internal else None,
            attachment_url=entity.attachment_url,
            created_by=entity.created_by,
            assigned_to=entity.assigned_to,
            merged_into=entity.merged_into,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            due_by=entity.due_by,
            is_overdue=entity.is_overdue(now),
            comment_count=comment_count,
            public_comment_count=public_comment_count,
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        return {
            "id": self.id,
            "number": self.number,
            "subject": self.subject,
            "description": self.description,
            "category": self.category,
            "priority": self.priority,
            "status": self.status,
            "sentiment": self.sentiment,
            "employee_name": self.employee_name,
            "department": self.department,
            "ticket_date": self.ticket_date.isoformat() if self.ticket_date else None,
            "resolution_notes": self.resolution_notes,
            "internal_notes": self.internal_notes,
            "attachment_url": self.attachment_url,
            "created_by": self.created_by,
            "assigned_to": self.assigned_to,
            "merged_into": self.merged_into,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "due_by": self.due_by.isoformat() if self.due_by else None,
            "is_overdue": self.is_overdue,
            "comment_count": self.comment_count,
            "public_comment_count": self.public_comment_count,
        }


@dataclass
class TicketStatsDTO:
    """Contagem de tickets por status."""

    total: int = 0
    open: int = 0
    in_progress: int = 0
    resolved: int = 0
    closed: int = 0

    @classmethod
    def from_counts(cls, counts: Dict[TicketStatus, int]) -> "TicketStatsDTO":
        return cls(
            total=sum(counts.values()),
            open=counts.get(TicketStatus.OPEN, 0),
            in_progress=counts.get(TicketStatus.IN_PROGRESS, 0),
            resolved=counts.get(TicketStatus.RESOLVED, 0),
            closed=counts.get(TicketStatus.CLOSED, 0),
        )

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "open": self.open,
            "in_progress": self.in_progress,
            "resolved": self.resolved,
            "closed": self.closed,
        }


# =============================================================================
# QUERY DTOs (Filtros de Busca)
# =============================================================================

DATE_RANGES = ("today", "week", "month", "year")


@dataclass(frozen=True)
class ListTicketsQueryDTO:
    """
    Parâmetros de busca/filtro de tickets (como chegam da API).

    Attributes:
        category: Filtrar por categoria
        priority: Filtrar por prioridade
        status: Filtrar por status
        search: Texto em employee_name, subject ou department
        date_range: today | week | month | year (sobre ticket_date)
        created_by: Filtrar por solicitante
        assigned_to: Filtrar por técnico
    """

    category: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    search: Optional[str] = None
    date_range: Optional[str] = None
    created_by: Optional[str] = None
    assigned_to: Optional[str] = None

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class TicketFilter:
    """
    Filtro já validado, consumido pelos repositórios.

    Todos os critérios são combinados com AND; `search` é
    case-insensitive e casa com qualquer um dos três campos de texto.
    """

    category: Optional[TicketCategory] = None
    priority: Optional[TicketPriority] = None
    status: Optional[TicketStatus] = None
    search: Optional[str] = None
    ticket_date_from: Optional[date] = None
    created_by: Optional[str] = None
    assigned_to: Optional[str] = None

    def matches(self, ticket: TicketEntity) -> bool:
        """Avaliação em memória (usada pelo InMemoryTicketRepository)."""
        if self.category and ticket.category != self.category:
            return False
        if self.priority and ticket.priority != self.priority:
            return False
        if self.status and ticket.status != self.status:
            return False
        if self.created_by and ticket.created_by != self.created_by:
            return False
        if self.assigned_to and ticket.assigned_to != self.assigned_to:
            return False
        if self.ticket_date_from and (
            ticket.ticket_date is None or ticket.ticket_date < self.ticket_date_from
        ):
            return False
        if self.search:
            needle = self.search.lower()
            haystack = (ticket.employee_name, ticket.subject, ticket.department)
            if not any(needle in (value or "").lower() for value in haystack):
                return False
        return True
