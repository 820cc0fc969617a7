"""
Entidades do Domínio de Tickets.

Este módulo define as entidades de domínio que encapsulam
regras de negócio relacionadas a tickets de suporte.

Entidades:
- TicketEntity: Agregado principal do domínio
- TicketStatus, TicketPriority, TicketCategory, TicketSentiment

Regras de Negócio Encapsuladas:
- Validação de assunto e categoria na criação
- Ticket mesclado fica fechado e não muda mais de status
- Verificação de atraso baseada no prazo (due_by)

O prazo em si é calculado pela SLAPolicy (helpdesk.core.sla); a
entidade apenas o armazena.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional
import uuid

from helpdesk.core.shared.clock import utc_now
from helpdesk.core.shared.exceptions import ConflictError, ValidationError


def parse_enum(enum_cls, value, field_name: str):
    """
    Converte string para membro de enum.

    Aceita o próprio membro, o nome (IN_PROGRESS), o valor de
    apresentação (in-progress) e a grafia de armazenamento
    (in_progress), sem diferenciar caixa.

    Raises:
        ValidationError: Se valor desconhecido
    """
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Valor inválido para {field_name}: {value!r}", field=field_name)

    normalized = value.strip().lower().replace("_", "-").replace(" ", "-")
    for member in enum_cls:
        if member.value == normalized:
            return member

    raise ValidationError(f"Valor inválido para {field_name}: {value}", field=field_name)


class StorageSpellingMixin:
    """Grafia usada nas tabelas (underscore em vez de hífen)."""

    @property
    def storage_value(self) -> str:
        return self.value.replace("-", "_")


class TicketStatus(StorageSpellingMixin, Enum):
    """
    Estados possíveis de um ticket.

    Qualquer transição entre estados é permitida para a equipe;
    a única restrição é que um ticket mesclado não muda mais de status.
    """

    OPEN = "open"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"

    @property
    def is_terminal(self) -> bool:
        """Resolvido/fechado: prazo congelado, não entra em atraso."""
        return self in (TicketStatus.RESOLVED, TicketStatus.CLOSED)

    @classmethod
    def from_string(cls, value) -> "TicketStatus":
        return parse_enum(cls, value, "status")


class TicketPriority(StorageSpellingMixin, Enum):
    """Níveis de prioridade (o prazo de cada um vem da SLAPolicy)."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_string(cls, value) -> "TicketPriority":
        return parse_enum(cls, value, "priority")


class TicketCategory(StorageSpellingMixin, Enum):
    """Categorias fixas de atendimento."""

    EMAIL = "email"
    ACCOUNT_LOGIN = "account-login"
    PASSWORD_RESET = "password-reset"
    HARDWARE = "hardware"
    SOFTWARE = "software"
    NETWORK_VPN = "network-vpn"
    OTHER = "other"

    @classmethod
    def from_string(cls, value) -> "TicketCategory":
        return parse_enum(cls, value, "category")


class TicketSentiment(StorageSpellingMixin, Enum):
    """Sentimento percebido do solicitante (apenas informativo)."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    FRUSTRATED = "frustrated"
    ANGRY = "angry"

    @classmethod
    def from_string(cls, value) -> "TicketSentiment":
        return parse_enum(cls, value, "sentiment")


@dataclass
class TicketEntity:
    """
    Entidade de Domínio: Ticket.

    Agregado principal do helpdesk.

    Invariantes:
    - Assunto obrigatório, não vazio, até 200 caracteres
    - Categoria sempre pertence à enumeração fixa
    - due_by acompanha a prioridade atual (recalculado pelo caso de uso)
    - Ticket mesclado está fechado e não muda mais de status

    Attributes:
        id: Identificador único (UUID)
        number: Sequência legível, atribuída pelo repositório no insert
        subject: Assunto do ticket
        description: Descrição (opcional)
        category: Categoria
        priority: Prioridade
        status: Estado atual
        sentiment: Sentimento percebido (informativo)
        employee_name: Nome do solicitante
        department: Departamento do solicitante
        ticket_date: Data de abertura (filtros por período)
        resolution_notes: Notas de resolução (públicas)
        internal_notes: Notas internas (nunca expostas a USER)
        attachment_url: Referência a anexo (armazenado fora do núcleo)
        created_by: ID de quem abriu o ticket
        assigned_to: ID do técnico responsável
        merged_into: ID do ticket de destino, se mesclado
        created_at: Data/hora de criação
        updated_at: Data/hora da última atualização
        due_by: Prazo derivado da prioridade

    Example:
        ticket = TicketEntity.create(
            subject="VPN caiu",
            category=TicketCategory.NETWORK_VPN,
            created_by="user-1",
            due_by=sla.due_by(TicketPriority.HIGH, now),
            priority=TicketPriority.HIGH,
            now=now,
        )
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    number: Optional[int] = None

    subject: str = ""
    description: str = ""
    category: TicketCategory = TicketCategory.OTHER
    priority: TicketPriority = TicketPriority.MEDIUM
    status: TicketStatus = TicketStatus.OPEN
    sentiment: TicketSentiment = TicketSentiment.NEUTRAL

    employee_name: str = ""
    department: str = ""
    ticket_date: date = field(default_factory=lambda: utc_now().date())

    resolution_notes: Optional[str] = None
    internal_notes: Optional[str] = None
    attachment_url: Optional[str] = None

    created_by: str = ""
    assigned_to: Optional[str] = None
    merged_into: Optional[str] = None

    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    due_by: Optional[datetime] = None

    SUBJECT_MAX_LENGTH = 200

    @classmethod
    def create(
        cls,
        subject: str,
        category,
        created_by: str,
        due_by: datetime,
        now: datetime,
        priority: TicketPriority = TicketPriority.MEDIUM,
        status: TicketStatus = TicketStatus.OPEN,
        description: str = "",
        sentiment: TicketSentiment = TicketSentiment.NEUTRAL,
        employee_name: str = "",
        department: str = "",
        ticket_date: Optional[date] = None,
        resolution_notes: Optional[str] = None,
        internal_notes: Optional[str] = None,
        attachment_url: Optional[str] = None,
        assigned_to: Optional[str] = None,
    ) -> "TicketEntity":
        """
        Factory method para criar ticket com validações.

        Raises:
            ValidationError: Assunto vazio, categoria ausente/desconhecida
                ou criador ausente
        """
        clean_subject = cls.validate_subject(subject)
        if category is None or category == "":
            raise ValidationError("Categoria é obrigatória", field="category")
        category = TicketCategory.from_string(category)
        if not created_by:
            raise ValidationError("Criador é obrigatório", field="created_by")

        return cls(
            subject=clean_subject,
            description=(description or "").strip(),
            category=category,
            priority=TicketPriority.from_string(priority),
            status=TicketStatus.from_string(status),
            sentiment=TicketSentiment.from_string(sentiment),
            employee_name=employee_name or "",
            department=department or "",
            ticket_date=ticket_date or now.date(),
            resolution_notes=resolution_notes,
            internal_notes=internal_notes,
            attachment_url=attachment_url,
            created_by=created_by,
            assigned_to=assigned_to or None,
            created_at=now,
            updated_at=now,
            due_by=due_by,
        )

    @classmethod
    def validate_subject(cls, subject: Optional[str]) -> str:
        """Valida e normaliza o assunto."""
        if subject is None or not subject.strip():
            raise ValidationError("Assunto é obrigatório", field="subject")

        clean = subject.strip()
        if len(clean) > cls.SUBJECT_MAX_LENGTH:
            raise ValidationError(
                f"Assunto deve ter no máximo {cls.SUBJECT_MAX_LENGTH} caracteres",
                field="subject",
            )
        return clean

    def change_status(self, new_status: TicketStatus) -> Optional[TicketStatus]:
        """
        Altera o status.

        Returns:
            Status anterior, ou None se não houve mudança

        Raises:
            ConflictError: Se o ticket já foi mesclado
        """
        if new_status == self.status:
            return None
        if self.is_merged:
            raise ConflictError(
                f"Ticket {self.id} foi mesclado em {self.merged_into}; status é final",
                rule="merged_ticket_status_final",
            )
        previous = self.status
        self.status = new_status
        return previous

    def change_priority(
        self, new_priority: TicketPriority, due_by: datetime
    ) -> Optional[TicketPriority]:
        """
        Altera a prioridade e grava o novo prazo.

        O prazo é sempre regravado, mesmo sem mudança de prioridade.

        Returns:
            Prioridade anterior, ou None se não houve mudança
        """
        self.due_by = due_by
        if new_priority == self.priority:
            return None
        previous = self.priority
        self.priority = new_priority
        return previous

    def assign(self, agent_id: Optional[str]) -> bool:
        """Atribui (ou remove atribuição). Retorna True se mudou."""
        agent_id = agent_id or None
        if agent_id == self.assigned_to:
            return False
        self.assigned_to = agent_id
        return True

    def set_resolution_notes(self, notes: Optional[str]) -> bool:
        """
        Grava notas de resolução.

        Returns:
            True se as notas mudaram para um valor não vazio (gera
            `note_added`); limpar as notas ou gravar apenas espaços
            não gera entrada.
        """
        if notes == self.resolution_notes:
            return False
        self.resolution_notes = notes
        return bool(notes and notes.strip())

    def merge_into(self, target: "TicketEntity") -> None:
        """
        Mescla este ticket (origem) no destino.

        Raises:
            ValidationError: Origem e destino iguais
            ConflictError: Origem já mesclada/fechada ou destino já mesclado
        """
        if target.id == self.id:
            raise ValidationError(
                "Ticket não pode ser mesclado em si mesmo", field="target_id"
            )
        if self.is_merged:
            raise ConflictError(
                f"Ticket {self.id} já foi mesclado em {self.merged_into}",
                rule="source_already_merged",
            )
        if self.status == TicketStatus.CLOSED:
            raise ConflictError(
                f"Ticket {self.id} está fechado", rule="source_closed"
            )
        if target.is_merged:
            raise ConflictError(
                f"Ticket de destino {target.id} já foi mesclado",
                rule="target_already_merged",
            )

        self.merged_into = target.id
        self.status = TicketStatus.CLOSED

    def touch(self, now: datetime) -> None:
        self.updated_at = now

    def is_overdue(self, now: datetime) -> bool:
        """
        Verifica atraso.

        Resolvido/fechado nunca está atrasado (prazo congelado).
        """
        if self.due_by is None or self.status.is_terminal:
            return False
        return now > self.due_by

    @property
    def is_merged(self) -> bool:
        return self.merged_into is not None

    @property
    def is_assigned(self) -> bool:
        return self.assigned_to is not None

    def __repr__(self) -> str:
        return (
            f"TicketEntity("
            f"id={self.id[:8]}..., "
            f"number={self.number}, "
            f"subject='{self.subject[:20]}', "
            f"status={self.status.value}, "
            f"priority={self.priority.value}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TicketEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
