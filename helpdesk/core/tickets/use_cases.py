"""
Use Cases (Application Services) do Domínio de Tickets.

Este módulo contém os casos de uso que orquestram a lógica de negócio
coordenando entidades, repositórios, políticas e o Audit Log.

Use Cases implementados:
- CreateTicketService: Cria ticket e registra `created`
- UpdateTicketService: Atualização parcial com diff auditado
- DeleteTicketService: Exclusão em cascata (staff)
- MergeTicketsService: Mescla duplicado em ticket canônico (staff)
- GetTicketService: Obtém ticket (USER apenas os próprios)
- ListTicketsService: Lista com filtros (USER apenas os próprios)
- TicketStatsService: Contagem por status
- ListOverdueTicketsService: Tickets fora do prazo

Princípios:
- Um Use Case = Uma operação de negócio
- Dependências injetadas (DI), nenhum estado global
- Toda escrita acontece dentro de `with self.uow:`
"""

import calendar
from datetime import date, datetime, timedelta
import logging
from typing import List, Optional, Tuple

from helpdesk.core.access.policy import AccessPolicy, Actor
from helpdesk.core.activity.audit_log import AuditLog
from helpdesk.core.activity.entities import ActivityAction
from helpdesk.core.comments.ports import CommentRepository
from helpdesk.core.shared.clock import Clock, utc_now
from helpdesk.core.shared.exceptions import (
    NotFoundError,
    PartialMergeError,
    StorageError,
    ValidationError,
)
from helpdesk.core.shared.interfaces import UnitOfWork
from helpdesk.core.sla.policy import SLAPolicy

from .dtos import (
    DATE_RANGES,
    CreateTicketInputDTO,
    ListTicketsQueryDTO,
    MergeTicketsInputDTO,
    TicketFilter,
    TicketOutputDTO,
    TicketStatsDTO,
    UpdateTicketInputDTO,
)
from .entities import (
    TicketCategory,
    TicketEntity,
    TicketPriority,
    TicketSentiment,
    TicketStatus,
)
from .events import (
    TicketCreatedEvent,
    TicketDeletedEvent,
    TicketMergedEvent,
    TicketUpdatedEvent,
)
from .ports import TicketRepository

logger = logging.getLogger(__name__)

UNASSIGNED = "unassigned"


def get_ticket_or_raise(ticket_repo: TicketRepository, ticket_id: str) -> TicketEntity:
    """Busca ticket ou lança NotFoundError."""
    ticket = ticket_repo.get_by_id(ticket_id)
    if ticket is None:
        raise NotFoundError.for_entity("Ticket", ticket_id)
    return ticket


def to_output(
    ticket: TicketEntity,
    actor: Actor,
    now: datetime,
    counts: Tuple[int, int] = (0, 0),
    access_policy: Optional[AccessPolicy] = None,
) -> TicketOutputDTO:
    """Monta o DTO de saída, ocultando notas internas para USER."""
    policy = access_policy or AccessPolicy()
    total, public = counts
    return TicketOutputDTO.from_entity(
        ticket,
        now=now,
        comment_count=total,
        public_comment_count=public,
        include_internal=policy.can_view_internal(actor.role),
    )


def _months_back(day: date, months: int) -> date:
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def date_range_start(date_range: Optional[str], today: date) -> Optional[date]:
    """
    Primeiro dia incluído por um período nomeado.

    today = hoje; week = 7 dias atrás; month = 1 mês atrás;
    year = 1 ano atrás. None ou "all" não filtram.

    Raises:
        ValidationError: Período desconhecido
    """
    if not date_range or date_range == "all":
        return None
    if date_range not in DATE_RANGES:
        raise ValidationError(f"Período inválido: {date_range}", field="date_range")
    if date_range == "today":
        return today
    if date_range == "week":
        return today - timedelta(days=7)
    if date_range == "month":
        return _months_back(today, 1)
    return _months_back(today, 12)


def _parse_date(value, field_name: str) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"Data inválida: {value}", field=field_name)


class CreateTicketService:
    """
    Use Case: Criar um novo ticket.

    Fluxo:
    1. Converter/validar enums e campos obrigatórios
    2. Calcular due_by pela SLAPolicy
    3. Persistir (repositório atribui `number`)
    4. Registrar `created{by}` no Audit Log
    5. Disparar TicketCreatedEvent (após commit)

    Chamadores USER sempre abrem com status `open`; notas internas e
    atribuição enviadas por eles são descartadas.

    Example:
        service = CreateTicketService(ticket_repo, audit_log, uow, sla_policy)
        output = service.execute(
            CreateTicketInputDTO(subject="Sem e-mail", category="email"),
            actor,
        )
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        audit_log: AuditLog,
        uow: UnitOfWork,
        sla_policy: SLAPolicy,
        access_policy: Optional[AccessPolicy] = None,
        clock: Clock = utc_now,
    ):
        self.ticket_repo = ticket_repo
        self.audit_log = audit_log
        self.uow = uow
        self.sla_policy = sla_policy
        self.access_policy = access_policy or AccessPolicy()
        self.clock = clock

    def execute(self, input_dto: CreateTicketInputDTO, actor: Actor) -> TicketOutputDTO:
        """
        Raises:
            ValidationError: Assunto vazio, categoria ausente/desconhecida
                ou enum inválido
        """
        priority = (
            TicketPriority.from_string(input_dto.priority)
            if input_dto.priority else TicketPriority.MEDIUM
        )
        status = (
            TicketStatus.from_string(input_dto.status)
            if input_dto.status else TicketStatus.OPEN
        )
        sentiment = (
            TicketSentiment.from_string(input_dto.sentiment)
            if input_dto.sentiment else TicketSentiment.NEUTRAL
        )
        internal_notes = input_dto.internal_notes
        assigned_to = input_dto.assigned_to
        if not self.access_policy.can_mutate_status(actor.role):
            status = TicketStatus.OPEN
        if not self.access_policy.can_view_internal(actor.role):
            internal_notes = None
        if not self.access_policy.can_assign(actor.role):
            assigned_to = None

        with self.uow:
            now = self.clock()
            ticket = TicketEntity.create(
                subject=input_dto.subject,
                category=input_dto.category,
                created_by=actor.id,
                due_by=self.sla_policy.due_by(priority, now),
                now=now,
                priority=priority,
                status=status,
                description=input_dto.description,
                sentiment=sentiment,
                employee_name=input_dto.employee_name or actor.display_name,
                department=input_dto.department or "",
                ticket_date=_parse_date(input_dto.ticket_date, "ticket_date"),
                resolution_notes=input_dto.resolution_notes,
                internal_notes=internal_notes,
                attachment_url=input_dto.attachment_url,
                assigned_to=assigned_to,
            )

            ticket = self.ticket_repo.add(ticket)
            self.audit_log.append(
                ticket.id,
                ActivityAction.CREATED,
                {"by": ticket.employee_name},
                actor_id=actor.id,
                at=now,
            )

            self.uow.publish_event(
                TicketCreatedEvent(
                    aggregate_id=ticket.id,
                    number=ticket.number,
                    created_by=ticket.created_by,
                    subject=ticket.subject,
                    priority=ticket.priority.value,
                    category=ticket.category.value,
                    due_by=ticket.due_by.isoformat() if ticket.due_by else None,
                )
            )

        logger.info(
            "Ticket #%s created by %s (priority=%s)",
            ticket.number, actor.id, ticket.priority.value,
        )
        return to_output(ticket, actor, now, access_policy=self.access_policy)


class UpdateTicketService:
    """
    Use Case: Atualização parcial de ticket com trilha de auditoria.

    Apenas campos informados no DTO são aplicados. Antes de persistir,
    o diff contra os valores armazenados gera, nesta ordem:
    - `status_changed{from,to}` se o status mudou
    - `priority_changed{from,to}` se a prioridade mudou (due_by é
      recalculado sempre que `priority` é informado)
    - `assigned{agent}` se a atribuição mudou ("unassigned" ao remover)
    - `note_added` se resolution_notes mudou para valor não vazio

    USER: apenas o próprio ticket, apenas subject/description/category,
    apenas enquanto open/in-progress. Qualquer outra tentativa lança
    ForbiddenError sem alterar o ticket.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        comment_repo: CommentRepository,
        audit_log: AuditLog,
        uow: UnitOfWork,
        sla_policy: SLAPolicy,
        access_policy: Optional[AccessPolicy] = None,
        clock: Clock = utc_now,
    ):
        self.ticket_repo = ticket_repo
        self.comment_repo = comment_repo
        self.audit_log = audit_log
        self.uow = uow
        self.sla_policy = sla_policy
        self.access_policy = access_policy or AccessPolicy()
        self.clock = clock

    def execute(
        self, ticket_id: str, changes: UpdateTicketInputDTO, actor: Actor
    ) -> TicketOutputDTO:
        """
        Raises:
            NotFoundError: Ticket não existe
            ForbiddenError: Papel/posse não permite a alteração
            ValidationError: Valor inválido
            ConflictError: Mudança de status em ticket mesclado
        """
        provided = changes.provided_fields()

        with self.uow:
            ticket = get_ticket_or_raise(self.ticket_repo, ticket_id)
            self.access_policy.ensure_can_edit_fields(actor, ticket, provided.keys())

            now = self.clock()
            values = self._parse(provided)
            changed_fields, entries = self._apply(ticket, values, now)

            if provided:
                ticket.touch(now)
                self.ticket_repo.save(ticket)

            for action, metadata in entries:
                self.audit_log.append(ticket.id, action, metadata, actor_id=actor.id, at=now)

            if changed_fields:
                self.uow.publish_event(
                    TicketUpdatedEvent(
                        aggregate_id=ticket.id,
                        changed_fields=changed_fields,
                        actor_id=actor.id,
                        assigned_to=ticket.assigned_to,
                        status=ticket.status.value,
                    )
                )

            counts = self.comment_repo.counts_for_tickets([ticket.id])[ticket.id]

        if changed_fields:
            logger.info(
                "Ticket %s updated by %s: %s",
                ticket.id, actor.id, ", ".join(changed_fields),
            )
        return to_output(ticket, actor, now, counts, self.access_policy)

    def _parse(self, provided: dict) -> dict:
        """Converte e valida tudo antes de qualquer mutação."""
        values = dict(provided)
        if "subject" in values:
            values["subject"] = TicketEntity.validate_subject(values["subject"])
        if "description" in values:
            values["description"] = (values["description"] or "").strip()
        if "category" in values:
            values["category"] = TicketCategory.from_string(values["category"])
        if "priority" in values:
            values["priority"] = TicketPriority.from_string(values["priority"])
        if "status" in values:
            values["status"] = TicketStatus.from_string(values["status"])
        if "sentiment" in values:
            values["sentiment"] = TicketSentiment.from_string(values["sentiment"])
        if "ticket_date" in values:
            values["ticket_date"] = _parse_date(values["ticket_date"], "ticket_date")
        if "assigned_to" in values:
            values["assigned_to"] = values["assigned_to"] or None
        return values

    def _apply(self, ticket: TicketEntity, values: dict, now: datetime):
        changed_fields: List[str] = []
        entries: List[Tuple[ActivityAction, dict]] = []

        if "status" in values:
            previous = ticket.change_status(values["status"])
            if previous is not None:
                changed_fields.append("status")
                entries.append((
                    ActivityAction.STATUS_CHANGED,
                    {"from": previous.value, "to": ticket.status.value},
                ))

        if "priority" in values:
            priority = values["priority"]
            previous = ticket.change_priority(priority, self.sla_policy.due_by(priority, now))
            if previous is not None:
                changed_fields.extend(["priority", "due_by"])
                entries.append((
                    ActivityAction.PRIORITY_CHANGED,
                    {"from": previous.value, "to": priority.value},
                ))

        if "assigned_to" in values and ticket.assign(values["assigned_to"]):
            changed_fields.append("assigned_to")
            entries.append((
                ActivityAction.ASSIGNED,
                {"agent": ticket.assigned_to or UNASSIGNED},
            ))

        if "resolution_notes" in values:
            before = ticket.resolution_notes
            if ticket.set_resolution_notes(values["resolution_notes"]):
                entries.append((ActivityAction.NOTE_ADDED, {}))
            if ticket.resolution_notes != before:
                changed_fields.append("resolution_notes")

        for name in (
            "subject", "description", "category", "sentiment", "internal_notes",
            "employee_name", "department", "ticket_date", "attachment_url",
        ):
            if name in values and getattr(ticket, name) != values[name]:
                setattr(ticket, name, values[name])
                changed_fields.append(name)

        return changed_fields, entries


class DeleteTicketService:
    """
    Use Case: Excluir ticket (apenas equipe).

    Remove comentários, depois histórico, depois o ticket, na mesma
    transação. Nenhuma linha órfã permanece acessível pelo ticket_id.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        comment_repo: CommentRepository,
        audit_log: AuditLog,
        uow: UnitOfWork,
        access_policy: Optional[AccessPolicy] = None,
    ):
        self.ticket_repo = ticket_repo
        self.comment_repo = comment_repo
        self.audit_log = audit_log
        self.uow = uow
        self.access_policy = access_policy or AccessPolicy()

    def execute(self, ticket_id: str, actor: Actor) -> None:
        """
        Raises:
            ForbiddenError: Chamador USER
            NotFoundError: Ticket não existe
        """
        self.access_policy.ensure_can_delete_ticket(actor)

        with self.uow:
            get_ticket_or_raise(self.ticket_repo, ticket_id)

            comments_removed = self.comment_repo.delete_for_ticket(ticket_id)
            activity_removed = self.audit_log.purge(ticket_id)
            self.ticket_repo.delete(ticket_id)

            self.uow.publish_event(
                TicketDeletedEvent(
                    aggregate_id=ticket_id,
                    actor_id=actor.id,
                    comments_removed=comments_removed,
                    activity_removed=activity_removed,
                )
            )

        logger.info(
            "Ticket %s deleted by %s (%d comments, %d activity entries)",
            ticket_id, actor.id, comments_removed, activity_removed,
        )


class MergeTicketsService:
    """
    Use Case: Mesclar ticket duplicado (origem) em ticket canônico (destino).

    Origem recebe merged_into=destino e status closed; cada lado recebe
    uma entrada `merged` referenciando o outro. Não há "unmerge".

    Ordem de escrita: origem (ticket + entrada), depois destino. Se o
    backend não for atômico (`uow.atomic` False) e a escrita do destino
    falhar, lança PartialMergeError em vez de reportar sucesso.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        audit_log: AuditLog,
        uow: UnitOfWork,
        access_policy: Optional[AccessPolicy] = None,
        clock: Clock = utc_now,
    ):
        self.ticket_repo = ticket_repo
        self.audit_log = audit_log
        self.uow = uow
        self.access_policy = access_policy or AccessPolicy()
        self.clock = clock

    def execute(self, input_dto: MergeTicketsInputDTO, actor: Actor) -> None:
        """
        Raises:
            ForbiddenError: Chamador USER
            ValidationError: Origem e destino iguais
            NotFoundError: Origem ou destino não existe
            ConflictError: Origem mesclada/fechada ou destino mesclado
            PartialMergeError: Destino falhou após gravar a origem
        """
        self.access_policy.ensure_can_merge(actor)
        source_id, target_id = input_dto.source_id, input_dto.target_id
        if source_id == target_id:
            raise ValidationError(
                "Ticket não pode ser mesclado em si mesmo", field="target_id"
            )

        with self.uow:
            source = get_ticket_or_raise(self.ticket_repo, source_id)
            target = get_ticket_or_raise(self.ticket_repo, target_id)

            now = self.clock()
            source.merge_into(target)
            source.touch(now)
            self.ticket_repo.save(source)
            self.audit_log.append(
                source.id, ActivityAction.MERGED, {"into": target.id},
                actor_id=actor.id, at=now,
            )

            try:
                target.touch(now)
                self.ticket_repo.save(target)
                self.audit_log.append(
                    target.id, ActivityAction.MERGED, {"from": source.id},
                    actor_id=actor.id, at=now,
                )
            except StorageError as exc:
                if self.uow.atomic:
                    raise
                logger.error(
                    "Partial merge: ticket %s closed into %s but target write failed: %s",
                    source.id, target.id, exc,
                )
                raise PartialMergeError(
                    f"Merge de {source.id} em {target.id} aplicado apenas na origem",
                    source_id=source.id,
                    target_id=target.id,
                ) from exc

            self.uow.publish_event(
                TicketMergedEvent(
                    aggregate_id=source.id,
                    target_id=target.id,
                    actor_id=actor.id,
                )
            )

        logger.info("Ticket %s merged into %s by %s", source_id, target_id, actor.id)


class GetTicketService:
    """
    Use Case: Obter ticket específico com contadores de comentários.

    USER só acessa os próprios tickets e nunca recebe notas internas.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        comment_repo: CommentRepository,
        access_policy: Optional[AccessPolicy] = None,
        clock: Clock = utc_now,
    ):
        self.ticket_repo = ticket_repo
        self.comment_repo = comment_repo
        self.access_policy = access_policy or AccessPolicy()
        self.clock = clock

    def execute(self, ticket_id: str, actor: Actor) -> TicketOutputDTO:
        ticket = get_ticket_or_raise(self.ticket_repo, ticket_id)
        self.access_policy.ensure_can_read_ticket(actor, ticket)
        counts = self.comment_repo.counts_for_tickets([ticket.id])[ticket.id]
        return to_output(ticket, actor, self.clock(), counts, self.access_policy)


class ListTicketsService:
    """
    Use Case: Listar tickets com filtros.

    Ordenação por `number` decrescente. Chamadores USER veem apenas
    os tickets que abriram (visão do portal), qualquer que seja o
    filtro `created_by` informado.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        comment_repo: CommentRepository,
        access_policy: Optional[AccessPolicy] = None,
        clock: Clock = utc_now,
    ):
        self.ticket_repo = ticket_repo
        self.comment_repo = comment_repo
        self.access_policy = access_policy or AccessPolicy()
        self.clock = clock

    def execute(
        self, query: Optional[ListTicketsQueryDTO], actor: Actor
    ) -> List[TicketOutputDTO]:
        query = query or ListTicketsQueryDTO()
        now = self.clock()
        criteria = self.build_filter(query, actor, now.date())

        tickets = self.ticket_repo.list(criteria)
        counts = self.comment_repo.counts_for_tickets([t.id for t in tickets])
        return [
            to_output(t, actor, now, counts.get(t.id, (0, 0)), self.access_policy)
            for t in tickets
        ]

    @staticmethod
    def build_filter(query: ListTicketsQueryDTO, actor: Actor, today: date) -> TicketFilter:
        """Converte o query DTO em filtro tipado."""
        return TicketFilter(
            category=TicketCategory.from_string(query.category) if query.category else None,
            priority=TicketPriority.from_string(query.priority) if query.priority else None,
            status=TicketStatus.from_string(query.status) if query.status else None,
            search=(query.search or "").strip() or None,
            ticket_date_from=date_range_start(query.date_range, today),
            created_by=query.created_by if actor.is_staff else actor.id,
            assigned_to=query.assigned_to,
        )


class TicketStatsService:
    """
    Use Case: Contagem de tickets por status.

    USER: restrito aos próprios tickets.
    """

    def __init__(self, ticket_repo: TicketRepository):
        self.ticket_repo = ticket_repo

    def execute(
        self,
        actor: Actor,
        created_by: Optional[str] = None,
        assigned_to: Optional[str] = None,
    ) -> TicketStatsDTO:
        if not actor.is_staff:
            created_by = actor.id
        counts = self.ticket_repo.count_by_status(
            created_by=created_by, assigned_to=assigned_to
        )
        return TicketStatsDTO.from_counts(counts)


class ListOverdueTicketsService:
    """
    Use Case: Tickets fora do prazo (open/in-progress com due_by < now).

    Usado pela verificação periódica do Celery beat; não recebe ator.
    """

    def __init__(self, ticket_repo: TicketRepository, clock: Clock = utc_now):
        self.ticket_repo = ticket_repo
        self.clock = clock

    def execute(self, now: Optional[datetime] = None) -> List[TicketOutputDTO]:
        now = now or self.clock()
        return [
            TicketOutputDTO.from_entity(ticket, now=now)
            for ticket in self.ticket_repo.list_overdue(now)
        ]
