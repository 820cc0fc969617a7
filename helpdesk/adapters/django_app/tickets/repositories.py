"""
Repositórios Django para persistência de Tickets, Comentários e Atividade.

Implementam as interfaces (Ports) definidas no Core.
São DRIVEN ADAPTERS - acionados pelo Core em resposta a operações.

Responsabilidades:
- Implementar TicketRepository, CommentRepository e ActivityRepository
- Mapear entities para models e vice-versa
- Executar queries no banco via ORM
- Traduzir falhas do banco em StorageError

Princípios:
- Repository não contém lógica de negócio
- Usa Mapper para conversões
- Trata apenas persistência
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional
import logging

from django.db import transaction
from django.db.models import Count, Max, Q

from helpdesk.core.activity.entities import ActivityEntry
from helpdesk.core.comments.entities import CommentEntity
from helpdesk.core.comments.ports import CommentCounts
from helpdesk.core.tickets.dtos import TicketFilter
from helpdesk.core.tickets.entities import TicketEntity, TicketStatus

from ..shared.database import translate_storage_errors
from .mappers import ActivityMapper, CommentMapper, TicketMapper
from .models import (
    TicketActivityModel,
    TicketCommentModel,
    TicketModel,
    TicketSequenceModel,
)

logger = logging.getLogger(__name__)

TICKET_SEQUENCE = "ticket"


class DjangoTicketRepository:
    """
    Implementação Django do TicketRepository.

    Example:
        repo = DjangoTicketRepository()

        # Criar
        ticket = repo.add(ticket_entity)

        # Buscar
        ticket = repo.get_by_id("uuid-here")

        # Listar com filtro
        tickets = repo.list(TicketFilter(status=TicketStatus.OPEN))
    """

    def __init__(self):
        self._mapper = TicketMapper()

    @translate_storage_errors("ticket.add")
    def add(self, ticket: TicketEntity) -> TicketEntity:
        """
        Insere ticket e atribui o próximo `number`.

        O contador é lido sob select_for_update dentro de uma transação
        e a coluna é UNIQUE: dois inserts concorrentes nunca gravam o
        mesmo número, e números de tickets excluídos não voltam.
        """
        with transaction.atomic():
            sequence, _ = TicketSequenceModel.objects.select_for_update().get_or_create(
                name=TICKET_SEQUENCE,
                defaults={'last_value': self._highest_number()},
            )
            sequence.last_value += 1
            sequence.save(update_fields=['last_value'])

            ticket.number = sequence.last_value
            self._mapper.to_model(ticket).save(force_insert=True)

        logger.info(f"Ticket created: #{ticket.number} ({ticket.id})")
        return ticket

    @translate_storage_errors("ticket.save")
    def save(self, ticket: TicketEntity) -> None:
        """
        Persiste alterações de um ticket existente.

        Note:
            Usa update_or_create para atomicidade
        """
        logger.debug(f"Saving ticket: {ticket.id}")

        TicketModel.objects.update_or_create(
            id=ticket.id,
            defaults={'number': ticket.number, **self._mapper.to_fields(ticket)},
        )

        logger.info(f"Ticket saved: {ticket.id}")

    @translate_storage_errors("ticket.get")
    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        try:
            model = TicketModel.objects.get(id=ticket_id)
            return self._mapper.to_entity(model)
        except TicketModel.DoesNotExist:
            logger.debug(f"Ticket not found: {ticket_id}")
            return None

    @translate_storage_errors("ticket.delete")
    def delete(self, ticket_id: str) -> None:
        """
        Remove a linha do ticket.

        Note:
            Comentários e atividade devem ter sido removidos antes
            (DeleteTicketService)
        """
        deleted_count, _ = TicketModel.objects.filter(id=ticket_id).delete()

        if deleted_count > 0:
            logger.info(f"Ticket deleted: {ticket_id}")
        else:
            logger.debug(f"Ticket not found for deletion: {ticket_id}")

    @translate_storage_errors("ticket.exists")
    def exists(self, ticket_id: str) -> bool:
        return TicketModel.objects.filter(id=ticket_id).exists()

    @translate_storage_errors("ticket.list")
    def list(self, criteria: Optional[TicketFilter] = None) -> List[TicketEntity]:
        """Tickets que casam com o filtro, do mais recente para o mais antigo."""
        queryset = self._apply_filter(TicketModel.objects.all(), criteria or TicketFilter())
        return self._mapper.to_entity_list(queryset.order_by('-number'))

    @translate_storage_errors("ticket.count_by_status")
    def count_by_status(
        self, created_by: Optional[str] = None, assigned_to: Optional[str] = None
    ) -> Dict[TicketStatus, int]:
        """Contagem por status numa única query agregada."""
        queryset = self._apply_filter(
            TicketModel.objects.all(),
            TicketFilter(created_by=created_by, assigned_to=assigned_to),
        )
        rows = queryset.values('status').annotate(total=Count('id')).order_by()

        counts = {status: 0 for status in TicketStatus}
        for row in rows:
            counts[TicketStatus.from_string(row['status'])] = row['total']
        return counts

    @translate_storage_errors("ticket.list_overdue")
    def list_overdue(self, now: datetime) -> List[TicketEntity]:
        """Tickets ativos com prazo vencido, prazo mais antigo primeiro."""
        queryset = TicketModel.objects.filter(
            status__in=[
                TicketStatus.OPEN.storage_value,
                TicketStatus.IN_PROGRESS.storage_value,
            ],
            due_by__lt=now,
        ).order_by('due_by')
        return self._mapper.to_entity_list(queryset)

    @staticmethod
    def _apply_filter(queryset, criteria: TicketFilter):
        if criteria.category:
            queryset = queryset.filter(category=criteria.category.storage_value)
        if criteria.priority:
            queryset = queryset.filter(priority=criteria.priority.storage_value)
        if criteria.status:
            queryset = queryset.filter(status=criteria.status.storage_value)
        if criteria.created_by:
            queryset = queryset.filter(created_by=criteria.created_by)
        if criteria.assigned_to:
            queryset = queryset.filter(assigned_to=criteria.assigned_to)
        if criteria.ticket_date_from:
            queryset = queryset.filter(ticket_date__gte=criteria.ticket_date_from)
        if criteria.search:
            queryset = queryset.filter(
                Q(employee_name__icontains=criteria.search)
                | Q(subject__icontains=criteria.search)
                | Q(department__icontains=criteria.search)
            )
        return queryset

    @staticmethod
    def _highest_number() -> int:
        return TicketModel.objects.aggregate(last=Max('number'))['last'] or 0


class DjangoCommentRepository:
    """Implementação Django do CommentRepository."""

    def __init__(self):
        self._mapper = CommentMapper()

    @translate_storage_errors("comment.add")
    def add(self, comment: CommentEntity) -> None:
        self._mapper.to_model(comment).save(force_insert=True)
        logger.info(f"Comment added: {comment.id} on ticket {comment.ticket_id}")

    @translate_storage_errors("comment.get")
    def get_by_id(self, comment_id: str) -> Optional[CommentEntity]:
        try:
            return self._mapper.to_entity(TicketCommentModel.objects.get(id=comment_id))
        except TicketCommentModel.DoesNotExist:
            return None

    @translate_storage_errors("comment.delete")
    def delete(self, comment_id: str) -> None:
        TicketCommentModel.objects.filter(id=comment_id).delete()

    @translate_storage_errors("comment.list")
    def list_for_ticket(
        self, ticket_id: str, include_internal: bool = True
    ) -> List[CommentEntity]:
        queryset = TicketCommentModel.objects.filter(ticket_id=ticket_id)
        if not include_internal:
            queryset = queryset.filter(is_internal=False)
        return [self._mapper.to_entity(m) for m in queryset.order_by('created_at', 'pk')]

    @translate_storage_errors("comment.delete_for_ticket")
    def delete_for_ticket(self, ticket_id: str) -> int:
        deleted_count, _ = TicketCommentModel.objects.filter(ticket_id=ticket_id).delete()
        return deleted_count

    @translate_storage_errors("comment.counts")
    def counts_for_tickets(self, ticket_ids: Iterable[str]) -> Dict[str, CommentCounts]:
        """Contagens (total, públicos) numa única query para a página inteira."""
        ids = list(ticket_ids)
        counts = {ticket_id: (0, 0) for ticket_id in ids}
        if not ids:
            return counts

        rows = (
            TicketCommentModel.objects.filter(ticket_id__in=ids)
            .values('ticket_id')
            .annotate(
                total=Count('id'),
                public=Count('id', filter=Q(is_internal=False)),
            )
            .order_by()
        )
        for row in rows:
            counts[row['ticket_id']] = (row['total'], row['public'])
        return counts


class DjangoActivityRepository:
    """
    Implementação Django do ActivityRepository.

    Append-only: entradas nunca são atualizadas.
    """

    def __init__(self):
        self._mapper = ActivityMapper()

    @translate_storage_errors("activity.add")
    def add(self, entry: ActivityEntry) -> ActivityEntry:
        model = self._mapper.to_model(entry)
        model.save()
        logger.debug(f"Activity recorded: {entry.action.value} on ticket {entry.ticket_id}")
        return self._mapper.to_entity(model)

    @translate_storage_errors("activity.list")
    def list_for_ticket(self, ticket_id: str) -> List[ActivityEntry]:
        queryset = TicketActivityModel.objects.filter(ticket_id=ticket_id).order_by('created_at', 'id')
        return [self._mapper.to_entity(m) for m in queryset]

    @translate_storage_errors("activity.delete_for_ticket")
    def delete_for_ticket(self, ticket_id: str) -> int:
        deleted_count, _ = TicketActivityModel.objects.filter(ticket_id=ticket_id).delete()
        return deleted_count

    @translate_storage_errors("activity.count")
    def count_for_ticket(self, ticket_id: str) -> int:
        return TicketActivityModel.objects.filter(ticket_id=ticket_id).count()
