"""
Django Models para o domínio de Tickets.

Estes models são ADAPTERS - implementam a persistência para as
entidades definidas em helpdesk/core/{tickets,comments,activity}.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Enums são gravados na grafia de armazenamento (underscore);
  a conversão fica nos Mappers
- Exclusão em cascata é responsabilidade do caso de uso
  (DeleteTicketService), por isso as FKs usam DO_NOTHING

Tabelas:
- tickets: Tabela principal
- ticket_comments: Comentários públicos e internos
- ticket_activity: Trilha de auditoria (append-only)
"""

from django.db import models
from django.utils import timezone


class TicketStatusChoices(models.TextChoices):
    """Espelha TicketStatus do Core (grafia de armazenamento)."""
    OPEN = 'open', 'Open'
    IN_PROGRESS = 'in_progress', 'In progress'
    RESOLVED = 'resolved', 'Resolved'
    CLOSED = 'closed', 'Closed'


class TicketPriorityChoices(models.TextChoices):
    """Espelha TicketPriority do Core."""
    CRITICAL = 'critical', 'Critical'
    HIGH = 'high', 'High'
    MEDIUM = 'medium', 'Medium'
    LOW = 'low', 'Low'


class TicketCategoryChoices(models.TextChoices):
    """Espelha TicketCategory do Core."""
    EMAIL = 'email', 'Email'
    ACCOUNT_LOGIN = 'account_login', 'Account / login'
    PASSWORD_RESET = 'password_reset', 'Password reset'
    HARDWARE = 'hardware', 'Hardware'
    SOFTWARE = 'software', 'Software'
    NETWORK_VPN = 'network_vpn', 'Network / VPN'
    OTHER = 'other', 'Other'


class TicketSentimentChoices(models.TextChoices):
    """Espelha TicketSentiment do Core."""
    POSITIVE = 'positive', 'Positive'
    NEUTRAL = 'neutral', 'Neutral'
    FRUSTRATED = 'frustrated', 'Frustrated'
    ANGRY = 'angry', 'Angry'


class ActivityActionChoices(models.TextChoices):
    """Espelha ActivityAction do Core."""
    CREATED = 'created', 'Created'
    STATUS_CHANGED = 'status_changed', 'Status changed'
    PRIORITY_CHANGED = 'priority_changed', 'Priority changed'
    ASSIGNED = 'assigned', 'Assigned'
    NOTE_ADDED = 'note_added', 'Note added'
    MERGED = 'merged', 'Merged'


class TicketModel(models.Model):
    """
    Model Django para persistência de Tickets.

    `number` é atribuído pelo DjangoTicketRepository.add (maior + 1,
    sob select_for_update) e nunca reutilizado.
    """

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do ticket"
    )

    number = models.PositiveIntegerField(
        unique=True,
        help_text="Sequência legível do ticket"
    )

    subject = models.CharField(
        max_length=200,
        help_text="Assunto do ticket"
    )

    description = models.TextField(
        blank=True,
        default='',
        help_text="Descrição detalhada do problema"
    )

    category = models.CharField(
        max_length=32,
        choices=TicketCategoryChoices.choices,
        db_index=True,
        help_text="Categoria do ticket"
    )

    priority = models.CharField(
        max_length=16,
        choices=TicketPriorityChoices.choices,
        default=TicketPriorityChoices.MEDIUM,
        db_index=True,
        help_text="Nível de prioridade"
    )

    status = models.CharField(
        max_length=16,
        choices=TicketStatusChoices.choices,
        default=TicketStatusChoices.OPEN,
        db_index=True,
        help_text="Estado atual do ticket"
    )

    sentiment = models.CharField(
        max_length=16,
        choices=TicketSentimentChoices.choices,
        default=TicketSentimentChoices.NEUTRAL,
        help_text="Sentimento percebido (informativo)"
    )

    employee_name = models.CharField(
        max_length=200,
        blank=True,
        default='',
        help_text="Nome do solicitante"
    )

    department = models.CharField(
        max_length=200,
        blank=True,
        default='',
        help_text="Departamento do solicitante"
    )

    ticket_date = models.DateField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Data de abertura"
    )

    resolution_notes = models.TextField(
        null=True,
        blank=True,
        help_text="Notas de resolução (visíveis ao solicitante)"
    )

    internal_notes = models.TextField(
        null=True,
        blank=True,
        help_text="Notas internas (apenas equipe)"
    )

    attachment_url = models.CharField(
        max_length=500,
        null=True,
        blank=True,
        help_text="Referência ao anexo"
    )

    created_by = models.CharField(
        max_length=100,
        db_index=True,
        help_text="ID do solicitante"
    )

    assigned_to = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        db_index=True,
        help_text="ID do técnico responsável"
    )

    merged_into = models.CharField(
        max_length=36,
        null=True,
        blank=True,
        help_text="ID do ticket canônico, se mesclado"
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="Data/hora de criação"
    )

    updated_at = models.DateTimeField(
        default=timezone.now,
        help_text="Data/hora da última atualização"
    )

    due_by = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Prazo derivado da prioridade"
    )

    class Meta:
        db_table = 'tickets'
        verbose_name = 'Ticket'
        verbose_name_plural = 'Tickets'
        ordering = ['-number']
        indexes = [
            models.Index(fields=['status', 'due_by'], name='idx_ticket_status_due'),
            models.Index(fields=['assigned_to', 'status'], name='idx_ticket_agent_status'),
            models.Index(fields=['created_by', 'created_at'], name='idx_ticket_creator_date'),
        ]

    def __str__(self):
        return f"#{self.number} {self.subject}"

    def __repr__(self):
        return f"<TicketModel id={self.id[:8]} number={self.number} status={self.status}>"


class TicketCommentModel(models.Model):
    """Comentário de ticket (público ou interno)."""

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do comentário"
    )

    ticket = models.ForeignKey(
        TicketModel,
        on_delete=models.DO_NOTHING,
        related_name='comments',
        help_text="Ticket comentado"
    )

    author_id = models.CharField(
        max_length=100,
        db_index=True,
        help_text="ID do autor"
    )

    author_name = models.CharField(
        max_length=200,
        blank=True,
        default='',
        help_text="Nome exibido do autor"
    )

    content = models.TextField(
        help_text="Texto do comentário"
    )

    is_internal = models.BooleanField(
        default=False,
        help_text="Nota interna, visível apenas à equipe"
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        help_text="Data/hora de criação"
    )

    class Meta:
        db_table = 'ticket_comments'
        verbose_name = 'Comentário de Ticket'
        verbose_name_plural = 'Comentários de Ticket'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['ticket', 'is_internal', 'created_at'], name='idx_comment_ticket_vis'),
        ]

    def __str__(self):
        return f"{self.author_name} @ {self.created_at}"


class TicketActivityModel(models.Model):
    """
    Entrada da trilha de auditoria.

    Append-only: o repositório não expõe update. O `id` autoincremento
    desempata entradas com o mesmo created_at.
    """

    id = models.BigAutoField(primary_key=True)

    ticket = models.ForeignKey(
        TicketModel,
        on_delete=models.DO_NOTHING,
        related_name='activity',
        help_text="Ticket relacionado"
    )

    action = models.CharField(
        max_length=32,
        choices=ActivityActionChoices.choices,
        db_index=True,
        help_text="Tipo da mudança"
    )

    metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="Valores relevantes (ex: from/to)"
    )

    actor_id = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        help_text="Quem causou a mudança"
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        help_text="Instante do registro"
    )

    class Meta:
        db_table = 'ticket_activity'
        verbose_name = 'Atividade de Ticket'
        verbose_name_plural = 'Atividades de Ticket'
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['ticket', 'created_at'], name='idx_activity_ticket_date'),
        ]

    def __str__(self):
        return f"{self.action} - {self.ticket_id[:8]} @ {self.created_at}"


class TicketSequenceModel(models.Model):
    """
    Contador do `number` dos tickets.

    Linha única por sequência, lida sob select_for_update. O valor só
    cresce: excluir o ticket mais recente não libera o número dele.
    """

    name = models.CharField(
        max_length=32,
        primary_key=True,
        help_text="Nome da sequência"
    )

    last_value = models.PositiveIntegerField(
        default=0,
        help_text="Último número atribuído"
    )

    class Meta:
        db_table = 'ticket_sequences'
        verbose_name = 'Sequência de Ticket'
        verbose_name_plural = 'Sequências de Ticket'

    def __str__(self):
        return f"{self.name}={self.last_value}"
