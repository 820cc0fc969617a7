"""
Migration inicial para o domínio de Tickets.

Cria as tabelas:
- tickets: Tabela principal de tickets
- ticket_comments: Comentários públicos e internos
- ticket_activity: Trilha de auditoria
"""

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
    ]

    operations = [
        # =================================================================
        # Tabela: tickets
        # =================================================================
        migrations.CreateModel(
            name='TicketModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do ticket'
                )),
                ('number', models.PositiveIntegerField(
                    unique=True,
                    help_text='Sequência legível do ticket'
                )),
                ('subject', models.CharField(
                    max_length=200,
                    help_text='Assunto do ticket'
                )),
                ('description', models.TextField(
                    blank=True,
                    default='',
                    help_text='Descrição detalhada do problema'
                )),
                ('category', models.CharField(
                    max_length=32,
                    choices=[
                        ('email', 'Email'),
                        ('account_login', 'Account / login'),
                        ('password_reset', 'Password reset'),
                        ('hardware', 'Hardware'),
                        ('software', 'Software'),
                        ('network_vpn', 'Network / VPN'),
                        ('other', 'Other'),
                    ],
                    db_index=True,
                    help_text='Categoria do ticket'
                )),
                ('priority', models.CharField(
                    max_length=16,
                    choices=[
                        ('critical', 'Critical'),
                        ('high', 'High'),
                        ('medium', 'Medium'),
                        ('low', 'Low'),
                    ],
                    default='medium',
                    db_index=True,
                    help_text='Nível de prioridade'
                )),
                ('status', models.CharField(
                    max_length=16,
                    choices=[
                        ('open', 'Open'),
                        ('in_progress', 'In progress'),
                        ('resolved', 'Resolved'),
                        ('closed', 'Closed'),
                    ],
                    default='open',
                    db_index=True,
                    help_text='Estado atual do ticket'
                )),
                ('sentiment', models.CharField(
                    max_length=16,
                    choices=[
                        ('positive', 'Positive'),
                        ('neutral', 'Neutral'),
                        ('frustrated', 'Frustrated'),
                        ('angry', 'Angry'),
                    ],
                    default='neutral',
                    help_text='Sentimento percebido (informativo)'
                )),
                ('employee_name', models.CharField(
                    max_length=200,
                    blank=True,
                    default='',
                    help_text='Nome do solicitante'
                )),
                ('department', models.CharField(
                    max_length=200,
                    blank=True,
                    default='',
                    help_text='Departamento do solicitante'
                )),
                ('ticket_date', models.DateField(
                    null=True,
                    blank=True,
                    db_index=True,
                    help_text='Data de abertura'
                )),
                ('resolution_notes', models.TextField(
                    null=True,
                    blank=True,
                    help_text='Notas de resolução (visíveis ao solicitante)'
                )),
                ('internal_notes', models.TextField(
                    null=True,
                    blank=True,
                    help_text='Notas internas (apenas equipe)'
                )),
                ('attachment_url', models.CharField(
                    max_length=500,
                    null=True,
                    blank=True,
                    help_text='Referência ao anexo'
                )),
                ('created_by', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='ID do solicitante'
                )),
                ('assigned_to', models.CharField(
                    max_length=100,
                    null=True,
                    blank=True,
                    db_index=True,
                    help_text='ID do técnico responsável'
                )),
                ('merged_into', models.CharField(
                    max_length=36,
                    null=True,
                    blank=True,
                    help_text='ID do ticket canônico, se mesclado'
                )),
                ('created_at', models.DateTimeField(
                    default=django.utils.timezone.now,
                    db_index=True,
                    help_text='Data/hora de criação'
                )),
                ('updated_at', models.DateTimeField(
                    default=django.utils.timezone.now,
                    help_text='Data/hora da última atualização'
                )),
                ('due_by', models.DateTimeField(
                    null=True,
                    blank=True,
                    db_index=True,
                    help_text='Prazo derivado da prioridade'
                )),
            ],
            options={
                'db_table': 'tickets',
                'verbose_name': 'Ticket',
                'verbose_name_plural': 'Tickets',
                'ordering': ['-number'],
            },
        ),

        # Índices compostos para tickets
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(
                fields=['status', 'due_by'],
                name='idx_ticket_status_due'
            ),
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(
                fields=['assigned_to', 'status'],
                name='idx_ticket_agent_status'
            ),
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(
                fields=['created_by', 'created_at'],
                name='idx_ticket_creator_date'
            ),
        ),

        # =================================================================
        # Tabela: ticket_comments
        # =================================================================
        migrations.CreateModel(
            name='TicketCommentModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do comentário'
                )),
                ('author_id', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='ID do autor'
                )),
                ('author_name', models.CharField(
                    max_length=200,
                    blank=True,
                    default='',
                    help_text='Nome exibido do autor'
                )),
                ('content', models.TextField(
                    help_text='Texto do comentário'
                )),
                ('is_internal', models.BooleanField(
                    default=False,
                    help_text='Nota interna, visível apenas à equipe'
                )),
                ('created_at', models.DateTimeField(
                    default=django.utils.timezone.now,
                    help_text='Data/hora de criação'
                )),
                ('ticket', models.ForeignKey(
                    on_delete=django.db.models.deletion.DO_NOTHING,
                    related_name='comments',
                    to='tickets.ticketmodel',
                    help_text='Ticket comentado'
                )),
            ],
            options={
                'db_table': 'ticket_comments',
                'verbose_name': 'Comentário de Ticket',
                'verbose_name_plural': 'Comentários de Ticket',
                'ordering': ['created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='ticketcommentmodel',
            index=models.Index(
                fields=['ticket', 'is_internal', 'created_at'],
                name='idx_comment_ticket_vis'
            ),
        ),

        # =================================================================
        # Tabela: ticket_activity
        # =================================================================
        migrations.CreateModel(
            name='TicketActivityModel',
            fields=[
                ('id', models.BigAutoField(
                    primary_key=True,
                    serialize=False
                )),
                ('action', models.CharField(
                    max_length=32,
                    choices=[
                        ('created', 'Created'),
                        ('status_changed', 'Status changed'),
                        ('priority_changed', 'Priority changed'),
                        ('assigned', 'Assigned'),
                        ('note_added', 'Note added'),
                        ('merged', 'Merged'),
                    ],
                    db_index=True,
                    help_text='Tipo da mudança'
                )),
                ('metadata', models.JSONField(
                    default=dict,
                    blank=True,
                    help_text='Valores relevantes (ex: from/to)'
                )),
                ('actor_id', models.CharField(
                    max_length=100,
                    null=True,
                    blank=True,
                    help_text='Quem causou a mudança'
                )),
                ('created_at', models.DateTimeField(
                    default=django.utils.timezone.now,
                    help_text='Instante do registro'
                )),
                ('ticket', models.ForeignKey(
                    on_delete=django.db.models.deletion.DO_NOTHING,
                    related_name='activity',
                    to='tickets.ticketmodel',
                    help_text='Ticket relacionado'
                )),
            ],
            options={
                'db_table': 'ticket_activity',
                'verbose_name': 'Atividade de Ticket',
                'verbose_name_plural': 'Atividades de Ticket',
                'ordering': ['created_at', 'id'],
            },
        ),
        migrations.AddIndex(
            model_name='ticketactivitymodel',
            index=models.Index(
                fields=['ticket', 'created_at'],
                name='idx_activity_ticket_date'
            ),
        ),
    ]
