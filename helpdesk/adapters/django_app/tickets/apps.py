"""
Configuração do Django App para Tickets.

Registra os models de tickets, comentários e atividade.
"""

from django.apps import AppConfig


class TicketsConfig(AppConfig):
    """Configuração do app Tickets."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'helpdesk.adapters.django_app.tickets'
    label = 'tickets'
    verbose_name = 'Helpdesk - Tickets'
