"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events de forma assíncrona
- Verificação periódica de tickets fora do prazo
- Notificações

Arquitetura:
- Broker: RabbitMQ (mensagens entre Django e Workers)
- Backend: Redis (resultados de tarefas)
- Workers: Processos que executam as tarefas

Uso:
    # Iniciar worker
    celery -A helpdesk.config.celery worker -l INFO

    # Iniciar beat (tarefas agendadas)
    celery -A helpdesk.config.celery beat -l INFO
"""

import os
from celery import Celery
from kombu import Queue, Exchange

# Definir módulo de settings do Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'helpdesk.config.settings')

app = Celery('helpdesk')

# Configurações CELERY_* vêm de settings.py
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    worker_send_task_events=True,
    task_send_sent_event=True,
)

app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('notifications', Exchange('notifications'), routing_key='notifications.#'),
)
app.conf.task_default_queue = 'default'

app.conf.task_routes = {
    'helpdesk.adapters.django_app.events.handlers.notify_*': {'queue': 'notifications'},
    'helpdesk.adapters.django_app.events.handlers.*': {'queue': 'events'},
}

app.autodiscover_tasks(
    ['helpdesk.adapters.django_app.events'],
    related_name='handlers',
)

app.conf.beat_schedule = {
    'check-overdue-tickets': {
        'task': 'helpdesk.adapters.django_app.events.handlers.check_overdue_tickets',
        'schedule': float(os.getenv('OVERDUE_CHECK_INTERVAL', 3600)),
    },
}
