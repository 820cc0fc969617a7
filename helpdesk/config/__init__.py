"""
Configuração do projeto Helpdesk.

Módulos:
- settings: Configurações Django
- celery: Configuração Celery para tarefas assíncronas
- container: Dependency Injection Container
"""

# Importar app Celery para que seja carregado com Django
from .celery import app as celery_app

__all__ = ('celery_app',)
