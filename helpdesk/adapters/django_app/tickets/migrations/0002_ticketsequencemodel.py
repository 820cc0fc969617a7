"""
Contador de `number` dos tickets.

Cria a tabela ticket_sequences e a inicializa com o maior número já
gravado em tickets.
"""

from django.db import migrations, models
from django.db.models import Max


def seed_ticket_sequence(apps, schema_editor):
    TicketModel = apps.get_model('tickets', 'TicketModel')
    TicketSequenceModel = apps.get_model('tickets', 'TicketSequenceModel')

    current = TicketModel.objects.aggregate(last=Max('number'))['last'] or 0
    TicketSequenceModel.objects.update_or_create(
        name='ticket', defaults={'last_value': current}
    )


class Migration(migrations.Migration):

    dependencies = [
        ('tickets', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='TicketSequenceModel',
            fields=[
                ('name', models.CharField(
                    max_length=32,
                    primary_key=True,
                    serialize=False,
                    help_text='Nome da sequência'
                )),
                ('last_value', models.PositiveIntegerField(
                    default=0,
                    help_text='Último número atribuído'
                )),
            ],
            options={
                'db_table': 'ticket_sequences',
                'verbose_name': 'Sequência de Ticket',
                'verbose_name_plural': 'Sequências de Ticket',
            },
        ),
        migrations.RunPython(seed_ticket_sequence, migrations.RunPython.noop),
    ]
