"""
Testes Unitários para Entidades do Domínio de Tickets.

Testa regras de negócio encapsuladas em TicketEntity e nos enums,
sem dependência de banco ou framework.

Coverage:
- Conversão de enums (apresentação, nome, armazenamento)
- TicketEntity.create (validações)
- Mudanças de status/prioridade/atribuição
- Merge
- Verificação de atraso
"""

from datetime import datetime, timedelta, timezone

import pytest

from helpdesk.core.shared.exceptions import ConflictError, ValidationError
from helpdesk.core.tickets.entities import (
    TicketCategory,
    TicketEntity,
    TicketPriority,
    TicketSentiment,
    TicketStatus,
)

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_ticket(**overrides) -> TicketEntity:
    params = dict(
        subject="Outlook não sincroniza",
        category="email",
        created_by="user-1",
        due_by=NOW + timedelta(hours=24),
        now=NOW,
    )
    params.update(overrides)
    return TicketEntity.create(**params)


class TestTicketEnums:
    """Testes para conversão dos enums."""

    @pytest.mark.parametrize("raw", ["in-progress", "in_progress", "IN_PROGRESS", " In-Progress "])
    def test_status_aceita_todas_as_grafias(self, raw):
        assert TicketStatus.from_string(raw) == TicketStatus.IN_PROGRESS

    def test_status_grafia_de_armazenamento(self):
        assert TicketStatus.IN_PROGRESS.value == "in-progress"
        assert TicketStatus.IN_PROGRESS.storage_value == "in_progress"
        assert TicketCategory.NETWORK_VPN.storage_value == "network_vpn"

    def test_status_terminais(self):
        assert TicketStatus.RESOLVED.is_terminal
        assert TicketStatus.CLOSED.is_terminal
        assert not TicketStatus.OPEN.is_terminal
        assert not TicketStatus.IN_PROGRESS.is_terminal

    def test_valor_desconhecido_lanca_validation_error_com_campo(self):
        with pytest.raises(ValidationError) as exc_info:
            TicketPriority.from_string("urgent")
        assert exc_info.value.field == "priority"

    def test_membro_do_enum_passa_direto(self):
        assert TicketSentiment.from_string(TicketSentiment.ANGRY) is TicketSentiment.ANGRY

    def test_categoria_vazia_invalida(self):
        with pytest.raises(ValidationError) as exc_info:
            TicketCategory.from_string("  ")
        assert exc_info.value.field == "category"


class TestTicketCreate:
    """Testes para o factory TicketEntity.create."""

    def test_cria_com_valores_padrao(self):
        ticket = make_ticket()

        assert ticket.id
        assert ticket.number is None
        assert ticket.status == TicketStatus.OPEN
        assert ticket.priority == TicketPriority.MEDIUM
        assert ticket.sentiment == TicketSentiment.NEUTRAL
        assert ticket.category == TicketCategory.EMAIL
        assert ticket.created_at == NOW
        assert ticket.updated_at == NOW
        assert ticket.ticket_date == NOW.date()
        assert ticket.merged_into is None

    def test_normaliza_assunto_e_descricao(self):
        ticket = make_ticket(subject="  VPN caiu  ", description="  sem acesso  ")

        assert ticket.subject == "VPN caiu"
        assert ticket.description == "sem acesso"

    @pytest.mark.parametrize("subject", ["", "   ", None])
    def test_assunto_vazio_invalido(self, subject):
        with pytest.raises(ValidationError) as exc_info:
            make_ticket(subject=subject)
        assert exc_info.value.field == "subject"

    def test_assunto_longo_demais_invalido(self):
        with pytest.raises(ValidationError):
            make_ticket(subject="x" * (TicketEntity.SUBJECT_MAX_LENGTH + 1))

    def test_assunto_no_limite_valido(self):
        ticket = make_ticket(subject="x" * TicketEntity.SUBJECT_MAX_LENGTH)
        assert len(ticket.subject) == TicketEntity.SUBJECT_MAX_LENGTH

    @pytest.mark.parametrize("category", [None, ""])
    def test_categoria_obrigatoria(self, category):
        with pytest.raises(ValidationError) as exc_info:
            make_ticket(category=category)
        assert exc_info.value.field == "category"

    def test_categoria_desconhecida_invalida(self):
        with pytest.raises(ValidationError):
            make_ticket(category="printer")

    def test_criador_obrigatorio(self):
        with pytest.raises(ValidationError) as exc_info:
            make_ticket(created_by="")
        assert exc_info.value.field == "created_by"

    def test_atribuicao_vazia_vira_none(self):
        assert make_ticket(assigned_to="").assigned_to is None


class TestTicketChanges:
    """Testes para mudanças de estado da entidade."""

    def test_change_status_retorna_anterior(self):
        ticket = make_ticket()

        previous = ticket.change_status(TicketStatus.IN_PROGRESS)

        assert previous == TicketStatus.OPEN
        assert ticket.status == TicketStatus.IN_PROGRESS

    def test_change_status_mesmo_valor_retorna_none(self):
        ticket = make_ticket()
        assert ticket.change_status(TicketStatus.OPEN) is None

    def test_qualquer_transicao_permitida(self):
        ticket = make_ticket(status=TicketStatus.CLOSED)

        assert ticket.change_status(TicketStatus.OPEN) == TicketStatus.CLOSED
        assert ticket.change_status(TicketStatus.RESOLVED) == TicketStatus.OPEN

    def test_change_priority_sempre_regrava_prazo(self):
        ticket = make_ticket()
        new_due = NOW + timedelta(hours=5)

        previous = ticket.change_priority(TicketPriority.MEDIUM, new_due)

        assert previous is None
        assert ticket.due_by == new_due

    def test_change_priority_retorna_anterior(self):
        ticket = make_ticket()

        previous = ticket.change_priority(TicketPriority.CRITICAL, NOW + timedelta(hours=2))

        assert previous == TicketPriority.MEDIUM
        assert ticket.priority == TicketPriority.CRITICAL

    def test_assign_detecta_mudanca(self):
        ticket = make_ticket()

        assert ticket.assign("tech-1") is True
        assert ticket.assign("tech-1") is False
        assert ticket.is_assigned
        assert ticket.assign(None) is True
        assert not ticket.is_assigned

    def test_resolution_notes_limpar_nao_conta_como_nota(self):
        ticket = make_ticket()

        assert ticket.set_resolution_notes("Senha resetada") is True
        assert ticket.set_resolution_notes("Senha resetada") is False
        assert ticket.set_resolution_notes("") is False
        assert ticket.resolution_notes == ""

    def test_resolution_notes_so_espacos_nao_conta_como_nota(self):
        ticket = make_ticket()

        assert ticket.set_resolution_notes("   \n") is False
        assert ticket.resolution_notes == "   \n"


class TestTicketMerge:
    """Testes para merge_into."""

    def test_merge_fecha_origem_e_referencia_destino(self):
        source, target = make_ticket(), make_ticket()

        source.merge_into(target)

        assert source.merged_into == target.id
        assert source.status == TicketStatus.CLOSED
        assert source.is_merged
        assert target.status == TicketStatus.OPEN

    def test_merge_em_si_mesmo_invalido(self):
        ticket = make_ticket()
        with pytest.raises(ValidationError):
            ticket.merge_into(ticket)

    def test_origem_ja_mesclada_conflito(self):
        source, target, other = make_ticket(), make_ticket(), make_ticket()
        source.merge_into(target)

        with pytest.raises(ConflictError) as exc_info:
            source.merge_into(other)
        assert exc_info.value.rule == "source_already_merged"

    def test_origem_fechada_conflito(self):
        source = make_ticket(status=TicketStatus.CLOSED)
        with pytest.raises(ConflictError) as exc_info:
            source.merge_into(make_ticket())
        assert exc_info.value.rule == "source_closed"

    def test_destino_mesclado_conflito(self):
        target, canonical = make_ticket(), make_ticket()
        target.merge_into(canonical)

        with pytest.raises(ConflictError) as exc_info:
            make_ticket().merge_into(target)
        assert exc_info.value.rule == "target_already_merged"

    def test_status_de_mesclado_e_final(self):
        source = make_ticket()
        source.merge_into(make_ticket())

        with pytest.raises(ConflictError) as exc_info:
            source.change_status(TicketStatus.OPEN)
        assert exc_info.value.rule == "merged_ticket_status_final"


class TestTicketOverdue:
    """Testes para is_overdue."""

    def test_atrasado_apos_prazo(self):
        ticket = make_ticket(due_by=NOW)
        assert ticket.is_overdue(NOW + timedelta(seconds=1))

    def test_no_prazo_exato_nao_atrasado(self):
        ticket = make_ticket(due_by=NOW)
        assert not ticket.is_overdue(NOW)

    @pytest.mark.parametrize("status", [TicketStatus.RESOLVED, TicketStatus.CLOSED])
    def test_terminal_nunca_atrasado(self, status):
        ticket = make_ticket(due_by=NOW, status=status)
        assert not ticket.is_overdue(NOW + timedelta(days=30))

    def test_sem_prazo_nunca_atrasado(self):
        ticket = make_ticket(due_by=None)
        assert not ticket.is_overdue(NOW + timedelta(days=30))

    def test_igualdade_por_id(self):
        ticket = make_ticket()
        copy = TicketEntity(id=ticket.id, subject="outro")
        assert ticket == copy
        assert hash(ticket) == hash(copy)
