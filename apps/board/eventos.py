# apps/board/eventos.py

"""
Eventos em tempo real enviados pelo channel layer

Quadro da sprint -> grupo "sprint_<id>" (SprintConsumer)
Notificações     -> grupo "usuario_<id>" (NotificacaoConsumer)

O envio só acontece depois do commit da transação, para que o
cliente nunca receba uma alteração que foi desfeita.
"""

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.utils import timezone

logger = logging.getLogger(__name__)


def grupo_sprint(sprint_id):
    return f'sprint_{sprint_id}'


def grupo_usuario(usuario_id):
    return f'usuario_{usuario_id}'


def _enviar(grupo, mensagem):
    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.warning(f"⚠️ Channel layer não configurado - evento {mensagem['type']} descartado")
        return

    async_to_sync(channel_layer.group_send)(grupo, mensagem)
    logger.debug(f"📡 {mensagem['type']} enviado para {grupo}")


def transmitir(sprint_id, tipo, dados):
    """Agenda o envio do evento para o grupo da sprint após o commit"""
    mensagem = {
        'type': tipo,
        'dados': dados,
        'timestamp': timezone.now().isoformat(),
    }
    transaction.on_commit(lambda: _enviar(grupo_sprint(sprint_id), mensagem), robust=True)


def tarefa_criada(tarefa):
    transmitir(tarefa.sprint_id, 'tarefa.criada', {'tarefa': tarefa.para_dict()})


def tarefa_atualizada(tarefa):
    transmitir(tarefa.sprint_id, 'tarefa.atualizada', {'tarefa': tarefa.para_dict()})


def tarefa_excluida(sprint_id, tarefa_id):
    transmitir(sprint_id, 'tarefa.excluida', {'tarefa_id': tarefa_id})


def tarefas_reordenadas(sprint_id, tarefas):
    transmitir(sprint_id, 'tarefas.reordenadas', {'tarefas': tarefas})


def notificar_usuario(usuario_id, evento, dados):
    """Notificação pessoal (ex: mensagem recebida)"""
    mensagem = {
        'type': 'notificacao',
        'evento': evento,
        'dados': dados,
        'timestamp': timezone.now().isoformat(),
    }
    transaction.on_commit(lambda: _enviar(grupo_usuario(usuario_id), mensagem), robust=True)
