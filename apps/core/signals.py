# apps/core/signals.py

import logging

from django.db.models.signals import post_save, post_delete, pre_save
from django.dispatch import receiver

from apps.board.eventos import notificar_usuario
from .models import Tarefa, Mensagem, MembroEquipe

logger = logging.getLogger(__name__)


# Handlers para manter integridade referencial

@receiver(pre_save, sender=Tarefa)
def validar_consistencia_tarefa(sender, instance, **kwargs):
    """
    Garante que sprint, backlog da sprint e tarefa pai sejam do
    mesmo projeto da tarefa (lança ValidationError)
    """
    instance.clean()


@receiver(post_save, sender=Mensagem)
def notificar_mensagem_recebida(sender, instance, created, **kwargs):
    """
    Avisa o destinatário em tempo real (grupo usuario_<id>)
    """
    if not created:
        return

    notificar_usuario(instance.destinatario_id, 'mensagem.recebida', {
        'id': instance.id,
        'assunto': instance.assunto,
        'remetente': instance.remetente.get_full_name(),
    })


@receiver(post_save, sender=MembroEquipe)
def registrar_entrada_membro(sender, instance, created, **kwargs):
    if created:
        logger.info(f"👥 {instance.usuario.username} entrou na equipe {instance.equipe.nome} ({instance.papel})")


@receiver(post_delete, sender=MembroEquipe)
def registrar_saida_membro(sender, instance, **kwargs):
    logger.info(f"👋 Usuário {instance.usuario_id} saiu da equipe {instance.equipe_id}")
