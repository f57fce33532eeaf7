# apps/board/consumers.py

import json
import logging
from channels.generic.websocket import AsyncWebsocketConsumer
from channels.db import database_sync_to_async
from django.utils import timezone

from apps.core.models import Sprint, Tarefa
from apps.core.permissions import AgilisPermissions
from .eventos import grupo_sprint, grupo_usuario

logger = logging.getLogger(__name__)


class SprintConsumer(AsyncWebsocketConsumer):
    """
    Consumer WebSocket do quadro Kanban de uma sprint

    Funcionalidades:
    - Repassa tarefas criadas, atualizadas, excluídas e reordenadas
    - Heartbeat (ping/pong)
    - Sincronização do estado do quadro sob demanda
    """

    async def connect(self):
        """
        Conecta usuário ao grupo da sprint
        Verifica permissões antes de aceitar conexão
        """
        self.sprint_id = self.scope['url_route']['kwargs']['sprint_id']
        self.user = self.scope['user']

        if not self.user.is_authenticated:
            logger.warning("❌ Conexão WebSocket rejeitada - usuário não autenticado")
            await self.close()
            return

        has_access = await self.check_sprint_access()
        if not has_access:
            logger.warning(f"❌ Conexão WebSocket rejeitada - {self.user.username} sem acesso à sprint {self.sprint_id}")
            await self.close()
            return

        self.sprint_group_name = grupo_sprint(self.sprint_id)
        await self.channel_layer.group_add(
            self.sprint_group_name,
            self.channel_name
        )

        await self.accept()
        logger.info(f"✅ WebSocket conectado - {self.user.username} na sprint {self.sprint_id}")

    async def disconnect(self, close_code):
        if hasattr(self, 'sprint_group_name'):
            await self.channel_layer.group_discard(
                self.sprint_group_name,
                self.channel_name
            )

        logger.info(f"🔌 WebSocket desconectado - sprint {self.sprint_id} ({close_code})")

    async def receive(self, text_data):
        """
        Recebe mensagens do cliente WebSocket
        """
        try:
            data = json.loads(text_data)
            message_type = data.get('type')

            if message_type == 'ping':
                await self.send(text_data=json.dumps({
                    'type': 'pong',
                    'timestamp': self.get_timestamp()
                }))

            elif message_type == 'sync_sprint':
                sprint_data = await self.get_sprint_state()
                await self.send(text_data=json.dumps({
                    'type': 'sprint_sync',
                    'sprint_data': sprint_data,
                    'timestamp': self.get_timestamp()
                }))

        except json.JSONDecodeError:
            logger.error(f"❌ JSON inválido recebido via WebSocket de {self.user.username}")
        except Exception as e:
            logger.error(f"❌ Erro no WebSocket receive: {str(e)}")

    # === Handlers dos eventos do quadro ===

    async def tarefa_criada(self, event):
        await self.encaminhar(event)

    async def tarefa_atualizada(self, event):
        await self.encaminhar(event)

    async def tarefa_excluida(self, event):
        await self.encaminhar(event)

    async def tarefas_reordenadas(self, event):
        await self.encaminhar(event)

    async def encaminhar(self, event):
        """Envia o evento ao cliente com o mesmo nome usado no grupo"""
        await self.send(text_data=json.dumps({
            'type': event['type'],
            'timestamp': event.get('timestamp'),
            **event['dados']
        }))

    # === Métodos auxiliares ===

    @database_sync_to_async
    def check_sprint_access(self):
        try:
            sprint = Sprint.objects.select_related('projeto__equipe').get(
                id=self.sprint_id,
                projeto__excluido_em__isnull=True
            )
        except Sprint.DoesNotExist:
            return False
        return AgilisPermissions.pode_ver_sprint(self.user, sprint)

    @database_sync_to_async
    def get_sprint_state(self):
        """
        Estado atual do quadro para sincronização
        """
        tarefas = (
            Tarefa.objects.quadro(self.sprint_id)
            .raiz()
            .select_related('responsavel')
            .prefetch_related('etiquetas')
        )

        colunas = {status: [] for status in Tarefa.STATUS_QUADRO}
        for tarefa in tarefas:
            if tarefa.status in colunas:
                colunas[tarefa.status].append(tarefa.para_dict())

        return {
            'sprint_id': int(self.sprint_id),
            'colunas': colunas,
        }

    def get_timestamp(self):
        return timezone.now().isoformat()


class NotificacaoConsumer(AsyncWebsocketConsumer):
    """
    Consumer para notificações pessoais do usuário
    (separado da sprint para permitir notificações globais)
    """

    async def connect(self):
        self.user = self.scope['user']

        if not self.user.is_authenticated:
            await self.close()
            return

        self.user_group_name = grupo_usuario(self.user.id)

        await self.channel_layer.group_add(
            self.user_group_name,
            self.channel_name
        )

        await self.accept()
        logger.info(f"🔔 Notificações conectadas para {self.user.username}")

    async def disconnect(self, close_code):
        if hasattr(self, 'user_group_name'):
            await self.channel_layer.group_discard(
                self.user_group_name,
                self.channel_name
            )
            logger.info(f"🔕 Notificações desconectadas para {self.user.username}")

    async def notificacao(self, event):
        """
        Envia notificação para o usuário
        """
        await self.send(text_data=json.dumps({
            'type': 'notificacao',
            'evento': event['evento'],
            'dados': event['dados'],
            'timestamp': event.get('timestamp'),
        }))
