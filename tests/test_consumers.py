"""Testes dos consumers WebSocket do quadro e das notificações."""

import pytest
from channels.layers import get_channel_layer
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser

from apps.board.eventos import grupo_sprint, grupo_usuario
from apps.board.routing import websocket_urlpatterns
from apps.core.models import Tarefa

pytestmark = pytest.mark.django_db(transaction=True)

aplicacao = URLRouter(websocket_urlpatterns)


def comunicador(caminho, usuario):
    communicator = WebsocketCommunicator(aplicacao, caminho)
    communicator.scope['user'] = usuario
    return communicator


@pytest.fixture
def tarefa_no_quadro(sprint, criar_tarefa):
    return criar_tarefa('No quadro', sprint=sprint, status=Tarefa.EM_ANDAMENTO)


class TestSprintConsumer:

    async def test_ping_pong(self, desenvolvedor, sprint):
        communicator = comunicador(f'/ws/sprint/{sprint.id}/', desenvolvedor)
        conectado, _ = await communicator.connect()
        assert conectado

        await communicator.send_json_to({'type': 'ping'})
        resposta = await communicator.receive_json_from()

        assert resposta['type'] == 'pong'
        assert resposta['timestamp']
        await communicator.disconnect()

    async def test_rejeita_anonimo(self, sprint):
        communicator = comunicador(f'/ws/sprint/{sprint.id}/', AnonymousUser())
        conectado, _ = await communicator.connect()
        assert not conectado

    async def test_rejeita_quem_nao_e_da_equipe(self, estranho, sprint):
        communicator = comunicador(f'/ws/sprint/{sprint.id}/', estranho)
        conectado, _ = await communicator.connect()
        assert not conectado

    async def test_rejeita_sprint_inexistente(self, desenvolvedor, sprint):
        communicator = comunicador(f'/ws/sprint/{sprint.id + 1000}/', desenvolvedor)
        conectado, _ = await communicator.connect()
        assert not conectado

    async def test_sincronizar_quadro(self, desenvolvedor, sprint, tarefa_no_quadro):
        communicator = comunicador(f'/ws/sprint/{sprint.id}/', desenvolvedor)
        await communicator.connect()

        await communicator.send_json_to({'type': 'sync_sprint'})
        resposta = await communicator.receive_json_from()

        assert resposta['type'] == 'sprint_sync'
        assert resposta['sprint_data']['sprint_id'] == sprint.id
        colunas = resposta['sprint_data']['colunas']
        assert [t['titulo'] for t in colunas[Tarefa.EM_ANDAMENTO]] == ['No quadro']
        assert colunas[Tarefa.PLANEJADA] == []
        await communicator.disconnect()

    async def test_repassa_eventos_do_grupo(self, desenvolvedor, sprint):
        communicator = comunicador(f'/ws/sprint/{sprint.id}/', desenvolvedor)
        await communicator.connect()

        await get_channel_layer().group_send(grupo_sprint(sprint.id), {
            'type': 'tarefa.atualizada',
            'dados': {'tarefa': {'id': 7, 'titulo': 'Atualizada'}},
            'timestamp': '2026-01-01T10:00:00+00:00',
        })
        resposta = await communicator.receive_json_from()

        assert resposta == {
            'type': 'tarefa.atualizada',
            'timestamp': '2026-01-01T10:00:00+00:00',
            'tarefa': {'id': 7, 'titulo': 'Atualizada'},
        }
        await communicator.disconnect()

    async def test_json_invalido_e_ignorado(self, desenvolvedor, sprint):
        communicator = comunicador(f'/ws/sprint/{sprint.id}/', desenvolvedor)
        await communicator.connect()

        await communicator.send_to(text_data='{nao e json')

        assert await communicator.receive_nothing()
        await communicator.disconnect()


class TestNotificacaoConsumer:

    async def test_recebe_notificacoes_pessoais(self, admin):
        communicator = comunicador('/ws/notificacoes/', admin)
        conectado, _ = await communicator.connect()
        assert conectado

        await get_channel_layer().group_send(grupo_usuario(admin.id), {
            'type': 'notificacao',
            'evento': 'mensagem.recebida',
            'dados': {'id': 1, 'assunto': 'Oi'},
            'timestamp': '2026-01-01T10:00:00+00:00',
        })
        resposta = await communicator.receive_json_from()

        assert resposta == {
            'type': 'notificacao',
            'evento': 'mensagem.recebida',
            'dados': {'id': 1, 'assunto': 'Oi'},
            'timestamp': '2026-01-01T10:00:00+00:00',
        }
        await communicator.disconnect()

    async def test_rejeita_anonimo(self, db):
        communicator = comunicador('/ws/notificacoes/', AnonymousUser())
        conectado, _ = await communicator.connect()
        assert not conectado
