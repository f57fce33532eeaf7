# apps/board/routing.py

from django.urls import re_path
from . import consumers

# Rotas WebSocket para a aplicação board
websocket_urlpatterns = [
    # Quadro Kanban da sprint - atualizações em tempo real
    re_path(r'ws/sprint/(?P<sprint_id>\d+)/$', consumers.SprintConsumer.as_asgi()),

    # Notificações pessoais do usuário
    re_path(r'ws/notificacoes/$', consumers.NotificacaoConsumer.as_asgi()),
]
