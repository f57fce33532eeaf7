# apps/board/urls.py

from django.urls import path
from . import views

app_name = 'board'

SPRINT = 'projetos/<int:projeto_id>/sprints/<int:sprint_id>/'
BACKLOG = 'projetos/<int:projeto_id>/backlog/'

urlpatterns = [
    # Sprints
    path('projetos/<int:projeto_id>/sprints/', views.sprints_lista, name='sprints'),
    path('projetos/<int:projeto_id>/sprints/nova/', views.sprint_criar, name='sprint_criar'),
    path(SPRINT, views.sprint_detalhe, name='sprint_detalhe'),
    path(SPRINT + 'editar/', views.sprint_editar, name='sprint_editar'),
    path(SPRINT + 'excluir/', views.sprint_excluir, name='sprint_excluir'),

    # Tarefas do quadro Kanban
    path(SPRINT + 'tarefas/', views.tarefas_index, name='tarefas'),
    path(SPRINT + 'tarefas/nova/', views.tarefa_criar, name='tarefa_criar'),
    path(SPRINT + 'tarefas/reordenar/', views.tarefas_reordenar, name='tarefas_reordenar'),
    path(SPRINT + 'tarefas/adicionar-do-backlog/', views.tarefas_adicionar_do_backlog, name='tarefas_adicionar_do_backlog'),
    path(SPRINT + 'tarefas/<int:tarefa_id>/editar/', views.tarefa_editar, name='tarefa_editar'),
    path(SPRINT + 'tarefas/<int:tarefa_id>/mover-para-backlog/', views.tarefa_mover_para_backlog, name='tarefa_mover_para_backlog'),

    # Backlog do produto
    path(BACKLOG, views.backlog, name='backlog'),
    path(BACKLOG + 'nova/', views.backlog_criar, name='backlog_criar'),
    path(BACKLOG + 'reordenar/', views.backlog_reordenar, name='backlog_reordenar'),
    path(BACKLOG + '<int:tarefa_id>/editar/', views.backlog_editar, name='backlog_editar'),
    path(BACKLOG + '<int:tarefa_id>/excluir/', views.backlog_excluir, name='backlog_excluir'),
    path(BACKLOG + '<int:tarefa_id>/mover-acima/', views.backlog_mover_acima, name='backlog_mover_acima'),
    path(BACKLOG + '<int:tarefa_id>/mover-abaixo/', views.backlog_mover_abaixo, name='backlog_mover_abaixo'),
    path(BACKLOG + '<int:tarefa_id>/subtarefas/', views.backlog_subtarefas, name='backlog_subtarefas'),

    # Backlog da sprint
    path(SPRINT + 'backlog/', views.sprint_backlog, name='sprint_backlog'),
    path(SPRINT + 'backlog/nova/', views.sprint_backlog_criar, name='sprint_backlog_criar'),
    path(SPRINT + 'backlog/adicionar/', views.sprint_backlog_adicionar, name='sprint_backlog_adicionar'),
    path(SPRINT + 'backlog/reordenar/', views.sprint_backlog_reordenar, name='sprint_backlog_reordenar'),
    path(SPRINT + 'backlog/<int:tarefa_id>/editar/', views.sprint_backlog_editar, name='sprint_backlog_editar'),
    path(SPRINT + 'backlog/<int:tarefa_id>/excluir/', views.sprint_backlog_excluir, name='sprint_backlog_excluir'),
    path(SPRINT + 'backlog/<int:tarefa_id>/mover-acima/', views.sprint_backlog_mover_acima, name='sprint_backlog_mover_acima'),
    path(SPRINT + 'backlog/<int:tarefa_id>/mover-abaixo/', views.sprint_backlog_mover_abaixo, name='sprint_backlog_mover_abaixo'),
    path(SPRINT + 'backlog/<int:tarefa_id>/subtarefas/', views.sprint_backlog_subtarefas, name='sprint_backlog_subtarefas'),
    path(SPRINT + 'backlog/<int:tarefa_id>/mover-para-produto/', views.sprint_backlog_mover_para_produto, name='sprint_backlog_mover_para_produto'),

    # Comentários (JSON)
    path('projetos/<int:projeto_id>/tarefas/<int:tarefa_id>/comentarios/', views.comentarios, name='comentarios'),
    path('projetos/<int:projeto_id>/tarefas/<int:tarefa_id>/comentarios/<int:comentario_id>/editar/',
         views.comentario_editar, name='comentario_editar'),
    path('projetos/<int:projeto_id>/tarefas/<int:tarefa_id>/comentarios/<int:comentario_id>/excluir/',
         views.comentario_excluir, name='comentario_excluir'),

    # Retrospectivas
    path(SPRINT + 'retrospectiva/', views.retrospectiva, name='retrospectiva'),
    path(SPRINT + 'retrospectiva/criar/', views.retrospectiva_criar, name='retrospectiva_criar'),
    path(SPRINT + 'retrospectiva/editar/', views.retrospectiva_editar, name='retrospectiva_editar'),
    path(SPRINT + 'retrospectiva/votar/', views.retrospectiva_votar, name='retrospectiva_votar'),
]
