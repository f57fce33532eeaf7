# apps/core/urls.py

from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    # === AUTENTICAÇÃO ===
    # Login via GitHub (OAuth)
    path('login/', views.login_view, name='login'),
    path('auth/github/', views.github_redirect, name='github_redirect'),
    path('auth/github/callback/', views.github_callback, name='github_callback'),
    path('logout/', views.logout_view, name='logout'),

    path('', views.home, name='home'),

    # === EQUIPES ===
    path('equipes/', views.equipes, name='equipes'),
    path('equipes/nova/', views.equipe_criar, name='equipe_criar'),
    path('equipes/<int:equipe_id>/', views.equipe_detalhe, name='equipe_detalhe'),
    path('equipes/<int:equipe_id>/editar/', views.equipe_editar, name='equipe_editar'),
    path('equipes/<int:equipe_id>/excluir/', views.equipe_excluir, name='equipe_excluir'),
    path('equipes/<int:equipe_id>/selecionar/', views.equipe_selecionar, name='equipe_selecionar'),
    path('equipes/<int:equipe_id>/membros/adicionar/', views.membro_adicionar, name='membro_adicionar'),
    path('equipes/<int:equipe_id>/membros/<int:usuario_id>/remover/', views.membro_remover, name='membro_remover'),
    path('equipes/<int:equipe_id>/membros/<int:usuario_id>/papel/', views.membro_papel, name='membro_papel'),

    # === PROJETOS ===
    path('projetos/', views.projetos, name='projetos'),
    path('projetos/novo/', views.projeto_criar, name='projeto_criar'),
    path('projetos/<int:projeto_id>/editar/', views.projeto_editar, name='projeto_editar'),
    path('projetos/<int:projeto_id>/excluir/', views.projeto_excluir, name='projeto_excluir'),
    path('projetos/<int:projeto_id>/restaurar/', views.projeto_restaurar, name='projeto_restaurar'),
    path('projetos/<int:projeto_id>/excluir-definitivamente/', views.projeto_excluir_definitivamente,
         name='projeto_excluir_definitivamente'),
    path('projetos/<int:projeto_id>/selecionar/', views.projeto_selecionar, name='projeto_selecionar'),
    path('projetos/<int:projeto_id>/github/sincronizar/', views.projeto_sincronizar_github, name='projeto_sincronizar_github'),
    path('projetos/<int:projeto_id>/github/itens/', views.projeto_github_itens, name='projeto_github_itens'),
    path('projetos/<int:projeto_id>/atividades/', views.projeto_atividades, name='projeto_atividades'),

    # Atalhos para o projeto atual
    path('backlog/', views.atalho_backlog, name='atalho_backlog'),
    path('sprints/', views.atalho_sprints, name='atalho_sprints'),
    path('documentos/', views.atalho_documentos, name='atalho_documentos'),
    path('atividades/', views.atalho_atividades, name='atalho_atividades'),

    # === DOCUMENTOS ===
    path('projetos/<int:projeto_id>/documentos/', views.documentos, name='documentos'),
    path('projetos/<int:projeto_id>/documentos/novo/', views.documento_criar, name='documento_criar'),
    path('projetos/<int:projeto_id>/documentos/<int:documento_id>/', views.documento_editar, name='documento_editar'),
    path('projetos/<int:projeto_id>/documentos/<int:documento_id>/excluir/', views.documento_excluir, name='documento_excluir'),

    # === MENSAGENS ===
    path('mensagens/', views.mensagens, name='mensagens'),
    path('mensagens/enviar/', views.mensagem_enviar, name='mensagem_enviar'),
    path('mensagens/<int:mensagem_id>/', views.mensagem_detalhe, name='mensagem_detalhe'),
    path('mensagens/<int:mensagem_id>/excluir/', views.mensagem_excluir, name='mensagem_excluir'),

    # === MONITORAMENTO ===
    path('health/', views.health_check, name='health'),
]
