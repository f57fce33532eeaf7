# apps/core/middleware.py

import re

from django.shortcuts import render

# /sprints/ e /projetos/<id>/sprints...
ROTAS_SPRINT = re.compile(r'^/(sprints/|projetos/\d+/sprints)')


class EquipeProjetoMiddleware:
    """
    Middleware que exige equipe e projeto selecionados nas páginas de sprint

    Sem equipe ou sem projeto atual, mostra uma página explicando o que
    selecionar em vez de seguir para a view.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_view(self, request, view_func, view_args, view_kwargs):
        if not hasattr(request, 'user') or not request.user.is_authenticated:
            return None  # Deixar sistema de auth padrão lidar com isso

        if not ROTAS_SPRINT.match(request.path_info):
            return None

        if request.user.equipe_atual(request.session) is None:
            return render(request, 'core/selecao_necessaria.html', {
                'title': 'Selecione uma equipe',
                'mensagem': 'Selecione uma equipe para acessar as sprints.',
                'destino': 'core:equipes',
            })

        if request.user.projeto_atual(request.session) is None:
            return render(request, 'core/selecao_necessaria.html', {
                'title': 'Selecione um projeto',
                'mensagem': 'Selecione um projeto para acessar as sprints.',
                'destino': 'core:projetos',
            })

        return None
