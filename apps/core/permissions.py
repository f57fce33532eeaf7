# apps/core/permissions.py

from functools import wraps
from django.shortcuts import get_object_or_404, redirect
from django.contrib import messages
from django.core.exceptions import PermissionDenied

from .models import MembroEquipe

PAPEIS_GESTAO = [MembroEquipe.ADMIN, MembroEquipe.PRODUCT_OWNER, MembroEquipe.SCRUM_MASTER]
PAPEIS_BACKLOG = [MembroEquipe.ADMIN, MembroEquipe.PRODUCT_OWNER]


class AgilisPermissions:
    """
    Sistema de permissões do Agilis
    Baseado no papel do usuário em cada equipe:
    admin, product_owner, scrum_master e developer
    """

    # === EQUIPES ===

    @staticmethod
    def pode_ver_equipe(user, equipe):
        return user.is_authenticated and user.e_membro(equipe)

    @staticmethod
    def pode_criar_equipe(user):
        return user.is_authenticated

    @staticmethod
    def pode_editar_equipe(user, equipe):
        """Apenas administradores da equipe"""
        return user.is_authenticated and user.tem_papel(equipe, MembroEquipe.ADMIN)

    @staticmethod
    def pode_excluir_equipe(user, equipe):
        return user.is_authenticated and user.tem_papel(equipe, MembroEquipe.ADMIN)

    # === PROJETOS ===

    @staticmethod
    def pode_listar_projetos(user, sessao=None):
        """Precisa ter uma equipe selecionada"""
        return user.is_authenticated and user.equipe_atual(sessao) is not None

    @staticmethod
    def pode_ver_projeto(user, projeto):
        return user.is_authenticated and user.e_membro(projeto.equipe)

    @staticmethod
    def pode_criar_projeto(user, equipe):
        """Admin, product owner ou scrum master da equipe atual"""
        if not user.is_authenticated or equipe is None:
            return False
        return user.tem_algum_papel(equipe, PAPEIS_GESTAO)

    @staticmethod
    def pode_editar_projeto(user, projeto):
        if not user.is_authenticated:
            return False
        return user.tem_algum_papel(projeto.equipe, PAPEIS_GESTAO)

    @staticmethod
    def pode_excluir_projeto(user, projeto):
        return user.is_authenticated and user.tem_papel(projeto.equipe, MembroEquipe.ADMIN)

    @staticmethod
    def pode_restaurar_projeto(user, projeto):
        return AgilisPermissions.pode_ver_projeto(user, projeto)

    @staticmethod
    def pode_gerenciar_backlog(user, projeto):
        """
        Criar, editar, ordenar e excluir itens do backlog do produto
        Superusuários sempre podem
        """
        if not user.is_authenticated:
            return False
        if user.is_superuser:
            return True
        return user.tem_algum_papel(projeto.equipe, PAPEIS_BACKLOG)

    # === SPRINTS ===

    @staticmethod
    def pode_ver_sprint(user, sprint):
        return user.is_authenticated and user.e_membro(sprint.projeto.equipe)

    @staticmethod
    def pode_criar_sprint(user, projeto):
        return user.is_authenticated and user.e_membro(projeto.equipe)

    @staticmethod
    def pode_editar_sprint(user, sprint):
        return AgilisPermissions.pode_ver_sprint(user, sprint)

    @staticmethod
    def pode_excluir_sprint(user, sprint):
        return AgilisPermissions.pode_ver_sprint(user, sprint)


# Decoradores para views

def verificar(permitido, mensagem='Você não tem permissão para esta ação.'):
    """Lança PermissionDenied (HTTP 403) quando a verificação falha"""
    if not permitido:
        raise PermissionDenied(mensagem)


def requer_acesso_projeto(view_func):
    """
    Decorador que verifica acesso ao projeto
    Espera que a view receba projeto_id como parâmetro
    """

    @wraps(view_func)
    def wrapped_view(request, projeto_id, *args, **kwargs):
        from .models import Projeto

        projeto = get_object_or_404(Projeto.objects.select_related('equipe'), id=projeto_id)
        verificar(
            AgilisPermissions.pode_ver_projeto(request.user, projeto),
            'Você não tem acesso a este projeto.'
        )

        # Adiciona o projeto ao request para uso na view
        request.projeto = projeto
        return view_func(request, projeto_id, *args, **kwargs)

    return wrapped_view


def requer_acesso_sprint(view_func):
    """
    Decorador que verifica acesso à sprint
    Espera que a view receba projeto_id e sprint_id como parâmetros
    """

    @wraps(view_func)
    def wrapped_view(request, projeto_id, sprint_id, *args, **kwargs):
        from .models import Sprint

        sprint = get_object_or_404(
            Sprint.objects.select_related('projeto__equipe'),
            id=sprint_id,
            projeto_id=projeto_id,
            projeto__excluido_em__isnull=True,
        )
        verificar(
            AgilisPermissions.pode_ver_sprint(request.user, sprint),
            'Você não tem acesso a esta sprint.'
        )

        request.sprint = sprint
        request.projeto = sprint.projeto
        return view_func(request, projeto_id, sprint_id, *args, **kwargs)

    return wrapped_view


def requer_equipe_atual(view_func):
    """Redireciona para a lista de equipes quando não há equipe selecionada"""

    @wraps(view_func)
    def wrapped_view(request, *args, **kwargs):
        equipe = request.user.equipe_atual(request.session)
        if equipe is None:
            messages.info(request, 'Crie ou selecione uma equipe para continuar.')
            return redirect('core:equipes')

        request.equipe = equipe
        return view_func(request, *args, **kwargs)

    return wrapped_view
