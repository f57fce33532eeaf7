"""Testes das permissões por papel na equipe."""

import pytest
from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import PermissionDenied

from apps.core.permissions import AgilisPermissions, verificar


class TestPermissoesDeProjeto:

    def test_criar_projeto_por_papel(self, admin, product_owner, scrum_master, desenvolvedor, equipe):
        assert AgilisPermissions.pode_criar_projeto(admin, equipe)
        assert AgilisPermissions.pode_criar_projeto(product_owner, equipe)
        assert AgilisPermissions.pode_criar_projeto(scrum_master, equipe)
        assert not AgilisPermissions.pode_criar_projeto(desenvolvedor, equipe)

    def test_criar_projeto_sem_equipe(self, admin):
        assert not AgilisPermissions.pode_criar_projeto(admin, None)

    def test_apenas_admin_exclui_projeto(self, admin, product_owner, projeto):
        assert AgilisPermissions.pode_excluir_projeto(admin, projeto)
        assert not AgilisPermissions.pode_excluir_projeto(product_owner, projeto)

    def test_estranho_nao_ve_projeto(self, estranho, projeto):
        assert not AgilisPermissions.pode_ver_projeto(estranho, projeto)

    def test_anonimo_nao_ve_nada(self, projeto):
        anonimo = AnonymousUser()
        assert not AgilisPermissions.pode_ver_projeto(anonimo, projeto)
        assert not AgilisPermissions.pode_gerenciar_backlog(anonimo, projeto)


class TestPermissoesDeBacklog:

    def test_gerenciar_backlog_do_produto(self, admin, product_owner, scrum_master, desenvolvedor, projeto):
        assert AgilisPermissions.pode_gerenciar_backlog(admin, projeto)
        assert AgilisPermissions.pode_gerenciar_backlog(product_owner, projeto)
        assert not AgilisPermissions.pode_gerenciar_backlog(scrum_master, projeto)
        assert not AgilisPermissions.pode_gerenciar_backlog(desenvolvedor, projeto)

    def test_superusuario_sempre_gerencia_backlog(self, criar_usuario, projeto):
        root = criar_usuario('root', is_superuser=True)
        assert AgilisPermissions.pode_gerenciar_backlog(root, projeto)


class TestPermissoesDeSprint:

    def test_qualquer_membro_edita_sprint(self, desenvolvedor, sprint):
        assert AgilisPermissions.pode_criar_sprint(desenvolvedor, sprint.projeto)
        assert AgilisPermissions.pode_editar_sprint(desenvolvedor, sprint)
        assert AgilisPermissions.pode_excluir_sprint(desenvolvedor, sprint)

    def test_estranho_nao_ve_sprint(self, estranho, sprint):
        assert not AgilisPermissions.pode_ver_sprint(estranho, sprint)


class TestVerificar:

    def test_lanca_permission_denied(self):
        with pytest.raises(PermissionDenied, match='Sem acesso'):
            verificar(False, 'Sem acesso')

    def test_passa_quando_permitido(self):
        verificar(True)
