"""Testes da exigência de equipe e projeto selecionados nas páginas de sprint."""

import pytest
from django.test import Client
from django.urls import reverse

from apps.core.models import Projeto, CHAVE_PROJETO_ATUAL


class TestEquipeProjetoMiddleware:

    def test_sem_equipe(self, cliente_estranho):
        response = cliente_estranho.get(reverse('core:atalho_sprints'))

        assert response.status_code == 200
        assert 'core/selecao_necessaria.html' in [t.name for t in response.templates]
        assert 'Selecione uma equipe para acessar as sprints.' in response.content.decode()

    def test_sem_projeto(self, cliente_dev, equipe):
        response = cliente_dev.get(reverse('core:atalho_sprints'))

        assert response.status_code == 200
        assert 'Selecione um projeto para acessar as sprints.' in response.content.decode()

    def test_com_equipe_e_projeto_segue_para_a_view(self, cliente_dev, projeto):
        response = cliente_dev.get(reverse('core:atalho_sprints'))

        assert response.status_code == 302
        assert response.url == reverse('board:sprints', args=[projeto.id])

    def test_paginas_de_sprint_do_projeto(self, cliente_estranho, projeto, sprint):
        response = cliente_estranho.get(reverse('board:sprint_detalhe', args=[projeto.id, sprint.id]))

        assert response.status_code == 200
        assert 'Selecione uma equipe' in response.content.decode()

    def test_outras_paginas_nao_sao_afetadas(self, cliente_estranho):
        response = cliente_estranho.get(reverse('core:equipes'))

        assert response.status_code == 200
        assert 'core/selecao_necessaria.html' not in [t.name for t in response.templates]

    def test_anonimo_vai_para_o_login(self, db):
        response = Client().get(reverse('core:atalho_sprints'))

        assert response.status_code == 302
        assert response.url.startswith('/login/')

    def test_projeto_da_sessao_tem_prioridade(self, cliente_dev, equipe, projeto):
        segundo = Projeto.objects.create(equipe=equipe, nome='Segundo')
        sessao = cliente_dev.session
        sessao[CHAVE_PROJETO_ATUAL] = segundo.id
        sessao.save()

        response = cliente_dev.get(reverse('core:atalho_sprints'))

        assert response.url == reverse('board:sprints', args=[segundo.id])


class TestContextoDoMenu:

    def test_menu_com_equipe_e_projeto(self, cliente_dev, equipe, projeto):
        response = cliente_dev.get(reverse('core:equipes'))

        assert list(response.context['equipes_menu']) == [equipe]
        assert list(response.context['projetos_menu']) == [projeto]
        assert response.context['equipe_atual'] == equipe
        assert response.context['projeto_atual'] == projeto
