"""Testes das views de autenticação, equipes, projetos, documentos, mensagens e atividades."""

from unittest.mock import MagicMock, patch

import pytest
from django.contrib.messages import get_messages
from django.test import Client
from django.urls import reverse

from apps.core.atividades import registrar_atividade
from apps.core.github_client import GithubClient, GithubError
from apps.core.models import (
    Usuario, Equipe, MembroEquipe, Projeto, Documento, Mensagem,
    SincronizacaoGithub, CHAVE_EQUIPE_ATUAL
)


def textos_mensagens(response):
    return [str(mensagem) for mensagem in get_messages(response.wsgi_request)]


class TestLogin:

    def test_pagina_de_login(self, db):
        response = Client().get(reverse('core:login'))
        assert response.status_code == 200

    def test_usuario_logado_vai_para_projetos(self, cliente_dev):
        response = cliente_dev.get(reverse('core:login'))
        assert response.status_code == 302
        assert response.url == reverse('core:projetos')

    def test_paginas_exigem_login(self, db):
        response = Client().get(reverse('core:projetos'))
        assert response.status_code == 302
        assert response.url.startswith('/login/')

    def test_redireciona_para_o_github(self, db):
        cliente = Client()

        response = cliente.get(reverse('core:github_redirect'))

        assert response.status_code == 302
        assert response.url.startswith('https://github.com/login/oauth/authorize?')
        assert 'client_id=cliente-teste' in response.url
        assert cliente.session['github_oauth_state'] in response.url

    def test_callback_com_state_invalido(self, db):
        cliente = Client()
        sessao = cliente.session
        sessao['github_oauth_state'] = 'esperado'
        sessao.save()

        response = cliente.get(reverse('core:github_callback'), {'code': 'abc', 'state': 'outro'})

        assert response.status_code == 302
        assert response.url == reverse('core:login')
        assert not Usuario.objects.exists()

    def test_callback_cria_o_usuario(self, db):
        cliente = Client()
        sessao = cliente.session
        sessao['github_oauth_state'] = 'esperado'
        sessao.save()

        resposta_token = MagicMock()
        resposta_token.json.return_value = {'access_token': 'token-github'}
        perfil = {'id': 42, 'login': 'octocat', 'name': 'The Octocat', 'email': None}
        emails = [
            {'email': 'secundario@agilis.dev', 'primary': False, 'verified': True},
            {'email': 'octocat@agilis.dev', 'primary': True, 'verified': True},
        ]

        with patch('apps.core.auth_service.requests.post', return_value=resposta_token) as post, \
                patch.object(GithubClient, 'usuario_autenticado', return_value=perfil), \
                patch.object(GithubClient, 'emails_usuario', return_value=emails):
            response = cliente.get(reverse('core:github_callback'), {'code': 'abc', 'state': 'esperado'})

        assert response.status_code == 302
        assert response.url == reverse('core:projetos')
        assert post.call_args.kwargs['data']['client_secret'] == 'segredo-teste'

        usuario = Usuario.objects.get(github_id='42')
        assert usuario.username == 'octocat'
        assert usuario.nome == 'The Octocat'
        assert usuario.email == 'octocat@agilis.dev'
        assert usuario.github_token == 'token-github'
        assert not usuario.has_usable_password()
        assert usuario.email_verificado_em is not None
        assert int(cliente.session['_auth_user_id']) == usuario.id

    def test_callback_atualiza_usuario_existente(self, criar_usuario):
        existente = criar_usuario('octocat', github_id='42')
        cliente = Client()
        sessao = cliente.session
        sessao['github_oauth_state'] = 'esperado'
        sessao.save()

        resposta_token = MagicMock()
        resposta_token.json.return_value = {'access_token': 'novo-token'}
        perfil = {'id': 42, 'login': 'octocat', 'name': 'Octo Atualizado', 'email': 'octo@agilis.dev'}

        with patch('apps.core.auth_service.requests.post', return_value=resposta_token), \
                patch.object(GithubClient, 'usuario_autenticado', return_value=perfil):
            cliente.get(reverse('core:github_callback'), {'code': 'abc', 'state': 'esperado'})

        existente.refresh_from_db()
        assert Usuario.objects.count() == 1
        assert existente.nome == 'Octo Atualizado'
        assert existente.github_token == 'novo-token'
        assert existente.email_verificado_em is not None

    def test_callback_com_erro_do_github(self, db):
        cliente = Client()
        sessao = cliente.session
        sessao['github_oauth_state'] = 'esperado'
        sessao.save()

        resposta_token = MagicMock()
        resposta_token.json.return_value = {'error_description': 'bad_verification_code'}

        with patch('apps.core.auth_service.requests.post', return_value=resposta_token):
            response = cliente.get(reverse('core:github_callback'), {'code': 'abc', 'state': 'esperado'})

        assert response.url == reverse('core:login')
        assert not Usuario.objects.exists()

    def test_logout(self, cliente_dev):
        response = cliente_dev.post(reverse('core:logout'))

        assert response.status_code == 302
        assert '_auth_user_id' not in cliente_dev.session


class TestEquipes:

    def test_criar_equipe(self, cliente_estranho, estranho):
        response = cliente_estranho.post(reverse('core:equipe_criar'), {'nome': 'Equipe Beta'})

        equipe = Equipe.objects.get(nome='Equipe Beta')
        assert response.status_code == 302
        assert response.url == reverse('core:equipe_detalhe', args=[equipe.id])
        assert estranho.papel_na_equipe(equipe) == MembroEquipe.ADMIN
        assert cliente_estranho.session[CHAVE_EQUIPE_ATUAL] == equipe.id

    def test_lista_de_equipes(self, cliente_dev, equipe):
        response = cliente_dev.get(reverse('core:equipes'))

        assert response.status_code == 200
        assert list(response.context['equipes']) == [equipe]

    def test_estranho_nao_ve_a_equipe(self, cliente_estranho, equipe):
        response = cliente_estranho.get(reverse('core:equipe_detalhe', args=[equipe.id]))
        assert response.status_code == 403

    def test_detalhe_da_equipe(self, cliente_dev, admin, equipe):
        response = cliente_dev.get(reverse('core:equipe_detalhe', args=[equipe.id]))

        assert response.status_code == 200
        assert response.context['pode_editar'] is False

    def test_admin_adiciona_membro(self, cliente_admin, estranho, equipe):
        response = cliente_admin.post(reverse('core:membro_adicionar', args=[equipe.id]), {'email': 'erica@agilis.dev'})

        assert response.status_code == 302
        assert estranho.papel_na_equipe(equipe) == MembroEquipe.DEVELOPER

    def test_email_desconhecido(self, cliente_admin, equipe):
        response = cliente_admin.post(reverse('core:membro_adicionar', args=[equipe.id]), {'email': 'ninguem@agilis.dev'})

        assert any('Nenhum usuário cadastrado' in texto for texto in textos_mensagens(response))

    def test_desenvolvedor_nao_adiciona_membro(self, cliente_dev, estranho, equipe):
        response = cliente_dev.post(reverse('core:membro_adicionar', args=[equipe.id]), {'email': 'erica@agilis.dev'})

        assert response.status_code == 403
        assert not estranho.e_membro(equipe)

    def test_remover_membro(self, cliente_admin, desenvolvedor, equipe):
        cliente_admin.post(reverse('core:membro_remover', args=[equipe.id, desenvolvedor.id]))
        assert not desenvolvedor.e_membro(equipe)

    def test_nao_remove_o_ultimo_membro(self, criar_usuario):
        solo = Equipe.objects.create(nome='Solo')
        dono = criar_usuario('solitario', solo, MembroEquipe.ADMIN)
        cliente = Client()
        cliente.force_login(dono)

        response = cliente.post(reverse('core:membro_remover', args=[solo.id, dono.id]))

        assert dono.e_membro(solo)
        assert 'Não é possível remover o último membro da equipe.' in textos_mensagens(response)

    def test_alterar_papel(self, cliente_admin, desenvolvedor, equipe):
        cliente_admin.post(
            reverse('core:membro_papel', args=[equipe.id, desenvolvedor.id]),
            {'papel': MembroEquipe.SCRUM_MASTER}
        )
        assert desenvolvedor.papel_na_equipe(equipe) == MembroEquipe.SCRUM_MASTER

    def test_selecionar_equipe(self, cliente_admin, admin):
        outra = Equipe.objects.create(nome='Equipe Zeta')
        MembroEquipe.objects.create(usuario=admin, equipe=outra, papel=MembroEquipe.DEVELOPER)

        cliente_admin.post(reverse('core:equipe_selecionar', args=[outra.id]))

        assert cliente_admin.session[CHAVE_EQUIPE_ATUAL] == outra.id

    def test_nao_seleciona_equipe_alheia(self, cliente_estranho, equipe):
        response = cliente_estranho.post(reverse('core:equipe_selecionar', args=[equipe.id]))
        assert response.status_code == 403

    def test_excluir_equipe(self, cliente_admin, equipe, projeto):
        cliente_admin.post(reverse('core:equipe_excluir', args=[equipe.id]))

        assert not Equipe.objects.filter(id=equipe.id).exists()
        assert not Projeto.todos.filter(id=projeto.id).exists()


class TestProjetos:

    def test_lista(self, cliente_dev, projeto):
        response = cliente_dev.get(reverse('core:projetos'))

        assert response.status_code == 200
        assert 'Portal do Cliente' in response.content.decode()
        assert response.context['pode_criar'] is False

    def test_sem_equipe_vai_para_equipes(self, cliente_estranho):
        response = cliente_estranho.get(reverse('core:projetos'))

        assert response.status_code == 302
        assert response.url == reverse('core:equipes')

    def test_product_owner_cria_projeto(self, cliente_po, equipe):
        response = cliente_po.post(reverse('core:projeto_criar'), {
            'nome': 'App Mobile',
            'descricao': 'Aplicativo dos clientes',
            'github_repo': 'https://github.com/agilis/app-mobile',
        })

        projeto = Projeto.objects.get(nome='App Mobile')
        assert response.status_code == 302
        assert projeto.equipe == equipe
        assert projeto.duracao_sprint_padrao == 14
        assert projeto.status == 'active'
        assert projeto.atividades.filter(acao='project.created').exists()

    def test_desenvolvedor_nao_cria_projeto(self, cliente_dev):
        response = cliente_dev.post(reverse('core:projeto_criar'), {'nome': 'Proibido'})

        assert response.status_code == 403
        assert not Projeto.objects.filter(nome='Proibido').exists()

    def test_editar_mantem_status(self, cliente_admin, projeto):
        projeto.status = 'on_hold'
        projeto.save()

        cliente_admin.post(reverse('core:projeto_editar', args=[projeto.id]), {'nome': 'Portal Novo'})

        projeto.refresh_from_db()
        assert projeto.nome == 'Portal Novo'
        assert projeto.status == 'on_hold'

    def test_excluir_e_restaurar(self, cliente_admin, projeto):
        cliente_admin.post(reverse('core:projeto_excluir', args=[projeto.id]))

        assert not Projeto.objects.filter(id=projeto.id).exists()
        assert Projeto.todos.get(id=projeto.id).esta_excluido

        cliente_admin.post(reverse('core:projeto_restaurar', args=[projeto.id]))

        assert Projeto.objects.filter(id=projeto.id).exists()

    def test_so_admin_exclui(self, cliente_po, projeto):
        response = cliente_po.post(reverse('core:projeto_excluir', args=[projeto.id]))

        assert response.status_code == 403
        assert Projeto.objects.filter(id=projeto.id).exists()

    def test_excluir_definitivamente(self, cliente_admin, projeto):
        projeto.delete()

        cliente_admin.post(reverse('core:projeto_excluir_definitivamente', args=[projeto.id]))

        assert not Projeto.todos.filter(id=projeto.id).exists()

    def test_projeto_excluido_nao_abre(self, cliente_admin, projeto):
        projeto.delete()
        response = cliente_admin.get(reverse('board:backlog', args=[projeto.id]))
        assert response.status_code == 404

    def test_atalho_para_o_projeto_atual(self, cliente_dev, projeto):
        response = cliente_dev.get(reverse('core:atalho_backlog'))
        assert response.url == reverse('board:backlog', args=[projeto.id])

    def test_atalho_sem_projeto(self, cliente_dev, equipe):
        response = cliente_dev.get(reverse('core:atalho_documentos'))
        assert response.url == reverse('core:projetos')


class TestIntegracaoGithub:

    def test_sincronizar(self, cliente_admin, projeto):
        projeto.github_repo = 'https://github.com/agilis/portal.git'
        projeto.save()
        repositorio = {'name': 'portal', 'stargazers_count': 7, 'forks_count': 2, 'language': 'Python'}

        with patch.object(GithubClient, 'obter_repositorio', return_value=repositorio) as obter:
            cliente_admin.post(reverse('core:projeto_sincronizar_github', args=[projeto.id]))

        obter.assert_called_once_with('agilis/portal')
        sincronizacao = SincronizacaoGithub.objects.get(projeto=projeto)
        assert sincronizacao.tipo == 'commits'
        assert sincronizacao.dados['stars'] == 7
        assert sincronizacao.dados['language'] == 'Python'

    def test_repositorio_nao_encontrado(self, cliente_admin, projeto):
        projeto.github_repo = 'agilis/privado'
        projeto.save()

        with patch.object(GithubClient, 'obter_repositorio', side_effect=GithubError('404', status_code=404)):
            response = cliente_admin.post(reverse('core:projeto_sincronizar_github', args=[projeto.id]))

        assert 'Repositório não encontrado ou privado.' in textos_mensagens(response)
        assert not SincronizacaoGithub.objects.exists()

    def test_repositorio_invalido(self, cliente_admin, projeto):
        response = cliente_admin.post(reverse('core:projeto_sincronizar_github', args=[projeto.id]))

        assert 'Informe um repositório do GitHub válido no projeto.' in textos_mensagens(response)

    def test_desenvolvedor_nao_sincroniza(self, cliente_dev, projeto):
        response = cliente_dev.post(reverse('core:projeto_sincronizar_github', args=[projeto.id]))
        assert response.status_code == 403

    def test_itens_do_repositorio(self, cliente_dev, projeto):
        projeto.github_repo = 'agilis/portal'
        projeto.save()
        issues = [{'number': 1, 'title': 'Bug no login', 'state': 'open', 'html_url': 'https://github.com/agilis/portal/issues/1'}]
        prs = [{'number': 2, 'title': 'Corrige login', 'state': 'open', 'html_url': 'https://github.com/agilis/portal/pull/2'}]

        with patch.object(GithubClient, 'listar_issues', return_value=issues), \
                patch.object(GithubClient, 'listar_pull_requests', return_value=prs):
            response = cliente_dev.get(reverse('core:projeto_github_itens', args=[projeto.id]))

        assert response.status_code == 200
        assert [(item['number'], item['type']) for item in response.json()['items']] == [(1, 'issue'), (2, 'pull_request')]

    def test_itens_sem_repositorio(self, cliente_dev, projeto):
        response = cliente_dev.get(reverse('core:projeto_github_itens', args=[projeto.id]))
        assert response.status_code == 400

    def test_itens_com_falha_do_github(self, cliente_dev, projeto):
        projeto.github_repo = 'agilis/portal'
        projeto.save()

        with patch.object(GithubClient, 'listar_issues', side_effect=GithubError('timeout')):
            response = cliente_dev.get(reverse('core:projeto_github_itens', args=[projeto.id]))

        assert response.status_code == 500
        assert response.json()['success'] is False


class TestAtividades:

    def test_filtro_por_acao_e_usuario(self, cliente_dev, admin, desenvolvedor, projeto):
        registrar_atividade(projeto, admin, 'task.created', projeto, {'title': 'A'})
        registrar_atividade(projeto, desenvolvedor, 'task.created', projeto, {'title': 'B'})
        registrar_atividade(projeto, desenvolvedor, 'sprint.created', projeto)

        url = reverse('core:projeto_atividades', args=[projeto.id])

        response = cliente_dev.get(url, {'action': 'task.created'})
        assert response.status_code == 200
        assert len(response.context['atividades']) == 2

        response = cliente_dev.get(url, {'action': 'task.created', 'user_id': desenvolvedor.id})
        assert [a.metadados['title'] for a in response.context['atividades']] == ['B']

    def test_paginacao(self, cliente_dev, admin, projeto):
        for indice in range(5):
            registrar_atividade(projeto, admin, 'task.updated', projeto, {'ordem': indice})

        response = cliente_dev.get(reverse('core:projeto_atividades', args=[projeto.id]), {'per_page': 2})

        assert len(response.context['atividades']) == 2
        assert response.context['pagina'].paginator.num_pages == 3

    def test_paginacao_padrao_de_vinte_itens(self, cliente_dev, admin, projeto):
        for indice in range(25):
            registrar_atividade(projeto, admin, 'task.updated', projeto, {'ordem': indice})

        response = cliente_dev.get(reverse('core:projeto_atividades', args=[projeto.id]))

        assert len(response.context['atividades']) == 20
        assert response.context['pagina'].paginator.num_pages == 2


class TestDocumentos:

    def test_criar_documentos_em_sequencia(self, cliente_admin, admin, projeto):
        url = reverse('core:documento_criar', args=[projeto.id])
        cliente_admin.post(url, {'titulo': 'Visão', 'conteudo': 'Objetivos do produto'})
        cliente_admin.post(url, {'titulo': 'Arquitetura', 'conteudo': ''})

        documentos = list(projeto.documentos.order_by('posicao').values_list('titulo', 'posicao'))
        assert documentos == [('Visão', 0), ('Arquitetura', 1)]
        assert projeto.documentos.first().criado_por == admin

    def test_desenvolvedor_le_mas_nao_cria(self, cliente_dev, projeto):
        assert cliente_dev.get(reverse('core:documentos', args=[projeto.id])).status_code == 200

        response = cliente_dev.post(reverse('core:documento_criar', args=[projeto.id]), {'titulo': 'Proibido'})
        assert response.status_code == 403

    def test_documento_de_outro_projeto(self, cliente_admin, equipe, projeto):
        outro = Projeto.objects.create(equipe=equipe, nome='Outro')
        documento = Documento.objects.create(projeto=outro, titulo='Alheio')

        response = cliente_admin.get(reverse('core:documento_editar', args=[projeto.id, documento.id]))

        assert response.status_code == 302
        assert 'O documento não pertence a este projeto.' in textos_mensagens(response)

    def test_editar_e_excluir(self, cliente_admin, projeto):
        documento = Documento.objects.create(projeto=projeto, titulo='Rascunho')

        cliente_admin.post(reverse('core:documento_editar', args=[projeto.id, documento.id]), {'titulo': 'Final', 'conteudo': 'Texto'})
        documento.refresh_from_db()
        assert documento.titulo == 'Final'

        cliente_admin.post(reverse('core:documento_excluir', args=[projeto.id, documento.id]))
        assert not Documento.objects.filter(id=documento.id).exists()


class TestMensagens:

    def test_enviar_e_ler(self, cliente_dev, cliente_admin, desenvolvedor, admin):
        cliente_dev.post(reverse('core:mensagem_enviar'), {
            'destinatario': admin.id,
            'assunto': 'Deploy',
            'corpo': 'Podemos subir hoje?',
        })

        mensagem = Mensagem.objects.get(assunto='Deploy')
        assert mensagem.remetente == desenvolvedor
        assert not mensagem.lida

        response = cliente_admin.get(reverse('core:mensagem_detalhe', args=[mensagem.id]))

        assert response.status_code == 200
        mensagem.refresh_from_db()
        assert mensagem.lida
        assert mensagem.lida_em is not None

    def test_remetente_abrir_nao_marca_como_lida(self, cliente_dev, desenvolvedor, admin):
        mensagem = Mensagem.objects.create(remetente=desenvolvedor, destinatario=admin, assunto='Oi', corpo='...')

        cliente_dev.get(reverse('core:mensagem_detalhe', args=[mensagem.id]))

        mensagem.refresh_from_db()
        assert not mensagem.lida

    def test_terceiro_nao_acessa(self, cliente_estranho, desenvolvedor, admin):
        mensagem = Mensagem.objects.create(remetente=desenvolvedor, destinatario=admin, assunto='Privado', corpo='...')

        response = cliente_estranho.get(reverse('core:mensagem_detalhe', args=[mensagem.id]))

        assert response.status_code == 403

    def test_caixa_de_entrada(self, cliente_admin, desenvolvedor, admin):
        Mensagem.objects.create(remetente=desenvolvedor, destinatario=admin, assunto='Nova', corpo='...')

        response = cliente_admin.get(reverse('core:mensagens'))

        assert response.status_code == 200
        assert response.context['nao_lidas'] == 1
        assert response.context['mensagens_nao_lidas'] == 1


class TestHealthCheck:

    def test_saudavel(self, db):
        response = Client().get(reverse('core:health'))

        assert response.status_code == 200
        dados = response.json()
        assert dados['status'] == 'healthy'
        assert dados['database'] == 'ok'
        assert dados['cache'] == 'ok'
