"""Testes dos models: papéis, seleção atual, soft delete, baldes de tarefas e votos."""

from datetime import timedelta

import pytest
from django.core.exceptions import ValidationError
from django.utils import timezone

from apps.core.models import (
    Projeto, Sprint, Tarefa, MembroEquipe, Retrospectiva, Mensagem,
    CHAVE_EQUIPE_ATUAL, CHAVE_PROJETO_ATUAL
)


class TestUsuario:

    def test_nome_e_iniciais(self, admin):
        assert admin.get_full_name() == 'Ana Souza'
        assert admin.iniciais() == 'AS'

    def test_nome_cai_para_username(self, criar_usuario):
        usuario = criar_usuario('semnome')
        assert usuario.get_full_name() == 'semnome'

    def test_admin_passa_em_qualquer_papel(self, admin, equipe):
        assert admin.tem_papel(equipe, MembroEquipe.PRODUCT_OWNER)
        assert admin.tem_algum_papel(equipe, [MembroEquipe.SCRUM_MASTER])

    def test_desenvolvedor_so_tem_o_proprio_papel(self, desenvolvedor, equipe):
        assert desenvolvedor.tem_papel(equipe, MembroEquipe.DEVELOPER)
        assert not desenvolvedor.tem_papel(equipe, MembroEquipe.PRODUCT_OWNER)

    def test_papel_de_quem_nao_e_membro(self, estranho, equipe):
        assert estranho.papel_na_equipe(equipe) is None
        assert not estranho.e_membro(equipe)

    def test_equipe_atual_usa_a_sessao(self, admin, equipe):
        from apps.core.models import Equipe

        outra = Equipe.objects.create(nome='Equipe Beta')
        MembroEquipe.objects.create(usuario=admin, equipe=outra)

        assert admin.equipe_atual({}) == equipe
        assert admin.equipe_atual({CHAVE_EQUIPE_ATUAL: outra.id}) == outra

    def test_equipe_da_sessao_sem_acesso_e_ignorada(self, admin, equipe):
        from apps.core.models import Equipe

        alheia = Equipe.objects.create(nome='Equipe Alheia')
        assert admin.equipe_atual({CHAVE_EQUIPE_ATUAL: alheia.id}) == equipe

    def test_projeto_atual(self, admin, equipe, projeto):
        segundo = Projeto.objects.create(equipe=equipe, nome='App Mobile')

        assert admin.projeto_atual({}) == projeto
        assert admin.projeto_atual({CHAVE_PROJETO_ATUAL: segundo.id}) == segundo

    def test_sem_equipe_nao_ha_projeto_atual(self, estranho):
        assert estranho.equipe_atual({}) is None
        assert estranho.projeto_atual({}) is None


class TestProjeto:

    def test_soft_delete_e_restauracao(self, projeto):
        projeto.delete()

        assert not Projeto.objects.filter(id=projeto.id).exists()
        assert Projeto.todos.get(id=projeto.id).esta_excluido

        projeto.restaurar()
        assert Projeto.objects.filter(id=projeto.id).exists()

    def test_exclusao_definitiva(self, projeto):
        projeto.excluir_definitivamente()
        assert not Projeto.todos.filter(id=projeto.id).exists()

    def test_sprint_ativa(self, projeto, sprint):
        assert projeto.sprint_ativa() is None

        sprint.status = Sprint.ATIVA
        sprint.save()
        assert projeto.sprint_ativa() == sprint


class TestSprint:

    def test_dias_restantes(self, sprint):
        sprint.data_fim = timezone.localdate() + timedelta(days=3)
        assert sprint.dias_restantes() == 3

    def test_sprint_concluida_nao_tem_prazo(self, sprint):
        sprint.status = Sprint.CONCLUIDA
        sprint.data_fim = timezone.localdate() - timedelta(days=5)
        assert sprint.dias_restantes() == 0


class TestTarefa:

    def test_defaults(self, criar_tarefa):
        tarefa = criar_tarefa('Login')
        assert tarefa.status == Tarefa.BACKLOG
        assert tarefa.prioridade == 5
        assert tarefa.tipo == 'task'

    def test_baldes(self, criar_tarefa, sprint):
        no_produto = criar_tarefa('Produto')
        no_backlog_sprint = criar_tarefa('Backlog sprint', sprint_backlog=sprint)
        no_quadro = criar_tarefa('Quadro', sprint=sprint, status=Tarefa.EM_ANDAMENTO)

        assert list(Tarefa.objects.backlog_produto(sprint.projeto)) == [no_produto]
        assert list(Tarefa.objects.backlog_sprint(sprint)) == [no_backlog_sprint]
        assert list(Tarefa.objects.quadro(sprint)) == [no_quadro]
        assert list(Tarefa.objects.quadro(sprint, Tarefa.PLANEJADA)) == []

    def test_sprint_de_outro_projeto_e_rejeitada(self, criar_tarefa, equipe):
        outro = Projeto.objects.create(equipe=equipe, nome='Outro')
        hoje = timezone.localdate()
        sprint_alheia = Sprint.objects.create(projeto=outro, nome='S', data_inicio=hoje, data_fim=hoje)

        with pytest.raises(ValidationError):
            criar_tarefa('Inconsistente', sprint=sprint_alheia)

    def test_pai_de_outro_projeto_e_rejeitado(self, criar_tarefa, equipe):
        outro = Projeto.objects.create(equipe=equipe, nome='Outro')
        pai_alheio = criar_tarefa('Épico', projeto=outro, tipo='epic')

        with pytest.raises(ValidationError):
            criar_tarefa('Filha', tarefa_pai=pai_alheio)

    def test_total_story_points(self, criar_tarefa):
        pai = criar_tarefa('História', tipo='story', story_points=3)
        criar_tarefa('Sub 1', tarefa_pai=pai, story_points=2)
        criar_tarefa('Sub 2', tarefa_pai=pai)

        assert pai.e_pai()
        assert pai.total_story_points() == 5

    def test_para_dict(self, criar_tarefa, desenvolvedor):
        tarefa = criar_tarefa('Card', responsavel=desenvolvedor, story_points=8)
        dados = tarefa.para_dict()

        assert dados['id'] == tarefa.id
        assert dados['titulo'] == 'Card'
        assert dados['story_points'] == 8
        assert dados['responsavel'] == {'id': desenvolvedor.id, 'nome': 'Davi Costa', 'iniciais': 'DC'}
        assert dados['etiquetas'] == []


class TestRetrospectiva:

    @pytest.fixture
    def retro(self, sprint, admin):
        sprint.status = Sprint.CONCLUIDA
        sprint.save()
        return Retrospectiva.objects.create(sprint=sprint, criado_por=admin, foi_bem='Deploy')

    def test_voto_alterna(self, retro, desenvolvedor):
        assert retro.registrar_voto(desenvolvedor, 'went_well', True) == 'criado'
        assert retro.contagem_votos()['went_well'] == {'upvotes': 1, 'downvotes': 0}

        assert retro.registrar_voto(desenvolvedor, 'went_well', False) == 'alterado'
        assert retro.contagem_votos()['went_well'] == {'upvotes': 0, 'downvotes': 1}

        assert retro.registrar_voto(desenvolvedor, 'went_well', False) == 'removido'
        assert retro.votos.count() == 0

    def test_votos_por_categoria_sao_independentes(self, retro, desenvolvedor, admin):
        retro.registrar_voto(desenvolvedor, 'went_well', True)
        retro.registrar_voto(desenvolvedor, 'to_improve', False)
        retro.registrar_voto(admin, 'went_well', True)

        contagem = retro.contagem_votos()
        assert contagem['went_well']['upvotes'] == 2
        assert contagem['to_improve']['downvotes'] == 1
        assert contagem['went_wrong'] == {'upvotes': 0, 'downvotes': 0}

        meus = retro.votos_do_usuario(desenvolvedor)
        assert meus['went_well'] == {'upvote': True, 'downvote': False}
        assert meus['to_improve'] == {'upvote': False, 'downvote': True}


class TestMensagem:

    def test_marcar_como_lida(self, admin, desenvolvedor):
        mensagem = Mensagem.objects.create(remetente=admin, destinatario=desenvolvedor, assunto='Oi', corpo='Tudo bem?')
        assert not mensagem.lida

        mensagem.marcar_como_lida()
        mensagem.refresh_from_db()
        assert mensagem.lida
        assert mensagem.lida_em is not None
