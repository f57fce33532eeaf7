"""Testes das regras de posição do quadro Kanban e dos backlogs."""

import pytest

from apps.board.tarefa_service import tarefa_service
from apps.core.models import Tarefa


def posicoes(queryset):
    return list(queryset.order_by('posicao', 'id').values_list('titulo', 'posicao'))


class TestBacklogDoProduto:

    def test_criacao_vai_para_o_fim(self, projeto):
        for titulo in ('A', 'B', 'C'):
            tarefa_service.criar_tarefa_backlog(projeto, {'titulo': titulo, 'tipo': '', 'prioridade': None})

        assert posicoes(Tarefa.objects.backlog_produto(projeto)) == [('A', 0), ('B', 1), ('C', 2)]
        tarefa = Tarefa.objects.get(titulo='A')
        assert tarefa.status == Tarefa.BACKLOG
        assert tarefa.prioridade == 5
        assert tarefa.tipo == 'task'

    def test_exclusao_fecha_o_buraco(self, projeto):
        tarefas = [tarefa_service.criar_tarefa_backlog(projeto, {'titulo': t}) for t in 'ABC']

        tarefa_service.excluir_tarefa_backlog(tarefas[0])

        assert posicoes(Tarefa.objects.backlog_produto(projeto)) == [('B', 0), ('C', 1)]

    def test_reordenar_renumera_e_ignora_tarefas_de_fora(self, projeto, sprint, criar_tarefa):
        a, b, c = [tarefa_service.criar_tarefa_backlog(projeto, {'titulo': t}) for t in 'ABC']
        fora = criar_tarefa('Fora', sprint=sprint, status=Tarefa.PLANEJADA)

        resultado = tarefa_service.reordenar_backlog(
            Tarefa.objects.backlog_produto(projeto),
            [{'id': c.id, 'posicao': 0}, {'id': a.id, 'posicao': 5}, {'id': b.id, 'posicao': 3}, {'id': fora.id, 'posicao': 0}]
        )

        assert resultado == [{'id': c.id, 'posicao': 0}, {'id': b.id, 'posicao': 1}, {'id': a.id, 'posicao': 2}]
        fora.refresh_from_db()
        assert fora.sprint_id == sprint.id

    def test_mover_acima_e_abaixo(self, projeto):
        a, b, c = [tarefa_service.criar_tarefa_backlog(projeto, {'titulo': t}) for t in 'ABC']
        escopo = Tarefa.objects.backlog_produto(projeto)

        assert tarefa_service.mover(b, escopo, 'acima')
        assert posicoes(escopo) == [('B', 0), ('A', 1), ('C', 2)]

        assert tarefa_service.mover(b, escopo, 'abaixo')
        assert posicoes(escopo) == [('A', 0), ('B', 1), ('C', 2)]

    def test_mover_no_limite_nao_faz_nada(self, projeto):
        a, b = [tarefa_service.criar_tarefa_backlog(projeto, {'titulo': t}) for t in 'AB']
        escopo = Tarefa.objects.backlog_produto(projeto)

        assert not tarefa_service.mover(a, escopo, 'acima')
        assert not tarefa_service.mover(b, escopo, 'abaixo')
        assert posicoes(escopo) == [('A', 0), ('B', 1)]

    def test_subtarefas_continuam_depois_do_fim_do_balde(self, projeto):
        historia = tarefa_service.criar_tarefa_backlog(projeto, {'titulo': 'História', 'tipo': 'story'})
        tarefa_service.criar_tarefa_backlog(projeto, {'titulo': 'Outra'})

        criadas = tarefa_service.criar_subtarefas(historia, [{'titulo': 'S1'}, {'titulo': 'S2', 'tipo': 'bug'}])

        assert [(s.titulo, s.posicao) for s in criadas] == [('S1', 2), ('S2', 3)]
        assert all(s.tarefa_pai_id == historia.id for s in criadas)
        assert all(s.status == Tarefa.BACKLOG for s in criadas)
        assert criadas[1].tipo == 'bug'


class TestValidacaoDaTarefaPai:

    def test_sem_pai_e_valido(self, projeto):
        assert tarefa_service.validar_tarefa_pai(projeto, None, 'task') is None

    def test_pai_precisa_ser_epico_ou_historia(self, projeto, criar_tarefa):
        pai = criar_tarefa('Tarefa comum', tipo='task')
        assert tarefa_service.validar_tarefa_pai(projeto, pai, 'task') == 'Apenas épicos e histórias podem ter subtarefas.'

    def test_epico_nao_pode_ser_subtarefa(self, projeto, criar_tarefa):
        pai = criar_tarefa('Épico', tipo='epic')
        assert tarefa_service.validar_tarefa_pai(projeto, pai, 'epic') == 'Um épico não pode ser subtarefa.'

    def test_pai_precisa_estar_no_mesmo_balde(self, projeto, sprint, criar_tarefa):
        pai = criar_tarefa('História no quadro', tipo='story', sprint=sprint, status=Tarefa.PLANEJADA)
        assert 'backlog do produto' in tarefa_service.validar_tarefa_pai(projeto, pai, 'task')

        pai_produto = criar_tarefa('História no produto', tipo='story')
        erro = tarefa_service.validar_tarefa_pai(projeto, pai_produto, 'task', sprint_backlog=sprint)
        assert 'backlog da sprint' in erro

    def test_tarefa_nao_pode_ser_pai_de_si_mesma(self, projeto, criar_tarefa):
        historia = criar_tarefa('História', tipo='story')
        erro = tarefa_service.validar_tarefa_pai(projeto, historia, 'story', tarefa=historia)
        assert erro == 'Uma tarefa não pode ser subtarefa dela mesma.'


class TestQuadroKanban:

    def test_criar_no_fim_da_coluna(self, sprint):
        primeira = tarefa_service.criar_tarefa_quadro(sprint, {'titulo': 'A', 'status': Tarefa.PLANEJADA})
        segunda = tarefa_service.criar_tarefa_quadro(sprint, {'titulo': 'B', 'status': Tarefa.PLANEJADA})
        outra_coluna = tarefa_service.criar_tarefa_quadro(sprint, {'titulo': 'C', 'status': Tarefa.EM_ANDAMENTO})

        assert (primeira.posicao, segunda.posicao, outra_coluna.posicao) == (0, 1, 0)
        assert primeira.projeto_id == sprint.projeto_id

    def test_mudanca_de_status_renumera_a_coluna_antiga(self, sprint):
        a, b, c = [tarefa_service.criar_tarefa_quadro(sprint, {'titulo': t, 'status': Tarefa.PLANEJADA}) for t in 'ABC']
        tarefa_service.criar_tarefa_quadro(sprint, {'titulo': 'D', 'status': Tarefa.EM_ANDAMENTO})

        tarefa_service.atualizar_tarefa_quadro(a, {'status': Tarefa.EM_ANDAMENTO})

        assert posicoes(Tarefa.objects.quadro(sprint, Tarefa.PLANEJADA)) == [('B', 0), ('C', 1)]
        assert posicoes(Tarefa.objects.quadro(sprint, Tarefa.EM_ANDAMENTO)) == [('D', 0), ('A', 1)]

    def test_mudanca_de_status_com_posicao_explicita(self, sprint):
        a = tarefa_service.criar_tarefa_quadro(sprint, {'titulo': 'A', 'status': Tarefa.PLANEJADA})
        tarefa_service.criar_tarefa_quadro(sprint, {'titulo': 'D', 'status': Tarefa.CONCLUIDA})

        tarefa_service.atualizar_tarefa_quadro(a, {'status': Tarefa.CONCLUIDA, 'posicao': 0})

        a.refresh_from_db()
        assert a.posicao == 0

    def test_atualizacao_pode_limpar_campos_anulaveis(self, sprint, desenvolvedor):
        tarefa = tarefa_service.criar_tarefa_quadro(sprint, {
            'titulo': 'A', 'status': Tarefa.PLANEJADA, 'responsavel': desenvolvedor, 'story_points': 3
        })

        tarefa_service.atualizar_tarefa_quadro(tarefa, {'responsavel': None, 'story_points': None, 'titulo': ''})

        tarefa.refresh_from_db()
        assert tarefa.responsavel is None
        assert tarefa.story_points is None
        assert tarefa.titulo == 'A'

    def test_reordenar_quadro(self, sprint, projeto, criar_tarefa):
        a, b = [tarefa_service.criar_tarefa_quadro(sprint, {'titulo': t, 'status': Tarefa.PLANEJADA}) for t in 'AB']
        c = tarefa_service.criar_tarefa_quadro(sprint, {'titulo': 'C', 'status': Tarefa.EM_ANDAMENTO})
        alheia = criar_tarefa('Alheia')

        resultado = tarefa_service.reordenar_quadro(sprint, [
            {'id': b.id, 'status': Tarefa.EM_ANDAMENTO, 'posicao': 0},
            {'id': c.id, 'status': Tarefa.EM_ANDAMENTO, 'posicao': 1},
            {'id': alheia.id, 'status': Tarefa.CONCLUIDA, 'posicao': 0},
        ])

        assert resultado == [
            {'id': a.id, 'status': Tarefa.PLANEJADA, 'posicao': 0},
            {'id': b.id, 'status': Tarefa.EM_ANDAMENTO, 'posicao': 0},
            {'id': c.id, 'status': Tarefa.EM_ANDAMENTO, 'posicao': 1},
        ]
        alheia.refresh_from_db()
        assert alheia.status == Tarefa.BACKLOG

    def test_adicionar_do_backlog_com_subtarefas(self, sprint, projeto):
        historia = tarefa_service.criar_tarefa_backlog(projeto, {'titulo': 'História', 'tipo': 'story'})
        solta = tarefa_service.criar_tarefa_backlog(projeto, {'titulo': 'Solta'})
        [sub] = tarefa_service.criar_subtarefas(historia, [{'titulo': 'Sub'}])
        tarefa_service.criar_tarefa_quadro(sprint, {'titulo': 'Já planejada', 'status': Tarefa.PLANEJADA})

        sucesso, mensagem, movidas = tarefa_service.adicionar_do_backlog(sprint, [historia.id], incluir_subtarefas=True)

        assert sucesso
        assert [t.id for t in movidas] == [historia.id, sub.id]
        assert posicoes(Tarefa.objects.quadro(sprint, Tarefa.PLANEJADA)) == [('Já planejada', 0), ('História', 1), ('Sub', 2)]
        assert all(t.status == Tarefa.PLANEJADA for t in movidas)
        assert posicoes(Tarefa.objects.backlog_produto(projeto)) == [('Solta', 0)]
        assert solta.id not in [t.id for t in movidas]

    def test_adicionar_do_backlog_sem_subtarefas(self, sprint, projeto):
        historia = tarefa_service.criar_tarefa_backlog(projeto, {'titulo': 'História', 'tipo': 'story'})
        [sub] = tarefa_service.criar_subtarefas(historia, [{'titulo': 'Sub'}])

        sucesso, _, movidas = tarefa_service.adicionar_do_backlog(sprint, [historia.id])

        assert sucesso
        assert [t.id for t in movidas] == [historia.id]
        sub.refresh_from_db()
        assert sub.sprint_id is None
        assert sub.posicao == 0

    def test_adicionar_do_backlog_com_id_invalido(self, sprint, projeto, criar_tarefa):
        tarefa = tarefa_service.criar_tarefa_backlog(projeto, {'titulo': 'A'})
        no_quadro = criar_tarefa('Quadro', sprint=sprint, status=Tarefa.PLANEJADA)

        sucesso, mensagem, movidas = tarefa_service.adicionar_do_backlog(sprint, [tarefa.id, no_quadro.id])

        assert not sucesso
        assert movidas == []
        tarefa.refresh_from_db()
        assert tarefa.sprint_id is None

    def test_mover_para_backlog(self, sprint, projeto):
        tarefa_service.criar_tarefa_backlog(projeto, {'titulo': 'No backlog'})
        a, b = [tarefa_service.criar_tarefa_quadro(sprint, {'titulo': t, 'status': Tarefa.EM_ANDAMENTO}) for t in 'AB']

        tarefa_service.mover_para_backlog(a)

        a.refresh_from_db()
        assert a.sprint_id is None
        assert a.status == Tarefa.BACKLOG
        assert posicoes(Tarefa.objects.backlog_produto(projeto)) == [('No backlog', 0), ('A', 1)]
        assert posicoes(Tarefa.objects.quadro(sprint, Tarefa.EM_ANDAMENTO)) == [('B', 0)]

    def test_devolver_tarefas_da_sprint(self, sprint, projeto):
        tarefa_service.criar_tarefa_backlog(projeto, {'titulo': 'Produto'})
        tarefa_service.criar_tarefa_quadro(sprint, {'titulo': 'Quadro', 'status': Tarefa.CONCLUIDA})
        tarefa_service.criar_tarefa_backlog(projeto, {'titulo': 'Backlog sprint'}, sprint_backlog=sprint)

        assert tarefa_service.devolver_tarefas_da_sprint(sprint) == 2

        assert Tarefa.objects.filter(sprint=sprint).count() == 0
        assert Tarefa.objects.filter(sprint_backlog=sprint).count() == 0
        backlog = Tarefa.objects.backlog_produto(projeto)
        assert backlog.count() == 3
        assert set(backlog.values_list('status', flat=True)) == {Tarefa.BACKLOG}
        assert sorted(backlog.values_list('posicao', flat=True)) == [0, 1, 2]


class TestBacklogDaSprint:

    def test_criar_no_backlog_da_sprint(self, sprint, projeto):
        tarefa = tarefa_service.criar_tarefa_backlog(projeto, {'titulo': 'A'}, sprint_backlog=sprint)

        assert tarefa.sprint_backlog_id == sprint.id
        assert tarefa.sprint_id is None
        assert tarefa.posicao == 0

    def test_adicionar_e_devolver(self, sprint, projeto):
        a, b, c = [tarefa_service.criar_tarefa_backlog(projeto, {'titulo': t}) for t in 'ABC']

        sucesso, _, movidas = tarefa_service.adicionar_ao_backlog_sprint(sprint, [c.id, a.id])

        assert sucesso
        assert posicoes(Tarefa.objects.backlog_sprint(sprint)) == [('A', 0), ('C', 1)]
        assert posicoes(Tarefa.objects.backlog_produto(projeto)) == [('B', 0)]

        a.refresh_from_db()
        tarefa_service.mover_para_backlog_produto(a)

        assert posicoes(Tarefa.objects.backlog_sprint(sprint)) == [('C', 0)]
        assert posicoes(Tarefa.objects.backlog_produto(projeto)) == [('B', 0), ('A', 1)]

    def test_adicionar_lista_vazia(self, sprint):
        sucesso, _, movidas = tarefa_service.adicionar_ao_backlog_sprint(sprint, [])
        assert not sucesso
        assert movidas == []
