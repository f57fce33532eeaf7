# apps/board/tarefa_service.py

"""
Serviço de Tarefas - Encapsula as regras de posição das tarefas

A posição é sequencial (0..n-1) dentro de cada "balde":
- backlog do produto
- backlog de uma sprint
- coluna (status) do quadro Kanban de uma sprint

Toda alteração que mexe em mais de uma linha roda dentro de uma
transação e trava as linhas reescritas com select_for_update().
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from django.db import transaction
from django.db.models import Max, Q

from apps.core.models import Tarefa

logger = logging.getLogger(__name__)


class TarefaService:
    """Regras de posição, backlog e quadro Kanban"""

    # =================== POSIÇÕES ===================

    def proxima_posicao(self, queryset) -> int:
        """Maior posição do balde + 1 (0 quando vazio)"""
        maximo = queryset.aggregate(maximo=Max('posicao'))['maximo']
        return 0 if maximo is None else maximo + 1

    def renumerar(self, queryset) -> List[Tarefa]:
        """Reescreve as posições como 0..n-1 mantendo a ordem atual"""
        tarefas = list(queryset.select_for_update().order_by('posicao', 'id'))
        alteradas = []
        for indice, tarefa in enumerate(tarefas):
            if tarefa.posicao != indice:
                tarefa.posicao = indice
                alteradas.append(tarefa)

        if alteradas:
            Tarefa.objects.bulk_update(alteradas, ['posicao'])
        return tarefas

    def escopo_backlog(self, projeto, sprint_backlog=None):
        """Balde do backlog do produto ou do backlog da sprint"""
        if sprint_backlog is not None:
            return Tarefa.objects.backlog_sprint(sprint_backlog)
        return Tarefa.objects.backlog_produto(projeto)

    # =================== QUADRO KANBAN ===================

    def criar_tarefa_quadro(self, sprint, dados: Dict) -> Tarefa:
        """Cria a tarefa no fim da coluna do status informado"""
        dados = self._sem_nulos(dados)
        with transaction.atomic():
            posicao = self.proxima_posicao(Tarefa.objects.quadro(sprint, dados['status']))
            tarefa = Tarefa.objects.create(
                projeto=sprint.projeto,
                sprint=sprint,
                posicao=posicao,
                **dados
            )

        logger.info(f"🆕 Tarefa {tarefa.id} criada na sprint {sprint.id} ({tarefa.status})")
        return tarefa

    def atualizar_tarefa_quadro(self, tarefa: Tarefa, dados: Dict) -> Tarefa:
        """
        Atualiza a tarefa do quadro

        Se o status mudou, a coluna antiga é renumerada e, sem posição
        explícita, a tarefa vai para o fim da nova coluna.
        """
        posicao_informada = dados.get('posicao') is not None
        dados = self._campos_atualizaveis(dados)

        with transaction.atomic():
            status_anterior = tarefa.status
            for campo, valor in dados.items():
                setattr(tarefa, campo, valor)

            if tarefa.status != status_anterior:
                self.renumerar(
                    Tarefa.objects.quadro(tarefa.sprint, status_anterior).exclude(id=tarefa.id)
                )
                if not posicao_informada:
                    tarefa.posicao = self.proxima_posicao(
                        Tarefa.objects.quadro(tarefa.sprint, tarefa.status).exclude(id=tarefa.id)
                    )
                logger.info(f"🔀 Tarefa {tarefa.id}: {status_anterior} -> {tarefa.status}")

            tarefa.save()

        return tarefa

    def reordenar_quadro(self, sprint, itens: Iterable[Dict]) -> List[Dict]:
        """
        Aplica status/posição enviados pelo drag-and-drop e renumera
        todas as colunas. Tarefas de outras sprints são ignoradas.

        Returns:
            Lista [{'id', 'status', 'posicao'}] com o estado final
        """
        itens = list(itens)
        with transaction.atomic():
            tarefas = {
                tarefa.id: tarefa
                for tarefa in Tarefa.objects.select_for_update().filter(
                    sprint=sprint, id__in=[item['id'] for item in itens]
                )
            }
            for item in itens:
                tarefa = tarefas.get(item['id'])
                if tarefa is None:
                    continue
                tarefa.status = item['status']
                tarefa.posicao = item['posicao']

            if tarefas:
                Tarefa.objects.bulk_update(list(tarefas.values()), ['status', 'posicao'])

            resultado = []
            for status in Tarefa.STATUS_QUADRO:
                for tarefa in self.renumerar(Tarefa.objects.quadro(sprint, status)):
                    resultado.append({'id': tarefa.id, 'status': tarefa.status, 'posicao': tarefa.posicao})

        logger.info(f"↕️ Quadro da sprint {sprint.id} reordenado ({len(tarefas)} tarefas)")
        return resultado

    def adicionar_do_backlog(self, sprint, ids: List[int], incluir_subtarefas: bool = False) -> Tuple[bool, str, List[Tarefa]]:
        """
        Move tarefas raiz do backlog do produto para a coluna "Planned"

        Returns:
            Tuple[sucesso, mensagem, tarefas_movidas]
        """
        ids = set(ids)
        with transaction.atomic():
            tarefas = list(
                Tarefa.objects.select_for_update()
                .backlog_produto(sprint.projeto)
                .raiz()
                .filter(id__in=ids)
                .order_by('posicao', 'id')
            )
            if not ids or len(tarefas) != len(ids):
                return False, 'Algumas tarefas não estão disponíveis no backlog do produto.', []

            posicao = self.proxima_posicao(Tarefa.objects.quadro(sprint, Tarefa.PLANEJADA))
            movidas = []
            for tarefa in self._com_subtarefas(tarefas, incluir_subtarefas):
                tarefa.sprint = sprint
                tarefa.sprint_backlog = None
                tarefa.status = Tarefa.PLANEJADA
                tarefa.posicao = posicao
                tarefa.save(update_fields=['sprint', 'sprint_backlog', 'status', 'posicao', 'atualizado_em'])
                movidas.append(tarefa)
                posicao += 1

            self.renumerar(Tarefa.objects.backlog_produto(sprint.projeto))

        logger.info(f"📥 {len(movidas)} tarefa(s) adicionadas à sprint {sprint.id}")
        return True, f'{len(movidas)} tarefa(s) adicionada(s) à sprint.', movidas

    def mover_para_backlog(self, tarefa: Tarefa) -> Tarefa:
        """Tira a tarefa do quadro e coloca no fim do backlog do produto"""
        with transaction.atomic():
            sprint = tarefa.sprint
            status_anterior = tarefa.status

            tarefa.posicao = self.proxima_posicao(Tarefa.objects.backlog_produto(tarefa.projeto))
            tarefa.sprint = None
            tarefa.sprint_backlog = None
            tarefa.status = Tarefa.BACKLOG
            tarefa.save()

            if sprint is not None:
                self.renumerar(Tarefa.objects.quadro(sprint, status_anterior))

        return tarefa

    def devolver_tarefas_da_sprint(self, sprint) -> int:
        """
        Quadro e backlog da sprint voltam para o fim do backlog do produto
        Usado antes de excluir a sprint
        """
        with transaction.atomic():
            tarefas = list(
                Tarefa.objects.select_for_update()
                .filter(Q(sprint=sprint) | Q(sprint_backlog=sprint))
                .order_by('posicao', 'id')
            )
            posicao = self.proxima_posicao(Tarefa.objects.backlog_produto(sprint.projeto))
            for tarefa in tarefas:
                tarefa.sprint = None
                tarefa.sprint_backlog = None
                tarefa.status = Tarefa.BACKLOG
                tarefa.posicao = posicao
                posicao += 1

            if tarefas:
                Tarefa.objects.bulk_update(tarefas, ['sprint', 'sprint_backlog', 'status', 'posicao'])

        return len(tarefas)

    # =================== BACKLOG (PRODUTO E SPRINT) ===================

    def validar_tarefa_pai(self, projeto, pai: Optional[Tarefa], tipo: Optional[str],
                           sprint_backlog=None, tarefa: Optional[Tarefa] = None) -> Optional[str]:
        """
        Regras de subtarefa. Retorna a mensagem de erro ou None.
        """
        if pai is None:
            return None

        if tarefa is not None and pai.id == tarefa.id:
            return 'Uma tarefa não pode ser subtarefa dela mesma.'

        sprint_backlog_id = sprint_backlog.id if sprint_backlog is not None else None
        if pai.projeto_id != projeto.id or pai.sprint_id is not None or pai.sprint_backlog_id != sprint_backlog_id:
            if sprint_backlog is not None:
                return 'A tarefa pai precisa ser do mesmo projeto e estar no backlog da sprint.'
            return 'A tarefa pai precisa ser do mesmo projeto e estar no backlog do produto.'

        if pai.tipo not in Tarefa.TIPOS_PAI:
            return 'Apenas épicos e histórias podem ter subtarefas.'

        if tipo == 'epic':
            return 'Um épico não pode ser subtarefa.'

        return None

    def criar_tarefa_backlog(self, projeto, dados: Dict, sprint_backlog=None) -> Tarefa:
        """Cria a tarefa no fim do backlog (status Backlog, prioridade 5 por padrão)"""
        dados = self._sem_nulos(dados)
        with transaction.atomic():
            posicao = self.proxima_posicao(self.escopo_backlog(projeto, sprint_backlog))
            tarefa = Tarefa.objects.create(
                projeto=projeto,
                sprint=None,
                sprint_backlog=sprint_backlog,
                status=Tarefa.BACKLOG,
                posicao=posicao,
                **dados
            )
        return tarefa

    def atualizar_tarefa_backlog(self, tarefa: Tarefa, dados: Dict) -> Tarefa:
        for campo, valor in self._campos_atualizaveis(dados).items():
            setattr(tarefa, campo, valor)
        tarefa.save()
        return tarefa

    def excluir_tarefa_backlog(self, tarefa: Tarefa):
        """Exclui a tarefa e fecha o buraco na numeração do balde"""
        with transaction.atomic():
            escopo = self.escopo_backlog(tarefa.projeto, tarefa.sprint_backlog)
            tarefa.delete()
            self.renumerar(escopo)

    def reordenar_backlog(self, escopo, itens: Iterable[Dict]) -> List[Dict]:
        """
        Aplica as posições enviadas às tarefas do balde e renumera
        Tarefas fora do balde são ignoradas
        """
        itens = list(itens)
        with transaction.atomic():
            tarefas = {
                tarefa.id: tarefa
                for tarefa in escopo.select_for_update().filter(id__in=[item['id'] for item in itens])
            }
            for item in itens:
                tarefa = tarefas.get(item['id'])
                if tarefa is not None:
                    tarefa.posicao = item['posicao']

            if tarefas:
                Tarefa.objects.bulk_update(list(tarefas.values()), ['posicao'])

            tarefas_ordenadas = self.renumerar(escopo)

        return [{'id': tarefa.id, 'posicao': tarefa.posicao} for tarefa in tarefas_ordenadas]

    def mover(self, tarefa: Tarefa, escopo, direcao: str) -> bool:
        """
        Troca a posição com a tarefa vizinha ('acima' ou 'abaixo')
        Retorna False quando já está no topo/fim
        """
        with transaction.atomic():
            if direcao == 'acima':
                vizinha = escopo.filter(posicao__lt=tarefa.posicao).order_by('-posicao', '-id').first()
            else:
                vizinha = escopo.filter(posicao__gt=tarefa.posicao).order_by('posicao', 'id').first()

            if vizinha is None:
                return False

            tarefa.posicao, vizinha.posicao = vizinha.posicao, tarefa.posicao
            tarefa.save(update_fields=['posicao'])
            vizinha.save(update_fields=['posicao'])

        return True

    def criar_subtarefas(self, pai: Tarefa, lista_dados: List[Dict]) -> List[Tarefa]:
        """Cria as subtarefas no mesmo balde do pai, em sequência no fim"""
        escopo = self.escopo_backlog(pai.projeto, pai.sprint_backlog)
        criadas = []
        with transaction.atomic():
            posicao = self.proxima_posicao(escopo)
            for indice, dados in enumerate(lista_dados):
                criadas.append(Tarefa.objects.create(
                    projeto=pai.projeto,
                    tarefa_pai=pai,
                    sprint=None,
                    sprint_backlog=pai.sprint_backlog,
                    status=Tarefa.BACKLOG,
                    posicao=posicao + indice,
                    **self._sem_nulos(dados)
                ))

        logger.info(f"🧩 {len(criadas)} subtarefa(s) criadas em {pai.id}")
        return criadas

    def adicionar_ao_backlog_sprint(self, sprint, ids: List[int], incluir_subtarefas: bool = False) -> Tuple[bool, str, List[Tarefa]]:
        """
        Planeja tarefas raiz do backlog do produto para o backlog da sprint

        Returns:
            Tuple[sucesso, mensagem, tarefas_movidas]
        """
        ids = set(ids)
        with transaction.atomic():
            tarefas = list(
                Tarefa.objects.select_for_update()
                .backlog_produto(sprint.projeto)
                .raiz()
                .filter(id__in=ids)
                .order_by('posicao', 'id')
            )
            if not ids or len(tarefas) != len(ids):
                return False, 'Algumas tarefas não estão disponíveis no backlog do produto.', []

            posicao = self.proxima_posicao(Tarefa.objects.backlog_sprint(sprint))
            movidas = []
            for tarefa in self._com_subtarefas(tarefas, incluir_subtarefas):
                tarefa.sprint_backlog = sprint
                tarefa.posicao = posicao
                tarefa.save(update_fields=['sprint_backlog', 'posicao', 'atualizado_em'])
                movidas.append(tarefa)
                posicao += 1

            self.renumerar(Tarefa.objects.backlog_produto(sprint.projeto))

        return True, f'{len(movidas)} tarefa(s) adicionada(s) ao backlog da sprint.', movidas

    def mover_para_backlog_produto(self, tarefa: Tarefa) -> Tarefa:
        """Devolve a tarefa do backlog da sprint para o fim do backlog do produto"""
        with transaction.atomic():
            sprint = tarefa.sprint_backlog
            tarefa.posicao = self.proxima_posicao(Tarefa.objects.backlog_produto(tarefa.projeto))
            tarefa.sprint_backlog = None
            tarefa.save(update_fields=['sprint_backlog', 'posicao', 'atualizado_em'])

            if sprint is not None:
                self.renumerar(Tarefa.objects.backlog_sprint(sprint))

        return tarefa

    # =================== MÉTODOS PRIVADOS (ENCAPSULADOS) ===================

    def _com_subtarefas(self, tarefas: List[Tarefa], incluir_subtarefas: bool):
        """Cada tarefa seguida das suas subtarefas que ainda estão no backlog do produto"""
        for tarefa in tarefas:
            yield tarefa
            if incluir_subtarefas:
                yield from tarefa.subtarefas.filter(
                    sprint__isnull=True, sprint_backlog__isnull=True
                ).order_by('posicao', 'id')

    def _sem_nulos(self, dados: Dict) -> Dict:
        """Remove valores vazios para que os defaults do model valham"""
        return {campo: valor for campo, valor in dados.items() if valor is not None and valor != ''}

    def _campos_atualizaveis(self, dados: Dict) -> Dict:
        """
        Campos não anuláveis vazios são ignorados no update;
        os anuláveis podem ser limpos
        """
        anulaveis = {'responsavel', 'story_points', 'tarefa_pai', 'descricao'}
        return {
            campo: valor
            for campo, valor in dados.items()
            if campo in anulaveis or (valor is not None and valor != '')
        }


# Instância global do serviço (Singleton pattern)
tarefa_service = TarefaService()
