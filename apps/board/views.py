# apps/board/views.py

from datetime import timedelta

from django.shortcuts import render, get_object_or_404, redirect
from django.contrib.auth.decorators import login_required
from django.views.decorators.http import require_http_methods, require_POST
from django.http import JsonResponse
from django.contrib import messages
from django.db import transaction, IntegrityError
from django.db.models import Count
from django.utils import timezone
from django.core.paginator import Paginator

from apps.core.models import Sprint, Tarefa, Retrospectiva, ComentarioTarefa
from apps.core.permissions import (
    AgilisPermissions,
    requer_acesso_projeto,
    requer_acesso_sprint,
    verificar
)
from apps.core.atividades import registrar_atividade, registrar_atividade_excluida
from apps.core.utils import redirecionar_de_volta, mensagens_erros_form, ler_json, periodo_legivel
from . import eventos
from .forms import (
    SprintForm, SprintUpdateForm, TarefaSprintForm, TarefaBacklogForm, SubtarefaForm,
    FiltroBacklogForm, ItemOrdenacaoForm, RetrospectivaForm, VotoForm, ComentarioForm,
    validar_itens
)
from .tarefa_service import tarefa_service


def _quer_json(request):
    return request.content_type == 'application/json'


def _erro_json(erros, status=400):
    return JsonResponse({'success': False, 'errors': erros}, status=status)


def _nao_encontrado_json(mensagem):
    return JsonResponse({'success': False, 'error': mensagem}, status=404)


def _ler_ids(request):
    """
    Lê task_ids/include_subtasks do corpo JSON ou do POST
    Retorna (ids, incluir_subtarefas); ids é None se algum id for inválido
    """
    if _quer_json(request):
        dados = ler_json(request) or {}
        ids = dados.get('task_ids') or []
        incluir = bool(dados.get('include_subtasks'))
    else:
        ids = request.POST.getlist('task_ids')
        incluir = request.POST.get('include_subtasks') in ('1', 'true', 'on')

    if not isinstance(ids, list):
        return None, incluir
    try:
        return [int(tarefa_id) for tarefa_id in ids], incluir
    except (TypeError, ValueError):
        return None, incluir


# =================== SPRINTS ===================

@login_required
@requer_acesso_projeto
def sprints_lista(request, projeto_id):
    """Lista de sprints do projeto"""
    projeto = request.projeto

    sprints = projeto.sprints.annotate(
        total_tarefas=Count('tarefas', distinct=True)
    ).order_by('-data_inicio', '-id')

    context = {
        'title': f'Sprints - {projeto.nome}',
        'projeto': projeto,
        'sprints': sprints,
        'sprint_ativa': projeto.sprint_ativa(),
        'pode_criar': AgilisPermissions.pode_criar_sprint(request.user, projeto),
    }

    return render(request, 'board/sprints.html', context)


@login_required
@requer_acesso_projeto
@require_http_methods(['GET', 'POST'])
def sprint_criar(request, projeto_id):
    """
    Criação de sprint
    As tarefas marcadas do backlog do produto já entram no quadro como "Planned"
    """
    projeto = request.projeto
    verificar(
        AgilisPermissions.pode_criar_sprint(request.user, projeto),
        'Você não pode criar sprints neste projeto.'
    )

    if request.method == 'POST':
        form = SprintForm(request.POST, projeto=projeto)

        if not form.is_valid():
            mensagens_erros_form(request, form)
            return redirecionar_de_volta(request, 'board:sprint_criar', projeto_id=projeto.id)

        tarefas = list(form.cleaned_data['task_ids'])

        with transaction.atomic():
            sprint = form.save(commit=False)
            sprint.projeto = projeto
            sprint.status = Sprint.PLANEJAMENTO
            sprint.save()

            if tarefas:
                tarefa_service.adicionar_do_backlog(sprint, [tarefa.id for tarefa in tarefas])

            registrar_atividade(projeto, request.user, 'sprint.created', sprint, {
                'name': sprint.nome,
                'start_date': sprint.data_inicio.isoformat(),
                'end_date': sprint.data_fim.isoformat(),
                'tasks_count': len(tarefas),
            })

        messages.success(request, f'Sprint "{sprint.nome}" criada com sucesso!')
        return redirect('board:sprint_detalhe', projeto_id=projeto.id, sprint_id=sprint.id)

    hoje = timezone.localdate()
    form = SprintForm(projeto=projeto, initial={
        'data_inicio': hoje,
        'data_fim': hoje + timedelta(days=projeto.duracao_sprint_padrao),
    })

    context = {
        'title': 'Nova Sprint',
        'projeto': projeto,
        'form': form,
    }

    return render(request, 'board/sprint_form.html', context)


@login_required
@requer_acesso_sprint
def sprint_detalhe(request, projeto_id, sprint_id):
    """
    Quadro Kanban da sprint
    Colunas Planned / Active / Completed com as tarefas raiz
    """
    sprint = request.sprint
    projeto = request.projeto

    tarefas = list(
        Tarefa.objects.quadro(sprint)
        .raiz()
        .filter(status__in=Tarefa.STATUS_QUADRO)
        .select_related('responsavel')
        .prefetch_related('etiquetas', 'subtarefas')
        .order_by('posicao', 'id')
    )

    colunas = [
        {
            'status': status,
            'titulo': rotulo,
            'tarefas': [tarefa for tarefa in tarefas if tarefa.status == status],
        }
        for status, rotulo in Tarefa.STATUS_CHOICES
        if status in Tarefa.STATUS_QUADRO
    ]

    context = {
        'title': f'{sprint.nome} - Kanban',
        'projeto': projeto,
        'sprint': sprint,
        'colunas': colunas,
        'backlog_sprint': Tarefa.objects.backlog_sprint(sprint).raiz().select_related('responsavel'),
        'backlog_produto': Tarefa.objects.backlog_produto(projeto).raiz(),
        'tem_retrospectiva': Retrospectiva.objects.filter(sprint=sprint).exists(),
        'prazo': periodo_legivel(sprint.dias_restantes()),
        'membros': projeto.equipe.membros.order_by('nome', 'username'),
        'status_quadro': Tarefa.STATUS_QUADRO,
        'pode_editar': AgilisPermissions.pode_editar_sprint(request.user, sprint),
        'websocket_group': eventos.grupo_sprint(sprint.id),
    }

    return render(request, 'board/sprint_detalhe.html', context)


@login_required
@requer_acesso_sprint
@require_http_methods(['GET', 'POST'])
def sprint_editar(request, projeto_id, sprint_id):
    sprint = request.sprint
    verificar(AgilisPermissions.pode_editar_sprint(request.user, sprint))

    if request.method == 'POST':
        status_anterior = sprint.status
        form = SprintUpdateForm(request.POST, instance=sprint)

        if not form.is_valid():
            mensagens_erros_form(request, form)
            return redirecionar_de_volta(request, 'board:sprint_editar', projeto_id=projeto_id, sprint_id=sprint_id)

        with transaction.atomic():
            campos = list(form.changed_data)
            sprint = form.save()

            metadados = {'updated_fields': campos}
            if sprint.status != status_anterior:
                metadados['status_changed'] = {'from': status_anterior, 'to': sprint.status}
            registrar_atividade(sprint.projeto, request.user, 'sprint.updated', sprint, metadados)

        messages.success(request, 'Sprint atualizada com sucesso!')
        return redirect('board:sprint_detalhe', projeto_id=projeto_id, sprint_id=sprint.id)

    context = {
        'title': f'Editar {sprint.nome}',
        'projeto': request.projeto,
        'sprint': sprint,
        'form': SprintUpdateForm(instance=sprint),
    }

    return render(request, 'board/sprint_form.html', context)


@login_required
@requer_acesso_sprint
@require_POST
def sprint_excluir(request, projeto_id, sprint_id):
    """Exclui a sprint - as tarefas voltam para o backlog do produto"""
    sprint = request.sprint
    projeto = request.projeto
    verificar(AgilisPermissions.pode_excluir_sprint(request.user, sprint))

    nome = sprint.nome
    with transaction.atomic():
        devolvidas = tarefa_service.devolver_tarefas_da_sprint(sprint)
        sprint.delete()
        registrar_atividade_excluida(projeto, request.user, 'sprint.deleted', Sprint, sprint_id, {
            'name': nome,
            'returned_tasks': devolvidas,
        })

    messages.success(request, f'Sprint "{nome}" excluída.')
    return redirect('board:sprints', projeto_id=projeto.id)


# =================== TAREFAS DO QUADRO ===================

@login_required
@requer_acesso_sprint
def tarefas_index(request, projeto_id, sprint_id):
    return redirect('board:sprint_detalhe', projeto_id=projeto_id, sprint_id=sprint_id)


@login_required
@requer_acesso_sprint
@require_POST
def tarefa_criar(request, projeto_id, sprint_id):
    """Cria tarefa no fim da coluna escolhida"""
    sprint = request.sprint
    projeto = request.projeto
    verificar(AgilisPermissions.pode_editar_sprint(request.user, sprint))

    form = TarefaSprintForm(request.POST, projeto=projeto)
    if not form.is_valid():
        mensagens_erros_form(request, form)
        return redirecionar_de_volta(request, 'board:sprint_detalhe', projeto_id=projeto_id, sprint_id=sprint_id)

    dados = form.dados_enviados()
    dados.pop('posicao', None)

    with transaction.atomic():
        tarefa = tarefa_service.criar_tarefa_quadro(sprint, dados)
        registrar_atividade(projeto, request.user, 'task.created', tarefa, {
            'title': tarefa.titulo,
            'sprint_id': sprint.id,
        })

    eventos.tarefa_criada(tarefa)

    if request.htmx:
        return render(request, 'board/partials/tarefa_card.html', {'tarefa': tarefa, 'sprint': sprint, 'projeto': projeto})

    messages.success(request, f'Tarefa "{tarefa.titulo}" criada.')
    return redirecionar_de_volta(request, 'board:sprint_detalhe', projeto_id=projeto_id, sprint_id=sprint_id)


@login_required
@requer_acesso_sprint
@require_POST
def tarefa_editar(request, projeto_id, sprint_id, tarefa_id):
    """
    Atualização parcial da tarefa do quadro
    Mudança de status renumera a coluna antiga
    """
    sprint = request.sprint
    projeto = request.projeto
    verificar(AgilisPermissions.pode_editar_sprint(request.user, sprint))

    tarefa = get_object_or_404(Tarefa, id=tarefa_id)
    if tarefa.sprint_id != sprint.id or tarefa.projeto_id != projeto.id:
        messages.error(request, 'A tarefa não pertence a esta sprint.')
        return redirecionar_de_volta(request, 'board:sprint_detalhe', projeto_id=projeto_id, sprint_id=sprint_id)

    form = TarefaSprintForm(request.POST, projeto=projeto, parcial=True)
    if not form.is_valid():
        mensagens_erros_form(request, form)
        return redirecionar_de_volta(request, 'board:sprint_detalhe', projeto_id=projeto_id, sprint_id=sprint_id)

    dados = form.dados_enviados()
    with transaction.atomic():
        tarefa = tarefa_service.atualizar_tarefa_quadro(tarefa, dados)
        registrar_atividade(projeto, request.user, 'task.updated', tarefa, {
            'updated_fields': sorted(dados.keys()),
        })

    eventos.tarefa_atualizada(tarefa)

    messages.success(request, 'Tarefa atualizada.')
    return redirecionar_de_volta(request, 'board:sprint_detalhe', projeto_id=projeto_id, sprint_id=sprint_id)


@login_required
@requer_acesso_sprint
@require_POST
def tarefas_reordenar(request, projeto_id, sprint_id):
    """
    Drag-and-drop do quadro
    Corpo: {"tasks": [{"id": 1, "status": "Active", "position": 0}, ...]}
    """
    sprint = request.sprint
    verificar(AgilisPermissions.pode_editar_sprint(request.user, sprint))

    dados = ler_json(request)
    if dados is None:
        return _erro_json({'body': ['JSON inválido.']})

    itens, erros = validar_itens(dados.get('tasks'), ItemOrdenacaoForm, exige_status=True)
    if erros:
        return _erro_json(erros)

    resultado = tarefa_service.reordenar_quadro(sprint, [item.como_item() for item in itens])
    eventos.tarefas_reordenadas(sprint.id, resultado)

    return JsonResponse({'success': True, 'tarefas': resultado})


@login_required
@requer_acesso_sprint
@require_POST
def tarefas_adicionar_do_backlog(request, projeto_id, sprint_id):
    """Move tarefas do backlog do produto para a coluna "Planned" """
    sprint = request.sprint
    projeto = request.projeto
    verificar(AgilisPermissions.pode_editar_sprint(request.user, sprint))

    ids, incluir_subtarefas = _ler_ids(request)
    if not ids:
        mensagem = 'Selecione ao menos uma tarefa válida.'
        if _quer_json(request):
            return _erro_json({'task_ids': [mensagem]})
        messages.error(request, mensagem)
        return redirecionar_de_volta(request, 'board:sprint_detalhe', projeto_id=projeto_id, sprint_id=sprint_id)

    with transaction.atomic():
        sucesso, mensagem, movidas = tarefa_service.adicionar_do_backlog(sprint, ids, incluir_subtarefas)
        for tarefa in movidas:
            registrar_atividade(projeto, request.user, 'task.added_to_sprint', tarefa, {'sprint_id': sprint.id})

    if not sucesso:
        if _quer_json(request):
            return _erro_json({'task_ids': [mensagem]})
        messages.error(request, mensagem)
        return redirecionar_de_volta(request, 'board:sprint_detalhe', projeto_id=projeto_id, sprint_id=sprint_id)

    for tarefa in movidas:
        eventos.tarefa_criada(tarefa)

    if _quer_json(request):
        return JsonResponse({'success': True, 'message': mensagem, 'tarefas': [tarefa.para_dict() for tarefa in movidas]})

    messages.success(request, mensagem)
    return redirecionar_de_volta(request, 'board:sprint_detalhe', projeto_id=projeto_id, sprint_id=sprint_id)


@login_required
@requer_acesso_sprint
@require_POST
def tarefa_mover_para_backlog(request, projeto_id, sprint_id, tarefa_id):
    sprint = request.sprint
    projeto = request.projeto
    verificar(AgilisPermissions.pode_editar_sprint(request.user, sprint))

    tarefa = get_object_or_404(Tarefa, id=tarefa_id)
    if tarefa.sprint_id != sprint.id or tarefa.projeto_id != projeto.id:
        messages.error(request, 'A tarefa não pertence a esta sprint.')
        return redirecionar_de_volta(request, 'board:sprint_detalhe', projeto_id=projeto_id, sprint_id=sprint_id)

    with transaction.atomic():
        tarefa_service.mover_para_backlog(tarefa)
        registrar_atividade(projeto, request.user, 'task.moved_to_backlog', tarefa, {'sprint_id': sprint.id})

    eventos.tarefa_excluida(sprint.id, tarefa.id)

    messages.success(request, f'Tarefa "{tarefa.titulo}" voltou para o backlog.')
    return redirecionar_de_volta(request, 'board:sprint_detalhe', projeto_id=projeto_id, sprint_id=sprint_id)


# =================== BACKLOG (PRODUTO E SPRINT) ===================
#
# As operações são as mesmas nos dois backlogs; sprint=None indica o
# backlog do produto.

def _pode_alterar_backlog(user, projeto, sprint):
    if sprint is None:
        return AgilisPermissions.pode_gerenciar_backlog(user, projeto)
    return AgilisPermissions.pode_editar_sprint(user, sprint)


def _voltar_ao_backlog(request, projeto, sprint):
    if sprint is None:
        return redirecionar_de_volta(request, 'board:backlog', projeto_id=projeto.id)
    return redirecionar_de_volta(request, 'board:sprint_backlog', projeto_id=projeto.id, sprint_id=sprint.id)


def _tarefa_do_backlog(projeto, sprint, tarefa_id):
    """Tarefa do balde ou None; 404 quando o id não existe"""
    tarefa = get_object_or_404(Tarefa, id=tarefa_id)
    if not tarefa_service.escopo_backlog(projeto, sprint).filter(id=tarefa.id).exists():
        return None
    return tarefa


def _listar_backlog(request, projeto, sprint=None):
    filtro = FiltroBacklogForm(request.GET or None)
    tarefas = filtro.filtrar(
        tarefa_service.escopo_backlog(projeto, sprint).raiz()
    ).select_related('responsavel').prefetch_related('subtarefas', 'etiquetas').order_by('posicao', 'criado_em')

    paginator = Paginator(tarefas, filtro.itens_por_pagina())
    pagina = paginator.get_page(request.GET.get('page'))

    context = {
        'title': f'Backlog da {sprint.nome}' if sprint else f'Backlog - {projeto.nome}',
        'projeto': projeto,
        'sprint': sprint,
        'pagina': pagina,
        'tarefas': pagina.object_list,
        'filtro': filtro,
        'membros': projeto.equipe.membros.order_by('nome', 'username'),
        'tipos': Tarefa.TIPO_CHOICES,
        'pode_gerenciar_backlog': _pode_alterar_backlog(request.user, projeto, sprint),
    }
    if sprint is not None:
        context['backlog_produto'] = Tarefa.objects.backlog_produto(projeto).raiz()

    if request.htmx:
        return render(request, 'board/partials/backlog_lista.html', context)
    return render(request, 'board/backlog.html', context)


def _criar_no_backlog(request, projeto, sprint=None):
    verificar(_pode_alterar_backlog(request.user, projeto, sprint))

    form = TarefaBacklogForm(request.POST, projeto=projeto)
    if not form.is_valid():
        mensagens_erros_form(request, form)
        return _voltar_ao_backlog(request, projeto, sprint)

    dados = form.dados_enviados()
    erro = tarefa_service.validar_tarefa_pai(projeto, dados.get('tarefa_pai'), dados.get('tipo') or 'task', sprint)
    if erro:
        messages.error(request, erro)
        return _voltar_ao_backlog(request, projeto, sprint)

    with transaction.atomic():
        tarefa = tarefa_service.criar_tarefa_backlog(projeto, dados, sprint)
        registrar_atividade(projeto, request.user, 'task.created', tarefa, {
            'title': tarefa.titulo,
            'backlog': 'sprint' if sprint else 'product',
        })

    messages.success(request, f'Tarefa "{tarefa.titulo}" adicionada ao backlog.')
    return _voltar_ao_backlog(request, projeto, sprint)


def _editar_no_backlog(request, projeto, tarefa_id, sprint=None):
    verificar(_pode_alterar_backlog(request.user, projeto, sprint))

    tarefa = _tarefa_do_backlog(projeto, sprint, tarefa_id)
    if tarefa is None:
        messages.error(request, 'A tarefa não está neste backlog.')
        return _voltar_ao_backlog(request, projeto, sprint)

    form = TarefaBacklogForm(request.POST, projeto=projeto, parcial=True)
    if not form.is_valid():
        mensagens_erros_form(request, form)
        return _voltar_ao_backlog(request, projeto, sprint)

    dados = form.dados_enviados()
    if 'tarefa_pai' in dados or 'tipo' in dados:
        pai = dados['tarefa_pai'] if 'tarefa_pai' in dados else tarefa.tarefa_pai
        erro = tarefa_service.validar_tarefa_pai(
            projeto, pai, dados.get('tipo') or tarefa.tipo, sprint, tarefa=tarefa
        )
        if erro:
            messages.error(request, erro)
            return _voltar_ao_backlog(request, projeto, sprint)

    with transaction.atomic():
        tarefa_service.atualizar_tarefa_backlog(tarefa, dados)
        registrar_atividade(projeto, request.user, 'task.updated', tarefa, {
            'updated_fields': sorted(dados.keys()),
        })

    messages.success(request, 'Tarefa atualizada.')
    return _voltar_ao_backlog(request, projeto, sprint)


def _excluir_do_backlog(request, projeto, tarefa_id, sprint=None):
    verificar(_pode_alterar_backlog(request.user, projeto, sprint))

    tarefa = _tarefa_do_backlog(projeto, sprint, tarefa_id)
    if tarefa is None:
        messages.error(request, 'A tarefa não está neste backlog.')
        return _voltar_ao_backlog(request, projeto, sprint)

    titulo = tarefa.titulo
    with transaction.atomic():
        tarefa_service.excluir_tarefa_backlog(tarefa)
        registrar_atividade_excluida(projeto, request.user, 'task.deleted', Tarefa, tarefa_id, {'title': titulo})

    messages.success(request, f'Tarefa "{titulo}" excluída.')
    return _voltar_ao_backlog(request, projeto, sprint)


def _reordenar_backlog(request, projeto, sprint=None):
    """Corpo: {"tasks": [{"id": 1, "position": 0}, ...]}"""
    verificar(_pode_alterar_backlog(request.user, projeto, sprint))

    dados = ler_json(request)
    if dados is None:
        return _erro_json({'body': ['JSON inválido.']})

    itens, erros = validar_itens(dados.get('tasks'))
    if erros:
        return _erro_json(erros)

    resultado = tarefa_service.reordenar_backlog(
        tarefa_service.escopo_backlog(projeto, sprint),
        [item.como_item() for item in itens]
    )
    return JsonResponse({'success': True, 'tarefas': resultado})


def _mover_no_backlog(request, projeto, tarefa_id, direcao, sprint=None):
    verificar(_pode_alterar_backlog(request.user, projeto, sprint))

    tarefa = _tarefa_do_backlog(projeto, sprint, tarefa_id)
    if tarefa is None:
        messages.error(request, 'A tarefa não está neste backlog.')
        return _voltar_ao_backlog(request, projeto, sprint)

    if not tarefa_service.mover(tarefa, tarefa_service.escopo_backlog(projeto, sprint), direcao):
        messages.info(request, 'A tarefa já está no topo.' if direcao == 'acima' else 'A tarefa já está no fim.')

    return _voltar_ao_backlog(request, projeto, sprint)


def _criar_subtarefas(request, projeto, tarefa_id, sprint=None):
    """Corpo: {"subtasks": [{"titulo": "...", "tipo": "task"}, ...]}"""
    verificar(_pode_alterar_backlog(request.user, projeto, sprint))

    pai = Tarefa.objects.filter(id=tarefa_id).first()
    if pai is None or not tarefa_service.escopo_backlog(projeto, sprint).filter(id=pai.id).exists():
        return _nao_encontrado_json('Tarefa não encontrada neste backlog.')

    if pai.tipo not in Tarefa.TIPOS_PAI:
        return _erro_json({'tarefa_pai': ['Apenas épicos e histórias podem ter subtarefas.']})

    dados = ler_json(request)
    if dados is None:
        return _erro_json({'body': ['JSON inválido.']})

    itens, erros = validar_itens(dados.get('subtasks'), SubtarefaForm, projeto=projeto)
    if erros:
        return _erro_json(erros)

    with transaction.atomic():
        criadas = tarefa_service.criar_subtarefas(pai, [form.cleaned_data for form in itens])
        for subtarefa in criadas:
            registrar_atividade(projeto, request.user, 'task.subtask_created', subtarefa, {
                'parent_id': pai.id,
                'title': subtarefa.titulo,
            })

    return JsonResponse({'success': True, 'tarefas': [tarefa.para_dict() for tarefa in criadas]}, status=201)


# === Backlog do produto ===

@login_required
@requer_acesso_projeto
def backlog(request, projeto_id):
    """Backlog do produto com busca, filtros e paginação (parcial via HTMX)"""
    return _listar_backlog(request, request.projeto)


@login_required
@requer_acesso_projeto
@require_POST
def backlog_criar(request, projeto_id):
    return _criar_no_backlog(request, request.projeto)


@login_required
@requer_acesso_projeto
@require_POST
def backlog_editar(request, projeto_id, tarefa_id):
    return _editar_no_backlog(request, request.projeto, tarefa_id)


@login_required
@requer_acesso_projeto
@require_POST
def backlog_excluir(request, projeto_id, tarefa_id):
    return _excluir_do_backlog(request, request.projeto, tarefa_id)


@login_required
@requer_acesso_projeto
@require_POST
def backlog_reordenar(request, projeto_id):
    return _reordenar_backlog(request, request.projeto)


@login_required
@requer_acesso_projeto
@require_POST
def backlog_mover_acima(request, projeto_id, tarefa_id):
    return _mover_no_backlog(request, request.projeto, tarefa_id, 'acima')


@login_required
@requer_acesso_projeto
@require_POST
def backlog_mover_abaixo(request, projeto_id, tarefa_id):
    return _mover_no_backlog(request, request.projeto, tarefa_id, 'abaixo')


@login_required
@requer_acesso_projeto
@require_POST
def backlog_subtarefas(request, projeto_id, tarefa_id):
    return _criar_subtarefas(request, request.projeto, tarefa_id)


# === Backlog da sprint ===

@login_required
@requer_acesso_sprint
def sprint_backlog(request, projeto_id, sprint_id):
    return _listar_backlog(request, request.projeto, request.sprint)


@login_required
@requer_acesso_sprint
@require_POST
def sprint_backlog_criar(request, projeto_id, sprint_id):
    return _criar_no_backlog(request, request.projeto, request.sprint)


@login_required
@requer_acesso_sprint
@require_POST
def sprint_backlog_editar(request, projeto_id, sprint_id, tarefa_id):
    return _editar_no_backlog(request, request.projeto, tarefa_id, request.sprint)


@login_required
@requer_acesso_sprint
@require_POST
def sprint_backlog_excluir(request, projeto_id, sprint_id, tarefa_id):
    return _excluir_do_backlog(request, request.projeto, tarefa_id, request.sprint)


@login_required
@requer_acesso_sprint
@require_POST
def sprint_backlog_reordenar(request, projeto_id, sprint_id):
    return _reordenar_backlog(request, request.projeto, request.sprint)


@login_required
@requer_acesso_sprint
@require_POST
def sprint_backlog_mover_acima(request, projeto_id, sprint_id, tarefa_id):
    return _mover_no_backlog(request, request.projeto, tarefa_id, 'acima', request.sprint)


@login_required
@requer_acesso_sprint
@require_POST
def sprint_backlog_mover_abaixo(request, projeto_id, sprint_id, tarefa_id):
    return _mover_no_backlog(request, request.projeto, tarefa_id, 'abaixo', request.sprint)


@login_required
@requer_acesso_sprint
@require_POST
def sprint_backlog_subtarefas(request, projeto_id, sprint_id, tarefa_id):
    return _criar_subtarefas(request, request.projeto, tarefa_id, request.sprint)


@login_required
@requer_acesso_sprint
@require_POST
def sprint_backlog_adicionar(request, projeto_id, sprint_id):
    """Planeja tarefas do backlog do produto para o backlog da sprint"""
    sprint = request.sprint
    projeto = request.projeto
    verificar(AgilisPermissions.pode_editar_sprint(request.user, sprint))

    ids, incluir_subtarefas = _ler_ids(request)
    if not ids:
        messages.error(request, 'Selecione ao menos uma tarefa válida.')
        return _voltar_ao_backlog(request, projeto, sprint)

    with transaction.atomic():
        sucesso, mensagem, movidas = tarefa_service.adicionar_ao_backlog_sprint(sprint, ids, incluir_subtarefas)
        for tarefa in movidas:
            registrar_atividade(projeto, request.user, 'task.added_to_sprint_backlog', tarefa, {'sprint_id': sprint.id})

    if _quer_json(request):
        if not sucesso:
            return _erro_json({'task_ids': [mensagem]})
        return JsonResponse({'success': True, 'message': mensagem, 'tarefas': [tarefa.para_dict() for tarefa in movidas]})

    if sucesso:
        messages.success(request, mensagem)
    else:
        messages.error(request, mensagem)
    return _voltar_ao_backlog(request, projeto, sprint)


@login_required
@requer_acesso_sprint
@require_POST
def sprint_backlog_mover_para_produto(request, projeto_id, sprint_id, tarefa_id):
    sprint = request.sprint
    projeto = request.projeto
    verificar(AgilisPermissions.pode_editar_sprint(request.user, sprint))

    tarefa = _tarefa_do_backlog(projeto, sprint, tarefa_id)
    if tarefa is None:
        messages.error(request, 'A tarefa não está no backlog desta sprint.')
        return _voltar_ao_backlog(request, projeto, sprint)

    with transaction.atomic():
        tarefa_service.mover_para_backlog_produto(tarefa)
        registrar_atividade(projeto, request.user, 'task.moved_to_product_backlog', tarefa, {'sprint_id': sprint.id})

    messages.success(request, f'Tarefa "{tarefa.titulo}" voltou para o backlog do produto.')
    return _voltar_ao_backlog(request, projeto, sprint)


# =================== COMENTÁRIOS (JSON) ===================

@login_required
@requer_acesso_projeto
@require_http_methods(['GET', 'POST'])
def comentarios(request, projeto_id, tarefa_id):
    """GET lista os comentários da tarefa; POST cria um novo"""
    tarefa = Tarefa.objects.filter(id=tarefa_id, projeto=request.projeto).first()
    if tarefa is None:
        return _nao_encontrado_json('Tarefa não encontrada neste projeto.')

    if request.method == 'GET':
        lista = tarefa.comentarios.select_related('usuario').order_by('criado_em', 'id')
        return JsonResponse({'success': True, 'comentarios': [comentario.para_dict() for comentario in lista]})

    form = ComentarioForm((ler_json(request) or {}) if _quer_json(request) else request.POST)
    if not form.is_valid():
        return _erro_json(form.errors)

    comentario = form.save(commit=False)
    comentario.tarefa = tarefa
    comentario.usuario = request.user
    comentario.save()

    return JsonResponse({'success': True, 'comentario': comentario.para_dict()}, status=201)


def _comentario_da_tarefa(request, tarefa_id, comentario_id):
    """
    Comentário da tarefa do projeto atual
    Retorna (comentario, resposta_de_erro)
    """
    comentario = ComentarioTarefa.objects.select_related('tarefa', 'usuario').filter(
        id=comentario_id,
        tarefa_id=tarefa_id,
        tarefa__projeto=request.projeto
    ).first()
    if comentario is None:
        return None, _nao_encontrado_json('Comentário não encontrado nesta tarefa.')

    if comentario.usuario_id != request.user.id:
        return None, JsonResponse(
            {'success': False, 'error': 'Você só pode alterar seus próprios comentários.'},
            status=403
        )

    return comentario, None


@login_required
@requer_acesso_projeto
@require_POST
def comentario_editar(request, projeto_id, tarefa_id, comentario_id):
    comentario, erro = _comentario_da_tarefa(request, tarefa_id, comentario_id)
    if erro:
        return erro

    form = ComentarioForm((ler_json(request) or {}) if _quer_json(request) else request.POST, instance=comentario)
    if not form.is_valid():
        return _erro_json(form.errors)

    comentario = form.save()
    return JsonResponse({'success': True, 'comentario': comentario.para_dict()})


@login_required
@requer_acesso_projeto
@require_POST
def comentario_excluir(request, projeto_id, tarefa_id, comentario_id):
    comentario, erro = _comentario_da_tarefa(request, tarefa_id, comentario_id)
    if erro:
        return erro

    comentario.delete()
    return JsonResponse({'success': True})


# =================== RETROSPECTIVAS ===================

@login_required
@requer_acesso_sprint
def retrospectiva(request, projeto_id, sprint_id):
    """Retrospectiva da sprint com a contagem de votos"""
    sprint = request.sprint
    retro = Retrospectiva.objects.filter(sprint=sprint).first()

    context = {
        'title': f'Retrospectiva - {sprint.nome}',
        'projeto': request.projeto,
        'sprint': sprint,
        'retrospectiva': retro,
        'form': RetrospectivaForm(instance=retro),
        'votos': retro.contagem_votos() if retro else {},
        'meus_votos': retro.votos_do_usuario(request.user) if retro else {},
        'pode_criar': retro is None and sprint.esta_concluida(),
        'pode_editar': AgilisPermissions.pode_editar_sprint(request.user, sprint),
    }

    return render(request, 'board/retrospectiva.html', context)


@login_required
@requer_acesso_sprint
@require_POST
def retrospectiva_criar(request, projeto_id, sprint_id):
    """Só sprints concluídas, e apenas uma retrospectiva por sprint"""
    sprint = request.sprint
    verificar(AgilisPermissions.pode_editar_sprint(request.user, sprint))

    if not sprint.esta_concluida():
        messages.error(request, 'A retrospectiva só pode ser criada para sprints concluídas.')
        return redirecionar_de_volta(request, 'board:retrospectiva', projeto_id=projeto_id, sprint_id=sprint_id)

    if Retrospectiva.objects.filter(sprint=sprint).exists():
        messages.error(request, 'Esta sprint já possui uma retrospectiva.')
        return redirecionar_de_volta(request, 'board:retrospectiva', projeto_id=projeto_id, sprint_id=sprint_id)

    form = RetrospectivaForm(request.POST)
    if not form.is_valid():
        mensagens_erros_form(request, form)
        return redirecionar_de_volta(request, 'board:retrospectiva', projeto_id=projeto_id, sprint_id=sprint_id)

    retro = form.save(commit=False)
    retro.sprint = sprint
    retro.criado_por = request.user
    try:
        with transaction.atomic():
            retro.save()
    except IntegrityError:
        messages.error(request, 'Esta sprint já possui uma retrospectiva.')
        return redirecionar_de_volta(request, 'board:retrospectiva', projeto_id=projeto_id, sprint_id=sprint_id)

    messages.success(request, 'Retrospectiva criada com sucesso!')
    return redirect('board:retrospectiva', projeto_id=projeto_id, sprint_id=sprint_id)


@login_required
@requer_acesso_sprint
@require_POST
def retrospectiva_editar(request, projeto_id, sprint_id):
    sprint = request.sprint
    verificar(AgilisPermissions.pode_editar_sprint(request.user, sprint))

    retro = Retrospectiva.objects.filter(sprint=sprint).first()
    if retro is None:
        messages.error(request, 'Esta sprint ainda não possui retrospectiva.')
        return redirecionar_de_volta(request, 'board:retrospectiva', projeto_id=projeto_id, sprint_id=sprint_id)

    form = RetrospectivaForm(request.POST, instance=retro)
    if not form.is_valid():
        mensagens_erros_form(request, form)
    else:
        form.save()
        messages.success(request, 'Retrospectiva atualizada.')

    return redirect('board:retrospectiva', projeto_id=projeto_id, sprint_id=sprint_id)


@login_required
@requer_acesso_sprint
@require_POST
def retrospectiva_votar(request, projeto_id, sprint_id):
    """
    Alterna o voto do usuário em uma categoria
    Corpo: vote_type (went_well/went_wrong/to_improve) e upvote (bool)
    """
    sprint = request.sprint
    quer_json = _quer_json(request) or request.htmx

    retro = Retrospectiva.objects.filter(sprint=sprint).first()
    if retro is None:
        if quer_json:
            return _nao_encontrado_json('Esta sprint ainda não possui retrospectiva.')
        messages.error(request, 'Esta sprint ainda não possui retrospectiva.')
        return redirecionar_de_volta(request, 'board:retrospectiva', projeto_id=projeto_id, sprint_id=sprint_id)

    form = VotoForm((ler_json(request) or {}) if _quer_json(request) else request.POST)
    if not form.is_valid():
        if quer_json:
            return _erro_json(form.errors)
        mensagens_erros_form(request, form)
        return redirecionar_de_volta(request, 'board:retrospectiva', projeto_id=projeto_id, sprint_id=sprint_id)

    resultado = retro.registrar_voto(request.user, form.cleaned_data['vote_type'], form.cleaned_data['upvote'])

    if quer_json:
        return JsonResponse({
            'success': True,
            'resultado': resultado,
            'votos': retro.contagem_votos(),
            'meus_votos': retro.votos_do_usuario(request.user),
        })

    return redirect('board:retrospectiva', projeto_id=projeto_id, sprint_id=sprint_id)
