# apps/core/views.py

import logging

from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.core.cache import cache
from django.core.exceptions import PermissionDenied
from django.core.paginator import Paginator
from django.db import transaction
from django.db.models import Count, Max
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods, require_POST
from django.utils import timezone

from .models import (
    Usuario, Equipe, MembroEquipe, Projeto, Documento, Mensagem,
    AtividadeProjeto, SincronizacaoGithub,
    CHAVE_EQUIPE_ATUAL, CHAVE_PROJETO_ATUAL
)
from .permissions import (
    AgilisPermissions,
    requer_acesso_projeto,
    requer_equipe_atual,
    verificar
)
from .forms import (
    EquipeForm, AdicionarMembroForm, PapelMembroForm, ProjetoForm,
    FiltroAtividadesForm, DocumentoForm, MensagemForm
)
from .auth_service import auth_service  # Serviço encapsulado do login via GitHub
from .github_client import GithubClient, GithubError, resumo_repositorio, resumo_item
from .atividades import registrar_atividade
from .utils import redirecionar_de_volta, mensagens_erros_form, extrair_repositorio_github

logger = logging.getLogger(__name__)


# =================== AUTENTICAÇÃO ===================

def login_view(request):
    """Página de login - o único método de entrada é o GitHub"""
    if request.user.is_authenticated:
        return redirect('core:projetos')

    return render(request, 'core/login.html', {'title': 'Entrar - Agilis'})


def github_redirect(request):
    """Envia o usuário para a tela de autorização do GitHub"""
    return redirect(auth_service.url_autorizacao(request))


def github_callback(request):
    """
    Retorno do GitHub

    O encapsulamento aqui separa a lógica HTTP (view) da lógica de autenticação (service)
    """
    sucesso, mensagem, _ = auth_service.processar_callback(
        request,
        request.GET.get('code', ''),
        request.GET.get('state', '')
    )

    if not sucesso:
        messages.error(request, mensagem)
        return redirect('core:login')

    messages.success(request, mensagem)
    return redirect('core:projetos')


@require_POST
def logout_view(request):
    if auth_service.fazer_logout(request):
        messages.info(request, 'Você foi desconectado com sucesso.')
    return redirect('core:home')


def home(request):
    return redirect('core:projetos')


def health_check(request):
    """
    Health check para monitoramento
    """
    try:
        Usuario.objects.exists()

        cache.set('health_check', 'ok', 60)
        cache.get('health_check')

    except Exception as e:
        logger.error(f"❌ Health check falhou: {e}")
        return JsonResponse({
            'status': 'unhealthy',
            'error': str(e),
            'timestamp': timezone.now().isoformat(),
        }, status=500)

    return JsonResponse({
        'status': 'healthy',
        'database': 'ok',
        'cache': 'ok',
        'timestamp': timezone.now().isoformat(),
    })


# =================== EQUIPES ===================

@login_required
def equipes(request):
    """Equipes do usuário"""
    context = {
        'title': 'Equipes',
        'equipes': Equipe.objects.filter(
            id__in=request.user.equipes.values('id')
        ).annotate(total_membros=Count('membros')).order_by('nome'),
        'equipe_atual': request.user.equipe_atual(request.session),
    }
    return render(request, 'core/equipes.html', context)


@login_required
@require_http_methods(['GET', 'POST'])
def equipe_criar(request):
    """O criador vira administrador e a equipe passa a ser a atual"""
    verificar(AgilisPermissions.pode_criar_equipe(request.user))

    if request.method == 'POST':
        form = EquipeForm(request.POST)
        if form.is_valid():
            with transaction.atomic():
                equipe = form.save()
                MembroEquipe.objects.create(usuario=request.user, equipe=equipe, papel=MembroEquipe.ADMIN)

            request.session[CHAVE_EQUIPE_ATUAL] = equipe.id
            request.session.pop(CHAVE_PROJETO_ATUAL, None)

            messages.success(request, f'Equipe "{equipe.nome}" criada com sucesso!')
            return redirect('core:equipe_detalhe', equipe_id=equipe.id)

        mensagens_erros_form(request, form)
    else:
        form = EquipeForm()

    return render(request, 'core/equipe_form.html', {'title': 'Nova Equipe', 'form': form})


@login_required
def equipe_detalhe(request, equipe_id):
    equipe = get_object_or_404(Equipe, id=equipe_id)
    verificar(AgilisPermissions.pode_ver_equipe(request.user, equipe), 'Você não faz parte desta equipe.')

    context = {
        'title': equipe.nome,
        'equipe': equipe,
        'membros': MembroEquipe.objects.filter(equipe=equipe).select_related('usuario').order_by('usuario__nome', 'usuario__username'),
        'projetos': equipe.projetos.all(),
        'papeis': MembroEquipe.PAPEL_CHOICES,
        'pode_editar': AgilisPermissions.pode_editar_equipe(request.user, equipe),
        'form_membro': AdicionarMembroForm(),
    }
    return render(request, 'core/equipe_detalhe.html', context)


@login_required
@require_http_methods(['GET', 'POST'])
def equipe_editar(request, equipe_id):
    equipe = get_object_or_404(Equipe, id=equipe_id)

    if request.method == 'POST':
        verificar(AgilisPermissions.pode_editar_equipe(request.user, equipe), 'Apenas administradores podem editar a equipe.')
        form = EquipeForm(request.POST, instance=equipe)
        if form.is_valid():
            form.save()
            messages.success(request, 'Equipe atualizada com sucesso!')
            return redirect('core:equipe_detalhe', equipe_id=equipe.id)

        mensagens_erros_form(request, form)
        return redirecionar_de_volta(request, 'core:equipe_editar', equipe_id=equipe.id)

    verificar(AgilisPermissions.pode_ver_equipe(request.user, equipe), 'Você não faz parte desta equipe.')
    context = {
        'title': f'Editar {equipe.nome}',
        'equipe': equipe,
        'form': EquipeForm(instance=equipe),
    }
    return render(request, 'core/equipe_form.html', context)


@login_required
@require_POST
def equipe_excluir(request, equipe_id):
    equipe = get_object_or_404(Equipe, id=equipe_id)
    verificar(AgilisPermissions.pode_excluir_equipe(request.user, equipe), 'Apenas administradores podem excluir a equipe.')

    nome = equipe.nome
    if request.session.get(CHAVE_EQUIPE_ATUAL) == equipe.id:
        request.session.pop(CHAVE_EQUIPE_ATUAL, None)
        request.session.pop(CHAVE_PROJETO_ATUAL, None)

    equipe.delete()
    logger.info(f"🗑️ Equipe {nome} excluída por {request.user.username}")

    messages.success(request, f'Equipe "{nome}" excluída.')
    return redirect('core:equipes')


@login_required
@require_POST
def membro_adicionar(request, equipe_id):
    """Adiciona um usuário existente (pelo e-mail) como desenvolvedor"""
    equipe = get_object_or_404(Equipe, id=equipe_id)
    verificar(AgilisPermissions.pode_editar_equipe(request.user, equipe), 'Apenas administradores podem adicionar membros.')

    form = AdicionarMembroForm(request.POST)
    if not form.is_valid():
        mensagens_erros_form(request, form)
        return redirecionar_de_volta(request, 'core:equipe_detalhe', equipe_id=equipe.id)

    usuario = form.usuario
    if usuario.e_membro(equipe):
        messages.error(request, f'{usuario.get_full_name()} já faz parte desta equipe.')
        return redirecionar_de_volta(request, 'core:equipe_detalhe', equipe_id=equipe.id)

    MembroEquipe.objects.create(usuario=usuario, equipe=equipe, papel=MembroEquipe.DEVELOPER)

    messages.success(request, f'{usuario.get_full_name()} adicionado à equipe.')
    return redirecionar_de_volta(request, 'core:equipe_detalhe', equipe_id=equipe.id)


@login_required
@require_POST
def membro_remover(request, equipe_id, usuario_id):
    """Remove um membro - a equipe nunca fica vazia"""
    equipe = get_object_or_404(Equipe, id=equipe_id)
    verificar(AgilisPermissions.pode_editar_equipe(request.user, equipe), 'Apenas administradores podem remover membros.')

    with transaction.atomic():
        membros = list(MembroEquipe.objects.select_for_update().filter(equipe=equipe))
        membro = next((m for m in membros if m.usuario_id == usuario_id), None)

        if membro is None:
            messages.error(request, 'Este usuário não faz parte da equipe.')
            return redirecionar_de_volta(request, 'core:equipe_detalhe', equipe_id=equipe.id)

        if len(membros) <= 1:
            messages.error(request, 'Não é possível remover o último membro da equipe.')
            return redirecionar_de_volta(request, 'core:equipe_detalhe', equipe_id=equipe.id)

        membro.delete()

    messages.success(request, 'Membro removido da equipe.')
    return redirecionar_de_volta(request, 'core:equipe_detalhe', equipe_id=equipe.id)


@login_required
@require_POST
def membro_papel(request, equipe_id, usuario_id):
    equipe = get_object_or_404(Equipe, id=equipe_id)
    verificar(AgilisPermissions.pode_editar_equipe(request.user, equipe), 'Apenas administradores podem alterar papéis.')

    form = PapelMembroForm(request.POST)
    if not form.is_valid():
        mensagens_erros_form(request, form)
        return redirecionar_de_volta(request, 'core:equipe_detalhe', equipe_id=equipe.id)

    membro = MembroEquipe.objects.filter(equipe=equipe, usuario_id=usuario_id).select_related('usuario').first()
    if membro is None:
        messages.error(request, 'Este usuário não faz parte da equipe.')
        return redirecionar_de_volta(request, 'core:equipe_detalhe', equipe_id=equipe.id)

    membro.papel = form.cleaned_data['papel']
    membro.save(update_fields=['papel', 'atualizado_em'])

    messages.success(request, f'{membro.usuario.get_full_name()} agora é {membro.get_papel_display()}.')
    return redirecionar_de_volta(request, 'core:equipe_detalhe', equipe_id=equipe.id)


@login_required
@require_POST
def equipe_selecionar(request, equipe_id):
    """Troca a equipe atual (e limpa o projeto atual)"""
    equipe = get_object_or_404(Equipe, id=equipe_id)
    verificar(AgilisPermissions.pode_ver_equipe(request.user, equipe), 'Você não faz parte desta equipe.')

    request.session[CHAVE_EQUIPE_ATUAL] = equipe.id
    request.session.pop(CHAVE_PROJETO_ATUAL, None)

    messages.success(request, f'Equipe atual: {equipe.nome}')
    return redirecionar_de_volta(request, 'core:projetos')


# =================== PROJETOS ===================

@login_required
@requer_equipe_atual
def projetos(request):
    """Projetos da equipe atual"""
    equipe = request.equipe
    verificar(AgilisPermissions.pode_listar_projetos(request.user, request.session))

    context = {
        'title': 'Projetos',
        'equipe': equipe,
        'projetos': equipe.projetos.order_by('-criado_em'),
        'projetos_excluidos': Projeto.todos.filter(equipe=equipe, excluido_em__isnull=False),
        'pode_criar': AgilisPermissions.pode_criar_projeto(request.user, equipe),
    }
    return render(request, 'core/projetos.html', context)


@login_required
@requer_equipe_atual
@require_http_methods(['GET', 'POST'])
def projeto_criar(request):
    equipe = request.equipe
    verificar(
        AgilisPermissions.pode_criar_projeto(request.user, equipe),
        'Apenas administradores, product owners e scrum masters podem criar projetos.'
    )

    if request.method == 'POST':
        form = ProjetoForm(request.POST)
        if form.is_valid():
            with transaction.atomic():
                projeto = form.save(commit=False)
                projeto.equipe = equipe
                projeto.save()
                registrar_atividade(projeto, request.user, 'project.created', projeto, {'name': projeto.nome})

            messages.success(request, f'Projeto "{projeto.nome}" criado com sucesso!')
            return redirect('core:projeto_editar', projeto_id=projeto.id)

        mensagens_erros_form(request, form)
        return redirecionar_de_volta(request, 'core:projeto_criar')

    return render(request, 'core/projeto_form.html', {'title': 'Novo Projeto', 'form': ProjetoForm()})


@login_required
@requer_acesso_projeto
@require_http_methods(['GET', 'POST'])
def projeto_editar(request, projeto_id):
    """GET mostra o formulário e a última sincronização; POST atualiza"""
    projeto = request.projeto

    if request.method == 'POST':
        verificar(AgilisPermissions.pode_editar_projeto(request.user, projeto), 'Você não pode editar este projeto.')
        form = ProjetoForm(request.POST, instance=projeto)

        if not form.is_valid():
            mensagens_erros_form(request, form)
            return redirecionar_de_volta(request, 'core:projeto_editar', projeto_id=projeto.id)

        with transaction.atomic():
            campos = list(form.changed_data)
            projeto = form.save()
            registrar_atividade(projeto, request.user, 'project.updated', projeto, {'updated_fields': campos})

        messages.success(request, 'Projeto atualizado com sucesso!')
        return redirect('core:projeto_editar', projeto_id=projeto.id)

    context = {
        'title': f'Editar {projeto.nome}',
        'projeto': projeto,
        'form': ProjetoForm(instance=projeto),
        'ultima_sincronizacao': projeto.sincronizacoes_github.first(),
        'pode_editar': AgilisPermissions.pode_editar_projeto(request.user, projeto),
        'pode_excluir': AgilisPermissions.pode_excluir_projeto(request.user, projeto),
    }
    return render(request, 'core/projeto_form.html', context)


@login_required
@requer_acesso_projeto
@require_POST
def projeto_excluir(request, projeto_id):
    """Soft delete - o projeto pode ser restaurado depois"""
    projeto = request.projeto
    verificar(AgilisPermissions.pode_excluir_projeto(request.user, projeto), 'Apenas administradores podem excluir projetos.')

    with transaction.atomic():
        projeto.delete()
        registrar_atividade(projeto, request.user, 'project.deleted', projeto, {'name': projeto.nome})

    if request.session.get(CHAVE_PROJETO_ATUAL) == projeto.id:
        request.session.pop(CHAVE_PROJETO_ATUAL, None)

    messages.success(request, f'Projeto "{projeto.nome}" excluído.')
    return redirect('core:projetos')


def _projeto_excluido(request, projeto_id):
    projeto = get_object_or_404(Projeto.todos.select_related('equipe'), id=projeto_id, excluido_em__isnull=False)
    verificar(AgilisPermissions.pode_restaurar_projeto(request.user, projeto), 'Você não tem acesso a este projeto.')
    return projeto


@login_required
@require_POST
def projeto_restaurar(request, projeto_id):
    projeto = _projeto_excluido(request, projeto_id)
    projeto.restaurar()

    messages.success(request, f'Projeto "{projeto.nome}" restaurado.')
    return redirect('core:projetos')


@login_required
@require_POST
def projeto_excluir_definitivamente(request, projeto_id):
    projeto = _projeto_excluido(request, projeto_id)
    nome = projeto.nome
    projeto.excluir_definitivamente()
    logger.info(f"🗑️ Projeto {nome} excluído definitivamente por {request.user.username}")

    messages.success(request, f'Projeto "{nome}" excluído definitivamente.')
    return redirect('core:projetos')


@login_required
@requer_acesso_projeto
@require_POST
def projeto_selecionar(request, projeto_id):
    projeto = request.projeto
    request.session[CHAVE_EQUIPE_ATUAL] = projeto.equipe_id
    request.session[CHAVE_PROJETO_ATUAL] = projeto.id

    messages.success(request, f'Projeto atual: {projeto.nome}')
    return redirecionar_de_volta(request, 'core:projetos')


@login_required
@requer_acesso_projeto
@require_POST
def projeto_sincronizar_github(request, projeto_id):
    """Busca os dados do repositório e guarda uma sincronização"""
    projeto = request.projeto
    verificar(AgilisPermissions.pode_editar_projeto(request.user, projeto), 'Você não pode sincronizar este projeto.')

    repositorio = extrair_repositorio_github(projeto.github_repo)
    if repositorio is None:
        messages.error(request, 'Informe um repositório do GitHub válido no projeto.')
        return redirecionar_de_volta(request, 'core:projeto_editar', projeto_id=projeto.id)

    try:
        dados = GithubClient(token=request.user.github_token or None).obter_repositorio(repositorio)
    except GithubError as e:
        if e.status_code == 404:
            messages.error(request, 'Repositório não encontrado ou privado.')
        else:
            messages.error(request, 'Não foi possível sincronizar com o GitHub. Tente novamente.')
        return redirecionar_de_volta(request, 'core:projeto_editar', projeto_id=projeto.id)

    SincronizacaoGithub.objects.create(
        projeto=projeto,
        tipo='commits',
        dados=resumo_repositorio(dados)
    )
    logger.info(f"🔄 Projeto {projeto.id} sincronizado com {repositorio}")

    messages.success(request, f'Repositório {repositorio} sincronizado!')
    return redirecionar_de_volta(request, 'core:projeto_editar', projeto_id=projeto.id)


@login_required
@requer_acesso_projeto
def projeto_github_itens(request, projeto_id):
    """Issues e pull requests abertos do repositório (JSON)"""
    projeto = request.projeto

    repositorio = extrair_repositorio_github(projeto.github_repo)
    if repositorio is None:
        return JsonResponse({'success': False, 'error': 'Projeto sem repositório do GitHub válido.'}, status=400)

    try:
        cliente = GithubClient(token=request.user.github_token or None)
        issues = cliente.listar_issues(repositorio)
        pull_requests = cliente.listar_pull_requests(repositorio)
    except GithubError:
        return JsonResponse({'success': False, 'error': 'Não foi possível consultar o GitHub.'}, status=500)

    itens = [resumo_item(issue, 'issue') for issue in issues]
    itens += [resumo_item(pr, 'pull_request') for pr in pull_requests]

    return JsonResponse({'success': True, 'items': itens})


@login_required
@requer_acesso_projeto
def projeto_atividades(request, projeto_id):
    """Histórico de atividades com filtros e paginação"""
    projeto = request.projeto
    filtro = FiltroAtividadesForm(request.GET or None)

    atividades = filtro.filtrar(
        projeto.atividades.select_related('usuario', 'content_type')
    )
    pagina = Paginator(atividades, filtro.itens_por_pagina()).get_page(request.GET.get('page'))

    context = {
        'title': f'Atividades - {projeto.nome}',
        'projeto': projeto,
        'pagina': pagina,
        'atividades': pagina.object_list,
        'filtro': filtro,
        'acoes': AtividadeProjeto.ACOES,
        'membros': projeto.equipe.membros.order_by('nome', 'username'),
    }
    return render(request, 'core/atividades.html', context)


# === Atalhos para o projeto atual ===

def _atalho_projeto_atual(request, destino):
    projeto = request.user.projeto_atual(request.session)
    if projeto is None:
        messages.info(request, 'Selecione um projeto para continuar.')
        return redirect('core:projetos')
    return redirect(destino, projeto_id=projeto.id)


@login_required
def atalho_backlog(request):
    return _atalho_projeto_atual(request, 'board:backlog')


@login_required
def atalho_sprints(request):
    return _atalho_projeto_atual(request, 'board:sprints')


@login_required
def atalho_documentos(request):
    return _atalho_projeto_atual(request, 'core:documentos')


@login_required
def atalho_atividades(request):
    return _atalho_projeto_atual(request, 'core:projeto_atividades')


# =================== DOCUMENTOS ===================

@login_required
@requer_acesso_projeto
def documentos(request, projeto_id):
    projeto = request.projeto

    context = {
        'title': f'Documentos - {projeto.nome}',
        'projeto': projeto,
        'documentos': projeto.documentos.select_related('criado_por').order_by('posicao', 'criado_em'),
        'form': DocumentoForm(),
        'pode_editar': AgilisPermissions.pode_editar_projeto(request.user, projeto),
    }
    return render(request, 'core/documentos.html', context)


@login_required
@requer_acesso_projeto
@require_POST
def documento_criar(request, projeto_id):
    projeto = request.projeto
    verificar(AgilisPermissions.pode_editar_projeto(request.user, projeto), 'Você não pode criar documentos neste projeto.')

    form = DocumentoForm(request.POST)
    if not form.is_valid():
        mensagens_erros_form(request, form)
        return redirecionar_de_volta(request, 'core:documentos', projeto_id=projeto.id)

    with transaction.atomic():
        maximo = projeto.documentos.select_for_update().aggregate(maximo=Max('posicao'))['maximo']
        documento = form.save(commit=False)
        documento.projeto = projeto
        documento.criado_por = request.user
        documento.posicao = 0 if maximo is None else maximo + 1
        documento.save()

    messages.success(request, f'Documento "{documento.titulo}" criado.')
    return redirect('core:documento_editar', projeto_id=projeto.id, documento_id=documento.id)


def _documento_do_projeto(request, projeto, documento_id):
    documento = get_object_or_404(Documento, id=documento_id)
    if documento.projeto_id != projeto.id:
        messages.error(request, 'O documento não pertence a este projeto.')
        return None
    return documento


@login_required
@requer_acesso_projeto
@require_http_methods(['GET', 'POST'])
def documento_editar(request, projeto_id, documento_id):
    projeto = request.projeto
    documento = _documento_do_projeto(request, projeto, documento_id)
    if documento is None:
        return redirecionar_de_volta(request, 'core:documentos', projeto_id=projeto.id)

    if request.method == 'POST':
        verificar(AgilisPermissions.pode_editar_projeto(request.user, projeto), 'Você não pode editar documentos neste projeto.')
        form = DocumentoForm(request.POST, instance=documento)
        if form.is_valid():
            form.save()
            messages.success(request, 'Documento salvo.')
            return redirect('core:documento_editar', projeto_id=projeto.id, documento_id=documento.id)

        mensagens_erros_form(request, form)
        return redirecionar_de_volta(request, 'core:documento_editar', projeto_id=projeto.id, documento_id=documento.id)

    context = {
        'title': documento.titulo,
        'projeto': projeto,
        'documento': documento,
        'form': DocumentoForm(instance=documento),
        'pode_editar': AgilisPermissions.pode_editar_projeto(request.user, projeto),
    }
    return render(request, 'core/documento_form.html', context)


@login_required
@requer_acesso_projeto
@require_POST
def documento_excluir(request, projeto_id, documento_id):
    projeto = request.projeto
    verificar(AgilisPermissions.pode_editar_projeto(request.user, projeto), 'Você não pode excluir documentos neste projeto.')

    documento = _documento_do_projeto(request, projeto, documento_id)
    if documento is None:
        return redirecionar_de_volta(request, 'core:documentos', projeto_id=projeto.id)

    titulo = documento.titulo
    documento.delete()

    messages.success(request, f'Documento "{titulo}" excluído.')
    return redirect('core:documentos', projeto_id=projeto.id)


# =================== MENSAGENS ===================

@login_required
def mensagens(request):
    """Caixa de entrada, enviadas e formulário de nova mensagem"""
    equipe = request.user.equipe_atual(request.session)

    context = {
        'title': 'Mensagens',
        'recebidas': request.user.mensagens_recebidas.select_related('remetente'),
        'enviadas': request.user.mensagens_enviadas.select_related('destinatario'),
        'nao_lidas': request.user.mensagens_recebidas.filter(lida=False).count(),
        'usuarios': equipe.membros.exclude(id=request.user.id).order_by('nome', 'username') if equipe else Usuario.objects.none(),
        'form': MensagemForm(),
    }
    return render(request, 'core/mensagens.html', context)


@login_required
@require_POST
def mensagem_enviar(request):
    """O destinatário é notificado em tempo real (signal post_save)"""
    form = MensagemForm(request.POST)
    if not form.is_valid():
        mensagens_erros_form(request, form)
        return redirecionar_de_volta(request, 'core:mensagens')

    mensagem = form.save(commit=False)
    mensagem.remetente = request.user
    mensagem.save()

    messages.success(request, f'Mensagem enviada para {mensagem.destinatario.get_full_name()}.')
    return redirect('core:mensagens')


def _mensagem_do_usuario(request, mensagem_id):
    mensagem = get_object_or_404(Mensagem.objects.select_related('remetente', 'destinatario'), id=mensagem_id)
    if request.user.id not in (mensagem.remetente_id, mensagem.destinatario_id):
        raise PermissionDenied('Você não tem acesso a esta mensagem.')
    return mensagem


@login_required
def mensagem_detalhe(request, mensagem_id):
    """Abrir a mensagem como destinatário marca como lida"""
    mensagem = _mensagem_do_usuario(request, mensagem_id)

    if mensagem.destinatario_id == request.user.id:
        mensagem.marcar_como_lida()

    return render(request, 'core/mensagem_detalhe.html', {'title': mensagem.assunto, 'mensagem': mensagem})


@login_required
@require_POST
def mensagem_excluir(request, mensagem_id):
    mensagem = _mensagem_do_usuario(request, mensagem_id)
    mensagem.delete()

    messages.success(request, 'Mensagem excluída.')
    return redirect('core:mensagens')
