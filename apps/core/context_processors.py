# apps/core/context_processors.py

def equipe_projeto(request):
    """Equipes, projetos e seleção atual para o menu de todas as páginas"""
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        return {}

    equipe_atual = user.equipe_atual(request.session)

    return {
        'equipes_menu': user.equipes.order_by('nome'),
        'equipe_atual': equipe_atual,
        'projetos_menu': equipe_atual.projetos.order_by('nome') if equipe_atual else [],
        'projeto_atual': user.projeto_atual(request.session),
        'mensagens_nao_lidas': user.mensagens_recebidas.filter(lida=False).count(),
    }
