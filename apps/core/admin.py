# apps/core/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import (
    Usuario, Equipe, MembroEquipe, Projeto, Sprint, Tarefa, Etiqueta,
    ComentarioTarefa, Documento, Retrospectiva, VotoRetrospectiva,
    Mensagem, AtividadeProjeto, SincronizacaoGithub
)

CORES_PAPEL = {
    MembroEquipe.ADMIN: '#EF4444',  # vermelho
    MembroEquipe.PRODUCT_OWNER: '#8B5CF6',  # roxo
    MembroEquipe.SCRUM_MASTER: '#F59E0B',  # amarelo
    MembroEquipe.DEVELOPER: '#3B82F6',  # azul
}

CORES_STATUS_TAREFA = {
    Tarefa.BACKLOG: '#6B7280',
    Tarefa.PLANEJADA: '#3B82F6',
    Tarefa.EM_ANDAMENTO: '#F59E0B',
    Tarefa.CONCLUIDA: '#10B981',
}


def badge(cor, texto):
    return format_html(
        '<span style="background-color: {}; color: white; '
        'padding: 3px 8px; border-radius: 4px; font-size: 11px;">{}</span>',
        cor, texto
    )


class MembroEquipeInline(admin.TabularInline):
    model = MembroEquipe
    extra = 0
    fields = ['usuario', 'papel', 'criado_em']
    readonly_fields = ['criado_em']
    autocomplete_fields = ['usuario']


@admin.register(Usuario)
class UsuarioAdmin(BaseUserAdmin):
    """Admin customizado para o modelo Usuario"""

    list_display = [
        'username', 'email', 'get_full_name', 'github_badge',
        'is_active', 'date_joined'
    ]
    list_filter = ['is_staff', 'is_active', 'date_joined']
    search_fields = ['username', 'nome', 'first_name', 'last_name', 'email', 'github_id']
    ordering = ['-date_joined']

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Informações Adicionais', {
            'fields': ('nome', 'email_verificado_em', 'github_id')
        }),
    )

    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Informações Adicionais', {
            'fields': ('nome',)
        }),
    )

    def github_badge(self, obj):
        """Indica se o usuário entrou pelo GitHub"""
        if obj.github_id:
            return badge('#111827', 'GitHub')
        return '-'

    github_badge.short_description = 'Login'


@admin.register(Equipe)
class EquipeAdmin(admin.ModelAdmin):
    """Admin para equipes e seus membros"""

    list_display = ['nome', 'membros_count', 'projetos_count', 'criado_em']
    search_fields = ['nome']
    readonly_fields = ['criado_em', 'atualizado_em']
    inlines = [MembroEquipeInline]

    def membros_count(self, obj):
        return obj.membros.count()

    membros_count.short_description = 'Membros'

    def projetos_count(self, obj):
        return obj.projetos.count()

    projetos_count.short_description = 'Projetos'


@admin.register(MembroEquipe)
class MembroEquipeAdmin(admin.ModelAdmin):
    list_display = ['usuario', 'equipe', 'papel_badge', 'criado_em']
    list_filter = ['papel', 'equipe']
    search_fields = ['usuario__username', 'usuario__email', 'equipe__nome']

    def papel_badge(self, obj):
        """Exibe o papel do membro com badge colorido"""
        return badge(CORES_PAPEL.get(obj.papel, '#6B7280'), obj.get_papel_display())

    papel_badge.short_description = 'Papel'


@admin.register(Projeto)
class ProjetoAdmin(admin.ModelAdmin):
    """Admin para projetos (inclui os excluídos)"""

    list_display = [
        'nome', 'equipe', 'status', 'sprints_count',
        'tarefas_count', 'excluido', 'criado_em'
    ]
    list_filter = ['status', 'equipe', 'criado_em']
    search_fields = ['nome', 'descricao', 'github_repo']
    readonly_fields = ['criado_em', 'atualizado_em', 'excluido_em']

    fieldsets = (
        ('Informações Básicas', {
            'fields': ('nome', 'equipe', 'descricao', 'status')
        }),
        ('Configurações', {
            'fields': ('github_repo', 'duracao_sprint_padrao')
        }),
        ('Datas', {
            'fields': ('criado_em', 'atualizado_em', 'excluido_em'),
            'classes': ('collapse',)
        })
    )

    def get_queryset(self, request):
        return Projeto.todos.select_related('equipe')

    def sprints_count(self, obj):
        return obj.sprints.count()

    sprints_count.short_description = 'Sprints'

    def tarefas_count(self, obj):
        return obj.tarefas.count()

    tarefas_count.short_description = 'Tarefas'

    def excluido(self, obj):
        if obj.esta_excluido:
            return format_html('<span style="color: red;">🗑️ Excluído</span>')
        return '-'

    excluido.short_description = 'Excluído'


@admin.register(Sprint)
class SprintAdmin(admin.ModelAdmin):
    """Admin para sprints"""

    list_display = ['nome', 'projeto', 'status', 'data_inicio', 'data_fim', 'prazo']
    list_filter = ['status', 'projeto']
    search_fields = ['nome', 'objetivo', 'projeto__nome']
    date_hierarchy = 'data_inicio'

    def prazo(self, obj):
        """Status do prazo"""
        if obj.esta_concluida():
            return format_html('<span style="color: green;">✓ Concluída</span>')

        dias = obj.dias_restantes()
        if dias < 0:
            return format_html('<span style="color: red;">⚠️ Atrasada {} dias</span>', abs(dias))
        if dias == 0:
            return format_html('<span style="color: orange;">⏰ Termina hoje</span>')
        return f"{dias} dias"

    prazo.short_description = 'Prazo'


class SubtarefaInline(admin.TabularInline):
    """Subtarefas da tarefa"""
    model = Tarefa
    fk_name = 'tarefa_pai'
    extra = 0
    fields = ['titulo', 'tipo', 'status', 'responsavel', 'posicao']
    ordering = ['posicao']
    verbose_name = 'Subtarefa'
    verbose_name_plural = 'Subtarefas'


class ComentarioInline(admin.TabularInline):
    model = ComentarioTarefa
    extra = 0
    fields = ['usuario', 'conteudo', 'criado_em']
    readonly_fields = ['criado_em']

    def has_add_permission(self, request, obj=None):
        """Apenas leitura no admin"""
        return False


@admin.register(Tarefa)
class TarefaAdmin(admin.ModelAdmin):
    """Admin para tarefas"""

    list_display = [
        'id', 'titulo', 'tipo', 'status_badge', 'prioridade_badge',
        'projeto', 'sprint', 'responsavel', 'posicao'
    ]
    list_filter = ['tipo', 'status', 'prioridade', 'projeto', 'sprint']
    search_fields = ['titulo', 'descricao']
    date_hierarchy = 'criado_em'
    readonly_fields = ['criado_em', 'atualizado_em']
    raw_id_fields = ['tarefa_pai', 'sprint', 'sprint_backlog']
    filter_horizontal = ['etiquetas']

    fieldsets = (
        ('Informações Básicas', {
            'fields': ('titulo', 'descricao', 'tipo', 'status', 'prioridade', 'story_points', 'responsavel')
        }),
        ('Localização', {
            'fields': ('projeto', 'tarefa_pai', 'sprint', 'sprint_backlog', 'posicao')
        }),
        ('GitHub', {
            'fields': ('github_issue_number', 'github_pr_number', 'etiquetas'),
            'classes': ('collapse',)
        }),
        ('Metadados', {
            'fields': ('criado_em', 'atualizado_em'),
            'classes': ('collapse',)
        })
    )

    inlines = [SubtarefaInline, ComentarioInline]

    def status_badge(self, obj):
        return badge(CORES_STATUS_TAREFA.get(obj.status, '#6B7280'), obj.get_status_display())

    status_badge.short_description = 'Status'

    def prioridade_badge(self, obj):
        """1-3 baixa, 4-6 média, 7-8 alta, 9-10 crítica"""
        if obj.prioridade >= 9:
            icone = '🔴'
        elif obj.prioridade >= 7:
            icone = '🟠'
        elif obj.prioridade >= 4:
            icone = '🟡'
        else:
            icone = '🟢'
        return f"{icone} {obj.prioridade}"

    prioridade_badge.short_description = 'Prioridade'


@admin.register(Etiqueta)
class EtiquetaAdmin(admin.ModelAdmin):
    list_display = ['nome', 'projeto', 'cor_preview']
    list_filter = ['projeto']
    search_fields = ['nome']

    def cor_preview(self, obj):
        """Preview da cor da etiqueta"""
        return format_html(
            '<div style="width: 20px; height: 20px; background-color: {}; '
            'border: 1px solid #ccc; border-radius: 3px;"></div>',
            obj.cor
        )

    cor_preview.short_description = 'Cor'


@admin.register(ComentarioTarefa)
class ComentarioTarefaAdmin(admin.ModelAdmin):
    list_display = ['usuario', 'tarefa', 'texto_resumo', 'criado_em']
    list_filter = ['criado_em', 'usuario']
    search_fields = ['conteudo', 'usuario__username']
    readonly_fields = ['criado_em', 'atualizado_em']

    def texto_resumo(self, obj):
        if len(obj.conteudo) > 50:
            return f"{obj.conteudo[:50]}..."
        return obj.conteudo

    texto_resumo.short_description = 'Comentário'


@admin.register(Documento)
class DocumentoAdmin(admin.ModelAdmin):
    list_display = ['titulo', 'projeto', 'criado_por', 'posicao', 'atualizado_em']
    list_filter = ['projeto']
    search_fields = ['titulo', 'conteudo']


class VotoInline(admin.TabularInline):
    model = VotoRetrospectiva
    extra = 0
    fields = ['usuario', 'tipo_voto', 'positivo']


@admin.register(Retrospectiva)
class RetrospectivaAdmin(admin.ModelAdmin):
    list_display = ['sprint', 'criado_por', 'total_votos', 'criado_em']
    search_fields = ['sprint__nome', 'foi_bem', 'deu_errado', 'a_melhorar']
    inlines = [VotoInline]

    def total_votos(self, obj):
        return obj.votos.count()

    total_votos.short_description = 'Votos'


@admin.register(Mensagem)
class MensagemAdmin(admin.ModelAdmin):
    list_display = ['assunto', 'remetente', 'destinatario', 'lida_badge', 'criado_em']
    list_filter = ['lida', 'criado_em']
    search_fields = ['assunto', 'corpo', 'remetente__username', 'destinatario__username']

    def lida_badge(self, obj):
        if obj.lida:
            return format_html('<span style="color: green;">✓ Lida</span>')
        return format_html('<span style="color: orange;">✉️ Não lida</span>')

    lida_badge.short_description = 'Lida'


@admin.register(AtividadeProjeto)
class AtividadeProjetoAdmin(admin.ModelAdmin):
    """Histórico é somente leitura"""

    list_display = ['acao', 'projeto', 'usuario', 'content_type', 'objeto_id', 'criado_em']
    list_filter = ['acao', 'projeto']
    search_fields = ['acao', 'usuario__username']
    date_hierarchy = 'criado_em'
    readonly_fields = ['projeto', 'usuario', 'acao', 'content_type', 'objeto_id', 'metadados', 'criado_em']

    def has_add_permission(self, request):
        return False


@admin.register(SincronizacaoGithub)
class SincronizacaoGithubAdmin(admin.ModelAdmin):
    list_display = ['projeto', 'tipo', 'sincronizado_em']
    list_filter = ['tipo', 'projeto']


# Configuração do site admin
admin.site.site_header = "Agilis - Administração"
admin.site.site_title = "Agilis Admin"
