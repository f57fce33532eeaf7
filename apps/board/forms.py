# apps/board/forms.py

from django import forms
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db.models import Q

from apps.core.forms import FormParcialMixin, CLASSE_INPUT, CLASSE_TEXTAREA, CLASSE_SELECT
from apps.core.models import Sprint, Tarefa, Retrospectiva, VotoRetrospectiva, ComentarioTarefa, Usuario


# === SPRINTS ===

class SprintForm(forms.ModelForm):
    """
    Formulário de criação de sprint
    task_ids: tarefas do backlog do produto que já entram no quadro
    """

    task_ids = forms.ModelMultipleChoiceField(
        queryset=Tarefa.objects.none(),
        required=False,
        widget=forms.CheckboxSelectMultiple
    )
    pontos_planejados = forms.IntegerField(
        min_value=0,
        required=False,
        widget=forms.NumberInput(attrs={'class': CLASSE_INPUT, 'placeholder': '0'})
    )

    class Meta:
        model = Sprint
        fields = ['nome', 'objetivo', 'data_inicio', 'data_fim', 'pontos_planejados']
        widgets = {
            'nome': forms.TextInput(attrs={
                'class': CLASSE_INPUT,
                'placeholder': 'Sprint 1'
            }),
            'objetivo': forms.Textarea(attrs={
                'class': CLASSE_TEXTAREA,
                'rows': 3,
                'placeholder': 'Objetivo da sprint...'
            }),
            'data_inicio': forms.DateInput(attrs={'class': CLASSE_INPUT, 'type': 'date'}),
            'data_fim': forms.DateInput(attrs={'class': CLASSE_INPUT, 'type': 'date'}),
        }

    def __init__(self, *args, projeto=None, **kwargs):
        super().__init__(*args, **kwargs)
        if projeto is not None:
            self.fields['task_ids'].queryset = Tarefa.objects.backlog_produto(projeto).raiz()

    def clean_pontos_planejados(self):
        pontos = self.cleaned_data.get('pontos_planejados')
        if pontos is None:
            return self.instance.pontos_planejados
        return pontos

    def clean(self):
        cleaned_data = super().clean()
        inicio = cleaned_data.get('data_inicio')
        fim = cleaned_data.get('data_fim')

        if inicio and fim and fim < inicio:
            self.add_error('data_fim', 'A data de término deve ser igual ou posterior à data de início.')

        return cleaned_data


class SprintUpdateForm(SprintForm):
    """Edição de sprint - inclui o status"""

    class Meta(SprintForm.Meta):
        fields = ['nome', 'objetivo', 'data_inicio', 'data_fim', 'pontos_planejados', 'status']
        widgets = dict(SprintForm.Meta.widgets, status=forms.Select(attrs={'class': CLASSE_SELECT}))

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        del self.fields['task_ids']


# === TAREFAS ===

class TarefaBaseForm(FormParcialMixin, forms.Form):
    """Campos comuns das tarefas do quadro e dos backlogs"""

    titulo = forms.CharField(max_length=255)
    descricao = forms.CharField(required=False, widget=forms.Textarea)
    tipo = forms.ChoiceField(choices=Tarefa.TIPO_CHOICES, required=False)
    prioridade = forms.IntegerField(min_value=1, max_value=10, required=False)
    story_points = forms.IntegerField(min_value=0, required=False)
    responsavel = forms.ModelChoiceField(queryset=Usuario.objects.none(), required=False)

    def __init__(self, *args, projeto=None, **kwargs):
        super().__init__(*args, **kwargs)
        if projeto is not None:
            self.fields['responsavel'].queryset = projeto.equipe.membros.all()
        else:
            self.fields['responsavel'].queryset = Usuario.objects.all()


class TarefaSprintForm(TarefaBaseForm):
    """Tarefa do quadro Kanban da sprint"""

    status = forms.ChoiceField(choices=[
        (valor, rotulo) for valor, rotulo in Tarefa.STATUS_CHOICES if valor in Tarefa.STATUS_QUADRO
    ])
    posicao = forms.IntegerField(min_value=0, required=False)


class TarefaBacklogForm(TarefaBaseForm):
    """Tarefa do backlog do produto ou do backlog da sprint"""

    tarefa_pai = forms.ModelChoiceField(queryset=Tarefa.objects.none(), required=False)

    def __init__(self, *args, projeto=None, **kwargs):
        super().__init__(*args, projeto=projeto, **kwargs)
        if projeto is not None:
            self.fields['tarefa_pai'].queryset = Tarefa.objects.filter(projeto=projeto)


class SubtarefaForm(forms.Form):
    """Um item da lista de subtarefas enviada em JSON"""

    titulo = forms.CharField(max_length=255)
    descricao = forms.CharField(required=False)
    tipo = forms.ChoiceField(choices=[
        (valor, rotulo) for valor, rotulo in Tarefa.TIPO_CHOICES if valor != 'epic'
    ], required=False)
    prioridade = forms.IntegerField(min_value=1, max_value=10, required=False)
    story_points = forms.IntegerField(min_value=0, required=False)
    responsavel = forms.ModelChoiceField(queryset=Usuario.objects.none(), required=False)

    def __init__(self, *args, projeto=None, **kwargs):
        super().__init__(*args, **kwargs)
        if projeto is not None:
            self.fields['responsavel'].queryset = projeto.equipe.membros.all()


class FiltroBacklogForm(forms.Form):
    """Busca, filtros e paginação do backlog"""

    search = forms.CharField(required=False)
    type = forms.ChoiceField(choices=[('', 'Todos')] + Tarefa.TIPO_CHOICES, required=False)
    priority = forms.IntegerField(min_value=1, max_value=10, required=False)
    status = forms.ChoiceField(choices=[('', 'Todos')] + Tarefa.STATUS_CHOICES, required=False)
    per_page = forms.IntegerField(min_value=1, max_value=100, required=False)

    def filtrar(self, queryset):
        if not self.is_valid():
            return queryset

        dados = self.cleaned_data
        if dados.get('search'):
            queryset = queryset.filter(
                Q(titulo__icontains=dados['search']) | Q(descricao__icontains=dados['search'])
            )
        if dados.get('type'):
            queryset = queryset.filter(tipo=dados['type'])
        if dados.get('priority'):
            queryset = queryset.filter(prioridade=dados['priority'])
        if dados.get('status'):
            queryset = queryset.filter(status=dados['status'])
        return queryset

    def itens_por_pagina(self):
        if self.is_valid() and self.cleaned_data.get('per_page'):
            return self.cleaned_data['per_page']
        return settings.AGILIS_BACKLOG_POR_PAGINA


# === ORDENAÇÃO ===

class ItemOrdenacaoForm(forms.Form):
    """Um item do JSON de reordenação: {id, position[, status]}"""

    id = forms.IntegerField()
    position = forms.IntegerField(min_value=0)
    status = forms.ChoiceField(choices=[(status, status) for status in Tarefa.STATUS_QUADRO], required=False)

    def __init__(self, *args, exige_status=False, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['status'].required = exige_status

    def como_item(self):
        item = {'id': self.cleaned_data['id'], 'posicao': self.cleaned_data['position']}
        if self.cleaned_data.get('status'):
            item['status'] = self.cleaned_data['status']
        return item


def validar_itens(lista, form_class=ItemOrdenacaoForm, **kwargs):
    """
    Valida uma lista de dicts com o form informado

    Returns:
        (dados_validos, erros) - erros é um dict {indice: erros_do_form}
    """
    if not isinstance(lista, list) or not lista:
        return [], {'items': ['Envie uma lista com pelo menos um item.']}

    dados, erros = [], {}
    for indice, item in enumerate(lista):
        form = form_class(item if isinstance(item, dict) else {}, **kwargs)
        if form.is_valid():
            dados.append(form)
        else:
            erros[indice] = form.errors
    return dados, erros


# === RETROSPECTIVAS ===

class RetrospectivaForm(forms.ModelForm):

    class Meta:
        model = Retrospectiva
        fields = ['foi_bem', 'deu_errado', 'a_melhorar']
        widgets = {
            'foi_bem': forms.Textarea(attrs={'class': CLASSE_TEXTAREA, 'rows': 4}),
            'deu_errado': forms.Textarea(attrs={'class': CLASSE_TEXTAREA, 'rows': 4}),
            'a_melhorar': forms.Textarea(attrs={'class': CLASSE_TEXTAREA, 'rows': 4}),
        }


class VotoForm(forms.Form):
    vote_type = forms.ChoiceField(choices=VotoRetrospectiva.TIPO_CHOICES)
    # "false" e "0" viram False
    upvote = forms.BooleanField(required=False)


# === COMENTÁRIOS ===

class ComentarioForm(forms.ModelForm):

    class Meta:
        model = ComentarioTarefa
        fields = ['conteudo']

    def clean_conteudo(self):
        conteudo = self.cleaned_data['conteudo'].strip()
        if not conteudo:
            raise ValidationError('O comentário não pode estar vazio.')
        return conteudo
