# apps/core/forms.py

from django import forms
from django.conf import settings
from django.core.exceptions import ValidationError

from .models import Usuario, Equipe, MembroEquipe, Projeto, Documento, Mensagem, AtividadeProjeto

CLASSE_INPUT = 'form-input w-full px-4 py-2 border rounded-lg'
CLASSE_TEXTAREA = 'form-textarea w-full px-4 py-2 border rounded-lg'
CLASSE_SELECT = 'form-select w-full px-4 py-2 border rounded-lg'


class FormParcialMixin:
    """
    Permite usar o mesmo form para criação e atualização parcial

    Com parcial=True só os campos presentes no request são validados
    e dados_enviados() devolve apenas esses campos.
    """

    def __init__(self, *args, parcial=False, **kwargs):
        super().__init__(*args, **kwargs)
        self.parcial = parcial
        if parcial:
            for nome, field in self.fields.items():
                if nome not in self.data:
                    field.required = False

    def dados_enviados(self):
        if not self.parcial:
            return dict(self.cleaned_data)
        return {
            campo: valor
            for campo, valor in self.cleaned_data.items()
            if campo in self.data
        }


# === EQUIPES ===

class EquipeForm(forms.ModelForm):
    """Formulário para criar/editar equipes"""

    class Meta:
        model = Equipe
        fields = ['nome']
        widgets = {
            'nome': forms.TextInput(attrs={
                'class': CLASSE_INPUT,
                'placeholder': 'Nome da equipe'
            }),
        }


class AdicionarMembroForm(forms.Form):
    """Adiciona um usuário já cadastrado à equipe pelo e-mail"""

    email = forms.EmailField(
        label='Email',
        widget=forms.EmailInput(attrs={
            'class': CLASSE_INPUT,
            'placeholder': 'email@empresa.com'
        })
    )

    def clean_email(self):
        email = self.cleaned_data['email']
        usuario = Usuario.objects.filter(email__iexact=email).first()
        if usuario is None:
            raise ValidationError('Nenhum usuário cadastrado com este email.')
        self.usuario = usuario
        return email


class PapelMembroForm(forms.Form):
    papel = forms.ChoiceField(
        label='Papel',
        choices=MembroEquipe.PAPEL_CHOICES,
        widget=forms.Select(attrs={'class': CLASSE_SELECT})
    )


# === PROJETOS ===

class ProjetoForm(forms.ModelForm):
    """Formulário para criar/editar projetos"""

    class Meta:
        model = Projeto
        fields = ['nome', 'descricao', 'github_repo', 'duracao_sprint_padrao', 'status']
        widgets = {
            'nome': forms.TextInput(attrs={
                'class': CLASSE_INPUT,
                'placeholder': 'Nome do projeto'
            }),
            'descricao': forms.Textarea(attrs={
                'class': CLASSE_TEXTAREA,
                'rows': 4,
                'placeholder': 'Descrição do projeto...'
            }),
            'github_repo': forms.TextInput(attrs={
                'class': CLASSE_INPUT,
                'placeholder': 'https://github.com/dono/repositorio'
            }),
            'duracao_sprint_padrao': forms.NumberInput(attrs={
                'class': CLASSE_INPUT,
                'min': 1
            }),
            'status': forms.Select(attrs={'class': CLASSE_SELECT}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['status'].required = False
        self.fields['duracao_sprint_padrao'].required = False

    def clean_status(self):
        """Sem status informado, mantém o atual ou usa "active" na criação"""
        status = self.cleaned_data.get('status')
        if status:
            return status
        return self.instance.status if self.instance.pk else 'active'

    def clean_duracao_sprint_padrao(self):
        duracao = self.cleaned_data.get('duracao_sprint_padrao')
        if duracao is None:
            if self.instance.pk:
                return self.instance.duracao_sprint_padrao
            return settings.AGILIS_DURACAO_SPRINT_PADRAO
        if duracao < 1:
            raise ValidationError('A duração da sprint deve ser de pelo menos 1 dia.')
        return duracao


class FiltroAtividadesForm(forms.Form):
    """Filtros da página de atividades do projeto (nomes iguais aos da query string)"""

    action = forms.ChoiceField(required=False)
    user_id = forms.IntegerField(required=False)
    date_from = forms.DateField(required=False)
    date_to = forms.DateField(required=False)
    per_page = forms.IntegerField(required=False, min_value=1, max_value=100)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['action'].choices = [('', 'Todas')] + [(acao, acao) for acao in AtividadeProjeto.ACOES]

    def filtrar(self, queryset):
        """Aplica os filtros válidos ao queryset de atividades"""
        if not self.is_valid():
            return queryset

        dados = self.cleaned_data
        if dados.get('action'):
            queryset = queryset.filter(acao=dados['action'])
        if dados.get('user_id'):
            queryset = queryset.filter(usuario_id=dados['user_id'])
        if dados.get('date_from'):
            queryset = queryset.filter(criado_em__date__gte=dados['date_from'])
        if dados.get('date_to'):
            queryset = queryset.filter(criado_em__date__lte=dados['date_to'])
        return queryset

    def itens_por_pagina(self):
        if self.is_valid() and self.cleaned_data.get('per_page'):
            return self.cleaned_data['per_page']
        return settings.AGILIS_ATIVIDADES_POR_PAGINA


# === DOCUMENTOS ===

class DocumentoForm(forms.ModelForm):

    class Meta:
        model = Documento
        fields = ['titulo', 'conteudo']
        widgets = {
            'titulo': forms.TextInput(attrs={
                'class': CLASSE_INPUT,
                'placeholder': 'Título do documento'
            }),
            'conteudo': forms.Textarea(attrs={
                'class': CLASSE_TEXTAREA,
                'rows': 12
            }),
        }


# === MENSAGENS ===

class MensagemForm(forms.ModelForm):
    """Formulário de nova mensagem"""

    class Meta:
        model = Mensagem
        fields = ['destinatario', 'assunto', 'corpo']
        widgets = {
            'destinatario': forms.Select(attrs={'class': CLASSE_SELECT}),
            'assunto': forms.TextInput(attrs={
                'class': CLASSE_INPUT,
                'placeholder': 'Assunto'
            }),
            'corpo': forms.Textarea(attrs={
                'class': CLASSE_TEXTAREA,
                'rows': 6
            }),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['destinatario'].queryset = Usuario.objects.filter(is_active=True).order_by('nome', 'username')
