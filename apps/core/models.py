# apps/core/models.py

from django.contrib.auth.models import AbstractUser
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator, MaxLengthValidator
from django.db import models, transaction
from django.utils import timezone

# Chaves de sessão para equipe/projeto selecionados
CHAVE_EQUIPE_ATUAL = 'equipe_atual_id'
CHAVE_PROJETO_ATUAL = 'projeto_atual_id'


class Usuario(AbstractUser):
    """
    Modelo de usuário customizado com suporte a equipes

    O usuário participa de várias equipes, cada uma com um papel
    (admin, product_owner, scrum_master ou developer). A equipe e o
    projeto "atuais" ficam guardados na sessão.
    """

    # === INFORMAÇÕES PESSOAIS ===
    nome = models.CharField(max_length=255, blank=True)
    email_verificado_em = models.DateTimeField(null=True, blank=True)

    # === INTEGRAÇÃO GITHUB ===
    github_id = models.CharField(max_length=50, unique=True, null=True, blank=True)
    github_token = models.TextField(blank=True)
    github_refresh_token = models.TextField(blank=True)

    # === METADADOS ===
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'usuario'

    def get_full_name(self):
        return self.nome or super().get_full_name() or self.username

    def iniciais(self):
        """
        Iniciais do nome para avatares
        Ex: "João da Silva" -> "JD"
        """
        palavras = self.get_full_name().split()[:2]
        return ''.join(palavra[0] for palavra in palavras).upper()

    # === PAPÉIS NAS EQUIPES ===

    def papel_na_equipe(self, equipe):
        """Retorna o papel do usuário na equipe ou None se não for membro"""
        if equipe is None:
            return None
        return MembroEquipe.objects.filter(
            usuario=self, equipe=equipe
        ).values_list('papel', flat=True).first()

    def e_membro(self, equipe):
        return self.papel_na_equipe(equipe) is not None

    def tem_papel(self, equipe, papel):
        """
        Verifica o papel na equipe
        Administradores da equipe passam em qualquer verificação
        """
        papel_atual = self.papel_na_equipe(equipe)
        return papel_atual is not None and (papel_atual == papel or papel_atual == MembroEquipe.ADMIN)

    def tem_algum_papel(self, equipe, papeis):
        papel_atual = self.papel_na_equipe(equipe)
        return papel_atual is not None and (papel_atual in papeis or papel_atual == MembroEquipe.ADMIN)

    # === SELEÇÃO ATUAL (SESSÃO) ===

    def equipe_atual(self, sessao=None):
        """
        Equipe selecionada na sessão, ou a primeira equipe do usuário
        """
        equipe_id = sessao.get(CHAVE_EQUIPE_ATUAL) if sessao is not None else None
        if equipe_id:
            equipe = self.equipes.filter(id=equipe_id).first()
            if equipe:
                return equipe
        return self.equipes.order_by('id').first()

    def projeto_atual(self, sessao=None):
        """
        Projeto selecionado na sessão dentro da equipe atual,
        ou o primeiro projeto da equipe
        """
        equipe = self.equipe_atual(sessao)
        if equipe is None:
            return None

        projeto_id = sessao.get(CHAVE_PROJETO_ATUAL) if sessao is not None else None
        if projeto_id:
            projeto = equipe.projetos.filter(id=projeto_id).first()
            if projeto:
                return projeto
        return equipe.projetos.order_by('id').first()

    def __str__(self):
        return self.get_full_name()


class Equipe(models.Model):
    """Equipe - agrupa usuários e projetos"""

    nome = models.CharField(max_length=255)
    membros = models.ManyToManyField(
        Usuario,
        through='MembroEquipe',
        related_name='equipes'
    )
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'equipe'
        ordering = ['nome']

    def __str__(self):
        return self.nome

    def usuarios_com_papel(self, papel):
        return self.membros.filter(membroequipe__papel=papel)


class MembroEquipe(models.Model):
    """Tabela intermediária usuário x equipe com o papel do membro"""

    ADMIN = 'admin'
    PRODUCT_OWNER = 'product_owner'
    SCRUM_MASTER = 'scrum_master'
    DEVELOPER = 'developer'

    PAPEL_CHOICES = [
        (ADMIN, 'Administrador'),
        (PRODUCT_OWNER, 'Product Owner'),
        (SCRUM_MASTER, 'Scrum Master'),
        (DEVELOPER, 'Desenvolvedor'),
    ]

    usuario = models.ForeignKey(Usuario, on_delete=models.CASCADE)
    equipe = models.ForeignKey(Equipe, on_delete=models.CASCADE)
    papel = models.CharField(max_length=20, choices=PAPEL_CHOICES, default=DEVELOPER)
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'membro_equipe'
        unique_together = ['usuario', 'equipe']

    def __str__(self):
        return f"{self.usuario} - {self.equipe} ({self.get_papel_display()})"


class ProjetoManager(models.Manager):
    """Esconde projetos excluídos (soft delete)"""

    def get_queryset(self):
        return super().get_queryset().filter(excluido_em__isnull=True)


class Projeto(models.Model):
    """Projeto da equipe - agrega sprints, tarefas e documentos"""

    STATUS_CHOICES = [
        ('active', 'Ativo'),
        ('on_hold', 'Pausado'),
        ('completed', 'Concluído'),
        ('archived', 'Arquivado'),
    ]

    equipe = models.ForeignKey(
        Equipe,
        on_delete=models.CASCADE,
        related_name='projetos'
    )
    nome = models.CharField(max_length=255)
    descricao = models.TextField(blank=True)
    github_repo = models.CharField(max_length=255, blank=True)
    duracao_sprint_padrao = models.PositiveIntegerField(default=14)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)
    excluido_em = models.DateTimeField(null=True, blank=True)

    objects = ProjetoManager()
    todos = models.Manager()

    class Meta:
        db_table = 'projeto'
        ordering = ['-criado_em']

    def __str__(self):
        return self.nome

    def delete(self, using=None, keep_parents=False):
        """Soft delete - apenas marca a data de exclusão"""
        self.excluido_em = timezone.now()
        self.save(update_fields=['excluido_em'])

    def excluir_definitivamente(self):
        return super().delete()

    def restaurar(self):
        self.excluido_em = None
        self.save(update_fields=['excluido_em'])

    @property
    def esta_excluido(self):
        return self.excluido_em is not None

    def sprint_ativa(self):
        return self.sprints.filter(status=Sprint.ATIVA).order_by('-data_inicio').first()


class Sprint(models.Model):
    """Sprint - período fixo de trabalho de um projeto"""

    PLANEJAMENTO = 'planning'
    ATIVA = 'active'
    CONCLUIDA = 'completed'

    STATUS_CHOICES = [
        (PLANEJAMENTO, 'Em planejamento'),
        (ATIVA, 'Ativa'),
        (CONCLUIDA, 'Concluída'),
    ]

    projeto = models.ForeignKey(
        Projeto,
        on_delete=models.CASCADE,
        related_name='sprints'
    )
    nome = models.CharField(max_length=255)
    objetivo = models.TextField(blank=True)
    data_inicio = models.DateField()
    data_fim = models.DateField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PLANEJAMENTO)
    pontos_planejados = models.PositiveIntegerField(default=0)
    pontos_concluidos = models.PositiveIntegerField(default=0)
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'sprint'
        ordering = ['-data_inicio', '-id']

    def __str__(self):
        return f"{self.nome} ({self.projeto.nome})"

    def esta_ativa(self):
        return self.status == self.ATIVA

    def esta_concluida(self):
        return self.status == self.CONCLUIDA

    def dias_restantes(self):
        """Dias até o fim da sprint (negativo se passou do prazo)"""
        if self.esta_concluida():
            return 0
        return (self.data_fim - timezone.localdate()).days


class TarefaQuerySet(models.QuerySet):
    """Consultas pelos "baldes" onde a posição é sequencial"""

    def backlog_produto(self, projeto):
        return self.filter(projeto=projeto, sprint__isnull=True, sprint_backlog__isnull=True)

    def backlog_sprint(self, sprint):
        return self.filter(projeto_id=sprint.projeto_id, sprint__isnull=True, sprint_backlog=sprint)

    def quadro(self, sprint, status=None):
        qs = self.filter(sprint=sprint)
        if status is not None:
            qs = qs.filter(status=status)
        return qs

    def raiz(self):
        return self.filter(tarefa_pai__isnull=True)


class Tarefa(models.Model):
    """
    Tarefa do projeto (story, task, bug ou epic)

    Uma tarefa fica em exatamente um dos lugares:
    - backlog do produto (sem sprint e sem sprint_backlog)
    - backlog da sprint (sprint_backlog definido)
    - quadro Kanban da sprint (sprint definido, status Planned/Active/Completed)
    """

    TIPO_CHOICES = [
        ('story', 'História'),
        ('task', 'Tarefa'),
        ('bug', 'Bug'),
        ('epic', 'Épico'),
    ]

    BACKLOG = 'Backlog'
    PLANEJADA = 'Planned'
    EM_ANDAMENTO = 'Active'
    CONCLUIDA = 'Completed'

    STATUS_CHOICES = [
        (BACKLOG, 'Backlog'),
        (PLANEJADA, 'Planejada'),
        (EM_ANDAMENTO, 'Em andamento'),
        (CONCLUIDA, 'Concluída'),
    ]

    STATUS_QUADRO = [PLANEJADA, EM_ANDAMENTO, CONCLUIDA]

    # Tipos que podem ter subtarefas
    TIPOS_PAI = ['epic', 'story']

    projeto = models.ForeignKey(
        Projeto,
        on_delete=models.CASCADE,
        related_name='tarefas'
    )
    tarefa_pai = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='subtarefas'
    )
    sprint = models.ForeignKey(
        Sprint,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tarefas'
    )
    sprint_backlog = models.ForeignKey(
        Sprint,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tarefas_backlog'
    )
    responsavel = models.ForeignKey(
        Usuario,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tarefas_atribuidas'
    )
    titulo = models.CharField(max_length=255)
    descricao = models.TextField(blank=True)
    tipo = models.CharField(max_length=10, choices=TIPO_CHOICES, default='task')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=BACKLOG)
    prioridade = models.PositiveSmallIntegerField(
        default=5,
        validators=[MinValueValidator(1), MaxValueValidator(10)]
    )
    story_points = models.PositiveIntegerField(null=True, blank=True)
    posicao = models.IntegerField(default=0)
    github_issue_number = models.CharField(max_length=20, blank=True)
    github_pr_number = models.CharField(max_length=20, blank=True)
    etiquetas = models.ManyToManyField('Etiqueta', blank=True, related_name='tarefas')
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    objects = TarefaQuerySet.as_manager()

    class Meta:
        db_table = 'tarefa'
        ordering = ['posicao', 'criado_em', 'id']
        indexes = [
            models.Index(fields=['sprint', 'status', 'posicao'], name='tarefa_sprint_status_pos_idx'),
            models.Index(fields=['projeto', 'posicao'], name='tarefa_projeto_pos_idx'),
        ]

    def __str__(self):
        return f"#{self.id} {self.titulo}"

    def clean(self):
        """Sprint e backlog de sprint precisam ser do mesmo projeto da tarefa"""
        for campo in ('sprint', 'sprint_backlog'):
            sprint = getattr(self, campo)
            if sprint is not None and sprint.projeto_id != self.projeto_id:
                raise ValidationError({campo: 'A sprint pertence a outro projeto.'})

        if self.tarefa_pai_id and self.tarefa_pai.projeto_id != self.projeto_id:
            raise ValidationError({'tarefa_pai': 'A tarefa pai pertence a outro projeto.'})

    def esta_no_backlog(self):
        return self.status == self.BACKLOG

    def esta_concluida(self):
        return self.status == self.CONCLUIDA

    def esta_atribuida(self):
        return self.responsavel_id is not None

    def e_pai(self):
        return self.subtarefas.exists()

    def tem_pai(self):
        return self.tarefa_pai_id is not None

    def total_story_points(self):
        """Pontos da própria tarefa somados aos das subtarefas"""
        total = self.subtarefas.aggregate(total=models.Sum('story_points'))['total'] or 0
        return (self.story_points or 0) + total

    def para_dict(self):
        """Representação usada no WebSocket e nas respostas JSON"""
        responsavel = None
        if self.responsavel_id:
            responsavel = {
                'id': self.responsavel.id,
                'nome': self.responsavel.get_full_name(),
                'iniciais': self.responsavel.iniciais(),
            }

        return {
            'id': self.id,
            'projeto_id': self.projeto_id,
            'sprint_id': self.sprint_id,
            'sprint_backlog_id': self.sprint_backlog_id,
            'tarefa_pai_id': self.tarefa_pai_id,
            'titulo': self.titulo,
            'descricao': self.descricao,
            'tipo': self.tipo,
            'status': self.status,
            'prioridade': self.prioridade,
            'story_points': self.story_points,
            'posicao': self.posicao,
            'github_issue_number': self.github_issue_number,
            'github_pr_number': self.github_pr_number,
            'responsavel': responsavel,
            'etiquetas': [
                {'id': etiqueta.id, 'nome': etiqueta.nome, 'cor': etiqueta.cor}
                for etiqueta in self.etiquetas.all()
            ],
            'criado_em': self.criado_em.isoformat() if self.criado_em else None,
            'atualizado_em': self.atualizado_em.isoformat() if self.atualizado_em else None,
        }


class Etiqueta(models.Model):
    """Etiqueta colorida para classificar tarefas"""

    projeto = models.ForeignKey(
        Projeto,
        on_delete=models.CASCADE,
        related_name='etiquetas'
    )
    tarefa = models.ForeignKey(
        Tarefa,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='etiquetas_proprias'
    )
    nome = models.CharField(max_length=100)
    cor = models.CharField(max_length=7, default='#3b82f6')
    criado_em = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'etiqueta'
        ordering = ['nome']

    def __str__(self):
        return self.nome


class ComentarioTarefa(models.Model):
    """Comentário de um usuário em uma tarefa"""

    tarefa = models.ForeignKey(
        Tarefa,
        on_delete=models.CASCADE,
        related_name='comentarios'
    )
    usuario = models.ForeignKey(
        Usuario,
        on_delete=models.CASCADE,
        related_name='comentarios'
    )
    conteudo = models.TextField(validators=[MaxLengthValidator(5000)])
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'comentario_tarefa'
        ordering = ['criado_em', 'id']

    def __str__(self):
        return f"Comentário de {self.usuario} em {self.criado_em:%d/%m/%Y}"

    def para_dict(self):
        return {
            'id': self.id,
            'tarefa_id': self.tarefa_id,
            'conteudo': self.conteudo,
            'usuario': {
                'id': self.usuario.id,
                'nome': self.usuario.get_full_name(),
                'iniciais': self.usuario.iniciais(),
            },
            'criado_em': self.criado_em.isoformat(),
            'atualizado_em': self.atualizado_em.isoformat(),
        }


class Documento(models.Model):
    """Documento de texto do projeto"""

    projeto = models.ForeignKey(
        Projeto,
        on_delete=models.CASCADE,
        related_name='documentos'
    )
    criado_por = models.ForeignKey(
        Usuario,
        on_delete=models.SET_NULL,
        null=True,
        related_name='documentos_criados'
    )
    titulo = models.CharField(max_length=255)
    conteudo = models.TextField(blank=True)
    posicao = models.IntegerField(default=0)
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'documento'
        ordering = ['posicao', 'criado_em']

    def __str__(self):
        return self.titulo


class Retrospectiva(models.Model):
    """Retrospectiva de uma sprint concluída"""

    sprint = models.OneToOneField(
        Sprint,
        on_delete=models.CASCADE,
        related_name='retrospectiva'
    )
    criado_por = models.ForeignKey(
        Usuario,
        on_delete=models.SET_NULL,
        null=True,
        related_name='retrospectivas_criadas'
    )
    foi_bem = models.TextField(blank=True)
    deu_errado = models.TextField(blank=True)
    a_melhorar = models.TextField(blank=True)
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'retrospectiva'

    def __str__(self):
        return f"Retrospectiva - {self.sprint.nome}"

    def votos_positivos(self, tipo):
        return self.votos.filter(tipo_voto=tipo, positivo=True).count()

    def votos_negativos(self, tipo):
        return self.votos.filter(tipo_voto=tipo, positivo=False).count()

    def contagem_votos(self):
        return {
            tipo: {'upvotes': self.votos_positivos(tipo), 'downvotes': self.votos_negativos(tipo)}
            for tipo, _ in VotoRetrospectiva.TIPO_CHOICES
        }

    def votos_do_usuario(self, usuario):
        """Votos do usuário por categoria: {tipo: {'upvote': bool, 'downvote': bool}}"""
        resultado = {
            tipo: {'upvote': False, 'downvote': False}
            for tipo, _ in VotoRetrospectiva.TIPO_CHOICES
        }
        for voto in self.votos.filter(usuario=usuario):
            resultado[voto.tipo_voto]['upvote' if voto.positivo else 'downvote'] = True
        return resultado

    def registrar_voto(self, usuario, tipo, positivo):
        """
        Alterna o voto do usuário na categoria:
        - mesmo voto de novo remove o voto
        - voto oposto inverte o voto
        - sem voto anterior cria o voto

        Retorna 'criado', 'alterado' ou 'removido'
        """
        with transaction.atomic():
            voto = self.votos.select_for_update().filter(
                usuario=usuario, tipo_voto=tipo
            ).first()

            if voto is None:
                self.votos.create(usuario=usuario, tipo_voto=tipo, positivo=positivo)
                return 'criado'

            if voto.positivo == positivo:
                voto.delete()
                return 'removido'

            voto.positivo = positivo
            voto.save(update_fields=['positivo', 'atualizado_em'])
            return 'alterado'


class VotoRetrospectiva(models.Model):
    """Voto positivo/negativo de um usuário em uma categoria da retrospectiva"""

    TIPO_CHOICES = [
        ('went_well', 'O que foi bem'),
        ('went_wrong', 'O que deu errado'),
        ('to_improve', 'O que melhorar'),
    ]

    retrospectiva = models.ForeignKey(
        Retrospectiva,
        on_delete=models.CASCADE,
        related_name='votos'
    )
    usuario = models.ForeignKey(
        Usuario,
        on_delete=models.CASCADE,
        related_name='votos_retrospectiva'
    )
    tipo_voto = models.CharField(max_length=20, choices=TIPO_CHOICES)
    positivo = models.BooleanField(default=True)
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'voto_retrospectiva'
        unique_together = ['retrospectiva', 'usuario', 'tipo_voto']

    def __str__(self):
        sinal = '+' if self.positivo else '-'
        return f"{sinal}1 {self.get_tipo_voto_display()} ({self.usuario})"


class Mensagem(models.Model):
    """Mensagem direta entre usuários"""

    remetente = models.ForeignKey(
        Usuario,
        on_delete=models.CASCADE,
        related_name='mensagens_enviadas'
    )
    destinatario = models.ForeignKey(
        Usuario,
        on_delete=models.CASCADE,
        related_name='mensagens_recebidas'
    )
    assunto = models.CharField(max_length=255)
    corpo = models.TextField()
    lida = models.BooleanField(default=False)
    lida_em = models.DateTimeField(null=True, blank=True)
    criado_em = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'mensagem'
        ordering = ['-criado_em', '-id']

    def __str__(self):
        return f"{self.assunto} ({self.remetente} -> {self.destinatario})"

    def marcar_como_lida(self):
        if not self.lida:
            self.lida = True
            self.lida_em = timezone.now()
            self.save(update_fields=['lida', 'lida_em'])


class AtividadeProjeto(models.Model):
    """
    Registro de atividade do projeto

    O objeto relacionado é genérico (tarefa, sprint, projeto...) e o
    registro continua válido mesmo depois que o objeto é excluído.
    """

    ACOES = [
        'task.created',
        'task.updated',
        'task.deleted',
        'task.added_to_sprint',
        'task.added_to_sprint_backlog',
        'task.moved_to_backlog',
        'task.moved_to_product_backlog',
        'task.subtask_created',
        'sprint.created',
        'sprint.updated',
        'sprint.deleted',
        'project.created',
        'project.updated',
        'project.deleted',
    ]

    projeto = models.ForeignKey(
        Projeto,
        on_delete=models.CASCADE,
        related_name='atividades'
    )
    usuario = models.ForeignKey(
        Usuario,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='atividades'
    )
    acao = models.CharField(max_length=100, db_index=True)
    content_type = models.ForeignKey(
        ContentType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True
    )
    objeto_id = models.PositiveBigIntegerField(null=True, blank=True)
    objeto = GenericForeignKey('content_type', 'objeto_id')
    metadados = models.JSONField(default=dict, blank=True)
    criado_em = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'atividade_projeto'
        ordering = ['-criado_em', '-id']

    def __str__(self):
        return f"{self.acao} em {self.projeto.nome}"


class SincronizacaoGithub(models.Model):
    """Dados trazidos do GitHub para o projeto"""

    TIPO_CHOICES = [
        ('commits', 'Commits'),
        ('issues', 'Issues'),
        ('prs', 'Pull Requests'),
    ]

    projeto = models.ForeignKey(
        Projeto,
        on_delete=models.CASCADE,
        related_name='sincronizacoes_github'
    )
    tipo = models.CharField(max_length=10, choices=TIPO_CHOICES)
    dados = models.JSONField(default=dict)
    sincronizado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'sincronizacao_github'
        ordering = ['-sincronizado_em', '-id']

    def __str__(self):
        return f"{self.get_tipo_display()} - {self.projeto.nome} ({self.sincronizado_em:%d/%m/%Y %H:%M})"
