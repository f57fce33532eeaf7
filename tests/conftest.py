"""Fixtures compartilhadas: equipe com um membro de cada papel, projeto, sprint e tarefas."""

from datetime import timedelta

import pytest
from django.test import Client
from django.utils import timezone

from apps.core.models import Usuario, Equipe, MembroEquipe, Projeto, Sprint, Tarefa


@pytest.fixture
def criar_usuario(db):
    def _criar(username, equipe=None, papel=MembroEquipe.DEVELOPER, **extra):
        usuario = Usuario.objects.create_user(
            username=username,
            email=f'{username}@agilis.dev',
            password='senha-segura-123',
            **extra
        )
        if equipe is not None:
            MembroEquipe.objects.create(usuario=usuario, equipe=equipe, papel=papel)
        return usuario
    return _criar


@pytest.fixture
def equipe(db):
    return Equipe.objects.create(nome='Equipe Alfa')


@pytest.fixture
def admin(criar_usuario, equipe):
    return criar_usuario('ana', equipe, MembroEquipe.ADMIN, nome='Ana Souza')


@pytest.fixture
def product_owner(criar_usuario, equipe):
    return criar_usuario('paulo', equipe, MembroEquipe.PRODUCT_OWNER, nome='Paulo Lima')


@pytest.fixture
def scrum_master(criar_usuario, equipe):
    return criar_usuario('sofia', equipe, MembroEquipe.SCRUM_MASTER, nome='Sofia Reis')


@pytest.fixture
def desenvolvedor(criar_usuario, equipe):
    return criar_usuario('davi', equipe, MembroEquipe.DEVELOPER, nome='Davi Costa')


@pytest.fixture
def estranho(criar_usuario):
    """Usuário sem nenhuma equipe"""
    return criar_usuario('erica', nome='Erica Melo')


@pytest.fixture
def projeto(equipe):
    return Projeto.objects.create(equipe=equipe, nome='Portal do Cliente')


@pytest.fixture
def sprint(projeto):
    hoje = timezone.localdate()
    return Sprint.objects.create(
        projeto=projeto,
        nome='Sprint 1',
        data_inicio=hoje,
        data_fim=hoje + timedelta(days=14),
    )


@pytest.fixture
def criar_tarefa(projeto):
    def _criar(titulo, **kwargs):
        kwargs.setdefault('projeto', projeto)
        return Tarefa.objects.create(titulo=titulo, **kwargs)
    return _criar


def _cliente_logado(usuario):
    cliente = Client()
    cliente.force_login(usuario)
    return cliente


@pytest.fixture
def cliente_admin(admin):
    return _cliente_logado(admin)


@pytest.fixture
def cliente_po(product_owner):
    return _cliente_logado(product_owner)


@pytest.fixture
def cliente_dev(desenvolvedor):
    return _cliente_logado(desenvolvedor)


@pytest.fixture
def cliente_estranho(estranho):
    return _cliente_logado(estranho)
