# apps/core/atividades.py

"""
Registro de atividades do projeto

Usado pelas views sempre que algo relevante acontece em um projeto
(tarefa criada, sprint excluída, projeto atualizado...).
"""

import logging

from django.contrib.contenttypes.models import ContentType

from .models import AtividadeProjeto

logger = logging.getLogger(__name__)


def registrar_atividade(projeto, usuario, acao, objeto=None, metadados=None):
    """Registra uma atividade ligada a um objeto existente"""
    atividade = AtividadeProjeto.objects.create(
        projeto=projeto,
        usuario=usuario if usuario is not None and usuario.is_authenticated else None,
        acao=acao,
        content_type=ContentType.objects.get_for_model(objeto) if objeto is not None else None,
        objeto_id=objeto.pk if objeto is not None else None,
        metadados=metadados or {},
    )
    logger.info(f"📝 {acao} no projeto {projeto.id} por {usuario}")
    return atividade


def registrar_atividade_excluida(projeto, usuario, acao, modelo, objeto_id, metadados=None):
    """Registra uma atividade de um objeto que já foi excluído"""
    atividade = AtividadeProjeto.objects.create(
        projeto=projeto,
        usuario=usuario if usuario is not None and usuario.is_authenticated else None,
        acao=acao,
        content_type=ContentType.objects.get_for_model(modelo),
        objeto_id=objeto_id,
        metadados=metadados or {},
    )
    logger.info(f"🗑️ {acao} (#{objeto_id}) no projeto {projeto.id} por {usuario}")
    return atividade
