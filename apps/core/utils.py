# apps/core/utils.py

import json
import re
from typing import Dict, Optional

from django.contrib import messages
from django.shortcuts import redirect
from django.utils.http import url_has_allowed_host_and_scheme

# github.com/dono/repo(.git), git@github.com:dono/repo.git ou apenas dono/repo
_GITHUB_URL_RE = re.compile(r'github\.com[/:]([^/\s]+)/([^/\s]+?)(?:\.git)?/?$')
_GITHUB_CAMINHO_RE = re.compile(r'^([\w.-]+)/([\w.-]+?)(?:\.git)?$')


def redirecionar_de_volta(request, fallback, *args, **kwargs):
    """
    Redireciona para a página anterior (Referer) se for segura,
    senão para a URL nomeada de fallback
    """
    anterior = request.META.get('HTTP_REFERER')
    if anterior and url_has_allowed_host_and_scheme(
        anterior,
        allowed_hosts={request.get_host()},
        require_https=request.is_secure(),
    ):
        return redirect(anterior)
    return redirect(fallback, *args, **kwargs)


def mensagens_erros_form(request, form):
    """Transforma os erros de um form em mensagens de erro"""
    for campo, erros in form.errors.items():
        for erro in erros:
            if campo == '__all__':
                messages.error(request, erro)
            else:
                rotulo = form.fields[campo].label if campo in form.fields else campo
                messages.error(request, f'{rotulo or campo}: {erro}')


def ler_json(request) -> Optional[Dict]:
    """
    Lê o corpo JSON do request
    Retorna None se o corpo não for um objeto JSON válido
    """
    try:
        dados = json.loads(request.body or b'{}')
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return dados if isinstance(dados, dict) else None


def extrair_repositorio_github(url: str) -> Optional[str]:
    """
    Extrai "dono/repo" de uma URL ou caminho de repositório do GitHub
    Ex: https://github.com/django/django.git -> "django/django"
    """
    if not url:
        return None

    url = url.strip()

    encontrado = _GITHUB_URL_RE.search(url)
    if encontrado:
        return f'{encontrado.group(1)}/{encontrado.group(2)}'

    encontrado = _GITHUB_CAMINHO_RE.match(url)
    if encontrado:
        return f'{encontrado.group(1)}/{encontrado.group(2)}'

    return None


def periodo_legivel(dias: int) -> str:
    """
    Texto amigável para dias restantes da sprint
    Ex: 1 -> "1 dia", -3 -> "3 dias atrasada"
    """
    if dias == 0:
        return 'termina hoje'
    if dias < 0:
        total = abs(dias)
        return f"{total} dia{'s' if total != 1 else ''} atrasada"
    return f"{dias} dia{'s' if dias != 1 else ''}"
