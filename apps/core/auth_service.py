# apps/core/auth_service.py

"""
Serviço de Autenticação - Encapsula o login via GitHub (OAuth)
A view só lida com HTTP; troca de código, leitura do perfil e
criação do usuário ficam aqui.
"""

import logging
import secrets
from typing import Dict, Optional, Tuple
from urllib.parse import urlencode

import requests
from django.conf import settings
from django.contrib.auth import login, logout
from django.utils import timezone

from .github_client import GithubClient, GithubError
from .models import Usuario

logger = logging.getLogger(__name__)


class AuthenticationService:
    """
    Serviço encapsulado para o fluxo OAuth do GitHub

    1. url_autorizacao: gera o state e monta a URL de autorização
    2. processar_callback: valida o state, troca o código pelo token,
       lê o perfil e cria/atualiza o usuário
    """

    def __init__(self):
        self._authorize_url = 'https://github.com/login/oauth/authorize'
        self._token_url = 'https://github.com/login/oauth/access_token'
        self._escopos = 'read:user user:email'
        self._chave_state = 'github_oauth_state'

    def url_autorizacao(self, request) -> str:
        """Monta a URL de autorização e guarda o state na sessão"""
        state = secrets.token_urlsafe(16)
        request.session[self._chave_state] = state

        params = {
            'client_id': settings.AGILIS_GITHUB_CLIENT_ID,
            'redirect_uri': self._redirect_uri(request),
            'scope': self._escopos,
            'state': state,
        }
        return f"{self._authorize_url}?{urlencode(params)}"

    def processar_callback(self, request, code: str, state: str) -> Tuple[bool, str, Optional[Usuario]]:
        """
        Finaliza o login

        Returns:
            Tuple[sucesso, mensagem, usuario]
        """
        if not self._validar_state(request, state):
            logger.warning("⚠️ Callback do GitHub com state inválido")
            return False, 'Não foi possível autenticar com o GitHub.', None

        if not code:
            return False, 'Não foi possível autenticar com o GitHub.', None

        try:
            token_data = self._trocar_codigo(request, code)
            cliente = GithubClient(token=token_data['access_token'])
            perfil = cliente.usuario_autenticado()
            email = perfil.get('email') or self._email_principal(cliente)

            usuario = self._criar_ou_atualizar_usuario(perfil, email, token_data)

        except (GithubError, requests.RequestException, KeyError, ValueError) as e:
            logger.error(f"❌ Erro no login com GitHub: {e}")
            return False, 'Não foi possível autenticar com o GitHub.', None

        login(request, usuario)
        logger.info(f"✅ Login via GitHub - {usuario.username}")
        return True, f"Bem-vindo, {usuario.get_full_name()}!", usuario

    def fazer_logout(self, request) -> bool:
        """Encerra a sessão (logout já invalida a sessão inteira)"""
        usuario = request.user.username if request.user.is_authenticated else None
        logout(request)
        if usuario:
            logger.info(f"🔌 Logout - {usuario}")
        return True

    # =================== MÉTODOS PRIVADOS (ENCAPSULADOS) ===================

    def _redirect_uri(self, request) -> str:
        if settings.AGILIS_GITHUB_REDIRECT_URI:
            return settings.AGILIS_GITHUB_REDIRECT_URI
        return request.build_absolute_uri('/auth/github/callback/')

    def _validar_state(self, request, state: str) -> bool:
        esperado = request.session.pop(self._chave_state, None)
        return bool(esperado and state and secrets.compare_digest(esperado, state))

    def _trocar_codigo(self, request, code: str) -> Dict:
        """Troca o código de autorização pelo access token"""
        response = requests.post(
            self._token_url,
            data={
                'client_id': settings.AGILIS_GITHUB_CLIENT_ID,
                'client_secret': settings.AGILIS_GITHUB_CLIENT_SECRET,
                'code': code,
                'redirect_uri': self._redirect_uri(request),
            },
            headers={'Accept': 'application/json'},
            timeout=settings.AGILIS_GITHUB_TIMEOUT,
        )
        response.raise_for_status()
        dados = response.json()

        if 'access_token' not in dados:
            raise GithubError(dados.get('error_description', 'Token não retornado pelo GitHub'))

        return dados

    def _email_principal(self, cliente: GithubClient) -> str:
        """E-mail principal e verificado quando o perfil não é público"""
        try:
            emails = cliente.emails_usuario()
        except GithubError:
            return ''

        for email in emails:
            if email.get('primary') and email.get('verified'):
                return email.get('email', '')
        return ''

    def _criar_ou_atualizar_usuario(self, perfil: Dict, email: str, token_data: Dict) -> Usuario:
        """Busca o usuário pelo github_id e atualiza nome, e-mail e tokens"""
        github_id = str(perfil['id'])
        login_github = perfil.get('login') or f'github_{github_id}'

        dados = {
            'nome': perfil.get('name') or login_github,
            'email': email or '',
            'email_verificado_em': timezone.now(),
            'github_token': token_data['access_token'],
            'github_refresh_token': token_data.get('refresh_token') or '',
        }

        usuario = Usuario.objects.filter(github_id=github_id).first()
        if usuario:
            for campo, valor in dados.items():
                setattr(usuario, campo, valor)
            usuario.save()
            return usuario

        usuario = Usuario(
            username=self._username_disponivel(login_github),
            github_id=github_id,
            **dados
        )
        usuario.set_unusable_password()
        usuario.save()
        logger.info(f"👤 Novo usuário criado via GitHub - {usuario.username}")
        return usuario

    def _username_disponivel(self, base: str) -> str:
        username = base
        sufixo = 1
        while Usuario.objects.filter(username=username).exists():
            sufixo += 1
            username = f'{base}{sufixo}'
        return username


# Instância única do serviço (padrão Singleton simples)
auth_service = AuthenticationService()
