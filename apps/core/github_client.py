# apps/core/github_client.py

"""
Cliente da API REST do GitHub
Usado na sincronização de repositórios e na listagem de issues/PRs
"""

import logging
from typing import Any, Dict, List, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class GithubError(Exception):
    """Erro retornado pela API do GitHub"""

    def __init__(self, mensagem: str, status_code: Optional[int] = None):
        super().__init__(mensagem)
        self.status_code = status_code


class GithubClient:
    """Cliente HTTP da API do GitHub"""

    def __init__(self, token: Optional[str] = None, base_url: Optional[str] = None):
        self.base_url = (base_url or settings.AGILIS_GITHUB_API_URL).rstrip('/')
        self.timeout = settings.AGILIS_GITHUB_TIMEOUT
        self.session = requests.Session()
        self.session.headers.update({
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'Agilis/1.0',
        })
        if token:
            self.session.headers['Authorization'] = f'token {token}'

    def _make_request(self, method: str, endpoint: str, **kwargs) -> Any:
        """Faz a requisição e converte erros HTTP em GithubError"""
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"❌ Falha de conexão com o GitHub: {e}")
            raise GithubError(f'Falha de conexão com o GitHub: {e}') from e

        if response.status_code >= 400:
            logger.warning(f"⚠️ GitHub respondeu {response.status_code} para {endpoint}")
            raise GithubError(
                f'GitHub respondeu com status {response.status_code}',
                status_code=response.status_code,
            )

        return response.json() if response.content else {}

    def obter_repositorio(self, repositorio: str) -> Dict[str, Any]:
        """Informações básicas do repositório "dono/repo" """
        return self._make_request('GET', f'/repos/{repositorio}')

    def listar_issues(self, repositorio: str, estado: str = 'open') -> List[Dict[str, Any]]:
        """
        Issues do repositório
        A API de issues também devolve PRs, que são descartados aqui
        """
        itens = self._make_request(
            'GET', f'/repos/{repositorio}/issues',
            params={'state': estado, 'per_page': 100},
        )
        return [item for item in itens if 'pull_request' not in item]

    def listar_pull_requests(self, repositorio: str, estado: str = 'open') -> List[Dict[str, Any]]:
        return self._make_request(
            'GET', f'/repos/{repositorio}/pulls',
            params={'state': estado, 'per_page': 100},
        )

    def usuario_autenticado(self) -> Dict[str, Any]:
        return self._make_request('GET', '/user')

    def emails_usuario(self) -> List[Dict[str, Any]]:
        return self._make_request('GET', '/user/emails')


def resumo_repositorio(dados: Dict[str, Any]) -> Dict[str, Any]:
    """Campos do repositório guardados na sincronização"""
    return {
        'name': dados.get('name'),
        'description': dados.get('description'),
        'stars': dados.get('stargazers_count', 0),
        'forks': dados.get('forks_count', 0),
        'language': dados.get('language'),
        'url': dados.get('html_url'),
    }


def resumo_item(item: Dict[str, Any], tipo: str) -> Dict[str, Any]:
    """Formato usado na listagem de issues e pull requests"""
    return {
        'number': item.get('number'),
        'title': item.get('title'),
        'state': item.get('state'),
        'type': tipo,
        'url': item.get('html_url'),
    }
