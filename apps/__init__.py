# apps/__init__.py

"""
Agilis - Aplicações Django

Este pacote contém todas as aplicações do sistema:
- core: Models, autenticação, equipes, projetos e permissões
- board: Sprints, backlog, Kanban e WebSockets
"""

__version__ = '0.1.0'
__author__ = 'Equipe Agilis'
