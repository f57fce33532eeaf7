# apps/core/__init__.py

"""
Core - Aplicação principal do Agilis

Contém:
- Models (Usuario, Equipe, Projeto, Sprint, Tarefa, etc)
- Sistema de permissões por papel na equipe
- Login via GitHub e sincronização de repositórios
- Equipes, projetos, documentos, mensagens e atividades
"""
