# apps/board/__init__.py

"""
Board - Sprints e quadro Kanban do Agilis

Funcionalidades:
- Sprints e quadro Kanban com drag-and-drop
- Backlog do produto e backlog da sprint
- WebSockets para atualizações em tempo real
- Comentários e retrospectivas com votação
"""
