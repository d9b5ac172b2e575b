"""
Canvasflow Kernel — the visual editor engine.

Core pieces:
  tree        — rooted forest of components per view file (insert, remove, move, find)
  relocation  — drag/drop placement policy (container / leaf / root zone)
  editor      — (project, selection, command) → MutationResult, mutates in place
  projector   — component tree → visual description (pure, deterministic)
  session     — coordinates editor + selection + storage under one lock

Presentation helpers:
  render_page, render_node
"""

from canvas.kernel.editor import apply
from canvas.kernel.commands import make_command, validate_command
from canvas.kernel.projector import project_component, project_view_file
from canvas.kernel.renderer import render_node, render_page
from canvas.kernel.selection import Selection
from canvas.kernel.session import EditorSession
from canvas.kernel.storage import DocumentStorage, MemoryStorage

__all__ = [
    "apply",
    "make_command",
    "validate_command",
    "project_component",
    "project_view_file",
    "render_page",
    "render_node",
    "Selection",
    "EditorSession",
    "DocumentStorage",
    "MemoryStorage",
]
