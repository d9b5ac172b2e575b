"""
Canvas kernel test configuration and shared fixtures.

Kernel tests use MemoryStorage and function-scoped event loops.
PostgresStorage tests that need DATABASE_URL are skipped automatically when not set.

The `sample` fixture builds this project:

  ContentView
    vstack
      text  "Hello, World!"
      hstack
        button
        image
    text  "Footer"
  DetailView
    (empty)
"""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from canvas.kernel import tree
from canvas.kernel.properties import create_component, set_property
from canvas.kernel.selection import Selection
from canvas.kernel.types import BUTTON, HSTACK, IMAGE, TEXT, VSTACK, Project, ViewFile


@dataclass
class Sample:
    project: Project
    content: ViewFile
    detail: ViewFile
    vstack_id: str
    text_id: str
    hstack_id: str
    button_id: str
    image_id: str
    footer_id: str


@pytest.fixture
def sample() -> Sample:
    project = Project(name="Sample")
    content = ViewFile(name="ContentView")
    detail = ViewFile(name="DetailView")
    project.view_files.extend([content, detail])

    vstack = create_component(VSTACK)
    text = create_component(TEXT)
    hstack = create_component(HSTACK)
    button = create_component(BUTTON)
    image = create_component(IMAGE)
    footer = create_component(TEXT)
    set_property(footer, "text", '"Footer"')

    tree.insert_root(content, vstack)
    tree.insert_child(content, vstack, text)
    tree.insert_child(content, vstack, hstack)
    tree.insert_child(content, hstack, button)
    tree.insert_child(content, hstack, image)
    tree.insert_root(content, footer)

    return Sample(
        project=project,
        content=content,
        detail=detail,
        vstack_id=vstack.id,
        text_id=text.id,
        hstack_id=hstack.id,
        button_id=button.id,
        image_id=image.id,
        footer_id=footer.id,
    )


@pytest.fixture
def selection(sample) -> Selection:
    s = Selection()
    s.select_project(sample.project.id)
    return s
