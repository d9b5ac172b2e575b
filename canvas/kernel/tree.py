"""
Canvasflow Kernel — Document Tree Engine

Structural mutation primitives over the component forest of one ViewFile.

Storage is pure ownership edges (parent -> children). There is no parent
back-reference, so every location lookup is a pre-order depth-first search
over the file: O(tree size) per operation. Documents are small enough that
this is preferred over keeping an auxiliary parent index in sync.

Every primitive validates before it touches the tree. A raised TreeError
means nothing was changed.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from canvas.kernel.types import CUSTOM_VIEW, Component, Project, ViewFile, Warning, is_container

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class TreeError(Exception):
    """Base class for rejected tree operations."""

    code = "TREE_ERROR"


class StructuralViolation(TreeError):
    """Operation would create a cycle, duplicate a node, or nest under a leaf."""

    code = "STRUCTURAL_VIOLATION"


class ComponentNotFound(TreeError):
    """Identity lookup failed (stale payload, already-deleted node)."""

    code = "NOT_FOUND"


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


@dataclass
class Location:
    """Where a component currently lives."""

    parent: Component | None  # None = file root list
    siblings: list[Component]
    index: int


def walk(components: list[Component]) -> Iterator[Component]:
    """Pre-order traversal: each node before its children, siblings in list order."""
    for component in components:
        yield component
        yield from walk(component.children)


def find_by_id(file: ViewFile, component_id: str) -> Component | None:
    for component in walk(file.components):
        if component.id == component_id:
            return component
    return None


def find_location(file: ViewFile, component_id: str) -> Location | None:
    """Pre-order search for the sibling list holding component_id."""

    def search(parent: Component | None, siblings: list[Component]) -> Location | None:
        for index, component in enumerate(siblings):
            if component.id == component_id:
                return Location(parent=parent, siblings=siblings, index=index)
            found = search(component, component.children)
            if found is not None:
                return found
        return None

    return search(None, file.components)


def contains(root: Component, component_id: str) -> bool:
    """True if component_id is root itself or anywhere beneath it."""
    return any(c.id == component_id for c in walk([root]))


def is_descendant(ancestor: Component, component_id: str) -> bool:
    """True if component_id is strictly beneath ancestor."""
    return any(c.id == component_id for c in walk(ancestor.children))


def locate_in_project(project: Project, component_id: str) -> tuple[ViewFile, Component] | None:
    """Find which file of the project owns component_id."""
    for file in project.view_files:
        component = find_by_id(file, component_id)
        if component is not None:
            return file, component
    return None


def reaches(project: Project, start_file_id: str, goal_file_id: str) -> bool:
    """True if rendering start_file would, through custom views, render goal_file."""
    stack = [start_file_id]
    seen: set[str] = set()
    while stack:
        file_id = stack.pop()
        if file_id == goal_file_id:
            return True
        if file_id in seen:
            continue
        seen.add(file_id)
        file = project.view_file(file_id)
        if file is None:
            continue
        for component in walk(file.components):
            if component.kind == CUSTOM_VIEW and component.referenced_view is not None:
                stack.append(component.referenced_view)
    return False


def check_view_references(project: Project, subtree: Component, file: ViewFile) -> None:
    """Raise if placing subtree in file would make file render itself."""
    for component in walk([subtree]):
        ref = component.referenced_view
        if component.kind == CUSTOM_VIEW and ref is not None and reaches(project, ref, file.id):
            raise StructuralViolation(f"Component '{component.id}' would render '{file.name}' inside itself")


# ---------------------------------------------------------------------------
# Mutation primitives
# ---------------------------------------------------------------------------


def insert_root(file: ViewFile, component: Component, index: int | None = None) -> None:
    """Append (or insert at index) to the file's root list."""
    if find_by_id(file, component.id) is not None:
        raise StructuralViolation(f"Component '{component.id}' is already in '{file.name}'")
    _insert(file.components, component, index)


def insert_child(
    file: ViewFile,
    parent: Component,
    component: Component,
    index: int | None = None,
) -> None:
    """Append (or insert at index) component under parent."""
    if not is_container(parent.kind):
        raise StructuralViolation(f"'{parent.kind}' cannot hold children")
    if contains(component, parent.id):
        raise StructuralViolation(f"Component '{component.id}' would become its own ancestor")
    if find_by_id(file, component.id) is not None:
        raise StructuralViolation(f"Component '{component.id}' is already attached")
    _insert(parent.children, component, index)


def insert_after(file: ViewFile, anchor_id: str, component: Component) -> None:
    """Insert component as the sibling immediately following anchor."""
    location = find_location(file, anchor_id)
    if location is None:
        raise ComponentNotFound(anchor_id)
    if contains(component, anchor_id):
        raise StructuralViolation(f"Component '{component.id}' cannot be placed beside itself")
    if find_by_id(file, component.id) is not None:
        raise StructuralViolation(f"Component '{component.id}' is already attached")
    location.siblings.insert(location.index + 1, component)


def remove(file: ViewFile, component_id: str) -> Component:
    """Detach component_id and return its subtree intact for re-insertion."""
    location = find_location(file, component_id)
    if location is None:
        raise ComponentNotFound(component_id)
    return location.siblings.pop(location.index)


def move_to(
    file: ViewFile,
    component_id: str,
    new_parent_id: str | None,
    index: int | None = None,
) -> Component:
    """
    remove + insert. new_parent_id None means the file root list.
    Self-containment and leaf targets are rejected before detaching.
    """
    component = find_by_id(file, component_id)
    if component is None:
        raise ComponentNotFound(component_id)

    if new_parent_id is None:
        remove(file, component_id)
        _insert(file.components, component, index)
        return component

    parent = find_by_id(file, new_parent_id)
    if parent is None:
        raise ComponentNotFound(new_parent_id)
    if contains(component, new_parent_id):
        raise StructuralViolation(f"Cannot move '{component_id}' into its own subtree")
    if not is_container(parent.kind):
        raise StructuralViolation(f"'{parent.kind}' cannot hold children")

    remove(file, component_id)
    _insert(parent.children, component, index)
    return component


def destroy(file: ViewFile, component_id: str) -> list[str]:
    """Remove component_id and report every identity destroyed with it."""
    subtree = remove(file, component_id)
    return subtree_ids(subtree)


def subtree_ids(component: Component) -> list[str]:
    """Identities of a component and everything it owns, pre-order."""
    ids: list[str] = []
    for node in walk([component]):
        ids.append(node.id)
        ids.extend(p.id for p in node.properties)
        for modifier in node.modifiers:
            ids.append(modifier.id)
            ids.extend(a.id for a in modifier.arguments)
    return ids


# ---------------------------------------------------------------------------
# Integrity
# ---------------------------------------------------------------------------


def check_integrity(project: Project) -> list[Warning]:
    """
    Scan the whole project for invariant breaks.
    Mutation primitives keep these from happening; this catches documents
    loaded from storage that were written by something else.
    """
    warnings: list[Warning] = []
    seen: set[str] = set()
    file_ids = {f.id for f in project.view_files}

    for file in project.view_files:
        for component in walk(file.components):
            if component.id in seen:
                warnings.append(
                    Warning(
                        code="DUPLICATE_IDENTITY",
                        message=f"Component '{component.id}' appears more than once",
                        details={"file": file.id},
                    )
                )
            seen.add(component.id)

            if component.children and not is_container(component.kind):
                warnings.append(
                    Warning(
                        code="LEAF_HAS_CHILDREN",
                        message=f"'{component.kind}' component '{component.id}' holds children",
                    )
                )

            ref = component.referenced_view
            if ref is not None and (component.kind != CUSTOM_VIEW or ref not in file_ids):
                warnings.append(
                    Warning(
                        code="DANGLING_VIEW_REFERENCE",
                        message=f"Component '{component.id}' references missing view '{ref}'",
                    )
                )
            elif ref is not None and reaches(project, ref, file.id):
                warnings.append(
                    Warning(
                        code="VIEW_CYCLE",
                        message=f"Component '{component.id}' renders '{file.name}' inside itself",
                        details={"file": file.id},
                    )
                )

    return warnings


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _insert(siblings: list[Component], component: Component, index: int | None) -> None:
    if index is not None and 0 <= index <= len(siblings):
        siblings.insert(index, component)
    else:
        siblings.append(component)
