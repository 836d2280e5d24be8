"""Project files, the code-generation payload and AI widget parsing.

Example usage:
    >>> from studio.model import Project
    >>> from studio.serialize import dumps_project, loads_project
    >>> project = Project.create()
    >>> loads_project(dumps_project(project)) == project
    True
"""

from .lib import (
    FORMAT_VERSION,
    CodeLanguage,
    ProjectFormatError,
    WidgetParseError,
    default_filename,
    dumps_project,
    export_payload,
    load_project,
    loads_project,
    parse_widget_description,
    project_from_dict,
    project_to_dict,
    save_project,
    strip_fences,
)

__all__ = [
    "FORMAT_VERSION",
    # Errors
    "ProjectFormatError",
    "WidgetParseError",
    "CodeLanguage",
    # Project files
    "project_to_dict",
    "project_from_dict",
    "dumps_project",
    "loads_project",
    "save_project",
    "load_project",
    "default_filename",
    # Code generation payload
    "export_payload",
    # AI widget descriptions
    "strip_fences",
    "parse_widget_description",
]
