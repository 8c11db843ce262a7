"""
Build errors raised by the htmx pipeline.

Everything derives from ``mkdocs.exceptions`` so a failing pass aborts the
MkDocs build with a readable message. The ``exit_code`` attribute (read by
click when the build aborts) classifies the failure:

- 1: content or template errors in a single chapter
- 2: configuration errors, raised before any chapter is processed
- 3: I/O errors while writing artifacts
"""

from mkdocs.exceptions import ConfigurationError, PluginError


class ContentError(PluginError):
    """A chapter could not be turned into output."""

    exit_code = 1


class InvalidFrontmatter(ContentError):
    def __init__(self, path, error):
        self.path = path
        self.error = error
        super().__init__(f"Invalid frontmatter in {path}: {error}")


class TemplateError(ContentError):
    def __init__(self, template: str, path, error):
        self.template = template
        self.path = path
        self.error = error
        super().__init__(f"Template error in {template} while rendering {path}: {error}")


class DuplicatePageError(ContentError):
    """Two chapters map to the same public URL."""

    def __init__(self, url: str, first, second):
        self.url = url
        self.first = first
        self.second = second
        super().__init__(f"URL {url} is produced by both {first} and {second}")


class ConfigError(ConfigurationError):
    exit_code = 2


class OutputError(PluginError):
    exit_code = 3

    def __init__(self, path, error):
        self.path = path
        self.error = error
        super().__init__(f"Failed to write {path}: {error}")
