"""Run configuration.

IoblateConfig bundles everything a load or save run needs to know about
the project it operates on. The CLI builds one from its flags; library
users can construct it directly.

Python 3.13+.
"""

import codecs
from dataclasses import dataclass, field
from pathlib import Path

from ioblate.constants import (
    DEFAULT_I18N_DIR,
    DEFAULT_LEGACY_ENCODING,
    DICTIONARY_IDENTIFIERS,
    EXCLUDED_DIRS,
    INDENT_WIDTH,
    MARKUP_PATTERNS,
    SCRIPT_PATTERNS,
)
from ioblate.diagnostics import ErrorTemplate, MissingTargetFileError, OutputFormat

__all__ = ["IoblateConfig"]


@dataclass(frozen=True, slots=True)
class IoblateConfig:
    """Immutable settings for one command run.

    Attributes:
        root: Project root; source paths in datasets are relative to it
        i18n_dir: Dataset directory, relative to root unless absolute
        identifiers: Variable names that hold a translation dictionary
        indent: Indent width of written JSON and literals
        legacy_encoding: Codec for files detected as ISO-8859/Windows code pages
        script_patterns: File name patterns parsed as JavaScript
        markup_patterns: File name patterns parsed as HTML
        excluded_dirs: Directory names skipped during discovery
        output_format: How diagnostics are rendered in log output

    Example:
        >>> config = IoblateConfig(root=Path("/srv/adapter"))
        >>> config.dataset_dir
        PosixPath('/srv/adapter/i18n')
    """

    root: Path = field(default_factory=Path.cwd)
    i18n_dir: Path = Path(DEFAULT_I18N_DIR)
    identifiers: tuple[str, ...] = DICTIONARY_IDENTIFIERS
    indent: int = INDENT_WIDTH
    legacy_encoding: str = DEFAULT_LEGACY_ENCODING
    script_patterns: tuple[str, ...] = SCRIPT_PATTERNS
    markup_patterns: tuple[str, ...] = MARKUP_PATTERNS
    excluded_dirs: frozenset[str] = EXCLUDED_DIRS
    output_format: OutputFormat = OutputFormat.RUST

    def __post_init__(self) -> None:
        """Validate settings."""
        if not self.identifiers:
            msg = "At least one dictionary identifier is required"
            raise ValueError(msg)
        for name in self.identifiers:
            if not name.replace("$", "_").isidentifier():
                msg = f"Not a valid JavaScript identifier: {name!r}"
                raise ValueError(msg)
        if self.indent < 0:
            msg = f"indent must be >= 0, got {self.indent}"
            raise ValueError(msg)
        try:
            codecs.lookup(self.legacy_encoding)
        except LookupError as e:
            msg = f"Unknown legacy encoding: {self.legacy_encoding!r}"
            raise ValueError(msg) from e

    @property
    def dataset_dir(self) -> Path:
        """Absolute-or-root-relative dataset directory."""
        return self.root / self.i18n_dir

    def relative_name(self, path: Path) -> str:
        """POSIX path of path relative to root, as stored in qualified keys."""
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()

    def resolve(self, relative_name: str) -> Path:
        """Path of a source file named in a qualified key.

        Raises:
            MissingTargetFileError: If the name points outside root
        """
        path = self.root / relative_name
        try:
            path.resolve().relative_to(self.root.resolve())
        except ValueError as e:
            raise MissingTargetFileError(ErrorTemplate.target_outside_root(relative_name)) from e
        return path
