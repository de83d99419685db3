"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan

__all__ = ["ErrorTemplate"]


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This keeps every message testable and documents all error cases in one
    place.
    """

    # ------------------------------------------------------------------
    # Command line
    # ------------------------------------------------------------------

    @staticmethod
    def command_missing() -> Diagnostic:
        """No command given on the command line."""
        return Diagnostic(
            code=DiagnosticCode.COMMAND_MISSING,
            message='Please provide either "load" or "save" command',
            hint="Usage: ioblate load|save",
        )

    @staticmethod
    def command_unknown(command: str) -> Diagnostic:
        """Command is neither load nor save.

        Args:
            command: The value given on the command line
        """
        msg = f"Unknown command '{command}'"
        return Diagnostic(
            code=DiagnosticCode.COMMAND_UNKNOWN,
            message=msg,
            hint='Please provide either "load" or "save" command',
        )

    # ------------------------------------------------------------------
    # File system
    # ------------------------------------------------------------------

    @staticmethod
    def file_read_failed(path: str, reason: str) -> Diagnostic:
        """File could not be opened or read.

        Args:
            path: File that failed
            reason: Underlying OS error text
        """
        msg = f"Couldn't read file {path}: {reason}"
        return Diagnostic(
            code=DiagnosticCode.FILE_READ_FAILED,
            message=msg,
            file_path=path,
        )

    @staticmethod
    def file_decode_failed(path: str, encoding: str, reason: str) -> Diagnostic:
        """File bytes could not be decoded with the detected encoding.

        Args:
            path: File that failed
            encoding: Codec that was tried
            reason: Decoder error text
        """
        msg = f"Couldn't decode file {path} as {encoding}: {reason}"
        return Diagnostic(
            code=DiagnosticCode.FILE_DECODE_FAILED,
            message=msg,
            file_path=path,
            hint="Convert the file to UTF-8 or pass --legacy-encoding",
        )

    @staticmethod
    def file_write_failed(path: str, reason: str) -> Diagnostic:
        """File could not be written.

        Args:
            path: File that failed
            reason: Underlying OS error text
        """
        msg = f"Couldn't update file {path}: {reason}"
        return Diagnostic(
            code=DiagnosticCode.FILE_WRITE_FAILED,
            message=msg,
            file_path=path,
        )

    @staticmethod
    def target_file_missing(path: str) -> Diagnostic:
        """Persisted translations reference a source file that is gone.

        Args:
            path: Source file named in the qualified keys
        """
        msg = f"Couldn't find {path}, ignoring it"
        return Diagnostic(
            code=DiagnosticCode.TARGET_FILE_MISSING,
            message=msg,
            file_path=path,
            hint="Run 'ioblate load' to prune translations of removed files",
            severity="warning",
        )

    @staticmethod
    def target_outside_root(path: str) -> Diagnostic:
        """A qualified key names a file outside the project root."""
        msg = f"{path} is outside the project root, ignoring it"
        return Diagnostic(
            code=DiagnosticCode.TARGET_FILE_MISSING,
            message=msg,
            file_path=path,
            hint="Dataset keys must name files below the project root",
            severity="warning",
        )

    @staticmethod
    def unsupported_file_type(path: str) -> Diagnostic:
        """Save target is neither a script nor a markup file.

        Args:
            path: Offending file
        """
        msg = f"Unsupported file extension in: {path}"
        return Diagnostic(
            code=DiagnosticCode.UNSUPPORTED_FILE_TYPE,
            message=msg,
            file_path=path,
            hint="Only .js, .htm and .html files carry dictionary literals",
        )

    # ------------------------------------------------------------------
    # Syntax
    # ------------------------------------------------------------------

    @staticmethod
    def script_parse_failed(
        reason: str, span: SourceSpan | None = None, path: str | None = None
    ) -> Diagnostic:
        """JavaScript text could not be parsed.

        Args:
            reason: Parser error description
            span: Error position, when the parser reported one
            path: File being parsed
        """
        msg = f"Couldn't parse script: {reason}"
        return Diagnostic(
            code=DiagnosticCode.SCRIPT_PARSE_FAILED,
            message=msg,
            span=span,
            file_path=path,
        )

    @staticmethod
    def markup_parse_failed(reason: str, path: str | None = None) -> Diagnostic:
        """HTML document could not be parsed."""
        msg = f"Couldn't parse markup: {reason}"
        return Diagnostic(
            code=DiagnosticCode.MARKUP_PARSE_FAILED,
            message=msg,
            file_path=path,
        )

    @staticmethod
    def dataset_parse_failed(path: str, reason: str, span: SourceSpan | None = None) -> Diagnostic:
        """Persisted dataset is not valid JSON.

        Args:
            path: Dataset file
            reason: JSON decoder message
            span: Error position
        """
        msg = f"Couldn't parse dataset {path}: {reason}"
        return Diagnostic(
            code=DiagnosticCode.DATASET_PARSE_FAILED,
            message=msg,
            span=span,
            file_path=path,
            hint="Fix the JSON by hand; the file is left untouched until then",
        )

    @staticmethod
    def dataset_not_mapping(path: str, type_name: str) -> Diagnostic:
        """Persisted dataset is valid JSON but not an object."""
        msg = f"Dataset {path} must contain a JSON object, got {type_name}"
        return Diagnostic(
            code=DiagnosticCode.DATASET_NOT_MAPPING,
            message=msg,
            file_path=path,
        )

    @staticmethod
    def source_too_large(size: int, limit: int) -> Diagnostic:
        """Source exceeds the configured size limit."""
        msg = f"Source size ({size:,} characters) exceeds maximum ({limit:,} characters)"
        return Diagnostic(
            code=DiagnosticCode.SOURCE_TOO_LARGE,
            message=msg,
        )

    # ------------------------------------------------------------------
    # Literal evaluation
    # ------------------------------------------------------------------

    @staticmethod
    def literal_invalid(reason: str, span: SourceSpan | None = None) -> Diagnostic:
        """Literal text is malformed.

        Args:
            reason: What the evaluator expected
            span: Position of the failure within the evaluated text
        """
        msg = f"Couldn't parse expression: {reason}"
        return Diagnostic(
            code=DiagnosticCode.LITERAL_INVALID,
            message=msg,
            span=span,
        )

    @staticmethod
    def literal_unsupported(construct: str, span: SourceSpan | None = None) -> Diagnostic:
        """Literal uses syntax that needs runtime evaluation.

        Args:
            construct: Description of the rejected construct
            span: Position of the construct
        """
        msg = f"Unsupported value in literal: {construct}"
        return Diagnostic(
            code=DiagnosticCode.LITERAL_UNSUPPORTED,
            message=msg,
            span=span,
            hint=(
                "Only plain object, array, string, number, boolean and null "
                "values can be extracted"
            ),
        )

    @staticmethod
    def literal_depth_exceeded(max_depth: int) -> Diagnostic:
        """Literal nests deeper than the evaluator allows."""
        msg = f"Maximum literal nesting depth ({max_depth}) exceeded"
        return Diagnostic(
            code=DiagnosticCode.LITERAL_DEPTH_EXCEEDED,
            message=msg,
        )

    # ------------------------------------------------------------------
    # Splice
    # ------------------------------------------------------------------

    @staticmethod
    def splice_overlap(first: tuple[int, int], second: tuple[int, int]) -> Diagnostic:
        """Two replacement spans in one file overlap."""
        msg = (
            f"Replacement spans overlap: [{first[0]}, {first[1]}) "
            f"and [{second[0]}, {second[1]})"
        )
        return Diagnostic(
            code=DiagnosticCode.SPLICE_OVERLAP,
            message=msg,
        )

    @staticmethod
    def splice_out_of_range(span: tuple[int, int], length: int) -> Diagnostic:
        """Replacement span lies outside the text."""
        msg = f"Replacement span [{span[0]}, {span[1]}) outside text of length {length}"
        return Diagnostic(
            code=DiagnosticCode.SPLICE_OUT_OF_RANGE,
            message=msg,
        )

    # ------------------------------------------------------------------
    # Dataset warnings
    # ------------------------------------------------------------------

    @staticmethod
    def locale_invalid(locale: str, reason: str) -> Diagnostic:
        """Locale code cannot be used as a dataset name.

        Args:
            locale: Offending locale code (repr-safe)
            reason: Why it was rejected
        """
        msg = f"Invalid locale code {locale!r}: {reason}"
        return Diagnostic(
            code=DiagnosticCode.LOCALE_INVALID,
            message=msg,
            severity="warning",
        )

    @staticmethod
    def entry_not_mapping(key: str, type_name: str) -> Diagnostic:
        """Dictionary entry does not map locales to translations.

        Args:
            key: Local key of the entry
            type_name: Python type name of the value found
        """
        msg = f"Entry {key!r} must be an object of locale translations, got {type_name}"
        return Diagnostic(
            code=DiagnosticCode.ENTRY_NOT_MAPPING,
            message=msg,
            severity="warning",
        )
