"""Error handling implementation for the JSON to MessagePack converter."""

import logging
from typing import Any, Optional

from .hints import normalize_type_hints
from .types import (
    ConversionError,
    ErrorHandlerInterface,
    ErrorResponse,
    ErrorType,
    TypeTag,
    ValidationError,
    ValidationResult,
)


class ErrorHandler(ErrorHandlerInterface):
    """
    Error handler for converter operations.

    Validates type-hint tables up front and turns conversion failures into
    actionable suggestions for the caller.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            logger: Optional logger instance for error reporting
        """
        self.logger = logger or logging.getLogger(__name__)

    def validate_type_hints(self, type_hints: Any) -> ValidationResult:
        """
        Validate a type-hint table.

        Malformed tables are errors. Unknown tags are only warnings, because
        they fail at conversion time and only if a value actually uses them.

        Args:
            type_hints: Candidate hint table

        Returns:
            ValidationResult with validation details
        """
        errors = []
        warnings = []

        if type_hints is None:
            return ValidationResult(is_valid=True, errors=errors, warnings=warnings)

        try:
            table = normalize_type_hints(type_hints)
        except ValueError as e:
            errors.append(ValidationError(
                type=ErrorType.TYPE_HINT,
                message=str(e),
                location="type_hints"
            ))
            return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

        known = set(TypeTag.names())
        for key, tags in table.items():
            for tag in tags:
                if tag not in known:
                    warnings.append(f"Unknown type hint tag {key}={tag}; values using it will fail")

        if "" in table and len(table[""]) > 1:
            warnings.append("Positional hints only follow the innermost array of nested arrays")

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings
        )

    def handle_conversion_error(self, error: ConversionError) -> ErrorResponse:
        """
        Handle conversion errors and provide recovery suggestions.

        Args:
            error: ConversionError to handle

        Returns:
            ErrorResponse with recovery information
        """
        self.logger.error(f"Conversion error: {error.error_type.value} - {error}")

        if error.error_type == ErrorType.TYPE_HINT:
            return self._handle_type_hint_error(error)
        elif error.error_type == ErrorType.NUMERIC:
            return self._handle_numeric_error(error)
        elif error.error_type == ErrorType.OVERFLOW:
            return self._handle_overflow_error(error)
        elif error.error_type == ErrorType.VALUE_TYPE:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Convert the value to plain JSON types (dict, list, str, "
                               "bytes, int, float, bool, None) before converting."
            )
        elif error.error_type == ErrorType.DEPTH:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Flatten the document; arrays and objects are nested too deeply to convert."
            )
        elif error.error_type == ErrorType.PARSE:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Fix the JSON syntax of the input document."
            )
        elif error.error_type == ErrorType.IO:
            return ErrorResponse(
                can_recover=True,
                suggested_action="Check that the input is readable and the output is writable, then retry."
            )
        else:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Unknown error type. Please check logs and retry."
            )

    def _handle_type_hint_error(self, error: ConversionError) -> ErrorResponse:
        """Handle unknown type tags."""
        tag = error.context.get("tag")
        return ErrorResponse(
            can_recover=True,
            suggested_action=f"Replace the type hint {tag!r} with one of: "
                           f"{', '.join(TypeTag.names())}."
        )

    def _handle_numeric_error(self, error: ConversionError) -> ErrorResponse:
        """Handle numbers with no hint that are not int64 values."""
        key = error.context.get("key")
        if key:
            where = f"key {key!r}"
        else:
            where = 'the positional key "" (unnamed array values)'
        return ErrorResponse(
            can_recover=True,
            suggested_action=f"Supply a type hint for {where}, for example float64, "
                           "or make the value an integer."
        )

    def _handle_overflow_error(self, error: ConversionError) -> ErrorResponse:
        """Handle hinted values that do not fit (strict mode)."""
        key = error.context.get("key")
        tag = error.context.get("tag")
        return ErrorResponse(
            can_recover=True,
            suggested_action=f"Use a wider type hint than {tag!r} for key {key!r}, "
                           "or disable strict mode to allow narrowing."
        )
