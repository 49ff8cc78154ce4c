#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the docbridge library.

This module defines specialized exception classes for the error conditions
that can occur while building a document tree from structural events and
while lowering it into an output AST.

Exception Hierarchy
-------------------
- DocBridgeError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for a component)

  - ParsingError (event stream to document tree failures)
    - InvalidEncodingError (input bytes are not valid UTF-8)
    - ImageLoadError (image loader callback failed)
    - StructuralInvariantError (nesting shape mismatch)

  - RenderingError (document tree to output failures)
    - ImageSaveError (image saver callback failed)

  - SecurityError (resource access outside the permitted area)

  - DependencyError (missing/incompatible packages)

"""

from typing import Any


class DocBridgeError(Exception):
    """Base exception class for all docbridge-specific errors.

    Catching this will catch every library-specific error.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(DocBridgeError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when an incorrect options class is provided.

    Parameters
    ----------
    converter_name : str
        Name of the component that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        converter_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{converter_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.converter_name = converter_name
        self.expected_type = expected_type
        self.received_type = received_type


class ParsingError(DocBridgeError):
    """Exception raised when building a document tree fails.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class InvalidEncodingError(ParsingError):
    """Exception raised when input bytes cannot be decoded as UTF-8."""

    def __init__(self, message: str | None = None, original_error: Exception | None = None):
        """Initialize the encoding error."""
        if message is None:
            message = "Input is not valid UTF-8"
            if isinstance(original_error, UnicodeDecodeError):
                message += f" (invalid byte at offset {original_error.start})"
        super().__init__(message, parsing_stage="decoding", original_error=original_error)


class ImageLoadError(ParsingError):
    """Exception raised when the image loader fails for a referenced image.

    Parameters
    ----------
    reference : str
        The image reference that was passed to the loader
    message : str, optional
        Custom error message
    original_error : Exception, optional
        The exception raised by the loader

    Attributes
    ----------
    reference : str
        The image reference that could not be loaded

    """

    def __init__(self, reference: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the image load error."""
        if message is None:
            message = f"Failed to load image '{reference}'"
            if original_error is not None:
                message += f": {original_error}"
        super().__init__(message, parsing_stage="image_loading", original_error=original_error)
        self.reference = reference


class StructuralInvariantError(ParsingError):
    """Exception raised when the event stream disagrees with the open tree shape.

    Raised for example when a list end arrives while no list is open, or when
    a list item arrives although the open top-level element is not a list.

    Parameters
    ----------
    message : str
        Description of the mismatch
    depth : int, optional
        The number of open lists when the mismatch was detected

    """

    def __init__(self, message: str, depth: int = 0):
        """Initialize the structural invariant error."""
        super().__init__(message, parsing_stage="tree_building")
        self.depth = depth


class RenderingError(DocBridgeError):
    """Exception raised when lowering or output rendering fails.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    rendering_stage : str, optional
        The stage of rendering where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the rendering failure

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage


class ImageSaveError(RenderingError):
    """Exception raised when the image saver fails to persist an image.

    Parameters
    ----------
    filename : str
        Filename that was passed to the saver
    message : str, optional
        Custom error message
    original_error : Exception, optional
        The exception raised by the saver

    """

    def __init__(self, filename: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the image save error."""
        if message is None:
            message = f"Failed to save image '{filename}'"
            if original_error is not None:
                message += f": {original_error}"
        super().__init__(message, rendering_stage="image_saving", original_error=original_error)
        self.filename = filename


class SecurityError(DocBridgeError):
    """Exception raised when a resource reference escapes its permitted location.

    Parameters
    ----------
    message : str
        Description of the violation
    violation_type : str, optional
        Short identifier of the kind of violation (e.g., "path_traversal")

    """

    def __init__(self, message: str, violation_type: str | None = None, original_error: Exception | None = None):
        """Initialize the security error."""
        super().__init__(message, original_error)
        self.violation_type = violation_type


class DependencyError(DocBridgeError):
    """Exception raised when required dependencies are not available.

    Parameters
    ----------
    converter_name : str
        Name of the component requiring dependencies
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    version_mismatches : list[tuple[str, str, str]], optional
        List of (package_name, required_version, installed_version) tuples
    install_command : str, optional
        Suggested pip install command to resolve the issue
    message : str, optional
        Custom error message. If not provided, generates a helpful message

    """

    def __init__(
        self,
        converter_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        install_command: str = "",
        message: str | None = None,
        original_import_error: ImportError | None = None,
    ):
        """Initialize the dependency error with package details."""
        version_mismatches = version_mismatches or []
        self.original_import_error = original_import_error
        if message is None:
            message_parts = []

            if missing_packages:
                pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
                message_parts.append(f"{converter_name} requires the following packages: {pkg_list}")

            if version_mismatches:
                mismatch_str = ", ".join(
                    f"'{name}' (requires {required}, but {installed} is installed)"
                    for name, required, installed in version_mismatches
                )
                message_parts.append(f"{converter_name} has version mismatches: {mismatch_str}")

            message = "\n".join(message_parts)

            if install_command:
                message += f"\nInstall with: {install_command}"
            else:
                all_packages = missing_packages + [(name, req) for name, req, _ in version_mismatches]
                if all_packages:
                    packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in all_packages)
                    message += f"\nInstall with: pip install --upgrade {packages_str}"

        super().__init__(message, original_error=original_import_error)
        self.converter_name = converter_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches
        self.install_command = install_command
