"""Validation of Kubernetes resources against their JSON schemas.

Each document runs through decode, normalize, ``kind``/``apiVersion``
extraction, schema lookup and schema validation. A document that breaks
at any step fails on its own; its siblings are still validated and the
failures are returned together as one ``ValidationErrors`` value.

Usage:
    async with create_http_session(settings.network) as session:
        validator = ResourceValidator(
            settings, create_schema_fetcher(settings, session)
        )
        report = await validator.validate(data, "deployment.yaml")
"""

from __future__ import annotations

import asyncio
from typing import Any

from jsonschema import Draft7Validator, FormatChecker, validators
from jsonschema import exceptions as jsonschema_exceptions
from referencing.exceptions import Unresolvable

from kubeschema.config.settings import Settings
from kubeschema.constants import KUBERNETES_FORMATS
from kubeschema.exceptions import (
    DecodeError,
    KubeschemaError,
    MissingFieldError,
    SchemaError,
    ValidationErrors,
)
from kubeschema.locator import schema_url
from kubeschema.logger import get_logger
from kubeschema.normalize import (
    decode_document,
    is_empty_resource,
    stringify_keys,
)
from kubeschema.schema import (
    SchemaDocument,
    SchemaFetcher,
    create_http_session,
    create_schema_fetcher,
)
from kubeschema.splitter import split_documents
from kubeschema.types import (
    Document,
    ValidationReport,
    ValidationResult,
    Violation,
)

logger = get_logger(__name__)


def _build_format_checker() -> FormatChecker:
    """Return a format checker accepting the Kubernetes-specific formats."""
    checker = FormatChecker()
    for name in KUBERNETES_FORMATS:
        checker.checks(name)(lambda _instance: True)
    return checker


FORMAT_CHECKER = _build_format_checker()


def get_string_field(resource: dict[str, Any], field: str, target: str) -> str:
    """Extract a required string field from a resource.

    Args:
        resource: Normalized resource mapping
        field: Field name, ``"kind"`` or ``"apiVersion"``
        target: File name used in error messages

    Returns:
        Field value

    Raises:
        MissingFieldError: If the key is absent, null or not a string

    """
    if field not in resource:
        raise MissingFieldError(field, target=target)
    value = resource[field]
    if value is None:
        raise MissingFieldError(
            field, target=target, message=f"Missing {field} value"
        )
    if not isinstance(value, str):
        raise MissingFieldError(
            field,
            target=target,
            message=(
                f"Expected {field} to be a string, "
                f"got {type(value).__name__}"
            ),
        )
    return value


def format_violation(error: jsonschema_exceptions.ValidationError) -> Violation:
    """Turn a jsonschema error into a user-facing violation.

    Args:
        error: Validation error from jsonschema

    Returns:
        Violation with a dotted path and a readable message

    """
    path = (
        ".".join(str(p) for p in error.absolute_path)
        if error.absolute_path
        else "root"
    )

    message = error.message
    if error.validator == "required":
        missing = (
            error.message.split("'")[1] if "'" in error.message else "unknown"
        )
        message = f"Missing required field: '{missing}'"
    elif error.validator == "additionalProperties":
        message = f"Unknown field. {error.message}"
    elif error.validator == "enum":
        message = f"Invalid value. {error.message}"
    elif error.validator == "type":
        expected_type = error.validator_value
        actual = type(error.instance).__name__
        message = f"Expected type '{expected_type}', got '{actual}'"

    return Violation(path=path, message=message, validator=str(error.validator))


def check_resource(
    resource: dict[str, Any], schema: SchemaDocument, url: str
) -> tuple[Violation, ...]:
    """Validate a resource against a schema.

    Args:
        resource: Normalized resource mapping
        schema: Schema document
        url: Schema URL, used in error messages

    Returns:
        Violations ordered by path, empty when the resource is valid

    Raises:
        SchemaError: If the schema itself is malformed

    """
    try:
        validator_cls = validators.validator_for(
            schema, default=Draft7Validator
        )
        validator_cls.check_schema(schema)
        validator = validator_cls(schema, format_checker=FORMAT_CHECKER)
        errors = list(validator.iter_errors(resource))
    except jsonschema_exceptions.SchemaError as e:
        msg = f"Malformed schema: {e.message}"
        raise SchemaError(msg, url=url) from e
    except Unresolvable as e:
        msg = f"Unresolvable reference in schema: {e}"
        raise SchemaError(msg, url=url) from e
    except (jsonschema_exceptions.UnknownType, TypeError, ValueError) as e:
        msg = f"Malformed schema: {e}"
        raise SchemaError(msg, url=url) from e

    errors.sort(key=lambda error: (error.json_path, error.message))
    return tuple(format_violation(error) for error in errors)


class ResourceValidator:
    """Validates documents against schemas from one schema location."""

    def __init__(self, settings: Settings, fetcher: SchemaFetcher) -> None:
        """Initialize the validator.

        Args:
            settings: Runtime settings
            fetcher: Schema loading capability

        """
        self.settings = settings
        self.fetcher = fetcher
        self.base_url = settings.resolve_base_url()
        self.kubernetes_version = settings.resolve_kubernetes_version()

    def schema_url(self, kind: str, api_version: str) -> str:
        """Return the schema URL for a resource."""
        return schema_url(
            kind,
            api_version,
            kubernetes_version=self.kubernetes_version,
            base_url=self.base_url,
        )

    async def check_document(
        self, document: Document
    ) -> tuple[ValidationResult, KubeschemaError | None]:
        """Run one document through the pipeline, never raising.

        The result holds whatever was extracted before a failure: the
        file name always, ``kind`` once it was read, ``apiVersion`` once
        both were read.

        Args:
            document: Document to validate

        Returns:
            Tuple of (result, error or None)

        """
        file_name = document.file_name
        if document.is_blank:
            return ValidationResult(file_name=file_name), None

        try:
            resource = stringify_keys(decode_document(document))
        except DecodeError as e:
            return ValidationResult(file_name=file_name, complete=False), e

        if is_empty_resource(resource):
            logger.debug("Empty document in %s", file_name)
            return ValidationResult(file_name=file_name), None

        try:
            kind = get_string_field(resource, "kind", file_name)
        except MissingFieldError as e:
            return ValidationResult(file_name=file_name, complete=False), e

        try:
            api_version = get_string_field(resource, "apiVersion", file_name)
        except MissingFieldError as e:
            partial = ValidationResult(
                file_name=file_name, kind=kind, complete=False
            )
            return partial, e

        url = self.schema_url(kind, api_version)
        logger.debug("Validating %s %s against %s", kind, api_version, url)
        try:
            schema = await self.fetcher.fetch(url)
            violations = check_resource(resource, schema, url)
        except SchemaError as e:
            if e.target is None:
                e.target = file_name
            partial = ValidationResult(
                file_name=file_name,
                kind=kind,
                api_version=api_version,
                complete=False,
            )
            return partial, e

        return (
            ValidationResult(
                file_name=file_name,
                kind=kind,
                api_version=api_version,
                errors=violations,
            ),
            None,
        )

    async def validate_resource(self, document: Document) -> ValidationResult:
        """Validate a single document.

        Args:
            document: Document to validate

        Returns:
            Result with empty ``kind`` for empty documents, otherwise the
            resource's kind, apiVersion and violations

        Raises:
            DecodeError: If the document is not well-formed YAML
            MissingFieldError: If kind or apiVersion cannot be extracted
            SchemaError: If the schema cannot be loaded or applied

        """
        result, error = await self.check_document(document)
        if error is not None:
            raise error
        return result

    async def validate_documents(
        self, documents: list[Document]
    ) -> ValidationReport:
        """Validate documents, keeping results in input order.

        Args:
            documents: Documents to validate

        Returns:
            One result per document plus every per-document failure

        """
        semaphore = asyncio.Semaphore(max(1, self.settings.max_concurrency))

        async def run(document: Document) -> tuple[
            ValidationResult, KubeschemaError | None
        ]:
            async with semaphore:
                return await self.check_document(document)

        outcomes = await asyncio.gather(*(run(doc) for doc in documents))

        errors = ValidationErrors()
        results: list[ValidationResult] = []
        for result, error in outcomes:
            results.append(result)
            if error is not None:
                logger.debug("Document failed: %s", error)
                errors.append(error)

        return ValidationReport(results=results, error=errors.error_or_none())

    async def validate(self, data: bytes, file_name: str) -> ValidationReport:
        """Split a multi-document buffer and validate every document.

        Args:
            data: Raw manifest bytes
            file_name: Name of the file the bytes came from

        Returns:
            Report with one result per document

        """
        return await self.validate_documents(split_documents(data, file_name))


async def validate_async(
    data: bytes,
    file_name: str,
    settings: Settings | None = None,
    fetcher: SchemaFetcher | None = None,
) -> ValidationReport:
    """Validate a manifest buffer, creating a fetcher when none is given."""
    settings = settings or Settings()
    if fetcher is not None:
        return await ResourceValidator(settings, fetcher).validate(
            data, file_name
        )

    async with create_http_session(
        settings.network, settings.max_concurrency
    ) as session:
        validator = ResourceValidator(
            settings, create_schema_fetcher(settings, session)
        )
        return await validator.validate(data, file_name)


def validate(
    data: bytes,
    file_name: str,
    settings: Settings | None = None,
    fetcher: SchemaFetcher | None = None,
) -> ValidationReport:
    """Validate a manifest buffer (synchronous convenience function).

    Args:
        data: Raw manifest bytes
        file_name: Name reported in results
        settings: Runtime settings, defaults to built-in settings
        fetcher: Schema loading capability, defaults to HTTP with cache

    Returns:
        Report with one result per document

    """
    return asyncio.run(validate_async(data, file_name, settings, fetcher))
