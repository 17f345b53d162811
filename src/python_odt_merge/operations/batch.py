"""
BatchOperations class for applying injections described as data.

Injections are dictionaries, typically loaded from a YAML or JSON file, so
a template can be filled in without writing Python.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from ..errors import ValidationError
from ..results import InjectionResult

if TYPE_CHECKING:
    from ..document import OpenDocumentText


class BatchOperations:
    """Handles batch injections.

    Supported injection types:
    - inject_var: {"name": ..., "value": ...}
    - inject_vars: {"vars": {name: value, ...}}
    - inner_xml: {"first": {"node": ..., "attributes": {...}}, "inner": ..., "last": {...}}
    - replace_table: {"name": ..., "rows": [[...]], "columns": "A-C", "header_rows": 1}

    Example:
        >>> doc = OpenDocumentText("letter.odt")
        >>> results = doc.apply_injections([
        ...     {"type": "inject_var", "name": "recipient", "value": "Jane Doe"},
        ...     {"type": "replace_table", "name": "Items", "rows": [["A", "1"]]},
        ... ])
    """

    def __init__(self, document: OpenDocumentText) -> None:
        """Initialize BatchOperations with a document reference.

        Args:
            document: The OpenDocumentText instance to operate on
        """
        self._document = document

    def apply_injections(
        self, injections: list[dict[str, Any]], stop_on_error: bool = False
    ) -> list[InjectionResult]:
        """Apply multiple injections in sequence.

        Each injection re-scans the content, so later entries see the
        result of earlier ones.

        Args:
            injections: List of injection dictionaries, each with a "type" key
            stop_on_error: If True, stop processing on the first failure

        Returns:
            List of InjectionResult objects, one per processed injection
        """
        results = []

        for i, injection in enumerate(injections):
            injection_type = injection.get("type") if isinstance(injection, Mapping) else None
            if not injection_type:
                results.append(
                    InjectionResult(
                        success=False,
                        injection_type="unknown",
                        message=f"Injection {i}: Missing 'type' field",
                        error=ValidationError("Missing 'type' field"),
                    )
                )
                if stop_on_error:
                    break
                continue

            try:
                result = self._apply_single_injection(injection_type, injection)
            except Exception as e:
                result = InjectionResult(
                    success=False,
                    injection_type=injection_type,
                    message=f"Error: {e}",
                    error=e,
                )
            results.append(result)

            if not result.success and stop_on_error:
                break

        return results

    def _apply_single_injection(
        self, injection_type: str, injection: dict[str, Any]
    ) -> InjectionResult:
        handlers = {
            "inject_var": self._handle_inject_var,
            "inject_vars": self._handle_inject_vars,
            "inner_xml": self._handle_inner_xml,
            "replace_table": self._handle_replace_table,
        }

        handler = handlers.get(injection_type)
        if handler is None:
            return InjectionResult(
                success=False,
                injection_type=injection_type,
                message=f"Unknown injection type: {injection_type}",
                error=ValidationError(f"Unknown injection type: {injection_type}"),
            )
        return handler(injection)

    def _handle_inject_var(self, injection: dict[str, Any]) -> InjectionResult:
        name = injection["name"]
        count = self._document.inject_var(name, str(injection["value"]))
        if not count:
            message = f"Variable '{name}' not found"
        else:
            message = f"Set '{name}' in {count} element(s)"
        return InjectionResult(success=count > 0, injection_type="inject_var", message=message)

    def _handle_inject_vars(self, injection: dict[str, Any]) -> InjectionResult:
        raw_vars = injection["vars"]
        if not isinstance(raw_vars, Mapping):
            raise ValidationError(
                f"'vars' must be a mapping of names to values, got {type(raw_vars).__name__}"
            )
        variables = {str(k): str(v) for k, v in raw_vars.items()}
        count = self._document.inject_vars(variables)
        return InjectionResult(
            success=count > 0,
            injection_type="inject_vars",
            message=f"Set {len(variables)} variable(s) in {count} element(s)",
        )

    def _handle_inner_xml(self, injection: dict[str, Any]) -> InjectionResult:
        found = self._document.inner_xml(
            injection["first"], injection["inner"], last=injection.get("last")
        )
        return InjectionResult(
            success=found,
            injection_type="inner_xml",
            message="Replaced markup" if found else f"Node not found: {injection['first']}",
        )

    def _handle_replace_table(self, injection: dict[str, Any]) -> InjectionResult:
        name = injection["name"]
        found = self._document.replace_table(
            name,
            [[str(cell) for cell in row] for row in injection["rows"]],
            columns=injection.get("columns"),
            header_rows=int(injection.get("header_rows", 0)),
        )
        return InjectionResult(
            success=found,
            injection_type="replace_table",
            message=f"Replaced table '{name}'" if found else f"Table '{name}' not found",
        )

    def apply_injection_file(
        self, file_path: str | Path, stop_on_error: bool = False
    ) -> list[InjectionResult]:
        """Apply injections from a YAML or JSON file.

        The file holds either a list of injections or a mapping with an
        "injections" list. A plain mapping without that key is read as
        variables to inject.

        Raises:
            ValidationError: If the file cannot be read or has the wrong shape
        """
        file_path = Path(file_path)
        try:
            text = file_path.read_text(encoding="utf-8")
            if file_path.suffix.lower() == ".json":
                data = json.loads(text)
            else:
                data = yaml.safe_load(text)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise ValidationError(f"Failed to read injection file {file_path}: {e}") from e

        if isinstance(data, dict):
            if "injections" in data:
                data = data["injections"]
            else:
                data = [{"type": "inject_vars", "vars": data}]
        if not isinstance(data, list):
            raise ValidationError(
                f"Injection file {file_path} must contain a list or a mapping"
            )

        return self.apply_injections(data, stop_on_error)
