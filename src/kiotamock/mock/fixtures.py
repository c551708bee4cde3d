"""
kiotamock Fixture Files

Declarative expectations loaded from YAML or JSON.

Example file (mocks.yaml):

    expectations:
      - method: GET
        url_template: /api/funds/{fundId}
        path_parameters:
          fundId: abc
        response:
          id: abc
          name: Test Fund
      - method: DELETE
        url_template: /api/funds/{fundId}
        kind: no_content
        error:
          message: Conflict
          status: 409
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..common.errors import ApiError
from ..common.naming import try_get_parameter
from .expectations import KIND_NO_CONTENT, KIND_OBJECT, Expectation
from .predicates import RequestPredicate, and_

YAML_SUFFIXES = ('.yaml', '.yml')


class ExpectationLoader:
    """
    Loader for expectation fixture files.

    Handles the same layouts for YAML and JSON:
    - Format 1: {"expectations": [...]}
    - Format 2: {"mocks": [...]}
    - Format 3: [...]

    Example:
        loader = ExpectationLoader("mocks.yaml")
        for expectation in loader.load():
            adapter.register(expectation)
    """

    def __init__(self, file_path: str):
        """
        Initialize expectation loader.

        Args:
            file_path: Path to a .yaml, .yml or .json fixture file
        """
        self.file_path = Path(file_path)

    def read_entries(self) -> List[Dict[str, Any]]:
        """
        Read raw expectation entries from the file.

        Raises:
            FileNotFoundError: If the fixture file doesn't exist
            ValueError: If the layout is unrecognized
        """
        if not self.file_path.exists():
            raise FileNotFoundError(f"Fixture file not found: {self.file_path}")

        with open(self.file_path, 'r', encoding='utf-8') as f:
            if self.file_path.suffix.lower() in YAML_SUFFIXES:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)

        if isinstance(data, dict):
            if 'expectations' in data:
                entries = data['expectations']
            elif 'mocks' in data:
                entries = data['mocks']
            else:
                raise ValueError(
                    f"Unexpected fixture format in {self.file_path}. "
                    f"Expected dict with 'expectations' or 'mocks' key, "
                    f"or a list of expectations. Found keys: {list(data.keys())}"
                )
        elif isinstance(data, list):
            entries = data
        else:
            raise ValueError(
                f"Unexpected fixture format in {self.file_path}. "
                f"Expected dict or list, got {type(data).__name__}"
            )

        if not isinstance(entries, list):
            raise ValueError(f"Expectations in {self.file_path} must be a list, got {type(entries).__name__}")

        return entries

    def load(self) -> List[Expectation]:
        """Load and convert every entry into an Expectation."""
        return [self.to_expectation(entry, index) for index, entry in enumerate(self.read_entries())]

    def to_expectation(self, entry: Dict[str, Any], index: int = 0) -> Expectation:
        """
        Convert one fixture entry into an Expectation.

        Raises:
            ValueError: If the entry has no url_template
        """
        if not isinstance(entry, dict) or not entry.get('url_template'):
            raise ValueError(f"Expectation #{index} in {self.file_path} needs a 'url_template'")

        error = entry.get('error')
        response = entry.get('response')
        default_kind = KIND_NO_CONTENT if response is None and error is None else KIND_OBJECT

        predicate = and_(
            _parameters_predicate(entry.get('path_parameters'), query=False),
            _parameters_predicate(entry.get('query_parameters'), query=True)
        )

        return Expectation(
            url_template=entry['url_template'],
            method=entry.get('method'),
            kind=entry.get('kind', default_kind),
            response=response,
            error=_to_error(error) if error is not None else None,
            predicate=predicate
        )


def _to_error(error: Any) -> ApiError:
    if isinstance(error, dict):
        return ApiError(
            str(error.get('message', '')),
            response_status_code=error.get('status', error.get('response_status_code'))
        )
    return ApiError(str(error))


def _parameters_predicate(expected: Optional[Dict[str, Any]], query: bool) -> Optional[RequestPredicate]:
    """Build a predicate requiring each logical parameter to equal a value."""
    if not expected:
        return None

    def check(request: Any) -> bool:
        source = request.query_parameters if query else request.path_parameters
        for name, value in expected.items():
            found, actual = try_get_parameter(source, name, query=query)
            if not found or str(actual) != str(value):
                return False
        return True

    label = 'query_parameters' if query else 'path_parameters'
    return RequestPredicate(check, description=f"{label} == {expected}")
