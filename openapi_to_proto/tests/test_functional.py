"""
Functional tests driven by the cases in test_data/functional.

Each case holds the component schemas of a document and either snippets the
proto3/Go output must contain or the error the conversion must fail with.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from openapi_to_proto import ConversionError, ConvertOptions, convert


def load_all_test_cases():
    """Load all test cases from all JSON files in test_data/functional directory."""
    functional_dir = Path(__file__).parent / "test_data" / "functional"
    test_cases = []

    for json_file in sorted(functional_dir.glob("*_tests.json")):
        with open(json_file) as f:
            data = json.load(f)

        for test_case in data:
            test_case["_source_file"] = json_file.name
            test_cases.append(test_case)

    return test_cases


def _document(schemas: dict) -> str:
    return json.dumps(
        {
            "openapi": "3.0.3",
            "info": {"title": "functional", "version": "1.0.0"},
            "paths": {},
            "components": {"schemas": schemas},
        }
    )


@pytest.mark.parametrize("test_case", load_all_test_cases(), ids=lambda case: case["name"])
def test_functional_conversion(test_case):
    options = ConvertOptions(package_name="api.v1", package_path="github.com/example/api/v1")
    document = _document(test_case["schemas"])

    if "expected_error" in test_case:
        with pytest.raises(ConversionError) as exc_info:
            convert(document, options)
        assert str(exc_info.value) == test_case["expected_error"]
        return

    result = convert(document, options)
    for snippet in test_case.get("expected_proto", []):
        assert snippet in result.protobuf, f"{test_case['name']}: missing proto snippet {snippet!r}"
    for snippet in test_case.get("expected_go", []):
        assert snippet in result.golang, f"{test_case['name']}: missing Go snippet {snippet!r}"
    for name, expected in test_case.get("expected_type_map", {}).items():
        assert result.type_map[name].to_dict() == expected


if __name__ == "__main__":
    pytest.main([__file__])
