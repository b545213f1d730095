"""Report rendering for lookup results.

Converts LookupResult objects into text, JSON and YAML documents for the
command line and for callers that persist results.
"""

import json

import yaml

from rbllookup.models.lookup_result import LookupResult


FORMATS = ("text", "json", "yaml")


class ResultReporter:
    """Generates formatted reports from lookup results."""

    @staticmethod
    def generate_text_report(result: LookupResult) -> str:
        """Generate one line per finding.

        Example:
            >>> print(ResultReporter.generate_text_report(result))
            b.barracudacentral.org smtp.gmail.com
              64.233.171.108 listed=False listed_address= text= error=False error_type=None
        """
        header = f"{result.list} {result.host}"
        if result.error:
            header += f" error={type(result.error_type).__name__}: {result.error_type}"

        lines = [header]
        for finding in result.results:
            fields = finding.to_dict()
            address = fields.pop("address")
            lines.append(
                f"  {address} " + " ".join(f"{k}={v}" for k, v in fields.items())
            )
        return "\n".join(lines)

    @staticmethod
    def generate_json_report(result: LookupResult) -> str:
        """Generate pretty-printed JSON with sorted keys for determinism."""
        return json.dumps(result.to_dict(), indent=2, sort_keys=True)

    @staticmethod
    def generate_yaml_report(result: LookupResult) -> str:
        """Generate YAML, keeping field order of the result model."""
        return yaml.safe_dump(
            result.to_dict(), default_flow_style=False, sort_keys=False
        )

    @classmethod
    def render(cls, result: LookupResult, fmt: str = "text") -> str:
        """Render a result in one of FORMATS.

        Raises:
            ValueError: If fmt is not a known format.
        """
        if fmt == "text":
            return cls.generate_text_report(result)
        elif fmt == "json":
            return cls.generate_json_report(result)
        elif fmt == "yaml":
            return cls.generate_yaml_report(result)
        raise ValueError(f"Unknown report format: {fmt}")
