"""Turn DLP responses into findings and plain-text reports."""

from typing import Any, List, TextIO, Tuple

from google.cloud import dlp_v2

from ..models.entities import Finding


def flatten_findings(response: dlp_v2.InspectContentResponse) -> List[Finding]:
    """Findings of an InspectContent response, in the order the service returned them."""
    return [
        Finding(
            quote=finding.quote,
            info_type=finding.info_type.name,
            likelihood=dlp_v2.Likelihood(finding.likelihood).name,
        )
        for finding in response.result.findings
    ]


def write_findings(w: TextIO, findings: List[Finding]) -> None:
    print(f"Findings: {len(findings)}", file=w)
    for finding in findings:
        print(f"Quote: {finding.quote}", file=w)
        print(f"Infotype Name: {finding.info_type}", file=w)
        print(f"Likelihood: {finding.likelihood}", file=w)


def write_deidentified_text(w: TextIO, item: dlp_v2.ContentItem) -> None:
    print(f"output : {item.value}", file=w)


def write_table(w: TextIO, table: dlp_v2.Table) -> None:
    print(f"Table after de-identification : {table}", file=w)


def cell_value(value: dlp_v2.Value) -> Any:
    """Python value held by a typed DLP value; dates and times come back as text."""
    kind = dlp_v2.Value.pb(value).WhichOneof("type")
    if kind is None:
        return None
    if kind in ("boolean_value", "integer_value", "float_value", "string_value"):
        return getattr(value, kind)
    return str(getattr(value, kind)).strip()


def table_rows(table: dlp_v2.Table) -> Tuple[List[str], List[List[Any]]]:
    """Plain ``(headers, rows)`` view of a DLP table."""
    headers = [header.name for header in table.headers]
    rows = [[cell_value(value) for value in row.values] for row in table.rows]
    return headers, rows
