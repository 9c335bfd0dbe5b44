"""Content de-identification snippets.

Text snippets print ``output : <text>`` and return the transformed string.
Table snippets default to the sample patient table, print the transformed
table and return it as a ``dlp_v2.Table``.
"""

import logging
from typing import Callable, Iterable, Optional, Sequence, TextIO

from google.cloud import dlp_v2

from ..errors import remote_call
from ..factory import build_dlp_client, open_client
from ..models.entities import DEFAULT_TABLE_HEADERS, DEFAULT_TABLE_ROWS
from . import builders
from .reporting import write_deidentified_text, write_table

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], dlp_v2.DlpServiceClient]

# Row condition shared by the conditional table snippets: patients older than 89.
AGE_FIELD = "AGE"
AGE_THRESHOLD = 89


def _deidentify(
    project_id: str,
    deidentify_config: dlp_v2.DeidentifyConfig,
    item: dlp_v2.ContentItem,
    inspect_config: Optional[dlp_v2.InspectConfig],
    client_factory: ClientFactory,
    operation: str,
) -> dlp_v2.ContentItem:
    request = {
        "parent": builders.parent_path(project_id),
        "deidentify_config": deidentify_config,
        "item": item,
    }
    if inspect_config is not None:
        request["inspect_config"] = inspect_config

    with open_client(client_factory, operation) as client, remote_call("DeidentifyContent"):
        logger.info("%s: sending DeidentifyContent to %s", operation, request["parent"])
        response = client.deidentify_content(request=request)
    return response.item


def _deidentify_text(
    w: TextIO,
    project_id: str,
    text: str,
    deidentify_config: dlp_v2.DeidentifyConfig,
    inspect_config: Optional[dlp_v2.InspectConfig],
    client_factory: ClientFactory,
    operation: str,
) -> str:
    item = _deidentify(
        project_id, deidentify_config, dlp_v2.ContentItem(value=text),
        inspect_config, client_factory, operation,
    )
    write_deidentified_text(w, item)
    return item.value


def _deidentify_table(
    w: TextIO,
    project_id: str,
    table: dlp_v2.Table,
    deidentify_config: dlp_v2.DeidentifyConfig,
    inspect_config: Optional[dlp_v2.InspectConfig],
    client_factory: ClientFactory,
    operation: str,
) -> dlp_v2.Table:
    item = _deidentify(
        project_id, deidentify_config, dlp_v2.ContentItem(table=table),
        inspect_config, client_factory, operation,
    )
    logger.info("%s: %d rows after de-identification", operation, len(item.table.rows))
    write_table(w, item.table)
    return item.table


def _sample_table(headers: Optional[Sequence[str]], rows: Optional[Sequence[Sequence]]) -> dlp_v2.Table:
    return builders.build_table(headers or DEFAULT_TABLE_HEADERS, rows or DEFAULT_TABLE_ROWS)


def _older_than_threshold() -> dlp_v2.RecordCondition:
    return builders.build_record_condition(AGE_FIELD, "GREATER_THAN", AGE_THRESHOLD)


# ---------------------------------------------------------------------------
# Free text
# ---------------------------------------------------------------------------

def deidentify_with_mask(
    w: TextIO,
    project_id: str,
    text: str,
    info_type_names: Iterable[str] = ("US_SOCIAL_SECURITY_NUMBER",),
    masking_character: Optional[str] = None,
    number_to_mask: int = 0,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> str:
    """Mask matches with ``masking_character`` ("*" when omitted).

    ``number_to_mask`` of 0 masks the whole match; otherwise only the first
    N characters are masked.
    """
    info_type_names = list(info_type_names)
    config = builders.build_mask(masking_character, number_to_mask, info_type_names)
    inspect_config = builders.build_inspect_config(info_type_names=info_type_names)
    return _deidentify_text(w, project_id, text, config, inspect_config, client_factory, "deidentify_with_mask")


def deidentify_with_redact(
    w: TextIO,
    project_id: str,
    text: str,
    info_type_names: Iterable[str],
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> str:
    """Remove matches from the text."""
    info_type_names = list(info_type_names)
    config = builders.build_redact(info_type_names)
    inspect_config = builders.build_inspect_config(info_type_names=info_type_names)
    return _deidentify_text(w, project_id, text, config, inspect_config, client_factory, "deidentify_with_redact")


def deidentify_with_replace_info_type(
    w: TextIO,
    project_id: str,
    text: str,
    info_type_names: Iterable[str],
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> str:
    """Replace matches with ``[INFO_TYPE]``; other info types are left alone."""
    info_type_names = list(info_type_names)
    config = builders.build_replace_with_info_type(info_type_names)
    inspect_config = builders.build_inspect_config(info_type_names=info_type_names)
    return _deidentify_text(
        w, project_id, text, config, inspect_config, client_factory,
        "deidentify_with_replace_info_type",
    )


def deidentify_with_replacement(
    w: TextIO,
    project_id: str,
    text: str,
    info_type_names: Iterable[str],
    replacement: str,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> str:
    """Replace matches with a fixed string."""
    info_type_names = list(info_type_names)
    config = builders.build_replace_with_value(info_type_names, replacement)
    inspect_config = builders.build_inspect_config(info_type_names=info_type_names)
    return _deidentify_text(
        w, project_id, text, config, inspect_config, client_factory,
        "deidentify_with_replacement",
    )


def deidentify_with_word_list(
    w: TextIO,
    project_id: str,
    text: str,
    info_type_name: str,
    word_list: Iterable[str],
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> str:
    """Replace any listed word (case-insensitive) with ``[info_type_name]``."""
    custom = builders.build_word_list_custom_info_type(info_type_name, word_list)
    inspect_config = builders.build_inspect_config(custom_info_types=[custom])
    config = builders.build_replace_with_info_type([info_type_name])
    return _deidentify_text(
        w, project_id, text, config, inspect_config, client_factory,
        "deidentify_with_word_list",
    )


def deidentify_date_shift(
    w: TextIO,
    project_id: str,
    text: str,
    lower_bound_days: int,
    upper_bound_days: int,
    info_type_names: Optional[Iterable[str]] = None,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> str:
    """Shift every detected date by a number of days within the bounds."""
    info_type_names = list(info_type_names or ["DATE"])
    config = builders.build_date_shift(lower_bound_days, upper_bound_days, info_type_names)
    inspect_config = builders.build_inspect_config(info_type_names=info_type_names)
    return _deidentify_text(
        w, project_id, text, config, inspect_config, client_factory,
        "deidentify_date_shift",
    )


def deidentify_exception_list(
    w: TextIO,
    project_id: str,
    text: str,
    exceptions: Iterable[str] = ("jack@example.org", "jill@example.org"),
    info_type_names: Iterable[str] = ("EMAIL_ADDRESS",),
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> str:
    """Replace matches with their info type, except the listed values."""
    info_type_names = list(info_type_names)
    rule_set = builders.build_exclusion_rule(exceptions, "FULL_MATCH", info_type_names)
    inspect_config = builders.build_inspect_config(
        info_type_names=info_type_names, rule_sets=[rule_set]
    )
    config = builders.build_replace_with_info_type(info_type_names)
    return _deidentify_text(
        w, project_id, text, config, inspect_config, client_factory,
        "deidentify_exception_list",
    )


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

def deidentify_table_row_suppress(
    w: TextIO,
    project_id: str,
    headers: Optional[Sequence[str]] = None,
    rows: Optional[Sequence[Sequence]] = None,
    field_name: str = AGE_FIELD,
    operator="GREATER_THAN",
    threshold=AGE_THRESHOLD,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> dlp_v2.Table:
    """Drop every row whose ``field_name`` satisfies the comparison (AGE > 89 by default)."""
    table = _sample_table(headers, rows)
    config = builders.build_record_suppression(field_name, operator, threshold)
    return _deidentify_table(w, project_id, table, config, None, client_factory, "deidentify_table_row_suppress")


def deidentify_table_infotypes(
    w: TextIO,
    project_id: str,
    headers: Optional[Sequence[str]] = None,
    rows: Optional[Sequence[Sequence]] = None,
    column_names: Iterable[str] = ("PATIENT", "FACTOID"),
    info_type_names: Iterable[str] = ("PERSON_NAME",),
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> dlp_v2.Table:
    """Replace info-type findings with their names, only in ``column_names``."""
    table = _sample_table(headers, rows)
    info_type_names = list(info_type_names)
    config = builders.build_field_transformation(column_names, info_type_names)
    inspect_config = builders.build_inspect_config(info_type_names=info_type_names)
    return _deidentify_table(
        w, project_id, table, config, inspect_config, client_factory,
        "deidentify_table_infotypes",
    )


def deidentify_table_bucketing(
    w: TextIO,
    project_id: str,
    headers: Optional[Sequence[str]] = None,
    rows: Optional[Sequence[Sequence]] = None,
    column_name: str = "HAPPINESS SCORE",
    lower_bound: int = 0,
    upper_bound: int = 100,
    bucket_size: float = 10,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> dlp_v2.Table:
    """Generalize a numeric column into fixed-size ranges such as ``70:80``."""
    table = _sample_table(headers, rows)
    primitive = builders.fixed_size_bucketing(lower_bound, upper_bound, bucket_size)
    config = builders.build_field_primitive_transformation([column_name], primitive)
    return _deidentify_table(w, project_id, table, config, None, client_factory, "deidentify_table_bucketing")


def deidentify_table_masking_condition(
    w: TextIO,
    project_id: str,
    headers: Optional[Sequence[str]] = None,
    rows: Optional[Sequence[Sequence]] = None,
    column_name: str = "HAPPINESS SCORE",
    masking_character: Optional[str] = None,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> dlp_v2.Table:
    """Mask ``column_name`` in rows of patients older than 89."""
    table = _sample_table(headers, rows)
    config = builders.build_field_primitive_transformation(
        [column_name],
        builders.character_mask(masking_character),
        condition=_older_than_threshold(),
    )
    return _deidentify_table(
        w, project_id, table, config, None, client_factory,
        "deidentify_table_masking_condition",
    )


def deidentify_table_condition_infotypes(
    w: TextIO,
    project_id: str,
    headers: Optional[Sequence[str]] = None,
    rows: Optional[Sequence[Sequence]] = None,
    column_names: Iterable[str] = ("PATIENT", "FACTOID"),
    info_type_names: Iterable[str] = ("PERSON_NAME",),
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> dlp_v2.Table:
    """Like ``deidentify_table_infotypes`` but only in rows of patients older than 89."""
    table = _sample_table(headers, rows)
    info_type_names = list(info_type_names)
    config = builders.build_field_transformation(
        column_names, info_type_names, condition=_older_than_threshold()
    )
    inspect_config = builders.build_inspect_config(info_type_names=info_type_names)
    return _deidentify_table(
        w, project_id, table, config, inspect_config, client_factory,
        "deidentify_table_condition_infotypes",
    )
