"""Synchronous content inspection snippets.

Each snippet builds an InspectConfig, sends one InspectContent request,
prints the findings to ``w`` and returns them.
"""

import logging
import os
from typing import Callable, Iterable, List, Optional, Sequence, TextIO

from google.cloud import dlp_v2

from ..errors import ConfigurationError, remote_call
from ..factory import build_dlp_client, open_client
from ..models.entities import DEFAULT_INFO_TYPES, DEFAULT_TABLE_HEADERS, DEFAULT_TABLE_ROWS, Finding
from . import builders
from .reporting import flatten_findings, write_findings

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], dlp_v2.DlpServiceClient]

# Info types inspected by the exclusion snippets.
EXCLUSION_INFO_TYPES = ["EMAIL_ADDRESS", "DOMAIN_NAME", "PHONE_NUMBER", "PERSON_NAME"]


def text_item(text: str) -> dlp_v2.ContentItem:
    """UTF-8 byte content item for ``text``."""
    return dlp_v2.ContentItem(
        byte_item=dlp_v2.ByteContentItem(
            type_=dlp_v2.ByteContentItem.BytesType.TEXT_UTF8,
            data=text.encode("utf-8"),
        )
    )


def _inspect(
    w: TextIO,
    project_id: str,
    inspect_config: dlp_v2.InspectConfig,
    item: dlp_v2.ContentItem,
    client_factory: ClientFactory,
    operation: str,
) -> List[Finding]:
    parent = builders.parent_path(project_id)
    with open_client(client_factory, operation) as client, remote_call("InspectContent"):
        logger.info("%s: sending InspectContent to %s", operation, parent)
        response = client.inspect_content(
            request={"parent": parent, "inspect_config": inspect_config, "item": item}
        )

    findings = flatten_findings(response)
    logger.info("%s: %d findings", operation, len(findings))
    write_findings(w, findings)
    return findings


def inspect_string(
    w: TextIO,
    project_id: str,
    text: str,
    info_type_names: Optional[Iterable[str]] = None,
    min_likelihood=None,
    max_findings: Optional[int] = None,
    excluded_substrings: Optional[Iterable[str]] = None,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> List[Finding]:
    """Inspect ``text`` for built-in info types (a common PII set by default).

    Findings whose quote contains any of ``excluded_substrings`` are dropped
    for every requested info type.
    """
    config = builders.build_inspect_config(
        info_type_names=info_type_names or DEFAULT_INFO_TYPES,
        min_likelihood=min_likelihood,
        max_findings=max_findings,
    )
    if excluded_substrings:
        names = [info_type.name for info_type in config.info_types]
        config.rule_set = [builders.build_exclusion_rule(excluded_substrings, "PARTIAL_MATCH", names)]
    return _inspect(w, project_id, config, text_item(text), client_factory, "inspect_string")


def inspect_phone_number(
    w: TextIO,
    project_id: str,
    text: str,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> List[Finding]:
    """Inspect ``text`` for phone numbers of at least POSSIBLE likelihood."""
    config = builders.build_inspect_config(
        info_type_names=["PHONE_NUMBER"],
        min_likelihood=dlp_v2.Likelihood.POSSIBLE,
    )
    return _inspect(w, project_id, config, text_item(text), client_factory, "inspect_phone_number")


def inspect_table(
    w: TextIO,
    project_id: str,
    headers: Optional[Sequence[str]] = None,
    rows: Optional[Sequence[Sequence]] = None,
    info_type_names: Optional[Iterable[str]] = None,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> List[Finding]:
    """Inspect every cell of a table (the sample patient table by default)."""
    table = builders.build_table(headers or DEFAULT_TABLE_HEADERS, rows or DEFAULT_TABLE_ROWS)
    config = builders.build_inspect_config(info_type_names=info_type_names or DEFAULT_INFO_TYPES)
    item = dlp_v2.ContentItem(table=table)
    return _inspect(w, project_id, config, item, client_factory, "inspect_table")


# Content types DLP accepts, keyed by file extension.
FILE_BYTES_TYPES = {
    ".txt": dlp_v2.ByteContentItem.BytesType.TEXT_UTF8,
    ".csv": dlp_v2.ByteContentItem.BytesType.CSV,
    ".tsv": dlp_v2.ByteContentItem.BytesType.TSV,
    ".png": dlp_v2.ByteContentItem.BytesType.IMAGE_PNG,
    ".jpg": dlp_v2.ByteContentItem.BytesType.IMAGE_JPEG,
    ".jpeg": dlp_v2.ByteContentItem.BytesType.IMAGE_JPEG,
    ".bmp": dlp_v2.ByteContentItem.BytesType.IMAGE_BMP,
    ".svg": dlp_v2.ByteContentItem.BytesType.IMAGE_SVG,
    ".pdf": dlp_v2.ByteContentItem.BytesType.PDF,
    ".docx": dlp_v2.ByteContentItem.BytesType.WORD_DOCUMENT,
    ".xlsx": dlp_v2.ByteContentItem.BytesType.EXCEL_DOCUMENT,
    ".pptx": dlp_v2.ByteContentItem.BytesType.POWERPOINT_DOCUMENT,
}


def file_bytes_type(path: str) -> dlp_v2.ByteContentItem.BytesType:
    """Content type for ``path`` by extension; unknown extensions are read as UTF-8 text."""
    extension = os.path.splitext(path)[1].lower()
    return FILE_BYTES_TYPES.get(extension, dlp_v2.ByteContentItem.BytesType.TEXT_UTF8)


def inspect_file(
    w: TextIO,
    project_id: str,
    path: str,
    info_type_names: Optional[Iterable[str]] = None,
    min_likelihood=None,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> List[Finding]:
    """Inspect the contents of a local file, sent as bytes typed by its extension."""
    operation = "inspect_file"
    if not path or not os.path.isfile(path):
        raise ConfigurationError(operation, f"file not found: {path!r}")

    config = builders.build_inspect_config(
        info_type_names=info_type_names or DEFAULT_INFO_TYPES,
        min_likelihood=min_likelihood,
    )
    with open(path, "rb") as f:
        data = f.read()
    item = dlp_v2.ContentItem(
        byte_item=dlp_v2.ByteContentItem(type_=file_bytes_type(path), data=data)
    )
    logger.info("%s: read %d bytes from %s", operation, len(data), path)
    return _inspect(w, project_id, config, item, client_factory, operation)


def inspect_with_custom_regex(
    w: TextIO,
    project_id: str,
    text: str,
    custom_regex_pattern: str,
    info_type_name: str,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> List[Finding]:
    """Inspect ``text`` with a single regex detector reported as ``info_type_name``."""
    custom = builders.build_regex_custom_info_type(info_type_name, custom_regex_pattern)
    config = builders.build_inspect_config(custom_info_types=[custom])
    return _inspect(w, project_id, config, text_item(text), client_factory, "inspect_with_custom_regex")


def inspect_with_hotword_rules(
    w: TextIO,
    project_id: str,
    text: str,
    custom_regex_pattern: str,
    hotword_regex_pattern: str,
    info_type_name: str,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> List[Finding]:
    """Regex detector whose findings become VERY_LIKELY within 10 characters after a hotword."""
    custom = builders.build_regex_custom_info_type(info_type_name, custom_regex_pattern)
    rule_set = builders.build_hotword_rule(
        hotword_regex_pattern, 10, dlp_v2.Likelihood.VERY_LIKELY, [info_type_name]
    )
    config = builders.build_inspect_config(custom_info_types=[custom], rule_sets=[rule_set])
    return _inspect(w, project_id, config, text_item(text), client_factory, "inspect_with_hotword_rules")


def inspect_string_custom_hotword(
    w: TextIO,
    project_id: str,
    text: str,
    custom_hotword: str,
    info_type_name: str = "PERSON_NAME",
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> List[Finding]:
    """Report only findings preceded by ``custom_hotword`` within 50 characters."""
    rule_set = builders.build_hotword_rule(
        custom_hotword, 50, dlp_v2.Likelihood.VERY_LIKELY, [info_type_name]
    )
    config = builders.build_inspect_config(
        info_type_names=[info_type_name],
        rule_sets=[rule_set],
        min_likelihood=dlp_v2.Likelihood.VERY_LIKELY,
    )
    return _inspect(w, project_id, config, text_item(text), client_factory, "inspect_string_custom_hotword")


def inspect_string_with_exclusion_dict_substring(
    w: TextIO,
    project_id: str,
    text: str,
    excluded_substrings: Iterable[str],
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> List[Finding]:
    """Drop findings whose quote contains any of ``excluded_substrings``."""
    rule_set = builders.build_exclusion_rule(
        excluded_substrings, "PARTIAL_MATCH", EXCLUSION_INFO_TYPES
    )
    config = builders.build_inspect_config(
        info_type_names=EXCLUSION_INFO_TYPES, rule_sets=[rule_set]
    )
    return _inspect(
        w, project_id, config, text_item(text), client_factory,
        "inspect_string_with_exclusion_dict_substring",
    )


def inspect_string_with_exclusion_regex(
    w: TextIO,
    project_id: str,
    text: str,
    exclusion_regex: str,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> List[Finding]:
    """Drop findings that fully match ``exclusion_regex``."""
    rule_set = builders.build_exclusion_regex_rule(
        exclusion_regex, "FULL_MATCH", EXCLUSION_INFO_TYPES
    )
    config = builders.build_inspect_config(
        info_type_names=EXCLUSION_INFO_TYPES, rule_sets=[rule_set]
    )
    return _inspect(
        w, project_id, config, text_item(text), client_factory,
        "inspect_string_with_exclusion_regex",
    )


def inspect_string_custom_excluding_substring(
    w: TextIO,
    project_id: str,
    text: str,
    custom_detector_pattern: str,
    excluded_substrings: Iterable[str],
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> List[Finding]:
    """Custom regex detector with a partial-match word-list exclusion."""
    info_type_name = "CUSTOM_NAME_DETECTOR"
    custom = builders.build_regex_custom_info_type(info_type_name, custom_detector_pattern)
    rule_set = builders.build_exclusion_rule(
        excluded_substrings, "PARTIAL_MATCH", [info_type_name]
    )
    config = builders.build_inspect_config(custom_info_types=[custom], rule_sets=[rule_set])
    return _inspect(
        w, project_id, config, text_item(text), client_factory,
        "inspect_string_custom_excluding_substring",
    )


def inspect_string_without_overlap(
    w: TextIO,
    project_id: str,
    text: str,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> List[Finding]:
    """Report domain names and email addresses, but no domain that is part of an email."""
    rule_set = builders.build_exclude_info_types_rule(
        ["EMAIL_ADDRESS"], "PARTIAL_MATCH", ["DOMAIN_NAME"]
    )
    config = builders.build_inspect_config(
        info_type_names=["DOMAIN_NAME", "EMAIL_ADDRESS"], rule_sets=[rule_set]
    )
    return _inspect(
        w, project_id, config, text_item(text), client_factory,
        "inspect_string_without_overlap",
    )


def combine_rule_sets(
    info_type_names: Iterable[str],
    rule_sets: Iterable[dlp_v2.InspectionRuleSet],
) -> dlp_v2.InspectionRuleSet:
    """Merge the rules of several rule sets under one list of info types."""
    return dlp_v2.InspectionRuleSet(
        info_types=builders.build_info_types(info_type_names, "combine_rule_sets"),
        rules=[rule for rule_set in rule_sets for rule in rule_set.rules],
    )


def inspect_string_multiple_rules(
    w: TextIO,
    project_id: str,
    text: str,
    *,
    client_factory: ClientFactory = build_dlp_client,
) -> List[Finding]:
    """Person names near "patient" are raised, near "doctor" lowered, and known fakes dropped."""
    names = ["PERSON_NAME"]
    rule_set = combine_rule_sets(
        names,
        [
            builders.build_hotword_rule("patient", 10, dlp_v2.Likelihood.VERY_LIKELY, names),
            builders.build_hotword_rule("doctor", 10, dlp_v2.Likelihood.UNLIKELY, names),
            builders.build_exclusion_rule(["Quasimodo"], "PARTIAL_MATCH", names),
            builders.build_exclusion_regex_rule("REDACTED", "PARTIAL_MATCH", names),
        ],
    )
    config = builders.build_inspect_config(info_type_names=names, rule_sets=[rule_set])
    return _inspect(
        w, project_id, config, text_item(text), client_factory,
        "inspect_string_multiple_rules",
    )
