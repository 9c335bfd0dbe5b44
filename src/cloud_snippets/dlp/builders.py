"""Factory functions that turn caller parameters into DLP configuration trees.

Every function returns a fully populated ``google.cloud.dlp_v2`` message.
The library's oneof fields carry the tagged unions (detection source,
transformation kind, exclusion source), so setting one variant is enough to
describe a node. Validation happens here, before any client exists, and
failures raise ``ConfigurationError`` annotated with the builder name.
"""

from typing import Iterable, List, Optional, Sequence, Tuple, Union

from google.cloud import dlp_v2

from ..errors import ConfigurationError

DEFAULT_LOCATION = "global"
DEFAULT_MASKING_CHARACTER = "*"
# DLP accepts date shifts of at most 100 years in either direction.
MAX_DATE_SHIFT_DAYS = 365250

Literal = Union[bool, int, float, str]

_OPERATOR_SYMBOLS = {
    "==": "EQUAL_TO",
    "!=": "NOT_EQUAL_TO",
    ">": "GREATER_THAN",
    "<": "LESS_THAN",
    ">=": "GREATER_THAN_OR_EQUALS",
    "<=": "LESS_THAN_OR_EQUALS",
}


def _require(value, field: str, operation: str) -> None:
    if isinstance(value, str):
        if not value.strip():
            raise ConfigurationError(operation, f"{field} must not be empty")
    elif not value:
        raise ConfigurationError(operation, f"{field} must not be empty")


def _coerce_enum(enum_cls, value, field: str, operation: str):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls[value.strip().upper()]
        except KeyError:
            pass
    elif isinstance(value, int) and not isinstance(value, bool):
        try:
            return enum_cls(value)
        except ValueError:
            pass
    valid = ", ".join(member.name for member in enum_cls)
    raise ConfigurationError(operation, f"invalid {field} {value!r}; expected one of: {valid}")


def likelihood(value, operation: str = "likelihood") -> dlp_v2.Likelihood:
    """Coerce a likelihood name (``"POSSIBLE"``) or enum value."""
    return _coerce_enum(dlp_v2.Likelihood, value, "likelihood", operation)


def matching_type(value, operation: str = "matching_type") -> dlp_v2.MatchingType:
    """Coerce a matching type; ``"PARTIAL_MATCH"`` is accepted for the full name."""
    if isinstance(value, str) and not value.strip().upper().startswith("MATCHING_TYPE_"):
        value = f"MATCHING_TYPE_{value.strip()}"
    return _coerce_enum(dlp_v2.MatchingType, value, "matching type", operation)


def relational_operator(value, operation: str = "relational_operator") -> dlp_v2.RelationalOperator:
    """Coerce an operator name (``"GREATER_THAN"``) or symbol (``">"``)."""
    if isinstance(value, str):
        value = _OPERATOR_SYMBOLS.get(value.strip(), value)
    return _coerce_enum(dlp_v2.RelationalOperator, value, "relational operator", operation)


def parent_path(project_id: str, location: str = DEFAULT_LOCATION) -> str:
    """Resource parent for DLP requests."""
    _require(project_id, "project_id", "parent_path")
    _require(location, "location", "parent_path")
    return f"projects/{project_id}/locations/{location}"


# ---------------------------------------------------------------------------
# Leaves: info types, values, tables
# ---------------------------------------------------------------------------

def build_info_type(name: str, operation: str = "build_info_type") -> dlp_v2.InfoType:
    _require(name, "info type name", operation)
    return dlp_v2.InfoType(name=name.strip())


def build_info_types(names: Iterable[str], operation: str = "build_info_types") -> List[dlp_v2.InfoType]:
    """Build InfoTypes for ``names``, dropping duplicates while keeping order."""
    if isinstance(names, str):
        raise ConfigurationError(operation, "info type names must be a list of names, not a single string")
    seen = set()
    info_types = []
    for name in names:
        info_type = build_info_type(name, operation)
        if info_type.name in seen:
            continue
        seen.add(info_type.name)
        info_types.append(info_type)
    _require(info_types, "info type names", operation)
    return info_types


def build_value(literal: Literal, operation: str = "build_value") -> dlp_v2.Value:
    """Wrap a Python literal in the matching typed DLP value."""
    if isinstance(literal, dlp_v2.Value):
        return literal
    # bool first: it is also an int.
    if isinstance(literal, bool):
        return dlp_v2.Value(boolean_value=literal)
    if isinstance(literal, int):
        return dlp_v2.Value(integer_value=literal)
    if isinstance(literal, float):
        return dlp_v2.Value(float_value=literal)
    if isinstance(literal, str):
        return dlp_v2.Value(string_value=literal)
    raise ConfigurationError(operation, f"unsupported literal type {type(literal).__name__}")


def _field_ids(field_names: Iterable[str], operation: str) -> List[dlp_v2.FieldId]:
    fields = []
    for name in field_names:
        _require(name, "field name", operation)
        fields.append(dlp_v2.FieldId(name=name))
    _require(fields, "field names", operation)
    return fields


def build_table(headers: Sequence[str], rows: Sequence[Sequence[Literal]]) -> dlp_v2.Table:
    """Build a DLP table; every row must have one value per header."""
    operation = "build_table"
    header_ids = _field_ids(headers, operation)
    table_rows = []
    for index, row in enumerate(rows):
        if len(row) != len(header_ids):
            raise ConfigurationError(
                operation,
                f"row {index} has {len(row)} values, expected {len(header_ids)}",
            )
        table_rows.append(
            dlp_v2.Table.Row(values=[build_value(cell, operation) for cell in row])
        )
    return dlp_v2.Table(headers=header_ids, rows=table_rows)


# ---------------------------------------------------------------------------
# Custom info types and inspection rules
# ---------------------------------------------------------------------------

def _word_list(words: Iterable[str], operation: str) -> dlp_v2.CustomInfoType.Dictionary:
    if isinstance(words, str):
        raise ConfigurationError(operation, "word list must be a list of words, not a single string")
    words = [w for w in words if w and w.strip()]
    _require(words, "word list", operation)
    return dlp_v2.CustomInfoType.Dictionary(
        word_list=dlp_v2.CustomInfoType.Dictionary.WordList(words=words)
    )


def build_word_list_custom_info_type(info_type_name: str, words: Iterable[str]) -> dlp_v2.CustomInfoType:
    """Dictionary detector: case-insensitive match of whole listed words."""
    operation = "build_word_list_custom_info_type"
    return dlp_v2.CustomInfoType(
        info_type=build_info_type(info_type_name, operation),
        dictionary=_word_list(words, operation),
    )


def build_regex_custom_info_type(
    info_type_name: str,
    pattern: str,
    likelihood_value="POSSIBLE",
) -> dlp_v2.CustomInfoType:
    """Regex detector. Patterns use RE2 syntax and are validated by the service."""
    operation = "build_regex_custom_info_type"
    _require(pattern, "regex pattern", operation)
    return dlp_v2.CustomInfoType(
        info_type=build_info_type(info_type_name, operation),
        regex=dlp_v2.CustomInfoType.Regex(pattern=pattern),
        likelihood=likelihood(likelihood_value, operation),
    )


def build_hotword_rule(
    regex_pattern: str,
    proximity_window_before: int,
    fixed_likelihood,
    info_type_names: Iterable[str],
) -> dlp_v2.InspectionRuleSet:
    """Override a finding's likelihood when the hotword occurs shortly before it."""
    operation = "build_hotword_rule"
    _require(regex_pattern, "hotword pattern", operation)
    if not isinstance(proximity_window_before, int) or isinstance(proximity_window_before, bool):
        raise ConfigurationError(operation, "proximity window must be an integer")
    if proximity_window_before < 0:
        raise ConfigurationError(operation, "proximity window must not be negative")

    hotword_rule = dlp_v2.CustomInfoType.DetectionRule.HotwordRule(
        hotword_regex=dlp_v2.CustomInfoType.Regex(pattern=regex_pattern),
        proximity=dlp_v2.CustomInfoType.DetectionRule.Proximity(
            window_before=proximity_window_before
        ),
        likelihood_adjustment=dlp_v2.CustomInfoType.DetectionRule.LikelihoodAdjustment(
            fixed_likelihood=likelihood(fixed_likelihood, operation)
        ),
    )
    return dlp_v2.InspectionRuleSet(
        info_types=build_info_types(info_type_names, operation),
        rules=[dlp_v2.InspectionRule(hotword_rule=hotword_rule)],
    )


def _exclusion_rule_set(
    rule: dlp_v2.ExclusionRule,
    info_type_names: Iterable[str],
    operation: str,
) -> dlp_v2.InspectionRuleSet:
    return dlp_v2.InspectionRuleSet(
        info_types=build_info_types(info_type_names, operation),
        rules=[dlp_v2.InspectionRule(exclusion_rule=rule)],
    )


def build_exclusion_rule(
    excluded_terms: Iterable[str],
    matching_type_value,
    info_type_names: Iterable[str],
) -> dlp_v2.InspectionRuleSet:
    """Drop findings that overlap a listed term.

    With PARTIAL_MATCH a finding is discarded when its quote contains any of
    the terms; FULL_MATCH requires the whole quote to be a listed term.
    """
    operation = "build_exclusion_rule"
    rule = dlp_v2.ExclusionRule(
        dictionary=_word_list(excluded_terms, operation),
        matching_type=matching_type(matching_type_value, operation),
    )
    return _exclusion_rule_set(rule, info_type_names, operation)


def build_exclusion_regex_rule(
    pattern: str,
    matching_type_value,
    info_type_names: Iterable[str],
) -> dlp_v2.InspectionRuleSet:
    """Drop findings that match ``pattern``."""
    operation = "build_exclusion_regex_rule"
    _require(pattern, "regex pattern", operation)
    rule = dlp_v2.ExclusionRule(
        regex=dlp_v2.CustomInfoType.Regex(pattern=pattern),
        matching_type=matching_type(matching_type_value, operation),
    )
    return _exclusion_rule_set(rule, info_type_names, operation)


def build_exclude_info_types_rule(
    excluded_info_type_names: Iterable[str],
    matching_type_value,
    info_type_names: Iterable[str],
) -> dlp_v2.InspectionRuleSet:
    """Drop findings of ``info_type_names`` that overlap findings of the excluded types."""
    operation = "build_exclude_info_types_rule"
    rule = dlp_v2.ExclusionRule(
        exclude_info_types=dlp_v2.ExcludeInfoTypes(
            info_types=build_info_types(excluded_info_type_names, operation)
        ),
        matching_type=matching_type(matching_type_value, operation),
    )
    return _exclusion_rule_set(rule, info_type_names, operation)


def build_inspect_config(
    info_type_names: Optional[Iterable[str]] = None,
    custom_info_types: Optional[Sequence[dlp_v2.CustomInfoType]] = None,
    rule_sets: Optional[Sequence[dlp_v2.InspectionRuleSet]] = None,
    min_likelihood=None,
    max_findings: Optional[int] = None,
    include_quote: bool = True,
) -> dlp_v2.InspectConfig:
    """Assemble an InspectConfig. At least one built-in or custom info type is required."""
    operation = "build_inspect_config"
    if not info_type_names and not custom_info_types:
        raise ConfigurationError(operation, "no info types or custom info types given")

    config = dlp_v2.InspectConfig(include_quote=include_quote)
    if info_type_names:
        config.info_types = build_info_types(info_type_names, operation)
    if custom_info_types:
        config.custom_info_types = list(custom_info_types)
    if rule_sets:
        config.rule_set = list(rule_sets)
    if min_likelihood is not None:
        config.min_likelihood = likelihood(min_likelihood, operation)
    if max_findings is not None:
        if max_findings < 0:
            raise ConfigurationError(operation, "max_findings must not be negative")
        config.limits = dlp_v2.InspectConfig.FindingLimits(max_findings_per_request=max_findings)
    return config


# ---------------------------------------------------------------------------
# Primitive transformations
# ---------------------------------------------------------------------------

def replace_with_info_type() -> dlp_v2.PrimitiveTransformation:
    """Replace a match with ``[INFO_TYPE_NAME]``."""
    return dlp_v2.PrimitiveTransformation(
        replace_with_info_type_config=dlp_v2.ReplaceWithInfoTypeConfig()
    )


def replace_with_value(new_value: str) -> dlp_v2.PrimitiveTransformation:
    _require(new_value, "replacement value", "replace_with_value")
    return dlp_v2.PrimitiveTransformation(
        replace_config=dlp_v2.ReplaceValueConfig(new_value=dlp_v2.Value(string_value=new_value))
    )


def redact() -> dlp_v2.PrimitiveTransformation:
    """Remove the match entirely."""
    return dlp_v2.PrimitiveTransformation(redact_config=dlp_v2.RedactConfig())


def character_mask(
    masking_character: Optional[str] = None,
    number_to_mask: int = 0,
) -> dlp_v2.PrimitiveTransformation:
    """Mask the first ``number_to_mask`` characters, or the whole match when 0."""
    operation = "character_mask"
    masking_character = masking_character or DEFAULT_MASKING_CHARACTER
    if len(masking_character) != 1:
        raise ConfigurationError(operation, "masking character must be a single character")
    if number_to_mask < 0:
        raise ConfigurationError(operation, "number_to_mask must not be negative")
    return dlp_v2.PrimitiveTransformation(
        character_mask_config=dlp_v2.CharacterMaskConfig(
            masking_character=masking_character,
            number_to_mask=number_to_mask,
        )
    )


def date_shift(lower_bound_days: int, upper_bound_days: int) -> dlp_v2.PrimitiveTransformation:
    """Shift dates by a pseudorandom number of days in the inclusive range."""
    operation = "date_shift"
    if lower_bound_days > upper_bound_days:
        raise ConfigurationError(operation, "lower bound must not exceed upper bound")
    for bound in (lower_bound_days, upper_bound_days):
        if abs(bound) > MAX_DATE_SHIFT_DAYS:
            raise ConfigurationError(operation, f"bounds must be within ±{MAX_DATE_SHIFT_DAYS} days")
    return dlp_v2.PrimitiveTransformation(
        date_shift_config=dlp_v2.DateShiftConfig(
            lower_bound_days=lower_bound_days,
            upper_bound_days=upper_bound_days,
        )
    )


def fixed_size_bucketing(lower_bound: Literal, upper_bound: Literal, bucket_size: float) -> dlp_v2.PrimitiveTransformation:
    """Generalize numbers into ``lo:hi`` buckets of equal width."""
    operation = "fixed_size_bucketing"
    if bucket_size <= 0:
        raise ConfigurationError(operation, "bucket_size must be positive")
    return dlp_v2.PrimitiveTransformation(
        fixed_size_bucketing_config=dlp_v2.FixedSizeBucketingConfig(
            lower_bound=build_value(lower_bound, operation),
            upper_bound=build_value(upper_bound, operation),
            bucket_size=bucket_size,
        )
    )


def bucketing(buckets: Sequence[Tuple[Literal, Literal, str]]) -> dlp_v2.PrimitiveTransformation:
    """Replace values in ``[min, max)`` with the bucket's replacement text."""
    operation = "bucketing"
    _require(buckets, "buckets", operation)
    return dlp_v2.PrimitiveTransformation(
        bucketing_config=dlp_v2.BucketingConfig(
            buckets=[
                dlp_v2.BucketingConfig.Bucket(
                    min_=build_value(low, operation),
                    max_=build_value(high, operation),
                    replacement_value=build_value(replacement, operation),
                )
                for low, high, replacement in buckets
            ]
        )
    )


# ---------------------------------------------------------------------------
# De-identification configs
# ---------------------------------------------------------------------------

def _info_type_deidentify_config(
    info_type_names: Optional[Iterable[str]],
    primitive: dlp_v2.PrimitiveTransformation,
    operation: str,
) -> dlp_v2.DeidentifyConfig:
    # One transformation per info type; with no names the primitive applies to every finding.
    if info_type_names is None:
        transformations = [
            dlp_v2.InfoTypeTransformations.InfoTypeTransformation(primitive_transformation=primitive)
        ]
    else:
        transformations = [
            dlp_v2.InfoTypeTransformations.InfoTypeTransformation(
                info_types=[info_type],
                primitive_transformation=primitive,
            )
            for info_type in build_info_types(info_type_names, operation)
        ]
    return dlp_v2.DeidentifyConfig(
        info_type_transformations=dlp_v2.InfoTypeTransformations(transformations=transformations)
    )


def build_replace_with_info_type(info_type_names: Iterable[str]) -> dlp_v2.DeidentifyConfig:
    return _info_type_deidentify_config(info_type_names, replace_with_info_type(), "build_replace_with_info_type")


def build_replace_with_value(info_type_names: Iterable[str], new_value: str) -> dlp_v2.DeidentifyConfig:
    return _info_type_deidentify_config(info_type_names, replace_with_value(new_value), "build_replace_with_value")


def build_redact(info_type_names: Iterable[str]) -> dlp_v2.DeidentifyConfig:
    return _info_type_deidentify_config(info_type_names, redact(), "build_redact")


def build_mask(
    masking_character: Optional[str],
    number_to_mask: int,
    info_type_names: Iterable[str],
) -> dlp_v2.DeidentifyConfig:
    return _info_type_deidentify_config(
        info_type_names, character_mask(masking_character, number_to_mask), "build_mask"
    )


def build_date_shift(
    lower_bound_days: int,
    upper_bound_days: int,
    info_type_names: Optional[Iterable[str]] = None,
) -> dlp_v2.DeidentifyConfig:
    """Date shift; equal bounds make the shift deterministic."""
    return _info_type_deidentify_config(
        info_type_names, date_shift(lower_bound_days, upper_bound_days), "build_date_shift"
    )


def build_record_condition(
    field_name: str,
    operator,
    value: Optional[Literal] = None,
) -> dlp_v2.RecordCondition:
    """A single ``field <operator> literal`` comparison."""
    operation = "build_record_condition"
    _require(field_name, "field name", operation)
    op = relational_operator(operator, operation)
    condition = dlp_v2.RecordCondition.Condition(field=dlp_v2.FieldId(name=field_name), operator=op)
    if value is not None:
        condition.value = build_value(value, operation)
    elif op != dlp_v2.RelationalOperator.EXISTS:
        raise ConfigurationError(operation, f"{op.name} needs a value to compare against")
    return dlp_v2.RecordCondition(
        expressions=dlp_v2.RecordCondition.Expressions(
            conditions=dlp_v2.RecordCondition.Conditions(conditions=[condition])
        )
    )


def build_record_suppression(field_name: str, operator, threshold_value: Literal) -> dlp_v2.DeidentifyConfig:
    """Drop every row whose ``field_name`` satisfies the comparison."""
    condition = build_record_condition(field_name, operator, threshold_value)
    return dlp_v2.DeidentifyConfig(
        record_transformations=dlp_v2.RecordTransformations(
            record_suppressions=[dlp_v2.RecordSuppression(condition=condition)]
        )
    )


def _record_config(field_transformation: dlp_v2.FieldTransformation) -> dlp_v2.DeidentifyConfig:
    return dlp_v2.DeidentifyConfig(
        record_transformations=dlp_v2.RecordTransformations(
            field_transformations=[field_transformation]
        )
    )


def build_field_transformation(
    field_names: Iterable[str],
    info_type_names: Iterable[str],
    condition: Optional[dlp_v2.RecordCondition] = None,
) -> dlp_v2.DeidentifyConfig:
    """Replace info-type findings with their names, only inside ``field_names``."""
    operation = "build_field_transformation"
    transformations = dlp_v2.InfoTypeTransformations(
        transformations=[
            dlp_v2.InfoTypeTransformations.InfoTypeTransformation(
                info_types=build_info_types(info_type_names, operation),
                primitive_transformation=replace_with_info_type(),
            )
        ]
    )
    field_transformation = dlp_v2.FieldTransformation(
        fields=_field_ids(field_names, operation),
        info_type_transformations=transformations,
    )
    if condition is not None:
        field_transformation.condition = condition
    return _record_config(field_transformation)


def build_field_primitive_transformation(
    field_names: Iterable[str],
    primitive: dlp_v2.PrimitiveTransformation,
    condition: Optional[dlp_v2.RecordCondition] = None,
) -> dlp_v2.DeidentifyConfig:
    """Apply ``primitive`` to whole cells of ``field_names``."""
    field_transformation = dlp_v2.FieldTransformation(
        fields=_field_ids(field_names, "build_field_primitive_transformation"),
        primitive_transformation=primitive,
    )
    if condition is not None:
        field_transformation.condition = condition
    return _record_config(field_transformation)
