"""Unit tests for the DLP config builders.

Pure functions: no clients, no network.
"""

import pytest
from google.cloud import dlp_v2

from cloud_snippets.dlp import builders
from cloud_snippets.errors import ConfigurationError


def _only_transformation(config: dlp_v2.DeidentifyConfig):
    transformations = config.info_type_transformations.transformations
    assert len(transformations) == 1
    return transformations[0]


class TestParentPath:
    def test_global_location_by_default(self):
        assert builders.parent_path("my-project") == "projects/my-project/locations/global"

    def test_custom_location(self):
        assert builders.parent_path("p", "us-east1") == "projects/p/locations/us-east1"

    @pytest.mark.parametrize("project_id", ["", "   "])
    def test_empty_project_rejected(self, project_id):
        with pytest.raises(ConfigurationError, match="parent_path"):
            builders.parent_path(project_id)


class TestEnumCoercion:
    def test_likelihood_by_name(self):
        assert builders.likelihood("very_likely") == dlp_v2.Likelihood.VERY_LIKELY

    def test_likelihood_enum_passes_through(self):
        assert builders.likelihood(dlp_v2.Likelihood.UNLIKELY) == dlp_v2.Likelihood.UNLIKELY

    def test_unknown_likelihood_rejected(self):
        with pytest.raises(ConfigurationError, match="likelihood"):
            builders.likelihood("SOMEWHAT")

    def test_short_matching_type_name(self):
        assert builders.matching_type("PARTIAL_MATCH") == dlp_v2.MatchingType.MATCHING_TYPE_PARTIAL_MATCH

    def test_full_matching_type_name(self):
        assert (
            builders.matching_type("MATCHING_TYPE_FULL_MATCH")
            == dlp_v2.MatchingType.MATCHING_TYPE_FULL_MATCH
        )

    def test_unknown_matching_type_rejected(self):
        with pytest.raises(ConfigurationError):
            builders.matching_type("FUZZY_MATCH")

    @pytest.mark.parametrize(
        "symbol, name",
        [
            (">", "GREATER_THAN"),
            (">=", "GREATER_THAN_OR_EQUALS"),
            ("<", "LESS_THAN"),
            ("<=", "LESS_THAN_OR_EQUALS"),
            ("==", "EQUAL_TO"),
            ("!=", "NOT_EQUAL_TO"),
        ],
    )
    def test_operator_symbols(self, symbol, name):
        assert builders.relational_operator(symbol) == dlp_v2.RelationalOperator[name]

    def test_operator_name(self):
        assert builders.relational_operator("less_than") == dlp_v2.RelationalOperator.LESS_THAN


class TestLeaves:
    def test_info_types_deduplicated_in_order(self):
        info_types = builders.build_info_types(["EMAIL_ADDRESS", "PHONE_NUMBER", "EMAIL_ADDRESS"])
        assert [t.name for t in info_types] == ["EMAIL_ADDRESS", "PHONE_NUMBER"]

    @pytest.mark.parametrize("names", [[], [""], ["EMAIL_ADDRESS", " "]])
    def test_empty_info_type_names_rejected(self, names):
        with pytest.raises(ConfigurationError):
            builders.build_info_types(names)

    def test_single_string_rejected(self):
        with pytest.raises(ConfigurationError, match="not a single string"):
            builders.build_info_types("EMAIL_ADDRESS")

    def test_single_string_rejected_by_deidentify_config(self):
        with pytest.raises(ConfigurationError, match="not a single string"):
            builders.build_replace_with_info_type("EMAIL_ADDRESS")

    def test_bool_becomes_boolean_value(self):
        value = builders.build_value(True)
        assert "boolean_value" in value
        assert value.boolean_value is True

    def test_int_becomes_integer_value(self):
        value = builders.build_value(89)
        assert "integer_value" in value
        assert value.integer_value == 89

    def test_float_becomes_float_value(self):
        value = builders.build_value(2.5)
        assert "float_value" in value
        assert value.float_value == 2.5

    def test_str_becomes_string_value(self):
        value = builders.build_value("Jane")
        assert "string_value" in value
        assert value.string_value == "Jane"

    def test_unsupported_literal_rejected(self):
        with pytest.raises(ConfigurationError, match="unsupported literal"):
            builders.build_value(object())

    def test_table_headers_and_rows(self):
        table = builders.build_table(["AGE", "PATIENT"], [[22, "Jane Austen"], [55, "Mark Twain"]])
        assert [h.name for h in table.headers] == ["AGE", "PATIENT"]
        assert len(table.rows) == 2
        assert table.rows[1].values[0].integer_value == 55
        assert table.rows[1].values[1].string_value == "Mark Twain"

    def test_ragged_table_rejected(self):
        with pytest.raises(ConfigurationError, match="row 1"):
            builders.build_table(["AGE", "PATIENT"], [[22, "Jane Austen"], [55]])


class TestPrimitives:
    def test_mask_defaults_to_asterisk_whole_match(self):
        config = builders.character_mask().character_mask_config
        assert config.masking_character == "*"
        assert config.number_to_mask == 0

    def test_mask_partial(self):
        config = builders.character_mask("+", 6).character_mask_config
        assert config.masking_character == "+"
        assert config.number_to_mask == 6

    def test_multi_character_mask_rejected(self):
        with pytest.raises(ConfigurationError, match="single character"):
            builders.character_mask("++")

    def test_negative_number_to_mask_rejected(self):
        with pytest.raises(ConfigurationError, match="number_to_mask"):
            builders.character_mask("*", -1)

    def test_replace_with_info_type_sets_variant(self):
        assert "replace_with_info_type_config" in builders.replace_with_info_type()

    def test_redact_sets_variant(self):
        assert "redact_config" in builders.redact()

    def test_replace_with_value(self):
        primitive = builders.replace_with_value("[email-address]")
        assert primitive.replace_config.new_value.string_value == "[email-address]"

    def test_equal_date_shift_bounds_allowed(self):
        config = builders.date_shift(1, 1).date_shift_config
        assert config.lower_bound_days == 1
        assert config.upper_bound_days == 1

    def test_date_shift_widest_range_allowed(self):
        config = builders.date_shift(-365250, 365250).date_shift_config
        assert config.upper_bound_days == 365250

    def test_inverted_date_shift_rejected(self):
        with pytest.raises(ConfigurationError, match="lower bound"):
            builders.date_shift(2, 1)

    def test_date_shift_beyond_limit_rejected(self):
        with pytest.raises(ConfigurationError, match="365250"):
            builders.date_shift(0, 365251)

    def test_fixed_size_bucketing(self):
        config = builders.fixed_size_bucketing(0, 100, 10).fixed_size_bucketing_config
        assert config.lower_bound.integer_value == 0
        assert config.upper_bound.integer_value == 100
        assert config.bucket_size == 10

    def test_zero_bucket_size_rejected(self):
        with pytest.raises(ConfigurationError, match="bucket_size"):
            builders.fixed_size_bucketing(0, 100, 0)

    def test_range_bucketing(self):
        config = builders.bucketing([(0, 25, "low"), (25, 100, "high")]).bucketing_config
        assert len(config.buckets) == 2
        assert config.buckets[0].min_.integer_value == 0
        assert config.buckets[0].max_.integer_value == 25
        assert config.buckets[1].replacement_value.string_value == "high"


class TestDeidentifyConfigs:
    def test_replace_with_info_type_once_per_type(self):
        config = builders.build_replace_with_info_type(
            ["EMAIL_ADDRESS", "PHONE_NUMBER", "EMAIL_ADDRESS"]
        )
        transformations = config.info_type_transformations.transformations
        assert [[t.name for t in tr.info_types] for tr in transformations] == [
            ["EMAIL_ADDRESS"],
            ["PHONE_NUMBER"],
        ]
        for tr in transformations:
            assert "replace_with_info_type_config" in tr.primitive_transformation

    def test_replace_with_info_type_needs_names(self):
        with pytest.raises(ConfigurationError, match="build_replace_with_info_type"):
            builders.build_replace_with_info_type([])

    def test_mask_config(self):
        transformation = _only_transformation(
            builders.build_mask("+", 6, ["US_SOCIAL_SECURITY_NUMBER"])
        )
        assert transformation.info_types[0].name == "US_SOCIAL_SECURITY_NUMBER"
        mask = transformation.primitive_transformation.character_mask_config
        assert (mask.masking_character, mask.number_to_mask) == ("+", 6)

    def test_mask_without_character_uses_asterisk(self):
        transformation = _only_transformation(builders.build_mask(None, 0, ["US_SOCIAL_SECURITY_NUMBER"]))
        assert transformation.primitive_transformation.character_mask_config.masking_character == "*"

    def test_redact_config(self):
        transformation = _only_transformation(builders.build_redact(["EMAIL_ADDRESS"]))
        assert "redact_config" in transformation.primitive_transformation

    def test_replace_with_value_config(self):
        transformation = _only_transformation(
            builders.build_replace_with_value(["EMAIL_ADDRESS"], "[email-address]")
        )
        assert transformation.primitive_transformation.replace_config.new_value.string_value == "[email-address]"

    def test_date_shift_without_names_applies_to_all_findings(self):
        transformation = _only_transformation(builders.build_date_shift(-1, -1))
        assert len(transformation.info_types) == 0
        assert transformation.primitive_transformation.date_shift_config.lower_bound_days == -1

    def test_record_condition(self):
        condition = builders.build_record_condition("AGE", ">", 89)
        inner = condition.expressions.conditions.conditions[0]
        assert inner.field.name == "AGE"
        assert inner.operator == dlp_v2.RelationalOperator.GREATER_THAN
        assert inner.value.integer_value == 89

    def test_exists_condition_needs_no_value(self):
        condition = builders.build_record_condition("AGE", "EXISTS")
        inner = condition.expressions.conditions.conditions[0]
        assert inner.operator == dlp_v2.RelationalOperator.EXISTS
        assert "value" not in inner

    def test_comparison_without_value_rejected(self):
        with pytest.raises(ConfigurationError, match="GREATER_THAN"):
            builders.build_record_condition("AGE", ">")

    def test_record_suppression(self):
        config = builders.build_record_suppression("AGE", "GREATER_THAN", 89)
        suppression = config.record_transformations.record_suppressions[0]
        inner = suppression.condition.expressions.conditions.conditions[0]
        assert inner.field.name == "AGE"
        assert inner.value.integer_value == 89

    def test_field_transformation_restricted_to_columns(self):
        config = builders.build_field_transformation(["PATIENT", "FACTOID"], ["PERSON_NAME"])
        field_transformation = config.record_transformations.field_transformations[0]
        assert [f.name for f in field_transformation.fields] == ["PATIENT", "FACTOID"]
        inner = field_transformation.info_type_transformations.transformations[0]
        assert inner.info_types[0].name == "PERSON_NAME"
        assert "condition" not in field_transformation

    def test_field_transformation_with_condition(self):
        condition = builders.build_record_condition("AGE", ">", 89)
        config = builders.build_field_transformation(["PATIENT"], ["PERSON_NAME"], condition=condition)
        field_transformation = config.record_transformations.field_transformations[0]
        assert field_transformation.condition.expressions.conditions.conditions[0].field.name == "AGE"

    def test_field_primitive_transformation(self):
        config = builders.build_field_primitive_transformation(
            ["HAPPINESS SCORE"], builders.fixed_size_bucketing(0, 100, 10)
        )
        field_transformation = config.record_transformations.field_transformations[0]
        assert field_transformation.fields[0].name == "HAPPINESS SCORE"
        assert field_transformation.primitive_transformation.fixed_size_bucketing_config.bucket_size == 10

    def test_field_transformation_needs_columns(self):
        with pytest.raises(ConfigurationError, match="field names"):
            builders.build_field_transformation([], ["PERSON_NAME"])


class TestInspectionPieces:
    def test_word_list_custom_info_type(self):
        custom = builders.build_word_list_custom_info_type("CUSTOM_ROOM_ID", ["RM-GREEN", "RM-YELLOW"])
        assert custom.info_type.name == "CUSTOM_ROOM_ID"
        assert list(custom.dictionary.word_list.words) == ["RM-GREEN", "RM-YELLOW"]

    def test_empty_word_list_rejected(self):
        with pytest.raises(ConfigurationError, match="word list"):
            builders.build_word_list_custom_info_type("CUSTOM_ROOM_ID", [])

    def test_regex_custom_info_type_defaults_to_possible(self):
        custom = builders.build_regex_custom_info_type("C_MRN", "[1-9]{3}-[1-9]{1}-[1-9]{5}")
        assert custom.regex.pattern == "[1-9]{3}-[1-9]{1}-[1-9]{5}"
        assert custom.likelihood == dlp_v2.Likelihood.POSSIBLE

    def test_hotword_rule(self):
        rule_set = builders.build_hotword_rule("(?i)(mrn|medical)(?-i)", 10, "VERY_LIKELY", ["C_MRN"])
        assert rule_set.info_types[0].name == "C_MRN"
        hotword = rule_set.rules[0].hotword_rule
        assert hotword.hotword_regex.pattern == "(?i)(mrn|medical)(?-i)"
        assert hotword.proximity.window_before == 10
        assert hotword.likelihood_adjustment.fixed_likelihood == dlp_v2.Likelihood.VERY_LIKELY

    def test_negative_window_rejected(self):
        with pytest.raises(ConfigurationError, match="proximity"):
            builders.build_hotword_rule("patient", -1, "VERY_LIKELY", ["PERSON_NAME"])

    @pytest.mark.parametrize("window", [None, "10", 2.5])
    def test_non_integer_window_rejected(self, window):
        with pytest.raises(ConfigurationError, match="proximity window must be an integer"):
            builders.build_hotword_rule("patient", window, "VERY_LIKELY", ["PERSON_NAME"])

    def test_single_string_word_list_rejected(self):
        with pytest.raises(ConfigurationError, match="not a single string"):
            builders.build_exclusion_rule("TEST", "PARTIAL_MATCH", ["EMAIL_ADDRESS"])

    def test_exclusion_rule(self):
        rule_set = builders.build_exclusion_rule(["TEST"], "PARTIAL_MATCH", ["EMAIL_ADDRESS"])
        exclusion = rule_set.rules[0].exclusion_rule
        assert list(exclusion.dictionary.word_list.words) == ["TEST"]
        assert exclusion.matching_type == dlp_v2.MatchingType.MATCHING_TYPE_PARTIAL_MATCH

    def test_exclusion_regex_rule(self):
        rule_set = builders.build_exclusion_regex_rule(".+@example.com", "FULL_MATCH", ["EMAIL_ADDRESS"])
        exclusion = rule_set.rules[0].exclusion_rule
        assert exclusion.regex.pattern == ".+@example.com"
        assert exclusion.matching_type == dlp_v2.MatchingType.MATCHING_TYPE_FULL_MATCH

    def test_exclude_info_types_rule(self):
        rule_set = builders.build_exclude_info_types_rule(["EMAIL_ADDRESS"], "PARTIAL_MATCH", ["DOMAIN_NAME"])
        assert rule_set.info_types[0].name == "DOMAIN_NAME"
        excluded = rule_set.rules[0].exclusion_rule.exclude_info_types.info_types
        assert [t.name for t in excluded] == ["EMAIL_ADDRESS"]

    def test_inspect_config(self):
        config = builders.build_inspect_config(
            info_type_names=["PHONE_NUMBER"], min_likelihood="POSSIBLE", max_findings=5
        )
        assert [t.name for t in config.info_types] == ["PHONE_NUMBER"]
        assert config.min_likelihood == dlp_v2.Likelihood.POSSIBLE
        assert config.limits.max_findings_per_request == 5
        assert config.include_quote is True

    def test_inspect_config_needs_some_info_type(self):
        with pytest.raises(ConfigurationError, match="build_inspect_config"):
            builders.build_inspect_config()
