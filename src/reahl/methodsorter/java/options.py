import os

from reahl.methodsorter.java.documents import DomainException
from reahl.methodsorter.java.sorting import SortingOptions


DEFAULT_SORTING_OPTIONS = {
    'sorting_strategy': 'depth-first',
    'apply_working_list_heuristics': True,
    'respect_before_after_relation': True,
    'cluster_overloaded_methods': False,
    'cluster_getter_setter': False,
    'separate_by_access_level': True,
    'separate_constructors': True,
    'apply_lexical_ordering': True,
}

ENVIRONMENT_VARIABLE_PREFIX = 'METHODSORTER_'

# Editor settings use camelCase names for the same options.
option_name_by_setting_name = {
    'sortingStrategy': 'sorting_strategy',
    'applyWorkingListHeuristics': 'apply_working_list_heuristics',
    'respectBeforeAfterRelation': 'respect_before_after_relation',
    'clusterOverloadedMethods': 'cluster_overloaded_methods',
    'clusterGetterSetter': 'cluster_getter_setter',
    'separateByAccessLevel': 'separate_by_access_level',
    'separateConstructors': 'separate_constructors',
    'applyLexicalOrdering': 'apply_lexical_ordering',
}

true_words = {'1', 'true', 'yes', 'on'}
false_words = {'0', 'false', 'no', 'off', ''}


def default_sorting_options():
    return SortingOptions(**DEFAULT_SORTING_OPTIONS)


def sorting_options_from_mapping(mapping, base_options=None):
    if mapping is None:
        mapping = {}
    if not isinstance(mapping, dict):
        raise DomainException('options must be an object of option names to values.')
    if base_options is None:
        base_options = default_sorting_options()
    option_values = base_options.as_dict()
    for setting_name, value in mapping.items():
        option_name = validated_option_name(setting_name)
        option_values[option_name] = validated_option_value(option_name, value)
    return SortingOptions(**option_values)


def sorting_options_from_environment(environment=None, base_options=None):
    if environment is None:
        environment = os.environ
    mapping = {}
    for option_name in SortingOptions.field_names:
        environment_name = environment_variable_name(option_name)
        if environment_name in environment:
            mapping[option_name] = environment[environment_name]
    return sorting_options_from_mapping(mapping, base_options=base_options)


def environment_variable_name(option_name):
    return ENVIRONMENT_VARIABLE_PREFIX + option_name.upper()


def validated_option_name(setting_name):
    if not isinstance(setting_name, str):
        raise DomainException('Option names must be strings.')
    normalized_setting_name = setting_name.split('.')[-1]
    option_name = option_name_by_setting_name.get(
        normalized_setting_name,
        normalized_setting_name,
    )
    if option_name not in DEFAULT_SORTING_OPTIONS:
        raise DomainException(
            'Unknown sorting option: %s. Expected one of: %s.'
            % (setting_name, ', '.join(SortingOptions.field_names))
        )
    return option_name


def validated_option_value(option_name, value):
    if option_name == 'sorting_strategy':
        return validated_sorting_strategy(value)
    return validated_boolean_like(value, option_name)


def validated_sorting_strategy(value):
    normalized_value = value.strip().lower() if isinstance(value, str) else value
    if normalized_value not in SortingOptions.sorting_strategies:
        raise DomainException(
            'Invalid sorting_strategy value: %s. Expected %s.'
            % (
                value,
                ' or '.join(
                    "'%s'" % strategy
                    for strategy in SortingOptions.sorting_strategies
                ),
            )
        )
    return normalized_value


def validated_boolean_like(value, option_name):
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized_value = value.strip().lower()
        if normalized_value in true_words:
            return True
        if normalized_value in false_words:
            return False
    raise DomainException('%s must be a boolean.' % option_name)
