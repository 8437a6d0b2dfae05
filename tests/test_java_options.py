from reahl.tofu import Fixture
from reahl.tofu import NoException
from reahl.tofu import expected
from reahl.tofu import scenario
from reahl.tofu import with_fixtures

from reahl.methodsorter.java.documents import DomainException
from reahl.methodsorter.java.options import default_sorting_options
from reahl.methodsorter.java.options import environment_variable_name
from reahl.methodsorter.java.options import sorting_options_from_environment
from reahl.methodsorter.java.options import sorting_options_from_mapping
from reahl.methodsorter.java.sorting import SortingOptions


def test_default_sorting_options():
    sorting_options = default_sorting_options()

    assert sorting_options.as_dict() == {
        'sorting_strategy': 'depth-first',
        'apply_working_list_heuristics': True,
        'respect_before_after_relation': True,
        'cluster_overloaded_methods': False,
        'cluster_getter_setter': False,
        'separate_by_access_level': True,
        'separate_constructors': True,
        'apply_lexical_ordering': True,
    }
    assert sorting_options.uses_transitive_invocations


def test_mapping_accepts_option_names_and_editor_setting_names():
    sorting_options = sorting_options_from_mapping(
        {
            'sortingStrategy': 'breadth-first',
            'clusterGetterSetter': True,
            'javaMethodSorter.separateConstructors': 'false',
            'cluster_overloaded_methods': 'yes',
        }
    )

    assert sorting_options.sorting_strategy == 'breadth-first'
    assert not sorting_options.uses_transitive_invocations
    assert sorting_options.cluster_getter_setter
    assert not sorting_options.separate_constructors
    assert sorting_options.cluster_overloaded_methods
    assert sorting_options.apply_lexical_ordering


def test_mapping_starts_from_the_given_base_options():
    base_options = default_sorting_options().with_changes(
        apply_lexical_ordering=False,
    )

    sorting_options = sorting_options_from_mapping(
        {'separate_by_access_level': False},
        base_options=base_options,
    )

    assert not sorting_options.apply_lexical_ordering
    assert not sorting_options.separate_by_access_level


def test_empty_mapping_yields_defaults():
    assert sorting_options_from_mapping(None) == default_sorting_options()
    assert sorting_options_from_mapping({}) == default_sorting_options()


class InvalidMappingFixture(Fixture):
    @scenario
    def unknown_option(self):
        self.mapping = {'sortByColour': True}

    @scenario
    def unknown_strategy(self):
        self.mapping = {'sorting_strategy': 'random'}

    @scenario
    def non_boolean_rule(self):
        self.mapping = {'apply_lexical_ordering': 'maybe'}

    @scenario
    def integer_rule(self):
        self.mapping = {'apply_lexical_ordering': 1}

    @scenario
    def not_a_mapping(self):
        self.mapping = ['apply_lexical_ordering']


@with_fixtures(InvalidMappingFixture)
def test_invalid_mappings_are_rejected(fixture):
    with expected(DomainException):
        sorting_options_from_mapping(fixture.mapping)


def test_options_are_read_from_the_environment():
    environment = {
        'METHODSORTER_SORTING_STRATEGY': 'breadth-first',
        'METHODSORTER_CLUSTER_OVERLOADED_METHODS': 'on',
        'METHODSORTER_APPLY_LEXICAL_ORDERING': '0',
        'UNRELATED': 'ignored',
    }

    sorting_options = sorting_options_from_environment(environment)

    assert sorting_options.sorting_strategy == 'breadth-first'
    assert sorting_options.cluster_overloaded_methods
    assert not sorting_options.apply_lexical_ordering
    assert sorting_options.separate_constructors


def test_bad_environment_values_are_reported():
    with expected(DomainException):
        sorting_options_from_environment({'METHODSORTER_SEPARATE_CONSTRUCTORS': 'sometimes'})
    with expected(NoException):
        sorting_options_from_environment({})


def test_environment_variable_names():
    assert [
        environment_variable_name(field_name)
        for field_name in SortingOptions.field_names
    ] == [
        'METHODSORTER_SORTING_STRATEGY',
        'METHODSORTER_APPLY_WORKING_LIST_HEURISTICS',
        'METHODSORTER_RESPECT_BEFORE_AFTER_RELATION',
        'METHODSORTER_CLUSTER_OVERLOADED_METHODS',
        'METHODSORTER_CLUSTER_GETTER_SETTER',
        'METHODSORTER_SEPARATE_BY_ACCESS_LEVEL',
        'METHODSORTER_SEPARATE_CONSTRUCTORS',
        'METHODSORTER_APPLY_LEXICAL_ORDERING',
    ]
