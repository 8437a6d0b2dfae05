import io
import os
import tempfile
from unittest.mock import patch

from reahl.tofu import Fixture
from reahl.tofu import expected
from reahl.tofu import set_up
from reahl.tofu import tear_down
from reahl.tofu import with_fixtures

from reahl.methodsorter.main import arguments_with_default_mode
from reahl.methodsorter.main import create_argument_parser
from reahl.methodsorter.main import run_methodsorter_application
from reahl.methodsorter.main import sorting_options_from_arguments


unsorted_source = (
    'public class Example {\n'
    '\n'
    '    private void privateMethod() {\n'
    '    }\n'
    '\n'
    '    public void publicMethod() {\n'
    '    }\n'
    '}\n'
)

sorted_source = (
    'public class Example {\n'
    '\n'
    '    public void publicMethod() {\n'
    '    }\n'
    '\n'
    '    private void privateMethod() {\n'
    '    }\n'
    '}\n'
)


class CommandLineFixture(Fixture):
    @set_up
    def create_directory(self):
        self.temporary_directory = tempfile.TemporaryDirectory()
        self.environment_patch = patch.dict(os.environ, {}, clear=False)
        self.environment_patch.start()
        for name in list(os.environ):
            if name.startswith('METHODSORTER_'):
                del os.environ[name]

    @tear_down
    def remove_directory(self):
        self.environment_patch.stop()
        self.temporary_directory.cleanup()

    def write_file(self, file_name, contents):
        path = os.path.join(self.temporary_directory.name, file_name)
        with open(path, 'w', encoding='utf-8') as written_file:
            written_file.write(contents)
        return path

    def read_file(self, path):
        with open(path, encoding='utf-8') as read_file:
            return read_file.read()


@with_fixtures(CommandLineFixture)
def test_sort_rewrites_files(fixture):
    path = fixture.write_file('Example.java', unsorted_source)

    with patch('sys.stdout', new_callable=io.StringIO) as standard_output:
        exit_status = run_methodsorter_application(arguments=['sort', path])

    assert exit_status == 0
    assert fixture.read_file(path) == sorted_source
    assert standard_output.getvalue() == '%s: Methods sorted successfully\n' % path


@with_fixtures(CommandLineFixture)
def test_sort_with_print_leaves_files_untouched(fixture):
    path = fixture.write_file('Example.java', unsorted_source)

    with patch('sys.stdout', new_callable=io.StringIO) as standard_output:
        exit_status = run_methodsorter_application(
            arguments=['sort', '--print', path]
        )

    assert exit_status == 0
    assert fixture.read_file(path) == unsorted_source
    assert standard_output.getvalue() == sorted_source


@with_fixtures(CommandLineFixture)
def test_sort_rules_can_be_switched_off(fixture):
    path = fixture.write_file('Example.java', unsorted_source)

    exit_status = run_methodsorter_application(
        arguments=[
            'sort',
            '--disable',
            'separate_by_access_level',
            '--disable',
            'apply_lexical_ordering',
            path,
        ]
    )

    assert exit_status == 0
    assert fixture.read_file(path) == unsorted_source


@with_fixtures(CommandLineFixture)
def test_domain_errors_give_exit_status_one(fixture):
    path = fixture.write_file('notes.txt', unsorted_source)

    with patch('sys.stderr', new_callable=io.StringIO) as standard_error:
        exit_status = run_methodsorter_application(arguments=['sort', path])

    assert exit_status == 1
    assert standard_error.getvalue() == 'This command only works with Java files\n'


@with_fixtures(CommandLineFixture)
def test_shuffle_with_a_seed_is_repeatable(fixture):
    path = fixture.write_file('Example.java', unsorted_source)

    shuffle_arguments = ['shuffle', '--print', '--seed', '11', path]
    with patch('sys.stdout', new_callable=io.StringIO) as first_output:
        run_methodsorter_application(arguments=shuffle_arguments)
    with patch('sys.stdout', new_callable=io.StringIO) as second_output:
        run_methodsorter_application(arguments=shuffle_arguments)

    assert first_output.getvalue() == second_output.getvalue()
    assert fixture.read_file(path) == unsorted_source


@with_fixtures(CommandLineFixture)
def test_list_shows_methods_in_source_order(fixture):
    path = fixture.write_file('Example.java', unsorted_source)

    with patch('sys.stdout', new_callable=io.StringIO) as standard_output:
        exit_status = run_methodsorter_application(arguments=['list', path])

    output_lines = standard_output.getvalue().splitlines()
    assert exit_status == 0
    assert output_lines[0] == 'Example'
    assert 'privateMethod()' in output_lines[1]
    assert 'publicMethod()' in output_lines[2]


@with_fixtures(CommandLineFixture)
def test_mcp_mode_runs_the_server(fixture):
    with patch('reahl.methodsorter.main.create_server') as create_server:
        exit_status = run_methodsorter_application(
            default_mode='mcp',
            arguments=['--allow-file-writes'],
        )

    assert exit_status == 0
    create_server.assert_called_once_with(allow_file_writes=True)
    create_server.return_value.run.assert_called_once_with(transport='stdio')


def test_default_mode_is_only_added_when_no_mode_is_given():
    assert arguments_with_default_mode([], 'mcp') == ['mcp']
    assert arguments_with_default_mode(['--allow-file-writes'], 'mcp') == [
        'mcp',
        '--allow-file-writes',
    ]
    assert arguments_with_default_mode(['sort', 'A.java'], 'mcp') == [
        'sort',
        'A.java',
    ]
    assert arguments_with_default_mode(['sort', 'A.java'], None) == [
        'sort',
        'A.java',
    ]


def test_sort_arguments_become_sorting_options():
    with patch.dict(os.environ, {'METHODSORTER_CLUSTER_GETTER_SETTER': 'true'}):
        arguments = create_argument_parser().parse_args(
            [
                'sort',
                '--sorting-strategy',
                'breadth-first',
                '--enable',
                'cluster_overloaded_methods',
                '--disable',
                'separate_constructors',
                'A.java',
            ]
        )
        sorting_options = sorting_options_from_arguments(arguments)

    assert sorting_options.sorting_strategy == 'breadth-first'
    assert sorting_options.cluster_overloaded_methods
    assert sorting_options.cluster_getter_setter
    assert not sorting_options.separate_constructors


def test_unknown_rules_are_rejected_by_the_parser():
    with expected(SystemExit):
        create_argument_parser().parse_args(['sort', '--enable', 'colourful', 'A.java'])
