import argparse
import logging
import random
import shlex
import sys

from reahl.methodsorter.java import DomainException
from reahl.methodsorter.java import JavaParser
from reahl.methodsorter.java import SortingOptions
from reahl.methodsorter.java import read_java_source
from reahl.methodsorter.java import shuffle_methods_in_file
from reahl.methodsorter.java import sort_methods_in_file
from reahl.methodsorter.java import sorting_options_from_environment
from reahl.methodsorter.java import sorting_options_from_mapping
from reahl.methodsorter.mcp.server import create_server


modes = ('sort', 'shuffle', 'list', 'mcp')


def add_sorting_arguments(parser):
    parser.add_argument(
        '--sorting-strategy',
        choices=SortingOptions.sorting_strategies,
        help='How far invocation relations reach when ordering methods.',
    )
    parser.add_argument(
        '--enable',
        action='append',
        default=[],
        choices=SortingOptions.rule_names,
        metavar='RULE',
        help='Switch a sorting rule on (repeatable).',
    )
    parser.add_argument(
        '--disable',
        action='append',
        default=[],
        choices=SortingOptions.rule_names,
        metavar='RULE',
        help='Switch a sorting rule off (repeatable).',
    )


def add_rewrite_arguments(parser):
    parser.add_argument('paths', nargs='+', metavar='PATH')
    parser.add_argument(
        '--print',
        action='store_true',
        dest='print_only',
        help='Write the result to stdout and leave files untouched.',
    )
    parser.add_argument(
        '--formatter-command',
        default='',
        help='Command run on each rewritten file, with its path appended.',
    )


def create_argument_parser():
    common_parser = argparse.ArgumentParser(add_help=False)
    common_parser.add_argument(
        '--log-level',
        default='WARNING',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging threshold.',
    )
    parser = argparse.ArgumentParser(
        prog='methodsorter',
        description='Reorder the methods of Java classes.',
    )
    subparsers = parser.add_subparsers(dest='mode', required=True)

    sort_parser = subparsers.add_parser(
        'sort',
        parents=[common_parser],
        help='Sort methods in Java files.',
    )
    add_rewrite_arguments(sort_parser)
    add_sorting_arguments(sort_parser)

    shuffle_parser = subparsers.add_parser(
        'shuffle',
        parents=[common_parser],
        help='Shuffle methods in Java files randomly.',
    )
    add_rewrite_arguments(shuffle_parser)
    shuffle_parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Seed for a repeatable shuffle.',
    )

    list_parser = subparsers.add_parser(
        'list',
        parents=[common_parser],
        help='List the methods found in a Java file.',
    )
    list_parser.add_argument('path', metavar='PATH')

    mcp_parser = subparsers.add_parser(
        'mcp',
        parents=[common_parser],
        help='Run the MCP server.',
    )
    mcp_parser.add_argument(
        '--transport',
        default='stdio',
        choices=['stdio'],
        help='MCP transport type.',
    )
    mcp_parser.add_argument(
        '--allow-file-writes',
        action='store_true',
        help='Enable java_sort_file and java_shuffle_file (disabled by default).',
    )
    return parser


def arguments_with_default_mode(arguments, default_mode):
    if default_mode is None:
        return arguments
    if arguments and arguments[0] in modes:
        return arguments
    return [default_mode] + arguments


def sorting_options_from_arguments(arguments):
    changes = {}
    if arguments.sorting_strategy:
        changes['sorting_strategy'] = arguments.sorting_strategy
    for rule_name in arguments.enable:
        changes[rule_name] = True
    for rule_name in arguments.disable:
        changes[rule_name] = False
    return sorting_options_from_mapping(
        changes,
        base_options=sorting_options_from_environment(),
    )


def formatter_command_from_arguments(arguments):
    return shlex.split(arguments.formatter_command)


def report_outcome(outcome, print_only):
    if print_only:
        sys.stdout.write(outcome['source'])
    else:
        print('%s: %s' % (outcome['path'], outcome['message']))


def run_sort(arguments):
    sorting_options = sorting_options_from_arguments(arguments)
    for path in arguments.paths:
        outcome = sort_methods_in_file(
            path,
            sorting_options,
            formatter_command=formatter_command_from_arguments(arguments),
            write=not arguments.print_only,
        )
        report_outcome(outcome, arguments.print_only)


def run_shuffle(arguments):
    sorting_options = sorting_options_from_environment()
    random_index = None
    if arguments.seed is not None:
        random_index = random.Random(arguments.seed).randrange
    for path in arguments.paths:
        outcome = shuffle_methods_in_file(
            path,
            sorting_options,
            formatter_command=formatter_command_from_arguments(arguments),
            write=not arguments.print_only,
            random_index=random_index,
        )
        report_outcome(outcome, arguments.print_only)


def run_list(arguments):
    java_class = JavaParser(read_java_source(arguments.path)).parse()
    if java_class is None:
        raise DomainException('No class with a complete body was found.')
    print(java_class.name)
    for method in java_class.methods:
        print(
            '%3d  %-9s %-6s %s'
            % (
                method.original_position,
                method.access_level,
                'static' if method.is_static else '',
                method.signature,
            )
        )


def run_mcp(arguments):
    mcp_server = create_server(allow_file_writes=arguments.allow_file_writes)
    mcp_server.run(transport=arguments.transport)


mode_runners = {
    'sort': run_sort,
    'shuffle': run_shuffle,
    'list': run_list,
    'mcp': run_mcp,
}


def run_methodsorter_application(default_mode=None, arguments=None):
    if arguments is None:
        arguments = sys.argv[1:]
    parser = create_argument_parser()
    parsed_arguments = parser.parse_args(
        arguments_with_default_mode(list(arguments), default_mode)
    )
    logging.basicConfig(level=getattr(logging, parsed_arguments.log_level))
    try:
        mode_runners[parsed_arguments.mode](parsed_arguments)
    except DomainException as error:
        print(str(error), file=sys.stderr)
        return 1
    return 0


def run_application():
    return run_methodsorter_application()


if __name__ == '__main__':
    raise SystemExit(run_application())
