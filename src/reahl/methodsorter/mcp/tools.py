import random

from reahl.methodsorter.java import DomainException
from reahl.methodsorter.java import JavaMethodSorter
from reahl.methodsorter.java import JavaParser
from reahl.methodsorter.java import shuffle_methods_in_file
from reahl.methodsorter.java import sort_methods_in_file
from reahl.methodsorter.java import sorting_options_from_environment
from reahl.methodsorter.java import sorting_options_from_mapping


def register_tools(
    mcp_server,
    allow_file_writes=False,
    environment=None,
):
    if not isinstance(allow_file_writes, bool):
        raise ValueError('allow_file_writes must be a boolean.')

    def error_response(message):
        return {
            'ok': False,
            'error': {'message': message},
        }

    def file_writes_disabled_response(tool_name):
        return error_response(
            (
                '%s is disabled. '
                'Start methodsorter mcp with --allow-file-writes to enable.'
            )
            % tool_name
        )

    def validated_string(input_value, argument_name):
        if not isinstance(input_value, str):
            raise DomainException('%s must be a string.' % argument_name)
        return input_value

    def validated_non_empty_string_stripped(input_value, argument_name):
        normalized_input_value = validated_string(
            input_value,
            argument_name,
        ).strip()
        if not normalized_input_value:
            raise DomainException('%s cannot be blank.' % argument_name)
        return normalized_input_value

    def validated_seed(input_value):
        if input_value is None:
            return None
        if isinstance(input_value, bool) or not isinstance(input_value, int):
            raise DomainException('seed must be an integer or None.')
        return input_value

    def sorting_options_for(options):
        return sorting_options_from_mapping(
            options,
            base_options=sorting_options_from_environment(environment),
        )

    def random_index_for(seed):
        if seed is None:
            return None
        return random.Random(seed).randrange

    def source_outcome(original_source, new_source, changed_message, unchanged_message):
        changed = new_source != original_source
        return {
            'ok': True,
            'changed': changed,
            'message': changed_message if changed else unchanged_message,
            'source': new_source,
        }

    def file_outcome(outcome):
        return {
            'ok': True,
            'path': outcome['path'],
            'changed': outcome['changed'],
            'message': outcome['message'],
        }

    @mcp_server.tool()
    def java_parse_class(source):
        try:
            source = validated_string(source, 'source')
            java_class = JavaParser(source).parse()
            if java_class is None:
                return error_response('No class with a complete body was found.')
            return {
                'ok': True,
                'class': java_class.summary(),
            }
        except DomainException as error:
            return error_response(str(error))

    @mcp_server.tool()
    def java_sort_methods(source, options=None):
        try:
            source = validated_string(source, 'source')
            sorting_options = sorting_options_for(options)
            sorted_source = JavaMethodSorter(sorting_options).sort(source)
            return source_outcome(
                source,
                sorted_source,
                'Methods sorted successfully',
                'Methods are already sorted',
            )
        except DomainException as error:
            return error_response(str(error))

    @mcp_server.tool()
    def java_shuffle_methods(source, seed=None):
        try:
            source = validated_string(source, 'source')
            random_index = random_index_for(validated_seed(seed))
            shuffled_source = JavaMethodSorter(
                sorting_options_for(None),
                random_index=random_index,
            ).shuffle_randomly(source)
            return source_outcome(
                source,
                shuffled_source,
                'Methods shuffled randomly',
                'No methods to shuffle',
            )
        except DomainException as error:
            return error_response(str(error))

    @mcp_server.tool()
    def java_sort_file(path, options=None):
        if not allow_file_writes:
            return file_writes_disabled_response('java_sort_file')
        try:
            path = validated_non_empty_string_stripped(path, 'path')
            return file_outcome(
                sort_methods_in_file(path, sorting_options_for(options))
            )
        except DomainException as error:
            return error_response(str(error))

    @mcp_server.tool()
    def java_shuffle_file(path, seed=None):
        if not allow_file_writes:
            return file_writes_disabled_response('java_shuffle_file')
        try:
            path = validated_non_empty_string_stripped(path, 'path')
            random_index = random_index_for(validated_seed(seed))
            return file_outcome(
                shuffle_methods_in_file(
                    path,
                    sorting_options_for(None),
                    random_index=random_index,
                )
            )
        except DomainException as error:
            return error_response(str(error))
