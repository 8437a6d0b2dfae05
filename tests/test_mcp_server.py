from unittest.mock import patch

from reahl.methodsorter.mcp.server import create_server
from reahl.methodsorter.mcp.server import server_instructions


class McpToolRegistrar:
    def __init__(self, name, instructions=None):
        self.name = name
        self.instructions = instructions
        self.registered_tools_by_name = {}

    def tool(self):
        def register(function):
            self.registered_tools_by_name[function.__name__] = function
            return function

        return register


def test_server_is_named_and_describes_its_tools():
    mcp_server = create_server()

    assert mcp_server.name == 'MethodSorterMCP'
    assert mcp_server.instructions == server_instructions()


def test_instructions_follow_the_file_write_policy():
    assert 'are disabled on this server' in server_instructions()
    assert 'rewrite .java files in place' in server_instructions(
        allow_file_writes=True
    )


def test_file_write_policy_reaches_the_file_tools():
    with patch(
        'reahl.methodsorter.mcp.server.FastMCP',
        side_effect=McpToolRegistrar,
    ):
        restricted_server = create_server()
        allowed_server = create_server(allow_file_writes=True)

    assert sorted(restricted_server.registered_tools_by_name) == [
        'java_parse_class',
        'java_shuffle_file',
        'java_shuffle_methods',
        'java_sort_file',
        'java_sort_methods',
    ]
    restricted_result = restricted_server.registered_tools_by_name[
        'java_sort_file'
    ]('Example.java')
    allowed_result = allowed_server.registered_tools_by_name['java_sort_file'](
        'Example.txt'
    )
    assert restricted_result['error']['message'].startswith(
        'java_sort_file is disabled.'
    )
    assert allowed_result['error']['message'] == (
        'This command only works with Java files'
    )
    assert allowed_server.instructions == server_instructions(
        allow_file_writes=True
    )
