from mcp.server.fastmcp import FastMCP

from reahl.methodsorter.mcp.tools import register_tools


server_name = 'MethodSorterMCP'


def server_instructions(allow_file_writes=False):
    instructions = [
        'Reorders the methods of the first class in a Java source.',
        'java_parse_class lists the methods the sorter would move.',
        'java_sort_methods and java_shuffle_methods take source text and '
        'return the reordered source without touching any file.',
    ]
    if allow_file_writes:
        instructions.append(
            'java_sort_file and java_shuffle_file rewrite .java files in place.'
        )
    else:
        instructions.append(
            'java_sort_file and java_shuffle_file are disabled on this server.'
        )
    return ' '.join(instructions)


def create_server(allow_file_writes=False):
    mcp_server = FastMCP(
        server_name,
        instructions=server_instructions(allow_file_writes),
    )
    register_tools(mcp_server, allow_file_writes=allow_file_writes)
    return mcp_server
