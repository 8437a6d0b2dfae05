class JavaSourceScanner:
    """Classifies every character of a Java source as code or non-code.

    String literals, text blocks, character literals and comments are
    non-code. Everything that looks for structure (braces, parentheses,
    keywords) only looks at code characters.
    """

    def __init__(self, source):
        self.source = source
        self.code_character_map = self.source_code_character_map(source)

    def source_code_character_map(self, source):
        code_character_map = [True for _ in source]
        index = 0
        state = 'code'
        while index < len(source):
            character = source[index]
            if state == 'code':
                if source.startswith('//', index):
                    code_character_map[index] = False
                    state = 'line_comment'
                elif source.startswith('/*', index):
                    self.mark_non_code(code_character_map, index, 2)
                    index = index + 1
                    state = 'block_comment'
                elif source.startswith('"""', index):
                    self.mark_non_code(code_character_map, index, 3)
                    index = index + 2
                    state = 'text_block'
                elif character == '"':
                    code_character_map[index] = False
                    state = 'string'
                elif character == "'":
                    code_character_map[index] = False
                    state = 'character'
            elif state == 'line_comment':
                if character == '\n':
                    state = 'code'
                else:
                    code_character_map[index] = False
            elif state == 'block_comment':
                code_character_map[index] = False
                if source.startswith('*/', index):
                    self.mark_non_code(code_character_map, index, 2)
                    index = index + 1
                    state = 'code'
            elif state == 'text_block':
                code_character_map[index] = False
                if character == '\\':
                    self.mark_non_code(code_character_map, index, 2)
                    index = index + 1
                elif source.startswith('"""', index):
                    self.mark_non_code(code_character_map, index, 3)
                    index = index + 2
                    state = 'code'
            else:
                closing_quote = '"' if state == 'string' else "'"
                if character == '\n':
                    # Unterminated literal; resynchronise at the line end.
                    state = 'code'
                else:
                    code_character_map[index] = False
                    if character == '\\':
                        self.mark_non_code(code_character_map, index, 2)
                        index = index + 1
                    elif character == closing_quote:
                        state = 'code'
            index = index + 1
        return code_character_map

    def mark_non_code(self, code_character_map, start_index, length):
        end_index = min(start_index + length, len(code_character_map))
        for index in range(start_index, end_index):
            code_character_map[index] = False

    def is_code(self, index):
        return 0 <= index < len(self.source) and self.code_character_map[index]

    def range_is_code(self, start_index, end_index):
        index = start_index
        is_code = True
        while index < end_index and is_code:
            is_code = self.is_code(index)
            index = index + 1
        return is_code

    def range_has_only_non_code(self, start_index, end_index):
        for index in range(start_index, end_index):
            if self.source[index].isspace():
                continue
            if self.is_code(index):
                return False
        return True

    def locate_matching_close(
        self,
        open_index,
        open_character='{',
        close_character='}',
    ):
        if not self.is_code(open_index):
            return -1
        if self.source[open_index] != open_character:
            return -1
        depth = 0
        index = open_index
        while index < len(self.source):
            if self.code_character_map[index]:
                character = self.source[index]
                if character == open_character:
                    depth = depth + 1
                elif character == close_character:
                    depth = depth - 1
                    if depth == 0:
                        return index
            index = index + 1
        return -1

    def brace_depth(self, start_index, end_index):
        depth = 0
        index = start_index
        while index < end_index:
            if self.code_character_map[index]:
                character = self.source[index]
                if character == '{':
                    depth = depth + 1
                elif character == '}':
                    depth = depth - 1
            index = index + 1
        return depth

    def next_code_index(self, start_index, characters, end_index=None):
        if end_index is None:
            end_index = len(self.source)
        index = start_index
        while index < end_index:
            if self.code_character_map[index] and self.source[index] in characters:
                return index
            index = index + 1
        return -1

    def previous_code_character(self, before_index, lower_bound=0):
        index = before_index - 1
        while index >= lower_bound:
            character = self.source[index]
            if self.code_character_map[index] and not character.isspace():
                return character
            index = index - 1
        return ''


def locate_matching_close(
    source,
    open_index,
    open_character='{',
    close_character='}',
):
    return JavaSourceScanner(source).locate_matching_close(
        open_index,
        open_character=open_character,
        close_character=close_character,
    )
