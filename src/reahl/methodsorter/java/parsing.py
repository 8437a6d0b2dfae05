import functools
import logging
import re

from reahl.methodsorter.java.scanning import JavaSourceScanner


@functools.total_ordering
class AccessLevel:
    precedence_by_name = {
        'public': 0,
        'protected': 1,
        'package': 2,
        'private': 3,
    }

    def __init__(self, name):
        if name not in self.precedence_by_name:
            raise ValueError('Unknown access level: %s' % name)
        self.name = name

    @property
    def precedence(self):
        return self.precedence_by_name[self.name]

    @classmethod
    def from_declaration(cls, declaration):
        for keyword in ('public', 'protected', 'private'):
            if re.search(r'(?<![\w$.])%s\s' % keyword, declaration):
                return cls(keyword)
        return cls('package')

    def __eq__(self, other):
        if not isinstance(other, AccessLevel):
            return NotImplemented
        return self.name == other.name

    def __lt__(self, other):
        if not isinstance(other, AccessLevel):
            return NotImplemented
        return self.precedence < other.precedence

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return 'AccessLevel.%s' % self.name.upper()

    def __str__(self):
        return self.name


AccessLevel.PUBLIC = AccessLevel('public')
AccessLevel.PROTECTED = AccessLevel('protected')
AccessLevel.PACKAGE = AccessLevel('package')
AccessLevel.PRIVATE = AccessLevel('private')


class JavaMethod:
    def __init__(
        self,
        full_text,
        name,
        signature,
        access_level,
        is_constructor,
        is_static,
        leading_content,
        body_content,
        called_methods,
        is_getter,
        is_setter,
        start_position,
        end_position,
        original_position=0,
    ):
        self.full_text = full_text
        self.name = name
        self.signature = signature
        self.access_level = access_level
        self.is_constructor = is_constructor
        self.is_static = is_static
        self.leading_content = leading_content
        self.body_content = body_content
        self.called_methods = called_methods
        self.is_getter = is_getter
        self.is_setter = is_setter
        self.start_position = start_position
        self.end_position = end_position
        self.original_position = original_position

    @property
    def is_abstract(self):
        return not self.body_content

    @property
    def leading_content_start_position(self):
        return self.start_position - len(self.leading_content)

    def summary(self):
        return {
            'name': self.name,
            'signature': self.signature,
            'access_level': str(self.access_level),
            'is_constructor': self.is_constructor,
            'is_static': self.is_static,
            'is_abstract': self.is_abstract,
            'is_getter': self.is_getter,
            'is_setter': self.is_setter,
            'original_position': self.original_position,
            'start_position': self.start_position,
            'end_position': self.end_position,
            'called_methods': list(self.called_methods),
        }

    def __repr__(self):
        return '<JavaMethod %s at %s>' % (self.signature, self.original_position)


class SourceSegment:
    """One piece of a class body between its first and last method.

    A method slot is a place where a method goes when the class is
    reassembled; verbatim segments (fields, initializer blocks, nested
    types found between two methods) keep their place.
    """

    def __init__(self, text='', method=None):
        self.text = text
        self.method = method

    @classmethod
    def verbatim(cls, text):
        return cls(text=text)

    @classmethod
    def method_slot(cls, method):
        return cls(method=method)

    @property
    def is_method_slot(self):
        return self.method is not None

    @property
    def original_text(self):
        if self.is_method_slot:
            return self.method.leading_content + self.method.full_text
        return self.text


class JavaClass:
    def __init__(
        self,
        name,
        pre_methods_content,
        segments,
        post_methods_content,
    ):
        self.name = name
        self.pre_methods_content = pre_methods_content
        self.segments = segments
        self.post_methods_content = post_methods_content

    @property
    def methods(self):
        return [
            segment.method
            for segment in self.segments
            if segment.is_method_slot
        ]

    def original_source(self):
        return (
            self.pre_methods_content
            + ''.join(segment.original_text for segment in self.segments)
            + self.post_methods_content
        )

    def summary(self):
        methods = self.methods
        return {
            'name': self.name,
            'method_count': len(methods),
            'methods': [method.summary() for method in methods],
        }


class JavaParser:
    type_declaration_pattern = re.compile(
        r'(?<![\w$.])(?P<keyword>class|interface|enum)\s+(?P<name>[A-Za-z_$][\w$]*)'
    )
    method_declaration_pattern = re.compile(
        r'^[ \t]*'
        r'(?P<prefix>(?:@[\w$.]+(?:\([^()\n]*\))?[ \t]+)*'
        r'(?:[\w$\[\]<>?,.&]+[ \t]+)*?)'
        r'(?P<name>[A-Za-z_$][\w$]*)[ \t]*\(',
        re.MULTILINE,
    )
    declaration_tail_pattern = re.compile(
        r'\s*(?:throws\s+[\w$.<>,\s]+?)?\s*(?P<terminator>[{;])'
    )
    static_initializer_pattern = re.compile(
        r'^[ \t]*(?:/\*.*?\*/[ \t]*)*static\s*\{',
        re.MULTILINE,
    )
    instance_initializer_pattern = re.compile(
        r'^[ \t]*\{[ \t\r]*$',
        re.MULTILINE,
    )
    method_call_pattern = re.compile(r'(?<![\w$])(?:this\.)?([A-Za-z_$][\w$]*)\s*\(')
    annotation_line_pattern = re.compile(r'^\s*@')
    excluded_call_names = {
        'if',
        'for',
        'while',
        'switch',
        'catch',
        'synchronized',
        'new',
        'return',
    }
    java_keywords = {
        'assert',
        'case',
        'catch',
        'class',
        'do',
        'else',
        'enum',
        'finally',
        'for',
        'if',
        'instanceof',
        'interface',
        'new',
        'return',
        'super',
        'switch',
        'synchronized',
        'this',
        'throw',
        'try',
        'while',
    }
    statement_keywords = {'return', 'new', 'else', 'throw', 'case'}

    def __init__(self, source):
        self.source = source
        self.scanner = JavaSourceScanner(source)
        self.class_name = None
        self.body_start = -1
        self.body_end = -1
        self.skip_regions = []

    def parse(self):
        class_declaration = self.find_class_declaration()
        if class_declaration is None:
            logging.getLogger(__name__).debug('No class declaration found')
            return None
        self.class_name, self.body_start = class_declaration
        self.body_end = self.scanner.locate_matching_close(self.body_start)
        if self.body_end == -1:
            logging.getLogger(__name__).debug(
                'Body of class %s is never closed',
                self.class_name,
            )
            return None
        self.skip_regions = self.find_skip_regions()
        java_class = self.extract_class()
        logging.getLogger(__name__).debug(
            'Parsed class %s: %s methods, %s skip regions',
            java_class.name,
            len(java_class.methods),
            len(self.skip_regions),
        )
        return java_class

    def find_class_declaration(self):
        for match in self.type_declaration_pattern.finditer(self.source):
            if match.group('keyword') != 'class':
                continue
            body_start = self.type_body_start_for_match(match, len(self.source))
            if body_start != -1:
                return match.group('name'), body_start
        return None

    def type_body_start_for_match(self, match, end_index):
        if not self.scanner.range_is_code(match.start(), match.end()):
            return -1
        header_end = self.scanner.next_code_index(match.end(), '{;', end_index)
        if header_end == -1 or self.source[header_end] != '{':
            return -1
        return header_end

    def find_skip_regions(self):
        skip_regions = self.nested_type_regions()
        skip_regions.extend(
            self.initializer_regions(self.static_initializer_pattern, skip_regions)
        )
        skip_regions.extend(
            self.initializer_regions(
                self.instance_initializer_pattern,
                skip_regions,
                requires_statement_boundary=True,
            )
        )
        return sorted(skip_regions)

    def nested_type_regions(self):
        regions = []
        position = self.body_start + 1
        while position < self.body_end:
            match = self.type_declaration_pattern.search(
                self.source,
                position,
                self.body_end,
            )
            if match is None:
                break
            open_brace = self.type_body_start_for_match(match, self.body_end)
            if open_brace == -1:
                position = match.end()
                continue
            close_brace = self.scanner.locate_matching_close(open_brace)
            if close_brace == -1 or close_brace >= self.body_end:
                position = match.end()
                continue
            regions.append(
                (self.line_start_within_body(match.start()), close_brace + 1)
            )
            position = close_brace + 1
        return regions

    def initializer_regions(
        self,
        pattern,
        existing_regions,
        requires_statement_boundary=False,
    ):
        regions = []
        position = self.body_start + 1
        while position < self.body_end:
            match = pattern.search(self.source, position, self.body_end)
            if match is None:
                break
            open_brace = self.source.rindex('{', match.start(), match.end())
            position = match.end()
            if not self.scanner.is_code(open_brace):
                continue
            if self.region_containing(open_brace, existing_regions + regions):
                continue
            if requires_statement_boundary:
                previous_character = self.scanner.previous_code_character(
                    open_brace,
                    self.body_start,
                )
                if previous_character not in {';', '{', '}'}:
                    continue
            close_brace = self.scanner.locate_matching_close(open_brace)
            if close_brace == -1 or close_brace >= self.body_end:
                continue
            regions.append((match.start(), close_brace + 1))
            position = close_brace + 1
        return regions

    def line_start_within_body(self, index):
        line_start = self.source.rfind('\n', 0, index) + 1
        return max(line_start, self.body_start + 1)

    def region_containing(self, index, regions=None):
        if regions is None:
            regions = self.skip_regions
        for region_start, region_end in regions:
            if region_start <= index < region_end:
                return region_start, region_end
        return None

    def extract_class(self):
        methods = []
        segments = []
        pre_methods_content = self.source
        previous_end = self.body_start + 1
        position = self.body_start + 1
        while position < self.body_end:
            match = self.method_declaration_pattern.search(
                self.source,
                position,
                self.body_end,
            )
            if match is None:
                break
            skip_region = self.region_containing(match.start())
            if skip_region:
                position = skip_region[1]
                continue
            if not self.is_class_member_position(match.start()):
                # Inside an anonymous class or lambda of a field initializer.
                position = match.end()
                continue
            method = self.method_from_declaration_match(match, previous_end)
            if method is None:
                position = match.end()
                continue
            if not self.starts_after_member_boundary(method):
                # The declaration continues an earlier line (split modifiers,
                # multi-line annotation arguments); it stays where it is.
                logging.getLogger(__name__).debug(
                    'Leaving %s in place: declaration does not start on its own line',
                    method.signature,
                )
                position = method.end_position
                continue
            method.original_position = len(methods)
            leading_start = method.leading_content_start_position
            if methods:
                segments.append(
                    SourceSegment.verbatim(self.source[previous_end:leading_start])
                )
            else:
                pre_methods_content = self.source[:leading_start]
            segments.append(SourceSegment.method_slot(method))
            methods.append(method)
            previous_end = method.end_position
            position = method.end_position
        post_methods_content = (
            self.source[previous_end:]
            if methods
            else ''
        )
        return JavaClass(
            self.class_name,
            pre_methods_content,
            segments,
            post_methods_content,
        )

    def method_from_declaration_match(self, match, previous_end):
        name = match.group('name')
        prefix = match.group('prefix')
        if name in self.java_keywords:
            return None
        if self.statement_keywords.intersection(re.findall(r'[A-Za-z_]+', prefix)):
            return None
        if not self.scanner.range_is_code(match.start('name'), match.end()):
            return None
        open_parenthesis = match.end() - 1
        close_parenthesis = self.scanner.locate_matching_close(
            open_parenthesis,
            '(',
            ')',
        )
        if close_parenthesis == -1 or close_parenthesis >= self.body_end:
            return None
        tail = self.declaration_tail_pattern.match(
            self.source,
            close_parenthesis + 1,
            self.body_end,
        )
        if tail is None or not self.scanner.is_code(tail.start('terminator')):
            return None
        is_constructor = name == self.class_name
        has_prefix = bool(prefix.strip())
        terminator = tail.group('terminator')
        if not has_prefix and (terminator == ';' or not is_constructor):
            return None

        start_position = match.start()
        if terminator == '{':
            open_brace = tail.start('terminator')
            close_brace = self.scanner.locate_matching_close(open_brace)
            if close_brace == -1 or close_brace >= self.body_end:
                return None
            if self.region_containing(close_brace):
                return None
            end_position = close_brace + 1
            body_content = self.source[open_brace:end_position]
        else:
            end_position = tail.end()
            body_content = ''
        end_position = self.end_of_trailing_comment(end_position)

        declaration = self.source[start_position:tail.end()]
        leading_start = self.leading_content_start(start_position, previous_end)
        called_methods = []
        if body_content:
            called_methods = self.called_method_names(start_position, end_position)
        return JavaMethod(
            full_text=self.source[start_position:end_position],
            name=name,
            signature=self.source[match.start('name'):close_parenthesis + 1],
            access_level=AccessLevel.from_declaration(declaration),
            is_constructor=is_constructor,
            is_static='static ' in declaration,
            leading_content=self.source[leading_start:start_position],
            body_content=body_content,
            called_methods=called_methods,
            is_getter=self.is_getter_declaration(name, declaration),
            is_setter=self.is_setter_declaration(name, declaration),
            start_position=start_position,
            end_position=end_position,
        )

    def leading_content_start(self, declaration_start, previous_end):
        search_start = previous_end
        for region_start, region_end in self.skip_regions:
            if region_end <= declaration_start:
                search_start = max(search_start, region_end)
        leading_start = declaration_start
        while leading_start > search_start:
            newline_index = self.source.rfind('\n', search_start, leading_start - 1)
            if newline_index == -1:
                line_start = search_start
                starts_whole_line = (
                    search_start == 0
                    or self.source[search_start - 1] == '\n'
                )
                if not starts_whole_line:
                    break
            else:
                line_start = newline_index + 1
            if not self.is_leading_line(line_start, leading_start - 1):
                break
            leading_start = line_start
        return leading_start

    def is_class_member_position(self, index):
        return self.scanner.brace_depth(self.body_start, index) == 1

    def end_of_trailing_comment(self, end_position):
        line_end = self.source.find('\n', end_position, self.body_end)
        if line_end == -1:
            return end_position
        if not self.source[end_position:line_end].strip():
            return end_position
        if not self.scanner.range_has_only_non_code(end_position, line_end):
            return end_position
        if not self.scanner.is_code(line_end):
            # A block comment that carries on past this line.
            return end_position
        return line_end

    def starts_after_member_boundary(self, method):
        previous_character = self.scanner.previous_code_character(
            method.leading_content_start_position,
            self.body_start,
        )
        return previous_character in {'', ';', '{', '}'}

    def is_leading_line(self, line_start, line_end):
        line = self.source[line_start:line_end]
        if not line.strip():
            return True
        if self.annotation_line_pattern.match(line):
            return True
        return self.scanner.range_has_only_non_code(line_start, line_end)

    def called_method_names(self, start_position, end_position):
        called_methods = []
        for match in self.method_call_pattern.finditer(
            self.source,
            start_position,
            end_position,
        ):
            method_name = match.group(1)
            if not self.scanner.is_code(match.start(1)):
                continue
            if method_name in self.excluded_call_names:
                continue
            if method_name not in called_methods:
                called_methods.append(method_name)
        return called_methods

    def is_getter_declaration(self, name, declaration):
        return (
            (name.startswith('get') or name.startswith('is'))
            and '()' in declaration
            and 'void' not in declaration
        )

    def is_setter_declaration(self, name, declaration):
        return name.startswith('set') and 'void' in declaration
