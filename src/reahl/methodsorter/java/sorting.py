import functools
import locale
import logging
import random
import re

from reahl.methodsorter.java.parsing import JavaParser


class SortingOptions:
    sorting_strategies = ('depth-first', 'breadth-first')
    rule_names = (
        'apply_working_list_heuristics',
        'respect_before_after_relation',
        'cluster_overloaded_methods',
        'cluster_getter_setter',
        'separate_by_access_level',
        'separate_constructors',
        'apply_lexical_ordering',
    )
    field_names = ('sorting_strategy',) + rule_names

    def __init__(
        self,
        sorting_strategy,
        apply_working_list_heuristics,
        respect_before_after_relation,
        cluster_overloaded_methods,
        cluster_getter_setter,
        separate_by_access_level,
        separate_constructors,
        apply_lexical_ordering,
    ):
        self.sorting_strategy = sorting_strategy
        # No comparison step consults this flag.
        self.apply_working_list_heuristics = apply_working_list_heuristics
        self.respect_before_after_relation = respect_before_after_relation
        self.cluster_overloaded_methods = cluster_overloaded_methods
        self.cluster_getter_setter = cluster_getter_setter
        self.separate_by_access_level = separate_by_access_level
        self.separate_constructors = separate_constructors
        self.apply_lexical_ordering = apply_lexical_ordering

    @property
    def uses_transitive_invocations(self):
        return self.sorting_strategy == 'depth-first'

    def as_dict(self):
        return {
            field_name: getattr(self, field_name)
            for field_name in self.field_names
        }

    def with_changes(self, **changes):
        values = self.as_dict()
        values.update(changes)
        return self.__class__(**values)

    def __eq__(self, other):
        if not isinstance(other, SortingOptions):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self):
        return 'SortingOptions(%s)' % ', '.join(
            '%s=%r' % (field_name, value)
            for field_name, value in self.as_dict().items()
        )


class ApproximateCallGraph:
    """Which methods of one class call which other methods of that class.

    Edges come from the parser's syntactic call detection: an identifier
    written directly before an opening parenthesis, anywhere in the method
    but never inside a string literal or comment. Overloads share a node,
    calls on other receivers that happen to use the same name count as
    calls, and inherited or reflective calls are invisible. Good enough to
    place callers before callees; not a call resolution.
    """

    def __init__(self, callees_by_caller):
        self.callees_by_caller = callees_by_caller

    @classmethod
    def from_methods(cls, methods):
        method_names = {method.name for method in methods}
        callees_by_caller = {}
        for method in methods:
            callees = callees_by_caller.setdefault(method.name, set())
            callees.update(
                called_name
                for called_name in method.called_methods
                if called_name in method_names and called_name != method.name
            )
        return cls(callees_by_caller)

    def callees_of(self, caller_name):
        return self.callees_by_caller.get(caller_name, set())

    def calls(self, caller_name, callee_name):
        return callee_name in self.callees_of(caller_name)

    def transitively_calls(self, caller_name, callee_name):
        visited = set()
        pending = [caller_name]
        while pending:
            current_name = pending.pop()
            if current_name in visited:
                continue
            visited.add(current_name)
            callees = self.callees_of(current_name)
            if callee_name in callees:
                return True
            pending.extend(callees - visited)
        return False


class JavaMethodSorter:
    blank_lines_at_start_pattern = re.compile(r'^(?:[ \t\r]*\n)+')

    def __init__(self, sorting_options, random_index=None):
        self.sorting_options = sorting_options
        self.random_index = random_index or random.randrange

    def sort(self, source):
        java_class = self.parsed_class_with_methods(source)
        if java_class is None:
            return source
        ordered_methods = self.sorted_methods(java_class.methods)
        return self.reconstruct_source(java_class, ordered_methods)

    def shuffle_randomly(self, source):
        java_class = self.parsed_class_with_methods(source)
        if java_class is None:
            return source
        shuffled_methods = self.shuffled_methods(java_class.methods)
        return self.reconstruct_source(java_class, shuffled_methods)

    def parsed_class_with_methods(self, source):
        java_class = JavaParser(source).parse()
        if java_class is None:
            return None
        if not java_class.methods:
            logging.getLogger(__name__).debug(
                'Class %s has no methods to reorder',
                java_class.name,
            )
            return None
        return java_class

    def sorted_methods(self, methods):
        call_graph = ApproximateCallGraph.from_methods(methods)
        ordered_methods = sorted(
            methods,
            key=functools.cmp_to_key(
                lambda method, other_method: self.compare_methods(
                    method,
                    other_method,
                    call_graph,
                )
            ),
        )
        if self.sorting_options.cluster_overloaded_methods:
            ordered_methods = self.cluster_overloaded_methods(ordered_methods)
        if self.sorting_options.cluster_getter_setter:
            ordered_methods = self.cluster_getters_and_setters(ordered_methods)
        return ordered_methods

    def compare_methods(self, method, other_method, call_graph):
        if self.sorting_options.separate_constructors:
            if method.is_constructor != other_method.is_constructor:
                return -1 if method.is_constructor else 1

        if method.is_static != other_method.is_static:
            return -1 if method.is_static else 1

        if self.sorting_options.separate_by_access_level:
            access_difference = (
                method.access_level.precedence
                - other_method.access_level.precedence
            )
            if access_difference != 0:
                return access_difference

        if self.sorting_options.respect_before_after_relation:
            invocation_order = self.compare_by_invocation(
                method,
                other_method,
                call_graph,
            )
            if invocation_order != 0:
                return invocation_order

        if self.sorting_options.apply_lexical_ordering:
            lexical_order = self.compare_names(method.name, other_method.name)
            if lexical_order != 0:
                return lexical_order

        return method.original_position - other_method.original_position

    def compare_by_invocation(self, method, other_method, call_graph):
        if call_graph.calls(method.name, other_method.name):
            return -1
        if call_graph.calls(other_method.name, method.name):
            return 1
        if self.sorting_options.uses_transitive_invocations:
            if call_graph.transitively_calls(method.name, other_method.name):
                return -1
            if call_graph.transitively_calls(other_method.name, method.name):
                return 1
        return 0

    def compare_names(self, name, other_name):
        folded_order = locale.strcoll(name.casefold(), other_name.casefold())
        if folded_order != 0:
            return folded_order
        # Names differing only in case: lowercase first.
        return locale.strcoll(name.swapcase(), other_name.swapcase())

    def cluster_overloaded_methods(self, methods):
        methods_by_name = {}
        for method in methods:
            methods_by_name.setdefault(method.name, []).append(method)
        return [
            method
            for same_named_methods in methods_by_name.values()
            for method in same_named_methods
        ]

    def cluster_getters_and_setters(self, methods):
        clustered_methods = []
        placed_indexes = set()
        for index, method in enumerate(methods):
            if index in placed_indexes:
                continue
            clustered_methods.append(method)
            placed_indexes.add(index)
            partner_names = self.accessor_partner_names(method)
            for partner_index in range(index + 1, len(methods)):
                if partner_index in placed_indexes:
                    continue
                if methods[partner_index].name in partner_names:
                    clustered_methods.append(methods[partner_index])
                    placed_indexes.add(partner_index)
                    break
        return clustered_methods

    def accessor_partner_names(self, method):
        if method.is_getter:
            return {'set' + self.field_name_of_getter(method.name)}
        if method.is_setter:
            field_name = self.field_name_of_setter(method.name)
            return {'get' + field_name, 'is' + field_name}
        return set()

    def field_name_of_getter(self, method_name):
        if method_name.startswith('get'):
            return method_name[len('get'):]
        if method_name.startswith('is'):
            return method_name[len('is'):]
        return method_name

    def field_name_of_setter(self, method_name):
        if method_name.startswith('set'):
            return method_name[len('set'):]
        return method_name

    def shuffled_methods(self, methods):
        shuffled_methods = list(methods)
        index = len(shuffled_methods) - 1
        while index > 0:
            swap_index = self.random_index(index + 1)
            shuffled_methods[index], shuffled_methods[swap_index] = (
                shuffled_methods[swap_index],
                shuffled_methods[index],
            )
            index = index - 1
        return shuffled_methods

    def reconstruct_source(self, java_class, ordered_methods):
        remaining_methods = iter(ordered_methods)
        body_pieces = []
        for segment in java_class.segments:
            if segment.is_method_slot:
                body_pieces.append(self.method_text(next(remaining_methods)))
            else:
                verbatim_text = self.verbatim_text(segment.text)
                if verbatim_text:
                    body_pieces.append(verbatim_text)
        normalized_pre_methods_content = (
            java_class.pre_methods_content.rstrip() + '\n\n'
        )
        return (
            normalized_pre_methods_content
            + '\n\n'.join(body_pieces)
            + java_class.post_methods_content
        )

    def method_text(self, method):
        full_text = self.without_leading_blank_lines(method.full_text)
        leading_content = self.without_leading_blank_lines(method.leading_content)
        if leading_content.strip():
            return leading_content + full_text
        return full_text

    def verbatim_text(self, text):
        return self.without_leading_blank_lines(text).rstrip()

    def without_leading_blank_lines(self, text):
        return self.blank_lines_at_start_pattern.sub('', text, count=1)
