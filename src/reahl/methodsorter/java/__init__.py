from reahl.methodsorter.java.documents import DomainException
from reahl.methodsorter.java.documents import is_java_source_path
from reahl.methodsorter.java.documents import read_java_source
from reahl.methodsorter.java.documents import shuffle_methods_in_file
from reahl.methodsorter.java.documents import sort_methods_in_file
from reahl.methodsorter.java.documents import write_java_source
from reahl.methodsorter.java.options import default_sorting_options
from reahl.methodsorter.java.options import sorting_options_from_environment
from reahl.methodsorter.java.options import sorting_options_from_mapping
from reahl.methodsorter.java.parsing import AccessLevel
from reahl.methodsorter.java.parsing import JavaClass
from reahl.methodsorter.java.parsing import JavaMethod
from reahl.methodsorter.java.parsing import JavaParser
from reahl.methodsorter.java.parsing import SourceSegment
from reahl.methodsorter.java.scanning import JavaSourceScanner
from reahl.methodsorter.java.scanning import locate_matching_close
from reahl.methodsorter.java.sorting import ApproximateCallGraph
from reahl.methodsorter.java.sorting import JavaMethodSorter
from reahl.methodsorter.java.sorting import SortingOptions

__all__ = [
    'AccessLevel',
    'ApproximateCallGraph',
    'DomainException',
    'JavaClass',
    'JavaMethod',
    'JavaMethodSorter',
    'JavaParser',
    'JavaSourceScanner',
    'SortingOptions',
    'SourceSegment',
    'default_sorting_options',
    'is_java_source_path',
    'locate_matching_close',
    'read_java_source',
    'shuffle_methods_in_file',
    'sort_methods_in_file',
    'sorting_options_from_environment',
    'sorting_options_from_mapping',
    'write_java_source',
]
