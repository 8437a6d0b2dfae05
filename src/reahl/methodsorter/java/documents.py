import logging
import os
import subprocess

from reahl.methodsorter.java.sorting import JavaMethodSorter


class DomainException(Exception):
    pass


def is_java_source_path(path):
    return os.path.splitext(str(path))[1] == '.java'


def validated_java_source_path(path):
    if not is_java_source_path(path):
        raise DomainException('This command only works with Java files')
    return path


def read_java_source(path):
    validated_java_source_path(path)
    try:
        with open(path, encoding='utf-8', newline='') as source_file:
            return source_file.read()
    except (OSError, UnicodeDecodeError) as error:
        raise DomainException('Could not read %s: %s' % (path, error))


def write_java_source(path, source):
    validated_java_source_path(path)
    try:
        with open(path, 'w', encoding='utf-8', newline='') as source_file:
            source_file.write(source)
    except OSError as error:
        raise DomainException('Could not write %s: %s' % (path, error))


def format_java_source(path, formatter_command):
    if not formatter_command:
        return False
    command = list(formatter_command) + [str(path)]
    logging.getLogger(__name__).debug('Formatting with: %s', command)
    try:
        completed_process = subprocess.run(
            command,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as error:
        logging.getLogger(__name__).warning(
            'Failed to format %s: %s',
            path,
            error,
        )
        return False
    if completed_process.returncode != 0:
        logging.getLogger(__name__).warning(
            'Failed to format %s (exit status %s): %s',
            path,
            completed_process.returncode,
            completed_process.stderr.strip(),
        )
        return False
    return True


def sort_methods_in_file(
    path,
    sorting_options,
    formatter_command=None,
    write=True,
):
    source = read_java_source(path)
    sorted_source = JavaMethodSorter(sorting_options).sort(source)
    if sorted_source == source:
        return document_outcome(path, False, 'Methods are already sorted', source)
    return rewritten_document_outcome(
        path,
        sorted_source,
        'Methods sorted successfully',
        formatter_command,
        write,
    )


def shuffle_methods_in_file(
    path,
    sorting_options,
    formatter_command=None,
    write=True,
    random_index=None,
):
    source = read_java_source(path)
    shuffled_source = JavaMethodSorter(
        sorting_options,
        random_index=random_index,
    ).shuffle_randomly(source)
    if shuffled_source == source:
        return document_outcome(path, False, 'No methods to shuffle', source)
    return rewritten_document_outcome(
        path,
        shuffled_source,
        'Methods shuffled randomly',
        formatter_command,
        write,
    )


def rewritten_document_outcome(
    path,
    new_source,
    message,
    formatter_command,
    write,
):
    outcome = document_outcome(path, True, message, new_source)
    if write:
        write_java_source(path, new_source)
        outcome['written'] = True
        outcome['formatted'] = format_java_source(path, formatter_command)
    return outcome


def document_outcome(path, changed, message, source):
    return {
        'path': str(path),
        'changed': changed,
        'message': message,
        'source': source,
        'written': False,
        'formatted': False,
    }
