"""
Mp Runtime Configuration
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

_TRUE_WORDS = {'1', 'true', 'yes', 'on'}


@dataclass
class RuntimeConfig:
    """Knobs for the evaluator and the command line driver"""
    # `while` yields nil by default; when set it yields an array holding
    # each iteration's tail value instead (nil if the body never ran).
    while_yields_values: bool = False
    # Applied with sys.setrecursionlimit by the CLI, never by the library.
    recursion_limit: Optional[int] = None
    # CLI prints the program's result after running it.
    echo_result: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'RuntimeConfig':
        """Read MP_WHILE_YIELDS, MP_RECURSION_LIMIT and MP_ECHO_RESULT"""
        environ = os.environ if environ is None else environ
        config = cls()
        if 'MP_WHILE_YIELDS' in environ:
            config.while_yields_values = environ['MP_WHILE_YIELDS'].strip().lower() in _TRUE_WORDS
        if environ.get('MP_RECURSION_LIMIT'):
            config.recursion_limit = int(environ['MP_RECURSION_LIMIT'])
        if 'MP_ECHO_RESULT' in environ:
            config.echo_result = environ['MP_ECHO_RESULT'].strip().lower() in _TRUE_WORDS
        return config


__all__ = ['RuntimeConfig']
