"""
Mp Host I/O

The evaluator reaches the outside world only through print() and input(),
which call into a HostIO supplied by the embedder.
"""

import sys
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, TextIO


class HostIO(ABC):
    """Output sink and input source for the print/input builtins"""

    @abstractmethod
    def write(self, text: str):
        """Emit one display string (print adds the newline)"""

    @abstractmethod
    def read_line(self) -> Optional[str]:
        """Next input line without its terminator, or None at end of stream"""


class ConsoleHost(HostIO):
    """Standard streams"""

    def __init__(self, stdout: Optional[TextIO] = None, stdin: Optional[TextIO] = None):
        self.stdout = stdout
        self.stdin = stdin

    def write(self, text: str):
        out = self.stdout or sys.stdout
        out.write(text)
        out.flush()

    def read_line(self) -> Optional[str]:
        line = (self.stdin or sys.stdin).readline()
        if line == '':
            return None
        return line.rstrip('\r\n')


class BufferedHost(HostIO):
    """In-memory host for tests and embedding"""

    def __init__(self, inputs: Iterable[str] = ()):
        self.inputs: List[str] = list(inputs)
        self.output: List[str] = []

    def write(self, text: str):
        self.output.append(text)

    def read_line(self) -> Optional[str]:
        if not self.inputs:
            return None
        return self.inputs.pop(0)

    @property
    def lines(self) -> List[str]:
        """Everything written, split into lines"""
        return ''.join(self.output).splitlines()


__all__ = ['HostIO', 'ConsoleHost', 'BufferedHost']
