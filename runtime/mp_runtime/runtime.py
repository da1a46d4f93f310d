"""
Mp Runtime - main interface

Ties the pipeline together: source -> MpTokenizer -> MpParser -> MpEvaluator.
The global scope sits below a constant root scope holding the builtins and
persists across execute() calls until clear_env().
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .builtins_table import install_builtins
from .config import RuntimeConfig
from .environment import Environment
from .evaluator import MpEvaluator
from .host import ConsoleHost, HostIO
from .lexer import MpTokenizer
from .parser import MpParser

logger = logging.getLogger(__name__)


# ============================================================================
# Runtime Interface
# ============================================================================

class MpRuntime:
    """Main Mp runtime interface"""

    def __init__(self, config: Optional[RuntimeConfig] = None, host: Optional[HostIO] = None):
        self.config = config or RuntimeConfig()
        self.host = host or ConsoleHost()
        self.evaluator = MpEvaluator(self.host, self.config)
        self.builtins = install_builtins(Environment(), self.host)
        self.globals = self.builtins.child()

    def execute(self, source: str) -> Any:
        """Execute Mp source code"""
        # Tokenize
        tokens = MpTokenizer(source).scan()

        # Parse
        program = MpParser(tokens).parse()

        # Evaluate
        return self.evaluator.run(program, self.globals)

    def execute_file(self, path: Union[str, Path]) -> Any:
        """Execute an Mp source file"""
        logger.debug("executing %s", path)
        source = Path(path).read_text(encoding='utf-8')
        return self.execute(source)

    def set_var(self, name: str, value: Any):
        """Set variable in the global scope"""
        self.globals.define(name, value)

    def get_var(self, name: str) -> Any:
        """Get variable, falling back to builtins"""
        return self.globals.lookup(name)

    def get_env(self) -> Dict[str, Any]:
        """Get global bindings (builtins excluded)"""
        return self.globals.bindings()

    def clear_env(self):
        """Clear globals (keeping builtins)"""
        self.globals = self.builtins.child()


# ============================================================================
# Convenience Function
# ============================================================================

def execute_mp(source: str, host: Optional[HostIO] = None,
               config: Optional[RuntimeConfig] = None) -> Any:
    """
    Execute Mp source code in a fresh runtime (convenience function)

    Args:
        source: Mp source code
        host: I/O host for print/input (defaults to the console)
        config: runtime options

    Returns:
        The program's tail value, or the value of a top-level return

    Example:
        >>> execute_mp('1 + 2')
        3
        >>> execute_mp('fn sq(x) { x * x } sq(7)')
        49
    """
    runtime = MpRuntime(config=config, host=host)
    return runtime.execute(source)


__all__ = ['MpRuntime', 'execute_mp']
