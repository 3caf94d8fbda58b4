"""Execution planning for FastFind.

The ExecutionPlan validates that a FindConfig is consistent and can be
served by a DirectoryReader, picks the error policy, and runs the
traversal.
"""

from typing import List, Optional, Union
from os import PathLike, fspath

from ._common.config import FilterMode, FindConfig
from .adapters import default_reader
from .core.node import FileInformation
from .core.reader import DirectoryReader
from .core.traverser import FastFindTraverser
from .error_policies import ContinueOnErrorsPolicy, ErrorPolicy, IgnoreErrorsPolicy


class ConfigurationError(ValueError):
    """Raised when a FindConfig is invalid."""
    pass


class ExecutionPlan:
    """Validated execution plan for one enumeration.

    Validation happens once, before any directory is opened, so a bad
    configuration never produces partial results.
    """

    def __init__(self, config: FindConfig, reader: Optional[DirectoryReader] = None):
        """Create and validate an execution plan.

        Args:
            config: Enumeration configuration
            reader: DirectoryReader to use (default: native reader for this platform)

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.config = config
        self.reader = reader if reader is not None else default_reader()

        config_errors = config.validate()
        if config_errors:
            raise ConfigurationError(
                f"Invalid configuration: {'; '.join(config_errors)}"
            )

        self.notes = self._check_capabilities()
        self.policy = self._select_policy()
        self.traverser = FastFindTraverser(self.reader, config, self.policy)

    def _check_capabilities(self) -> List[str]:
        """Note configuration options the reader will ignore.

        None of these change results, so they never fail the plan.
        """
        notes = []
        if self.config.performance.large_fetch and not self.reader.supports_large_fetch():
            notes.append("large_fetch hint ignored by reader")
        if FilterMode.coerce(self.config.attributes.mode) is None:
            notes.append(f"unrecognized filter mode {self.config.attributes.mode!r} rejects every entry")
        return notes

    def _select_policy(self) -> ErrorPolicy:
        if self.config.suppress_errors:
            return IgnoreErrorsPolicy()
        if self.config.error_policy is not None:
            return self.config.error_policy
        return ContinueOnErrorsPolicy(verbose=True)

    def execute(self, path: Union[str, PathLike]) -> List[FileInformation]:
        """Run the enumeration rooted at ``path``."""
        return self.traverser.traverse(fspath(path))

    def explain(self) -> dict:
        """Describe the plan, for debugging."""
        return {
            'reader': repr(self.reader),
            'policy': self.policy.__class__.__name__,
            'pattern_prefilter': self.reader.supports_pattern_prefilter(),
            'config': self.config.summary(),
            'notes': list(self.notes),
        }
