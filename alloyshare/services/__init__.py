"""
Services for AlloyShare.

High-level logic services:
- InstanceCache: Cached instances and navigation cursor of one execution
- ExecutionSession: State of the current command execution
- ExecutionController: Command execution and instance navigation
- DerivationLinker: Model sharing and derivation lineage
- LinkResolver: Link resolution with secret redaction
"""

from alloyshare.services.derivation_linker import DerivationLinker
from alloyshare.services.execution_controller import ExecutionController
from alloyshare.services.instance_cache import InstanceCache
from alloyshare.services.link_resolver import LinkResolver
from alloyshare.services.session import ExecutionSession

__all__ = [
    "InstanceCache",
    "ExecutionSession",
    "ExecutionController",
    "DerivationLinker",
    "LinkResolver",
]
