from importlib.metadata import PackageNotFoundError, version

from .channel import ReadEnd, WriteEnd, create_channel
from .config import BasicSettings, Config, Pacing, PairsSettings
from .consumer import ConsumeResult, consume, run_consumer
from .dot_dict import DotDict
from .exceptions import (
    ChannelCreationError,
    ConfigError,
    PipePairError,
    ReapError,
    ReceiveFault,
    SendFailure,
    SpawnError,
)
from .pair import PairDescriptor, PairHandle, assign_ranges, run_pair
from .producer import produce, run_producer
from .supervisor import (
    MultiPair,
    PairFailure,
    RunReport,
    RunSupervisor,
    SinglePair,
    UnitReport,
)
from .units import ABNORMAL_EXIT, TerminationStatus, Unit, spawn, wait

# Version is read from package metadata (pyproject.toml)
try:
    __version__ = version("pipepair")
except PackageNotFoundError:
    # Package not installed, use fallback (development mode)
    __version__ = "0.1.0-dev"

# Explicit public API
__all__ = [
    # Version
    "__version__",
    # Channel
    "ReadEnd",
    "WriteEnd",
    "create_channel",
    # Units
    "ABNORMAL_EXIT",
    "TerminationStatus",
    "Unit",
    "spawn",
    "wait",
    "produce",
    "run_producer",
    "ConsumeResult",
    "consume",
    "run_consumer",
    # Supervisors
    "PairDescriptor",
    "PairHandle",
    "assign_ranges",
    "run_pair",
    "SinglePair",
    "MultiPair",
    "PairFailure",
    "UnitReport",
    "RunReport",
    "RunSupervisor",
    # Configuration
    "Config",
    "DotDict",
    "BasicSettings",
    "PairsSettings",
    "Pacing",
    # Exceptions
    "PipePairError",
    "ConfigError",
    "ChannelCreationError",
    "SpawnError",
    "SendFailure",
    "ReceiveFault",
    "ReapError",
]
