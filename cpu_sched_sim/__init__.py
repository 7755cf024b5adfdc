"""Discrete-time CPU scheduling simulator with seven dispatch disciplines."""

from .process import ExecutionSegment, Process, ProcessStatus
from .policy import SchedulerDecision, SelectionPolicy
from .policies import Algorithm, build_policy
from .simulator import SimulationConfig, SimulationState, StepRecord, run_to_completion, step
from .metrics import Metrics, calculate_metrics
from .evaluation import compare_algorithms
from .controller import Simulation
from .errors import ConfigurationConflict, InvalidOperation, SimulationError
from . import policies
from . import workload
from . import evaluation

__all__ = [
	"Algorithm",
	"ConfigurationConflict",
	"ExecutionSegment",
	"InvalidOperation",
	"Metrics",
	"Process",
	"ProcessStatus",
	"SchedulerDecision",
	"SelectionPolicy",
	"Simulation",
	"SimulationConfig",
	"SimulationError",
	"SimulationState",
	"StepRecord",
	"build_policy",
	"calculate_metrics",
	"compare_algorithms",
	"run_to_completion",
	"step",
	"policies",
	"workload",
	"evaluation",
]
