from .dsl import target, fan_out, aggregate, matrix, wf
from .dag import TargetGraph, GraphError, DuplicateTarget, UnknownTarget, CyclicDependency
from .runner import Runner, TargetFailure, run_targets
from .model import SimpleTarget, FanOutTarget, TestProject, TestSuite, PublishProject, PublishRuntime
from .environment import EnvironmentSetting, InvalidArgument
from .config import Settings
from .shell import CommandRunner, ExternalCommandFailure
from .workflow import DotnetWorkflow, load_workflow

__all__ = [
    "target", "fan_out", "aggregate", "matrix", "wf",
    "TargetGraph", "GraphError", "DuplicateTarget", "UnknownTarget", "CyclicDependency",
    "Runner", "TargetFailure", "run_targets",
    "SimpleTarget", "FanOutTarget", "TestProject", "TestSuite", "PublishProject", "PublishRuntime",
    "EnvironmentSetting", "InvalidArgument",
    "Settings",
    "CommandRunner", "ExternalCommandFailure",
    "DotnetWorkflow", "load_workflow",
]
