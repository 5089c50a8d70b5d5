"""Pipeline module for assembly, splitting and orchestration."""

from .splitter import CutoffSplitter
from .assembler import FeatureAssembler, prepare_base
from .orchestrator import PipelineOrchestrator

__all__ = ['CutoffSplitter', 'FeatureAssembler', 'prepare_base', 'PipelineOrchestrator']
