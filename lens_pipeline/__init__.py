from lens_pipeline.config import LensConfig, load_config
from lens_pipeline.errors import LensError
from lens_pipeline.lens_specs import LensSpec, build_lens_specs, get_lens_spec
from lens_pipeline.orchestrator import LensPipeline, LensTrace, PipelineStage

__all__ = [
    "LensConfig",
    "LensError",
    "LensPipeline",
    "LensSpec",
    "LensTrace",
    "PipelineStage",
    "build_lens_specs",
    "get_lens_spec",
    "load_config",
]
