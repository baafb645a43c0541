"""Glue helpers exposed for CLI and integration harnesses."""

from .io import (
    load_config,
    load_waypoints,
    save_waypoints,
    validate_waypoints,
)
from .pipeline import (
    assemble_data,
    build_arg_parser,
    build_oracle,
    build_params,
    load_and_run,
    main,
    run_pipeline,
)

__all__ = [
    "assemble_data",
    "build_arg_parser",
    "build_oracle",
    "build_params",
    "load_and_run",
    "load_config",
    "load_waypoints",
    "main",
    "run_pipeline",
    "save_waypoints",
    "validate_waypoints",
]
