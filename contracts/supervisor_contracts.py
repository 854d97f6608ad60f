"""Contract for the supervisord program descriptor."""

from pydantic import BaseModel, Field


class SupervisedProcessDescriptor(BaseModel):
    """How supervisord launches, restarts and logs the Consul agent."""

    model_config = {"frozen": True}

    program_name: str
    command: str = Field(..., description="Binary path plus config/data dir arguments")
    stdout_log_path: str
    stderr_log_path: str
    run_as_user: str
    run_as_user_home_dir: str
    num_procs: int = 1
    auto_start: bool = True
    auto_restart: bool = True
    stop_signal: str = "INT"
