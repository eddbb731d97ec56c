"""Command execution data models."""

from dataclasses import dataclass, field

from sshdeploy.utils.log_buffer import LogCapturingBuffer


@dataclass
class Result:
    """Result of a remote command execution.

    ``exit_status`` is only meaningful when ``error`` is None or the command
    exited non-zero. Transport errors during the run leave it at 0 and are
    told apart by ``error``.
    """

    stdout_buffer: LogCapturingBuffer = field(default_factory=LogCapturingBuffer)
    stderr_buffer: LogCapturingBuffer = field(default_factory=LogCapturingBuffer)
    runtime: float = 0.0
    error: BaseException | None = None
    exit_status: int = 0

    @property
    def stdout(self) -> str:
        """Captured standard output."""
        return str(self.stdout_buffer)

    @property
    def stderr(self) -> str:
        """Captured standard error."""
        return str(self.stderr_buffer)

    @property
    def success(self) -> bool:
        """True when the command exited 0 without a transport error."""
        return self.exit_status == 0 and self.error is None

    def summary(self) -> dict[str, str]:
        """Summarize the result without the captured text."""
        return {
            "stdout": f"{len(self.stdout_buffer)} bytes",
            "stderr": f"{len(self.stderr_buffer)} bytes",
            "runtime": f"{self.runtime:.6f}",
            "status": str(self.exit_status),
        }

    def __str__(self) -> str:
        return " ".join(f"{key}={value}" for key, value in self.summary().items())
