import logging
import time
from typing import Any, MutableMapping, Optional, Tuple

import uvicorn

FORMAT = "%(levelprefix)s %(asctime)s [%(threadName)s] [%(name)s] %(message)s"


def get_logger(name: str = __name__, level: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level or logging.INFO)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level or logging.INFO)
        formatter = uvicorn.logging.DefaultFormatter(
            FORMAT, datefmt="%Y-%m-%d %H:%M:%S"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    else:
        for handler in logger.handlers:
            handler.setLevel(level or logging.INFO)

    return logger


class OperationLogger(logging.LoggerAdapter):  # type: ignore[type-arg]
    """Logger bound to a single repository call.

    Every record is prefixed with the component and operation names and
    suffixed with the time elapsed since the call started.
    """

    def __init__(self, logger: logging.Logger, component: str, operation: str) -> None:
        super().__init__(
            logger,
            {
                "component": component,
                "operation": operation,
                "started": time.perf_counter(),
            },
        )

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.extra["started"]) * 1000  # type: ignore[index]

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = self.extra
        kwargs.setdefault("extra", {}).update(
            component=extra["component"],  # type: ignore[index]
            operation=extra["operation"],  # type: ignore[index]
            duration_ms=round(self.elapsed_ms, 3),
        )
        return (
            f"[{extra['component']}.{extra['operation']}] {msg} "  # type: ignore[index]
            f"(duration={self.elapsed_ms:.2f}ms)",
            kwargs,
        )


def operation_logger(
    logger: logging.Logger, component: str, operation: str
) -> OperationLogger:
    """Create a per-call logger carrying component, operation and duration."""
    return OperationLogger(logger, component, operation)
